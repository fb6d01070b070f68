"""Units of measure for wholesale products."""

from __future__ import annotations

from dataclasses import dataclass, field

WEIGHT = "Weight"
VOLUME = "Volume"
COUNT = "Count/Pieces"
PACKAGING = "Packaging"


@dataclass(frozen=True)
class UnitDefinition:
    value: str
    label: str
    category: str
    base_weight_kg: float | None = None  # for automatic weight calculation
    common_formats: tuple[str, ...] = field(default_factory=tuple)


UNITS: tuple[UnitDefinition, ...] = (
    # Weight
    UnitDefinition("kg", "Kilograms (kg)", WEIGHT, 1, ("1kg", "5kg", "10kg", "25kg")),
    UnitDefinition("g", "Grams (g)", WEIGHT, 0.001, ("100g", "250g", "500g", "12 x 24g")),
    UnitDefinition("tonnes", "Tonnes (t)", WEIGHT, 1000, ("1t", "2t", "5t")),
    # Volume (weights approximate water-based liquids)
    UnitDefinition("l", "Litres (L)", VOLUME, 1, ("1L", "2L", "5L", "6 x 2L", "12 x 1L")),
    UnitDefinition("ml", "Millilitres (mL)", VOLUME, 0.001, ("250ml", "500ml", "12 x 330ml")),
    UnitDefinition("cl", "Centilitres (cL)", VOLUME, 0.01, ("33cl", "50cl", "12 x 33cl")),
    # Count
    UnitDefinition("pieces", "Pieces", COUNT, None, ("1 piece", "12 pieces", "24 pieces")),
    UnitDefinition("units", "Units", COUNT, None, ("1 unit", "10 units", "50 units")),
    UnitDefinition("pairs", "Pairs", COUNT, None, ("1 pair", "12 pairs", "24 pairs")),
    # Packaging
    UnitDefinition("boxes", "Boxes", PACKAGING, None, ("1 box", "6 boxes", "12 boxes")),
    UnitDefinition("cases", "Cases", PACKAGING, None, ("1 case", "6 cases", "12 cases")),
    UnitDefinition("cartons", "Cartons", PACKAGING, None, ("1 carton", "12 cartons")),
    UnitDefinition("packs", "Packs", PACKAGING, None, ("1 pack", "6 packs", "12 packs")),
    UnitDefinition("bundles", "Bundles", PACKAGING, None, ("1 bundle", "6 bundles")),
    UnitDefinition("rolls", "Rolls", PACKAGING, None, ("1 roll", "6 rolls", "12 rolls")),
)

_BY_VALUE = {u.value: u for u in UNITS}

# Count units that take a singular form for a quantity of one
_SINGULAR = {"pieces": "piece", "units": "unit", "pairs": "pair"}


def get_unit(value: str) -> UnitDefinition | None:
    return _BY_VALUE.get(value)


def units_by_category(category: str) -> list[UnitDefinition]:
    return [u for u in UNITS if u.category == category]


def format_unit_display(quantity: float, unit: str, unit_format: str | None = None) -> str:
    """Render a quantity with its unit, e.g. ``"1 piece"`` or ``"3 12 x 330ml"``.

    Examples:
        >>> format_unit_display(1, "pairs")
        '1 pair'
        >>> format_unit_display(5, "kg")
        '5 kg'

    """
    if unit_format:
        return f"{quantity} {unit_format}"

    if unit in _SINGULAR and quantity == 1:
        return f"{quantity} {_SINGULAR[unit]}"
    return f"{quantity} {unit}"


def calculate_weight_from_unit(
    quantity: float, unit: str | None, unit_weight: float | None = None
) -> float:
    """Shipping weight in kg.

    An explicit per-unit weight wins; otherwise the catalogue weight for the
    unit is used, and units without one weigh nothing.
    """
    if unit_weight:
        return quantity * unit_weight

    unit_def = get_unit(unit) if unit else None
    if unit_def is None or not unit_def.base_weight_kg:
        return 0.0

    return quantity * unit_def.base_weight_kg
