"""Base-unit inventory arithmetic.

Stock is held as a count of base units; packs and pallets are derived with the
product's conversion factors:

- quantity_in_pack: base units per pack
- units_per_pallet: packs per pallet (not base units)

NO DATA ACCESS - pure functions only. Persisting the new stock levels is the
caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

SellingType = Literal["units", "packs", "pallets"]


class InventoryConfigError(ValueError):
    """Conversion factors are missing or not positive."""


class UnsupportedSellingTypeError(ValueError):
    """Order uses a selling type the calculator does not know."""


class InsufficientStockError(ValueError):
    """Order asks for more than is in stock."""

    def __init__(self, requested: int, available: int, selling_type: str) -> None:
        self.requested = requested
        self.available = available
        self.selling_type = selling_type
        super().__init__(
            f"Insufficient stock. Requested: {requested} {selling_type}, "
            f"Available: {available} {selling_type}"
        )


@dataclass(frozen=True)
class ProductInventory:
    base_unit_stock: int
    quantity_in_pack: int
    units_per_pallet: int
    pallet_stock: int = 0


@dataclass(frozen=True)
class DerivedInventory:
    total_base_units: int
    available_packs: int
    available_pallets: int
    base_units_per_pallet: int


@dataclass(frozen=True)
class OrderDecrement:
    base_units_to_subtract: int
    order_type: SellingType
    quantity: int
    conversion_details: str


@dataclass(frozen=True)
class FulfilmentCheck:
    can_fulfill: bool
    available: int
    reason: str | None = None


@dataclass(frozen=True)
class StockUpdate:
    new_unit_stock: int
    new_pallet_stock: int
    decrement: OrderDecrement


def _check_factors(inventory: ProductInventory) -> None:
    if inventory.quantity_in_pack <= 0 or inventory.units_per_pallet <= 0:
        raise InventoryConfigError("quantity_in_pack and units_per_pallet must be positive integers")


def _check_selling_type(selling_type: str) -> None:
    if selling_type not in get_args(SellingType):
        raise UnsupportedSellingTypeError(f"Unsupported selling type: {selling_type}")


def derive_inventory(inventory: ProductInventory) -> DerivedInventory:
    """Calculate packs and pallets available from base-unit stock.

    Examples:
        >>> derive_inventory(ProductInventory(250, 12, 10)).available_packs
        20
        >>> derive_inventory(ProductInventory(250, 12, 10)).available_pallets
        2

    """
    _check_factors(inventory)

    available_packs = inventory.base_unit_stock // inventory.quantity_in_pack
    return DerivedInventory(
        total_base_units=inventory.base_unit_stock,
        available_packs=available_packs,
        available_pallets=available_packs // inventory.units_per_pallet,
        base_units_per_pallet=inventory.quantity_in_pack * inventory.units_per_pallet,
    )


def calculate_order_decrement(
    quantity: int, selling_type: str, inventory: ProductInventory
) -> OrderDecrement:
    """Convert an order quantity into base units to subtract.

    Args:
        quantity: Ordered quantity in the selling unit
        selling_type: "units", "packs" or "pallets"
        inventory: Product conversion factors

    Returns:
        OrderDecrement with the base-unit amount and the arithmetic spelled out

    """
    _check_selling_type(selling_type)

    pack = inventory.quantity_in_pack
    per_pallet = inventory.units_per_pallet

    if selling_type == "units":
        base_units = quantity
        details = f"{quantity} base units"
    elif selling_type == "packs":
        base_units = quantity * pack
        details = f"{quantity} packs × {pack} units/pack = {base_units} base units"
    else:
        base_units = quantity * per_pallet * pack
        details = (
            f"{quantity} pallets × {per_pallet} packs/pallet × {pack} units/pack "
            f"= {base_units} base units"
        )

    return OrderDecrement(
        base_units_to_subtract=base_units,
        order_type=selling_type,  # type: ignore[arg-type]
        quantity=quantity,
        conversion_details=details,
    )


def can_fulfill_order(
    quantity: int, selling_type: str, inventory: ProductInventory
) -> FulfilmentCheck:
    """Check an order against the stock pool it draws on.

    Pallet orders are checked against ``pallet_stock``; unit and pack orders
    against base-unit stock. ``available`` is reported in the order's own
    selling unit when short.
    """
    decrement = calculate_order_decrement(quantity, selling_type, inventory)

    if selling_type == "pallets":
        if quantity <= inventory.pallet_stock:
            return FulfilmentCheck(can_fulfill=True, available=quantity)
        available = inventory.pallet_stock
    else:
        if decrement.base_units_to_subtract <= inventory.base_unit_stock:
            return FulfilmentCheck(can_fulfill=True, available=quantity)
        derived = derive_inventory(inventory)
        available = derived.total_base_units
        if selling_type == "packs":
            available = derived.available_packs

    return FulfilmentCheck(
        can_fulfill=False,
        available=available,
        reason=(
            f"Insufficient stock. Requested: {quantity} {selling_type}, "
            f"Available: {available} {selling_type}"
        ),
    )


def process_order(quantity: int, selling_type: str, inventory: ProductInventory) -> StockUpdate:
    """Compute stock levels after an order.

    Unit and pack orders draw on base-unit stock; pallet orders draw on the
    separately tracked pallet stock.

    Raises:
        InsufficientStockError: Not enough stock in the relevant pool

    """
    decrement = calculate_order_decrement(quantity, selling_type, inventory)

    unit_stock = inventory.base_unit_stock
    pallet_stock = inventory.pallet_stock

    if selling_type == "pallets":
        if quantity > pallet_stock:
            raise InsufficientStockError(quantity, pallet_stock, selling_type)
        pallet_stock -= quantity
    else:
        if decrement.base_units_to_subtract > unit_stock:
            available = unit_stock
            if selling_type == "packs":
                _check_factors(inventory)
                available = unit_stock // inventory.quantity_in_pack
            raise InsufficientStockError(quantity, available, selling_type)
        unit_stock -= decrement.base_units_to_subtract

    return StockUpdate(new_unit_stock=unit_stock, new_pallet_stock=pallet_stock, decrement=decrement)


def format_inventory_display(inventory: ProductInventory) -> dict[str, str]:
    """Human-readable stock summary for product pages."""
    derived = derive_inventory(inventory)

    return {
        "base_units": f"{derived.total_base_units:,} units",
        "packs": f"{derived.available_packs:,} packs ({inventory.quantity_in_pack} units each)",
        "pallets": (
            f"{derived.available_pallets:,} pallets ({derived.base_units_per_pallet} units each)"
        ),
        "details": (
            f"{derived.total_base_units:,} base units = {derived.available_packs} packs "
            f"= {derived.available_pallets} pallets"
        ),
    }
