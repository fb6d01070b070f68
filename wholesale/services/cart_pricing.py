"""Cart pricing orchestration.

Turns persisted product configuration (camelCase JSON, prices stored as
strings) into calculator inputs, prices each cart line and rolls the lines up
into an order summary.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from wholesale.core.config import Settings, get_settings
from wholesale.domain.inventory.units import calculate_weight_from_unit
from wholesale.domain.pricing.calculator import (
    BogoDetails,
    PricingResult,
    calculate_promotional_pricing,
    qualifies_for_free_shipping,
)
from wholesale.domain.pricing.offers import PromotionalOffer, parse_offers

logger = logging.getLogger(__name__)


class ProductPricing(BaseModel):
    """Pricing-relevant slice of a product record."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: int | str | None = None
    name: str = ""
    price: float = 0.0
    pallet_price: float | None = None
    promo_price: float | None = None
    promo_active: bool = False
    promotional_offers: list[Any] = Field(default_factory=list)
    unit: str | None = None
    unit_weight_kg: float | None = None

    @field_validator("price", mode="before")
    @classmethod
    def _blank_price_is_zero(cls, v: Any) -> Any:
        return 0.0 if v in (None, "") else v

    @field_validator("pallet_price", "promo_price", "unit_weight_kg", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Any:
        return None if v == "" else v

    @field_validator("promo_active", mode="before")
    @classmethod
    def _none_is_inactive(cls, v: Any) -> Any:
        return False if v is None else v

    @field_validator("promotional_offers", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def offers(self, *, strict: bool = False) -> list[PromotionalOffer]:
        """Normalized offers in configured order."""
        return parse_offers(self.promotional_offers, strict=strict)


class CartLine(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    product: ProductPricing
    quantity: int = Field(..., ge=0)
    selling_type: Literal["units", "pallets"] = "units"


@dataclass(frozen=True)
class ProductBogo:
    product_name: str
    details: BogoDetails


@dataclass(frozen=True)
class CartSummary:
    subtotal: float
    total_items: int
    total_promotional_items: int
    applied_promotions: tuple[str, ...]
    bogo_details: tuple[ProductBogo, ...]
    total_weight_kg: float
    free_shipping: bool


def price_product(
    product: ProductPricing,
    quantity: int,
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> PricingResult:
    """Price ``quantity`` units of a product under its configured offers."""
    settings = settings or get_settings()
    offers = product.offers(strict=settings.offers_strict_parsing)
    return _price(product, quantity, offers, now, settings)


def _price(
    product: ProductPricing,
    quantity: int,
    offers: list[PromotionalOffer],
    now: datetime | None,
    settings: Settings,
) -> PricingResult:
    return calculate_promotional_pricing(
        product.price,
        quantity,
        offers,
        promo_price=product.promo_price,
        promo_active=product.promo_active,
        now=now,
        currency_symbol=settings.currency_symbol,
        strict=settings.pricing_strict_inputs,
    )


def summarize_cart(
    lines: Iterable[CartLine],
    *,
    now: datetime | None = None,
    settings: Settings | None = None,
) -> CartSummary:
    """Price every cart line and roll them up.

    Pallet lines are charged at the pallet price with no promotions. Free
    units from BOGO-style offers count towards promotional items and weight,
    not towards the subtotal.

    Args:
        lines: Cart lines
        now: Evaluation time for offer date windows (default: current UTC time)
        settings: Settings override (default: cached settings)

    Returns:
        CartSummary with totals, applied promotions and free-shipping status

    """
    settings = settings or get_settings()
    if now is None:
        now = datetime.now(timezone.utc)

    subtotal = 0.0
    total_items = 0
    total_promotional_items = 0
    total_weight = 0.0
    applied: list[str] = []
    bogo: list[ProductBogo] = []
    all_offers: list[PromotionalOffer] = []

    for line in lines:
        product = line.product
        qty = line.quantity

        if line.selling_type == "pallets":
            subtotal += (product.pallet_price or 0.0) * qty
            total_items += qty
            total_promotional_items += qty
            continue

        offers = product.offers(strict=settings.offers_strict_parsing)
        pricing = _price(product, qty, offers, now, settings)
        subtotal += pricing.total_cost
        total_items += qty
        total_promotional_items += pricing.total_quantity
        total_weight += calculate_weight_from_unit(
            pricing.total_quantity, product.unit, product.unit_weight_kg
        )
        applied.extend(pricing.applied_offers)
        if pricing.bogo_details is not None:
            bogo.append(ProductBogo(product_name=product.name, details=pricing.bogo_details))
        all_offers.extend(offers)

    free_shipping = qualifies_for_free_shipping(all_offers, subtotal, now=now)

    summary = CartSummary(
        subtotal=subtotal,
        total_items=total_items,
        total_promotional_items=total_promotional_items,
        applied_promotions=tuple(applied),
        bogo_details=tuple(bogo),
        total_weight_kg=total_weight,
        free_shipping=free_shipping,
    )

    logger.info(
        "Cart priced",
        extra={
            "subtotal": round(subtotal, 2),
            "total_items": total_items,
            "total_promotional_items": total_promotional_items,
            "promotions": len(applied),
            "free_shipping": free_shipping,
        },
    )

    return summary
