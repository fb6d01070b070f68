"""Promotional pricing calculator.

Pure evaluation of a product's offers for one order line. No data access and
no clock reads beyond the ``now`` default; pass ``now`` for deterministic
results.

Rules compound in list order: each offer sees the unit price as already
reduced by the offers before it.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from wholesale.domain.pricing.labels import fmt_amount, fmt_money, fmt_number
from wholesale.domain.pricing.offers import (
    BulkDiscountOffer,
    BulkTier,
    BulkTierOffer,
    BundleDealOffer,
    BuyXGetYOffer,
    FixedDiscountOffer,
    FixedPriceOffer,
    FreeShippingOffer,
    MultiBuyOffer,
    OfferBase,
    PercentageDiscountOffer,
    is_offer_eligible,
    parse_offers,
)

logger = logging.getLogger(__name__)


class PricingInputError(ValueError):
    """Raised in strict mode for inputs the calculator would otherwise tolerate."""


@dataclass(frozen=True)
class AppliedOffer:
    """Structured record of one rule that fired."""

    offer_type: str
    label: str
    discount: float


@dataclass(frozen=True)
class BogoDetails:
    """First BOGO-style offer that granted free units."""

    buy_quantity: int
    get_quantity: int
    free_items_added: int
    offer_name: str


@dataclass(frozen=True)
class PricingResult:
    """Outcome of pricing one product line."""

    original_price: float
    effective_price: float
    total_discount: float
    discount_percentage: float
    applied_offers: tuple[str, ...]
    free_items: int
    total_quantity: int
    total_cost: float
    offer_breakdown: tuple[AppliedOffer, ...] = ()
    bogo_details: BogoDetails | None = None

    def to_payload(self) -> dict[str, Any]:
        """Render the camelCase payload consumed by the storefront."""
        bogo = None
        if self.bogo_details is not None:
            bogo = {
                "buyQuantity": self.bogo_details.buy_quantity,
                "getQuantity": self.bogo_details.get_quantity,
                "freeItemsAdded": self.bogo_details.free_items_added,
                "offerName": self.bogo_details.offer_name,
            }
        return {
            "originalPrice": self.original_price,
            "effectivePrice": self.effective_price,
            "totalDiscount": self.total_discount,
            "discountPercentage": self.discount_percentage,
            "appliedOffers": list(self.applied_offers),
            "freeItems": self.free_items,
            "totalQuantity": self.total_quantity,
            "totalCost": self.total_cost,
            "bogoffDetails": bogo,
        }


@dataclass
class _Running:
    """Mutable accumulator for a single calculation."""

    price: float
    quantity: int
    currency: str
    total_discount: float = 0.0
    free_items: int = 0
    applied: list[AppliedOffer] = field(default_factory=list)

    def set_price(self, new_price: float, offer_type: str, label: str) -> None:
        new_price = max(0.0, new_price)
        saved = (self.price - new_price) * self.quantity
        self.price = new_price
        self.total_discount += saved
        self.applied.append(AppliedOffer(offer_type, label, saved))

    def take_percentage(self, pct: float, offer_type: str, label: str) -> None:
        self.set_price(self.price - self.price * (pct / 100), offer_type, label)

    def take_amount(self, amount: float, offer_type: str, label: str) -> None:
        self.set_price(self.price - amount, offer_type, label)

    def grant_free(self, units: int, offer_type: str, label: str) -> None:
        saved = units * self.price
        self.free_items += units
        self.total_discount += saved
        self.applied.append(AppliedOffer(offer_type, label, saved))

    def note(self, offer_type: str, label: str) -> None:
        self.applied.append(AppliedOffer(offer_type, label, 0.0))


def _positive(value: float | int | None) -> bool:
    return value is not None and value > 0


def _free_units(quantity: int, buy: int | None, get: int | None) -> int:
    if not _positive(buy) or not _positive(get):
        return 0
    return max(0, math.floor(quantity / buy)) * get


def _select_bulk_tier(tiers: Sequence[BulkTier], quantity: int) -> BulkTier | None:
    """Highest threshold not above quantity; equal thresholds keep list order."""
    candidates = [t for t in tiers if quantity >= t.min_quantity]
    if not candidates:
        return None
    return max(candidates, key=lambda t: t.min_quantity)


def _apply_offer(offer: OfferBase, run: _Running) -> None:
    c = run.currency
    qty = run.quantity

    if isinstance(offer, PercentageDiscountOffer):
        pct = offer.discount_percentage
        if _positive(pct):
            run.take_percentage(pct, offer.type, f"{fmt_number(pct)}% OFF")

    elif isinstance(offer, FixedDiscountOffer):
        amount = offer.discount_amount
        if _positive(amount):
            run.take_amount(amount, offer.type, f"{fmt_amount(amount, c)} OFF per unit")

    elif isinstance(offer, FixedPriceOffer):
        fixed = offer.fixed_price
        if _positive(fixed) and fixed < run.price:
            run.set_price(fixed, offer.type, f"Fixed Price: {fmt_amount(fixed, c)}")

    elif isinstance(offer, BuyXGetYOffer):
        units = _free_units(qty, offer.buy_quantity, offer.get_quantity)
        if units > 0:
            label = f"Buy {offer.buy_quantity}, Get {offer.get_quantity} FREE"
            run.grant_free(units, offer.type, label)

    elif isinstance(offer, MultiBuyOffer):
        threshold = offer.quantity
        value = offer.discount_value
        if _positive(threshold) and qty >= threshold and _positive(value):
            if offer.discount_type == "percentage":
                label = f"{fmt_number(value)}% OFF (Buy {threshold}+)"
                run.take_percentage(value, offer.type, label)
            elif offer.discount_type == "fixed":
                label = f"{fmt_amount(value, c)} OFF each (Buy {threshold}+)"
                run.take_amount(value, offer.type, label)

    elif isinstance(offer, BulkTierOffer):
        threshold = offer.quantity
        ppu = offer.price_per_unit
        if _positive(threshold) and _positive(ppu) and qty >= threshold and ppu < run.price:
            label = f"Bulk Price: {fmt_money(ppu, c)} each ({threshold}+ units)"
            run.set_price(ppu, offer.type, label)

    elif isinstance(offer, BulkDiscountOffer):
        tier = _select_bulk_tier(offer.bulk_tiers, qty)
        if tier is None:
            return
        m = tier.min_quantity
        if _positive(tier.price_per_unit) and tier.price_per_unit < run.price:
            label = f"Bulk Tier: {fmt_money(tier.price_per_unit, c)} each ({m}+ units)"
            run.set_price(tier.price_per_unit, offer.type, label)
        elif _positive(tier.discount_percentage):
            pct = tier.discount_percentage
            label = f"Bulk Discount: {fmt_number(pct)}% OFF ({m}+ units)"
            run.take_percentage(pct, offer.type, label)
        elif _positive(tier.discount_amount):
            amount = tier.discount_amount
            label = f"Bulk Discount: {fmt_amount(amount, c)} OFF each ({m}+ units)"
            run.take_amount(amount, offer.type, label)

    elif isinstance(offer, FreeShippingOffer):
        minimum = offer.minimum_order_value
        if _positive(minimum) and run.price * qty >= minimum:
            run.note(offer.type, f"Free Shipping (Order {fmt_amount(minimum, c)}+)")

    elif isinstance(offer, BundleDealOffer):
        bundle = offer.bundle_price
        value = offer.discount_value
        if _positive(bundle) and bundle < run.price:
            run.set_price(bundle, offer.type, f"Bundle Deal: {fmt_money(bundle, c)} each")
        elif offer.discount_type == "percentage" and _positive(value):
            run.take_percentage(value, offer.type, f"Bundle Deal: {fmt_number(value)}% OFF")
        elif offer.discount_type == "fixed" and _positive(value):
            run.take_amount(value, offer.type, f"Bundle Deal: {fmt_amount(value, c)} OFF each")


def _bogo_details(offers: Sequence[OfferBase], quantity: int) -> BogoDetails | None:
    for offer in offers:
        if not isinstance(offer, BuyXGetYOffer):
            continue
        units = _free_units(quantity, offer.buy_quantity, offer.get_quantity)
        if units > 0:
            return BogoDetails(
                buy_quantity=offer.buy_quantity,
                get_quantity=offer.get_quantity,
                free_items_added=units,
                offer_name=offer.name
                or f"Buy {offer.buy_quantity}, Get {offer.get_quantity} FREE",
            )
    return None


def _validate_strict(base_price: float, quantity: int, promo_price: float | None) -> None:
    if base_price < 0:
        raise PricingInputError(f"base_price must be >= 0, got {base_price}")
    if promo_price is not None and promo_price < 0:
        raise PricingInputError(f"promo_price must be >= 0, got {promo_price}")
    if isinstance(quantity, bool) or not float(quantity).is_integer() or quantity < 0:
        raise PricingInputError(f"quantity must be a non-negative integer, got {quantity}")


def calculate_promotional_pricing(
    base_price: float,
    quantity: int,
    offers: Iterable[OfferBase | Mapping[str, Any]] = (),
    promo_price: float | None = None,
    promo_active: bool | None = None,
    *,
    now: datetime | None = None,
    currency_symbol: str = "£",
    strict: bool = False,
) -> PricingResult:
    """Price one product line under its promotional offers.

    A simple sale price (``promo_price`` with ``promo_active``) only applies
    when none of the structured offers is eligible; an eligible offer
    suppresses it entirely.

    Args:
        base_price: Catalog unit price
        quantity: Units ordered
        offers: Offers or raw offer payloads, evaluated in order
        promo_price: Simple sale price
        promo_active: Whether the simple sale price is switched on
        now: Evaluation time for date windows (default: current UTC time)
        currency_symbol: Prefix for money amounts in labels
        strict: Raise PricingInputError for negative prices or bad quantities

    Returns:
        PricingResult for the line

    """
    if strict:
        _validate_strict(base_price, quantity, promo_price)

    if now is None:
        now = datetime.now(timezone.utc)

    parsed = parse_offers(offers)
    eligible = [offer for offer in parsed if is_offer_eligible(offer, now)]
    if len(eligible) != len(parsed):
        logger.debug("Skipped %d ineligible offers", len(parsed) - len(eligible))

    run = _Running(price=base_price, quantity=quantity, currency=currency_symbol)

    if not eligible and promo_active and promo_price is not None:
        label = f"Sale Price: {fmt_money(promo_price, currency_symbol)}"
        run.set_price(promo_price, "sale_price", label)

    for offer in eligible:
        _apply_offer(offer, run)

    effective_price = max(0.0, run.price)
    denominator = base_price * quantity

    return PricingResult(
        original_price=base_price,
        effective_price=effective_price,
        total_discount=run.total_discount,
        discount_percentage=(run.total_discount / denominator) * 100 if denominator else 0.0,
        applied_offers=tuple(a.label for a in run.applied),
        free_items=run.free_items,
        total_quantity=quantity + run.free_items,
        total_cost=effective_price * quantity,
        offer_breakdown=tuple(run.applied),
        bogo_details=_bogo_details(eligible, quantity),
    )


def qualifies_for_free_shipping(
    offers: Iterable[OfferBase | Mapping[str, Any]],
    order_total: float,
    *,
    now: datetime | None = None,
) -> bool:
    """Check whether an eligible free-shipping offer covers ``order_total``.

    Uses the same active-flag and date-window rules as the calculator.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    return any(
        isinstance(offer, FreeShippingOffer)
        and _positive(offer.minimum_order_value)
        and order_total >= offer.minimum_order_value
        and is_offer_eligible(offer, now)
        for offer in parse_offers(offers)
    )
