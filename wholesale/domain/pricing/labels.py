"""Human-readable offer labels.

Numbers render the way the storefront shows them: integral values without a
decimal part, fixed two-decimal amounts where a unit price is quoted.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from wholesale.domain.pricing.offers import (
    BulkDiscountOffer,
    BulkTierOffer,
    BundleDealOffer,
    BuyXGetYOffer,
    FixedDiscountOffer,
    FixedPriceOffer,
    FreeShippingOffer,
    MultiBuyOffer,
    OfferBase,
    PercentageDiscountOffer,
    parse_offers,
)


def fmt_number(value: float | int | None) -> str:
    """Render a number without a trailing ``.0``."""
    if value is None:
        return "None"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def fmt_money(value: float, currency_symbol: str = "£") -> str:
    """Render a unit price with two decimals, e.g. ``£1.50``."""
    return f"{currency_symbol}{value:.2f}"


def fmt_amount(value: float | int | None, currency_symbol: str = "£") -> str:
    """Render an amount as entered, e.g. ``£2`` or ``£2.5``."""
    return f"{currency_symbol}{fmt_number(value)}"


def format_offer(offer: OfferBase, currency_symbol: str = "£") -> str:
    """Display label for a single offer, independent of quantity and dates.

    Offers missing the value their label needs fall back to the offer name.
    """
    c = currency_symbol

    if isinstance(offer, PercentageDiscountOffer):
        if offer.discount_percentage is not None:
            return f"{fmt_number(offer.discount_percentage)}% OFF"

    elif isinstance(offer, FixedDiscountOffer):
        if offer.discount_amount is not None:
            return f"{fmt_amount(offer.discount_amount, c)} OFF"

    elif isinstance(offer, FixedPriceOffer):
        if offer.fixed_price is not None:
            return f"Fixed Price: {fmt_amount(offer.fixed_price, c)}"

    elif isinstance(offer, BuyXGetYOffer):
        if offer.buy_quantity is not None and offer.get_quantity is not None:
            return f"Buy {offer.buy_quantity}, Get {offer.get_quantity} FREE"

    elif isinstance(offer, MultiBuyOffer):
        if offer.quantity is not None and offer.discount_value is not None:
            if offer.discount_type == "percentage":
                reward = f"{fmt_number(offer.discount_value)}% OFF"
            else:
                reward = f"{fmt_amount(offer.discount_value, c)} OFF"
            return f"Buy {offer.quantity}+ get {reward}"

    elif isinstance(offer, BulkTierOffer):
        if offer.quantity is not None and offer.price_per_unit is not None:
            return f"{offer.quantity}+ units = {fmt_amount(offer.price_per_unit, c)} each"

    elif isinstance(offer, BulkDiscountOffer):
        if offer.bulk_tiers:
            first = offer.bulk_tiers[0]
            if first.price_per_unit:
                return f"Bulk Pricing from {fmt_amount(first.price_per_unit, c)} each"
            if first.discount_percentage:
                return f"Bulk Discount up to {fmt_number(first.discount_percentage)}% OFF"
            if first.discount_amount:
                return f"Bulk Discount up to {fmt_amount(first.discount_amount, c)} OFF each"
        return "Bulk Discount"

    elif isinstance(offer, FreeShippingOffer):
        if offer.minimum_order_value is not None:
            return f"Free Shipping on orders {fmt_amount(offer.minimum_order_value, c)}+"

    elif isinstance(offer, BundleDealOffer):
        if offer.bundle_price:
            return f"Bundle Deal: {fmt_amount(offer.bundle_price, c)} each"
        if offer.discount_type == "percentage" and offer.discount_value:
            return f"Bundle Deal: {fmt_number(offer.discount_value)}% OFF"
        if offer.discount_type == "fixed" and offer.discount_value:
            return f"Bundle Deal: {fmt_amount(offer.discount_value, c)} OFF"
        return "Bundle Deal"

    return offer.name or "Special Offer"


def format_promotional_offers(
    offers: Iterable[OfferBase | Mapping[str, Any]], *, currency_symbol: str = "£"
) -> list[str]:
    """One display label per offer, e.g. for catalog badges."""
    return [format_offer(offer, currency_symbol) for offer in parse_offers(offers)]
