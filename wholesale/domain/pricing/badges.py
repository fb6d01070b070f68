"""Emoji badges for offer types, used on campaign cards and catalog tiles."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any
from dataclasses import dataclass

from wholesale.domain.pricing.offers import OfferBase, parse_offers


@dataclass(frozen=True)
class OfferBadge:
    emoji: str
    label: str
    description: str


DEFAULT_BADGE = OfferBadge("✨", "Special Offer", "Special promotional offer")

OFFER_BADGES: dict[str, OfferBadge] = {
    "percentage_discount": OfferBadge("💯", "Percentage Off", "Percentage discount off original price"),
    "fixed_discount": OfferBadge("💰", "Fixed Discount", "Fixed amount off each unit"),
    "fixed_amount_discount": OfferBadge("💰", "Fixed Discount", "Fixed amount off each unit"),
    "fixed_price": OfferBadge("🔥", "Special Price", "Fixed promotional price"),
    "bogo": OfferBadge("🎁", "BOGO", "Buy one, get one free"),
    "buy_x_get_y_free": OfferBadge("🎯", "Multi-Buy", "Buy X items, get Y free"),
    "multi_buy": OfferBadge("📊", "Multi Buy", "Volume discount for multiple purchases"),
    "bulk_tier": OfferBadge("📦", "Bulk Price", "Lower unit price above a quantity"),
    "bulk_discount": OfferBadge("📦", "Bulk Deal", "Tiered bulk pricing"),
    "free_shipping": OfferBadge("🚚", "Free Delivery", "Free shipping included"),
    "bundle_deal": OfferBadge("🎀", "Bundle", "Bundle discount deal"),
}


def get_offer_badge(offer_type: str) -> OfferBadge:
    return OFFER_BADGES.get(offer_type, DEFAULT_BADGE)


def format_offers_with_emojis(
    offers: Iterable[OfferBase | Mapping[str, Any]], *, include_description: bool = False
) -> str:
    """Comma-separated badges for active offers, e.g. ``"🎁 BOGO, 🚚 Free Delivery"``."""
    parts = []
    for offer in parse_offers(offers):
        if offer.is_active is False:
            continue
        badge = get_offer_badge(getattr(offer, "type", ""))
        if include_description:
            parts.append(f"{badge.emoji} {badge.label}: {offer.name or badge.description}")
        else:
            parts.append(f"{badge.emoji} {badge.label}")
    return ", ".join(parts)


def campaign_offer_indicators(offers: Iterable[OfferBase | Mapping[str, Any]]) -> str:
    """Distinct emojis of active offers, in first-seen order."""
    seen: dict[str, None] = {}
    for offer in parse_offers(offers):
        if offer.is_active is False:
            continue
        seen.setdefault(get_offer_badge(getattr(offer, "type", "")).emoji, None)
    return "".join(seen)
