"""Promotional pricing: offer models, the line calculator and display labels."""

from wholesale.domain.pricing.badges import (
    OfferBadge,
    campaign_offer_indicators,
    format_offers_with_emojis,
    get_offer_badge,
)
from wholesale.domain.pricing.calculator import (
    AppliedOffer,
    BogoDetails,
    PricingInputError,
    PricingResult,
    calculate_promotional_pricing,
    qualifies_for_free_shipping,
)
from wholesale.domain.pricing.labels import format_promotional_offers
from wholesale.domain.pricing.offers import (
    OfferParseError,
    PromotionalOffer,
    is_offer_eligible,
    normalize_offer_payload,
    parse_offer,
    parse_offers,
)

__all__ = [
    "AppliedOffer",
    "BogoDetails",
    "OfferBadge",
    "OfferParseError",
    "PricingInputError",
    "PricingResult",
    "PromotionalOffer",
    "calculate_promotional_pricing",
    "campaign_offer_indicators",
    "format_offers_with_emojis",
    "format_promotional_offers",
    "get_offer_badge",
    "is_offer_eligible",
    "normalize_offer_payload",
    "parse_offer",
    "parse_offers",
    "qualifies_for_free_shipping",
]
