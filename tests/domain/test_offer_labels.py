"""Tests for display labels and emoji badges."""

from __future__ import annotations

import pytest

from wholesale.domain.pricing import (
    campaign_offer_indicators,
    format_offers_with_emojis,
    format_promotional_offers,
    get_offer_badge,
    parse_offers,
)
from wholesale.domain.pricing.labels import fmt_number


@pytest.mark.parametrize(
    ("raw", "label"),
    [
        ({"type": "percentage_discount", "value": 20}, "20% OFF"),
        ({"type": "percentage_discount", "discountPercentage": 12.5}, "12.5% OFF"),
        ({"type": "fixed_discount", "value": 2}, "£2 OFF"),
        ({"type": "fixed_amount_discount", "discountAmount": 0.5}, "£0.5 OFF"),
        ({"type": "fixed_price", "fixedPrice": 4.99}, "Fixed Price: £4.99"),
        ({"type": "bogo", "buyQuantity": 1, "getQuantity": 1}, "Buy 1, Get 1 FREE"),
        ({"type": "buy_x_get_y_free", "buyQuantity": 3, "getQuantity": 1}, "Buy 3, Get 1 FREE"),
        (
            {"type": "multi_buy", "quantity": 6, "discountType": "percentage", "discountValue": 15},
            "Buy 6+ get 15% OFF",
        ),
        (
            {"type": "multi_buy", "quantity": 6, "discountType": "fixed", "discountValue": 1},
            "Buy 6+ get £1 OFF",
        ),
        ({"type": "bulk_tier", "quantity": 24, "pricePerUnit": 0.9}, "24+ units = £0.9 each"),
        (
            {"type": "bulk_discount", "bulkTiers": [{"minQuantity": 10, "pricePerUnit": 8}]},
            "Bulk Pricing from £8 each",
        ),
        (
            {"type": "bulk_discount", "bulkTiers": [{"minQuantity": 10, "discountPercentage": 5}]},
            "Bulk Discount up to 5% OFF",
        ),
        (
            {"type": "bulk_discount", "bulkTiers": [{"minQuantity": 10, "discountAmount": 2}]},
            "Bulk Discount up to £2 OFF each",
        ),
        ({"type": "bulk_discount"}, "Bulk Discount"),
        ({"type": "free_shipping", "minimumOrderValue": 100}, "Free Shipping on orders £100+"),
        ({"type": "bundle_deal", "bundlePrice": 20}, "Bundle Deal: £20 each"),
        (
            {"type": "bundle_deal", "discountType": "percentage", "discountValue": 10},
            "Bundle Deal: 10% OFF",
        ),
        ({"type": "bundle_deal", "discountType": "fixed", "discountValue": 3}, "Bundle Deal: £3 OFF"),
        ({"type": "bundle_deal"}, "Bundle Deal"),
    ],
)
def test_format_promotional_offers(raw, label):
    assert format_promotional_offers(parse_offers([raw], strict=True)) == [label]


def test_format_ignores_eligibility():
    offers = parse_offers(
        [
            {"type": "percentage_discount", "value": 10, "isActive": False},
            {"type": "fixed_price", "fixedPrice": 3, "startDate": "2000-01-01", "endDate": "2000-01-02"},
        ]
    )

    assert format_promotional_offers(offers) == ["10% OFF", "Fixed Price: £3"]


def test_format_currency_symbol():
    offers = parse_offers([{"type": "free_shipping", "minimumOrderValue": 75}])

    assert format_promotional_offers(offers, currency_symbol="$") == ["Free Shipping on orders $75+"]


@pytest.mark.parametrize(
    "raw",
    [
        {"type": "percentage_discount"},
        {"type": "fixed_discount"},
        {"type": "fixed_price"},
        {"type": "bogo", "buyQuantity": 2},
        {"type": "multi_buy", "quantity": 6, "discountType": "percentage"},
        {"type": "bulk_tier", "quantity": 24},
        {"type": "free_shipping"},
    ],
)
def test_format_missing_value_falls_back_to_generic_label(raw):
    assert format_promotional_offers([raw]) == ["Special Offer"]
    assert format_promotional_offers([{**raw, "name": "Spring promo"}]) == ["Spring promo"]


def test_format_accepts_raw_offer_dicts():
    raw = [
        {"type": "percentage_discount", "value": 20, "isActive": True},
        {"type": "bulk_tier", "quantity": 12, "pricePerUnit": 1.5},
    ]

    assert format_promotional_offers(raw) == ["20% OFF", "12+ units = £1.5 each"]


def test_fmt_number():
    assert fmt_number(20.0) == "20"
    assert fmt_number(2) == "2"
    assert fmt_number(0.55) == "0.55"


# --- Badges ---


def test_unknown_type_gets_default_badge():
    assert get_offer_badge("mystery_box").label == "Special Offer"


def test_format_offers_with_emojis_skips_inactive():
    offers = parse_offers(
        [
            {"type": "bogo", "buyQuantity": 1, "getQuantity": 1},
            {"type": "percentage_discount", "value": 10, "isActive": False},
            {"type": "free_shipping", "minimumOrderValue": 50, "name": "Summer delivery"},
        ]
    )

    assert format_offers_with_emojis(offers) == "🎁 BOGO, 🚚 Free Delivery"
    assert format_offers_with_emojis(offers, include_description=True) == (
        "🎁 BOGO: Buy one, get one free, 🚚 Free Delivery: Summer delivery"
    )


def test_badges_accept_raw_offer_dicts():
    raw = [
        {"type": "free_shipping", "minimumOrderValue": 50},
        {"type": "bogo", "buyQuantity": 1, "getQuantity": 1, "isActive": False},
    ]

    assert format_offers_with_emojis(raw) == "🚚 Free Delivery"
    assert campaign_offer_indicators(raw) == "🚚"


def test_format_offers_with_emojis_empty():
    assert format_offers_with_emojis([]) == ""


def test_campaign_offer_indicators_unique_in_order():
    offers = parse_offers(
        [
            {"type": "bulk_discount"},
            {"type": "fixed_discount", "value": 1},
            {"type": "bulk_tier", "quantity": 10, "pricePerUnit": 2},
            {"type": "fixed_amount_discount", "value": 2, "isActive": False},
        ]
    )

    assert campaign_offer_indicators(offers) == "📦💰"
