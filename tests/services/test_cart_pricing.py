"""Tests for cart pricing orchestration."""

from __future__ import annotations

import logging

import pytest

from wholesale.core.config import Settings
from wholesale.domain.pricing import OfferParseError, PricingInputError
from wholesale.services.cart_pricing import (
    CartLine,
    ProductPricing,
    price_product,
    summarize_cart,
)

CRISPS = {
    "id": 1,
    "name": "Crisps 24 x 50g",
    "price": "12.00",
    "palletPrice": "900.00",
    "promoPrice": "",
    "promoActive": None,
    "unit": "packs",
    "unitWeightKg": "1.2",
    "promotionalOffers": [
        {"type": "bogo", "buyQuantity": 5, "getQuantity": 1, "name": "Buy 5 get 1"},
        {"type": "free_shipping", "minimumOrderValue": 100},
    ],
}

WATER = {
    "id": 2,
    "name": "Water 12 x 1L",
    "price": "6.00",
    "promoPrice": "5.00",
    "promoActive": True,
    "unit": "l",
    "promotionalOffers": None,
}


def test_product_pricing_parses_persisted_record():
    product = ProductPricing.model_validate(CRISPS)

    assert product.price == 12.0
    assert product.promo_price is None
    assert product.promo_active is False
    assert product.unit_weight_kg == 1.2
    assert [o.type for o in product.offers()] == ["bogo", "free_shipping"]


def test_price_product_uses_sale_price_without_offers(settings, now):
    result = price_product(ProductPricing.model_validate(WATER), 4, now=now, settings=settings)

    assert result.effective_price == 5
    assert result.total_cost == 20
    assert result.applied_offers == ("Sale Price: £5.00",)


def test_price_product_uses_configured_currency(now):
    product = ProductPricing.model_validate(
        {"price": 10, "promotionalOffers": [{"type": "fixed_discount", "value": 1}]}
    )

    result = price_product(product, 1, now=now, settings=Settings(currency_symbol="€"))

    assert result.applied_offers == ("€1 OFF per unit",)


def test_price_product_strict_settings(now):
    product = ProductPricing.model_validate({"price": -3})

    with pytest.raises(PricingInputError):
        price_product(product, 1, now=now, settings=Settings(pricing_strict_inputs=True))


def test_price_product_strict_offer_parsing(now):
    product = ProductPricing.model_validate({"price": 3, "promotionalOffers": [{"type": "nope"}]})

    with pytest.raises(OfferParseError):
        price_product(product, 1, now=now, settings=Settings(offers_strict_parsing=True))

    lenient = price_product(product, 1, now=now, settings=Settings())
    assert lenient.effective_price == 3


def test_summarize_cart(settings, now, caplog):
    lines = [
        CartLine.model_validate({"product": CRISPS, "quantity": 10}),
        CartLine.model_validate({"product": WATER, "quantity": 4}),
        CartLine.model_validate({"product": CRISPS, "quantity": 1, "sellingType": "pallets"}),
    ]

    with caplog.at_level(logging.INFO, logger="wholesale.services.cart_pricing"):
        summary = summarize_cart(lines, now=now, settings=settings)

    # 10 x 12.00 + 4 x 5.00 + 1 pallet x 900.00
    assert summary.subtotal == pytest.approx(1040)
    assert summary.total_items == 15
    # 2 free packs of crisps
    assert summary.total_promotional_items == 17
    assert summary.applied_promotions == (
        "Buy 5, Get 1 FREE",
        "Free Shipping (Order £100+)",
        "Sale Price: £5.00",
    )
    assert len(summary.bogo_details) == 1
    assert summary.bogo_details[0].product_name == "Crisps 24 x 50g"
    assert summary.bogo_details[0].details.free_items_added == 2
    # 12 packs x 1.2 kg + 4 litres x 1 kg
    assert summary.total_weight_kg == pytest.approx(18.4)
    assert summary.free_shipping is True
    assert "Cart priced" in caplog.text


def test_summarize_cart_below_free_shipping_threshold(settings, now):
    lines = [CartLine.model_validate({"product": CRISPS, "quantity": 2})]

    summary = summarize_cart(lines, now=now, settings=settings)

    assert summary.subtotal == pytest.approx(24)
    assert summary.free_shipping is False
    assert summary.bogo_details == ()


def test_summarize_empty_cart(settings, now):
    summary = summarize_cart([], now=now, settings=settings)

    assert summary.subtotal == 0
    assert summary.applied_promotions == ()
    assert summary.free_shipping is False


def test_cart_line_rejects_negative_quantity():
    with pytest.raises(ValueError):
        CartLine.model_validate({"product": WATER, "quantity": -1})
