"""Promotional offer models and the payload normalization boundary.

Offers are persisted as camelCase JSON on the product record. Two schema
generations exist: the older one stores the percentage or amount under a
generic ``value`` key. ``normalize_offer_payload`` migrates those payloads so
the models only carry one canonical field per variant.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timedelta, timezone
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

OFFER_TYPES = (
    "percentage_discount",
    "fixed_discount",
    "fixed_amount_discount",
    "fixed_price",
    "bogo",
    "buy_x_get_y_free",
    "multi_buy",
    "bulk_tier",
    "bulk_discount",
    "free_shipping",
    "bundle_deal",
)

DiscountType = Literal["percentage", "fixed"]


class OfferParseError(ValueError):
    """Offer payload could not be turned into a known offer variant."""


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class _OfferModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


class BulkTier(_OfferModel):
    """One threshold of a tiered bulk discount."""

    min_quantity: int
    discount_percentage: float | None = None
    discount_amount: float | None = None
    price_per_unit: float | None = None


class OfferBase(_OfferModel):
    """Fields shared by every offer variant."""

    id: str | None = None
    name: str | None = None
    description: str | None = None
    terms_and_conditions: str | None = None
    is_active: bool = True
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("is_active", mode="before")
    @classmethod
    def _none_means_active(cls, v: Any) -> Any:
        return True if v is None else v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _parse_iso(cls, v: Any) -> Any:
        if v is None or v == "":
            return None
        if isinstance(v, datetime):
            return _as_utc(v)
        if isinstance(v, date):
            return datetime(v.year, v.month, v.day, tzinfo=timezone.utc)
        if isinstance(v, str):
            return _as_utc(datetime.fromisoformat(v.strip()))
        return v


class PercentageDiscountOffer(OfferBase):
    type: Literal["percentage_discount"]
    discount_percentage: float | None = None


class FixedDiscountOffer(OfferBase):
    type: Literal["fixed_discount", "fixed_amount_discount"]
    discount_amount: float | None = None


class FixedPriceOffer(OfferBase):
    type: Literal["fixed_price"]
    fixed_price: float | None = None


class BuyXGetYOffer(OfferBase):
    type: Literal["bogo", "buy_x_get_y_free"]
    buy_quantity: int | None = None
    get_quantity: int | None = None


class MultiBuyOffer(OfferBase):
    type: Literal["multi_buy"]
    quantity: int | None = None
    discount_type: DiscountType | None = None
    discount_value: float | None = None


class BulkTierOffer(OfferBase):
    type: Literal["bulk_tier"]
    quantity: int | None = None
    price_per_unit: float | None = None


class BulkDiscountOffer(OfferBase):
    type: Literal["bulk_discount"]
    bulk_tiers: list[BulkTier] = Field(default_factory=list)

    @field_validator("bulk_tiers", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class FreeShippingOffer(OfferBase):
    type: Literal["free_shipping"]
    minimum_order_value: float | None = None


class BundleDealOffer(OfferBase):
    type: Literal["bundle_deal"]
    bundle_price: float | None = None
    discount_type: DiscountType | None = None
    discount_value: float | None = None
    bundle_products: list[int] = Field(default_factory=list)

    @field_validator("bundle_products", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


PromotionalOffer = Annotated[
    Union[
        PercentageDiscountOffer,
        FixedDiscountOffer,
        FixedPriceOffer,
        BuyXGetYOffer,
        MultiBuyOffer,
        BulkTierOffer,
        BulkDiscountOffer,
        FreeShippingOffer,
        BundleDealOffer,
    ],
    Field(discriminator="type"),
]

_OFFER_ADAPTER: TypeAdapter[PromotionalOffer] = TypeAdapter(PromotionalOffer)

# Legacy ``value`` key -> canonical field, per offer type
_LEGACY_VALUE_FIELDS = {
    "percentage_discount": "discountPercentage",
    "fixed_discount": "discountAmount",
    "fixed_amount_discount": "discountAmount",
}


def normalize_offer_payload(raw: Mapping[str, Any]) -> dict[str, Any]:
    """Migrate a persisted offer payload to the canonical field names.

    A truthy ``value`` wins over the canonical field, matching how the older
    storefront read these payloads. ``value`` is dropped from the result.
    """
    payload = dict(raw)
    legacy = payload.pop("value", None)
    target = _LEGACY_VALUE_FIELDS.get(payload.get("type"))
    if target and legacy:
        payload[target] = legacy
    return payload


def parse_offer(raw: Mapping[str, Any] | BaseModel) -> PromotionalOffer:
    """Validate one offer payload into its variant model.

    Raises:
        OfferParseError: unknown ``type`` or invalid field values

    """
    if isinstance(raw, OfferBase):
        return raw
    if isinstance(raw, BaseModel):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, Mapping):
        raise OfferParseError(f"Offer payload must be a mapping, got {type(raw).__name__}")

    offer_type = raw.get("type")
    if offer_type not in OFFER_TYPES:
        raise OfferParseError(f"Unknown offer type: {offer_type!r}")

    try:
        return _OFFER_ADAPTER.validate_python(normalize_offer_payload(raw))
    except ValidationError as e:
        raise OfferParseError(f"Invalid {offer_type} offer: {e}") from e


def parse_offers(raw_offers: Iterable[Any] | None, *, strict: bool = False) -> list[PromotionalOffer]:
    """Parse a product's offer list, preserving order.

    Args:
        raw_offers: Persisted payloads and/or already-parsed offers
        strict: Raise on the first bad payload instead of skipping it

    Returns:
        Parsed offers in input order

    """
    if raw_offers is None:
        return []

    offers: list[PromotionalOffer] = []
    for idx, raw in enumerate(raw_offers):
        try:
            offers.append(parse_offer(raw))
        except OfferParseError as e:
            if strict:
                raise
            logger.warning("Skipping offer #%d: %s", idx, e, extra={"offer_index": idx})
    return offers


def is_offer_eligible(offer: OfferBase, now: datetime) -> bool:
    """Check the active flag and the optional date window.

    The window only applies when both dates are set. The end date is padded by
    one day so an offer stays live for the whole of its final day.
    """
    if offer.is_active is False:
        return False

    if offer.start_date is not None and offer.end_date is not None:
        now = _as_utc(now)
        if now < offer.start_date or now >= offer.end_date + timedelta(days=1):
            return False

    return True
