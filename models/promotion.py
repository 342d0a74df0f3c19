# Promotion preview is computed by the Remote Store and consumed read-only by
# the pricing engine. The preview service evolves independently of this client,
# so parsing is lenient: unknown promotion types and missing or malformed
# amounts are treated as absent instead of failing the whole checkout.
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from enums.promotion_type import PromotionType
from exceptions.pricing import PricingComputationException
from models.base import CamelDTO

logger = logging.getLogger(__name__)


def lenient_amount(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def lenient_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def lenient_id(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def lenient_promotion_type(value: Any) -> PromotionType | None:
    if value is None or isinstance(value, PromotionType):
        return value
    try:
        return PromotionType(str(value).upper())
    except ValueError:
        logger.warning(f"[PromotionPreview] Ignoring unknown promotion type: {value!r}")
        return None


class ItemPromotionDTO(CamelDTO):
    """Effect of a PRODUCT or CATEGORY scope promotion on one cart line."""
    product_id: int | None = None
    product_name: str | None = None
    price: float = 0.0
    quantity: int = 0
    subtotal: float = 0.0
    promotion_id: int | None = None
    promotion_name: str | None = None
    promotion_type: PromotionType | None = None
    free_quantity: int = 0
    discount_amount: float = 0.0

    @field_validator("price", "subtotal", "discount_amount", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return lenient_amount(v)

    @field_validator("quantity", "free_quantity", mode="before")
    @classmethod
    def parse_count(cls, v):
        return lenient_count(v)

    @field_validator("product_id", "promotion_id", mode="before")
    @classmethod
    def parse_id(cls, v):
        return lenient_id(v)

    @field_validator("promotion_type", mode="before")
    @classmethod
    def parse_promotion_type(cls, v):
        return lenient_promotion_type(v)


class FreeItemDTO(CamelDTO):
    """A zero-charge item granted by BOGO or BUY_X_GET_Y. Displayed, never subtracted."""
    product_id: int | None = None
    product_name: str | None = None
    product_image: str | None = None
    original_price: float = 0.0
    free_quantity: int = 0
    promotion_id: int | None = None
    promotion_name: str | None = None
    promotion_type: PromotionType | None = None

    @field_validator("original_price", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return lenient_amount(v)

    @field_validator("free_quantity", mode="before")
    @classmethod
    def parse_count(cls, v):
        return lenient_count(v)

    @field_validator("product_id", "promotion_id", mode="before")
    @classmethod
    def parse_id(cls, v):
        return lenient_id(v)

    @field_validator("promotion_type", mode="before")
    @classmethod
    def parse_promotion_type(cls, v):
        return lenient_promotion_type(v)


class AppliedOrderPromotionDTO(CamelDTO):
    """The single ORDER scope promotion chosen by the server, if any."""
    id: int | None = None
    name: str | None = None
    promotion_type: PromotionType | None = Field(default=None, alias="type")

    @field_validator("id", mode="before")
    @classmethod
    def parse_id(cls, v):
        return lenient_id(v)

    @field_validator("promotion_type", mode="before")
    @classmethod
    def parse_promotion_type(cls, v):
        return lenient_promotion_type(v)


class PromotionPreviewDTO(CamelDTO):
    item_promotions: list[ItemPromotionDTO] = Field(default_factory=list)
    free_items: list[FreeItemDTO] = Field(default_factory=list)
    order_discount_amount: float = 0.0
    applied_order_promotion: AppliedOrderPromotionDTO | None = None
    shipping_fee: float | None = None
    free_shipping_threshold: float | None = None

    # Informational totals computed by the server; pricing recomputes its own
    original_total: float | None = None
    promotion_discount: float | None = None
    final_total: float | None = None

    @field_validator("item_promotions", "free_items", mode="before")
    @classmethod
    def drop_malformed_entries(cls, v):
        if not isinstance(v, list):
            return []
        return [entry for entry in v if isinstance(entry, (Mapping, BaseModel))]

    @field_validator("order_discount_amount", mode="before")
    @classmethod
    def parse_order_discount(cls, v):
        return lenient_amount(v)

    @field_validator(
        "shipping_fee", "free_shipping_threshold", "original_total", "promotion_discount", "final_total",
        mode="before",
    )
    @classmethod
    def parse_optional_amount(cls, v):
        return None if v is None else lenient_amount(v)

    @field_validator("applied_order_promotion", mode="before")
    @classmethod
    def parse_applied_order_promotion(cls, v):
        return v if isinstance(v, (Mapping, BaseModel)) else None

    @staticmethod
    def from_payload(payload: Any) -> "PromotionPreviewDTO":
        """
        Parse a preview response body.

        Raises:
            PricingComputationException: If the payload is not an object at all
        """
        if not isinstance(payload, Mapping):
            raise PricingComputationException(f"expected an object, got {type(payload).__name__}")
        try:
            return PromotionPreviewDTO.model_validate(dict(payload))
        except ValidationError as e:
            raise PricingComputationException(str(e)) from e
