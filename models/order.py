from pydantic import Field

from models.base import CamelDTO


class CreateOrderRequestDTO(CamelDTO):
    """
    Body of ``POST /orders``.

    The server builds the order from the caller's Remote Store cart, so only
    the checkout choices are sent.
    """
    shipping_address_id: int
    payment_method_id: int
    coupon_code: str | None = None
    notes: str | None = None


class OrderDTO(CamelDTO):
    id: int
    order_number: str | None = None
    status: str | None = None
    subtotal: float | None = None
    discount_amount: float | None = None
    shipping_fee: float | None = None
    final_amount: float = 0.0
    coupon_code: str | None = None
    created_at: str | None = None
    items: list[dict] = Field(default_factory=list)
