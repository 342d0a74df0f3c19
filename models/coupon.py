from models.base import CamelDTO


class ValidateCouponRequestDTO(CamelDTO):
    code: str
    order_total: float


class CouponResultDTO(CamelDTO):
    """
    Server verdict on a coupon code.

    discount_amount is computed server-side against the order total that was
    sent with the request; the client never recomputes it.
    """
    valid: bool = False
    discount_amount: float = 0.0
    message: str | None = None
    final_amount: float | None = None
    code: str | None = None
