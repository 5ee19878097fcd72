import attrs


@attrs.define(frozen=True)
class CouponQuote:
    """Backend answer to a coupon application; the client never recomputes it"""

    discount_amount: float
    final_amount: float
