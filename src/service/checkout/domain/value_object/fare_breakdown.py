from typing import Optional

import attrs


@attrs.define(frozen=True)
class FareBreakdown:
    """
    Fare for one draft, in the primary currency.

    `discount_amount` and `final_amount` come from the backend when a coupon
    is applied and are never derived locally.
    """

    base_fare: int
    tax: int
    service_fee: int
    total: int
    discount_amount: float = 0
    final_amount: float = attrs.field()
    coupon_code: Optional[str] = None

    @final_amount.default
    def _final_amount_default(self) -> float:
        return self.total

    @property
    def has_coupon(self) -> bool:
        return self.coupon_code is not None

    def with_coupon(
        self, *, code: str, discount_amount: float, final_amount: float
    ) -> 'FareBreakdown':
        return attrs.evolve(
            self,
            coupon_code=code,
            discount_amount=discount_amount,
            final_amount=final_amount,
        )

    def without_coupon(self) -> 'FareBreakdown':
        return attrs.evolve(self, coupon_code=None, discount_amount=0, final_amount=self.total)
