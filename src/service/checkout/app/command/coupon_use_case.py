from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.domain.checkout_errors import CheckoutValidationError
from src.service.checkout.domain.value_object import FareBreakdown


class CouponUseCase:
    """
    Apply or remove a coupon on a fare.

    Discount and final amount are always the backend's numbers. Applying a
    new code replaces the previous coupon rather than stacking on it.
    """

    def __init__(self, *, api_client: IBookingApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def apply(self, fare: FareBreakdown, *, code: str, trip_id: str) -> FareBreakdown:
        code = code.strip()
        if not code:
            raise CheckoutValidationError('Please enter a coupon code')

        base = fare.without_coupon()
        quote = await self.api_client.apply_coupon(
            code=code, trip_id=trip_id, total_amount=base.total
        )
        Logger.base.info(
            f'🎟️ [COUPON] {code} on trip {trip_id}: -{quote.discount_amount} => {quote.final_amount}'
        )
        return base.with_coupon(
            code=code,
            discount_amount=quote.discount_amount,
            final_amount=quote.final_amount,
        )

    @Logger.io
    def remove(self, fare: FareBreakdown) -> FareBreakdown:
        return fare.without_coupon()
