from typing import Any

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.domain.checkout_errors import CheckoutValidationError


class ListTripCouponsUseCase:
    def __init__(self, *, api_client: IBookingApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def execute(self, *, trip_id: str) -> list[dict[str, Any]]:
        if not trip_id:
            raise CheckoutValidationError('Trip id is required')
        return await self.api_client.list_trip_coupons(trip_id=trip_id)
