from typing import Any

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.domain.checkout_errors import CheckoutValidationError


class CancelBookingUseCase:
    def __init__(self, *, api_client: IBookingApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def execute(self, *, booking_group_id: str) -> dict[str, Any]:
        if not booking_group_id:
            raise CheckoutValidationError('Booking group id is required')
        result = await self.api_client.cancel_booking(booking_group_id=booking_group_id)
        Logger.base.info(f'🗑️ [BOOKING] Cancelled booking group {booking_group_id}')
        return result
