from typing import Any, Optional

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.domain.checkout_errors import CheckoutValidationError


class ListBookingsUseCase:
    def __init__(self, *, api_client: IBookingApiClient, page_size: int) -> None:
        self.api_client = api_client
        self.page_size = page_size

    @Logger.io
    async def execute(
        self,
        *,
        page: int = 1,
        limit: Optional[int] = None,
        status: Optional[str] = None,
        upcoming: Optional[bool] = None,
    ) -> dict[str, Any]:
        if page < 1:
            raise CheckoutValidationError('Page must be 1 or greater')
        limit = limit or self.page_size
        if limit < 1:
            raise CheckoutValidationError('Limit must be 1 or greater')

        return await self.api_client.list_bookings(
            page=page, limit=limit, status=status or None, upcoming=upcoming
        )
