from abc import ABC, abstractmethod
from typing import Any, Optional

from src.service.checkout.app.dto.coupon_dto import CouponQuote
from src.service.checkout.domain.value_object import (
    GatewayProof,
    PaymentIntent,
    VerifyPaymentResult,
)


class IBookingApiClient(ABC):
    """
    Booking backend contract.

    Raises (all methods):
        BackendUnreachableError: no response was received
        BackendRejectedError: the server answered with an error
        AuthenticationError: an authenticated call was made without a stored token
    """

    @abstractmethod
    async def search_trips(self, *, payload: dict[str, Any]) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def get_bus_info(
        self, *, trip_id: str, from_stop_id: str, to_stop_id: str
    ) -> dict[str, Any]:
        pass

    @abstractmethod
    async def apply_coupon(self, *, code: str, trip_id: str, total_amount: float) -> CouponQuote:
        pass

    @abstractmethod
    async def list_trip_coupons(self, *, trip_id: str) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    async def initiate_payment(self, *, request: dict[str, Any]) -> PaymentIntent:
        pass

    @abstractmethod
    async def verify_payment(self, *, payment_id: str, proof: GatewayProof) -> VerifyPaymentResult:
        pass

    @abstractmethod
    async def list_bookings(
        self,
        *,
        page: int,
        limit: int,
        status: Optional[str] = None,
        upcoming: Optional[bool] = None,
    ) -> dict[str, Any]:
        pass

    @abstractmethod
    async def cancel_booking(self, *, booking_group_id: str) -> dict[str, Any]:
        pass

    @abstractmethod
    async def download_ticket(self, *, booking_group_id: str) -> bytes:
        pass
