"""
Pay For Draft Use Case

Drives one payment attempt through the PaymentSession state machine:

1. Validate the draft locally (no backend call on failure)
2. Ask the backend for a payment intent
3. Open the gateway with the intent's order id and amount
4. Relay the gateway proof to the backend for verification

The client never signs anything and never sends its own computed amount;
the intent's amount is the one charged.
"""

from typing import Any

from src.platform.exception.exceptions import CustomBaseError, DomainError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.checkout_errors import (
    BackendUnreachableError,
    PaymentFailedError,
    PaymentStatusUnknownError,
)
from src.service.checkout.domain.payment_session import PaymentSession
from src.service.checkout.domain.value_object import GatewayOutcome


def build_initiate_request(draft: BookingDraft) -> dict[str, Any]:
    request: dict[str, Any] = {
        'tripId': draft.trip_id,
        'fromStopId': draft.from_stop_id,
        'toStopId': draft.to_stop_id,
        'seatIds': draft.seat_ids,
        'passengers': [
            {
                'seatId': passenger.seat_id,
                'name': passenger.name.strip(),
                'age': passenger.age,
                'gender': passenger.gender,
                'email': passenger.email or draft.contact.email,
            }
            for passenger in draft.passengers
        ],
        'paymentMethod': str(draft.payment_method) if draft.payment_method else None,
        'boardingPointId': draft.boarding_point_id,
        'droppingPointId': draft.dropping_point_id,
    }
    if draft.coupon_code:
        request['couponCode'] = draft.coupon_code
    return request


class PayForDraftUseCase:
    def __init__(self, *, api_client: IBookingApiClient, gateway: IPaymentGateway) -> None:
        self.api_client = api_client
        self.gateway = gateway
        self._session = PaymentSession()

    @property
    def session(self) -> PaymentSession:
        return self._session

    @Logger.io
    async def execute(self, *, draft: BookingDraft) -> PaymentSession:
        """
        Run one attempt and return the resulting session.

        A cancelled gateway returns a CANCELLED session. Every other
        non-success ends in FAILED and raises.

        Raises:
            CheckoutValidationError / StateConsistencyError: draft is incomplete
            PaymentStatusUnknownError: initiate got no response
            BackendUnreachableError: verify got no response
            BackendRejectedError: the backend refused initiate or verify
            PaymentFailedError: gateway error or unsuccessful verification
        """
        self._session = self._session.begin_initiation()
        Logger.base.info(f'💳 [PAYMENT] Attempt {self._session.attempt} for trip {draft.trip_id}')

        try:
            draft.validate_for_payment()
        except CustomBaseError as e:
            self._fail(e.message)
            raise

        try:
            intent = await self.api_client.initiate_payment(request=build_initiate_request(draft))
        except BackendUnreachableError as e:
            # The backend may have created the payment; never report this as a decline
            self._fail(e.message)
            raise PaymentStatusUnknownError() from e
        except CustomBaseError as e:
            self._fail(e.message)
            raise
        self._session = self._session.intent_received(intent)

        try:
            result = await self.gateway.open_checkout(
                key_id=intent.gateway_key_id,
                order_id=intent.order_id,
                amount=intent.amount,
                currency=intent.currency,
                prefill=draft.contact,
            )
        except Exception as e:
            # Gateway SDKs raise their own exception types
            reason = 'Payment could not be completed'
            self._fail(reason)
            raise PaymentFailedError(reason) from e
        if result.outcome == GatewayOutcome.CANCELLED:
            self._session = self._session.gateway_cancelled()
            Logger.base.info(f'🚫 [PAYMENT] Gateway cancelled for payment {intent.payment_id}')
            return self._session
        if result.outcome == GatewayOutcome.ERROR or result.proof is None:
            reason = result.error_message or 'Payment could not be completed'
            self._fail(reason)
            raise PaymentFailedError(reason)

        try:
            self._session = self._session.gateway_authorized(result.proof)
        except DomainError as e:
            self._fail(e.message)
            raise PaymentFailedError(e.message) from e
        try:
            verification = await self.api_client.verify_payment(
                payment_id=intent.payment_id, proof=result.proof
            )
        except CustomBaseError as e:
            self._fail(e.message)
            raise

        if not verification.success:
            reason = verification.message or 'Payment verification failed'
            self._fail(reason)
            raise PaymentFailedError(reason)

        self._session = self._session.confirmed(booking_group_id=verification.booking_group_id)
        Logger.base.info(
            f'✅ [PAYMENT] Confirmed payment {intent.payment_id}, '
            f'booking group {verification.booking_group_id}'
        )
        return self._session

    def _fail(self, reason: str) -> None:
        self._session = self._session.failed(reason)
        Logger.base.warning(f'❌ [PAYMENT] Attempt {self._session.attempt} failed: {reason}')
