"""
Unit tests for PayForDraftUseCase

Test Coverage:
1. Local validation failure -> FAILED, backend never called
2. Initiate request shape (no amount, passenger email fallback)
3. Gateway opened with the backend intent
4. Verify only after a successful initiate, never after cancellation
5. Network failure on initiate -> status unknown
6. Retry requests a fresh intent
"""

from unittest.mock import AsyncMock

import attrs
import pytest

from src.service.checkout.app.command.pay_for_draft_use_case import (
    PayForDraftUseCase,
    build_initiate_request,
)
from src.service.checkout.domain.checkout_errors import (
    BackendRejectedError,
    BackendUnreachableError,
    CheckoutValidationError,
    PaymentFailedError,
    PaymentStatusUnknownError,
)
from src.service.checkout.domain.enum import PaymentState
from src.service.checkout.domain.value_object import (
    GatewayProof,
    GatewayResult,
    PaymentIntent,
    VerifyPaymentResult,
)


pytestmark = pytest.mark.unit


def _intent(n: int = 1) -> PaymentIntent:
    return PaymentIntent(
        payment_id=f'pay-{n}',
        order_id=f'order-{n}',
        amount=1769.0,
        currency='NPR',
        gateway_key_id='key_test',
    )


def _proof(n: int = 1) -> GatewayProof:
    return GatewayProof(
        gateway_order_id=f'order-{n}', gateway_payment_id=f'gp-{n}', gateway_signature='sig'
    )


class TestBuildInitiateRequest:
    def test_request_shape(self, make_ready_draft):
        draft = make_ready_draft().with_coupon_code('SAVE10')

        request = build_initiate_request(draft)

        assert request['tripId'] == 'trip-1'
        assert request['fromStopId'] == 'stop-ktm'
        assert request['toStopId'] == 'stop-pkr'
        assert request['seatIds'] == ['s1', 's2']
        assert request['paymentMethod'] == 'UPI'
        assert request['boardingPointId'] == 'bp-1'
        assert request['droppingPointId'] == 'dp-1'
        assert request['couponCode'] == 'SAVE10'
        assert 'amount' not in request and 'totalAmount' not in request

    def test_passenger_email_defaults_to_contact(self, make_ready_draft):
        draft = make_ready_draft()
        first = attrs.evolve(draft.passengers[0], email='own@example.com')
        draft = draft.with_passengers((first,) + draft.passengers[1:])

        passengers = build_initiate_request(draft)['passengers']

        assert passengers[0]['email'] == 'own@example.com'
        assert passengers[1]['email'] == 'buyer@example.com'
        assert passengers[1]['seatId'] == 's2'

    def test_no_coupon_key_without_coupon(self, make_ready_draft):
        assert 'couponCode' not in build_initiate_request(make_ready_draft())


class TestPayForDraftUseCase:
    def setup_method(self):
        self.api_client = AsyncMock()
        self.gateway = AsyncMock()
        self.use_case = PayForDraftUseCase(api_client=self.api_client, gateway=self.gateway)

    @pytest.mark.asyncio
    async def test_confirmed_payment(self, make_ready_draft):
        # Given
        self.api_client.initiate_payment.return_value = _intent()
        self.gateway.open_checkout.return_value = GatewayResult.authorized(_proof())
        self.api_client.verify_payment.return_value = VerifyPaymentResult(
            success=True, booking_group_id='group-1'
        )
        draft = make_ready_draft()

        # When
        session = await self.use_case.execute(draft=draft)

        # Then
        assert session.state == PaymentState.CONFIRMED
        assert session.booking_group_id == 'group-1'
        self.gateway.open_checkout.assert_awaited_once_with(
            key_id='key_test',
            order_id='order-1',
            amount=1769.0,
            currency='NPR',
            prefill=draft.contact,
        )
        self.api_client.verify_payment.assert_awaited_once_with(payment_id='pay-1', proof=_proof())

    @pytest.mark.asyncio
    async def test_invalid_draft_fails_without_backend_call(self, make_ready_draft):
        draft = attrs.evolve(make_ready_draft(), payment_method=None)

        with pytest.raises(CheckoutValidationError):
            await self.use_case.execute(draft=draft)

        assert self.use_case.session.state == PaymentState.FAILED
        self.api_client.initiate_payment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_gateway_cancel_never_verifies(self, make_ready_draft):
        self.api_client.initiate_payment.return_value = _intent()
        self.gateway.open_checkout.return_value = GatewayResult.cancelled()

        session = await self.use_case.execute(draft=make_ready_draft())

        assert session.state == PaymentState.CANCELLED
        self.api_client.verify_payment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_gateway_error_fails_without_verify(self, make_ready_draft):
        self.api_client.initiate_payment.return_value = _intent()
        self.gateway.open_checkout.return_value = GatewayResult.error('Card declined')

        with pytest.raises(PaymentFailedError, match='Card declined'):
            await self.use_case.execute(draft=make_ready_draft())

        assert self.use_case.session.state == PaymentState.FAILED
        self.api_client.verify_payment.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_network_failure_on_initiate_is_status_unknown(self, make_ready_draft):
        self.api_client.initiate_payment.side_effect = BackendUnreachableError('Network error')

        with pytest.raises(PaymentStatusUnknownError):
            await self.use_case.execute(draft=make_ready_draft())

        assert self.use_case.session.state == PaymentState.FAILED
        self.gateway.open_checkout.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_initiate_surfaces_backend_message(self, make_ready_draft):
        self.api_client.initiate_payment.side_effect = BackendRejectedError(
            'Seats no longer available', 409
        )

        with pytest.raises(BackendRejectedError, match='Seats no longer available'):
            await self.use_case.execute(draft=make_ready_draft())

        assert self.use_case.session.failure_reason == 'Seats no longer available'

    @pytest.mark.asyncio
    async def test_unsuccessful_verification_fails(self, make_ready_draft):
        self.api_client.initiate_payment.return_value = _intent()
        self.gateway.open_checkout.return_value = GatewayResult.authorized(_proof())
        self.api_client.verify_payment.return_value = VerifyPaymentResult(
            success=False, message='Signature mismatch'
        )

        with pytest.raises(PaymentFailedError, match='Signature mismatch'):
            await self.use_case.execute(draft=make_ready_draft())

        assert self.use_case.session.state == PaymentState.FAILED

    @pytest.mark.asyncio
    async def test_verify_network_failure_is_not_success(self, make_ready_draft):
        self.api_client.initiate_payment.return_value = _intent()
        self.gateway.open_checkout.return_value = GatewayResult.authorized(_proof())
        self.api_client.verify_payment.side_effect = BackendUnreachableError('Request timeout')

        with pytest.raises(BackendUnreachableError):
            await self.use_case.execute(draft=make_ready_draft())

        assert self.use_case.session.state == PaymentState.FAILED

    @pytest.mark.asyncio
    async def test_retry_after_cancel_uses_fresh_intent(self, make_ready_draft):
        # Given: first attempt cancelled at the gateway
        self.api_client.initiate_payment.side_effect = [_intent(1), _intent(2)]
        self.gateway.open_checkout.side_effect = [
            GatewayResult.cancelled(),
            GatewayResult.authorized(_proof(2)),
        ]
        self.api_client.verify_payment.return_value = VerifyPaymentResult(
            success=True, booking_group_id='group-2'
        )
        draft = make_ready_draft()
        await self.use_case.execute(draft=draft)

        # When: the user retries
        session = await self.use_case.execute(draft=draft)

        # Then: a new intent was requested and verified
        assert self.api_client.initiate_payment.await_count == 2
        assert session.attempt == 2
        assert session.intent.payment_id == 'pay-2'
        self.api_client.verify_payment.assert_awaited_once_with(payment_id='pay-2', proof=_proof(2))

    @pytest.mark.asyncio
    async def test_gateway_exception_fails_and_allows_retry(self, make_ready_draft):
        # Given: the gateway SDK blows up on the first attempt
        self.api_client.initiate_payment.side_effect = [_intent(1), _intent(2)]
        self.gateway.open_checkout.side_effect = [
            RuntimeError('sdk crashed'),
            GatewayResult.cancelled(),
        ]
        draft = make_ready_draft()

        with pytest.raises(PaymentFailedError):
            await self.use_case.execute(draft=draft)

        assert self.use_case.session.state == PaymentState.FAILED
        self.api_client.verify_payment.assert_not_awaited()

        # When: the user retries
        session = await self.use_case.execute(draft=draft)

        # Then
        assert session.attempt == 2
        assert session.state == PaymentState.CANCELLED

    @pytest.mark.asyncio
    async def test_proof_for_another_order_fails_and_allows_retry(self, make_ready_draft):
        # Given: the gateway answers with a proof for a different order
        self.api_client.initiate_payment.side_effect = [_intent(1), _intent(2)]
        self.gateway.open_checkout.side_effect = [
            GatewayResult.authorized(_proof(9)),
            GatewayResult.authorized(_proof(2)),
        ]
        self.api_client.verify_payment.return_value = VerifyPaymentResult(
            success=True, booking_group_id='group-2'
        )
        draft = make_ready_draft()

        with pytest.raises(PaymentFailedError, match='does not belong'):
            await self.use_case.execute(draft=draft)

        assert self.use_case.session.state == PaymentState.FAILED
        self.api_client.verify_payment.assert_not_awaited()

        # When
        session = await self.use_case.execute(draft=draft)

        # Then
        assert session.state == PaymentState.CONFIRMED
        self.api_client.verify_payment.assert_awaited_once_with(payment_id='pay-2', proof=_proof(2))
