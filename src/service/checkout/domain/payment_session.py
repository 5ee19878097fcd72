"""
Payment Session

State machine over one payment attempt:

    NONE -> INITIATING -> AWAITING_GATEWAY -> VERIFYING -> CONFIRMED
                 |               |                |
                 +---------------+----------------+--> FAILED
                                 +--> CANCELLED

FAILED and CANCELLED may restart at INITIATING, always with a fresh intent.
"""

from datetime import datetime, timezone
from typing import Optional

import attrs

from src.platform.exception.exceptions import DomainError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.enum import PaymentState
from src.service.checkout.domain.value_object import GatewayProof, PaymentIntent


_RESTARTABLE_STATES = (PaymentState.NONE, PaymentState.FAILED, PaymentState.CANCELLED)
_IN_FLIGHT_STATES = (
    PaymentState.INITIATING,
    PaymentState.AWAITING_GATEWAY,
    PaymentState.VERIFYING,
)


@attrs.define(frozen=True)
class PaymentSession:
    state: PaymentState = PaymentState.NONE
    intent: Optional[PaymentIntent] = None
    proof: Optional[GatewayProof] = None
    booking_group_id: Optional[str] = None
    failure_reason: Optional[str] = None
    attempt: int = 0
    updated_at: Optional[datetime] = None

    @property
    def is_in_flight(self) -> bool:
        return self.state in _IN_FLIGHT_STATES

    @property
    def can_retry(self) -> bool:
        return self.state in (PaymentState.FAILED, PaymentState.CANCELLED)

    def _require(self, *allowed: PaymentState) -> None:
        if self.state not in allowed:
            raise DomainError(
                f'Payment cannot move from {self.state} here '
                f'(expected {", ".join(str(s) for s in allowed)})',
                409,
            )

    @Logger.io
    def begin_initiation(self) -> 'PaymentSession':
        self._require(*_RESTARTABLE_STATES)
        # Drop everything from a previous attempt; a new intent will be requested
        return PaymentSession(
            state=PaymentState.INITIATING,
            attempt=self.attempt + 1,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def intent_received(self, intent: PaymentIntent) -> 'PaymentSession':
        self._require(PaymentState.INITIATING)
        return attrs.evolve(
            self,
            state=PaymentState.AWAITING_GATEWAY,
            intent=intent,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def gateway_authorized(self, proof: GatewayProof) -> 'PaymentSession':
        self._require(PaymentState.AWAITING_GATEWAY)
        assert self.intent is not None
        if proof.gateway_order_id != self.intent.order_id:
            raise DomainError('Gateway proof does not belong to this payment', 409)
        return attrs.evolve(
            self, state=PaymentState.VERIFYING, proof=proof, updated_at=datetime.now(timezone.utc)
        )

    @Logger.io
    def gateway_cancelled(self) -> 'PaymentSession':
        self._require(PaymentState.AWAITING_GATEWAY)
        return attrs.evolve(
            self,
            state=PaymentState.CANCELLED,
            failure_reason='Payment was cancelled',
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def confirmed(self, *, booking_group_id: Optional[str]) -> 'PaymentSession':
        self._require(PaymentState.VERIFYING)
        return attrs.evolve(
            self,
            state=PaymentState.CONFIRMED,
            booking_group_id=booking_group_id,
            updated_at=datetime.now(timezone.utc),
        )

    @Logger.io
    def failed(self, reason: str) -> 'PaymentSession':
        self._require(*_IN_FLIGHT_STATES)
        return attrs.evolve(
            self,
            state=PaymentState.FAILED,
            failure_reason=reason,
            updated_at=datetime.now(timezone.utc),
        )
