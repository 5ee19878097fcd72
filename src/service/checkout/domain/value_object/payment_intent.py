from enum import StrEnum
from typing import Optional

import attrs


@attrs.define(frozen=True)
class PaymentIntent:
    """Backend-issued charge authorization. `amount` is authoritative."""

    payment_id: str
    order_id: str
    amount: float
    currency: str
    gateway_key_id: str = ''


@attrs.define(frozen=True)
class GatewayProof:
    """Authorization proof issued by the payment gateway, relayed as-is."""

    gateway_order_id: str
    gateway_payment_id: str
    gateway_signature: str


class GatewayOutcome(StrEnum):
    AUTHORIZED = 'authorized'
    CANCELLED = 'cancelled'
    ERROR = 'error'


@attrs.define(frozen=True)
class GatewayResult:
    outcome: GatewayOutcome
    proof: Optional[GatewayProof] = None
    error_message: Optional[str] = None

    @classmethod
    def authorized(cls, proof: GatewayProof) -> 'GatewayResult':
        return cls(outcome=GatewayOutcome.AUTHORIZED, proof=proof)

    @classmethod
    def cancelled(cls) -> 'GatewayResult':
        return cls(outcome=GatewayOutcome.CANCELLED)

    @classmethod
    def error(cls, message: str) -> 'GatewayResult':
        return cls(outcome=GatewayOutcome.ERROR, error_message=message)


@attrs.define(frozen=True)
class VerifyPaymentResult:
    success: bool
    booking_group_id: Optional[str] = None
    message: Optional[str] = None
