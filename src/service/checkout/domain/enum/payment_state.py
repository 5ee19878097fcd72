from enum import StrEnum


class PaymentState(StrEnum):
    NONE = 'none'
    INITIATING = 'initiating'
    AWAITING_GATEWAY = 'awaiting_gateway'
    VERIFYING = 'verifying'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'
    CANCELLED = 'cancelled'
