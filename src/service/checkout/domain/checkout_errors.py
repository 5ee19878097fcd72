"""
Checkout error taxonomy.

- Validation errors: raised before any network call, never retried automatically.
- Network errors: the backend could not be reached; the outcome of any
  server-side effect is unknown.
- Backend-rejected errors: a reachable server answered with an error body.
- State-consistency errors: the step's own data contradicts itself; fatal to the step.
"""

from typing import Any

from src.platform.exception.exceptions import ConflictError, CustomBaseError, DomainError


class CheckoutValidationError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class SeatCatalogError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 422)


class EmptyDeckError(DomainError):
    def __init__(self, deck: str) -> None:
        self.deck = deck
        super().__init__(f'No seats for this deck: {deck}', 404)


class SeatNotSelectableError(DomainError):
    def __init__(self, seat_id: str) -> None:
        self.seat_id = seat_id
        super().__init__(f'Seat {seat_id} is already booked', 409)


class StateConsistencyError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class DraftUnrecoverableError(StateConsistencyError):
    def __init__(
        self,
        message: str = 'No seat information found. Please go back and select seats again.',
    ) -> None:
        super().__init__(message)


class ActionPendingError(ConflictError):
    def __init__(self, message: str) -> None:
        super().__init__(message)


class BackendUnreachableError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 503)


class PaymentStatusUnknownError(BackendUnreachableError):
    def __init__(
        self,
        message: str = (
            'We could not confirm whether your payment was started. '
            'Please check My Bookings before trying again.'
        ),
    ) -> None:
        super().__init__(message)


class BackendRejectedError(CustomBaseError):
    def __init__(
        self, message: str, status_code: int, errors: list[Any] | dict[str, Any] | None = None
    ) -> None:
        self.errors = errors
        super().__init__(message, status_code)


class PaymentFailedError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 402)


class StaleResponseError(CustomBaseError):
    """A response arrived after its step was left; it must not touch step state."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f'Discarded {action} response for an inactive step', 409)
