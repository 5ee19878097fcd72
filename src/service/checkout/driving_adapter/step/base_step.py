"""
Base Checkout Step

Shared lifecycle for every checkout step:

- the incoming payload is parsed once, at entry, through CheckoutPayload
- steps past seat selection recover a missing seat list from the backup
  store, once per entry; if that fails the step is blocked and only
  `go_back()` is left
- async actions run through an ActionGuard; a result that comes back after
  the step was left is discarded
- the next step always receives a canonical payload built from the draft
"""

from typing import Any, Awaitable, Callable, ClassVar, Mapping, Optional, TypeVar

from pydantic import ValidationError

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.action_guard import ActionGuard
from src.service.checkout.app.command.recover_draft_seats_use_case import (
    RecoverDraftSeatsUseCase,
)
from src.service.checkout.app.dto.draft_payload_dto import CheckoutPayload
from src.service.checkout.app.interface.i_navigator import INavigator
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.checkout_errors import (
    DraftUnrecoverableError,
    StaleResponseError,
    StateConsistencyError,
)
from src.service.checkout.domain.enum import CheckoutStepName


_T = TypeVar('_T')


class BaseCheckoutStep:
    step_name: ClassVar[CheckoutStepName]
    requires_seats: ClassVar[bool] = True

    def __init__(
        self,
        *,
        navigator: INavigator,
        recover_draft_seats_use_case: RecoverDraftSeatsUseCase,
    ) -> None:
        self.navigator = navigator
        self.recover_draft_seats_use_case = recover_draft_seats_use_case
        self.guard = ActionGuard()
        self.active = False
        self.blocked_reason: Optional[str] = None
        self._draft: Optional[BookingDraft] = None

    @property
    def blocked(self) -> bool:
        return self.blocked_reason is not None

    @property
    def draft(self) -> BookingDraft:
        if self.blocked:
            raise DraftUnrecoverableError(self.blocked_reason or DraftUnrecoverableError().message)
        if self._draft is None:
            raise StateConsistencyError(f'{self.step_name} has not been entered')
        return self._draft

    @Logger.io
    async def enter(self, payload: Mapping[str, Any]) -> BookingDraft:
        """
        Raises:
            StateConsistencyError: payload has no usable trip
            DraftUnrecoverableError: seats are missing and the backup is empty
        """
        self.active = True
        self.blocked_reason = None
        self._draft = None
        self.guard = ActionGuard()

        try:
            draft = CheckoutPayload.model_validate(payload).to_draft()
        except ValidationError as e:
            self.blocked_reason = 'Trip details are missing. Please go back and try again.'
            raise StateConsistencyError(self.blocked_reason) from e

        if self.requires_seats:
            try:
                draft = await self.recover_draft_seats_use_case.execute(draft=draft)
            except DraftUnrecoverableError as e:
                self.blocked_reason = e.message
                raise

        self._draft = draft
        Logger.base.info(
            f'🧭 [STEP] Entered {self.step_name} for trip {draft.trip_id} '
            f'with {len(draft.seats)} seats'
        )
        return draft

    def leave(self) -> None:
        self.active = False

    def go_back(self) -> None:
        self.leave()
        self.navigator.go_back()

    async def _guarded(
        self,
        action: str,
        call: Callable[[], Awaitable[_T]],
        *,
        exclusive: bool = False,
    ) -> _T:
        """
        Run `call` under the action guard.

        Raises:
            ActionPendingError: the same or a conflicting action is in flight
            StaleResponseError: the step was left before the call finished
        """
        async with self.guard.run(action, exclusive=exclusive):
            result = await call()
        if not self.active:
            Logger.base.info(f'🗑️ [STEP] Discarding {action} result, {self.step_name} was left')
            raise StaleResponseError(action)
        return result

    def _advance(
        self,
        next_step: CheckoutStepName,
        draft: BookingDraft,
        *,
        extra: Optional[Mapping[str, Any]] = None,
    ) -> dict[str, Any]:
        self._draft = draft
        payload = CheckoutPayload.from_draft(draft).to_payload() | dict(extra or {})
        self.leave()
        self.navigator.advance(next_step, payload)
        return payload
