"""
Action Guard

At most one instance of each named action may be in flight per step. An
exclusive action additionally blocks every other action while it runs
(payment blocks coupon edits, for example).
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.checkout_errors import ActionPendingError


class ActionGuard:
    def __init__(self) -> None:
        self._pending: set[str] = set()
        self._exclusive: str | None = None

    def is_pending(self, action: str) -> bool:
        return action in self._pending

    @property
    def busy(self) -> bool:
        return bool(self._pending)

    @asynccontextmanager
    async def run(self, action: str, *, exclusive: bool = False) -> AsyncIterator[None]:
        if action in self._pending:
            raise ActionPendingError(f'{action} is already in progress')
        if self._exclusive is not None:
            raise ActionPendingError(f'Please wait for {self._exclusive} to finish')
        if exclusive and self._pending:
            raise ActionPendingError(
                f'Please wait for {", ".join(sorted(self._pending))} to finish'
            )

        self._pending.add(action)
        if exclusive:
            self._exclusive = action
        Logger.base.debug(f'🔒 [GUARD] {action} started')
        try:
            yield
        finally:
            self._pending.discard(action)
            if self._exclusive == action:
                self._exclusive = None
            Logger.base.debug(f'🔓 [GUARD] {action} finished')
