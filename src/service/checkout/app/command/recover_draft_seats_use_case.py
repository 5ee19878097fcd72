from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_draft_backup_store import IDraftBackupStore
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.checkout_errors import DraftUnrecoverableError


class RecoverDraftSeatsUseCase:
    """Fill in the seat list of a draft that arrived without one, from the backup store."""

    def __init__(self, *, backup_store: IDraftBackupStore) -> None:
        self.backup_store = backup_store

    @Logger.io
    async def execute(self, *, draft: BookingDraft) -> BookingDraft:
        if draft.has_seats:
            return draft.with_reconciled_passengers()

        seats = await self.backup_store.load_selected_seats(trip_id=draft.trip_id)
        if not seats:
            raise DraftUnrecoverableError()

        Logger.base.warning(
            f'♻️ [RECOVER] Draft for trip {draft.trip_id} had no seats, '
            f'restored {len(seats)} from backup'
        )
        return draft.with_seats(seats)
