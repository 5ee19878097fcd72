from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_draft_backup_store import IDraftBackupStore
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.seat_selection_domain import SeatSelection


class ConfirmSeatSelectionUseCase:
    """
    Freeze the current selection into the draft.

    The selection is also written to the backup store so a later step can
    recover it if its payload arrives without seats.
    """

    def __init__(self, *, backup_store: IDraftBackupStore) -> None:
        self.backup_store = backup_store

    @Logger.io
    async def execute(self, *, draft: BookingDraft, selection: SeatSelection) -> BookingDraft:
        seats = selection.resolve_selected()
        await self.backup_store.save_selected_seats(seats, trip_id=draft.trip_id)
        return draft.with_seats(seats)
