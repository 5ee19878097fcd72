"""
Draft Backup Store Implementation

Storage Format:
    Key: selectedSeatsBackup
    Value: {"tripId": "<trip id>", "seats": [<canonical seat payload>, ...]}

A backup that cannot be parsed, or that was saved for another trip, is
treated as absent.
"""

from typing import Optional, Sequence

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.platform.logging.loguru_io import Logger
from src.platform.state.local_kv_store import LocalKeyValueStore
from src.service.checkout.app.dto.draft_payload_dto import SeatPayload
from src.service.checkout.app.interface.i_draft_backup_store import IDraftBackupStore
from src.service.checkout.domain.entity.seat_entity import Seat


SELECTED_SEATS_BACKUP_KEY = 'selectedSeatsBackup'


class SeatBackupRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    trip_id: str = Field(alias='tripId', min_length=1)
    seats: list[SeatPayload]


class DraftBackupStoreImpl(IDraftBackupStore):
    def __init__(self, *, kv_store: LocalKeyValueStore) -> None:
        self.kv_store = kv_store

    @Logger.io
    async def save_selected_seats(self, seats: Sequence[Seat], *, trip_id: str) -> None:
        record = SeatBackupRecord(
            trip_id=trip_id, seats=[SeatPayload.from_entity(seat) for seat in seats]
        )
        await self.kv_store.set(
            SELECTED_SEATS_BACKUP_KEY, record.model_dump(mode='json', by_alias=True)
        )

    @Logger.io
    async def load_selected_seats(self, *, trip_id: str) -> Optional[tuple[Seat, ...]]:
        try:
            raw = await self.kv_store.get(SELECTED_SEATS_BACKUP_KEY)
        except orjson.JSONDecodeError as e:
            Logger.base.warning(f'⚠️ [BACKUP] Seat backup is not valid JSON: {e}')
            return None
        if raw is None:
            return None

        try:
            record = SeatBackupRecord.model_validate(raw)
        except ValidationError as e:
            Logger.base.warning(f'⚠️ [BACKUP] Seat backup has an unexpected shape: {e.error_count()} errors')
            return None
        if record.trip_id != trip_id:
            Logger.base.warning(
                f'⚠️ [BACKUP] Seat backup belongs to trip {record.trip_id}, not {trip_id}; ignoring it'
            )
            return None
        return tuple(seat.to_entity() for seat in record.seats) or None

    @Logger.io
    async def clear(self) -> None:
        await self.kv_store.delete(SELECTED_SEATS_BACKUP_KEY)
