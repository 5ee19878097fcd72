from abc import ABC, abstractmethod
from typing import Optional, Sequence

from src.service.checkout.domain.entity.seat_entity import Seat


class IDraftBackupStore(ABC):
    """Persistent copy of the most recently confirmed seat selection, scoped to its trip"""

    @abstractmethod
    async def save_selected_seats(self, seats: Sequence[Seat], *, trip_id: str) -> None:
        pass

    @abstractmethod
    async def load_selected_seats(self, *, trip_id: str) -> Optional[tuple[Seat, ...]]:
        """Return the seats backed up for `trip_id`, or None when there is no usable backup"""
        pass

    @abstractmethod
    async def clear(self) -> None:
        pass
