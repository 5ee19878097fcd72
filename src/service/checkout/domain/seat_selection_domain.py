"""
Seat Selection Domain

Per-seat state machine:

    AVAILABLE <-> SELECTED   (user toggle)
    BOOKED                   (server baseline only, absorbing)
"""

from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from src.platform.exception.exceptions import NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.checkout_errors import (
    SeatNotSelectableError,
    StateConsistencyError,
)
from src.service.checkout.domain.entity.seat_entity import Seat
from src.service.checkout.domain.enum import SeatState


class SeatSelection:
    def __init__(self, seats: Sequence[Seat]) -> None:
        self._seats: dict[str, Seat] = {seat.id: seat for seat in seats}
        self._states: dict[str, SeatState] = {
            seat.id: SeatState.AVAILABLE if seat.is_available else SeatState.BOOKED
            for seat in seats
        }

    @property
    def states(self) -> Mapping[str, SeatState]:
        return MappingProxyType(self._states)

    def state_of(self, seat_id: str) -> SeatState:
        try:
            return self._states[seat_id]
        except KeyError:
            raise NotFoundError(f'Seat {seat_id} is not part of this seat map')

    @Logger.io
    def toggle(self, seat_id: str) -> SeatState:
        """
        Flip a seat between AVAILABLE and SELECTED.

        Raises:
            SeatNotSelectableError: seat is BOOKED (state map unchanged)
            NotFoundError: seat id is not in this seat map
        """
        current = self.state_of(seat_id)
        if current == SeatState.BOOKED:
            raise SeatNotSelectableError(seat_id)

        new_state = SeatState.AVAILABLE if current == SeatState.SELECTED else SeatState.SELECTED
        self._states[seat_id] = new_state
        return new_state

    @Logger.io
    def preselect(self, seat_ids: Iterable[str]) -> list[str]:
        """
        Re-select seats from an earlier visit to this step.

        Seats that are now booked or no longer in the map are skipped and
        returned, so the caller can tell the user.
        """
        skipped: list[str] = []
        for seat_id in seat_ids:
            if self._states.get(seat_id) == SeatState.AVAILABLE:
                self._states[seat_id] = SeatState.SELECTED
            elif self._states.get(seat_id) != SeatState.SELECTED:
                skipped.append(seat_id)
        return skipped

    def selected_ids(self) -> list[str]:
        # Catalog order, not click order
        return [seat_id for seat_id, state in self._states.items() if state == SeatState.SELECTED]

    @property
    def selected_count(self) -> int:
        return len(self.selected_ids())

    @property
    def can_advance(self) -> bool:
        return self.selected_count > 0

    @Logger.io
    def resolve_selected(self) -> tuple[Seat, ...]:
        """
        Map the selected ids back to full Seat objects.

        Raises:
            StateConsistencyError: nothing is selected, or an id does not resolve
        """
        selected_ids = self.selected_ids()
        if not selected_ids:
            raise StateConsistencyError('Select at least one seat to continue')

        unresolved = [seat_id for seat_id in selected_ids if seat_id not in self._seats]
        if unresolved:
            raise StateConsistencyError(
                f'Selected seats could not be resolved: {", ".join(unresolved)}'
            )
        return tuple(self._seats[seat_id] for seat_id in selected_ids)
