from typing import Optional

import attrs

from src.service.checkout.domain.enum import Deck


@attrs.define(frozen=True)
class Seat:
    """
    Canonical seat (Entity).

    Identity is the server-assigned `id`; `seat_number` is only a display
    label and repeats across decks.
    """

    id: str
    deck: Deck
    type: str
    row: int
    column: int
    seat_number: str
    row_span: int = 1
    column_span: int = 1
    is_available: bool = True
    price: Optional[int] = None

    @property
    def last_row(self) -> int:
        return self.row + self.row_span - 1

    @property
    def last_column(self) -> int:
        return self.column + self.column_span - 1
