"""
Seat Layout Domain

Places each seat of one deck on an absolute grid. The backend's row/column
values are 0-based for some buses and 1-based for others, so the origin is
inferred per axis:

- grid size reported and every seat fits inside [0, size) -> origin 0
- otherwise -> the smallest observed coordinate

Catalogs that take the second path are logged for inspection.
"""

from typing import Optional, Sequence

from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.checkout_errors import EmptyDeckError
from src.service.checkout.domain.entity.seat_entity import Seat
from src.service.checkout.domain.enum import Deck
from src.service.checkout.domain.value_object import DeckLayout, SeatPlacement


def _infer_axis(
    *, observed_min: int, observed_max: int, reported_size: Optional[int]
) -> tuple[int, int, bool]:
    """Return (origin, total_cells, used_fallback) for one axis."""
    if reported_size and reported_size > 0:
        if observed_min >= 0 and observed_max < reported_size:
            return 0, reported_size, False
        # Reported size exists but does not describe these coordinates
        return observed_min, max(reported_size, observed_max - observed_min + 1), True
    return observed_min, observed_max - observed_min + 1, False


def _span_length(cells: int, *, cell_size: int, gap: int) -> int:
    return cells * cell_size + (cells - 1) * gap


class SeatLayoutEngine:
    def __init__(self, *, cell_size: int, gap: int) -> None:
        if cell_size <= 0:
            raise ValueError('cell_size must be positive')
        if gap < 0:
            raise ValueError('gap must not be negative')
        self.cell_size = cell_size
        self.gap = gap

    @property
    def pitch(self) -> int:
        return self.cell_size + self.gap

    @Logger.io(truncate_content=True)
    def layout_deck(
        self,
        seats: Sequence[Seat],
        *,
        deck: Deck,
        grid_rows: Optional[int] = None,
        grid_columns: Optional[int] = None,
    ) -> DeckLayout:
        """
        Compute placements for the seats of `deck`.

        Seats of other decks in `seats` are ignored. Output order follows input
        order, so identical inputs give identical layouts.

        Raises:
            EmptyDeckError: the deck has no seats
        """
        deck_seats = [seat for seat in seats if seat.deck == deck]
        if not deck_seats:
            raise EmptyDeckError(deck)

        min_row = min(seat.row for seat in deck_seats)
        min_column = min(seat.column for seat in deck_seats)
        max_row = max(seat.last_row for seat in deck_seats)
        max_column = max(seat.last_column for seat in deck_seats)

        origin_row, total_rows, row_fallback = _infer_axis(
            observed_min=min_row, observed_max=max_row, reported_size=grid_rows
        )
        origin_column, total_columns, column_fallback = _infer_axis(
            observed_min=min_column, observed_max=max_column, reported_size=grid_columns
        )
        used_fallback = row_fallback or column_fallback
        if used_fallback:
            Logger.base.warning(
                f'⚠️ [LAYOUT] {deck} deck coordinates do not fit reported grid '
                f'{grid_rows}x{grid_columns} (rows {min_row}..{max_row}, '
                f'columns {min_column}..{max_column}); using observed minimum as origin'
            )

        placements = tuple(
            SeatPlacement(
                seat_id=seat.id,
                left=(seat.column - origin_column) * self.pitch,
                top=(seat.row - origin_row) * self.pitch,
                width=_span_length(seat.column_span, cell_size=self.cell_size, gap=self.gap),
                height=_span_length(seat.row_span, cell_size=self.cell_size, gap=self.gap),
            )
            for seat in deck_seats
        )

        return DeckLayout(
            deck=deck,
            placements=placements,
            canvas_width=_span_length(total_columns, cell_size=self.cell_size, gap=self.gap),
            canvas_height=_span_length(total_rows, cell_size=self.cell_size, gap=self.gap),
            origin_row=origin_row,
            origin_column=origin_column,
            total_rows=total_rows,
            total_columns=total_columns,
            used_fallback_origin=used_fallback,
        )
