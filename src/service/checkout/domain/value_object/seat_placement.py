from typing import Optional

import attrs

from src.service.checkout.domain.enum import Deck


@attrs.define(frozen=True)
class SeatPlacement:
    """Absolute rectangle of one seat, in layout units."""

    seat_id: str
    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    def intersects(self, other: 'SeatPlacement') -> bool:
        # Touching edges do not count as overlap
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )


@attrs.define(frozen=True)
class DeckLayout:
    deck: Deck
    placements: tuple[SeatPlacement, ...]
    canvas_width: int
    canvas_height: int
    origin_row: int
    origin_column: int
    total_rows: int
    total_columns: int
    used_fallback_origin: bool = False

    def placement_for(self, seat_id: str) -> Optional[SeatPlacement]:
        return next((p for p in self.placements if p.seat_id == seat_id), None)
