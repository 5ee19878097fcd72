"""
Seat Catalog

Turns the backend's per-deck seat arrays into canonical `Seat` entities.
Alternate field names the backend has used over time are resolved here and
nowhere else.
"""

from typing import Any, Iterable, Mapping, Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.checkout_errors import SeatCatalogError
from src.service.checkout.domain.entity.seat_entity import Seat
from src.service.checkout.domain.enum import Deck
from src.service.checkout.domain.value_object import RouteInfo


DEFAULT_SEAT_TYPE = 'SEATER'

_ID_KEYS = ('id', 'seatId', '_id')
_DECK_KEYS = ('deck', 'level')
_TYPE_KEYS = ('type', 'seatType')
_ROW_KEYS = ('row',)
_COLUMN_KEYS = ('column', 'col')
_ROW_SPAN_KEYS = ('rowSpan', 'row_span')
_COLUMN_SPAN_KEYS = ('columnSpan', 'column_span', 'colSpan')
_SEAT_NUMBER_KEYS = ('seatNumber', 'seat_number', 'number')
_AVAILABLE_KEYS = ('isAvailable', 'is_available', 'available')
_PRICE_KEYS = ('price',)

_DECK_ALIASES = {
    'LOWER': Deck.LOWER,
    'LOWER_DECK': Deck.LOWER,
    'LOWERDECK': Deck.LOWER,
    'UPPER': Deck.UPPER,
    'UPPER_DECK': Deck.UPPER,
    'UPPERDECK': Deck.UPPER,
}


def _first_present(record: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None and value != '':
            return value
    return None


def _as_int(value: Any, *, field: str, seat_id: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SeatCatalogError(f'Seat {seat_id} has a non-integer {field}: {value!r}')


def _as_span(value: Any, *, field: str, seat_id: str) -> int:
    if value is None:
        return 1
    return max(1, _as_int(value, field=field, seat_id=seat_id))


def _as_bool(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip().lower() not in ('false', '0', 'no', '')
    return bool(value)


def _as_deck(value: Any, *, default: Deck, seat_id: str) -> Deck:
    if value is None:
        return default
    deck = _DECK_ALIASES.get(str(value).strip().upper().replace(' ', '_'))
    if deck is None:
        raise SeatCatalogError(f'Seat {seat_id} has an unknown deck: {value!r}')
    return deck


@Logger.io
def normalize_seat(record: Mapping[str, Any], *, default_deck: Deck) -> Seat:
    """
    Normalize one raw seat record.

    Raises:
        SeatCatalogError: record has no id, or a coordinate is not an integer
    """
    raw_id = _first_present(record, _ID_KEYS)
    if raw_id is None:
        raise SeatCatalogError(
            f'Seat record without an id cannot be selected: {dict(record)!r}'
        )
    seat_id = str(raw_id)

    row = _first_present(record, _ROW_KEYS)
    column = _first_present(record, _COLUMN_KEYS)
    if row is None or column is None:
        raise SeatCatalogError(f'Seat {seat_id} is missing its row or column')

    raw_type = _first_present(record, _TYPE_KEYS)
    raw_price = _first_present(record, _PRICE_KEYS)
    seat_number = _first_present(record, _SEAT_NUMBER_KEYS)

    return Seat(
        id=seat_id,
        deck=_as_deck(_first_present(record, _DECK_KEYS), default=default_deck, seat_id=seat_id),
        type=str(raw_type).strip().upper() if raw_type is not None else DEFAULT_SEAT_TYPE,
        row=_as_int(row, field='row', seat_id=seat_id),
        column=_as_int(column, field='column', seat_id=seat_id),
        row_span=_as_span(_first_present(record, _ROW_SPAN_KEYS), field='rowSpan', seat_id=seat_id),
        column_span=_as_span(
            _first_present(record, _COLUMN_SPAN_KEYS), field='columnSpan', seat_id=seat_id
        ),
        seat_number=str(seat_number) if seat_number is not None else seat_id,
        is_available=_as_bool(_first_present(record, _AVAILABLE_KEYS)),
        price=_as_int(raw_price, field='price', seat_id=seat_id) if raw_price is not None else None,
    )


@Logger.io(truncate_content=True)
def normalize_seats(
    *,
    lower_deck: Optional[Iterable[Mapping[str, Any]]] = None,
    upper_deck: Optional[Iterable[Mapping[str, Any]]] = None,
) -> tuple[Seat, ...]:
    seats: list[Seat] = []
    for records, default_deck in ((lower_deck, Deck.LOWER), (upper_deck, Deck.UPPER)):
        for record in records or ():
            if not isinstance(record, Mapping):
                raise SeatCatalogError(f'Seat record is not an object: {record!r}')
            seats.append(normalize_seat(record, default_deck=default_deck))

    seen: set[str] = set()
    for seat in seats:
        if seat.id in seen:
            raise SeatCatalogError(f'Duplicate seat id in catalog: {seat.id}')
        seen.add(seat.id)

    return tuple(seats)


@attrs.define(frozen=True)
class SeatCatalog:
    """Seat map for one trip + route segment, as fetched."""

    trip_id: str
    from_stop_id: str
    to_stop_id: str
    seats: tuple[Seat, ...]
    route: RouteInfo = attrs.field(factory=RouteInfo)
    grid_rows: Optional[int] = None
    grid_columns: Optional[int] = None
    available_count: Optional[int] = None

    def seats_on(self, deck: Deck) -> tuple[Seat, ...]:
        return tuple(seat for seat in self.seats if seat.deck == deck)

    @property
    def decks(self) -> tuple[Deck, ...]:
        present = {seat.deck for seat in self.seats}
        return tuple(deck for deck in Deck if deck in present)
