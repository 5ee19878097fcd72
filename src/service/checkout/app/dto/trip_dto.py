from decimal import Decimal
from typing import Optional

import attrs


@attrs.define(frozen=True)
class TripSummary:
    trip_id: str
    from_stop_id: Optional[str]
    to_stop_id: Optional[str]
    operator: str
    bus_number: str
    bus_type: str
    departure_time: str
    arrival_time: str
    duration_minutes: Optional[int]
    duration_text: str
    price: int
    display_price: Decimal
    rating: float
    amenities: tuple[str, ...]
    available_seats: int
