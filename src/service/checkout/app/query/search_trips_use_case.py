from typing import Any, Mapping, Optional, Sequence

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.trip_dto import TripSummary
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.domain.checkout_errors import CheckoutValidationError
from src.service.checkout.domain.enum import TripSortTab
from src.service.checkout.domain.fare_domain import to_display_currency


DEFAULT_BUS_TYPE = 'A/C Sleeper (2+1)'
DEFAULT_RATING = 4.0
_AMENITY_FLAGS = (
    ('hasWifi', 'WiFi'),
    ('hasAC', 'AC'),
    ('hasCharging', 'Charging'),
    ('hasRestroom', 'Restroom'),
)


@attrs.define(frozen=True)
class TripSearchFilters:
    bus_type: str = 'ALL'
    has_wifi: bool = False
    has_ac: bool = False
    has_charging: bool = False
    has_restroom: bool = False
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    departure_time_start: str = ''
    departure_time_end: str = ''
    sort_by: str = ''
    sort_order: str = 'asc'


def build_filter_payload(
    base: Mapping[str, Any], filters: TripSearchFilters
) -> dict[str, Any]:
    """Only set filters are sent; unset ones are left to the backend defaults."""
    payload = dict(base)
    if filters.bus_type and filters.bus_type != 'ALL':
        payload['busType'] = filters.bus_type
    for key, enabled in (
        ('hasWifi', filters.has_wifi),
        ('hasAC', filters.has_ac),
        ('hasCharging', filters.has_charging),
        ('hasRestroom', filters.has_restroom),
    ):
        if enabled:
            payload[key] = True
    if filters.min_price is not None:
        payload['minPrice'] = filters.min_price
    if filters.max_price is not None:
        payload['maxPrice'] = filters.max_price
    if filters.departure_time_start:
        payload['departureTimeStart'] = filters.departure_time_start
    if filters.departure_time_end:
        payload['departureTimeEnd'] = filters.departure_time_end
    if filters.sort_by:
        payload['sortBy'] = filters.sort_by
        payload['sortOrder'] = filters.sort_order or 'asc'
    return payload


def format_duration(minutes: Any) -> str:
    try:
        total = float(minutes)
    except (TypeError, ValueError):
        return '0h 0m'
    if total < 0:
        return '0h 0m'
    return f'{int(total // 60)}h {int(total % 60)}m'


def _amenities(raw: Any) -> tuple[str, ...]:
    if isinstance(raw, list):
        return tuple(str(item) for item in raw)
    if isinstance(raw, Mapping):
        return tuple(label for key, label in _AMENITY_FLAGS if raw.get(key))
    return ()


def _number(value: Any, default: float = 0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def sort_trips(trips: Sequence[TripSummary], tab: TripSortTab) -> list[TripSummary]:
    if tab == TripSortTab.FASTEST:
        # Unknown durations go last
        return sorted(
            trips,
            key=lambda t: t.duration_minutes if t.duration_minutes is not None else float('inf'),
        )
    if tab == TripSortTab.CHEAPEST:
        return sorted(trips, key=lambda t: t.price)
    if tab == TripSortTab.DEPARTURE:
        return sorted(trips, key=lambda t: t.departure_time)
    return list(trips)


class SearchTripsUseCase:
    def __init__(self, *, api_client: IBookingApiClient, display_currency_rate: float) -> None:
        self.api_client = api_client
        self.display_currency_rate = display_currency_rate

    @Logger.io
    async def execute(
        self,
        *,
        start_location: str,
        end_location: str,
        date: str,
        filters: TripSearchFilters = TripSearchFilters(),
        sort_tab: TripSortTab = TripSortTab.FASTEST,
    ) -> list[TripSummary]:
        if not start_location.strip() or not end_location.strip() or not date.strip():
            raise CheckoutValidationError('Origin, destination and date are required')

        payload = build_filter_payload(
            {'startLocation': start_location, 'endLocation': end_location, 'date': date},
            filters,
        )
        raw_trips = await self.api_client.search_trips(payload=payload)
        trips = [
            self.to_summary(raw, index)
            for index, raw in enumerate(raw_trips)
            if isinstance(raw, Mapping)
        ]
        Logger.base.info(f'🚌 [SEARCH] {start_location} -> {end_location} on {date}: {len(trips)}')
        return sort_trips(trips, sort_tab)

    def to_summary(self, raw: Mapping[str, Any], index: int) -> TripSummary:
        from_stop = raw.get('fromStop') or {}
        to_stop = raw.get('toStop') or {}
        price = int(_number(raw.get('fare')))
        duration = raw.get('duration')
        duration_minutes = int(duration) if isinstance(duration, int | float) else None
        return TripSummary(
            trip_id=str(raw.get('tripId') or raw.get('id') or f'trip_{index}'),
            from_stop_id=from_stop.get('id'),
            to_stop_id=to_stop.get('id'),
            operator=raw.get('busName') or 'Bus Operator',
            bus_number=raw.get('busNumber') or '',
            bus_type=raw.get('busType') or DEFAULT_BUS_TYPE,
            departure_time=from_stop.get('departureTime') or '',
            arrival_time=to_stop.get('arrivalTime') or '',
            duration_minutes=duration_minutes,
            duration_text=format_duration(duration) if duration_minutes is not None else '0h 0m',
            price=price,
            display_price=to_display_currency(price, rate=self.display_currency_rate),
            rating=_number(raw.get('rating'), DEFAULT_RATING) or DEFAULT_RATING,
            amenities=_amenities(raw.get('amenities')),
            available_seats=int(_number(raw.get('availableSeats'))),
        )
