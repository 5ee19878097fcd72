from typing import Any, Mapping, Optional

from pydantic import ValidationError

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.draft_payload_dto import RoutePayload
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.domain.checkout_errors import (
    CheckoutValidationError,
    SeatCatalogError,
)
from src.service.checkout.domain.seat_catalog import SeatCatalog, normalize_seats


def _optional_int(value: Any, *, field: str) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise SeatCatalogError(f'Bus {field} is not an integer: {value!r}')


class LoadSeatMapUseCase:
    """
    Fetch the seat map for a trip segment and normalize it.

    A fresh catalog is built on every call; selection state is seeded from it
    by the caller.
    """

    def __init__(self, *, api_client: IBookingApiClient) -> None:
        self.api_client = api_client

    @Logger.io
    async def execute(self, *, trip_id: str, from_stop_id: str, to_stop_id: str) -> SeatCatalog:
        if not trip_id or not from_stop_id or not to_stop_id:
            raise CheckoutValidationError('Trip and both stops are required to load seats')

        raw = await self.api_client.get_bus_info(
            trip_id=trip_id, from_stop_id=from_stop_id, to_stop_id=to_stop_id
        )
        return self.build_catalog(
            raw, trip_id=trip_id, from_stop_id=from_stop_id, to_stop_id=to_stop_id
        )

    @staticmethod
    def build_catalog(
        raw: Mapping[str, Any], *, trip_id: str, from_stop_id: str, to_stop_id: str
    ) -> SeatCatalog:
        seats_raw = raw.get('seats') or {}
        if not isinstance(seats_raw, Mapping):
            raise SeatCatalogError('Bus info has no seat decks')

        route_raw = dict(raw.get('route') or {})
        # Some responses carry the point lists at the top level
        for key in ('boardingPoints', 'droppingPoints'):
            if key not in route_raw and key in raw:
                route_raw[key] = raw[key]
        try:
            route = RoutePayload.model_validate(route_raw).to_value()
        except ValidationError as e:
            raise SeatCatalogError(f'Bus info has an invalid route: {e.errors()[0]["msg"]}')

        bus_raw = raw.get('bus') or {}
        seats = normalize_seats(
            lower_deck=seats_raw.get('lowerDeck'),
            upper_deck=seats_raw.get('upperDeck'),
        )
        Logger.base.info(
            f'💺 [SEAT MAP] trip={trip_id} {from_stop_id}->{to_stop_id}: {len(seats)} seats'
        )
        return SeatCatalog(
            trip_id=trip_id,
            from_stop_id=from_stop_id,
            to_stop_id=to_stop_id,
            seats=seats,
            route=route,
            grid_rows=_optional_int(bus_raw.get('gridRows'), field='gridRows'),
            grid_columns=_optional_int(bus_raw.get('gridColumns'), field='gridColumns'),
            available_count=_optional_int(seats_raw.get('availableCount'), field='availableCount'),
        )
