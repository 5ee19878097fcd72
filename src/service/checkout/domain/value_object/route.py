from typing import Optional

import attrs


@attrs.define(frozen=True)
class Stop:
    """
    A stop on the trip's route.

    `cumulative_prices` maps seat type to the fare accumulated from the route
    origin up to this stop; a segment fare is the difference between two stops.
    """

    id: str
    name: str = ''
    cumulative_prices: dict[str, int] = attrs.field(factory=dict)

    def cumulative_price_for(self, seat_type: str) -> Optional[int]:
        return self.cumulative_prices.get(seat_type.upper())


@attrs.define(frozen=True)
class RoutePoint:
    """Boarding or dropping point."""

    id: str
    name: str
    time: str = ''
    landmark: str = ''


@attrs.define(frozen=True)
class RouteInfo:
    from_stop: Optional[Stop] = None
    to_stop: Optional[Stop] = None
    boarding_points: tuple[RoutePoint, ...] = ()
    dropping_points: tuple[RoutePoint, ...] = ()

    @property
    def has_seat_type_pricing(self) -> bool:
        return bool(
            self.from_stop
            and self.to_stop
            and self.from_stop.cumulative_prices
            and self.to_stop.cumulative_prices
        )

    def find_boarding_point(self, point_id: str) -> Optional[RoutePoint]:
        return next((p for p in self.boarding_points if p.id == point_id), None)

    def find_dropping_point(self, point_id: str) -> Optional[RoutePoint]:
        return next((p for p in self.dropping_points if p.id == point_id), None)
