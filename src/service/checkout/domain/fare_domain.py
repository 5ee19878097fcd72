from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.checkout_errors import CheckoutValidationError
from src.service.checkout.domain.entity.seat_entity import Seat
from src.service.checkout.domain.value_object import FareBreakdown, RouteInfo


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def to_display_currency(amount: float | int, *, rate: float) -> Decimal:
    """Convert a primary-currency amount for display. Never use the result as a charge."""
    converted = Decimal(str(amount)) * Decimal(str(rate))
    return converted.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)


class FareCalculator:
    def __init__(self, *, tax_rate: float, service_fee: int, default_seat_fare: int) -> None:
        self.tax_rate = Decimal(str(tax_rate))
        self.service_fee = service_fee
        self.default_seat_fare = default_seat_fare

    def seat_fare(
        self,
        seat: Seat,
        *,
        route: Optional[RouteInfo] = None,
        per_seat_fare: Optional[int] = None,
    ) -> int:
        """
        Fare for one seat on the booked segment.

        Priority: route seat-type pricing, then the seat's own price, then the
        trip's per-seat fare, then the configured default.
        """
        if route is not None and route.has_seat_type_pricing:
            assert route.from_stop is not None and route.to_stop is not None
            from_price = route.from_stop.cumulative_price_for(seat.type)
            to_price = route.to_stop.cumulative_price_for(seat.type)
            if from_price is not None and to_price is not None:
                # Stops may be listed in either direction along the route
                return abs(to_price - from_price)
        if seat.price is not None:
            return seat.price
        if per_seat_fare is not None:
            return per_seat_fare
        return self.default_seat_fare

    @Logger.io
    def calculate(
        self,
        seats: Sequence[Seat],
        *,
        route: Optional[RouteInfo] = None,
        per_seat_fare: Optional[int] = None,
    ) -> FareBreakdown:
        if not seats:
            raise CheckoutValidationError('Cannot price a booking without seats')

        base_fare = sum(
            self.seat_fare(seat, route=route, per_seat_fare=per_seat_fare) for seat in seats
        )
        tax = round_half_up(Decimal(base_fare) * self.tax_rate)
        return FareBreakdown(
            base_fare=base_fare,
            tax=tax,
            service_fee=self.service_fee,
            total=base_fare + tax + self.service_fee,
        )
