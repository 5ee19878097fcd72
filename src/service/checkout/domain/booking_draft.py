"""
Booking Draft

The in-progress booking, threaded from step to step as an immutable value.
Every `with_*` method returns a new draft.
"""

from typing import Optional, Sequence

import attrs

from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.checkout_errors import (
    CheckoutValidationError,
    StateConsistencyError,
)
from src.service.checkout.domain.entity.seat_entity import Seat
from src.service.checkout.domain.enum import PaymentMethod
from src.service.checkout.domain.value_object import ContactDetails, Passenger, RouteInfo


def reconcile_passengers(
    seats: Sequence[Seat], passengers: Sequence[Passenger]
) -> tuple[Passenger, ...]:
    """
    Rebuild the passenger list so it has exactly one entry per seat.

    Entries are kept by position; each kept entry is re-pinned to the seat at
    its index. Missing entries are blank passengers.
    """
    rebuilt: list[Passenger] = []
    for index, seat in enumerate(seats):
        if index < len(passengers):
            rebuilt.append(attrs.evolve(passengers[index], seat_id=seat.id))
        else:
            rebuilt.append(Passenger(seat_id=seat.id))
    return tuple(rebuilt)


@attrs.define(frozen=True)
class BookingDraft:
    trip_id: str
    from_stop_id: str
    to_stop_id: str
    seats: tuple[Seat, ...] = ()
    route: RouteInfo = attrs.field(factory=RouteInfo)
    per_seat_fare: Optional[int] = None
    boarding_point_id: Optional[str] = None
    dropping_point_id: Optional[str] = None
    passengers: tuple[Passenger, ...] = ()
    contact: ContactDetails = attrs.field(factory=ContactDetails)
    payment_method: Optional[PaymentMethod] = None
    coupon_code: Optional[str] = None

    @property
    def seat_ids(self) -> list[str]:
        return [seat.id for seat in self.seats]

    @property
    def has_seats(self) -> bool:
        return bool(self.seats)

    @property
    def passengers_match_seats(self) -> bool:
        return len(self.passengers) == len(self.seats) and all(
            passenger.seat_id == seat.id for passenger, seat in zip(self.passengers, self.seats)
        )

    @Logger.io
    def with_seats(self, seats: Sequence[Seat]) -> 'BookingDraft':
        """Replace the seat list; the passenger list follows the new seat count."""
        seats = tuple(seats)
        return attrs.evolve(
            self, seats=seats, passengers=reconcile_passengers(seats, self.passengers)
        )

    def with_reconciled_passengers(self) -> 'BookingDraft':
        if self.passengers_match_seats:
            return self
        Logger.base.warning(
            f'⚠️ [DRAFT] {len(self.passengers)} passengers for {len(self.seats)} seats, '
            f'rebuilding passenger list'
        )
        return attrs.evolve(self, passengers=reconcile_passengers(self.seats, self.passengers))

    @Logger.io
    def with_route_points(self, *, boarding_point_id: str, dropping_point_id: str) -> 'BookingDraft':
        if self.route.boarding_points and not self.route.find_boarding_point(boarding_point_id):
            raise CheckoutValidationError(f'Unknown boarding point: {boarding_point_id}')
        if self.route.dropping_points and not self.route.find_dropping_point(dropping_point_id):
            raise CheckoutValidationError(f'Unknown dropping point: {dropping_point_id}')
        return attrs.evolve(
            self, boarding_point_id=boarding_point_id, dropping_point_id=dropping_point_id
        )

    @Logger.io
    def with_passengers(self, passengers: Sequence[Passenger]) -> 'BookingDraft':
        """
        Raises:
            StateConsistencyError: passenger count differs from seat count
        """
        passengers = tuple(passengers)
        if len(passengers) != len(self.seats):
            raise StateConsistencyError(
                f'{len(passengers)} passengers given for {len(self.seats)} seats'
            )
        return attrs.evolve(self, passengers=passengers)

    def with_route(self, route: RouteInfo) -> 'BookingDraft':
        return attrs.evolve(self, route=route)

    def with_contact(self, contact: ContactDetails) -> 'BookingDraft':
        return attrs.evolve(self, contact=contact)

    def with_payment_method(self, payment_method: PaymentMethod) -> 'BookingDraft':
        return attrs.evolve(self, payment_method=payment_method)

    def with_coupon_code(self, coupon_code: Optional[str]) -> 'BookingDraft':
        return attrs.evolve(self, coupon_code=coupon_code)

    @Logger.io
    def validate_for_payment(self) -> None:
        """
        Check every field the payment backend needs.

        Raises:
            CheckoutValidationError: a required field is missing
            StateConsistencyError: passengers and seats disagree
        """
        if not self.trip_id:
            raise CheckoutValidationError('Trip is missing')
        if not self.from_stop_id or not self.to_stop_id:
            raise CheckoutValidationError('Origin and destination stops are required')
        if not self.seats or any(not seat.id for seat in self.seats):
            raise CheckoutValidationError('At least one seat is required')
        if not self.passengers_match_seats:
            raise StateConsistencyError('Passenger details do not match the selected seats')
        if not self.boarding_point_id or not self.dropping_point_id:
            raise CheckoutValidationError('Please select both boarding and dropping points')
        if self.payment_method is None:
            raise CheckoutValidationError('Please choose a payment method')
        for index, passenger in enumerate(self.passengers, start=1):
            if not passenger.has_name:
                raise CheckoutValidationError(f'Passenger {index}: name is required')
            if not (passenger.email or self.contact.email):
                raise CheckoutValidationError(f'Passenger {index}: email is required')
