"""
Checkout payload schema.

The one shape a checkout step accepts from the step before it and hands to
the step after it. Older field names are accepted on input only; output is
always the canonical camelCase form.
"""

from typing import Any, Optional

from pydantic import AliasChoices, AliasPath, BaseModel, ConfigDict, Field, field_validator

from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.entity.seat_entity import Seat
from src.service.checkout.domain.enum import Deck, PaymentMethod
from src.service.checkout.domain.value_object import (
    ContactDetails,
    Passenger,
    RouteInfo,
    RoutePoint,
    Stop,
)


class _PayloadModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)


class SeatPayload(_PayloadModel):
    id: str = Field(validation_alias=AliasChoices('id', 'seatId'))
    deck: Deck = Field(default=Deck.LOWER, validation_alias=AliasChoices('deck', 'level'))
    type: str = Field(default='SEATER', validation_alias=AliasChoices('type', 'seatType'))
    row: int = 0
    column: int = Field(default=0, validation_alias=AliasChoices('column', 'col'))
    row_span: int = Field(
        default=1,
        ge=1,
        validation_alias=AliasChoices('rowSpan', 'row_span'),
        serialization_alias='rowSpan',
    )
    column_span: int = Field(
        default=1,
        ge=1,
        validation_alias=AliasChoices('columnSpan', 'column_span'),
        serialization_alias='columnSpan',
    )
    seat_number: str = Field(
        default='',
        validation_alias=AliasChoices('seatNumber', 'seat_number'),
        serialization_alias='seatNumber',
    )
    is_available: bool = Field(
        default=True,
        validation_alias=AliasChoices('isAvailable', 'is_available'),
        serialization_alias='isAvailable',
    )
    price: Optional[int] = None

    @field_validator('deck', 'type', mode='before')
    @classmethod
    def upper_case(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @classmethod
    def from_entity(cls, seat: Seat) -> 'SeatPayload':
        return cls(
            id=seat.id,
            deck=seat.deck,
            type=seat.type,
            row=seat.row,
            column=seat.column,
            row_span=seat.row_span,
            column_span=seat.column_span,
            seat_number=seat.seat_number,
            is_available=seat.is_available,
            price=seat.price,
        )

    def to_entity(self) -> Seat:
        return Seat(
            id=self.id,
            deck=self.deck,
            type=self.type,
            row=self.row,
            column=self.column,
            row_span=self.row_span,
            column_span=self.column_span,
            seat_number=self.seat_number or self.id,
            is_available=self.is_available,
            price=self.price,
        )


class StopPayload(_PayloadModel):
    id: str
    name: str = ''
    cumulative_prices: dict[str, int] = Field(
        default_factory=dict,
        validation_alias=AliasChoices('cumulativePrices', 'cumulative_prices'),
        serialization_alias='cumulativePrices',
    )

    @field_validator('cumulative_prices', mode='before')
    @classmethod
    def upper_case_keys(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {str(k).upper(): price for k, price in v.items()}
        return v

    def to_value(self) -> Stop:
        return Stop(id=self.id, name=self.name, cumulative_prices=dict(self.cumulative_prices))

    @classmethod
    def from_value(cls, stop: Stop) -> 'StopPayload':
        return cls(id=stop.id, name=stop.name, cumulative_prices=dict(stop.cumulative_prices))


class RoutePointPayload(_PayloadModel):
    id: str
    name: str = ''
    time: str = ''
    landmark: str = ''

    def to_value(self) -> RoutePoint:
        return RoutePoint(id=self.id, name=self.name, time=self.time, landmark=self.landmark)

    @classmethod
    def from_value(cls, point: RoutePoint) -> 'RoutePointPayload':
        return cls(id=point.id, name=point.name, time=point.time, landmark=point.landmark)


class RoutePayload(_PayloadModel):
    from_stop: Optional[StopPayload] = Field(
        default=None,
        validation_alias=AliasChoices('fromStop', 'from_stop'),
        serialization_alias='fromStop',
    )
    to_stop: Optional[StopPayload] = Field(
        default=None,
        validation_alias=AliasChoices('toStop', 'to_stop'),
        serialization_alias='toStop',
    )
    boarding_points: list[RoutePointPayload] = Field(
        default_factory=list,
        validation_alias=AliasChoices('boardingPoints', 'boarding_points'),
        serialization_alias='boardingPoints',
    )
    dropping_points: list[RoutePointPayload] = Field(
        default_factory=list,
        validation_alias=AliasChoices('droppingPoints', 'dropping_points'),
        serialization_alias='droppingPoints',
    )

    def to_value(self) -> RouteInfo:
        return RouteInfo(
            from_stop=self.from_stop.to_value() if self.from_stop else None,
            to_stop=self.to_stop.to_value() if self.to_stop else None,
            boarding_points=tuple(p.to_value() for p in self.boarding_points),
            dropping_points=tuple(p.to_value() for p in self.dropping_points),
        )

    @classmethod
    def from_value(cls, route: RouteInfo) -> 'RoutePayload':
        return cls(
            from_stop=StopPayload.from_value(route.from_stop) if route.from_stop else None,
            to_stop=StopPayload.from_value(route.to_stop) if route.to_stop else None,
            boarding_points=[RoutePointPayload.from_value(p) for p in route.boarding_points],
            dropping_points=[RoutePointPayload.from_value(p) for p in route.dropping_points],
        )


class PassengerPayload(_PayloadModel):
    seat_id: str = Field(
        default='',
        validation_alias=AliasChoices('seatId', 'seat_id'),
        serialization_alias='seatId',
    )
    name: str = ''
    age: Optional[int] = None
    gender: str = 'Male'
    email: str = ''

    @field_validator('age', mode='before')
    @classmethod
    def blank_age_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def to_value(self) -> Passenger:
        return Passenger(
            seat_id=self.seat_id, name=self.name, age=self.age, gender=self.gender, email=self.email
        )

    @classmethod
    def from_value(cls, passenger: Passenger) -> 'PassengerPayload':
        return cls(
            seat_id=passenger.seat_id,
            name=passenger.name,
            age=passenger.age,
            gender=passenger.gender,
            email=passenger.email,
        )


class ContactPayload(_PayloadModel):
    phone: str = ''
    email: str = ''


class TripPayload(_PayloadModel):
    trip_id: str = Field(
        validation_alias=AliasChoices('tripId', 'trip_id', 'id'), serialization_alias='tripId'
    )
    from_stop_id: str = Field(
        validation_alias=AliasChoices('fromStopId', 'from_stop_id'),
        serialization_alias='fromStopId',
    )
    to_stop_id: str = Field(
        validation_alias=AliasChoices('toStopId', 'to_stop_id'), serialization_alias='toStopId'
    )
    per_seat_fare: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices('perSeatFare', 'priceNpr', 'price', 'fare'),
        serialization_alias='perSeatFare',
    )


class CheckoutPayload(_PayloadModel):
    trip: TripPayload = Field(validation_alias=AliasChoices('trip', 'busData'))
    selected_seats: list[SeatPayload] = Field(
        default_factory=list,
        validation_alias=AliasChoices('selectedSeats', 'selected_seats'),
        serialization_alias='selectedSeats',
    )
    route: RoutePayload = Field(
        default_factory=RoutePayload, validation_alias=AliasChoices('route', 'busInfo')
    )
    boarding_point_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('boardingPointId', AliasPath('boardingPoint', 'id')),
        serialization_alias='boardingPointId',
    )
    dropping_point_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('droppingPointId', AliasPath('droppingPoint', 'id')),
        serialization_alias='droppingPointId',
    )
    passengers: list[PassengerPayload] = Field(default_factory=list)
    contact_details: ContactPayload = Field(
        default_factory=ContactPayload,
        validation_alias=AliasChoices('contactDetails', 'contact_details'),
        serialization_alias='contactDetails',
    )
    payment_method: Optional[PaymentMethod] = Field(
        default=None,
        validation_alias=AliasChoices('paymentMethod', 'payment_method'),
        serialization_alias='paymentMethod',
    )
    coupon_code: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('couponCode', 'coupon_code'),
        serialization_alias='couponCode',
    )

    def to_draft(self) -> BookingDraft:
        return BookingDraft(
            trip_id=self.trip.trip_id,
            from_stop_id=self.trip.from_stop_id,
            to_stop_id=self.trip.to_stop_id,
            per_seat_fare=self.trip.per_seat_fare,
            seats=tuple(seat.to_entity() for seat in self.selected_seats),
            route=self.route.to_value(),
            boarding_point_id=self.boarding_point_id,
            dropping_point_id=self.dropping_point_id,
            passengers=tuple(p.to_value() for p in self.passengers),
            contact=ContactDetails(
                phone=self.contact_details.phone, email=self.contact_details.email
            ),
            payment_method=self.payment_method,
            coupon_code=self.coupon_code,
        )

    @classmethod
    def from_draft(cls, draft: BookingDraft) -> 'CheckoutPayload':
        return cls(
            trip=TripPayload(
                trip_id=draft.trip_id,
                from_stop_id=draft.from_stop_id,
                to_stop_id=draft.to_stop_id,
                per_seat_fare=draft.per_seat_fare,
            ),
            selected_seats=[SeatPayload.from_entity(seat) for seat in draft.seats],
            route=RoutePayload.from_value(draft.route),
            boarding_point_id=draft.boarding_point_id,
            dropping_point_id=draft.dropping_point_id,
            passengers=[PassengerPayload.from_value(p) for p in draft.passengers],
            contact_details=ContactPayload(phone=draft.contact.phone, email=draft.contact.email),
            payment_method=draft.payment_method,
            coupon_code=draft.coupon_code,
        )
