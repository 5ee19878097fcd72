"""Checkout Domain Value Objects"""

from src.service.checkout.domain.value_object.fare_breakdown import FareBreakdown
from src.service.checkout.domain.value_object.passenger import ContactDetails, Passenger
from src.service.checkout.domain.value_object.payment_intent import (
    GatewayOutcome,
    GatewayProof,
    GatewayResult,
    PaymentIntent,
    VerifyPaymentResult,
)
from src.service.checkout.domain.value_object.route import RouteInfo, RoutePoint, Stop
from src.service.checkout.domain.value_object.seat_placement import DeckLayout, SeatPlacement


__all__ = [
    'ContactDetails',
    'DeckLayout',
    'FareBreakdown',
    'GatewayOutcome',
    'GatewayProof',
    'GatewayResult',
    'Passenger',
    'PaymentIntent',
    'RouteInfo',
    'RoutePoint',
    'SeatPlacement',
    'Stop',
    'VerifyPaymentResult',
]
