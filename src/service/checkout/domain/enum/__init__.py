from src.service.checkout.domain.enum.checkout_step import CheckoutStepName
from src.service.checkout.domain.enum.deck import Deck
from src.service.checkout.domain.enum.payment_method import PaymentMethod
from src.service.checkout.domain.enum.payment_state import PaymentState
from src.service.checkout.domain.enum.seat_state import SeatState
from src.service.checkout.domain.enum.trip_sort_tab import TripSortTab


__all__ = [
    'CheckoutStepName',
    'Deck',
    'PaymentMethod',
    'PaymentState',
    'SeatState',
    'TripSortTab',
]
