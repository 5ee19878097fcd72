from enum import StrEnum


class CheckoutStepName(StrEnum):
    SEAT_SELECTION = 'SeatSelection'
    BOARDING_POINTS = 'BoardingPoints'
    PASSENGER_INFORMATION = 'PassengerInformation'
    PAYMENT = 'Payment'
    BOOKING_CONFIRMED = 'BookingConfirmed'
