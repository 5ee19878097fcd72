from enum import StrEnum


class SeatState(StrEnum):
    AVAILABLE = 'AVAILABLE'
    SELECTED = 'SELECTED'
    BOOKED = 'BOOKED'
