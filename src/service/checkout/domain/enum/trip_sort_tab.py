from enum import StrEnum


class TripSortTab(StrEnum):
    FASTEST = 'Fastest'
    CHEAPEST = 'Cheapest'
    DEPARTURE = 'Departure'
