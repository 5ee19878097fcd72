from enum import StrEnum


class Deck(StrEnum):
    LOWER = 'LOWER'
    UPPER = 'UPPER'
