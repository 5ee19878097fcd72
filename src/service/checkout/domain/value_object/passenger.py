from typing import Optional

import attrs


@attrs.define(frozen=True)
class Passenger:
    seat_id: str
    name: str = ''
    age: Optional[int] = None
    gender: str = 'Male'
    email: str = ''

    @property
    def has_name(self) -> bool:
        return bool(self.name.strip())


@attrs.define(frozen=True)
class ContactDetails:
    phone: str = ''
    email: str = ''
