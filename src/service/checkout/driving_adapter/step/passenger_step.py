from typing import Any, Mapping, Optional

import attrs

from src.platform.logging.loguru_io import Logger
from src.platform.exception.exceptions import NotFoundError
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.checkout_errors import CheckoutValidationError
from src.service.checkout.domain.enum import CheckoutStepName
from src.service.checkout.domain.value_object import ContactDetails, Passenger
from src.service.checkout.driving_adapter.step.base_step import BaseCheckoutStep


class PassengerStep(BaseCheckoutStep):
    """One passenger form per seat, plus a shared contact block."""

    step_name = CheckoutStepName.PASSENGER_INFORMATION

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.passengers: list[Passenger] = []
        self.contact = ContactDetails()

    async def enter(self, payload: Mapping[str, Any]) -> BookingDraft:
        draft = await super().enter(payload)
        self.passengers = list(draft.passengers)
        self.contact = draft.contact
        return draft

    def update_passenger(
        self,
        index: int,
        *,
        name: Optional[str] = None,
        age: Optional[int] = None,
        gender: Optional[str] = None,
        email: Optional[str] = None,
    ) -> Passenger:
        if not 0 <= index < len(self.passengers):
            raise NotFoundError(f'No passenger form at position {index + 1}')
        changes = {
            key: value
            for key, value in (('name', name), ('age', age), ('gender', gender), ('email', email))
            if value is not None
        }
        if 'age' in changes and changes['age'] <= 0:
            raise CheckoutValidationError(f'Passenger {index + 1}: age must be positive')
        self.passengers[index] = attrs.evolve(self.passengers[index], **changes)
        return self.passengers[index]

    def update_contact(self, *, phone: Optional[str] = None, email: Optional[str] = None) -> None:
        self.contact = ContactDetails(
            phone=self.contact.phone if phone is None else phone.strip(),
            email=self.contact.email if email is None else email.strip(),
        )

    @Logger.io
    def proceed(self) -> dict[str, Any]:
        draft = self.draft
        for index, passenger in enumerate(self.passengers, start=1):
            if not passenger.has_name:
                raise CheckoutValidationError(f'Passenger {index}: name is required')
        if not self.contact.phone or not self.contact.email:
            raise CheckoutValidationError('Contact phone and email are required')

        draft = draft.with_passengers(self.passengers).with_contact(self.contact)
        return self._advance(CheckoutStepName.PAYMENT, draft)
