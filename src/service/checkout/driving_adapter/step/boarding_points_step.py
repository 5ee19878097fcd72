from typing import Any, Mapping, Optional

from src.platform.logging.loguru_io import Logger
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.checkout_errors import CheckoutValidationError
from src.service.checkout.domain.enum import CheckoutStepName
from src.service.checkout.domain.value_object import RoutePoint
from src.service.checkout.driving_adapter.step.base_step import BaseCheckoutStep


class BoardingPointsStep(BaseCheckoutStep):
    step_name = CheckoutStepName.BOARDING_POINTS

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.boarding_point_id: Optional[str] = None
        self.dropping_point_id: Optional[str] = None

    async def enter(self, payload: Mapping[str, Any]) -> BookingDraft:
        draft = await super().enter(payload)
        # Coming back to this step keeps the earlier choice
        self.boarding_point_id = draft.boarding_point_id
        self.dropping_point_id = draft.dropping_point_id
        return draft

    @property
    def boarding_points(self) -> tuple[RoutePoint, ...]:
        return self.draft.route.boarding_points

    @property
    def dropping_points(self) -> tuple[RoutePoint, ...]:
        return self.draft.route.dropping_points

    def select_boarding_point(self, point_id: str) -> None:
        if self.boarding_points and self.draft.route.find_boarding_point(point_id) is None:
            raise CheckoutValidationError(f'Unknown boarding point: {point_id}')
        self.boarding_point_id = point_id

    def select_dropping_point(self, point_id: str) -> None:
        if self.dropping_points and self.draft.route.find_dropping_point(point_id) is None:
            raise CheckoutValidationError(f'Unknown dropping point: {point_id}')
        self.dropping_point_id = point_id

    @property
    def can_advance(self) -> bool:
        return bool(self.boarding_point_id and self.dropping_point_id) and not self.blocked

    @Logger.io
    def proceed(self) -> dict[str, Any]:
        draft = self.draft
        if not self.boarding_point_id or not self.dropping_point_id:
            raise CheckoutValidationError('Please select both boarding and dropping points')
        draft = draft.with_route_points(
            boarding_point_id=self.boarding_point_id,
            dropping_point_id=self.dropping_point_id,
        )
        return self._advance(CheckoutStepName.PASSENGER_INFORMATION, draft)
