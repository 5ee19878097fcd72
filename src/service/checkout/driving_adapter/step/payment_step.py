from decimal import Decimal
from typing import Any, Mapping, Optional

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.coupon_use_case import CouponUseCase
from src.service.checkout.app.command.pay_for_draft_use_case import PayForDraftUseCase
from src.service.checkout.app.interface.i_draft_backup_store import IDraftBackupStore
from src.service.checkout.app.query.list_trip_coupons_use_case import ListTripCouponsUseCase
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.enum import CheckoutStepName, PaymentMethod, PaymentState
from src.service.checkout.domain.fare_domain import FareCalculator, to_display_currency
from src.service.checkout.domain.payment_session import PaymentSession
from src.service.checkout.domain.value_object import FareBreakdown
from src.service.checkout.driving_adapter.step.base_step import BaseCheckoutStep


COUPON_ACTION = 'coupon'
PAYMENT_ACTION = 'payment'


class PaymentStep(BaseCheckoutStep):
    """
    Fare summary, coupon entry and payment.

    Coupon edits and payment exclude each other; while a payment is in
    flight the coupon cannot change underneath it.
    """

    step_name = CheckoutStepName.PAYMENT

    def __init__(
        self,
        *,
        fare_calculator: FareCalculator,
        coupon_use_case: CouponUseCase,
        list_trip_coupons_use_case: ListTripCouponsUseCase,
        pay_for_draft_use_case: PayForDraftUseCase,
        backup_store: IDraftBackupStore,
        display_currency_rate: float,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.fare_calculator = fare_calculator
        self.coupon_use_case = coupon_use_case
        self.list_trip_coupons_use_case = list_trip_coupons_use_case
        self.pay_for_draft_use_case = pay_for_draft_use_case
        self.backup_store = backup_store
        self.display_currency_rate = display_currency_rate
        self._fare: Optional[FareBreakdown] = None

    async def enter(self, payload: Mapping[str, Any]) -> BookingDraft:
        self._fare = None
        draft = await super().enter(payload)
        if draft.coupon_code:
            # A coupon from an earlier visit is not re-validated silently; the user re-applies it
            draft = draft.with_coupon_code(None)
            self._draft = draft
        return draft

    @property
    def fare(self) -> FareBreakdown:
        draft = self.draft
        if self._fare is None:
            self._fare = self.fare_calculator.calculate(
                draft.seats, route=draft.route, per_seat_fare=draft.per_seat_fare
            )
        return self._fare

    @property
    def display_total(self) -> Decimal:
        return to_display_currency(self.fare.final_amount, rate=self.display_currency_rate)

    @property
    def session(self) -> PaymentSession:
        return self.pay_for_draft_use_case.session

    @property
    def coupon_pending(self) -> bool:
        return self.guard.is_pending(COUPON_ACTION)

    @property
    def payment_pending(self) -> bool:
        return self.guard.is_pending(PAYMENT_ACTION)

    def select_payment_method(self, method: PaymentMethod) -> None:
        self._draft = self.draft.with_payment_method(method)

    async def list_coupons(self) -> list[dict[str, Any]]:
        trip_id = self.draft.trip_id
        return await self._guarded(
            'list_coupons', lambda: self.list_trip_coupons_use_case.execute(trip_id=trip_id)
        )

    @Logger.io
    async def apply_coupon(self, code: str) -> FareBreakdown:
        trip_id = self.draft.trip_id

        async def _apply() -> FareBreakdown:
            if code.strip():
                # A replacement code drops the active coupon even if the backend rejects it
                self._fare = self.fare.without_coupon()
                self._draft = self.draft.with_coupon_code(None)
            return await self.coupon_use_case.apply(self.fare, code=code, trip_id=trip_id)

        fare = await self._guarded(COUPON_ACTION, _apply)
        self._fare = fare
        self._draft = self.draft.with_coupon_code(fare.coupon_code)
        return fare

    @Logger.io
    async def remove_coupon(self) -> FareBreakdown:
        async def _remove() -> FareBreakdown:
            return self.coupon_use_case.remove(self.fare)

        fare = await self._guarded(COUPON_ACTION, _remove)
        self._fare = fare
        self._draft = self.draft.with_coupon_code(None)
        return fare

    @Logger.io
    async def pay(self) -> PaymentSession:
        """
        Run one payment attempt. On confirmation the seat backup is cleared
        and the booking-confirmed step is opened.
        """
        draft = self.draft
        session = await self._guarded(
            PAYMENT_ACTION,
            lambda: self.pay_for_draft_use_case.execute(draft=draft),
            exclusive=True,
        )
        if session.state == PaymentState.CONFIRMED:
            await self.backup_store.clear()
            self._advance(
                CheckoutStepName.BOOKING_CONFIRMED,
                draft,
                extra={
                    'bookingGroupId': session.booking_group_id,
                    'amountPaid': session.intent.amount if session.intent else None,
                },
            )
        return session
