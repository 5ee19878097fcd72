"""
Unit tests for the steps before payment

Test Coverage:
1. Seat selection: preselect on entry, toggle, running total, confirm + advance
2. Stale seat map discarded after the step was left
3. Seat recovery on entry; unrecoverable draft blocks the step
4. Boarding points: both required, unknown ids rejected
5. Passenger information: per-seat forms, contact, advance to payment
"""

from unittest.mock import AsyncMock, MagicMock

import attrs
import pytest

from src.platform.exception.exceptions import NotFoundError
from src.service.checkout.app.command.confirm_seat_selection_use_case import (
    ConfirmSeatSelectionUseCase,
)
from src.service.checkout.app.command.recover_draft_seats_use_case import (
    RecoverDraftSeatsUseCase,
)
from src.service.checkout.app.dto.draft_payload_dto import CheckoutPayload
from src.service.checkout.domain.checkout_errors import (
    CheckoutValidationError,
    DraftUnrecoverableError,
    EmptyDeckError,
    SeatNotSelectableError,
    StaleResponseError,
    StateConsistencyError,
)
from src.service.checkout.domain.enum import CheckoutStepName, Deck, SeatState
from src.service.checkout.domain.fare_domain import FareCalculator
from src.service.checkout.domain.seat_catalog import SeatCatalog
from src.service.checkout.domain.seat_layout_domain import SeatLayoutEngine
from src.service.checkout.driving_adapter.step.boarding_points_step import BoardingPointsStep
from src.service.checkout.driving_adapter.step.passenger_step import PassengerStep
from src.service.checkout.driving_adapter.step.seat_selection_step import SeatSelectionStep


pytestmark = pytest.mark.unit


def _payload(draft) -> dict:
    return CheckoutPayload.from_draft(draft).to_payload()


class TestSeatSelectionStep:
    @pytest.fixture(autouse=True)
    def _build(self, make_seat, route):
        self.navigator = MagicMock()
        self.backup_store = AsyncMock()
        self.catalog = SeatCatalog(
            trip_id='trip-1',
            from_stop_id='stop-ktm',
            to_stop_id='stop-pkr',
            seats=(
                make_seat('s1', 0, 0),
                make_seat('s2', 0, 1),
                make_seat('s3', 0, 2, is_available=False),
            ),
            route=route,
        )
        self.load_seat_map_use_case = AsyncMock()
        self.load_seat_map_use_case.execute.return_value = self.catalog
        self.step = SeatSelectionStep(
            navigator=self.navigator,
            recover_draft_seats_use_case=RecoverDraftSeatsUseCase(backup_store=self.backup_store),
            load_seat_map_use_case=self.load_seat_map_use_case,
            confirm_seat_selection_use_case=ConfirmSeatSelectionUseCase(
                backup_store=self.backup_store
            ),
            layout_engine=SeatLayoutEngine(cell_size=40, gap=8),
            fare_calculator=FareCalculator(tax_rate=0.12, service_fee=22, default_seat_fare=520),
        )

    @pytest.mark.asyncio
    async def test_enter_loads_map_and_preselects_earlier_seats(self, make_ready_draft):
        # Given: the user comes back with s1 chosen earlier
        draft = make_ready_draft(seat_count=1)

        # When
        await self.step.enter(_payload(draft))

        # Then
        self.load_seat_map_use_case.execute.assert_awaited_once_with(
            trip_id='trip-1', from_stop_id='stop-ktm', to_stop_id='stop-pkr'
        )
        assert self.step.selection.selected_ids() == ['s1']
        assert self.step.skipped_seat_ids == []
        assert set(self.step.layouts) == {Deck.LOWER}
        self.backup_store.load_selected_seats.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_layout_for_deck_without_seats(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft(seat_count=1)))

        assert self.step.layout_for(Deck.LOWER).deck == Deck.LOWER
        with pytest.raises(EmptyDeckError):
            self.step.layout_for(Deck.UPPER)

    @pytest.mark.asyncio
    async def test_seats_booked_meanwhile_are_skipped(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft(seat_count=3)))

        assert self.step.selection.selected_ids() == ['s1', 's2']
        assert self.step.skipped_seat_ids == ['s3']

    @pytest.mark.asyncio
    async def test_toggle_and_running_total(self, make_ready_draft):
        await self.step.enter(_payload(attrs.evolve(make_ready_draft(), seats=(), passengers=())))
        assert self.step.can_advance is False
        assert self.step.current_total() is None

        assert self.step.toggle('s1') == SeatState.SELECTED
        assert self.step.toggle('s2') == SeatState.SELECTED

        # 2 x 520 + 125 tax + 22 service fee
        assert self.step.current_total() == 1187
        with pytest.raises(SeatNotSelectableError):
            self.step.toggle('s3')

    @pytest.mark.asyncio
    async def test_proceed_backs_up_seats_and_advances(self, make_ready_draft):
        await self.step.enter(_payload(attrs.evolve(make_ready_draft(), seats=(), passengers=())))
        self.step.toggle('s2')

        payload = await self.step.proceed()

        saved = self.backup_store.save_selected_seats.await_args.args[0]
        assert [seat.id for seat in saved] == ['s2']
        self.navigator.advance.assert_called_once_with(CheckoutStepName.BOARDING_POINTS, payload)
        assert [seat['id'] for seat in payload['selectedSeats']] == ['s2']
        assert payload['route']['boardingPoints'][0]['id'] == 'bp-1'
        assert self.step.active is False

    @pytest.mark.asyncio
    async def test_proceed_without_seats(self, make_ready_draft):
        await self.step.enter(_payload(attrs.evolve(make_ready_draft(), seats=(), passengers=())))

        with pytest.raises(StateConsistencyError):
            await self.step.proceed()

        self.navigator.advance.assert_not_called()

    @pytest.mark.asyncio
    async def test_seat_map_arriving_after_leave_is_discarded(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft(seat_count=1)))
        loaded = self.step.catalog

        async def _slow_load(**kwargs):
            self.step.leave()
            return attrs.evolve(self.catalog, seats=self.catalog.seats[:1])

        self.load_seat_map_use_case.execute.side_effect = _slow_load

        with pytest.raises(StaleResponseError):
            await self.step.reload()

        assert self.step.catalog is loaded


class TestSeatRecoveryOnEntry:
    def setup_method(self):
        self.navigator = MagicMock()
        self.backup_store = AsyncMock()
        self.step = BoardingPointsStep(
            navigator=self.navigator,
            recover_draft_seats_use_case=RecoverDraftSeatsUseCase(backup_store=self.backup_store),
        )

    @pytest.mark.asyncio
    async def test_missing_seats_are_restored_from_backup(self, make_ready_draft, make_seat):
        self.backup_store.load_selected_seats.return_value = (make_seat('s1'), make_seat('s2', 0, 1))
        draft = attrs.evolve(make_ready_draft(), seats=(), passengers=())

        await self.step.enter(_payload(draft))

        assert self.step.draft.seat_ids == ['s1', 's2']
        assert self.step.blocked is False

    @pytest.mark.asyncio
    async def test_no_backup_blocks_the_step(self, make_ready_draft):
        self.backup_store.load_selected_seats.return_value = None
        draft = attrs.evolve(make_ready_draft(), seats=(), passengers=())

        with pytest.raises(DraftUnrecoverableError):
            await self.step.enter(_payload(draft))

        assert self.step.blocked is True
        assert self.step.can_advance is False
        with pytest.raises(DraftUnrecoverableError):
            self.step.proceed()

        self.step.go_back()
        self.navigator.go_back.assert_called_once_with()
        self.navigator.advance.assert_not_called()

    @pytest.mark.asyncio
    async def test_payload_without_trip_blocks_the_step(self):
        with pytest.raises(StateConsistencyError):
            await self.step.enter({'selectedSeats': []})

        assert self.step.blocked is True


class TestBoardingPointsStep:
    def setup_method(self):
        self.navigator = MagicMock()
        self.step = BoardingPointsStep(
            navigator=self.navigator,
            recover_draft_seats_use_case=RecoverDraftSeatsUseCase(backup_store=AsyncMock()),
        )

    @pytest.fixture
    def fresh_draft(self, make_ready_draft):
        return attrs.evolve(make_ready_draft(), boarding_point_id=None, dropping_point_id=None)

    @pytest.mark.asyncio
    async def test_both_points_required(self, fresh_draft):
        await self.step.enter(_payload(fresh_draft))
        self.step.select_boarding_point('bp-2')

        assert self.step.can_advance is False
        with pytest.raises(CheckoutValidationError):
            self.step.proceed()
        self.navigator.advance.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_point_is_rejected(self, fresh_draft):
        await self.step.enter(_payload(fresh_draft))

        with pytest.raises(CheckoutValidationError):
            self.step.select_boarding_point('bp-9')
        with pytest.raises(CheckoutValidationError):
            self.step.select_dropping_point('bp-1')

    @pytest.mark.asyncio
    async def test_proceed(self, fresh_draft):
        await self.step.enter(_payload(fresh_draft))
        self.step.select_boarding_point('bp-2')
        self.step.select_dropping_point('dp-1')

        payload = self.step.proceed()

        self.navigator.advance.assert_called_once_with(
            CheckoutStepName.PASSENGER_INFORMATION, payload
        )
        assert payload['boardingPointId'] == 'bp-2'
        assert payload['droppingPointId'] == 'dp-1'

    @pytest.mark.asyncio
    async def test_earlier_choice_is_kept(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft()))

        assert self.step.boarding_point_id == 'bp-1'
        assert self.step.can_advance is True


class TestPassengerStep:
    def setup_method(self):
        self.navigator = MagicMock()
        self.step = PassengerStep(
            navigator=self.navigator,
            recover_draft_seats_use_case=RecoverDraftSeatsUseCase(backup_store=AsyncMock()),
        )

    @pytest.mark.asyncio
    async def test_one_form_per_seat(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft(seat_count=3)))

        assert [p.seat_id for p in self.step.passengers] == ['s1', 's2', 's3']

    @pytest.mark.asyncio
    async def test_update_passenger(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft()))

        passenger = self.step.update_passenger(0, name='Asha', age=28)

        assert (passenger.name, passenger.age, passenger.gender) == ('Asha', 28, 'Female')
        with pytest.raises(NotFoundError):
            self.step.update_passenger(5, name='Nobody')
        with pytest.raises(CheckoutValidationError):
            self.step.update_passenger(1, age=0)

    @pytest.mark.asyncio
    async def test_name_is_required(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft()))
        self.step.update_passenger(1, name='   ')

        with pytest.raises(CheckoutValidationError, match='Passenger 2'):
            self.step.proceed()

    @pytest.mark.asyncio
    async def test_contact_is_required(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft()))
        self.step.update_contact(phone='')

        with pytest.raises(CheckoutValidationError):
            self.step.proceed()

    @pytest.mark.asyncio
    async def test_proceed_to_payment(self, make_ready_draft):
        await self.step.enter(_payload(make_ready_draft()))
        self.step.update_passenger(0, name='Asha')
        self.step.update_contact(email='  asha@example.com ')

        payload = self.step.proceed()

        self.navigator.advance.assert_called_once_with(CheckoutStepName.PAYMENT, payload)
        assert payload['passengers'][0]['name'] == 'Asha'
        assert payload['contactDetails']['email'] == 'asha@example.com'
