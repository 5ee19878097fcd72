from typing import Any, Mapping, Optional

from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.command.confirm_seat_selection_use_case import (
    ConfirmSeatSelectionUseCase,
)
from src.service.checkout.app.command.recover_draft_seats_use_case import (
    RecoverDraftSeatsUseCase,
)
from src.service.checkout.app.interface.i_navigator import INavigator
from src.service.checkout.app.query.load_seat_map_use_case import LoadSeatMapUseCase
from src.service.checkout.domain.booking_draft import BookingDraft
from src.service.checkout.domain.checkout_errors import EmptyDeckError, StateConsistencyError
from src.service.checkout.domain.enum import CheckoutStepName, Deck, SeatState
from src.service.checkout.domain.fare_domain import FareCalculator
from src.service.checkout.domain.seat_catalog import SeatCatalog
from src.service.checkout.domain.seat_layout_domain import SeatLayoutEngine
from src.service.checkout.domain.seat_selection_domain import SeatSelection
from src.service.checkout.domain.value_object import DeckLayout, RouteInfo
from src.service.checkout.driving_adapter.step.base_step import BaseCheckoutStep


class SeatSelectionStep(BaseCheckoutStep):
    step_name = CheckoutStepName.SEAT_SELECTION
    requires_seats = False

    def __init__(
        self,
        *,
        navigator: INavigator,
        recover_draft_seats_use_case: RecoverDraftSeatsUseCase,
        load_seat_map_use_case: LoadSeatMapUseCase,
        confirm_seat_selection_use_case: ConfirmSeatSelectionUseCase,
        layout_engine: SeatLayoutEngine,
        fare_calculator: FareCalculator,
    ) -> None:
        super().__init__(
            navigator=navigator, recover_draft_seats_use_case=recover_draft_seats_use_case
        )
        self.load_seat_map_use_case = load_seat_map_use_case
        self.confirm_seat_selection_use_case = confirm_seat_selection_use_case
        self.layout_engine = layout_engine
        self.fare_calculator = fare_calculator
        self.catalog: Optional[SeatCatalog] = None
        self.selection: Optional[SeatSelection] = None
        self.layouts: dict[Deck, DeckLayout] = {}
        self.skipped_seat_ids: list[str] = []

    async def enter(self, payload: Mapping[str, Any]) -> BookingDraft:
        self.catalog = None
        self.selection = None
        self.layouts = {}
        draft = await super().enter(payload)
        await self.reload()
        return draft

    @Logger.io
    async def reload(self) -> SeatCatalog:
        """Fetch a fresh seat map, keeping whatever was selected before."""
        draft = self.draft
        catalog = await self._guarded(
            'load_seat_map',
            lambda: self.load_seat_map_use_case.execute(
                trip_id=draft.trip_id,
                from_stop_id=draft.from_stop_id,
                to_stop_id=draft.to_stop_id,
            ),
        )
        previously_selected = (
            self.selection.selected_ids() if self.selection is not None else draft.seat_ids
        )
        selection = SeatSelection(catalog.seats)
        self.skipped_seat_ids = selection.preselect(previously_selected)
        if self.skipped_seat_ids:
            Logger.base.warning(
                f'⚠️ [SEAT MAP] No longer selectable: {", ".join(self.skipped_seat_ids)}'
            )

        self.catalog = catalog
        self.selection = selection
        self.layouts = {
            deck: self.layout_engine.layout_deck(
                catalog.seats_on(deck),
                deck=deck,
                grid_rows=catalog.grid_rows,
                grid_columns=catalog.grid_columns,
            )
            for deck in catalog.decks
        }
        if catalog.route != RouteInfo():
            self._draft = draft.with_route(catalog.route)
        return catalog

    def _require_selection(self) -> SeatSelection:
        if self.selection is None:
            raise StateConsistencyError('Seat map has not been loaded')
        return self.selection

    def layout_for(self, deck: Deck) -> DeckLayout:
        """
        Raises:
            StateConsistencyError: seat map has not been loaded
            EmptyDeckError: the bus has no seats on this deck
        """
        if self.catalog is None:
            raise StateConsistencyError('Seat map has not been loaded')
        try:
            return self.layouts[deck]
        except KeyError:
            raise EmptyDeckError(deck)

    def toggle(self, seat_id: str) -> SeatState:
        return self._require_selection().toggle(seat_id)

    @property
    def can_advance(self) -> bool:
        return self.selection is not None and self.selection.can_advance

    def current_total(self) -> Optional[int]:
        """Running total for the summary bar; None while nothing is selected."""
        selection = self._require_selection()
        if not selection.can_advance:
            return None
        draft = self.draft
        return self.fare_calculator.calculate(
            selection.resolve_selected(), route=draft.route, per_seat_fare=draft.per_seat_fare
        ).total

    @Logger.io
    async def proceed(self) -> dict[str, Any]:
        selection = self._require_selection()
        draft = await self._guarded(
            'confirm_seats',
            lambda: self.confirm_seat_selection_use_case.execute(
                draft=self.draft, selection=selection
            ),
        )
        return self._advance(CheckoutStepName.BOARDING_POINTS, draft)
