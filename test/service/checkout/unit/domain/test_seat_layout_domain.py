"""
Unit tests for SeatLayoutEngine

Test Coverage:
1. Placement geometry (cell + gap pitch, spans)
2. Origin inference (0-based with grid size, 1-based fallback, no grid size)
3. Determinism and non-overlap
4. Empty deck
"""

import pytest

from src.service.checkout.domain.checkout_errors import EmptyDeckError
from src.service.checkout.domain.enum import Deck
from src.service.checkout.domain.seat_layout_domain import SeatLayoutEngine


pytestmark = pytest.mark.unit


class TestPlacementGeometry:
    def setup_method(self):
        self.engine = SeatLayoutEngine(cell_size=40, gap=8)

    def test_single_and_double_width_seats(self, make_seat):
        # Given: s1 at (0,0) and a double-width s2 next to it
        seats = [make_seat('s1', 0, 0), make_seat('s2', 0, 1, column_span=2)]

        # When
        layout = self.engine.layout_deck(seats, deck=Deck.LOWER)

        # Then
        s1 = layout.placement_for('s1')
        s2 = layout.placement_for('s2')
        assert (s1.left, s1.top, s1.width, s1.height) == (0, 0, 40, 40)
        assert (s2.left, s2.top, s2.width, s2.height) == (48, 0, 88, 40)

    def test_sleeper_spanning_two_rows(self, make_seat):
        seats = [make_seat('a', 0, 0, row_span=2), make_seat('b', 0, 1), make_seat('c', 1, 1)]

        layout = self.engine.layout_deck(seats, deck=Deck.LOWER)

        assert layout.placement_for('a').height == 88
        assert layout.placement_for('c').top == 48
        assert (layout.canvas_width, layout.canvas_height) == (88, 88)

    def test_seats_of_other_deck_are_ignored(self, make_seat):
        seats = [make_seat('l1', 0, 0), make_seat('u1', 0, 0, deck=Deck.UPPER)]

        layout = self.engine.layout_deck(seats, deck=Deck.UPPER)

        assert [p.seat_id for p in layout.placements] == ['u1']

    @pytest.mark.parametrize('cell_size,gap', [(0, 8), (-1, 8), (40, -1)])
    def test_invalid_units_are_rejected(self, cell_size, gap):
        with pytest.raises(ValueError):
            SeatLayoutEngine(cell_size=cell_size, gap=gap)


class TestOriginInference:
    def setup_method(self):
        self.engine = SeatLayoutEngine(cell_size=40, gap=8)

    def test_coordinates_inside_reported_grid_keep_origin_zero(self, make_seat):
        # Given: coordinates start at 1 but the reported grid still contains them
        seats = [make_seat('s1', 1, 1), make_seat('s2', 2, 2)]

        layout = self.engine.layout_deck(seats, deck=Deck.LOWER, grid_rows=4, grid_columns=4)

        # Then: origin stays at 0 and the empty first row/column is preserved
        assert (layout.origin_row, layout.origin_column) == (0, 0)
        assert layout.placement_for('s1').left == 48
        assert layout.used_fallback_origin is False
        assert (layout.total_rows, layout.total_columns) == (4, 4)

    def test_one_based_coordinates_fall_back_to_observed_minimum(self, make_seat):
        # Given: 1-based coordinates that overflow a 2x2 reported grid
        seats = [make_seat('s1', 1, 1), make_seat('s2', 2, 2)]

        layout = self.engine.layout_deck(seats, deck=Deck.LOWER, grid_rows=2, grid_columns=2)

        assert (layout.origin_row, layout.origin_column) == (1, 1)
        assert layout.placement_for('s1').left == 0
        assert layout.placement_for('s2').top == 48
        assert layout.used_fallback_origin is True

    def test_no_reported_grid_uses_observed_bounds(self, make_seat):
        seats = [make_seat('s1', 3, 5), make_seat('s2', 4, 6)]

        layout = self.engine.layout_deck(seats, deck=Deck.LOWER)

        assert (layout.origin_row, layout.origin_column) == (3, 5)
        assert (layout.total_rows, layout.total_columns) == (2, 2)
        assert layout.used_fallback_origin is False


class TestLayoutProperties:
    def setup_method(self):
        self.engine = SeatLayoutEngine(cell_size=40, gap=8)

    def _bus(self, make_seat):
        seats = []
        for row in range(6):
            seats.append(make_seat(f'r{row}-a', row, 0))
            seats.append(make_seat(f'r{row}-b', row, 1))
            seats.append(make_seat(f'r{row}-c', row, 3, column_span=2))
        return seats

    def test_no_two_placements_intersect(self, make_seat):
        layout = self.engine.layout_deck(self._bus(make_seat), deck=Deck.LOWER)

        placements = layout.placements
        for i, first in enumerate(placements):
            for second in placements[i + 1 :]:
                assert not first.intersects(second), (first, second)

    def test_identical_inputs_give_identical_layouts(self, make_seat):
        first = self.engine.layout_deck(self._bus(make_seat), deck=Deck.LOWER, grid_rows=6)
        second = self.engine.layout_deck(self._bus(make_seat), deck=Deck.LOWER, grid_rows=6)

        assert first == second

    def test_empty_deck_raises(self, make_seat):
        with pytest.raises(EmptyDeckError) as exc_info:
            self.engine.layout_deck([make_seat('l1', 0, 0)], deck=Deck.UPPER)

        assert exc_info.value.status_code == 404
        assert 'UPPER' in exc_info.value.message
