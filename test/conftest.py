"""
Test Configuration and Fixtures

This module provides:
- Environment setup before any application module reads settings
- Shared builders for seats, drafts and routes
- A tmp-path backed LocalKeyValueStore

Architecture:
- Unit tests (test/**/unit/): every collaborator is an AsyncMock or an in-memory double
- HTTP adapter tests: httpx.MockTransport, no network
"""

# =============================================================================
# CRITICAL: Environment setup MUST happen before any other imports
# Settings and the loguru sinks read the environment at import time
# =============================================================================
import os
from pathlib import Path
import tempfile


def _early_setup_test_environment() -> None:
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    os.environ['STORAGE_DIR'] = tempfile.mkdtemp(prefix='checkout_state_')
    os.environ['API_BASE_URL'] = 'https://backend.test'
    os.environ.setdefault('DEBUG', 'true')
    os.environ.setdefault('DEPLOY_ENV', 'test')


# Call immediately to set env vars before any imports
_early_setup_test_environment()

from typing import Any, Callable  # noqa: E402

import pytest  # noqa: E402

from src.platform.state.local_kv_store import LocalKeyValueStore  # noqa: E402
from src.service.checkout.domain.booking_draft import BookingDraft  # noqa: E402
from src.service.checkout.domain.entity.seat_entity import Seat  # noqa: E402
from src.service.checkout.domain.enum import Deck, PaymentMethod  # noqa: E402
from src.service.checkout.domain.value_object import (  # noqa: E402
    ContactDetails,
    Passenger,
    RouteInfo,
    RoutePoint,
)


def _make_seat(seat_id: str, row: int = 0, column: int = 0, **kwargs: Any) -> Seat:
    kwargs.setdefault('deck', Deck.LOWER)
    kwargs.setdefault('type', 'SEATER')
    kwargs.setdefault('seat_number', seat_id.upper())
    return Seat(id=seat_id, row=row, column=column, **kwargs)


def _make_route() -> RouteInfo:
    return RouteInfo(
        boarding_points=(
            RoutePoint(id='bp-1', name='Kalanki', time='06:00'),
            RoutePoint(id='bp-2', name='Balkhu', time='06:20'),
        ),
        dropping_points=(RoutePoint(id='dp-1', name='Pokhara Bus Park', time='13:00'),),
    )


def _make_ready_draft(seat_count: int = 2) -> BookingDraft:
    """A draft that passes validate_for_payment"""
    seats = tuple(_make_seat(f's{i}', 0, i) for i in range(1, seat_count + 1))
    return BookingDraft(
        trip_id='trip-1',
        from_stop_id='stop-ktm',
        to_stop_id='stop-pkr',
        seats=seats,
        route=_make_route(),
        per_seat_fare=520,
        boarding_point_id='bp-1',
        dropping_point_id='dp-1',
        passengers=tuple(
            Passenger(seat_id=seat.id, name=f'Passenger {i}', age=30, gender='Female')
            for i, seat in enumerate(seats, start=1)
        ),
        contact=ContactDetails(phone='9800000000', email='buyer@example.com'),
        payment_method=PaymentMethod.UPI,
    )


@pytest.fixture
def kv_store(tmp_path: Path) -> LocalKeyValueStore:
    return LocalKeyValueStore(storage_dir=str(tmp_path / 'state'))


@pytest.fixture
def make_seat() -> Callable[..., Seat]:
    return _make_seat


@pytest.fixture
def route() -> RouteInfo:
    return _make_route()


@pytest.fixture
def make_ready_draft() -> Callable[..., BookingDraft]:
    return _make_ready_draft
