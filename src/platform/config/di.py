"""
https://python-dependency-injector.ets-labs.org/index.html

The host app overrides `navigator`, `payment_gateway` and `ticket_file_saver`
with its platform implementations before building any step.
"""

from dependency_injector import containers, providers
import httpx

from src.platform.config.core_setting import Settings
from src.platform.state.local_kv_store import LocalKeyValueStore
from src.service.checkout.app.command.cancel_booking_use_case import CancelBookingUseCase
from src.service.checkout.app.command.confirm_seat_selection_use_case import (
    ConfirmSeatSelectionUseCase,
)
from src.service.checkout.app.command.coupon_use_case import CouponUseCase
from src.service.checkout.app.command.download_ticket_use_case import DownloadTicketUseCase
from src.service.checkout.app.command.pay_for_draft_use_case import PayForDraftUseCase
from src.service.checkout.app.command.recover_draft_seats_use_case import (
    RecoverDraftSeatsUseCase,
)
from src.service.checkout.app.interface.i_navigator import INavigator
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.app.interface.i_ticket_file_saver import ITicketFileSaver
from src.service.checkout.app.query.list_bookings_use_case import ListBookingsUseCase
from src.service.checkout.app.query.list_trip_coupons_use_case import ListTripCouponsUseCase
from src.service.checkout.app.query.load_seat_map_use_case import LoadSeatMapUseCase
from src.service.checkout.app.query.search_trips_use_case import SearchTripsUseCase
from src.service.checkout.domain.fare_domain import FareCalculator
from src.service.checkout.domain.seat_layout_domain import SeatLayoutEngine
from src.service.checkout.driven_adapter.http.booking_api_client_impl import BookingApiClientImpl
from src.service.checkout.driven_adapter.storage.auth_token_store_impl import AuthTokenStoreImpl
from src.service.checkout.driven_adapter.storage.draft_backup_store_impl import (
    DraftBackupStoreImpl,
)
from src.service.checkout.driving_adapter.step.boarding_points_step import BoardingPointsStep
from src.service.checkout.driving_adapter.step.passenger_step import PassengerStep
from src.service.checkout.driving_adapter.step.payment_step import PaymentStep
from src.service.checkout.driving_adapter.step.seat_selection_step import SeatSelectionStep


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Host capabilities (no default implementation)
    navigator = providers.Dependency(instance_of=INavigator)
    payment_gateway = providers.Dependency(instance_of=IPaymentGateway)
    ticket_file_saver = providers.Dependency(instance_of=ITicketFileSaver)

    # Infrastructure
    http_client = providers.Singleton(
        httpx.AsyncClient,
        base_url=config_service.provided.API_BASE_URL,
        timeout=config_service.provided.API_TIMEOUT_SECONDS,
    )
    kv_store = providers.Singleton(
        LocalKeyValueStore, storage_dir=config_service.provided.STORAGE_DIR
    )

    # Driven adapters
    auth_token_store = providers.Singleton(AuthTokenStoreImpl, kv_store=kv_store)
    draft_backup_store = providers.Singleton(DraftBackupStoreImpl, kv_store=kv_store)
    booking_api_client = providers.Singleton(
        BookingApiClientImpl, http_client=http_client, token_store=auth_token_store
    )

    # Domain services (stateless)
    fare_calculator = providers.Singleton(
        FareCalculator,
        tax_rate=config_service.provided.TAX_RATE,
        service_fee=config_service.provided.SERVICE_FEE,
        default_seat_fare=config_service.provided.DEFAULT_SEAT_FARE,
    )
    seat_layout_engine = providers.Singleton(
        SeatLayoutEngine,
        cell_size=config_service.provided.SEAT_CELL_SIZE,
        gap=config_service.provided.SEAT_GAP,
    )

    # Use cases (stateless, can be Singleton)
    search_trips_use_case = providers.Singleton(
        SearchTripsUseCase,
        api_client=booking_api_client,
        display_currency_rate=config_service.provided.DISPLAY_CURRENCY_RATE,
    )
    load_seat_map_use_case = providers.Singleton(LoadSeatMapUseCase, api_client=booking_api_client)
    confirm_seat_selection_use_case = providers.Singleton(
        ConfirmSeatSelectionUseCase, backup_store=draft_backup_store
    )
    recover_draft_seats_use_case = providers.Singleton(
        RecoverDraftSeatsUseCase, backup_store=draft_backup_store
    )
    coupon_use_case = providers.Singleton(CouponUseCase, api_client=booking_api_client)
    list_trip_coupons_use_case = providers.Singleton(
        ListTripCouponsUseCase, api_client=booking_api_client
    )
    list_bookings_use_case = providers.Singleton(
        ListBookingsUseCase,
        api_client=booking_api_client,
        page_size=config_service.provided.BOOKINGS_PAGE_SIZE,
    )
    cancel_booking_use_case = providers.Singleton(
        CancelBookingUseCase, api_client=booking_api_client
    )
    download_ticket_use_case = providers.Singleton(
        DownloadTicketUseCase, api_client=booking_api_client, file_saver=ticket_file_saver
    )

    # Payment holds one session per attempt chain, so each payment step gets its own
    pay_for_draft_use_case = providers.Factory(
        PayForDraftUseCase, api_client=booking_api_client, gateway=payment_gateway
    )

    # Steps (one per screen visit)
    seat_selection_step = providers.Factory(
        SeatSelectionStep,
        navigator=navigator,
        recover_draft_seats_use_case=recover_draft_seats_use_case,
        load_seat_map_use_case=load_seat_map_use_case,
        confirm_seat_selection_use_case=confirm_seat_selection_use_case,
        layout_engine=seat_layout_engine,
        fare_calculator=fare_calculator,
    )
    boarding_points_step = providers.Factory(
        BoardingPointsStep,
        navigator=navigator,
        recover_draft_seats_use_case=recover_draft_seats_use_case,
    )
    passenger_step = providers.Factory(
        PassengerStep,
        navigator=navigator,
        recover_draft_seats_use_case=recover_draft_seats_use_case,
    )
    payment_step = providers.Factory(
        PaymentStep,
        navigator=navigator,
        recover_draft_seats_use_case=recover_draft_seats_use_case,
        fare_calculator=fare_calculator,
        coupon_use_case=coupon_use_case,
        list_trip_coupons_use_case=list_trip_coupons_use_case,
        pay_for_draft_use_case=pay_for_draft_use_case,
        backup_store=draft_backup_store,
        display_currency_rate=config_service.provided.DISPLAY_CURRENCY_RATE,
    )


container = Container()


def setup() -> None:
    container.config_service()


async def cleanup() -> None:
    http_client = container.http_client()
    await http_client.aclose()
    container.reset_singletons()
