from src.service.checkout.app.interface.i_auth_token_store import IAuthTokenStore
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.app.interface.i_draft_backup_store import IDraftBackupStore
from src.service.checkout.app.interface.i_navigator import INavigator
from src.service.checkout.app.interface.i_payment_gateway import IPaymentGateway
from src.service.checkout.app.interface.i_ticket_file_saver import ITicketFileSaver


__all__ = [
    'IAuthTokenStore',
    'IBookingApiClient',
    'IDraftBackupStore',
    'INavigator',
    'IPaymentGateway',
    'ITicketFileSaver',
]
