from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.app.interface.i_ticket_file_saver import ITicketFileSaver
from src.service.checkout.domain.checkout_errors import CheckoutValidationError


TICKET_MIME_TYPE = 'application/pdf'


def ticket_filename(booking_group_id: str) -> str:
    return f'ticket-{booking_group_id}.pdf'


class DownloadTicketUseCase:
    """Fetch the ticket document for a booking group and hand it to the platform saver."""

    def __init__(self, *, api_client: IBookingApiClient, file_saver: ITicketFileSaver) -> None:
        self.api_client = api_client
        self.file_saver = file_saver

    @Logger.io
    async def execute(self, *, booking_group_id: str) -> str:
        if not booking_group_id:
            raise CheckoutValidationError('Booking group id is required')

        content = await self.api_client.download_ticket(booking_group_id=booking_group_id)
        location = await self.file_saver.save(
            filename=ticket_filename(booking_group_id),
            content=content,
            mime_type=TICKET_MIME_TYPE,
        )
        Logger.base.info(f'🎫 [TICKET] {len(content)} bytes saved to {location}')
        return location
