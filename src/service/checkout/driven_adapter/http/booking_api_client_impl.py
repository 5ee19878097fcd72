"""
Booking API Client Implementation

httpx-based client for the booking backend (JSON over HTTPS, bearer auth).

Error mapping:
    - timeout / transport failure -> BackendUnreachableError
    - HTTP status >= 400          -> BackendRejectedError (server message verbatim)
    - 2xx with an unexpected body -> BackendRejectedError (502)
    - authenticated call, no token -> AuthenticationError (no request is sent)
"""

from typing import Any, Optional, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ValidationError

from src.platform.exception.exceptions import AuthenticationError
from src.platform.logging.loguru_io import Logger
from src.service.checkout.app.dto.coupon_dto import CouponQuote
from src.service.checkout.app.interface.i_auth_token_store import IAuthTokenStore
from src.service.checkout.app.interface.i_booking_api_client import IBookingApiClient
from src.service.checkout.domain.checkout_errors import (
    BackendRejectedError,
    BackendUnreachableError,
)
from src.service.checkout.domain.value_object import (
    GatewayProof,
    PaymentIntent,
    VerifyPaymentResult,
)
from src.service.checkout.driven_adapter.http.booking_api_schema import (
    CouponResponse,
    ErrorResponse,
    InitiatePaymentResponse,
    SearchTripsResponse,
    TripCouponsResponse,
    VerifyPaymentResponse,
)


SHOW_BUS = '/user/showbus'
BUS_INFO = '/user/showbusinfo/{trip_id}'
APPLY_COUPON = '/user/booking/apply-coupon'
TRIP_COUPONS = '/user/trip/{trip_id}/coupons'
PAYMENT_INITIATE = '/user/payments/initiate'
PAYMENT_VERIFY = '/user/payments/verify'
MY_BOOKINGS = '/user/mybookings'
CANCEL_TICKET = '/user/cancelticket'
DOWNLOAD_TICKET = '/user/booking/download-ticket/{group_id}'

TIMEOUT_MESSAGE = 'Request timeout. Please check your connection and try again.'
NETWORK_MESSAGE = 'Network error. Please check your connection and ensure the server is running.'

_M = TypeVar('_M', bound=BaseModel)


class BookingApiClientImpl(IBookingApiClient):
    def __init__(self, *, http_client: httpx.AsyncClient, token_store: IAuthTokenStore) -> None:
        self.http_client = http_client
        self.token_store = token_store

    async def _headers(self, *, auth_required: bool) -> dict[str, str]:
        headers = {'Accept': 'application/json'}
        token = await self.token_store.get_token()
        if token:
            headers['Authorization'] = f'Bearer {token}'
        elif auth_required:
            raise AuthenticationError()
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        *,
        auth_required: bool = True,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        headers = await self._headers(auth_required=auth_required)
        content = None
        if json is not None:
            content = orjson.dumps(json)
            headers['Content-Type'] = 'application/json'
        try:
            response = await self.http_client.request(
                method, path, content=content, params=params, headers=headers
            )
        except httpx.TimeoutException as e:
            Logger.base.warning(f'⏱️ [API] {method} {path} timed out: {e!r}')
            raise BackendUnreachableError(TIMEOUT_MESSAGE) from e
        except httpx.TransportError as e:
            Logger.base.warning(f'📡 [API] {method} {path} unreachable: {e!r}')
            raise BackendUnreachableError(NETWORK_MESSAGE) from e

        if response.status_code >= 400:
            raise self._rejected(response)
        return response

    @staticmethod
    def _rejected(response: httpx.Response) -> BackendRejectedError:
        message = f'Request failed with status code {response.status_code}'
        errors = None
        try:
            body = ErrorResponse.model_validate(orjson.loads(response.content))
        except (orjson.JSONDecodeError, ValidationError):
            body = None
        if body is not None:
            message = body.error_message or body.message or message
            errors = body.errors
        Logger.base.warning(f'🚫 [API] {response.request.url.path} -> {response.status_code}: {message}')
        return BackendRejectedError(message, response.status_code, errors)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as e:
            raise BackendRejectedError('Backend returned a malformed response', 502) from e

    @classmethod
    def _parse(cls, response: httpx.Response, model: type[_M]) -> _M:
        try:
            return model.model_validate(cls._json(response))
        except ValidationError as e:
            raise BackendRejectedError(
                f'Backend response did not match {model.__name__}', 502, e.errors()
            ) from e

    @Logger.io
    async def search_trips(self, *, payload: dict[str, Any]) -> list[dict[str, Any]]:
        response = await self._send('POST', SHOW_BUS, auth_required=False, json=payload)
        return self._parse(response, SearchTripsResponse).trips

    @Logger.io
    async def get_bus_info(
        self, *, trip_id: str, from_stop_id: str, to_stop_id: str
    ) -> dict[str, Any]:
        response = await self._send(
            'GET',
            BUS_INFO.format(trip_id=trip_id),
            auth_required=False,
            params={'fromStopId': from_stop_id, 'toStopId': to_stop_id},
        )
        body = self._json(response)
        if not isinstance(body, dict):
            raise BackendRejectedError('Backend returned a malformed bus info response', 502)
        return body

    @Logger.io
    async def apply_coupon(self, *, code: str, trip_id: str, total_amount: float) -> CouponQuote:
        response = await self._send(
            'POST',
            APPLY_COUPON,
            json={'code': code, 'tripId': trip_id, 'totalAmount': total_amount},
        )
        body = self._parse(response, CouponResponse)
        return CouponQuote(discount_amount=body.discount_amount, final_amount=body.final_amount)

    @Logger.io
    async def list_trip_coupons(self, *, trip_id: str) -> list[dict[str, Any]]:
        response = await self._send('GET', TRIP_COUPONS.format(trip_id=trip_id))
        body = self._json(response)
        # Older deployments answer with a bare list
        if isinstance(body, list):
            return body
        try:
            return TripCouponsResponse.model_validate(body).coupons
        except ValidationError as e:
            raise BackendRejectedError('Backend returned a malformed coupon list', 502) from e

    @Logger.io
    async def initiate_payment(self, *, request: dict[str, Any]) -> PaymentIntent:
        response = await self._send('POST', PAYMENT_INITIATE, json=request)
        body = self._parse(response, InitiatePaymentResponse)
        return PaymentIntent(
            payment_id=body.payment_id,
            order_id=body.order_id,
            amount=body.amount,
            currency=body.currency,
            gateway_key_id=body.gateway_key_id,
        )

    @Logger.io
    async def verify_payment(self, *, payment_id: str, proof: GatewayProof) -> VerifyPaymentResult:
        response = await self._send(
            'POST',
            PAYMENT_VERIFY,
            json={
                'paymentId': payment_id,
                'gatewayOrderId': proof.gateway_order_id,
                'gatewayPaymentId': proof.gateway_payment_id,
                'gatewaySignature': proof.gateway_signature,
            },
        )
        body = self._parse(response, VerifyPaymentResponse)
        return VerifyPaymentResult(
            success=body.success, booking_group_id=body.booking_group_id, message=body.message
        )

    @Logger.io
    async def list_bookings(
        self,
        *,
        page: int,
        limit: int,
        status: Optional[str] = None,
        upcoming: Optional[bool] = None,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {'page': page, 'limit': limit}
        if status:
            params['status'] = status
        if upcoming is not None:
            params['upcoming'] = 'true' if upcoming else 'false'
        response = await self._send('GET', MY_BOOKINGS, params=params)
        body = self._json(response)
        if not isinstance(body, dict):
            raise BackendRejectedError('Backend returned a malformed bookings response', 502)
        return body

    @Logger.io
    async def cancel_booking(self, *, booking_group_id: str) -> dict[str, Any]:
        response = await self._send(
            'POST', CANCEL_TICKET, json={'bookingGroupId': booking_group_id}
        )
        body = self._json(response) if response.content else {}
        return body if isinstance(body, dict) else {}

    @Logger.io(truncate_content=True)
    async def download_ticket(self, *, booking_group_id: str) -> bytes:
        response = await self._send('GET', DOWNLOAD_TICKET.format(group_id=booking_group_id))
        if not response.content:
            raise BackendRejectedError('Ticket download returned an empty document', 502)
        return response.content
