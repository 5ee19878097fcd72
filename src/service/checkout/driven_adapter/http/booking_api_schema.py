"""Response bodies of the booking backend, as far as the checkout reads them."""

from typing import Any, Optional

from pydantic import AliasChoices, AliasPath, BaseModel, ConfigDict, Field


class _ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra='ignore')


class ErrorResponse(_ResponseModel):
    error_message: Optional[str] = Field(default=None, alias='errorMessage')
    message: Optional[str] = None
    errors: Optional[list[Any] | dict[str, Any]] = None


class CouponResponse(_ResponseModel):
    discount_amount: float = Field(alias='discountAmount')
    final_amount: float = Field(alias='finalAmount')


class InitiatePaymentResponse(_ResponseModel):
    payment_id: str = Field(alias='paymentId')
    order_id: str = Field(alias='orderId')
    amount: float
    currency: str
    gateway_key_id: str = Field(default='', alias='gatewayKeyId')


class VerifyPaymentResponse(_ResponseModel):
    success: bool = False
    booking_group_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices('bookingGroupId', AliasPath('booking', 'bookingGroupId')),
    )
    message: Optional[str] = None


class SearchTripsResponse(_ResponseModel):
    trips: list[dict[str, Any]] = Field(default_factory=list)


class TripCouponsResponse(_ResponseModel):
    coupons: list[dict[str, Any]] = Field(default_factory=list)
