from abc import ABC, abstractmethod

from src.service.checkout.domain.value_object import ContactDetails, GatewayResult


class IPaymentGateway(ABC):
    """Third-party checkout SDK or redirect flow"""

    @abstractmethod
    async def open_checkout(
        self,
        *,
        key_id: str,
        order_id: str,
        amount: float,
        currency: str,
        prefill: ContactDetails,
    ) -> GatewayResult:
        """Open the gateway for a backend-issued order; resolve with proof, cancellation or error"""
        pass
