from abc import ABC, abstractmethod
from typing import Any

from src.service.checkout.domain.enum import CheckoutStepName


class INavigator(ABC):
    """Host navigation stack; the checkout only ever moves forward with a payload or back."""

    @abstractmethod
    def advance(self, step: CheckoutStepName, payload: dict[str, Any]) -> None:
        pass

    @abstractmethod
    def go_back(self) -> None:
        pass
