from abc import ABC, abstractmethod
from typing import Optional


class IAuthTokenStore(ABC):
    @abstractmethod
    async def get_token(self) -> Optional[str]:
        pass

    @abstractmethod
    async def save_token(self, token: str) -> None:
        pass

    @abstractmethod
    async def clear_token(self) -> None:
        pass
