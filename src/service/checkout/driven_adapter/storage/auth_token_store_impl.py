from typing import Optional

from src.platform.logging.loguru_io import Logger
from src.platform.state.local_kv_store import LocalKeyValueStore
from src.service.checkout.app.interface.i_auth_token_store import IAuthTokenStore


AUTH_TOKEN_KEY = 'authToken'


class AuthTokenStoreImpl(IAuthTokenStore):
    def __init__(self, *, kv_store: LocalKeyValueStore) -> None:
        self.kv_store = kv_store

    async def get_token(self) -> Optional[str]:
        token = await self.kv_store.get(AUTH_TOKEN_KEY)
        if isinstance(token, str) and token:
            return token
        return None

    @Logger.io
    async def save_token(self, token: str) -> None:
        await self.kv_store.set(AUTH_TOKEN_KEY, token)

    @Logger.io
    async def clear_token(self) -> None:
        await self.kv_store.delete(AUTH_TOKEN_KEY)
