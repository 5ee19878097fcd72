"""
Local key-value store for durable client state.

One JSON document per key under a storage directory. Writes go to a temp
file first and are renamed into place, so a crash mid-write leaves the
previous value intact. Concurrent writers to the same key: last writer wins.
"""

from typing import Any
import uuid

import anyio
import orjson

from src.platform.logging.loguru_io import Logger


class LocalKeyValueStore:
    def __init__(self, *, storage_dir: str) -> None:
        self._storage_dir = anyio.Path(storage_dir)

    def _path_for(self, key: str) -> anyio.Path:
        if not key or '/' in key or key.startswith('.'):
            raise ValueError(f'Invalid storage key: {key!r}')
        return self._storage_dir / f'{key}.json'

    @Logger.io(truncate_content=True)
    async def get(self, key: str) -> Any | None:
        path = self._path_for(key)
        try:
            raw = await path.read_bytes()
        except FileNotFoundError:
            return None
        return orjson.loads(raw)

    @Logger.io(truncate_content=True)
    async def set(self, key: str, value: Any) -> None:
        await self._storage_dir.mkdir(parents=True, exist_ok=True)
        path = self._path_for(key)
        tmp_path = self._storage_dir / f'.{key}.{uuid.uuid4().hex}.tmp'
        await tmp_path.write_bytes(orjson.dumps(value))
        await tmp_path.replace(path)

    @Logger.io
    async def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            await path.unlink()
        except FileNotFoundError:
            return
