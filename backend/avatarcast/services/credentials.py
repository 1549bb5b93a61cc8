"""Credential storage — one named secret per key, surviving restarts.

Redis backs the store in deployment; the in-memory store serves tests and
single-process development.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import redis.asyncio as aioredis

from avatarcast.config import Settings, get_settings

logger = logging.getLogger(__name__)

KEY_PREFIX = "avatarcast:credential:"


class CredentialStore(ABC):
    @abstractmethod
    async def get(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        ...


class MemoryCredentialStore(CredentialStore):
    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        self._values[key] = value


class RedisCredentialStore(CredentialStore):
    """Stores secrets as plain string keys under ``KEY_PREFIX``."""

    def __init__(self, client: aioredis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        raw = await self._client.get(f"{KEY_PREFIX}{key}")
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else str(raw)

    async def set(self, key: str, value: str) -> None:
        await self._client.set(f"{KEY_PREFIX}{key}", value)

    async def ping(self) -> bool:
        return bool(await self._client.ping())


# ──────── Process-wide store ────────

_store: CredentialStore | None = None


def get_credential_store(settings: Settings | None = None) -> CredentialStore:
    """Lazy-init the configured credential store (singleton)."""
    global _store
    if _store is None:
        settings = settings or get_settings()
        if settings.CREDENTIAL_BACKEND == "memory":
            _store = MemoryCredentialStore()
        else:
            _store = RedisCredentialStore(aioredis.from_url(settings.REDIS_URL))
        logger.info("Credential store: %s", type(_store).__name__)
    return _store


def set_credential_store(store: CredentialStore | None) -> None:
    """Replace the process-wide store (``None`` resets to the configured one)."""
    global _store
    _store = store
