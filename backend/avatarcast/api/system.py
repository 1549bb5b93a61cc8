"""System status endpoint."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter

from avatarcast.config import get_settings
from avatarcast.services.credentials import RedisCredentialStore, get_credential_store

router = APIRouter()


async def _check_credential_store() -> dict[str, Any]:
    """Check that the credential backend answers."""
    store = get_credential_store()
    if not isinstance(store, RedisCredentialStore):
        return {"status": "ok", "backend": type(store).__name__}

    t0 = time.time()
    try:
        ok = await store.ping()
        return {
            "status": "ok" if ok else "error",
            "backend": "redis",
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
    except Exception as e:
        return {"status": "error", "backend": "redis", "error": str(e)}


@router.get("/status")
async def system_status():
    """Settings summary and credential store reachability."""
    settings = get_settings()
    return {
        "video_api": settings.VIDEO_API_BASE,
        "poll_interval": settings.POLL_INTERVAL,
        "poll_timeout": settings.POLL_TIMEOUT,
        "test_mode": settings.VIDEO_TEST_MODE,
        "credential_store": await _check_credential_store(),
    }
