"""Avatar video REST client.

  POST {base}/videos       → {id, ...}
  GET  {base}/videos/{id}  → {status, download?, thumbnail?|thumbnail_url?}

The API key goes into the ``Authorization`` header verbatim (no scheme).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from avatarcast.config import Settings, get_settings
from avatarcast.schemas.job import JobRequest
from avatarcast.services.errors import AuthError, NetworkError, RemoteError

logger = logging.getLogger(__name__)


def build_video_payload(request: JobRequest, settings: Settings) -> dict[str, Any]:
    """Render a JobRequest as the ``POST /videos`` body."""
    return {
        "title": request.title,
        "description": request.description,
        "visibility": settings.VIDEO_VISIBILITY,
        "test": settings.VIDEO_TEST_MODE,
        "input": [
            {
                "scriptText": request.script_text,
                "avatar": request.avatar_id,
                "background": request.background,
            },
        ],
    }


async def create_video(
    api_key: str,
    request: JobRequest,
    *,
    http_client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Create a render job. Returns the decoded response body."""
    settings = settings or get_settings()
    url = f"{settings.VIDEO_API_BASE}/videos"
    headers = {
        "Authorization": api_key,
        "Content-Type": "application/json",
    }
    return await _call(
        "POST", url, headers,
        json=build_video_payload(request, settings),
        http_client=http_client,
        timeout=settings.VIDEO_API_TIMEOUT,
    )


async def get_video_status(
    api_key: str,
    video_id: str,
    *,
    http_client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> dict[str, Any]:
    """Fetch the current state of a render job."""
    settings = settings or get_settings()
    url = f"{settings.VIDEO_API_BASE}/videos/{video_id}"
    return await _call(
        "GET", url, {"Authorization": api_key},
        http_client=http_client,
        timeout=settings.VIDEO_API_TIMEOUT,
    )


async def _call(
    method: str,
    url: str,
    headers: dict[str, str],
    *,
    json: dict[str, Any] | None = None,
    http_client: httpx.AsyncClient | None,
    timeout: float,
) -> dict[str, Any]:
    """Send one request and map httpx failures onto the error taxonomy."""
    client = http_client or httpx.AsyncClient(timeout=timeout)
    own_client = http_client is None

    try:
        resp = await client.request(method, url, headers=headers, json=json)
    except httpx.HTTPError as e:
        logger.error("Video API %s %s transport error: %s", method, url, e)
        raise NetworkError(f"Could not reach video service: {e}") from e
    finally:
        if own_client:
            await client.aclose()

    if resp.status_code in (401, 403):
        raise AuthError(f"Video service rejected the API key ({resp.status_code})")
    if resp.is_error:
        detail = _error_detail(resp)
        logger.error("Video API %s %s -> %d: %s", method, url, resp.status_code, detail)
        raise RemoteError(
            f"Video service error {resp.status_code}: {detail}",
            status_code=resp.status_code,
        )

    try:
        data = resp.json()
    except ValueError as e:
        raise RemoteError(f"Video service returned invalid JSON: {e}", resp.status_code) from e
    if not isinstance(data, dict):
        raise RemoteError(f"Video service returned unexpected body: {data!r}", resp.status_code)
    return data


def _error_detail(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text[:200] or resp.reason_phrase
    if isinstance(body, dict):
        return str(body.get("context") or body.get("message") or body.get("error") or body)
    return str(body)
