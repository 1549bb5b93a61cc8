"""Job submitter — one ``POST /videos`` per request, never retried.

Repeated submission may be billed, so retrying is left to the caller.
"""

from __future__ import annotations

import logging

import httpx

from avatarcast.config import Settings
from avatarcast.schemas.job import JobRequest
from avatarcast.services.errors import AuthError, RemoteError
from avatarcast.services.providers import avatar_video

logger = logging.getLogger(__name__)


async def submit(
    credential: str | None,
    request: JobRequest,
    *,
    http_client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> str:
    """Create a remote render job and return its id."""
    if not credential:
        raise AuthError("No API key configured")

    data = await avatar_video.create_video(
        credential, request, http_client=http_client, settings=settings,
    )
    job_id = data.get("id")
    if not job_id:
        raise RemoteError(f"Video service returned no job id: {data}")

    logger.info("Video job created: %s (title=%r)", job_id, request.title)
    return str(job_id)
