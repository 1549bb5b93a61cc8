from __future__ import annotations
"""Status poller — the only timer in a generation attempt.

Queries job status at a fixed cadence until the job turns terminal. A failed
status query ends the attempt; there is no retry of the check itself.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Union

import httpx

from avatarcast.config import Settings, get_settings
from avatarcast.schemas.job import Job, JobStatus
from avatarcast.services.errors import (
    JobFailedError,
    MissingAssetError,
    PollCancelledError,
    PollTimeoutError,
)
from avatarcast.services.providers import avatar_video

logger = logging.getLogger(__name__)

OnUpdate = Callable[[Job], Union[Awaitable[None], None]]


async def watch(
    credential: str,
    job_id: str,
    on_update: OnUpdate | None = None,
    *,
    stop: asyncio.Event | None = None,
    job: Job | None = None,
    http_client: httpx.AsyncClient | None = None,
    settings: Settings | None = None,
) -> Job:
    """Poll until ``job_id`` is complete and return the finished Job.

    Raises:
        JobFailedError: the service reported ``failed``.
        MissingAssetError: ``complete`` without a ``download`` URL.
        PollTimeoutError: ``POLL_TIMEOUT`` elapsed first.
        PollCancelledError: ``stop`` was set; no further query or callback runs.

    Pass ``job`` to have the caller's record updated in place.
    """
    settings = settings or get_settings()
    stop = stop or asyncio.Event()
    job = job or Job(id=job_id)
    loop = asyncio.get_running_loop()
    started = loop.time()

    while True:
        if await _pause(stop, settings.POLL_INTERVAL):
            raise PollCancelledError(f"Polling of job {job_id} cancelled")

        payload = await avatar_video.get_video_status(
            credential, job_id, http_client=http_client, settings=settings,
        )
        if stop.is_set():
            raise PollCancelledError(f"Polling of job {job_id} cancelled")

        previous = job.status
        job.apply(payload)
        if job.status is not previous:
            logger.info("Job %s: %s -> %s", job_id, previous.value, job.status.value)

        if on_update is not None:
            result = on_update(job)
            if inspect.isawaitable(result):
                await result

        if job.status is JobStatus.COMPLETE:
            if not job.primary_asset_url:
                raise MissingAssetError("Video completed but no download URL found.")
            return job
        if job.status is JobStatus.FAILED:
            raise JobFailedError("Video generation failed.")

        elapsed = loop.time() - started
        if settings.POLL_TIMEOUT and elapsed >= settings.POLL_TIMEOUT:
            raise PollTimeoutError(
                f"Video job {job_id} still {job.status.value} after {int(elapsed)}s"
            )


async def _pause(stop: asyncio.Event, seconds: float) -> bool:
    """Sleep for ``seconds`` unless ``stop`` fires first. Returns True if stopped."""
    if stop.is_set():
        return True
    try:
        await asyncio.wait_for(stop.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True
