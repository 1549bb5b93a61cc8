from __future__ import annotations

import asyncio

import httpx
import pytest

from avatarcast.schemas.job import Job, JobStatus
from avatarcast.services.errors import (
    AuthError,
    JobFailedError,
    MissingAssetError,
    NetworkError,
    PollCancelledError,
    PollTimeoutError,
)
from avatarcast.services.poller import watch

from conftest import THUMB_URL, VIDEO_URL, FakeVideoService


@pytest.mark.anyio
async def test_watch_returns_complete_job_with_assets(settings):
    service = FakeVideoService([
        {"status": "queued"},
        {"status": "in_progress"},
        {"status": "complete", "download": VIDEO_URL, "thumbnail": THUMB_URL},
    ])
    seen = []

    async with service.client() as client:
        job = await watch("k", "job-1", lambda j: seen.append(j.status), http_client=client, settings=settings)

    assert job.status is JobStatus.COMPLETE
    assert job.primary_asset_url == VIDEO_URL
    assert job.fallback_asset_url == THUMB_URL
    assert seen == [JobStatus.QUEUED, JobStatus.PROCESSING, JobStatus.COMPLETE]
    assert service.status_queries == 3


@pytest.mark.anyio
async def test_watch_accepts_async_callback(settings):
    service = FakeVideoService([{"status": "complete", "download": VIDEO_URL}])
    seen = []

    async def on_update(job):
        seen.append(job.id)

    async with service.client() as client:
        await watch("k", "job-1", on_update, http_client=client, settings=settings)

    assert seen == ["job-1"]


@pytest.mark.anyio
async def test_watch_stops_on_failed_status(settings):
    service = FakeVideoService([{"status": "in_progress"}, {"status": "failed"}, {"status": "complete"}])

    async with service.client() as client:
        with pytest.raises(JobFailedError):
            await watch("k", "job-1", http_client=client, settings=settings)

    assert service.status_queries == 2


@pytest.mark.anyio
async def test_complete_without_download_is_missing_asset(settings):
    service = FakeVideoService([{"status": "complete", "thumbnail": THUMB_URL}])

    async with service.client() as client:
        with pytest.raises(MissingAssetError):
            await watch("k", "job-1", http_client=client, settings=settings)


@pytest.mark.anyio
async def test_query_transport_failure_ends_polling(settings):
    service = FakeVideoService([
        {"status": "in_progress"},
        httpx.ReadTimeout("timed out"),
        {"status": "complete", "download": VIDEO_URL},
    ])

    async with service.client() as client:
        with pytest.raises(NetworkError):
            await watch("k", "job-1", http_client=client, settings=settings)

    assert service.status_queries == 2


@pytest.mark.anyio
async def test_rejected_credential_during_poll(settings):
    def handler(request):
        return httpx.Response(401, json={"message": "unauthorized"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(AuthError):
            await watch("k", "job-1", http_client=client, settings=settings)


@pytest.mark.anyio
async def test_stop_before_first_tick_issues_no_query(settings):
    service = FakeVideoService([{"status": "in_progress"}])
    stop = asyncio.Event()
    stop.set()

    async with service.client() as client:
        with pytest.raises(PollCancelledError):
            await watch("k", "job-1", stop=stop, http_client=client, settings=settings)

    assert service.status_queries == 0


@pytest.mark.anyio
async def test_stop_mid_poll_halts_queries_and_callbacks(settings):
    service = FakeVideoService([{"status": "in_progress"}])
    stop = asyncio.Event()
    updates = []

    def on_update(job):
        updates.append(job.status)
        if len(updates) == 2:
            stop.set()

    slow = settings.model_copy(update={"POLL_INTERVAL": 0.01})
    async with service.client() as client:
        with pytest.raises(PollCancelledError):
            await watch("k", "job-1", on_update, stop=stop, http_client=client, settings=slow)

    assert service.status_queries == 2
    assert len(updates) == 2


@pytest.mark.anyio
async def test_poll_timeout_bounds_the_wait(settings):
    service = FakeVideoService([{"status": "in_progress"}])
    bounded = settings.model_copy(update={"POLL_INTERVAL": 0.01, "POLL_TIMEOUT": 0.03})

    async with service.client() as client:
        with pytest.raises(PollTimeoutError):
            await watch("k", "job-1", http_client=client, settings=bounded)

    assert service.status_queries >= 1


@pytest.mark.anyio
async def test_status_redirect_loop_is_network_error(settings):
    def handler(request):
        raise httpx.TooManyRedirects("redirect loop")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        with pytest.raises(NetworkError):
            await watch("k", "job-1", http_client=client, settings=settings)


@pytest.mark.anyio
async def test_watch_updates_callers_job_in_place(settings):
    service = FakeVideoService([{"status": "in_progress"}, {"status": "complete", "download": VIDEO_URL}])
    job = Job(id="job-1")
    statuses = []

    async with service.client() as client:
        result = await watch(
            "k", "job-1", lambda _: statuses.append(job.status),
            job=job, http_client=client, settings=settings,
        )

    assert result is job
    assert statuses == [JobStatus.PROCESSING, JobStatus.COMPLETE]
