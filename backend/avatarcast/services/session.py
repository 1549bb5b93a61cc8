"""Generation session — the explicit owner of one UI connection's state.

A session holds at most one in-flight Job and one running attempt task.
Every ``submit-and-track`` request produces exactly one terminal
notification, unless the session is closed first, in which case polling
stops and nothing more is emitted.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx
from pydantic import ValidationError

from avatarcast.config import Settings, get_settings
from avatarcast.schemas.job import Job, JobRequest
from avatarcast.schemas.messages import (
    CredentialValue,
    GenerationDegraded,
    GenerationFailed,
    GenerationProgress,
    GenerationSucceeded,
    GetCredential,
    Notification,
    Notify,
    SaveCredential,
    SubmitAndTrack,
    parse_request,
)
from avatarcast.services import poller, submitter
from avatarcast.services.committer import AssetCommitter
from avatarcast.services.credentials import CredentialStore
from avatarcast.services.errors import AvatarcastError
from avatarcast.services.host import HostDocument
from avatarcast.services.outcomes import Failed, Inserted, InsertedDegraded, Outcome

logger = logging.getLogger(__name__)

Send = Callable[[Notification], Awaitable[None]]


class SessionBusyError(AvatarcastError):
    """A second generation was requested while one is in flight."""


class GenerationSession:
    """One UI connection: credential access plus a single generation at a time."""

    def __init__(
        self,
        host: HostDocument,
        credentials: CredentialStore,
        send: Send,
        *,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.host = host
        self.credentials = credentials
        self.settings = settings or get_settings()
        self.http_client = http_client
        self.committer = AssetCommitter(host, http_client=http_client, settings=self.settings)
        self.job: Job | None = None
        self.closed = False
        self._send = send
        self._task: asyncio.Task | None = None
        self._stop = asyncio.Event()

    async def __aenter__(self) -> "GenerationSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    # ──────── Request dispatch ────────

    async def handle(self, raw: object) -> None:
        """Process one request payload from the UI. Never raises."""
        try:
            message = parse_request(raw)
        except ValidationError as e:
            logger.warning("Rejected malformed request: %s", e)
            await self._emit(GenerationFailed(error=f"Invalid request: {e}"))
            return

        if isinstance(message, SubmitAndTrack):
            await self.start(message)
            return

        try:
            if isinstance(message, GetCredential):
                value = await self.credentials.get(self.settings.CREDENTIAL_KEY)
                await self._emit(CredentialValue(api_key=value))
            elif isinstance(message, SaveCredential):
                await self.credentials.set(self.settings.CREDENTIAL_KEY, message.api_key)
                self.host.notify("API Key saved")
            elif isinstance(message, Notify):
                self.host.notify(message.message)
        except Exception as e:
            logger.exception("Request %s failed", message.type)
            await self._emit(GenerationFailed(error=str(e) or type(e).__name__))

    async def start(self, message: SubmitAndTrack) -> asyncio.Task | None:
        """Launch a generation attempt in the background."""
        if self.closed:
            return None
        if self.busy:
            await self._emit(GenerationFailed(
                error=str(SessionBusyError("A video is already being generated")),
            ))
            return None

        request = JobRequest.build(
            title=message.title,
            description=message.description,
            script_text=message.script_text,
            avatar_id=message.avatar,
            background=message.background,
            settings=self.settings,
        )
        self._stop = asyncio.Event()
        self._task = asyncio.create_task(self._run_and_report(request, message.api_key))
        return self._task

    # ──────── Attempt ────────

    async def run(self, request: JobRequest, credential: str | None = None) -> Outcome:
        """submit → watch → commit. Always returns exactly one Outcome."""
        try:
            if not credential:
                credential = await self.credentials.get(self.settings.CREDENTIAL_KEY)

            job_id = await submitter.submit(
                credential, request, http_client=self.http_client, settings=self.settings,
            )
            self.job = Job(id=job_id)
            self.job = await poller.watch(
                credential, job_id, self._on_update,
                stop=self._stop, job=self.job,
                http_client=self.http_client, settings=self.settings,
            )

            try:
                outcome: Outcome = await self.committer.commit(
                    self.job.primary_asset_url, self.job.fallback_asset_url, request.title,
                )
            except AvatarcastError:
                self.host.notify("Failed to insert video", error=True)
                raise
        except AvatarcastError as e:
            logger.warning("Generation failed: %s: %s", type(e).__name__, e)
            outcome = Failed(e)
        except Exception as e:
            logger.exception("Generation failed unexpectedly")
            outcome = Failed(e)
        finally:
            self.job = None

        logger.info("Generation outcome: %s", type(outcome).__name__)
        return outcome

    async def _run_and_report(self, request: JobRequest, credential: str | None) -> Outcome:
        outcome = await self.run(request, credential)
        await self._emit(notification_for(outcome))
        return outcome

    async def _on_update(self, job: Job) -> None:
        await self._emit(GenerationProgress(job_id=job.id, status=job.status.value))

    # ──────── Teardown ────────

    async def close(self) -> None:
        """Stop polling and drop any pending attempt without notifying."""
        if self.closed:
            return
        self.closed = True
        self._stop.set()
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.debug("Session closed")

    async def _emit(self, notification: Notification) -> None:
        if self.closed:
            return
        try:
            await self._send(notification)
        except Exception:
            # Best-effort: the UI may already be gone
            logger.warning("Failed to deliver %s", notification.type, exc_info=True)


def notification_for(outcome: Outcome) -> Notification:
    """Map a terminal Outcome onto its single UI notification."""
    if isinstance(outcome, Inserted):
        return GenerationSucceeded(title=outcome.title)
    if isinstance(outcome, InsertedDegraded):
        return GenerationDegraded(reason=outcome.reason)
    return GenerationFailed(error=outcome.message)
