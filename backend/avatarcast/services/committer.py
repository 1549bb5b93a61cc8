"""Asset committer — download the render and place it in the host document.

Order of effects:
  1. download the motion asset (no document mutation before this succeeds)
  2. reuse the single selected fillable node, or create a centred placeholder
  3. commit as motion; on a host environment limitation fall back to the
     static thumbnail when one exists
  4. select and frame the placeholder

A placeholder created here is removed on every failure path after its
creation. A reused, caller-selected node is only renamed, never removed.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from avatarcast.config import Settings, get_settings
from avatarcast.services.downloads import fetch_bytes
from avatarcast.services.errors import (
    CommitError,
    EnvironmentLimitationError,
    FallbackDownloadError,
    HostEnvironmentLimitation,
    PrimaryDownloadError,
)
from avatarcast.services.host import FILLABLE_KINDS, HostDocument, Placeholder
from avatarcast.services.outcomes import Inserted, InsertedDegraded

logger = logging.getLogger(__name__)

DEGRADED_NOTICE = "Inserted as image. Move file to Project to enable video."


class AssetCommitter:
    """Commits a finished render onto a placeholder of ``host``."""

    def __init__(
        self,
        host: HostDocument,
        *,
        http_client: httpx.AsyncClient | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.host = host
        self.http_client = http_client
        self.settings = settings or get_settings()

    async def commit(
        self,
        primary_url: str,
        fallback_url: str | None,
        title: str,
    ) -> Inserted | InsertedDegraded:
        """Insert the render; raises an ``AvatarcastError`` on failure."""
        video = await fetch_bytes(
            primary_url,
            error_cls=PrimaryDownloadError,
            http_client=self.http_client,
            timeout=self.settings.DOWNLOAD_TIMEOUT,
        )

        placeholder, created = self._resolve_placeholder(title)
        try:
            outcome = await self._fill(placeholder, video, fallback_url, title)
        except (Exception, asyncio.CancelledError):
            if created:
                logger.info("Removing placeholder %s after failed insert", placeholder.id)
                self.host.remove(placeholder)
            raise

        try:
            self.host.select_and_frame(placeholder)
        except Exception as e:
            logger.warning("Could not frame placeholder %s: %s", placeholder.id, e)
        return outcome

    def _resolve_placeholder(self, title: str) -> tuple[Placeholder, bool]:
        """Return (placeholder, created_here)."""
        name = title or self.settings.PLACEHOLDER_NAME
        selection = self.host.selection()
        if len(selection) == 1 and selection[0].kind in FILLABLE_KINDS:
            node = selection[0]
            self.host.rename(node, name)
            return node, False

        width = self.settings.PLACEHOLDER_WIDTH
        height = self.settings.PLACEHOLDER_HEIGHT
        cx, cy = self.host.viewport_center()
        node = self.host.create_placeholder(
            name=name, width=width, height=height,
            x=cx - width / 2, y=cy - height / 2,
        )
        return node, True

    async def _fill(
        self,
        placeholder: Placeholder,
        video: bytes,
        fallback_url: str | None,
        title: str,
    ) -> Inserted | InsertedDegraded:
        try:
            await self.host.commit_motion(placeholder, video)
        except HostEnvironmentLimitation as e:
            logger.warning("Video insertion refused by host: %s", e)
            if not fallback_url:
                raise EnvironmentLimitationError(
                    f"Video cannot be inserted here and no thumbnail is available: {e}"
                ) from e
            reason = str(e) or DEGRADED_NOTICE
            await self._fill_fallback(placeholder, fallback_url)
            self.host.notify(
                DEGRADED_NOTICE, timeout_ms=self.settings.DEGRADED_NOTICE_TIMEOUT_MS,
            )
            return InsertedDegraded(title=title, reason=reason)
        except Exception as e:
            raise CommitError(f"Failed to insert video: {e}") from e

        self.host.notify("Video inserted successfully!")
        return Inserted(title=title)

    async def _fill_fallback(self, placeholder: Placeholder, fallback_url: str) -> None:
        logger.info("Falling back to thumbnail for %s", placeholder.id)
        image = await fetch_bytes(
            fallback_url,
            error_cls=FallbackDownloadError,
            http_client=self.http_client,
            timeout=self.settings.DOWNLOAD_TIMEOUT,
        )
        try:
            await self.host.commit_image(placeholder, image)
        except Exception as e:
            raise CommitError(f"Failed to insert thumbnail: {e}") from e
