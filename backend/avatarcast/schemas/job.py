from __future__ import annotations
"""Job request and remote job record."""

import enum
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from avatarcast.config import Settings, get_settings


class JobStatus(str, enum.Enum):
    """Remote render lifecycle statuses."""

    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"

    @classmethod
    def parse(cls, raw: Any) -> "JobStatus":
        """Map a remote status string; anything unrecognized is still in flight."""
        try:
            return cls(str(raw or "").lower())
        except ValueError:
            return cls.PROCESSING

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETE, JobStatus.FAILED)


class JobRequest(BaseModel):
    """Immutable parameters for one render submission."""

    title: str
    description: str
    script_text: str
    avatar_id: str
    background: str

    model_config = {"frozen": True}

    @classmethod
    def build(
        cls,
        *,
        title: str = "",
        description: str = "",
        script_text: str = "",
        avatar_id: str = "",
        background: str = "",
        settings: Settings | None = None,
    ) -> "JobRequest":
        """Create a request, substituting configured defaults for empty fields."""
        settings = settings or get_settings()
        return cls(
            title=title.strip() or settings.DEFAULT_TITLE,
            description=description.strip() or settings.DEFAULT_DESCRIPTION,
            script_text=script_text.strip() or settings.DEFAULT_SCRIPT,
            avatar_id=avatar_id.strip() or settings.DEFAULT_AVATAR,
            background=background.strip() or settings.DEFAULT_BACKGROUND,
        )


@dataclass
class Job:
    """The single in-flight render, owned by a session until it turns terminal."""

    id: str
    status: JobStatus = JobStatus.QUEUED
    primary_asset_url: str | None = None
    fallback_asset_url: str | None = None

    def apply(self, payload: dict[str, Any]) -> None:
        """Update from a ``GET /videos/{id}`` response body."""
        self.status = JobStatus.parse(payload.get("status"))
        if self.status is JobStatus.COMPLETE:
            self.primary_asset_url = payload.get("download") or None
            # The service has shipped both field names
            self.fallback_asset_url = (
                payload.get("thumbnail") or payload.get("thumbnail_url") or None
            )
