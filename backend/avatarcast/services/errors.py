"""Error taxonomy for one generation attempt.

Every error raised by the submitter, poller or committer derives from
``AvatarcastError`` so the session can turn it into a single failed outcome.
"""

from __future__ import annotations


class AvatarcastError(Exception):
    """Base class for all generation failures."""


class AuthError(AvatarcastError):
    """The credential is missing or was rejected by the video service."""


class NetworkError(AvatarcastError):
    """Transport-level failure talking to the video service or asset host."""


class RemoteError(AvatarcastError):
    """The video service answered with a non-success response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class JobFailedError(AvatarcastError):
    """The remote render reached the ``failed`` status."""


class MissingAssetError(AvatarcastError):
    """A ``complete`` job without the asset URL the committer needs."""


class PollTimeoutError(AvatarcastError):
    """The job did not reach a terminal status within ``POLL_TIMEOUT``."""


class PollCancelledError(AvatarcastError):
    """Polling was stopped by session teardown."""


class DownloadError(AvatarcastError):
    """Fetching an asset payload failed."""

    asset = "asset"

    def __init__(self, message: str, url: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PrimaryDownloadError(DownloadError):
    asset = "video"


class FallbackDownloadError(DownloadError):
    asset = "thumbnail"


class EnvironmentLimitationError(AvatarcastError):
    """The host refused the motion asset here and no fallback asset exists."""


class CommitError(AvatarcastError):
    """Writing an asset onto the placeholder failed."""


# ──────── Host contract ────────
# Raised by host document implementations; the committer branches on type.

class HostCommitFailure(Exception):
    """The host document could not commit a payload onto a placeholder."""


class HostEnvironmentLimitation(HostCommitFailure):
    """The host forbids this asset type in the current location."""
