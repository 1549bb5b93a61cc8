"""Pydantic v2 schemas package."""

from avatarcast.schemas.job import Job, JobRequest, JobStatus
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

__all__ = [
    "Job",
    "JobRequest",
    "JobStatus",
    "CredentialValue",
    "GenerationDegraded",
    "GenerationFailed",
    "GenerationProgress",
    "GenerationSucceeded",
    "GetCredential",
    "Notification",
    "Notify",
    "SaveCredential",
    "SubmitAndTrack",
    "parse_request",
]
