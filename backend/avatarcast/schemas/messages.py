from __future__ import annotations
"""Closed message set exchanged with the UI over the session channel."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Message(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ──────── Requests (UI → core) ────────

class SubmitAndTrack(_Message):
    type: Literal["submit-and-track"] = "submit-and-track"
    title: str = ""
    description: str = ""
    script_text: str = Field(default="", alias="scriptText")
    avatar: str = ""
    background: str = ""
    api_key: str | None = Field(default=None, alias="apiKey")


class GetCredential(_Message):
    type: Literal["get-credential"] = "get-credential"


class SaveCredential(_Message):
    type: Literal["save-credential"] = "save-credential"
    api_key: str = Field(alias="apiKey", min_length=1)


class Notify(_Message):
    type: Literal["notify"] = "notify"
    message: str


Request = Annotated[
    Union[SubmitAndTrack, GetCredential, SaveCredential, Notify],
    Field(discriminator="type"),
]

request_adapter: TypeAdapter[Request] = TypeAdapter(Request)


def parse_request(raw: object) -> Request:
    """Validate an incoming JSON payload into one of the request shapes."""
    return request_adapter.validate_python(raw)


# ──────── Notifications (core → UI) ────────

class CredentialValue(_Message):
    type: Literal["credential"] = "credential"
    api_key: str | None = Field(default=None, alias="apiKey")


class GenerationProgress(_Message):
    type: Literal["generation-progress"] = "generation-progress"
    job_id: str = Field(alias="jobId")
    status: str


class GenerationSucceeded(_Message):
    type: Literal["generation-succeeded"] = "generation-succeeded"
    title: str


class GenerationDegraded(_Message):
    type: Literal["generation-degraded"] = "generation-degraded"
    reason: str


class GenerationFailed(_Message):
    type: Literal["generation-failed"] = "generation-failed"
    error: str


Notification = Union[
    CredentialValue,
    GenerationProgress,
    GenerationSucceeded,
    GenerationDegraded,
    GenerationFailed,
]
