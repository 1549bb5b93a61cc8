"""Pytest configuration helpers.

This conftest ensures `backend/` is on `sys.path` so tests can import the
`avatarcast` package regardless of how pytest is invoked, and provides the
shared fakes the suites build on.
"""
import json
import os
import sys

import httpx
import pytest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from avatarcast.config import Settings  # noqa: E402
from avatarcast.services.credentials import MemoryCredentialStore  # noqa: E402
from avatarcast.services.host import InMemoryDocument  # noqa: E402

API = "https://video.test/v2"
VIDEO_URL = "https://cdn.test/video.mp4"
THUMB_URL = "https://cdn.test/thumb.jpg"
VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42video"
THUMB_BYTES = b"\xff\xd8\xff\xe0thumbnail"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        VIDEO_API_BASE=API,
        POLL_INTERVAL=0,
        POLL_TIMEOUT=0,
        CREDENTIAL_BACKEND="memory",
    )


class FakeVideoService:
    """Scripted stand-in for the video API and the asset CDN.

    ``statuses`` is consumed one entry per status query; the last entry
    repeats once the list runs out.
    """

    def __init__(self, statuses=None, *, job_id="job-1"):
        self.job_id = job_id
        self.statuses = list(statuses or [{"status": "complete", "download": VIDEO_URL}])
        self.created = []
        self.status_queries = 0
        self.downloads = []
        self.create_response = None
        self.assets = {VIDEO_URL: VIDEO_BYTES, THUMB_URL: THUMB_BYTES}
        self.asset_status = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        if request.method == "POST" and url == f"{API}/videos":
            self.created.append({
                "body": json.loads(request.content),
                "authorization": request.headers.get("Authorization"),
            })
            if self.create_response is not None:
                return self.create_response
            return httpx.Response(201, json={"id": self.job_id, "status": "in_progress"})
        if request.method == "GET" and url == f"{API}/videos/{self.job_id}":
            index = min(self.status_queries, len(self.statuses) - 1)
            self.status_queries += 1
            entry = self.statuses[index]
            if isinstance(entry, Exception):
                raise entry
            return httpx.Response(200, json={"id": self.job_id, **entry})
        if url in self.assets or url in self.asset_status:
            self.downloads.append(url)
            code = self.asset_status.get(url, 200)
            if code != 200:
                return httpx.Response(code)
            return httpx.Response(200, content=self.assets[url])
        return httpx.Response(404, json={"message": f"no route for {request.method} {url}"})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def service() -> FakeVideoService:
    return FakeVideoService()


@pytest.fixture
def document() -> InMemoryDocument:
    return InMemoryDocument()


@pytest.fixture
def credentials() -> MemoryCredentialStore:
    return MemoryCredentialStore()
