from __future__ import annotations

import httpx
import pytest

from avatarcast.schemas.job import JobRequest
from avatarcast.services.errors import AuthError, NetworkError, RemoteError
from avatarcast.services.submitter import submit


@pytest.mark.anyio
async def test_submit_posts_video_and_returns_id(service, settings):
    request = JobRequest.build(title="Demo", script_text="Hello", avatar_id="amy", settings=settings)

    async with service.client() as client:
        job_id = await submit("secret-key", request, http_client=client, settings=settings)

    assert job_id == "job-1"
    sent = service.created[0]
    assert sent["authorization"] == "secret-key"
    assert sent["body"] == {
        "title": "Demo",
        "description": "Created via Figma Plugin",
        "visibility": "public",
        "test": False,
        "input": [{"scriptText": "Hello", "avatar": "amy", "background": "green_screen"}],
    }


@pytest.mark.anyio
async def test_submit_sends_defaults_not_empty_strings(service, settings):
    request = JobRequest.build(title="", script_text="", avatar_id="", settings=settings)

    async with service.client() as client:
        await submit("k", request, http_client=client, settings=settings)

    body = service.created[0]["body"]
    assert body["title"] == settings.DEFAULT_TITLE
    assert body["input"][0]["scriptText"] == settings.DEFAULT_SCRIPT
    assert body["input"][0]["avatar"] == settings.DEFAULT_AVATAR


@pytest.mark.anyio
async def test_submit_without_credential_makes_no_call(service, settings):
    async with service.client() as client:
        with pytest.raises(AuthError):
            await submit("", JobRequest.build(settings=settings), http_client=client, settings=settings)

    assert service.created == []


@pytest.mark.anyio
@pytest.mark.parametrize("status_code, error", [(401, AuthError), (403, AuthError), (400, RemoteError), (500, RemoteError)])
async def test_submit_maps_error_responses(service, settings, status_code, error):
    service.create_response = httpx.Response(status_code, json={"context": "bad avatar"})

    async with service.client() as client:
        with pytest.raises(error):
            await submit("k", JobRequest.build(settings=settings), http_client=client, settings=settings)

    assert len(service.created) == 1


@pytest.mark.anyio
async def test_remote_error_carries_status_and_detail(service, settings):
    service.create_response = httpx.Response(422, json={"context": "scriptText too long"})

    async with service.client() as client:
        with pytest.raises(RemoteError) as exc_info:
            await submit("k", JobRequest.build(settings=settings), http_client=client, settings=settings)

    assert exc_info.value.status_code == 422
    assert "scriptText too long" in str(exc_info.value)


@pytest.mark.anyio
async def test_submit_transport_failure_is_network_error(settings):
    def refuse(request):
        raise httpx.ConnectError("connection refused")

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as client:
        with pytest.raises(NetworkError):
            await submit("k", JobRequest.build(settings=settings), http_client=client, settings=settings)


@pytest.mark.anyio
async def test_submit_without_id_in_response(service, settings):
    service.create_response = httpx.Response(201, json={"status": "in_progress"})

    async with service.client() as client:
        with pytest.raises(RemoteError):
            await submit("k", JobRequest.build(settings=settings), http_client=client, settings=settings)


@pytest.mark.anyio
@pytest.mark.parametrize("error", [httpx.TooManyRedirects("redirect loop"), httpx.DecodingError("bad gzip")])
async def test_submit_request_errors_are_network_errors(settings, error):
    def fail(request):
        raise error

    async with httpx.AsyncClient(transport=httpx.MockTransport(fail)) as client:
        with pytest.raises(NetworkError) as exc_info:
            await submit("k", JobRequest.build(settings=settings), http_client=client, settings=settings)

    assert exc_info.value.__cause__ is error
