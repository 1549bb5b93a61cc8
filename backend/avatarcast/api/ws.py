"""WebSocket endpoint — one connection is one generation session.

Messages are JSON objects tagged by ``type`` (see ``schemas.messages``).
Disconnecting tears the session down, which stops any poll in progress.
"""

from __future__ import annotations

import json
import logging

import httpx
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from avatarcast.config import get_settings
from avatarcast.schemas.messages import GenerationFailed, Notification
from avatarcast.services.credentials import get_credential_store
from avatarcast.services.host import HostDocument, InMemoryDocument
from avatarcast.services.session import GenerationSession

router = APIRouter()
logger = logging.getLogger(__name__)


def get_host_document() -> HostDocument:
    """Document the session commits into (one per connection).

    The in-memory document keeps committed assets and notices in process.
    Deployments bridging a real editor override this dependency through
    ``app.dependency_overrides[get_host_document]``.
    """
    return InMemoryDocument()


@router.websocket("/ws")
async def ws_session(ws: WebSocket, host: HostDocument = Depends(get_host_document)):
    """Relay UI requests into a GenerationSession and its notifications back."""
    await ws.accept()
    settings = get_settings()

    async def send(notification: Notification) -> None:
        await ws.send_json(notification.to_wire())

    async with httpx.AsyncClient(timeout=settings.VIDEO_API_TIMEOUT, follow_redirects=True) as client:
        session = GenerationSession(
            host,
            get_credential_store(settings),
            send,
            http_client=client,
            settings=settings,
        )
        logger.info("WS session opened")
        try:
            while True:
                text = await ws.receive_text()
                if text == "ping":
                    await ws.send_json({"type": "pong"})
                    continue
                try:
                    payload = json.loads(text)
                except ValueError as e:
                    await send(GenerationFailed(error=f"Invalid request: {e}"))
                    continue
                await session.handle(payload)
        except WebSocketDisconnect:
            logger.info("WS session disconnected")
        finally:
            await session.close()
