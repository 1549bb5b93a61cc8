"""Asset payload fetch, streamed into memory."""

from __future__ import annotations

import logging

import httpx

from avatarcast.services.errors import DownloadError

logger = logging.getLogger(__name__)


async def fetch_bytes(
    url: str,
    *,
    error_cls: type[DownloadError] = DownloadError,
    http_client: httpx.AsyncClient | None = None,
    timeout: float = 120.0,
) -> bytes:
    """Download ``url`` and return its body; any failure raises ``error_cls``."""
    client = http_client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
    own_client = http_client is None

    try:
        async with client.stream("GET", url) as response:
            if response.is_error:
                raise error_cls(
                    f"Failed to download {error_cls.asset}: "
                    f"{response.status_code} {response.reason_phrase}",
                    url=url,
                    status_code=response.status_code,
                )
            chunks = [chunk async for chunk in response.aiter_bytes(chunk_size=8192)]
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise error_cls(f"Failed to download {error_cls.asset}: {e}", url=url) from e
    finally:
        if own_client:
            await client.aclose()

    data = b"".join(chunks)
    logger.info("Downloaded %s: %d bytes", error_cls.asset, len(data))
    return data
