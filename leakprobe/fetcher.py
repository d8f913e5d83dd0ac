from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

from .models import FetchResult, InvalidURL, TransportError


def build_client(
    user_agent: str,
    insecure: bool = False,
    follow_redirects: bool = False,
    max_connections: int = 100,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Create the shared client used by every probe of a run.

    TLS verification stays on unless ``insecure`` is set. The connection
    pool must be at least as large as the number of concurrent probes, or
    probes holding a token time out waiting for a connection.
    """
    return httpx.AsyncClient(
        follow_redirects=follow_redirects,
        verify=not insecure,
        limits=httpx.Limits(max_connections=max_connections, max_keepalive_connections=max_connections),
        headers={"User-Agent": user_agent},
        transport=transport,
    )


async def fetch(
    url: str,
    client: httpx.AsyncClient,
    timeout: float = 3.0,
    before_request: Optional[Callable[[], Awaitable[None]]] = None,
) -> FetchResult:
    """GET ``url`` and read the whole response body.

    Any failure to connect, complete the TLS handshake, send the request or
    read the full body within ``timeout`` raises TransportError.
    """
    log = logging.getLogger(__name__)
    if before_request:
        await before_request()
    log.debug("GET %s", url)
    try:
        # httpx timeouts apply per phase; wait_for caps the whole exchange
        r = await asyncio.wait_for(client.get(url, timeout=timeout), timeout)
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
        raise InvalidURL(f"{url}: {e}") from e
    except httpx.HTTPError as e:
        raise TransportError(f"{url}: {type(e).__name__}: {e}") from e
    except asyncio.TimeoutError as e:
        raise TransportError(f"{url}: timed out after {timeout}s") from e
    return FetchResult(
        url=url,
        status_code=r.status_code,
        reason_phrase=r.reason_phrase,
        body=r.content,
    )
