from pathlib import Path
from typing import Callable, Dict, Tuple

import httpx
import pytest

Route = Tuple[int, bytes]


def site(routes: Dict[str, Route], seen=None) -> httpx.MockTransport:
    """Mock web server answering GETs by URL path; unknown paths get 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        status, body = routes.get(request.url.path, (404, b"not found"))
        return httpx.Response(status, content=body)

    return httpx.MockTransport(handler)


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch) -> Path:
    """Run from tmp_path so relative candidate paths resolve there."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_site() -> Callable[..., httpx.MockTransport]:
    return site
