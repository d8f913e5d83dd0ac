from __future__ import annotations

from typing import List
from urllib.parse import urljoin, urlsplit

from .models import InvalidURL

_SCHEMES = ("http", "https")


def load_paths(text: str) -> List[str]:
    """Split raw input into candidate paths, one per non-blank line.

    Input order is kept. Paths are not validated here; a bad path fails
    later when it is resolved or opened.
    """
    paths: List[str] = []
    for raw in text.splitlines():
        stripped = raw.strip()
        if not stripped:
            continue
        paths.append(stripped)
    return paths


def resolve_url(base_url: str, path: str) -> str:
    """Resolve ``path`` as a URL reference against ``base_url`` (RFC 3986).

    ``https://example.com/site/`` + ``notes.txt`` gives
    ``https://example.com/site/notes.txt``, while a base without the
    trailing slash drops its last segment, as browsers do.
    """
    try:
        urlsplit(base_url)
        urlsplit(path)
        url = urljoin(base_url, path)
        sp = urlsplit(url)
    except ValueError as e:
        # e.g. unbalanced brackets in the host part
        raise InvalidURL(f"cannot resolve {path!r} against {base_url!r}: {e}") from e
    if sp.scheme.lower() not in _SCHEMES or not sp.netloc:
        raise InvalidURL(f"not an absolute http(s) URL: {url!r}")
    return url
