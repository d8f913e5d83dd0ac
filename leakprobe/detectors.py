from __future__ import annotations

from typing import Optional

from .models import Fingerprint, OutcomeKind

# Statuses that show the server answered for the path. Anything else
# (5xx, unfollowed redirects, ...) says nothing about the file.
ACCEPTED_STATUSES = frozenset({200, 403, 404})


def is_accepted_status(status: int) -> bool:
    return status in ACCEPTED_STATUSES


def matches(fingerprint: Fingerprint, body: bytes) -> bool:
    """True when every fingerprint line occurs somewhere in ``body``.

    Lines are tested independently: neither their order nor their position
    in the body matters. The first missing line stops the search.
    Blank and whitespace-only lines are ignored.
    """
    lines = [line for line in fingerprint if line.strip()]
    if not lines and body:
        # an empty or blank local file cannot vouch for any remote content
        return False
    for line in lines:
        if line not in body:
            return False
    return True


def analyze(fingerprint: Fingerprint, body: bytes, status: Optional[int] = 200) -> OutcomeKind:
    """Classify a fetched resource against the local fingerprint.

    Only LEAKED or NOT_LEAKED come out of here; errors are classified by
    the dispatcher.
    """
    if status is None or not is_accepted_status(status):
        return OutcomeKind.NOT_LEAKED
    if matches(fingerprint, body):
        return OutcomeKind.LEAKED
    return OutcomeKind.NOT_LEAKED
