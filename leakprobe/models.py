from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


# First lines of a local file, raw bytes without line terminators.
Fingerprint = Tuple[bytes, ...]


class OutcomeKind(str, Enum):
    LEAKED = "LEAKED"
    NOT_LEAKED = "NOT_LEAKED"
    SKIPPED_ERROR = "SKIPPED_ERROR"
    FATAL_ERROR = "FATAL_ERROR"


class ProbeError(Exception):
    """Base class for failures confined to a single probe."""


class InvalidURL(ProbeError):
    pass


class FileUnreadable(ProbeError):
    pass


class TransportError(ProbeError):
    pass


@dataclass(frozen=True)
class FetchResult:
    url: str
    status_code: int
    reason_phrase: str
    body: bytes

    @property
    def status_line(self) -> str:
        if self.reason_phrase:
            return f"{self.status_code} {self.reason_phrase}"
        return str(self.status_code)


@dataclass(frozen=True)
class ProbeOutcome:
    path: str
    url: Optional[str]
    kind: OutcomeKind
    message: str
    status_code: Optional[int] = None

    @property
    def is_fatal(self) -> bool:
        return self.kind is OutcomeKind.FATAL_ERROR


@dataclass
class RunResult:
    outcomes: List[ProbeOutcome] = field(default_factory=list)
    fatal: Optional[ProbeOutcome] = None

    @property
    def ok(self) -> bool:
        return self.fatal is None

    @property
    def leaked(self) -> List[ProbeOutcome]:
        return [o for o in self.outcomes if o.kind is OutcomeKind.LEAKED]

    def counts(self) -> Dict[OutcomeKind, int]:
        counts = {k: 0 for k in OutcomeKind}
        for o in self.outcomes:
            counts[o.kind] += 1
        return counts
