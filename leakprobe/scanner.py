from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable, List, Optional

import httpx

from ._version import default_user_agent
from .candidates import resolve_url
from .detectors import analyze, is_accepted_status
from .fetcher import build_client, fetch
from .fingerprint import read_head
from .models import (
    FileUnreadable,
    InvalidURL,
    OutcomeKind,
    ProbeError,
    ProbeOutcome,
    RunResult,
    TransportError,
)


class _TokenPool:
    """Fixed number of permits; one is held for the whole life of a probe."""

    def __init__(self, concurrency: int):
        self._sem = asyncio.Semaphore(concurrency)

    async def __aenter__(self):
        await self._sem.acquire()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self._sem.release()


class _RateGate:
    """Simple leaky-bucket style gate to cap requests per second.

    Ensures average rate <= rate_limit by spacing request starts by 1/rate seconds.
    """

    def __init__(self, rate_limit: Optional[float]):
        self._rate = rate_limit if (rate_limit is not None and rate_limit > 0) else None
        self._lock = asyncio.Lock()
        self._next_time = 0.0
        self._interval = (1.0 / self._rate) if self._rate else 0.0

    async def acquire(self) -> None:
        if not self._rate:
            return
        async with self._lock:
            now = asyncio.get_running_loop().time()
            if self._next_time <= now:
                self._next_time = now + self._interval
                return
            delay = self._next_time - now
            self._next_time += self._interval
        await asyncio.sleep(delay)


class _RunState:
    """State shared by the probes of one run.

    Only touched from the event loop, between awaits. The first fatal
    outcome is kept; later ones are logged but do not replace it.
    """

    def __init__(self, total: int):
        self.total = total
        self.completed = 0
        self.fatal: Optional[ProbeOutcome] = None

    def record(self, outcome: ProbeOutcome) -> None:
        self.completed += 1
        if outcome.is_fatal and self.fatal is None:
            self.fatal = outcome


async def probe(
    path: str,
    base_url: str,
    client: httpx.AsyncClient,
    timeout: float = 3.0,
    skip_errors: bool = False,
    before_request=None,
) -> ProbeOutcome:
    """Check whether the file at ``path`` is served under ``base_url``.

    Never raises for probe-level failures: invalid URLs are always skipped,
    transport errors and unreadable local files are skipped or fatal
    depending on ``skip_errors``.
    """
    log = logging.getLogger(__name__)
    try:
        url = resolve_url(base_url, path)
    except InvalidURL as e:
        log.error("Skipping %s: %s", path, e)
        return ProbeOutcome(path, None, OutcomeKind.SKIPPED_ERROR, f"invalid URL: {e}")

    try:
        res = await fetch(url, client, timeout=timeout, before_request=before_request)
    except InvalidURL as e:
        log.error("Skipping %s: %s", path, e)
        return ProbeOutcome(path, url, OutcomeKind.SKIPPED_ERROR, f"invalid URL: {e}")
    except TransportError as e:
        return _failed(path, url, e, skip_errors)

    log.info("request: %s %s", url, res.status_line)
    if not is_accepted_status(res.status_code):
        log.warning("unexpected status %s for %s", res.status_line, url)
        return ProbeOutcome(
            path, url, OutcomeKind.NOT_LEAKED, f"unexpected status {res.status_line}", res.status_code
        )

    try:
        fingerprint = read_head(path)
    except FileUnreadable as e:
        return _failed(path, url, e, skip_errors, res.status_code)

    kind = analyze(fingerprint, res.body, res.status_code)
    if kind is OutcomeKind.LEAKED:
        log.warning("This file is published %s", path)
        return ProbeOutcome(path, url, kind, f"published ({res.status_line})", res.status_code)
    log.debug("Not published: %s -> %s", path, res.status_line)
    return ProbeOutcome(path, url, kind, f"not published ({res.status_line})", res.status_code)


def _failed(
    path: str,
    url: str,
    err: ProbeError,
    skip_errors: bool,
    status_code: Optional[int] = None,
) -> ProbeOutcome:
    log = logging.getLogger(__name__)
    label = type(err).__name__
    if skip_errors:
        log.error("Skipping %s: %s: %s", path, label, err)
        return ProbeOutcome(path, url, OutcomeKind.SKIPPED_ERROR, f"{label}: {err}", status_code)
    log.error("%s: %s", label, err)
    return ProbeOutcome(path, url, OutcomeKind.FATAL_ERROR, f"{label}: {err}", status_code)


async def check_async(
    paths: Iterable[str],
    base_url: str,
    concurrency: int = 5,
    timeout: float = 3.0,
    insecure: bool = False,
    skip_errors: bool = False,
    follow_redirects: bool = False,
    user_agent: Optional[str] = None,
    rate_limit: Optional[float] = None,
    progress_cb: Optional[Callable[[int, int], None]] = None,
    outcome_cb: Optional[Callable[[ProbeOutcome], None]] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RunResult:
    """Probe every path against ``base_url`` with at most ``concurrency`` in flight.

    Outcomes are returned in input order. A fatal outcome fails the run but
    does not cancel probes that are already running or still queued.

    progress_cb: optional callback invoked with (completed, total)
    outcome_cb: optional callback invoked with each outcome as it completes
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")
    if user_agent is None:
        user_agent = default_user_agent()

    log = logging.getLogger(__name__)
    paths = list(paths)
    state = _RunState(len(paths))
    pool = _TokenPool(concurrency)
    rate_gate = _RateGate(rate_limit)

    async with build_client(
        user_agent,
        insecure=insecure,
        follow_redirects=follow_redirects,
        max_connections=concurrency,
        transport=transport,
    ) as client:
        async def worker(path: str) -> ProbeOutcome:
            outcome = await probe(
                path,
                base_url,
                client,
                timeout=timeout,
                skip_errors=skip_errors,
                before_request=rate_gate.acquire,
            )
            state.record(outcome)
            if outcome_cb:
                outcome_cb(outcome)
            if progress_cb:
                progress_cb(state.completed, state.total)
            return outcome

        tasks = []
        for path in paths:
            tasks.append(asyncio.create_task(_guarded(worker, path, pool)))
        outcomes: List[ProbeOutcome] = list(await asyncio.gather(*tasks)) if tasks else []

    if state.fatal is not None:
        log.debug("Run failed on %s", state.fatal.path)
    return RunResult(outcomes=outcomes, fatal=state.fatal)


async def _guarded(fn, path: str, pool: _TokenPool) -> ProbeOutcome:
    async with pool:
        return await fn(path)


def run_check(
    paths: Iterable[str],
    base_url: str,
    concurrency: int = 5,
    timeout: float = 3.0,
    insecure: bool = False,
    skip_errors: bool = False,
    follow_redirects: bool = False,
    user_agent: Optional[str] = None,
    rate_limit: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> RunResult:
    """Synchronous wrapper to run the async checker."""
    return asyncio.run(
        check_async(
            paths,
            base_url,
            concurrency=concurrency,
            timeout=timeout,
            insecure=insecure,
            skip_errors=skip_errors,
            follow_redirects=follow_redirects,
            user_agent=user_agent,
            rate_limit=rate_limit,
            transport=transport,
        )
    )
