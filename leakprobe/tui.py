from __future__ import annotations

from typing import List, Optional

import httpx
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import DataTable, Footer, Header, Label, LoadingIndicator

from .models import OutcomeKind, ProbeOutcome, RunResult
from .scanner import check_async


class LeakProbeApp(App):
    BINDINGS = [("q", "quit", "Quit")]

    def __init__(
        self,
        paths: List[str],
        base_url: str,
        concurrency: int = 5,
        timeout: float = 3.0,
        insecure: bool = False,
        skip_errors: bool = False,
        follow_redirects: bool = False,
        user_agent: Optional[str] = None,
        rate_limit: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__()
        self.paths = paths
        self.base_url = base_url
        self.concurrency = concurrency
        self.timeout = timeout
        self.insecure = insecure
        self.skip_errors = skip_errors
        self.follow_redirects = follow_redirects
        self.user_agent = user_agent
        self.rate_limit = rate_limit
        self.transport = transport
        self.result: Optional[RunResult] = None
        self.progress_label = Label("Preparing checks…")
        self.table = DataTable(zebra_stripes=True)
        self.spinner = LoadingIndicator()

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Vertical(
            Label(f"leakprobe - {self.base_url}", id="title"),
            self.progress_label,
            self.spinner,
            self.table,
        )
        yield Footer()

    def on_mount(self) -> None:
        self.table.add_columns("Outcome", "Status", "Path", "Message")
        self.spinner.display = True
        self.run_worker(self._check(), exclusive=True)

    async def _check(self) -> None:
        self.result = await check_async(
            self.paths,
            self.base_url,
            concurrency=self.concurrency,
            timeout=self.timeout,
            insecure=self.insecure,
            skip_errors=self.skip_errors,
            follow_redirects=self.follow_redirects,
            user_agent=self.user_agent,
            rate_limit=self.rate_limit,
            progress_cb=self._update_progress,
            outcome_cb=self._add_outcome,
            transport=self.transport,
        )
        self.spinner.display = False
        leaked = len(self.result.leaked)
        status = "failed" if not self.result.ok else "done"
        self.progress_label.update(f"Run {status}: {len(self.paths)} paths, {leaked} published")

    def _update_progress(self, done: int, total: int) -> None:
        self.progress_label.update(f"Checking paths: {done}/{total}")

    def _add_outcome(self, o: ProbeOutcome) -> None:
        label = "PUBLISHED" if o.kind is OutcomeKind.LEAKED else o.kind.value
        self.table.add_row(label, str(o.status_code or ""), o.path, o.message)
