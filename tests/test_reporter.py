import json
from pathlib import Path

from rich.console import Console

from leakprobe.models import OutcomeKind, ProbeOutcome, RunResult
from leakprobe.reporter import print_results, write_json


def _result() -> RunResult:
    leaked = ProbeOutcome("conf/db.ini", "https://example.com/conf/db.ini", OutcomeKind.LEAKED, "published (200 OK)", 200)
    missing = ProbeOutcome("x.txt", "https://example.com/x.txt", OutcomeKind.NOT_LEAKED, "not published (404 Not Found)", 404)
    fatal = ProbeOutcome("y.txt", "https://example.com/y.txt", OutcomeKind.FATAL_ERROR, "TransportError: refused")
    return RunResult(outcomes=[leaked, missing, fatal], fatal=fatal)


def test_print_results_lists_published_files() -> None:
    console = Console(record=True, width=160)

    print_results(_result(), "https://example.com/", console=console)

    text = console.export_text()
    assert "Published files" in text
    assert "conf/db.ini" in text
    assert "Run failed" in text
    assert "TransportError: refused" in text


def test_print_results_without_leaks() -> None:
    console = Console(record=True, width=160)
    result = RunResult(outcomes=[ProbeOutcome("a", "https://e.com/a", OutcomeKind.NOT_LEAKED, "not published (404 Not Found)", 404)])

    print_results(result, "https://e.com/", console=console)

    assert "No published files found." in console.export_text()


def test_write_json_keeps_input_order(tmp_path: Path) -> None:
    out = write_json(_result(), tmp_path / "r.json")

    data = json.loads(out.read_text(encoding="utf-8"))
    assert [d["path"] for d in data] == ["conf/db.ini", "x.txt", "y.txt"]
    assert data[2] == {
        "path": "y.txt",
        "url": "https://example.com/y.txt",
        "outcome": "FATAL_ERROR",
        "status_code": None,
        "message": "TransportError: refused",
    }
