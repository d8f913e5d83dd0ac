import asyncio
from pathlib import Path

from leakprobe.models import OutcomeKind
from leakprobe.tui import LeakProbeApp


def test_tui_lists_every_outcome(workdir: Path, make_site) -> None:
    (workdir / "a.txt").write_text("token\n", encoding="utf-8")
    (workdir / "b.txt").write_text("other\n", encoding="utf-8")
    app = LeakProbeApp(
        ["a.txt", "b.txt"],
        "https://example.com/",
        transport=make_site({"/a.txt": (200, b"token")}),
    )

    async def run():
        async with app.run_test() as pilot:
            await app.workers.wait_for_complete()
            await pilot.pause()
            return app.table.row_count

    rows = asyncio.run(run())

    assert rows == 2
    assert app.result is not None
    assert [o.kind for o in app.result.outcomes] == [OutcomeKind.LEAKED, OutcomeKind.NOT_LEAKED]
