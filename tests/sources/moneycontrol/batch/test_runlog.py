from __future__ import annotations

import json
import os
import re
from pathlib import Path

import pytest

from mfholdings.sources.moneycontrol.batch.runlog import RunLog
from mfholdings.sources.moneycontrol.common.models import Target

ISO_Z_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z$"
)  # e.g., 2025-10-30T08:15:00Z
RUN_ID_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}-\d{2}-\d{2}$"
)  # e.g., 2025-10-30T08-15-00

LARGE: Target = {"name": "Large Cap (G) Funds", "link": "https://x/large-cap"}
MID: Target = {"name": "Mid Cap Funds", "link": "https://x/mid-cap"}


def test_initializes_layout_and_progress_file(tmp_path: Path) -> None:
    runs_root = tmp_path / "runs"
    log = RunLog(runs_root, run_id="testrun-001")

    assert log.runs_root == runs_root
    assert log.run_dir == runs_root / "testrun-001"
    assert log.ok_dir.is_dir()
    assert log.err_dir.is_dir()
    assert log.progress_path.read_text(encoding="utf-8") == ""
    assert log.entries() == []


def test_default_run_id_format(tmp_path: Path) -> None:
    log = RunLog(tmp_path)
    assert RUN_ID_RE.match(log.run_id), f"unexpected run_id format: {log.run_id}"
    assert (tmp_path / log.run_id).is_dir()


def test_record_ok(tmp_path: Path) -> None:
    log = RunLog(tmp_path, run_id="ok-test")
    log.record_ok(LARGE, tables=3, records=41)

    (entry,) = log.entries()
    assert entry["target"] == "Large Cap (G) Funds"
    assert entry["url"] == "https://x/large-cap"
    assert entry["status"] == "ok"
    assert (entry["tables"], entry["records"]) == (3, 41)
    assert "error" not in entry
    assert ISO_Z_RE.match(entry["time"]), f"bad timestamp: {entry['time']}"

    assert (log.ok_dir / "Large_Cap_G_Funds.ok").exists()
    assert list(log.err_dir.iterdir()) == []


def test_record_err_writes_payload(tmp_path: Path) -> None:
    log = RunLog(tmp_path, run_id="err-test")
    log.record_err(MID, "https://x/mid-cap: Read timed out ⏱")

    (entry,) = log.entries()
    assert entry["status"] == "err"
    assert entry["error"] == "https://x/mid-cap: Read timed out ⏱"

    payload = json.loads((log.err_dir / "Mid_Cap_Funds.json").read_text("utf-8"))
    assert payload["target"] == "Mid Cap Funds"
    assert payload["url"] == "https://x/mid-cap"
    assert payload["error"].endswith("⏱")
    assert ISO_Z_RE.match(payload["time"])

    # no ASCII escaping in the progress file
    assert "⏱" in log.progress_path.read_text(encoding="utf-8")


def test_log_is_append_only(tmp_path: Path) -> None:
    log = RunLog(tmp_path, run_id="append-test")
    log.record_err(MID, "boom")
    log.record_ok(LARGE, tables=1, records=2)

    # reopening the same run keeps earlier lines
    again = RunLog(tmp_path, run_id="append-test")
    again.record_ok(MID, tables=1, records=5)

    assert [(e["target"], e["status"]) for e in again.entries()] == [
        ("Mid Cap Funds", "err"),
        ("Large Cap (G) Funds", "ok"),
        ("Mid Cap Funds", "ok"),
    ]


def test_entries_skip_blank_and_non_object_lines(tmp_path: Path) -> None:
    log = RunLog(tmp_path, run_id="messy")
    log.progress_path.write_text(
        '\n[1, 2]\n{"target": "A", "status": "ok"}\n\n', encoding="utf-8"
    )
    assert log.entries() == [{"target": "A", "status": "ok"}]


def test_latest_picks_newest_run(tmp_path: Path) -> None:
    old = RunLog(tmp_path, run_id="2025-10-30T07-59-12")
    new = RunLog(tmp_path, run_id="2025-11-02T06-00-00")
    new.record_ok(LARGE, tables=1, records=1)
    os.utime(old.progress_path, (1_000_000, 1_000_000))
    os.utime(new.progress_path, (2_000_000, 2_000_000))
    (tmp_path / "2099-not-a-run").mkdir()

    latest = RunLog.latest(tmp_path)
    assert latest.run_id == "2025-11-02T06-00-00"
    assert len(latest.entries()) == 1


def test_latest_without_runs(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        RunLog.latest(tmp_path / "missing")
    with pytest.raises(FileNotFoundError):
        RunLog.latest(tmp_path)


def test_latest_uses_write_time_not_run_id(tmp_path: Path) -> None:
    older = RunLog(tmp_path, run_id="zz-nightly")
    newer = RunLog(tmp_path, run_id="aa-rerun")
    newer.record_err(MID, "boom")
    os.utime(older.progress_path, (1_000_000, 1_000_000))
    os.utime(newer.progress_path, (2_000_000, 2_000_000))

    assert RunLog.latest(tmp_path).run_id == "aa-rerun"


def test_latest_does_not_write_to_run_tree(tmp_path: Path) -> None:
    run_dir = tmp_path / "2025-10-30T07-59-12"
    run_dir.mkdir()
    progress = run_dir / "progress.jsonl"
    progress.write_text('{"target": "A", "status": "ok"}\n', encoding="utf-8")
    os.utime(progress, (1_000_000, 1_000_000))

    log = RunLog.latest(tmp_path)

    assert log.entries() == [{"target": "A", "status": "ok"}]
    assert sorted(p.name for p in run_dir.iterdir()) == ["progress.jsonl"]
    assert progress.stat().st_mtime == 1_000_000
