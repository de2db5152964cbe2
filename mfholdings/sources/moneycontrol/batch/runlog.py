"""
Per-run progress records for scrape batches.

Layout (under `runs_root`):
    <run_id>/
      progress.jsonl          # one line per processed target
      ok/<safe_name>.ok       # empty marker, target scraped and saved
      err/<safe_name>.json    # {"target", "url", "error", "time"}

A progress line looks like:
    {"time": "2025-10-30T08:15:00Z", "target": "Large Cap Funds",
     "url": "https://...", "status": "ok", "tables": 3, "records": 41}

Notes:
- The log is append-only; re-running a target with the same `run_id` adds a
  second line and overwrites its marker.
- Timestamps are UTC ISO-8601 with a 'Z' suffix; `run_id` defaults to a
  filesystem-safe UTC timestamp, so run directories sort chronologically.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Literal, Optional, TypedDict, cast

from mfholdings.common.file_io import write_json
from mfholdings.common.types import JSONObj
from mfholdings.sources.moneycontrol.common.models import Target
from mfholdings.sources.moneycontrol.persistence import safe_name

Status = Literal["ok", "err"]

PROGRESS_FILENAME = "progress.jsonl"


class ProgressEntry(TypedDict, total=False):
    time: str
    target: str
    url: str
    status: Status
    error: str
    tables: int
    records: int


def _utc_now_iso() -> str:
    """Return current UTC time in ISO-8601, suffixed with 'Z' (no microseconds)."""
    return (
        datetime.now(timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )


def _default_run_id() -> str:
    # e.g. 2025-10-30T07-59-12
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H-%M-%S")


class RunLog:
    """
    Progress log of one scrape run.

    Usage:
        log = RunLog(runs_root)
        log.record_ok(target, tables=3, records=41)
        log.record_err(target, "https://...: Read timed out.")
        log.entries()          # parsed progress.jsonl
    """

    def __init__(
        self, runs_root: Path, run_id: Optional[str] = None, *, create: bool = True
    ) -> None:
        self._runs_root = runs_root
        self._run_id = run_id or _default_run_id()
        if create:
            self._create_layout()

    def _create_layout(self) -> None:
        self.ok_dir.mkdir(parents=True, exist_ok=True)
        self.err_dir.mkdir(parents=True, exist_ok=True)
        # exists from the start, so `tail -f` works before the first target ends
        self.progress_path.touch(exist_ok=True)

    @classmethod
    def latest(cls, runs_root: Path) -> RunLog:
        """Reopen, read-only, the run whose progress file was written last.

        Nothing is created on disk. Ties on modification time go to the larger
        run id.

        Raises:
            FileNotFoundError: If there is no run directory with a progress file.
        """
        if not runs_root.is_dir():
            raise FileNotFoundError(f"No runs directory found: {runs_root}")
        runs = [p for p in runs_root.iterdir() if (p / PROGRESS_FILENAME).is_file()]
        if not runs:
            raise FileNotFoundError(f"No run directories found under {runs_root}")
        newest = max(
            runs, key=lambda p: ((p / PROGRESS_FILENAME).stat().st_mtime, p.name)
        )
        return cls(runs_root, run_id=newest.name, create=False)

    @property
    def run_id(self) -> str:
        return self._run_id

    # ---------- Recording ----------

    def record_ok(self, target: Target, *, tables: int, records: int) -> None:
        """Log a saved target and drop its OK marker."""
        self._append(
            {
                "target": target["name"],
                "url": target["link"],
                "status": "ok",
                "tables": tables,
                "records": records,
            }
        )
        (self.ok_dir / f"{safe_name(target['name'])}.ok").touch()

    def record_err(self, target: Target, error: str) -> None:
        """Log a failed target and write its error payload."""
        self._append(
            {
                "target": target["name"],
                "url": target["link"],
                "status": "err",
                "error": error,
            }
        )
        payload: JSONObj = {
            "target": target["name"],
            "url": target["link"],
            "error": error,
            "time": _utc_now_iso(),
        }
        write_json(self.err_dir / f"{safe_name(target['name'])}.json", payload)

    def _append(self, entry: ProgressEntry) -> None:
        line: dict[str, Any] = {"time": _utc_now_iso(), **entry}
        with self.progress_path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(line, ensure_ascii=False) + "\n")

    # ---------- Reading ----------

    def entries(self) -> list[ProgressEntry]:
        """Parsed progress lines, in write order; blank and non-object lines are skipped."""
        out: list[ProgressEntry] = []
        for line in self.progress_path.read_text(encoding="utf-8").splitlines():
            if not line.strip():
                continue
            obj = json.loads(line)
            if isinstance(obj, dict):
                out.append(cast(ProgressEntry, obj))
        return out

    # ---------- Paths ----------

    @property
    def runs_root(self) -> Path:
        return self._runs_root

    @property
    def run_dir(self) -> Path:
        return self._runs_root / self._run_id

    @property
    def progress_path(self) -> Path:
        return self.run_dir / PROGRESS_FILENAME

    @property
    def ok_dir(self) -> Path:
        return self.run_dir / "ok"

    @property
    def err_dir(self) -> Path:
        return self.run_dir / "err"


__all__ = ["ProgressEntry", "RunLog", "PROGRESS_FILENAME"]
