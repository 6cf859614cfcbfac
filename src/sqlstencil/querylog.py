"""Query history for the CLI.

One directory per connection under ~/.sqlstencil/logs, one JSONL file per
UTC day inside it. Both the template and the SQL actually sent are kept,
along with the bound parameters, so a logged statement can be replayed.
"""

from __future__ import annotations

import contextlib
import json
import re
from collections.abc import Iterator, Sequence
from dataclasses import asdict, dataclass, field
from datetime import UTC, date, datetime, timedelta
from pathlib import Path

DEFAULT_RETENTION_DAYS = 30
ADHOC_CONNECTION = "_adhoc"
_LOG_ROOT = Path.home() / ".sqlstencil" / "logs"
_DAY_FORMAT = "%Y-%m-%d"
_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class QueryLogEntry:
    sql: str
    effective_sql: str | None = None
    db: str | None = None
    parameters: tuple[str, ...] = ()
    classification: str | None = None
    blocked: bool = False
    row_count: int | None = None
    duration_ms: float | None = None
    error: str | None = None
    ts: str = field(default_factory=lambda: datetime.now(UTC).isoformat())

    def to_json(self) -> str:
        record = asdict(self)
        record["parameters"] = list(self.parameters)
        return json.dumps(record, default=str)


def _connection_dir(db: str | None) -> Path:
    slug = _UNSAFE_RE.sub("-", db).strip("-.") if db else ""
    return _LOG_ROOT / (slug or ADHOC_CONNECTION)


def _day_file(db: str | None, day: date) -> Path:
    return _connection_dir(db) / f"{day.strftime(_DAY_FORMAT)}.jsonl"


def log_query(
    *,
    sql: str,
    effective_sql: str | None = None,
    db: str | None = None,
    parameters: Sequence[str] | None = None,
    classification: str | None = None,
    blocked: bool = False,
    row_count: int | None = None,
    duration_ms: float | None = None,
    error: str | None = None,
) -> QueryLogEntry:
    entry = QueryLogEntry(
        sql=sql,
        effective_sql=effective_sql,
        db=db,
        parameters=tuple(parameters or ()),
        classification=classification,
        blocked=blocked,
        row_count=row_count,
        duration_ms=duration_ms,
        error=error,
    )
    path = _day_file(db, datetime.now(UTC).date())
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "a") as f:
        f.write(entry.to_json() + "\n")
    return entry


def read_entries(db: str | None, day: date | None = None) -> Iterator[dict]:
    """Logged entries for one connection and UTC day (today by default), oldest first."""
    path = _day_file(db, day or datetime.now(UTC).date())
    if not path.exists():
        return
    with open(path) as f:
        for line in f:
            if line.strip():
                yield json.loads(line)


def cleanup_old_logs(*, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Delete day files older than retention_days across all connections.

    Files whose names are not dates are left alone. Connection directories
    left empty are removed. Returns the number of files deleted.
    """
    if not _LOG_ROOT.is_dir():
        return 0
    cutoff = (datetime.now(UTC) - timedelta(days=retention_days)).date()
    deleted = 0
    for conn_dir in _LOG_ROOT.iterdir():
        if not conn_dir.is_dir():
            continue
        for path in conn_dir.glob("*.jsonl"):
            try:
                day = datetime.strptime(path.stem, _DAY_FORMAT).date()
            except ValueError:
                continue
            if day < cutoff:
                path.unlink()
                deleted += 1
        with contextlib.suppress(OSError):
            conn_dir.rmdir()  # fails while files remain
    return deleted
