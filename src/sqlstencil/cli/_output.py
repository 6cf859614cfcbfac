"""Shared output formatting for CLI commands."""

from __future__ import annotations

import json
from typing import Any


def format_rows(
    rows: list[dict[str, Any]],
    *,
    row_count: int,
    duration_ms: float | None = None,
    output_format: str = "text",
    extra: dict[str, Any] | None = None,
) -> str:
    columns = list(rows[0]) if rows else []
    if output_format == "json":
        data: dict[str, Any] = dict(extra or {})
        data.update(
            {
                "columns": columns,
                "rows": rows,
                "row_count": row_count,
                "duration_ms": duration_ms,
            }
        )
        return json.dumps(data, indent=2, default=str)

    # Text format: simple tabular output.
    lines: list[str] = []
    if columns:
        lines.append(" | ".join(columns))
        lines.append("-+-".join("-" * max(len(c), 5) for c in columns))
        for row in rows:
            lines.append(" | ".join(_cell(row.get(c)) for c in columns))

    duration = f", {duration_ms:.0f}ms" if duration_ms is not None else ""
    label = "rows" if columns else "rows affected"
    lines.append(f"\n({row_count} {label}{duration})")
    return "\n".join(lines)


def _cell(value: object) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bytes):
        return "0x" + value.hex()
    return str(value)


def format_error(message: str, *, output_format: str = "text", **fields: Any) -> str:
    if output_format == "json":
        return json.dumps({"blocked": True, **fields, "error": message}, indent=2, default=str)
    return f"error: {message}"
