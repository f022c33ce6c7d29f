"""JSON and CSV export for ping results."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Iterable

from ipdash.models import PingResult


def ping_result_to_dict(result: PingResult) -> dict[str, Any]:
    """Convert a PingResult to the ``/api/ping`` wire shape.

    Keys that do not apply to the outcome are left out: a transport
    failure has no ``latencyMs``/``httpStatus``, a response has no ``error``.
    """
    data: dict[str, Any] = {
        "id": result.target_id,
        "name": result.name,
        "host": result.host,
        "ok": result.ok,
    }
    if result.http_status is not None:
        data["httpStatus"] = result.http_status
    if result.latency_ms is not None:
        data["latencyMs"] = result.latency_ms
    if result.error is not None:
        data["error"] = result.error
    return data


def export_json(results: Iterable[PingResult], indent: int = 2) -> str:
    """Export ping results as a JSON array string."""
    return json.dumps([ping_result_to_dict(r) for r in results], indent=indent)


def export_csv(results: Iterable[PingResult]) -> str:
    """Export ping results as CSV (one row per target)."""
    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(["id", "name", "host", "ok", "http_status", "latency_ms", "error"])

    for r in results:
        writer.writerow([
            r.target_id,
            r.name,
            r.host,
            r.ok,
            r.http_status if r.http_status is not None else "",
            f"{r.latency_ms:.3f}" if r.latency_ms is not None else "",
            r.error or "",
        ])

    return output.getvalue()


def write_to_file(content: str, filepath: str) -> None:
    """Write export content to a file."""
    with open(filepath, "w") as f:
        f.write(content)
