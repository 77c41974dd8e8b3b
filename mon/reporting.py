from __future__ import annotations

import enum
import json
from typing import IO, Sequence

from mon.errors import ReportError
from mon.formatting import is_healthy, status_text
from mon.models import CheckResult
from mon.notifier import Notifier

TABLE_HEADER = ("SERVICE", "URL", "STATUS")
COLUMN_PADDING = 3


class OutputMode(str, enum.Enum):
    TABLE = "table"
    JSON = "json"
    NOTIFY = "notify"


def table_rows(results: Sequence[CheckResult]) -> list[tuple[str, str, str]]:
    rows = [TABLE_HEADER]
    for res in results:
        rows.append((res.service.name, res.service.url, status_text(res.status)))
    return rows


def render_table(results: Sequence[CheckResult], out: IO[str]) -> None:
    """Write an aligned SERVICE/URL/STATUS table, one row per result.

    Every column except the last is padded to its widest cell plus
    ``COLUMN_PADDING`` spaces.
    """
    rows = table_rows(results)
    widths = [max(len(row[i]) for row in rows) for i in range(len(TABLE_HEADER) - 1)]
    for row in rows:
        cells = [cell.ljust(widths[i] + COLUMN_PADDING) for i, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        out.write("".join(cells).rstrip(" ") + "\n")


def render_json(results: Sequence[CheckResult], out: IO[str]) -> None:
    try:
        payload = json.dumps(
            [res.to_dict() for res in results],
            ensure_ascii=False,
            separators=(",", ":"),
        )
    except (TypeError, ValueError) as e:
        raise ReportError(f"unable to marshal responses: {e}") from e
    out.write(payload)


def unhealthy(results: Sequence[CheckResult]) -> list[CheckResult]:
    return [res for res in results if not is_healthy(res.status)]


def send_notifications(results: Sequence[CheckResult], notifier: Notifier) -> int:
    """Send one notification per result that is not a literal 200.

    Returns how many were sent. Stops at the first delivery failure.
    """
    sent = 0
    for res in unhealthy(results):
        notifier.send(title=res.service.name, body=status_text(res.status))
        sent += 1
    return sent


def report(
    results: Sequence[CheckResult],
    mode: OutputMode,
    out: IO[str],
    notifier: Notifier | None = None,
) -> None:
    if mode is OutputMode.JSON:
        render_json(results, out)
    elif mode is OutputMode.NOTIFY:
        if notifier is None:
            raise ReportError("notify mode needs a notifier")
        send_notifications(results, notifier)
    else:
        render_table(results, out)
