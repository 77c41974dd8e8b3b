from __future__ import annotations

from http import HTTPStatus

HEALTHY_STATUS = int(HTTPStatus.OK)


def status_text(code: int) -> str:
    """Reason phrase for an HTTP status code, empty when the code is unknown."""
    try:
        return HTTPStatus(code).phrase
    except ValueError:
        return ""


def is_healthy(code: int) -> bool:
    # Only a literal 200 counts; other 2xx codes still notify.
    return code == HEALTHY_STATUS


def _applescript_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def notification_script(title: str, body: str) -> str:
    return (
        f"display notification {_applescript_quote(body)} "
        f"with title {_applescript_quote(title)}"
    )
