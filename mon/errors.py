from __future__ import annotations

from pathlib import Path


class MonError(Exception):
    pass


class ServicesFileError(MonError):
    def __init__(self, path: Path | str, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ReportError(MonError):
    pass


class NotificationError(MonError):
    pass
