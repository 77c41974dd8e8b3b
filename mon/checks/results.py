from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus

UNAVAILABLE_STATUS = int(HTTPStatus.SERVICE_UNAVAILABLE)


@dataclass(frozen=True)
class ProbeOutcome:
    status_code: int | None = None
    error: str | None = None

    @classmethod
    def ok(cls, status_code: int) -> ProbeOutcome:
        return cls(status_code=status_code)

    @classmethod
    def unavailable(cls, error: str) -> ProbeOutcome:
        return cls(error=error)

    @property
    def reachable(self) -> bool:
        return self.status_code is not None

    @property
    def status(self) -> int:
        if self.status_code is None:
            return UNAVAILABLE_STATUS
        return self.status_code
