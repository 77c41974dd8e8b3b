from __future__ import annotations

import threading
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from mon.checks.results import ProbeOutcome


class Service(BaseModel):
    """One target from the services file. Read-only once loaded."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("headers", mode="before")
    @classmethod
    def _null_headers(cls, v: Any) -> Any:
        return {} if v is None else v


ServiceList = TypeAdapter(list[Service])


class CheckResult:
    """Pairs a service with the outcome of its probe.

    The outcome slot is written exactly once. The first write wins; a later
    one (a worker answering after its deadline) is dropped.
    """

    __slots__ = ("service", "_outcome", "_lock")

    def __init__(self, service: Service) -> None:
        self.service = service
        self._outcome: ProbeOutcome | None = None
        self._lock = threading.Lock()

    def record(self, outcome: ProbeOutcome) -> bool:
        with self._lock:
            if self._outcome is not None:
                return False
            self._outcome = outcome
            return True

    @property
    def done(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> ProbeOutcome:
        if self._outcome is None:
            raise RuntimeError(f"result for {self.service.name!r} not recorded yet")
        return self._outcome

    @property
    def status(self) -> int:
        return self.outcome.status

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.service.name, "url": self.service.url}
        if self.service.headers:
            out["headers"] = dict(self.service.headers)
        out["status"] = self.status
        return out

    def __repr__(self) -> str:
        status = self._outcome.status if self._outcome is not None else None
        return f"CheckResult(name={self.service.name!r}, status={status!r})"
