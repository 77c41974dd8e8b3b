from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

import requests

from mon.checks.results import ProbeOutcome

if TYPE_CHECKING:
    from mon.models import Service

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 2.0


def run_http(service: Service, timeout_s: float = DEFAULT_TIMEOUT_S) -> ProbeOutcome:
    start = time.perf_counter()
    try:
        r = requests.get(
            service.url,
            headers=dict(service.headers),
            timeout=timeout_s,
            stream=True,
        )
    except requests.RequestException as e:
        latency_ms = int((time.perf_counter() - start) * 1000)
        logger.error(
            "error getting URL",
            extra={"url": service.url, "error": str(e), "latency_ms": latency_ms},
        )
        return ProbeOutcome.unavailable(str(e))
    try:
        return ProbeOutcome.ok(r.status_code)
    finally:
        r.close()
