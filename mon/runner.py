from __future__ import annotations

import logging
import threading
import time
from typing import Sequence

from mon.checks.http_check import DEFAULT_TIMEOUT_S, run_http
from mon.checks.results import ProbeOutcome
from mon.models import CheckResult, Service

logger = logging.getLogger(__name__)


def _probe(result: CheckResult, timeout_s: float) -> None:
    try:
        outcome = run_http(result.service, timeout_s=timeout_s)
    except Exception as e:
        # A crashed worker must still leave a status behind.
        logger.exception("probe failed", extra={"url": result.service.url})
        outcome = ProbeOutcome.unavailable(str(e))
    result.record(outcome)


def run_once(
    services: Sequence[Service], timeout_s: float = DEFAULT_TIMEOUT_S
) -> list[CheckResult]:
    """Probe every service in parallel and return once all have answered.

    Results are in the same order as ``services``. Each worker thread writes
    only to its own result, so the list is safe to read after the join.

    ``timeout_s`` is also a hard deadline for the whole probe, not only for
    each socket wait. Workers still running when it passes are abandoned and
    their service is recorded as unavailable.
    """
    results = [CheckResult(s) for s in services]
    threads = [
        threading.Thread(
            target=_probe,
            args=(res, timeout_s),
            name=f"probe-{i}",
            daemon=True,
        )
        for i, res in enumerate(results)
    ]
    deadline = time.monotonic() + timeout_s
    for t in threads:
        t.start()
    for t in threads:
        t.join(max(0.0, deadline - time.monotonic()))

    for res in results:
        if res.record(ProbeOutcome.unavailable(f"no response within {timeout_s}s")):
            logger.error(
                "timed out getting URL",
                extra={"url": res.service.url, "timeout_s": timeout_s},
            )
    return results
