import random
import socket
import threading
import time
import unittest
from unittest.mock import patch

from mon.checks.results import ProbeOutcome
from mon.models import Service
from mon.runner import run_once


def _services(n: int) -> list[Service]:
    return [Service(name=f"svc-{i}", url=f"http://svc-{i}.local/health") for i in range(n)]


class RunOnceTests(unittest.TestCase):
    def test_empty_input_returns_empty_list(self) -> None:
        with patch("mon.runner.run_http") as run_http_mock:
            self.assertEqual(run_once([]), [])
        run_http_mock.assert_not_called()

    def test_results_keep_input_order_and_are_complete(self) -> None:
        services = _services(40)
        codes = {s.url: 200 + (i % 5) for i, s in enumerate(services)}

        def fake_probe(service, timeout_s):
            time.sleep(random.uniform(0, 0.02))
            return ProbeOutcome.ok(codes[service.url])

        with patch("mon.runner.run_http", side_effect=fake_probe):
            for _ in range(10):
                results = run_once(services, timeout_s=2.0)
                self.assertEqual(len(results), len(services))
                self.assertTrue(all(r.done for r in results))
                self.assertEqual([r.service for r in results], services)
                self.assertEqual([r.status for r in results], [codes[s.url] for s in services])

    def test_each_service_probed_exactly_once(self) -> None:
        services = _services(25)
        calls: list[str] = []
        lock = threading.Lock()

        def fake_probe(service, timeout_s):
            with lock:
                calls.append(service.name)
            return ProbeOutcome.ok(200)

        with patch("mon.runner.run_http", side_effect=fake_probe):
            run_once(services)

        self.assertEqual(sorted(calls), sorted(s.name for s in services))

    def test_timeout_is_forwarded(self) -> None:
        with patch("mon.runner.run_http", return_value=ProbeOutcome.ok(200)) as run_http_mock:
            run_once(_services(1), timeout_s=0.75)
        run_http_mock.assert_called_once_with(_services(1)[0], timeout_s=0.75)

    def test_probes_run_concurrently(self) -> None:
        services = _services(4)

        def slow_probe(service, timeout_s):
            time.sleep(0.4)
            return ProbeOutcome.unavailable("timed out")

        with patch("mon.runner.run_http", side_effect=slow_probe):
            start = time.perf_counter()
            results = run_once(services)
            elapsed = time.perf_counter() - start

        self.assertEqual([r.status for r in results], [503] * 4)
        self.assertLess(elapsed, 1.2)

    def test_crashing_probe_still_yields_unavailable(self) -> None:
        services = _services(3)

        def flaky_probe(service, timeout_s):
            if service.name == "svc-1":
                raise KeyError("boom")
            return ProbeOutcome.ok(200)

        with patch("mon.runner.run_http", side_effect=flaky_probe), self.assertLogs(
            "mon.runner", level="ERROR"
        ):
            results = run_once(services)

        self.assertEqual([r.status for r in results], [200, 503, 200])

    def test_deadline_caps_a_slow_service(self) -> None:
        services = [
            Service(name="stuck", url="http://stuck.local"),
            Service(name="fast", url="http://fast.local"),
        ]

        def fake_probe(service, timeout_s):
            if service.name == "stuck":
                time.sleep(1.0)
            return ProbeOutcome.ok(200)

        with patch("mon.runner.run_http", side_effect=fake_probe), self.assertLogs(
            "mon.runner", level="ERROR"
        ) as logs:
            start = time.perf_counter()
            results = run_once(services, timeout_s=0.2)
            elapsed = time.perf_counter() - start

            self.assertLess(elapsed, 0.8)
            self.assertEqual([r.status for r in results], [503, 200])
            self.assertIn("no response within", results[0].outcome.error)

            # the abandoned worker finishing later does not overwrite the result
            time.sleep(1.0)
            self.assertEqual(results[0].status, 503)

        self.assertEqual([r.url for r in logs.records], ["http://stuck.local"])


class _TrickleServer:
    """Answers every connection with a 200 response sent one byte at a time."""

    def __init__(self, delay_s: float = 0.2) -> None:
        self.delay_s = delay_s
        self._stop = threading.Event()
        self._sock = socket.socket()
        self._sock.bind(("127.0.0.1", 0))
        self._sock.listen(5)
        self._sock.settimeout(0.1)
        self.url = f"http://127.0.0.1:{self._sock.getsockname()[1]}/"
        threading.Thread(target=self._serve, daemon=True).start()

    def _serve(self) -> None:
        while not self._stop.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            threading.Thread(target=self._trickle, args=(conn,), daemon=True).start()

    def _trickle(self, conn: socket.socket) -> None:
        with conn:
            for b in b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n":
                if self._stop.is_set():
                    return
                try:
                    conn.sendall(bytes([b]))
                except OSError:
                    return
                time.sleep(self.delay_s)

    def close(self) -> None:
        self._stop.set()
        self._sock.close()


class TrickleServerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.server = _TrickleServer(delay_s=0.2)
        self.addCleanup(self.server.close)

    def test_trickling_server_is_cut_off_at_the_timeout(self) -> None:
        services = [Service(name="trickle", url=self.server.url)]
        with self.assertLogs("mon.runner", level="ERROR"):
            start = time.perf_counter()
            results = run_once(services, timeout_s=0.5)
            elapsed = time.perf_counter() - start

        self.assertEqual(results[0].status, 503)
        self.assertLess(elapsed, 1.2)


if __name__ == "__main__":
    unittest.main()
