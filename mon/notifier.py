from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from mon.config import settings
from mon.errors import NotificationError
from mon.formatting import notification_script


class Notifier(Protocol):
    def send(self, title: str, body: str) -> None: ...


def _run_command(argv: list[str]) -> None:
    try:
        subprocess.run(argv, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise NotificationError(f"could not execute {argv[0]!r}: not found") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise NotificationError(f"could not execute {argv[0]!r}: {detail}") from e


class OsascriptNotifier:
    """macOS Notification Center via AppleScript."""

    def send(self, title: str, body: str) -> None:
        _run_command(["osascript", "-e", notification_script(title, body)])


class NotifySendNotifier:
    """freedesktop notification daemon (libnotify)."""

    def send(self, title: str, body: str) -> None:
        _run_command(["notify-send", "--app-name=mon", title, body])


@dataclass
class NtfyConfig:
    base_url: str
    topic: str
    priority: int = 4
    timeout_s: float = 5.0


class NtfyNotifier:
    def __init__(self, cfg: NtfyConfig) -> None:
        self.cfg = cfg

    def _post(self, title: str, message: str, tags: Optional[str] = None) -> None:
        url = f"{self.cfg.base_url.rstrip('/')}/{self.cfg.topic}"
        headers = {
            "Title": title,
            "Priority": str(self.cfg.priority),
        }
        if tags:
            headers["Tags"] = tags
        try:
            r = requests.post(
                url,
                data=message.encode("utf-8"),
                headers=headers,
                timeout=self.cfg.timeout_s,
            )
            r.raise_for_status()
        except requests.RequestException as e:
            raise NotificationError(f"ntfy delivery to {url} failed: {e}") from e

    def send(self, title: str, body: str) -> None:
        self._post(title, body, tags="rotating_light")


NOTIFIER_KINDS = ("auto", "osascript", "notify-send", "ntfy")


def build_notifier(kind: str | None = None) -> Notifier:
    kind = (kind or settings.MON_NOTIFIER or "auto").lower()
    if kind not in NOTIFIER_KINDS:
        raise NotificationError(f"unknown notifier {kind!r}")

    ntfy_ready = bool(settings.MON_NTFY_URL and settings.MON_NTFY_TOPIC)
    if kind == "ntfy" or (kind == "auto" and ntfy_ready):
        if not ntfy_ready:
            raise NotificationError("ntfy notifier needs MON_NTFY_URL and MON_NTFY_TOPIC")
        return NtfyNotifier(
            NtfyConfig(base_url=settings.MON_NTFY_URL, topic=settings.MON_NTFY_TOPIC)
        )
    if kind == "osascript" or (kind == "auto" and sys.platform == "darwin"):
        return OsascriptNotifier()
    return NotifySendNotifier()
