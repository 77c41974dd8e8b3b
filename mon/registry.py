from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from mon.config import settings
from mon.errors import ServicesFileError
from mon.models import Service, ServiceList

APP_DIR_NAME = "mon"
SERVICES_FILE_NAME = "services.json"
YAML_SUFFIXES = {".yml", ".yaml"}


def user_config_dir() -> Path:
    """Platform config root, the same one most desktop tools use."""
    if sys.platform.startswith("win"):
        appdata = os.getenv("APPDATA")
        if not appdata:
            raise OSError("%APPDATA% is not defined")
        return Path(appdata)
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    xdg = os.getenv("XDG_CONFIG_HOME")
    if xdg and Path(xdg).is_absolute():
        return Path(xdg)
    return Path.home() / ".config"


def config_dir() -> Path:
    """Return the mon config directory, creating it (0700) when missing."""
    if settings.MON_CONFIG_DIR:
        path = Path(settings.MON_CONFIG_DIR).expanduser()
    else:
        path = user_config_dir() / APP_DIR_NAME
    path.mkdir(mode=0o700, exist_ok=True)
    return path


def default_services_path() -> Path:
    return config_dir() / SERVICES_FILE_NAME


def _parse(path: Path, text: str):
    if path.suffix.lower() in YAML_SUFFIXES:
        return yaml.safe_load(text)
    return json.loads(text)


def load_services(path: Path | str) -> tuple[Service, ...]:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ServicesFileError(path, f"unable to open services file: {e}") from e
    except UnicodeDecodeError as e:
        raise ServicesFileError(path, f"unable to parse services file: {e}") from e

    try:
        data = _parse(path, text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ServicesFileError(path, f"unable to parse services file: {e}") from e

    if data is None:
        return ()
    try:
        services = ServiceList.validate_python(data)
    except ValidationError as e:
        raise ServicesFileError(path, f"invalid services file: {e}") from e
    return tuple(services)
