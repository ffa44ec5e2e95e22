from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "PresenceBeacon"
HOME_ENV = "PRESENCE_BEACON_HOME"

def app_data_dir() -> Path:
    override = os.environ.get(HOME_ENV)
    if override:
        return Path(override)
    base = os.environ.get("APPDATA") or str(Path.home())
    return Path(base) / APP_NAME

def config_path() -> Path:
    return app_data_dir() / "config.json"

def fixture_path() -> Path:
    return app_data_dir() / "device.json"

def logs_dir() -> Path:
    return app_data_dir() / "logs"

def log_path() -> Path:
    return logs_dir() / "server.log"

def ensure_app_dirs() -> None:
    app_data_dir().mkdir(parents=True, exist_ok=True)
    logs_dir().mkdir(parents=True, exist_ok=True)
