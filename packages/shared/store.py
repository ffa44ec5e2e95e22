from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from packages.shared.config import ServiceConfig
from packages.shared.paths import config_path, ensure_app_dirs

log = logging.getLogger(__name__)


class ConfigStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        if path is None:
            ensure_app_dirs()
            path = config_path()
        self._path = Path(path)

    def load(self) -> ServiceConfig:
        if not self._path.exists():
            cfg = ServiceConfig()
            self.save(cfg)
            return cfg

        try:
            raw = self._path.read_text(encoding="utf-8")
            data: Any = json.loads(raw)
            return ServiceConfig.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            # Keep the operator's file untouched so it can be fixed in place.
            log.warning("Invalid config at %s, using defaults: %s", self._path, e)
            return ServiceConfig()

    def save(self, cfg: ServiceConfig) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(cfg.model_dump_json(indent=2), encoding="utf-8")

    def path(self) -> str:
        return str(self._path)
