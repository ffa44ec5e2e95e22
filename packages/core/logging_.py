from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

from packages.shared.config import ServiceConfig
from packages.shared.paths import log_path


def setup_logging(config: ServiceConfig) -> None:
    level = logging.getLevelName(config.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    fmt = logging.Formatter("%(asctime)s %(levelname)s %(name)s - %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    # The file sink is best effort: without it the service still runs.
    path = Path(config.log_file) if config.log_file else log_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(str(path), maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    except OSError as e:
        root.warning("File logging disabled, cannot open %s: %s", path, e)
        return
    fh.setLevel(level)
    fh.setFormatter(fmt)
    root.addHandler(fh)
