from __future__ import annotations

from pathlib import Path

from packages.shared.config import ServiceConfig
from packages.shared.paths import fixture_path

from .base import ConsolePlatform
from .bounded import TimeoutPlatform
from .fixture import FixturePlatform
from .host import HostPlatform


def build_platform(config: ServiceConfig) -> ConsolePlatform:
    """Concrete platform for ``config``, with every query time-bounded."""
    inner: ConsolePlatform
    if config.platform == "host":
        inner = HostPlatform(config.host)
    else:
        fixture = FixturePlatform(path=Path(config.fixture_path) if config.fixture_path else fixture_path())
        fixture.ensure_exists()
        inner = fixture
    return TimeoutPlatform(inner, timeout=config.query_timeout_seconds)
