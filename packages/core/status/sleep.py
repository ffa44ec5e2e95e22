from __future__ import annotations

import logging

from packages.core.platform.types import GPU, PlatformError

from .backend import MonitoringBackend

log = logging.getLogger(__name__)


def is_sleeping(backend: MonitoringBackend) -> bool:
    """
    A GPU clock of exactly 0 Hz means the console is asleep.

    A failed query counts as awake so a flaky clock service never hides
    the foreground application.
    """
    try:
        rate = backend.get_clock_rate(GPU)
    except PlatformError as e:
        log.warning("GPU clock query via %s failed, assuming awake: %s", backend.kind.value, e)
        return False
    return rate == 0
