"""
Monitoring backend selection.

Firmware 8.0.0 moved clock queries from the pcv module interface to
per-device clkrst sessions; the two are never mixed within one process.
The backend is picked once at startup from the firmware version.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum

from packages.core.platform.base import ConsolePlatform
from packages.core.platform.types import HardwareModule, PlatformError, PlatformVersion

log = logging.getLogger(__name__)

CLKRST_MIN_VERSION = PlatformVersion(8, 0, 0)


class BackendKind(str, Enum):
    CLKRST = "clkrst"
    PCV = "pcv"


class BackendSelectionError(RuntimeError):
    """Firmware version could not be read; no backend can be chosen safely."""


class MonitoringBackend(ABC):
    kind: BackendKind

    def __init__(self, platform: ConsolePlatform) -> None:
        self._platform = platform

    @abstractmethod
    def get_clock_rate(self, module: HardwareModule) -> int:
        """Current clock rate in Hz. Raises PlatformError on failure."""
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class ClkrstBackend(MonitoringBackend):
    kind = BackendKind.CLKRST

    def get_clock_rate(self, module: HardwareModule) -> int:
        return self._platform.clkrst_get_clock_rate(module.device_code)


class PcvBackend(MonitoringBackend):
    kind = BackendKind.PCV

    def get_clock_rate(self, module: HardwareModule) -> int:
        return self._platform.pcv_get_clock_rate(module.pcv_module)


def backend_kind_for(version: PlatformVersion) -> BackendKind:
    return BackendKind.CLKRST if version >= CLKRST_MIN_VERSION else BackendKind.PCV


def create_backend(kind: BackendKind, platform: ConsolePlatform) -> MonitoringBackend:
    if kind is BackendKind.CLKRST:
        return ClkrstBackend(platform)
    return PcvBackend(platform)


def select_backend(platform: ConsolePlatform) -> MonitoringBackend:
    """Read the firmware version once and bind the matching backend."""
    try:
        version = platform.get_system_version()
    except PlatformError as e:
        raise BackendSelectionError(f"Failed to read firmware version: {e}") from e

    kind = backend_kind_for(version)
    log.info("Firmware %s, using %s clock backend", version, kind.value)
    return create_backend(kind, platform)
