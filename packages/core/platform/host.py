"""
Host platform: serves status from a Linux (L4T) or desktop machine.

The firmware version is declared in config, since a host has none. Clock
queries go to nvidia-smi (clkrst backend) or a devfreq sysfs node (pcv
backend). Applications are recognised by executable name against the
configured title catalog; psutil supplies the process table.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional

import psutil

from packages.core.status.control_data import build_control_data
from packages.shared.config import HostPlatformConfig, HostTitle

from .base import ConsolePlatform
from .nvidia_smi import NvidiaSmiClockReader
from .types import (
    GPU,
    RESULT_NO_CONTROL_DATA,
    RESULT_PROCESS_NOT_FOUND,
    PlatformError,
    PlatformVersion,
)

log = logging.getLogger(__name__)


class HostPlatform(ConsolePlatform):
    def __init__(self, config: HostPlatformConfig, clock_reader: Optional[NvidiaSmiClockReader] = None) -> None:
        self._version = PlatformVersion.parse(config.system_version)
        self._devfreq_path = Path(config.gpu_devfreq_path)
        self._clock_reader = clock_reader or NvidiaSmiClockReader(config.nvidia_smi_path)
        self._by_exe: Dict[str, HostTitle] = {t.exe.lower(): t for t in config.titles}
        self._by_program_id: Dict[int, HostTitle] = {t.program_id: t for t in config.titles}

    def get_system_version(self) -> PlatformVersion:
        return self._version

    def clkrst_get_clock_rate(self, device_code: int) -> int:
        if device_code != GPU.device_code:
            raise PlatformError(f"no clock for device {device_code:#x}")
        return self._clock_reader.graphics_clock_hz()

    def pcv_get_clock_rate(self, module: int) -> int:
        if module != GPU.pcv_module:
            raise PlatformError(f"no clock for module {module}")
        try:
            return int(self._devfreq_path.read_text(encoding="ascii").strip())
        except (OSError, ValueError) as e:
            raise PlatformError(f"cannot read {self._devfreq_path}: {e}") from e

    def get_application_process_id(self) -> int:
        if not self._by_exe:
            return 0
        for p in psutil.process_iter(attrs=["pid", "name"]):
            try:
                n = p.info.get("name")
                if n and str(n).lower() in self._by_exe:
                    return int(p.info["pid"])
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return 0

    def get_program_id(self, process_id: int) -> int:
        try:
            name = psutil.Process(process_id).name()
        except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
            raise PlatformError(f"no process {process_id}: {e}", RESULT_PROCESS_NOT_FOUND) from e
        title = self._by_exe.get(name.lower())
        if title is None:
            raise PlatformError(f"process {process_id} ({name}) is not a known title", RESULT_PROCESS_NOT_FOUND)
        return title.program_id

    def get_application_control_data(self, program_id: int) -> bytes:
        title = self._by_program_id.get(program_id)
        if title is None:
            raise PlatformError(f"no control data for {program_id:016X}", RESULT_NO_CONTROL_DATA)
        return build_control_data(title.names)
