from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from packages.core.platform.base import ConsolePlatform
from packages.core.platform.types import PlatformError, PlatformVersion
from packages.core.status.control_data import build_control_data


class RecordingPlatform(ConsolePlatform):
    """In-memory platform that records every query it receives.

    A field set to a ``PlatformError`` instance makes that query raise it.
    """

    def __init__(
        self,
        *,
        version: object = PlatformVersion(12, 1, 0),
        gpu_clock_hz: object = 307_200_000,
        foreground_pid: object = 0,
        program_ids: Optional[Dict[int, object]] = None,
        control_data: Optional[Dict[int, object]] = None,
    ) -> None:
        self.version = version
        self.gpu_clock_hz = gpu_clock_hz
        self.foreground_pid = foreground_pid
        self.program_ids = program_ids or {}
        self.control_data = control_data or {}
        self.calls: List[str] = []

    @staticmethod
    def _value(value: object):
        if isinstance(value, PlatformError):
            raise value
        return value

    def get_system_version(self) -> PlatformVersion:
        self.calls.append("get_system_version")
        return self._value(self.version)

    def clkrst_get_clock_rate(self, device_code: int) -> int:
        self.calls.append("clkrst_get_clock_rate")
        return self._value(self.gpu_clock_hz)

    def pcv_get_clock_rate(self, module: int) -> int:
        self.calls.append("pcv_get_clock_rate")
        return self._value(self.gpu_clock_hz)

    def get_application_process_id(self) -> int:
        self.calls.append("get_application_process_id")
        return self._value(self.foreground_pid)

    def get_program_id(self, process_id: int) -> int:
        self.calls.append("get_program_id")
        if process_id not in self.program_ids:
            raise PlatformError(f"no process {process_id}")
        return self._value(self.program_ids[process_id])

    def get_application_control_data(self, program_id: int) -> bytes:
        self.calls.append("get_application_control_data")
        if program_id not in self.control_data:
            raise PlatformError(f"no control data for {program_id:016X}")
        return self._value(self.control_data[program_id])


def running_title(program_id: int, names: Sequence[str], pid: int = 131, **kwargs) -> RecordingPlatform:
    """Platform with one awake foreground application."""
    return RecordingPlatform(
        foreground_pid=pid,
        program_ids={pid: program_id},
        control_data={program_id: build_control_data(names)},
        **kwargs,
    )
