"""
Simulated console backed by a JSON device-state file.

The file is re-read on every query, so editing it while the service runs
changes what the next client sees. Per-query failures (platform result
codes) and delays can be injected to exercise the degrade paths.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from packages.core.status.control_data import build_control_data
from packages.shared.config import ProgramId

from .base import ConsolePlatform
from .types import (
    GPU,
    RESULT_NO_CONTROL_DATA,
    RESULT_PROCESS_NOT_FOUND,
    PlatformError,
    PlatformVersion,
)

log = logging.getLogger(__name__)

QUERY_NAMES = (
    "get_system_version",
    "clkrst_get_clock_rate",
    "pcv_get_clock_rate",
    "get_application_process_id",
    "get_program_id",
    "get_application_control_data",
)


class FixtureApplication(BaseModel):
    program_id: ProgramId
    names: List[str] = Field(default_factory=list, max_length=16)
    publishers: List[str] = Field(default_factory=list, max_length=16)
    # Storage read succeeds but returns no bytes
    empty_control_data: bool = False


class DeviceState(BaseModel):
    system_version: str = "12.1.0"
    gpu_clock_hz: int = Field(default=307_200_000, ge=0)
    foreground_pid: int = Field(default=0, ge=0)
    processes: Dict[int, ProgramId] = Field(default_factory=dict)
    applications: List[FixtureApplication] = Field(default_factory=list)
    failures: Dict[str, int] = Field(default_factory=dict)
    delays: Dict[str, float] = Field(default_factory=dict)

    @field_validator("system_version")
    @classmethod
    def _check_version(cls, v: str) -> str:
        PlatformVersion.parse(v)
        return v

    @field_validator("failures", "delays")
    @classmethod
    def _check_query_names(cls, v: dict) -> dict:
        unknown = sorted(set(v) - set(QUERY_NAMES))
        if unknown:
            raise ValueError(f"unknown platform queries: {', '.join(unknown)}")
        return v

    def application(self, program_id: int) -> Optional[FixtureApplication]:
        for app in self.applications:
            if app.program_id == program_id:
                return app
        return None


class FixturePlatform(ConsolePlatform):
    def __init__(self, path: Optional[Path] = None, state: Optional[DeviceState] = None) -> None:
        if path is None and state is None:
            raise ValueError("FixturePlatform needs a state file or an in-memory state")
        self._path = Path(path) if path is not None else None
        self._state = state

    def ensure_exists(self) -> None:
        """Write a default device state if the state file is missing."""
        if self._path is None or self._path.exists():
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(DeviceState().model_dump_json(indent=2), encoding="utf-8")
        log.info("Wrote default device state to %s", self._path)

    def load_state(self) -> DeviceState:
        if self._state is not None:
            return self._state
        path = self._path
        if path is None:
            raise PlatformError("no device state configured")
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return DeviceState.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            raise PlatformError(f"device state {path} unreadable: {e}") from e

    def _enter(self, query: str) -> DeviceState:
        state = self.load_state()
        delay = state.delays.get(query)
        if delay:
            time.sleep(delay)
        code = state.failures.get(query)
        if code is not None:
            raise PlatformError(f"{query} failed", code)
        return state

    def get_system_version(self) -> PlatformVersion:
        state = self._enter("get_system_version")
        return PlatformVersion.parse(state.system_version)

    def clkrst_get_clock_rate(self, device_code: int) -> int:
        state = self._enter("clkrst_get_clock_rate")
        if device_code != GPU.device_code:
            raise PlatformError(f"no clock for device {device_code:#x}")
        return state.gpu_clock_hz

    def pcv_get_clock_rate(self, module: int) -> int:
        state = self._enter("pcv_get_clock_rate")
        if module != GPU.pcv_module:
            raise PlatformError(f"no clock for module {module}")
        return state.gpu_clock_hz

    def get_application_process_id(self) -> int:
        return self._enter("get_application_process_id").foreground_pid

    def get_program_id(self, process_id: int) -> int:
        state = self._enter("get_program_id")
        try:
            return state.processes[process_id]
        except KeyError:
            raise PlatformError(f"no process {process_id}", RESULT_PROCESS_NOT_FOUND) from None

    def get_application_control_data(self, program_id: int) -> bytes:
        state = self._enter("get_application_control_data")
        app = state.application(program_id)
        if app is None:
            raise PlatformError(f"no control data for {program_id:016X}", RESULT_NO_CONTROL_DATA)
        if app.empty_control_data:
            return b""
        return build_control_data(app.names, app.publishers)
