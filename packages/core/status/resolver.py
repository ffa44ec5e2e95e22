"""
Foreground application resolution.

Four lookups, each gated on the previous one:
  1. foreground process id        (pm:shell)
  2. process id -> program id     (pm:dmnt)
  3. program id -> control data   (ns, storage source)
  4. first populated name slot, or "Unknown"

A failure at steps 1-3 degrades the whole result to
NoForegroundApplication. Step 4 cannot fail.
"""

from __future__ import annotations

import logging
from typing import Optional

from packages.core.platform.base import ConsolePlatform
from packages.core.platform.types import PlatformError

from .control_data import ControlData, ControlDataError, NAME_SIZE, parse_control_data
from .types import NO_FOREGROUND_APPLICATION, ResolvedApplication, StatusSnapshot

log = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"


def foreground_process_id(platform: ConsolePlatform) -> Optional[int]:
    try:
        pid = platform.get_application_process_id()
    except PlatformError as e:
        log.warning("Foreground process query failed: %s", e)
        return None
    if not pid:
        return None
    return pid


def program_id_for(platform: ConsolePlatform, process_id: int) -> Optional[int]:
    try:
        return platform.get_program_id(process_id)
    except PlatformError as e:
        log.warning("Program id lookup for pid %d failed: %s", process_id, e)
        return None


def fetch_control_data(platform: ConsolePlatform, program_id: int) -> Optional[ControlData]:
    try:
        blob = platform.get_application_control_data(program_id)
    except PlatformError as e:
        log.warning("Control data fetch for %016X failed: %s", program_id, e)
        return None
    if not blob:
        log.warning("Control data for %016X is empty", program_id)
        return None
    try:
        return parse_control_data(blob)
    except ControlDataError as e:
        log.warning("Control data for %016X unusable: %s", program_id, e)
        return None


def display_name(control: ControlData, max_length: int = NAME_SIZE) -> str:
    return control.first_name(max_length) or UNKNOWN_NAME


class ForegroundResolver:
    def __init__(self, platform: ConsolePlatform, max_name_length: int = NAME_SIZE) -> None:
        self._platform = platform
        self._max_name_length = max_name_length

    def resolve(self) -> StatusSnapshot:
        pid = foreground_process_id(self._platform)
        if pid is None:
            return NO_FOREGROUND_APPLICATION

        program_id = program_id_for(self._platform, pid)
        if program_id is None:
            return NO_FOREGROUND_APPLICATION

        control = fetch_control_data(self._platform, program_id)
        if control is None:
            return NO_FOREGROUND_APPLICATION

        return ResolvedApplication(
            program_id=program_id,
            name=display_name(control, self._max_name_length),
        )
