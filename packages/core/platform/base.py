"""
Console platform interface.

Each method maps to one platform service call. Implementations either
return the value or raise PlatformError; they never return sentinel errors.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from .types import PlatformVersion


class ConsolePlatform(ABC):
    """Platform services the status pipeline consumes."""

    @abstractmethod
    def get_system_version(self) -> PlatformVersion:
        """Firmware version (set:sys)."""
        ...

    @abstractmethod
    def clkrst_get_clock_rate(self, device_code: int) -> int:
        """Clock rate in Hz through a clkrst session (8.0.0+)."""
        ...

    @abstractmethod
    def pcv_get_clock_rate(self, module: int) -> int:
        """Clock rate in Hz through the pcv module interface (pre-8.0.0)."""
        ...

    @abstractmethod
    def get_application_process_id(self) -> int:
        """Process id of the foreground application, 0 if none (pm:shell)."""
        ...

    @abstractmethod
    def get_program_id(self, process_id: int) -> int:
        """Program id of a running process (pm:dmnt)."""
        ...

    @abstractmethod
    def get_application_control_data(self, program_id: int) -> bytes:
        """Control data blob from storage (ns). May be empty."""
        ...
