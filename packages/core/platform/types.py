from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def make_result(module: int, description: int) -> int:
    """Compose a platform result code (module in the low 9 bits)."""
    return (module & 0x1FF) | ((description & 0x1FFF) << 9)


def format_result(code: int) -> str:
    """Render a result code the way the console reports it, e.g. ``2016-0050``."""
    module = code & 0x1FF
    description = (code >> 9) & 0x1FFF
    return f"{2000 + module:04d}-{description:04d}"


# ns: no control data for the requested program id
RESULT_NO_CONTROL_DATA = make_result(16, 50)
# pm: no process with the requested id
RESULT_PROCESS_NOT_FOUND = make_result(15, 1)


class PlatformError(Exception):
    """A platform query failed."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.code = code

    def __str__(self) -> str:
        msg = super().__str__()
        if self.code is None:
            return msg
        return f"{msg} ({format_result(self.code)})"


class QueryTimeout(PlatformError):
    """A platform query did not return within its time bound."""


@dataclass(frozen=True, order=True)
class PlatformVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "PlatformVersion":
        parts = text.strip().split(".")
        if len(parts) != 3:
            raise ValueError(f"expected MAJOR.MINOR.PATCH, got {text!r}")
        major, minor, patch = (int(p) for p in parts)
        if min(major, minor, patch) < 0:
            raise ValueError(f"negative version component in {text!r}")
        return cls(major, minor, patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True)
class HardwareModule:
    """A clock domain, addressable by either monitoring backend."""
    name: str
    pcv_module: int  # PCV module index (pre-8.0.0 firmware)
    device_code: int  # clkrst device code (8.0.0+ firmware)


GPU = HardwareModule(name="gpu", pcv_module=1, device_code=0x40000002)
