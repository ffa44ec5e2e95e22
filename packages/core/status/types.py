from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Sleeping:
    """Device is in a low-power state."""


@dataclass(frozen=True)
class NoForegroundApplication:
    """Device is awake with no trackable application (e.g. home menu)."""


@dataclass(frozen=True)
class ResolvedApplication:
    program_id: int
    name: str


StatusSnapshot = Union[Sleeping, NoForegroundApplication, ResolvedApplication]

SLEEPING = Sleeping()
NO_FOREGROUND_APPLICATION = NoForegroundApplication()
