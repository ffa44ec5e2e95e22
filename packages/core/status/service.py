from __future__ import annotations

import logging

from .backend import MonitoringBackend
from .encoder import encode
from .resolver import ForegroundResolver
from .sleep import is_sleeping
from .types import SLEEPING, StatusSnapshot

log = logging.getLogger(__name__)


class StatusService:
    """Builds a fresh snapshot per request: sleep check first, then resolution."""

    def __init__(self, backend: MonitoringBackend, resolver: ForegroundResolver) -> None:
        self._backend = backend
        self._resolver = resolver

    @property
    def backend(self) -> MonitoringBackend:
        return self._backend

    def snapshot(self) -> StatusSnapshot:
        if is_sleeping(self._backend):
            return SLEEPING
        return self._resolver.resolve()

    def status_line(self) -> str:
        snapshot = self.snapshot()
        log.debug("Snapshot: %r", snapshot)
        return encode(snapshot)
