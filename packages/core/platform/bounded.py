"""
Time bounds for platform queries.

Platform services are blocking calls with no timeout of their own. Each
query runs on a short-lived daemon thread and the caller waits at most
``timeout`` seconds; a query that overruns is abandoned (its thread keeps
running until the service returns) and reported as QueryTimeout.
TimeoutPlatform keeps one abandoned worker per query at most.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

from .base import ConsolePlatform
from .types import PlatformVersion, QueryTimeout

log = logging.getLogger(__name__)

T = TypeVar("T")


def _start_worker(fn: Callable[..., T], args: Tuple[Any, ...], name: str) -> Tuple[threading.Thread, Dict[str, Any]]:
    outcome: Dict[str, Any] = {}

    def _target() -> None:
        try:
            outcome["value"] = fn(*args)
        except BaseException as e:
            outcome["error"] = e

    worker = threading.Thread(target=_target, name=f"platform-{name}", daemon=True)
    try:
        worker.start()
    except RuntimeError as e:
        # thread limit reached
        raise QueryTimeout(f"{name} could not start: {e}") from e
    return worker, outcome


def _await(worker: threading.Thread, outcome: Dict[str, Any], timeout: float, name: str) -> Any:
    worker.join(timeout)
    if worker.is_alive():
        log.warning("Platform query %s exceeded %.2fs, abandoning it", name, timeout)
        raise QueryTimeout(f"{name} timed out after {timeout:.2f}s")
    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def call_with_timeout(fn: Callable[..., T], *args: Any, timeout: Optional[float], name: str = "query") -> T:
    if timeout is None:
        return fn(*args)
    worker, outcome = _start_worker(fn, args, name)
    return _await(worker, outcome, timeout, name)


class TimeoutPlatform(ConsolePlatform):
    """
    Wraps a platform so every query is bounded by ``timeout`` seconds.

    At most one abandoned worker is kept per query. While it is still
    blocked, further calls to the same query fail with QueryTimeout at once
    instead of stacking more threads on the stuck service.
    """

    def __init__(self, inner: ConsolePlatform, timeout: Optional[float]) -> None:
        self._inner = inner
        self._timeout = timeout
        self._lock = threading.Lock()
        self._stuck: Dict[str, threading.Thread] = {}

    @property
    def inner(self) -> ConsolePlatform:
        return self._inner

    def _call(self, name: str, fn: Callable[..., T], *args: Any) -> T:
        if self._timeout is None:
            return fn(*args)

        with self._lock:
            previous = self._stuck.get(name)
            if previous is not None:
                if previous.is_alive():
                    raise QueryTimeout(f"{name} is still blocked in an earlier call")
                del self._stuck[name]

        worker, outcome = _start_worker(fn, args, name)
        try:
            return _await(worker, outcome, self._timeout, name)
        except QueryTimeout:
            with self._lock:
                self._stuck[name] = worker
            raise

    def get_system_version(self) -> PlatformVersion:
        return self._call("get_system_version", self._inner.get_system_version)

    def clkrst_get_clock_rate(self, device_code: int) -> int:
        return self._call("clkrst_get_clock_rate", self._inner.clkrst_get_clock_rate, device_code)

    def pcv_get_clock_rate(self, module: int) -> int:
        return self._call("pcv_get_clock_rate", self._inner.pcv_get_clock_rate, module)

    def get_application_process_id(self) -> int:
        return self._call("get_application_process_id", self._inner.get_application_process_id)

    def get_program_id(self, process_id: int) -> int:
        return self._call("get_program_id", self._inner.get_program_id, process_id)

    def get_application_control_data(self, program_id: int) -> bytes:
        return self._call("get_application_control_data", self._inner.get_application_control_data, program_id)
