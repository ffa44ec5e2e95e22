"""
Graphics clock reader using the nvidia-smi CLI.

Queries the current graphics (shader) clock:
  nvidia-smi --query-gpu=clocks.gr --format=csv,noheader,nounits

With several GPUs the highest clock is reported, so the host only reads
as idle (0 MHz) when every GPU is. Failures raise PlatformError.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Optional

from .types import PlatformError

log = logging.getLogger(__name__)


class NvidiaSmiClockReader:
    def __init__(self, executable: Optional[str] = None, timeout: float = 1.0) -> None:
        self._executable = executable or shutil.which("nvidia-smi") or "nvidia-smi"
        self._timeout = timeout
        log.debug("Using nvidia-smi at: %s", self._executable)

    def graphics_clock_mhz(self) -> int:
        args = [
            self._executable,
            "--query-gpu=clocks.gr",
            "--format=csv,noheader,nounits",
        ]
        try:
            result = subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                creationflags=subprocess.CREATE_NO_WINDOW if hasattr(subprocess, 'CREATE_NO_WINDOW') else 0
            )
        except subprocess.TimeoutExpired as e:
            raise PlatformError(f"nvidia-smi timed out (>{self._timeout}s)") from e
        except OSError as e:
            raise PlatformError(f"nvidia-smi could not run: {e}") from e

        if result.returncode != 0:
            if result.stderr:
                log.debug("nvidia-smi stderr: %s", result.stderr[:200])
            raise PlatformError(f"nvidia-smi exited with {result.returncode}")

        clocks: list[int] = []
        for line in result.stdout.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                clocks.append(int(float(line)))
            except ValueError:
                # "[N/A]" on GPUs that do not expose the clock
                log.debug("nvidia-smi returned non-numeric clock: %s", line)

        if not clocks:
            raise PlatformError("nvidia-smi returned no graphics clock")
        return max(clocks)

    def graphics_clock_hz(self) -> int:
        return self.graphics_clock_mhz() * 1_000_000
