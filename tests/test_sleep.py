import pytest

from packages.core.platform.types import PlatformError, QueryTimeout
from packages.core.status.backend import ClkrstBackend, PcvBackend
from packages.core.status.sleep import is_sleeping
from tests.helpers import RecordingPlatform


@pytest.mark.parametrize("backend_cls", [ClkrstBackend, PcvBackend])
def test_zero_clock_is_sleeping(backend_cls) -> None:
    assert is_sleeping(backend_cls(RecordingPlatform(gpu_clock_hz=0))) is True


@pytest.mark.parametrize("rate", [1, 76_800_000, 921_600_000])
def test_nonzero_clock_is_awake(rate: int) -> None:
    assert is_sleeping(ClkrstBackend(RecordingPlatform(gpu_clock_hz=rate))) is False


@pytest.mark.parametrize("error", [PlatformError("pcv failed", 0x2A0), QueryTimeout("stuck")])
def test_query_failure_counts_as_awake(error: PlatformError) -> None:
    assert is_sleeping(PcvBackend(RecordingPlatform(gpu_clock_hz=error))) is False


def test_single_query_per_check() -> None:
    platform = RecordingPlatform(gpu_clock_hz=PlatformError("flaky"))
    is_sleeping(PcvBackend(platform))
    assert platform.calls == ["pcv_get_clock_rate"]
