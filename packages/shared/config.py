from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, BeforeValidator, Field


def parse_program_id(value: Any) -> Any:
    """Accept program ids as ints, "0x"-prefixed hex or bare 16-digit hex."""
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            text = text[2:]
        return int(text, 16)
    return value


ProgramId = Annotated[int, BeforeValidator(parse_program_id), Field(ge=0, le=0xFFFF_FFFF_FFFF_FFFF)]


class HostTitle(BaseModel):
    exe: str
    program_id: ProgramId
    # one entry per language slot, American English first
    names: List[str] = Field(default_factory=list, max_length=16)


class HostPlatformConfig(BaseModel):
    system_version: str = Field(default="8.0.0", pattern=r"^\d+\.\d+\.\d+$")
    # Tegra X1 GPU devfreq node under L4T
    gpu_devfreq_path: str = "/sys/devices/gpu.0/devfreq/57000000.gpu/cur_freq"
    nvidia_smi_path: Optional[str] = None
    titles: List[HostTitle] = Field(default_factory=list)


class ServiceConfig(BaseModel):
    listen_host: str = "0.0.0.0"
    port: int = Field(default=1234, ge=0, le=65535)
    backlog: int = Field(default=3, ge=1)
    query_timeout_seconds: Optional[float] = Field(default=2.0, gt=0)
    send_timeout_seconds: float = Field(default=5.0, gt=0)
    max_name_length: int = Field(default=0x200, ge=1)
    platform: Literal["fixture", "host"] = "fixture"
    fixture_path: Optional[str] = None
    host: HostPlatformConfig = Field(default_factory=HostPlatformConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None
