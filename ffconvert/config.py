"""
Tool location configuration

Executables are looked up on PATH and may be overridden with environment
variables, e.g. FFCONVERT_FFMPEG=/opt/ffmpeg/bin/ffmpeg.
"""

import os
import platform
import shutil
from typing import Mapping, Optional

from pydantic import BaseModel, field_validator

ENV_PREFIX = 'FFCONVERT_'


def find_executable(name: str) -> str:
    """Return the full path of an executable on PATH, or the bare name"""
    candidate = name + '.exe' if platform.system() == 'Windows' else name
    return shutil.which(candidate) or name


class ToolConfig(BaseModel):
    """Locations of the external binaries used by the converter"""
    ffmpeg_path: str = 'ffmpeg'
    ffprobe_path: str = 'ffprobe'
    nvidia_smi_path: str = 'nvidia-smi'

    @field_validator('ffmpeg_path', 'ffprobe_path', 'nvidia_smi_path')
    @classmethod
    def validate_path(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('Executable path must not be empty')
        return v


def load_config(environ: Optional[Mapping[str, str]] = None) -> ToolConfig:
    """Build the tool configuration from PATH lookups and environment overrides"""
    env = os.environ if environ is None else environ
    values = {}
    for field, tool in (('ffmpeg_path', 'ffmpeg'),
                        ('ffprobe_path', 'ffprobe'),
                        ('nvidia_smi_path', 'nvidia-smi')):
        override = env.get(ENV_PREFIX + tool.upper().replace('-', '_'))
        values[field] = override if override else find_executable(tool)
    return ToolConfig(**values)
