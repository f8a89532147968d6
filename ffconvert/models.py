"""
Pydantic models for data validation and serialization
"""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

UNKNOWN = 'unknown'


class OutputKind(str, Enum):
    MP4 = 'mp4'
    WEBM = 'webm'
    MP3 = 'mp3'
    WAV = 'wav'

    @property
    def extension(self) -> str:
        return self.value

    @property
    def menu_number(self) -> int:
        return list(OutputKind).index(self) + 1

    @property
    def is_audio_only(self) -> bool:
        return self in (OutputKind.MP3, OutputKind.WAV)

    @classmethod
    def from_menu_choice(cls, choice: str) -> Optional['OutputKind']:
        """Map '1'..'4' or a format name to an output kind, None if invalid"""
        choice = (choice or '').strip().lower()
        for kind in cls:
            if choice in (str(kind.menu_number), kind.value):
                return kind
        return None


class QualityPreset(str, Enum):
    BEST = 'best'
    BALANCED = 'balanced'
    FASTEST = 'fastest'

    @classmethod
    def from_menu_choice(cls, choice: str) -> Optional['QualityPreset']:
        choice = (choice or '').strip().lower()
        for number, preset in enumerate(cls, start=1):
            if choice in (str(number), preset.value):
                return preset
        return None


class HardwareCapability(str, Enum):
    NVENC = 'nvenc'
    QSV = 'qsv'
    AMF = 'amf'
    CUDA_DECODE = 'cuda_decode'


class CapabilitySet(BaseModel):
    """Hardware acceleration tags detected from ffmpeg's encoder/decoder listings"""
    model_config = ConfigDict(frozen=True)

    tags: FrozenSet[HardwareCapability] = Field(default_factory=frozenset)

    def __contains__(self, tag) -> bool:
        try:
            return HardwareCapability(tag) in self.tags
        except ValueError:
            return False

    def __len__(self) -> int:
        return len(self.tags)

    @property
    def is_empty(self) -> bool:
        return not self.tags

    def sorted_tags(self) -> List[HardwareCapability]:
        return [tag for tag in HardwareCapability if tag in self.tags]


class ConversionRequest(BaseModel):
    """Fully validated conversion request, built from CLI flags or menus"""
    input_path: Path
    output_kind: OutputKind
    destination: Optional[Path] = None
    destination_is_dir: bool = False
    quality_preset: Optional[QualityPreset] = None
    overwrite: bool = False

    @field_validator('input_path')
    @classmethod
    def validate_input_path(cls, v):
        if not v.is_file():
            raise ValueError(f'Input must be an existing regular file: {v}')
        return v


class CodecPlan(BaseModel):
    """Encoder/decoder choices for one conversion run"""
    model_config = ConfigDict(frozen=True)

    video_codec: Optional[str] = None
    audio_codec: Optional[str] = None
    decoder_override: Optional[str] = None
    video_preset: Optional[str] = None
    extra_encoder_flags: Tuple[str, ...] = ()
    extra_decoder_flags: Tuple[str, ...] = ()
    is_audio_only: bool = False


class StreamInfo(BaseModel):
    """A single stream as reported by ffprobe"""
    index: int
    codec_type: Optional[str] = None
    codec_name: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    channels: Optional[int] = None
    sample_rate: Optional[int] = None
    bit_rate: Optional[int] = None
    language: Optional[str] = None

    @classmethod
    def from_ffprobe(cls, stream: Dict[str, Any]) -> 'StreamInfo':
        tags = stream.get('tags') or {}
        return cls(
            index=int(stream.get('index', 0)),
            codec_type=stream.get('codec_type'),
            codec_name=stream.get('codec_name'),
            width=stream.get('width'),
            height=stream.get('height'),
            channels=stream.get('channels'),
            sample_rate=_to_int(stream.get('sample_rate')),
            bit_rate=_to_int(stream.get('bit_rate')),
            language=tags.get('language'),
        )


class MediaProbe(BaseModel):
    """Container and stream information for a media file"""
    file_path: Path
    format_name: Optional[str] = None
    duration: Optional[float] = None
    size: Optional[int] = None
    bit_rate: Optional[int] = None
    streams: List[StreamInfo] = Field(default_factory=list)

    @property
    def video_streams(self) -> List[StreamInfo]:
        return [s for s in self.streams if s.codec_type == 'video']

    @property
    def audio_streams(self) -> List[StreamInfo]:
        return [s for s in self.streams if s.codec_type == 'audio']

    @property
    def has_video(self) -> bool:
        return bool(self.video_streams)

    @property
    def has_audio(self) -> bool:
        return bool(self.audio_streams)

    @property
    def video_codec(self) -> Optional[str]:
        return self.video_streams[0].codec_name if self.video_streams else None

    @classmethod
    def from_ffprobe(cls, path: Path, data: Dict[str, Any]) -> 'MediaProbe':
        fmt = data.get('format') or {}
        return cls(
            file_path=path,
            format_name=fmt.get('format_name'),
            duration=_to_float(fmt.get('duration')),
            size=_to_int(fmt.get('size')),
            bit_rate=_to_int(fmt.get('bit_rate')),
            streams=[StreamInfo.from_ffprobe(s) for s in data.get('streams', [])],
        )


class CpuInfo(BaseModel):
    name: str = UNKNOWN
    vendor: str = UNKNOWN
    cores: Optional[int] = None
    threads: Optional[int] = None


class RamInfo(BaseModel):
    total_bytes: Optional[int] = None
    speed_mhz: Optional[int] = None


class GpuInfo(BaseModel):
    name: str = UNKNOWN
    memory_bytes: Optional[int] = None


class HardwareSnapshot(BaseModel):
    """Read-only snapshot of the machine the conversion runs on"""
    cpu: CpuInfo = Field(default_factory=CpuInfo)
    ram: RamInfo = Field(default_factory=RamInfo)
    gpus: List[GpuInfo] = Field(default_factory=list)


class MetadataReport(BaseModel):
    """Hardware snapshot plus ffprobe result, written as <stem>_metadata.json"""
    generated_at: datetime
    source_file: Path
    hardware: HardwareSnapshot
    media: MediaProbe


class ConversionStatus(str, Enum):
    SUCCEEDED = 'succeeded'
    FAILED = 'failed'
    DRY_RUN = 'dry_run'


class ConversionResult(BaseModel):
    """Outcome of one pipeline run"""
    request: ConversionRequest
    output_path: Path
    command: List[str]
    status: ConversionStatus
    exit_code: Optional[int] = None

    @field_validator('command')
    @classmethod
    def validate_command(cls, v):
        if not v:
            raise ValueError('Command must not be empty')
        return v


def _to_int(value) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _to_float(value) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None
