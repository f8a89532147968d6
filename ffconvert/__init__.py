"""
ffconvert library modules

Capability detection, codec selection and ffmpeg command assembly for
converting a media file to mp4, webm, mp3 or wav.
"""

# Import all public interfaces for easy access
from .config import ToolConfig, load_config
from .exceptions import (
    FFConvertError, InputNotFoundError, ToolUnavailableError, InvalidSelectionError,
    UnsupportedOutputKindError, MediaProbeError, OverwriteDeclinedError,
)
from .models import (
    OutputKind, QualityPreset, HardwareCapability, CapabilitySet, ConversionRequest,
    CodecPlan, MediaProbe, HardwareSnapshot, MetadataReport, ConversionResult, ConversionStatus,
)
from .gpu_utils import classify_capabilities, probe_capabilities, get_nvenc_preset
from .codec_selector import select_codecs
from .file_utils import resolve_output_path, validate_input_path, format_file_size
from .ffmpeg_builder import build_ffmpeg_cmd, format_command
from .ffmpeg_runner import run, run_simple, probe_media
from .processor import build_request, process_file, execute_conversion
from .system_info import collect_hardware_snapshot
from .metadata import build_metadata_report, write_metadata_report, default_metadata_path

__all__ = [
    'ToolConfig', 'load_config',
    'FFConvertError', 'InputNotFoundError', 'ToolUnavailableError', 'InvalidSelectionError',
    'UnsupportedOutputKindError', 'MediaProbeError', 'OverwriteDeclinedError',
    'OutputKind', 'QualityPreset', 'HardwareCapability', 'CapabilitySet', 'ConversionRequest',
    'CodecPlan', 'MediaProbe', 'HardwareSnapshot', 'MetadataReport', 'ConversionResult', 'ConversionStatus',
    'classify_capabilities', 'probe_capabilities', 'get_nvenc_preset',
    'select_codecs',
    'resolve_output_path', 'validate_input_path', 'format_file_size',
    'build_ffmpeg_cmd', 'format_command',
    'run', 'run_simple', 'probe_media',
    'build_request', 'process_file', 'execute_conversion',
    'collect_hardware_snapshot',
    'build_metadata_report', 'write_metadata_report', 'default_metadata_path',
]
