"""
GPU acceleration detection and utilities

Hardware support is inferred from ffmpeg's human readable ``-encoders`` and
``-decoders`` listings. The substring heuristic lives only in
``classify_capabilities`` so it can be swapped for a structured query.
"""

import logging
from typing import Optional

from .config import ToolConfig
from .exceptions import ToolUnavailableError
from .ffmpeg_runner import run_merged
from .models import CapabilitySet, HardwareCapability, QualityPreset

logger = logging.getLogger(__name__)

# (tag, listing, any of these substrings); matching is case-sensitive
CAPABILITY_PATTERNS = (
    (HardwareCapability.NVENC, 'encoders', ('h264_nvenc',)),
    (HardwareCapability.QSV, 'encoders', ('h264_qsv', 'hevc_qsv')),
    (HardwareCapability.AMF, 'encoders', ('h264_amf', 'hevc_amf')),
    (HardwareCapability.CUDA_DECODE, 'decoders', ('cuda', 'cuvid')),
)

# Input video codec (ffprobe codec_name) -> NVIDIA hardware decoder
NVIDIA_DECODERS = {
    'h264': 'h264_cuvid',
    'hevc': 'hevc_cuvid',
    'vp9': 'vp9_cuvid',
    'vp8': 'vp8_cuvid',
    'mpeg2video': 'mpeg2_cuvid',
    'mpeg4': 'mpeg4_cuvid',
    'vc1': 'vc1_cuvid',
    'av1': 'av1_cuvid',
}

NVENC_PRESETS = {
    QualityPreset.BEST: 'p7',
    QualityPreset.BALANCED: 'p4',
    QualityPreset.FASTEST: 'p1',
}
DEFAULT_NVENC_PRESET = NVENC_PRESETS[QualityPreset.BALANCED]


def classify_capabilities(encoders_text: str, decoders_text: str) -> CapabilitySet:
    """Derive capability tags from ffmpeg's encoder and decoder listings"""
    listings = {'encoders': encoders_text or '', 'decoders': decoders_text or ''}
    tags = set()
    for tag, listing, patterns in CAPABILITY_PATTERNS:
        if any(pattern in listings[listing] for pattern in patterns):
            tags.add(tag)
    return CapabilitySet(tags=frozenset(tags))


def _list_codecs(ffmpeg: str, kind: str) -> str:
    code, output = run_merged([ffmpeg, '-hide_banner', f'-{kind}'])
    if code != 0:
        # a failed listing must not read as "no hardware"
        last_line = output.strip().splitlines()[-1] if output.strip() else f'exit code {code}'
        raise ToolUnavailableError(ffmpeg, f'-{kind} failed: {last_line}')
    return output


def probe_capabilities(config: Optional[ToolConfig] = None) -> CapabilitySet:
    """Detect available GPU acceleration options.

    Raises ToolUnavailableError if ffmpeg cannot be run; an empty set always
    means a successful probe that found no hardware support.
    """
    config = config or ToolConfig()
    encoders = _list_codecs(config.ffmpeg_path, 'encoders')
    decoders = _list_codecs(config.ffmpeg_path, 'decoders')
    capabilities = classify_capabilities(encoders, decoders)
    logger.debug("Detected capabilities: %s",
                 ', '.join(tag.value for tag in capabilities.sorted_tags()) or 'none')
    return capabilities


def get_nvenc_preset(preset) -> str:
    """Map a quality preset to an NVENC preset token, p4 if unknown"""
    if preset is None:
        return DEFAULT_NVENC_PRESET
    try:
        return NVENC_PRESETS[QualityPreset(preset)]
    except ValueError:
        return DEFAULT_NVENC_PRESET


def get_hardware_decoder(input_codec: Optional[str]) -> Optional[str]:
    """CUVID decoder for an input codec, None to fall back to software decoding"""
    if not input_codec:
        return None
    return NVIDIA_DECODERS.get(input_codec)
