"""
Codec selection for each output kind
"""

import logging
from typing import List, Optional

from .exceptions import UnsupportedOutputKindError
from .gpu_utils import get_hardware_decoder, get_nvenc_preset
from .models import CapabilitySet, CodecPlan, HardwareCapability, OutputKind, QualityPreset

logger = logging.getLogger(__name__)

DISABLE_VIDEO_FLAG = '-vn'
HWACCEL = 'cuda'

# Encoders that take frames straight from CUDA memory
GPU_FRAME_ENCODERS = {'h264_nvenc'}

AUDIO_ONLY_CODECS = {
    OutputKind.MP3: 'libmp3lame',
    OutputKind.WAV: 'pcm_s16le',
}


def _coerce_kind(output_kind) -> OutputKind:
    try:
        return OutputKind(output_kind)
    except ValueError:
        raise UnsupportedOutputKindError(output_kind) from None


def uses_nvenc(capabilities: CapabilitySet, output_kind) -> bool:
    return _coerce_kind(output_kind) == OutputKind.MP4 and HardwareCapability.NVENC in capabilities


def needs_input_codec(capabilities: CapabilitySet, output_kind) -> bool:
    """Whether the input's video codec must be probed to pick a hardware decoder"""
    return uses_nvenc(capabilities, output_kind)


def needs_quality_preset(capabilities: CapabilitySet, output_kind) -> bool:
    """Whether a quality preset influences the plan (NVENC only)"""
    return uses_nvenc(capabilities, output_kind)


def _decoder_flags(capabilities: CapabilitySet, video_codec: Optional[str]) -> List[str]:
    if HardwareCapability.NVENC not in capabilities:
        return []
    flags = ['-hwaccel', HWACCEL]
    if video_codec in GPU_FRAME_ENCODERS:
        flags += ['-hwaccel_output_format', HWACCEL]
    return flags


def select_codecs(capabilities: CapabilitySet, output_kind, quality_preset: Optional[QualityPreset] = None,
                  input_video_codec: Optional[str] = None) -> CodecPlan:
    """Pick video/audio codecs and decoder flags for a conversion.

    mp4 uses h264_nvenc when NVENC is available (with a CUVID decoder for
    known input codecs) and libx264 otherwise; webm is always VP9/Opus;
    mp3 and wav drop the video stream. Whenever NVENC is present the
    CUDA hwaccel is enabled for decoding.
    """
    kind = _coerce_kind(output_kind)

    video_codec = None
    video_preset = None
    decoder_override = None
    encoder_flags = []

    if kind == OutputKind.MP4:
        audio_codec = 'aac'
        if HardwareCapability.NVENC in capabilities:
            video_codec = 'h264_nvenc'
            video_preset = get_nvenc_preset(quality_preset)
            decoder_override = get_hardware_decoder(input_video_codec)
            if decoder_override is None and input_video_codec:
                logger.debug("No hardware decoder for '%s', decoding in software", input_video_codec)
        else:
            video_codec = 'libx264'
    elif kind == OutputKind.WEBM:
        # VP9 hardware encoders are not picked automatically
        video_codec = 'libvpx-vp9'
        audio_codec = 'libopus'
    else:
        audio_codec = AUDIO_ONLY_CODECS[kind]
        encoder_flags.append(DISABLE_VIDEO_FLAG)

    plan = CodecPlan(
        video_codec=video_codec,
        audio_codec=audio_codec,
        decoder_override=decoder_override,
        video_preset=video_preset,
        extra_encoder_flags=tuple(encoder_flags),
        extra_decoder_flags=tuple(_decoder_flags(capabilities, video_codec)),
        is_audio_only=kind.is_audio_only,
    )
    logger.debug("Codec plan for %s: %s", kind.value, plan)
    return plan
