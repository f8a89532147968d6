"""
Tests for codec selection per output kind
"""

import pytest
from pydantic import ValidationError

from ffconvert import (
    CapabilitySet, HardwareCapability, OutputKind, QualityPreset,
    UnsupportedOutputKindError, select_codecs,
)
from ffconvert.codec_selector import needs_input_codec, needs_quality_preset

NO_CAPS = CapabilitySet()
NVIDIA = CapabilitySet(tags=frozenset({HardwareCapability.NVENC, HardwareCapability.CUDA_DECODE}))
ALL_CAPS = CapabilitySet(tags=frozenset(HardwareCapability))
INTEL_AMD = CapabilitySet(tags=frozenset({HardwareCapability.QSV, HardwareCapability.AMF}))


class TestMp4Selection:

    def test_software_mp4(self):
        plan = select_codecs(NO_CAPS, OutputKind.MP4)
        assert plan.video_codec == 'libx264'
        assert plan.audio_codec == 'aac'
        assert plan.video_preset is None
        assert plan.decoder_override is None
        assert plan.extra_decoder_flags == ()
        assert not plan.is_audio_only

    def test_qsv_and_amf_do_not_change_mp4(self):
        plan = select_codecs(INTEL_AMD, OutputKind.MP4)
        assert plan.video_codec == 'libx264'
        assert plan.extra_decoder_flags == ()

    def test_nvenc_mp4_with_known_input_codec(self):
        plan = select_codecs(NVIDIA, OutputKind.MP4, QualityPreset.BEST, 'hevc')
        assert plan.video_codec == 'h264_nvenc'
        assert plan.video_preset == 'p7'
        assert plan.decoder_override == 'hevc_cuvid'
        assert plan.audio_codec == 'aac'
        assert plan.extra_decoder_flags == ('-hwaccel', 'cuda', '-hwaccel_output_format', 'cuda')

    def test_nvenc_mp4_unknown_input_codec_keeps_hwaccel(self):
        plan = select_codecs(NVIDIA, OutputKind.MP4, QualityPreset.FASTEST, 'prores')
        assert plan.decoder_override is None
        assert plan.video_preset == 'p1'
        assert plan.extra_decoder_flags[:2] == ('-hwaccel', 'cuda')

    def test_nvenc_mp4_default_preset(self):
        plan = select_codecs(NVIDIA, OutputKind.MP4)
        assert plan.video_preset == 'p4'

    def test_string_output_kind_is_accepted(self):
        plan = select_codecs(NO_CAPS, 'mp4')
        assert plan.video_codec == 'libx264'


class TestWebmSelection:

    @pytest.mark.parametrize("caps", [NO_CAPS, NVIDIA, INTEL_AMD, ALL_CAPS])
    def test_webm_ignores_hardware_for_codecs(self, caps):
        plan = select_codecs(caps, OutputKind.WEBM, QualityPreset.BEST, 'h264')
        assert plan.video_codec == 'libvpx-vp9'
        assert plan.audio_codec == 'libopus'
        assert plan.video_preset is None
        assert plan.decoder_override is None

    def test_webm_with_nvenc_decodes_on_gpu_into_system_memory(self):
        plan = select_codecs(NVIDIA, OutputKind.WEBM)
        assert plan.extra_decoder_flags == ('-hwaccel', 'cuda')


class TestAudioOnlySelection:

    @pytest.mark.parametrize("kind,codec", [
        (OutputKind.MP3, 'libmp3lame'),
        (OutputKind.WAV, 'pcm_s16le'),
    ])
    @pytest.mark.parametrize("caps", [NO_CAPS, NVIDIA])
    def test_audio_only(self, kind, codec, caps):
        plan = select_codecs(caps, kind)
        assert plan.is_audio_only
        assert plan.audio_codec == codec
        assert plan.video_codec is None
        assert '-vn' in plan.extra_encoder_flags

    def test_audio_only_with_nvenc_gets_hwaccel(self):
        plan = select_codecs(NVIDIA, OutputKind.MP3)
        assert plan.extra_decoder_flags == ('-hwaccel', 'cuda')


class TestSelectionContract:

    @pytest.mark.parametrize("kind", ['avi', 'mkv', None, ''])
    def test_unsupported_kind_fails_fast(self, kind):
        with pytest.raises(UnsupportedOutputKindError):
            select_codecs(NO_CAPS, kind)

    def test_plan_is_immutable(self):
        plan = select_codecs(NO_CAPS, OutputKind.MP4)
        with pytest.raises(ValidationError):
            plan.video_codec = 'h264_nvenc'

    @pytest.mark.parametrize("caps,kind,expected", [
        (NVIDIA, OutputKind.MP4, True),
        (NO_CAPS, OutputKind.MP4, False),
        (NVIDIA, OutputKind.WEBM, False),
        (NVIDIA, OutputKind.WAV, False),
    ])
    def test_probe_and_preset_needed_only_for_nvenc_mp4(self, caps, kind, expected):
        assert needs_input_codec(caps, kind) is expected
        assert needs_quality_preset(caps, kind) is expected
