"""
Tests for the JSON metadata report
"""

import json
import subprocess
from unittest.mock import patch

import pytest

from ffconvert import (
    HardwareSnapshot, MediaProbeError, ToolConfig, build_metadata_report,
    default_metadata_path, write_metadata_report,
)
from ffconvert.models import CpuInfo, GpuInfo

FFPROBE_JSON = json.dumps({
    'streams': [
        {'index': 0, 'codec_type': 'video', 'codec_name': 'hevc', 'width': 1920, 'height': 1080},
        {'index': 1, 'codec_type': 'audio', 'codec_name': 'ac3', 'channels': 6,
         'sample_rate': '48000', 'tags': {'language': 'eng'}},
    ],
    'format': {'format_name': 'matroska,webm', 'duration': '5400.250000', 'size': '1073741824',
               'bit_rate': '1590000'},
})

SNAPSHOT = HardwareSnapshot(cpu=CpuInfo(name='Test CPU', vendor='AMD', cores=8, threads=16),
                            gpus=[GpuInfo(name='Test GPU', memory_bytes=8589934592)])


def ffprobe_ok(cmd, **kwargs):
    return subprocess.CompletedProcess(cmd, 0, stdout=FFPROBE_JSON, stderr='')


def test_default_metadata_path(sample_input):
    assert default_metadata_path(sample_input) == sample_input.parent / 'movie_metadata.json'


class TestBuildMetadataReport:

    def test_report_contents(self, sample_input):
        with patch('ffconvert.ffmpeg_runner.subprocess.run', side_effect=ffprobe_ok) as mock_run, \
             patch('ffconvert.metadata.collect_hardware_snapshot', return_value=SNAPSHOT):
            report = build_metadata_report(sample_input, ToolConfig(ffprobe_path='/opt/ffprobe'))

        cmd = mock_run.call_args[0][0]
        assert cmd[0] == '/opt/ffprobe'
        assert cmd[-1] == str(sample_input)
        assert report.source_file == sample_input.resolve()
        assert report.media.video_codec == 'hevc'
        assert report.media.duration == pytest.approx(5400.25)
        assert report.media.audio_streams[0].language == 'eng'
        assert report.media.audio_streams[0].sample_rate == 48000
        assert report.generated_at.tzinfo is not None

    def test_ffprobe_error(self, sample_input):
        failed = subprocess.CompletedProcess([], 1, stdout='', stderr='movie.mkv: Invalid data found\n')
        with patch('ffconvert.ffmpeg_runner.subprocess.run', return_value=failed), \
             patch('ffconvert.metadata.collect_hardware_snapshot') as mock_snapshot:
            with pytest.raises(MediaProbeError) as excinfo:
                build_metadata_report(sample_input)

        assert 'Invalid data found' in str(excinfo.value)
        assert excinfo.value.exit_code == 1
        mock_snapshot.assert_not_called()


class TestWriteMetadataReport:

    @pytest.fixture
    def report(self, sample_input):
        with patch('ffconvert.ffmpeg_runner.subprocess.run', side_effect=ffprobe_ok), \
             patch('ffconvert.metadata.collect_hardware_snapshot', return_value=SNAPSHOT):
            return build_metadata_report(sample_input)

    def test_writes_next_to_input(self, report, sample_input):
        target = write_metadata_report(report)

        assert target == sample_input.resolve().parent / 'movie_metadata.json'
        data = json.loads(target.read_text(encoding='utf-8'))
        assert set(data) == {'generated_at', 'source_file', 'hardware', 'media'}
        assert data['hardware']['cpu']['name'] == 'Test CPU'
        assert data['hardware']['ram']['total_bytes'] is None
        assert data['hardware']['gpus'][0]['memory_bytes'] == 8589934592
        assert [s['codec_name'] for s in data['media']['streams']] == ['hevc', 'ac3']

    def test_explicit_output_path(self, report, temp_dirs):
        target = write_metadata_report(report, temp_dirs['output'] / 'reports' / 'info.json')

        assert target.exists()
        assert json.loads(target.read_text(encoding='utf-8'))['media']['format_name'] == 'matroska,webm'
