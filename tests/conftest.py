"""
pytest configuration and fixtures for ffconvert tests

No test needs a real ffmpeg: subprocess calls are patched and the
encoder/decoder listings below stand in for ffmpeg's output.
"""

import io
import shutil
import subprocess
import sys
import tempfile
from pathlib import Path

import pytest
from rich.console import Console

# Add the project root to path for importing
sys.path.insert(0, str(Path(__file__).parent.parent))
from ffconvert.rich_console import RichOutput


ENCODERS_SOFTWARE = """Encoders:
 V..... = Video
 A..... = Audio
 ------
 V....D libx264              libx264 H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10 (codec h264)
 V....D libvpx-vp9           libvpx VP9 (codec vp9)
 A....D aac                  AAC (Advanced Audio Coding)
 A....D libmp3lame           libmp3lame MP3 (MPEG audio layer 3) (codec mp3)
 A....D libopus              libopus Opus (codec opus)
 A....D pcm_s16le            PCM signed 16-bit little-endian
"""

ENCODERS_NVIDIA = ENCODERS_SOFTWARE + """ V....D h264_nvenc           NVIDIA NVENC H.264 encoder (codec h264)
 V....D hevc_nvenc           NVIDIA NVENC hevc encoder (codec hevc)
"""

DECODERS_SOFTWARE = """Decoders:
 V....D h264                 H.264 / AVC / MPEG-4 AVC / MPEG-4 part 10
 V....D hevc                 HEVC (High Efficiency Video Coding)
 A....D aac                  AAC (Advanced Audio Coding)
"""

DECODERS_NVIDIA = DECODERS_SOFTWARE + """ V..... h264_cuvid           Nvidia CUVID H264 decoder (codec h264)
 V..... hevc_cuvid           Nvidia CUVID HEVC decoder (codec hevc)
"""


@pytest.fixture
def temp_dirs():
    """Create temporary directories for testing outputs"""
    temp_dir = Path(tempfile.mkdtemp(prefix='ffconvert_pytest_'))

    dirs = {
        'temp': temp_dir,
        'input': temp_dir / 'input',
        'output': temp_dir / 'output',
    }

    for dir_path in dirs.values():
        dir_path.mkdir(exist_ok=True)

    yield dirs

    if temp_dir.exists():
        shutil.rmtree(temp_dir)


@pytest.fixture
def sample_input(temp_dirs):
    """An existing (dummy) input file"""
    path = temp_dirs['input'] / 'movie.mkv'
    path.write_bytes(b'not really a video')
    return path


@pytest.fixture
def quiet_output():
    """RichOutput writing into a buffer instead of the terminal"""
    buffer = io.StringIO()
    output = RichOutput(Console(file=buffer, force_terminal=False, width=200))
    output.buffer = buffer
    return output


@pytest.fixture
def listings():
    return {
        'encoders_software': ENCODERS_SOFTWARE,
        'encoders_nvidia': ENCODERS_NVIDIA,
        'decoders_software': DECODERS_SOFTWARE,
        'decoders_nvidia': DECODERS_NVIDIA,
    }


@pytest.fixture
def run_converter():
    """Fixture to run the CLI as a separate process"""
    def _run_converter(args: list, expect_error: bool = False, input_text: str = ''):
        script_path = Path(__file__).parent.parent / 'main.py'
        cmd = [sys.executable, str(script_path)] + args
        result = subprocess.run(cmd, capture_output=True, text=True, input=input_text)

        if not expect_error and result.returncode != 0:
            pytest.fail(f"Converter failed: {result.stderr}")

        return result

    return _run_converter
