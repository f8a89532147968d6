"""
External command execution and ffprobe queries
"""

import json
import logging
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional, Tuple

from .config import ToolConfig
from .exceptions import MediaProbeError, ToolUnavailableError
from .models import MediaProbe

logger = logging.getLogger(__name__)


def _start_error(cmd: List[str], error: OSError) -> ToolUnavailableError:
    return ToolUnavailableError(cmd[0], error.strerror or str(error))


def run(cmd, capture: bool = False) -> Tuple[int, Optional[str], Optional[str]]:
    """Execute a command without a shell.

    With ``capture=False`` the child inherits stdout/stderr so its own
    progress output is shown live, and ``(returncode, None, None)`` is
    returned. With ``capture=True`` both streams are returned as text.

    Raises ToolUnavailableError when the binary cannot be started.
    """
    # Ensure command list contains strings for Windows compatibility
    cmd_str = [str(c) for c in cmd]
    logger.debug("Running: %s", shlex.join(cmd_str))

    try:
        if capture:
            p = subprocess.run(cmd_str, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                               text=True, errors='replace')
            return p.returncode, p.stdout, p.stderr
        p = subprocess.run(cmd_str)
    except OSError as e:
        raise _start_error(cmd_str, e) from e

    logger.debug("%s exited with %d", cmd_str[0], p.returncode)
    return p.returncode, None, None


def run_simple(cmd) -> Tuple[int, str, str]:
    """Run a command and capture its output"""
    return run(cmd, capture=True)


def run_merged(cmd) -> Tuple[int, str]:
    """Run a command with stderr folded into stdout, returning one text blob"""
    cmd_str = [str(c) for c in cmd]
    logger.debug("Running: %s", shlex.join(cmd_str))
    try:
        p = subprocess.run(cmd_str, stdout=subprocess.PIPE, stderr=subprocess.STDOUT,
                           text=True, errors='replace')
    except OSError as e:
        raise _start_error(cmd_str, e) from e
    return p.returncode, p.stdout or ''


def _ffprobe_json(path: Path, entries: List[str], config: ToolConfig) -> dict:
    cmd = [config.ffprobe_path, '-v', 'error'] + entries + ['-of', 'json', str(path)]
    code, out, err = run_simple(cmd)
    if code != 0:
        raise MediaProbeError(path, (err or '').strip())
    try:
        return json.loads(out or '{}')
    except json.JSONDecodeError as e:
        raise MediaProbeError(path, f'unreadable ffprobe output ({e})') from e


def probe_media(path: Path, config: Optional[ToolConfig] = None) -> MediaProbe:
    """Container duration/size and stream descriptors for a media file"""
    data = _ffprobe_json(path, ['-show_format', '-show_streams'], config or ToolConfig())
    probe = MediaProbe.from_ffprobe(path, data)
    logger.debug("Probed %s: video=%s, %d streams", path, probe.video_codec, len(probe.streams))
    return probe

