"""
FFmpeg command building

ffmpeg is positional: options before ``-i`` apply to the input (decoder),
options after it apply to the output (encoder).
"""

import shlex
from pathlib import Path
from typing import List

from .models import CodecPlan


def build_ffmpeg_cmd(plan: CodecPlan, inp: Path, out: Path, ffmpeg: str = 'ffmpeg',
                     overwrite: bool = True) -> List[str]:
    """Build the ffmpeg argument vector for a codec plan"""
    cmd = [ffmpeg, '-hide_banner', '-y' if overwrite else '-n']

    # Decoder side
    cmd.extend(plan.extra_decoder_flags)
    if plan.decoder_override:
        cmd.extend(['-c:v', plan.decoder_override])

    cmd.extend(['-i', str(inp)])

    # Encoder side
    cmd.extend(plan.extra_encoder_flags)
    if plan.video_codec and not plan.is_audio_only:
        cmd.extend(['-c:v', plan.video_codec])
        if plan.video_preset:
            cmd.extend(['-preset', plan.video_preset])
    if plan.audio_codec:
        cmd.extend(['-c:a', plan.audio_codec])

    # Passed as a single argv element, never through a shell
    cmd.append(str(out))
    return cmd


def format_command(cmd: List[str]) -> str:
    """Shell-quoted rendering of a command, for display only"""
    return shlex.join([str(c) for c in cmd])
