"""
Conversion pipeline for a single file

Validate -> probe -> select -> resolve -> build -> execute -> report, one
pass, no retries. Fatal problems are raised as FFConvertError subclasses;
a nonzero ffmpeg exit is reported and returned, not raised.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from rich.markup import escape

from .codec_selector import needs_input_codec, needs_quality_preset, select_codecs
from .config import ToolConfig
from .exceptions import MediaProbeError, OverwriteDeclinedError, ToolUnavailableError
from .ffmpeg_builder import build_ffmpeg_cmd, format_command
from .ffmpeg_runner import probe_media, run
from .file_utils import names_directory, resolve_output_path, validate_input_path
from .gpu_utils import probe_capabilities
from .models import (
    CapabilitySet, ConversionRequest, ConversionResult, ConversionStatus,
    OutputKind, QualityPreset,
)
from .rich_console import RichOutput, rich_output

logger = logging.getLogger(__name__)


def build_request(input_path, output_kind: Optional[OutputKind] = None,
                  destination: Union[str, Path, None] = None,
                  quality_preset: Optional[QualityPreset] = None, overwrite: bool = False,
                  output: RichOutput = rich_output) -> ConversionRequest:
    """Validate the input and fill in the output kind (asking for it if missing)"""
    input_path = validate_input_path(input_path)
    if output_kind is None:
        output_kind = output.ask_output_kind()
    return ConversionRequest(
        input_path=input_path,
        output_kind=output_kind,
        destination=destination,
        destination_is_dir=names_directory(destination),
        quality_preset=quality_preset,
        overwrite=overwrite,
    )


def detect_input_codec(input_path: Path, config: ToolConfig, output: RichOutput = rich_output) -> Optional[str]:
    """Video codec of the input, None when ffprobe cannot tell or cannot run"""
    try:
        probe = probe_media(input_path, config)
    except MediaProbeError as e:
        output.print_warning(f"Could not read input codec, using software decoding ({escape(e.details or str(e))})")
        return None
    except ToolUnavailableError as e:
        output.print_warning(f"{escape(str(e))}; using software decoding")
        return None
    if probe.video_codec:
        output.print_info(f"Input video codec: {probe.video_codec}")
    return probe.video_codec


def confirm_overwrite(output_path: Path, request: ConversionRequest, dry_run: bool,
                      output: RichOutput = rich_output) -> None:
    """Raise OverwriteDeclinedError unless replacing an existing output is allowed"""
    if not output_path.exists() or request.overwrite:
        return
    if dry_run:
        output.print_warning(f"Output exists and would be overwritten: {escape(str(output_path))}")
        return
    if not output.ask_confirmation(f"Output file {escape(str(output_path))} already exists. Overwrite?"):
        raise OverwriteDeclinedError(output_path)


def execute_conversion(cmd: List[str], output_path: Path, output: RichOutput = rich_output) -> int:
    """Run ffmpeg with live output and report the outcome.

    ToolUnavailableError propagates when ffmpeg cannot be started; a
    nonzero exit code is only reported.
    """
    output.console.print("[bold yellow]Conversion started...[/bold yellow]")
    ret, _, _ = run(cmd)

    if ret == 0:
        output.print_success(f"Conversion completed: {escape(str(output_path))}")
    else:
        output.print_warning(f"ffmpeg exited with code {ret}; the conversion may have failed. "
                             f"Check the ffmpeg output above for details.")
    return ret


def process_file(request: ConversionRequest, config: Optional[ToolConfig] = None,
                 capabilities: Optional[CapabilitySet] = None, dry_run: bool = False,
                 debug: bool = False, output: RichOutput = rich_output) -> ConversionResult:
    """Convert one file according to a validated request"""
    config = config or ToolConfig()
    input_path = validate_input_path(request.input_path)

    if capabilities is None:
        output.print_info("Detecting hardware acceleration...")
        capabilities = probe_capabilities(config)
    output.print_capabilities(capabilities)

    input_codec = None
    if needs_input_codec(capabilities, request.output_kind):
        input_codec = detect_input_codec(input_path, config, output)

    if needs_quality_preset(capabilities, request.output_kind) and request.quality_preset is None:
        request = request.model_copy(update={'quality_preset': output.ask_quality_preset()})

    plan = select_codecs(capabilities, request.output_kind, request.quality_preset, input_codec)
    output_path = resolve_output_path(input_path, request.destination, request.output_kind.extension,
                                      request.destination_is_dir)
    confirm_overwrite(output_path, request, dry_run, output)

    cmd = build_ffmpeg_cmd(plan, input_path, output_path, config.ffmpeg_path)
    debug_cmd = format_command(cmd) if (debug or dry_run) else None
    output.print_plan(request, plan, output_path, escape(debug_cmd) if debug_cmd else None)

    if dry_run:
        output.print_info("DRY-RUN: nothing was converted")
        return ConversionResult(request=request, output_path=output_path, command=cmd,
                                status=ConversionStatus.DRY_RUN)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    ret = execute_conversion(cmd, output_path, output)
    status = ConversionStatus.SUCCEEDED if ret == 0 else ConversionStatus.FAILED
    return ConversionResult(request=request, output_path=output_path, command=cmd,
                            status=status, exit_code=ret)
