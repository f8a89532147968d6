#!/usr/bin/env python3
"""
ffconvert - convert a media file with ffmpeg, using GPU encoders when available

Detects NVENC/QSV/AMF/CUDA support from the local ffmpeg build, picks the
codecs for the requested format and runs ffmpeg with its progress output
shown live:
- mp4:  H.264 (h264_nvenc when available, else libx264) + AAC
- webm: VP9 (libvpx-vp9) + Opus
- mp3:  audio only, libmp3lame
- wav:  audio only, PCM 16-bit

Usage:
  python main.py /path/to/video.mkv                 (format chosen from a menu)
  python main.py /path/to/video.mkv -f mp4 -q best
  python main.py /path/to/video.mkv -f mp3 -o /music/
  python main.py /path/to/video.mkv --metadata
  python main.py --capabilities
  python main.py --system-info

Requires: ffmpeg, ffprobe in PATH (or FFCONVERT_FFMPEG / FFCONVERT_FFPROBE)
"""

import argparse
import sys
from pathlib import Path

from rich.markup import escape

from ffconvert.config import load_config
from ffconvert.exceptions import FFConvertError, MediaProbeError
from ffconvert.file_utils import validate_input_path
from ffconvert.gpu_utils import probe_capabilities
from ffconvert.log_setup import setup_logging
from ffconvert.metadata import build_metadata_report, write_metadata_report
from ffconvert.models import ConversionStatus, OutputKind, QualityPreset
from ffconvert.processor import build_request, process_file
from ffconvert.rich_console import rich_output
from ffconvert.system_info import collect_hardware_snapshot

APP_TITLE = 'ffconvert - GPU-aware media converter'
EXIT_INTERRUPTED = 130
EXIT_SIGNAL_BASE = 128


def parse_arguments(argv=None):
    """Parse and validate command line arguments"""
    ap = argparse.ArgumentParser(description='Convert a media file with ffmpeg, using GPU acceleration when available')
    ap.add_argument('input', type=Path, nargs='?', help='Input media file')
    ap.add_argument('--format', '-f', type=str, default=None,
                    choices=[kind.value for kind in OutputKind],
                    help='Output format (asked interactively when omitted)')
    ap.add_argument('--output', '-o', type=str, default=None,
                    help='Output directory (existing, or ending in /) or file '
                         '(default: <input>_converted.<ext> next to the input)')
    ap.add_argument('--quality', '-q', type=str, default=None,
                    choices=[preset.value for preset in QualityPreset],
                    help='NVENC quality preset for mp4 (asked interactively when NVENC is used)')
    ap.add_argument('--overwrite', action='store_true', help='Replace an existing output file without asking')

    # Operation modes
    ap.add_argument('--dry-run', action='store_true', help='Only show what would be done')
    ap.add_argument('--debug', action='store_true', help='Show the ffmpeg command before running it')
    ap.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    ap.add_argument('--metadata', action='store_true',
                    help='Write a JSON report (hardware + ffprobe data) for the input instead of converting')
    ap.add_argument('--metadata-output', type=Path, default=None,
                    help='Path of the JSON report (default: <input>_metadata.json)')
    ap.add_argument('--capabilities', action='store_true', help='Show detected hardware acceleration and exit')
    ap.add_argument('--system-info', action='store_true', help='Show CPU/RAM/GPU information and exit')

    args = ap.parse_args(argv)

    if args.input is None and not (args.capabilities or args.system_info):
        ap.error('the following arguments are required: input')
    if args.metadata_output and not args.metadata:
        ap.error('--metadata-output requires --metadata')

    return args


def show_system_info(config):
    rich_output.print_hardware(collect_hardware_snapshot(config))
    return 0


def show_capabilities(config):
    rich_output.print_capabilities(probe_capabilities(config))
    return 0


def write_metadata(args, config):
    """Write the metadata report for the input file"""
    input_path = validate_input_path(args.input)
    try:
        report = build_metadata_report(input_path, config)
    except MediaProbeError as e:
        rich_output.print_error("Could not analyze input file", escape(e.details or str(e)))
        return e.exit_code
    rich_output.print_media(report.media)
    target = write_metadata_report(report, args.metadata_output)
    rich_output.print_success(f"Metadata written to {escape(str(target))}")
    return 0


def exit_status(ffmpeg_code):
    """Shell-style status for ffmpeg's return code (negative when killed by a signal)"""
    if ffmpeg_code < 0:
        return EXIT_SIGNAL_BASE - ffmpeg_code
    return ffmpeg_code


def convert(args, config):
    """Run the conversion pipeline and map its outcome to an exit code"""
    request = build_request(
        args.input,
        output_kind=OutputKind(args.format) if args.format else None,
        destination=args.output,
        quality_preset=QualityPreset(args.quality) if args.quality else None,
        overwrite=args.overwrite,
    )
    result = process_file(request, config, dry_run=args.dry_run, debug=args.debug)
    if result.status == ConversionStatus.FAILED:
        return exit_status(result.exit_code)
    return 0


def main(argv=None):
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    config = load_config()

    rich_output.print_header(APP_TITLE)
    try:
        if args.system_info:
            return show_system_info(config)
        if args.capabilities:
            return show_capabilities(config)
        if args.metadata:
            return write_metadata(args, config)
        return convert(args, config)
    except FFConvertError as e:
        rich_output.print_error(escape(str(e)))
        return e.exit_code
    except KeyboardInterrupt:
        rich_output.print_interrupted()
        return EXIT_INTERRUPTED


if __name__ == '__main__':
    sys.exit(main())
