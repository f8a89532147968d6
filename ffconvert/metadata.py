"""
JSON metadata report: hardware snapshot plus ffprobe result for one file
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .config import ToolConfig
from .ffmpeg_runner import probe_media
from .models import MetadataReport
from .system_info import collect_hardware_snapshot

logger = logging.getLogger(__name__)

METADATA_SUFFIX = '_metadata.json'


def default_metadata_path(input_path: Path) -> Path:
    """<input dir>/<stem>_metadata.json"""
    input_path = Path(input_path)
    return input_path.parent / f"{input_path.stem}{METADATA_SUFFIX}"


def build_metadata_report(input_path: Path, config: Optional[ToolConfig] = None) -> MetadataReport:
    """Probe the file and the machine; raises MediaProbeError/ToolUnavailableError from ffprobe"""
    config = config or ToolConfig()
    media = probe_media(input_path, config)
    return MetadataReport(
        generated_at=datetime.now().astimezone(),
        source_file=Path(input_path).resolve(),
        hardware=collect_hardware_snapshot(config),
        media=media,
    )


def write_metadata_report(report: MetadataReport, output_path: Optional[Path] = None) -> Path:
    """Write the report as indented JSON and return where it went"""
    target = Path(output_path) if output_path else default_metadata_path(report.source_file)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(report.model_dump_json(indent=2) + '\n', encoding='utf-8')
    logger.debug("Metadata written to %s", target)
    return target
