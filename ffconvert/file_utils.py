"""
File handling utilities and output path resolution
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from .exceptions import InputNotFoundError

logger = logging.getLogger(__name__)

CONVERTED_SUFFIX = '_converted'
DIR_SEPARATORS = ('/', os.sep)


def format_file_size(size_bytes):
    """Convert bytes to human readable format"""
    for unit in ['B', 'KB', 'MB', 'GB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"


def validate_input_path(path: Union[str, Path]) -> Path:
    """Return the input as a Path, raising InputNotFoundError unless it is a regular file"""
    path = Path(path).expanduser()
    try:
        is_file = path.is_file()
    except OSError:
        is_file = False
    if not is_file:
        raise InputNotFoundError(path)
    return path


def names_directory(raw_destination) -> bool:
    """True for a destination argument written with a trailing separator, e.g. 'out/'"""
    return isinstance(raw_destination, str) and raw_destination.endswith(DIR_SEPARATORS)


def converted_name(input_path: Path, extension: str) -> str:
    return f"{input_path.stem}{CONVERTED_SUFFIX}.{extension}"


def resolve_output_path(input_path: Path, destination: Optional[Path], extension: str,
                        as_directory: bool = False) -> Path:
    """Work out where the converted file goes.

    - no destination: next to the input as ``<stem>_converted.<ext>``
    - an existing directory, or any destination when ``as_directory`` is
      set: inside it, same generated name
    - anything else is taken as the output file; a suffix other than
      ``.<ext>`` is replaced (case-sensitive) and a warning is logged
    """
    extension = extension.lstrip('.')
    input_path = Path(input_path)

    if destination is None:
        return input_path.parent / converted_name(input_path, extension)

    destination = Path(destination)
    if as_directory or destination.is_dir():
        return destination / converted_name(input_path, extension)

    expected_suffix = f'.{extension}'
    if destination.suffix == expected_suffix:
        return destination

    corrected = destination.with_suffix(expected_suffix) if destination.suffix else \
        destination.with_name(destination.name + expected_suffix)
    logger.warning("Output extension '%s' does not match format '%s', writing to %s instead",
                   destination.suffix or '(none)', extension, corrected)
    return corrected
