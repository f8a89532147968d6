"""
Exception types for the converter

Validation and tool failures are raised as one of these; a nonzero ffmpeg
exit code is not an exception (see processor.ConversionResult).
"""


class FFConvertError(Exception):
    """Base class for all converter errors"""
    exit_code = 1


class InputNotFoundError(FFConvertError):
    """Input path does not point to an existing regular file"""

    def __init__(self, path):
        self.path = path
        super().__init__(f'Input file not found: {path}')


class ToolUnavailableError(FFConvertError):
    """An external binary (ffmpeg, ffprobe) could not be started"""
    exit_code = 2

    def __init__(self, tool, reason=None):
        self.tool = tool
        self.reason = reason
        message = f"Could not run '{tool}'"
        if reason:
            message += f': {reason}'
        super().__init__(message)


class InvalidSelectionError(FFConvertError):
    """Operator menu input could not be turned into a valid choice"""


class UnsupportedOutputKindError(FFConvertError):
    """Output kind outside mp4/webm/mp3/wav reached the codec selector"""

    def __init__(self, kind):
        self.kind = kind
        super().__init__(f'Unsupported output kind: {kind!r}')


class MediaProbeError(FFConvertError):
    """ffprobe ran but returned an error or unreadable output"""

    def __init__(self, path, details=''):
        self.path = path
        self.details = details
        message = f'ffprobe failed for {path}'
        if details:
            message += f': {details}'
        super().__init__(message)


class OverwriteDeclinedError(FFConvertError):
    """Output file exists and the operator chose not to replace it"""

    def __init__(self, path):
        self.path = path
        super().__init__(f'Output file already exists, not overwriting: {path}')
