"""
Exception hierarchy for rotating file writers
"""


class RotateError(Exception):
    """Base class for all filerotate errors"""


class ConfigError(RotateError, ValueError):
    """Invalid rotation configuration (bad size string, unknown period, ...)"""


class OversizedWriteError(RotateError, ValueError):
    """A single write is larger than the rotation size threshold"""

    def __init__(self, length: int, limit: int):
        super().__init__(
            f"write length({length}) exceeds maximum file size({limit})"
        )
        self.length = length
        self.limit = limit


class RotationError(RotateError, OSError):
    """The active file could not be archived or recreated"""


class ArchiveNameError(RotateError, ValueError):
    """A file name is not an archive of the active file"""


class CompressionError(RotateError, OSError):
    """An archive could not be compressed"""
