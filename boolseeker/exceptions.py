"""Exception hierarchy for boolseeker."""


class BoolSeekerError(Exception):
    """Base class for all fatal scan errors."""


class DirectoryWalkError(BoolSeekerError):
    """Raised when a directory tree cannot be traversed."""


class DirectoryNotFoundError(DirectoryWalkError):
    """Raised when a scan root does not exist or is not a directory."""


class FileReadError(BoolSeekerError):
    """Raised when a qualifying file cannot be opened or read mid-walk."""


class OutputWriteError(BoolSeekerError):
    """Raised when the method index cannot be written."""


class InvalidApkError(BoolSeekerError):
    """Raised when the input is missing or is not an APK archive."""


class ToolNotFoundError(BoolSeekerError):
    """Raised when an external tool is not installed."""


class DecodeError(BoolSeekerError):
    """Raised when the decoder fails to produce a disassembly tree."""


__all__ = [
    "BoolSeekerError",
    "DirectoryNotFoundError",
    "DirectoryWalkError",
    "FileReadError",
    "OutputWriteError",
    "InvalidApkError",
    "ToolNotFoundError",
    "DecodeError",
]
