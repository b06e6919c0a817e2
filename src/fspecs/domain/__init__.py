from .errors import (
    AlreadyExists,
    ConfigurationError,
    CycleDetected,
    FilesystemError,
    FspecsError,
    InvalidOperation,
    NotADirectory,
    NotFound,
    PermissionDenied,
    Unsupported,
)
from .options import ConflictStrategy, WalkOptions
from .signatures import FileType, SignatureEntry
from .stats import ResolvedKind, StatRecord

__all__ = [
    "AlreadyExists",
    "ConfigurationError",
    "ConflictStrategy",
    "CycleDetected",
    "FileType",
    "FilesystemError",
    "FspecsError",
    "InvalidOperation",
    "NotADirectory",
    "NotFound",
    "PermissionDenied",
    "ResolvedKind",
    "SignatureEntry",
    "StatRecord",
    "Unsupported",
    "WalkOptions",
]
