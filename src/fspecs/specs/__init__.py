from .base import BaseSpec, default_fs, join_segments
from .file import FileSpec
from .folder import FolderSpec
from .fsspec import FSSpec, TypedSpec, resolve, spec_from_record
from .symlink import SymlinkSpec

__all__ = [
    "BaseSpec",
    "FSSpec",
    "FileSpec",
    "FolderSpec",
    "SymlinkSpec",
    "TypedSpec",
    "default_fs",
    "join_segments",
    "resolve",
    "spec_from_record",
]
