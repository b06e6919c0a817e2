# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import os
import stat as _stat
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum


class ResolvedKind(str, Enum):
    """Classification of a path, as determined by a non-following stat."""

    UNRESOLVED = "unresolved"
    FILE = "file"
    FOLDER = "folder"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class StatRecord:
    """
    One captured stat result.

    Captured once per call; nothing here refreshes itself. Callers that need fresh
    data re-stat explicitly.
    """

    size: int
    mtime_ns: int
    atime_ns: int
    ctime_ns: int
    uid: int
    gid: int
    mode: int
    device: int
    inode: int
    nlink: int
    is_file: bool
    is_directory: bool
    is_symlink: bool

    @classmethod
    def from_stat_result(cls, st: os.stat_result) -> StatRecord:
        mode = st.st_mode
        return cls(
            size=st.st_size,
            mtime_ns=getattr(st, "st_mtime_ns", int(st.st_mtime * 1e9)),
            atime_ns=getattr(st, "st_atime_ns", int(st.st_atime * 1e9)),
            ctime_ns=getattr(st, "st_ctime_ns", int(st.st_ctime * 1e9)),
            # uid/gid are 0 on platforms without POSIX ownership
            uid=getattr(st, "st_uid", 0),
            gid=getattr(st, "st_gid", 0),
            mode=mode,
            device=getattr(st, "st_dev", 0),
            inode=getattr(st, "st_ino", 0),
            nlink=getattr(st, "st_nlink", 1),
            is_file=_stat.S_ISREG(mode),
            is_directory=_stat.S_ISDIR(mode),
            is_symlink=_stat.S_ISLNK(mode),
        )

    @property
    def permission_bits(self) -> int:
        return _stat.S_IMODE(self.mode)

    @property
    def modified_at(self) -> datetime:
        return datetime.fromtimestamp(self.mtime_ns / 1e9, tz=timezone.utc)

    @property
    def accessed_at(self) -> datetime:
        return datetime.fromtimestamp(self.atime_ns / 1e9, tz=timezone.utc)

    @property
    def is_other(self) -> bool:
        """Device, FIFO, socket: anything that is not a file, folder or symlink."""
        return not (self.is_file or self.is_directory or self.is_symlink)

    @property
    def kind(self) -> ResolvedKind:
        if self.is_symlink:
            return ResolvedKind.SYMLINK
        if self.is_directory:
            return ResolvedKind.FOLDER
        if self.is_file:
            return ResolvedKind.FILE
        return ResolvedKind.UNKNOWN

    @property
    def exists(self) -> bool:
        return True
