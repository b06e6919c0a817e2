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

import logging
import os
import re
from typing import TYPE_CHECKING, Any, Iterator, Optional, Pattern, Union

from ..domain.errors import AlreadyExists, NotFound
from ..domain.options import ConflictStrategy, WalkOptions
from ..domain.stats import ResolvedKind
from ..ports.filesystem import FilesystemPort, PathArg
from .base import BaseSpec, default_fs
from .file import FileSpec
from .symlink import SymlinkSpec

if TYPE_CHECKING:
    from ..services.walker import Walker
    from .fsspec import FSSpec, TypedSpec

logger = logging.getLogger(__name__)


def _name_filter(pattern: Union[None, str, Pattern[str]]):
    if pattern is None:
        return lambda name: True
    rx = re.compile(pattern) if isinstance(pattern, str) else pattern
    return lambda name: rx.search(name) is not None


class FolderSpec(BaseSpec):
    """A path known (or asserted) to be a directory."""

    kind = ResolvedKind.FOLDER

    @classmethod
    def make_temp(
        cls,
        prefix: str = "tmp-",
        suffix: str = "",
        directory: Optional[PathArg] = None,
        fs: Optional[FilesystemPort] = None,
    ) -> FolderSpec:
        """Create an empty, uniquely named folder; the caller removes it when done."""
        fs = fs if fs is not None else default_fs()
        return cls(fs.make_temp_dir(directory, prefix=prefix, suffix=suffix), fs=fs)

    # --- children -----------------------------------------------------------

    def add(self, *segments: str) -> FSSpec:
        from .fsspec import FSSpec

        return FSSpec(self, *segments)

    def file(self, *segments: str) -> FileSpec:
        return FileSpec(self, *segments)

    def folder(self, *segments: str) -> FolderSpec:
        return FolderSpec(self, *segments)

    def read_dir(self) -> list[TypedSpec]:
        """
        Typed immediate children in directory order (lstat per child, links not followed).

        Raises:
            NotADirectory: this path is not a folder.
        """
        from .fsspec import spec_from_record

        return [
            spec_from_record(child, self._fs.stat(child, follow_symlinks=False), self._fs)
            for child in self._fs.list_dir(self._path)
        ]

    def files(self, pattern: Union[None, str, Pattern[str]] = None) -> list[FileSpec]:
        keep = _name_filter(pattern)
        return [c for c in self.read_dir() if isinstance(c, FileSpec) and keep(c.name)]

    def folders(self, pattern: Union[None, str, Pattern[str]] = None) -> list[FolderSpec]:
        keep = _name_filter(pattern)
        return [c for c in self.read_dir() if isinstance(c, FolderSpec) and keep(c.name)]

    def symlinks(self, pattern: Union[None, str, Pattern[str]] = None) -> list[SymlinkSpec]:
        keep = _name_filter(pattern)
        return [c for c in self.read_dir() if isinstance(c, SymlinkSpec) and keep(c.name)]

    def walk(self, options: Optional[WalkOptions] = None, **overrides: Any) -> Walker:
        from ..services.walker import walk

        return walk(self, options, **overrides)

    # --- creation -----------------------------------------------------------

    def mkdir(self, name: str) -> FolderSpec:
        child = FolderSpec(self, name)
        self._fs.make_dir(child.path)
        return child

    def ensure_dir(self) -> FolderSpec:
        self._fs.make_dir(self._path, parents=True, exist_ok=True)
        self.clear_stats()
        return self

    def safe_copy(
        self,
        dest: Union[str, "os.PathLike[str]", BaseSpec],
        conflict: ConflictStrategy = ConflictStrategy.OVERWRITE,
    ) -> FolderSpec:
        """Copy every file below this folder into ``dest``, one safe-write per file."""
        from ..services.safe_copy import safe_copy

        return safe_copy(self, dest, conflict=conflict)

    def move_to(self, dest: Union[PathArg, BaseSpec], overwrite: bool = False) -> FolderSpec:
        """
        Rename this folder to ``dest`` (the new folder path, not a parent to move into).

        With ``overwrite`` whatever is at ``dest`` is deleted first, recursively.

        Raises:
            NotFound: this folder does not exist.
            AlreadyExists: ``dest`` exists and ``overwrite`` is not set.
        """
        if not self.exists(refresh=True):
            raise NotFound("folder does not exist", path=self._path, op="move")
        path = dest.path if isinstance(dest, BaseSpec) else os.fspath(dest)
        target = FolderSpec(path, fs=self._fs)
        if target.exists(refresh=True):
            if not overwrite:
                raise AlreadyExists("destination exists", path=target.path, op="move")
            target.remove(recursive=True)
        self._fs.replace(self._path, target.path)
        logger.debug("Moved %s -> %s", self._path, target.path)
        self.clear_stats()
        return target

    # --- permissions --------------------------------------------------------

    def _tree(self) -> Iterator[BaseSpec]:
        # Listing completes before any change; children are changed before their folder.
        entries = list(self.walk(include_symlinks=False))
        return reversed(entries)

    def chmod(self, mode: int, recursive: bool = False) -> None:
        if not recursive:
            return super().chmod(mode)
        for entry in self._tree():
            BaseSpec.chmod(entry, mode)

    def chown(self, uid: int, gid: Optional[int] = None, recursive: bool = False) -> None:
        if not recursive:
            return super().chown(uid, gid)
        for entry in self._tree():
            BaseSpec.chown(entry, uid, gid)

    def chgrp(self, gid: int, recursive: bool = False) -> None:
        self.chown(-1, gid, recursive=recursive)
