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
from typing import Iterable, Optional, Union

from ..domain.errors import AlreadyExists, FilesystemError, InvalidOperation, NotFound
from ..domain.options import ConflictStrategy
from ..domain.stats import ResolvedKind
from ..ports.filesystem import FilesystemPort
from ..specs.base import BaseSpec, default_fs
from ..specs.file import FileSpec
from ..specs.folder import FolderSpec
from ..specs.fsspec import FSSpec, resolve
from ..specs.symlink import SymlinkSpec

logger = logging.getLogger(__name__)

DEFAULT_BACKUP_LIMIT = 32

Destination = Union[str, "os.PathLike[str]", BaseSpec]


def safe_write(
    dest: str,
    chunks: Iterable[bytes],
    fs: Optional[FilesystemPort] = None,
    metadata_from: Optional[str] = None,
) -> str:
    """
    Write ``chunks`` to ``dest`` through a temporary sibling.

    The temp file lives in the destination folder so the final rename stays on one
    filesystem. It is fsync'ed, then given ``metadata_from``'s mode and times, or,
    without ``metadata_from``, the mode of the file it replaces. Then it is renamed
    over ``dest``. On any failure the temp file is removed and ``dest``
    is left as it was.

    Returns:
        The destination path.
    """
    fs = fs if fs is not None else default_fs()
    dest = os.fspath(dest)
    directory = os.path.dirname(dest) or os.curdir
    keep_mode = None if metadata_from is not None else _current_mode(fs, dest)
    tmp = fs.create_temp(directory, prefix=f".{os.path.basename(dest)}.")
    try:
        fs.write_chunks(tmp, chunks)
        if metadata_from is not None:
            fs.copy_metadata(metadata_from, tmp)
        elif keep_mode is not None:
            fs.chmod(tmp, keep_mode)
        fs.replace(tmp, dest)
    except BaseException:
        _discard(fs, tmp)
        raise
    logger.debug("Safe-wrote %s", dest)
    return dest


def _current_mode(fs: FilesystemPort, path: str) -> Optional[int]:
    try:
        return fs.stat(path, follow_symlinks=True).permission_bits
    except NotFound:
        return None


def _discard(fs: FilesystemPort, tmp: str) -> None:
    try:
        fs.remove(tmp)
    except NotFound:
        pass
    except FilesystemError as e:
        logger.warning("Could not remove temporary file %s: %s", tmp, e)


def _exists(fs: FilesystemPort, path: str) -> bool:
    try:
        fs.stat(path, follow_symlinks=False)
    except NotFound:
        return False
    return True


def backup_path(
    path: str,
    strategy: ConflictStrategy = ConflictStrategy.RENAME_WITH_NUMBER,
    separator: str = "-",
    limit: Optional[int] = None,
    fs: Optional[FilesystemPort] = None,
) -> str:
    """
    Pick the name a backup of ``path`` goes to.

    * tilde: ``notes.txt`` -> ``notes.txt~`` (an older tilde backup is replaced)
    * number: ``notes.txt`` -> ``notes-01.txt``, ``notes-02.txt``, ... the first name
      that does not exist yet, trying at most ``limit`` names.

    Raises:
        AlreadyExists: every numbered name up to ``limit`` is taken.
        InvalidOperation: ``strategy`` is neither tilde nor number.
    """
    fs = fs if fs is not None else default_fs()
    path = os.fspath(path)
    strategy = ConflictStrategy(strategy)
    if strategy is ConflictStrategy.RENAME_WITH_TILDE:
        return path + "~"
    if strategy is not ConflictStrategy.RENAME_WITH_NUMBER:
        raise InvalidOperation(f"{strategy.value!r} does not name a backup path")

    limit = DEFAULT_BACKUP_LIMIT if limit is None else limit
    head, name = os.path.split(path)
    stem, ext = os.path.splitext(name)
    for n in range(1, limit + 1):
        candidate = os.path.join(head, f"{stem}{separator}{n:02d}{ext}")
        if not _exists(fs, candidate):
            return candidate
    raise AlreadyExists(
        f"no free backup name after {limit} attempts", path=path, op="backup"
    )


def backup(
    spec: FileSpec,
    strategy: ConflictStrategy = ConflictStrategy.RENAME_WITH_NUMBER,
    separator: str = "-",
    limit: Optional[int] = None,
) -> FileSpec:
    """Safe-write a copy of ``spec`` to a backup name and return the copy's spec."""
    fs = spec.fs
    target = backup_path(spec.path, strategy, separator=separator, limit=limit, fs=fs)
    safe_write(target, fs.open_bytes(spec.path), fs=fs, metadata_from=spec.path)
    logger.info("Backed up %s to %s", spec.path, target)
    return FileSpec(target, fs=fs)


def _copy_file(src: FileSpec, dest_path: str, conflict: ConflictStrategy) -> Optional[FileSpec]:
    fs = src.fs
    if _exists(fs, dest_path):
        if conflict is ConflictStrategy.SKIP:
            logger.info("Skipping %s: %s already exists", src.path, dest_path)
            return None
        if conflict is ConflictStrategy.ERROR:
            raise AlreadyExists("destination exists", path=dest_path, op="copy")
        if conflict in (ConflictStrategy.RENAME_WITH_TILDE, ConflictStrategy.RENAME_WITH_NUMBER):
            backup(FileSpec(dest_path, fs=fs), strategy=conflict)
    else:
        fs.make_dir(os.path.dirname(dest_path) or os.curdir, parents=True, exist_ok=True)
    safe_write(dest_path, fs.open_bytes(src.path), fs=fs, metadata_from=src.path)
    return FileSpec(dest_path, fs=fs)


def _target_path(dest: Destination, fs: FilesystemPort) -> tuple[str, Optional[ResolvedKind]]:
    """Path of ``dest`` and its kind (following links), or None when it does not exist yet."""
    path = dest.path if isinstance(dest, BaseSpec) else os.fspath(dest)
    try:
        record = fs.stat(path, follow_symlinks=True)
    except NotFound:
        return path, None
    return path, record.kind


def _planned_real_path(fs: FilesystemPort, path: str) -> str:
    """Canonical path ``path`` would have, resolving its nearest existing ancestor."""
    head = os.path.abspath(path)
    tail: list[str] = []
    while True:
        try:
            return os.path.join(fs.real_path(head), *reversed(tail))
        except NotFound:
            parent, name = os.path.split(head)
            if parent == head:
                return os.path.abspath(path)
            tail.append(name)
            head = parent


def safe_copy(
    src: Union[BaseSpec, str, "os.PathLike[str]"],
    dest: Destination,
    conflict: ConflictStrategy = ConflictStrategy.OVERWRITE,
) -> Union[FileSpec, FolderSpec, None]:
    """
    Copy a file or a folder tree without ever exposing a half-written destination file.

    * File source: ``dest`` may be a file path (created or replaced) or an existing
      folder (the file keeps its name inside it). An existing destination file is
      handled per ``conflict``. Returns the destination spec, or None when skipped.
    * Folder source: ``dest`` is created if needed and every file below ``src`` is
      copied to the matching relative path, one safe-write per file. Returns the
      destination folder.

    Raises:
        InvalidOperation: ``src`` is a symlink, a folder is copied onto a file, or a
            folder is copied into itself or one of its own subfolders.
        NotFound: ``src`` does not exist.
        AlreadyExists: ``conflict`` is ERROR and the destination exists.
    """
    conflict = ConflictStrategy(conflict)
    source = resolve(src)
    fs = source.fs
    if isinstance(source, SymlinkSpec):
        raise InvalidOperation(f"cannot copy a symlink: {source.path}")
    if isinstance(source, FSSpec):
        raise InvalidOperation(f"cannot copy a special file: {source.path}")

    dest_path, dest_kind = _target_path(dest, fs)

    if isinstance(source, FileSpec):
        if dest_kind is ResolvedKind.FOLDER:
            dest_path = os.path.join(dest_path, source.name)
        logger.debug("Copying %s -> %s (%s)", source.path, dest_path, conflict.value)
        return _copy_file(source, dest_path, conflict)

    if dest_kind is not None and dest_kind is not ResolvedKind.FOLDER:
        raise InvalidOperation(f"cannot copy folder {source.path} onto non-folder {dest_path}")
    src_real = fs.real_path(source.path)
    dest_real = _planned_real_path(fs, dest_path)
    if dest_real == src_real or dest_real.startswith(src_real.rstrip(os.sep) + os.sep):
        raise InvalidOperation(f"cannot copy folder {source.path} into itself ({dest_path})")
    return _copy_folder(source, FolderSpec(dest_path, fs=fs), conflict)


def _copy_folder(src: FolderSpec, dest: FolderSpec, conflict: ConflictStrategy) -> FolderSpec:
    dest.ensure_dir()
    walker = src.walk(include_symlinks=False)
    copied = 0
    for entry in walker:
        rel = walker.relative
        if not rel:
            continue
        target = os.path.join(dest.path, *rel.split("/"))
        if isinstance(entry, FolderSpec):
            FolderSpec(target, fs=dest.fs).ensure_dir()
        elif isinstance(entry, FileSpec):
            if _copy_file(entry, target, conflict) is not None:
                copied += 1
    logger.info("Copied %d file(s) from %s to %s", copied, src.path, dest.path)
    return dest
