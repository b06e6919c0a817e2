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
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Union

from ..domain.errors import CycleDetected, FilesystemError, NotADirectory, NotFound
from ..domain.options import WalkOptions
from ..domain.stats import ResolvedKind
from ..ports.filesystem import FilesystemPort
from ..specs.base import BaseSpec
from ..specs.folder import FolderSpec
from ..specs.fsspec import TypedSpec, spec_from_record
from ..specs.symlink import SymlinkSpec

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    """One folder on the walk stack; ``pending`` is filled on first pull."""

    path: str
    rel: str
    depth: int
    real: Optional[str] = None
    pending: Optional[Iterator[str]] = None


class Walker:
    """
    Lazy, top-down, depth-first walk over a folder.

    Each ``next()`` reads at most one directory listing and stats the entries it needs
    to produce a single result. No recursion; the pending work is an explicit stack of
    frames, and every listing is fully read and released before its entries are visited.

    ``relative`` holds the POSIX-style path of the last yielded entry relative to the
    root (``""`` for the root). ``pruned`` collects the CycleDetected records for
    branches that were not entered because their target had already been visited.
    """

    def __init__(
        self,
        root: Union[FolderSpec, BaseSpec, str, "os.PathLike[str]"],
        options: Optional[WalkOptions] = None,
        fs: Optional[FilesystemPort] = None,
    ) -> None:
        if isinstance(root, BaseSpec):
            self._fs = fs if fs is not None else root.fs
            root_path = root.path
        else:
            root_spec = FolderSpec(root, fs=fs)
            self._fs = root_spec.fs
            root_path = root_spec.path
        self._root_path = root_path
        self._options = options if options is not None else WalkOptions()
        self._stack: list[_Frame] = []
        self._visited: set[str] = set()
        self._started = False
        self._root_real: Optional[str] = None
        self.relative: str = ""
        self.pruned: list[CycleDetected] = []

    @property
    def options(self) -> WalkOptions:
        return self._options

    def __iter__(self) -> Walker:
        return self

    def __next__(self) -> TypedSpec:
        if not self._started:
            self._started = True
            root = self._start()
            if root is not None:
                return root
        while self._stack:
            frame = self._stack[-1]
            if frame.pending is None:
                try:
                    frame.pending = iter(self._fs.list_dir(frame.path))
                except FilesystemError as e:
                    self._stack.pop()
                    self._fail(e)
                    continue
            child = next(frame.pending, None)
            if child is None:
                self._stack.pop()
                continue
            spec = self._visit(frame, child)
            if spec is not None:
                return spec
        raise StopIteration

    # --- steps --------------------------------------------------------------

    def _start(self) -> Optional[TypedSpec]:
        # The root itself may be a link to a folder; errors here are never skipped.
        record = self._fs.stat(self._root_path, follow_symlinks=True)
        if not record.is_directory:
            raise NotADirectory("not a directory", path=self._root_path, op="walk")
        root = FolderSpec(self._root_path, fs=self._fs)
        if self._options.follow_symlinks:
            self._root_real = self._fs.real_path(self._root_path)
            self._visited.add(self._root_real)
        if self._skipped(""):
            return None
        self._descend(root.path, "", 0, self._root_real)
        return self._emit(root, "")

    def _visit(self, frame: _Frame, child: str) -> Optional[TypedSpec]:
        opts = self._options
        depth = frame.depth + 1
        name = os.path.basename(child)
        rel = f"{frame.rel}/{name}" if frame.rel else name
        try:
            record = self._fs.stat(child, follow_symlinks=False)
        except FilesystemError as e:
            self._fail(e)
            return None
        spec = spec_from_record(child, record, self._fs)
        real = os.path.join(frame.real, name) if frame.real is not None else None

        if opts.follow_symlinks and isinstance(spec, SymlinkSpec):
            # the link's own name is tested before anything behind it is read
            if self._skipped(rel):
                logger.debug("Skipping %s (matched a skip pattern)", child)
                return None
            followed = self._follow(spec)
            if followed is None:
                return None
            if followed is not spec:
                real = followed.path
                inside = self._relative_to_root(real)
                if inside is None:
                    spec = followed
                else:
                    rel = inside
                    spec = self._under_root(followed, inside)

        if self._skipped(rel):
            logger.debug("Skipping %s (matched a skip pattern)", child)
            return None

        if real is not None and spec.kind in (ResolvedKind.FILE, ResolvedKind.FOLDER):
            if real in self._visited:
                if spec.kind is ResolvedKind.FOLDER:
                    self._prune(child, real)
                else:
                    logger.debug("Already yielded %s; not repeating it for %s", real, child)
                return None
            self._visited.add(real)

        if spec.kind is ResolvedKind.FOLDER:
            self._descend(spec.path, rel, depth, real)
        return self._emit(spec, rel)

    def _follow(self, link: SymlinkSpec) -> Optional[TypedSpec]:
        """
        Swap a symlink for its canonical target. Dangling links come back unchanged
        (they are yielded as leaves); link loops are pruned.
        """
        try:
            real = self._fs.real_path(link.path)
            record = self._fs.stat(real, follow_symlinks=False)
        except NotFound:
            logger.debug("Dangling symlink %s kept as a leaf", link.path)
            return link
        except CycleDetected as e:
            self._record_pruned(e)
            return None
        except FilesystemError as e:
            self._fail(e)
            return None
        return spec_from_record(real, record, self._fs)

    def _descend(self, path: str, rel: str, depth: int, real: Optional[str]) -> None:
        max_depth = self._options.max_depth
        if max_depth is not None and depth >= max_depth:
            return
        self._stack.append(_Frame(path=path, rel=rel, depth=depth, real=real))

    # --- helpers ------------------------------------------------------------

    def _skipped(self, rel: str) -> bool:
        return any(p.search(rel) for p in self._options.skip)

    def _accepts(self, spec: TypedSpec, rel: str) -> bool:
        opts = self._options
        if opts.match and not any(p.search(rel) for p in opts.match):
            return False
        kind = spec.kind
        if kind is ResolvedKind.FOLDER:
            return opts.include_dirs
        if kind is ResolvedKind.SYMLINK:
            return opts.include_symlinks
        # devices, FIFOs and sockets follow the file switch
        if not opts.include_files:
            return False
        if kind is ResolvedKind.FILE and opts.exts:
            return spec.name.endswith(opts.exts)
        return True

    def _emit(self, spec: TypedSpec, rel: str) -> Optional[TypedSpec]:
        if not self._accepts(spec, rel):
            return None
        self.relative = rel
        return spec

    def _relative_to_root(self, real: str) -> Optional[str]:
        """POSIX path of ``real`` below the root, or None when it lies outside the root."""
        try:
            rel = os.path.relpath(real, self._root_real)
        except ValueError:
            # different drive
            return None
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            return None
        return "" if rel == os.curdir else rel.replace(os.sep, "/")

    def _under_root(self, target: TypedSpec, rel: str) -> TypedSpec:
        """Re-spell a followed target that lies inside the root under the root's own path."""
        path = os.path.join(self._root_path, *rel.split("/")) if rel else self._root_path
        return spec_from_record(path, target.stats(), self._fs)

    def _prune(self, link_path: str, real: str) -> None:
        self._record_pruned(
            CycleDetected(f"already visited {real}", path=link_path, op="walk")
        )

    def _record_pruned(self, err: CycleDetected) -> None:
        logger.debug("Pruned %s: %s", err.path, err)
        self.pruned.append(err)

    def _fail(self, err: FilesystemError) -> None:
        if self._options.on_error is None:
            raise err
        logger.debug("Skipping %s after error: %s", err.path, err)
        self._options.on_error(err)


def walk(
    root: Union[FolderSpec, BaseSpec, str, "os.PathLike[str]"],
    options: Optional[WalkOptions] = None,
    *,
    fs: Optional[FilesystemPort] = None,
    **overrides: Any,
) -> Walker:
    """
    Start a new walk. Keyword overrides are applied on top of ``options``
    (``walk(root, max_depth=1, exts=[".txt"])``). Every call is independent.
    """
    opts = (options if options is not None else WalkOptions()).with_overrides(**overrides)
    return Walker(root, opts, fs=fs)
