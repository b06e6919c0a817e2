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

import logging
import os
import shutil
import tempfile
from typing import Iterable, Iterator, Optional

from ..domain.errors import Unsupported, from_os_error, translate_os_errors
from ..domain.stats import StatRecord
from ..ports.filesystem import FilesystemPort, PathArg

logger = logging.getLogger(__name__)


class LocalFS(FilesystemPort):
    """Local filesystem adapter over os / shutil / tempfile."""

    @translate_os_errors("stat")
    def stat(self, path: PathArg, follow_symlinks: bool = True) -> StatRecord:
        return StatRecord.from_stat_result(os.stat(path, follow_symlinks=follow_symlinks))

    @translate_os_errors("list_dir")
    def list_dir(self, path: PathArg) -> list[str]:
        # Materialise the listing so the directory handle is closed before callers recurse.
        with os.scandir(path) as entries:
            return [entry.path for entry in entries]

    @translate_os_errors("real_path")
    def real_path(self, path: PathArg) -> str:
        return os.path.realpath(path, strict=True)

    @translate_os_errors("read_link")
    def read_link(self, path: PathArg) -> str:
        return os.readlink(path)

    def open_bytes(self, path: PathArg, chunk_size: int = 65536) -> Iterator[bytes]:
        try:
            f = open(path, "rb")
        except OSError as e:
            raise from_os_error(e, path, "open") from e
        with f:
            while True:
                try:
                    chunk = f.read(chunk_size)
                except OSError as e:
                    raise from_os_error(e, path, "read") from e
                if not chunk:
                    break
                yield chunk

    @translate_os_errors("read")
    def read_prefix(self, path: PathArg, length: int) -> bytes:
        with open(path, "rb") as f:
            return f.read(length)

    @translate_os_errors("create_temp")
    def create_temp(
        self, directory: Optional[PathArg], prefix: str = ".tmp-", suffix: str = ""
    ) -> str:
        fd, tmp = tempfile.mkstemp(suffix=suffix, prefix=prefix, dir=directory or None)
        os.close(fd)
        return tmp

    @translate_os_errors("make_temp_dir")
    def make_temp_dir(
        self, directory: Optional[PathArg], prefix: str = "tmp-", suffix: str = ""
    ) -> str:
        return tempfile.mkdtemp(suffix=suffix, prefix=prefix, dir=directory or None)

    @translate_os_errors("write")
    def write_chunks(self, path: PathArg, chunks: Iterable[bytes]) -> None:
        with open(path, "wb") as f:
            for chunk in chunks:
                f.write(chunk)
            f.flush()
            os.fsync(f.fileno())

    @translate_os_errors("copy_metadata")
    def copy_metadata(self, src: PathArg, dst: PathArg) -> None:
        shutil.copystat(src, dst)

    @translate_os_errors("replace")
    def replace(self, src: PathArg, dst: PathArg) -> None:
        os.replace(src, dst)

    @translate_os_errors("remove")
    def remove(self, path: PathArg) -> None:
        os.remove(path)

    @translate_os_errors("rmdir")
    def remove_dir(self, path: PathArg) -> None:
        os.rmdir(path)

    @translate_os_errors("rmtree")
    def remove_tree(self, path: PathArg) -> None:
        shutil.rmtree(path)

    @translate_os_errors("mkdir")
    def make_dir(self, path: PathArg, parents: bool = False, exist_ok: bool = False) -> None:
        if parents:
            os.makedirs(path, exist_ok=exist_ok)
            return
        try:
            os.mkdir(path)
        except FileExistsError:
            if not (exist_ok and os.path.isdir(path)):
                raise

    @translate_os_errors("chmod")
    def chmod(self, path: PathArg, mode: int, follow_symlinks: bool = True) -> None:
        if not follow_symlinks and os.chmod not in os.supports_follow_symlinks:
            raise Unsupported(
                "changing the mode of a symlink itself is not supported on this platform",
                path=str(path),
                op="chmod",
            )
        os.chmod(path, mode, follow_symlinks=follow_symlinks)

    @translate_os_errors("chown")
    def chown(self, path: PathArg, uid: int, gid: int, follow_symlinks: bool = True) -> None:
        if not hasattr(os, "chown"):
            raise Unsupported(
                "file ownership is not supported on this platform", path=str(path), op="chown"
            )
        if not follow_symlinks and os.chown not in os.supports_follow_symlinks:
            raise Unsupported(
                "changing the owner of a symlink itself is not supported on this platform",
                path=str(path),
                op="chown",
            )
        os.chown(path, uid, gid, follow_symlinks=follow_symlinks)
