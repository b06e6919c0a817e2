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

import os
from abc import ABC, abstractmethod
from typing import Iterable, Iterator, Optional, Union

from ..domain.stats import StatRecord

PathArg = Union[str, "os.PathLike[str]"]


class FilesystemPort(ABC):
    """
    Abstract interface for filesystem access.

    Paths may be given as strings or ``os.PathLike`` objects; paths handed back are
    strings. Implementations raise FilesystemError subclasses (NotFound,
    PermissionDenied, ...) with the acting path attached; raw OSErrors must not escape.
    """

    @abstractmethod
    def stat(self, path: PathArg, follow_symlinks: bool = True) -> StatRecord:
        """Return a StatRecord; with follow_symlinks=False the final link is not dereferenced."""
        raise NotImplementedError

    @abstractmethod
    def list_dir(self, path: PathArg) -> list[str]:
        """Return the child paths of a folder in directory order (handle released on return)."""
        raise NotImplementedError

    @abstractmethod
    def real_path(self, path: PathArg) -> str:
        """Return the canonical absolute path, with every symlink resolved."""
        raise NotImplementedError

    @abstractmethod
    def read_link(self, path: PathArg) -> str:
        """Return the raw target stored in a symlink."""
        raise NotImplementedError

    @abstractmethod
    def open_bytes(self, path: PathArg, chunk_size: int = 65536) -> Iterator[bytes]:
        """Yield file bytes in chunks."""
        raise NotImplementedError

    @abstractmethod
    def read_prefix(self, path: PathArg, length: int) -> bytes:
        """Return at most ``length`` leading bytes of a file."""
        raise NotImplementedError

    @abstractmethod
    def create_temp(
        self, directory: Optional[PathArg], prefix: str = ".tmp-", suffix: str = ""
    ) -> str:
        """Create an empty, uniquely named file and return its path.

        ``directory`` None means the platform temp folder.
        """
        raise NotImplementedError

    @abstractmethod
    def make_temp_dir(
        self, directory: Optional[PathArg], prefix: str = "tmp-", suffix: str = ""
    ) -> str:
        """Create an empty, uniquely named folder and return its path."""
        raise NotImplementedError

    @abstractmethod
    def write_chunks(self, path: PathArg, chunks: Iterable[bytes]) -> None:
        """Write ``chunks`` to ``path`` (truncating) and flush them to stable storage."""
        raise NotImplementedError

    @abstractmethod
    def copy_metadata(self, src: PathArg, dst: PathArg) -> None:
        """Copy permission bits and timestamps from ``src`` onto ``dst``."""
        raise NotImplementedError

    @abstractmethod
    def replace(self, src: PathArg, dst: PathArg) -> None:
        """Atomically rename ``src`` over ``dst``."""
        raise NotImplementedError

    @abstractmethod
    def remove(self, path: PathArg) -> None:
        """Remove a file or symlink."""
        raise NotImplementedError

    @abstractmethod
    def remove_dir(self, path: PathArg) -> None:
        """Remove an empty folder."""
        raise NotImplementedError

    @abstractmethod
    def remove_tree(self, path: PathArg) -> None:
        """Remove a folder and everything below it; symlinks inside are not followed."""
        raise NotImplementedError

    @abstractmethod
    def make_dir(self, path: PathArg, parents: bool = False, exist_ok: bool = False) -> None:
        raise NotImplementedError

    @abstractmethod
    def chmod(self, path: PathArg, mode: int, follow_symlinks: bool = True) -> None:
        raise NotImplementedError

    @abstractmethod
    def chown(self, path: PathArg, uid: int, gid: int, follow_symlinks: bool = True) -> None:
        """Change ownership; -1 leaves the corresponding id unchanged."""
        raise NotImplementedError
