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

import errno
from functools import wraps
from typing import Any, Callable, Optional, TypeVar

_R = TypeVar("_R")


class FspecsError(Exception):
    """Base exception for domain-specific errors."""


class ConfigurationError(FspecsError):
    """Bad walk options, CLI args or unusable settings."""


class InvalidOperation(FspecsError):
    """The operation is not meaningful for this kind of spec (e.g. copying a symlink)."""


class FilesystemError(FspecsError):
    """
    An OS-level failure tied to a path.

    Attributes:
        path:  the path the operation acted on
        op:    short operation name ("stat", "chmod", "replace", ...)
        errno: the underlying errno, when there was one
    """

    def __init__(
        self,
        message: str,
        *,
        path: Optional[str] = None,
        op: Optional[str] = None,
        errno: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.op = op
        self.errno = errno

    def __str__(self) -> str:
        msg = super().__str__()
        if self.path is None:
            return msg
        if self.op:
            return f"{self.op} {self.path}: {msg}"
        return f"{self.path}: {msg}"


class NotFound(FilesystemError):
    """Path absent at the time of the operation."""


class PermissionDenied(FilesystemError):
    """Access denied on the path or one of its ancestors."""


class NotADirectory(FilesystemError):
    """Enumeration attempted on something that is not a folder."""


class AlreadyExists(FilesystemError):
    """Target path exists and the operation refuses to replace it."""


class CycleDetected(FilesystemError):
    """A symlink loop was found while following links."""


class Unsupported(FilesystemError):
    """Operation not available on this platform or for this kind of entry."""


_ERRNO_MAP: dict[int, type[FilesystemError]] = {
    errno.ENOENT: NotFound,
    errno.EACCES: PermissionDenied,
    errno.EPERM: PermissionDenied,
    errno.ENOTDIR: NotADirectory,
    errno.EEXIST: AlreadyExists,
    errno.ELOOP: CycleDetected,
    errno.ENOSYS: Unsupported,
    errno.EOPNOTSUPP: Unsupported,
}
if hasattr(errno, "ENOTSUP"):
    _ERRNO_MAP.setdefault(errno.ENOTSUP, Unsupported)


def from_os_error(err: BaseException, path: Any, op: str) -> FilesystemError:
    """Classify an OSError (or NotImplementedError) into the FilesystemError hierarchy."""
    if isinstance(err, FilesystemError):
        return err
    p = None if path is None else str(path)
    if isinstance(err, NotImplementedError):
        return Unsupported(str(err) or f"{op} is not supported on this platform", path=p, op=op)
    code = getattr(err, "errno", None)
    cls = _ERRNO_MAP.get(code, FilesystemError) if code is not None else FilesystemError
    message = getattr(err, "strerror", None) or str(err) or type(err).__name__
    return cls(message, path=p, op=op, errno=code)


def translate_os_errors(op: str) -> Callable[[Callable[..., _R]], Callable[..., _R]]:
    """
    Wrap a port method so raw OSErrors surface as FilesystemError subclasses.

    The first positional argument after ``self`` is taken as the acting path.
    """

    def decorator(func: Callable[..., _R]) -> Callable[..., _R]:
        @wraps(func)
        def wrapper(self: Any, path: Any, *args: Any, **kwargs: Any) -> _R:
            try:
                return func(self, path, *args, **kwargs)
            except (OSError, NotImplementedError) as e:
                raise from_os_error(e, path, op) from e

        return wrapper

    return decorator
