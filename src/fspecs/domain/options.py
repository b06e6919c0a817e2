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

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Iterable, Optional, Pattern, Union

from .errors import ConfigurationError, FilesystemError

PatternLike = Union[str, Pattern[str]]


def _compile(patterns: Optional[Iterable[PatternLike]], name: str) -> tuple[Pattern[str], ...]:
    if patterns is None:
        return ()
    if isinstance(patterns, (str, re.Pattern)):
        patterns = [patterns]
    out = []
    for pat in patterns:
        if isinstance(pat, re.Pattern):
            out.append(pat)
            continue
        try:
            out.append(re.compile(pat))
        except re.error as e:
            raise ConfigurationError(f"Invalid {name} pattern {pat!r}: {e}") from e
    return tuple(out)


def _normalise_exts(exts: Optional[Iterable[str]]) -> tuple[str, ...]:
    if exts is None:
        return ()
    if isinstance(exts, str):
        exts = [exts]
    return tuple(e if e.startswith(".") else f".{e}" for e in exts if e)


@dataclass(frozen=True)
class WalkOptions:
    """
    Configuration for a directory walk.

    Notes:
      * ``max_depth=None`` means unbounded; the root is depth 0.
      * ``exts`` is a case-sensitive suffix match applied to files only.
      * ``match``/``skip`` are regular expressions searched against the path relative
        to the walk root (POSIX separators, the root itself is ``""``).
      * ``on_error`` switches the walk from fail-fast to skip-and-report.
    """

    max_depth: Optional[int] = None
    include_files: bool = True
    include_dirs: bool = True
    include_symlinks: bool = True
    follow_symlinks: bool = False
    exts: tuple[str, ...] = ()
    match: tuple[Pattern[str], ...] = ()
    skip: tuple[Pattern[str], ...] = ()
    on_error: Optional[Callable[[FilesystemError], None]] = field(
        default=None, compare=False
    )

    def __post_init__(self) -> None:
        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                raise ConfigurationError(f"max_depth must be an int or None, got {self.max_depth!r}")
            if self.max_depth < 0:
                raise ConfigurationError(f"max_depth must be >= 0, got {self.max_depth}")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "exts", _normalise_exts(self.exts))
        object.__setattr__(self, "match", _compile(self.match, "match"))
        object.__setattr__(self, "skip", _compile(self.skip, "skip"))

    def with_overrides(self, **overrides: Any) -> WalkOptions:
        """Return a copy with the given fields replaced (unknown names raise)."""
        if not overrides:
            return self
        unknown = set(overrides) - set(self.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown walk option(s): {', '.join(sorted(unknown))}")
        return replace(self, **overrides)


class ConflictStrategy(str, Enum):
    """What safe_copy does when the destination file already exists."""

    OVERWRITE = "overwrite"
    SKIP = "skip"
    ERROR = "error"
    RENAME_WITH_TILDE = "tilde"
    RENAME_WITH_NUMBER = "number"
