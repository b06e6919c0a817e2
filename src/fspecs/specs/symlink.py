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

from typing import TYPE_CHECKING

from ..domain.stats import ResolvedKind
from .base import BaseSpec

if TYPE_CHECKING:
    from .fsspec import TypedSpec


class SymlinkSpec(BaseSpec):
    """
    A symbolic link. Permission operations act on the link itself; platforms
    without the link-level primitive raise Unsupported.
    """

    kind = ResolvedKind.SYMLINK
    _follow_for_permissions = False

    def target(self) -> str:
        """The raw link text, not resolved."""
        return self._fs.read_link(self._path)

    def resolve_target(self) -> TypedSpec:
        """
        Resolve the canonical target into its own typed spec.

        Raises:
            NotFound: dangling link.
            CycleDetected: the link chain loops.
        """
        from .fsspec import FSSpec

        return FSSpec(self._fs.real_path(self._path), fs=self._fs).resolved_type()
