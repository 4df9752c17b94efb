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

"""Path prefix handling shared by adapters.

Adapters scope every operation under an optional prefix directory. Outgoing
paths get the prefix prepended and are forced into the canonical backend
form (a single leading slash, no trailing slash). Paths found in backend
responses have the prefix stripped again before reaching the caller.
"""

from __future__ import annotations

from typing import Final

SEPARATOR: Final[str] = "/"


def canonical_location(path: str) -> str:
    """Return ``path`` with exactly one leading slash and no trailing slash.

    Examples:
        >>> canonical_location("foo/bar/")
        '/foo/bar'
        >>> canonical_location("//foo")
        '/foo'
        >>> canonical_location("")
        '/'
    """
    return SEPARATOR + path.strip(SEPARATOR)


class PathPrefixer:
    """Base for adapters that scope their paths under a prefix."""

    _path_prefix: str = ""

    @property
    def path_prefix(self) -> str:
        """Configured prefix without surrounding slashes (empty for none)."""
        return self._path_prefix

    def set_path_prefix(self, prefix: str | None) -> None:
        self._path_prefix = (prefix or "").strip(SEPARATOR)

    def apply_path_prefix(self, path: str) -> str:
        """Return the backend location for ``path``.

        Examples:
            >>> prefixer = PathPrefixer()
            >>> prefixer.set_path_prefix("team/")
            >>> prefixer.apply_path_prefix("docs/a.txt/")
            '/team/docs/a.txt'
        """
        segments = [self._path_prefix, path.strip(SEPARATOR)]
        return canonical_location(SEPARATOR.join(s for s in segments if s))

    def remove_path_prefix(self, path: str) -> str:
        """Return ``path`` relative to the prefix, without a leading slash.

        The prefix is matched case-insensitively because the backend may
        report lowercased paths. Paths outside the prefix are returned with
        only the leading slash removed.
        """
        stripped = path.lstrip(SEPARATOR)
        prefix = self._path_prefix
        if not prefix:
            return stripped
        lowered, lowered_prefix = stripped.lower(), prefix.lower()
        if lowered == lowered_prefix:
            return ""
        if lowered.startswith(lowered_prefix + SEPARATOR):
            return stripped[len(prefix) + 1 :]
        return stripped


__all__ = ["SEPARATOR", "PathPrefixer", "canonical_location"]
