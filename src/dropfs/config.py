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

"""Configuration records for adapters.

``Config`` is the per-call options record accepted by write operations.
``DropboxSettings`` holds the environment-derived settings used to build a
ready-to-use adapter.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Final, Literal

Visibility = Literal["public", "private"]

ACCESS_TOKEN_ENV: Final[str] = "DROPFS_ACCESS_TOKEN"
PATH_PREFIX_ENV: Final[str] = "DROPFS_PATH_PREFIX"
TIMEOUT_ENV: Final[str] = "DROPFS_TIMEOUT"
DEFAULT_TIMEOUT: Final[float] = 100.0


@dataclass(slots=True, frozen=True)
class Config:
    """Options passed alongside write, update and directory creation calls.

    Adapters that cannot honour an option ignore it.

    Attributes:
        visibility: Requested access level for the written object.
        mimetype: Explicit MIME type for the written object.
        disable_asserts: Skip existence checks performed by callers.
        extra: Backend specific options not covered by the named fields.
    """

    visibility: Visibility | None = None
    mimetype: str | None = None
    disable_asserts: bool = False
    extra: Mapping[str, object] = field(default_factory=dict)

    def get(self, key: str, default: object = None) -> object:
        """Return a named option or an ``extra`` entry, else ``default``."""
        if key in _NAMED_FIELDS:
            value = getattr(self, key)
            return default if value is None else value
        return self.extra.get(key, default)

    def has(self, key: str) -> bool:
        return self.get(key) is not None


_NAMED_FIELDS: Final[frozenset[str]] = frozenset(
    f.name for f in fields(Config) if f.name != "extra"
)


@dataclass(slots=True, frozen=True)
class DropboxSettings:
    """Settings for :func:`dropfs.create_adapter`.

    Attributes:
        access_token: OAuth2 access token handed to the Dropbox SDK.
        path_prefix: Directory every adapter operation is scoped under.
        timeout: Request timeout in seconds handed to the Dropbox SDK.
    """

    access_token: str
    path_prefix: str | None = None
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> DropboxSettings:
        """Read settings from ``env`` (defaults to ``os.environ``).

        Raises:
            ValueError: The access token is missing or the timeout is not a
                number.
        """
        env = env if env is not None else os.environ

        access_token = env.get(ACCESS_TOKEN_ENV, "").strip()
        if not access_token:
            msg = f"{ACCESS_TOKEN_ENV} must be set to a Dropbox access token."
            raise ValueError(msg)

        raw_timeout = env.get(TIMEOUT_ENV)
        try:
            timeout = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
        except ValueError:
            msg = f"{TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}."
            raise ValueError(msg) from None

        return cls(
            access_token=access_token,
            path_prefix=env.get(PATH_PREFIX_ENV) or None,
            timeout=timeout,
        )


__all__ = [
    "ACCESS_TOKEN_ENV",
    "DEFAULT_TIMEOUT",
    "PATH_PREFIX_ENV",
    "TIMEOUT_ENV",
    "Config",
    "DropboxSettings",
    "Visibility",
]
