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

"""Construct a ready-to-use Dropbox adapter from settings."""

from __future__ import annotations

import dropbox

from .adapter import DropboxAdapter
from .client import DropboxClient
from .config import DropboxSettings
from .logging import get_logger

__all__ = ["create_adapter"]

_LOGGER = get_logger(__name__, context={"component": "factory"})


def create_adapter(settings: DropboxSettings | None = None) -> DropboxAdapter:
    """Build a :class:`DropboxAdapter` backed by the official SDK.

    Settings are read from the environment when ``settings`` is omitted
    (see :meth:`DropboxSettings.from_env`).
    """
    if settings is None:
        settings = DropboxSettings.from_env()

    dbx = dropbox.Dropbox(settings.access_token, timeout=settings.timeout)
    _LOGGER.info(
        "Created Dropbox adapter.",
        event="dropbox.adapter.created",
        context={"path_prefix": settings.path_prefix, "timeout": settings.timeout},
    )
    return DropboxAdapter(DropboxClient(dbx), prefix=settings.path_prefix)
