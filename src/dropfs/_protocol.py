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

"""Protocols on both sides of an adapter.

``StorageClient`` is the interface an adapter consumes: a thin client over a
cloud storage API. ``FilesystemAdapter`` is the interface an adapter exposes
to filesystem callers. Both use plain ``str`` paths.

Client responses are mappings with at least ``path`` and ``is_dir``, and
optionally ``modified`` (RFC 2822), ``bytes`` and ``mime_type``. Responses
from ``get_metadata_with_children`` additionally carry a ``contents`` list
of child responses.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import IO, Any, Protocol, runtime_checkable

from ._types import Entry, ReadResult, StreamResult, WriteMode
from .config import Config, Visibility

Response = Mapping[str, Any]


@runtime_checkable
class StorageClient(Protocol):
    """Backend client consumed by adapters.

    Lookups return ``None`` when the backend has no result. Failed calls
    raise :class:`dropfs.errors.StorageClientError`.
    """

    def get_file(self, path: str, stream: IO[bytes]) -> Response | None:
        """Download ``path`` into ``stream`` and return its metadata."""
        ...

    def upload_file_from_string(
        self, path: str, mode: WriteMode, contents: bytes
    ) -> Response | None:
        """Upload in-memory ``contents`` to ``path``."""
        ...

    def upload_file(
        self, path: str, mode: WriteMode, stream: IO[bytes], size: int | None
    ) -> Response | None:
        """Upload ``stream`` to ``path``; ``size`` is a hint, ``None`` if unknown."""
        ...

    def move(self, from_path: str, to_path: str) -> Response | None: ...

    def copy(self, from_path: str, to_path: str) -> Response | None: ...

    def delete(self, path: str) -> Response | None:
        """Delete ``path``; a successful response carries ``is_deleted``."""
        ...

    def create_folder(self, path: str) -> Response | None: ...

    def get_metadata(self, path: str) -> Response | None: ...

    def get_metadata_with_children(self, path: str) -> Response | None: ...


@runtime_checkable
class VisibilityCapability(Protocol):
    """Access-level queries and changes for a path."""

    def get_visibility(self, path: str) -> Visibility: ...

    def set_visibility(self, path: str, visibility: Visibility) -> Entry: ...


@runtime_checkable
class FilesystemAdapter(VisibilityCapability, Protocol):
    """Filesystem operations exposed to callers.

    Failures are soft: entry-returning operations return ``None`` and
    boolean operations return ``False`` instead of raising.

    Example::

        def backup(fs: FilesystemAdapter, path: str, data: bytes) -> bool:
            if fs.has(path):
                return fs.update(path, data, Config()) is not None
            return fs.write(path, data, Config()) is not None
    """

    def has(self, path: str) -> bool: ...

    def read(self, path: str) -> ReadResult | None: ...

    def read_stream(self, path: str) -> StreamResult | None: ...

    def write(
        self, path: str, contents: bytes | str, config: Config
    ) -> Entry | None: ...

    def write_stream(
        self, path: str, stream: IO[bytes], config: Config
    ) -> Entry | None: ...

    def update(
        self, path: str, contents: bytes | str, config: Config
    ) -> Entry | None: ...

    def update_stream(
        self, path: str, stream: IO[bytes], config: Config
    ) -> Entry | None: ...

    def rename(self, path: str, newpath: str) -> bool: ...

    def copy(self, path: str, newpath: str) -> bool: ...

    def delete(self, path: str) -> bool: ...

    def delete_dir(self, path: str) -> bool: ...

    def create_dir(self, path: str, config: Config) -> Entry | None: ...

    def get_metadata(self, path: str) -> Entry | None: ...

    def get_mimetype(self, path: str) -> Entry | None: ...

    def get_size(self, path: str) -> Entry | None: ...

    def get_timestamp(self, path: str) -> Entry | None: ...

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> Sequence[Entry]: ...


__all__ = [
    "FilesystemAdapter",
    "Response",
    "StorageClient",
    "VisibilityCapability",
]
