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

"""Dropbox backend for the filesystem adapter protocol.

Each adapter operation prefixes the caller's path, makes exactly one storage
client call and reshapes the response into an :class:`~dropfs.Entry`.
Failures are soft: missing results come back as ``None``, ``False`` or an
empty listing.

Example usage::

    from dropfs import Config, DropboxAdapter, DropboxClient

    adapter = DropboxAdapter(DropboxClient(dbx), prefix="backups")
    adapter.write("notes/today.txt", b"hello", Config())
    result = adapter.read("notes/today.txt")
    assert result is not None and result.contents == b"hello"
"""

from __future__ import annotations

import tempfile
from typing import IO, Any, Final

from ._path import PathPrefixer
from ._protocol import Response, StorageClient
from ._types import (
    RESULT_MAP,
    Entry,
    ReadResult,
    StreamResult,
    WriteMode,
    get_stream_size,
    map_fields,
    parse_timestamp,
)
from .config import Config, Visibility
from .errors import FailureKind, StorageClientError, classify_failure
from .logging import StructuredLogger, get_logger
from .visibility import UnsupportedVisibility

__all__ = ["DropboxAdapter"]

_LOGGER: StructuredLogger = get_logger(
    __name__, context={"component": "adapter.dropbox"}
)

#: Downloads stay in memory up to this size before spilling to disk.
_SPOOL_MAX_SIZE: Final[int] = 2 * 1024 * 1024


class DropboxAdapter(PathPrefixer):
    """Filesystem adapter backed by a Dropbox storage client.

    The only state is the client handle and the path prefix, both fixed at
    construction. Visibility is not supported; both visibility methods
    raise :class:`~dropfs.errors.VisibilityNotSupportedError`.
    """

    def __init__(self, client: StorageClient, prefix: str | None = None) -> None:
        self._client = client
        self._visibility = UnsupportedVisibility(type(self).__name__)
        self.set_path_prefix(prefix)

    def get_client(self) -> StorageClient:
        """Return the underlying storage client for direct access."""
        return self._client

    # --- Read Operations ---

    def has(self, path: str) -> bool:
        return self.get_metadata(path) is not None

    def read(self, path: str) -> ReadResult | None:
        """Download ``path`` fully into memory."""
        result = self.read_stream(path)
        if result is None:
            return None

        with result.stream as stream:
            contents = stream.read()
        return ReadResult(path=path, contents=contents)

    def read_stream(self, path: str) -> StreamResult | None:
        """Download ``path`` into a rewound temporary stream.

        The returned stream is owned by the caller. On failure the temporary
        stream is closed before returning or re-raising.
        """
        location = self.apply_path_prefix(path)
        stream: IO[bytes] = tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_SIZE)
        _LOGGER.debug(
            "Downloading file.",
            event="dropbox.read",
            context={"location": location},
        )

        try:
            result = self._client.get_file(location, stream)
        except BaseException:
            stream.close()
            raise

        if not result:
            stream.close()
            return None

        _ = stream.seek(0)
        return StreamResult(path=path, stream=stream)

    def get_metadata(self, path: str) -> Entry | None:
        """Return metadata for ``path``.

        Returns ``None`` when the backend has no object or reports that the
        resource was relocated. Any other client error propagates.
        """
        location = self.apply_path_prefix(path)
        _LOGGER.debug(
            "Fetching metadata.",
            event="dropbox.metadata",
            context={"location": location},
        )

        try:
            response = self._client.get_metadata(location)
        except StorageClientError as error:
            if classify_failure(error) is FailureKind.RELOCATED:
                _LOGGER.debug(
                    "Resource relocated; treating as missing.",
                    event="dropbox.metadata.relocated",
                    context={"location": location},
                )
                return None
            raise

        if not response:
            return None
        return self._normalize_response(response)

    def get_mimetype(self, path: str) -> Entry | None:
        return self.get_metadata(path)

    def get_size(self, path: str) -> Entry | None:
        return self.get_metadata(path)

    def get_timestamp(self, path: str) -> Entry | None:
        return self.get_metadata(path)

    def list_contents(
        self, directory: str = "", recursive: bool = False
    ) -> list[Entry]:
        """List the entries of ``directory``.

        With ``recursive`` set, the contents of each subdirectory follow that
        subdirectory's own entry.
        """
        directory = "/".join(s for s in directory.split("/") if s and s != ".")
        location = self.apply_path_prefix(directory)
        _LOGGER.debug(
            "Listing directory.",
            event="dropbox.list",
            context={"location": location, "recursive": recursive},
        )

        result = self._client.get_metadata_with_children(location)
        if not result:
            return []

        listing: list[Entry] = []
        for child in result.get("contents") or ():
            # The backend reports lowercased paths; restore the caller's casing.
            child_path = self.remove_path_prefix(child["path"])
            if directory and child_path.lower().startswith(directory.lower() + "/"):
                child_path = directory + child_path[len(directory) :]
            listing.append(self._normalize_response(child, path=child_path))

            if recursive and child.get("is_dir"):
                listing.extend(self.list_contents(child_path, recursive=True))

        return listing

    # --- Write Operations ---

    def write(self, path: str, contents: bytes | str, config: Config) -> Entry | None:
        """Upload ``contents`` to ``path`` without replacing an existing file."""
        return self._upload(path, contents, WriteMode.ADD)

    def write_stream(
        self, path: str, stream: IO[bytes], config: Config
    ) -> Entry | None:
        return self._upload_stream(path, stream, WriteMode.ADD)

    def update(self, path: str, contents: bytes | str, config: Config) -> Entry | None:
        """Upload ``contents`` to ``path``, replacing any existing file."""
        return self._upload(path, contents, WriteMode.OVERWRITE)

    def update_stream(
        self, path: str, stream: IO[bytes], config: Config
    ) -> Entry | None:
        return self._upload_stream(path, stream, WriteMode.OVERWRITE)

    def rename(self, path: str, newpath: str) -> bool:
        from_location = self.apply_path_prefix(path)
        to_location = self.apply_path_prefix(newpath)
        _LOGGER.debug(
            "Moving resource.",
            event="dropbox.rename",
            context={"from": from_location, "to": to_location},
        )

        try:
            _ = self._client.move(from_location, to_location)
        except StorageClientError as error:
            _LOGGER.warning(
                "Move failed.",
                event="dropbox.rename.failed",
                context={"from": from_location, "to": to_location, "error": str(error)},
            )
            return False
        return True

    def copy(self, path: str, newpath: str) -> bool:
        from_location = self.apply_path_prefix(path)
        to_location = self.apply_path_prefix(newpath)
        _LOGGER.debug(
            "Copying resource.",
            event="dropbox.copy",
            context={"from": from_location, "to": to_location},
        )

        try:
            _ = self._client.copy(from_location, to_location)
        except StorageClientError as error:
            _LOGGER.warning(
                "Copy failed.",
                event="dropbox.copy.failed",
                context={"from": from_location, "to": to_location, "error": str(error)},
            )
            return False
        return True

    def delete(self, path: str) -> bool:
        """Delete ``path``; true only if the backend confirmed the deletion."""
        location = self.apply_path_prefix(path)
        _LOGGER.debug(
            "Deleting resource.",
            event="dropbox.delete",
            context={"location": location},
        )

        result = self._client.delete(location)
        if not result:
            return False
        return bool(result.get("is_deleted", False))

    def delete_dir(self, path: str) -> bool:
        return self.delete(path)

    def create_dir(self, path: str, config: Config) -> Entry | None:
        location = self.apply_path_prefix(path)
        _LOGGER.debug(
            "Creating folder.",
            event="dropbox.create_dir",
            context={"location": location},
        )

        result = self._client.create_folder(location)
        if result is None:
            return None
        return self._normalize_response(result)

    # --- Visibility ---

    def get_visibility(self, path: str) -> Visibility:
        return self._visibility.get_visibility(path)

    def set_visibility(self, path: str, visibility: Visibility) -> Entry:
        return self._visibility.set_visibility(path, visibility)

    # --- Internals ---

    def _upload(
        self, path: str, contents: bytes | str, mode: WriteMode
    ) -> Entry | None:
        location = self.apply_path_prefix(path)
        payload = contents.encode("utf-8") if isinstance(contents, str) else contents
        _LOGGER.debug(
            "Uploading file.",
            event="dropbox.upload",
            context={"location": location, "mode": mode.value, "size": len(payload)},
        )

        result = self._client.upload_file_from_string(location, mode, payload)
        if not result:
            return None
        return self._normalize_response(result)

    def _upload_stream(
        self, path: str, stream: IO[bytes], mode: WriteMode
    ) -> Entry | None:
        location = self.apply_path_prefix(path)
        # A zero size is reported as unknown.
        size = get_stream_size(stream) or None
        _LOGGER.debug(
            "Uploading stream.",
            event="dropbox.upload_stream",
            context={"location": location, "mode": mode.value, "size": size},
        )

        result = self._client.upload_file(location, mode, stream, size)
        if not result:
            return None
        return self._normalize_response(result)

    def _normalize_response(
        self, response: Response, *, path: str | None = None
    ) -> Entry:
        """Build an :class:`Entry` from a client response.

        ``path`` overrides the prefix-stripped response path.
        """
        fields: dict[str, Any] = map_fields(response, RESULT_MAP)
        modified = response.get("modified")
        if modified:
            fields["timestamp"] = parse_timestamp(modified)

        if path is None:
            path = self.remove_path_prefix(response["path"])
        return Entry(
            path=path,
            type="dir" if response["is_dir"] else "file",
            **fields,
        )
