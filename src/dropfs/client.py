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

"""Storage client backed by the official Dropbox SDK.

``DropboxClient`` adapts a :class:`dropbox.Dropbox` instance to the
:class:`~dropfs.StorageClient` protocol. SDK metadata objects are flattened
into response mappings (``path``, ``is_dir``, ``modified``, ``bytes``,
``mime_type``) and SDK exceptions are translated into
:class:`~dropfs.errors.StorageClientError`.
"""

from __future__ import annotations

import mimetypes
from collections.abc import Callable
from datetime import UTC, datetime
from email.utils import format_datetime
from typing import IO, Any, Final

import dropbox
import requests
from dropbox import files
from dropbox.exceptions import ApiError, HttpError

from ._protocol import Response
from ._types import WriteMode
from .errors import BadResponseCodeError, StorageClientError
from .logging import StructuredLogger, get_logger

__all__ = ["DropboxClient"]

_LOGGER: StructuredLogger = get_logger(
    __name__, context={"component": "client.dropbox"}
)

_API_ERROR_STATUS: Final[int] = 409
_DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024
_DEFAULT_MIMETYPE: Final[str] = "application/octet-stream"
_LOOKUP_TAGS: Final[tuple[str, ...]] = ("path", "path_lookup", "from_lookup")

_WRITE_MODES: Final[dict[WriteMode, files.WriteMode]] = {
    WriteMode.ADD: files.WriteMode.add,
    WriteMode.OVERWRITE: files.WriteMode.overwrite,
}


class DropboxClient:
    """Storage client wrapping a :class:`dropbox.Dropbox` instance.

    Lookups of missing paths return ``None``. Writes, moves and copies treat
    a missing path as an error.
    """

    def __init__(self, dbx: dropbox.Dropbox) -> None:
        self._dbx = dbx

    @property
    def dbx(self) -> dropbox.Dropbox:
        """The wrapped SDK client."""
        return self._dbx

    def get_file(self, path: str, stream: IO[bytes]) -> Response | None:
        """Download ``path`` into ``stream`` chunk by chunk."""
        result = self._call(self._dbx.files_download, path, missing_ok=True)
        if result is None:
            return None

        metadata, http_response = result
        try:
            for chunk in http_response.iter_content(chunk_size=_DOWNLOAD_CHUNK_SIZE):
                _ = stream.write(chunk)
        finally:
            http_response.close()
        return _to_response(metadata)

    def upload_file_from_string(
        self, path: str, mode: WriteMode, contents: bytes
    ) -> Response | None:
        metadata = self._call(
            self._dbx.files_upload, contents, path, mode=_WRITE_MODES[mode]
        )
        return _to_response(metadata)

    def upload_file(
        self, path: str, mode: WriteMode, stream: IO[bytes], size: int | None
    ) -> Response | None:
        """Upload the remainder of ``stream`` in a single request.

        ``size`` is only logged; the SDK measures the body itself.
        """
        _LOGGER.debug(
            "Reading upload stream.",
            event="dropbox.client.upload_stream",
            context={"path": path, "size_hint": size},
        )
        return self.upload_file_from_string(path, mode, stream.read())

    def move(self, from_path: str, to_path: str) -> Response | None:
        result = self._call(self._dbx.files_move_v2, from_path, to_path)
        return _to_response(result.metadata)

    def copy(self, from_path: str, to_path: str) -> Response | None:
        result = self._call(self._dbx.files_copy_v2, from_path, to_path)
        return _to_response(result.metadata)

    def delete(self, path: str) -> Response | None:
        result = self._call(self._dbx.files_delete_v2, path, missing_ok=True)
        if result is None:
            return None
        response = _to_response(result.metadata) or {"path": path, "is_dir": False}
        return {**response, "is_deleted": True}

    def create_folder(self, path: str) -> Response | None:
        result = self._call(self._dbx.files_create_folder_v2, path)
        return _to_response(result.metadata)

    def get_metadata(self, path: str) -> Response | None:
        if path == "/":
            return {"path": "/", "is_dir": True}
        metadata = self._call(self._dbx.files_get_metadata, path, missing_ok=True)
        return _to_response(metadata)

    def get_metadata_with_children(self, path: str) -> Response | None:
        """Return the folder at ``path`` with every child under ``contents``.

        Paginates through the listing cursor until the backend reports no
        more entries.
        """
        api_path = "" if path == "/" else path
        page = self._call(self._dbx.files_list_folder, api_path, missing_ok=True)
        if page is None:
            return None

        entries = list(page.entries)
        while page.has_more:
            page = self._call(self._dbx.files_list_folder_continue, page.cursor)
            entries.extend(page.entries)

        contents = [r for r in (_to_response(e) for e in entries) if r is not None]
        return {"path": path, "is_dir": True, "contents": contents}

    def _call(
        self,
        operation: Callable[..., Any],
        *args: object,
        missing_ok: bool = False,
        **kwargs: object,
    ) -> Any:
        """Invoke an SDK operation, translating its exceptions.

        Returns ``None`` for failed lookups when ``missing_ok`` is set.

        Raises:
            BadResponseCodeError: The SDK reported an HTTP error status.
            StorageClientError: The API rejected the request or the
                transport failed.
        """
        name = getattr(operation, "__name__", "operation")
        try:
            return operation(*args, **kwargs)
        except ApiError as error:
            not_found = _is_not_found(error.error)
            if not_found and missing_ok:
                _LOGGER.debug(
                    "Path not found.",
                    event="dropbox.client.not_found",
                    context={"operation": name, "args": args},
                )
                return None
            msg = f"{name} failed: {error.error}"
            raise StorageClientError(
                msg, status_code=_API_ERROR_STATUS, not_found=not_found
            ) from error
        except HttpError as error:
            msg = f"{name} failed with HTTP {error.status_code}: {error.body}"
            raise BadResponseCodeError(msg, status_code=error.status_code) from error
        except requests.RequestException as error:
            msg = f"{name} failed: {error}"
            raise StorageClientError(msg) from error


def _is_not_found(error: object) -> bool:
    """Return True when a tagged SDK error wraps a ``not_found`` lookup."""
    for tag in _LOOKUP_TAGS:
        is_tag = getattr(error, f"is_{tag}", None)
        if is_tag is None or not is_tag():
            continue
        lookup = getattr(error, f"get_{tag}")()
        is_not_found = getattr(lookup, "is_not_found", None)
        return bool(is_not_found is not None and is_not_found())
    return False


def _format_modified(value: datetime) -> str:
    # The SDK returns naive datetimes in UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return format_datetime(value)


def _to_response(metadata: object) -> Response | None:
    """Flatten SDK metadata into a response mapping.

    Deleted entries and unknown metadata types map to ``None``.
    """
    if isinstance(metadata, files.FolderMetadata):
        return {
            "path": metadata.path_display or metadata.path_lower,
            "is_dir": True,
        }
    if isinstance(metadata, files.FileMetadata):
        mimetype, _ = mimetypes.guess_type(metadata.name)
        return {
            "path": metadata.path_display or metadata.path_lower,
            "is_dir": False,
            "modified": _format_modified(metadata.server_modified),
            "bytes": metadata.size,
            "mime_type": mimetype or _DEFAULT_MIMETYPE,
        }
    return None
