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

"""Dropbox as a filesystem adapter.

This package maps filesystem-style operations (read, write, delete, list,
metadata) onto a Dropbox storage client and normalizes the responses.

Example usage::

    from dropfs import Config, create_adapter

    adapter = create_adapter()  # reads DROPFS_ACCESS_TOKEN
    adapter.write("hello.txt", b"hi", Config())
    for entry in adapter.list_contents(recursive=True):
        print(entry.type, entry.path)
"""

from __future__ import annotations

from ._path import PathPrefixer, canonical_location
from ._protocol import FilesystemAdapter, Response, StorageClient, VisibilityCapability
from ._types import (
    RESULT_MAP,
    Entry,
    EntryType,
    ReadResult,
    StreamResult,
    WriteMode,
    get_stream_size,
    map_fields,
    parse_timestamp,
)
from .adapter import DropboxAdapter
from .client import DropboxClient
from .config import Config, DropboxSettings, Visibility
from .errors import (
    BadResponseCodeError,
    DropfsError,
    FailureKind,
    StorageClientError,
    VisibilityNotSupportedError,
    classify_failure,
)
from .factory import create_adapter
from .logging import StructuredLogger, configure_logging, get_logger
from .visibility import UnsupportedVisibility

__all__ = [
    "RESULT_MAP",
    "BadResponseCodeError",
    "Config",
    "DropboxAdapter",
    "DropboxClient",
    "DropboxSettings",
    "DropfsError",
    "Entry",
    "EntryType",
    "FailureKind",
    "FilesystemAdapter",
    "PathPrefixer",
    "ReadResult",
    "Response",
    "StorageClient",
    "StorageClientError",
    "StreamResult",
    "StructuredLogger",
    "UnsupportedVisibility",
    "Visibility",
    "VisibilityCapability",
    "VisibilityNotSupportedError",
    "WriteMode",
    "canonical_location",
    "classify_failure",
    "configure_logging",
    "create_adapter",
    "get_logger",
    "get_stream_size",
    "map_fields",
    "parse_timestamp",
]
