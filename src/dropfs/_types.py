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

"""Core adapter types and response helpers.

This module defines the data structures returned by adapter operations.
All result types are immutable frozen dataclasses built fresh from each
backend response.

Types:

- ``Entry``: normalized metadata for a file or directory
- ``ReadResult``: file contents drained into memory
- ``StreamResult``: file contents held in a rewound binary stream
- ``WriteMode``: upload conflict semantics

Helpers:

- ``map_fields``: rename backend response keys
- ``parse_timestamp``: RFC 2822 modification time to epoch seconds
- ``get_stream_size``: size of a seekable stream
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import IO, Final, Literal

EntryType = Literal["file", "dir"]

#: Backend response keys renamed on their way into an ``Entry``.
RESULT_MAP: Final[Mapping[str, str]] = {
    "bytes": "size",
    "mime_type": "mimetype",
}


class WriteMode(Enum):
    """Conflict behaviour of an upload.

    ``ADD`` refuses to replace an existing file, ``OVERWRITE`` replaces it.
    """

    ADD = "add"
    OVERWRITE = "overwrite"


@dataclass(slots=True, frozen=True)
class Entry:
    """Normalized metadata for a file or directory.

    Attributes:
        path: Path relative to the adapter prefix, without a leading slash.
        type: ``"dir"`` when the backend flagged a directory, else ``"file"``.
        timestamp: Modification time in epoch seconds, when reported.
        size: Size in bytes, when reported.
        mimetype: MIME type, when reported.

    Example::

        entry = adapter.get_metadata("reports/q1.pdf")
        if entry is not None and entry.type == "file":
            print(entry.size)
    """

    path: str
    type: EntryType
    timestamp: int | None = None
    size: int | None = None
    mimetype: str | None = None

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"


@dataclass(slots=True, frozen=True)
class ReadResult:
    """File contents returned from ``read()``."""

    path: str
    contents: bytes


@dataclass(slots=True, frozen=True)
class StreamResult:
    """Rewound binary stream returned from ``read_stream()``.

    The caller owns ``stream`` and is responsible for closing it.
    """

    path: str
    stream: IO[bytes]


def map_fields(
    response: Mapping[str, object], mapping: Mapping[str, str]
) -> dict[str, object]:
    """Return the mapped keys of ``response`` under their new names.

    Keys missing from ``response`` are skipped.

    Examples:
        >>> map_fields({"bytes": 3, "rev": "a1"}, RESULT_MAP)
        {'size': 3}
    """
    return {new: response[old] for old, new in mapping.items() if old in response}


def parse_timestamp(value: str) -> int:
    """Convert an RFC 2822 date string to epoch seconds.

    Examples:
        >>> parse_timestamp("Wed, 01 Jan 2020 00:00:00 +0000")
        1577836800
    """
    parsed = parsedate_to_datetime(value)
    # A "-0000" or missing zone parses naive; RFC 2822 means UTC there.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return int(parsed.timestamp())


def get_stream_size(stream: IO[bytes]) -> int:
    """Return the total size of ``stream`` in bytes.

    Streams backed by a file descriptor are measured with ``fstat``; other
    seekable streams are measured by seeking to the end and restoring the
    original position. Unseekable streams report zero.
    """
    try:
        return os.fstat(stream.fileno()).st_size
    except (AttributeError, OSError, ValueError):
        pass
    if not stream.seekable():
        return 0
    position = stream.tell()
    try:
        return stream.seek(0, os.SEEK_END)
    finally:
        _ = stream.seek(position)


__all__ = [
    "RESULT_MAP",
    "Entry",
    "EntryType",
    "ReadResult",
    "StreamResult",
    "WriteMode",
    "get_stream_size",
    "map_fields",
    "parse_timestamp",
]
