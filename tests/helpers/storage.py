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

"""In-memory storage client for adapter tests.

``FakeStorageClient`` implements the ``StorageClient`` protocol over two
in-memory collections: file contents keyed by canonical path, and a set of
directory paths. It mimics the backend behaviours adapters depend on:

- ``ADD`` uploads refuse to replace an existing file
- moves and copies of missing paths raise ``StorageClientError``
- lookups of missing paths return ``None``
- ``lowercase_paths`` reports child paths in lowercase, like Dropbox does

Example usage::

    client = FakeStorageClient()
    adapter = DropboxAdapter(client, prefix="team")
    adapter.write("a.txt", b"hi", Config())
    assert client.files == {"/team/a.txt": b"hi"}
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, field
from typing import IO, Any, Final

from dropfs import Response, StorageClientError, WriteMode

FIXED_MODIFIED: Final[str] = "Wed, 01 Jan 2020 00:00:00 +0000"
FIXED_TIMESTAMP: Final[int] = 1_577_836_800


@dataclass(slots=True)
class FakeStorageClient:
    """Storage client backed by dictionaries."""

    files: dict[str, bytes] = field(default_factory=dict)
    dirs: set[str] = field(default_factory=set)
    lowercase_paths: bool = False
    size_hints: list[int | None] = field(default_factory=list)
    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    # --- StorageClient ---

    def get_file(self, path: str, stream: IO[bytes]) -> Response | None:
        self.calls.append(("get_file", (path,)))
        if path not in self.files:
            return None
        _ = stream.write(self.files[path])
        return self._response(path)

    def upload_file_from_string(
        self, path: str, mode: WriteMode, contents: bytes
    ) -> Response | None:
        self.calls.append(("upload_file_from_string", (path, mode)))
        if mode is WriteMode.ADD and path in self.files:
            raise StorageClientError(f"conflict: {path}", status_code=409)
        self._ensure_parents(path)
        self.files[path] = contents
        return self._response(path)

    def upload_file(
        self, path: str, mode: WriteMode, stream: IO[bytes], size: int | None
    ) -> Response | None:
        self.size_hints.append(size)
        return self.upload_file_from_string(path, mode, stream.read())

    def move(self, from_path: str, to_path: str) -> Response | None:
        self.calls.append(("move", (from_path, to_path)))
        response = self.copy(from_path, to_path)
        self._remove(from_path)
        return response

    def copy(self, from_path: str, to_path: str) -> Response | None:
        self.calls.append(("copy", (from_path, to_path)))
        if not self._exists(from_path):
            raise StorageClientError(f"not found: {from_path}", not_found=True)
        self._ensure_parents(to_path)
        for source in [p for p in self.files if _is_under(p, from_path)]:
            self.files[to_path + source[len(from_path) :]] = self.files[source]
        for source in [d for d in self.dirs if _is_under(d, from_path)]:
            self.dirs.add(to_path + source[len(from_path) :])
        return self._response(to_path)

    def delete(self, path: str) -> Response | None:
        self.calls.append(("delete", (path,)))
        if not self._exists(path):
            return None
        response = {**self._response(path), "is_deleted": True}
        self._remove(path)
        return response

    def create_folder(self, path: str) -> Response | None:
        self.calls.append(("create_folder", (path,)))
        self._ensure_parents(path)
        self.dirs.add(path)
        return self._response(path)

    def get_metadata(self, path: str) -> Response | None:
        self.calls.append(("get_metadata", (path,)))
        if not self._exists(path):
            return None
        return self._response(path)

    def get_metadata_with_children(self, path: str) -> Response | None:
        self.calls.append(("get_metadata_with_children", (path,)))
        if path != "/" and path not in self.dirs:
            return None
        children = sorted(
            p for p in (*self.dirs, *self.files) if posixpath.dirname(p) == path
        )
        contents = [self._response(child) for child in children]
        if self.lowercase_paths:
            contents = [{**c, "path": c["path"].lower()} for c in contents]
        return {"path": path, "is_dir": True, "contents": contents}

    # --- Internals ---

    def _exists(self, path: str) -> bool:
        return path in self.files or path in self.dirs

    def _response(self, path: str) -> dict[str, Any]:
        if path in self.files:
            return {
                "path": path,
                "is_dir": False,
                "modified": FIXED_MODIFIED,
                "bytes": len(self.files[path]),
                "mime_type": "text/plain",
            }
        return {"path": path, "is_dir": True, "modified": FIXED_MODIFIED}

    def _ensure_parents(self, path: str) -> None:
        parent = posixpath.dirname(path)
        while parent not in {"", "/"}:
            self.dirs.add(parent)
            parent = posixpath.dirname(parent)

    def _remove(self, path: str) -> None:
        for key in [p for p in self.files if _is_under(p, path)]:
            del self.files[key]
        self.dirs -= {d for d in self.dirs if _is_under(d, path)}


def _is_under(candidate: str, root: str) -> bool:
    return candidate == root or candidate.startswith(root + "/")
