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

"""Base exception hierarchy and failure classification for :mod:`dropfs`."""

from __future__ import annotations

from enum import Enum
from typing import Final

RELOCATED_STATUS: Final[int] = 301
NOT_FOUND_STATUS: Final[int] = 404


class DropfsError(Exception):
    """Base class for all dropfs exceptions.

    Callers can catch every library-specific error with a single handler
    while standard Python exceptions keep propagating normally.
    """


class StorageClientError(DropfsError):
    """Raised by a storage client when a backend call fails.

    Attributes:
        status_code: HTTP status reported by the backend, when known.
        not_found: True when the backend reported a failed path lookup.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        not_found: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.not_found = not_found


class BadResponseCodeError(StorageClientError):
    """Raised when the backend answered with an HTTP error status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(
            message,
            status_code=status_code,
            not_found=status_code == NOT_FOUND_STATUS,
        )


class VisibilityNotSupportedError(DropfsError, NotImplementedError):
    """Raised for every visibility query or change on adapters without ACLs.

    This exception also inherits from ``NotImplementedError`` so generic
    capability probes can treat it as a missing feature.
    """


class FailureKind(Enum):
    """Tagged classification of a storage client failure."""

    NOT_FOUND = "not_found"
    RELOCATED = "relocated"
    OTHER = "other"


def classify_failure(error: BaseException) -> FailureKind:
    """Return the :class:`FailureKind` for ``error``.

    Only :class:`StorageClientError` instances carry enough detail to be
    classified; anything else is ``OTHER``.

    Example::

        try:
            response = client.get_metadata(location)
        except StorageClientError as err:
            if classify_failure(err) is FailureKind.RELOCATED:
                return None
            raise
    """
    if not isinstance(error, StorageClientError):
        return FailureKind.OTHER
    if error.status_code == RELOCATED_STATUS:
        return FailureKind.RELOCATED
    if error.not_found:
        return FailureKind.NOT_FOUND
    return FailureKind.OTHER


__all__ = [
    "NOT_FOUND_STATUS",
    "RELOCATED_STATUS",
    "BadResponseCodeError",
    "DropfsError",
    "FailureKind",
    "StorageClientError",
    "VisibilityNotSupportedError",
    "classify_failure",
]
