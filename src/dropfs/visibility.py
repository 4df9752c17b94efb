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

"""Default visibility capability for adapters without access control."""

from __future__ import annotations

from dataclasses import dataclass

from ._types import Entry
from .config import Visibility
from .errors import VisibilityNotSupportedError


@dataclass(slots=True, frozen=True)
class UnsupportedVisibility:
    """Visibility capability that rejects every call.

    Adapters hold an instance and forward their visibility methods to it::

        self._visibility = UnsupportedVisibility(type(self).__name__)

        def get_visibility(self, path: str) -> Visibility:
            return self._visibility.get_visibility(path)
    """

    adapter_name: str

    def get_visibility(self, path: str) -> Visibility:
        raise VisibilityNotSupportedError(self._message(path))

    def set_visibility(self, path: str, visibility: Visibility) -> Entry:
        raise VisibilityNotSupportedError(self._message(path))

    def _message(self, path: str) -> str:
        return f"{self.adapter_name} does not support visibility. Path: {path}"


__all__ = ["UnsupportedVisibility"]
