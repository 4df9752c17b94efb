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

from __future__ import annotations

import pytest

from dropfs import DropboxAdapter
from tests.helpers import FakeStorageClient


@pytest.fixture
def client() -> FakeStorageClient:
    """Return an empty in-memory storage client."""
    return FakeStorageClient()


@pytest.fixture
def adapter(client: FakeStorageClient) -> DropboxAdapter:
    """Return an adapter scoped under the ``team`` prefix of ``client``."""
    return DropboxAdapter(client, prefix="team")
