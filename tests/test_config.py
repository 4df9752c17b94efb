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

"""Tests for configuration records."""

from __future__ import annotations

import pytest

from dropfs import Config, DropboxSettings
from dropfs.config import DEFAULT_TIMEOUT


class TestConfig:
    """Test the per-call options record."""

    def test_defaults(self) -> None:
        config = Config()

        assert config.visibility is None
        assert config.mimetype is None
        assert config.disable_asserts is False
        assert dict(config.extra) == {}

    def test_get_named_field(self) -> None:
        assert Config(visibility="private").get("visibility") == "private"

    def test_get_unset_named_field_falls_back(self) -> None:
        assert Config().get("mimetype", "text/plain") == "text/plain"

    def test_get_extra(self) -> None:
        assert Config(extra={"autorename": True}).get("autorename") is True

    def test_get_unknown_returns_default(self) -> None:
        assert Config().get("missing", 3) == 3

    def test_has(self) -> None:
        config = Config(mimetype="image/png", extra={"mute": False})

        assert config.has("mimetype")
        assert config.has("mute")
        assert not config.has("visibility")
        assert config.has("disable_asserts")


class TestDropboxSettings:
    """Test reading settings from an environment mapping."""

    def test_from_env(self) -> None:
        settings = DropboxSettings.from_env(
            {
                "DROPFS_ACCESS_TOKEN": "token",
                "DROPFS_PATH_PREFIX": "team",
                "DROPFS_TIMEOUT": "12.5",
            }
        )

        assert settings == DropboxSettings(
            access_token="token", path_prefix="team", timeout=12.5
        )

    def test_defaults(self) -> None:
        settings = DropboxSettings.from_env({"DROPFS_ACCESS_TOKEN": "token"})

        assert settings.path_prefix is None
        assert settings.timeout == DEFAULT_TIMEOUT

    @pytest.mark.parametrize("token", [None, "", "   "])
    def test_missing_token_raises(self, token: str | None) -> None:
        env = {} if token is None else {"DROPFS_ACCESS_TOKEN": token}

        with pytest.raises(ValueError, match="DROPFS_ACCESS_TOKEN"):
            _ = DropboxSettings.from_env(env)

    def test_invalid_timeout_raises(self) -> None:
        env = {"DROPFS_ACCESS_TOKEN": "token", "DROPFS_TIMEOUT": "soon"}

        with pytest.raises(ValueError, match="DROPFS_TIMEOUT"):
            _ = DropboxSettings.from_env(env)

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DROPFS_ACCESS_TOKEN", "from-env")
        monkeypatch.delenv("DROPFS_PATH_PREFIX", raising=False)
        monkeypatch.delenv("DROPFS_TIMEOUT", raising=False)

        assert DropboxSettings.from_env().access_token == "from-env"
