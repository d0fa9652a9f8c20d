#
# Copyright 2024 sdlapk Project Authors. All rights reserved.
# Use of this source code is governed by a MIT-style
# license that can be found at
#
# https://opensource.org/license/MIT
#
# The above copyright notice and this permission
# notice shall be included in all copies or
# substantial portions of the Software.

"""Test build_scripts/build_utils.py - environment and TOML lookups."""

from pathlib import Path

import pytest

from sdlapk.build_scripts.build_utils import (
    EnvConfig,
    copy_file,
    get_android_project_dir,
    get_toml_entry,
    get_toml_string,
    get_toml_string_list,
)
from sdlapk.utils.errors import ConfigError, MissingEnvError, ProjectFileError

METADATA = """
[package]
name = "game"

[package.metadata.android]
package_name = "com.example.game"
permissions = ["internet", "vibrate"]
mixed = ["internet", 3]
"""


@pytest.fixture
def toml_file(tmp_path: Path) -> Path:
    path = tmp_path / "Cargo.toml"
    path.write_text(METADATA)
    return path


class TestEnvConfig:
    def test_get_returns_value(self) -> None:
        env = EnvConfig({"SDL": "/opt/SDL2"})
        assert env.get("SDL") == "/opt/SDL2"

    def test_missing_variable_names_it(self) -> None:
        env = EnvConfig({})
        with pytest.raises(MissingEnvError) as exc_info:
            env.get("ANDROID_HOME")
        assert exc_info.value.key == "ANDROID_HOME"
        assert "ANDROID_HOME" in str(exc_info.value)

    def test_empty_variable_is_missing(self) -> None:
        with pytest.raises(MissingEnvError):
            EnvConfig({"SDL": ""}).get("SDL")

    def test_get_path_joins(self) -> None:
        env = EnvConfig({"ANDROID_HOME": "/sdk"})
        assert env.get_path("ANDROID_HOME", "build-tools") == str(Path("/sdk", "build-tools"))

    def test_defaults_to_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SDL", "/from/process")
        assert EnvConfig().get("SDL") == "/from/process"


class TestTomlLookup:
    def test_nested_string(self, toml_file: Path) -> None:
        keys = ["package", "metadata", "android", "package_name"]
        assert get_toml_string(toml_file, keys) == "com.example.game"

    def test_missing_key_is_none(self, toml_file: Path) -> None:
        assert get_toml_entry(toml_file, ["package", "metadata", "android", "title"]) is None
        assert get_toml_entry(toml_file, ["workspace", "members"]) is None

    def test_walking_through_a_scalar_is_none(self, toml_file: Path) -> None:
        assert get_toml_entry(toml_file, ["package", "name", "inner"]) is None

    def test_empty_path_returns_document(self, toml_file: Path) -> None:
        assert get_toml_entry(toml_file, [])["package"]["name"] == "game"

    def test_string_lookup_ignores_non_strings(self, toml_file: Path) -> None:
        assert get_toml_string(toml_file, ["package", "metadata", "android", "permissions"]) is None

    def test_string_list(self, toml_file: Path) -> None:
        keys = ["package", "metadata", "android", "permissions"]
        assert get_toml_string_list(toml_file, keys) == ["internet", "vibrate"]

    def test_string_list_with_non_string_is_none(self, toml_file: Path) -> None:
        assert get_toml_string_list(toml_file, ["package", "metadata", "android", "mixed"]) is None

    def test_invalid_toml_is_config_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "Cargo.toml"
        bad.write_text("[package\nname = ")
        with pytest.raises(ConfigError):
            get_toml_entry(bad, ["package"])

    def test_invalid_utf8_is_config_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "Cargo.toml"
        bad.write_bytes(b'[package]\nname = "g\xff"\n')
        with pytest.raises(ConfigError):
            get_toml_entry(bad, ["package"])

    def test_missing_file_is_config_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            get_toml_entry(tmp_path / "missing.toml", ["package"])


class TestPaths:
    def test_android_project_dir_is_under_manifest_dir(self, tmp_path: Path) -> None:
        manifest = tmp_path / "game" / "Cargo.toml"
        expected = tmp_path / "game" / "target" / "android-project"
        assert Path(get_android_project_dir(manifest)) == expected


class TestCopyFile:
    def test_creates_destination_directory(self, tmp_path: Path) -> None:
        src = tmp_path / "a.so"
        src.write_bytes(b"lib")
        dst = tmp_path / "x" / "y" / "b.so"

        copy_file(str(src), str(dst))

        assert dst.read_bytes() == b"lib"

    def test_failure_names_both_paths(self, tmp_path: Path) -> None:
        src = tmp_path / "missing.so"
        dst = tmp_path / "out" / "libmain.so"
        with pytest.raises(ProjectFileError) as exc_info:
            copy_file(str(src), str(dst))
        assert str(src) in str(exc_info.value)
        assert str(dst) in str(exc_info.value)
