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

"""Test cli.py and the commands/ subcommands."""

import os
from pathlib import Path

import pytest

from conftest import write_file
from sdlapk.build_scripts.build_android import BuildProfile
from sdlapk.cli import Cli, main
from sdlapk.commands.build import Build
from sdlapk.commands.clean import Clean
from sdlapk.commands.sdl import Sdl
from sdlapk.utils.context.context import CliContext
from sdlapk.utils.errors import ConfigError


class TestCli:
    def test_command_list(self) -> None:
        assert Cli().get_command_list() == ["build", "clean", "sdl", "sign"]

    def test_subcommand_is_removed_from_argv(self) -> None:
        args = Cli().cli(["build", "--release"])

        assert args.subcommand == "build"
        assert args.argv == ["--release"]

    def test_load_command(self) -> None:
        assert isinstance(Cli().load_command("build"), Build)
        assert isinstance(Cli().load_command("sdl"), Sdl)

    def test_no_subcommand_exits(self, capsys) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
        assert "ERROR: No command specified" in capsys.readouterr().out


class TestBuildCommand:
    def test_parse_arguments(self) -> None:
        args = Build().cli(
            [
                "--release",
                "--target",
                "aarch64-linux-android",
                "--target",
                "x86_64-linux-android",
                "--keystore",
                "my.jks",
                "--keystore-pass",
                "pass:secret",
            ]
        )

        assert args.release
        assert args.target == ["aarch64-linux-android", "x86_64-linux-android"]
        assert args.keystore == "my.jks"
        assert args.keystore_pass == "pass:secret"
        assert args.manifest_path == "Cargo.toml"

    def test_unknown_target_is_rejected(self) -> None:
        with pytest.raises(SystemExit):
            Build().cli(["--target", "wasm32-unknown-unknown"])

    def test_default_target_artifact(self, write_manifest, project_dir: Path) -> None:
        manifest = write_manifest()
        args = Build().cli(["--manifest-path", str(manifest)])

        artifacts = Build().get_target_artifacts(args, BuildProfile.DEBUG)

        assert artifacts == {
            "aarch64-linux-android": os.path.join(
                str(project_dir), "target", "aarch64-linux-android", "debug", "libmy_game.so"
            )
        }

    def test_explicit_artifacts(self, write_manifest) -> None:
        manifest = write_manifest()
        args = Build().cli(
            [
                "--manifest-path",
                str(manifest),
                "--artifact",
                "i686-linux-android=out/libgame.so",
            ]
        )

        artifacts = Build().get_target_artifacts(args, BuildProfile.RELEASE)

        assert artifacts == {"i686-linux-android": "out/libgame.so"}

    def test_malformed_artifact(self) -> None:
        args = Build().cli(["--artifact", "out/libgame.so"])
        with pytest.raises(ConfigError):
            Build().get_target_artifacts(args, BuildProfile.DEBUG)

    def test_exec_fails_without_sdl(self, write_manifest, artifact: Path, capsys) -> None:
        manifest = write_manifest()
        args = Build().cli(
            [
                "--manifest-path",
                str(manifest),
                "--artifact",
                f"aarch64-linux-android={artifact}",
            ]
        )

        with pytest.raises(SystemExit) as exc_info:
            Build().exec(CliContext(environ={}), args)

        assert exc_info.value.code == 1
        assert "Need env var: SDL" in capsys.readouterr().out


class TestSdlCommand:
    def test_exec_fails_without_ndk(self, write_manifest, sdl_dir: Path, capsys) -> None:
        manifest = write_manifest()
        args = Sdl().cli(["--manifest-path", str(manifest)])

        with pytest.raises(SystemExit) as exc_info:
            Sdl().exec(CliContext(environ={"SDL": str(sdl_dir)}), args)

        assert exc_info.value.code == 1
        assert "Need env var: ANDROID_NDK_HOME" in capsys.readouterr().out


class TestCleanCommand:
    def test_dry_run_keeps_project(self, write_manifest, project_dir: Path) -> None:
        manifest = write_manifest()
        generated = write_file(project_dir / "target/android-project/app/build.gradle", "")

        Clean().exec(CliContext(), Clean().cli(["--manifest-path", str(manifest), "--dry-run"]))

        assert generated.exists()

    def test_removes_project(self, write_manifest, project_dir: Path) -> None:
        manifest = write_manifest()
        write_file(project_dir / "target/android-project/release/app-release.jks", b"JKS")
        write_file(project_dir / "target/aarch64-linux-android/debug/libmy_game.so", b"ELF")

        Clean().exec(CliContext(), Clean().cli(["--manifest-path", str(manifest)]))

        assert not (project_dir / "target/android-project").exists()
        assert (project_dir / "target/aarch64-linux-android/debug/libmy_game.so").exists()

    def test_nothing_to_clean(self, write_manifest, capsys) -> None:
        manifest = write_manifest()

        Clean().exec(CliContext(), Clean().cli(["--manifest-path", str(manifest)]))

        assert "Nothing to clean" in capsys.readouterr().out
