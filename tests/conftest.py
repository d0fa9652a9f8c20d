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

"""Shared pytest fixtures: a fake SDL tree, a fake Android SDK and a tool recorder."""

import os
from pathlib import Path

import pytest

from sdlapk.build_scripts.build_utils import EnvConfig

TEMPLATE_MANIFEST = """<?xml version="1.0" encoding="utf-8"?>
<manifest xmlns:android="http://schemas.android.com/apk/res/android"
    package="org.libsdl.app"
    android:versionCode="1"
    android:versionName="1.0"
    android:installLocation="auto">

    <uses-feature android:glEsVersion="0x00020000" />

    <application android:label="@string/app_name"
        android:icon="@mipmap/ic_launcher">
        <activity android:name="SDLActivity"
            android:label="@string/app_name">
        </activity>
    </application>

</manifest>
"""

TEMPLATE_GRADLE = """android {
    defaultConfig {
        applicationId "org.libsdl.app"
    }
}
"""

TEMPLATE_STRINGS = """<?xml version="1.0" encoding="utf-8"?>
<resources>
    <string name="app_name">Game</string>
</resources>
"""

ICON_DENSITIES = ["m", "h", "xh", "xxh", "xxxh"]
BUILD_TOOLS_VERSIONS = ["29.0.2", "30.0.3", "28.0.0"]


def write_file(path: Path, content):
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content)
    return path


class ToolRecorder:
    """
    Stands in for exec_command: records every call and fakes tool outputs.

    Exit codes can be set per tool name, e.g. recorder.returncodes["gradlew"] = 1.
    """

    def __init__(self):
        self.calls = []
        self.returncodes = {}

    def __call__(self, args, cwd=None):
        self.calls.append((list(args), cwd))
        tool = os.path.basename(args[0])
        returncode = self.returncodes.get(tool, 0)
        if returncode == 0:
            self._fake_output(tool, args, cwd)
        return returncode

    @property
    def tools(self):
        return [os.path.basename(args[0]) for args, _ in self.calls]

    def calls_for(self, tool):
        return [(args, cwd) for args, cwd in self.calls if os.path.basename(args[0]) == tool]

    def _fake_output(self, tool, args, cwd):
        if tool == "gradlew":
            profile = "release" if args[1] == "assembleRelease" else "debug"
            name = "app-release-unsigned.apk" if profile == "release" else "app-debug.apk"
            write_file(Path(cwd, "app/build/outputs/apk", profile, name), b"PK-unsigned")
        elif tool == "keytool":
            write_file(Path(args[args.index("-keystore") + 1]), b"JKS")
        elif tool == "zipalign":
            write_file(Path(args[-1]), b"PK-aligned")
        elif tool == "apksigner":
            write_file(Path(args[args.index("-out") + 1]), b"PK-signed")
        elif tool == "ndk-build":
            for abi in ["arm64-v8a", "armeabi-v7a", "x86", "x86_64"]:
                write_file(Path(cwd, "libs", abi, "libSDL2.so"), f"SDL2-{abi}".encode())


@pytest.fixture
def sdl_dir(tmp_path: Path) -> Path:
    """A minimal SDL2 source tree holding android-project/."""
    sdl = tmp_path / "SDL2"
    project = sdl / "android-project"
    write_file(project / "app/src/main/AndroidManifest.xml", TEMPLATE_MANIFEST)
    write_file(project / "app/build.gradle", TEMPLATE_GRADLE)
    write_file(project / "app/src/main/res/values/strings.xml", TEMPLATE_STRINGS)
    write_file(project / "app/jni/Android.mk", "include $(call all-subdir-makefiles)\n")
    write_file(project / "app/jni/src/main.c", "int main(void) { return 0; }\n")
    write_file(
        project / "app/src/main/java/org/libsdl/app/SDLActivity.java",
        "package org.libsdl.app;\n\npublic class SDLActivity {}\n",
    )
    write_file(project / "gradlew", "#!/bin/sh\n")
    for res in ICON_DENSITIES:
        write_file(project / f"app/src/main/res/mipmap-{res}dpi/ic_launcher.png", b"template-icon")
    return sdl


@pytest.fixture
def android_home(tmp_path: Path) -> Path:
    """A fake Android SDK with a few build-tools versions."""
    sdk = tmp_path / "android-sdk"
    for version in BUILD_TOOLS_VERSIONS:
        (sdk / "build-tools" / version).mkdir(parents=True)
    return sdk


@pytest.fixture
def env(sdl_dir: Path, android_home: Path, tmp_path: Path) -> EnvConfig:
    return EnvConfig(
        {
            "SDL": str(sdl_dir),
            "ANDROID_HOME": str(android_home),
            "ANDROID_NDK_HOME": str(tmp_path / "ndk"),
        }
    )


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    project = tmp_path / "game"
    project.mkdir()
    return project


@pytest.fixture
def write_manifest(project_dir: Path):
    """Write a Cargo.toml into the game project and return its path."""

    def _write(android_table: str = "", package_name: str = "my-game") -> Path:
        content = f'[package]\nname = "{package_name}"\nversion = "0.1.0"\n'
        if android_table:
            content += "\n[package.metadata.android]\n" + android_table
        return write_file(project_dir / "Cargo.toml", content)

    return _write


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    return write_file(tmp_path / "out" / "libgame.so", b"\x7fELF-aarch64")


@pytest.fixture
def recorder() -> ToolRecorder:
    return ToolRecorder()
