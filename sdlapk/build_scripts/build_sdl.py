#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_sdl.py
# sdlapk
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

"""
SDL2 native library build script for Android.

Runs ndk-build inside the SDL source tree and stages the resulting libSDL2.so
next to the Rust build output of every target, where the linker expects it:

    target/<rust target>/<profile>/deps/libSDL2.so

Requirements:
- SDL environment variable pointing at the SDL2 source tree
- ANDROID_NDK_HOME environment variable pointing at the Android NDK
"""

import os
from typing import List, Optional

from sdlapk.build_scripts.build_android import BuildProfile, check_targets, get_target_android_name
from sdlapk.build_scripts.build_utils import (
    ENV_ANDROID_NDK_HOME,
    ENV_SDL,
    EnvConfig,
    copy_file,
)
from sdlapk.utils.cmd.cmd_util import check_command, exec_command

NDK_BUILD_ARGS = [
    "NDK_PROJECT_PATH=.",
    "APP_BUILD_SCRIPT=./Android.mk",
    "APP_PLATFORM=android-19",
]
SDL_LIB_NAME = "libSDL2.so"


def get_sdl_deps_dir(project_dir: str, target: str, profile: BuildProfile) -> str:
    return os.path.join(project_dir, "target", target, str(profile), "deps")


def build_sdl_for_android(
    project_dir: str,
    targets: List[str],
    profile: BuildProfile,
    env: Optional[EnvConfig] = None,
    runner=exec_command,
) -> List[str]:
    """
    Build SDL2 with ndk-build and copy libSDL2.so for each target.

    Args:
        project_dir: Directory holding the Rust project's target/ directory
        targets: Rust target triples
        profile: Build profile naming the Rust output directory
        env: Toolchain locations (SDL, ANDROID_NDK_HOME)
        runner: Tool runner, see check_command

    Returns:
        list: Paths of the staged libSDL2.so files

    Raises:
        UnknownTargetError: before ndk-build runs, for any unknown target
        ToolError: if ndk-build exits non-zero
        ProjectFileError: if a copy fails
    """
    env = env or EnvConfig()
    check_targets(targets)

    sdl_dir = env.get(ENV_SDL)
    ndk_build = env.get_path(ENV_ANDROID_NDK_HOME, "ndk-build")

    print(f"==================Build SDL2 for Android, targets: {targets}==================")
    check_command([ndk_build] + NDK_BUILD_ARGS, cwd=sdl_dir, runner=runner)

    staged = []
    for target in targets:
        src = os.path.join(sdl_dir, "libs", get_target_android_name(target), SDL_LIB_NAME)
        dest = os.path.join(get_sdl_deps_dir(project_dir, target, profile), SDL_LIB_NAME)
        copy_file(src, dest)
        print(f"libs({target}): {dest}")
        staged.append(dest)
    return staged
