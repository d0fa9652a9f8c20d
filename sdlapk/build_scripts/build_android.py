#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_android.py
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
Android APK assembly script.

This script turns prebuilt native libraries (libmain.so per ABI) into an APK
using SDL's android-project template and Gradle. It handles:
- Copying the template into target/android-project
- Writing the MainActivity class for the app id
- Replacing identity strings in the manifest, build.gradle and strings.xml
- Adding <uses-permission> entries
- Placing libmain.so for each ABI and the launcher icon
- Running Gradle (assembleDebug / assembleRelease)
- Aligning and signing release builds

Requirements:
- SDL environment variable pointing at the SDL2 source tree
- ANDROID_HOME environment variable pointing at the Android SDK (release only)
"""

import os
import shutil
import sys
import time
from enum import Enum
from typing import Dict, Iterable, Optional

from copier import run_copy
from copier.errors import CopierError

from sdlapk.build_scripts.build_utils import (
    ANDROID_APK_OUTPUT_PATH,
    ANDROID_GRADLE_FILE,
    ANDROID_JAVA_PATH,
    ANDROID_JNI_LIBS_PATH,
    ANDROID_JNI_SDL_PATH,
    ANDROID_JNI_SRC_PATH,
    ANDROID_MANIFEST_FILE,
    ANDROID_STRINGS_FILE,
    ENV_SDL,
    EnvConfig,
    copy_file,
    get_android_project_dir,
    get_manifest_dir,
    get_toml_string,
)
from sdlapk.utils.android.config import (
    DEFAULT_ACTIVITY,
    DEFAULT_APP_ID,
    DEFAULT_TEMPLATE_TITLE,
    MAIN_ACTIVITY,
    AndroidConfig,
)
from sdlapk.utils.android.manifest import ManifestEditor, ProjectFile
from sdlapk.utils.android.signing import check_keystore_args, sign_android
from sdlapk.utils.cmd.cmd_util import check_command, exec_command
from sdlapk.utils.context.result import CliResult
from sdlapk.utils.errors import (
    ApkBuildError,
    ConfigError,
    ProjectFileError,
    UnknownTargetError,
)

# Rust target triple -> Android ABI directory
ANDROID_TARGET_NAMES = {
    "aarch64-linux-android": "arm64-v8a",
    "armv7-linux-androideabi": "armeabi-v7a",
    "i686-linux-android": "x86",
    "x86_64-linux-android": "x86_64",
}

ANDROID_TEMPLATE_NAME = "android-project"
ANDROID_LIB_NAME = "libmain.so"
ANDROID_ICON_DENSITIES = ["m", "h", "xh", "xxh", "xxxh"]

MAIN_ACTIVITY_TEMPLATE = """
package {app_id};

import org.libsdl.app.SDLActivity;

public class MainActivity extends SDLActivity {{
}}
"""


class BuildProfile(Enum):
    DEBUG = "debug"
    RELEASE = "release"

    def __str__(self):
        return self.value

    @property
    def gradle_task(self) -> str:
        if self is BuildProfile.RELEASE:
            return "assembleRelease"
        return "assembleDebug"


def get_target_android_name(target: str) -> str:
    """
    Map a Rust target triple to its Android ABI name.

    Raises:
        UnknownTargetError: for any triple outside the fixed table
    """
    try:
        return ANDROID_TARGET_NAMES[target]
    except KeyError:
        raise UnknownTargetError(target) from None


def check_targets(targets: Iterable[str]):
    """Fail on the first unknown target before anything is written."""
    for target in targets:
        get_target_android_name(target)


def get_apk_output_path(project_dir: str, profile: BuildProfile) -> str:
    return os.path.join(
        project_dir, ANDROID_APK_OUTPUT_PATH, str(profile), f"app-{profile}.apk"
    )


class AndroidProject:
    """
    The generated Android project under target/android-project.

    Templating always starts from a fresh copy of SDL's template: the copy
    overwrites the manifest, build.gradle and strings.xml, so identity strings
    are never replaced twice. Gradle outputs and the generated keystore survive
    between runs.
    """

    def __init__(self, manifest_path, config: AndroidConfig, env: EnvConfig):
        self.manifest_path = manifest_path
        self.config = config
        self.env = env
        self.project_dir = get_android_project_dir(manifest_path)

    @classmethod
    def from_manifest(cls, manifest_path, env: Optional[EnvConfig] = None):
        return cls(manifest_path, AndroidConfig.from_manifest(manifest_path), env or EnvConfig())

    def path(self, relative_path: str) -> str:
        return os.path.join(self.project_dir, relative_path)

    def create(self):
        print("==================Create Android Project========================")
        print(self.config.get_config_summary())
        self.copy_template()
        self.write_main_activity()
        self.replace_identity()
        self.add_permissions()
        self.remove_jni_sources()
        self.link_sdl()

    def copy_template(self):
        template_dir = self.env.get_path(ENV_SDL, ANDROID_TEMPLATE_NAME)
        if not os.path.isdir(template_dir):
            raise ProjectFileError(
                f"Unable to copy android project from {template_dir} to {self.project_dir}: template not found"
            )
        print(f"copy template: {template_dir} -> {self.project_dir}")
        try:
            run_copy(
                template_dir,
                self.project_dir,
                defaults=True,
                overwrite=True,
                quiet=True,
            )
        except (CopierError, OSError) as e:
            raise ProjectFileError(
                f"Unable to copy android project from {template_dir} to {self.project_dir}: {e}"
            ) from e

    def write_main_activity(self) -> str:
        java_main_folder = os.path.join(self.path(ANDROID_JAVA_PATH), self.config.package_path)
        main_activity = os.path.join(java_main_folder, f"{MAIN_ACTIVITY}.java")
        self.remove_stale_main_activities(main_activity)
        try:
            os.makedirs(java_main_folder, exist_ok=True)
            with open(main_activity, "w", encoding="utf-8") as f:
                f.write(MAIN_ACTIVITY_TEMPLATE.format(app_id=self.config.app_id))
        except OSError as e:
            raise ProjectFileError(f"Unable to write file {main_activity}: {e}") from e
        return main_activity

    def remove_stale_main_activities(self, main_activity: str):
        """Delete entry points written for a previous app id; the template has none."""
        for root, _, files in os.walk(self.path(ANDROID_JAVA_PATH)):
            stale = os.path.join(root, f"{MAIN_ACTIVITY}.java")
            if f"{MAIN_ACTIVITY}.java" in files and stale != main_activity:
                print(f"remove stale {MAIN_ACTIVITY}: {stale}")
                try:
                    os.remove(stale)
                except OSError as e:
                    raise ProjectFileError(f"Unable to remove file {stale}: {e}") from e

    def replace_identity(self):
        ProjectFile(self.path(ANDROID_MANIFEST_FILE)).replace_identity(
            [(DEFAULT_ACTIVITY, MAIN_ACTIVITY), (DEFAULT_APP_ID, self.config.app_id)]
        )
        ProjectFile(self.path(ANDROID_GRADLE_FILE)).replace_identity(
            [(DEFAULT_APP_ID, self.config.app_id)]
        )
        ProjectFile(self.path(ANDROID_STRINGS_FILE)).replace_identity(
            [(DEFAULT_TEMPLATE_TITLE, self.config.title)]
        )

    def add_permissions(self):
        manifest = ManifestEditor(self.path(ANDROID_MANIFEST_FILE))
        for permission in self.config.permissions:
            print(f"Adding permission entry for permission {permission}")
            manifest.insert_permission_if_absent(permission)

    def remove_jni_sources(self):
        # libmain.so is prebuilt, the template's C sources are not needed
        jni_src = self.path(ANDROID_JNI_SRC_PATH)
        if os.path.isdir(jni_src):
            shutil.rmtree(jni_src)

    def link_sdl(self):
        sdl_link = self.path(ANDROID_JNI_SDL_PATH)
        if os.path.isdir(sdl_link):
            return
        try:
            if os.path.islink(sdl_link):
                # dangling link from a moved SDL tree
                os.remove(sdl_link)
            os.symlink(self.env.get(ENV_SDL), sdl_link, target_is_directory=True)
        except OSError as e:
            raise ProjectFileError(f"Unable to link SDL into {sdl_link}: {e}") from e

    def place_artifacts(self, target_artifacts: Dict[str, str]):
        """
        Copy each target's artifact to jniLibs/<abi>/libmain.so.

        jniLibs is emptied first, so only the given targets end up in the APK.
        """
        jni_libs = self.path(ANDROID_JNI_LIBS_PATH)
        if os.path.isdir(jni_libs):
            shutil.rmtree(jni_libs)
        for target, artifact in target_artifacts.items():
            android_name = get_target_android_name(target)
            dest = os.path.join(jni_libs, android_name, ANDROID_LIB_NAME)
            print(f"copy {target}: {artifact} -> {dest}")
            copy_file(artifact, dest)

    def place_icon(self):
        if self.config.icon is None:
            return
        for res in ANDROID_ICON_DENSITIES:
            dest = self.path(f"app/src/main/res/mipmap-{res}dpi/ic_launcher.png")
            try:
                shutil.copy(self.config.icon, dest)
            except OSError as e:
                print(
                    f"WARNING: Failed to copy icon from {self.config.icon} to {dest}: {e}",
                    file=sys.stderr,
                )


def run_gradle(project_dir: str, profile: BuildProfile, runner=exec_command):
    gradlew = "./gradlew" if os.name != 'nt' else "gradlew.bat"
    check_command([gradlew, profile.gradle_task], cwd=project_dir, runner=runner)


def build_android_project(
    manifest_path,
    target_artifacts: Dict[str, str],
    profile: BuildProfile,
    ks_file: Optional[str] = None,
    ks_pass: Optional[str] = None,
    env: Optional[EnvConfig] = None,
    runner=exec_command,
) -> CliResult:
    """
    Assemble the APK for a set of prebuilt native libraries.

    Steps run in order and each needs the previous one to succeed:
    1. Check every target is a known Android target, and the keystore arguments of a release build
    2. Create the Android project from SDL's template
    3. Place libmain.so per ABI and the icon
    4. Run Gradle
    5. Align and sign (release only)

    Args:
        manifest_path: Path of the project's Cargo.toml
        target_artifacts: Rust target triple -> path of the built shared library
        profile: BuildProfile.DEBUG or BuildProfile.RELEASE
        ks_file: Keystore for release signing (optional)
        ks_pass: Password reference for ks_file, required with ks_file
        env: Toolchain locations; the process environment by default
        runner: Tool runner, see check_command

    Returns:
        CliResult: path of the final APK, or the error that stopped the build
    """
    env = env or EnvConfig()
    before_time = time.time()
    try:
        check_targets(target_artifacts)
        if profile is BuildProfile.RELEASE:
            check_keystore_args(ks_file, ks_pass)
        project = AndroidProject.from_manifest(manifest_path, env)
        project.create()
        project.place_artifacts(target_artifacts)
        project.place_icon()

        print(f"==================Gradle {profile.gradle_task}========================")
        run_gradle(project.project_dir, profile, runner)
        apk_path = get_apk_output_path(project.project_dir, profile)

        if profile is BuildProfile.RELEASE:
            apk_path = sign_android(manifest_path, ks_file, ks_pass, env, runner)
    except ApkBuildError as e:
        return CliResult(error=e)

    print("==================Android Build Done========================")
    print(f"Build All:{sorted(target_artifacts)}")
    print(f"apk: {apk_path}")
    print(f"use time: {int(time.time() - before_time)}")
    return CliResult(value=apk_path)


def get_target_artifact_path(manifest_path, target: str, profile: BuildProfile) -> str:
    """
    Default location of the cdylib cargo builds for a target.

    target/<target>/<profile>/lib<package name with '-' as '_'>.so
    """
    package_name = get_toml_string(manifest_path, ["package", "name"])
    if package_name is None:
        raise ConfigError(f"package.name is missing in {manifest_path}")
    lib_name = f"lib{package_name.replace('-', '_')}.so"
    return os.path.join(get_manifest_dir(manifest_path), "target", target, str(profile), lib_name)
