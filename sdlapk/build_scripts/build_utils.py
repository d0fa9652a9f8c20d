#!/usr/bin/env python3
# -- coding: utf-8 --
#
# build_utils.py
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
Shared utilities for the Android build scripts.

This module provides:
- Toolchain location lookup through an injectable environment provider
- Dotted-path lookups into the project's TOML metadata (Cargo.toml)
- File copy helpers that report both source and destination on failure
- The fixed layout of the generated Android project
"""

import os
import shutil
import sys
from collections.abc import Mapping

if sys.version_info >= (3, 11, 0, "alpha", 7):
    import tomllib
else:
    import tomli as tomllib

from sdlapk.utils.errors import ConfigError, MissingEnvError, ProjectFileError

# Environment variables naming toolchain roots
ENV_SDL = "SDL"
ENV_ANDROID_HOME = "ANDROID_HOME"
ENV_ANDROID_NDK_HOME = "ANDROID_NDK_HOME"

# Android project layout, relative to the directory of the metadata file
ANDROID_PROJECT_PATH = "target/android-project"
ANDROID_MANIFEST_FILE = "app/src/main/AndroidManifest.xml"
ANDROID_GRADLE_FILE = "app/build.gradle"
ANDROID_STRINGS_FILE = "app/src/main/res/values/strings.xml"
ANDROID_JAVA_PATH = "app/src/main/java"
ANDROID_JNI_LIBS_PATH = "app/src/main/jniLibs"
ANDROID_JNI_SRC_PATH = "app/jni/src"
ANDROID_JNI_SDL_PATH = "app/jni/SDL"
ANDROID_APK_OUTPUT_PATH = "app/build/outputs/apk"

# Metadata table holding the app identity
ANDROID_METADATA_KEYS = ["package", "metadata", "android"]


class EnvConfig:
    """
    Read-only view over environment variables that name toolchain roots.

    The pipeline never touches os.environ directly; it is handed an EnvConfig,
    which tests build from a plain dict.
    """

    def __init__(self, environ: Mapping = None):
        self.environ = os.environ if environ is None else environ

    def get(self, key: str) -> str:
        value = self.environ.get(key)
        if not value:
            raise MissingEnvError(key)
        return value

    def get_path(self, key: str, *parts) -> str:
        return os.path.join(self.get(key), *parts)


def load_toml(toml_file):
    """
    Parse a TOML file.

    Raises:
        ConfigError: if the file cannot be read or is not valid TOML
    """
    try:
        # Must open in rb mode for tomllib
        with open(toml_file, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ConfigError(f"unable to read toml file {toml_file}: {e}") from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        raise ConfigError(f"invalid toml content in {toml_file}: {e}") from e


def get_toml_entry(toml_file, keys):
    """
    Look up a value by its key path, e.g. ["package", "metadata", "android", "title"].

    Args:
        toml_file: Path to the TOML file
        keys: Key path; an empty path returns the whole document

    Returns:
        The value, or None when a key is missing or a parent is not a table
    """
    value = load_toml(toml_file)
    for key in keys:
        if not isinstance(value, dict) or key not in value:
            return None
        value = value[key]
    return value


def get_toml_string(toml_file, keys):
    value = get_toml_entry(toml_file, keys)
    if isinstance(value, str):
        return value
    return None


def get_toml_string_list(toml_file, keys):
    """Return the value if it is an array of strings only, else None."""
    value = get_toml_entry(toml_file, keys)
    if not isinstance(value, list):
        return None
    if not all(isinstance(v, str) for v in value):
        return None
    return value


def get_manifest_dir(manifest_path) -> str:
    return os.path.dirname(os.path.abspath(manifest_path))


def get_android_project_dir(manifest_path) -> str:
    return os.path.join(get_manifest_dir(manifest_path), ANDROID_PROJECT_PATH)


def copy_file(src, dst):
    """
    Copy a single file, creating the destination directory as needed.

    Raises:
        ProjectFileError: naming both paths if the copy fails
    """
    try:
        dst_dir = os.path.dirname(dst)
        if dst_dir:
            os.makedirs(dst_dir, exist_ok=True)
        shutil.copy(src, dst)
    except OSError as e:
        raise ProjectFileError(f"Unable to copy from {src} to {dst}: {e}") from e
