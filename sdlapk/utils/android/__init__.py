"""
Android project integration for sdlapk.

This module provides the app identity, project file editing and APK signing
used by the Android build script.
"""

from .config import AndroidConfig, get_android_app_id
from .manifest import ManifestEditor, ProjectFile
from .signing import ApkSigner, BuildTools, KeystoreCredential, sign_android

__all__ = [
    'AndroidConfig',
    'ApkSigner',
    'BuildTools',
    'KeystoreCredential',
    'ManifestEditor',
    'ProjectFile',
    'get_android_app_id',
    'sign_android',
]
