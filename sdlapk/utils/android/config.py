"""
Android app identity for sdlapk.

Reads the [package.metadata.android] table of the project's Cargo.toml:

    [package.metadata.android]
    package_name = "com.example.game"
    title = "My Game"
    icon = "assets/icon.png"
    permissions = ["internet", "vibrate"]

Every key is optional and falls back to the SDL template defaults.
"""

import os
from typing import List, Optional

from sdlapk.build_scripts.build_utils import (
    ANDROID_METADATA_KEYS,
    get_manifest_dir,
    get_toml_string,
    get_toml_string_list,
)

# Identity strings shipped in SDL's android-project template
DEFAULT_APP_ID = "org.libsdl.app"
DEFAULT_TITLE = "Untitled"
DEFAULT_ACTIVITY = "SDLActivity"
DEFAULT_TEMPLATE_TITLE = "Game"
MAIN_ACTIVITY = "MainActivity"


class AndroidConfig:
    """App identity resolved from the metadata file."""

    def __init__(
        self,
        app_id: str = DEFAULT_APP_ID,
        title: str = DEFAULT_TITLE,
        icon: Optional[str] = None,
        permissions: Optional[List[str]] = None,
    ):
        self.app_id = app_id
        self.title = title
        self.icon = icon
        self.permissions = list(permissions or [])

    @classmethod
    def from_manifest(cls, manifest_path) -> "AndroidConfig":
        """
        Resolve the app identity from a Cargo.toml.

        Args:
            manifest_path: Path of the metadata file

        Returns:
            AndroidConfig with defaults applied for missing keys; a relative
            icon path is resolved against the metadata file's directory.
        """
        icon = get_toml_string(manifest_path, ANDROID_METADATA_KEYS + ["icon"])
        if icon is not None:
            icon = os.path.join(get_manifest_dir(manifest_path), icon)

        title = get_toml_string(manifest_path, ANDROID_METADATA_KEYS + ["title"])

        return cls(
            app_id=get_android_app_id(manifest_path),
            title=DEFAULT_TITLE if title is None else title,
            icon=icon,
            permissions=get_toml_string_list(
                manifest_path, ANDROID_METADATA_KEYS + ["permissions"]
            ),
        )

    @property
    def package_path(self) -> str:
        """Java source directory of the app id, e.g. com/example/game."""
        return self.app_id.replace(".", "/")

    def get_config_summary(self) -> str:
        lines = []
        lines.append(f"  App ID: {self.app_id}")
        lines.append(f"  Title: {self.title}")
        lines.append(f"  Icon: {self.icon or 'None'}")
        lines.append(f"  Permissions: {', '.join(self.permissions) or 'None'}")
        return "\n".join(lines)


def get_android_app_id(manifest_path) -> str:
    app_id = get_toml_string(manifest_path, ANDROID_METADATA_KEYS + ["package_name"])
    return DEFAULT_APP_ID if app_id is None else app_id
