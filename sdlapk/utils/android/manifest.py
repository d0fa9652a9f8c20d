"""
Text edits on the files of the generated Android project.

Edits are plain string replacement plus one regular expression for the
<manifest> root element. Callers go through ProjectFile and ManifestEditor only,
so the matching strategy can change without touching them.
"""

import re
from typing import List, Optional, Tuple

from sdlapk.utils.errors import ManifestPatternError, ProjectFileError

# Content of the <manifest> root element; the opening tag may span lines
MANIFEST_TAG_CONTENT_REGEX = re.compile(r"<manifest.*?>(.*)</manifest>", re.DOTALL)

USES_PERMISSION_ENTRY = '<uses-permission android:name="android.permission.{}"/>'


def find_manifest_content(text: str) -> Optional[re.Match]:
    """Return the match whose group 1 is the root element content, or None."""
    return MANIFEST_TAG_CONTENT_REGEX.search(text)


def get_uses_permission_entry(permission: str) -> str:
    return USES_PERMISSION_ENTRY.format(permission.upper())


class ProjectFile:
    """A text file of the Android project that gets identity strings replaced."""

    def __init__(self, path: str):
        self.path = path

    def read(self) -> str:
        try:
            with open(self.path, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except OSError as e:
            raise ProjectFileError(f"can't read project file: {self.path} ({e})") from e
        except UnicodeDecodeError as e:
            raise ProjectFileError(f"project file is not valid UTF-8: {self.path} ({e})") from e

    def write(self, content: str):
        try:
            with open(self.path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            raise ProjectFileError(f"unable to write file: {self.path} ({e})") from e

    def replace_identity(self, replacements: List[Tuple[str, str]]):
        """
        Replace every occurrence of each ``from`` with ``to``, in list order.

        Matching is literal and case-sensitive.
        """
        content = self.read()
        for old, new in replacements:
            content = content.replace(old, new)
        self.write(content)


class ManifestEditor(ProjectFile):
    """AndroidManifest.xml of the generated project."""

    def insert_permission_if_absent(self, permission: str) -> bool:
        """
        Add a <uses-permission> entry just before </manifest>.

        Args:
            permission: Permission name, e.g. "internet"; it is upper-cased

        Returns:
            bool: False if the same entry is already inside <manifest>

        Raises:
            ManifestPatternError: if the <manifest> element cannot be found
        """
        content = self.read()
        match = find_manifest_content(content)
        if match is None:
            raise ManifestPatternError(f"can't find manifest tag content in {self.path}")

        entry = get_uses_permission_entry(permission)
        if entry in match.group(1):
            return False

        end = match.end(1)
        self.write(content[:end] + entry + content[end:])
        return True
