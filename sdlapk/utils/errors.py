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
Errors raised while assembling an APK.

Every failure in the pipeline is fatal. Stages raise one of these and the
top-level driver turns it into a failed CliResult.
"""

from typing import List, Optional


class ApkBuildError(Exception):
    """Base class for all sdlapk errors."""


class ConfigError(ApkBuildError):
    """Invalid or incomplete configuration."""


class MissingEnvError(ConfigError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Need env var: {key}")


class UnknownTargetError(ConfigError):
    def __init__(self, target: str):
        self.target = target
        super().__init__(f"Unknown target: {target}")


class ToolError(ApkBuildError):
    """An external tool exited with a non-zero status."""

    def __init__(
        self, tool: str, args: List[str], returncode: Optional[int], message: str = ""
    ):
        self.tool = tool
        self.args_list = list(args)
        self.returncode = returncode
        if not message:
            message = f"{tool} failed with exit status {returncode}, cmd:[{' '.join(self.args_list)}]"
        super().__init__(message)


class ToolNotFoundError(ToolError):
    """A required tool (or its installation directory) cannot be located."""

    def __init__(self, tool: str, message: str, args: Optional[List[str]] = None):
        super().__init__(tool, args or [], None, message)


class ProjectFileError(ApkBuildError):
    """A required project file is missing or cannot be written or copied."""


class ManifestPatternError(ProjectFileError):
    """The <manifest> root element cannot be located in AndroidManifest.xml."""
