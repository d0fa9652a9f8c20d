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

import os
import subprocess

from sdlapk.utils.errors import ToolError, ToolNotFoundError


def exec_command(args, cwd=None):
    """
    Run an external tool and wait for it to exit.

    The tool's output goes straight to the console. There is no timeout, a hung
    tool hangs the caller.

    Returns:
        int: exit status of the process
    """
    print(f"exec cmd: [{' '.join(str(a) for a in args)}]" + (f" in {cwd}" if cwd else ""))
    return subprocess.call([str(a) for a in args], cwd=cwd)


def check_command(args, cwd=None, runner=exec_command):
    """
    Run a tool through ``runner`` and raise ToolError unless it exits with 0.

    ``runner`` takes the same (args, cwd) and returns the exit status, tests
    replace it with a recorder.
    """
    args = [str(a) for a in args]
    tool = os.path.basename(args[0])
    try:
        returncode = runner(args, cwd=cwd)
    except OSError as e:
        raise ToolNotFoundError(tool, f"Failed to execute command: {args[0]} ({e})", args) from e
    if returncode != 0:
        raise ToolError(tool, args, returncode)
    return returncode
