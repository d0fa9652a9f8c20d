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
import sys
import argparse
import shutil

from sdlapk.build_scripts.build_utils import get_android_project_dir
from sdlapk.utils.context.command import CliCommand
from sdlapk.utils.context.context import CliContext
from sdlapk.utils.context.namespace import CliNameSpace


class Clean(CliCommand):
    def description(self) -> str:
        return """
        Remove the generated Android project.

        Cleans target/android-project/, including Gradle outputs and the
        generated release keystore. The next release build creates a new
        keystore, so installed apps signed with the old one cannot be updated.

        Examples:
            sdlapk clean
            sdlapk clean --dry-run
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="sdlapk clean",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
        )
        parser.add_argument(
            "--manifest-path",
            action="store",
            default="Cargo.toml",
            help="Path to Cargo.toml (default: ./Cargo.toml)",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would be cleaned without actually deleting",
        )
        if argv is None:
            module_name = os.path.splitext(os.path.basename(__file__))[0]
            argv = [x for x in sys.argv[1:] if x != module_name]
        args, unknown = parser.parse_known_args(argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        project_dir = get_android_project_dir(args.manifest_path)
        if not os.path.exists(project_dir):
            print(f"Nothing to clean, {project_dir} does not exist.")
            return

        if args.dry_run:
            print(f"[dry-run] Would remove: {project_dir}")
            return

        try:
            shutil.rmtree(project_dir)
        except OSError as e:
            print(f"ERROR: Failed to remove {project_dir}: {e}")
            sys.exit(1)
        print(f"Removed: {project_dir}")
