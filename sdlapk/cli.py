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
import importlib
import argparse

from sdlapk.utils.context.namespace import CliNameSpace
from sdlapk.utils.context.context import CliContext
from sdlapk.utils.context.command import CliCommand

SCRIPT_PATH = os.path.split(os.path.realpath(__file__))[0]
PACKAGE_NAME = os.path.basename(SCRIPT_PATH)


# Root Class for Command Line Interface
class Cli(CliCommand):
    def description(self) -> str:
        return """SDLAPK - Android APK builder for Rust SDL2 games

Packages prebuilt native libraries into an APK using SDL's android-project
template and Gradle, and signs release builds.

USAGE:
    sdlapk <command> [options]

COMMANDS:
    build       Build an APK from prebuilt libraries
    sign        Align and sign an existing release build
    sdl         Build SDL2 for Android with ndk-build
    clean       Remove the generated Android project

EXAMPLES:
    sdlapk sdl --target aarch64-linux-android       # Build libSDL2.so
    sdlapk build --target aarch64-linux-android     # Debug APK
    sdlapk build --release                          # Signed release APK
    sdlapk clean                                    # Remove target/android-project

For more information on a specific command:
    sdlapk <command> --help
        """

    def get_command_list(self) -> list:
        arr = []
        for command in os.listdir(os.path.join(SCRIPT_PATH, "commands")):
            if not command.startswith("_") and command.endswith(".py"):
                arr.append(os.path.splitext(os.path.basename(command))[0])
        return sorted(arr)

    def _parser(self, add_help=True) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="sdlapk",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            description=self.description(),
            add_help=add_help,
        )
        parser.add_argument(
            "subcommand",
            metavar=f"{self.get_command_list()}",
            type=str,
            nargs='?',
            choices=self.get_command_list(),
        )
        return parser

    def cli(self, argv=None) -> CliNameSpace:
        if argv is None:
            argv = sys.argv[1:]
        # Help for the main command only, not for "sdlapk build --help"
        if len(argv) == 1 and argv[0] in ['--help', '-h']:
            self._parser().print_help()
            sys.exit(0)

        # parse only known args - this will NOT consume --help if present
        args, unknown = self._parser(add_help=False).parse_known_args(
            argv, namespace=CliNameSpace()
        )
        args.argv = list(argv)
        if args.subcommand:
            args.argv.remove(args.subcommand)
        return args

    def load_command(self, subcommand: str) -> CliCommand:
        module = importlib.import_module(f"{PACKAGE_NAME}.commands.{subcommand}")
        klass = getattr(module, subcommand.capitalize())
        return klass()

    def exec(self, context: CliContext, args: CliNameSpace):
        if not args.subcommand:
            print("ERROR: No command specified\n")
            self._parser().print_help()
            sys.exit(1)

        sub_cmd = self.load_command(args.subcommand)
        sub_cmd.exec(context, sub_cmd.cli(args.argv))


def main(argv=None):
    cmd = Cli()
    cmd.exec(CliContext(), cmd.cli(argv))


if __name__ == "__main__":
    main()
