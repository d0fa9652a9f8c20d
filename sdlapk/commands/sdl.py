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

from sdlapk.build_scripts.build_android import ANDROID_TARGET_NAMES, BuildProfile
from sdlapk.build_scripts.build_sdl import build_sdl_for_android
from sdlapk.build_scripts.build_utils import EnvConfig, get_manifest_dir
from sdlapk.utils.context.command import CliCommand
from sdlapk.utils.context.context import CliContext
from sdlapk.utils.context.namespace import CliNameSpace
from sdlapk.utils.errors import ApkBuildError


class Sdl(CliCommand):
    def description(self) -> str:
        return """
        Build SDL2 for Android with ndk-build.

        Copies libSDL2.so into target/<target>/<profile>/deps/ so the Rust
        build can link against it.

        Environment:
            SDL                 SDL2 source tree
            ANDROID_NDK_HOME    Android NDK

        Examples:
            sdlapk sdl --target aarch64-linux-android
            sdlapk sdl --release --target aarch64-linux-android --target x86_64-linux-android
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="sdlapk sdl",
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
            "--release",
            action="store_true",
            help="Stage libraries for the release profile (default: debug)",
        )
        parser.add_argument(
            "--target",
            action="append",
            default=[],
            choices=sorted(ANDROID_TARGET_NAMES),
            help="Rust target to stage libSDL2.so for (repeatable, default: aarch64-linux-android)",
        )
        if argv is None:
            module_name = os.path.splitext(os.path.basename(__file__))[0]
            argv = [x for x in sys.argv[1:] if x != module_name]
        args, unknown = parser.parse_known_args(argv, namespace=CliNameSpace())
        return args

    def exec(self, context: CliContext, args: CliNameSpace):
        profile = BuildProfile.RELEASE if args.release else BuildProfile.DEBUG
        targets = args.target or ["aarch64-linux-android"]
        try:
            build_sdl_for_android(
                get_manifest_dir(args.manifest_path),
                targets,
                profile,
                env=EnvConfig(context.environ),
            )
        except ApkBuildError as e:
            print(f"ERROR: {e}")
            sys.exit(1)
        print("==================SDL2 Build Done========================")
