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

from sdlapk.build_scripts.build_android import (
    ANDROID_TARGET_NAMES,
    BuildProfile,
    build_android_project,
    get_target_artifact_path,
)
from sdlapk.build_scripts.build_utils import EnvConfig
from sdlapk.utils.context.command import CliCommand
from sdlapk.utils.context.context import CliContext
from sdlapk.utils.context.namespace import CliNameSpace
from sdlapk.utils.errors import ApkBuildError, ConfigError

DEFAULT_TARGET = "aarch64-linux-android"


class Build(CliCommand):
    def description(self) -> str:
        return """
        Build an APK from prebuilt native libraries.

        Creates target/android-project from SDL's android-project template,
        copies each target's library to jniLibs/<abi>/libmain.so and runs Gradle.
        Release builds are aligned and signed; without --keystore a keystore is
        generated in the release output directory on first use.

        Environment:
            SDL             SDL2 source tree (holds android-project/)
            ANDROID_HOME    Android SDK (release builds only)

        Examples:
            sdlapk build --target aarch64-linux-android
            sdlapk build --release --target aarch64-linux-android --target armv7-linux-androideabi
            sdlapk build --artifact x86_64-linux-android=path/to/libgame.so
            sdlapk build --release --keystore my.jks --keystore-pass pass:secret
        """

    def get_target_list(self) -> list:
        return sorted(ANDROID_TARGET_NAMES)

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="sdlapk build",
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
            help="Build in release mode and sign the APK (default: debug)",
        )
        parser.add_argument(
            "--target",
            action="append",
            default=[],
            choices=self.get_target_list(),
            help="Rust target to package, its library is taken from target/<target>/<profile>/ (repeatable)",
        )
        parser.add_argument(
            "--artifact",
            action="append",
            default=[],
            metavar="TARGET=PATH",
            help="Rust target and the path of its built library (repeatable)",
        )
        parser.add_argument(
            "--keystore",
            action="store",
            default=None,
            help="Keystore to sign release builds with",
        )
        parser.add_argument(
            "--keystore-pass",
            action="store",
            default=None,
            help="Keystore password as apksigner expects it, e.g. pass:secret",
        )
        if argv is None:
            module_name = os.path.splitext(os.path.basename(__file__))[0]
            argv = [x for x in sys.argv[1:] if x != module_name]
        args, unknown = parser.parse_known_args(argv, namespace=CliNameSpace())
        return args

    def get_target_artifacts(self, args: CliNameSpace, profile: BuildProfile) -> dict:
        target_artifacts = {}
        for item in args.artifact:
            if "=" not in item:
                raise ConfigError(f"Invalid --artifact '{item}', expected TARGET=PATH")
            target, path = item.split("=", 1)
            target_artifacts[target] = path

        targets = list(args.target)
        if not targets and not target_artifacts:
            targets = [DEFAULT_TARGET]
        for target in targets:
            if target not in target_artifacts:
                target_artifacts[target] = get_target_artifact_path(
                    args.manifest_path, target, profile
                )
        return target_artifacts

    def exec(self, context: CliContext, args: CliNameSpace):
        profile = BuildProfile.RELEASE if args.release else BuildProfile.DEBUG
        print(f"==================Build APK, profile: {profile}==================")

        try:
            target_artifacts = self.get_target_artifacts(args, profile)
        except ApkBuildError as e:
            print(f"ERROR: {e}")
            sys.exit(1)

        result = build_android_project(
            args.manifest_path,
            target_artifacts,
            profile,
            ks_file=args.keystore,
            ks_pass=args.keystore_pass,
            env=EnvConfig(context.environ),
        )
        if result.is_failure():
            print(f"ERROR: {result.get_error()}")
            print("!!!!!!!!!!!!!!!!!!build fail!!!!!!!!!!!!!!!!!!!!")
            sys.exit(1)

        print(f"\nSuccessfully built '{result.get_value()}'")
