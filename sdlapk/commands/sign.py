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

from sdlapk.build_scripts.build_utils import EnvConfig
from sdlapk.utils.android.signing import sign_android
from sdlapk.utils.context.command import CliCommand
from sdlapk.utils.context.context import CliContext
from sdlapk.utils.context.namespace import CliNameSpace
from sdlapk.utils.errors import ApkBuildError


class Sign(CliCommand):
    def description(self) -> str:
        return """
        Align and sign an existing release build.

        Expects app-release-unsigned.apk from a previous 'sdlapk build --release'
        under target/android-project/app/build/outputs/apk/release/.

        Examples:
            sdlapk sign
            sdlapk sign --keystore my.jks --keystore-pass pass:secret
        """

    def cli(self, argv=None) -> CliNameSpace:
        parser = argparse.ArgumentParser(
            prog="sdlapk sign",
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
            "--keystore",
            action="store",
            default=None,
            help="Keystore to sign with (default: generated app-release.jks)",
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

    def exec(self, context: CliContext, args: CliNameSpace):
        try:
            signed_apk = sign_android(
                args.manifest_path,
                ks_file=args.keystore,
                ks_pass=args.keystore_pass,
                env=EnvConfig(context.environ),
            )
        except ApkBuildError as e:
            print(f"ERROR: {e}")
            sys.exit(1)
        print(f"\nSuccessfully signed '{signed_apk}'")
