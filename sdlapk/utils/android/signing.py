"""
Release APK signing for sdlapk.

Signing goes through fixed states:

    NeedCredential -> CredentialResolved -> Aligned -> Signed

Any tool exiting non-zero, or a tool that cannot be found, stops the chain
with a ToolError.
"""

import os
from dataclasses import dataclass
from typing import Optional

from sdlapk.build_scripts.build_utils import (
    ANDROID_APK_OUTPUT_PATH,
    ENV_ANDROID_HOME,
    EnvConfig,
    get_android_project_dir,
)
from sdlapk.utils.cmd.cmd_util import check_command, exec_command
from sdlapk.utils.errors import ConfigError, ToolNotFoundError

# Self-signed keystore generated when none is given. Not a secret.
DEFAULT_KEYSTORE_NAME = "app-release.jks"
DEFAULT_KEYSTORE_PASSWORD = "android"
DEFAULT_KEYSTORE_DNAME = "CN=Unknown, OU=Unknown, O=Unknown, L=Unknown, S=Unknown, C=Unknown"
DEFAULT_KEY_ALG = "RSA"
DEFAULT_KEY_SIZE = 2048
DEFAULT_KEY_VALIDITY_DAYS = 10000

ZIPALIGN_ALIGNMENT = 4

UNSIGNED_APK_NAME = "app-release-unsigned.apk"
ALIGNED_APK_NAME = "app-release-unsigned-aligned.apk"
SIGNED_APK_NAME = "app-release.apk"


@dataclass(frozen=True)
class BuildTools:
    """A resolved build-tools installation, e.g. $ANDROID_HOME/build-tools/30.0.3."""

    version: str
    path: str

    @property
    def zipalign(self) -> str:
        return os.path.join(self.path, "zipalign")

    @property
    def apksigner(self) -> str:
        return os.path.join(self.path, "apksigner")


@dataclass(frozen=True)
class KeystoreCredential:
    path: str
    # Password reference for apksigner's -ks-pass, e.g. "pass:android"
    password: str


def get_release_dir(manifest_path) -> str:
    return os.path.join(get_android_project_dir(manifest_path), ANDROID_APK_OUTPUT_PATH, "release")


def find_build_tools(env: EnvConfig) -> BuildTools:
    """
    Pick the greatest version directory under $ANDROID_HOME/build-tools.

    Versions are compared as plain strings, so "9.0.0" sorts after "30.0.3".

    Raises:
        MissingEnvError: if ANDROID_HOME is not set
        ToolNotFoundError: if the directory is missing, unreadable or empty
    """
    build_tools_dir = env.get_path(ENV_ANDROID_HOME, "build-tools")
    try:
        versions = sorted(os.listdir(build_tools_dir))
    except OSError as e:
        raise ToolNotFoundError(
            "build-tools", f"Unable to read android build-tools at {build_tools_dir}: {e}"
        ) from e
    if not versions:
        raise ToolNotFoundError("build-tools", f"No android build-tools found in {build_tools_dir}")

    version = versions[-1]
    print(f"Using build-tools: {version}")
    return BuildTools(version=version, path=os.path.join(build_tools_dir, version))


def generate_keystore(key_path: str, runner=exec_command):
    print("Generating keyfile...")
    os.makedirs(os.path.dirname(key_path) or ".", exist_ok=True)
    check_command(
        [
            "keytool",
            "-genkey",
            "-dname",
            DEFAULT_KEYSTORE_DNAME,
            "-storepass",
            DEFAULT_KEYSTORE_PASSWORD,
            "-keystore",
            key_path,
            "-keyalg",
            DEFAULT_KEY_ALG,
            "-keysize",
            str(DEFAULT_KEY_SIZE),
            "-validity",
            str(DEFAULT_KEY_VALIDITY_DAYS),
        ],
        runner=runner,
    )


def check_keystore_args(ks_file: Optional[str], ks_pass: Optional[str]):
    if ks_file is not None and ks_pass is None:
        raise ConfigError("Need keystore password")


def resolve_keystore(
    release_dir: str,
    ks_file: Optional[str] = None,
    ks_pass: Optional[str] = None,
    runner=exec_command,
) -> KeystoreCredential:
    """
    Determine the keystore to sign with, generating one if needed.

    A given ks_file must come with ks_pass; both are used as they are.
    Otherwise the keystore is release_dir/app-release.jks, created with keytool
    on first use and reused afterwards.

    Raises:
        ConfigError: if ks_file is given without ks_pass
        ToolError: if keytool fails
    """
    check_keystore_args(ks_file, ks_pass)
    if ks_file is not None:
        credential = KeystoreCredential(path=ks_file, password=ks_pass)
    else:
        key_path = os.path.join(release_dir, DEFAULT_KEYSTORE_NAME)
        if not os.path.exists(key_path):
            generate_keystore(key_path, runner)
        credential = KeystoreCredential(
            path=key_path, password=f"pass:{DEFAULT_KEYSTORE_PASSWORD}"
        )

    print(f"Using keyfile: {credential.path}")
    return credential


class ApkSigner:
    """Runs zipalign and apksigner from one build-tools installation."""

    def __init__(self, build_tools: BuildTools, runner=exec_command):
        self.build_tools = build_tools
        self.runner = runner

    def align(self, unsigned_apk: str, aligned_apk: str) -> str:
        check_command(
            [
                self.build_tools.zipalign,
                "-v",
                "-f",
                "-p",
                str(ZIPALIGN_ALIGNMENT),
                unsigned_apk,
                aligned_apk,
            ],
            runner=self.runner,
        )
        return aligned_apk

    def sign(self, credential: KeystoreCredential, aligned_apk: str, signed_apk: str) -> str:
        check_command(
            [
                self.build_tools.apksigner,
                "sign",
                "-ks",
                credential.path,
                "-ks-pass",
                credential.password,
                "-out",
                signed_apk,
                aligned_apk,
            ],
            runner=self.runner,
        )
        return signed_apk


def sign_android(
    manifest_path,
    ks_file: Optional[str] = None,
    ks_pass: Optional[str] = None,
    env: Optional[EnvConfig] = None,
    runner=exec_command,
) -> str:
    """
    Align and sign the release APK built by Gradle.

    Args:
        manifest_path: Path of the project's Cargo.toml
        ks_file: Keystore to sign with; None uses the generated default
        ks_pass: Password reference for ks_file, passed to apksigner as is
        env: Toolchain locations (ANDROID_HOME)
        runner: Tool runner, see check_command

    Returns:
        str: Path of the signed app-release.apk

    Output:
        - app-release-unsigned-aligned.apk (left in place)
        - app-release.apk
    """
    env = env or EnvConfig()
    release_dir = get_release_dir(manifest_path)

    print("==================Sign Android APK========================")
    build_tools = find_build_tools(env)
    credential = resolve_keystore(release_dir, ks_file, ks_pass, runner)

    signer = ApkSigner(build_tools, runner)
    aligned_apk = signer.align(
        os.path.join(release_dir, UNSIGNED_APK_NAME),
        os.path.join(release_dir, ALIGNED_APK_NAME),
    )
    signed_apk = signer.sign(credential, aligned_apk, os.path.join(release_dir, SIGNED_APK_NAME))

    print(f"signed apk: {signed_apk}")
    return signed_apk
