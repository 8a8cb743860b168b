"""
options.py

Responsibility: Declarative description of every xchelper command.

Each command is a frozen `CommandOption` holding its sub-options. The
registry (`COMMANDS`, `COMMAND_GROUPS`) is built once at import time and
never mutated. Handlers are not stored here; `commands.py` maps each
`CommandKind` to its handler.

Keys follow one convention: flags start with `-`, and every option also has
exactly one all-uppercase key that doubles as its environment variable.
The first key is the canonical key used in the `ArgumentIndex`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_IMAGE_NAME = "saltzmanjoelh/swiftubuntu"
DEFAULT_REGION = "us-east-1"


class CommandKind(Enum):
    UPDATE_MACOS_PACKAGES = "update-macos-packages"
    UPDATE_DOCKER_PACKAGES = "update-docker-packages"
    DOCKER_BUILD = "docker-build"
    CLEAN = "clean"
    SYMLINK_DEPENDENCIES = "symlink-dependencies"
    CREATE_ARCHIVE = "create-archive"
    UPLOAD_ARCHIVE = "upload-archive"
    GIT_TAG = "git-tag"
    CREATE_XCARCHIVE = "create-xcarchive"


@dataclass(frozen=True)
class CommandOption:
    keys: tuple[str, ...]
    description: str
    usage: str | None = None
    requires_value: bool = False
    # A switch that may be followed by one value, e.g. `-s [BUILD_DIR]`.
    accepts_value: bool = False
    default: str | None = None
    # Process environment variable that supplies the default at resolution time.
    default_environment: str | None = None
    required: tuple["CommandOption", ...] = ()
    optional: tuple["CommandOption", ...] = ()
    kind: CommandKind | None = None
    # Commands only: metavar and argparse nargs of their positional values.
    positional: str | None = None
    positional_nargs: str | None = None

    @property
    def name(self) -> str:
        return self.keys[0]

    @property
    def flags(self) -> tuple[str, ...]:
        return tuple(k for k in self.keys if k.startswith("-"))

    @property
    def environment_key(self) -> str | None:
        for key in self.keys:
            if not key.startswith("-") and key == key.upper():
                return key
        return None

    @property
    def arguments(self) -> tuple["CommandOption", ...]:
        return self.required + self.optional


@dataclass(frozen=True)
class CommandOptionGroup:
    description: str
    options: tuple[CommandOption, ...]


def _chdir(environment_key: str) -> CommandOption:
    return CommandOption(
        keys=("-d", "--chdir", environment_key),
        description="Change the current working directory.",
        requires_value=True,
    )


# update-macos-packages

UPDATE_MACOS_PACKAGES_CHDIR = _chdir("UPDATE_MACOS_PACKAGES_CHDIR")
UPDATE_MACOS_PACKAGES_GENERATE = CommandOption(
    keys=("-g", "--generate", "UPDATE_PACKAGES_GENERATE_XCPROJECT"),
    description="Generate a new Xcode project.",
)
UPDATE_MACOS_PACKAGES_SYMLINK = CommandOption(
    keys=("-s", "--symlink", "UPDATE_PACKAGES_SYMLINK"),
    description=(
        "Create symbolic links for the dependency 'Packages' after `swift package update` "
        "so you don't have to generate a new Xcode project."
    ),
)
UPDATE_MACOS_PACKAGES = CommandOption(
    keys=("update-macos-packages", "UPDATE_MACOS_PACKAGES"),
    description="Update the package dependencies via 'swift package update' without breaking your file references in Xcode.",
    usage="xchelper update-macos-packages [OPTIONS]",
    optional=(UPDATE_MACOS_PACKAGES_CHDIR, UPDATE_MACOS_PACKAGES_GENERATE, UPDATE_MACOS_PACKAGES_SYMLINK),
    kind=CommandKind.UPDATE_MACOS_PACKAGES,
)

# update-docker-packages

UPDATE_DOCKER_PACKAGES_CHDIR = _chdir("UPDATE_DOCKER_PACKAGES_CHDIR")
UPDATE_DOCKER_PACKAGES_IMAGE_NAME = CommandOption(
    keys=("-i", "--image-name", "UPDATE_DOCKER_PACKAGES_IMAGE_NAME"),
    description="The Docker image name to run the commands in.",
    requires_value=True,
    default=DEFAULT_IMAGE_NAME,
)
UPDATE_DOCKER_PACKAGES_VOLUME = CommandOption(
    keys=("-v", "--volume", "UPDATE_DOCKER_PACKAGES_PERSISTENT_VOLUME"),
    description="Subdirectory of .build that keeps the Docker packages apart from the macOS ones.",
    requires_value=True,
    default="Docker",
)
UPDATE_DOCKER_PACKAGES = CommandOption(
    keys=("update-docker-packages", "UPDATE_DOCKER_PACKAGES"),
    description="Update the packages for your Docker container in the persistent volume directory.",
    usage="xchelper update-docker-packages [OPTIONS]",
    required=(UPDATE_DOCKER_PACKAGES_IMAGE_NAME,),
    optional=(UPDATE_DOCKER_PACKAGES_CHDIR, UPDATE_DOCKER_PACKAGES_VOLUME),
    kind=CommandKind.UPDATE_DOCKER_PACKAGES,
)

# docker-build

DOCKER_BUILD_AFTER_SUCCESS = CommandOption(
    keys=("-s", "--after-success", "DOCKER_BUILD_AFTER_SUCCESS"),
    description=(
        "Only build after a successful macOS build. This helps reduce duplicate errors "
        "in Xcode from multiple platforms. Uses BUILD_DIR unless a directory is given."
    ),
    usage="-s [BUILD_DIR]",
    accepts_value=True,
    default_environment="BUILD_DIR",
)
DOCKER_BUILD_CHDIR = _chdir("DOCKER_BUILD_CHDIR")
DOCKER_BUILD_CONFIGURATION = CommandOption(
    keys=("-c", "--build-configuration", "DOCKER_BUILD_CONFIGURATION"),
    description="debug or release mode.",
    requires_value=True,
    default="debug",
)
DOCKER_BUILD_IMAGE_NAME = CommandOption(
    keys=("-i", "--image-name", "DOCKER_BUILD_IMAGE_NAME"),
    description="The Docker image name to run the commands in.",
    requires_value=True,
    default=DEFAULT_IMAGE_NAME,
)
DOCKER_BUILD_VOLUME = CommandOption(
    keys=("-v", "--persistent-volume", "DOCKER_BUILD_PERSISTENT_VOLUME"),
    description=(
        "Create a subdirectory in the .build directory. This separates the macOS build files "
        "from docker build files to make builds faster for each platform."
    ),
    usage="-v [PLATFORM_NAME] ie: -v android",
    requires_value=True,
)
DOCKER_BUILD = CommandOption(
    keys=("docker-build", "DOCKER_BUILD"),
    description="Build a Swift package in Linux and have the build errors appear in Xcode.",
    usage="xchelper docker-build [OPTIONS]",
    optional=(
        DOCKER_BUILD_CHDIR,
        DOCKER_BUILD_CONFIGURATION,
        DOCKER_BUILD_IMAGE_NAME,
        DOCKER_BUILD_VOLUME,
        DOCKER_BUILD_AFTER_SUCCESS,
    ),
    kind=CommandKind.DOCKER_BUILD,
)

# clean

CLEAN_CHDIR = _chdir("CLEAN_CHDIR")
CLEAN = CommandOption(
    keys=("clean", "CLEAN"),
    description="Run `swift package clean` on your package.",
    usage="xchelper clean [OPTIONS]",
    optional=(CLEAN_CHDIR,),
    kind=CommandKind.CLEAN,
)

# symlink-dependencies

SYMLINK_DEPENDENCIES_CHDIR = _chdir("SYMLINK_DEPENDENCIES_CHDIR")
SYMLINK_DEPENDENCIES = CommandOption(
    keys=("symlink-dependencies", "SYMLINK_DEPENDENCIES"),
    description=(
        "Create symbolic links for the dependency 'Packages' after `swift package update` "
        "so you don't have to generate a new Xcode project."
    ),
    usage="xchelper symlink-dependencies [OPTIONS]",
    optional=(SYMLINK_DEPENDENCIES_CHDIR,),
    kind=CommandKind.SYMLINK_DEPENDENCIES,
)

# create-archive

CREATE_ARCHIVE_FLAT_LIST = CommandOption(
    keys=("-f", "--flat-list", "CREATE_ARCHIVE_FLAT_LIST"),
    description="Put all the files in a flat list instead of maintaining directory structure.",
)
CREATE_ARCHIVE = CommandOption(
    keys=("create-archive", "CREATE_ARCHIVE"),
    description="Archive files with tar.",
    usage=(
        "xchelper create-archive ARCHIVE_PATH FILES [OPTIONS]. ARCHIVE_PATH the full path and "
        "filename for the archive to be created. FILES is a space separated list of full paths "
        "to the files you want to archive."
    ),
    optional=(CREATE_ARCHIVE_FLAT_LIST,),
    kind=CommandKind.CREATE_ARCHIVE,
    positional="PATH",
    positional_nargs="*",
)

# upload-archive

UPLOAD_ARCHIVE_BUCKET = CommandOption(
    keys=("-b", "--bucket", "UPLOAD_ARCHIVE_S3_BUCKET"),
    description="The bucket that you want to upload your archive to.",
    requires_value=True,
)
UPLOAD_ARCHIVE_REGION = CommandOption(
    keys=("-r", "--region", "UPLOAD_ARCHIVE_S3_REGION"),
    description="The bucket's region.",
    requires_value=True,
    default=DEFAULT_REGION,
)
UPLOAD_ARCHIVE_KEY = CommandOption(
    keys=("-k", "--key", "UPLOAD_ARCHIVE_S3_KEY"),
    description="The S3 access key for the bucket.",
    requires_value=True,
)
UPLOAD_ARCHIVE_SECRET = CommandOption(
    keys=("-s", "--secret", "UPLOAD_ARCHIVE_S3_SECRET"),
    description="The secret for the key.",
    requires_value=True,
)
UPLOAD_ARCHIVE_CREDENTIALS = CommandOption(
    keys=("-c", "--credentials", "UPLOAD_ARCHIVE_CREDENTIALS"),
    description="An AWS shared credentials file to use instead of a key and secret.",
    requires_value=True,
)
UPLOAD_ARCHIVE = CommandOption(
    keys=("upload-archive", "UPLOAD_ARCHIVE"),
    description="Upload an archive to S3.",
    usage=(
        "xchelper upload-archive ARCHIVE_PATH [OPTIONS]. ARCHIVE_PATH the path of the archive "
        "that you want to upload to S3."
    ),
    requires_value=True,
    required=(UPLOAD_ARCHIVE_BUCKET, UPLOAD_ARCHIVE_REGION),
    optional=(UPLOAD_ARCHIVE_KEY, UPLOAD_ARCHIVE_SECRET, UPLOAD_ARCHIVE_CREDENTIALS),
    kind=CommandKind.UPLOAD_ARCHIVE,
    positional="ARCHIVE_PATH",
    positional_nargs="?",
)

# git-tag

GIT_TAG_CHDIR = _chdir("GIT_TAG_CHDIR")
GIT_TAG_VERSION = CommandOption(
    keys=("-v", "--version", "GIT_TAG_VERSION"),
    description="Specify exactly what the version should be.",
    requires_value=True,
)
GIT_TAG_INCREMENT = CommandOption(
    keys=("-i", "--increment", "GIT_TAG_INCREMENT"),
    description="Automatically increment a portion of the repo's tag. Valid values are [major, minor, patch].",
    requires_value=True,
    default="patch",
)
GIT_TAG_PUSH = CommandOption(
    keys=("-p", "--push", "GIT_TAG_PUSH"),
    description="Push your tag with `git push && git push origin #.#.#`.",
)
GIT_TAG = CommandOption(
    keys=("git-tag", "GIT_TAG"),
    description="Update your package's git repo's semantic versioned tag.",
    usage="xchelper git-tag [OPTIONS]",
    optional=(GIT_TAG_CHDIR, GIT_TAG_VERSION, GIT_TAG_INCREMENT, GIT_TAG_PUSH),
    kind=CommandKind.GIT_TAG,
)

# create-xcarchive

CREATE_XCARCHIVE_NAME = CommandOption(
    keys=("-n", "--name", "CREATE_PLIST_APP_NAME"),
    description="The app name to include in the `Name` field of the Info.plist.",
    requires_value=True,
)
CREATE_XCARCHIVE_SCHEME = CommandOption(
    keys=("-s", "--scheme", "CREATE_PLIST_SCHEME"),
    description="The scheme name to include in the `SchemeName` field of the Info.plist.",
    requires_value=True,
)
CREATE_XCARCHIVE = CommandOption(
    keys=("create-xcarchive", "CREATE_XCARCHIVE"),
    description="Store your built binary in an xcarchive where Xcode's Organizer can keep track of it.",
    usage=(
        "xchelper create-xcarchive XCARCHIVE_PATH [OPTIONS]. XCARCHIVE_PATH is the directory "
        "(.xcarchive) where you want the Info.plist created in."
    ),
    requires_value=True,
    required=(CREATE_XCARCHIVE_NAME, CREATE_XCARCHIVE_SCHEME),
    kind=CommandKind.CREATE_XCARCHIVE,
    positional="XCARCHIVE_PATH",
    positional_nargs="?",
)


COMMANDS: tuple[CommandOption, ...] = (
    UPDATE_MACOS_PACKAGES,
    UPDATE_DOCKER_PACKAGES,
    DOCKER_BUILD,
    CLEAN,
    SYMLINK_DEPENDENCIES,
    CREATE_ARCHIVE,
    UPLOAD_ARCHIVE,
    GIT_TAG,
    CREATE_XCARCHIVE,
)

COMMAND_GROUPS: tuple[CommandOptionGroup, ...] = (CommandOptionGroup(description="Commands:", options=COMMANDS),)


def find_command(key: str) -> CommandOption | None:
    """Return the top-level command that has `key` among its keys (case-sensitive)."""
    for command in COMMANDS:
        if key in command.keys:
            return command
    return None


def environment_keys() -> list[str]:
    """Every uppercase key of every command and sub-option."""
    keys: list[str] = []
    for group in COMMAND_GROUPS:
        for command in group.options:
            for option in (command, *command.arguments):
                env_key = option.environment_key
                if env_key and env_key not in keys:
                    keys.append(env_key)
    return keys
