"""
commands.py

Responsibility: One handler per CommandKind.

A handler reads what it needs from the ArgumentIndex, validates it, and calls
into `XcodeHelper`. It may return a single line that the dispatcher prints
(the resolved tag, the created xcarchive path).
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from xchelper import options as opt
from xchelper.arguments import ArgumentIndex, resolve_source_path
from xchelper.build_log import build_log_directory, last_build_was_success
from xchelper.errors import InvalidArgumentError, MissingArgumentError, TagNotFoundError
from xchelper.helper import BuildConfiguration, DockerRunOption, XcodeHelper
from xchelper.options import CommandKind
from xchelper.versioning import INITIAL_TAG, GitTagComponent

logger = logging.getLogger(__name__)

Handler = Callable[[ArgumentIndex, XcodeHelper], Optional[str]]


def _first(index: ArgumentIndex, option: opt.CommandOption) -> str | None:
    values = index.get(option.name)
    return values[0] if values else None


def _require(index: ArgumentIndex, option: opt.CommandOption) -> str:
    value = _first(index, option)
    if value is None:
        raise MissingArgumentError([option.keys])
    return value


def handle_update_macos_packages(index: ArgumentIndex, helper: XcodeHelper) -> None:
    source_path = resolve_source_path(index, opt.UPDATE_MACOS_PACKAGES_CHDIR.name)
    helper.update_macos_packages(source_path)
    if opt.UPDATE_MACOS_PACKAGES_GENERATE.name in index:
        helper.generate_xcode_project(source_path)
    if opt.UPDATE_MACOS_PACKAGES_SYMLINK.name in index:
        helper.symlink_dependencies(source_path)


def handle_update_docker_packages(index: ArgumentIndex, helper: XcodeHelper) -> None:
    source_path = resolve_source_path(index, opt.UPDATE_DOCKER_PACKAGES_CHDIR.name)
    image = _require(index, opt.UPDATE_DOCKER_PACKAGES_IMAGE_NAME)
    volume = _require(index, opt.UPDATE_DOCKER_PACKAGES_VOLUME)
    helper.update_docker_packages(source_path, image, volume)


def handle_docker_build(index: ArgumentIndex, helper: XcodeHelper) -> None:
    source_path = resolve_source_path(index, opt.DOCKER_BUILD_CHDIR.name)
    configuration = BuildConfiguration.parse(_require(index, opt.DOCKER_BUILD_CONFIGURATION))
    image = _require(index, opt.DOCKER_BUILD_IMAGE_NAME)
    volume = _first(index, opt.DOCKER_BUILD_VOLUME)

    if opt.DOCKER_BUILD_AFTER_SUCCESS.name in index:
        build_dir = _first(index, opt.DOCKER_BUILD_AFTER_SUCCESS)
        if build_dir is None:
            raise InvalidArgumentError(
                f"{', '.join(opt.DOCKER_BUILD_AFTER_SUCCESS.keys)} needs a build directory (or BUILD_DIR set)."
            )
        log_dir = build_log_directory(build_dir)
        if not last_build_was_success(log_dir, helper.runner):
            logger.info("Last Xcode build did not succeed, skipping Docker build")
            return

    helper.docker_build(
        source_path,
        [DockerRunOption.REMOVE_WHEN_DONE],
        configuration,
        image,
        volume,
    )


def handle_clean(index: ArgumentIndex, helper: XcodeHelper) -> None:
    helper.clean(resolve_source_path(index, opt.CLEAN_CHDIR.name))


def handle_symlink_dependencies(index: ArgumentIndex, helper: XcodeHelper) -> None:
    helper.symlink_dependencies(resolve_source_path(index, opt.SYMLINK_DEPENDENCIES_CHDIR.name))


def handle_create_archive(index: ArgumentIndex, helper: XcodeHelper) -> None:
    paths = index.get(opt.CREATE_ARCHIVE.name) or []
    if not paths:
        raise InvalidArgumentError("You didn't provide the archive path.")
    if len(paths) < 2:
        raise InvalidArgumentError("You didn't provide any files to archive.")
    archive_path, files = paths[0], paths[1:]
    flat_list = opt.CREATE_ARCHIVE_FLAT_LIST.name in index
    helper.create_archive(archive_path, files, flat_list)


def handle_upload_archive(index: ArgumentIndex, helper: XcodeHelper) -> None:
    archive_path = _first(index, opt.UPLOAD_ARCHIVE)
    if archive_path is None:
        raise InvalidArgumentError("You didn't provide the path to the archive that you want to upload.")
    bucket = _require(index, opt.UPLOAD_ARCHIVE_BUCKET)
    region = _require(index, opt.UPLOAD_ARCHIVE_REGION)

    key = _first(index, opt.UPLOAD_ARCHIVE_KEY)
    credentials_file = _first(index, opt.UPLOAD_ARCHIVE_CREDENTIALS)
    if key is not None:
        secret = _first(index, opt.UPLOAD_ARCHIVE_SECRET)
        if secret is None:
            raise InvalidArgumentError("You didn't provide the secret for the key.")
        helper.upload_archive(archive_path, bucket, region, key=key, secret=secret)
    elif credentials_file is not None:
        helper.upload_archive(archive_path, bucket, region, credentials_file=credentials_file)
    else:
        raise InvalidArgumentError("You must provide either a credentials file or a key and secret")


def handle_git_tag(index: ArgumentIndex, helper: XcodeHelper) -> str:
    source_path = resolve_source_path(index, opt.GIT_TAG_CHDIR.name)
    version = _first(index, opt.GIT_TAG_VERSION)

    if version is not None:
        helper.git_tag(version, source_path)
        tag = version
    else:
        component_string = _first(index, opt.GIT_TAG_INCREMENT) or GitTagComponent.PATCH.value
        component = GitTagComponent.parse(component_string)
        if component is None:
            raise InvalidArgumentError(
                f"Unknown value {component_string} for {', '.join(opt.GIT_TAG_INCREMENT.keys)}. "
                "Valid values are [major, minor, patch]"
            )
        try:
            tag = helper.increment_git_tag(component, source_path)
        except TagNotFoundError:
            logger.info("No existing tag, starting at %s", INITIAL_TAG)
            helper.git_tag(INITIAL_TAG, source_path)
            tag = INITIAL_TAG

    if opt.GIT_TAG_PUSH.name in index:
        helper.push_git_tag(tag, source_path)
    return tag


def handle_create_xcarchive(index: ArgumentIndex, helper: XcodeHelper) -> str:
    archive_path = _first(index, opt.CREATE_XCARCHIVE)
    if archive_path is None:
        raise InvalidArgumentError("You didn't provide the path to the xcarchive.")
    name = _require(index, opt.CREATE_XCARCHIVE_NAME)
    scheme = _require(index, opt.CREATE_XCARCHIVE_SCHEME)
    return helper.create_xcarchive(archive_path, name, scheme)


HANDLERS: dict[CommandKind, Handler] = {
    CommandKind.UPDATE_MACOS_PACKAGES: handle_update_macos_packages,
    CommandKind.UPDATE_DOCKER_PACKAGES: handle_update_docker_packages,
    CommandKind.DOCKER_BUILD: handle_docker_build,
    CommandKind.CLEAN: handle_clean,
    CommandKind.SYMLINK_DEPENDENCIES: handle_symlink_dependencies,
    CommandKind.CREATE_ARCHIVE: handle_create_archive,
    CommandKind.UPLOAD_ARCHIVE: handle_upload_archive,
    CommandKind.GIT_TAG: handle_git_tag,
    CommandKind.CREATE_XCARCHIVE: handle_create_xcarchive,
}
