"""
helper.py

Responsibility: Isolate every call into an external tool or SDK.

This module must be the only place that:
- Runs `swift`, `docker`, `tar` and `git` (through ProcessRunner)
- Talks to S3 (through boto3)
- Writes xcarchive skeletons (through renderer.py)

Command handlers validate arguments and then call exactly one of these
methods per step; tests replace the whole object with a recording fake.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Iterable, Sequence

import boto3
import botocore.session
from boto3.exceptions import Boto3Error
from botocore.exceptions import BotoCoreError, ClientError

from xchelper.errors import DomainError, ExternalToolError
from xchelper.process import ProcessRunner
from xchelper.renderer import write_template
from xchelper.versioning import GitTagComponent, GitTagManager

logger = logging.getLogger(__name__)

PACKAGES_DIR = "Packages"
CHECKOUTS_DIR = Path(".build") / "checkouts"
XCARCHIVE_SUFFIX = ".xcarchive"

# `swift-nio-1.2.3` / `Kitura-6b0f54a` -> `swift-nio` / `Kitura`
_CHECKOUT_SUFFIX_RE = re.compile(r"-(?:\d+(?:\.\d+)*|[0-9a-f]{7,40})$")


class BuildConfiguration(Enum):
    DEBUG = "debug"
    RELEASE = "release"

    @classmethod
    def parse(cls, value: str) -> "BuildConfiguration":
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.DEBUG


class DockerRunOption(Enum):
    REMOVE_WHEN_DONE = "--rm"


def dependency_link_name(checkout_name: str) -> str:
    return _CHECKOUT_SUFFIX_RE.sub("", checkout_name) or checkout_name


def _default_session_factory(**kwargs: Any) -> Any:
    return boto3.session.Session(**kwargs)


class XcodeHelper:
    def __init__(
        self,
        runner: ProcessRunner | None = None,
        *,
        session_factory: Callable[..., Any] = _default_session_factory,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.runner = runner or ProcessRunner()
        self.tags = GitTagManager(self.runner)
        self._session_factory = session_factory
        self._now = now or (lambda: datetime.now(timezone.utc))

    # Swift package manager

    def update_macos_packages(self, path: str) -> None:
        self.runner.check(["swift", "package", "update"], cwd=path)

    def generate_xcode_project(self, path: str) -> None:
        self.runner.check(["swift", "package", "generate-xcodeproj"], cwd=path)

    def clean(self, path: str) -> None:
        self.runner.check(["swift", "package", "clean"], cwd=path)

    def symlink_dependencies(self, path: str) -> list[Path]:
        """
        Link `Packages/<name>` to each checkout in `.build/checkouts` so the
        Xcode project's dependency references keep resolving after an update.
        """
        root = Path(path)
        checkouts = root / CHECKOUTS_DIR
        if not checkouts.is_dir():
            raise DomainError(f"No package checkouts in {checkouts}. Run `swift package update` first.")

        packages = root / PACKAGES_DIR
        packages.mkdir(exist_ok=True)

        links: list[Path] = []
        for checkout in sorted(p for p in checkouts.iterdir() if p.is_dir()):
            link = packages / dependency_link_name(checkout.name)
            if link.is_symlink():
                link.unlink()
            elif link.exists():
                logger.warning("Not replacing %s, it is not a symbolic link", link)
                continue
            link.symlink_to(os.path.relpath(checkout, packages), target_is_directory=True)
            logger.debug("Linked %s -> %s", link, checkout)
            links.append(link)
        return links

    # Docker

    def _docker_run(
        self,
        path: str,
        image: str,
        command: Sequence[str],
        options: Iterable[DockerRunOption] = (DockerRunOption.REMOVE_WHEN_DONE,),
    ) -> None:
        args = ["docker", "run"]
        args.extend(option.value for option in options)
        args.extend(["-v", f"{path}:{path}", "-w", path, image])
        args.extend(command)
        self.runner.check(args, cwd=path)

    def update_docker_packages(self, path: str, image: str, volume: str) -> None:
        self._docker_run(
            path,
            image,
            ["swift", "package", "update", "--build-path", str(Path(".build") / volume)],
        )

    def docker_build(
        self,
        path: str,
        options: Iterable[DockerRunOption],
        configuration: BuildConfiguration,
        image: str,
        volume: str | None = None,
    ) -> None:
        command = ["swift", "build", "-c", configuration.value]
        if volume:
            command.extend(["--build-path", str(Path(".build") / volume)])
        self._docker_run(path, image, command, options)

    # Archives

    def create_archive(self, path: str, files: Sequence[str], flat_list: bool = False) -> None:
        archive = Path(path)
        archive.parent.mkdir(parents=True, exist_ok=True)
        mode = "-czf" if archive.name.endswith((".gz", ".tgz")) else "-cf"
        args = ["tar", mode, str(archive)]
        for file in files:
            if flat_list:
                file_path = Path(file)
                args.extend(["-C", str(file_path.parent), file_path.name])
            else:
                args.append(file)
        self.runner.check(args)

    def upload_archive(
        self,
        path: str,
        bucket: str,
        region: str,
        *,
        key: str | None = None,
        secret: str | None = None,
        credentials_file: str | None = None,
    ) -> str:
        """Upload an archive to S3 under its file name and return the object key."""
        archive = Path(path)
        if not archive.is_file():
            raise DomainError(f"Archive does not exist: {archive}")

        if key and secret:
            session = self._session_factory(
                aws_access_key_id=key,
                aws_secret_access_key=secret,
                region_name=region,
            )
        else:
            core = botocore.session.Session()
            core.set_config_variable("credentials_file", str(Path(credentials_file or "").expanduser()))
            session = self._session_factory(botocore_session=core, region_name=region)

        object_key = archive.name
        logger.debug("Uploading %s to s3://%s/%s", archive, bucket, object_key)
        try:
            session.client("s3").upload_file(str(archive), bucket, object_key)
        except (Boto3Error, BotoCoreError, ClientError) as e:
            raise ExternalToolError(f"Upload to s3://{bucket}/{object_key} failed: {e}") from e
        return object_key

    # Git

    def git_tag(self, version: str, repo: str) -> None:
        self.tags.tag(version, repo)

    def increment_git_tag(self, component: GitTagComponent, repo: str) -> str:
        return self.tags.increment(component, repo)

    def push_git_tag(self, tag: str, repo: str) -> None:
        self.tags.push(tag, repo)

    # Xcode Organizer

    def create_xcarchive(self, path: str, name: str, scheme: str) -> str:
        destination = Path(path)
        if destination.suffix != XCARCHIVE_SUFFIX:
            destination = destination / f"{name}{XCARCHIVE_SUFFIX}"
        write_template(
            "xcarchive/Info.plist",
            destination / "Info.plist",
            {
                "name": name,
                "scheme": scheme,
                "creation_date": self._now().strftime("%Y-%m-%dT%H:%M:%SZ"),
            },
        )
        (destination / "Products").mkdir(exist_ok=True)
        return str(destination)
