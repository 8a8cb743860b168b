"""
versioning.py

Responsibility: Semantic version tags for a git repository.

Reads the latest tag with `git describe`, computes the next
`major.minor.patch` tag, creates it, and optionally pushes it.
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from enum import Enum

from xchelper.errors import ExternalToolError, TagNotFoundError, VersionParseError
from xchelper.process import ProcessRunner

logger = logging.getLogger(__name__)

INITIAL_TAG = "0.0.1"
DEFAULT_REMOTE = "origin"

_VERSION_RE = re.compile(r"^\s*(\d+)\.(\d+)\.(\d+)\s*$")
_NO_TAG_MARKERS = ("no names found", "no tags can describe", "cannot describe")
# git only prints the English markers under the C locale.
_C_LOCALE = {"LC_ALL": "C"}


class GitTagComponent(Enum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    @classmethod
    def parse(cls, value: str) -> "GitTagComponent | None":
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, tag: str) -> "SemanticVersion":
        m = _VERSION_RE.match(tag)
        if m is None:
            raise VersionParseError(f"Tag is not a major.minor.patch version: {tag!r}")
        return cls(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    def increment(self, component: GitTagComponent) -> "SemanticVersion":
        if component is GitTagComponent.MAJOR:
            return SemanticVersion(self.major + 1, 0, 0)
        if component is GitTagComponent.MINOR:
            return SemanticVersion(self.major, self.minor + 1, 0)
        return SemanticVersion(self.major, self.minor, self.patch + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


class GitTagManager:
    def __init__(self, runner: ProcessRunner, remote: str = DEFAULT_REMOTE) -> None:
        self._runner = runner
        self._remote = remote

    def latest_tag(self, repo: str) -> str:
        """
        Most recent tag reachable from HEAD.

        Raises TagNotFoundError when the repository has no tags yet.
        """
        result = self._runner.run(
            ["git", "describe", "--abbrev=0", "--tags"],
            cwd=repo,
            env={**os.environ, **_C_LOCALE},
        )
        if not result.ok:
            message = result.stderr.strip()
            if any(marker in message.lower() for marker in _NO_TAG_MARKERS):
                raise TagNotFoundError(f"No tag found in {repo}")
            raise ExternalToolError(
                f"Command failed: {' '.join(result.args)}\n\n{message}".rstrip(),
                command=result.args,
                returncode=result.returncode,
            )
        tag = result.stdout.strip()
        if not tag:
            raise TagNotFoundError(f"No tag found in {repo}")
        return tag

    def tag(self, version: str, repo: str) -> None:
        self._runner.check(["git", "tag", version], cwd=repo)

    def increment(self, component: GitTagComponent, repo: str) -> str:
        current = SemanticVersion.parse(self.latest_tag(repo))
        new_tag = str(current.increment(component))
        logger.debug("Incrementing %s of %s -> %s", component.value, current, new_tag)
        self.tag(new_tag, repo)
        return new_tag

    def push(self, tag: str, repo: str) -> None:
        """Push the current branch, then the tag. Either failure is raised."""
        self._runner.check(["git", "push"], cwd=repo)
        self._runner.check(["git", "push", self._remote, tag], cwd=repo)
