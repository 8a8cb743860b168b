"""
errors.py

Responsibility: Typed exceptions for xchelper.

Every exception carries an `ErrorKind` so callers can tell apart bad input,
failing external tools, and domain conditions (some of which have a fallback).
`cli.main` is the only place that turns these into an exit status.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence


class ErrorKind(Enum):
    ARGUMENT = "argument"
    EXTERNAL_TOOL = "external-tool"
    DOMAIN = "domain"


class XcHelperError(RuntimeError):
    """Base exception for xchelper failures."""

    kind: ErrorKind = ErrorKind.DOMAIN
    exit_code: int = 1


class ArgumentError(XcHelperError):
    """Raised when command line or environment input is missing or invalid."""

    kind = ErrorKind.ARGUMENT
    exit_code = 2


class MissingArgumentError(ArgumentError):
    """Raised when one or more required options were not supplied."""

    def __init__(self, missing: Sequence[Sequence[str]]) -> None:
        self.missing = [list(keys) for keys in missing]
        lines = [f"Missing required option: {', '.join(keys)}" for keys in self.missing]
        super().__init__("\n".join(lines))


class InvalidArgumentError(ArgumentError):
    pass


class UnknownCommandError(ArgumentError):
    def __init__(self, command: str | None, available: Sequence[str]) -> None:
        self.command = command
        self.available = list(available)
        head = f"Unknown command: {command}" if command else "No command given"
        super().__init__(f"{head}\nAvailable commands: {', '.join(self.available)}")


class ConfigError(ArgumentError):
    """Raised when the config file cannot be read or has an invalid shape."""


class ExternalToolError(XcHelperError):
    """Raised when an external tool exits with a non-zero status."""

    kind = ErrorKind.EXTERNAL_TOOL

    def __init__(self, message: str, *, command: Sequence[str] = (), returncode: int | None = None) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        if returncode and returncode > 0:
            self.exit_code = returncode


class BuildLogDecodeError(ExternalToolError):
    """Raised when an Xcode build log cannot be decompressed."""


class DomainError(XcHelperError):
    kind = ErrorKind.DOMAIN


class TagNotFoundError(DomainError):
    """Raised when a repository has no tag yet. `git-tag` recovers from this."""


class VersionParseError(DomainError):
    """Raised when a tag is not a `major.minor.patch` version."""
