"""
build_log.py

Responsibility: Decide whether the most recent Xcode build succeeded.

Xcode sets BUILD_DIR to `.../<target>/Build/Products`. Its build logs live in
`.../<target>/Logs/Build` as gzip-compressed `.xcactivitylog` files. The last
word of a decompressed log is the build status, and only the exact trailing
string "succeeded" counts as success.
"""

from __future__ import annotations

import logging
from pathlib import Path

from xchelper.errors import BuildLogDecodeError
from xchelper.process import ProcessRunner

logger = logging.getLogger(__name__)

BUILD_LOG_SUFFIX = ".xcactivitylog"
SUCCESS_MARKER = "succeeded"


def build_log_directory(build_products_dir: str | Path) -> Path:
    """`.../target/Build/Products` -> `.../target/Logs/Build`."""
    return Path(build_products_dir).parent.parent / "Logs" / "Build"


def last_build_log(log_dir: str | Path, runner: ProcessRunner) -> Path | None:
    """Newest `.xcactivitylog` in `log_dir`, or None when there is none."""
    result = runner.run(["/bin/ls", "-t1", str(log_dir)])
    if not result.ok:
        logger.debug("Could not list %s: %s", log_dir, result.stderr.strip())
        return None
    for line in result.stdout.splitlines():
        name = line.strip()
        if name.endswith(BUILD_LOG_SUFFIX):
            return Path(log_dir) / name
    return None


def decode_build_log(log_path: str | Path, runner: ProcessRunner) -> str:
    """Decompress a build log and return its final 9 characters."""
    result = runner.run(["gunzip", "-cd", str(log_path)])
    if not result.ok:
        message = result.stderr.strip() or f"Could not decompress {log_path}"
        raise BuildLogDecodeError(message, command=result.args, returncode=result.returncode)
    return result.stdout[-len(SUCCESS_MARKER) :]


def last_build_was_success(log_dir: str | Path, runner: ProcessRunner) -> bool:
    log_path = last_build_log(log_dir, runner)
    if log_path is None:
        logger.info("No build log found in %s", log_dir)
        return False
    return decode_build_log(log_path, runner) == SUCCESS_MARKER
