"""
process.py

Responsibility: The single place where xchelper starts external processes.

`ProcessRunner.run` captures stdout/stderr and the exit status without
raising; `ProcessRunner.check` raises an ExternalToolError on failure.
Tests swap in a runner subclass that records commands instead of running them.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Sequence

from xchelper.errors import ExternalToolError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        logger.debug("Running %s (cwd=%s)", " ".join(args), cwd or ".")
        try:
            completed = subprocess.run(
                list(args),
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env) if env is not None else None,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except FileNotFoundError as e:
            raise ExternalToolError(f"Command not found: {args[0]}", command=args, returncode=127) from e
        return ProcessResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def check(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        """
        Run a command, raising an ExternalToolError on a non-zero exit.
        """
        result = self.run(args, cwd=cwd, env=env)
        if not result.ok:
            output = (result.stderr or result.stdout).strip()
            raise ExternalToolError(
                f"Command failed: {' '.join(args)}\n\n{output}".rstrip(),
                command=args,
                returncode=result.returncode,
            )
        return result
