from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

from xchelper.errors import TagNotFoundError
from xchelper.process import ProcessResult, ProcessRunner
from xchelper.versioning import SemanticVersion


class FakeRunner(ProcessRunner):
    """Records commands and answers them from `responses` (keyed by argv prefix)."""

    def __init__(self, responses: Mapping[tuple[str, ...], tuple[int, str, str]] | None = None) -> None:
        self.calls: list[tuple[list[str], str | None]] = []
        self.envs: list[dict[str, str] | None] = []
        self.responses = dict(responses or {})

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        self.calls.append((list(args), str(cwd) if cwd is not None else None))
        self.envs.append(dict(env) if env is not None else None)
        for prefix, (returncode, stdout, stderr) in self.responses.items():
            if tuple(args[: len(prefix)]) == prefix:
                return ProcessResult(args=tuple(args), returncode=returncode, stdout=stdout, stderr=stderr)
        return ProcessResult(args=tuple(args), returncode=0)

    @property
    def commands(self) -> list[list[str]]:
        return [args for args, _cwd in self.calls]


class RecordingHelper:
    """Stands in for XcodeHelper and records every collaborator call."""

    def __init__(self, runner: FakeRunner | None = None, *, latest_tag: str | None = "1.4.7") -> None:
        self.runner = runner or FakeRunner()
        self.calls: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self.latest_tag = latest_tag

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))

    @property
    def names(self) -> list[str]:
        return [name for name, _args, _kwargs in self.calls]

    def update_macos_packages(self, path: str) -> None:
        self._record("update_macos_packages", path)

    def generate_xcode_project(self, path: str) -> None:
        self._record("generate_xcode_project", path)

    def symlink_dependencies(self, path: str) -> list[Path]:
        self._record("symlink_dependencies", path)
        return []

    def update_docker_packages(self, path: str, image: str, volume: str) -> None:
        self._record("update_docker_packages", path, image, volume)

    def docker_build(self, path, options, configuration, image, volume=None) -> None:
        self._record("docker_build", path, list(options), configuration, image, volume)

    def clean(self, path: str) -> None:
        self._record("clean", path)

    def create_archive(self, path: str, files: Sequence[str], flat_list: bool = False) -> None:
        self._record("create_archive", path, list(files), flat_list)

    def upload_archive(self, path: str, bucket: str, region: str, **kwargs: Any) -> str:
        self._record("upload_archive", path, bucket, region, **kwargs)
        return Path(path).name

    def git_tag(self, version: str, repo: str) -> None:
        self._record("git_tag", version, repo)

    def increment_git_tag(self, component, repo: str) -> str:
        self._record("increment_git_tag", component, repo)
        if self.latest_tag is None:
            raise TagNotFoundError(f"No tag found in {repo}")
        return str(SemanticVersion.parse(self.latest_tag).increment(component))

    def push_git_tag(self, tag: str, repo: str) -> None:
        self._record("push_git_tag", tag, repo)

    def create_xcarchive(self, path: str, name: str, scheme: str) -> str:
        self._record("create_xcarchive", path, name, scheme)
        return path
