from __future__ import annotations

import os
from pathlib import Path

import pytest

import xchelper.cli as cli
from test_helpers import FakeRunner, RecordingHelper
from xchelper.helper import BuildConfiguration, DockerRunOption
from xchelper.versioning import GitTagComponent


def _run(helper: RecordingHelper, *args: str, environ: dict[str, str] | None = None) -> int:
    return cli.main(list(args), environ=environ or {}, helper=helper)


def test_create_archive_without_files_fails(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = _run(recording_helper, "create-archive", "/tmp/out.tar")

    assert exit_code == 2
    assert "You didn't provide any files to archive." in capsys.readouterr().err
    assert recording_helper.calls == []


def test_create_archive_without_path_fails(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(recording_helper, "create-archive") == 2
    assert "archive path" in capsys.readouterr().err


def test_create_archive_passes_exactly_the_files(recording_helper: RecordingHelper) -> None:
    assert _run(recording_helper, "create-archive", "/tmp/out.tar", "/build/App") == 0

    assert recording_helper.calls == [("create_archive", ("/tmp/out.tar", ["/build/App"], False), {})]


def test_create_archive_flat_list(recording_helper: RecordingHelper) -> None:
    assert _run(recording_helper, "create-archive", "-f", "/tmp/out.tar", "/a/x", "/b/y") == 0

    assert recording_helper.calls == [("create_archive", ("/tmp/out.tar", ["/a/x", "/b/y"], True), {})]


def test_upload_archive_needs_credentials(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = _run(recording_helper, "upload-archive", "/tmp/out.tar", "-b", "releases", "-r", "eu-west-1")

    assert exit_code == 2
    assert "either a credentials file or a key and secret" in capsys.readouterr().err
    assert recording_helper.calls == []


def test_upload_archive_key_without_secret_fails(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    exit_code = _run(recording_helper, "upload-archive", "/tmp/out.tar", "-b", "releases", "-k", "AKIA")

    assert exit_code == 2
    assert "secret" in capsys.readouterr().err


def test_upload_archive_with_key_and_secret(recording_helper: RecordingHelper) -> None:
    exit_code = _run(recording_helper, "upload-archive", "/tmp/out.tar", "-b", "releases", "-k", "AKIA", "-s", "shh")

    assert exit_code == 0
    assert recording_helper.calls == [
        ("upload_archive", ("/tmp/out.tar", "releases", "us-east-1"), {"key": "AKIA", "secret": "shh"})
    ]


def test_upload_archive_with_credentials_file_from_environment(recording_helper: RecordingHelper) -> None:
    environ = {
        "UPLOAD_ARCHIVE_S3_BUCKET": "releases",
        "UPLOAD_ARCHIVE_CREDENTIALS": "~/.aws/credentials",
    }

    assert _run(recording_helper, "upload-archive", "/tmp/out.tar", environ=environ) == 0
    assert recording_helper.calls == [
        ("upload_archive", ("/tmp/out.tar", "releases", "us-east-1"), {"credentials_file": "~/.aws/credentials"})
    ]


def test_upload_archive_missing_bucket_is_reported(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(recording_helper, "upload-archive", "/tmp/out.tar", "-k", "a", "-s", "b") == 2
    assert "-b, --bucket, UPLOAD_ARCHIVE_S3_BUCKET" in capsys.readouterr().err


def test_git_tag_increments_patch_by_default(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str], tmp_path: Path
) -> None:
    assert _run(recording_helper, "git-tag", "-d", str(tmp_path)) == 0

    assert capsys.readouterr().out.strip() == "1.4.8"
    assert recording_helper.calls == [("increment_git_tag", (GitTagComponent.PATCH, str(tmp_path.resolve())), {})]


def test_git_tag_explicit_version_is_used_verbatim(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(recording_helper, "git-tag", "--version", "v3-rc") == 0

    assert capsys.readouterr().out.strip() == "v3-rc"
    assert recording_helper.names == ["git_tag"]


def test_git_tag_without_previous_tag_starts_at_0_0_1(capsys: pytest.CaptureFixture[str]) -> None:
    helper = RecordingHelper(latest_tag=None)

    assert _run(helper, "git-tag", "-i", "major") == 0

    captured = capsys.readouterr()
    assert captured.out.strip() == "0.0.1"
    assert captured.err == ""
    assert helper.names == ["increment_git_tag", "git_tag"]
    assert helper.calls[-1][1][0] == "0.0.1"


def test_git_tag_push_after_tag(recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(recording_helper, "git-tag", "-i", "minor", "-p") == 0

    assert capsys.readouterr().out.strip() == "1.5.0"
    assert recording_helper.names == ["increment_git_tag", "push_git_tag"]
    assert recording_helper.calls[-1][1][0] == "1.5.0"


def test_git_tag_rejects_unknown_component(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(recording_helper, "git-tag", "-i", "build") == 2

    assert "Unknown value build" in capsys.readouterr().err
    assert recording_helper.calls == []


def test_docker_build_uses_defaults(recording_helper: RecordingHelper, tmp_path: Path) -> None:
    assert _run(recording_helper, "docker-build", "-d", str(tmp_path), "-c", "RELEASE", "-v", "linux") == 0

    assert recording_helper.calls == [
        (
            "docker_build",
            (
                str(tmp_path.resolve()),
                [DockerRunOption.REMOVE_WHEN_DONE],
                BuildConfiguration.RELEASE,
                "saltzmanjoelh/swiftubuntu",
                "linux",
            ),
            {},
        )
    ]


def test_docker_build_skipped_after_failed_xcode_build() -> None:
    runner = FakeRunner(
        {
            ("/bin/ls",): (0, "last.xcactivitylog\n", ""),
            ("gunzip",): (0, "Build failed", ""),
        }
    )
    helper = RecordingHelper(runner)

    exit_code = _run(helper, "docker-build", "-s", environ={"BUILD_DIR": "/dd/App/Build/Products"})

    assert exit_code == 0
    assert helper.calls == []
    assert runner.commands[0] == ["/bin/ls", "-t1", os.path.join("/dd/App", "Logs", "Build")]


def test_docker_build_runs_after_successful_xcode_build() -> None:
    runner = FakeRunner(
        {
            ("/bin/ls",): (0, "last.xcactivitylog\n", ""),
            ("gunzip",): (0, "Build succeeded", ""),
        }
    )
    helper = RecordingHelper(runner)

    assert _run(helper, "docker-build", "--after-success", environ={"BUILD_DIR": "/dd/App/Build/Products"}) == 0
    assert helper.names == ["docker_build"]


def test_docker_build_after_success_uses_given_directory() -> None:
    runner = FakeRunner({("/bin/ls",): (0, "", "")})
    helper = RecordingHelper(runner)

    exit_code = _run(
        helper, "docker-build", "-s", "/x/App/Build/Products", environ={"BUILD_DIR": "/dd/App/Build/Products"}
    )

    assert exit_code == 0
    assert helper.calls == []
    assert runner.commands == [["/bin/ls", "-t1", os.path.join("/x/App", "Logs", "Build")]]


def test_docker_build_after_success_directory_from_environment() -> None:
    runner = FakeRunner({("/bin/ls",): (0, "", "")})
    helper = RecordingHelper(runner)

    exit_code = _run(
        helper,
        "docker-build",
        environ={"DOCKER_BUILD_AFTER_SUCCESS": "/x/App/Build/Products", "BUILD_DIR": "/dd/App/Build/Products"},
    )

    assert exit_code == 0
    assert helper.calls == []
    assert runner.commands == [["/bin/ls", "-t1", os.path.join("/x/App", "Logs", "Build")]]


def test_docker_build_after_success_needs_a_directory(
    recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(recording_helper, "docker-build", "-s") == 2
    assert "BUILD_DIR" in capsys.readouterr().err


def test_update_macos_packages_then_generate_and_symlink(recording_helper: RecordingHelper, tmp_path: Path) -> None:
    assert _run(recording_helper, "update-macos-packages", "-d", str(tmp_path), "-g", "-s") == 0

    assert recording_helper.names == ["update_macos_packages", "generate_xcode_project", "symlink_dependencies"]


def test_update_docker_packages_defaults(recording_helper: RecordingHelper, tmp_path: Path) -> None:
    assert _run(recording_helper, "update-docker-packages", "-d", str(tmp_path)) == 0

    assert recording_helper.calls == [
        ("update_docker_packages", (str(tmp_path.resolve()), "saltzmanjoelh/swiftubuntu", "Docker"), {})
    ]


def test_clean_and_symlink_use_current_directory(
    recording_helper: RecordingHelper, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    assert _run(recording_helper, "clean") == 0
    assert _run(recording_helper, "symlink-dependencies") == 0

    assert recording_helper.calls == [
        ("clean", (os.getcwd(),), {}),
        ("symlink_dependencies", (os.getcwd(),), {}),
    ]


def test_create_xcarchive_prints_path(recording_helper: RecordingHelper, capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = _run(recording_helper, "create-xcarchive", "/tmp/App.xcarchive", "-n", "App", "-s", "App-Linux")

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "/tmp/App.xcarchive"
    assert recording_helper.calls == [("create_xcarchive", ("/tmp/App.xcarchive", "App", "App-Linux"), {})]
