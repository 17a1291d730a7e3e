"""Tests for ghr.release.service."""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path

import pytest

from ghr.core.config import ReleaseConfig
from ghr.core.result import Err, Ok
from ghr.output.console import MockConsole
from ghr.release.model import AssetSummary
from ghr.release.service import PublishOutcome, publish_release, write_github_outputs

from ._fake import FakeReleaseDirectory, make_release


def _config(**overrides: object) -> ReleaseConfig:
    base = ReleaseConfig(
        github_token="t0ken",
        github_ref="refs/tags/v1.0.0",
        github_repository="octo/app",
    )
    return replace(base, **overrides)  # type: ignore[arg-type]


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "app.zip").write_bytes(b"zip")
    (tmp_path / "dist" / "app.sha256").write_text("abc  app.zip\n", encoding="utf-8")
    return tmp_path


def test_requires_a_tag(workspace: Path) -> None:
    directory = FakeReleaseDirectory()

    result = publish_release(
        _config(github_ref="refs/heads/main"),
        directory,
        console=MockConsole(),
        root=workspace,
    )

    assert isinstance(result, Err)
    assert result.error.kind == "missing_tag"
    assert directory.calls == []


def test_creates_release_and_uploads_files(workspace: Path) -> None:
    directory = FakeReleaseDirectory()
    console = MockConsole()

    result = publish_release(
        _config(input_files=("dist/*",)),
        directory,
        console=console,
        root=workspace,
    )

    assert isinstance(result, Ok)
    assert result.value.release.tag_name == "v1.0.0"
    assert [a["name"] for a in result.value.assets] == ["app.sha256", "app.zip"]
    assert sorted(a.name for a in directory.assets) == ["app.sha256", "app.zip"]
    assert console.find("Release ready at https://github.test/octo/app/releases/tag/v1.0.0")


def test_replaces_assets_already_on_release(workspace: Path) -> None:
    existing = AssetSummary(id=5, name="app.zip")
    directory = FakeReleaseDirectory(
        releases=[make_release(3, "v1.0.0", assets=(existing,))],
        assets=[existing],
    )

    result = publish_release(
        _config(input_files=("dist/app.zip",)),
        directory,
        console=MockConsole(),
        root=workspace,
    )

    assert isinstance(result, Ok)
    assert directory.calls_named("delete_asset") == [("delete_asset", "octo", "app", 5)]
    assert [a.name for a in directory.assets] == ["app.zip"]


def test_same_name_twice_in_one_run_leaves_one_asset(workspace: Path) -> None:
    (workspace / "other").mkdir()
    (workspace / "other" / "app.zip").write_bytes(b"other zip")
    directory = FakeReleaseDirectory()

    result = publish_release(
        _config(input_files=("dist/app.zip", "other/app.zip")),
        directory,
        console=MockConsole(),
        root=workspace,
    )

    assert isinstance(result, Ok)
    assert [a.name for a in directory.assets] == ["app.zip"]
    assert len(directory.calls_named("delete_asset")) == 1


def test_unmatched_pattern_warns(workspace: Path) -> None:
    console = MockConsole()

    result = publish_release(
        _config(input_files=("dist/*.zip", "build/*.exe")),
        FakeReleaseDirectory(),
        console=console,
        root=workspace,
    )

    assert isinstance(result, Ok)
    assert console.find("Pattern 'build/*.exe' does not match any files.")


def test_unmatched_pattern_fails_when_requested(workspace: Path) -> None:
    directory = FakeReleaseDirectory()

    result = publish_release(
        _config(input_files=("build/*.exe",), input_fail_on_unmatched_files=True),
        directory,
        console=MockConsole(),
        root=workspace,
    )

    assert isinstance(result, Err)
    assert result.error.kind == "unmatched_files"
    assert result.error.hint == "build/*.exe"
    assert directory.calls == []


def test_upload_failure_stops_the_run(workspace: Path) -> None:
    directory = FakeReleaseDirectory(upload_status=500)

    result = publish_release(
        _config(input_files=("dist/*",)),
        directory,
        console=MockConsole(),
        root=workspace,
    )

    assert isinstance(result, Err)
    assert result.error.kind == "upload_failed"
    assert len(directory.calls_named("upload_asset")) == 1


def test_reconcile_failure_skips_uploads(workspace: Path) -> None:
    directory = FakeReleaseDirectory()

    result = publish_release(
        _config(input_files=("dist/*",)),
        directory,
        console=MockConsole(),
        root=workspace,
        max_retries=0,
    )

    assert isinstance(result, Err)
    assert result.error.kind == "exhausted_retries"
    assert directory.calls_named("upload_asset") == []


def test_write_github_outputs(tmp_path: Path) -> None:
    release = make_release(12, "v1.0.0")
    outcome = PublishOutcome(release=release, assets=({"id": 1, "name": "app.zip"},))
    output = tmp_path / "gh" / "output"

    write_github_outputs(outcome, output)

    lines = output.read_text(encoding="utf-8").splitlines()
    assert lines[0] == f"url={release.html_url}"
    assert lines[1] == "id=12"
    assert lines[2] == f"upload_url={release.upload_url}"
    assert lines[3].startswith("assets<<ghr_")
    delimiter = lines[3].removeprefix("assets<<")
    assert json.loads(lines[4]) == [{"id": 1, "name": "app.zip"}]
    assert lines[5] == delimiter


def test_write_github_outputs_appends(tmp_path: Path) -> None:
    output = tmp_path / "output"
    output.write_text("previous=1\n", encoding="utf-8")

    write_github_outputs(PublishOutcome(release=make_release(1, "v1"), assets=()), output)

    assert output.read_text(encoding="utf-8").startswith("previous=1\nurl=")
