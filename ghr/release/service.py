from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from pathlib import Path

from ghr.core.config import ReleaseConfig, resolve_tag_name
from ghr.core.result import Err, Ok, Result
from ghr.core.structured import get_int, get_str
from ghr.output.console import ConsoleProtocol, Style
from ghr.release.assets import publish_asset
from ghr.release.directory import ReleaseDirectory
from ghr.release.errors import ReleaseError
from ghr.release.inputs import expand_paths, unmatched_patterns
from ghr.release.model import AssetSummary, Release
from ghr.release.reconcile import DEFAULT_MAX_RETRIES, reconcile

__all__ = ["PublishOutcome", "publish_release", "write_github_outputs"]


@dataclass(frozen=True, slots=True)
class PublishOutcome:
    release: Release
    assets: tuple[dict[str, object], ...]


def _check_patterns(
    config: ReleaseConfig, *, console: ConsoleProtocol, root: Path
) -> Result[None, ReleaseError]:
    unmatched = unmatched_patterns(config.input_files, root=root)
    for pattern in unmatched:
        console.warning(f"Pattern '{pattern}' does not match any files.")
    if unmatched and config.input_fail_on_unmatched_files:
        return Err(
            ReleaseError(
                kind="unmatched_files",
                message="There were unmatched files",
                hint=", ".join(unmatched),
            )
        )
    return Ok(None)


def _replace_summary(
    assets: list[AssetSummary], *, name: str, payload: dict[str, object]
) -> list[AssetSummary]:
    kept = [a for a in assets if a.name != name]
    kept.append(AssetSummary(id=get_int(payload, "id"), name=get_str(payload, "name") or name))
    return kept


def publish_release(
    config: ReleaseConfig,
    directory: ReleaseDirectory,
    *,
    console: ConsoleProtocol,
    root: Path,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> Result[PublishOutcome, ReleaseError]:
    """Reconcile the release, then upload every matched file to it in order.

    Each upload sees the asset list as left by the previous one, so two
    patterns resolving to the same file name still end with one asset.
    """
    tag_name = resolve_tag_name(config)
    if not tag_name:
        return Err(
            ReleaseError(
                kind="missing_tag",
                message="GitHub Releases requires a tag",
                hint="Set INPUT_TAG_NAME or run on a refs/tags/* ref.",
            )
        )

    if config.input_files:
        checked = _check_patterns(config, console=console, root=root)
        if isinstance(checked, Err):
            return checked

    released = reconcile(config, directory, console=console, max_retries=max_retries)
    if isinstance(released, Err):
        return released
    release = released.value

    uploaded: list[dict[str, object]] = []
    if config.input_files:
        files = expand_paths(config.input_files, root=root)
        if not files:
            console.warning(f"{', '.join(config.input_files)} does not include a valid file.")

        current = list(release.assets)
        for path in files:
            result = publish_asset(
                config, directory, release.upload_url, path, current, console=console
            )
            if isinstance(result, Err):
                return result
            uploaded.append(result.value)
            current = _replace_summary(current, name=path.name, payload=result.value)

    console.print(f"Release ready at {release.html_url}", Style.SUCCESS)
    return Ok(PublishOutcome(release=release, assets=tuple(uploaded)))


def _make_delimiter(body: str) -> str:
    delimiter = f"ghr_{uuid.uuid4().hex}"
    while delimiter in body:
        delimiter = f"ghr_{uuid.uuid4().hex}"
    return delimiter


def write_github_outputs(outcome: PublishOutcome, path: Path) -> None:
    """Append step outputs (url, id, upload_url, assets) to a GITHUB_OUTPUT file."""
    assets = json.dumps(list(outcome.assets))
    delimiter = _make_delimiter(assets)

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as out:
        out.write(f"url={outcome.release.html_url}\n")
        out.write(f"id={outcome.release.id}\n")
        out.write(f"upload_url={outcome.release.upload_url}\n")
        out.write(f"assets<<{delimiter}\n{assets}\n{delimiter}\n")
