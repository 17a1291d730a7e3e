from __future__ import annotations

import os
from pathlib import Path

import typer

from ghr.cli.context import build_context, exit_with
from ghr.core.result import Err
from ghr.release.errors import release_error_code
from ghr.release.reconcile import DEFAULT_MAX_RETRIES
from ghr.release.service import publish_release, write_github_outputs


def publish(
    max_retries: int = typer.Option(
        DEFAULT_MAX_RETRIES,
        "--max-retries",
        help="Attempts allowed when release creation races with another run.",
    ),
    root: Path = typer.Option(
        Path("."),
        "--root",
        help="Directory the INPUT_FILES patterns are relative to.",
    ),
) -> None:
    """Create or update the release described by the environment and upload its files."""
    ctx = build_context()

    result = publish_release(
        ctx.config,
        ctx.directory,
        console=ctx.console,
        root=root,
        max_retries=max_retries,
    )
    if isinstance(result, Err):
        exit_with(result.error.message, code=release_error_code(result.error.kind), hint=result.error.hint)

    output_path = os.environ.get("GITHUB_OUTPUT", "").strip()
    if output_path:
        write_github_outputs(result.value, Path(output_path))
