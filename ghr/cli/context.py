from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import NoReturn

import typer

from ghr.core.config import ReleaseConfig
from ghr.core.errors import ErrorCode
from ghr.core.result import Err
from ghr.github.http import RealHttpClient
from ghr.github.releases import GitHubReleaseDirectory
from ghr.output.console import ConsoleProtocol, RichConsole
from ghr.release.directory import ReleaseDirectory


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: ReleaseConfig
    directory: ReleaseDirectory
    console: ConsoleProtocol


def exit_with(err: str, *, code: ErrorCode, hint: str | None = None) -> NoReturn:
    typer.echo(f"error: {err}", err=True)
    if hint:
        typer.echo(f"hint: {hint}", err=True)
    raise typer.Exit(code=int(code))


def build_context(env: Mapping[str, str] | None = None) -> CLIContext:
    env = os.environ if env is None else env

    config_result = ReleaseConfig.from_env(env)
    if isinstance(config_result, Err):
        exit_with(config_result.error.message, code=ErrorCode.CONFIG_ERROR)
    config = config_result.value

    directory = GitHubReleaseDirectory(
        RealHttpClient(),
        token=config.github_token,
        api_url=config.api_url,
    )
    return CLIContext(
        config=config,
        directory=directory,
        console=RichConsole(no_color="NO_COLOR" in env),
    )
