"""Typed release configuration.

The configuration is read from the process environment using the GitHub
Actions conventions: workflow inputs arrive as ``INPUT_<NAME>`` variables and
the runner provides ``GITHUB_REF``, ``GITHUB_REPOSITORY`` and friends.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "DEFAULT_API_URL",
    "ConfigError",
    "ReleaseConfig",
    "is_tag",
    "parse_input_files",
    "release_body",
    "resolve_tag_name",
]

DEFAULT_API_URL = "https://api.github.com"

TAG_REF_PREFIX = "refs/tags/"

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the environment does not describe a valid release."""

    message: str
    variable: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Desired release, as supplied once per invocation.

    Optional flags are tri-state: ``None`` means "not set, keep whatever the
    existing release has", which is different from an explicit ``False``.
    """

    github_token: str
    github_ref: str
    github_repository: str
    api_url: str = DEFAULT_API_URL
    input_name: str | None = None
    input_tag_name: str | None = None
    input_body: str | None = None
    input_body_path: str | None = None
    input_files: tuple[str, ...] = ()
    input_draft: bool | None = None
    input_prerelease: bool | None = None
    input_fail_on_unmatched_files: bool = False
    input_target_commitish: str | None = None
    input_discussion_category_name: str | None = None
    input_generate_release_notes: bool | None = None
    input_append_body: bool = False

    @property
    def owner_repo(self) -> tuple[str, str]:
        owner, _, repo = self.github_repository.partition("/")
        return owner, repo

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> Result[ReleaseConfig, ConfigError]:
        """Build a config from an environment mapping (usually ``os.environ``)."""

        def text(name: str) -> str | None:
            value = env.get(name)
            if value is None or not value.strip():
                return None
            return value

        flags: dict[str, bool | None] = {}
        for name in (
            "INPUT_DRAFT",
            "INPUT_PRERELEASE",
            "INPUT_FAIL_ON_UNMATCHED_FILES",
            "INPUT_GENERATE_RELEASE_NOTES",
            "INPUT_APPEND_BODY",
        ):
            parsed = _parse_flag(name, text(name))
            if isinstance(parsed, Err):
                return parsed
            flags[name] = parsed.value

        repository = (text("INPUT_REPOSITORY") or text("GITHUB_REPOSITORY") or "").strip()
        owner, _, repo = repository.partition("/")
        if not owner or not repo or "/" in repo:
            return Err(
                ConfigError(
                    f"expected GITHUB_REPOSITORY as owner/name, got: {repository!r}",
                    variable="GITHUB_REPOSITORY",
                )
            )

        api_url = (text("GITHUB_API_URL") or DEFAULT_API_URL).strip().rstrip("/")

        return Ok(
            cls(
                github_token=(text("INPUT_TOKEN") or text("GITHUB_TOKEN") or "").strip(),
                github_ref=(text("GITHUB_REF") or "").strip(),
                github_repository=repository,
                api_url=api_url,
                input_name=text("INPUT_NAME"),
                input_tag_name=_stripped(text("INPUT_TAG_NAME")),
                input_body=text("INPUT_BODY"),
                input_body_path=_stripped(text("INPUT_BODY_PATH")),
                input_files=parse_input_files(env.get("INPUT_FILES", "")),
                input_draft=flags["INPUT_DRAFT"],
                input_prerelease=flags["INPUT_PRERELEASE"],
                input_fail_on_unmatched_files=flags["INPUT_FAIL_ON_UNMATCHED_FILES"] or False,
                input_target_commitish=_stripped(text("INPUT_TARGET_COMMITISH")),
                input_discussion_category_name=_stripped(text("INPUT_DISCUSSION_CATEGORY_NAME")),
                input_generate_release_notes=flags["INPUT_GENERATE_RELEASE_NOTES"],
                input_append_body=flags["INPUT_APPEND_BODY"] or False,
            )
        )


def _stripped(value: str | None) -> str | None:
    return value.strip() if value is not None else None


def _parse_flag(name: str, value: str | None) -> Result[bool | None, ConfigError]:
    if value is None:
        return Ok(None)
    normalized = value.strip().lower()
    if normalized in _TRUE:
        return Ok(True)
    if normalized in _FALSE:
        return Ok(False)
    return Err(ConfigError(f"invalid boolean for {name}: {value!r}", variable=name))


def parse_input_files(value: str) -> tuple[str, ...]:
    """Split a newline or comma separated list of glob patterns."""
    out: list[str] = []
    for line in value.splitlines():
        for item in line.split(","):
            item = item.strip()
            if item:
                out.append(item)
    return tuple(out)


def is_tag(ref: str) -> bool:
    return ref.startswith(TAG_REF_PREFIX)


def resolve_tag_name(config: ReleaseConfig) -> str:
    """Explicit tag name, else the tag the workflow was triggered by, else ""."""
    if config.input_tag_name:
        return config.input_tag_name
    if is_tag(config.github_ref):
        return config.github_ref[len(TAG_REF_PREFIX) :]
    return ""


def release_body(config: ReleaseConfig) -> Result[str | None, ConfigError]:
    """Configured release body: body file contents when non-empty, else inline body."""
    if config.input_body_path:
        path = Path(config.input_body_path)
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Err(ConfigError(f"body file not found: {path}", variable="INPUT_BODY_PATH"))
        except PermissionError:
            return Err(ConfigError(f"permission denied reading: {path}", variable="INPUT_BODY_PATH"))
        except (OSError, UnicodeDecodeError) as e:
            return Err(ConfigError(f"error reading body file: {e}", variable="INPUT_BODY_PATH"))
        if content:
            return Ok(content)
    return Ok(config.input_body)
