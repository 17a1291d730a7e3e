"""Converge the remote release for a tag onto the configured one.

Lookup order:
1. Draft mode: scan every release page (drafts are not addressable by tag)
   and return the first release with the tag, untouched.
2. Tag lookup: update the published release in place, merging fields.
3. Not found: create it. A create conflict (another run created the tag's
   release between lookup and create) restarts from step 1, at most
   ``max_retries`` times in total, with no delay.
"""

from __future__ import annotations

from ghr.core.config import ReleaseConfig, release_body, resolve_tag_name
from ghr.core.result import Err, Ok, Result
from ghr.output.console import ConsoleProtocol, Style
from ghr.release.directory import ReleaseDirectory
from ghr.release.errors import ReleaseError
from ghr.release.model import Release, ReleaseFields

__all__ = ["DEFAULT_MAX_RETRIES", "create_fields", "merge_update_fields", "reconcile"]

DEFAULT_MAX_RETRIES = 3


def merge_update_fields(
    config: ReleaseConfig,
    existing: Release,
    *,
    tag_name: str,
    configured_body: str | None,
) -> ReleaseFields:
    """Fields for updating ``existing``; explicit config wins, else keep remote values."""
    if config.input_target_commitish and config.input_target_commitish != existing.target_commitish:
        target_commitish = config.input_target_commitish
    else:
        target_commitish = existing.target_commitish

    name = config.input_name or existing.name or tag_name

    # Empty strings count as "no body" on both sides.
    workflow_body = configured_body or ""
    existing_body = existing.body or ""
    if config.input_append_body and workflow_body and existing_body:
        body = existing_body + "\n" + workflow_body
    else:
        body = workflow_body or existing_body

    return ReleaseFields(
        tag_name=tag_name,
        name=name,
        body=body,
        draft=config.input_draft if config.input_draft is not None else existing.draft,
        prerelease=(
            config.input_prerelease if config.input_prerelease is not None else existing.prerelease
        ),
        target_commitish=target_commitish,
        discussion_category_name=config.input_discussion_category_name,
        generate_release_notes=config.input_generate_release_notes,
    )


def create_fields(
    config: ReleaseConfig,
    *,
    tag_name: str,
    configured_body: str | None,
) -> ReleaseFields:
    return ReleaseFields(
        tag_name=tag_name,
        name=config.input_name or tag_name,
        body=configured_body,
        draft=config.input_draft,
        prerelease=config.input_prerelease,
        target_commitish=config.input_target_commitish,
        discussion_category_name=config.input_discussion_category_name,
        generate_release_notes=config.input_generate_release_notes,
    )


def _unexpected(error: ReleaseError) -> ReleaseError:
    if error.kind == "unexpected":
        return error
    return ReleaseError(kind="unexpected", message=error.message, status=error.status, hint=error.hint)


def _configured_body(config: ReleaseConfig) -> Result[str | None, ReleaseError]:
    body = release_body(config)
    if isinstance(body, Err):
        return Err(ReleaseError(kind="local_file", message=body.error.message))
    return body


def _find_draft(
    directory: ReleaseDirectory, *, owner: str, repo: str, tag_name: str
) -> Result[Release | None, ReleaseError]:
    for page in directory.iter_release_pages(owner, repo):
        if isinstance(page, Err):
            return Err(_unexpected(page.error))
        for release in page.value:
            if release.tag_name == tag_name:
                return Ok(release)
    return Ok(None)


def _reconcile_once(
    config: ReleaseConfig,
    directory: ReleaseDirectory,
    *,
    console: ConsoleProtocol,
) -> Result[Release, ReleaseError]:
    owner, repo = config.owner_repo
    tag_name = resolve_tag_name(config)

    if config.input_draft:
        draft = _find_draft(directory, owner=owner, repo=repo, tag_name=tag_name)
        if isinstance(draft, Err):
            return draft
        if draft.value is not None:
            return Ok(draft.value)

    existing = directory.find_by_tag(owner, repo, tag_name)

    if isinstance(existing, Ok):
        body = _configured_body(config)
        if isinstance(body, Err):
            return body

        fields = merge_update_fields(
            config, existing.value, tag_name=tag_name, configured_body=body.value
        )
        if fields.target_commitish != existing.value.target_commitish:
            console.print(
                f'Updating commit from "{existing.value.target_commitish}" '
                f'to "{fields.target_commitish}"'
            )

        updated = directory.update(owner, repo, existing.value.id, fields)
        if isinstance(updated, Err):
            return Err(_unexpected(updated.error))
        return updated

    if existing.error.kind != "not_found":
        console.warning(
            f"Unexpected error fetching GitHub release for tag {config.github_ref}: "
            f"{existing.error.message}"
        )
        return Err(_unexpected(existing.error))

    body = _configured_body(config)
    if isinstance(body, Err):
        return body

    using = (
        f' using commit "{config.input_target_commitish}"' if config.input_target_commitish else ""
    )
    console.print(f"Creating new GitHub release for tag {tag_name}{using}...")

    created = directory.create(
        owner, repo, create_fields(config, tag_name=tag_name, configured_body=body.value)
    )
    if isinstance(created, Err) and created.error.kind != "conflict":
        return Err(_unexpected(created.error))
    return created


def reconcile(
    config: ReleaseConfig,
    directory: ReleaseDirectory,
    *,
    console: ConsoleProtocol,
    max_retries: int = DEFAULT_MAX_RETRIES,
) -> Result[Release, ReleaseError]:
    """Find, update or create the release described by ``config``.

    Args:
        config: Desired release
        directory: Release API
        console: Progress notices
        max_retries: Attempts allowed for the lookup/create sequence

    Returns:
        Ok with the final release record, or Err with:
        - ``exhausted_retries`` when no attempt is left (including
          ``max_retries <= 0`` on entry, before any remote call)
        - ``unexpected`` for any remote failure other than a create conflict
        - ``local_file`` when the configured body file cannot be read
    """
    remaining = max_retries
    last_conflict: ReleaseError | None = None

    while remaining > 0:
        result = _reconcile_once(config, directory, console=console)
        if isinstance(result, Ok) or result.error.kind != "conflict":
            return result

        last_conflict = result.error
        remaining -= 1
        console.warning(
            f"GitHub release failed with status: {result.error.status}\n"
            f"{result.error.message}\n"
            f"retrying... ({remaining} retries remaining)"
        )

    console.print("Too many retries. Aborting...", Style.ERROR)
    return Err(
        ReleaseError(
            kind="exhausted_retries",
            message="Too many retries.",
            status=last_conflict.status if last_conflict is not None else None,
            hint=last_conflict.message if last_conflict is not None else None,
        )
    )
