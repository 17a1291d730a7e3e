from __future__ import annotations

import urllib.parse
from collections.abc import Sequence
from pathlib import Path

from ghr.core.config import ReleaseConfig
from ghr.core.result import Err, Ok, Result
from ghr.core.structured import get_str
from ghr.output.console import ConsoleProtocol
from ghr.platform.files import file_size, mime_type_of, read_bytes
from ghr.release.directory import ReleaseDirectory
from ghr.release.errors import ReleaseError
from ghr.release.model import AssetSummary, ReleaseAsset, upload_endpoint

__all__ = ["DEFAULT_MIME", "asset_descriptor", "mime_or_default", "publish_asset"]

DEFAULT_MIME = "application/octet-stream"

# GitHub answers a successful asset upload with 201 Created.
_UPLOAD_CREATED = 201


def mime_or_default(path: Path) -> str:
    return mime_type_of(path) or DEFAULT_MIME


def asset_descriptor(path: Path) -> Result[ReleaseAsset, ReleaseError]:
    """Name, content type, size and bytes of a local file."""
    size = file_size(path)
    if isinstance(size, Err):
        return Err(ReleaseError(kind="local_file", message=str(size.error)))

    data = read_bytes(path)
    if isinstance(data, Err):
        return Err(ReleaseError(kind="local_file", message=str(data.error)))

    return Ok(
        ReleaseAsset(
            name=path.name,
            mime=mime_or_default(path),
            size=size.value,
            data=data.value,
        )
    )


def publish_asset(
    config: ReleaseConfig,
    directory: ReleaseDirectory,
    upload_url: str,
    path: Path,
    existing_assets: Sequence[AssetSummary],
    *,
    console: ConsoleProtocol,
) -> Result[dict[str, object], ReleaseError]:
    """Upload ``path`` to a release, replacing an asset with the same name.

    Delete and upload are separate calls: a failure in between leaves the
    release without the asset, and running again simply uploads it.

    Raises:
        ValueError: if the colliding asset summary has no id.
    """
    owner, repo = config.owner_repo

    descriptor = asset_descriptor(path)
    if isinstance(descriptor, Err):
        return descriptor
    asset = descriptor.value

    current = next((a for a in existing_assets if a.name == asset.name), None)
    if current is not None:
        if current.id is None:
            raise ValueError(f"release asset {current.name!r} has no id")
        console.print(f"Deleting previously uploaded asset {asset.name}...")
        deleted = directory.delete_asset(owner, repo, current.id)
        if isinstance(deleted, Err):
            return deleted

    console.print(f"Uploading {asset.name}...")

    endpoint = upload_endpoint(upload_url)
    separator = "&" if "?" in endpoint else "?"
    url = f"{endpoint}{separator}{urllib.parse.urlencode({'name': asset.name})}"

    uploaded = directory.upload_asset(url, asset)
    if isinstance(uploaded, Err):
        return uploaded

    response = uploaded.value
    if response.status != _UPLOAD_CREATED:
        remote = get_str(response.payload, "message") or ""
        return Err(
            ReleaseError(
                kind="upload_failed",
                message=(
                    f"Failed to upload release asset {asset.name}. "
                    f"Received status code {response.status}\n{remote}"
                ),
                status=response.status,
            )
        )

    return Ok(response.payload)
