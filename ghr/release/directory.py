"""The release API as seen by reconciliation and asset publishing.

``GitHubReleaseDirectory`` (ghr.github.releases) is the production
implementation; tests use an in-memory fake.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from ghr.core.result import Result
from ghr.release.errors import ReleaseError
from ghr.release.model import AssetUploadResponse, Release, ReleaseAsset, ReleaseFields

RELEASES_PAGE_SIZE = 100


class ReleaseDirectory(Protocol):
    def find_by_tag(self, owner: str, repo: str, tag: str) -> Result[Release, ReleaseError]:
        """Published release for ``tag``; ``kind="not_found"`` when absent."""
        ...

    def create(self, owner: str, repo: str, fields: ReleaseFields) -> Result[Release, ReleaseError]:
        """Create a release; ``kind="conflict"`` when the tag was taken meanwhile."""
        ...

    def update(
        self, owner: str, repo: str, release_id: int, fields: ReleaseFields
    ) -> Result[Release, ReleaseError]: ...

    def iter_release_pages(
        self, owner: str, repo: str
    ) -> Iterator[Result[list[Release], ReleaseError]]:
        """Lazily yield every release page (drafts included), in API order."""
        ...

    def delete_asset(self, owner: str, repo: str, asset_id: int) -> Result[None, ReleaseError]: ...

    def upload_asset(self, url: str, asset: ReleaseAsset) -> Result[AssetUploadResponse, ReleaseError]:
        """POST raw bytes to an upload endpoint; any received status is Ok."""
        ...
