from __future__ import annotations

from dataclasses import dataclass

from ghr.core.structured import as_str_dict, get_bool, get_int, get_list, get_raw_str, get_str


@dataclass(frozen=True, slots=True)
class AssetSummary:
    """An asset already attached to a release.

    ``id`` is None only when the payload lacked one, which deletion treats
    as an invariant violation.
    """

    id: int | None
    name: str


@dataclass(frozen=True, slots=True)
class Release:
    """A release record as returned by the release API."""

    id: int
    tag_name: str
    name: str | None
    body: str | None
    target_commitish: str
    draft: bool
    prerelease: bool
    upload_url: str
    html_url: str
    assets: tuple[AssetSummary, ...] = ()

    @classmethod
    def from_json(cls, obj: object) -> Release | None:
        """Parse a release payload; None when required fields are missing."""
        data = as_str_dict(obj)
        if data is None:
            return None

        release_id = get_int(data, "id")
        tag_name = get_str(data, "tag_name")
        if release_id is None or tag_name is None:
            return None

        assets: list[AssetSummary] = []
        for item in get_list(data, "assets") or []:
            d = as_str_dict(item)
            if d is None:
                continue
            name = get_str(d, "name")
            if name is None:
                continue
            assets.append(AssetSummary(id=get_int(d, "id"), name=name))

        return cls(
            id=release_id,
            tag_name=tag_name,
            name=get_raw_str(data, "name"),
            body=get_raw_str(data, "body"),
            target_commitish=get_str(data, "target_commitish") or "",
            draft=get_bool(data, "draft") or False,
            prerelease=get_bool(data, "prerelease") or False,
            upload_url=get_str(data, "upload_url") or "",
            html_url=get_str(data, "html_url") or "",
            assets=tuple(assets),
        )


@dataclass(frozen=True, slots=True)
class ReleaseFields:
    """Fields sent when creating or updating a release.

    ``None`` means "not sent"; the API then keeps (update) or defaults
    (create) the value.
    """

    tag_name: str
    name: str
    body: str | None = None
    draft: bool | None = None
    prerelease: bool | None = None
    target_commitish: str | None = None
    discussion_category_name: str | None = None
    generate_release_notes: bool | None = None

    def to_payload(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "tag_name": self.tag_name,
            "name": self.name,
            "body": self.body,
            "draft": self.draft,
            "prerelease": self.prerelease,
            "target_commitish": self.target_commitish,
            "discussion_category_name": self.discussion_category_name,
            "generate_release_notes": self.generate_release_notes,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass(frozen=True, slots=True)
class ReleaseAsset:
    """A local file about to be uploaded."""

    name: str
    mime: str
    size: int
    data: bytes


@dataclass(frozen=True, slots=True)
class AssetUploadResponse:
    status: int
    payload: dict[str, object]


def upload_endpoint(upload_url: str) -> str:
    """Strip the ``{?name,label}`` URI template GitHub appends to upload URLs."""
    return upload_url.split("{", 1)[0]
