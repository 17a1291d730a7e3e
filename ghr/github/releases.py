"""Release directory backed by the GitHub REST API."""

from __future__ import annotations

import json
import urllib.parse
from collections.abc import Iterator, Mapping

from ghr.core.result import Err, Ok, Result
from ghr.core.structured import as_obj_list, as_str_dict, get_list, get_str
from ghr.github.http import HttpClient, HttpResponse
from ghr.release.directory import RELEASES_PAGE_SIZE
from ghr.release.errors import ReleaseError
from ghr.release.model import AssetUploadResponse, Release, ReleaseAsset, ReleaseFields

__all__ = ["GitHubReleaseDirectory", "remote_message"]

API_VERSION = "2022-11-28"


def remote_message(response: HttpResponse) -> str:
    """Error text from a GitHub error payload (``message`` plus ``errors``)."""
    data = as_str_dict(response.json())
    if data is None:
        return response.body.decode("utf-8", errors="replace").strip()

    message = get_str(data, "message") or ""
    details: list[str] = []
    for item in get_list(data, "errors") or []:
        d = as_str_dict(item)
        if d is None:
            if isinstance(item, str):
                details.append(item)
            continue
        code = get_str(d, "code")
        field = get_str(d, "field")
        text = get_str(d, "message")
        details.append(": ".join(x for x in (field, code or text) if x))
    if details:
        return f"{message} ({'; '.join(details)})" if message else "; ".join(details)
    return message


class GitHubReleaseDirectory:
    """``ReleaseDirectory`` over ``/repos/{owner}/{repo}/releases``."""

    def __init__(self, http: HttpClient, *, token: str, api_url: str) -> None:
        self.http = http
        self.token = token
        self.api_url = api_url.rstrip("/")

    def _headers(self, extra: Mapping[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if extra:
            headers.update(extra)
        return headers

    def _releases_url(self, owner: str, repo: str) -> str:
        return f"{self.api_url}/repos/{owner}/{repo}/releases"

    def _send(
        self, method: str, url: str, payload: Mapping[str, object] | None = None
    ) -> Result[HttpResponse, ReleaseError]:
        body: bytes | None = None
        extra: dict[str, str] = {}
        if payload is not None:
            body = json.dumps(payload).encode("utf-8")
            extra["Content-Type"] = "application/json"

        result = self.http.request(method, url, headers=self._headers(extra), body=body)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="unexpected",
                    message=f"{method} {url} failed: {result.error.message}",
                    status=result.error.status,
                )
            )
        return result

    def _parse_release(self, response: HttpResponse, *, url: str) -> Result[Release, ReleaseError]:
        release = Release.from_json(response.json())
        if release is None:
            return Err(
                ReleaseError(
                    kind="unexpected",
                    message="GitHub API returned invalid release payload",
                    status=response.status,
                    hint=url,
                )
            )
        return Ok(release)

    def find_by_tag(self, owner: str, repo: str, tag: str) -> Result[Release, ReleaseError]:
        url = f"{self._releases_url(owner, repo)}/tags/{urllib.parse.quote(tag, safe='')}"
        sent = self._send("GET", url)
        if isinstance(sent, Err):
            return sent

        response = sent.value
        if response.status == 404:
            return Err(
                ReleaseError(
                    kind="not_found",
                    message=f"no release for tag {tag}",
                    status=404,
                )
            )
        if response.status != 200:
            return Err(
                ReleaseError(
                    kind="unexpected",
                    message=f"failed to fetch release for tag {tag}: {remote_message(response)}",
                    status=response.status,
                )
            )
        return self._parse_release(response, url=url)

    def create(self, owner: str, repo: str, fields: ReleaseFields) -> Result[Release, ReleaseError]:
        url = self._releases_url(owner, repo)
        sent = self._send("POST", url, fields.to_payload())
        if isinstance(sent, Err):
            return sent

        response = sent.value
        if response.status == 422:
            # Usually "already_exists": another run created the tag's release first.
            return Err(
                ReleaseError(
                    kind="conflict",
                    message=f"release for tag {fields.tag_name} was rejected: {remote_message(response)}",
                    status=422,
                )
            )
        if response.status not in {200, 201}:
            return Err(
                ReleaseError(
                    kind="unexpected",
                    message=f"failed to create release for tag {fields.tag_name}: {remote_message(response)}",
                    status=response.status,
                )
            )
        return self._parse_release(response, url=url)

    def update(
        self, owner: str, repo: str, release_id: int, fields: ReleaseFields
    ) -> Result[Release, ReleaseError]:
        url = f"{self._releases_url(owner, repo)}/{release_id}"
        sent = self._send("PATCH", url, fields.to_payload())
        if isinstance(sent, Err):
            return sent

        response = sent.value
        if response.status != 200:
            return Err(
                ReleaseError(
                    kind="unexpected",
                    message=f"failed to update release {release_id}: {remote_message(response)}",
                    status=response.status,
                )
            )
        return self._parse_release(response, url=url)

    def iter_release_pages(
        self, owner: str, repo: str
    ) -> Iterator[Result[list[Release], ReleaseError]]:
        url: str | None = f"{self._releases_url(owner, repo)}?per_page={RELEASES_PAGE_SIZE}"
        while url is not None:
            sent = self._send("GET", url)
            if isinstance(sent, Err):
                yield sent
                return

            response = sent.value
            if response.status != 200:
                yield Err(
                    ReleaseError(
                        kind="unexpected",
                        message=f"failed to list releases: {remote_message(response)}",
                        status=response.status,
                        hint=url,
                    )
                )
                return

            raw = as_obj_list(response.json())
            if raw is None:
                yield Err(
                    ReleaseError(
                        kind="unexpected",
                        message=f"unexpected releases payload: {owner}/{repo}",
                        status=response.status,
                        hint=url,
                    )
                )
                return

            page: list[Release] = []
            for item in raw:
                release = Release.from_json(item)
                if release is not None:
                    page.append(release)
            yield Ok(page)

            url = response.link_next()

    def delete_asset(self, owner: str, repo: str, asset_id: int) -> Result[None, ReleaseError]:
        url = f"{self._releases_url(owner, repo)}/assets/{asset_id}"
        sent = self._send("DELETE", url)
        if isinstance(sent, Err):
            return sent

        response = sent.value
        if response.status not in {200, 204}:
            return Err(
                ReleaseError(
                    kind="unexpected",
                    message=f"failed to delete asset {asset_id}: {remote_message(response)}",
                    status=response.status,
                )
            )
        return Ok(None)

    def upload_asset(self, url: str, asset: ReleaseAsset) -> Result[AssetUploadResponse, ReleaseError]:
        headers = self._headers(
            {
                "Content-Length": str(asset.size),
                "Content-Type": asset.mime,
            }
        )
        result = self.http.request("POST", url, headers=headers, body=asset.data)
        if isinstance(result, Err):
            return Err(
                ReleaseError(
                    kind="unexpected",
                    message=f"failed to upload release asset {asset.name}: {result.error.message}",
                    status=result.error.status,
                )
            )

        response = result.value
        payload = as_str_dict(response.json()) or {}
        return Ok(AssetUploadResponse(status=response.status, payload=payload))
