"""GitHub REST API access."""

from ghr.github.http import (
    HttpClient,
    HttpError,
    HttpResponse,
    MockHttpClient,
    RealHttpClient,
)
from ghr.github.releases import GitHubReleaseDirectory

__all__ = [
    "GitHubReleaseDirectory",
    "HttpClient",
    "HttpError",
    "HttpResponse",
    "MockHttpClient",
    "RealHttpClient",
]
