"""Data models for repositories and REST responses."""

from dataclasses import dataclass


@dataclass
class ApiResponse:
    """Response from the GitHub REST API client."""

    status: int
    body: dict | list
    etag: str | None = None
    link: str | None = None


@dataclass
class RequestOptions:
    """Request context handed to the throttle callbacks."""

    method: str
    url: str
    retry_count: int = 0  # retries already attempted for this request


@dataclass(frozen=True)
class Repository:
    """A repository, identified by its owner/name."""

    full_name: str

    @classmethod
    def from_api(cls, data: dict) -> "Repository":
        return cls(full_name=data["full_name"])
