"""List repositories for the authenticated user and filter them by name."""

import json
import logging
import re
from typing import Protocol

from .models import Repository

logger = logging.getLogger(__name__)

DEFAULT_AFFILIATION = "owner,collaborator,organization_member"
DEFAULT_PAGE_SIZE = 30
DEFAULT_MAX_PAGES = 1000
MAX_PAGE_SIZE = 100  # GitHub caps per_page at 100


class PaginationLimitExceeded(RuntimeError):
    """Raised when every page up to the page bound came back full."""


class ReposForAuthenticatedUser(Protocol):
    def list_repos_for_authenticated_user(self, affiliation: str, page: int, per_page: int) -> list[dict]: ...


def list_all_matching_repos(
    client: ReposForAuthenticatedUser,
    patterns: list[str],
    affiliation: str = DEFAULT_AFFILIATION,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[Repository]:
    """List every repo visible to the authenticated user, then keep those matching a pattern."""
    repos = list_all_repos_for_authenticated_user(
        client,
        affiliation=affiliation,
        page_size=page_size,
        max_pages=max_pages,
    )

    logger.info(f"Available repositories: {json.dumps([r.full_name for r in repos])}")

    return filter_repos_by_patterns(repos, patterns)


def list_all_repos_for_authenticated_user(
    client: ReposForAuthenticatedUser,
    affiliation: str,
    page_size: int,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[Repository]:
    """Fetch pages until one comes back shorter than page_size.

    Pages are requested one at a time and concatenated in API order.
    """
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}")

    repos: list[Repository] = []

    page = 1
    while True:
        if page > max_pages:
            raise PaginationLimitExceeded(
                f"Still receiving full pages after {max_pages} pages of {page_size} repos"
            )
        items = client.list_repos_for_authenticated_user(
            affiliation=affiliation,
            page=page,
            per_page=page_size,
        )
        repos.extend(Repository.from_api(item) for item in items)

        if len(items) < page_size:
            return repos
        page += 1


def filter_repos_by_patterns(repos: list[Repository], patterns: list[str]) -> list[Repository]:
    """Keep repos whose full name matches at least one regex pattern.

    An empty pattern list matches nothing. Invalid patterns raise re.error.
    """
    regex_patterns = [re.compile(p) for p in patterns]

    return [repo for repo in repos if any(r.search(repo.full_name) for r in regex_patterns)]
