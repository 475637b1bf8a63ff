"""List GitHub repositories visible to the authenticated user and their files.

Requests that hit GitHub's rate or abuse limits are retried a configurable
number of times before the error is surfaced.
"""

from .cli import main
from .client import GitHubClient, create_client
from .files import list_all_repo_files
from .models import ApiResponse, Repository
from .repos import filter_repos_by_patterns, list_all_matching_repos

__all__ = [
    "main",
    "GitHubClient",
    "create_client",
    "list_all_repo_files",
    "ApiResponse",
    "Repository",
    "filter_repos_by_patterns",
    "list_all_matching_repos",
]

if __name__ == "__main__":
    main()
