"""List the files of a single repository."""

import json
import logging
from typing import Protocol

from .models import ApiResponse, Repository

logger = logging.getLogger(__name__)


class RestReader(Protocol):
    def request(self, method: str, endpoint: str, params: dict | None = None) -> ApiResponse: ...

    def paginate(self, endpoint: str, params: dict | None = None) -> list: ...


def list_all_repo_files(client: RestReader, repo: Repository) -> list[str]:
    """Return the paths of the plain files at the top level of the repo.

    The recursive tree of the latest commit is fetched as well and dumped
    to the debug log; the returned paths come from the contents listing.
    """
    base = f"/repos/{repo.full_name}"

    latest_commits = client.request("GET", f"{base}/commits").body
    commit = client.request("GET", f"{base}/git/commits/{latest_commits[0]['sha']}").body

    tree = client.paginate(f"{base}/git/trees/{commit['tree']['sha']}", params={"recursive": "1"})
    logger.debug(f"tree {json.dumps(tree[0]['tree'], indent=2)}")

    entries = client.paginate(f"{base}/contents")

    return [entry["path"] for entry in entries if entry["type"] == "file"]


def show_repo_files(client: RestReader, repo: Repository) -> list[str]:
    """Print the top-level files of a repo and return them."""
    files = list_all_repo_files(client, repo)
    print(f"REPO ({repo.full_name}) FILES:", files, flush=True)
    return files
