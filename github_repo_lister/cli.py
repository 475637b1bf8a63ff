"""CLI commands for listing repositories and files."""

import argparse
import json
import logging
import re
import sys

import httpx


def _page_size(value: str) -> int:
    from .repos import MAX_PAGE_SIZE

    size = int(value)
    if not 1 <= size <= MAX_PAGE_SIZE:
        raise argparse.ArgumentTypeError(f"must be between 1 and {MAX_PAGE_SIZE}, got {size}")
    return size


def main():
    parser = argparse.ArgumentParser(
        description="List GitHub repositories and files for the authenticated user",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list-repos subcommand
    repos_parser = subparsers.add_parser(
        "list-repos",
        help="List repositories whose owner/name matches any pattern",
    )
    repos_parser.add_argument(
        "patterns",
        nargs="+",
        metavar="PATTERN",
        help="Regular expression matched against owner/name (e.g., ^my-org/)",
    )
    repos_parser.add_argument(
        "--affiliation",
        default=None,
        help="Comma-separated affiliations (default: owner,collaborator,organization_member)",
    )
    repos_parser.add_argument(
        "--page-size",
        type=_page_size,
        default=None,
        help="Repositories per API page, 1-100 (default: 30)",
    )

    # list-files subcommand
    files_parser = subparsers.add_parser(
        "list-files",
        help="List top-level files of a repository",
    )
    files_parser.add_argument(
        "repo",
        help="Repository full name (owner/name)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command is None:
        parser.print_help()
        return

    from .client import create_client
    from .repos import PaginationLimitExceeded
    from .settings import get_settings

    settings = get_settings()
    client = create_client(settings)
    try:
        if args.command == "list-repos":
            from .repos import list_all_matching_repos

            repos = list_all_matching_repos(
                client,
                args.patterns,
                affiliation=args.affiliation or settings.affiliation,
                page_size=settings.page_size if args.page_size is None else args.page_size,
                max_pages=settings.max_pages,
            )
            json.dump([r.full_name for r in repos], sys.stdout, indent=2)
            sys.stdout.write("\n")
        elif args.command == "list-files":
            from .files import show_repo_files
            from .models import Repository

            show_repo_files(client, Repository(full_name=args.repo))
    except (httpx.HTTPStatusError, PaginationLimitExceeded, re.error) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        client.close()


if __name__ == "__main__":
    main()
