"""GitHub REST API client using httpx, with throttle-aware retries."""

import logging
import time
from collections.abc import Callable

import httpx

from .models import ApiResponse, RequestOptions

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
DEFAULT_TIMEOUT = 30.0

# Secondary (abuse) limits without a retry-after header
DEFAULT_RETRY_AFTER = 60

RATE_LIMIT = "rate_limit"
ABUSE_LIMIT = "abuse_limit"


class GitHubClient:
    """Thin client for the GitHub REST endpoints used by the listers.

    Throttled responses are handed to ``on_rate_limit`` / ``on_abuse_limit``,
    which decide whether the request is retried. Server and connection errors
    are retried up to ``retries`` times with quadratic backoff.
    """

    def __init__(
        self,
        http: httpx.Client,
        retries: int,
        on_rate_limit: Callable[[float, RequestOptions], bool],
        on_abuse_limit: Callable[[float, RequestOptions], bool],
    ):
        self._client = http
        self.retries = retries
        self.on_rate_limit = on_rate_limit
        self.on_abuse_limit = on_abuse_limit

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _backoff(self, options: RequestOptions) -> None:
        time.sleep((options.retry_count + 1) ** 2)
        options.retry_count += 1

    def request(self, method: str, endpoint: str, params: dict | None = None) -> ApiResponse:
        """Make a GitHub REST API call.

        Args:
            method: HTTP method
            endpoint: API path, e.g. "/repos/owner/repo/commits", or an absolute URL
            params: Query parameters dict

        Returns:
            ApiResponse with status, body, etag, and link fields.
        """
        if not endpoint.startswith(("/", "http://", "https://")):
            endpoint = f"/{endpoint}"
        options = RequestOptions(method=method, url=endpoint)

        while True:
            try:
                resp = self._client.request(method, endpoint, params=params)
            except (httpx.ConnectError, httpx.RemoteProtocolError, httpx.ReadError):
                if options.retry_count >= self.retries:
                    raise
                self._backoff(options)
                continue

            kind = _throttle_kind(resp)
            if kind is not None:
                on_limit = self.on_rate_limit if kind == RATE_LIMIT else self.on_abuse_limit
                retry_after = _retry_after(resp, kind)
                if on_limit(retry_after, options):
                    time.sleep(retry_after)
                    options.retry_count += 1
                    continue
                raise _status_error(resp)

            if resp.status_code >= 500 and options.retry_count < self.retries:
                self._backoff(options)
                continue

            if not 200 <= resp.status_code < 300:
                raise _status_error(resp)

            return ApiResponse(
                status=resp.status_code,
                body=resp.json() if resp.content else {},
                etag=resp.headers.get("etag"),
                link=resp.headers.get("link"),
            )

    def paginate(self, endpoint: str, params: dict | None = None) -> list:
        """GET every page of an endpoint by following Link rel="next".

        List bodies are concatenated; an object body is appended as one item.
        """
        items = []
        url = endpoint
        while url:
            resp = self.request("GET", url, params=params)
            if isinstance(resp.body, list):
                items.extend(resp.body)
            else:
                items.append(resp.body)
            url = _next_link(resp.link)
            # The next link already carries the query string
            params = None
        return items

    def list_repos_for_authenticated_user(self, affiliation: str, page: int, per_page: int) -> list[dict]:
        resp = self.request(
            "GET",
            "/user/repos",
            params={"affiliation": affiliation, "page": page, "per_page": per_page},
        )
        return resp.body

    def close(self):
        self._client.close()


def create_client(settings, **client_options) -> GitHubClient:
    """Build a GitHubClient that retries throttled requests.

    ``client_options`` are passed to ``httpx.Client`` and override the
    defaults key by key. The throttle callbacks cannot be replaced.
    """
    retries = settings.retries
    if not settings.github_token:
        raise RuntimeError("GITHUB_TOKEN is not set")

    def on_rate_limit(retry_after: float, options: RequestOptions) -> bool:
        logger.warning(f"Request quota exhausted for request {options.method} {options.url}")
        return _should_retry(retries, retry_after, options)

    def on_abuse_limit(retry_after: float, options: RequestOptions) -> bool:
        logger.warning(f"Abuse detected for request {options.method} {options.url}")
        return _should_retry(retries, retry_after, options)

    default_options = {
        "base_url": API_BASE,
        "headers": {
            "Authorization": f"bearer {settings.github_token}",
            "Accept": "application/vnd.github+json",
        },
        "timeout": DEFAULT_TIMEOUT,
    }
    http = httpx.Client(**{**default_options, **client_options})

    return GitHubClient(
        http,
        retries=retries,
        on_rate_limit=on_rate_limit,
        on_abuse_limit=on_abuse_limit,
    )


def _should_retry(retries: int, retry_after: float, options: RequestOptions) -> bool:
    if options.retry_count < retries:
        logger.warning(
            f"Retrying request {options.method} {options.url} after {retry_after} seconds!"
        )
        return True
    logger.warning(f"Did not retry request {options.method} {options.url}")
    return False


def _throttle_kind(resp: httpx.Response) -> str | None:
    if resp.status_code not in (403, 429):
        return None
    text = resp.text.lower()
    if "secondary rate limit" in text or "abuse" in text:
        return ABUSE_LIMIT
    if (
        resp.status_code == 429
        or resp.headers.get("x-ratelimit-remaining") == "0"
        or "rate limit" in text
    ):
        return RATE_LIMIT
    return None


def _retry_after(resp: httpx.Response, kind: str) -> float:
    wait = _parse_retry_after(resp)
    if wait is not None:
        return wait
    if kind == RATE_LIMIT:
        reset = resp.headers.get("x-ratelimit-reset")
        if reset is not None:
            try:
                return max(0.0, float(reset) - time.time())
            except ValueError:
                pass
    return DEFAULT_RETRY_AFTER


def _parse_retry_after(resp: httpx.Response) -> float | None:
    val = resp.headers.get("retry-after")
    if val is None:
        return None
    try:
        return float(val)
    except ValueError:
        return None


def _next_link(link: str | None) -> str | None:
    if not link:
        return None
    for part in link.split(","):
        url, _, rel = part.partition(";")
        if 'rel="next"' in rel:
            return url.strip().strip("<>")
    return None


def _status_error(resp: httpx.Response) -> httpx.HTTPStatusError:
    return httpx.HTTPStatusError(
        f"GitHub API error {resp.status_code}",
        request=resp.request,
        response=resp,
    )
