import aiohttp
import logging
import re
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)

# REST endpoint templates, relative to the configured API base URL.
USERS_REPOS_PATH = "/users/{name}/repos"
ORGS_REPOS_PATH = "/orgs/{name}/repos"
COMMITS_PATH = "/repos/{owner}/{repo}/commits"

DEFAULT_API_BASE_URL = "https://api.github.com"
REPOS_PAGE_SIZE = 100
# Only the first page of commits is ever requested, so this caps "recent" commits.
COMMITS_PAGE_SIZE = 20
DEFAULT_REQUEST_TIMEOUT = 60

# Matches one `<URL>; rel="next"` entry of a Link header, e.g.
# <https://api.github.com/user/1/repos?page=2>; rel="next", <...>; rel="last"
NEXT_LINK_PATTERN = re.compile(r'<([^>]+)>;\s*rel="next"')


@dataclass(frozen=True)
class ApiResponse:
    """
    Outcome of a single GitHub REST call.

    Non-2xx responses are returned rather than raised so callers can
    dispatch on the status code (404 fallback, 409 empty repository).
    """
    url: str
    status: int
    payload: Any = None
    body: str = ""
    next_url: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def parse_next_link(link_header: Optional[str]) -> Optional[str]:
    """Returns the URL of the `rel="next"` relation, or None when pagination is exhausted."""
    if not link_header:
        return None
    match = NEXT_LINK_PATTERN.search(link_header)
    return match.group(1) if match else None


class GitHubRestClient:
    """
    Client for the GitHub REST API (v3).
    Handles authentication headers, URL construction and response decoding.
    """

    def __init__(
            self,
            token: str,
            base_url: str = DEFAULT_API_BASE_URL,
            request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": "github-activity-connector",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=request_timeout)

    def open_session(self) -> aiohttp.ClientSession:
        """Creates the HTTP session shared by all calls of one report run."""
        return aiohttp.ClientSession()

    def _build_url(self, template: str, page_size: int, **segments: str) -> str:
        path = template.format(**{key: quote(value, safe="") for key, value in segments.items()})
        return f"{self.base_url}{path}?per_page={page_size}"

    def user_repos_url(self, name: str) -> str:
        return self._build_url(USERS_REPOS_PATH, REPOS_PAGE_SIZE, name=name)

    def org_repos_url(self, name: str) -> str:
        return self._build_url(ORGS_REPOS_PATH, REPOS_PAGE_SIZE, name=name)

    def commits_url(self, owner: str, repo: str) -> str:
        return self._build_url(COMMITS_PATH, COMMITS_PAGE_SIZE, owner=owner, repo=repo)

    async def get(self, session: aiohttp.ClientSession, url: str) -> ApiResponse:
        """
        Performs a GET request and wraps the result.

        Successful responses carry the decoded JSON payload; failed ones carry
        the raw response body. Transport errors and malformed JSON propagate.
        """
        logger.debug(f"GET {url}")

        async with session.get(url, headers=self.headers, timeout=self.timeout) as response:
            self._log_rate_limit_status(response.headers)
            next_url = parse_next_link(response.headers.get("Link"))

            if not 200 <= response.status < 300:
                body = await response.text()
                return ApiResponse(url=url, status=response.status, body=body, next_url=next_url)

            payload = await response.json(content_type=None)
            return ApiResponse(url=url, status=response.status, payload=payload, next_url=next_url)

    @staticmethod
    def _log_rate_limit_status(headers: Mapping[str, str]) -> None:
        remaining = headers.get("X-RateLimit-Remaining")
        limit = headers.get("X-RateLimit-Limit")
        if remaining is not None and limit is not None:
            logger.debug(f"GitHub API rate limit: {remaining}/{limit} requests remaining.")
