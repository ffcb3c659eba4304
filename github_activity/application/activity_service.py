import logging
from typing import List

import aiohttp

from github_activity.infrastructure.github_client import (
    ApiResponse,
    GitHubRestClient,
    ORGS_REPOS_PATH,
    USERS_REPOS_PATH,
)
from github_activity.infrastructure.acl import GitHubTranslator
from github_activity.domain.exceptions import UpstreamError
from github_activity.domain.models import (
    ActivityReport,
    CommitRecord,
    RepositoryActivity,
    RepositorySummary,
)

logger = logging.getLogger(__name__)

HTTP_NOT_FOUND = 404
# GitHub answers 409 on /commits when the repository has no commits yet.
HTTP_CONFLICT = 409


class ActivityService:
    """
    Service responsible for building the activity report of a GitHub account:
    resolving it as a user or an organization, paginating its repositories
    and collecting the most recent commits of every public one.

    Repositories are processed one after another; any upstream failure
    aborts the whole report.
    """

    def __init__(self, github_client: GitHubRestClient):
        self.github_client = github_client

    async def get_repository_activity(self, account_name: str) -> ActivityReport:
        """
        Builds the activity report for a user or organization login.

        Returns:
            ActivityReport: One RepositoryActivity per non-private repository, in listing order.

        Raises:
            UpstreamError: If GitHub rejects a listing or commit request.
        """
        logger.info(f"Starting repository activity fetch for user/org: {account_name}")

        async with self.github_client.open_session() as session:
            repositories = await self.list_repositories(session, account_name)

            report: ActivityReport = []
            for repo in repositories:
                commits = await self.fetch_recent_commits(session, repo.owner_login, repo.name)
                report.append(
                    RepositoryActivity(
                        repository_name=repo.name,
                        owner_login=repo.owner_login,
                        recent_commits=tuple(commits),
                    )
                )

        logger.info(f"Built activity for {len(report)} repositories of '{account_name}'.")
        return report

    async def list_repositories(
        self, session: aiohttp.ClientSession, account_name: str,
    ) -> List[RepositorySummary]:
        """
        Lists the non-private repositories of an account, trying the user
        endpoint first and the organization endpoint when the user is unknown.
        """
        logger.debug(f"Attempting to fetch repositories for user '{account_name}'")
        path = USERS_REPOS_PATH
        first_page = await self.github_client.get(session, self.github_client.user_repos_url(account_name))

        if first_page.status == HTTP_NOT_FOUND:
            logger.warning(f"User '{account_name}' not found, attempting to fetch as an organization.")
            path = ORGS_REPOS_PATH
            first_page = await self.github_client.get(session, self.github_client.org_repos_url(account_name))

        repositories = await self._collect_pages(session, account_name, first_page)
        logger.info(f"Found {len(repositories)} total repositories for '{account_name}' using path '{path}'")

        return [repo for repo in repositories if not repo.is_private]

    async def _collect_pages(
        self, session: aiohttp.ClientSession, account_name: str, page: ApiResponse,
    ) -> List[RepositorySummary]:
        """Follows the Link header from the given first page until no next page remains."""
        repositories: List[RepositorySummary] = []

        while True:
            if not page.ok:
                message = (
                    f"Failed to fetch repositories for '{account_name}'. "
                    f"Status: {page.status}. Message: {page.body}"
                )
                logger.error(message)
                raise UpstreamError(page.status, message)

            repositories.extend(GitHubTranslator.to_repository_summary(raw) for raw in page.payload or [])

            if page.next_url is None:
                return repositories

            logger.debug(f"Fetching next repository page: {page.next_url}")
            page = await self.github_client.get(session, page.next_url)

    async def fetch_recent_commits(
        self, session: aiohttp.ClientSession, owner_login: str, repo_name: str,
    ) -> List[CommitRecord]:
        """Fetches the first page of commits of a repository; empty repositories yield []."""
        logger.debug(f"Fetching commits for repository: {owner_login}/{repo_name}")
        response = await self.github_client.get(session, self.github_client.commits_url(owner_login, repo_name))

        if response.status == HTTP_CONFLICT:
            logger.warning(f"Repository '{owner_login}/{repo_name}' is empty or has no commits. Skipping.")
            return []

        if not response.ok:
            message = (
                f"Failed to fetch commits for '{owner_login}/{repo_name}'. "
                f"Status: {response.status}. Message: {response.body}"
            )
            logger.error(message)
            raise UpstreamError(response.status, message)

        return [GitHubTranslator.to_commit_record(raw) for raw in response.payload or []]
