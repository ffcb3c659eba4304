import argparse
import asyncio
import sys
import logging
from typing import List, Optional
from aiohttp import web
from dotenv import load_dotenv

from github_activity.config import Settings, load_settings
from github_activity.infrastructure.github_client import GitHubRestClient
from github_activity.application.activity_service import ActivityService
from github_activity.api.server import create_app
from github_activity.domain.exceptions import ConfigurationError, UpstreamError
from github_activity.domain.models import report_to_json

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="github-activity",
        description="Report recent commits of every public repository of a GitHub user or organization.",
    )
    parser.add_argument(
        "account",
        nargs="?",
        help="GitHub user or organization login. Without it, the HTTP API is served.",
    )
    return parser.parse_args(argv)


def build_service(settings: Settings) -> ActivityService:
    github_client = GitHubRestClient(
        token=settings.github_token,
        base_url=settings.api_base_url,
        request_timeout=settings.request_timeout,
    )
    return ActivityService(github_client=github_client)


async def run_once(service: ActivityService, account: str) -> int:
    """Fetches the report for one account and logs it as JSON. Returns the exit code."""
    logger.info(f"CLI mode: Fetching activity for '{account}'")

    try:
        report = await service.get_repository_activity(account)
    except UpstreamError as e:
        logger.error(f"GitHub request failed with status {e.status}: {e.message}")
        return 1
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        return 1

    logger.info(f"Repository activity:\n{report_to_json(report, indent=2)}")
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    configure_logging()

    # Load environment variables from .env file
    load_dotenv()
    args = parse_args(argv)

    # Refuse to start without a usable token and base URL
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    service = build_service(settings)

    if args.account:
        sys.exit(asyncio.run(run_once(service, args.account)))

    logger.info("No account provided. Running as web server.")
    logger.info("To use the CLI: github-activity <github-username-or-org>")
    web.run_app(create_app(service), host=settings.server_host, port=settings.server_port)


if __name__ == "__main__":
    main()
