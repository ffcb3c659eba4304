import logging
from datetime import datetime, timezone
from http import HTTPStatus

from aiohttp import web

from github_activity.application.activity_service import ActivityService
from github_activity.domain.exceptions import UpstreamError
from github_activity.domain.models import report_to_jsonable

logger = logging.getLogger(__name__)

ACTIVITY_SERVICE_KEY = web.AppKey("activity_service", ActivityService)

GENERIC_ERROR_MESSAGE = "An unexpected server error occurred. Please contact support."


def _reason_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def error_response(status: int, message: str, path: str) -> web.Response:
    """Renders the {timestamp, status, error, message, path} error body."""
    body = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "status": status,
        "error": _reason_phrase(status),
        "message": message,
        "path": path,
    }
    return web.json_response(body, status=status)


@web.middleware
async def error_middleware(request: web.Request, handler):
    """
    Maps exceptions raised by handlers to JSON error bodies.

    UpstreamError keeps GitHub's status code and message; anything else is
    logged in full and reported as a generic 500.
    """
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except UpstreamError as e:
        return error_response(e.status, e.message, request.path)
    except Exception:
        logger.exception(f"An unexpected error occurred while handling {request.path}")
        return error_response(int(HTTPStatus.INTERNAL_SERVER_ERROR), GENERIC_ERROR_MESSAGE, request.path)


async def get_repository_activity(request: web.Request) -> web.Response:
    username = request.match_info["username"]
    service = request.app[ACTIVITY_SERVICE_KEY]

    report = await service.get_repository_activity(username)
    return web.json_response(report_to_jsonable(report))


def create_app(activity_service: ActivityService) -> web.Application:
    app = web.Application(middlewares=[error_middleware])
    app[ACTIVITY_SERVICE_KEY] = activity_service
    app.router.add_get("/api/activity/{username}", get_repository_activity)
    return app
