"""Starlette ASGI application exposing hotspot analyses as JSON."""

from __future__ import annotations

import logging
from typing import Any, Optional

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from .. import __version__
from ..analysis.models import HotspotAnalysis
from ..analysis.ranking import get_file_hotspot, sort_files
from ..api import analyze
from ..config import HotspotConfig
from ..exceptions import (
    AnalysisError,
    AuthenticationRequiredError,
    ConfigurationError,
    HistorySourceError,
    HotspotLensError,
    NotAGitRepositoryError,
    RepositoryNotFoundError,
)

logger = logging.getLogger(__name__)

_SOURCE_TYPES = ("auto", "local", "github")
_SORT_KEYS = ("score", "changes", "churn")


class BadRequest(Exception):
    """Invalid query parameters."""


def error_status(error: HotspotLensError) -> int:
    """HTTP status for a typed error."""
    if isinstance(error, AuthenticationRequiredError):
        return 401
    if isinstance(error, RepositoryNotFoundError):
        return 404
    if isinstance(error, NotAGitRepositoryError):
        return 422
    if isinstance(error, HistorySourceError):
        return 502
    if isinstance(error, (AnalysisError, ConfigurationError)):
        return 400
    return 500


def _error_response(kind: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": kind, "message": message}, status_code=status_code)


def _query_params(request: Request) -> dict[str, Any]:
    params = request.query_params
    repo = params.get("repo")
    if not repo:
        raise BadRequest("query parameter 'repo' is required")

    window_raw = params.get("timeWindow")
    time_window: Optional[int] = None
    if window_raw is not None:
        try:
            time_window = int(window_raw)
        except ValueError:
            raise BadRequest("timeWindow must be an integer number of days")
        if time_window < 1:
            raise BadRequest("timeWindow must be positive")

    source = params.get("source", "auto")
    if source not in _SOURCE_TYPES:
        raise BadRequest(f"source must be one of {', '.join(_SOURCE_TYPES)}")

    return {
        "repo": repo,
        "ref": params.get("ref") or None,
        "time_window": time_window,
        "source_type": source,
    }


def create_app(config: HotspotConfig) -> Starlette:
    """Build the Starlette application bound to *config*."""

    async def run(request: Request) -> HotspotAnalysis:
        query = _query_params(request)
        return await run_in_threadpool(analyze, config=config, **query)

    async def api_health(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok", "version": __version__})

    async def api_hotspots(request: Request) -> JSONResponse:
        sort_by = request.query_params.get("sortBy", "score")
        try:
            if sort_by not in _SORT_KEYS:
                raise BadRequest(f"sortBy must be one of {', '.join(_SORT_KEYS)}")
            result = await run(request)
        except BadRequest as e:
            return _error_response("bad_request", str(e), 400)
        except HotspotLensError as e:
            return _handle_error(e)

        data = result.to_dict()
        if sort_by != "score":
            data["files"] = [f.to_dict() for f in sort_files(result.files, by=sort_by)]
        return JSONResponse(data)

    async def api_file_hotspot(request: Request) -> JSONResponse:
        path = request.query_params.get("path")
        try:
            if not path:
                raise BadRequest("query parameter 'path' is required")
            result = await run(request)
        except BadRequest as e:
            return _error_response("bad_request", str(e), 400)
        except HotspotLensError as e:
            return _handle_error(e)

        hotspot = get_file_hotspot(result, path)
        if hotspot is None:
            return _error_response(
                "not_a_hotspot",
                f"{path} was not changed in the last {result.time_window} days",
                404,
            )
        return JSONResponse(hotspot.to_dict())

    return Starlette(
        routes=[
            Route("/api/health", api_health),
            Route("/api/hotspots", api_hotspots),
            Route("/api/hotspots/file", api_file_hotspot),
        ],
    )


def _handle_error(error: HotspotLensError) -> JSONResponse:
    status = error_status(error)
    if status >= 500:
        logger.error("Hotspot analysis failed: %s", error)
    else:
        logger.info("Hotspot request rejected (%s): %s", error.kind, error)
    return JSONResponse(error.to_dict(), status_code=status)
