"""
API Controller Module - HTTP surface of the log viewer

Routes:
- GET  /groups                     list (or page through) log groups
- PUT  /groups/{group}/streams     one page of streams for a group
- POST /search                     one event search

Failures are answered with {"error", "kind"}: 401 for credential and
permission problems, 500 for everything else.
"""
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Body, FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from CWLV.config import Settings
from CWLV.logstore.errors import classify, describe, http_status_for
from CWLV.logstore.models import SearchCriteria, effective_limit
from CWLV.logstore.paginator import PaginatedFetcher

from .source import LogSource

logger = logging.getLogger(__name__)


class StreamListRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    log_group_name: Optional[str] = Field(default=None, alias="logGroupName")
    next_token: Optional[str] = Field(default=None, alias="nextToken")


class LogStoreController:
    """
    Registers the log viewer routes on a router

    Group listing is aggregated server-side through PaginatedFetcher unless
    settings.aggregate_groups is off, in which case clients page through
    with nextToken themselves.
    """

    def __init__(self, router: APIRouter, source: LogSource, settings: Settings):
        self.source = source
        self.settings = settings
        self.fetcher = PaginatedFetcher()

        def handle_exception(e: Exception, operation: str) -> JSONResponse:
            kind = classify(e)
            status_code = http_status_for(kind)
            if status_code == 500:
                logger.error(f"Failed to {operation}: {e}", exc_info=True)
            else:
                logger.warning(f"Failed to {operation}: {kind.value}")
            return JSONResponse(
                status_code=status_code,
                content={"error": describe(e, operation), "kind": kind.value},
            )

        self._register_routes(router, handle_exception)

    def _register_routes(self, router: APIRouter, handle_exception):
        page_size = self.settings.page_size

        @router.get("/groups", tags=["Log groups"], summary="List log groups")
        def list_groups(
            next_token: Annotated[Optional[str], Query(alias="nextToken")] = None,
        ):
            try:
                if self.settings.aggregate_groups and not next_token:
                    groups = self.fetcher.collect(
                        lambda token: self.source.describe_log_groups(token, page_size)
                    )
                    return {"logGroups": [g.to_wire() for g in groups]}

                page = self.source.describe_log_groups(next_token, page_size)
                body = {"logGroups": [g.to_wire() for g in page.items]}
                if page.next_token:
                    body["nextToken"] = page.next_token
                return body
            except Exception as e:
                return handle_exception(e, "fetch log groups")

        @router.put("/groups/{group_name:path}/streams", tags=["Log streams"],
                    summary="List one page of log streams of a group")
        def list_streams(
            group_name: str,
            request: Annotated[Optional[StreamListRequest], Body()] = None,
        ):
            try:
                name = (request.log_group_name if request else None) or group_name
                token = request.next_token if request else None
                page = self.source.describe_log_streams(name, token, page_size)
                body = {"logStreams": [s.to_wire() for s in page.items]}
                if page.next_token:
                    body["nextToken"] = page.next_token
                return body
            except Exception as e:
                return handle_exception(e, "fetch log streams")

        @router.post("/search", tags=["Log events"], summary="Search log events")
        def search(criteria: SearchCriteria):
            try:
                criteria = criteria.model_copy(update={"limit": effective_limit(criteria.limit)})
                events = self.source.filter_log_events(criteria)
                return {"events": [e.to_wire() for e in events]}
            except Exception as e:
                return handle_exception(e, "search logs")


def create_app(source: LogSource, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the API application

    Args:
        source: Backend the routes read from
        settings: Server settings (environment defaults when omitted)
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="CWLV Log Viewer API")
    router = APIRouter()
    LogStoreController(router, source, settings)
    app.include_router(router)
    logger.info(f"API ready (aggregate_groups={settings.aggregate_groups}, page_size={settings.page_size})")
    return app
