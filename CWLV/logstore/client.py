"""
Log Store Client Module - HTTP access to the log viewer API

Handles:
- Group listing, stream listing and event search requests
- Continuation tokens for paged listings
- Translation of error responses into classified exceptions
- Async facade for use on the UI event loop
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from .errors import ErrorKind, LogStoreError, TransientFailure, STATUS_KINDS, error_for_kind
from .models import LogEvent, LogGroup, LogStream, Page, SearchCriteria


class LogStoreClient:
    """
    Blocking client for the log viewer HTTP surface

    Every method raises a LogStoreError subclass on failure; callers never
    see raw requests exceptions.
    """

    def __init__(self, base_url: str, timeout: float = 30.0,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client

        Args:
            base_url: Root URL of the API, e.g. http://127.0.0.1:8000
            timeout: Seconds to wait for each request
            session: Optional pre-configured requests session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"accept": "application/json"}
        self.logger = logging.getLogger(__name__)

    def list_groups_page(self, token: Optional[str] = None) -> Page[LogGroup]:
        """Fetch one page of log groups (the whole catalog when the server aggregates)"""
        params = {"nextToken": token} if token else None
        data = self._request("GET", "/groups", params=params)
        groups = [LogGroup.model_validate(g) for g in data.get("logGroups") or []]
        return Page(items=groups, next_token=data.get("nextToken"))

    def list_streams_page(self, group_name: str, token: Optional[str] = None) -> Page[LogStream]:
        """Fetch one page of streams belonging to a group"""
        body: Dict[str, Any] = {"logGroupName": group_name}
        if token:
            body["nextToken"] = token
        path = f"/groups/{quote(group_name, safe='')}/streams"
        data = self._request("PUT", path, json=body)
        streams = [LogStream.model_validate(s) for s in data.get("logStreams") or []]
        return Page(items=streams, next_token=data.get("nextToken"))

    def search(self, criteria: SearchCriteria) -> List[LogEvent]:
        """Run one (non-paginated) event search"""
        data = self._request("POST", "/search", json=criteria.to_payload())
        return [LogEvent.model_validate(e) for e in data.get("events") or []]

    def _request(self, method: str, path: str, **kwargs) -> dict:
        """Centralized request method with error translation"""
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, headers=self.headers, timeout=self.timeout, **kwargs
            )
        except requests.exceptions.Timeout as e:
            self.logger.error(f"Request timeout for {method} {url}")
            raise TransientFailure("Request timed out", cause=e) from e
        except requests.exceptions.ConnectionError as e:
            self.logger.error(f"Connection error for {method} {url}: {e}")
            raise TransientFailure(f"Connection error: {e}", cause=e) from e
        except requests.RequestException as e:
            self.logger.error(f"Request error for {method} {url}: {e}")
            raise TransientFailure(f"Error during request: {e}", cause=e) from e

        if not response.ok:
            raise error_from_response(response)

        try:
            return response.json()
        except ValueError as e:
            raise TransientFailure("Malformed response from log store", cause=e) from e


def error_from_response(response: requests.Response) -> LogStoreError:
    """
    Rebuild a classified error from an API error response

    The body's "kind" wins when present; otherwise the status code decides.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    message = body.get("error") or f"Request failed with status {response.status_code}"
    try:
        kind = ErrorKind(body.get("kind"))
    except ValueError:
        kind = STATUS_KINDS.get(response.status_code, ErrorKind.TRANSIENT_FAILURE)
    return error_for_kind(kind, message)


class AsyncLogStoreClient:
    """Coroutine facade over LogStoreClient; blocking calls run in worker threads"""

    def __init__(self, client: LogStoreClient):
        self.client = client

    async def list_groups_page(self, token: Optional[str] = None) -> Page[LogGroup]:
        return await asyncio.to_thread(self.client.list_groups_page, token)

    async def list_streams_page(self, group_name: str, token: Optional[str] = None) -> Page[LogStream]:
        return await asyncio.to_thread(self.client.list_streams_page, group_name, token)

    async def search(self, criteria: SearchCriteria) -> List[LogEvent]:
        return await asyncio.to_thread(self.client.search, criteria)
