"""
Log Store Models Module - Catalog entities and search criteria

Handles:
- Log group, log stream and log event records as returned by the store
- Search criteria value objects and their wire payload
- Page container for token-continuation listings
- Server-side limit clamping
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field


DEFAULT_SEARCH_LIMIT = 100
MAX_SEARCH_LIMIT = 10000

T = TypeVar("T")


class StoreModel(BaseModel):
    """Immutable record using the store's camelCase names on the wire"""

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        """Serialize using wire field names, dropping unset optionals"""
        return self.model_dump(by_alias=True, exclude_none=True)


class LogGroup(StoreModel):
    name: str = Field(alias="logGroupName")
    creation_time: int = Field(default=0, alias="creationTime")
    retention_days: Optional[int] = Field(default=None, alias="retentionInDays")
    stored_bytes: Optional[int] = Field(default=None, alias="storedBytes")


class LogStream(StoreModel):
    name: str = Field(alias="logStreamName")
    creation_time: int = Field(default=0, alias="creationTime")
    last_event_time: Optional[int] = Field(default=None, alias="lastEventTimestamp")
    last_ingestion_time: Optional[int] = Field(default=None, alias="lastIngestionTime")
    stored_bytes: Optional[int] = Field(default=None, alias="storedBytes")


class LogEvent(StoreModel):
    """A single log event; events keep the order the store returned them in"""

    timestamp: int
    message: str
    stream_name: str = Field(alias="logStreamName")
    event_id: str = Field(alias="eventId")
    ingestion_time: int = Field(default=0, alias="ingestionTime")


class SearchCriteria(StoreModel):
    """
    Parameters of one event search

    Built fresh for every search and never mutated afterwards.
    """

    group_name: str = Field(alias="logGroupName")
    stream_name: Optional[str] = Field(default=None, alias="logStreamName")
    filter_pattern: Optional[str] = Field(default=None, alias="filterPattern")
    start_time: Optional[int] = Field(default=None, alias="startTime")
    end_time: Optional[int] = Field(default=None, alias="endTime")
    limit: Optional[int] = DEFAULT_SEARCH_LIMIT

    def to_payload(self) -> Dict[str, Any]:
        """
        Build the request body for the search endpoint

        Empty strings and zero timestamps count as "not provided" and are
        left out of the payload entirely.

        Returns:
            JSON-ready dictionary with wire field names
        """
        payload: Dict[str, Any] = {"logGroupName": self.group_name}
        if self.stream_name:
            payload["logStreamName"] = self.stream_name
        if self.filter_pattern:
            payload["filterPattern"] = self.filter_pattern
        if self.start_time:
            payload["startTime"] = int(self.start_time)
        if self.end_time:
            payload["endTime"] = int(self.end_time)
        if self.limit is not None:
            payload["limit"] = self.limit
        return payload


def effective_limit(limit: Optional[int]) -> int:
    """Clamp a requested limit: 1..10000 passes, anything else becomes the default"""
    if limit is None or limit < 1 or limit > MAX_SEARCH_LIMIT:
        return DEFAULT_SEARCH_LIMIT
    return limit


@dataclass
class Page(Generic[T]):
    """One page of a token-continuation listing"""
    items: List[T] = field(default_factory=list)
    next_token: Optional[str] = None
