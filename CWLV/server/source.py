"""
Log Source Module - Backends the API server reads from

Handles:
- The LogSource interface mirroring the store's describe/filter calls
- An in-memory catalog (loaded from JSON) with continuation tokens
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from CWLV.logstore.errors import NotFound, TransientFailure
from CWLV.logstore.models import LogEvent, LogGroup, LogStream, Page, SearchCriteria, effective_limit


class LogSource(ABC):
    """Paged access to a log store, as seen by the API server"""

    @abstractmethod
    def describe_log_groups(self, token: Optional[str] = None, limit: int = 50) -> Page[LogGroup]:
        """Return one page of log groups"""

    @abstractmethod
    def describe_log_streams(self, group_name: str, token: Optional[str] = None,
                             limit: int = 50) -> Page[LogStream]:
        """Return one page of streams of a group"""

    @abstractmethod
    def filter_log_events(self, criteria: SearchCriteria) -> List[LogEvent]:
        """Return events matching the criteria, at most criteria.limit"""


def _page(items: Sequence, token: Optional[str], limit: int) -> Page:
    """Slice a list into a page; tokens are stringified offsets"""
    try:
        start = int(token) if token else 0
    except ValueError:
        raise TransientFailure(f"invalid continuation token: {token!r}")
    if start < 0:
        raise TransientFailure(f"invalid continuation token: {token!r}")
    limit = max(1, limit)
    end = start + limit
    next_token = str(end) if end < len(items) else None
    return Page(items=list(items[start:end]), next_token=next_token)


class InMemoryLogSource(LogSource):
    """
    Log source over an in-memory catalog

    Features:
    - Groups, streams and events held in insertion order
    - Offset-based continuation tokens
    - Plain substring matching for filterPattern (no pattern grammar)
    """

    def __init__(self):
        self.groups: Dict[str, LogGroup] = {}
        self.streams: Dict[str, List[LogStream]] = {}
        self.events: Dict[str, List[LogEvent]] = {}
        self.logger = logging.getLogger(__name__)

    def add_group(self, group: LogGroup) -> None:
        self.groups[group.name] = group
        self.streams.setdefault(group.name, [])
        self.events.setdefault(group.name, [])

    def add_stream(self, group_name: str, stream: LogStream) -> None:
        self._require_group(group_name)
        self.streams[group_name].append(stream)

    def add_event(self, group_name: str, event: LogEvent) -> None:
        self._require_group(group_name)
        self.events[group_name].append(event)

    @classmethod
    def from_dict(cls, catalog: dict) -> "InMemoryLogSource":
        """
        Build a source from a catalog document

        Expected shape:
            {"logGroups": [{"logGroupName": ..., "logStreams": [...],
                            "events": [...]}]}
        """
        source = cls()
        for raw_group in catalog.get("logGroups", []):
            group = LogGroup.model_validate(raw_group)
            source.add_group(group)
            for raw_stream in raw_group.get("logStreams", []):
                source.add_stream(group.name, LogStream.model_validate(raw_stream))
            for raw_event in raw_group.get("events", []):
                source.add_event(group.name, LogEvent.model_validate(raw_event))
        return source

    @classmethod
    def from_json_file(cls, path: Path) -> "InMemoryLogSource":
        with open(path, 'r', encoding='utf-8') as f:
            catalog = json.load(f)
        source = cls.from_dict(catalog)
        source.logger.info(f"Loaded catalog with {len(source.groups)} groups from {path}")
        return source

    def _require_group(self, group_name: str) -> None:
        if group_name not in self.groups:
            raise NotFound(f"log group {group_name!r} does not exist")

    def describe_log_groups(self, token: Optional[str] = None, limit: int = 50) -> Page[LogGroup]:
        return _page(list(self.groups.values()), token, limit)

    def describe_log_streams(self, group_name: str, token: Optional[str] = None,
                             limit: int = 50) -> Page[LogStream]:
        self._require_group(group_name)
        return _page(self.streams[group_name], token, limit)

    def filter_log_events(self, criteria: SearchCriteria) -> List[LogEvent]:
        self._require_group(criteria.group_name)
        needle = criteria.filter_pattern or ""
        matches = []
        for event in self.events[criteria.group_name]:
            if criteria.stream_name and event.stream_name != criteria.stream_name:
                continue
            if criteria.start_time and event.timestamp < criteria.start_time:
                continue
            if criteria.end_time and event.timestamp > criteria.end_time:
                continue
            if needle and needle not in event.message:
                continue
            matches.append(event)
            if len(matches) >= effective_limit(criteria.limit):
                break
        return matches
