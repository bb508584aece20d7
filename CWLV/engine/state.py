"""State snapshots published by the selection coordinator.

SelectionState is immutable; the coordinator derives each new snapshot
with dataclasses.replace and hands it to its observers. The catalog phase
(groups and streams) and the search phase move independently.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from CWLV.logstore.errors import ErrorKind, classify, describe
from CWLV.logstore.models import DEFAULT_SEARCH_LIMIT, LogEvent, LogGroup, LogStream


class Phase(str, Enum):
    IDLE = "Idle"
    LOADING_GROUPS = "LoadingGroups"
    GROUPS_LOADED = "GroupsLoaded"
    LOADING_STREAMS = "LoadingStreams"
    STREAMS_LOADED = "StreamsLoaded"
    SEARCHING = "Searching"
    RESULTS_LOADED = "ResultsLoaded"
    FAILED = "Failed"


@dataclass(frozen=True)
class ErrorReport:
    """Classified failure shown in the error banner"""

    kind: ErrorKind
    message: str
    operation: str = ""

    @classmethod
    def from_exception(cls, error: BaseException, operation: str) -> "ErrorReport":
        return cls(kind=classify(error), message=describe(error, operation), operation=operation)


@dataclass(frozen=True)
class SelectionState:
    groups: Tuple[LogGroup, ...] = ()
    streams: Tuple[LogStream, ...] = ()
    events: Tuple[LogEvent, ...] = ()
    group_name: str = ""
    stream_name: str = ""
    filter_pattern: str = ""
    start_time: Optional[int] = None
    end_time: Optional[int] = None
    limit: int = DEFAULT_SEARCH_LIMIT
    catalog_phase: Phase = Phase.IDLE
    search_phase: Phase = Phase.IDLE
    error: Optional[ErrorReport] = None
    # Generation counters, one per slot whose completions can go stale
    group_generation: int = 0
    stream_generation: int = 0
    event_generation: int = 0

    @property
    def is_loading(self) -> bool:
        return self.catalog_phase in (Phase.LOADING_GROUPS, Phase.LOADING_STREAMS) \
            or self.search_phase == Phase.SEARCHING

    @property
    def can_search(self) -> bool:
        return bool(self.group_name) and self.search_phase != Phase.SEARCHING
