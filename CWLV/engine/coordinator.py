"""
Selection Coordinator Module - Group/stream/search state machine

Handles:
- Loading and refreshing the log group catalog
- Cascading group selection into a dependent stream listing
- Composing and running event searches
- Discarding stale completions with per-slot generation counters
- Publishing SelectionState snapshots to observers
"""
import logging
from dataclasses import replace
from functools import partial
from typing import Callable, List, Optional, Protocol

from CWLV.logstore.errors import ValidationFailed
from CWLV.logstore.models import LogEvent, LogGroup, LogStream, Page, SearchCriteria
from CWLV.logstore.paginator import PaginatedFetcher

from .state import ErrorReport, Phase, SelectionState


class LogStoreGateway(Protocol):
    """Async operations the coordinator needs from the log store"""

    async def list_groups_page(self, token: Optional[str] = None) -> Page[LogGroup]: ...

    async def list_streams_page(self, group_name: str, token: Optional[str] = None) -> Page[LogStream]: ...

    async def search(self, criteria: SearchCriteria) -> List[LogEvent]: ...


Observer = Callable[[SelectionState], None]


class SelectionCoordinator:
    """
    Owns the SelectionState and every transition of it

    All operations run on one event loop. Each asynchronous operation
    captures the generation of its slot when issued and re-checks it on
    completion; a mismatch means a newer operation (or a reset) superseded
    it and the result is dropped. Nothing in flight is ever cancelled.
    """

    def __init__(self, gateway: LogStoreGateway, fetcher: Optional[PaginatedFetcher] = None,
                 default_limit: Optional[int] = None):
        """
        Initialize the coordinator

        Args:
            gateway: Async log store access (AsyncLogStoreClient in the app)
            fetcher: Pagination driver for group and stream listings
            default_limit: Search limit used until set_limit() is called
        """
        self.gateway = gateway
        self.fetcher = fetcher or PaginatedFetcher()
        self.logger = logging.getLogger(__name__)
        self._observers: List[Observer] = []
        self._state = SelectionState()
        if default_limit is not None:
            self._state = replace(self._state, limit=default_limit)

    @property
    def state(self) -> SelectionState:
        return self._state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer for state snapshots

        Returns:
            Callable that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self, state: SelectionState) -> SelectionState:
        self._state = state
        for observer in list(self._observers):
            observer(state)
        return state

    # Catalog

    async def load_groups(self) -> SelectionState:
        """Fetch the full group catalog, replacing the current one on success"""
        generation = self._state.group_generation + 1
        # A pending stream load keeps its phase until its own response lands
        loading = self._state.catalog_phase == Phase.LOADING_STREAMS
        self._publish(replace(
            self._state,
            group_generation=generation,
            catalog_phase=Phase.LOADING_STREAMS if loading else Phase.LOADING_GROUPS,
            error=None,
        ))
        self.logger.info("Loading log groups")

        try:
            groups = await self.fetcher.acollect(self.gateway.list_groups_page)
        except Exception as e:
            if generation != self._state.group_generation:
                self.logger.debug(f"Ignoring failure of superseded group load #{generation}")
                return self._state
            self.logger.warning(f"Group load failed: {e}")
            return self._publish(replace(
                self._state,
                catalog_phase=Phase.FAILED,
                error=ErrorReport.from_exception(e, "fetch log groups"),
            ))

        if generation != self._state.group_generation:
            self.logger.debug(f"Dropping stale group load #{generation}")
            return self._state

        self.logger.info(f"Loaded {len(groups)} log groups")
        return self._publish(replace(
            self._state,
            groups=tuple(groups),
            catalog_phase=self._settled_catalog_phase(has_groups=True),
        ))

    async def refresh_groups(self) -> SelectionState:
        """Manual refresh; identical to the startup load"""
        return await self.load_groups()

    def _settled_catalog_phase(self, has_groups: bool = False) -> Phase:
        if self._state.catalog_phase == Phase.LOADING_STREAMS:
            return Phase.LOADING_STREAMS
        if self._state.group_name and self._state.streams:
            return Phase.STREAMS_LOADED
        if has_groups or self._state.groups:
            return Phase.GROUPS_LOADED
        return Phase.IDLE

    async def select_group(self, name: Optional[str]) -> SelectionState:
        """
        Make a group current and load its streams

        The stream and event slots are both invalidated so that anything
        still in flight for the previous group is ignored when it lands.

        Args:
            name: Group to select; empty or None clears the selection
        """
        name = name or ""
        stream_generation = self._state.stream_generation + 1
        self._publish(replace(
            self._state,
            group_name=name,
            stream_name="",
            streams=(),
            events=(),
            stream_generation=stream_generation,
            event_generation=self._state.event_generation + 1,
            catalog_phase=Phase.LOADING_STREAMS if name else
            (Phase.GROUPS_LOADED if self._state.groups else Phase.IDLE),
            search_phase=Phase.IDLE,
            error=None,
        ))

        if not name:
            return self._state

        self.logger.info(f"Loading streams for {name}")
        try:
            streams = await self.fetcher.acollect(partial(self.gateway.list_streams_page, name))
        except Exception as e:
            if stream_generation != self._state.stream_generation:
                self.logger.debug(f"Ignoring failure of superseded stream load for {name}")
                return self._state
            self.logger.warning(f"Stream load for {name} failed: {e}")
            return self._publish(replace(
                self._state,
                catalog_phase=Phase.FAILED,
                error=ErrorReport.from_exception(e, "fetch log streams"),
            ))

        if stream_generation != self._state.stream_generation or name != self._state.group_name:
            self.logger.debug(f"Dropping stale streams of {name}")
            return self._state

        self.logger.info(f"Loaded {len(streams)} streams for {name}")
        return self._publish(replace(
            self._state,
            streams=tuple(streams),
            catalog_phase=Phase.STREAMS_LOADED,
        ))

    def select_stream(self, name: Optional[str]) -> SelectionState:
        """Set the current stream; streams are already loaded so nothing is fetched"""
        return self._publish(replace(self._state, stream_name=name or ""))

    # Search inputs

    def set_filter_pattern(self, pattern: Optional[str]) -> SelectionState:
        return self._publish(replace(self._state, filter_pattern=pattern or ""))

    def set_time_range(self, start_time: Optional[int], end_time: Optional[int]) -> SelectionState:
        """Set the search bounds in epoch milliseconds; None leaves a bound open"""
        return self._publish(replace(self._state, start_time=start_time, end_time=end_time))

    def set_limit(self, limit: int) -> SelectionState:
        return self._publish(replace(self._state, limit=limit))

    def build_criteria(self) -> SearchCriteria:
        """
        Compose a fresh SearchCriteria from the current selection

        Raises:
            ValidationFailed: no group selected, or start after end
        """
        state = self._state
        if not state.group_name:
            raise ValidationFailed("missing group")
        if state.start_time and state.end_time and state.start_time > state.end_time:
            raise ValidationFailed("start time is after end time")
        return SearchCriteria(
            group_name=state.group_name,
            stream_name=state.stream_name or None,
            filter_pattern=state.filter_pattern or None,
            start_time=state.start_time or None,
            end_time=state.end_time or None,
            limit=state.limit,
        )

    # Search

    async def search(self, criteria: Optional[SearchCriteria] = None) -> SelectionState:
        """
        Run one event search and apply it unless superseded

        Args:
            criteria: Explicit criteria; built from the selection when omitted

        Raises:
            ValidationFailed: no group is selected
        """
        if not self._state.group_name:
            raise ValidationFailed("missing group")
        if criteria is None:
            criteria = self.build_criteria()

        generation = self._state.event_generation + 1
        self._publish(replace(
            self._state,
            event_generation=generation,
            search_phase=Phase.SEARCHING,
            error=None,
        ))
        self.logger.info(f"Searching {criteria.group_name} (search #{generation})")

        try:
            events = await self.gateway.search(criteria)
        except Exception as e:
            if generation != self._state.event_generation:
                self.logger.debug(f"Ignoring failure of superseded search #{generation}")
                return self._state
            self.logger.warning(f"Search #{generation} failed: {e}")
            return self._publish(replace(
                self._state,
                search_phase=Phase.FAILED,
                error=ErrorReport.from_exception(e, "search logs"),
            ))

        if generation != self._state.event_generation:
            self.logger.debug(f"Dropping stale result of search #{generation}")
            return self._state

        self.logger.info(f"Search #{generation} returned {len(events)} events")
        return self._publish(replace(
            self._state,
            events=tuple(events),
            search_phase=Phase.RESULTS_LOADED,
        ))

    def clear_all(self) -> SelectionState:
        """
        Reset the selection, search inputs and results

        The group catalog stays loaded. Stream and event generations move
        forward so in-flight completions become no-ops.
        """
        state = self._state
        return self._publish(replace(
            state,
            group_name="",
            stream_name="",
            filter_pattern="",
            start_time=None,
            end_time=None,
            streams=(),
            events=(),
            error=None,
            stream_generation=state.stream_generation + 1,
            event_generation=state.event_generation + 1,
            catalog_phase=Phase.LOADING_GROUPS if state.catalog_phase == Phase.LOADING_GROUPS else
            (Phase.GROUPS_LOADED if state.groups else Phase.IDLE),
            search_phase=Phase.IDLE,
        ))

    def dismiss_error(self) -> SelectionState:
        return self._publish(replace(self._state, error=None))
