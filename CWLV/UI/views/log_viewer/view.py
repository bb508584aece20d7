"""
Log Viewer View Module - Main UI orchestration

Handles:
- Main view composition and layout
- Wiring pickers, search inputs and buttons to the SelectionCoordinator
- Rendering every published SelectionState snapshot
- Running coordinator operations as Textual workers
- Export functionality
"""
from typing import Callable, Optional

from textual import on
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Button, DataTable, Input, Label

from CWLV.config import Settings
from CWLV.engine.coordinator import LogStoreGateway, SelectionCoordinator
from CWLV.engine.state import Phase, SelectionState
from CWLV.logstore.client import AsyncLogStoreClient, LogStoreClient
from CWLV.logstore.errors import ValidationFailed
from CWLV.util import export_events, parse_local_datetime, summarize_events

from .components import (
    CatalogPicker,
    ControlPanel,
    ErrorBanner,
    EventDetailsPanel,
    EventStatsPanel,
    SearchPanel,
)
from .event_table import LogEventTable

SEARCH_INPUT_IDS = {"filter-pattern-input", "start-time-input", "end-time-input", "limit-input"}

PHASE_LABELS = {
    Phase.IDLE: "",
    Phase.LOADING_GROUPS: "Loading log groups...",
    Phase.GROUPS_LOADED: "",
    Phase.LOADING_STREAMS: "Loading log streams...",
    Phase.STREAMS_LOADED: "",
    Phase.SEARCHING: "Searching...",
    Phase.RESULTS_LOADED: "",
    Phase.FAILED: "",
}


class LogViewerView(Vertical):
    """
    Log group browser and event search

    Features:
    - Debounced, virtualized group and stream pickers
    - Group selection cascades into a stream listing
    - Filter pattern, time range and limit search
    - Stale responses dropped by the coordinator
    - Export of the current result set
    """

    def __init__(self, gateway: Optional[LogStoreGateway] = None,
                 settings: Optional[Settings] = None, **kwargs):
        """
        Initialize the log viewer

        Args:
            gateway: Async log store access; an HTTP client for settings.api_url when omitted
            settings: Viewer settings (environment defaults when omitted)
        """
        super().__init__(**kwargs)
        self.settings = settings or Settings.from_env()
        if gateway is None:
            gateway = AsyncLogStoreClient(LogStoreClient(self.settings.api_url, self.settings.request_timeout))
        self.coordinator = SelectionCoordinator(gateway, default_limit=self.settings.search_limit)
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._rendered: Optional[SelectionState] = None

    def compose(self) -> ComposeResult:
        """Compose the log viewer layout"""
        with Container(id="log-viewer-controls"):
            with Horizontal(id="catalog-panel"):
                yield CatalogPicker(
                    "Log Group",
                    placeholder="Search log groups...",
                    debounce_seconds=self.settings.debounce_seconds,
                    overscan=self.settings.overscan,
                    empty_text="No log groups",
                    id="group-picker",
                )
                yield CatalogPicker(
                    "Log Stream",
                    placeholder="Search log streams...",
                    debounce_seconds=self.settings.debounce_seconds,
                    overscan=self.settings.overscan,
                    empty_text="Select a log group first",
                    id="stream-picker",
                )
            yield SearchPanel(id="search-panel")
            yield ControlPanel(id="control-panel")
            yield ErrorBanner("", id="error-banner")

        with Horizontal(id="log-viewer-content"):
            with Vertical(classes="main-panel", id="log-main-panel"):
                yield Label("[bold]Log Events[/bold]", classes="section-title")
                yield LogEventTable(id="log-event-table")

            with Vertical(classes="right-panel", id="log-sidebar"):
                yield EventStatsPanel(id="event-stats-panel")
                yield EventDetailsPanel(id="event-details-panel")

    def on_mount(self) -> None:
        """Subscribe to the coordinator and load the group catalog"""
        self.query_one("#error-banner", ErrorBanner).hide()
        self._unsubscribe = self.coordinator.subscribe(self.render_state)
        self.render_state(self.coordinator.state)
        self.run_worker(self.coordinator.load_groups(), group="groups", exit_on_error=False)

    def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None

    # Rendering

    def render_state(self, state: SelectionState) -> None:
        """
        Bring the widgets in line with a state snapshot

        Lists and the table are only rebuilt when their tuple changed.
        """
        previous = self._rendered
        self._rendered = state

        group_picker = self.query_one("#group-picker", CatalogPicker)
        stream_picker = self.query_one("#stream-picker", CatalogPicker)

        if previous is None or previous.groups is not state.groups:
            group_picker.set_items([group.name for group in state.groups])
        if previous is None or previous.streams is not state.streams:
            stream_picker.set_items([stream.name for stream in state.streams])
        group_picker.set_selected(state.group_name)
        stream_picker.set_selected(state.stream_name)

        if previous is None or previous.events is not state.events:
            self._show_events(state)

        banner = self.query_one("#error-banner", ErrorBanner)
        if state.error:
            banner.show_error(state.error.message)
        else:
            banner.hide()

        status = PHASE_LABELS.get(state.search_phase) or PHASE_LABELS.get(state.catalog_phase, "")
        self.query_one("#status-label", Label).update(status)
        self.query_one("#search-btn", Button).disabled = not state.can_search

    def _show_events(self, state: SelectionState) -> None:
        table = self.query_one("#log-event-table", LogEventTable)
        table.set_events(state.events)

        stats = summarize_events(state.events)
        stats_panel = self.query_one("#event-stats-panel", EventStatsPanel)
        stats_panel.total_events = stats['total']
        stats_panel.stream_count = len(stats['streams'])
        stats_panel.error_count = stats['errors']
        stats_panel.warning_count = stats['warnings']

        self.query_one("#event-details-panel", EventDetailsPanel).clear_details()

    # Operations

    def refresh_groups(self) -> None:
        self.run_worker(self.coordinator.refresh_groups(), group="groups", exit_on_error=False)
        self.notify("Refreshing log groups", severity="information")

    def start_search(self) -> bool:
        """
        Read the search inputs and run a search

        Returns:
            True when a search was issued
        """
        try:
            pattern = self.query_one("#filter-pattern-input", Input).value
            start_time = parse_local_datetime(self.query_one("#start-time-input", Input).value, "start time")
            end_time = parse_local_datetime(self.query_one("#end-time-input", Input).value, "end time")
            raw_limit = self.query_one("#limit-input", Input).value.strip()
            limit = int(raw_limit) if raw_limit else self.settings.search_limit

            self.coordinator.set_filter_pattern(pattern)
            self.coordinator.set_time_range(start_time, end_time)
            self.coordinator.set_limit(limit)
            criteria = self.coordinator.build_criteria()
        except ValidationFailed as e:
            message = "Select a log group first" if str(e) == "missing group" else str(e)
            self.notify(message, severity="warning")
            return False
        except ValueError:
            self.notify("Limit must be a whole number", severity="warning")
            return False

        self.run_worker(self.coordinator.search(criteria), group="search", exit_on_error=False)
        return True

    def export_results(self) -> Optional[str]:
        """Export the current result set to the log directory"""
        state = self.coordinator.state
        if not state.events:
            self.notify("No log events to export", severity="warning")
            return None

        try:
            export_file = export_events(state.events, self.settings.log_dir, state.group_name)
        except OSError as e:
            self.notify(f"Export failed: {e}", severity="error")
            return None

        self.notify(f"Exported {len(state.events)} events to {export_file.name}", severity="information")
        return str(export_file)

    def clear_all(self) -> None:
        """Reset selection, inputs and results; the group catalog stays"""
        for input_id in SEARCH_INPUT_IDS:
            self.query_one(f"#{input_id}", Input).value = ""
        self.query_one("#group-picker", CatalogPicker).clear_query()
        self.query_one("#stream-picker", CatalogPicker).clear_query()
        self.coordinator.clear_all()

    def dismiss_error(self) -> None:
        """Hide the error banner without touching the loaded data"""
        self.coordinator.dismiss_error()

    # Event Handlers

    @on(CatalogPicker.Selected, "#group-picker")
    def handle_group_selected(self, event: CatalogPicker.Selected) -> None:
        self.run_worker(self.coordinator.select_group(event.value), group="streams", exit_on_error=False)

    @on(CatalogPicker.Selected, "#stream-picker")
    def handle_stream_selected(self, event: CatalogPicker.Selected) -> None:
        # Choosing the current stream again widens the search to the whole group
        if event.value == self.coordinator.state.stream_name:
            self.coordinator.select_stream("")
        else:
            self.coordinator.select_stream(event.value)

    @on(Input.Submitted)
    def handle_search_submitted(self, event: Input.Submitted) -> None:
        """Enter in any search field runs the search"""
        if event.input.id in SEARCH_INPUT_IDS:
            self.start_search()

    @on(Button.Pressed, "#search-btn")
    def handle_search(self) -> None:
        self.start_search()

    @on(Button.Pressed, "#refresh-groups-btn")
    def handle_refresh(self) -> None:
        self.refresh_groups()

    @on(Button.Pressed, "#export-btn")
    def handle_export(self) -> None:
        self.export_results()

    @on(Button.Pressed, "#clear-btn")
    def handle_clear(self) -> None:
        self.clear_all()
        self.notify("Filters cleared", severity="information")

    @on(DataTable.RowHighlighted, "#log-event-table")
    def handle_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        table = self.query_one("#log-event-table", LogEventTable)
        log_event = table.get_event(event.row_key)
        if log_event:
            self.query_one("#event-details-panel", EventDetailsPanel).show_event(log_event)
