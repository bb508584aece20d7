"""
Log Viewer Components Module - UI widgets and panels

Handles:
- Virtualized catalog list with keyboard navigation
- Searchable group/stream pickers with debounced filtering
- Search inputs and action buttons
- Event statistics, event details and the error banner
"""
from typing import List, Optional, Sequence

from rich.text import Text
from textual import events, on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Static

from CWLV.engine.debounce import DebouncedFilter, filter_by_name
from CWLV.engine.window import VirtualizedWindow
from CWLV.logstore.models import LogEvent
from CWLV.util import format_timestamp


class CatalogList(Widget, can_focus=True):
    """
    Scrollable list that only renders the rows in view

    Features:
    - Row range computed by VirtualizedWindow (one terminal row per item)
    - Keyboard active index kept on screen
    - Check mark on the selected entry
    """

    BINDINGS = [
        Binding("up", "cursor_up", "Up", show=False),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("pageup", "page_up", "Page up", show=False),
        Binding("pagedown", "page_down", "Page down", show=False),
        Binding("enter", "choose", "Select", show=False),
    ]

    class Chosen(Message):
        """Posted when the operator picks an entry"""

        def __init__(self, catalog_list: "CatalogList", value: str) -> None:
            self.catalog_list = catalog_list
            self.value = value
            super().__init__()

        @property
        def control(self) -> "CatalogList":
            return self.catalog_list

    def __init__(self, overscan: int = 5, empty_text: str = "No entries", **kwargs):
        super().__init__(**kwargs)
        self.names: List[str] = []
        self.selected = ""
        self.empty_text = empty_text
        self.virtual_window = VirtualizedWindow(estimated_size=1, overscan=overscan)

    @property
    def active_name(self) -> Optional[str]:
        if not self.names:
            return None
        return self.names[self.virtual_window.active_index]

    def set_names(self, names: Sequence[str]) -> None:
        """Replace the entries, keeping the active index within bounds"""
        self.names = list(names)
        self.virtual_window.set_item_count(len(self.names))
        self.virtual_window.scroll_to_index(self.virtual_window.active_index)
        self.refresh()

    def on_resize(self, event: events.Resize) -> None:
        self.virtual_window.set_viewport(extent=event.size.height)
        self.virtual_window.scroll_to_index(self.virtual_window.active_index)
        self.refresh()

    def render(self) -> Text:
        if not self.names:
            return Text(self.empty_text, style="dim")

        top = self.virtual_window.scroll_offset
        bottom = top + self.virtual_window.viewport_extent
        rendered = Text()
        for item in self.virtual_window.virtual_items():
            # Overscan rows lie outside the terminal viewport
            if item.end <= top or item.start >= bottom:
                continue
            name = self.names[item.index]
            marker = "✓ " if name == self.selected else "  "
            style = "reverse" if item.index == self.virtual_window.active_index else ""
            if rendered:
                rendered.append("\n")
            rendered.append(marker + name, style=style)
        return rendered

    def action_cursor_up(self) -> None:
        self.virtual_window.move_active(-1)
        self.refresh()

    def action_cursor_down(self) -> None:
        self.virtual_window.move_active(1)
        self.refresh()

    def action_page_up(self) -> None:
        self.virtual_window.move_active(-max(1, self.virtual_window.viewport_extent))
        self.refresh()

    def action_page_down(self) -> None:
        self.virtual_window.move_active(max(1, self.virtual_window.viewport_extent))
        self.refresh()

    def action_choose(self) -> None:
        name = self.active_name
        if name is not None:
            self.post_message(self.Chosen(self, name))

    def on_mouse_scroll_down(self, event: events.MouseScrollDown) -> None:
        self.virtual_window.scroll_to(self.virtual_window.scroll_offset + 1)
        self.refresh()

    def on_mouse_scroll_up(self, event: events.MouseScrollUp) -> None:
        self.virtual_window.scroll_to(self.virtual_window.scroll_offset - 1)
        self.refresh()

    def on_click(self, event: events.Click) -> None:
        index = (self.virtual_window.scroll_offset + event.y) // self.virtual_window.estimated_size
        if 0 <= index < len(self.names):
            self.virtual_window.set_active_index(index)
            self.refresh()
            self.action_choose()


class CatalogPicker(Vertical):
    """Searchable picker: a query input over a virtualized catalog list"""

    BINDINGS = [
        Binding("down", "list_down", show=False),
        Binding("up", "list_up", show=False),
    ]

    class Selected(Message):
        """Posted when an entry of the picker is chosen"""

        def __init__(self, picker: "CatalogPicker", value: str) -> None:
            self.picker = picker
            self.value = value
            super().__init__()

        @property
        def control(self) -> "CatalogPicker":
            return self.picker

    def __init__(self, label: str, placeholder: str = "Search...", debounce_seconds: float = 0.3,
                 overscan: int = 5, empty_text: str = "No entries", **kwargs):
        """
        Initialize the picker

        Args:
            label: Title shown above the query input
            placeholder: Query input placeholder
            debounce_seconds: Quiescence interval before the list is filtered
            overscan: Extra rows materialized around the viewport
            empty_text: Shown when nothing matches
        """
        super().__init__(**kwargs)
        self.label = label
        self.placeholder = placeholder
        self.items: List[str] = []
        self.catalog_list = CatalogList(overscan=overscan, empty_text=empty_text, classes="picker-list")
        # One debouncer per picker; timers are never shared between fields
        self.query_filter = DebouncedFilter(debounce_seconds, self._apply_query, self.set_timer)

    def compose(self) -> ComposeResult:
        yield Label(f"[bold]{self.label}[/bold]", classes="control-label")
        yield Input(placeholder=self.placeholder, classes="picker-query")
        yield self.catalog_list

    @property
    def visible_items(self) -> List[str]:
        return list(self.catalog_list.names)

    def set_items(self, names: Sequence[str]) -> None:
        """Replace the catalog and re-apply the current settled query"""
        self.items = list(names)
        self._apply_query(self.query_filter.value)

    def set_selected(self, name: str) -> None:
        if self.catalog_list.selected != name:
            self.catalog_list.selected = name
            self.catalog_list.refresh()

    def clear_query(self) -> None:
        self.query_filter.cancel()
        self.query_filter.value = ""
        self.query_one(Input).value = ""
        self._apply_query("")

    def _apply_query(self, query: str) -> None:
        self.catalog_list.set_names(filter_by_name(self.items, query))

    @on(Input.Changed)
    def handle_query_changed(self, event: Input.Changed) -> None:
        """Debounce keystrokes before filtering the catalog"""
        event.stop()
        self.query_filter.push(event.value)

    @on(Input.Submitted)
    def handle_query_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.query_filter.flush()
        self.catalog_list.action_choose()

    @on(CatalogList.Chosen)
    def handle_chosen(self, event: CatalogList.Chosen) -> None:
        event.stop()
        self.set_selected(event.value)
        self.post_message(self.Selected(self, event.value))

    def action_list_down(self) -> None:
        self.catalog_list.action_cursor_down()

    def action_list_up(self) -> None:
        self.catalog_list.action_cursor_up()

    def on_unmount(self) -> None:
        self.query_filter.cancel()


class SearchPanel(Horizontal):
    """Filter pattern, time range and limit inputs"""

    def compose(self) -> ComposeResult:
        yield Label("[bold]Filter:[/bold]", classes="control-label")
        yield Input(placeholder="e.g. ERROR, [timestamp, requestId]", id="filter-pattern-input")
        yield Label("[bold]From:[/bold]", classes="control-label")
        yield Input(placeholder="YYYY-MM-DD HH:MM", id="start-time-input")
        yield Label("[bold]To:[/bold]", classes="control-label")
        yield Input(placeholder="YYYY-MM-DD HH:MM", id="end-time-input")
        yield Label("[bold]Limit:[/bold]", classes="control-label")
        yield Input(placeholder="100", id="limit-input", type="integer")


class ControlPanel(Horizontal):
    """Search and housekeeping actions"""

    def compose(self) -> ComposeResult:
        yield Button("🔍 Search Logs", id="search-btn", variant="primary")
        yield Button("⟳ Refresh Groups", id="refresh-groups-btn", variant="default")
        yield Button("💾 Export", id="export-btn", variant="success")
        yield Button("✕ Clear Filters", id="clear-btn", variant="default")
        yield Label("", id="status-label")


class EventStatsPanel(Static):
    """Display counts for the current result set"""

    total_events: reactive[int] = reactive(0)
    stream_count: reactive[int] = reactive(0)
    error_count: reactive[int] = reactive(0)
    warning_count: reactive[int] = reactive(0)

    def compose(self) -> ComposeResult:
        yield Label("[bold]Result Statistics[/bold]", classes="panel-title")
        yield Static(self._format_stats(), id="stats-content")

    def _format_stats(self) -> str:
        return (
            f"Events: {self.total_events}\n"
            f"Streams: {self.stream_count}\n"
            f"[red]Errors: {self.error_count}[/red]\n"
            f"[yellow]Warnings: {self.warning_count}[/yellow]"
        )

    def watch_total_events(self, value: int) -> None:
        self._update_display()

    def watch_stream_count(self, value: int) -> None:
        self._update_display()

    def watch_error_count(self, value: int) -> None:
        self._update_display()

    def watch_warning_count(self, value: int) -> None:
        self._update_display()

    def _update_display(self) -> None:
        if not self.is_mounted:
            return
        self.query_one("#stats-content", Static).update(self._format_stats())


class EventDetailsPanel(Vertical):
    """Detailed view of the highlighted log event"""

    PLACEHOLDER = "Select a log event to view details"

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.current_event: Optional[LogEvent] = None

    def compose(self) -> ComposeResult:
        yield Label("[bold]Event Details[/bold]", classes="panel-title")
        yield Static(self.PLACEHOLDER, id="event-details-content")

    def show_event(self, event: LogEvent) -> None:
        self.current_event = event
        details = Text.assemble(
            ("Timestamp: ", "bold"), format_timestamp(event.timestamp), "\n",
            ("Ingested: ", "bold"), format_timestamp(event.ingestion_time), "\n",
            ("Stream: ", "bold"), event.stream_name, "\n",
            ("Event ID: ", "bold"), event.event_id, "\n\n",
            ("Message:\n", "bold"), event.message,
        )
        self.query_one("#event-details-content", Static).update(details)

    def clear_details(self) -> None:
        self.current_event = None
        self.query_one("#event-details-content", Static).update(self.PLACEHOLDER)


class ErrorBanner(Static):
    """Transient error line; hidden while there is nothing to report"""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.error_text = ""

    def show_error(self, message: str) -> None:
        self.error_text = message
        self.update(Text(f"⚠ {message}", style="bold red"))
        self.display = True

    def hide(self) -> None:
        self.error_text = ""
        self.update("")
        self.display = False
