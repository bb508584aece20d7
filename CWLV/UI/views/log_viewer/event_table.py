"""
Event Table Module - DataTable for search results

Handles:
- One row per log event (timestamp, stream, message)
- Color-coded messages by keyword
- Mapping rows back to LogEvent objects for the details panel
"""
from typing import Dict, List, Optional, Sequence

from rich.text import Text
from textual.widgets import DataTable

from CWLV.logstore.models import LogEvent
from CWLV.util import format_timestamp


class LogEventTable(DataTable):
    """
    DataTable showing the events of the last completed search

    Features:
    - Rows replaced wholesale on each result set
    - Message preview with truncation
    - Row key to event lookup
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.log_events: List[LogEvent] = []
        self.event_map: Dict = {}  # Maps row_key to LogEvent
        self.max_message_length = 160

    def on_mount(self) -> None:
        """Initialize table columns when mounted"""
        self.cursor_type = "row"
        self.zebra_stripes = True
        self.add_columns("Timestamp", "Stream", "Message")

    def set_events(self, events: Sequence[LogEvent]) -> None:
        """
        Replace the table contents

        Args:
            events: Events in the order the server returned them
        """
        self.clear()
        self.event_map.clear()
        self.log_events = list(events)
        for event in self.log_events:
            row_key = self.add_row(*self._format_event(event))
            self.event_map[row_key] = event

    def _format_event(self, event: LogEvent) -> tuple:
        stream = event.stream_name or "-"
        if len(stream) > 30:
            stream = stream[:27] + "..."

        # Single line preview; the details panel shows the full message
        message = event.message.replace("\n", " ").strip()
        if len(message) > self.max_message_length:
            message = message[:self.max_message_length - 3] + "..."

        lowered = message.lower()
        if "error" in lowered or "fatal" in lowered:
            message_text = Text(message, style="red")
        elif "warn" in lowered:
            message_text = Text(message, style="yellow")
        else:
            message_text = Text(message)

        return (format_timestamp(event.timestamp), stream, message_text)

    def get_event(self, row_key) -> Optional[LogEvent]:
        return self.event_map.get(row_key)
