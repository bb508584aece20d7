"""
Log Viewer Package - Log group browsing and event search

This package provides the log viewer interface with:
- Searchable, virtualized log group and log stream pickers
- Filter pattern, time range and limit search
- Result table, statistics and event details
- Export of the current result set (JSON format)

Package Structure:
- view: Main view orchestration (LogViewerView)
- components: UI panels and controls (CatalogPicker, CatalogList, SearchPanel, etc.)
- event_table: Search result table widget (LogEventTable)
"""

from .view import LogViewerView

from .components import (
    CatalogList,
    CatalogPicker,
    SearchPanel,
    ControlPanel,
    EventStatsPanel,
    EventDetailsPanel,
    ErrorBanner,
)
from .event_table import LogEventTable

__all__ = [
    # Main view
    'LogViewerView',

    # UI components
    'CatalogList',
    'CatalogPicker',
    'SearchPanel',
    'ControlPanel',
    'EventStatsPanel',
    'EventDetailsPanel',
    'ErrorBanner',
    'LogEventTable',
]
