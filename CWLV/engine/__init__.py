"""
Engine Package - Interactive query/selection engine

Package Structure:
- coordinator: SelectionCoordinator (group/stream/search state machine)
- state: SelectionState snapshots, Phase, ErrorReport
- debounce: DebouncedFilter, debounce(), filter_by_name()
- window: VirtualizedWindow index math
"""
from .state import SelectionState, Phase, ErrorReport
from .coordinator import SelectionCoordinator, LogStoreGateway
from .debounce import DebouncedFilter, AsyncioTimer, asyncio_timer, debounce, filter_by_name
from .window import VirtualizedWindow, VirtualItem

__all__ = [
    'SelectionState',
    'Phase',
    'ErrorReport',
    'SelectionCoordinator',
    'LogStoreGateway',
    'DebouncedFilter',
    'AsyncioTimer',
    'asyncio_timer',
    'debounce',
    'filter_by_name',
    'VirtualizedWindow',
    'VirtualItem',
]
