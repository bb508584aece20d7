"""
Debounce Module - Settling rapid text input before filtering

Handles:
- Timer-driven debouncing with cancel-on-supersede
- Teardown cancellation of pending emissions
- Async-iterator form for headless consumers
- Case-insensitive name filtering of catalog collections
"""
import asyncio
import logging
from typing import Any, AsyncIterable, AsyncIterator, Callable, List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class TimerHandle(Protocol):
    def stop(self) -> None: ...


SetTimer = Callable[[float, Callable[[], None]], TimerHandle]


class AsyncioTimer:
    """Stoppable one-shot timer on the running asyncio loop"""

    def __init__(self, delay: float, callback: Callable[[], None]):
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(delay, callback)

    def stop(self) -> None:
        self._handle.cancel()


def asyncio_timer(delay: float, callback: Callable[[], None]) -> AsyncioTimer:
    """set_timer implementation for code running outside a Textual widget"""
    return AsyncioTimer(delay, callback)


class DebouncedFilter:
    """
    Turns a stream of raw keystroke values into settled values

    Every push() stops the timer scheduled for the previous value, so only
    a value that survives `delay` seconds untouched reaches on_settled.
    Each input field needs its own instance.
    """

    def __init__(self, delay: float, on_settled: Callable[[str], None], set_timer: SetTimer):
        """
        Initialize the debouncer

        Args:
            delay: Quiescence interval in seconds
            on_settled: Receives each settled value
            set_timer: Schedules a callback, returns an object with stop()
                (Textual's Widget.set_timer fits)
        """
        self.delay = delay
        self.on_settled = on_settled
        self.set_timer = set_timer
        self.value = ""
        self._pending: Optional[str] = None
        self._timer: Optional[TimerHandle] = None

    @property
    def has_pending(self) -> bool:
        return self._timer is not None

    def push(self, raw: str) -> None:
        """Record a new raw value, superseding any pending one"""
        if self._timer:
            self._timer.stop()
        self._pending = raw
        self._timer = self.set_timer(self.delay, self._fire)

    def flush(self) -> None:
        """Emit the pending value now instead of waiting for the timer"""
        if self._timer:
            self._timer.stop()
            self._fire()

    def cancel(self) -> None:
        """Drop the pending value without emitting it"""
        if self._timer:
            self._timer.stop()
        self._timer = None
        self._pending = None

    def _fire(self) -> None:
        self._timer = None
        if self._pending is None:
            return
        self.value = self._pending
        self._pending = None
        self.on_settled(self.value)


_END = object()


async def debounce(source: AsyncIterable[str], delay: float) -> AsyncIterator[str]:
    """
    Yield settled values from an async stream of raw values

    A value is yielded once `delay` seconds pass without a newer value. The
    final value of a finished stream is yielded after the same wait.

    Args:
        source: Raw values, one per keystroke
        delay: Quiescence interval in seconds
    """
    queue: asyncio.Queue = asyncio.Queue()

    async def pump() -> None:
        try:
            async for value in source:
                queue.put_nowait(value)
        finally:
            queue.put_nowait(_END)

    pump_task = asyncio.create_task(pump())
    pending: Any = _END
    try:
        while True:
            if pending is _END:
                item = await queue.get()
            else:
                try:
                    item = await asyncio.wait_for(queue.get(), delay)
                except asyncio.TimeoutError:
                    yield pending
                    pending = _END
                    continue
            if item is _END:
                if pending is not _END:
                    await asyncio.sleep(delay)
                    yield pending
                break
            pending = item
    finally:
        pump_task.cancel()
        logging.getLogger(__name__).debug("Debounced stream closed")


def _item_name(item: Any) -> str:
    return getattr(item, "name", item)


def filter_by_name(items: Sequence[T], query: str,
                   key: Callable[[T], str] = _item_name) -> List[T]:
    """
    Case-insensitive substring filter over item names

    Args:
        items: Collection to filter (groups, streams or plain strings)
        query: Settled query text; empty means no filtering
        key: Extracts the name to match against

    Returns:
        Matching items in their original order
    """
    if not query:
        return list(items)
    needle = query.lower()
    return [item for item in items if needle in key(item).lower()]
