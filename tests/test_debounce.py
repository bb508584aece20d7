import asyncio

import pytest

from CWLV.engine.debounce import DebouncedFilter, asyncio_timer, debounce, filter_by_name
from CWLV.logstore.models import LogGroup


class FakeTimer:
    def __init__(self, clock, due, callback):
        self.clock = clock
        self.due = due
        self.callback = callback
        self.stopped = False

    def stop(self):
        self.stopped = True


class FakeClock:
    """Manual scheduler standing in for Widget.set_timer"""

    def __init__(self):
        self.now = 0.0
        self.timers = []

    def set_timer(self, delay, callback):
        timer = FakeTimer(self, self.now + delay, callback)
        self.timers.append(timer)
        return timer

    def advance(self, seconds):
        self.now += seconds
        for timer in list(self.timers):
            if not timer.stopped and timer.due <= self.now:
                self.timers.remove(timer)
                timer.callback()

    @property
    def live_timers(self):
        return [t for t in self.timers if not t.stopped]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settled():
    return []


@pytest.fixture
def debouncer(clock, settled):
    def on_settled(value):
        settled.append((value, clock.now))

    return DebouncedFilter(0.3, on_settled, clock.set_timer)


class TestDebouncedFilter:
    def test_rapid_input_settles_once(self, debouncer, clock, settled):
        debouncer.push("a")
        clock.advance(0.1)
        debouncer.push("ab")
        clock.advance(0.1)
        debouncer.push("abc")
        clock.advance(0.25)
        assert settled == []

        clock.advance(0.1)
        assert len(settled) == 1
        value, at = settled[0]
        assert value == "abc"
        assert at >= 0.5

    def test_superseded_timers_are_stopped(self, debouncer, clock):
        debouncer.push("a")
        debouncer.push("ab")
        assert len(clock.timers) == 2
        assert len(clock.live_timers) == 1

    def test_value_tracks_last_settled(self, debouncer, clock):
        assert debouncer.value == ""
        debouncer.push("first")
        clock.advance(0.3)
        debouncer.push("second")
        assert debouncer.value == "first"
        clock.advance(0.3)
        assert debouncer.value == "second"

    def test_separated_inputs_each_settle(self, debouncer, clock, settled):
        debouncer.push("a")
        clock.advance(0.5)
        debouncer.push("b")
        clock.advance(0.5)
        assert [value for value, _ in settled] == ["a", "b"]

    def test_cancel_drops_pending_value(self, debouncer, clock, settled):
        debouncer.push("abc")
        debouncer.cancel()
        clock.advance(1.0)
        assert settled == []
        assert not debouncer.has_pending

    def test_flush_emits_immediately(self, debouncer, clock, settled):
        debouncer.push("now")
        debouncer.flush()
        assert settled == [("now", 0.0)]
        clock.advance(1.0)
        assert len(settled) == 1

    def test_flush_without_pending_is_noop(self, debouncer, settled):
        debouncer.flush()
        assert settled == []

    def test_instances_do_not_share_timers(self, clock):
        group_values, stream_values = [], []
        groups = DebouncedFilter(0.3, group_values.append, clock.set_timer)
        streams = DebouncedFilter(0.3, stream_values.append, clock.set_timer)

        groups.push("svc")
        streams.push("latest")
        clock.advance(0.3)

        assert group_values == ["svc"]
        assert stream_values == ["latest"]

    @pytest.mark.asyncio
    async def test_asyncio_timer(self):
        values = []
        debouncer = DebouncedFilter(0.01, values.append, asyncio_timer)
        debouncer.push("x")
        debouncer.push("xy")
        await asyncio.sleep(0.05)
        assert values == ["xy"]


class TestDebounceStream:
    @pytest.mark.asyncio
    async def test_burst_yields_final_value(self):
        async def keystrokes():
            for value in ("a", "ab", "abc"):
                yield value
                await asyncio.sleep(0.001)

        results = [value async for value in debounce(keystrokes(), 0.05)]
        assert results == ["abc"]

    @pytest.mark.asyncio
    async def test_pause_splits_bursts(self):
        async def keystrokes():
            yield "a"
            await asyncio.sleep(0.1)
            yield "ab"

        results = [value async for value in debounce(keystrokes(), 0.03)]
        assert results == ["a", "ab"]

    @pytest.mark.asyncio
    async def test_empty_stream(self):
        async def keystrokes():
            return
            yield

        assert [value async for value in debounce(keystrokes(), 0.01)] == []


class TestFilterByName:
    def test_case_insensitive_and_ordered(self):
        assert filter_by_name(["Alpha", "beta", "ALPHABET"], "alpha") == ["Alpha", "ALPHABET"]

    def test_empty_query_keeps_everything(self):
        items = ["b", "a"]
        result = filter_by_name(items, "")
        assert result == ["b", "a"]
        assert result is not items

    def test_models_matched_by_name(self):
        groups = [LogGroup(name="/svc/a"), LogGroup(name="/batch/b"), LogGroup(name="/SVC/c")]
        assert [g.name for g in filter_by_name(groups, "svc")] == ["/svc/a", "/SVC/c"]

    def test_custom_key(self):
        rows = [{"id": "one"}, {"id": "two"}]
        assert filter_by_name(rows, "TW", key=lambda row: row["id"]) == [{"id": "two"}]
