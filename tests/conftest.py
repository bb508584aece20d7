import pytest

from CWLV.logstore.models import LogEvent, LogGroup, LogStream
from CWLV.server.source import InMemoryLogSource

STREAM = "2024/01/01/[$LATEST]xyz"


def make_event(index: int, message: str, stream: str = STREAM, timestamp: int = None) -> LogEvent:
    return LogEvent(
        timestamp=timestamp if timestamp is not None else 1704067200000 + index * 1000,
        message=message,
        stream_name=stream,
        event_id=f"evt-{index}",
        ingestion_time=1704067200500 + index * 1000,
    )


@pytest.fixture
def sample_events():
    return [
        make_event(1, "ERROR connection refused"),
        make_event(2, "WARN retrying request"),
        make_event(3, "INFO request served"),
        make_event(4, "ERROR timeout talking to db"),
        make_event(5, "ERROR fatal: giving up"),
    ]


@pytest.fixture
def source(sample_events):
    source = InMemoryLogSource()
    source.add_group(LogGroup(name="/svc/a", creation_time=1700000000000, retention_days=14))
    source.add_group(LogGroup(name="/svc/b", creation_time=1700000001000))
    source.add_stream("/svc/a", LogStream(name=STREAM, creation_time=1704067200000))
    for event in sample_events:
        source.add_event("/svc/a", event)
    return source


class SourceGateway:
    """Async gateway over an InMemoryLogSource, one item per page"""

    def __init__(self, source, page_size=1):
        self.source = source
        self.page_size = page_size
        self.searches = []

    async def list_groups_page(self, token=None):
        return self.source.describe_log_groups(token, self.page_size)

    async def list_streams_page(self, group_name, token=None):
        return self.source.describe_log_streams(group_name, token, self.page_size)

    async def search(self, criteria):
        self.searches.append(criteria)
        return self.source.filter_log_events(criteria)


@pytest.fixture
def gateway(source):
    return SourceGateway(source)
