import json
from datetime import datetime

import pytest

from CWLV.logstore.errors import ValidationFailed
from CWLV.util import export_events, format_timestamp, parse_local_datetime, summarize_events


class TestTimestamps:
    def test_format_timestamp(self):
        ms = int(datetime(2024, 1, 2, 3, 4, 5).timestamp() * 1000)
        assert format_timestamp(ms) == "2024-01-02 03:04:05"

    def test_format_missing_timestamp(self):
        assert format_timestamp(None) == "-"
        assert format_timestamp(0) == "-"

    @pytest.mark.parametrize("text", ["2024-01-02 03:04", "2024-01-02 03:04:00", "2024-01-02T03:04"])
    def test_parse_local_datetime(self, text):
        assert parse_local_datetime(text) == int(datetime(2024, 1, 2, 3, 4).timestamp() * 1000)

    def test_blank_means_unbounded(self):
        assert parse_local_datetime("") is None
        assert parse_local_datetime("   ") is None
        assert parse_local_datetime(None) is None

    def test_invalid_text(self):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_local_datetime("yesterday", "start time")
        assert "start time" in str(exc_info.value)


class TestExport:
    def test_export_writes_wire_events(self, sample_events, tmp_path):
        export_file = export_events(sample_events[:3], tmp_path / "exports", "/svc/a")

        assert export_file.parent == tmp_path / "exports"
        assert export_file.name.startswith("cloudwatch-logs-")
        assert export_file.suffix == ".json"

        data = json.loads(export_file.read_text())
        assert data["log_group"] == "/svc/a"
        assert data["total_events"] == 3
        assert data["events"][0]["eventId"] == "evt-1"
        assert data["events"][0]["logStreamName"] == sample_events[0].stream_name


class TestSummarize:
    def test_counts(self, sample_events):
        stats = summarize_events(sample_events)
        assert stats["total"] == 5
        assert stats["errors"] == 3
        assert stats["warnings"] == 1
        assert stats["info"] == 1
        assert stats["streams"] == {sample_events[0].stream_name: 5}

    def test_empty(self):
        assert summarize_events([]) == {"total": 0, "errors": 0, "warnings": 0, "info": 0, "streams": {}}
