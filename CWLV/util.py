import json
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

from CWLV.logstore.errors import ValidationFailed
from CWLV.logstore.models import LogEvent

DATETIME_FORMATS = ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", "%Y-%m-%d")


def format_timestamp(timestamp_ms: Optional[int]) -> str:
    if not timestamp_ms:
        return "-"
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime('%Y-%m-%d %H:%M:%S')


def parse_local_datetime(text: Optional[str], field: str = "time") -> Optional[int]:
    """Local date/time text to epoch milliseconds; blank input means no bound"""
    if not text or not text.strip():
        return None
    value = text.strip()
    for fmt in DATETIME_FORMATS:
        try:
            return int(datetime.strptime(value, fmt).timestamp() * 1000)
        except ValueError:
            continue
    raise ValidationFailed(f"invalid {field}: {value!r} (expected YYYY-MM-DD HH:MM)")


def export_events(events: Sequence[LogEvent], directory: Path, group_name: str = "") -> Path:
    """Write events to cloudwatch-logs-<epoch ms>.json and return the file path"""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    now = datetime.now()
    export_file = directory / f"cloudwatch-logs-{int(now.timestamp() * 1000)}.json"

    export_data = {
        'exported_at': now.isoformat(),
        'log_group': group_name or None,
        'total_events': len(events),
        'events': [event.to_wire() for event in events],
    }
    with open(export_file, 'w', encoding='utf-8') as f:
        json.dump(export_data, f, indent=2)
    return export_file


def summarize_events(events: Iterable[LogEvent]) -> Dict[str, object]:
    # Keyword matching only; message content is not otherwise interpreted
    stats: Dict[str, object] = {'total': 0, 'errors': 0, 'warnings': 0, 'info': 0}
    streams: Dict[str, int] = {}
    for event in events:
        stats['total'] += 1
        streams[event.stream_name] = streams.get(event.stream_name, 0) + 1
        message = event.message.lower()
        if "error" in message or "fatal" in message:
            stats['errors'] += 1
        elif "warn" in message:
            stats['warnings'] += 1
        elif "info" in message:
            stats['info'] += 1
    stats['streams'] = streams
    return stats
