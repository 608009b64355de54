import math
from datetime import datetime, timedelta, timezone

from .models import UNAVAILABLE

EVENT_DURATION_MINUTES = 30
REMINDER_MINUTES = 7
EVENT_COLOR_ID = 2


def parse_query(lat, lng, tz):
    values = []
    for label, raw in (("latitude", lat), ("longitude", lng), ("timezone", tz)):
        try:
            value = float(raw)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid {label}: {raw!r}") from None
        if not math.isfinite(value):
            raise ValueError(f"Invalid {label}: {raw!r}")
        values.append(value)
    lat, lng, tz = values
    if not -14.0 <= tz <= 14.0:
        raise ValueError(f"Invalid timezone: {tz}")
    return lat, lng, tz


def tz_label(tz):
    sign = "-" if tz < 0 else "+"
    total = int(round(abs(tz) * 60))
    hours, minutes = divmod(total, 60)
    return f"GMT{sign}{hours:02d}:{minutes:02d}"


def tzinfo_for(tz):
    return timezone(timedelta(minutes=int(round(tz * 60))))


def api_payload(result):
    return {
        "date": result.day.isoformat(),
        # missing entries are reported per field; a computed day is always a success
        "status": 200,
        "timezone": result.timezone,
        "method": result.method,
        "coordinates": {
            "latitude": result.coords.lat,
            "longitude": result.coords.lng,
        },
        "times": result.times(),
        "unavailable": result.unavailable,
    }


def event_start(result, name):
    """Local datetime of one entry, rolling onto the next day past midnight."""
    minutes = result.minutes()[name]
    if minutes is None:
        return None
    midnight = datetime(result.day.year, result.day.month, result.day.day, tzinfo=tzinfo_for(result.timezone))
    return midnight + timedelta(minutes=minutes)


def calendar_events(results):
    events = []
    for result in results:
        label = tz_label(result.timezone)
        for name in result:
            start = event_start(result, name)
            if start is None:
                continue
            end = start + timedelta(minutes=EVENT_DURATION_MINUTES)
            events.append({
                "summary": name,
                "start": {"dateTime": start.isoformat(), "timeZone": label},
                "end": {"dateTime": end.isoformat(), "timeZone": label},
                "reminders": {
                    "useDefault": False,
                    "overrides": [{"method": "popup", "minutes": REMINDER_MINUTES}],
                },
                "colorId": EVENT_COLOR_ID,
            })
    return events


def render_table(results, method_name=None):
    lines = []
    for result in results:
        header = f"{result.day.isoformat()}  {result.coords.lat:.4f}, {result.coords.lng:.4f}  ({method_name or result.method}, {tz_label(result.timezone)})"
        lines.append(header)
        for name in result:
            value = result[name]
            lines.append(f"  {name:<9} {value if value != UNAVAILABLE else 'unavailable'}")
    return "\n".join(lines)
