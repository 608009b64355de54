import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, List, Optional

from .astro import fix_hour
from .methods import PRAYER_ORDER

UNAVAILABLE = "-----"
TIME_FORMATS = ("24h", "12h", "12hNS", "Float")
_SUFFIXES = ("am", "pm")


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def __post_init__(self):
        lat, lng = float(self.lat), float(self.lng)
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"Coordinates must be finite: {self.lat}, {self.lng}")
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"Latitude out of range: {self.lat}")
        if not -180.0 <= lng <= 180.0:
            raise ValueError(f"Longitude out of range: {self.lng}")
        object.__setattr__(self, "lat", lat)
        object.__setattr__(self, "lng", lng)


class TuningOffsets(Mapping):
    """Per-prayer minute adjustments, keyed by lower case prayer name."""

    _keys = tuple(name.lower() for name in PRAYER_ORDER)

    def __init__(self, offsets=None, **kwargs):
        merged = dict(offsets or {})
        merged.update(kwargs)
        values = {}
        for key, minutes in merged.items():
            name = str(key).lower()
            if name not in self._keys:
                raise ValueError(f"Unknown prayer for offset: {key}")
            values[name] = float(minutes)
        self._values = MappingProxyType(values)

    def __getitem__(self, key):
        return self._values.get(str(key).lower(), 0.0)

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return f"TuningOffsets({dict(self._values)!r})"


def round_minutes(hours):
    """Round fractional hours to whole minutes, wrapped into one day."""
    return int(math.floor(fix_hour(hours + 0.5 / 60.0) * 60.0))


def format_time(hours, time_format="24h"):
    if hours is None:
        return UNAVAILABLE
    if time_format == "Float":
        return hours
    total = round_minutes(hours)
    h, m = divmod(total, 60)
    if time_format == "24h":
        return f"{h:02d}:{m:02d}"
    if time_format in ("12h", "12hNS"):
        suffix = f" {_SUFFIXES[h >= 12]}" if time_format == "12h" else ""
        return f"{(h + 11) % 12 + 1}:{m:02d}{suffix}"
    raise ValueError(f"Unknown time format: {time_format}")


@dataclass(frozen=True)
class PrayerTimesResult(Mapping):
    method: str
    day: date
    timezone: float
    coords: Coordinates
    hours: Dict[str, Optional[float]] = field(repr=False)
    time_format: str = "24h"

    def __post_init__(self):
        object.__setattr__(self, "hours", MappingProxyType(dict(self.hours)))

    def __getitem__(self, name):
        return format_time(self.hours[name], self.time_format)

    def __iter__(self):
        return (name for name in PRAYER_ORDER if name in self.hours)

    def __len__(self):
        return sum(1 for _ in self)

    @property
    def unavailable(self) -> List[str]:
        return [name for name in self if self.hours[name] is None]

    def times(self):
        return {name: self[name] for name in self}

    def minutes(self):
        """Whole minutes since local midnight of the query date, unwrapped."""
        out = {}
        for name in self:
            value = self.hours[name]
            out[name] = None if value is None else int(math.floor(value * 60.0 + 0.5))
        return out
