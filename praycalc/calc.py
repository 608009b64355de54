import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

from .adjust import EVENING, MORNING, SolarEvent, adjust_times
from .astro import julian_date, sun_position
from .methods import REGISTRY, Angle
from .models import Coordinates, PrayerTimesResult, TuningOffsets
from .solver import NO_SOLUTION, Valid, asr_hour_angle, hour_angle

logger = logging.getLogger(__name__)

RISE_SET_ANGLE = 0.833

# first guesses (local solar hours) for events the noon pass could not place
SEED_TIMES = {
    "imsak": 5.0,
    "fajr": 5.0,
    "sunrise": 6.0,
    "dhuhr": 12.0,
    "asr": 13.0,
    "sunset": 18.0,
    "maghrib": 18.0,
    "isha": 18.0,
}


class PrayerTimesEngine:
    """Stateless facade: every call gets its own parameters and returns a fresh result."""

    def __init__(self, registry=REGISTRY, refine=True):
        self.registry = registry
        self.refine = refine

    def compute(self, method, overrides, tuning, coords, day, tz, time_format="24h", refine=None):
        if not isinstance(coords, Coordinates):
            coords = Coordinates(*coords)
        used, params = self.registry.lookup(method)
        params = params.with_overrides(**(overrides or {}))
        if not isinstance(tuning, TuningOffsets):
            tuning = TuningOffsets(tuning)
        refine = self.refine if refine is None else refine

        jd = julian_date(day.year, day.month, day.day) - coords.lng / (15 * 24)
        angles = _event_angles(params)

        decl, eqt = sun_position(jd + 0.5)
        events = {name: _solve(name, angle, params, coords.lat, decl, eqt) for name, angle in angles.items()}
        events["dhuhr"] = SolarEvent(Valid(0.0), eqt)

        if refine:
            events = self._refine(events, angles, params, coords.lat, jd)

        hours = adjust_times(events, params, coords.lng, tz, tuning)
        logger.debug("Computed %s %s at %s: %s", used, day, coords, hours)
        return PrayerTimesResult(
            method=used,
            day=day,
            timezone=tz,
            coords=coords,
            hours=hours,
            time_format=time_format,
        )

    def _refine(self, events, angles, params, lat, jd):
        refined = {}
        for name, event in events.items():
            guess = _solar_time(name, event)
            if guess is None:
                guess = SEED_TIMES[name]
            decl, eqt = sun_position(jd + guess / 24.0)
            if name == "dhuhr":
                refined[name] = SolarEvent(Valid(0.0), eqt)
            else:
                refined[name] = _solve(name, angles[name], params, lat, decl, eqt)
        return refined

    def compute_range(self, method, overrides, tuning, coords, start, days, tz, time_format="24h", workers=None):
        """Compute `days` consecutive dates from `start`, in parallel when workers != 1."""
        dates = [start + timedelta(days=i) for i in range(days)]

        def run(day):
            return self.compute(method, overrides, tuning, coords, day, tz, time_format=time_format)

        if workers == 1:
            results = [run(day) for day in dates]
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                results = list(pool.map(run, dates))
        return sorted(results, key=lambda r: r.day)


def _event_angles(params):
    angles = {
        "imsak": params.imsak,
        "fajr": params.fajr,
        "sunrise": Angle(RISE_SET_ANGLE),
        "asr": None,
        "sunset": Angle(RISE_SET_ANGLE),
        "maghrib": params.maghrib,
        "isha": params.isha,
    }
    # minute rules are resolved later from their reference event
    return {name: (float(rule.degrees) if isinstance(rule, Angle) else None) for name, rule in angles.items()}


def _solve(name, angle, params, lat, decl, eqt):
    if name == "asr":
        return SolarEvent(asr_hour_angle(lat, decl, params.asr), eqt)
    if angle is None:
        return SolarEvent(NO_SOLUTION, eqt)
    return SolarEvent(hour_angle(lat, decl, angle), eqt)


def _solar_time(name, event):
    if not isinstance(event.hour_angle, Valid):
        return None
    noon = 12.0 - event.eqt
    if name in MORNING:
        return noon - event.hour_angle.hours
    if name in EVENING:
        return noon + event.hour_angle.hours
    return noon


_ENGINE = PrayerTimesEngine()


def compute(method, overrides, tuning, coords, day, tz, time_format="24h", refine=True):
    return _ENGINE.compute(method, overrides, tuning, coords, day, tz, time_format=time_format, refine=refine)


def compute_range(method, overrides, tuning, coords, start, days, tz, time_format="24h", workers=None):
    return _ENGINE.compute_range(method, overrides, tuning, coords, start, days, tz, time_format=time_format, workers=workers)
