import logging
from collections import namedtuple

from .astro import time_diff
from .methods import ANGLE_BASED, HIGH_LAT_NONE, JAFARI, NIGHT_FRACTION, ONE_SEVENTH, PRAYER_ORDER, Angle, Minutes
from .solver import Valid

logger = logging.getLogger(__name__)

MORNING = ("imsak", "fajr", "sunrise")
EVENING = ("asr", "sunset", "maghrib", "isha")

# hour angle result plus the equation of time it was solved with
SolarEvent = namedtuple("SolarEvent", ["hour_angle", "eqt"])


def to_clock(event, morning, tz_shift):
    if not isinstance(event.hour_angle, Valid):
        return None
    offset = event.hour_angle.hours
    noon = 12.0 - event.eqt
    return (noon - offset if morning else noon + offset) + tz_shift


def night_portion(params, angle, night):
    mode = params.high_lats
    if mode == NIGHT_FRACTION:
        portion = params.night_fraction
    elif mode == ANGLE_BASED:
        portion = angle / 60.0
    elif mode == ONE_SEVENTH:
        portion = 1 / 7.0
    else:
        raise ValueError(f"Unknown high latitude method: {mode}")
    return portion * night


def _adjust_hl_time(time, base, portion, morning):
    if time is None:
        return base - portion if morning else base + portion
    diff = time_diff(time, base) if morning else time_diff(base, time)
    if diff > portion:
        return base - portion if morning else base + portion
    return time


def adjust_high_lats(times, params):
    sunrise, sunset = times["sunrise"], times["sunset"]
    if sunrise is None or sunset is None:
        return times
    night = time_diff(sunset, sunrise)
    rules = (
        ("imsak", params.imsak, sunrise, True),
        ("fajr", params.fajr, sunrise, True),
        ("maghrib", params.maghrib, sunset, False),
        ("isha", params.isha, sunset, False),
    )
    for name, rule, base, morning in rules:
        if not isinstance(rule, Angle):
            continue
        portion = night_portion(params, rule.degrees, night)
        adjusted = _adjust_hl_time(times[name], base, portion, morning)
        if adjusted != times[name]:
            logger.debug("High latitude rule %s moved %s", params.high_lats, name)
        times[name] = adjusted
    return times


def _after(ref, minutes):
    return None if ref is None else ref + minutes / 60.0


def midnight(times, mode):
    sunset = times["sunset"]
    end = times["fajr"] if mode == JAFARI else times["sunrise"]
    if sunset is None or end is None:
        return None
    return sunset + time_diff(sunset, end) / 2.0


def is_chronological(hours, names=None):
    """True when the resolved entries never step back in time along `names`."""
    names = names or PRAYER_ORDER
    values = [hours[n] for n in names if hours.get(n) is not None]
    return all(a <= b for a, b in zip(values, values[1:]))


def adjust_times(events, params, lng, tz, tuning=None):
    """Turn solved events into local clock hours.

    `events` maps lower case event names to SolarEvent; "dhuhr" only needs
    its eqt. Returns a dict keyed by display name, None where unresolved.
    """
    tz_shift = tz - lng / 15.0
    times = {}
    for name in MORNING:
        times[name] = to_clock(events[name], True, tz_shift)
    for name in EVENING:
        times[name] = to_clock(events[name], False, tz_shift)
    times["dhuhr"] = 12.0 - events["dhuhr"].eqt + tz_shift + params.dhuhr / 60.0

    if params.high_lats != HIGH_LAT_NONE:
        times = adjust_high_lats(times, params)

    if isinstance(params.imsak, Minutes):
        times["imsak"] = _after(times["fajr"], -params.imsak.minutes)
    if isinstance(params.maghrib, Minutes):
        times["maghrib"] = _after(times["sunset"], params.maghrib.minutes)
    if isinstance(params.isha, Minutes):
        times["isha"] = _after(times["maghrib"], params.isha.minutes)

    times["midnight"] = midnight(times, params.midnight)

    tuning = tuning or {}
    result = {}
    for name in PRAYER_ORDER:
        value = times[name.lower()]
        if value is not None:
            value += tuning.get(name.lower(), 0.0) / 60.0
        result[name] = value

    if not is_chronological(result, PRAYER_ORDER[1:-1]):
        logger.warning("Prayer times out of order: %s", result)
    return result
