from .calc import PrayerTimesEngine, compute, compute_range
from .methods import DEFAULT_METHOD, REGISTRY, Angle, Method, MethodRegistry, Minutes, Parameters
from .models import UNAVAILABLE, Coordinates, PrayerTimesResult, TuningOffsets

__version__ = "1.0.0"

__all__ = [
    "DEFAULT_METHOD",
    "REGISTRY",
    "UNAVAILABLE",
    "Angle",
    "Coordinates",
    "Method",
    "MethodRegistry",
    "Minutes",
    "Parameters",
    "PrayerTimesEngine",
    "PrayerTimesResult",
    "TuningOffsets",
    "compute",
    "compute_range",
]
