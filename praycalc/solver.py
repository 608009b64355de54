from dataclasses import dataclass

from .astro import arccos, arccot, cos, sin, tan


@dataclass(frozen=True)
class Valid:
    hours: float


class NoSolution:
    """The sun never reaches the requested angle on that day and latitude."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "NO_SOLUTION"

    def __bool__(self):
        return False


NO_SOLUTION = NoSolution()


def hour_angle(lat, decl, angle):
    """Hours between solar noon and the moment the sun is `angle` degrees below the horizon."""
    denominator = cos(lat) * cos(decl)
    if abs(denominator) < 1e-12:
        return NO_SOLUTION
    x = (-sin(angle) - sin(lat) * sin(decl)) / denominator
    if x < -1.0 or x > 1.0:
        return NO_SOLUTION
    return Valid(arccos(x) / 15.0)


def asr_angle(lat, decl, factor):
    return -arccot(factor + tan(abs(lat - decl)))


def asr_hour_angle(lat, decl, factor):
    return hour_angle(lat, decl, asr_angle(lat, decl, factor))
