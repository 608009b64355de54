# tests/conftest.py

from datetime import date

import pytest

from praycalc.calc import PrayerTimesEngine
from praycalc.models import Coordinates


@pytest.fixture(scope="session")
def engine():
    return PrayerTimesEngine()


@pytest.fixture
def makkah():
    """Makkah on the March 2024 equinox, UTC+3."""
    return Coordinates(21.4225, 39.8262), date(2024, 3, 20), 3.0


@pytest.fixture
def reykjavik_midsummer():
    # the sun sets, but never gets 18 degrees below the horizon
    return Coordinates(64.1466, -21.9426), date(2024, 6, 21), 0.0


def minutes_apart(a, b):
    return abs(a - b) * 60.0
