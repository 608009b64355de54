import pytest

from praycalc.adjust import SolarEvent, adjust_times, is_chronological, midnight, night_portion
from praycalc.methods import ANGLE_BASED, JAFARI, NIGHT_FRACTION, ONE_SEVENTH, STANDARD, Parameters
from praycalc.solver import NO_SOLUTION, Valid


def make_events(fajr=7.5, isha=7.5, maghrib=NO_SOLUTION, imsak=NO_SOLUTION, eqt=0.0):
    def wrap(value):
        return Valid(value) if isinstance(value, float) else value
    return {
        "imsak": SolarEvent(wrap(imsak), eqt),
        "fajr": SolarEvent(wrap(fajr), eqt),
        "sunrise": SolarEvent(Valid(6.0), eqt),
        "dhuhr": SolarEvent(Valid(0.0), eqt),
        "asr": SolarEvent(Valid(3.5), eqt),
        "sunset": SolarEvent(Valid(6.0), eqt),
        "maghrib": SolarEvent(wrap(maghrib), eqt),
        "isha": SolarEvent(wrap(isha), eqt),
    }


def test_clock_conversion_uses_longitude_timezone_and_eqt():
    params = Parameters(maghrib="0 min")
    times = adjust_times(make_events(eqt=0.25), params, lng=15.0, tz=2.0)
    # noon = 12 - 0.25 + 2 - 1
    assert times["Dhuhr"] == pytest.approx(12.75)
    assert times["Sunrise"] == pytest.approx(6.75)
    assert times["Fajr"] == pytest.approx(5.25)
    assert times["Sunset"] == pytest.approx(18.75)
    assert times["Asr"] == pytest.approx(16.25)


def test_dhuhr_minutes_offset():
    times = adjust_times(make_events(), Parameters(dhuhr=5), lng=0.0, tz=0.0)
    assert times["Dhuhr"] == pytest.approx(12.0 + 5 / 60)


def test_minute_rules_follow_their_reference():
    params = Parameters(maghrib="3 min", isha="90 min", imsak="10 min")
    times = adjust_times(make_events(), params, lng=0.0, tz=0.0)
    assert times["Maghrib"] == pytest.approx(18.0 + 3 / 60)
    assert times["Isha"] == pytest.approx(18.0 + 93 / 60)
    assert times["Imsak"] == pytest.approx(4.5 - 10 / 60)


def test_angle_maghrib_is_kept():
    params = Parameters(maghrib=4)
    times = adjust_times(make_events(maghrib=6.3), params, lng=0.0, tz=0.0)
    assert times["Maghrib"] == pytest.approx(18.3)


def test_midnight_conventions():
    times = {"sunset": 18.0, "sunrise": 6.0, "fajr": 4.0}
    assert midnight(times, STANDARD) == pytest.approx(24.0)
    assert midnight(times, JAFARI) == pytest.approx(23.0)
    assert midnight({"sunset": None, "sunrise": 6.0, "fajr": 4.0}, STANDARD) is None


def test_unresolved_without_high_lat_mode_stays_unavailable():
    params = Parameters(high_lats="None")
    times = adjust_times(make_events(fajr=NO_SOLUTION, isha=NO_SOLUTION), params, lng=0.0, tz=0.0)
    assert times["Fajr"] is None
    assert times["Isha"] is None
    # Imsak hangs off Fajr
    assert times["Imsak"] is None
    assert times["Sunrise"] == pytest.approx(6.0)


@pytest.mark.parametrize("mode, fajr_portion, isha_portion", [
    (NIGHT_FRACTION, 0.5, 0.5),
    (ANGLE_BASED, 18 / 60, 17 / 60),
    (ONE_SEVENTH, 1 / 7, 1 / 7),
])
def test_high_lat_modes_fill_missing_times(mode, fajr_portion, isha_portion):
    params = Parameters(fajr=18, isha=17, high_lats=mode)
    times = adjust_times(make_events(fajr=NO_SOLUTION, isha=NO_SOLUTION), params, lng=0.0, tz=0.0)
    night = 12.0
    assert times["Fajr"] == pytest.approx(6.0 - fajr_portion * night)
    assert times["Isha"] == pytest.approx(18.0 + isha_portion * night)


def test_high_lat_clamps_long_twilight():
    # 2.5h of twilight is more than a seventh of a 12h night
    params = Parameters(high_lats=ONE_SEVENTH)
    times = adjust_times(make_events(fajr=8.5), params, lng=0.0, tz=0.0)
    assert times["Fajr"] == pytest.approx(6.0 - 12.0 / 7)
    # short twilight is left alone
    times = adjust_times(make_events(fajr=7.0), params, lng=0.0, tz=0.0)
    assert times["Fajr"] == pytest.approx(5.0)


def test_custom_night_fraction():
    params = Parameters(high_lats=NIGHT_FRACTION, night_fraction=0.25)
    assert night_portion(params, 18, 8.0) == pytest.approx(2.0)


def test_high_lat_needs_sunrise_and_sunset():
    events = make_events(fajr=NO_SOLUTION)
    events["sunrise"] = SolarEvent(NO_SOLUTION, 0.0)
    times = adjust_times(events, Parameters(high_lats=ONE_SEVENTH), lng=0.0, tz=0.0)
    assert times["Fajr"] is None
    assert times["Midnight"] is None


def test_tuning_applies_last():
    params = Parameters(isha="90 min")
    times = adjust_times(make_events(), params, lng=0.0, tz=0.0, tuning={"maghrib": 2, "isha": -5, "midnight": 1})
    # Isha counts from the untuned Maghrib
    assert times["Maghrib"] == pytest.approx(18.0 + 2 / 60)
    assert times["Isha"] == pytest.approx(19.5 - 5 / 60)
    assert times["Midnight"] == pytest.approx(24.0 + 1 / 60)


def test_out_of_order_tuning_is_logged_not_fixed(caplog):
    times = adjust_times(make_events(), Parameters(), lng=0.0, tz=0.0, tuning={"asr": 600})
    assert times["Asr"] > times["Sunset"]
    assert "out of order" in caplog.text


def test_is_chronological_skips_missing():
    assert is_chronological({"Fajr": 5.0, "Sunrise": None, "Dhuhr": 12.0}, ["Fajr", "Sunrise", "Dhuhr"])
    assert not is_chronological({"Fajr": 7.0, "Sunrise": 6.0}, ["Fajr", "Sunrise"])
