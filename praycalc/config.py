import copy
import json
import os

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".config", "praycalc")
CONFIG_PATH = os.path.join(CONFIG_DIR, "config.json")

DEFAULT_CONFIG = {
    "location": {
        "lat": None,
        "lng": None,
        "tz": None
    },
    "method": "MWL",
    "asr_method": "Standard",
    "high_lats": None,
    "imsak": None,
    "dhuhr_minutes": 0,
    "maghrib": None,
    "isha": None,
    "adjustments": {
        "imsak": 0,
        "fajr": 0,
        "sunrise": 0,
        "dhuhr": 0,
        "asr": 0,
        "sunset": 0,
        "maghrib": 0,
        "isha": 0,
        "midnight": 0
    },
    "time_format": "24h",
    "refine": True,
    "log_level": "WARNING"
}


def _merge(base, override):
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=None):
    path = path or os.environ.get("PRAYCALC_CONFIG") or CONFIG_PATH
    if not os.path.exists(path):
        return copy.deepcopy(DEFAULT_CONFIG)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config file {path}: expected a JSON object")
    return _merge(DEFAULT_CONFIG, data)


def parameter_overrides(config):
    """Map config keys onto Parameters fields, skipping unset ones."""
    overrides = {
        "asr": config.get("asr_method"),
        "high_lats": config.get("high_lats"),
        "imsak": config.get("imsak"),
        "dhuhr": config.get("dhuhr_minutes") or None,
        "maghrib": config.get("maghrib"),
        "isha": config.get("isha"),
    }
    return {k: v for k, v in overrides.items() if v is not None}
