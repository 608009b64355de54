import logging
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType

logger = logging.getLogger(__name__)

STANDARD = "Standard"
JAFARI = "Jafari"
MIDNIGHT_MODES = (STANDARD, JAFARI)

HIGH_LAT_NONE = "None"
NIGHT_FRACTION = "NightFraction"
ANGLE_BASED = "AngleBased"
ONE_SEVENTH = "OneSeventh"
HIGH_LAT_MODES = (HIGH_LAT_NONE, NIGHT_FRACTION, ANGLE_BASED, ONE_SEVENTH)
_HIGH_LAT_ALIASES = {"nightmiddle": NIGHT_FRACTION, "none": HIGH_LAT_NONE}

_ASR_FACTORS = {"standard": 1, "shafi": 1, "maliki": 1, "hanbali": 1, "hanafi": 2}

DEFAULT_METHOD = "MWL"


@dataclass(frozen=True)
class Angle:
    degrees: float

    def __str__(self):
        return f"{self.degrees:g}"


@dataclass(frozen=True)
class Minutes:
    minutes: float

    def __str__(self):
        return f"{self.minutes:g} min"


def parse_rule(value):
    """Accept 18, "18", "90 min", Angle(...) or Minutes(...)."""
    if isinstance(value, (Angle, Minutes)):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid rule: {value!r}")
    if isinstance(value, (int, float)):
        return Angle(float(value))
    text = str(value).strip().lower()
    try:
        if text.endswith("min"):
            return Minutes(float(text[:-3].strip()))
        return Angle(float(text))
    except ValueError:
        raise ValueError(f"Invalid rule: {value!r}") from None


def asr_factor(value):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        factor = float(value)
    else:
        key = str(value).strip().lower()
        if key in _ASR_FACTORS:
            return _ASR_FACTORS[key]
        try:
            factor = float(key)
        except ValueError:
            raise ValueError(f"Unknown asr method: {value}") from None
    if factor <= 0:
        raise ValueError(f"Asr shadow factor must be positive: {value}")
    return int(factor) if factor.is_integer() else factor


def high_lat_mode(value):
    if value is None:
        return HIGH_LAT_NONE
    text = str(value).strip()
    for mode in HIGH_LAT_MODES:
        if text.lower() == mode.lower():
            return mode
    if text.lower() in _HIGH_LAT_ALIASES:
        return _HIGH_LAT_ALIASES[text.lower()]
    raise ValueError(f"Unknown high latitude method: {value}")


def midnight_mode(value):
    for mode in MIDNIGHT_MODES:
        if str(value).strip().lower() == mode.lower():
            return mode
    raise ValueError(f"Unknown midnight method: {value}")


@dataclass(frozen=True)
class Parameters:
    fajr: Angle = Angle(18.0)
    isha: object = Angle(17.0)
    maghrib: object = Minutes(0.0)
    imsak: object = Minutes(10.0)
    dhuhr: float = 0.0
    asr: float = 1
    midnight: str = STANDARD
    high_lats: str = NIGHT_FRACTION
    night_fraction: float = 0.5

    def __post_init__(self):
        # normalise loose input so every instance holds typed values
        if not isinstance(self.fajr, Angle):
            rule = parse_rule(self.fajr)
            if not isinstance(rule, Angle):
                raise ValueError(f"Fajr must be an angle: {self.fajr!r}")
            object.__setattr__(self, "fajr", rule)
        for name in ("isha", "maghrib", "imsak"):
            object.__setattr__(self, name, parse_rule(getattr(self, name)))
        object.__setattr__(self, "dhuhr", float(self.dhuhr))
        object.__setattr__(self, "asr", asr_factor(self.asr))
        object.__setattr__(self, "midnight", midnight_mode(self.midnight))
        object.__setattr__(self, "high_lats", high_lat_mode(self.high_lats))
        try:
            object.__setattr__(self, "night_fraction", float(self.night_fraction))
        except (TypeError, ValueError):
            raise ValueError(f"Invalid night fraction: {self.night_fraction!r}") from None
        if not 0.0 < self.night_fraction <= 1.0:
            raise ValueError(f"Night fraction must be in (0, 1]: {self.night_fraction}")

    def with_overrides(self, **overrides):
        """Return a copy with the given fields replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in overrides.items():
            if key not in known:
                raise ValueError(f"Unknown parameter: {key}")
            if value is not None:
                changes[key] = value
        if not changes:
            return self
        return replace(self, **changes)

    def as_dict(self):
        return {
            "fajr": str(self.fajr),
            "isha": str(self.isha),
            "maghrib": str(self.maghrib),
            "imsak": str(self.imsak),
            "dhuhr": f"{self.dhuhr:g} min",
            "asr": self.asr,
            "midnight": self.midnight,
            "high_lats": self.high_lats,
            "night_fraction": self.night_fraction,
        }


@dataclass(frozen=True)
class Method:
    key: str
    name: str
    params: Parameters = field(default_factory=Parameters)


BUILTIN_METHODS = (
    Method("MWL", "Muslim World League", Parameters(fajr=18, isha=17)),
    Method("ISNA", "Islamic Society of North America", Parameters(fajr=15, isha=15)),
    Method("Egypt", "Egyptian General Authority of Survey", Parameters(fajr=19.5, isha=17.5)),
    Method("Makkah", "Umm Al-Qura University, Makkah", Parameters(fajr=18.5, isha="90 min")),
    Method("Karachi", "University of Islamic Sciences, Karachi", Parameters(fajr=18, isha=18)),
    Method(
        "Tehran",
        "Institute of Geophysics, University of Tehran",
        Parameters(fajr=17.7, isha=14, maghrib=4.5, midnight=JAFARI),
    ),
    Method(
        "Jafari",
        "Shia Ithna-Ashari, Leva Institute, Qum",
        Parameters(fajr=16, isha=14, maghrib=4, midnight=JAFARI),
    ),
)


class MethodRegistry:
    """Read-only table of calculation methods.

    Unknown names resolve to the default method instead of failing; the key
    that was actually used is returned alongside the parameters.
    """

    def __init__(self, methods, default=DEFAULT_METHOD):
        table = {m.key: m for m in methods}
        if default not in table:
            raise ValueError(f"Default method not in registry: {default}")
        self._methods = MappingProxyType(table)
        self._builtin = frozenset(m.key for m in BUILTIN_METHODS)
        self.default = default

    def __contains__(self, key):
        return key in self._methods

    def __iter__(self):
        return iter(self._methods.values())

    def __len__(self):
        return len(self._methods)

    def names(self):
        return set(self._methods)

    def get(self, key):
        return self._methods.get(key)

    def resolve(self, name):
        if name in self._methods:
            return name
        if name:
            folded = str(name).lower()
            for key in self._methods:
                if key.lower() == folded:
                    return key
        logger.info("Unknown method %r, using %s", name, self.default)
        return self.default

    def lookup(self, name):
        key = self.resolve(name)
        return key, self._methods[key].params

    def extend(self, key, name, params):
        if key in self._builtin:
            raise ValueError(f"Cannot replace built-in method: {key}")
        if not isinstance(params, Parameters):
            params = DEFAULT_PARAMETERS.with_overrides(**params)
        methods = [m for m in self._methods.values() if m.key != key]
        methods.append(Method(key, name, params))
        return MethodRegistry(methods, default=self.default)


DEFAULT_PARAMETERS = Parameters()
REGISTRY = MethodRegistry(BUILTIN_METHODS)

PRAYER_ORDER = ["Imsak", "Fajr", "Sunrise", "Dhuhr", "Asr", "Sunset", "Maghrib", "Isha", "Midnight"]
