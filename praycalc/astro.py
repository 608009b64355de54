import math

J2000 = 2451545.0


def dtr(d):
    return (d * math.pi) / 180.0


def rtd(r):
    return (r * 180.0) / math.pi


def sin(d):
    return math.sin(dtr(d))


def cos(d):
    return math.cos(dtr(d))


def tan(d):
    return math.tan(dtr(d))


def arccos(x):
    return rtd(math.acos(x))


def arccot(x):
    return rtd(math.atan(1.0 / x))


def fix_angle(a):
    return a - 360.0 * math.floor(a / 360.0)


def fix_hour(h):
    return h - 24.0 * math.floor(h / 24.0)


def time_diff(t1, t2):
    return fix_hour(t2 - t1)


def julian_date(y, m, d):
    if m <= 2:
        y -= 1
        m += 12
    a = math.floor(y / 100)
    b = 2 - a + math.floor(a / 4)
    return math.floor(365.25 * (y + 4716)) + math.floor(30.6001 * (m + 1)) + d + b - 1524.5


def sun_position(jd):
    """Return (declination in degrees, equation of time in hours) for a Julian day.

    Low precision series good to about a minute of arc, which is plenty for
    civil prayer times.
    """
    d = jd - J2000
    g = fix_angle(357.529 + 0.98560028 * d)
    q = fix_angle(280.459 + 0.98564736 * d)
    L = fix_angle(q + 1.915 * sin(g) + 0.020 * sin(2 * g))
    e = 23.439 - 0.00000036 * d
    ra = rtd(math.atan2(cos(e) * sin(L), cos(L))) / 15.0
    # q and ra wrap independently; keep eqt within half a day of zero
    eqt = fix_hour(q / 15.0 - fix_hour(ra) + 12.0) - 12.0
    decl = rtd(math.asin(sin(e) * sin(L)))
    return decl, eqt
