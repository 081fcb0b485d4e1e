"""Proleptic Gregorian calendar helpers, on Rata Die day numbers.

Day 1 is 0001-01-01. All functions expect validated input and only
``assert`` their preconditions.
"""

MIN_YEAR = 1
MAX_YEAR = 9999
MIN_RDN = 1  # 0001-01-01
MAX_RDN = 3_652_059  # 9999-12-31

# 1-indexed days per month
_MONTHDAYS = (0, 31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

# Days before the first of each month, in a common year
_DAYS_BEFORE_MONTH = (
    0, 0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334
)

# Days from 0000-03-01 to 0001-01-01, minus one for the 1-based day number.
_MARCH_BASED_SHIFT = 305
_DAYS_PER_ERA = 146_097  # 400 Gregorian years


def is_leap(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    return _MONTHDAYS[month] + (month == 2 and is_leap(year))


def days_in_year(year: int) -> int:
    return 365 + is_leap(year)


def quarter(month: int) -> int:
    return (month - 1) // 3 + 1


def days_in_quarter(year: int, q: int) -> int:
    assert 1 <= q <= 4
    if q == 1:
        return 90 + is_leap(year)
    return (91, 92, 92)[q - 2]


def day_of_year(year: int, month: int, day: int) -> int:
    return (
        _DAYS_BEFORE_MONTH[month] + (month > 2 and is_leap(year)) + day
    )


def day_of_quarter(year: int, month: int, day: int) -> int:
    first_month = 3 * quarter(month) - 2
    return (
        day_of_year(year, month, day) - day_of_year(year, first_month, 1) + 1
    )


def rdn_from_ymd(year: int, month: int, day: int) -> int:
    """Rata Die day number of a proleptic Gregorian date.

    Uses the closed-form days-from-civil computation on a calendar that
    starts the year in March, so the leap day falls at the end.
    """
    assert MIN_YEAR <= year <= MAX_YEAR, year
    assert 1 <= month <= 12, month
    assert 1 <= day <= days_in_month(year, month), day
    if month < 3:
        year -= 1
        month += 12
    return (
        365 * year
        + year // 4
        - year // 100
        + year // 400
        + (153 * month - 457) // 5
        + day
        - 306
    )


def ymd_from_rdn(rdn: int) -> tuple[int, int, int]:
    """Inverse of :func:`rdn_from_ymd`"""
    assert MIN_RDN <= rdn <= MAX_RDN, rdn
    z = rdn + _MARCH_BASED_SHIFT
    era, doe = divmod(z, _DAYS_PER_ERA)
    yoe = (doe - doe // 1460 + doe // 36524 - doe // 146096) // 365
    doy = doe - (365 * yoe + yoe // 4 - yoe // 100)
    mp = (5 * doy + 2) // 153
    day = doy - (153 * mp + 2) // 5 + 1
    month = mp + 3 if mp < 10 else mp - 9
    year = yoe + era * 400 + (month <= 2)
    return year, month, day


def rdn_from_yd(year: int, doy: int) -> int:
    assert 1 <= doy <= days_in_year(year), doy
    return rdn_from_ymd(year, 1, 1) + doy - 1


def rdn_from_yqd(year: int, q: int, doq: int) -> int:
    assert 1 <= doq <= days_in_quarter(year, q), doq
    return rdn_from_ymd(year, 3 * q - 2, 1) + doq - 1


def day_of_week(rdn: int) -> int:
    """ISO day of the week: Monday is 1, Sunday is 7"""
    # day 1 (0001-01-01) is a Monday
    return (rdn - 1) % 7 + 1


def _week_one_monday(year: int) -> int:
    # Week 1 is the week with the year's first Thursday, so it is also the
    # week containing January 4th. No range assert: the week-year lookup
    # peeks at the year after 9999.
    y = year - 1
    jan4 = 365 * y + y // 4 - y // 100 + y // 400 + 4
    return jan4 - day_of_week(jan4) + 1


def weeks_in_year(year: int) -> int:
    """Number of ISO weeks (52 or 53) in the given week-year"""
    return (_week_one_monday(year + 1) - _week_one_monday(year)) // 7


def week_year_and_week(rdn: int) -> tuple[int, int]:
    """The ISO week-year and week number of a day"""
    year = ymd_from_rdn(rdn)[0]
    if rdn >= _week_one_monday(year + 1):
        year += 1
    elif rdn < _week_one_monday(year):
        year -= 1
    return year, (rdn - _week_one_monday(year)) // 7 + 1


def rdn_from_ywd(year: int, week: int, weekday: int) -> int:
    """Day number of an ISO week date"""
    assert 1 <= week <= weeks_in_year(year), week
    assert 1 <= weekday <= 7, weekday
    return _week_one_monday(year) + (week - 1) * 7 + weekday - 1


def easter_western(year: int) -> tuple[int, int]:
    """Month and day of Easter Sunday in the Gregorian computus"""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return month, day + 1


def easter_orthodox(year: int) -> int:
    """Day number of Orthodox Easter Sunday.

    The date is found on the Julian calendar, then moved onto the
    proleptic Gregorian calendar.
    """
    a = year % 4
    b = year % 7
    c = year % 19
    d = (19 * c + 15) % 30
    e = (2 * a + 4 * b - d + 34) % 7
    month, day = divmod(d + e + 114, 31)
    julian_lag = year // 100 - year // 400 - 2
    return rdn_from_ymd(year, month, day + 1) + julian_lag
