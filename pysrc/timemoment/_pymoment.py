# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - Why is the Moment class in one file?
#   - Flat is better than nested
#   - The constructors, arithmetic and comparisons all share the same
#     three private fields, so splitting them up gains nothing
# - The calendar math itself lives in ``_calendar``, which knows nothing
#   about moments and works on plain day numbers.
# - A moment stores its *local* wall time in seconds since 0000-12-31T00:00,
#   so most calendar operations don't need to look at the offset at all.
from __future__ import annotations

__version__ = "0.1.0"

import enum
from datetime import date as _date, datetime as _datetime
from fractions import Fraction
from math import floor, isfinite
from struct import pack, unpack
from time import time_ns
from typing import TYPE_CHECKING, Callable, ClassVar, no_type_check

from . import _calendar as cal
from ._common import UTC as _UTC, Minutes, Nanos, mk_fixed_tzinfo

__all__ = [
    "Moment",
    "Unit",
    "Component",
    "Weekday",
    # Exceptions
    "InvalidComponent",
    "InvalidOffset",
    "InvalidEpoch",
    "UnitOutOfRange",
    "OutOfRange",
    "InvalidPrecision",
    # Constants
    "SECS_PER_DAY",
    "NANOS_PER_SEC",
    "UNIX_EPOCH",
    "MIN_EPOCH_SEC",
    "MAX_EPOCH_SEC",
    "MIN_OFFSET",
    "MAX_OFFSET",
    "JD_EPOCH",
    "MJD_EPOCH",
    "RD_EPOCH",
    "MIN_UNIT_YEARS",
    "MAX_UNIT_YEARS",
    "MIN_UNIT_MONTHS",
    "MAX_UNIT_MONTHS",
    "MIN_UNIT_WEEKS",
    "MAX_UNIT_WEEKS",
    "MIN_UNIT_DAYS",
    "MAX_UNIT_DAYS",
    "MIN_UNIT_HOURS",
    "MAX_UNIT_HOURS",
    "MIN_UNIT_MINUTES",
    "MAX_UNIT_MINUTES",
    "MIN_UNIT_SECONDS",
    "MAX_UNIT_SECONDS",
    "MIN_UNIT_MILLIS",
    "MAX_UNIT_MILLIS",
    "MIN_UNIT_MICROS",
    "MAX_UNIT_MICROS",
    "MIN_UNIT_NANOS",
    "MAX_UNIT_NANOS",
    "MONDAY",
    "TUESDAY",
    "WEDNESDAY",
    "THURSDAY",
    "FRIDAY",
    "SATURDAY",
    "SUNDAY",
]

SECS_PER_DAY = 86_400
NANOS_PER_SEC = 1_000_000_000
UNIX_EPOCH = 62_135_683_200  # 1970-01-01T00:00:00, in rd-seconds
MIN_EPOCH_SEC = -62_135_596_800  # 0001-01-01T00:00:00Z
MAX_EPOCH_SEC = 253_402_300_799  # 9999-12-31T23:59:59Z
MIN_OFFSET = -1440
MAX_OFFSET = 1440

# The Rata Die value of each scale's day zero: ``rd = value + epoch``
JD_EPOCH = -1_721_424.5
MJD_EPOCH = 678_576.0
RD_EPOCH = 0.0

MIN_UNIT_YEARS, MAX_UNIT_YEARS = -10_000, 10_000
MIN_UNIT_MONTHS, MAX_UNIT_MONTHS = -120_000, 120_000
MIN_UNIT_WEEKS, MAX_UNIT_WEEKS = -521_775, 521_775
MIN_UNIT_DAYS, MAX_UNIT_DAYS = -3_652_425, 3_652_425
MIN_UNIT_HOURS, MAX_UNIT_HOURS = -87_658_200, 87_658_200
MIN_UNIT_MINUTES, MAX_UNIT_MINUTES = -5_259_492_000, 5_259_492_000
MIN_UNIT_SECONDS, MAX_UNIT_SECONDS = -315_569_520_000, 315_569_520_000
MIN_UNIT_MILLIS, MAX_UNIT_MILLIS = (
    -315_569_520_000_000,
    315_569_520_000_000,
)
MIN_UNIT_MICROS, MAX_UNIT_MICROS = (
    -315_569_520_000_000_000,
    315_569_520_000_000_000,
)
# Nanoseconds are only bounded by the signed 64-bit range (kept symmetric)
MIN_UNIT_NANOS, MAX_UNIT_NANOS = -(2**63 - 1), 2**63 - 1

# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__
_NANOS_PER_DAY = SECS_PER_DAY * NANOS_PER_SEC
_MIN_RANGE = cal.MIN_RDN * SECS_PER_DAY  # 0001-01-01T00:00:00
_MAX_RANGE = (cal.MAX_RDN + 1) * SECS_PER_DAY - 1  # 9999-12-31T23:59:59


class Weekday(enum.Enum):
    """The days of the week; ``.value`` corresponds with ISO numbering."""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7


MONDAY = Weekday.MONDAY
TUESDAY = Weekday.TUESDAY
WEDNESDAY = Weekday.WEDNESDAY
THURSDAY = Weekday.THURSDAY
FRIDAY = Weekday.FRIDAY
SATURDAY = Weekday.SATURDAY
SUNDAY = Weekday.SUNDAY


class Unit(enum.Enum):
    """Units for :meth:`Moment.plus_unit` and :meth:`Moment.minus_unit`.

    ``YEARS`` and ``MONTHS`` are calendar units: their length depends on the
    date they're applied to. The others have a fixed length.
    """

    YEARS = 0
    MONTHS = 1
    WEEKS = 2
    DAYS = 3
    HOURS = 4
    MINUTES = 5
    SECONDS = 6
    MILLIS = 7
    MICROS = 8
    NANOS = 9


class Component(enum.Enum):
    """The calendar fields of a moment,
    for :meth:`Moment.get` and :meth:`Moment.with_component`"""

    YEAR = 0
    MONTH_OF_YEAR = 1
    WEEK_OF_YEAR = 2
    DAY_OF_YEAR = 3
    DAY_OF_QUARTER = 4
    DAY_OF_MONTH = 5
    DAY_OF_WEEK = 6
    HOUR_OF_DAY = 7
    MINUTE_OF_HOUR = 8
    MINUTE_OF_DAY = 9
    SECOND_OF_MINUTE = 10
    SECOND_OF_DAY = 11
    MILLI_OF_SECOND = 12
    MILLI_OF_DAY = 13
    MICRO_OF_SECOND = 14
    NANO_OF_SECOND = 15


_UNIT_RANGES = {
    Unit.YEARS: (MIN_UNIT_YEARS, MAX_UNIT_YEARS),
    Unit.MONTHS: (MIN_UNIT_MONTHS, MAX_UNIT_MONTHS),
    Unit.WEEKS: (MIN_UNIT_WEEKS, MAX_UNIT_WEEKS),
    Unit.DAYS: (MIN_UNIT_DAYS, MAX_UNIT_DAYS),
    Unit.HOURS: (MIN_UNIT_HOURS, MAX_UNIT_HOURS),
    Unit.MINUTES: (MIN_UNIT_MINUTES, MAX_UNIT_MINUTES),
    Unit.SECONDS: (MIN_UNIT_SECONDS, MAX_UNIT_SECONDS),
    Unit.MILLIS: (MIN_UNIT_MILLIS, MAX_UNIT_MILLIS),
    Unit.MICROS: (MIN_UNIT_MICROS, MAX_UNIT_MICROS),
    Unit.NANOS: (MIN_UNIT_NANOS, MAX_UNIT_NANOS),
}

# Fixed-width units only
_UNIT_NANOS = {
    Unit.WEEKS: 7 * _NANOS_PER_DAY,
    Unit.DAYS: _NANOS_PER_DAY,
    Unit.HOURS: 3_600 * NANOS_PER_SEC,
    Unit.MINUTES: 60 * NANOS_PER_SEC,
    Unit.SECONDS: NANOS_PER_SEC,
    Unit.MILLIS: 1_000_000,
    Unit.MICROS: 1_000,
    Unit.NANOS: 1,
}

# The property backing each component
_COMPONENT_ATTRS = {
    Component.YEAR: "year",
    Component.MONTH_OF_YEAR: "month",
    Component.WEEK_OF_YEAR: "week",
    Component.DAY_OF_YEAR: "day_of_year",
    Component.DAY_OF_QUARTER: "day_of_quarter",
    Component.DAY_OF_MONTH: "day_of_month",
    Component.DAY_OF_WEEK: "day_of_week",
    Component.HOUR_OF_DAY: "hour",
    Component.MINUTE_OF_HOUR: "minute",
    Component.MINUTE_OF_DAY: "minute_of_day",
    Component.SECOND_OF_MINUTE: "second",
    Component.SECOND_OF_DAY: "second_of_day",
    Component.MILLI_OF_SECOND: "millisecond",
    Component.MILLI_OF_DAY: "millisecond_of_day",
    Component.MICRO_OF_SECOND: "microsecond",
    Component.NANO_OF_SECOND: "nanosecond",
}
_COMPONENT_KWARGS = {c.name.lower(): c for c in Component}
_DATE_COMPONENTS = frozenset(
    (
        Component.YEAR,
        Component.MONTH_OF_YEAR,
        Component.WEEK_OF_YEAR,
        Component.DAY_OF_YEAR,
        Component.DAY_OF_QUARTER,
        Component.DAY_OF_MONTH,
        Component.DAY_OF_WEEK,
    )
)


class _ImmutableBase:
    __slots__ = ()

    # Immutable classes don't need to be copied
    @no_type_check
    def __copy__(self):
        return self

    @no_type_check
    def __deepcopy__(self, _):
        return self


if TYPE_CHECKING:
    from typing import final
else:

    def final(cls):

        def init_subclass_not_allowed(cls, **kwargs):  # pragma: no cover
            raise TypeError("Subclassing not allowed")

        cls.__init_subclass__ = init_subclass_not_allowed
        return cls


@final
class Moment(_ImmutableBase):
    """A point on the proleptic Gregorian time-line, with nanosecond
    precision and a fixed UTC offset in minutes.

    The supported range is 0001-01-01T00:00:00Z to 9999-12-31T23:59:59.999999999Z.
    Instances are immutable: all methods that "change" a field return a new
    instance.

    Example
    -------
    >>> m = Moment(2012, 2, 29, 13, 30, offset=60)
    Moment(2012-02-29 13:30:00+01:00)
    >>> m.plus_unit(Unit.YEARS, 1)
    Moment(2013-02-28 13:30:00+01:00)
    >>> m.day_of_week
    3
    """

    __slots__ = ("_sec", "_nsec", "_offset")

    MIN: ClassVar[Moment]
    """The earliest possible moment"""
    MAX: ClassVar[Moment]
    """The latest possible moment"""

    def __init__(
        self,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: int = 0,
        *,
        nanosecond: int = 0,
        offset: int = 0,
    ) -> None:
        _check_range("year", year, cal.MIN_YEAR, cal.MAX_YEAR)
        _check_range("month", month, 1, 12)
        _check_range("day", day, 1, cal.days_in_month(year, month))
        _check_range("hour", hour, 0, 23)
        _check_range("minute", minute, 0, 59)
        _check_range("second", second, 0, 59)
        _check_range("nanosecond", nanosecond, 0, NANOS_PER_SEC - 1)
        _check_offset(offset)
        sec = (
            cal.rdn_from_ymd(year, month, day) * SECS_PER_DAY
            + hour * 3_600
            + minute * 60
            + second
        )
        _check_bounds(sec, offset)
        self._sec = sec
        self._nsec = nanosecond
        self._offset = offset

    @classmethod
    def from_epoch(
        cls, seconds: int, /, *, nanosecond: int = 0, offset: int = 0
    ) -> Moment:
        """Create a moment from a UNIX timestamp (in seconds), viewed at
        the given offset.

        The inverse of the :attr:`epoch` and :attr:`nanosecond` attributes.

        Example
        -------
        >>> Moment.from_epoch(0, offset=-300)
        Moment(1969-12-31 19:00:00-05:00)
        """
        if type(seconds) is not int:
            raise TypeError(
                "seconds must be an int. Use from_epoch_real() for floats"
            )
        if not MIN_EPOCH_SEC <= seconds <= MAX_EPOCH_SEC:
            raise InvalidEpoch(f"epoch seconds out of range: {seconds}")
        _check_range("nanosecond", nanosecond, 0, NANOS_PER_SEC - 1)
        _check_offset(offset)
        return cls._from_parts(
            seconds + UNIX_EPOCH + offset * 60, nanosecond, offset
        )

    @classmethod
    def from_epoch_millis(cls, millis: int, /, *, offset: int = 0) -> Moment:
        """Create a moment from a UNIX timestamp (in milliseconds).

        The inverse of the :meth:`epoch_millis` method.
        """
        if type(millis) is not int:
            raise TypeError("millis must be an int")
        secs, ms = divmod(millis, 1_000)
        return cls.from_epoch(secs, nanosecond=ms * 1_000_000, offset=offset)

    @classmethod
    def from_epoch_nanos(cls, nanos: int, /, *, offset: int = 0) -> Moment:
        """Create a moment from a UNIX timestamp (in nanoseconds).

        The inverse of the :meth:`epoch_nanos` method.
        """
        if type(nanos) is not int:
            raise TypeError("nanos must be an int")
        secs, ns = divmod(nanos, NANOS_PER_SEC)
        return cls.from_epoch(secs, nanosecond=ns, offset=offset)

    @classmethod
    def from_epoch_real(cls, seconds: float, /) -> Moment:
        """Create a UTC moment from a real-valued UNIX timestamp.

        The fractional part is rounded to the nearest nanosecond,
        ties to even. The float is taken at its exact binary value,
        so no precision is lost before rounding.

        Example
        -------
        >>> Moment.from_epoch_real(1.5)
        Moment(1970-01-01 00:00:01.5+00:00)
        """
        if not isfinite(seconds):
            raise InvalidEpoch(f"epoch seconds out of range: {seconds}")
        exact = Fraction(seconds)
        secs = floor(exact)
        nanos = round((exact - secs) * NANOS_PER_SEC)
        if nanos == NANOS_PER_SEC:
            secs += 1
            nanos = 0
        if not MIN_EPOCH_SEC <= secs <= MAX_EPOCH_SEC:
            raise InvalidEpoch(f"epoch seconds out of range: {seconds}")
        return cls._from_parts_unchecked(secs + UNIX_EPOCH, nanos, 0)

    @classmethod
    def from_julian_date(
        cls,
        value: float,
        /,
        epoch: float = JD_EPOCH,
        *,
        precision: int = 3,
    ) -> Moment:
        """Create a UTC moment from a fractional day count on the
        given scale.

        ``epoch`` is the Rata Die value of the scale's day zero:
        use :data:`JD_EPOCH`, :data:`MJD_EPOCH` or :data:`RD_EPOCH`.
        The time of day is rounded (ties to even) to the nanosecond, then
        truncated to ``10**-precision`` seconds. A negative ``precision``
        truncates to tens, hundreds (etc.) of seconds, and at most to
        whole days.

        Example
        -------
        >>> Moment.from_julian_date(2_440_587.75)
        Moment(1970-01-01 06:00:00+00:00)
        >>> Moment.from_julian_date(40_587.5, MJD_EPOCH, precision=0)
        Moment(1970-01-01 12:00:00+00:00)
        """
        if type(precision) is not int:
            raise TypeError("precision must be an int")
        if not -9 <= precision <= 9:
            raise InvalidPrecision(
                f"precision must be between -9 and 9, got {precision}"
            )
        if not (isfinite(value) and isfinite(epoch)):
            raise OutOfRange("Moment out of range")
        rd = Fraction(value) + Fraction(epoch)
        rdn = floor(rd)
        increment = min(10 ** (9 - precision), _NANOS_PER_DAY)
        nanos_of_day = round((rd - rdn) * _NANOS_PER_DAY)
        nanos_of_day -= nanos_of_day % increment
        if nanos_of_day >= _NANOS_PER_DAY:
            rdn += 1
            nanos_of_day = 0
        if not cal.MIN_RDN <= rdn <= cal.MAX_RDN:
            raise OutOfRange("Moment out of range")
        sod, nanos = divmod(nanos_of_day, NANOS_PER_SEC)
        return cls._from_parts_unchecked(rdn * SECS_PER_DAY + sod, nanos, 0)

    @classmethod
    def from_jd(cls, jd: float, /, *, precision: int = 3) -> Moment:
        """Create a UTC moment from a Julian Date"""
        return cls.from_julian_date(jd, JD_EPOCH, precision=precision)

    @classmethod
    def from_mjd(cls, mjd: float, /, *, precision: int = 3) -> Moment:
        """Create a UTC moment from a Modified Julian Date"""
        return cls.from_julian_date(mjd, MJD_EPOCH, precision=precision)

    @classmethod
    def from_rd(cls, rd: float, /, *, precision: int = 3) -> Moment:
        """Create a UTC moment from a fractional Rata Die day"""
        return cls.from_julian_date(rd, RD_EPOCH, precision=precision)

    @classmethod
    def now(cls) -> Moment:
        """The current time, at the system's current UTC offset.

        Offsets that aren't whole minutes are truncated to the minute.
        """
        secs, nanos = divmod(time_ns(), NANOS_PER_SEC)
        utcoffset = _datetime.fromtimestamp(secs, _UTC).astimezone().utcoffset()
        assert utcoffset is not None
        offset = (utcoffset.days * SECS_PER_DAY + utcoffset.seconds) // 60
        return cls._from_parts(
            secs + UNIX_EPOCH + offset * 60, nanos, offset
        )

    @classmethod
    def now_utc(cls) -> Moment:
        """The current time, at UTC"""
        secs, nanos = divmod(time_ns(), NANOS_PER_SEC)
        return cls._from_parts(secs + UNIX_EPOCH, nanos, 0)

    @classmethod
    def from_py_datetime(cls, d: _datetime, /) -> Moment:
        """Create a moment from a standard library ``datetime``.
        The datetime must be aware, with an offset of whole minutes.

        The inverse of the ``py_datetime()`` method.
        """
        if not isinstance(d, _datetime):
            raise TypeError(f"Expected datetime, got {type(d)!r}")
        utcoffset = d.utcoffset()
        if utcoffset is None:
            raise ValueError("Cannot create a Moment from a naive datetime")
        offset, rest = divmod(
            utcoffset.days * SECS_PER_DAY + utcoffset.seconds, 60
        )
        if rest or utcoffset.microseconds:
            raise InvalidOffset(
                f"offset must be a whole number of minutes, got {utcoffset}"
            )
        sec = (
            d.toordinal() * SECS_PER_DAY
            + d.hour * 3_600
            + d.minute * 60
            + d.second
        )
        return cls._from_parts(sec, d.microsecond * 1_000, offset)

    def py_datetime(self) -> _datetime:
        """Convert to a standard library ``datetime``.

        Note
        ----
        Nanoseconds are truncated to microseconds.
        Offsets of exactly ±24:00 can't be represented, and raise
        :class:`InvalidOffset`.
        """
        if abs(self._offset) == MAX_OFFSET:
            raise InvalidOffset("offset of ±24:00 not supported by datetime")
        rdn, sod = divmod(self._sec, SECS_PER_DAY)
        hour, rest = divmod(sod, 3_600)
        d = _date.fromordinal(rdn)
        return _datetime(
            d.year,
            d.month,
            d.day,
            hour,
            *divmod(rest, 60),
            self._nsec // 1_000,
            mk_fixed_tzinfo(self._offset),
        )

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def year(self) -> int:
        return cal.ymd_from_rdn(self._sec // SECS_PER_DAY)[0]

    @property
    def quarter(self) -> int:
        return cal.quarter(self.month)

    @property
    def month(self) -> int:
        return cal.ymd_from_rdn(self._sec // SECS_PER_DAY)[1]

    @property
    def week(self) -> int:
        """The ISO 8601 week number, 1-53.

        Dates early in January or late in December may belong to a week
        of the adjacent :attr:`week_year`.
        """
        return cal.week_year_and_week(self._sec // SECS_PER_DAY)[1]

    @property
    def week_year(self) -> int:
        """The ISO 8601 week-year

        Example
        -------
        >>> Moment(2005, 1, 1).week_year
        2004
        """
        return cal.week_year_and_week(self._sec // SECS_PER_DAY)[0]

    @property
    def day_of_year(self) -> int:
        return cal.day_of_year(*cal.ymd_from_rdn(self._sec // SECS_PER_DAY))

    @property
    def day_of_quarter(self) -> int:
        return cal.day_of_quarter(
            *cal.ymd_from_rdn(self._sec // SECS_PER_DAY)
        )

    @property
    def day_of_month(self) -> int:
        return cal.ymd_from_rdn(self._sec // SECS_PER_DAY)[2]

    day = day_of_month

    @property
    def day_of_week(self) -> int:
        """The ISO day of the week: Monday is 1, Sunday is 7.
        See :class:`Weekday` for named values."""
        return cal.day_of_week(self._sec // SECS_PER_DAY)

    @property
    def hour(self) -> int:
        return self._sec % SECS_PER_DAY // 3_600

    @property
    def minute(self) -> int:
        return self._sec % 3_600 // 60

    @property
    def minute_of_day(self) -> int:
        return self._sec % SECS_PER_DAY // 60

    @property
    def second(self) -> int:
        return self._sec % 60

    @property
    def second_of_day(self) -> int:
        return self._sec % SECS_PER_DAY

    @property
    def millisecond(self) -> int:
        return self._nsec // 1_000_000

    @property
    def millisecond_of_day(self) -> int:
        return self.second_of_day * 1_000 + self._nsec // 1_000_000

    @property
    def microsecond(self) -> int:
        return self._nsec // 1_000

    @property
    def nanosecond(self) -> Nanos:
        return self._nsec

    @property
    def offset(self) -> Minutes:
        """The UTC offset, in minutes east of UTC"""
        return self._offset

    @property
    def epoch(self) -> int:
        """The UNIX timestamp, in whole seconds.

        The inverse of :meth:`from_epoch`.
        """
        return self._sec - self._offset * 60 - UNIX_EPOCH

    def epoch_millis(self) -> int:
        """The UNIX timestamp, in milliseconds"""
        return self.epoch * 1_000 + self._nsec // 1_000_000

    def epoch_nanos(self) -> int:
        """The UNIX timestamp, in nanoseconds"""
        return self.epoch * NANOS_PER_SEC + self._nsec

    def get(self, component: Component, /) -> int:
        """Get a component by its :class:`Component` tag

        Example
        -------
        >>> Moment(2021, 3, 4).get(Component.DAY_OF_YEAR)
        63
        """
        try:
            attr = _COMPONENT_ATTRS[component]
        except (KeyError, TypeError):
            raise TypeError(f"Expected a Component, got {component!r}")
        return getattr(self, attr)  # type: ignore[no-any-return]

    def length_of_year(self) -> int:
        """The number of days in the year (365 or 366)"""
        return cal.days_in_year(self.year)

    def length_of_quarter(self) -> int:
        """The number of days in the quarter (90-92)"""
        return cal.days_in_quarter(self.year, self.quarter)

    def length_of_month(self) -> int:
        """The number of days in the month (28-31)"""
        year, month, _ = cal.ymd_from_rdn(self._sec // SECS_PER_DAY)
        return cal.days_in_month(year, month)

    def length_of_week_year(self) -> int:
        """The number of ISO weeks in the week-year (52 or 53)"""
        return cal.weeks_in_year(self.week_year)

    def local_rd_seconds(self) -> int:
        """Seconds since 0000-12-31T00:00:00 on the local wall clock"""
        return self._sec

    def instant_rd_seconds(self) -> int:
        """Seconds since 0000-12-31T00:00:00Z"""
        return self._sec - self._offset * 60

    def to_local_rd_values(self) -> tuple[int, int, int]:
        """The local Rata Die day number, second of the day
        and nanosecond of the second"""
        return (*divmod(self._sec, SECS_PER_DAY), self._nsec)

    def to_instant_rd_values(self) -> tuple[int, int, int]:
        """Like :meth:`to_local_rd_values`, but for the UTC instant"""
        return (*divmod(self.instant_rd_seconds(), SECS_PER_DAY), self._nsec)

    def to_julian_date(self, epoch: float = JD_EPOCH, /) -> float:
        """The local wall time as a fractional day count on a scale
        whose day zero falls on Rata Die ``epoch``.

        The inverse of :meth:`from_julian_date`.
        """
        days, sod = divmod(self._sec, SECS_PER_DAY)
        return (days - epoch) + (
            sod * NANOS_PER_SEC + self._nsec
        ) / _NANOS_PER_DAY

    def jd(self) -> float:
        """The Julian Date

        Example
        -------
        >>> Moment.from_epoch(0).jd()
        2440587.5
        """
        return self.to_julian_date(JD_EPOCH)

    def mjd(self) -> float:
        """The Modified Julian Date"""
        return self.to_julian_date(MJD_EPOCH)

    def rd(self) -> float:
        """The fractional Rata Die day; 0001-01-01T00:00 is 1.0"""
        return self.to_julian_date(RD_EPOCH)

    # ------------------------------------------------------------------
    # Arithmetic
    # ------------------------------------------------------------------

    def plus_unit(self, unit: Unit, value: int, /) -> Moment:
        """Add an amount of the given unit.

        Fixed-width units (weeks and smaller) move the time-line exactly.
        Months and years change the calendar month, keeping the time of day.
        If the day doesn't exist in the new month, it's clamped to the
        month's last day.

        Example
        -------
        >>> m = Moment(2012, 1, 31)
        >>> m.plus_unit(Unit.MONTHS, 1)
        Moment(2012-02-29 00:00:00+00:00)
        >>> m.plus_unit(Unit.MONTHS, 1).plus_unit(Unit.MONTHS, 1)
        Moment(2012-03-29 00:00:00+00:00)

        Note
        ----
        Because of clamping, adding months one at a time may give a
        different result than adding them at once.
        """
        _check_unit_value(unit, value)
        return self._plus_unit(unit, value)

    def minus_unit(self, unit: Unit, value: int, /) -> Moment:
        """Subtract an amount of the given unit.

        Same as ``plus_unit(unit, -value)``.
        """
        _check_unit_value(unit, value)
        return self._plus_unit(unit, -value)

    def add(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> Moment:
        """Add several units at once, from largest to smallest.

        Example
        -------
        >>> Moment(2020, 1, 31).add(months=1, hours=3)
        Moment(2020-02-29 03:00:00+00:00)
        """
        result = self
        for unit, value in zip(
            Unit,
            (
                years,
                months,
                weeks,
                days,
                hours,
                minutes,
                seconds,
                milliseconds,
                microseconds,
                nanoseconds,
            ),
        ):
            if value:
                result = result.plus_unit(unit, value)
        return result

    def subtract(
        self,
        *,
        years: int = 0,
        months: int = 0,
        weeks: int = 0,
        days: int = 0,
        hours: int = 0,
        minutes: int = 0,
        seconds: int = 0,
        milliseconds: int = 0,
        microseconds: int = 0,
        nanoseconds: int = 0,
    ) -> Moment:
        """Subtract several units at once, from largest to smallest.

        Example
        -------
        >>> Moment(2021, 3, 31).subtract(months=1, days=1)
        Moment(2021-02-27 00:00:00+00:00)
        """
        result = self
        for unit, value in zip(
            Unit,
            (
                years,
                months,
                weeks,
                days,
                hours,
                minutes,
                seconds,
                milliseconds,
                microseconds,
                nanoseconds,
            ),
        ):
            if value:
                result = result.minus_unit(unit, value)
        return result

    def _plus_unit(self, unit: Unit, value: int) -> Moment:
        if unit is Unit.YEARS:
            return self._plus_months(value * 12)
        elif unit is Unit.MONTHS:
            return self._plus_months(value)
        delta_secs, nsec = divmod(
            self._nsec + value * _UNIT_NANOS[unit], NANOS_PER_SEC
        )
        return self._from_parts(self._sec + delta_secs, nsec, self._offset)

    def _plus_months(self, months: int) -> Moment:
        rdn, sod = divmod(self._sec, SECS_PER_DAY)
        year, month, day = cal.ymd_from_rdn(rdn)
        year_new, month0_new = divmod(year * 12 + month - 1 + months, 12)
        if not cal.MIN_YEAR <= year_new <= cal.MAX_YEAR:
            raise OutOfRange("Moment out of range")
        month_new = month0_new + 1
        day_new = min(day, cal.days_in_month(year_new, month_new))
        return self._from_parts(
            cal.rdn_from_ymd(year_new, month_new, day_new) * SECS_PER_DAY
            + sod,
            self._nsec,
            self._offset,
        )

    def with_component(self, component: Component, value: int, /) -> Moment:
        """Create a new moment with one component replaced.

        Replacing the year or month clamps the day to the new month's length.
        Replacing the day of the week stays within the current ISO week
        (Monday to Sunday). Replacing the ISO week keeps the day of the week.
        Other date components must fit their period exactly.

        Example
        -------
        >>> m = Moment(2020, 2, 29, 8, 30)
        >>> m.with_component(Component.YEAR, 2021)
        Moment(2021-02-28 08:30:00+00:00)
        >>> m.with_component(Component.DAY_OF_WEEK, 1)
        Moment(2020-02-24 08:30:00+00:00)
        """
        if not isinstance(component, Component):
            raise TypeError(f"Expected a Component, got {component!r}")
        if type(value) is not int:
            raise TypeError(f"{component.name.lower()} must be an int")
        rdn, sod = divmod(self._sec, SECS_PER_DAY)
        nsec = self._nsec
        if component in _DATE_COMPONENTS:
            rdn = _with_date_component(rdn, component, value)
        else:
            sod, nsec = _with_time_component(sod, nsec, component, value)
        return self._from_parts(rdn * SECS_PER_DAY + sod, nsec, self._offset)

    def replace(self, **kwargs: int) -> Moment:
        """Replace components by keyword, e.g. ``replace(day_of_month=3)``.

        The keywords are the lower-case :class:`Component` names.
        Components are applied from largest to smallest, regardless of
        the order of the arguments.

        Example
        -------
        >>> Moment(2021, 1, 31, 10).replace(month_of_year=4, hour_of_day=0)
        Moment(2021-04-30 00:00:00+00:00)
        """
        if unknown := kwargs.keys() - _COMPONENT_KWARGS.keys():
            raise TypeError(
                f"Unknown component(s): {', '.join(sorted(unknown))}"
            )
        result = self
        for component in Component:
            name = component.name.lower()
            if name in kwargs:
                result = result.with_component(component, kwargs[name])
        return result

    def adjust(self, adjuster: Callable[[Moment], Moment], /) -> Moment:
        """Apply an adjuster, such as the ones in :mod:`timemoment.adjusters`

        Example
        -------
        >>> from timemoment.adjusters import next_day_of_week
        >>> Moment(2021, 1, 1).adjust(next_day_of_week(MONDAY))
        Moment(2021-01-04 00:00:00+00:00)
        """
        result = adjuster(self)
        if not isinstance(result, Moment):
            raise TypeError(
                f"Adjuster must return a Moment, got {type(result)!r}"
            )
        return result

    def with_offset_same_instant(self, offset: int, /) -> Moment:
        """Change the offset, keeping the UTC instant.
        The local wall time moves along.

        Example
        -------
        >>> Moment(2021, 1, 1, 12).with_offset_same_instant(-300)
        Moment(2021-01-01 07:00:00-05:00)
        """
        _check_offset(offset)
        return self._from_parts(
            self._sec + (offset - self._offset) * 60, self._nsec, offset
        )

    def with_offset_same_local(self, offset: int, /) -> Moment:
        """Change the offset, keeping the local wall time.
        This changes the UTC instant.

        Example
        -------
        >>> Moment(2021, 1, 1, 12).with_offset_same_local(-300)
        Moment(2021-01-01 12:00:00-05:00)
        """
        _check_offset(offset)
        return self._from_parts(self._sec, self._nsec, offset)

    def at_utc(self) -> Moment:
        """The same instant, at offset zero"""
        return self.with_offset_same_instant(0)

    def at_midnight(self) -> Moment:
        """The start of the local day"""
        return self._from_parts(
            self._sec - self._sec % SECS_PER_DAY, 0, self._offset
        )

    def at_noon(self) -> Moment:
        """12:00 on the local day"""
        return self._from_parts(
            self._sec - self._sec % SECS_PER_DAY + 43_200, 0, self._offset
        )

    def at_last_day_of_month(self) -> Moment:
        """The last day of the month, at the same time of day"""
        year, month, _ = cal.ymd_from_rdn(self._sec // SECS_PER_DAY)
        return self._with_date(year, month, cal.days_in_month(year, month))

    def at_last_day_of_quarter(self) -> Moment:
        """The last day of the quarter, at the same time of day"""
        year, month, _ = cal.ymd_from_rdn(self._sec // SECS_PER_DAY)
        month = cal.quarter(month) * 3
        return self._with_date(year, month, cal.days_in_month(year, month))

    def at_last_day_of_year(self) -> Moment:
        """December 31st, at the same time of day"""
        return self._with_date(self.year, 12, 31)

    def _with_date(self, year: int, month: int, day: int) -> Moment:
        return self._from_parts(
            cal.rdn_from_ymd(year, month, day) * SECS_PER_DAY
            + self._sec % SECS_PER_DAY,
            self._nsec,
            self._offset,
        )

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def compare_instant(self, other: Moment, /) -> int:
        """Compare by UTC instant: -1, 0 or 1"""
        if not isinstance(other, Moment):
            raise TypeError(f"Cannot compare Moment with {type(other)!r}")
        a = (self._sec - self._offset * 60, self._nsec)
        b = (other._sec - other._offset * 60, other._nsec)
        return (a > b) - (a < b)

    def compare_local(self, other: Moment, /) -> int:
        """Compare by local wall time, then by offset: -1, 0 or 1

        Example
        -------
        >>> a = Moment(2021, 1, 1, 12, offset=60)
        >>> b = Moment(2021, 1, 1, 11)
        >>> a.compare_local(b)
        1
        >>> a.compare_instant(b)
        0
        """
        if not isinstance(other, Moment):
            raise TypeError(f"Cannot compare Moment with {type(other)!r}")
        a = (self._sec, self._nsec, self._offset)
        b = (other._sec, other._nsec, other._offset)
        return (a > b) - (a < b)

    def exact_eq(self, other: Moment, /) -> bool:
        """Compare moments by their values
        (instead of whether they represent the same instant).

        Note
        ----
        If ``a.exact_eq(b)`` is true, then
        ``a == b`` is also true, but the converse is not necessarily true.

        Example
        -------
        >>> a = Moment(2020, 8, 15, 12, offset=60)
        >>> b = Moment(2020, 8, 15, 13, offset=120)
        >>> a == b
        True  # equivalent instants
        >>> a.exact_eq(b)
        False  # different values (hour and offset)
        """
        if type(other) is not Moment:
            raise TypeError("Cannot compare different types")
        return (self._sec, self._nsec, self._offset) == (
            other._sec,
            other._nsec,
            other._offset,
        )

    def is_before(self, other: Moment, /) -> bool:
        return self.compare_instant(other) < 0

    def is_after(self, other: Moment, /) -> bool:
        return self.compare_instant(other) > 0

    def is_equal(self, other: Moment, /) -> bool:
        return self.compare_instant(other) == 0

    def __eq__(self, other: object) -> bool:
        """Check if two moments represent the same instant.

        Note
        ----
        If you want to compare on the values instead
        (local time *and* offset), use :meth:`exact_eq`.
        """
        if not isinstance(other, Moment):
            return NotImplemented
        return (self._sec - self._offset * 60, self._nsec) == (
            other._sec - other._offset * 60,
            other._nsec,
        )

    def __lt__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (self._sec - self._offset * 60, self._nsec) < (
            other._sec - other._offset * 60,
            other._nsec,
        )

    def __le__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (self._sec - self._offset * 60, self._nsec) <= (
            other._sec - other._offset * 60,
            other._nsec,
        )

    def __gt__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (self._sec - self._offset * 60, self._nsec) > (
            other._sec - other._offset * 60,
            other._nsec,
        )

    def __ge__(self, other: Moment) -> bool:
        if not isinstance(other, Moment):
            return NotImplemented
        return (self._sec - self._offset * 60, self._nsec) >= (
            other._sec - other._offset * 60,
            other._nsec,
        )

    def __hash__(self) -> int:
        return hash((self._sec - self._offset * 60, self._nsec))

    def __str__(self) -> str:
        year, month, day = cal.ymd_from_rdn(self._sec // SECS_PER_DAY)
        sign = "-" if self._offset < 0 else "+"
        return (
            f"{year:04d}-{month:02d}-{day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}"
            + bool(self._nsec) * f".{self._nsec:09d}".rstrip("0")
            + f"{sign}{abs(self._offset) // 60:02d}:{abs(self._offset) % 60:02d}"
        )

    def __repr__(self) -> str:
        return f"Moment({str(self).replace('T', ' ')})"

    # a custom pickle implementation with a smaller payload
    def __reduce__(self) -> tuple[object, ...]:
        return (
            _unpkl_moment,
            (pack("<qii", self._sec, self._nsec, self._offset),),
        )

    @classmethod
    def _from_parts(cls, sec: int, nsec: int, offset: int, /) -> Moment:
        _check_bounds(sec, offset)
        return cls._from_parts_unchecked(sec, nsec, offset)

    @classmethod
    def _from_parts_unchecked(
        cls, sec: int, nsec: int, offset: int, /
    ) -> Moment:
        self = _object_new(cls)
        self._sec = sec
        self._nsec = nsec
        self._offset = offset
        return self


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
def _unpkl_moment(data: bytes) -> Moment:
    sec, nsec, offset = unpack("<qii", data)
    return Moment._from_parts(sec, nsec, offset)


Moment.MIN = Moment._from_parts_unchecked(_MIN_RANGE, 0, 0)
Moment.MAX = Moment._from_parts_unchecked(_MAX_RANGE, NANOS_PER_SEC - 1, 0)


def _with_date_component(rdn: int, component: Component, value: int) -> int:
    year, month, day = cal.ymd_from_rdn(rdn)
    if component is Component.YEAR:
        _check_range("year", value, cal.MIN_YEAR, cal.MAX_YEAR)
        return cal.rdn_from_ymd(
            value, month, min(day, cal.days_in_month(value, month))
        )
    elif component is Component.MONTH_OF_YEAR:
        _check_range("month_of_year", value, 1, 12)
        return cal.rdn_from_ymd(
            year, value, min(day, cal.days_in_month(year, value))
        )
    elif component is Component.WEEK_OF_YEAR:
        week_year, week = cal.week_year_and_week(rdn)
        _check_range("week_of_year", value, 1, cal.weeks_in_year(week_year))
        return rdn + (value - week) * 7
    elif component is Component.DAY_OF_YEAR:
        _check_range("day_of_year", value, 1, cal.days_in_year(year))
        return cal.rdn_from_yd(year, value)
    elif component is Component.DAY_OF_QUARTER:
        q = cal.quarter(month)
        _check_range("day_of_quarter", value, 1, cal.days_in_quarter(year, q))
        return cal.rdn_from_yqd(year, q, value)
    elif component is Component.DAY_OF_MONTH:
        _check_range(
            "day_of_month", value, 1, cal.days_in_month(year, month)
        )
        return cal.rdn_from_ymd(year, month, value)
    else:
        assert component is Component.DAY_OF_WEEK
        _check_range("day_of_week", value, 1, 7)
        return rdn + value - cal.day_of_week(rdn)


def _with_time_component(
    sod: int, nsec: int, component: Component, value: int
) -> tuple[int, int]:
    if component is Component.HOUR_OF_DAY:
        _check_range("hour_of_day", value, 0, 23)
        return value * 3_600 + sod % 3_600, nsec
    elif component is Component.MINUTE_OF_HOUR:
        _check_range("minute_of_hour", value, 0, 59)
        return sod - sod % 3_600 + value * 60 + sod % 60, nsec
    elif component is Component.MINUTE_OF_DAY:
        _check_range("minute_of_day", value, 0, 1_439)
        return value * 60 + sod % 60, nsec
    elif component is Component.SECOND_OF_MINUTE:
        _check_range("second_of_minute", value, 0, 59)
        return sod - sod % 60 + value, nsec
    elif component is Component.SECOND_OF_DAY:
        _check_range("second_of_day", value, 0, SECS_PER_DAY - 1)
        return value, nsec
    elif component is Component.MILLI_OF_SECOND:
        _check_range("milli_of_second", value, 0, 999)
        return sod, value * 1_000_000 + nsec % 1_000_000
    elif component is Component.MILLI_OF_DAY:
        _check_range("milli_of_day", value, 0, SECS_PER_DAY * 1_000 - 1)
        secs, millis = divmod(value, 1_000)
        return secs, millis * 1_000_000
    elif component is Component.MICRO_OF_SECOND:
        _check_range("micro_of_second", value, 0, 999_999)
        return sod, value * 1_000 + nsec % 1_000
    else:
        assert component is Component.NANO_OF_SECOND
        _check_range("nano_of_second", value, 0, NANOS_PER_SEC - 1)
        return sod, value


def _check_range(name: str, value: int, lo: int, hi: int) -> None:
    if type(value) is not int:
        raise TypeError(f"{name} must be an int, got {type(value)!r}")
    if not lo <= value <= hi:
        raise InvalidComponent(
            f"{name} must be in the range [{lo}, {hi}], got {value}"
        )


def _check_offset(offset: int) -> None:
    if type(offset) is not int:
        raise TypeError(f"offset must be an int, got {type(offset)!r}")
    if not MIN_OFFSET <= offset <= MAX_OFFSET:
        raise InvalidOffset(
            f"offset must be in the range [{MIN_OFFSET}, {MAX_OFFSET}] "
            f"minutes, got {offset}"
        )


def _check_unit_value(unit: Unit, value: int) -> None:
    try:
        lo, hi = _UNIT_RANGES[unit]
    except (KeyError, TypeError):
        raise TypeError(f"Expected a Unit, got {unit!r}")
    if type(value) is not int:
        raise TypeError(f"{unit.name.lower()} must be an int")
    if not lo <= value <= hi:
        raise UnitOutOfRange(
            f"{unit.name.lower()} must be in the range [{lo}, {hi}], "
            f"got {value}"
        )


def _check_bounds(sec: int, offset: int) -> None:
    # Both the local wall time and the UTC instant must fall within
    # years 1-9999.
    if not (
        _MIN_RANGE <= sec <= _MAX_RANGE
        and _MIN_RANGE <= sec - offset * 60 <= _MAX_RANGE
    ):
        raise OutOfRange("Moment out of range")


class InvalidComponent(ValueError):
    """A field value is out of range, or the date doesn't exist"""


class InvalidOffset(ValueError):
    """A UTC offset is outside of ±24 hours, or not in whole minutes"""


class InvalidEpoch(ValueError):
    """A UNIX timestamp is outside of the supported range"""


class UnitOutOfRange(ValueError):
    """An amount to add or subtract is outside of the unit's range"""


class OutOfRange(ValueError):
    """The result of an operation is outside of years 1-9999"""


class InvalidPrecision(ValueError):
    """A Julian date precision is outside of -9 to 9"""


# We expose the public members in the root of the module.
# For clarity, we remove the "_pymoment" part from the names,
# since this is an implementation detail.
for name in __all__:
    member = locals()[name]
    if getattr(member, "__module__", None) == __name__:  # pragma: no branch
        member.__module__ = "timemoment"

# clear up loop variables so they don't leak into the namespace
del name
del member

_unpkl_moment.__module__ = "timemoment"

# disable further subclassing
final(_ImmutableBase)


def _patch_time_frozen(nanos: int) -> None:
    global time_ns

    def time_ns() -> int:
        return nanos


def _patch_time_keep_ticking(nanos: int) -> None:
    global time_ns

    _patched_at = time_ns()
    _time_ns = time_ns

    def time_ns() -> int:
        return nanos + _time_ns() - _patched_at


def _unpatch_time() -> None:
    global time_ns

    from time import time_ns
