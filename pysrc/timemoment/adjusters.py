"""Common date adjustments, for use with :meth:`Moment.adjust`.

Each function here builds an *adjuster*: a callable taking a
:class:`~timemoment.Moment` and returning a new one.
Adjusters keep the time of day and the offset.

Example
-------
>>> from timemoment import Moment, THURSDAY
>>> from timemoment.adjusters import nth_day_of_week_in_month
>>> thanksgiving = nth_day_of_week_in_month(4, THURSDAY)
>>> Moment(2021, 11, 1).adjust(thanksgiving)
Moment(2021-11-25 00:00:00+00:00)
"""

from __future__ import annotations

from typing import Callable, Union

from . import _calendar as cal
from ._pymoment import Component, Moment, Unit, Weekday

__all__ = [
    "Adjuster",
    "next_day_of_week",
    "next_or_same_day_of_week",
    "previous_day_of_week",
    "previous_or_same_day_of_week",
    "first_day_of_week_in_month",
    "last_day_of_week_in_month",
    "nth_day_of_week_in_month",
    "western_easter_sunday",
    "orthodox_easter_sunday",
]

Adjuster = Callable[[Moment], Moment]


def _iso_weekday(weekday: Union[Weekday, int]) -> int:
    if isinstance(weekday, Weekday):
        return weekday.value
    if type(weekday) is not int:
        raise TypeError(f"Expected a Weekday, got {weekday!r}")
    if not 1 <= weekday <= 7:
        raise ValueError(f"weekday must be in the range [1, 7], got {weekday}")
    return weekday


def next_day_of_week(weekday: Union[Weekday, int], /) -> Adjuster:
    """The first given weekday strictly after the moment's date"""
    wd = _iso_weekday(weekday)

    def adjust(m: Moment) -> Moment:
        return m.plus_unit(Unit.DAYS, (wd - m.day_of_week - 1) % 7 + 1)

    return adjust


def next_or_same_day_of_week(weekday: Union[Weekday, int], /) -> Adjuster:
    """Like :func:`next_day_of_week`, but leaves a matching date as-is"""
    wd = _iso_weekday(weekday)

    def adjust(m: Moment) -> Moment:
        return m.plus_unit(Unit.DAYS, (wd - m.day_of_week) % 7)

    return adjust


def previous_day_of_week(weekday: Union[Weekday, int], /) -> Adjuster:
    """The last given weekday strictly before the moment's date"""
    wd = _iso_weekday(weekday)

    def adjust(m: Moment) -> Moment:
        return m.minus_unit(Unit.DAYS, (m.day_of_week - wd - 1) % 7 + 1)

    return adjust


def previous_or_same_day_of_week(
    weekday: Union[Weekday, int], /
) -> Adjuster:
    """Like :func:`previous_day_of_week`, but leaves a matching date as-is"""
    wd = _iso_weekday(weekday)

    def adjust(m: Moment) -> Moment:
        return m.minus_unit(Unit.DAYS, (m.day_of_week - wd) % 7)

    return adjust


def first_day_of_week_in_month(weekday: Union[Weekday, int], /) -> Adjuster:
    """The first given weekday in the moment's month"""
    to_weekday = next_or_same_day_of_week(weekday)

    def adjust(m: Moment) -> Moment:
        return to_weekday(m.with_component(Component.DAY_OF_MONTH, 1))

    return adjust


def last_day_of_week_in_month(weekday: Union[Weekday, int], /) -> Adjuster:
    """The last given weekday in the moment's month"""
    to_weekday = previous_or_same_day_of_week(weekday)

    def adjust(m: Moment) -> Moment:
        return to_weekday(m.at_last_day_of_month())

    return adjust


def nth_day_of_week_in_month(
    ordinal: int, weekday: Union[Weekday, int], /
) -> Adjuster:
    """The n-th given weekday in the moment's month.

    A negative ``ordinal`` counts from the end of the month:
    ``-1`` is the last one. Only 1-4 (and -1 to -4) are accepted,
    since every month has at least four of each weekday.

    Example
    -------
    >>> from timemoment import MONDAY
    >>> Moment(2021, 5, 1).adjust(nth_day_of_week_in_month(-1, MONDAY))
    Moment(2021-05-31 00:00:00+00:00)
    """
    if type(ordinal) is not int:
        raise TypeError(f"ordinal must be an int, got {type(ordinal)!r}")
    if not (1 <= ordinal <= 4 or -4 <= ordinal <= -1):
        raise ValueError(
            f"ordinal must be in the range [1, 4] or [-4, -1], got {ordinal}"
        )
    if ordinal > 0:
        first = first_day_of_week_in_month(weekday)

        def adjust(m: Moment) -> Moment:
            return first(m).plus_unit(Unit.WEEKS, ordinal - 1)

    else:
        last = last_day_of_week_in_month(weekday)

        def adjust(m: Moment) -> Moment:
            return last(m).minus_unit(Unit.WEEKS, -ordinal - 1)

    return adjust


def western_easter_sunday() -> Adjuster:
    """Easter Sunday of the moment's year, as observed by western churches

    Example
    -------
    >>> Moment(2024, 1, 1).adjust(western_easter_sunday())
    Moment(2024-03-31 00:00:00+00:00)
    """

    def adjust(m: Moment) -> Moment:
        month, day = cal.easter_western(m.year)
        return m.replace(month_of_year=month, day_of_month=day)

    return adjust


def orthodox_easter_sunday() -> Adjuster:
    """Easter Sunday of the moment's year, as observed by eastern
    orthodox churches. It's computed on the Julian calendar, but the
    result is a (proleptic) Gregorian date as always."""

    def adjust(m: Moment) -> Moment:
        rdn = cal.easter_orthodox(m.year)
        return m.plus_unit(Unit.DAYS, rdn - m.to_local_rd_values()[0])

    return adjust
