import pickle
from copy import copy, deepcopy
from datetime import date, datetime as py_datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis.strategies import floats, integers

from timemoment import (
    MAX_EPOCH_SEC,
    MIN_EPOCH_SEC,
    Component,
    InvalidComponent,
    InvalidEpoch,
    InvalidOffset,
    Moment,
    OutOfRange,
)

from .common import moments

BIG_INT = 1 << 64 + 1  # a big int that may cause an overflow error


class TestInit:
    def test_defaults(self):
        assert Moment(2020, 8, 15).exact_eq(
            Moment(2020, 8, 15, 0, 0, 0, nanosecond=0, offset=0)
        )

    @pytest.mark.parametrize(
        "kwargs, keyword",
        [
            (dict(year=0), "year"),
            (dict(year=10_000), "year"),
            (dict(year=-BIG_INT), "year"),
            (dict(month=0), "month"),
            (dict(month=13), "month"),
            (dict(day=0), "day"),
            (dict(day=32), "day"),
            (dict(month=2, day=30), "day"),
            (dict(year=2021, month=2, day=29), "day"),
            (dict(hour=-1), "hour"),
            (dict(hour=24), "hour"),
            (dict(minute=-1), "minute"),
            (dict(minute=60), "minute"),
            (dict(second=-1), "second"),
            (dict(second=60), "second"),
            (dict(nanosecond=-1), "nanosecond"),
            (dict(nanosecond=1_000_000_000), "nanosecond"),
            (dict(nanosecond=BIG_INT), "nanosecond"),
        ],
    )
    def test_bounds(self, kwargs, keyword):
        defaults = {
            "year": 2020,
            "month": 1,
            "day": 1,
        }
        with pytest.raises(InvalidComponent, match=keyword):
            Moment(**{**defaults, **kwargs})

    @pytest.mark.parametrize("offset", [-1441, 1441, BIG_INT])
    def test_invalid_offset(self, offset):
        with pytest.raises(InvalidOffset):
            Moment(2020, 1, 1, offset=offset)

    def test_instant_out_of_range(self):
        with pytest.raises(OutOfRange):
            Moment(1, 1, 1, offset=60)
        with pytest.raises(OutOfRange):
            Moment(9999, 12, 31, 23, offset=-61)

        # right at the edges
        Moment(1, 1, 1, 1, offset=60)
        Moment(9999, 12, 31, 22, 59, offset=-60)

    def test_wrong_types(self):
        with pytest.raises(TypeError):
            Moment("2020", 8, 15)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            Moment(2020, 8, 15, offset=1.5)  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            Moment(2020, 8, 15, 4, 0, 0, 0)  # type: ignore[misc]

    @given(
        integers(),
        integers(),
        integers(),
        integers(),
        integers(),
        integers(),
        integers(),
        integers(),
    )
    def test_fuzzing(
        self, year, month, day, hour, minute, second, nanos, offset
    ):
        try:
            Moment(
                year,
                month,
                day,
                hour,
                minute,
                second,
                nanosecond=nanos,
                offset=offset,
            )
        except ValueError:
            pass


def test_no_subclassing():
    with pytest.raises(TypeError):

        class Subclass(Moment):  # type: ignore[misc]
            pass


def test_min_max():
    assert Moment.MIN.exact_eq(Moment(1, 1, 1))
    assert Moment.MAX.exact_eq(
        Moment(9999, 12, 31, 23, 59, 59, nanosecond=999_999_999)
    )
    assert Moment.MIN.epoch == MIN_EPOCH_SEC
    assert Moment.MAX.epoch == MAX_EPOCH_SEC


class TestFromEpoch:
    def test_utc(self):
        assert Moment.from_epoch(0).exact_eq(Moment(1970, 1, 1))
        assert Moment.from_epoch(1_597_493_310).exact_eq(
            Moment(2020, 8, 15, 12, 8, 30)
        )

    def test_offset_and_nanos(self):
        assert Moment.from_epoch(0, offset=-300).exact_eq(
            Moment(1969, 12, 31, 19, offset=-300)
        )
        assert Moment.from_epoch(
            -1, nanosecond=5, offset=90
        ).exact_eq(Moment(1970, 1, 1, 1, 29, 59, nanosecond=5, offset=90))

    def test_limits(self):
        assert Moment.from_epoch(MIN_EPOCH_SEC).exact_eq(Moment.MIN)
        assert Moment.from_epoch(
            MAX_EPOCH_SEC, nanosecond=999_999_999
        ).exact_eq(Moment.MAX)

        with pytest.raises(InvalidEpoch):
            Moment.from_epoch(MIN_EPOCH_SEC - 1)
        with pytest.raises(InvalidEpoch):
            Moment.from_epoch(MAX_EPOCH_SEC + 1)

        # the instant is valid, but the local time isn't
        with pytest.raises(OutOfRange):
            Moment.from_epoch(MIN_EPOCH_SEC, offset=-1)
        with pytest.raises(OutOfRange):
            Moment.from_epoch(MAX_EPOCH_SEC, offset=1)

    def test_invalid(self):
        with pytest.raises(TypeError):
            Moment.from_epoch(1.0)  # type: ignore[arg-type]
        with pytest.raises(InvalidComponent, match="nanosecond"):
            Moment.from_epoch(0, nanosecond=1_000_000_000)
        with pytest.raises(InvalidOffset):
            Moment.from_epoch(0, offset=2_000)

    def test_millis(self):
        assert Moment.from_epoch_millis(-1).exact_eq(
            Moment(1969, 12, 31, 23, 59, 59, nanosecond=999_000_000)
        )
        assert Moment.from_epoch_millis(1_500, offset=60).exact_eq(
            Moment(1970, 1, 1, 1, 0, 1, nanosecond=500_000_000, offset=60)
        )
        with pytest.raises(InvalidEpoch):
            Moment.from_epoch_millis((MAX_EPOCH_SEC + 1) * 1_000)
        with pytest.raises(TypeError):
            Moment.from_epoch_millis(1.0)  # type: ignore[arg-type]

    def test_nanos(self):
        assert Moment.from_epoch_nanos(1_600_000_000_123_456_789).exact_eq(
            Moment(2020, 9, 13, 12, 26, 40, nanosecond=123_456_789)
        )
        assert Moment.from_epoch_nanos(-1).exact_eq(
            Moment(1969, 12, 31, 23, 59, 59, nanosecond=999_999_999)
        )

    @given(moments())
    def test_roundtrip(self, m):
        assert Moment.from_epoch(
            m.epoch, nanosecond=m.nanosecond, offset=m.offset
        ).exact_eq(m)
        assert Moment.from_epoch_nanos(
            m.epoch_nanos(), offset=m.offset
        ).exact_eq(m)
        assert Moment.from_epoch_millis(m.epoch_millis()).epoch == m.epoch


class TestFromEpochReal:
    @pytest.mark.parametrize(
        "value, expect",
        [
            (0.0, Moment(1970, 1, 1)),
            (1.5, Moment(1970, 1, 1, 0, 0, 1, nanosecond=500_000_000)),
            (
                -0.5,
                Moment(1969, 12, 31, 23, 59, 59, nanosecond=500_000_000),
            ),
            (0.1, Moment(1970, 1, 1, nanosecond=100_000_000)),
            (
                1_597_493_310.25,
                Moment(2020, 8, 15, 12, 8, 30, nanosecond=250_000_000),
            ),
            # exact ties are rounded to the even nanosecond
            (1 / 1024, Moment(1970, 1, 1, nanosecond=976_562)),
            (3 / 1024, Moment(1970, 1, 1, nanosecond=2_929_688)),
        ],
    )
    def test_valid(self, value, expect):
        assert Moment.from_epoch_real(value).exact_eq(expect)

    def test_int(self):
        assert Moment.from_epoch_real(86_400).exact_eq(Moment(1970, 1, 2))

    @pytest.mark.parametrize(
        "value",
        [
            float("nan"),
            float("inf"),
            float("-inf"),
            1e20,
            MIN_EPOCH_SEC - 0.5,
            MAX_EPOCH_SEC + 1.0,
        ],
    )
    def test_invalid(self, value):
        with pytest.raises(InvalidEpoch):
            Moment.from_epoch_real(value)

    @given(floats())
    def test_fuzzing(self, value):
        try:
            m = Moment.from_epoch_real(value)
        except InvalidEpoch:
            pass
        else:
            assert abs(m.epoch_nanos() - value * 1e9) <= abs(value) + 1


class TestPyDatetime:
    def test_from_py_datetime(self):
        d = py_datetime(
            2020,
            8,
            15,
            23,
            12,
            9,
            987_654,
            tzinfo=timezone(timedelta(hours=-5, minutes=-30)),
        )
        assert Moment.from_py_datetime(d).exact_eq(
            Moment(2020, 8, 15, 23, 12, 9, nanosecond=987_654_000, offset=-330)
        )

    def test_from_py_datetime_invalid(self):
        with pytest.raises(ValueError, match="naive"):
            Moment.from_py_datetime(py_datetime(2020, 8, 15))
        with pytest.raises(InvalidOffset, match="minutes"):
            Moment.from_py_datetime(
                py_datetime(
                    2020, 8, 15, tzinfo=timezone(timedelta(seconds=-30))
                )
            )
        with pytest.raises(TypeError):
            Moment.from_py_datetime(date(2020, 8, 15))  # type: ignore[arg-type]
        with pytest.raises(OutOfRange):
            Moment.from_py_datetime(
                py_datetime(1, 1, 1, tzinfo=timezone(timedelta(hours=1)))
            )

    def test_py_datetime(self):
        m = Moment(2020, 8, 15, 23, 12, 9, nanosecond=987_654_321, offset=-90)
        d = m.py_datetime()
        assert d == py_datetime(
            2020,
            8,
            15,
            23,
            12,
            9,
            987_654,
            tzinfo=timezone(timedelta(minutes=-90)),
        )
        assert d.utcoffset() == timedelta(minutes=-90)
        assert Moment(2020, 1, 1).py_datetime().tzinfo is timezone.utc

    def test_py_datetime_unrepresentable_offset(self):
        with pytest.raises(InvalidOffset):
            Moment(2020, 1, 1, offset=1440).py_datetime()

    @given(moments())
    def test_roundtrip(self, m):
        if abs(m.offset) == 1440:
            return
        back = Moment.from_py_datetime(m.py_datetime())
        assert back.offset == m.offset
        assert back.epoch == m.epoch
        assert back.microsecond == m.microsecond


class TestComponents:
    def test_all(self):
        m = Moment(2021, 3, 4, 13, 14, 15, nanosecond=123_456_789, offset=60)
        assert m.year == 2021
        assert m.quarter == 1
        assert m.month == 3
        assert m.day == m.day_of_month == 4
        assert m.week == 9
        assert m.week_year == 2021
        assert m.day_of_year == 63
        assert m.day_of_quarter == 63
        assert m.day_of_week == 4
        assert m.hour == 13
        assert m.minute == 14
        assert m.minute_of_day == 794
        assert m.second == 15
        assert m.second_of_day == 47_655
        assert m.millisecond == 123
        assert m.millisecond_of_day == 47_655_123
        assert m.microsecond == 123_456
        assert m.nanosecond == 123_456_789
        assert m.offset == 60
        assert m.epoch == int(
            py_datetime(2021, 3, 4, 12, 14, 15, tzinfo=timezone.utc).timestamp()
        )
        assert m.epoch_millis() == m.epoch * 1_000 + 123
        assert m.epoch_nanos() == m.epoch * 1_000_000_000 + 123_456_789

    @pytest.mark.parametrize(
        "ymd, week_year, week",
        [
            ((2005, 1, 1), 2004, 53),
            ((2005, 1, 2), 2004, 53),
            ((2005, 1, 3), 2005, 1),
            ((2007, 12, 31), 2008, 1),
            ((2008, 12, 29), 2009, 1),
            ((2010, 1, 3), 2009, 53),
            ((2020, 12, 31), 2020, 53),
        ],
    )
    def test_iso_week(self, ymd, week_year, week):
        m = Moment(*ymd)
        assert m.week_year == week_year
        assert m.week == week

    def test_lengths(self):
        m = Moment(2020, 2, 10)
        assert m.length_of_year() == 366
        assert m.length_of_quarter() == 91
        assert m.length_of_month() == 29
        assert m.length_of_week_year() == 53

        m = Moment(2021, 11, 1)
        assert m.length_of_year() == 365
        assert m.length_of_quarter() == 92
        assert m.length_of_month() == 30
        assert m.length_of_week_year() == 52

        assert Moment(2005, 1, 1).length_of_week_year() == 53

    def test_local_values_use_local_time(self):
        m = Moment(2021, 12, 31, 23, 30, offset=-60)
        assert m.year == 2021
        assert m.at_utc().year == 2022

    @pytest.mark.parametrize("component", list(Component))
    def test_get(self, component):
        m = Moment(2021, 5, 15, 13, 14, 15, nanosecond=123_456_789, offset=60)
        attr = {
            Component.YEAR: "year",
            Component.MONTH_OF_YEAR: "month",
            Component.WEEK_OF_YEAR: "week",
            Component.DAY_OF_YEAR: "day_of_year",
            Component.DAY_OF_QUARTER: "day_of_quarter",
            Component.DAY_OF_MONTH: "day",
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
        }[component]
        assert m.get(component) == getattr(m, attr)

    def test_get_invalid(self):
        with pytest.raises(TypeError):
            Moment(2021, 1, 1).get("year")  # type: ignore[arg-type]

    def test_rd_values(self):
        m = Moment(1970, 1, 1, 6, nanosecond=7, offset=60)
        assert m.to_local_rd_values() == (719_163, 21_600, 7)
        assert m.to_instant_rd_values() == (719_163, 18_000, 7)
        assert m.local_rd_seconds() == 719_163 * 86_400 + 21_600
        assert m.instant_rd_seconds() == 719_163 * 86_400 + 18_000

    @given(moments())
    def test_invariants(self, m):
        assert 0 <= m.nanosecond < 1_000_000_000
        assert -1440 <= m.offset <= 1440
        assert MIN_EPOCH_SEC <= m.epoch <= MAX_EPOCH_SEC
        assert 1 <= m.year <= 9999


def test_repr():
    m = Moment(2020, 8, 15, 23, 12, 9, nanosecond=987_654, offset=-330)
    assert repr(m) == "Moment(2020-08-15 23:12:09.000987654-05:30)"
    assert (
        repr(Moment(2020, 8, 15, 23, 12)) == "Moment(2020-08-15 23:12:00+00:00)"
    )
    assert (
        repr(Moment(2020, 8, 15, nanosecond=500_000_000, offset=1440))
        == "Moment(2020-08-15 00:00:00.5+24:00)"
    )


def test_str():
    m = Moment(2020, 8, 15, 23, 12, 9, nanosecond=987_654, offset=-330)
    assert str(m) == "2020-08-15T23:12:09.000987654-05:30"
    assert str(Moment(1, 1, 1)) == "0001-01-01T00:00:00+00:00"


def test_pickle():
    m = Moment(2020, 8, 15, 23, 12, 9, nanosecond=987_654_200, offset=-90)
    assert len(m.__reduce__()[1][0]) == 16
    assert pickle.loads(pickle.dumps(m)).exact_eq(m)


def test_copy():
    m = Moment(2020, 8, 15, 23, 12, 9, nanosecond=987_654)
    assert copy(m) is m
    assert deepcopy(m) is m
