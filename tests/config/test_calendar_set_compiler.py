"""
Tests for calendar-set compilation.

Covers:
- Every node kind compiles to the matching specification
- ref resolution, sharing and cycle detection
- Business calendars with weekend and holidays
- Issue collection across a whole document
"""

import logging
from datetime import date, datetime

import pytest

from schedule_config.compiler import ConfigCompilationError, compile_calendar_set
from schedule_config.loader import parse_calendar_set
from schedule_config.schema import CalendarSetDef, SpecificationDef, SpecificationNodeDef
from schedule_kernel.domain import calendar_dates as cal
from schedule_kernel.domain import date_specification as ds
from schedule_kernel.domain.calendar_dates import DayOfWeek


def _compile(specifications=None, calendars=None):
    return compile_calendar_set(
        parse_calendar_set(
            {
                "name": "test",
                "version": 1,
                "specifications": specifications or {},
                "calendars": calendars or {},
            }
        )
    )


class TestNodeKinds:
    """Each YAML node kind builds the corresponding specification."""

    @pytest.mark.parametrize(
        "node,expected",
        [
            ({"fixed": date(2005, 1, 15)}, ds.fixed(date(2005, 1, 15))),
            ({"day_of_week": ["monday", "FRIDAY"]}, ds.day_of_week(DayOfWeek.MONDAY, DayOfWeek.FRIDAY)),
            (
                {"nth_weekday_of_month": {"month": 11, "weekday": "THURSDAY", "n": 4}},
                ds.nth_weekday_of_month(11, DayOfWeek.THURSDAY, 4),
            ),
            (
                {"monthly_nth_weekday": {"weekday": 0, "n": 1}},
                ds.monthly_nth_weekday(DayOfWeek.MONDAY, 1),
            ),
            ({"annual_date": {"month": 7, "day": 4}}, ds.annual_date(7, 4)),
            ({"monthly_day": 15}, ds.monthly_day(15)),
            (
                {"between": {"start": date(2005, 10, 1), "end": date(2005, 10, 31)}},
                ds.calendar_interval(cal.month(2005, 10)),
            ),
            ({"always": True}, ds.always()),
            ({"never": True}, ds.never()),
            ({"not": {"monthly_day": 1}}, ds.not_(ds.monthly_day(1))),
            (
                {"any_of": [{"monthly_day": 1}, {"monthly_day": 2}]},
                ds.or_(ds.monthly_day(1), ds.monthly_day(2)),
            ),
            (
                {"all_of": [{"monthly_day": 1}, {"day_of_week": ["MONDAY"]}]},
                ds.and_(ds.monthly_day(1), ds.day_of_week(DayOfWeek.MONDAY)),
            ),
        ],
    )
    def test_kind(self, node, expected):
        compiled = _compile({"spec": node})
        assert compiled.specification("spec") == expected

    def test_between_with_open_end(self):
        compiled = _compile({"from_2005": {"between": {"start": "2005-01-01"}}})
        spec = compiled.specification("from_2005")
        assert spec.is_satisfied_by(date(2099, 1, 1))
        assert not spec.is_satisfied_by(date(2004, 12, 31))


class TestUnparsedDefinitions:
    """Definitions built without the loader are still type-checked."""

    @staticmethod
    def _compile_node(node):
        return compile_calendar_set(
            CalendarSetDef(
                name="direct",
                version=1,
                checksum="",
                specifications=(SpecificationDef("spec", node),),
            )
        )

    @pytest.mark.parametrize(
        "params",
        [
            (("start", "2005-01-01"),),
            (("end", 20051231), ("start", date(2005, 1, 1))),
            (("start", datetime(2005, 1, 1, 9, 30)),),
        ],
    )
    def test_between_requires_dates(self, params):
        with pytest.raises(ConfigCompilationError) as exc_info:
            self._compile_node(SpecificationNodeDef(kind="between", params=params))
        (issue,) = exc_info.value.issues
        assert issue.category == "node"
        assert "must be a date" in issue.message

    def test_between_with_dates_compiles(self):
        node = SpecificationNodeDef(
            kind="between", params=(("end", date(2005, 1, 31)), ("start", date(2005, 1, 1)))
        )
        spec = self._compile_node(node).specification("spec")
        assert spec == ds.calendar_interval(cal.inclusive(date(2005, 1, 1), date(2005, 1, 31)))

    def test_fixed_requires_a_date(self):
        with pytest.raises(ConfigCompilationError) as exc_info:
            self._compile_node(SpecificationNodeDef(kind="fixed", params=(("day", "2005-12-26"),)))
        assert exc_info.value.issues[0].category == "node"


class TestReferences:
    """ref nodes resolve against named specifications."""

    def test_ref_shares_the_named_specification(self):
        compiled = _compile(
            {
                "payday": {"monthly_day": 15},
                "weekday_payday": {
                    "all_of": [{"ref": "payday"}, {"not": {"day_of_week": ["SATURDAY", "SUNDAY"]}}]
                },
            }
        )
        shared = compiled.specification("weekday_payday").left
        assert shared is compiled.specification("payday")

    def test_forward_reference(self):
        compiled = _compile({"alias": {"ref": "target"}, "target": {"monthly_day": 3}})
        assert compiled.specification("alias") == ds.monthly_day(3)

    def test_unknown_reference(self):
        with pytest.raises(ConfigCompilationError) as exc_info:
            _compile({"alias": {"ref": "missing"}})
        (issue,) = exc_info.value.issues
        assert issue.category == "reference"
        assert issue.name == "alias"

    def test_cycle_detected(self):
        with pytest.raises(ConfigCompilationError) as exc_info:
            _compile({"a": {"ref": "b"}, "b": {"any_of": [{"ref": "a"}]}})
        categories = {issue.category for issue in exc_info.value.issues}
        assert categories == {"cycle"}
        assert "a -> b -> a" in exc_info.value.issues[0].message


class TestCalendars:
    """Business calendars from configuration."""

    def test_calendar_with_holidays(self):
        compiled = _compile(
            {"christmas": {"annual_date": {"month": 12, "day": 25}}},
            {"office": {"weekend": ["SATURDAY", "SUNDAY"], "holidays": [{"ref": "christmas"}, {"fixed": date(2005, 12, 26)}]}},
        )
        office = compiled.calendar("office")
        assert office.is_holiday(date(2005, 12, 25))
        assert office.is_holiday(date(2005, 12, 26))
        assert office.next_business_day(date(2005, 12, 23)) == date(2005, 12, 27)

    def test_custom_weekend(self):
        compiled = _compile(calendars={"gulf": {"weekend": ["FRIDAY", "SATURDAY"]}})
        assert compiled.calendar("gulf").weekend == frozenset({DayOfWeek.FRIDAY, DayOfWeek.SATURDAY})

    def test_unknown_weekday(self):
        with pytest.raises(ConfigCompilationError) as exc_info:
            _compile(calendars={"bad": {"weekend": ["FUNDAY"]}})
        assert exc_info.value.issues[0].category == "calendar"

    def test_missing_lookup_raises_key_error(self):
        with pytest.raises(KeyError):
            _compile().calendar("absent")


class TestIssueCollection:
    """All problems are reported together."""

    def test_every_bad_specification_reported(self):
        with pytest.raises(ConfigCompilationError) as exc_info:
            _compile(
                {
                    "bad_month": {"annual_date": {"month": 13, "day": 1}},
                    "bad_weekday": {"day_of_week": ["FUNDAY"]},
                    "bad_type": {"monthly_day": "fifteenth"},
                    "fine": {"monthly_day": 1},
                }
            )
        error = exc_info.value
        assert error.code == "CONFIG_COMPILATION_FAILED"
        assert error.calendar_set == "test"
        assert sorted(issue.name for issue in error.issues) == [
            "bad_month",
            "bad_type",
            "bad_weekday",
        ]
        assert all(issue.category == "node" for issue in error.issues)

    def test_successful_compilation_logged(self, caplog):
        with caplog.at_level(logging.INFO, logger="schedule_kernel"):
            _compile({"payday": {"monthly_day": 15}})
        record = next(r for r in caplog.records if r.getMessage() == "calendar_set_compiled")
        assert record.specification_count == 1
