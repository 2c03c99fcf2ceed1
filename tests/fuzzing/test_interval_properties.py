"""
Hypothesis property tests for the interval algebra, interval maps,
date specifications and proration.

Properties checked:
- intersects() is symmetric and agrees with intersection().is_empty()
- includes() agrees with intersection against a single element
- complement pieces are disjoint from the carving interval
- IntervalMap keeps last-write-wins and disjoint bindings
- Specification iteration agrees with a brute-force day filter
- Proration parts always sum exactly to the total
"""

from datetime import date, timedelta
from decimal import Decimal

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from schedule_engines.proration import ProrationEngine
from schedule_kernel.domain import calendar_dates as cal
from schedule_kernel.domain import date_specification as ds
from schedule_kernel.domain.calendar_dates import DayOfWeek
from schedule_kernel.domain.interval import Interval
from schedule_kernel.domain.interval_map import IntervalMap

limits = st.one_of(st.none(), st.integers(min_value=-20, max_value=20))


@st.composite
def intervals(draw):
    lower = draw(limits)
    upper = draw(limits)
    if lower is not None and upper is not None and lower > upper:
        lower, upper = upper, lower
    return Interval(lower, draw(st.booleans()), upper, draw(st.booleans()))


@st.composite
def bounded_intervals(draw):
    lower = draw(st.integers(min_value=-20, max_value=20))
    upper = draw(st.integers(min_value=lower, max_value=25))
    return Interval(lower, draw(st.booleans()), upper, draw(st.booleans()))


values = st.integers(min_value=-25, max_value=25)


class TestIntervalProperties:
    """Relational operations over random intervals."""

    @given(intervals(), intervals())
    def test_intersects_is_symmetric(self, a, b):
        assert a.intersects(b) == b.intersects(a)

    @given(intervals(), intervals())
    def test_intersection_empty_iff_disjoint(self, a, b):
        assert a.intersection(b).is_empty() == (not a.intersects(b))

    @given(intervals(), values)
    def test_includes_matches_single_element_intersection(self, a, v):
        assume(not a.is_empty())
        assert a.includes(v) == (not a.intersection(Interval.single_element(v)).is_empty())

    @given(intervals(), intervals(), values)
    def test_intersection_includes_exactly_common_values(self, a, b, v):
        assert a.intersection(b).includes(v) == (a.includes(v) and b.includes(v))

    @given(intervals(), intervals(), values)
    def test_complement_covers_the_rest(self, a, b, v):
        pieces = a.complement_relative_to(b)
        in_pieces = any(piece.includes(v) for piece in pieces)
        assert in_pieces == (b.includes(v) and not a.includes(v))

    @given(intervals(), intervals())
    def test_gap_is_disjoint_from_both(self, a, b):
        gap = a.gap(b)
        assert not gap.intersects(a)
        assert not gap.intersects(b)

    @given(intervals(), intervals(), values)
    def test_hull_covers_both(self, a, b, v):
        hull = a.hull(b)
        if a.includes(v) or b.includes(v):
            assert hull.includes(v)

    @given(intervals(), intervals())
    def test_compare_is_antisymmetric(self, a, b):
        assert a.compare(b) == -b.compare(a) or (a.compare(b) == 0 == b.compare(a))


class TestIntervalMapProperties:
    """Last write wins over random insertion sequences."""

    @given(st.lists(st.tuples(bounded_intervals(), st.integers()), max_size=12), values)
    @settings(max_examples=200)
    def test_matches_brute_force_last_writer(self, puts, key):
        table: IntervalMap[int, int] = IntervalMap()
        for interval, value in puts:
            table.put(interval, value)

        expected = None
        for interval, value in puts:
            if interval.includes(key):
                expected = value
        assert table.get(key) == expected

    @given(st.lists(st.tuples(bounded_intervals(), st.integers()), max_size=12))
    def test_bindings_disjoint_and_sorted(self, puts):
        table: IntervalMap[int, int] = IntervalMap()
        for interval, value in puts:
            table.put(interval, value)

        keys = table.intervals()
        for first, second in zip(keys, keys[1:]):
            assert first.upper_limit <= second.lower_limit
        for i, first in enumerate(keys):
            assert not first.is_empty()
            for second in keys[i + 1 :]:
                assert not first.intersects(second)


weekdays = st.sampled_from(list(DayOfWeek))
leaf_specifications = st.one_of(
    st.builds(ds.annual_date, st.integers(1, 12), st.integers(1, 28)),
    st.builds(ds.monthly_day, st.integers(1, 31)),
    st.builds(ds.monthly_nth_weekday, weekdays, st.integers(1, 5)),
    st.builds(ds.nth_weekday_of_month, st.integers(1, 12), weekdays, st.integers(1, 5)),
    st.builds(lambda days: ds.day_of_week(*days), st.sets(weekdays, min_size=1)),
    st.builds(
        ds.fixed,
        st.dates(min_value=date(2004, 1, 1), max_value=date(2006, 12, 31)),
    ),
)
specifications = st.recursive(
    leaf_specifications,
    lambda children: st.one_of(
        st.builds(ds.and_, children, children),
        st.builds(ds.or_, children, children),
        st.builds(ds.not_, children),
    ),
    max_leaves=4,
)


class TestSpecificationProperties:
    """Enumeration agrees with evaluation."""

    @given(
        specifications,
        st.dates(min_value=date(2004, 1, 1), max_value=date(2006, 6, 30)),
        st.integers(min_value=0, max_value=120),
    )
    @settings(max_examples=100, deadline=None)
    def test_iteration_matches_day_filter(self, spec, start, length):
        interval = cal.inclusive(start, start + timedelta(days=length))
        brute_force = [d for d in cal.days_in(interval) if spec.is_satisfied_by(d)]
        occurrences = ds.iterate_over(spec, interval)

        assert list(occurrences) == brute_force
        assert occurrences.first() == (brute_force[0] if brute_force else None)
        assert ds.last_occurrence_in(spec, interval) == (
            brute_force[-1] if brute_force else None
        )

    @given(specifications, st.dates(min_value=date(2004, 1, 1), max_value=date(2006, 12, 31)))
    def test_and_is_idempotent(self, spec, day):
        assert ds.and_(spec, spec).is_satisfied_by(day) == spec.is_satisfied_by(day)

    @given(specifications, st.dates(min_value=date(2004, 1, 1), max_value=date(2006, 12, 31)))
    def test_negation_flips(self, spec, day):
        assert ds.not_(spec).is_satisfied_by(day) != spec.is_satisfied_by(day)


class TestProrationProperties:
    """Exact-sum division."""

    @given(
        st.integers(min_value=-(10**9), max_value=10**9),
        st.integers(min_value=0, max_value=4),
        st.integers(min_value=1, max_value=60),
    )
    def test_even_division_sums_exactly(self, units, scale, parts):
        total = Decimal(units).scaleb(-scale)
        result = ProrationEngine().divided_evenly_into_parts(total, parts, scale=scale)
        assert sum(result, Decimal("0")) == total
        assert max(result) - min(result) <= result.smallest_unit

    @given(
        st.integers(min_value=0, max_value=10**7),
        st.lists(st.integers(min_value=0, max_value=1000), min_size=1, max_size=12),
    )
    def test_proportional_division_sums_exactly(self, units, weights):
        assume(sum(weights) > 0)
        total = Decimal(units).scaleb(-2)
        result = ProrationEngine().prorated_over(total, weights, scale=2)
        assert sum(result, Decimal("0")) == total
        assert all(part >= 0 for part in result)
