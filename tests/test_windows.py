from datetime import date, timedelta

import pytest

from core.windows import DateWindow, parse_date, split_into_windows
from exceptions.api_exceptions import ValidationError


def test_single_day_range_gives_one_window():
    windows = split_into_windows(date(2024, 3, 10), date(2024, 3, 10))
    assert windows == [DateWindow(date(2024, 3, 10), date(2024, 3, 10))]


def test_range_within_limit_is_not_split():
    windows = split_into_windows(date(2024, 1, 1), date(2024, 12, 30))
    assert len(windows) == 1
    assert windows[0].days == 365


def test_range_past_one_year_splits_in_two():
    windows = split_into_windows(date(2024, 1, 1), date(2025, 6, 15))

    assert windows == [
        DateWindow(date(2024, 1, 1), date(2024, 12, 30)),
        DateWindow(date(2024, 12, 31), date(2025, 6, 15)),
    ]


def test_one_month_range_gives_one_window():
    windows = split_into_windows(date(2025, 1, 1), date(2025, 1, 31))
    assert windows == [DateWindow(date(2025, 1, 1), date(2025, 1, 31))]


def test_two_year_range_covers_every_day_without_overlap():
    start, end = date(2023, 1, 1), date(2024, 12, 31)
    windows = split_into_windows(start, end)

    assert len(windows) == 3
    assert windows[0].start == start
    assert windows[-1].end == end
    for previous, current in zip(windows, windows[1:]):
        assert current.start == previous.end + timedelta(days=1)
    for w in windows:
        assert (w.end - w.start).days <= 364
    assert sum(w.days for w in windows) == (end - start).days + 1


def test_exact_multiple_of_span():
    start = date(2024, 1, 1)
    windows = split_into_windows(start, start + timedelta(days=9), max_span_days=5)
    assert [(w.start.day, w.end.day) for w in windows] == [(1, 5), (6, 10)]


def test_reversed_range_is_swapped():
    windows = split_into_windows(date(2024, 2, 1), date(2024, 1, 1))
    assert windows[0].start == date(2024, 1, 1)
    assert windows[-1].end == date(2024, 2, 1)


def test_invalid_span_raises():
    with pytest.raises(ValidationError):
        split_into_windows(date(2024, 1, 1), date(2024, 1, 2), max_span_days=0)


def test_window_formats_for_upstream():
    w = DateWindow(date(2024, 1, 5), date(2024, 2, 1))
    assert w.ini == '20240105'
    assert w.fim == '20240201'
    assert str(w) == '20240105-20240201'


@pytest.mark.parametrize('value', ['2024-05-01', '20240501', date(2024, 5, 1)])
def test_parse_date_accepts_known_formats(value):
    assert parse_date(value) == date(2024, 5, 1)


@pytest.mark.parametrize('value', ['', '01/05/2024', '2024-13-01', None])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(ValidationError) as exc:
        parse_date(value, 'dataIni')
    assert exc.value.details == {'field': 'dataIni'}
