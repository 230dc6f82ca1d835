import json
from datetime import date, datetime

import pandas as pd
import pytest

from household_budget.errors import InvalidArgumentError
from household_budget.months import (
    as_date,
    available_months,
    days_in_month,
    month_key,
    month_picker_window,
    parse_month_key,
    previous_month,
    shift_month,
    sunday_weekday,
)


def test_days_in_month_handles_leap_years():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2025, 2) == 28
    assert days_in_month(1900, 2) == 28
    assert days_in_month(2000, 2) == 29
    assert days_in_month(2026, 10) == 31


def test_sunday_weekday_numbering():
    assert sunday_weekday(date(2025, 6, 1)) == 0  # Sunday
    assert sunday_weekday(date(2025, 6, 2)) == 1  # Monday
    assert sunday_weekday(date(2025, 6, 7)) == 6  # Saturday


def test_as_date_normalizes_datetime_types():
    assert as_date(datetime(2026, 10, 19, 12)) == date(2026, 10, 19)
    assert as_date(pd.Timestamp('2026-10-19 08:00')) == date(2026, 10, 19)
    with pytest.raises(InvalidArgumentError):
        as_date(None)


def test_month_keys():
    assert month_key(2026, 3) == '2026-03'
    assert parse_month_key('2026-03') == (2026, 3)
    for bad in ('2026/03', '2026-13', 'march', None):
        with pytest.raises(InvalidArgumentError):
            parse_month_key(bad)


def test_shift_month_across_years():
    assert shift_month(2026, 1, -1) == (2025, 12)
    assert shift_month(2026, 11, 3) == (2027, 2)
    assert shift_month(2026, 10, -12) == (2025, 10)
    assert previous_month(2026, 3) == (2026, 2)


def test_available_months_window():
    months = available_months(date(2026, 10, 19), 6, 3)

    assert len(months) == 10
    assert months[0] == ('2026-04', '2026年4月')
    assert ('2026-10', '2026年10月') in months
    assert months[-1] == ('2027-01', '2027年1月')


def test_available_months_rejects_negative_window():
    with pytest.raises(InvalidArgumentError):
        available_months(date(2026, 10, 19), -1, 3)


def test_available_months_uses_configured_view_windows():
    overview = available_months(date(2026, 10, 19))
    cashflow = available_months(date(2026, 10, 19), view='cashflow')

    assert overview == available_months(date(2026, 10, 19), 6, 3)
    assert len(cashflow) == 16
    assert cashflow[0] == ('2025-10', '2025年10月')
    assert cashflow[-1] == ('2027-01', '2027年1月')
    assert available_months(date(2026, 10, 19), 0, view='cashflow')[0] == ('2026-10', '2026年10月')


def test_month_picker_window_reads_overridden_config(tmp_path, monkeypatch):
    config = {'month_picker': {'overview': {'months_back': 1, 'months_forward': 0}}}
    (tmp_path / 'apportionment.json').write_text(json.dumps(config), encoding='utf-8')
    monkeypatch.setenv('HOUSEHOLD_BUDGET_DEFAULTS_DIR', str(tmp_path))

    assert month_picker_window('overview') == (1, 0)
    assert month_picker_window('cashflow') == (12, 3)
    assert available_months(date(2026, 10, 19)) == [('2026-09', '2026年9月'), ('2026-10', '2026年10月')]


def test_month_picker_window_rejects_unknown_view():
    with pytest.raises(InvalidArgumentError):
        available_months(date(2026, 10, 19), view='yearly')


@pytest.mark.parametrize('year', [0, 10000, 2025.0, '2025'])
def test_days_in_month_rejects_bad_years(year):
    with pytest.raises(InvalidArgumentError):
        days_in_month(year, 1)
