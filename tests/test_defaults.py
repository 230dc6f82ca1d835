import json
import os
from datetime import date

import pytest

from household_budget.apportionment import (
    DEFAULT_RATIO_TABLE,
    BudgetApportioner,
    WeekdayRatioTable,
    configured_ratio_table,
    daily_budget,
    load_weekday_ratios,
)
from household_budget.defaults import get_apportionment_config, get_config_value, load_config
from household_budget.errors import InvalidArgumentError
from household_budget.progress import week_buckets, weekly_progress


def test_packaged_ratios_match_default_table():
    assert load_weekday_ratios() == DEFAULT_RATIO_TABLE


def test_packaged_config_sections():
    config = get_apportionment_config()

    assert [bucket['label'] for bucket in config['week_buckets']] == ['1W', '2W', '3W', '4W', '5W']
    assert get_config_value('apportionment', 'month_picker', 'overview', 'months_back') == 6
    assert get_config_value('apportionment', 'month_picker', 'cashflow', 'months_back') == 12


def test_get_config_value_returns_default_for_missing_paths():
    assert get_config_value('apportionment', 'no_such_key', default='fallback') == 'fallback'
    assert get_config_value('no_such_file', 'x', default=3) == 3


def test_load_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config('apportionment', tmp_path)


def test_defaults_dir_can_be_overridden(tmp_path, monkeypatch):
    ratios = {str(day): 10 for day in range(7)}
    (tmp_path / 'apportionment.json').write_text(json.dumps({'weekday_ratios': ratios}), encoding='utf-8')
    monkeypatch.setenv('HOUSEHOLD_BUDGET_DEFAULTS_DIR', str(tmp_path))

    assert load_weekday_ratios() == WeekdayRatioTable((10,) * 7)


def test_config_without_ratios_is_rejected(tmp_path):
    (tmp_path / 'apportionment.json').write_text('{}', encoding='utf-8')

    with pytest.raises(InvalidArgumentError):
        WeekdayRatioTable.from_config(tmp_path)


def _write_apportionment(directory, config):
    (directory / 'apportionment.json').write_text(json.dumps(config), encoding='utf-8')


def test_default_engine_follows_overridden_ratios(tmp_path, monkeypatch):
    _write_apportionment(tmp_path, {
        'weekday_ratios': {str(day): 10 for day in range(7)},
        'week_buckets': [{'label': 'all', 'start': 1, 'end': None}],
    })
    monkeypatch.setenv('HOUSEHOLD_BUDGET_DEFAULTS_DIR', str(tmp_path))

    assert [bucket.label for bucket in week_buckets(2025, 6)] == ['all']
    assert daily_budget(date(2025, 6, 7), 30000) == pytest.approx(1000.0)
    assert weekly_progress(30000, 2025, 6, today=date(2025, 7, 1))['Budget'].tolist() == pytest.approx([30000])


def test_engine_falls_back_to_built_in_ratios(tmp_path, monkeypatch):
    _write_apportionment(tmp_path, {'week_buckets': []})
    monkeypatch.setenv('HOUSEHOLD_BUDGET_DEFAULTS_DIR', str(tmp_path))

    assert configured_ratio_table() == DEFAULT_RATIO_TABLE
    assert configured_ratio_table(tmp_path / 'missing') == DEFAULT_RATIO_TABLE
    assert daily_budget(date(2025, 6, 7), 180000) == pytest.approx(180000 / 4.24 * 0.42)


def test_malformed_configured_ratios_are_rejected(tmp_path, monkeypatch):
    _write_apportionment(tmp_path, {'weekday_ratios': {'0': 10}})
    monkeypatch.setenv('HOUSEHOLD_BUDGET_DEFAULTS_DIR', str(tmp_path))

    with pytest.raises(InvalidArgumentError):
        daily_budget(date(2025, 6, 7), 180000)


def test_injected_table_ignores_configured_ratios(tmp_path, monkeypatch):
    _write_apportionment(tmp_path, {'weekday_ratios': {str(day): 10 for day in range(7)}})
    monkeypatch.setenv('HOUSEHOLD_BUDGET_DEFAULTS_DIR', str(tmp_path))

    engine = BudgetApportioner(DEFAULT_RATIO_TABLE)
    assert engine.daily_budget(date(2025, 6, 7), 180000) == pytest.approx(180000 / 4.24 * 0.42)


def test_config_is_read_once_until_the_file_changes(tmp_path, monkeypatch):
    path = tmp_path / 'apportionment.json'
    _write_apportionment(tmp_path, {'week_buckets': [{'label': 'a', 'start': 1, 'end': None}]})
    opened = []
    real_open = open

    def counting_open(file, *args, **kwargs):
        opened.append(str(file))
        return real_open(file, *args, **kwargs)

    monkeypatch.setattr('builtins.open', counting_open)
    for _ in range(3):
        assert load_config('apportionment', tmp_path)['week_buckets'][0]['label'] == 'a'
    assert opened.count(str(path)) == 1

    _write_apportionment(tmp_path, {'week_buckets': [{'label': 'b', 'start': 1, 'end': None}]})
    os.utime(path, ns=(path.stat().st_atime_ns, path.stat().st_mtime_ns + 1_000_000_000))
    assert load_config('apportionment', tmp_path)['week_buckets'][0]['label'] == 'b'


def test_loaded_config_is_a_copy(tmp_path):
    _write_apportionment(tmp_path, {'week_buckets': [{'label': 'a', 'start': 1, 'end': None}]})

    load_config('apportionment', tmp_path)['week_buckets'].clear()

    assert len(load_config('apportionment', tmp_path)['week_buckets']) == 1
