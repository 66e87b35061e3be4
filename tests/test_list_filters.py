from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

APP_ROOT = Path(__file__).resolve().parents[1] / "app"
if str(APP_ROOT) not in sys.path:
    sys.path.insert(0, str(APP_ROOT))

from practice_desk.lists import MATTER_LIST, FilterState, ListConfig, apply_filters, date_window  # noqa: E402


def _ids(records) -> list[int]:
    return [record["matterId"] for record in records]


def test_default_state_returns_every_record_unchanged(matter_records) -> None:
    result = apply_filters(matter_records, FilterState(), MATTER_LIST)

    assert result == matter_records
    assert result[0] is matter_records[0]


def test_query_matches_case_insensitively_across_search_fields(matter_records) -> None:
    result = apply_filters(matter_records, FilterState(query="Acme"), MATTER_LIST)

    assert _ids(result) == [1, 2]


def test_query_is_trimmed_before_matching(matter_records) -> None:
    padded = apply_filters(matter_records, FilterState(query="acme "), MATTER_LIST)
    upper = apply_filters(matter_records, FilterState(query="  ACME"), MATTER_LIST)

    assert _ids(padded) == [1, 2]
    assert _ids(upper) == [1, 2]


def test_query_matches_codes_and_numeric_ids(matter_records) -> None:
    assert _ids(apply_filters(matter_records, FilterState(query="0086-0014"), MATTER_LIST)) == [1]
    assert _ids(apply_filters(matter_records, FilterState(query="patent"), MATTER_LIST)) == [3]


def test_query_with_no_match_returns_empty(matter_records) -> None:
    assert apply_filters(matter_records, FilterState(query="initech"), MATTER_LIST) == []


def test_category_filter_uses_selected_set(matter_records) -> None:
    active = FilterState().with_categories("status", ["Active"])
    either = FilterState().with_categories("status", ["Active", "Closed"])

    assert _ids(apply_filters(matter_records, active, MATTER_LIST)) == [1, 3]
    assert _ids(apply_filters(matter_records, either, MATTER_LIST)) == [1, 2, 3]


def test_all_option_and_empty_selection_match_everything(matter_records) -> None:
    all_option = FilterState().with_categories("status", "All")
    empty = FilterState().with_categories("status", [])

    assert apply_filters(matter_records, all_option, MATTER_LIST) == matter_records
    assert apply_filters(matter_records, empty, MATTER_LIST) == matter_records


def test_predicates_combine_with_and(matter_records) -> None:
    state = (
        FilterState(query="a")
        .with_categories("status", ["Active"])
        .with_categories("practiceArea", ["Corporate"])
    )

    assert _ids(apply_filters(matter_records, state, MATTER_LIST)) == [1]


def test_this_week_starts_on_sunday(matter_records) -> None:
    state = FilterState().with_date_preset("This Week")
    wednesday = date(2025, 1, 8)

    window = date_window(state, today=wednesday)

    assert window is not None
    assert window[0].date() == date(2025, 1, 5)
    assert window[1].date() == date(2025, 1, 11)
    assert _ids(apply_filters(matter_records, state, MATTER_LIST, today=wednesday)) == [1]


def test_today_and_this_month_presets(matter_records) -> None:
    today = FilterState().with_date_preset("Today")
    month = FilterState().with_date_preset("This Month")

    assert _ids(apply_filters(matter_records, today, MATTER_LIST, today=date(2025, 1, 15))) == [2]
    assert _ids(apply_filters(matter_records, month, MATTER_LIST, today=date(2025, 1, 20))) == [1, 2]


def test_unknown_preset_falls_back_to_all_time(matter_records) -> None:
    state = FilterState().with_date_preset("Last Decade")

    assert state.date_preset == "All Time"
    assert apply_filters(matter_records, state, MATTER_LIST) == matter_records


def test_explicit_bounds_are_inclusive(matter_records) -> None:
    december = FilterState().with_date_range(date(2024, 12, 1), date(2024, 12, 30))
    from_tenth = FilterState().with_date_range(date(2025, 1, 10), None)

    assert _ids(apply_filters(matter_records, december, MATTER_LIST)) == [3]
    assert _ids(apply_filters(matter_records, from_tenth, MATTER_LIST)) == [2]


def test_unparseable_dates_never_match_an_active_window(matter_records) -> None:
    state = FilterState().with_date_range(date(2000, 1, 1), date(2100, 1, 1))

    assert 4 not in _ids(apply_filters(matter_records, state, MATTER_LIST))


def test_filtering_is_idempotent(matter_records) -> None:
    states = [
        FilterState(query="acme"),
        FilterState().with_categories("practiceArea", ["Corporate"]),
        FilterState().with_date_range(date(2025, 1, 1), date(2025, 1, 31)),
        FilterState(query="o").with_categories("status", ["Active", "On Hold"]),
    ]
    for state in states:
        once = apply_filters(matter_records, state, MATTER_LIST)
        twice = apply_filters(once, state, MATTER_LIST)
        assert twice == once


def test_empty_collection_is_returned_as_empty_list() -> None:
    assert apply_filters([], FilterState(query="acme"), MATTER_LIST) == []


def test_numeric_category_still_matches_when_some_records_lack_the_field() -> None:
    config = ListConfig(id_field="id", search_fields=("id",), category_fields=("priority",))
    records = [{"id": 1, "priority": 1}, {"id": 2}, {"id": 3, "priority": 2}]

    first = apply_filters(records, FilterState().with_categories("priority", ["1"]), config)
    either = apply_filters(records, FilterState().with_categories("priority", ["1", "2"]), config)

    assert first == [records[0]]
    assert either == [records[0], records[2]]
