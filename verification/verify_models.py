import json

import pytest

from widget_site.errors import SiteConfigError
from widget_site.models import (
    AggregationTable,
    Dropdown,
    TableRow,
    default_site,
    format_number,
    load_site,
    site_from_dict,
)


def test_dropdown_starts_closed():
    dropdown = Dropdown("select1", ["Option 1", "Option 2"])
    assert not dropdown.open
    assert dropdown.selected is None
    assert dropdown.label == "Select..."


def test_dropdown_toggle_and_select():
    dropdown = Dropdown("select1", ["Option 1", "Option 2"])
    assert dropdown.toggle()
    assert dropdown.is_visible()
    assert dropdown.select_option("Option 2")
    assert dropdown.selected == "Option 2"
    assert not dropdown.open
    assert dropdown.label == "Option 2"
    assert dropdown.toggle()
    assert not dropdown.toggle()


def test_dropdown_ignores_selection_while_closed():
    dropdown = Dropdown("select1", ["Option 1"])
    assert not dropdown.select_option("Option 1")
    assert dropdown.selected is None


def test_dropdown_rejects_unknown_option():
    dropdown = Dropdown("select1", ["Option 1"])
    dropdown.toggle()
    with pytest.raises(ValueError):
        dropdown.select_option("Option 9")
    assert dropdown.open


def test_dropdowns_are_independent():
    site = default_site()
    site.dropdown("select1").toggle()
    assert [d.id for d in site.visible_dropdowns()] == ["select1"]
    site.dropdown("select1").select_option("Option 2")
    site.dropdown("select2").toggle()
    assert [d.id for d in site.visible_dropdowns()] == ["select2"]
    assert site.dropdown("select2").selected is None


@pytest.mark.parametrize("value, text", [(15.04, "15.04"), (14.0, "14"), (0, "0"), (-0.0, "0"), (7.5, "7.5")])
def test_format_number(value, text):
    assert format_number(value) == text


def test_default_rows_hit_regression_points():
    table = default_site().table
    assert table.row("Alvin").sum > 0
    assert table.row("Alvin").reset() == 0
    assert table.nth(1).name == "Alan"
    table.nth(1).add()
    assert table.row("Alan").display_sum == "15.04"
    table.nth(2).set_value(2)
    assert table.sum_of("Jonathan") == 14
    assert table.row("Jonathan").display_sum == "14"


def test_set_value_accumulates_deltas():
    row = TableRow("Jonathan", 10, 22, 4)
    row.set_value(2)
    row.set_value(5)
    assert row.sum == 17
    assert row.value == 5
    row.set_value(5)
    assert row.sum == 17


def test_reset_is_idempotent_and_restores_baseline():
    row = TableRow("Alvin", 3, 7.5, 1.25)
    row.set_value(8)
    assert row.reset() == 0
    assert row.reset() == 0
    assert row.value == 3
    row.add()
    assert row.display_sum == "1.25"


def test_table_addressing():
    table = default_site().table
    assert len(table) == 4
    assert [r.name for r in table] == ["Alvin", "Alan", "Jonathan", "Margaret"]
    assert table.index_of("Jonathan") == 2
    with pytest.raises(KeyError):
        table.row("Nobody")


def test_table_rejects_overlapping_names():
    with pytest.raises(ValueError):
        AggregationTable([TableRow("Al", 0, 0, 1), TableRow("Alan", 0, 0, 1)])
    with pytest.raises(ValueError):
        AggregationTable([TableRow("Alan", 0, 0, 1), TableRow("Alan", 0, 0, 1)])


def test_site_from_dict():
    site = site_from_dict({
        "title": "custom",
        "dropdowns": [{"id": "colors", "options": ["Red", "Blue"], "placeholder": "Pick"}],
        "rows": [{"name": "Ann", "value": 1, "sum": 2, "step": 0.1}],
    })
    assert site.title == "custom"
    assert site.dropdown("colors").label == "Pick"
    row = site.table.row("Ann")
    row.add()
    assert row.display_sum == "2.1"


def test_site_from_dict_rejects_bad_data():
    with pytest.raises(SiteConfigError):
        site_from_dict({"dropdowns": []})
    with pytest.raises(SiteConfigError):
        site_from_dict({"dropdowns": [{"id": "a", "options": []}], "rows": []})
    with pytest.raises(SiteConfigError):
        site_from_dict({"dropdowns": [], "rows": [{"name": "x", "step": "lots"}]})


def test_load_site(tmp_path):
    path = tmp_path / "site.json"
    path.write_text(json.dumps({
        "dropdowns": [{"id": "select1", "options": ["A"]}],
        "rows": [{"name": "Zed", "value": 2, "sum": 4, "step": 1}],
    }))
    site = load_site(path)
    assert site.table.sum_of("Zed") == 4

    broken = tmp_path / "broken.json"
    broken.write_text("{")
    with pytest.raises(SiteConfigError):
        load_site(broken)
    with pytest.raises(SiteConfigError):
        load_site(tmp_path / "missing.json")


def test_half_cent_sums_round_up():
    row = TableRow("Ann", 0, 0, 0.125)
    row.add()
    assert row.display_sum == "0.13"
    assert format_number(0.125) == "0.13"
    assert format_number(1.005 + 0.000001) == "1.01"


@pytest.mark.parametrize("name", ["Res", "set", "RESET", "Sum", "val"])
def test_table_rejects_names_inside_row_labels(name):
    with pytest.raises(ValueError):
        AggregationTable([TableRow(name, 0, 0, 1), TableRow("Bob", 0, 0, 1)])


@pytest.mark.parametrize("name", ["1", "2.5", "+2", " 3 "])
def test_table_rejects_numeric_names(name):
    with pytest.raises(ValueError):
        AggregationTable([TableRow(name, 0, 0, 1), TableRow("Bob", 0, 0, 2.5)])


def test_site_from_dict_rejects_name_matching_every_row():
    with pytest.raises(SiteConfigError):
        site_from_dict({"dropdowns": [], "rows": [{"name": "Res"}, {"name": "Bob"}]})
