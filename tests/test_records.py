from __future__ import annotations

from survey.records import (
    RecordStore,
    _load_record_store_cached,
    available_locations_for_roles,
    available_roles_for_locations,
    build_lookup_tables,
    column_values,
    load_record_store,
)

CSV_TEXT = (
    "Role,Location,Q3_num,Q9_cat,Q9\n"
    ' Welder ,Arizona - Chandler Shop,80,Pay,"Good pay, fair hours"\n'
    "Fitter,Pennsylvania - York Shop,,Culture,\n"
    "Painter,Arizona - Chandler Shop,70\n"
)


def _write(tmp_path, text=CSV_TEXT):
    path = tmp_path / "survey.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_csv_keeps_raw_trimmed_strings(tmp_path):
    _load_record_store_cached.cache_clear()
    store = load_record_store(str(_write(tmp_path)))
    assert len(store) == 3
    assert store.source == "survey.csv"
    records = store.get_all_records()
    assert records[0]["Role"] == "Welder"
    assert records[0]["Q9"] == "Good pay, fair hours"
    assert records[0]["Q3_num"] == "80"
    assert records[1]["Q3_num"] == ""
    # Short rows are padded with blanks rather than dropped.
    assert records[2]["Q9_cat"] == ""


def test_missing_file_is_an_empty_store(tmp_path):
    store = load_record_store(str(tmp_path / "nope.csv"))
    assert store.is_empty
    assert len(store) == 0
    assert store.get_all_records() == []


def test_header_only_file_is_empty(tmp_path):
    _load_record_store_cached.cache_clear()
    store = load_record_store(str(_write(tmp_path, "Role,Location,Q3_num\n")))
    assert store.is_empty
    assert store.columns == ["Role", "Location", "Q3_num"]


def test_env_var_selects_data_file(tmp_path, monkeypatch):
    _load_record_store_cached.cache_clear()
    monkeypatch.setenv("SURVEY_DATA_PATH", str(_write(tmp_path)))
    assert len(load_record_store()) == 3


def test_from_records_fills_missing_fields():
    store = RecordStore.from_records([{"Role": "Welder", "Q3_num": "80"}, {"Role": "Fitter"}])
    assert store.get_all_records() == [
        {"Role": "Welder", "Q3_num": "80"},
        {"Role": "Fitter", "Q3_num": ""},
    ]
    assert list(column_values(store.frame, "Location")) == ["", ""]


def test_lookup_tables_narrow_options(survey_store):
    lookup = build_lookup_tables(survey_store)
    assert lookup.role_to_locations["Welder"] == ["Arizona - Chandler Shop", "Pennsylvania - York Shop"]
    assert lookup.location_to_roles["Arizona - Chandler Shop"] == ["Welder", "Fitter"]

    assert available_locations_for_roles(lookup, ["Welder", "Painter"]) == ["Pennsylvania - York Shop"]
    assert available_roles_for_locations(lookup, ["Arizona - Chandler Shop"]) == ["Welder", "Fitter"]
    assert available_locations_for_roles(lookup, ["Nobody"]) == []


def test_lookup_with_no_selection_offers_everything(survey_store):
    lookup = build_lookup_tables(survey_store)
    roles = available_roles_for_locations(lookup, [])
    assert "Welder" in roles and "Supervisor" in roles
    assert len(available_locations_for_roles(lookup, [])) == 15


def test_lookup_on_empty_store():
    lookup = build_lookup_tables(RecordStore())
    assert lookup.role_to_locations == {}
    assert available_roles_for_locations(lookup, ["Arizona - Chandler Shop"]) == []
