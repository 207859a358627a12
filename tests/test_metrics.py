from __future__ import annotations

import pytest

from survey.comparison import BaselineReference
from survey.dashboard import prepare_context, recompute_all
from survey.filters import FilterSpec
from survey.metrics_categories import compute_category_distribution
from survey.metrics_grouped import compute_grouped_averages
from survey.metrics_kpis import compute_kpi_summary, filter_status_text, format_list
from survey.records import RecordStore

WELDERS = FilterSpec(role_mode="compare", selected_roles=["Welder"])


def test_kpis_without_filters(survey_store):
    spec = FilterSpec()
    kpis = compute_kpi_summary(spec, prepare_context(spec, survey_store))["kpis"]
    assert kpis["total_count"] == 5
    assert kpis["average_all"] == 70.0
    assert kpis["filtered_count"] == 5
    assert kpis["filtered_percent"] == 100.0
    assert kpis["average_filtered"] == 70.0
    assert kpis["has_active_filter"] is False
    assert kpis["average_filtered_color_class"] is None


def test_kpis_with_role_filter(survey_store):
    payload = compute_kpi_summary(WELDERS, prepare_context(WELDERS, survey_store))
    kpis = payload["kpis"]
    assert kpis["filtered_count"] == 2
    assert kpis["filtered_percent"] == pytest.approx(40.0)
    assert kpis["average_filtered"] == 76.7
    assert kpis["average_filtered_classification"] == "above"
    assert kpis["average_filtered_color_class"] == "score-green"
    assert payload["status_text"] == "Filtered to show Welder roles only."
    assert payload["comparison"] is None


def test_kpis_are_idempotent(survey_store):
    ctx = prepare_context(WELDERS, survey_store)
    assert compute_kpi_summary(WELDERS, ctx) == compute_kpi_summary(WELDERS, ctx)
    assert compute_kpi_summary(WELDERS, ctx) == compute_kpi_summary(WELDERS, prepare_context(WELDERS, survey_store))


def test_kpis_on_empty_store():
    spec = FilterSpec(role_mode="compare", selected_roles=["Welder"])
    kpis = compute_kpi_summary(spec, prepare_context(spec, RecordStore()))["kpis"]
    assert kpis["total_count"] == 0
    assert kpis["filtered_percent"] == 0.0
    assert kpis["average_all"] == 0.0


def test_comparison_cards(survey_store):
    spec = FilterSpec(mode="roles", selected_roles=["Welder", "Fitter"])
    cards = compute_kpi_summary(spec, prepare_context(spec, survey_store))["comparison"]
    assert cards["title"] == "Role Comparison"
    assert [c["display_name"] for c in cards["items"]] == ["Welder", "Fitter"]
    assert [c["record_count"] for c in cards["items"]] == [2, 2]
    # Welder (80+90+60)/3 vs Fitter (70+50+100+70)/4
    assert [c["average"] for c in cards["items"]] == [76.7, 72.5]
    assert [c["color_class"] for c in cards["items"]] == ["score-green", "score-red"]


def test_comparison_cards_empty_state(survey_store):
    spec = FilterSpec(mode="location")
    cards = compute_kpi_summary(spec, prepare_context(spec, survey_store))["comparison"]
    assert cards["items"] == []
    assert cards["empty_state"] == "Select locations to see comparison data"


def test_grouped_averages_baseline_rows(survey_store):
    payload = compute_grouped_averages(WELDERS, prepare_context(WELDERS, survey_store))
    rows = payload["rows"]
    assert [r["row_label"] for r in rows] == ["All Responses", "Filtered Results"]
    assert rows[0]["averages"]["Trust"] == 85.0
    assert rows[0]["averages"]["Health"] == 55.0
    assert rows[0]["color_classes"]["Trust"] is None
    assert rows[1]["averages"]["Trust"] == 85.0
    assert rows[1]["classifications"]["Trust"] == "equal"
    assert rows[1]["classifications"]["Health"] == "above"
    assert rows[1]["classifications"]["Value"] == "equal"


def test_grouped_averages_use_frozen_baseline(survey_store):
    baseline = BaselineReference(snapshot={"Trust": 90.0}, initialized=True)
    payload = compute_grouped_averages(WELDERS, prepare_context(WELDERS, survey_store, baseline))
    assert payload["rows"][0]["averages"]["Trust"] == 90.0
    assert payload["rows"][1]["classifications"]["Trust"] == "below"


def test_grouped_averages_filtered_to_nothing(survey_store):
    spec = FilterSpec(role_mode="compare", selected_roles=["Nobody"])
    rows = compute_grouped_averages(spec, prepare_context(spec, survey_store))["rows"]
    assert [r["row_label"] for r in rows] == ["All Responses"]


def test_grouped_averages_peer_coloring(survey_store):
    spec = FilterSpec(mode="roles", selected_roles=["Welder", "Fitter", "Painter"])
    payload = compute_grouped_averages(spec, prepare_context(spec, survey_store))
    rows = payload["rows"]
    assert payload["subtitle"].startswith("Green indicates highest")
    assert [r["row_label"] for r in rows] == ["Welder", "Fitter", "Painter"]
    assert [r["classifications"]["Trust"] for r in rows] == ["max", "max", "min"]
    assert [r["classifications"]["Health"] for r in rows] == ["max", "max", "min"]


def test_grouped_averages_single_item_is_neutral(survey_store):
    spec = FilterSpec(mode="roles", selected_roles=["Painter", "Nobody"])
    rows = compute_grouped_averages(spec, prepare_context(spec, survey_store))["rows"]
    assert [r["row_label"] for r in rows] == ["Painter"]
    assert set(rows[0]["classifications"].values()) == {"neutral"}


def test_category_distribution_baseline(survey_store):
    spec = FilterSpec(role_mode="compare", selected_roles=["Fitter"])
    payload = compute_category_distribution("Q9_cat", spec, prepare_context(spec, survey_store))
    all_ds, filtered_ds = payload["datasets"]
    assert all_ds["label"] == "All Responses"
    assert all_ds["distribution"] == [("Pay", 2), ("Culture", 1), ("Physical Environment", 1)]
    assert all_ds["total"] == 4
    assert filtered_ds["distribution"] == [("Pay", 1), ("Physical Environment", 1)]
    assert payload["chart"]["labels"] == ["Pay", "Culture", "Physical Environment"]
    assert payload["chart"]["label_lines"][2] == ["Physical", "Environment"]
    assert payload["question"].startswith("What do you enjoy most")
    assert payload["charts"]["bar"] is not None


def test_category_distribution_comparison(survey_store):
    spec = FilterSpec(mode="roles", selected_roles=["Welder", "Fitter"])
    payload = compute_category_distribution("Q9_cat", spec, prepare_context(spec, survey_store), limit=1)
    assert [d["label"] for d in payload["datasets"]] == ["Welder", "Fitter"]
    assert [d["color"] for d in payload["datasets"]] == ["#4A90E2", "#50C878"]
    assert payload["datasets"][0]["distribution"] == [("Pay", 1)]


def test_category_distribution_empty_comparison(survey_store):
    spec = FilterSpec(mode="roles")
    payload = compute_category_distribution("Q9_cat", spec, prepare_context(spec, survey_store))
    assert payload["datasets"] == []
    assert payload["charts"]["bar"] is None
    assert payload["empty_state"] == "Select items to see comparison data"


def test_status_text_variants():
    assert filter_status_text(FilterSpec()) == ""
    spec = FilterSpec(role_mode="compare", selected_roles=["Welder", "Fitter"])
    assert filter_status_text(spec) == "Filtered to show Welder and Fitter roles only."
    spec = FilterSpec(location_mode="compare", selected_locations=["Arizona - Chandler Shop"])
    assert filter_status_text(spec) == "Filtered to show Chandler, AZ location only."
    spec = FilterSpec(
        role_mode="compare",
        location_mode="compare",
        selected_roles=["Welder"],
        selected_locations=["Arizona - Chandler Shop", "Pennsylvania - York Shop"],
    )
    assert filter_status_text(spec) == "Filtered to show Welders in Chandler, AZ and York, PA locations only."


def test_format_list():
    assert format_list(["a", "b", "c"]) == "a, b, and c"
    assert format_list([]) == ""


def test_recompute_all_is_repeatable(survey_store):
    baseline = BaselineReference()
    first = recompute_all({"mode": "roles", "selected_roles": ["Welder", "Fitter"]}, survey_store, baseline)
    second = recompute_all({"mode": "roles", "selected_roles": ["Welder", "Fitter"]}, survey_store, baseline)
    assert first == second
    assert set(first["categories"]) == {"Q9_cat", "Q10_cat", "Q12_cat"}
    assert first["truncated_count"] == 0


def test_recompute_all_reports_truncation(survey_store):
    roles = ["Welder", "Fitter", "Painter", "Other", "Programmer", "Supervisor"]
    payload = recompute_all({"mode": "roles", "selected_roles": roles}, survey_store)
    assert payload["truncated_count"] == 1
    assert len(payload["kpis"]["comparison"]["items"]) == 5


def test_kpi_colors_follow_displayed_values():
    store = RecordStore.from_records(
        [{"Role": "Welder", "Q3_num": "76.64"}, {"Role": "Fitter", "Q3_num": "76.56"}]
    )
    spec = FilterSpec(mode="roles", selected_roles=["Welder", "Fitter"])
    cards = compute_kpi_summary(spec, prepare_context(spec, store))["comparison"]["items"]
    assert [c["average"] for c in cards] == [76.6, 76.6]
    assert [c["classification"] for c in cards] == ["max", "max"]

    spec = FilterSpec(role_mode="compare", selected_roles=["Welder"])
    kpis = compute_kpi_summary(spec, prepare_context(spec, store))["kpis"]
    assert kpis["average_all"] == kpis["average_filtered"] == 76.6
    assert kpis["average_filtered_classification"] == "equal"
