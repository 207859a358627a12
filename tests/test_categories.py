from __future__ import annotations

import pandas as pd
import pytest

from survey.categories import distribution, exclude_categories, non_blank_count, segment_label, top_categories
from survey.charts import build_chart_series, category_bar_chart, to_vega_spec


def _frame(values):
    return pd.DataFrame({"Q9_cat": values})


def test_blank_values_are_excluded():
    frame = _frame(["Pay", "", "Pay", "Culture", "  "])
    dist = distribution(frame, "Q9_cat")
    assert dist == [("Pay", 2), ("Culture", 1)]
    assert sum(count for _, count in dist) == non_blank_count(frame, "Q9_cat") == 3


def test_ties_keep_first_seen_order():
    dist = distribution(_frame(["Safety", "Pay", "Pay", "Safety", "Culture", " Pay "]), "Q9_cat")
    assert dist == [("Pay", 3), ("Safety", 2), ("Culture", 1)]
    dist = distribution(_frame(["B", "A", "A", "B", "C"]), "Q9_cat")
    assert dist == [("B", 2), ("A", 2), ("C", 1)]


def test_counts_are_case_sensitive():
    assert distribution(_frame(["pay", "Pay"]), "Q9_cat") == [("pay", 1), ("Pay", 1)]


def test_missing_column_and_empty_frame():
    assert distribution(_frame(["Pay"]), "Q10_cat") == []
    assert distribution(pd.DataFrame(), "Q9_cat") == []


def test_top_and_exclude():
    dist = [("Pay", 5), ("Culture", 3), ("No Response", 2), ("Safety", 1)]
    assert top_categories(dist, 2) == [("Pay", 5), ("Culture", 3)]
    assert exclude_categories(dist, ["No Response"]) == [("Pay", 5), ("Culture", 3), ("Safety", 1)]


@pytest.mark.parametrize(
    "label, lines",
    [
        ("Pay", ["Pay"]),
        ("Physical Environment", ["Physical", "Environment"]),
        ("Work-Life Balance", ["Work-Life", "Balance"]),
        ("Training & Development", ["Training &", "Development"]),
        ("Pay and Benefits", ["Pay and", "Benefits"]),
        ("Shop - Cleanliness", ["Shop -", "Cleanliness"]),
        ("Lack of Recognition", ["Lack of", "Recognition"]),
        ("Management Communication Style", ["Management", "Communication Style"]),
        ("Supervisor support", ["Supervisor support"]),
        ("Pay and Benefits and Bonus", ["Pay and Benefits", "and Bonus"]),
    ],
)
def test_segment_label(label, lines):
    assert segment_label(label) == lines


def test_chart_series_aligns_labels_and_percentages():
    datasets = [
        {"label": "All Responses", "color": "#ABDBF0", "distribution": [("Pay", 3), ("Culture", 1)]},
        {"label": "Filtered Results", "color": "#4A90E2", "distribution": [("Safety", 1), ("Pay", 1)]},
    ]
    series = build_chart_series(datasets)
    assert series["labels"] == ["Pay", "Culture", "Safety"]
    assert series["series"][0]["counts"] == [3, 1, 0]
    assert series["series"][0]["percentages"] == [75.0, 25.0, 0.0]
    assert series["series"][1]["counts"] == [1, 0, 1]
    assert series["series"][1]["total"] == 2
    assert series["label_lines"][0] == ["Pay"]


def test_chart_spec_is_vega_lite_dict():
    series = build_chart_series([{"label": "All Responses", "color": "#ABDBF0", "distribution": [("Pay", 2)]}])
    spec = to_vega_spec(category_bar_chart(series))
    assert spec["mark"]["type"] == "bar"
    assert category_bar_chart(build_chart_series([])) is None
