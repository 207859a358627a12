from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import altair as alt
import pandas as pd

from survey.categories import Distribution, segment_label

alt.data_transformers.disable_max_rows()


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def merged_labels(distributions: Sequence[Distribution]) -> List[str]:
    """Union of labels: first dataset's order, then anything new in first-seen order."""
    labels: List[str] = []
    for dist in distributions:
        for label, _ in dist:
            if label not in labels:
                labels.append(label)
    return labels


def build_chart_series(datasets: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Align several distributions onto one label axis as percent-of-total series.

    Each dataset is ``{"label", "color", "distribution"}``.
    """
    labels = merged_labels([d.get("distribution") or [] for d in datasets])
    series = []
    for d in datasets:
        counts_by_label = dict(d.get("distribution") or [])
        counts = [int(counts_by_label.get(label, 0)) for label in labels]
        total = sum(counts)
        series.append(
            {
                "label": d.get("label"),
                "color": d.get("color"),
                "counts": counts,
                "total": total,
                "percentages": [(c / total) * 100 if total > 0 else 0.0 for c in counts],
            }
        )
    return {"labels": labels, "label_lines": [segment_label(label) for label in labels], "series": series}


def category_bar_chart(chart_series: Dict[str, Any], title: Optional[str] = None) -> Optional[alt.Chart]:
    labels: List[str] = chart_series.get("labels") or []
    series = chart_series.get("series") or []
    if not labels or not series:
        return None

    rows = []
    for s in series:
        for label, count, pct in zip(labels, s["counts"], s["percentages"]):
            rows.append({"category": label, "series": s["label"], "count": count, "percent": pct})
    long_df = pd.DataFrame(rows)

    series_names = [s["label"] for s in series]
    series_colors = [s["color"] for s in series]
    hover = alt.selection_point(name="series_hover", fields=["series"], on="mouseover", empty="all")
    chart = (
        alt.Chart(long_df)
        .mark_bar(stroke="#1c1c1c", strokeWidth=1)
        .encode(
            x=alt.X("category:N", sort=labels, title=None, axis=alt.Axis(labelAngle=0, grid=False)),
            xOffset=alt.XOffset("series:N"),
            y=alt.Y("percent:Q", title="Percent of Total", axis=alt.Axis(gridDash=[4, 4], domain=False, ticks=False)),
            color=alt.Color(
                "series:N",
                scale=alt.Scale(domain=series_names, range=series_colors),
                legend=alt.Legend(title=None, orient="top") if len(series) > 1 else None,
            ),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.5)),
            tooltip=[
                alt.Tooltip("series:N", title="Dataset"),
                alt.Tooltip("category:N", title="Category"),
                alt.Tooltip("count:Q", title="Responses"),
                alt.Tooltip("percent:Q", title="Percent", format=".1f"),
            ],
        )
        .add_params(hover)
        .properties(height=280)
    )
    if title:
        chart = chart.properties(title=title)
    return chart
