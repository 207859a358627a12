from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Optional

from survey.categories import distribution, exclude_categories, top_categories
from survey.charts import build_chart_series, category_bar_chart, to_vega_spec
from survey.comparison import ComparisonResult
from survey.config import (
    ALL_RESPONSES_COLOR,
    ALL_RESPONSES_LABEL,
    DEFAULT_CONFIG,
    FILTERED_COLOR,
    FILTERED_LABEL,
    SERIES_COLORS,
    SurveyConfig,
)
from survey.filters import FilterSpec

EMPTY_COMPARISON_TEXT = "Select items to see comparison data"


def _trim(dist, limit: Optional[int], exclude: Optional[Iterable[str]]):
    if exclude:
        dist = exclude_categories(dist, exclude)
    if limit is not None:
        dist = top_categories(dist, limit)
    return dist


def compute_category_distribution(
    column: str,
    spec: FilterSpec,
    ctx: Dict[str, Any],
    *,
    limit: Optional[int] = None,
    exclude: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    config: SurveyConfig = ctx.get("config", DEFAULT_CONFIG)
    result: ComparisonResult = ctx["comparison"]

    datasets: List[Dict[str, Any]] = []
    if result.mode == "baseline":
        datasets.append(
            {
                "label": ALL_RESPONSES_LABEL,
                "color": ALL_RESPONSES_COLOR,
                "distribution": _trim(distribution(result.all_records, column), limit, exclude),
            }
        )
        filtered = result.filtered_records
        if filtered is not None and not filtered.empty:
            datasets.append(
                {
                    "label": FILTERED_LABEL,
                    "color": FILTERED_COLOR,
                    "distribution": _trim(distribution(filtered, column), limit, exclude),
                }
            )
    else:
        for i, subset in enumerate(result.subsets):
            datasets.append(
                {
                    "label": subset.item.display_name,
                    "color": SERIES_COLORS[i % len(SERIES_COLORS)],
                    "distribution": _trim(distribution(subset.records, column), limit, exclude),
                }
            )

    for d in datasets:
        d["total"] = sum(count for _, count in d["distribution"])

    chart_series = build_chart_series(datasets)
    question = config.category_questions.get(column, column)
    chart = category_bar_chart(chart_series)
    return {
        "filters": asdict(spec),
        "mode": result.mode,
        "column": column,
        "question": question,
        "datasets": datasets,
        "chart": chart_series,
        "charts": {"bar": to_vega_spec(chart) if chart is not None else None},
        "empty_state": EMPTY_COMPARISON_TEXT if result.is_empty else None,
    }
