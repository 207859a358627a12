from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional

from survey.aggregation import display_average
from survey.coloring import classify_baseline, classify_peer, css_class
from survey.comparison import ComparisonResult
from survey.config import ALL_RESPONSES_LABEL, DEFAULT_CONFIG, FILTERED_LABEL, SurveyConfig
from survey.filters import FilterSpec

BASELINE_SUBTITLE = "Conditional formatting of filtered results relative to company baseline."
COMPARISON_SUBTITLE = "Green indicates highest value, red indicates lowest value per column."


def _row(
    label: str,
    averages: Mapping[str, float],
    groups: List[str],
    record_count: int,
    classifications: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    classifications = classifications or {}
    return {
        "row_label": label,
        "record_count": record_count,
        "averages": {g: display_average(averages.get(g, 0.0)) for g in groups},
        "classifications": {g: classifications.get(g) for g in groups},
        "color_classes": {g: css_class(classifications.get(g)) for g in groups},
    }


def compute_grouped_averages(spec: FilterSpec, ctx: Dict[str, Any]) -> Dict[str, Any]:
    config: SurveyConfig = ctx.get("config", DEFAULT_CONFIG)
    result: ComparisonResult = ctx["comparison"]
    groups = list(config.question_groups.keys())
    payload: Dict[str, Any] = {
        "filters": asdict(spec),
        "mode": result.mode,
        "groups": groups,
        "subtitle": BASELINE_SUBTITLE if result.mode == "baseline" else COMPARISON_SUBTITLE,
        "rows": [],
        "empty_state": None,
    }

    if result.mode == "baseline":
        reference: Dict[str, float] = ctx.get("baseline") or result.all_averages
        rows = [_row(ALL_RESPONSES_LABEL, reference, groups, int(len(result.all_records)))]
        filtered = result.filtered_records
        if filtered is not None and not filtered.empty:
            averages = result.filtered_averages or {}
            classes = {g: classify_baseline(averages.get(g, 0.0), reference.get(g, 0.0)) for g in groups}
            rows.append(_row(FILTERED_LABEL, averages, groups, int(len(filtered)), classes))
        payload["rows"] = rows
        return payload

    if result.is_empty:
        noun = "roles" if result.mode == "roles" else "locations"
        payload["empty_state"] = f"Select {noun} to see comparison data"
        return payload

    shown = [s for s in result.subsets if not s.records.empty]
    rows = []
    for subset in shown:
        classes = {}
        for g in groups:
            peers = [s.averages.get(g, 0.0) for s in shown]
            classes[g] = classify_peer(subset.averages.get(g, 0.0), peers)
        rows.append(_row(subset.item.display_name, subset.averages, groups, subset.item.record_count, classes))
    payload["rows"] = rows
    return payload
