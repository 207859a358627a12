from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Sequence

from survey.aggregation import average_response, display_average, round_half_up
from survey.coloring import classify_baseline, classify_peer, css_class
from survey.comparison import ComparisonResult
from survey.config import DEFAULT_CONFIG, SurveyConfig
from survey.filters import FilterSpec


def format_list(items: Sequence[str]) -> str:
    if not items:
        return ""
    if len(items) == 1:
        return items[0]
    if len(items) == 2:
        return " and ".join(items)
    return ", ".join(items[:-1]) + ", and " + items[-1]


def filter_status_text(spec: FilterSpec, config: SurveyConfig = DEFAULT_CONFIG) -> str:
    """Human-readable summary of the active baseline filters ("" when none)."""
    roles = [config.role_display_name(v) for v in spec.selected_roles] if spec.role_filter_active else []
    locations = [config.location_display_name(v) for v in spec.selected_locations] if spec.location_filter_active else []
    if not roles and not locations:
        return ""

    location_word = "location" if len(locations) == 1 else "locations"
    if roles and locations:
        return f"Filtered to show {format_list(roles)}s in {format_list(locations)} {location_word} only."
    if roles:
        return f"Filtered to show {format_list(roles)} roles only."
    return f"Filtered to show {format_list(locations)} {location_word} only."


def _comparison_cards(result: ComparisonResult, config: SurveyConfig) -> Dict[str, Any]:
    label = "Role" if result.mode == "roles" else "Location"
    if result.is_empty:
        noun = "roles" if result.mode == "roles" else "locations"
        return {"title": f"{label} Comparison", "items": [], "empty_state": f"Select {noun} to see comparison data"}

    peers = [display_average(item.numeric_average) for item in result.items]
    items: List[Dict[str, Any]] = []
    for item in result.items:
        classification = classify_peer(display_average(item.numeric_average), peers)
        items.append(
            {
                "display_name": item.display_name,
                "match_value": item.match_value,
                "record_count": item.record_count,
                "average": display_average(item.numeric_average),
                "reference_average": display_average(item.reference_average),
                "classification": classification,
                "color_class": css_class(classification),
            }
        )
    return {
        "title": f"{label} Comparison",
        "items": items,
        "empty_state": None,
        "truncated_count": result.truncated_count,
    }


def compute_kpi_summary(spec: FilterSpec, ctx: Dict[str, Any]) -> Dict[str, Any]:
    config: SurveyConfig = ctx.get("config", DEFAULT_CONFIG)
    result: ComparisonResult = ctx["comparison"]

    all_df = result.all_records
    total_count = int(len(all_df))
    average_all = average_response(all_df, config)

    has_active_filter = result.filtered_records is not None
    filtered_count = total_count
    filtered_percent = 100.0 if total_count else 0.0
    average_filtered = average_all
    if has_active_filter:
        filtered_df = result.filtered_records
        filtered_count = int(len(filtered_df))
        filtered_percent = (filtered_count / total_count) * 100 if total_count > 0 else 0.0
        average_filtered = average_response(filtered_df, config)

    # Tiles are colored on the values they display.
    classification = (
        classify_baseline(display_average(average_filtered), display_average(average_all)) if has_active_filter else None
    )
    payload: Dict[str, Any] = {
        "filters": asdict(spec),
        "mode": result.mode,
        "kpis": {
            "total_count": total_count,
            "average_all": display_average(average_all),
            "filtered_count": filtered_count,
            "filtered_percent": filtered_percent,
            "filtered_percent_display": round_half_up(filtered_percent, 0),
            "average_filtered": display_average(average_filtered),
            "has_active_filter": has_active_filter,
            "average_filtered_classification": classification,
            "average_filtered_color_class": css_class(classification),
        },
        "status_text": filter_status_text(spec, config),
        "comparison": None,
    }
    if result.mode != "baseline":
        payload["comparison"] = _comparison_cards(result, config)
    return payload
