import altair as alt
import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import Dict, List, Optional

from survey.comparison import BaselineReference
from survey.config import DEFAULT_CONFIG, DimensionOption
from survey.dashboard import recompute_all
from survey.records import (
    available_locations_for_roles,
    available_roles_for_locations,
    build_lookup_tables,
    load_record_store,
)

alt.data_transformers.disable_max_rows()

MODE_LABELS = {"Baseline": "baseline", "Compare roles": "roles", "Compare locations": "location"}
SCORE_COLORS = {"score-green": "#15803d", "score-red": "#b91c1c", "score-neutral": "#111827"}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .kpi-value {font-size: 1.8rem;font-weight: 700;}
        .kpi-label {color: #6b7280;font-size: 0.85rem;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def kpi_tile(col, value: object, label: str, color_class: Optional[str] = None):
    color = SCORE_COLORS.get(color_class or "score-neutral", SCORE_COLORS["score-neutral"])
    shown = "N/A" if value is None else value
    col.markdown(
        f"<div class='kpi-value' style='color:{color}'>{shown}</div><div class='kpi-label'>{label}</div>",
        unsafe_allow_html=True,
    )


def option_select(label: str, options: tuple, allowed: List[str], key: str) -> List[str]:
    allowed_set = set(allowed)
    by_csv: Dict[str, DimensionOption] = {o.csv_value: o for o in options if o.csv_value in allowed_set}
    picked = st.multiselect(label, options=list(by_csv), format_func=lambda v: by_csv[v].text, key=key)
    return list(picked)


# ---------- UI setup ----------
st.set_page_config(page_title="Shop Survey Dashboard", layout="wide")
inject_base_styles()
st.title("Shop Survey Dashboard")
st.caption("Survey results by role and location, with baseline and side-by-side comparisons.")

store = load_record_store()
if store.is_empty:
    st.error("No survey data found. Place the survey CSV at Data/survey.csv or set SURVEY_DATA_PATH.")
    st.stop()

# The baseline reference is captured once per loaded dataset.
if st.session_state.get("_baseline_source") is not store:
    st.session_state["_baseline_source"] = store
    st.session_state["baseline_reference"] = BaselineReference()
baseline: BaselineReference = st.session_state["baseline_reference"]
lookup = build_lookup_tables(store, DEFAULT_CONFIG)

# ----- Sidebar: mode + filters -----
with st.sidebar:
    st.markdown("### Comparison mode")
    mode_label = st.radio("Mode", list(MODE_LABELS), index=0)
    mode = MODE_LABELS[mode_label]

    filters = {"mode": mode, "role_mode": "all", "location_mode": "all", "selected_roles": [], "selected_locations": []}
    st.markdown("---")
    if mode == "baseline":
        st.markdown("### Filters")
        role_mode = st.radio("Roles", ["all", "compare"], horizontal=True, format_func=str.title, key="role_mode")
        location_mode = st.radio("Locations", ["all", "compare"], horizontal=True, format_func=str.title, key="location_mode")
        selected_roles: List[str] = []
        selected_locations: List[str] = []
        if role_mode == "compare":
            prior_locations = st.session_state.get("location_filter", []) if location_mode == "compare" else []
            allowed_roles = available_roles_for_locations(lookup, prior_locations, DEFAULT_CONFIG)
            selected_roles = option_select("Select roles", DEFAULT_CONFIG.role_options, allowed_roles, "role_filter")
        if location_mode == "compare":
            allowed_locations = available_locations_for_roles(lookup, selected_roles, DEFAULT_CONFIG)
            selected_locations = option_select("Select locations", DEFAULT_CONFIG.location_options, allowed_locations, "location_filter")
        filters.update(
            role_mode=role_mode,
            location_mode=location_mode,
            selected_roles=selected_roles,
            selected_locations=selected_locations,
        )
    elif mode == "roles":
        all_roles = [o.csv_value for o in DEFAULT_CONFIG.role_options]
        filters["selected_roles"] = option_select("Roles to compare", DEFAULT_CONFIG.role_options, all_roles, "roles_compare")
    else:
        all_locations = [o.csv_value for o in DEFAULT_CONFIG.location_options]
        filters["selected_locations"] = option_select(
            "Locations to compare", DEFAULT_CONFIG.location_options, all_locations, "locations_compare"
        )

payload = recompute_all(filters, store, baseline, DEFAULT_CONFIG)

if payload["truncated_count"]:
    st.warning(f"Only the first {DEFAULT_CONFIG.max_comparison_items} selections are compared.")


# ----- Page sections -----
def render_kpis(kpi_payload: Dict):
    if kpi_payload["comparison"] is not None:
        comparison = kpi_payload["comparison"]
        with card(comparison["title"]):
            if not comparison["items"]:
                st.info(comparison["empty_state"])
                return
            cols = st.columns(len(comparison["items"]))
            for col, item in zip(cols, comparison["items"]):
                col.markdown(f"**{item['display_name']}**")
                kpi_tile(col, item["record_count"], "Responses")
                kpi_tile(col, item["average"], "Average Score", item["color_class"])
        return

    k = kpi_payload["kpis"]
    with card("Key metrics"):
        if not k["has_active_filter"]:
            cols = st.columns(2)
            kpi_tile(cols[0], k["total_count"], "Responses")
            kpi_tile(cols[1], k["average_all"], "Average Overall Score")
            return
        cols = st.columns(4)
        kpi_tile(cols[0], k["total_count"], "Total responses")
        kpi_tile(cols[1], k["average_all"], "Average Overall Score (total)")
        kpi_tile(cols[2], k["filtered_count"], f"Filtered responses ({k['filtered_percent_display']:.0f}% of total)")
        kpi_tile(cols[3], k["average_filtered"], "Average Overall Score (filtered)", k["average_filtered_color_class"])
    if kpi_payload["status_text"]:
        st.caption(kpi_payload["status_text"])


def render_grouped_averages(grouped: Dict):
    with card("Component averages"):
        st.caption(grouped["subtitle"])
        if grouped["empty_state"]:
            st.info(grouped["empty_state"])
            return
        rows = grouped["rows"]
        table = pd.DataFrame([{"Dataset": r["row_label"], **r["averages"]} for r in rows]).set_index("Dataset")
        colors = pd.DataFrame([r["color_classes"] for r in rows], index=table.index)

        def _style(_):
            return colors.apply(lambda col: col.map(lambda c: f"color: {SCORE_COLORS[c]}; font-weight: 600" if c else ""))

        st.dataframe(table.style.format("{:.1f}").apply(_style, axis=None), use_container_width=True)


def render_category_charts(categories: Dict[str, Dict]):
    for cat in categories.values():
        with card(cat["question"]):
            if cat["empty_state"]:
                st.info(cat["empty_state"])
                continue
            spec = cat["charts"]["bar"]
            if spec is None:
                st.info("No responses for this question.")
                continue
            st.vega_lite_chart(spec, use_container_width=True)


render_kpis(payload["kpis"])
render_grouped_averages(payload["grouped_averages"])
render_category_charts(payload["categories"])
st.caption(f"{len(store)} responses loaded from {store.source or 'survey data'}.")
