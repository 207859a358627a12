from __future__ import annotations

import logging
import math
from functools import lru_cache
from typing import List, Optional

import numpy as np
import pandas as pd
from fastapi import FastAPI, Query
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import CategoryQueryModel, DimensionOptionModel, FilterSpecModel, MetaOptionsResponse
from survey.comparison import BaselineReference
from survey.config import DEFAULT_CONFIG
from survey.dashboard import prepare_context, recompute_all
from survey.filters import FilterSpec, normalize_filters
from survey.metrics_categories import compute_category_distribution
from survey.metrics_grouped import compute_grouped_averages
from survey.metrics_kpis import compute_kpi_summary
from survey.records import (
    RecordStore,
    available_locations_for_roles,
    available_roles_for_locations,
    build_lookup_tables,
    load_record_store,
)


app = FastAPI(title="Shop Survey Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=4)
def _baseline_for(store: RecordStore) -> BaselineReference:
    # One frozen reference per loaded dataset; a reload yields a new store.
    return BaselineReference()


def _spec_from_model(model: FilterSpecModel) -> FilterSpec:
    return normalize_filters(model.model_dump())


def _context(model: FilterSpecModel):
    store = load_record_store()
    spec = _spec_from_model(model)
    return spec, prepare_context(spec, store, _baseline_for(store))


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                np.ndarray: lambda arr: arr.tolist(),
            },
        )
    )


def _error(name: str, exc: Exception) -> JSONResponse:
    logger.exception("%s failed", name)
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _options_payload(options, allowed: List[str]) -> MetaOptionsResponse:
    allowed_set = set(allowed)
    return MetaOptionsResponse(
        options=[
            DimensionOptionModel(value=o.value, text=o.text, csv_value=o.csv_value)
            for o in options
            if o.csv_value in allowed_set
        ]
    )


@app.get("/meta/roles", response_model=MetaOptionsResponse)
def meta_roles(selected_locations: Optional[List[str]] = Query(default=None)):
    try:
        store = load_record_store()
        lookup = build_lookup_tables(store, DEFAULT_CONFIG)
        allowed = available_roles_for_locations(lookup, selected_locations or [], DEFAULT_CONFIG)
        return _options_payload(DEFAULT_CONFIG.role_options, allowed)
    except Exception as exc:
        return _error("meta_roles", exc)


@app.get("/meta/locations", response_model=MetaOptionsResponse)
def meta_locations(selected_roles: Optional[List[str]] = Query(default=None)):
    try:
        store = load_record_store()
        lookup = build_lookup_tables(store, DEFAULT_CONFIG)
        allowed = available_locations_for_roles(lookup, selected_roles or [], DEFAULT_CONFIG)
        return _options_payload(DEFAULT_CONFIG.location_options, allowed)
    except Exception as exc:
        return _error("meta_locations", exc)


@app.get("/meta/questions")
def meta_questions():
    return _json(
        {
            "categories": DEFAULT_CONFIG.category_questions,
            "groups": {name: list(cols) for name, cols in DEFAULT_CONFIG.question_groups.items()},
            "max_comparison_items": DEFAULT_CONFIG.max_comparison_items,
        }
    )


@app.post("/kpis")
def kpis(filters: FilterSpecModel):
    try:
        spec, ctx = _context(filters)
        return _json(compute_kpi_summary(spec, ctx))
    except Exception as exc:
        return _error("kpis", exc)


@app.post("/grouped-averages")
def grouped_averages(filters: FilterSpecModel):
    try:
        spec, ctx = _context(filters)
        return _json(compute_grouped_averages(spec, ctx))
    except Exception as exc:
        return _error("grouped_averages", exc)


@app.post("/categories/{column}")
def categories(column: str, query: CategoryQueryModel):
    try:
        spec, ctx = _context(query.filters)
        return _json(compute_category_distribution(column, spec, ctx, limit=query.limit, exclude=query.exclude))
    except Exception as exc:
        return _error("categories", exc)


@app.post("/dashboard")
def dashboard(filters: FilterSpecModel):
    try:
        store = load_record_store()
        return _json(recompute_all(_spec_from_model(filters), store, _baseline_for(store)))
    except Exception as exc:
        return _error("dashboard", exc)


@app.post("/export/{page}")
def export_page(page: str, filters: FilterSpecModel):
    spec, ctx = _context(filters)
    comparison = ctx["comparison"]

    export_df = None
    filename = f"{page}.csv"
    if page == "responses":
        export_df = comparison.all_records
    elif page == "filtered":
        export_df = comparison.filtered_records if comparison.filtered_records is not None else comparison.all_records
    elif page == "grouped-averages":
        rows = compute_grouped_averages(spec, ctx)["rows"]
        export_df = pd.DataFrame([{"dataset": r["row_label"], "responses": r["record_count"], **r["averages"]} for r in rows])
    else:
        export_df = pd.DataFrame()

    if export_df is None or not hasattr(export_df, "to_csv"):
        export_df = pd.DataFrame()
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(content=csv_bytes, media_type="text/csv", headers={"Content-Disposition": f"attachment; filename={filename}"})
