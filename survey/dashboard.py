from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from survey.comparison import BaselineReference, resolve_comparison
from survey.config import DEFAULT_CONFIG, SurveyConfig
from survey.filters import FilterSpec, normalize_filters
from survey.metrics_categories import compute_category_distribution
from survey.metrics_grouped import compute_grouped_averages
from survey.metrics_kpis import compute_kpi_summary
from survey.records import RecordStore

logger = logging.getLogger(__name__)


def prepare_context(
    filters: dict | FilterSpec,
    store: RecordStore,
    baseline: Optional[BaselineReference] = None,
    config: SurveyConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    spec = filters if isinstance(filters, FilterSpec) else normalize_filters(filters)
    baseline = baseline if baseline is not None else BaselineReference()
    reference = baseline.ensure_baseline(store, config)
    comparison = resolve_comparison(spec, store, config)
    return {
        "filters": spec,
        "config": config,
        "store": store,
        "baseline": reference,
        "comparison": comparison,
    }


def recompute_all(
    filters: dict | FilterSpec,
    store: RecordStore,
    baseline: Optional[BaselineReference] = None,
    config: SurveyConfig = DEFAULT_CONFIG,
) -> Dict[str, Any]:
    """Every dashboard payload for one filter state, computed from scratch."""
    ctx = prepare_context(filters, store, baseline, config)
    spec: FilterSpec = ctx["filters"]
    logger.debug("Recomputing dashboard: mode=%s records=%d", spec.mode, len(store))
    comparison = ctx["comparison"]
    return {
        "filters": asdict(spec),
        "mode": spec.mode,
        "record_count": len(store),
        "truncated_count": comparison.truncated_count,
        "kpis": compute_kpi_summary(spec, ctx),
        "grouped_averages": compute_grouped_averages(spec, ctx),
        "categories": {
            column: compute_category_distribution(column, spec, ctx) for column in config.category_questions
        },
    }
