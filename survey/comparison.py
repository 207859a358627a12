"""Comparison modes.

``baseline`` compares every record against the subset picked by the role and
location filters. ``roles`` and ``location`` build one comparison item per
selected value (at most ``max_comparison_items``) and ignore the baseline
filters entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from survey.aggregation import aggregate, average_response
from survey.config import DEFAULT_CONFIG, SurveyConfig
from survey.filters import FilterSpec, clean_selection
from survey.predicates import filter_by_value, filter_records
from survey.records import RecordStore

logger = logging.getLogger(__name__)


@dataclass
class BaselineReference:
    """Grouped averages of the full dataset, captured once and then frozen."""

    snapshot: Dict[str, float] = field(default_factory=dict)
    initialized: bool = False

    def ensure_baseline(self, store: RecordStore, config: SurveyConfig = DEFAULT_CONFIG) -> Dict[str, float]:
        if self.initialized:
            return dict(self.snapshot)
        averages = aggregate(store.frame, config.question_groups)
        if store.is_empty:
            # Nothing loaded yet: report zeros but leave the reference open.
            return averages
        self.snapshot = averages
        self.initialized = True
        logger.debug("Captured baseline reference over %d records", len(store))
        return dict(self.snapshot)


@dataclass(frozen=True)
class ComparisonItem:
    display_name: str
    match_value: str
    record_count: int
    numeric_average: float
    reference_average: float


@dataclass(frozen=True, eq=False)
class ComparisonSubset:
    item: ComparisonItem
    records: pd.DataFrame
    averages: Dict[str, float]


@dataclass(frozen=True, eq=False)
class ComparisonResult:
    mode: str
    all_records: pd.DataFrame
    all_averages: Dict[str, float]
    filtered_records: Optional[pd.DataFrame] = None
    filtered_averages: Optional[Dict[str, float]] = None
    subsets: List[ComparisonSubset] = field(default_factory=list)
    requested_count: int = 0
    truncated_count: int = 0

    @property
    def is_empty(self) -> bool:
        return self.mode != "baseline" and not self.subsets

    @property
    def items(self) -> List[ComparisonItem]:
        return [s.item for s in self.subsets]


def selected_values(spec: FilterSpec) -> List[str]:
    """Distinct trimmed selections for the active comparison mode, in selection order."""
    if spec.mode == "roles":
        return clean_selection(spec.selected_roles)
    if spec.mode == "location":
        return clean_selection(spec.selected_locations)
    return []


def _resolve_items(spec: FilterSpec, frame: pd.DataFrame, config: SurveyConfig) -> List[ComparisonSubset]:
    if spec.mode == "roles":
        column, display = config.role_column, config.role_display_name
    else:
        column, display = config.location_column, config.location_display_name

    reference_average = average_response(frame, config)
    subsets: List[ComparisonSubset] = []
    for value in selected_values(spec)[: config.max_comparison_items]:
        subset = filter_by_value(frame, column, value)
        item = ComparisonItem(
            display_name=display(value),
            match_value=value,
            record_count=int(len(subset)),
            numeric_average=average_response(subset, config),
            reference_average=reference_average,
        )
        subsets.append(ComparisonSubset(item=item, records=subset, averages=aggregate(subset, config.question_groups)))
    return subsets


def resolve_comparison(spec: FilterSpec, store: RecordStore, config: SurveyConfig = DEFAULT_CONFIG) -> ComparisonResult:
    frame = store.frame
    all_averages = aggregate(frame, config.question_groups)

    if spec.mode in ("roles", "location"):
        requested = len(selected_values(spec))
        truncated = max(0, requested - config.max_comparison_items)
        if truncated:
            logger.warning("%d %s selected; comparing the first %d", requested, spec.mode, config.max_comparison_items)
        return ComparisonResult(
            mode=spec.mode,
            all_records=frame,
            all_averages=all_averages,
            subsets=_resolve_items(spec, frame, config),
            requested_count=requested,
            truncated_count=truncated,
        )

    if not spec.has_active_filter:
        return ComparisonResult(mode="baseline", all_records=frame, all_averages=all_averages)

    filtered = filter_records(frame, spec, config)
    return ComparisonResult(
        mode="baseline",
        all_records=frame,
        all_averages=all_averages,
        filtered_records=filtered,
        filtered_averages=aggregate(filtered, config.question_groups),
    )
