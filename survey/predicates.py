from __future__ import annotations

from typing import Callable, Mapping

import pandas as pd

from survey.config import DEFAULT_CONFIG, SurveyConfig
from survey.filters import FilterSpec
from survey.records import column_values

Record = Mapping[str, object]
Predicate = Callable[[Record], bool]


def _cell(record: Record, column: str) -> str:
    value = record.get(column)
    return "" if value is None else str(value).strip()


def build_predicate(spec: FilterSpec, config: SurveyConfig = DEFAULT_CONFIG) -> Predicate:
    """Baseline-mode test over a single record (AND across active dimensions)."""
    roles = {str(v).strip() for v in spec.selected_roles} if spec.role_filter_active else None
    locations = {str(v).strip() for v in spec.selected_locations} if spec.location_filter_active else None

    def predicate(record: Record) -> bool:
        if roles is not None and _cell(record, config.role_column) not in roles:
            return False
        if locations is not None and _cell(record, config.location_column) not in locations:
            return False
        return True

    return predicate


def value_predicate(column: str, value: str) -> Predicate:
    target = str(value).strip()
    return lambda record: _cell(record, column) == target


def build_mask(frame: pd.DataFrame, spec: FilterSpec, config: SurveyConfig = DEFAULT_CONFIG) -> pd.Series:
    """Vectorized form of :func:`build_predicate` over a frame of records."""
    mask = pd.Series(True, index=frame.index, dtype=bool)
    if spec.role_filter_active:
        mask &= column_values(frame, config.role_column).isin({str(v).strip() for v in spec.selected_roles})
    if spec.location_filter_active:
        mask &= column_values(frame, config.location_column).isin({str(v).strip() for v in spec.selected_locations})
    return mask


def value_mask(frame: pd.DataFrame, column: str, value: str) -> pd.Series:
    return column_values(frame, column) == str(value).strip()


def filter_records(frame: pd.DataFrame, spec: FilterSpec, config: SurveyConfig = DEFAULT_CONFIG) -> pd.DataFrame:
    if frame.empty or not spec.has_active_filter:
        return frame
    return frame[build_mask(frame, spec, config)]


def filter_by_value(frame: pd.DataFrame, column: str, value: str) -> pd.DataFrame:
    if frame.empty:
        return frame
    return frame[value_mask(frame, column, value)]
