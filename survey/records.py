from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from survey.config import DEFAULT_CONFIG, SurveyConfig, get_data_path

logger = logging.getLogger(__name__)


def as_raw_strings(frame: pd.DataFrame) -> pd.DataFrame:
    """Coerce every cell to a string; missing cells become ""."""
    if frame.empty and not len(frame.columns):
        return frame
    return frame.astype(object).where(frame.notna(), "").astype(str)


@dataclass(frozen=True, eq=False)
class RecordStore:
    """Loaded survey rows, one column per CSV header, every cell a raw string.

    The store is read-only once built; filtered subsets are new frames.
    """

    frame: pd.DataFrame = field(default_factory=pd.DataFrame)
    source: Optional[str] = None

    @classmethod
    def from_records(cls, records: Optional[Iterable[Mapping[str, object]]], *, source: Optional[str] = None) -> "RecordStore":
        rows = list(records or [])
        if not rows:
            return cls(source=source)
        frame = pd.DataFrame.from_records(rows)
        return cls(frame=as_raw_strings(frame), source=source)

    @property
    def columns(self) -> List[str]:
        return [str(c) for c in self.frame.columns]

    @property
    def is_empty(self) -> bool:
        return self.frame.empty

    def __len__(self) -> int:
        return int(len(self.frame))

    def get_all_records(self) -> List[Dict[str, str]]:
        if self.frame.empty:
            return []
        return self.frame.to_dict(orient="records")


def column_values(frame: pd.DataFrame, column: str) -> pd.Series:
    """Trimmed string values of a column; a column the frame lacks reads as all-blank."""
    if column not in frame.columns:
        return pd.Series([""] * len(frame), index=frame.index, dtype=object)
    return frame[column].astype(str).str.strip()


# ---------------- Loaders ----------------
def file_signature(path: Path) -> Tuple[str, float]:
    return (str(path), path.stat().st_mtime)


def read_survey_csv(path: Path) -> pd.DataFrame:
    try:
        df = pd.read_csv(path, dtype=str, keep_default_na=False, on_bad_lines="skip", skip_blank_lines=True)
    except pd.errors.EmptyDataError:
        return pd.DataFrame()
    df.columns = [str(c).strip() for c in df.columns]
    df = as_raw_strings(df)
    for col in df.columns:
        df[col] = df[col].str.strip()
    return df


@lru_cache(maxsize=4)
def _load_record_store_cached(signature: Tuple[str, float]) -> RecordStore:
    path = Path(signature[0])
    frame = read_survey_csv(path)
    logger.info("Loaded %d survey rows (%d columns) from %s", len(frame), len(frame.columns), path.name)
    return RecordStore(frame=frame, source=path.name)


def load_record_store(path: Optional[str] = None) -> RecordStore:
    data_path = get_data_path(path)
    if not data_path.exists():
        logger.warning("Survey data file not found: %s", data_path)
        return RecordStore()
    return _load_record_store_cached(file_signature(data_path))


# ---------------- Dimension lookups ----------------
@dataclass(frozen=True)
class DimensionLookup:
    role_to_locations: Dict[str, List[str]] = field(default_factory=dict)
    location_to_roles: Dict[str, List[str]] = field(default_factory=dict)


def _grouped_lists(pairs: pd.DataFrame, key: str, value: str) -> Dict[str, List[str]]:
    if pairs.empty:
        return {}
    return {str(k): [str(v) for v in vals] for k, vals in pairs.groupby(key, sort=False)[value].agg(list).items()}


def build_lookup_tables(store: RecordStore, config: SurveyConfig = DEFAULT_CONFIG) -> DimensionLookup:
    """Role -> locations and location -> roles seen together in the data."""
    if store.is_empty:
        return DimensionLookup()
    pairs = pd.DataFrame(
        {
            "role": column_values(store.frame, config.role_column),
            "location": column_values(store.frame, config.location_column),
        }
    )
    pairs = pairs[(pairs["role"] != "") & (pairs["location"] != "")].drop_duplicates()
    return DimensionLookup(
        role_to_locations=_grouped_lists(pairs, "role", "location"),
        location_to_roles=_grouped_lists(pairs, "location", "role"),
    )


def _intersect(mapping: Dict[str, List[str]], selected: Sequence[str]) -> List[str]:
    available: Optional[List[str]] = None
    for key in selected:
        values = mapping.get(key, [])
        available = list(values) if available is None else [v for v in available if v in values]
    return available or []


def available_locations_for_roles(
    lookup: DimensionLookup, selected_roles: Sequence[str], config: SurveyConfig = DEFAULT_CONFIG
) -> List[str]:
    if not selected_roles:
        return [opt.csv_value for opt in config.location_options]
    return _intersect(lookup.role_to_locations, selected_roles)


def available_roles_for_locations(
    lookup: DimensionLookup, selected_locations: Sequence[str], config: SurveyConfig = DEFAULT_CONFIG
) -> List[str]:
    if not selected_locations:
        return [opt.csv_value for opt in config.role_options]
    return _intersect(lookup.location_to_roles, selected_locations)
