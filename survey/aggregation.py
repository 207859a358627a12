from __future__ import annotations

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Mapping, Optional, Sequence

import pandas as pd

from survey.config import DEFAULT_CONFIG, SurveyConfig

_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def parse_number(raw: object) -> Optional[float]:
    """Parse a raw cell as a decimal number; None marks a missing value.

    Surrounding whitespace is allowed. Empty strings, words, "nan"/"inf" and
    trailing garbage such as "12abc" all fail.
    """
    if raw is None:
        return None
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return None if pd.isna(raw) else float(raw)
    s = str(raw).strip()
    if not s or not _NUMBER_RE.fullmatch(s):
        return None
    return float(s)


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def display_average(value: object) -> Optional[float]:
    return round_half_up(value, 1)


@dataclass(frozen=True)
class GroupStat:
    total: float = 0.0
    count: int = 0

    @property
    def average(self) -> float:
        return self.total / self.count if self.count else 0.0


def numeric_values(frame: pd.DataFrame, columns: Sequence[str]) -> pd.Series:
    """Every parseable value of ``columns`` pooled into one float series."""
    present = [c for c in columns if c in frame.columns]
    if frame.empty or not present:
        return pd.Series(dtype=float)
    pooled = pd.concat([frame[c].map(parse_number) for c in present], ignore_index=True)
    return pooled.dropna().astype(float)


def group_stat(frame: pd.DataFrame, columns: Sequence[str]) -> GroupStat:
    values = numeric_values(frame, columns)
    if values.empty:
        return GroupStat()
    return GroupStat(total=float(values.sum()), count=int(values.count()))


def aggregate_stats(frame: pd.DataFrame, groups: Mapping[str, Sequence[str]]) -> Dict[str, GroupStat]:
    return {name: group_stat(frame, columns) for name, columns in groups.items()}


def aggregate(frame: pd.DataFrame, groups: Optional[Mapping[str, Sequence[str]]] = None) -> Dict[str, float]:
    """Group name -> mean over the subset (0 when the group has no usable values)."""
    groups = DEFAULT_CONFIG.question_groups if groups is None else groups
    return {name: stat.average for name, stat in aggregate_stats(frame, groups).items()}


def average_response(frame: pd.DataFrame, config: SurveyConfig = DEFAULT_CONFIG) -> float:
    """Pooled mean over every configured numeric column."""
    return group_stat(frame, config.num_columns).average
