from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Literal, Optional

logger = logging.getLogger(__name__)

ComparisonMode = Literal["baseline", "roles", "location"]
DimensionMode = Literal["all", "compare"]

COMPARISON_MODES = ("baseline", "roles", "location")
DIMENSION_MODES = ("all", "compare")


@dataclass(frozen=True)
class FilterSpec:
    mode: ComparisonMode = "baseline"
    role_mode: DimensionMode = "all"
    location_mode: DimensionMode = "all"
    selected_roles: List[str] = field(default_factory=list)
    selected_locations: List[str] = field(default_factory=list)

    @property
    def role_filter_active(self) -> bool:
        return self.mode == "baseline" and self.role_mode == "compare" and bool(self.selected_roles)

    @property
    def location_filter_active(self) -> bool:
        return self.mode == "baseline" and self.location_mode == "compare" and bool(self.selected_locations)

    @property
    def has_active_filter(self) -> bool:
        """True when the baseline role/location filters narrow the dataset."""
        return self.role_filter_active or self.location_filter_active


def clean_selection(values: Optional[Iterable[object]]) -> List[str]:
    if not values:
        return []
    if isinstance(values, str):
        values = [values]
    out: List[str] = []
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return out


def _choice(raw: object, allowed: tuple, default: str, name: str) -> str:
    value = str(raw).strip().lower() if raw is not None else default
    if value not in allowed:
        logger.warning("Unknown %s %r, falling back to %r", name, raw, default)
        return default
    return value


def normalize_filters(raw: dict) -> FilterSpec:
    raw = raw or {}
    mode = _choice(raw.get("mode"), COMPARISON_MODES, "baseline", "comparison mode")
    role_mode = _choice(raw.get("role_mode"), DIMENSION_MODES, "all", "role mode")
    location_mode = _choice(raw.get("location_mode"), DIMENSION_MODES, "all", "location mode")
    return FilterSpec(
        mode=mode,  # type: ignore[arg-type]
        role_mode=role_mode,  # type: ignore[arg-type]
        location_mode=location_mode,  # type: ignore[arg-type]
        selected_roles=clean_selection(raw.get("selected_roles")),
        selected_locations=clean_selection(raw.get("selected_locations")),
    )
