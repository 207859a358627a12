from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple


DATA_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DATA_PATH = DATA_DIR / "Data" / "survey.csv"
DATA_PATH_ENV = "SURVEY_DATA_PATH"

MAX_COMPARISON_ITEMS = 5

ALL_RESPONSES_LABEL = "All Responses"
FILTERED_LABEL = "Filtered Results"
ALL_RESPONSES_COLOR = "#ABDBF0"
FILTERED_COLOR = "#4A90E2"
SERIES_COLORS: Tuple[str, ...] = ("#4A90E2", "#50C878", "#FF6B6B", "#FFB84D", "#9B59B6")

# Question groups -> underlying "_num" columns. Many:1 is allowed.
QUESTION_GROUPS: Dict[str, Tuple[str, ...]] = {
    "Trust": ("Q3_num",),
    "Health": ("Q4_num",),
    "Relationships": ("Q5_num",),
    "Impact": ("Q6_num",),
    "Value": ("Q7_num",),
    "Engagement": ("Q8_num",),
    "Overall Satisfaction": ("Q11_num",),
}

# Columns pooled into the "Average Overall Score" KPI (Avg_num_response is excluded).
NUM_COLUMNS: Tuple[str, ...] = ("Q3_num", "Q4_num", "Q5_num", "Q6_num", "Q7_num", "Q8_num", "Q11_num")

CATEGORY_QUESTIONS: Dict[str, str] = {
    "Q9_cat": "What do you enjoy most about working at SteelFab?",
    "Q10_cat": "What do you enjoy least about working at SteelFab?",
    "Q12_cat": "What one or two things would you change about your work experience at SteelFab?",
}


@dataclass(frozen=True)
class DimensionOption:
    value: str
    text: str
    csv_value: str


ROLE_OPTIONS: Tuple[DimensionOption, ...] = (
    DimensionOption("detail-coordinator", "Detail coordinator", "Detail coordinator"),
    DimensionOption("fabrication-lead", "Fabrication lead", "Fabrication lead"),
    DimensionOption("fitter", "Fitter", "Fitter"),
    DimensionOption("forklift-operator", "Forklift operator", "Forklift operator"),
    DimensionOption("lead-person", "Lead person", "Lead person"),
    DimensionOption("machine-operator", "Machine operator", "Machine operator"),
    DimensionOption("maintenance", "Maintenance", "Maintenance"),
    DimensionOption("other", "Other", "Other"),
    DimensionOption("painter", "Painter", "Painter"),
    DimensionOption("part-runner", "Part runner", "Part runner"),
    DimensionOption("programmer", "Programmer", "Programmer"),
    DimensionOption("quality-control", "Quality control", "Quality control"),
    DimensionOption("supervisor", "Supervisor", "Supervisor"),
    DimensionOption("welder", "Welder", "Welder"),
)

LOCATION_OPTIONS: Tuple[DimensionOption, ...] = (
    DimensionOption("baltimore-md", "Baltimore, MD", "Maryland - Baltimore Shop"),
    DimensionOption("chandler-az", "Chandler, AZ", "Arizona - Chandler Shop"),
    DimensionOption("charlotte-nc", "Charlotte, NC", "North Carolina - Charlotte Shop"),
    DimensionOption("dublin-ga", "Dublin, GA", "Georgia - Dublin Shop"),
    DimensionOption("durant-ok", "Durant, OK", "Oklahoma - Durant Shop"),
    DimensionOption("emporia-va", "Emporia, VA", "Virginia - Emporia Shop"),
    DimensionOption("fayetteville-nc", "Fayetteville, NC", "North Carolina - Fayetteville Shop"),
    DimensionOption("florence-sc", "Florence, SC", "South Carolina - Florence Shop"),
    DimensionOption("oakwood-tx", "Oakwood, TX", "Texas - Oakwood Shop"),
    DimensionOption("roanoke-al", "Roanoke, AL", "Alabama - Roanoke Shop"),
    DimensionOption("rock-hill-sc", "Rock Hill, SC", "South Carolina - Rock Hill Shop"),
    DimensionOption("spokane-wa", "Spokane, WA", "Washington - Spokane Shop"),
    DimensionOption("tangent-or", "Tangent, OR", "Oregon - Tangent Shop"),
    DimensionOption("york-pa", "York, PA", "Pennsylvania - York Shop"),
    DimensionOption("york-sc", "York, SC", "South Carolina - York Shop"),
)


def _display_name(options: Tuple[DimensionOption, ...], csv_value: str) -> str:
    for option in options:
        if option.csv_value == csv_value:
            return option.text
    return csv_value


@dataclass(frozen=True)
class SurveyConfig:
    role_column: str = "Role"
    location_column: str = "Location"
    question_groups: Dict[str, Tuple[str, ...]] = field(default_factory=lambda: dict(QUESTION_GROUPS))
    num_columns: Tuple[str, ...] = NUM_COLUMNS
    category_questions: Dict[str, str] = field(default_factory=lambda: dict(CATEGORY_QUESTIONS))
    role_options: Tuple[DimensionOption, ...] = ROLE_OPTIONS
    location_options: Tuple[DimensionOption, ...] = LOCATION_OPTIONS
    max_comparison_items: int = MAX_COMPARISON_ITEMS

    def role_display_name(self, csv_value: str) -> str:
        return _display_name(self.role_options, csv_value)

    def location_display_name(self, csv_value: str) -> str:
        return _display_name(self.location_options, csv_value)


DEFAULT_CONFIG = SurveyConfig()


def get_data_path(override: Optional[str] = None) -> Path:
    """Resolve the survey CSV location (explicit override, then env var, then default)."""
    raw = override or os.environ.get(DATA_PATH_ENV)
    return Path(raw) if raw else DEFAULT_DATA_PATH
