from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from survey.records import column_values

Distribution = List[Tuple[str, int]]

# Hand-picked two-line breaks for long labels that read badly when split generically.
KNOWN_LABEL_BREAKS: Dict[str, List[str]] = {
    "Physical Environment": ["Physical", "Environment"],
    "Heavy Workload": ["Heavy", "Workload"],
    "General Comments": ["General", "Comments"],
    "Leadership Comments": ["Leadership", "Comments"],
    "Communication Issues": ["Communication", "Issues"],
    "Interpersonal Issues": ["Interpersonal", "Issues"],
    "Work-Life Balance": ["Work-Life", "Balance"],
    "No Response": ["No", "Response"],
}

LABEL_DELIMITERS = (" & ", " and ", " - ", " / ", " or ", " with ", " at ", " of ", " in ")

SHORT_LABEL_MAX = 15
GREEDY_SPLIT_MIN = 20
FIRST_LINE_MAX = 18


def distribution(frame: pd.DataFrame, column: str) -> Distribution:
    """Count trimmed, non-blank values of ``column``, most frequent first.

    Ties keep the order in which each label was first seen.
    """
    if frame.empty:
        return []
    values = column_values(frame, column)
    values = values[values != ""]
    if values.empty:
        return []
    counts = values.groupby(values, sort=False).size()
    ordered = sorted(counts.items(), key=lambda kv: -kv[1])
    return [(str(label), int(count)) for label, count in ordered]


def top_categories(dist: Distribution, n: int) -> Distribution:
    return list(dist[: max(0, int(n))])


def exclude_categories(dist: Distribution, exclusions: Iterable[str]) -> Distribution:
    skip = set(exclusions or [])
    return [(label, count) for label, count in dist if label not in skip]


def non_blank_count(frame: pd.DataFrame, column: str) -> int:
    if frame.empty:
        return 0
    return int((column_values(frame, column) != "").sum())


def _pack_words(label: str) -> Optional[List[str]]:
    words = label.split(" ")
    first = ""
    for i, word in enumerate(words):
        if len(first) + len(word) + 1 <= FIRST_LINE_MAX:
            first = f"{first} {word}" if first else word
        else:
            rest = " ".join(words[i:])
            return [first, rest] if first else None
    return None


def segment_label(label: Optional[str]) -> List[str]:
    """Break a chart category label into display lines (at most two)."""
    if not label or len(label) <= SHORT_LABEL_MAX:
        return [label or ""]

    known = KNOWN_LABEL_BREAKS.get(label.strip())
    if known:
        return list(known)

    for delimiter in LABEL_DELIMITERS:
        if delimiter in label:
            parts = label.split(delimiter)
            if len(parts) == 2:
                return [parts[0] + delimiter.rstrip(), parts[1]]

    if len(label) > GREEDY_SPLIT_MIN:
        packed = _pack_words(label)
        if packed:
            return packed

    return [label]
