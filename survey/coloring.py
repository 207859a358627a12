from __future__ import annotations

from typing import Dict, Literal, Optional, Sequence

BaselineClass = Literal["above", "below", "equal"]
PeerClass = Literal["max", "min", "middle", "neutral"]

CSS_CLASSES: Dict[str, str] = {
    "above": "score-green",
    "max": "score-green",
    "below": "score-red",
    "min": "score-red",
    "equal": "score-neutral",
    "middle": "score-neutral",
    "neutral": "score-neutral",
}


def classify_baseline(value: float, reference: float) -> BaselineClass:
    if value > reference:
        return "above"
    if value < reference:
        return "below"
    return "equal"


def classify_peer(value: float, peers: Sequence[float]) -> PeerClass:
    """Rank ``value`` against its peers.

    A single peer is never colored. The max check runs before the min check, so
    a set of equal values classifies every item as ``max``.
    """
    if len(peers) <= 1:
        return "neutral"
    if value == max(peers):
        return "max"
    if value == min(peers):
        return "min"
    return "middle"


def classify_value(
    value: float,
    reference: Optional[float] = None,
    peers: Optional[Sequence[float]] = None,
) -> str:
    if peers is not None:
        return classify_peer(value, peers)
    if reference is not None:
        return classify_baseline(value, reference)
    return "neutral"


def css_class(classification: Optional[str]) -> Optional[str]:
    if classification is None:
        return None
    return CSS_CLASSES.get(classification, "score-neutral")
