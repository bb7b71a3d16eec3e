from typing import Dict, Optional

from .schemas import PreferenceWeights, Scores
from .utils import as_number, clamp, round_half_up

DIMENSIONS = ("financial", "lifestyle", "time", "alignment")


def normalize_weights(weights: Optional[PreferenceWeights]) -> Dict[str, float]:
    """Scale the four preference weights to fractions of their total.

    Negative or non-numeric weights count as zero. When nothing is left the
    preferences are treated as indifferent and split evenly.
    """
    if weights is None:
        weights = PreferenceWeights()
    raw = {
        "financial": max(0.0, as_number(weights.financial_weight)),
        "lifestyle": max(0.0, as_number(weights.lifestyle_weight)),
        "time": max(0.0, as_number(weights.time_weight)),
        "alignment": max(0.0, as_number(weights.alignment_weight)),
    }
    total = sum(raw.values())
    if total <= 0:
        return {key: 1.0 / len(DIMENSIONS) for key in DIMENSIONS}
    return {key: value / total for key, value in raw.items()}


def combine_scores(scores: Scores, weights: Optional[PreferenceWeights]) -> int:
    normalized = normalize_weights(weights)
    combined = (
        as_number(scores.financial) * normalized["financial"]
        + as_number(scores.lifestyle) * normalized["lifestyle"]
        + as_number(scores.time_independence) * normalized["time"]
        + as_number(scores.alignment) * normalized["alignment"]
    )
    return round_half_up(clamp(combined, 0.0, 100.0))
