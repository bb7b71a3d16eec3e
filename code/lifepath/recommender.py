from typing import List, Optional, Sequence

from .schemas import PathPick, PreferenceWeights, Recommendation, ScoredPath, Tradeoff, UserProfile
from .utils import as_number, round_half_up

STRENGTH_THRESHOLD = 70
CONSIDERATION_THRESHOLD = 50
TRADEOFF_MARGIN = 15
MAX_TRADEOFFS = 3

NO_PATHS_REASONING = "No paths available for recommendation."

STRENGTH_PHRASES = (
    ("financial", "strong financial outcomes"),
    ("lifestyle", "excellent lifestyle fit"),
    ("time_independence", "fast path to independence"),
    ("alignment", "great alignment with your skills and interests"),
)
CONSIDERATION_PHRASES = (
    ("financial", "moderate financial returns"),
    ("lifestyle", "lifestyle adjustments may be needed"),
    ("time_independence", "longer time to financial independence"),
    ("alignment", "some skill development required"),
)
# Checked in this order; the first of several equal top weights wins.
PRIORITY_CLOSINGS = (
    ("financial_weight", "financial", "Since financial outcomes are your top priority, this path delivers strong returns."),
    ("lifestyle_weight", "lifestyle", "Since lifestyle fit is your top priority, this path aligns well with your preferences."),
    ("time_weight", "time_independence", "Since quick independence is your top priority, this path gets you there faster."),
    ("alignment_weight", "alignment", "Since alignment with your skills and interests is your top priority, this path plays to your strengths."),
)
TRADEOFF_TEMPLATES = (
    ("financial", "financial", "{name} offers {gap} points better financial outcomes, but scores lower overall."),
    ("lifestyle", "lifestyle", "{name} provides {gap} points better lifestyle fit, but may have other tradeoffs."),
    (
        "time_independence",
        "timeIndependence",
        "{name} gets you to independence {gap} points faster, worth considering if speed is critical.",
    ),
)


def low_risk_score(path: ScoredPath) -> float:
    return path.scores.alignment * 0.4 + path.scores.lifestyle * 0.4 + path.scores.financial * 0.2


def _top_priority(weights: Optional[PreferenceWeights]) -> Optional[tuple]:
    if weights is None:
        return None
    best = None
    best_value = None
    for entry in PRIORITY_CLOSINGS:
        value = as_number(getattr(weights, entry[0], None))
        if best_value is None or value > best_value:
            best, best_value = entry, value
    return best


def generate_reasoning(best: Optional[ScoredPath], weights: Optional[PreferenceWeights]) -> str:
    if best is None:
        return ""
    scores = best.scores

    paragraphs: List[str] = [
        f"Based on your profile and preferences, **{best.name}** is your best overall match "
        f"with a score of {best.overall_score}/100."
    ]

    strengths = [
        f"{phrase} ({getattr(scores, attr)}/100)"
        for attr, phrase in STRENGTH_PHRASES
        if getattr(scores, attr) >= STRENGTH_THRESHOLD
    ]
    if strengths:
        paragraphs.append(f"**Key Strengths**: This path offers {', '.join(strengths)}.")

    considerations = [
        f"{phrase} ({getattr(scores, attr)}/100)"
        for attr, phrase in CONSIDERATION_PHRASES
        if getattr(scores, attr) < CONSIDERATION_THRESHOLD
    ]
    if considerations:
        paragraphs.append(f"**Considerations**: {', '.join(considerations)}.")

    priority = _top_priority(weights)
    if priority is not None and getattr(scores, priority[1]) >= STRENGTH_THRESHOLD:
        paragraphs.append(priority[2])

    return "\n\n".join(paragraphs)


def generate_tradeoffs(paths: Sequence[ScoredPath], best: ScoredPath) -> List[Tradeoff]:
    tradeoffs: List[Tradeoff] = []
    for path in paths:
        if path is best:
            continue
        for attr, dimension, template in TRADEOFF_TEMPLATES:
            gap = getattr(path.scores, attr) - getattr(best.scores, attr)
            if gap > TRADEOFF_MARGIN:
                tradeoffs.append(
                    Tradeoff(
                        path_id=path.id,
                        path=path.name,
                        dimension=dimension,
                        gap=gap,
                        insight=template.format(name=path.name, gap=gap),
                    )
                )
    return tradeoffs[:MAX_TRADEOFFS]


def generate_final_recommendation(
    scored_paths: Sequence[ScoredPath],
    profile: Optional[UserProfile] = None,
    weights: Optional[PreferenceWeights] = None,
) -> Recommendation:
    if not scored_paths:
        return Recommendation(
            best_overall=None,
            best_financial=None,
            best_lifestyle=None,
            best_low_risk=None,
            reasoning=NO_PATHS_REASONING,
        )

    # sorted() is stable, so ties keep their submitted order.
    ranked = sorted(scored_paths, key=lambda p: p.overall_score, reverse=True)
    best = ranked[0]
    best_financial = sorted(scored_paths, key=lambda p: p.scores.financial, reverse=True)[0]
    best_lifestyle = sorted(scored_paths, key=lambda p: p.scores.lifestyle, reverse=True)[0]
    best_low_risk = sorted(scored_paths, key=low_risk_score, reverse=True)[0]

    return Recommendation(
        best_overall=best,
        best_financial=PathPick(best_financial.id, best_financial.name, best_financial.scores.financial),
        best_lifestyle=PathPick(best_lifestyle.id, best_lifestyle.name, best_lifestyle.scores.lifestyle),
        best_low_risk=PathPick(best_low_risk.id, best_low_risk.name, round_half_up(low_risk_score(best_low_risk))),
        reasoning=generate_reasoning(best, weights),
        tradeoffs=generate_tradeoffs(scored_paths, best),
        all_ranked=ranked,
    )
