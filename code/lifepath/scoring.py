import math
from typing import Any, Optional

from .schemas import PathTemplate, PathTraits, ResolvedProfile, Scores, SimulationResult, UserProfile
from .utils import as_number, clamp, round_half_up, safe_div

NEUTRAL_SCALE = 5.0
NEUTRAL_SCORE = 50

RISK_LEVELS = ("low", "medium", "high")
RISK_ALIASES = {
    "low": "low",
    "conservative": "low",
    "cautious": "low",
    "medium": "medium",
    "moderate": "medium",
    "balanced": "medium",
    "high": "high",
    "aggressive": "high",
    "bold": "high",
}

# Normalizers: what counts as a perfect score on each financial axis.
NET_CASH_TARGET = 200000.0
DEBT_CEILING = 100000.0
BREAK_EVEN_BASELINE_YEARS = 10.0
INCOME_TARGET = 500000.0
SCHOOL_YEAR_PENALTY = 16.67


def normalize_risk_level(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            return "medium"
        # 1-10 slider from the profile form.
        if value <= 3:
            return "low"
        if value >= 8:
            return "high"
        return "medium"
    if not isinstance(value, str) or not value.strip():
        return "medium"
    return RISK_ALIASES.get(value.strip().lower(), "medium")


def _scale(value: Any) -> float:
    # Unset or zero scale values are read as the neutral midpoint.
    number = as_number(value, NEUTRAL_SCALE)
    return number if number else NEUTRAL_SCALE


def _label(value: Any, default: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def resolve_profile(profile: Optional[UserProfile]) -> ResolvedProfile:
    """Fill every advisory field of a profile with its neutral default."""
    if profile is None:
        return ResolvedProfile()
    interest = _label(getattr(profile, "interest_alignment", None), "neutral")
    return ResolvedProfile(
        structure_preference=_scale(getattr(profile, "structure_preference", None)),
        creativity_preference=_scale(getattr(profile, "creativity_preference", None)),
        work_life_importance=_scale(getattr(profile, "work_life_importance", None)),
        location_importance=_scale(getattr(profile, "location_importance", None)),
        skill_confidence=_scale(getattr(profile, "skill_confidence", None)),
        interest_alignment=interest.lower(),
        primary_interest=_label(getattr(profile, "primary_interest", None), None),
        risk_tolerance=normalize_risk_level(getattr(profile, "risk_tolerance", None)),
    )


def resolve_traits(template: Optional[PathTemplate]) -> PathTraits:
    if template is None:
        return PathTraits()
    return PathTraits(
        structure=_scale(getattr(template, "structure", None)),
        creativity=_scale(getattr(template, "creativity", None)),
        work_life_balance=_scale(getattr(template, "work_life_balance", None)),
        location_flexibility=_scale(getattr(template, "location_flexibility", None)),
        skill_requirement=_scale(getattr(template, "skill_requirement", None)),
        interest_area=_label(getattr(template, "interest_area", None), "general"),
        risk_level=normalize_risk_level(getattr(template, "risk_level", None)),
    )


def _finish(score: float) -> int:
    return round_half_up(clamp(score, 0.0, 100.0))


def _break_even(result: SimulationResult) -> Optional[float]:
    year = getattr(result, "break_even_year", None)
    if isinstance(year, bool) or not isinstance(year, (int, float)) or not math.isfinite(year):
        return None
    return float(year)


def score_financial(result: Optional[SimulationResult]) -> int:
    summary = getattr(result, "summary", None)
    if result is None or summary is None:
        return 0

    net_cash = as_number(getattr(summary, "net_cash_at_horizon", None))
    # Unreadable debt earns no credit on the debt axis.
    peak_debt = as_number(getattr(summary, "peak_debt", None), math.inf)
    total_income = as_number(getattr(summary, "total_earnings", None))
    break_even_year = _break_even(result)

    net_cash_score = clamp(net_cash / NET_CASH_TARGET * 100, 0.0, 100.0)
    debt_score = max(0.0, 100 - peak_debt / DEBT_CEILING * 100)
    if break_even_year is None:
        break_even_score = 0.0
    else:
        break_even_score = max(0.0, 100 - break_even_year / BREAK_EVEN_BASELINE_YEARS * 100)
    income_score = clamp(total_income / INCOME_TARGET * 100, 0.0, 100.0)

    return _finish(
        net_cash_score * 0.4
        + debt_score * 0.3
        + break_even_score * 0.2
        + income_score * 0.1
    )


def score_lifestyle(profile: Optional[UserProfile], template: Optional[PathTemplate]) -> int:
    if profile is None or template is None:
        return NEUTRAL_SCORE
    user = resolve_profile(profile)
    path = resolve_traits(template)

    structure_match = 100 - abs(path.structure - user.structure_preference) * 10
    creativity_match = 100 - abs(path.creativity - user.creativity_preference) * 10
    balance_match = path.work_life_balance * user.work_life_importance * 2
    location_match = path.location_flexibility * user.location_importance * 2

    score = float(NEUTRAL_SCORE)
    score += (structure_match - 50) * 0.30
    score += (creativity_match - 50) * 0.25
    score += (balance_match - 50) * 0.25
    score += (location_match - 50) * 0.20
    return _finish(score)


def score_time_independence(result: Optional[SimulationResult]) -> int:
    if result is None:
        return 0
    break_even_year = _break_even(result)
    years_in_school = as_number(getattr(result, "years_in_school", None))

    if break_even_year is None:
        break_even_score = 0.0
    else:
        break_even_score = clamp(100 - break_even_year * 10, 0.0, 100.0)
    school_score = clamp(100 - years_in_school * SCHOOL_YEAR_PENALTY, 0.0, 100.0)
    return _finish(break_even_score * 0.6 + school_score * 0.4)


def _risk_match(tolerance: str, level: str) -> float:
    if tolerance == level:
        return 100.0
    if "medium" in (tolerance, level):
        return 70.0
    return 30.0


def _interest_match(user: ResolvedProfile, path: PathTraits) -> float:
    if user.interest_alignment == "high" and path.interest_area == user.primary_interest:
        return 100.0
    if user.interest_alignment == "medium":
        return 70.0
    if user.interest_alignment == "low":
        return 30.0
    return 50.0


def score_alignment(profile: Optional[UserProfile], template: Optional[PathTemplate]) -> int:
    if profile is None or template is None:
        return NEUTRAL_SCORE
    user = resolve_profile(profile)
    path = resolve_traits(template)

    if user.skill_confidence >= path.skill_requirement:
        skill_match = 100.0
    else:
        skill_match = safe_div(user.skill_confidence, path.skill_requirement) * 100

    score = float(NEUTRAL_SCORE)
    score += (skill_match - 50) * 0.40
    score += (_interest_match(user, path) - 50) * 0.35
    score += (_risk_match(user.risk_tolerance, path.risk_level) - 50) * 0.25
    return _finish(score)


def score_path(
    profile: Optional[UserProfile],
    template: Optional[PathTemplate],
    result: Optional[SimulationResult],
) -> Scores:
    return Scores(
        financial=score_financial(result),
        lifestyle=score_lifestyle(profile, template),
        time_independence=score_time_independence(result),
        alignment=score_alignment(profile, template),
    )
