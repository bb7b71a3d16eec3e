import logging
import math
from typing import Iterable, List, Optional

from lifepath import schemas as core
from lifepath.catalog import PathCatalog
from lifepath.combiner import combine_scores
from lifepath.recommender import generate_final_recommendation
from lifepath.scoring import score_path
from lifepath.simulator import Simulator

from .config import EVALUATE_HORIZON_YEARS
from .models import (
    CatalogResponse,
    ComparedPath,
    CompareRequest,
    CompareResponse,
    EvaluateRequest,
    EvaluateResponse,
    PathPick,
    PathSeries,
    PathTemplateOut,
    Recommendation,
    Scores,
    ScoredPath,
    SimulationSummary,
    Tradeoff,
)

logger = logging.getLogger(__name__)

MIN_EVALUATE_PATHS = 2


def _whole_amount(value: float) -> Optional[int]:
    # Overflowed or NaN figures go out as null rather than failing the response.
    if not math.isfinite(value):
        return None
    return int(value)


def _whole_amounts(values: Iterable[float]) -> List[Optional[int]]:
    return [_whole_amount(v) for v in values]


def _scored_path_out(path: core.ScoredPath) -> ScoredPath:
    return ScoredPath(
        id=path.id,
        name=path.name,
        scores=Scores(**vars(path.scores)),
        overall_score=path.overall_score,
    )


def _pick_out(pick: Optional[core.PathPick]) -> Optional[PathPick]:
    if pick is None:
        return None
    return PathPick(id=pick.id, name=pick.name, score=pick.score)


def _recommendation_out(rec: core.Recommendation) -> Recommendation:
    return Recommendation(
        best_overall=_scored_path_out(rec.best_overall) if rec.best_overall is not None else None,
        best_financial=_pick_out(rec.best_financial),
        best_lifestyle=_pick_out(rec.best_lifestyle),
        best_low_risk=_pick_out(rec.best_low_risk),
        reasoning=rec.reasoning,
        tradeoffs=[Tradeoff(**vars(t)) for t in rec.tradeoffs],
        all_ranked=[_scored_path_out(p) for p in rec.all_ranked],
    )


def list_paths(catalog: PathCatalog) -> CatalogResponse:
    return CatalogResponse(
        paths=[
            PathTemplateOut(
                id=t.id,
                name=t.name,
                education_cost=t.education_cost,
                years_of_school=t.years_of_school,
                starting_salary=t.starting_salary,
                salary_growth_rate=t.salary_growth_rate,
                living_cost=t.living_cost,
                structure=t.structure,
                creativity=t.creativity,
                work_life_balance=t.work_life_balance,
                location_flexibility=t.location_flexibility,
                skill_requirement=t.skill_requirement,
                interest_area=t.interest_area,
                risk_level=t.risk_level,
                description=t.description,
            )
            for t in catalog.all()
        ]
    )


def run_compare(payload: CompareRequest, catalog: PathCatalog, simulator: Simulator) -> CompareResponse:
    user_inputs = core.UserInputs(
        starting_savings=payload.user_inputs.starting_savings,
        monthly_lifestyle_cost=payload.user_inputs.monthly_lifestyle_cost,
        age=payload.user_inputs.age,
        risk_tolerance=str(payload.user_inputs.risk_tolerance),
    )

    compared: List[ComparedPath] = []
    for template in catalog.resolve(payload.selected_path_ids):
        result = simulator.simulate(user_inputs, template, payload.horizon_years)
        compared.append(
            ComparedPath(
                id=template.id,
                name=template.name,
                series=PathSeries(
                    yearly_income=_whole_amounts(result.income),
                    cumulative_net_cash=_whole_amounts(result.cumulative_net_worth),
                    yearly_debt=_whole_amounts(result.debt),
                ),
                summary=SimulationSummary(
                    **{name: _whole_amount(value) for name, value in vars(result.summary).items()}
                ),
                break_even_year=result.break_even_year,
            )
        )
    return CompareResponse(paths=compared, horizon_years=payload.horizon_years)


def run_evaluate(payload: EvaluateRequest, catalog: PathCatalog, simulator: Simulator) -> EvaluateResponse:
    if len(payload.paths) < MIN_EVALUATE_PATHS:
        raise core.ValidationError(f"Provide a user profile and at least {MIN_EVALUATE_PATHS} paths.")

    profile = core.UserProfile(**payload.user_profile.model_dump())
    if payload.preference_weights is None:
        weights = core.PreferenceWeights.default()
    else:
        weights = core.PreferenceWeights(**payload.preference_weights.model_dump())
    user_inputs = profile.to_user_inputs()

    scored: List[core.ScoredPath] = []
    for template in catalog.resolve(payload.paths):
        result = simulator.simulate(user_inputs, template, EVALUATE_HORIZON_YEARS)
        scores = score_path(profile, template, result)
        scored.append(
            core.ScoredPath(
                id=template.id,
                name=template.name,
                scores=scores,
                overall_score=combine_scores(scores, weights),
                result=result,
                template=template,
            )
        )

    recommendation = generate_final_recommendation(scored, profile, weights)
    logger.info(
        "evaluated %d of %d requested paths; best overall %s",
        len(scored),
        len(payload.paths),
        recommendation.best_overall.id if recommendation.best_overall else None,
    )
    return EvaluateResponse(
        recommendation=_recommendation_out(recommendation),
        scored_paths=[_scored_path_out(p) for p in scored],
    )
