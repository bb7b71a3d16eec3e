from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import DEFAULT_HORIZON_YEARS, MAX_HORIZON_YEARS


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserInputs(CamelModel):
    age: int = Field(default=18, ge=0)
    starting_savings: float = Field(default=0.0, ge=0)
    monthly_lifestyle_cost: float = Field(default=1200.0, ge=0)
    risk_tolerance: Union[str, int] = "medium"


class UserProfile(CamelModel):
    age: Optional[int] = Field(default=None, ge=0)
    starting_savings: Optional[float] = Field(default=None, ge=0)
    monthly_lifestyle_cost: Optional[float] = Field(default=None, ge=0)
    risk_tolerance: Optional[Union[str, int]] = None
    structure_preference: Optional[float] = None
    creativity_preference: Optional[float] = None
    work_life_importance: Optional[float] = None
    location_importance: Optional[float] = None
    skill_confidence: Optional[float] = None
    interest_alignment: Optional[str] = None
    primary_interest: Optional[str] = None


class PreferenceWeights(CamelModel):
    financial_weight: float = 0.0
    lifestyle_weight: float = 0.0
    time_weight: float = 0.0
    alignment_weight: float = 0.0


class CompareRequest(CamelModel):
    user_inputs: UserInputs
    selected_path_ids: List[str]
    horizon_years: int = Field(default=DEFAULT_HORIZON_YEARS, gt=0, le=MAX_HORIZON_YEARS)


class EvaluateRequest(CamelModel):
    user_profile: UserProfile
    paths: List[str]
    preference_weights: Optional[PreferenceWeights] = None


class PathSeries(CamelModel):
    # Degenerate inputs can overflow a year; those entries are null.
    yearly_income: List[Optional[int]]
    cumulative_net_cash: List[Optional[int]]
    yearly_debt: List[Optional[int]]


class SimulationSummary(CamelModel):
    total_earnings: Optional[int] = None
    total_cost: Optional[int] = None
    peak_debt: Optional[int] = None
    net_cash_at_horizon: Optional[int] = None


class ComparedPath(CamelModel):
    id: str
    name: str
    series: PathSeries
    summary: SimulationSummary
    break_even_year: Optional[int] = None


class CompareResponse(CamelModel):
    paths: List[ComparedPath]
    horizon_years: int


class Scores(CamelModel):
    financial: int
    lifestyle: int
    time_independence: int
    alignment: int


class ScoredPath(CamelModel):
    id: str
    name: str
    scores: Scores
    overall_score: int


class PathPick(CamelModel):
    id: str
    name: str
    score: int


class Tradeoff(CamelModel):
    path_id: str
    path: str
    dimension: str
    gap: int
    insight: str


class Recommendation(CamelModel):
    best_overall: Optional[ScoredPath] = None
    best_financial: Optional[PathPick] = None
    best_lifestyle: Optional[PathPick] = None
    best_low_risk: Optional[PathPick] = None
    reasoning: str
    tradeoffs: List[Tradeoff] = []
    all_ranked: List[ScoredPath] = []


class EvaluateResponse(CamelModel):
    recommendation: Recommendation
    scored_paths: List[ScoredPath]


class PathTemplateOut(CamelModel):
    id: str
    name: str
    education_cost: float
    years_of_school: int
    starting_salary: float
    salary_growth_rate: float
    living_cost: Optional[float] = None
    structure: Optional[float] = None
    creativity: Optional[float] = None
    work_life_balance: Optional[float] = None
    location_flexibility: Optional[float] = None
    skill_requirement: Optional[float] = None
    interest_area: Optional[str] = None
    risk_level: Optional[str] = None
    description: str = ""


class CatalogResponse(CamelModel):
    paths: List[PathTemplateOut]
