from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

DEFAULT_AGE = 18
DEFAULT_STARTING_SAVINGS = 0.0
DEFAULT_MONTHLY_LIFESTYLE_COST = 1200.0
DEFAULT_RISK_TOLERANCE = "medium"


class ValidationError(Exception):
    """Caller input that the engine refuses to run with."""


class PathNotFoundError(KeyError):
    """Path id that is not in the catalog."""


@dataclass(frozen=True)
class PathTemplate:
    id: str
    name: str
    education_cost: float = 0.0
    years_of_school: int = 0
    starting_salary: float = 0.0
    salary_growth_rate: float = 0.0
    living_cost: Optional[float] = None
    structure: Optional[float] = None
    creativity: Optional[float] = None
    work_life_balance: Optional[float] = None
    location_flexibility: Optional[float] = None
    skill_requirement: Optional[float] = None
    interest_area: Optional[str] = None
    risk_level: Optional[str] = None
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PathTemplate":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            education_cost=data.get("educationCost", 0.0),
            years_of_school=data.get("yearsOfSchool", 0),
            starting_salary=data.get("startingSalary", 0.0),
            salary_growth_rate=data.get("salaryGrowthRate", 0.0),
            living_cost=data.get("livingCost"),
            structure=data.get("structure"),
            creativity=data.get("creativity"),
            work_life_balance=data.get("workLifeBalance"),
            location_flexibility=data.get("locationFlexibility"),
            skill_requirement=data.get("skillRequirement"),
            interest_area=data.get("interestArea"),
            risk_level=data.get("riskLevel"),
            description=data.get("description", ""),
        )


@dataclass(frozen=True)
class UserInputs:
    starting_savings: float = DEFAULT_STARTING_SAVINGS
    monthly_lifestyle_cost: float = DEFAULT_MONTHLY_LIFESTYLE_COST
    age: int = DEFAULT_AGE
    risk_tolerance: str = DEFAULT_RISK_TOLERANCE


@dataclass(frozen=True)
class UserProfile:
    age: Optional[int] = None
    starting_savings: Optional[float] = None
    monthly_lifestyle_cost: Optional[float] = None
    risk_tolerance: Optional[Any] = None
    structure_preference: Optional[float] = None
    creativity_preference: Optional[float] = None
    work_life_importance: Optional[float] = None
    location_importance: Optional[float] = None
    skill_confidence: Optional[float] = None
    interest_alignment: Optional[str] = None
    primary_interest: Optional[str] = None

    def to_user_inputs(self) -> UserInputs:
        # Falsy values fall back to the service defaults, matching how the
        # evaluate endpoint has always read the profile.
        return UserInputs(
            starting_savings=self.starting_savings or DEFAULT_STARTING_SAVINGS,
            monthly_lifestyle_cost=self.monthly_lifestyle_cost or DEFAULT_MONTHLY_LIFESTYLE_COST,
            age=self.age or DEFAULT_AGE,
            risk_tolerance=str(self.risk_tolerance or DEFAULT_RISK_TOLERANCE),
        )


@dataclass(frozen=True)
class ResolvedProfile:
    structure_preference: float = 5.0
    creativity_preference: float = 5.0
    work_life_importance: float = 5.0
    location_importance: float = 5.0
    skill_confidence: float = 5.0
    interest_alignment: str = "neutral"
    primary_interest: Optional[str] = None
    risk_tolerance: str = "medium"


@dataclass(frozen=True)
class PathTraits:
    structure: float = 5.0
    creativity: float = 5.0
    work_life_balance: float = 5.0
    location_flexibility: float = 5.0
    skill_requirement: float = 5.0
    interest_area: str = "general"
    risk_level: str = "medium"


@dataclass(frozen=True)
class SimulationSummary:
    total_earnings: float
    total_cost: float
    peak_debt: float
    net_cash_at_horizon: float


@dataclass(frozen=True)
class SimulationResult:
    horizon_years: int
    years_in_school: int
    income: Tuple[float, ...]
    education_cost: Tuple[float, ...]
    living_cost: Tuple[float, ...]
    net_cash_flow: Tuple[float, ...]
    cumulative_net_worth: Tuple[float, ...]
    debt: Tuple[float, ...]
    break_even_year: Optional[int]
    summary: SimulationSummary


@dataclass(frozen=True)
class Scores:
    financial: int = 0
    lifestyle: int = 0
    time_independence: int = 0
    alignment: int = 0

    def as_dict(self) -> Dict[str, int]:
        return {
            "financial": self.financial,
            "lifestyle": self.lifestyle,
            "timeIndependence": self.time_independence,
            "alignment": self.alignment,
        }


@dataclass(frozen=True)
class PreferenceWeights:
    financial_weight: float = 0.0
    lifestyle_weight: float = 0.0
    time_weight: float = 0.0
    alignment_weight: float = 0.0

    @classmethod
    def default(cls) -> "PreferenceWeights":
        return cls(financial_weight=40, lifestyle_weight=30, time_weight=20, alignment_weight=10)


@dataclass
class ScoredPath:
    id: str
    name: str
    scores: Scores
    overall_score: int
    result: Optional[SimulationResult] = None
    template: Optional[PathTemplate] = None


@dataclass(frozen=True)
class PathPick:
    id: str
    name: str
    score: int


@dataclass(frozen=True)
class Tradeoff:
    path_id: str
    path: str
    dimension: str
    gap: int
    insight: str


@dataclass
class Recommendation:
    best_overall: Optional[ScoredPath]
    best_financial: Optional[PathPick]
    best_lifestyle: Optional[PathPick]
    best_low_risk: Optional[PathPick]
    reasoning: str
    tradeoffs: List[Tradeoff] = field(default_factory=list)
    all_ranked: List[ScoredPath] = field(default_factory=list)
