import logging
import math
import threading
from collections import OrderedDict
from typing import Any, Callable, Dict, Hashable, List, Optional, Tuple

from .schemas import (
    PathTemplate,
    SimulationResult,
    SimulationSummary,
    UserInputs,
    ValidationError,
)
from .utils import round_money

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 512


def _validate_horizon(horizon_years: Any) -> int:
    if isinstance(horizon_years, bool) or not isinstance(horizon_years, int):
        raise ValidationError(f"horizon_years must be a positive integer, got {horizon_years!r}")
    if horizon_years <= 0:
        raise ValidationError(f"horizon_years must be a positive integer, got {horizon_years}")
    return horizon_years


def _apply_cash_flow(cash: float, debt: float, net_flow: float) -> Tuple[float, float]:
    if net_flow >= 0:
        # Surplus clears debt before it is banked.
        debt_payment = min(debt, net_flow)
        return cash + (net_flow - debt_payment), debt - debt_payment
    shortfall = -net_flow
    if cash >= shortfall:
        return cash - shortfall, debt
    return 0.0, debt + (shortfall - cash)


def run_simulation(user_inputs: UserInputs, template: PathTemplate, horizon_years: int) -> SimulationResult:
    """Project one path year by year.

    The school phase covers years 1..years_of_school and carries the annualized
    education cost; after it the path earns its salary, escalated once per
    working year. Cash and debt are carried at full precision; only the
    reported series are rounded.
    """
    horizon_years = _validate_horizon(horizon_years)

    starting_savings = user_inputs.starting_savings
    annual_lifestyle = user_inputs.monthly_lifestyle_cost * 12
    years_of_school = template.years_of_school
    annual_education_cost = template.education_cost / years_of_school if years_of_school > 0 else 0.0
    school_monthly_living = (
        template.living_cost if template.living_cost is not None else user_inputs.monthly_lifestyle_cost
    )

    series: Dict[str, List[float]] = {
        "income": [],
        "education_cost": [],
        "living_cost": [],
        "net_cash_flow": [],
        "cumulative_net_worth": [],
        "debt": [],
    }

    cash = starting_savings
    debt = 0.0
    peak_debt = 0.0
    break_even_year: Optional[int] = None

    for year in range(1, horizon_years + 1):
        if year <= years_of_school:
            income = 0.0
            education_cost = annual_education_cost
            living_cost = school_monthly_living * 12
        else:
            years_working = year - years_of_school
            income = template.starting_salary * (1 + template.salary_growth_rate) ** (years_working - 1)
            education_cost = 0.0
            living_cost = annual_lifestyle

        # A negative education cost (stipend) adds to the year's flow.
        net_flow = income - living_cost - education_cost
        cash, debt = _apply_cash_flow(cash, debt, net_flow)

        if debt > peak_debt:
            peak_debt = debt

        net_worth = cash - debt
        if break_even_year is None and net_worth >= starting_savings:
            break_even_year = year

        series["income"].append(round_money(income))
        series["education_cost"].append(round_money(education_cost))
        series["living_cost"].append(round_money(living_cost))
        series["net_cash_flow"].append(round_money(net_flow))
        series["cumulative_net_worth"].append(round_money(net_worth))
        series["debt"].append(round_money(debt))

    summary = SimulationSummary(
        total_earnings=sum(series["income"]),
        total_cost=sum(series["education_cost"]) + sum(series["living_cost"]),
        peak_debt=round_money(peak_debt),
        net_cash_at_horizon=series["cumulative_net_worth"][-1],
    )
    return SimulationResult(
        horizon_years=horizon_years,
        years_in_school=years_of_school,
        income=tuple(series["income"]),
        education_cost=tuple(series["education_cost"]),
        living_cost=tuple(series["living_cost"]),
        net_cash_flow=tuple(series["net_cash_flow"]),
        cumulative_net_worth=tuple(series["cumulative_net_worth"]),
        debt=tuple(series["debt"]),
        break_even_year=break_even_year,
        summary=summary,
    )


def _key_part(value: Any) -> Hashable:
    # NaN never equals itself, so it would never hit.
    if isinstance(value, float) and math.isnan(value):
        return "nan"
    return value


def cache_key(user_inputs: UserInputs, template: PathTemplate, horizon_years: int) -> Tuple[Hashable, ...]:
    # Only the fields the year loop reads; age and risk tolerance never change the result.
    return tuple(
        _key_part(value)
        for value in (
            user_inputs.starting_savings,
            user_inputs.monthly_lifestyle_cost,
            template.id,
            template.education_cost,
            template.years_of_school,
            template.starting_salary,
            template.salary_growth_rate,
            template.living_cost,
            horizon_years,
        )
    )


class SimulationCache:
    """LRU map from simulation key to result, safe for concurrent callers.

    A key being computed is tracked as in flight; other callers asking for the
    same key wait for it instead of computing it again.
    """

    def __init__(self, max_entries: Optional[int] = DEFAULT_CACHE_SIZE):
        if max_entries is not None and max_entries <= 0:
            max_entries = None
        self.max_entries = max_entries
        self.hits = 0
        self.misses = 0
        self._entries: "OrderedDict[Hashable, SimulationResult]" = OrderedDict()
        self._in_flight: Dict[Hashable, threading.Event] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def get_or_compute(self, key: Hashable, compute: Callable[[], SimulationResult]) -> SimulationResult:
        while True:
            with self._lock:
                if key in self._entries:
                    self._entries.move_to_end(key)
                    self.hits += 1
                    return self._entries[key]
                pending = self._in_flight.get(key)
                if pending is None:
                    pending = threading.Event()
                    self._in_flight[key] = pending
                    owner = True
                else:
                    owner = False

            if not owner:
                pending.wait()
                continue

            try:
                value = compute()
            except BaseException:
                with self._lock:
                    del self._in_flight[key]
                pending.set()
                raise

            with self._lock:
                self.misses += 1
                self._entries[key] = value
                if self.max_entries is not None:
                    while len(self._entries) > self.max_entries:
                        self._entries.popitem(last=False)
                del self._in_flight[key]
            pending.set()
            return value


class Simulator:
    def __init__(self, cache: Optional[SimulationCache] = None):
        self.cache = cache if cache is not None else SimulationCache()

    def simulate(self, user_inputs: UserInputs, template: PathTemplate, horizon_years: int) -> SimulationResult:
        horizon_years = _validate_horizon(horizon_years)
        key = cache_key(user_inputs, template, horizon_years)

        def compute() -> SimulationResult:
            logger.debug("simulating path %s over %d years", template.id, horizon_years)
            return run_simulation(user_inputs, template, horizon_years)

        return self.cache.get_or_compute(key, compute)
