import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

import lifepath.simulator as simulator_module
from lifepath.catalog import PathCatalog
from lifepath.schemas import PathTemplate, UserInputs, ValidationError
from lifepath.simulator import SimulationCache, Simulator, cache_key, run_simulation

COLLEGE = PathTemplate(
    id="college",
    name="College",
    education_cost=80000,
    years_of_school=4,
    starting_salary=50000,
    salary_growth_rate=0.02,
)
SPIRAL_INPUTS = UserInputs(starting_savings=1000, monthly_lifestyle_cost=2000)


def test_debt_builds_through_school_then_is_paid_down():
    result = run_simulation(SPIRAL_INPUTS, COLLEGE, 10)

    assert result.debt[:4] == (43000, 87000, 131000, 175000)
    assert result.summary.peak_debt == 175000
    later = result.debt[3:]
    assert all(b < a for a, b in zip(later, later[1:]))
    assert result.debt[-1] == 3594
    assert result.cumulative_net_worth[-1] == -3594
    assert result.break_even_year is None


def test_salary_starts_unescalated_after_school():
    result = run_simulation(SPIRAL_INPUTS, COLLEGE, 10)

    assert result.income == (0, 0, 0, 0, 50000, 51000, 52020, 53060, 54122, 55204)
    assert result.education_cost[:4] == (20000,) * 4
    assert result.education_cost[4:] == (0,) * 6
    assert result.summary.total_earnings == 315406
    assert result.summary.total_cost == 80000 + 24000 * 10


def test_stipend_above_living_cost_breaks_even_in_first_year():
    template = PathTemplate(
        id="paid_training",
        name="Paid Training",
        education_cost=-30000,
        years_of_school=2,
        starting_salary=60000,
        salary_growth_rate=0.03,
        living_cost=1000,
    )
    inputs = UserInputs(starting_savings=0, monthly_lifestyle_cost=1500)

    result = run_simulation(inputs, template, 5)

    assert result.net_cash_flow[:2] == (3000, 3000)
    assert result.living_cost[:2] == (12000, 12000)
    assert result.living_cost[2:] == (18000, 18000, 18000)
    assert result.break_even_year == 1
    assert result.summary.peak_debt == 0
    assert result.cumulative_net_worth[-1] == 137454


def test_training_stipend_below_living_cost_borrows_until_work():
    template = PathTemplate(
        id="paid_training",
        name="Paid Training",
        education_cost=-20000,
        years_of_school=2,
        starting_salary=60000,
        salary_growth_rate=0.03,
        living_cost=1000,
    )
    inputs = UserInputs(starting_savings=0, monthly_lifestyle_cost=1500)

    result = run_simulation(inputs, template, 5)

    # The stipend (10k/yr) is credited but does not cover 12k/yr of living.
    assert result.education_cost[:2] == (-10000, -10000)
    assert result.net_cash_flow[:2] == (-2000, -2000)
    assert result.debt[:3] == (2000, 4000, 0)
    assert result.break_even_year == 3


def test_template_living_cost_of_zero_is_respected():
    template = PathTemplate(id="boarded", name="Boarded", years_of_school=2, living_cost=0)
    result = run_simulation(UserInputs(monthly_lifestyle_cost=1500), template, 3)

    assert result.living_cost == (0, 0, 18000)


def test_school_longer_than_horizon_is_all_school():
    template = PathTemplate(id="phd", name="PhD", education_cost=60000, years_of_school=6, starting_salary=90000)
    result = run_simulation(UserInputs(), template, 3)

    assert result.income == (0, 0, 0)
    assert result.education_cost == (10000, 10000, 10000)
    assert result.years_in_school == 6


@pytest.mark.parametrize("horizon", [0, -3, 2.5, True, "10", None])
def test_bad_horizon_is_rejected(horizon):
    with pytest.raises(ValidationError):
        run_simulation(UserInputs(), COLLEGE, horizon)
    with pytest.raises(ValidationError):
        Simulator().simulate(UserInputs(), COLLEGE, horizon)


def test_nan_salary_propagates_without_raising():
    template = PathTemplate(id="odd", name="Odd", starting_salary=float("nan"))
    result = run_simulation(UserInputs(), template, 3)

    assert all(math.isnan(v) for v in result.income)
    assert math.isnan(result.summary.net_cash_at_horizon)
    assert result.break_even_year is None


def test_simulation_is_deterministic():
    assert run_simulation(SPIRAL_INPUTS, COLLEGE, 10) == run_simulation(SPIRAL_INPUTS, COLLEGE, 10)


def _catalog_runs():
    inputs = [
        UserInputs(starting_savings=0, monthly_lifestyle_cost=1200),
        UserInputs(starting_savings=25000, monthly_lifestyle_cost=2500),
        UserInputs(starting_savings=500, monthly_lifestyle_cost=4500),
    ]
    for template in PathCatalog.from_json().all():
        for user_inputs in inputs:
            yield user_inputs, run_simulation(user_inputs, template, 12)


def test_waterfall_never_goes_negative():
    for user_inputs, result in _catalog_runs():
        for debt, net_worth in zip(result.debt, result.cumulative_net_worth):
            assert debt >= 0
            # cash = net worth + debt, and cash is only ever positive while debt is zero
            assert net_worth + debt >= 0
            if debt > 0:
                assert abs(net_worth + debt) <= 1


def test_break_even_is_the_first_qualifying_year():
    for user_inputs, result in _catalog_runs():
        worth = result.cumulative_net_worth
        target = user_inputs.starting_savings
        if result.break_even_year is None:
            assert all(w < target for w in worth)
            continue
        year = result.break_even_year
        assert worth[year - 1] >= target
        assert all(w < target for w in worth[: year - 1])


def test_same_triple_is_computed_once(monkeypatch):
    calls = []
    real = simulator_module.run_simulation

    def counting(*args):
        calls.append(args)
        return real(*args)

    monkeypatch.setattr(simulator_module, "run_simulation", counting)
    simulator = Simulator()

    first = simulator.simulate(SPIRAL_INPUTS, COLLEGE, 10)
    second = simulator.simulate(UserInputs(starting_savings=1000, monthly_lifestyle_cost=2000), COLLEGE, 10)

    assert first is second
    assert len(calls) == 1
    assert simulator.cache.hits == 1
    assert simulator.cache.misses == 1


def test_different_horizons_do_not_share_entries():
    simulator = Simulator()
    ten = simulator.simulate(SPIRAL_INPUTS, COLLEGE, 10)
    five = simulator.simulate(SPIRAL_INPUTS, COLLEGE, 5)

    assert ten is not five
    assert len(five.income) == 5
    assert len(simulator.cache) == 2


def test_age_and_risk_do_not_split_the_cache():
    older = UserInputs(starting_savings=1000, monthly_lifestyle_cost=2000, age=40, risk_tolerance="high")
    assert cache_key(older, COLLEGE, 10) == cache_key(SPIRAL_INPUTS, COLLEGE, 10)


def test_nan_inputs_reuse_one_cache_entry():
    simulator = Simulator()
    template = PathTemplate(id="odd", name="Odd", starting_salary=float("nan"))

    first = simulator.simulate(UserInputs(starting_savings=float("nan")), template, 3)
    second = simulator.simulate(UserInputs(starting_savings=float("nan")), template, 3)

    assert second is first
    assert len(simulator.cache) == 1
    assert simulator.cache.hits == 1


def test_cache_evicts_least_recently_used():
    cache = SimulationCache(max_entries=2)
    simulator = Simulator(cache)
    simulator.simulate(SPIRAL_INPUTS, COLLEGE, 3)
    simulator.simulate(SPIRAL_INPUTS, COLLEGE, 4)
    simulator.simulate(SPIRAL_INPUTS, COLLEGE, 3)
    simulator.simulate(SPIRAL_INPUTS, COLLEGE, 5)

    assert len(cache) == 2
    assert cache_key(SPIRAL_INPUTS, COLLEGE, 4) not in cache
    assert cache_key(SPIRAL_INPUTS, COLLEGE, 3) in cache


def test_concurrent_callers_share_one_computation(monkeypatch):
    calls = []
    lock = threading.Lock()
    real = simulator_module.run_simulation

    def slow(*args):
        with lock:
            calls.append(args)
        time.sleep(0.05)
        return real(*args)

    monkeypatch.setattr(simulator_module, "run_simulation", slow)
    simulator = Simulator()

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: simulator.simulate(SPIRAL_INPUTS, COLLEGE, 10), range(16)))

    assert len(calls) == 1
    assert all(r is results[0] for r in results)


def test_failed_computation_is_not_cached(monkeypatch):
    def broken(*args):
        raise RuntimeError("boom")

    simulator = Simulator()
    monkeypatch.setattr(simulator_module, "run_simulation", broken)
    with pytest.raises(RuntimeError):
        simulator.simulate(SPIRAL_INPUTS, COLLEGE, 10)
    monkeypatch.undo()

    assert simulator.simulate(SPIRAL_INPUTS, COLLEGE, 10).debt[3] == 175000
