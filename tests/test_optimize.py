import pickle
from collections import Counter

import numpy as np
import pytest

from heatplan.config import SimulationConfig
from heatplan.optimize import (
    CostSurface,
    adaptive_surface_search,
    brute_force_search,
    linearly_space,
    optimise_systems,
    search_heat_solar_combination,
)
from heatplan.options import HeatOption, SolarOption, heat_solar_pairs


def counting(func):
    calls = Counter()

    def evaluate(i, j):
        calls[(i, j)] += 1
        return func(i, j)
    return evaluate, calls


def bowl(ci, cj, a=1.0, b=1.0, offset=100.0):
    return lambda i, j: offset + a * (i - ci) ** 2 + b * (j - cj) ** 2


def test_linearly_space():
    assert linearly_space(4, 3) == [0, 1, 3, 4]
    assert linearly_space(19, 3) == [0, 6, 13, 19]
    assert linearly_space(6, 3) == [0, 2, 4, 6]


def test_surface_memoises():
    evaluate, calls = counting(bowl(1, 1))
    surface = CostSurface(3, 3, evaluate)
    assert surface.value(1, 2) == surface.value(1, 2)
    assert calls[(1, 2)] == 1
    assert (1, 2) in surface and (0, 0) not in surface
    assert surface.get(0, 0) is None
    with pytest.raises(IndexError):
        surface.value(3, 0)


def test_surface_to_array_marks_unevaluated_cells():
    surface = CostSurface(3, 2, lambda i, j: float(i + 10 * j))
    surface.value(2, 1)
    arr = surface.to_array()
    assert arr.shape == (2, 3)
    assert arr[1, 2] == 12.0
    assert np.isnan(arr[0, 0])


def test_frozen_surface_pickles():
    surface = CostSurface(2, 2, lambda i, j: 1.0)
    surface.value(0, 0)
    restored = pickle.loads(pickle.dumps(surface.freeze()))
    assert restored.get(0, 0) == 1.0
    with pytest.raises(KeyError):
        restored.value(1, 1)


@pytest.mark.parametrize("x_size, y_size, ci, cj", [
    (5, 5, 2, 3),
    (7, 5, 6, 0),
    (12, 9, 3, 7),
    (20, 15, 13, 4),
])
def test_adaptive_matches_brute_force_on_bowls(x_size, y_size, ci, cj):
    func = bowl(ci, cj, a=2.0, b=0.5)
    brute = brute_force_search(CostSurface(x_size, y_size, func))

    evaluate, calls = counting(func)
    surface = CostSurface(x_size, y_size, evaluate)
    adaptive = adaptive_surface_search(surface)

    assert adaptive == pytest.approx(brute)
    # Every point is evaluated at most once
    assert max(calls.values()) == 1
    assert len(surface) == len(calls)


def test_seed_grid_is_visited_row_by_row():
    evaluate, calls = counting(bowl(3, 3))
    adaptive_surface_search(CostSurface(7, 7, evaluate))
    # Seed points 0, 2, 4, 6 on each axis; corners go (i1,j1), (i2,j1), (i2,j2), (i1,j2)
    assert list(calls)[:16] == [
        (0, 0), (2, 0), (2, 2), (0, 2), (4, 0), (4, 2), (6, 0), (6, 2),
        (2, 4), (0, 4), (4, 4), (6, 4),
        (2, 6), (0, 6), (4, 6), (6, 6),
    ]


def test_adaptive_search_skips_cells_on_a_large_grid():
    surface = CostSurface(30, 30, bowl(20, 10))
    adaptive_surface_search(surface)
    assert len(surface) < surface.size


def test_adaptive_never_reports_below_true_minimum():
    # Narrow dip the damped slope bound is allowed to miss
    def spiky(i, j):
        return 0.0 if (i, j) == (9, 9) else 100.0 + i + j
    brute = brute_force_search(CostSurface(12, 12, spiky))
    adaptive = adaptive_surface_search(CostSurface(12, 12, spiky))
    assert adaptive >= brute


def test_search_falls_back_to_brute_force_on_small_grids(make_context):
    # 0.3 m3 gives three storage options
    context = make_context(tes_volume_max=0.3)
    result = search_heat_solar_combination(context, HeatOption.ELECTRIC_RESISTANCE, SolarOption.NONE)
    assert len(result.surface) == result.surface.size == 3
    assert result.specification.net_present_cost == pytest.approx(result.surface.min_value)


def test_search_records_every_tariff_in_trace(make_context):
    context = make_context(tes_volume_max=0.2)
    trace = []
    result = search_heat_solar_combination(
        context, HeatOption.AIR_SOURCE_HEAT_PUMP, SolarOption.NONE,
        use_surface_optimisation=False, trace=trace)
    assert len(trace) == 2 * 5
    assert min(spec.net_present_cost for spec in trace) == pytest.approx(result.specification.net_present_cost)


def test_more_storage_options_never_cost_more(make_context):
    small = search_heat_solar_combination(
        make_context(tes_volume_max=0.3), HeatOption.ELECTRIC_RESISTANCE, SolarOption.NONE)
    large = search_heat_solar_combination(
        make_context(tes_volume_max=0.5), HeatOption.ELECTRIC_RESISTANCE, SolarOption.NONE)
    assert large.specification.net_present_cost <= small.specification.net_present_cost + 1e-9


def test_adaptive_search_on_a_real_pair(make_context):
    # 40 m2 gives a 5x5 grid for PV, small enough to brute force
    context = make_context(hours=48, house_size=40.0, solar_irradiance=200.0)
    exhaustive = search_heat_solar_combination(
        context, HeatOption.AIR_SOURCE_HEAT_PUMP, SolarOption.PHOTOVOLTAIC, use_surface_optimisation=False)
    adaptive = search_heat_solar_combination(
        context, HeatOption.AIR_SOURCE_HEAT_PUMP, SolarOption.PHOTOVOLTAIC, use_surface_optimisation=True)
    assert exhaustive.surface.size == 25
    assert len(exhaustive.surface) == 25
    assert len(adaptive.surface) <= 25
    assert adaptive.specification.net_present_cost >= exhaustive.specification.net_present_cost - 1e-6
    assert adaptive.specification.net_present_cost == pytest.approx(adaptive.surface.min_value)


def test_optimise_systems_keeps_pair_order(make_context):
    context = make_context(hours=24, house_size=24.0, tes_volume_max=0.2)
    results = optimise_systems(context, SimulationConfig(use_multithreading=False))
    pairs = [(r.specification.heat_option, r.specification.solar_option) for r in results]
    assert pairs == heat_solar_pairs()


def test_parallel_search_matches_serial(make_context):
    context = make_context(hours=24, house_size=24.0, tes_volume_max=0.2)
    serial = optimise_systems(context, SimulationConfig(use_multithreading=False))
    parallel = optimise_systems(context, SimulationConfig(use_multithreading=True, max_workers=2))
    assert [r.specification for r in parallel] == [r.specification for r in serial]
