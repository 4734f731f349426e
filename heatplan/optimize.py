import logging
import math
from collections import deque
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from typing import Optional

import numpy as np

from . import physics
from .constants import GRADIENT_FACTOR, MIN_SEED_SEGMENTS, TARGET_SEED_STEP
from .evaluate import SystemSpecification, evaluate_grid_point
from .options import heat_solar_pairs

_LOGGER = logging.getLogger(__name__)


class CostSurface:
    """
    Lazily evaluated net present cost over the (tes_option, solar_size) grid.

    `value(i, j)` calls the evaluator the first time a point is requested
    and returns the cached cost afterwards, so each point is simulated at
    most once per search.
    """

    def __init__(self, x_size, y_size, evaluate):
        if x_size < 1 or y_size < 1:
            raise ValueError(f"Grid must be at least 1x1, got {x_size}x{y_size}")
        self.x_size = x_size
        self.y_size = y_size
        self._evaluate = evaluate
        self._values = {}

    def value(self, i, j):
        key = (i, j)
        if key not in self._values:
            if not (0 <= i < self.x_size and 0 <= j < self.y_size):
                raise IndexError(f"Grid point {key} outside {self.x_size}x{self.y_size}")
            if self._evaluate is None:
                raise KeyError(f"Grid point {key} was not evaluated")
            self._values[key] = self._evaluate(i, j)
        return self._values[key]

    def get(self, i, j) -> Optional[float]:
        """Cached cost, or None if the point was never evaluated."""
        return self._values.get((i, j))

    def __contains__(self, key):
        return key in self._values

    def __len__(self):
        return len(self._values)

    @property
    def size(self):
        return self.x_size * self.y_size

    @property
    def min_value(self):
        return min(self._values.values()) if self._values else math.inf

    def freeze(self):
        """Drop the evaluator so the surface can be pickled and shared."""
        self._evaluate = None
        return self

    def to_array(self):
        """Rows are solar sizes, columns storage sizes; NaN where unevaluated."""
        arr = np.full((self.y_size, self.x_size), np.nan)
        for (i, j), cost in self._values.items():
            arr[j, i] = cost
        return arr


@dataclass
class SearchResult:
    specification: SystemSpecification
    surface: CostSurface


def linearly_space(extent, segments):
    """`segments + 1` integer points from 0 to `extent` inclusive, halves rounding down."""
    return [int(math.ceil(k * extent / segments - 0.5)) for k in range(segments + 1)]


def brute_force_search(surface):
    for j in range(surface.y_size):
        for i in range(surface.x_size):
            surface.value(i, j)
    return surface.min_value


def adaptive_surface_search(surface, *, gradient_factor=GRADIENT_FACTOR,
                            target_step=TARGET_SEED_STEP, min_segments=MIN_SEED_SEGMENTS):
    """
    Branch and bound over grid rectangles.

    A coarse seed grid gives the starting minimum and the steepest slope
    along each axis. A rectangle is split only while
    min(corners) - (slope_x * width + slope_y * height) is below the best
    cost found so far. Slopes are damped by `gradient_factor`, so sharp
    local dips can be missed.
    """
    xs = linearly_space(surface.x_size - 1, max(surface.x_size // target_step, min_segments))
    ys = linearly_space(surface.y_size - 1, max(surface.y_size // target_step, min_segments))

    rects = deque()
    slope_x = slope_y = 0.0
    for j1, j2 in zip(ys, ys[1:]):
        for i1, i2 in zip(xs, xs[1:]):
            rects.append((i1, j1, i2, j2))

    # Slopes come from the two edges leaving each seed rectangle's first corner
    for i1, j1, i2, j2 in rects:
        z11 = surface.value(i1, j1)
        z21 = surface.value(i2, j1)
        surface.value(i2, j2)
        z12 = surface.value(i1, j2)
        slope_x = max(slope_x, abs(z11 - z21) / (i2 - i1))
        slope_y = max(slope_y, abs(z11 - z12) / (j2 - j1))
    slope_x *= gradient_factor
    slope_y *= gradient_factor

    while rects:
        i1, j1, i2, j2 = rects.popleft()
        di, dj = i2 - i1, j2 - j1
        lowest_corner = min(surface.value(i1, j1), surface.value(i2, j1),
                            surface.value(i2, j2), surface.value(i1, j2))
        bound = lowest_corner - (slope_x * di + slope_y * dj)
        if bound >= surface.min_value:
            continue
        if di == 1 and dj == 1:
            continue

        if di == 1:
            j12 = j1 + dj // 2
            surface.value(i1, j12)
            surface.value(i2, j12)
            children = [(i1, j1, i2, j12), (i1, j12, i2, j2)]
        elif dj == 1:
            i12 = i1 + di // 2
            surface.value(i12, j1)
            surface.value(i12, j2)
            children = [(i1, j1, i12, j2), (i12, j1, i2, j2)]
        else:
            i12 = i1 + di // 2
            j12 = j1 + dj // 2
            surface.value(i12, j1)
            surface.value(i12, j2)
            surface.value(i1, j12)
            surface.value(i2, j12)
            surface.value(i12, j12)
            children = [(i1, j1, i12, j12), (i12, j1, i2, j12),
                        (i1, j12, i12, j2), (i12, j12, i2, j2)]

        for child in children:
            ci1, cj1, ci2, cj2 = child
            if not (ci2 - ci1 == 1 and cj2 - cj1 == 1):
                rects.append(child)

    return surface.min_value


def search_heat_solar_combination(context, heat_option, solar_option, *,
                                  use_surface_optimisation=True, trace=None) -> SearchResult:
    """
    Find the cheapest storage/solar sizing for one heat source and solar type.

    Args:
        trace: Optional list; every per-tariff specification evaluated is appended
    """
    x_size = context.tes_range
    y_size = physics.solar_size_range(solar_option, context.solar_maximum)
    best = None

    def evaluate(tes_option, solar_size):
        nonlocal best
        result = evaluate_grid_point(context, heat_option, solar_option, tes_option, solar_size)
        if trace is not None:
            trace.extend(result.candidates)
        if best is None or result.net_present_cost < best.net_present_cost:
            best = result.specification
        return result.net_present_cost

    surface = CostSurface(x_size, y_size, evaluate)
    if use_surface_optimisation and x_size > 3 and y_size > 3:
        adaptive_surface_search(surface)
    else:
        brute_force_search(surface)

    _LOGGER.debug("%s / %s: evaluated %d of %d grid points",
                  heat_option.value, solar_option.value, len(surface), surface.size)
    _LOGGER.info("%s / %s: %.2f m3 storage, %d m2 PV, %d m2 solar thermal, %s, NPC %.0f",
                 heat_option.value, solar_option.value, best.tes_volume, best.pv_size,
                 best.solar_thermal_size, best.tariff.value, best.net_present_cost)
    return SearchResult(specification=best, surface=surface.freeze())


def _search_task(args):
    context, heat_option, solar_option, use_surface_optimisation = args
    return search_heat_solar_combination(
        context, heat_option, solar_option, use_surface_optimisation=use_surface_optimisation)


def optimise_systems(context, config, trace=None):
    """
    Search all 21 heat/solar pairs.

    Pairs are independent, so with `config.use_multithreading` they run in
    a process pool; results keep the heat-major pair order either way.
    """
    pairs = heat_solar_pairs()
    if config.use_multithreading:
        _LOGGER.info("Searching %d heat/solar pairs on %d workers", len(pairs), config.max_workers)
        args_list = [(context, heat, solar, config.use_surface_optimisation) for heat, solar in pairs]
        with ProcessPoolExecutor(max_workers=config.max_workers) as executor:
            return list(executor.map(_search_task, args_list))

    return [
        search_heat_solar_combination(
            context, heat, solar,
            use_surface_optimisation=config.use_surface_optimisation,
            trace=trace,
        )
        for heat, solar in pairs
    ]
