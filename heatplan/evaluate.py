from dataclasses import dataclass
from typing import NamedTuple

from . import physics
from .options import HeatOption, SolarOption, Tariff
from .run_model import SystemConfiguration, run_annual_simulation


@dataclass(frozen=True)
class SystemSpecification:
    """A sized system on its tariff, with lifetime costs."""
    heat_option: HeatOption
    solar_option: SolarOption
    pv_size: int
    solar_thermal_size: int
    tes_volume: float
    tariff: Tariff
    operational_expenditure: float
    capital_expenditure: float
    net_present_cost: float
    operational_emissions: float


class GridPointResult(NamedTuple):
    net_present_cost: float
    specification: SystemSpecification   # Best tariff; first one wins a tie
    candidates: tuple                    # One specification per tariff, in Tariff order


def configure_system(context, heat_option, solar_option, tes_option, solar_size) -> SystemConfiguration:
    """Map grid indices onto panel/collector areas and tank volume."""
    return SystemConfiguration(
        heat_option=heat_option,
        solar_option=solar_option,
        pv_size=physics.pv_size(solar_option, solar_size, context.solar_maximum),
        solar_thermal_size=physics.solar_thermal_size(solar_option, solar_size),
        tes_volume=physics.tes_volume(tes_option),
        electrical_power=context.heat_source_power(heat_option),
    )


def net_present_cost(capital_expenditure, operational_expenditure, discount_factor):
    return capital_expenditure + operational_expenditure * discount_factor


def evaluate_grid_point(context, heat_option, solar_option, tes_option, solar_size) -> GridPointResult:
    """
    Simulate one grid point under every tariff and return the cheapest.
    Nothing outside the returned value is modified.
    """
    system = configure_system(context, heat_option, solar_option, tes_option, solar_size)
    capex = physics.capital_expenditure(
        heat_option, solar_option,
        electrical_power=system.electrical_power,
        panel_area=system.pv_size,
        collector_area=system.solar_thermal_size,
        volume=system.tes_volume,
    )
    storage = physics.ThermalStorage.from_volume(system.tes_volume)

    candidates = []
    best = None
    for tariff in Tariff:
        annual = run_annual_simulation(system, tariff, context, storage=storage)
        spec = SystemSpecification(
            heat_option=heat_option,
            solar_option=solar_option,
            pv_size=system.pv_size,
            solar_thermal_size=system.solar_thermal_size,
            tes_volume=system.tes_volume,
            tariff=tariff,
            operational_expenditure=annual.operational_expenditure,
            capital_expenditure=capex,
            net_present_cost=net_present_cost(
                capex, annual.operational_expenditure, context.cumulative_discount_factor),
            operational_emissions=annual.operational_emissions,
        )
        candidates.append(spec)
        if best is None or spec.net_present_cost < best.net_present_cost:
            best = spec

    return GridPointResult(best.net_present_cost, best, tuple(candidates))
