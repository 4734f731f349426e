"""
Top level driver: derive the shared context once, search every heat/solar
pair, then assemble the report.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from . import physics
from .boilers import compare_heat_only_systems
from .building import (
    Building,
    HouseInputs,
    YearlyDemand,
    build_building,
    calculate_demand,
    calibrate_thermal_transmittance,
)
from .constants import DISCOUNT_RATE, NPC_YEARS, TES_VOLUME_STEP
from .measurements import WeatherData
from .optimize import optimise_systems
from .options import HeatOption
from .regions import coldest_outside_temperature, epc_climate, region_for_postcode
from .results import Report, save_node_trace, save_surfaces

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SimulationContext:
    """Everything a grid point evaluation reads. Never mutated after creation."""
    inputs: HouseInputs
    building: Building
    region: int
    epc_demand: Optional[float]
    erh_demand: YearlyDemand
    hp_demand: YearlyDemand
    coldest_outside_temperature: float
    solar_maximum: int
    tes_range: int
    cumulative_discount_factor: float
    heat_source_powers: dict
    outside_temperatures: tuple
    solar_irradiances: tuple
    agile_prices: tuple
    hot_water_demands: tuple

    def thermostat_for(self, heat_option):
        if heat_option is HeatOption.ELECTRIC_RESISTANCE:
            return self.building.erh_thermostat
        return self.building.hp_thermostat

    def heat_source_power(self, heat_option):
        return self.heat_source_powers[heat_option]


def cumulative_discount_factor(rate=DISCOUNT_RATE, years=NPC_YEARS):
    """Present value of 1 per year for `years` years, first year undiscounted."""
    return sum(1.0 / rate ** year for year in range(years))


def prepare_context(inputs, weather: WeatherData, *, thermal_transmittance=None,
                    coldest_temperature=None) -> SimulationContext:
    """
    Args:
        thermal_transmittance: Skip EPC calibration and use this U-value
        coldest_temperature: Override the coldest-hour lookup for the location

    Raises:
        RegionNotFoundError: Postcode is not in any climate region
        WeatherNotFoundError: No coldest temperature record for the location
    """
    region = region_for_postcode(inputs.postcode)
    if coldest_temperature is None:
        coldest_temperature = coldest_outside_temperature(inputs.latitude, inputs.longitude)

    epc_demand = None
    if thermal_transmittance is None:
        epc_temperatures, epc_irradiances = epc_climate(region)
        thermal_transmittance, epc_demand = calibrate_thermal_transmittance(
            inputs, epc_temperatures, epc_irradiances)

    building = build_building(inputs, thermal_transmittance)
    erh_demand = calculate_demand(building, weather, building.erh_thermostat)
    hp_demand = calculate_demand(building, weather, building.hp_thermostat)

    powers = {
        heat: physics.heat_source_power(
            heat,
            erh_max_hourly_demand=erh_demand.max_hourly,
            hp_max_hourly_demand=hp_demand.max_hourly,
            coldest_outside_temperature=coldest_temperature,
            ground_temperature=building.ground_temperature,
        )
        for heat in HeatOption
    }

    context = SimulationContext(
        inputs=inputs,
        building=building,
        region=region,
        epc_demand=epc_demand,
        erh_demand=erh_demand,
        hp_demand=hp_demand,
        coldest_outside_temperature=coldest_temperature,
        solar_maximum=int(inputs.house_size / 8) * 2,  # A quarter of the floor area as roof, even
        tes_range=int((inputs.tes_volume_max + 0.01) / TES_VOLUME_STEP),
        cumulative_discount_factor=cumulative_discount_factor(),
        heat_source_powers=powers,
        outside_temperatures=tuple(weather.outside_temperatures.tolist()),
        solar_irradiances=tuple(weather.solar_irradiances.tolist()),
        agile_prices=tuple(weather.agile_prices.tolist()),
        hot_water_demands=building.hot_water_demands(),
    )
    return context


def _log_intermediates(context):
    building = context.building
    _LOGGER.debug("region: %d", context.region)
    _LOGGER.debug("thermal_transmittance: %.2f", building.thermal_transmittance)
    _LOGGER.debug("heat_capacity: %.3f kWh/K", building.heat_capacity)
    _LOGGER.debug("body_heat_gain: %.3f kW", building.body_heat_gain)
    _LOGGER.debug("solar_gain_ratios_north: %s", building.solar_gain_ratios_north.tolist())
    _LOGGER.debug("solar_gain_ratios_south: %s", building.solar_gain_ratios_south.tolist())
    _LOGGER.debug("roof_ratios_south: %s", building.roof_ratios_south.tolist())
    _LOGGER.debug("daily_hot_water_volume: %.1f L", building.daily_hot_water_volume)
    _LOGGER.debug("erh demand: %s", context.erh_demand)
    _LOGGER.debug("hp demand: %s", context.hp_demand)
    _LOGGER.debug("coldest_outside_temperature: %.3f", context.coldest_outside_temperature)
    _LOGGER.debug("ground_temperature: %.3f", building.ground_temperature)
    _LOGGER.debug("tes_range: %d, solar_maximum: %d", context.tes_range, context.solar_maximum)
    _LOGGER.debug("cumulative_discount_factor: %.4f", context.cumulative_discount_factor)
    _LOGGER.debug("heat_source_powers: %s",
                  {heat.value: round(power, 3) for heat, power in context.heat_source_powers.items()})


def run_simulation(inputs, weather, config, *, context=None) -> Report:
    """
    Optimise every heat/solar pair for one house and return the report.
    `context` may be passed to reuse an already prepared one.
    """
    config.validate()
    if context is None:
        context = prepare_context(inputs, weather)
    if config.print_intermediates:
        _log_intermediates(context)

    trace = [] if config.save_all_nodes else None
    results = optimise_systems(context, config, trace=trace)

    if trace is not None:
        save_node_trace(config.save_all_nodes, trace)
    if config.save_surfaces:
        os.makedirs(config.save_surfaces, exist_ok=True)
        save_surfaces(config.save_surfaces, results)

    comparisons = compare_heat_only_systems(
        erh_yearly_demand=context.erh_demand.total,
        hp_yearly_demand=context.hp_demand.total,
        epc_space_heating=inputs.epc_space_heating,
        discount_factor=context.cumulative_discount_factor,
    )

    return Report(
        inputs=inputs,
        thermal_transmittance=context.building.thermal_transmittance,
        epc_demand=context.epc_demand,
        erh_demand=context.erh_demand,
        hp_demand=context.hp_demand,
        specifications=[result.specification for result in results],
        comparisons=comparisons,
        search_results=results,
    )
