from dataclasses import dataclass
from typing import NamedTuple

from . import physics
from .constants import HOURS_PER_DAY
from .options import HeatOption, SolarOption
from .profiles import HOUR_MONTHS


@dataclass(frozen=True)
class SystemConfiguration:
    """One fully sized candidate system (everything except the tariff)."""
    heat_option: HeatOption
    solar_option: SolarOption
    pv_size: int              # m²
    solar_thermal_size: int   # m²
    tes_volume: float         # m³
    electrical_power: float   # kW, heat source rating


@dataclass
class SimulationState:
    """Mutable state owned by one annual run."""
    inside_temperature: float
    tes_charge: float


class HourResult(NamedTuple):
    cost_peak: float
    cost_off_peak: float
    emissions: float
    electrical_import: float
    pv_generation: float
    pv_export: float
    solar_thermal_generation: float


@dataclass(frozen=True)
class AnnualResult:
    operational_expenditure: float  # £/year
    cost_peak: float
    cost_off_peak: float
    operational_emissions: float    # gCO2e/year
    electrical_import: float        # kWh/year
    peak_electrical_import: float   # kWh in the worst hour
    pv_generation: float
    solar_thermal_generation: float


def simulate_hour(state, system, storage, tariff, building, *, hour, month, outside_temperature,
                  solar_irradiance, agile_price, thermostat_temperature, hot_water_demand):
    """
    Advance `state` by one hour and return the hour's cost and emissions.

    Order: building heat balance, storage standby losses, solar generation,
    space heating (storage first), electrical demand, off-peak top-up,
    PV boost, minimum charge, PV netting, then cost and emissions.
    Undersupply is accepted when storage and heat source both run out.
    """
    heat_capacity = building.heat_capacity

    # Building heat balance
    solar_gain = (solar_irradiance * building.solar_gain_ratios_south[month] * building.solar_gain_house_factor
                  + solar_irradiance * building.solar_gain_ratios_north[month] * building.solar_gain_house_factor)
    heat_loss = building.heat_loss_coefficient * (state.inside_temperature - outside_temperature)
    inside_temperature = state.inside_temperature + (-heat_loss + solar_gain + building.body_heat_gain) / heat_capacity

    # Standby losses go into the room
    upper, lower, height = storage.layers(state.tes_charge, building.cold_water_temperatures[month])
    losses = storage.standby_losses(upper, lower, height, inside_temperature)
    charge = max(state.tes_charge - losses, 0.0)
    inside_temperature += (state.tes_charge - charge) / heat_capacity

    cop, cop_boost = physics.hourly_cops(system.heat_option, outside_temperature, building.ground_temperature)

    incident_irradiance = solar_irradiance * building.roof_ratios_south[month] / 1000.0
    pv_generation = physics.pv_generation(
        system.solar_option, system.pv_size, incident_irradiance, upper, lower)
    solar_thermal_generation = physics.solar_thermal_generation(
        system.solar_option, system.solar_thermal_size, incident_irradiance, upper, lower,
        outside_temperature)
    # Excess solar heat is dumped
    charge = min(charge + solar_thermal_generation, storage.charge_max)

    power = system.electrical_power
    capacity = power * cop

    # Space heating
    if inside_temperature > thermostat_temperature:
        space_demand = 0.0
    else:
        space_demand = (thermostat_temperature - inside_temperature) * heat_capacity
        if space_demand + hot_water_demand < charge + capacity:
            inside_temperature = thermostat_temperature
        else:
            space_demand = charge + capacity - hot_water_demand
            inside_temperature += space_demand / heat_capacity

    # Electrical demand, drawing storage first
    demand = space_demand + hot_water_demand
    if demand < charge:
        charge -= demand
        electrical_demand = 0.0
    elif demand < charge + capacity:
        electrical_demand = (demand - charge) / cop
        charge = 0.0
    else:
        charge = 0.0
        electrical_demand = power

    # Off-peak top-up to nominal full
    if charge < storage.charge_full and physics.is_charging_window(tariff, hour, agile_price):
        top_up = storage.charge_full - charge
        if top_up < (power - electrical_demand) * cop:
            electrical_demand += top_up / cop
            charge = storage.charge_full
        else:
            charge += (power - electrical_demand) * cop
            electrical_demand = power

    # Spare PV raises the tank to the boost band
    pv_remaining = pv_generation - electrical_demand
    boost_gap = storage.charge_boost - charge
    if pv_remaining > 0.0 and boost_gap > 0.0:
        spare = power - electrical_demand
        if boost_gap < pv_remaining * cop_boost and boost_gap < spare * cop_boost:
            electrical_demand += boost_gap / cop_boost
            charge = storage.charge_boost
        elif pv_remaining < spare:
            charge += pv_remaining * cop_boost
            electrical_demand += pv_remaining
        else:
            charge += spare * cop_boost
            electrical_demand = power

    # Keep a minimum of hot water whatever the time
    if charge < storage.charge_min:
        if storage.charge_min - charge < (power - electrical_demand) * cop:
            electrical_demand += (storage.charge_min - charge) / cop
            charge = storage.charge_min
        elif electrical_demand < power:
            charge += (power - electrical_demand) * cop
            electrical_demand = power

    if pv_generation > electrical_demand:
        pv_export, electrical_import = pv_generation - electrical_demand, 0.0
    else:
        pv_export, electrical_import = 0.0, electrical_demand - pv_generation

    import_rate, export_rate, off_peak = physics.tariff_rates(tariff, hour, agile_price)
    cost = electrical_import * import_rate - pv_export * export_rate

    emissions = physics.hourly_emissions(
        electrical_import=electrical_import,
        pv_generated=pv_generation,
        pv_exported=pv_export,
        solar_thermal_generated=solar_thermal_generation,
        has_pv=system.pv_size > 0,
    )

    state.inside_temperature = inside_temperature
    state.tes_charge = charge
    return HourResult(
        cost_peak=0.0 if off_peak else cost,
        cost_off_peak=cost if off_peak else 0.0,
        emissions=emissions,
        electrical_import=electrical_import,
        pv_generation=pv_generation,
        pv_export=pv_export,
        solar_thermal_generation=solar_thermal_generation,
    )


def run_annual_simulation(system, tariff, context, *, storage=None, observer=None) -> AnnualResult:
    """
    Run `system` on `tariff` over every hour of the context's weather.

    Args:
        system: SystemConfiguration
        tariff: Tariff
        context: SimulationContext with building, weather and hot water tables
        storage: Prebuilt ThermalStorage for system.tes_volume (optional)
        observer: Called as observer(hour_index, state, hour_result) after each hour
    """
    building = context.building
    if storage is None:
        storage = physics.ThermalStorage.from_volume(system.tes_volume)

    # Building starts at set-point and the tank full, avoiding a start-up spike
    state = SimulationState(
        inside_temperature=context.inputs.thermostat_temperature,
        tes_charge=storage.charge_full,
    )
    thermostat = context.thermostat_for(system.heat_option).tolist()
    hot_water = context.hot_water_demands
    t_out = context.outside_temperatures
    irradiance = context.solar_irradiances
    prices = context.agile_prices

    cost_peak = cost_off_peak = emissions = imported = peak_import = 0.0
    pv_total = solar_thermal_total = 0.0
    for idx in range(len(t_out)):
        hour = idx % HOURS_PER_DAY
        month = HOUR_MONTHS[idx]
        result = simulate_hour(
            state, system, storage, tariff, building,
            hour=hour,
            month=month,
            outside_temperature=t_out[idx],
            solar_irradiance=irradiance[idx],
            agile_price=prices[idx],
            thermostat_temperature=thermostat[hour],
            hot_water_demand=hot_water[month][hour],
        )
        cost_peak += result.cost_peak
        cost_off_peak += result.cost_off_peak
        emissions += result.emissions
        imported += result.electrical_import
        peak_import = max(peak_import, result.electrical_import)
        pv_total += result.pv_generation
        solar_thermal_total += result.solar_thermal_generation
        if observer is not None:
            observer(idx, state, result)

    return AnnualResult(
        operational_expenditure=cost_peak + cost_off_peak,
        cost_peak=cost_peak,
        cost_off_peak=cost_off_peak,
        operational_emissions=emissions,
        electrical_import=imported,
        peak_electrical_import=peak_import,
        pv_generation=pv_total,
        solar_thermal_generation=solar_thermal_total,
    )
