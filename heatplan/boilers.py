"""
Flat-formula combustion systems used as a reference point for the
optimised electric/solar systems.
"""
from dataclasses import dataclass

from .constants import (
    BOILER_EFFICIENCY,
    FUEL_CELL_EFFICIENCY,
    GRID_EMISSIONS,
    NPC_YEARS,
    TES_COST_EXPONENT,
    TES_UNIT_COST,
    TES_VOLUME_STEP,
)

# Hydrogen colour: (fuel cost £/kWh, emissions gCO2e/kWh)
HYDROGEN_FUELS = (
    ("grey", 0.049, 382.0),    # SMR without CCS
    ("blue", 0.093, 60.0),     # SMR with CCS
    ("green", 0.184, 1875.0 * GRID_EMISSIONS / 1000.0),  # Electrolysis on grid power
)

GAS_COST = 0.04
GAS_EMISSIONS = 183.0
BIOMASS_COST = 0.0411
BIOMASS_EMISSIONS = 90.0
FUEL_CELL_UNIT_COST = 12000.0
FUEL_CELL_LIFETIME = 10


@dataclass(frozen=True)
class GenericSystem:
    name: str
    variant: str
    operational_expenditure: float
    capital_expenditure: float
    net_present_cost: float
    operational_emissions: float


def build_generic_system(name, variant, *, yearly_demand, cost_per_kwh, capital_expenditure,
                         emissions_per_kwh, discount_factor):
    operational_expenditure = yearly_demand * cost_per_kwh
    return GenericSystem(
        name=name,
        variant=variant,
        operational_expenditure=operational_expenditure,
        capital_expenditure=capital_expenditure,
        net_present_cost=capital_expenditure + discount_factor * operational_expenditure,
        operational_emissions=yearly_demand * emissions_per_kwh,
    )


def hydrogen_boiler_capex(epc_space_heating):
    return min(2000.0 + epc_space_heating / 25.0, 3000.0)


def hydrogen_fuel_cell_capex():
    # Fuel cell plus the smallest tank, replaced every FUEL_CELL_LIFETIME years
    replacements = NPC_YEARS // FUEL_CELL_LIFETIME
    return (FUEL_CELL_UNIT_COST + TES_UNIT_COST * TES_VOLUME_STEP ** TES_COST_EXPONENT) * replacements


def biomass_boiler_capex(epc_space_heating):
    return min(9000.0 + epc_space_heating / 4.0, 19000.0)


def compare_heat_only_systems(*, erh_yearly_demand, hp_yearly_demand, epc_space_heating,
                              discount_factor):
    """
    Hydrogen boilers and fuel cells (grey, blue, green), then biomass and gas.

    Boilers serve the resistive-profile demand, fuel cells the heat pump one.
    """
    boiler_demand = erh_yearly_demand / BOILER_EFFICIENCY
    fuel_cell_demand = hp_yearly_demand / FUEL_CELL_EFFICIENCY
    boiler_capex = hydrogen_boiler_capex(epc_space_heating)

    systems = []
    for name, demand, capex in (("hydrogen-boiler", boiler_demand, boiler_capex),
                                ("hydrogen-fuel-cell", fuel_cell_demand, hydrogen_fuel_cell_capex())):
        for variant, cost, emissions in HYDROGEN_FUELS:
            systems.append(build_generic_system(
                name, variant,
                yearly_demand=demand,
                cost_per_kwh=cost,
                capital_expenditure=capex,
                emissions_per_kwh=emissions,
                discount_factor=discount_factor,
            ))

    systems.append(build_generic_system(
        "biomass-boiler", "",
        yearly_demand=boiler_demand,
        cost_per_kwh=BIOMASS_COST,
        capital_expenditure=biomass_boiler_capex(epc_space_heating),
        emissions_per_kwh=BIOMASS_EMISSIONS,
        discount_factor=discount_factor,
    ))
    systems.append(build_generic_system(
        "gas-boiler", "",
        yearly_demand=boiler_demand,
        cost_per_kwh=GAS_COST,
        capital_expenditure=boiler_capex - 500.0,
        emissions_per_kwh=GAS_EMISSIONS,
        discount_factor=discount_factor,
    ))
    return systems
