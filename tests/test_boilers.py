import pytest

from heatplan.boilers import (
    biomass_boiler_capex,
    compare_heat_only_systems,
    hydrogen_boiler_capex,
    hydrogen_fuel_cell_capex,
)

DISCOUNT = sum(1 / 1.035 ** year for year in range(20))


@pytest.fixture
def systems():
    return compare_heat_only_systems(
        erh_yearly_demand=9000.0,
        hp_yearly_demand=9400.0,
        epc_space_heating=5000.0,
        discount_factor=DISCOUNT,
    )


def test_order_and_variants(systems):
    assert [(s.name, s.variant) for s in systems] == [
        ("hydrogen-boiler", "grey"),
        ("hydrogen-boiler", "blue"),
        ("hydrogen-boiler", "green"),
        ("hydrogen-fuel-cell", "grey"),
        ("hydrogen-fuel-cell", "blue"),
        ("hydrogen-fuel-cell", "green"),
        ("biomass-boiler", ""),
        ("gas-boiler", ""),
    ]


def test_capex_formulas():
    assert hydrogen_boiler_capex(5000.0) == pytest.approx(2200.0)
    assert hydrogen_boiler_capex(50000.0) == 3000.0
    assert biomass_boiler_capex(8000.0) == pytest.approx(11000.0)
    assert biomass_boiler_capex(80000.0) == 19000.0
    assert hydrogen_fuel_cell_capex() == pytest.approx((12000 + 2068.3 * 0.1 ** 0.553) * 2)


def test_gas_boiler(systems):
    gas = systems[-1]
    demand = 9000.0 / 0.9
    assert gas.operational_expenditure == pytest.approx(demand * 0.04)
    assert gas.capital_expenditure == pytest.approx(2200.0 - 500.0)
    assert gas.operational_emissions == pytest.approx(demand * 183)
    assert gas.net_present_cost == pytest.approx(gas.capital_expenditure + gas.operational_expenditure * DISCOUNT)


def test_fuel_cell_serves_heat_pump_demand(systems):
    grey_cell = systems[3]
    assert grey_cell.operational_expenditure == pytest.approx(9400.0 / 0.94 * 0.049)
    green_boiler = systems[2]
    assert green_boiler.operational_emissions == pytest.approx(9000.0 / 0.9 * 1875 * 212 / 1000)
