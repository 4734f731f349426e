import json
import os

import numpy as np
import matplotlib.pyplot as plt
import pandas as pd
import pytest
from unittest.mock import patch

from heatplan import results
from heatplan.config import SimulationConfig
from heatplan.errors import RegionNotFoundError, WeatherNotFoundError
from heatplan.measurements import WeatherData
from heatplan.options import HeatOption, SolarOption
from heatplan.simulation import cumulative_discount_factor, prepare_context, run_simulation


@pytest.fixture
def small_context(make_context):
    # 24 m2 and 0.2 m3 keep every grid tiny
    return make_context(hours=24, house_size=24.0, tes_volume_max=0.2)


@pytest.fixture
def report(small_context):
    config = SimulationConfig(use_surface_optimisation=False)
    return run_simulation(small_context.inputs, None, config, context=small_context)


def test_cumulative_discount_factor():
    assert cumulative_discount_factor() == pytest.approx(14.7098, abs=1e-3)
    assert cumulative_discount_factor(rate=1.0, years=5) == 5.0


def test_prepare_context_grid_extents(make_context):
    context = make_context(house_size=100.0, tes_volume_max=0.5)
    assert context.tes_range == 5
    assert context.solar_maximum == 24
    assert context.epc_demand is None
    assert context.building.thermal_transmittance == 1.5
    assert len(context.outside_temperatures) == 168
    for heat in HeatOption:
        assert 0 < context.heat_source_power(heat) <= 7.0
    assert context.thermostat_for(HeatOption.ELECTRIC_RESISTANCE) == context.building.erh_thermostat
    assert context.thermostat_for(HeatOption.GROUND_SOURCE_HEAT_PUMP) == context.building.hp_thermostat


def test_prepare_context_calibrates_without_u_value(make_inputs):
    weather = WeatherData.constant(24, outside_temperature=5.0)
    context = prepare_context(make_inputs(), weather)
    assert context.epc_demand > 0
    assert 0.5 <= context.building.thermal_transmittance <= 3.0


def test_unknown_postcode_is_fatal(make_inputs):
    weather = WeatherData.constant(24, outside_temperature=5.0)
    with pytest.raises(RegionNotFoundError):
        prepare_context(make_inputs(postcode="ZZ9 9ZZ"), weather, thermal_transmittance=1.5)


def test_unknown_location_is_fatal(make_inputs):
    weather = WeatherData.constant(24, outside_temperature=5.0)
    with pytest.raises(WeatherNotFoundError):
        prepare_context(make_inputs(latitude=40.0, longitude=-30.0), weather, thermal_transmittance=1.5)


def test_coldest_temperature_override_skips_lookup(make_inputs):
    weather = WeatherData.constant(24, outside_temperature=5.0)
    context = prepare_context(make_inputs(latitude=40.0, longitude=-30.0), weather,
                              thermal_transmittance=1.5, coldest_temperature=-3.0)
    assert context.coldest_outside_temperature == -3.0


def test_report_shape(report):
    data = report.to_dict()
    assert set(data) == {
        "thermal-transmittance", "optimised-epc-demand", "npc-years", "demand", "systems",
        "hydrogen-boiler", "hydrogen-fuel-cell", "gas-boiler", "biomass-boiler",
    }
    assert data["npc-years"] == 20
    assert set(data["demand"]) == {"boiler", "heat-pump"}
    assert set(data["demand"]["boiler"]) == {"hot-water", "space", "total", "peak-hourly"}
    assert list(data["systems"]) == [heat.value for heat in HeatOption]
    for heat in HeatOption:
        assert list(data["systems"][heat.value]) == [solar.value for solar in SolarOption]
    leaf = data["systems"]["air-source-heat-pump"]["photovoltaic"]
    assert {"pv-size", "solar-thermal-size", "thermal-energy-storage-volume", "operational-expenditure",
            "capital-expenditure", "net-present-cost", "operational-emissions"} <= set(leaf)
    assert set(data["hydrogen-boiler"]) == {"grey", "blue", "green"}
    assert "net-present-cost" in data["gas-boiler"]
    # Serialisable as is
    json.dumps(data)


def test_report_csv(report):
    df = report.to_dataframe()
    assert len(df) == 21
    assert list(df.columns) == results.NODE_TRACE_COLUMNS
    assert df.iloc[0]["heat_option"] == "ElectricResistanceHeating"
    assert report.to_csv().startswith("heat_option,solar_option,")
    assert report.best().net_present_cost == df["net_present_cost"].min()


def test_node_trace_and_surfaces(tmp_path, small_context):
    nodes = tmp_path / "nodes.csv"
    surfaces = tmp_path / "surfaces"
    config = SimulationConfig(use_surface_optimisation=False, save_all_nodes=str(nodes),
                              save_surfaces=str(surfaces))
    report = run_simulation(small_context.inputs, None, config, context=small_context)

    trace = pd.read_csv(nodes)
    assert list(trace.columns) == results.NODE_TRACE_COLUMNS
    evaluated = sum(len(result.surface) for result in report.search_results)
    assert len(trace) == evaluated * 5

    files = sorted(os.listdir(surfaces), key=lambda name: int(name[1:-4]))
    assert files == [f"o{i}.csv" for i in range(21)]
    first = pd.read_csv(surfaces / "o0.csv", header=None).to_numpy()
    # Resistance heating without solar: one row, one column per storage option
    assert first.shape == (1, small_context.tes_range)
    assert not np.isnan(first).any()


def test_surface_csv_writes_nan_for_skipped_cells(tmp_path, make_context):
    context = make_context(hours=24, house_size=48.0, tes_volume_max=0.5)
    config = SimulationConfig(save_surfaces=str(tmp_path))
    report = run_simulation(context.inputs, None, config, context=context)
    pv_index = 1
    arr = pd.read_csv(tmp_path / f"o{pv_index}.csv", header=None).to_numpy()
    assert arr.shape == (report.search_results[pv_index].surface.y_size, context.tes_range)
    assert np.isnan(arr).sum() == arr.size - len(report.search_results[pv_index].surface)


@patch("matplotlib.pyplot.show")
def test_plot_cost_surface(mock_show, report):
    fig = results.plot_cost_surface(report.search_results[1])
    assert fig is not None
    mock_show.assert_called_once()
    figures = results.plot_all_surfaces(report.search_results, show=False)
    assert len(figures) == 21
    plt.close("all")
