"""Pytest configuration."""
import sys
import os

import matplotlib
import pytest

# Plots are drawn off-screen during tests
matplotlib.use("Agg")

# Add the repo root to sys.path so `heatplan` and `main` import without installing
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from heatplan.building import HouseInputs  # noqa: E402
from heatplan.measurements import WeatherData  # noqa: E402
from heatplan.simulation import prepare_context  # noqa: E402

HOUSE = {
    "thermostat_temperature": 20.0,
    "latitude": 52.0,
    "longitude": -1.0,
    "num_occupants": 2,
    "house_size": 100.0,
    "postcode": "LE11 3TU",
    "epc_space_heating": 3000.0,
    "tes_volume_max": 0.5,
}


@pytest.fixture
def house_data():
    return dict(HOUSE)


@pytest.fixture
def make_inputs():
    def _make(**overrides):
        return HouseInputs.from_dict({**HOUSE, **overrides})
    return _make


@pytest.fixture
def make_context(make_inputs):
    """Small deterministic context: constant weather, fixed U-value, no calibration."""
    def _make(hours=168, outside_temperature=5.0, solar_irradiance=0.0, thermal_transmittance=1.5,
              **overrides):
        weather = WeatherData.constant(hours, outside_temperature=outside_temperature,
                                       solar_irradiance=solar_irradiance)
        return prepare_context(make_inputs(**overrides), weather,
                               thermal_transmittance=thermal_transmittance)
    return _make


@pytest.fixture
def week_context(make_context):
    return make_context()
