import math
import pickle

import numpy as np
import pytest

from heatplan.errors import RegionNotFoundError, WeatherNotFoundError
from heatplan.profiles import (
    HOUR_MONTHS,
    DailyProfile,
    MonthlyProfile,
    cold_water_temperatures,
    heat_pump_thermostat_profile,
    resistive_thermostat_profile,
    solar_gain_ratios,
)
from heatplan.profiles import NORTH_GAIN_COEFFICIENTS, SOUTH_GAIN_COEFFICIENTS
from heatplan.regions import (
    COLDEST_TEMPERATURES,
    EPC_OUTSIDE_TEMPERATURES,
    EPC_SOLAR_IRRADIANCES,
    coldest_outside_temperature,
    coordinate_key,
    epc_climate,
    postcode_district,
    region_for_postcode,
    round_coordinate,
)


# --- Profiles ---

def test_profile_length_is_checked():
    with pytest.raises(ValueError):
        MonthlyProfile([1.0] * 11)
    with pytest.raises(ValueError):
        DailyProfile([1.0] * 25)


def test_profile_rejects_non_finite():
    with pytest.raises(ValueError):
        MonthlyProfile([1.0] * 11 + [math.nan])
    with pytest.raises(ValueError):
        DailyProfile([math.inf] * 24)


def test_profile_is_immutable():
    profile = MonthlyProfile(range(12))
    with pytest.raises(AttributeError):
        profile._values = (0.0,) * 12
    with pytest.raises(TypeError):
        profile[0] = 5.0
    arr = profile.as_array()
    with pytest.raises(ValueError):
        arr[0] = 5.0
    assert profile[11] == 11.0
    assert profile.tolist() == list(map(float, range(12)))


def test_profile_pickles():
    profile = DailyProfile(range(24))
    restored = pickle.loads(pickle.dumps(profile))
    assert restored == profile
    assert hash(restored) == hash(profile)


def test_hour_months_calendar():
    assert len(HOUR_MONTHS) == 8760
    assert HOUR_MONTHS[0] == 0
    assert HOUR_MONTHS[31 * 24 - 1] == 0
    assert HOUR_MONTHS[31 * 24] == 1
    assert HOUR_MONTHS[-1] == 11


def test_thermostat_profiles():
    erh = resistive_thermostat_profile(20.0)
    assert erh.tolist() == [18.0] * 7 + [20.0] * 15 + [18.0] * 2
    assert heat_pump_thermostat_profile(20.0).tolist() == [20.0] * 24


def test_cold_water_band_by_latitude():
    south = cold_water_temperatures(51.0)
    scotland = cold_water_temperatures(57.0)
    assert south[0] == pytest.approx(12.1)
    assert south != scotland


def test_solar_gain_ratios_south_beats_north_in_winter():
    south = solar_gain_ratios(52.0, 90.0, SOUTH_GAIN_COEFFICIENTS)
    north = solar_gain_ratios(52.0, 90.0, NORTH_GAIN_COEFFICIENTS)
    assert south[0] > north[0]
    assert all(np.isfinite(south.as_array()))


# --- Regions ---

@pytest.mark.parametrize("postcode, region", [
    ("SW1A 1AA", 1),
    ("le11 3tu", 6),
    ("  CB2 1TN ", 12),
])
def test_region_for_postcode(postcode, region):
    assert region_for_postcode(postcode) == region


def test_postcode_district():
    assert postcode_district("SW1A 1AA") == 1
    assert postcode_district("LE11 3TU") == 11


def test_postcode_without_digits_is_a_lookup_failure():
    with pytest.raises(RegionNotFoundError):
        region_for_postcode("NOWHERE")
    with pytest.raises(LookupError):
        region_for_postcode("ZZ9 9ZZ")


def test_every_region_has_epc_climate():
    assert sorted(EPC_OUTSIDE_TEMPERATURES) == list(range(1, 22))
    assert sorted(EPC_SOLAR_IRRADIANCES) == list(range(1, 22))
    temperatures, irradiances = epc_climate(6)
    assert len(temperatures) == 12 and len(irradiances) == 12
    with pytest.raises(RegionNotFoundError):
        epc_climate(22)


@pytest.mark.parametrize("value, expected", [
    (52.0, 52.0),
    (52.24, 52.0),
    (52.25, 52.5),
    (-1.25, -1.5),
    (-0.2, 0.0),
])
def test_round_coordinate(value, expected):
    rounded = round_coordinate(value)
    assert rounded == expected
    assert math.copysign(1.0, rounded) == math.copysign(1.0, expected)


def test_coldest_outside_temperature():
    assert coordinate_key(52.1, -0.9) == (520, -10)
    assert coldest_outside_temperature(52.1, -0.9) == pytest.approx(-5.283)


@pytest.mark.parametrize("latitude, longitude, expected", [
    (50.0, -3.5, 4.61),
    (52.5, 0.5, -4.0),
    (52.0, -2.5, -3.7),
    (58.5, -4.0, 0.97),
    (59.5, -3.0, 3.79),
    (56.5, -6.0, 0.046),
    (57.5, -6.0, 0.002),
    (57.0, -4.5, -8.952),
    (61.0, -1.0, 1.721),
])
def test_coldest_outside_temperature_table(latitude, longitude, expected):
    assert coldest_outside_temperature(latitude, longitude) == pytest.approx(expected)


def test_coldest_temperatures_are_plausible():
    assert len(COLDEST_TEMPERATURES) == 225
    assert len({(lat, lon) for lat, lon, _ in COLDEST_TEMPERATURES}) == 225
    for lat, lon, _ in COLDEST_TEMPERATURES:
        assert -10.0 <= coldest_outside_temperature(lat / 10, lon / 10) <= 10.0


def test_coldest_outside_temperature_missing_location():
    # Mid Atlantic
    with pytest.raises(WeatherNotFoundError):
        coldest_outside_temperature(40.0, -30.0)
