"""
Thermal and tariff physics.
Stateless functions of physical/economic inputs. Energies are kWh per hour.
"""
import math
from dataclasses import dataclass

from .constants import (
    BOOST_TEMPERATURE,
    GRID_EMISSIONS,
    HEAT_SOURCE_MAX_POWER,
    HOT_WATER_TEMPERATURE,
    MAX_STORAGE_TEMPERATURE,
    PV_EMBODIED_EMISSIONS,
    PV_PANEL_AREA_KW,
    PV_PERFORMANCE_RATIO,
    SOLAR_THERMAL_EMISSIONS,
    SOLAR_THERMAL_PERFORMANCE,
    TES_COST_EXPONENT,
    TES_MIN_CHARGE_LITRES,
    TES_U_VALUE,
    TES_UNIT_COST,
    TES_VOLUME_STEP,
    WATER_HEAT_CAPACITY,
)
from .options import HeatOption, SolarOption, Tariff

# Minimum useful temperature of stored water (°C)
TES_MIN_USEFUL_TEMPERATURE = 40.0
# Agile price (p/kWh) below which an hour counts as off-peak
AGILE_OFF_PEAK_THRESHOLD = 9.0


def quadratic(a, b, c, x):
    return a * x * x + b * x + c


def cubic(a, b, c, d, x):
    return a * x * x * x + b * x * x + c * x + d


def _unknown(option):
    return ValueError(f"Unknown option: {option!r}")


# --- Coefficient of performance ---

def _ashp_cop(delta_t):
    # Staffell et al., A review of domestic heat pumps
    return quadratic(0.00063, -0.121, 6.81, delta_t)


def _gshp_cop(delta_t):
    return quadratic(0.000734, -0.150, 8.77, delta_t)


def reference_cop(heat_option):
    """COP at the rating point used to size the heat source."""
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return 1.0
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        return _ashp_cop(28.0)
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return _gshp_cop(35.0)
    raise _unknown(heat_option)


def worst_cop(heat_option, coldest_outside_temperature, ground_temperature):
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return 1.0
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        return _ashp_cop(HOT_WATER_TEMPERATURE - coldest_outside_temperature)
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return _gshp_cop(HOT_WATER_TEMPERATURE - ground_temperature)
    raise _unknown(heat_option)


def hourly_cops(heat_option, outside_temperature, ground_temperature):
    """(COP to 51 °C, COP to the 60 °C boost band) for this hour."""
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return 1.0, 1.0
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        return (_ashp_cop(HOT_WATER_TEMPERATURE - outside_temperature),
                _ashp_cop(BOOST_TEMPERATURE - outside_temperature))
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return (_gshp_cop(HOT_WATER_TEMPERATURE - ground_temperature),
                _gshp_cop(BOOST_TEMPERATURE - ground_temperature))
    raise _unknown(heat_option)


def heat_source_power(heat_option, *, erh_max_hourly_demand, hp_max_hourly_demand,
                      coldest_outside_temperature, ground_temperature):
    """
    Electrical rating (kW) of the heat source, sized to the peak hourly
    demand at the worst COP of the year and clamped to a domestic range.
    """
    cop_ref = reference_cop(heat_option)
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        power, minimum = erh_max_hourly_demand, 4.0 / cop_ref
    elif heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        cop = worst_cop(heat_option, coldest_outside_temperature, ground_temperature)
        power, minimum = hp_max_hourly_demand / cop, 4.0 / cop_ref
    elif heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        cop = worst_cop(heat_option, coldest_outside_temperature, ground_temperature)
        power, minimum = hp_max_hourly_demand / cop, 6.0 / cop_ref
    else:
        raise _unknown(heat_option)
    return min(max(power, minimum), HEAT_SOURCE_MAX_POWER)


# --- Design grid ---

def solar_size_range(solar_option, solar_maximum):
    """Number of solar size steps searched for this solar type."""
    if solar_option is SolarOption.NONE:
        return 1
    if solar_option in (SolarOption.FLAT_PLATE_AND_PHOTOVOLTAIC,
                        SolarOption.EVACUATED_TUBE_AND_PHOTOVOLTAIC):
        return max(solar_maximum // 2 - 1, 1)
    if solar_option in (SolarOption.PHOTOVOLTAIC, SolarOption.FLAT_PLATE,
                        SolarOption.EVACUATED_TUBE, SolarOption.PHOTOVOLTAIC_THERMAL_HYBRID):
        return max(solar_maximum // 2, 1)
    raise _unknown(solar_option)


def solar_thermal_size(solar_option, solar_size):
    """Solar thermal collector area (m²) at grid index `solar_size`."""
    if solar_option in (SolarOption.NONE, SolarOption.PHOTOVOLTAIC):
        return 0
    if solar_option in (SolarOption.FLAT_PLATE, SolarOption.EVACUATED_TUBE,
                        SolarOption.FLAT_PLATE_AND_PHOTOVOLTAIC,
                        SolarOption.EVACUATED_TUBE_AND_PHOTOVOLTAIC,
                        SolarOption.PHOTOVOLTAIC_THERMAL_HYBRID):
        return solar_size * 2 + 2
    raise _unknown(solar_option)


def pv_size(solar_option, solar_size, solar_maximum):
    """PV panel area (m²). Combined systems give the rest of the roof to PV."""
    if solar_option in (SolarOption.PHOTOVOLTAIC, SolarOption.PHOTOVOLTAIC_THERMAL_HYBRID):
        return solar_size * 2 + 2
    if solar_option in (SolarOption.FLAT_PLATE_AND_PHOTOVOLTAIC,
                        SolarOption.EVACUATED_TUBE_AND_PHOTOVOLTAIC):
        return solar_maximum - solar_thermal_size(solar_option, solar_size)
    if solar_option in (SolarOption.NONE, SolarOption.FLAT_PLATE, SolarOption.EVACUATED_TUBE):
        return 0
    raise _unknown(solar_option)


def tes_volume(tes_option):
    return TES_VOLUME_STEP + tes_option * TES_VOLUME_STEP


# --- Thermal storage ---

def _water_energy(litres, delta_t):
    return litres * WATER_HEAT_CAPACITY * delta_t / 3600.0


@dataclass(frozen=True)
class ThermalStorage:
    """
    Cylindrical hot water tank (height = 2 x radius) with a two-layer
    thermocline model. Charges are kWh above the 40 °C useful minimum.
    """
    volume: float
    charge_full: float
    charge_boost: float
    charge_max: float
    charge_min: float
    side_area: float   # pi * d * h
    end_area: float    # pi * r^2

    @classmethod
    def from_volume(cls, volume):
        radius = (volume / (2.0 * math.pi)) ** (1.0 / 3.0)
        litres = volume * 1000.0
        pi_d = math.pi * radius * 2.0
        return cls(
            volume=volume,
            charge_full=_water_energy(litres, HOT_WATER_TEMPERATURE - TES_MIN_USEFUL_TEMPERATURE),
            charge_boost=_water_energy(litres, BOOST_TEMPERATURE - TES_MIN_USEFUL_TEMPERATURE),
            charge_max=_water_energy(litres, MAX_STORAGE_TEMPERATURE - TES_MIN_USEFUL_TEMPERATURE),
            charge_min=_water_energy(TES_MIN_CHARGE_LITRES, HOT_WATER_TEMPERATURE - 10.0),
            side_area=pi_d * radius * 2.0,
            end_area=math.pi * radius * radius,
        )

    def layers(self, charge, cold_water_temperature):
        """
        (upper temperature, lower temperature, thermocline height) for a charge.
        A charge exactly on a threshold falls into the lower band.
        """
        if charge <= self.charge_full:
            return HOT_WATER_TEMPERATURE, cold_water_temperature, charge / self.charge_full
        if charge <= self.charge_boost:
            return (BOOST_TEMPERATURE, HOT_WATER_TEMPERATURE,
                    (charge - self.charge_full) / (self.charge_boost - self.charge_full))
        return (MAX_STORAGE_TEMPERATURE, BOOST_TEMPERATURE,
                (charge - self.charge_boost) / (self.charge_max - self.charge_boost))

    def standby_losses(self, upper, lower, height, inside_temperature):
        """Heat lost to the room this hour (kWh). Negative means heat gained."""
        upper_losses = (upper - inside_temperature) * TES_U_VALUE * (self.side_area * height + self.end_area)
        lower_losses = (lower - inside_temperature) * TES_U_VALUE * (self.side_area * (1.0 - height) + self.end_area)
        return upper_losses + lower_losses


# --- Solar generation ---

# Collector efficiency curve coefficients (a, b, c)
_COLLECTOR_FLAT_PLATE = (-0.000038, -0.0035, 0.78)
_COLLECTOR_PVT = (-0.0000176, -0.003325, 0.726)
_COLLECTOR_EVACUATED_TUBE = (-0.00002, -0.0009, 0.625)


def pv_efficiency(solar_option, upper, lower):
    if solar_option is SolarOption.PHOTOVOLTAIC_THERMAL_HYBRID:
        # Cell temperature follows the collector (mean tank) temperature
        return 14.7 * (1.0 - 0.0045 * ((upper + lower) / 2.0 - 25.0)) / 100.0
    # Monocrystalline
    return 0.1928


def pv_generation(solar_option, panel_area, incident_irradiance, upper, lower):
    """Incident irradiance in kW/m² on the roof."""
    if panel_area == 0:
        return 0.0
    return panel_area * pv_efficiency(solar_option, upper, lower) * incident_irradiance * PV_PERFORMANCE_RATIO


def _collector_coefficients(solar_option):
    if solar_option in (SolarOption.FLAT_PLATE, SolarOption.FLAT_PLATE_AND_PHOTOVOLTAIC):
        return _COLLECTOR_FLAT_PLATE
    if solar_option is SolarOption.PHOTOVOLTAIC_THERMAL_HYBRID:
        return _COLLECTOR_PVT
    if solar_option in (SolarOption.EVACUATED_TUBE, SolarOption.EVACUATED_TUBE_AND_PHOTOVOLTAIC):
        return _COLLECTOR_EVACUATED_TUBE
    if solar_option in (SolarOption.NONE, SolarOption.PHOTOVOLTAIC):
        return None
    raise _unknown(solar_option)


def solar_thermal_generation(solar_option, collector_area, incident_irradiance,
                             upper, lower, outside_temperature):
    """Collector heats from the lower to the upper layer, so runs at their mean."""
    coefficients = _collector_coefficients(solar_option)
    if coefficients is None or incident_irradiance == 0.0:
        return 0.0
    a, b, c = coefficients
    collector_temperature = (upper + lower) / 2.0
    generation = SOLAR_THERMAL_PERFORMANCE * collector_area * quadratic(
        a, b, c * incident_irradiance, collector_temperature - outside_temperature
    )
    return max(generation, 0.0)


# --- Capital cost ---

def heat_source_capex(heat_option, electrical_power):
    thermal_power = electrical_power * reference_cop(heat_option)
    if heat_option is HeatOption.ELECTRIC_RESISTANCE:
        return 1100.0
    if heat_option is HeatOption.AIR_SOURCE_HEAT_PUMP:
        return (200.0 + 4750.0 / thermal_power ** 1.25) * thermal_power + 1500.0
    if heat_option is HeatOption.GROUND_SOURCE_HEAT_PUMP:
        return (200.0 + 4750.0 / thermal_power ** 1.25) * thermal_power + 800.0 * thermal_power
    raise _unknown(heat_option)


def pv_capex(solar_option, panel_area):
    if solar_option in (SolarOption.PHOTOVOLTAIC, SolarOption.FLAT_PLATE_AND_PHOTOVOLTAIC,
                        SolarOption.EVACUATED_TUBE_AND_PHOTOVOLTAIC):
        peak_kw = panel_area * PV_PANEL_AREA_KW
        return peak_kw * (1100.0 if peak_kw < 4.0 else 900.0)
    # PV-T panels are costed as solar thermal
    return 0.0


def solar_thermal_capex(solar_option, collector_area):
    if solar_option in (SolarOption.FLAT_PLATE, SolarOption.FLAT_PLATE_AND_PHOTOVOLTAIC):
        return collector_area * (225.0 + 270.0 / (9.0 * 1.6)) + 490.0 + 800.0 + 800.0
    if solar_option is SolarOption.PHOTOVOLTAIC_THERMAL_HYBRID:
        return (collector_area / 1.6) * (480.0 + 270.0 / 9.0) + 640.0 + 490.0 + 800.0 + 1440.0
    if solar_option in (SolarOption.EVACUATED_TUBE, SolarOption.EVACUATED_TUBE_AND_PHOTOVOLTAIC):
        return collector_area * (280.0 + 270.0 / (9.0 * 1.6)) + 490.0 + 800.0 + 800.0
    return 0.0


def tes_capex(volume):
    # 0.1 m3 = £579, 3.0 m3 = £3797
    return TES_UNIT_COST * volume ** TES_COST_EXPONENT


def capital_expenditure(heat_option, solar_option, *, electrical_power, panel_area,
                        collector_area, volume):
    return (heat_source_capex(heat_option, electrical_power)
            + pv_capex(solar_option, panel_area)
            + solar_thermal_capex(solar_option, collector_area)
            + tes_capex(volume))


# --- Tariffs ---

def is_charging_window(tariff, hour, agile_price):
    """Hours in which storage is topped up from the grid."""
    if tariff is Tariff.FLAT_RATE or tariff is Tariff.BULB_SMART:
        # Warmest part of the day
        return 12 < hour < 16
    if tariff is Tariff.ECONOMY_7:
        return hour == 23 or hour < 6
    if tariff is Tariff.OCTOPUS_GO:
        return hour < 5
    if tariff is Tariff.OCTOPUS_AGILE:
        return agile_price < AGILE_OFF_PEAK_THRESHOLD
    raise _unknown(tariff)


def tariff_rates(tariff, hour, agile_price):
    """
    (import rate £/kWh, export credit £/kWh, off-peak) for this hour.
    Export is credited at the mean of the import and export prices.
    """
    if tariff is Tariff.FLAT_RATE:
        return 0.163, (0.163 + 0.035) / 2.0, False
    if tariff is Tariff.ECONOMY_7:
        if hour < 6 or hour == 23:
            return 0.095, (0.095 + 0.035) / 2.0, True
        return 0.199, (0.199 + 0.035) / 2.0, False
    if tariff is Tariff.BULB_SMART:
        if 15 < hour < 19:
            return 0.2529, (0.2529 + 0.035) / 2.0, False
        return 0.1279, (0.1279 + 0.035) / 2.0, True
    if tariff is Tariff.OCTOPUS_GO:
        if hour < 5:
            return 0.05, (0.05 + 0.03) / 2.0, True
        return 0.1533, (0.1533 + 0.03) / 2.0, False
    if tariff is Tariff.OCTOPUS_AGILE:
        rate = agile_price / 100.0
        return rate, (rate + 0.055) / 2.0, agile_price < AGILE_OFF_PEAK_THRESHOLD
    raise _unknown(tariff)


# --- Emissions (gCO2e) ---

def hourly_emissions(*, electrical_import, pv_generated, pv_exported, solar_thermal_generated,
                     has_pv):
    emissions = solar_thermal_generated * SOLAR_THERMAL_EMISSIONS + electrical_import * GRID_EMISSIONS
    if has_pv:
        # Exported generation displaces grid electricity
        emissions += ((pv_generated - pv_exported) * PV_EMBODIED_EMISSIONS
                      + pv_exported * (PV_EMBODIED_EMISSIONS - GRID_EMISSIONS))
    return emissions
