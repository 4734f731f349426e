"""
Dwelling inputs and derived thermal properties.
"""
import logging
import math
from dataclasses import dataclass

from .constants import (
    BODY_HEAT_GAIN_KW,
    BOILER_EFFICIENCY,
    BUILDING_HEAT_CAPACITY,
    EPC_HEATED_TEMPERATURE,
    EPC_TRANSMITTANCE_MAX,
    EPC_TRANSMITTANCE_MIN,
    EPC_TRANSMITTANCE_STEP,
    EPC_UNHEATED_TEMPERATURE,
    HOT_WATER_TEMPERATURE,
    HOURS_PER_DAY,
    SOLAR_ROOF_PITCH,
    TES_VOLUME_STEP,
    WATER_HEAT_CAPACITY,
    WINDOW_PITCH,
)
from .profiles import (
    DAYS_IN_MONTHS,
    HOT_WATER_MONTHLY_FACTORS,
    HOUR_MONTHS,
    HOURLY_HOT_WATER_RATIOS,
    NORTH_GAIN_COEFFICIENTS,
    SOUTH_GAIN_COEFFICIENTS,
    DailyProfile,
    MonthlyProfile,
    cold_water_temperatures,
    heat_pump_thermostat_profile,
    resistive_thermostat_profile,
    solar_gain_ratios,
)

_LOGGER = logging.getLogger(__name__)

_REQUIRED_KEYS = (
    "thermostat_temperature", "latitude", "longitude", "num_occupants",
    "house_size", "postcode", "epc_space_heating", "tes_volume_max",
)


@dataclass(frozen=True)
class HouseInputs:
    thermostat_temperature: float  # °C
    latitude: float
    longitude: float
    num_occupants: int
    house_size: float              # Floor area (m²)
    postcode: str
    epc_space_heating: float       # EPC space heating demand (kWh/year)
    tes_volume_max: float          # m³

    def __post_init__(self):
        if self.num_occupants < 1:
            raise ValueError(f"num_occupants must be at least 1, got {self.num_occupants}")
        if self.house_size <= 0:
            raise ValueError(f"house_size must be positive, got {self.house_size}")
        if self.epc_space_heating < 0:
            raise ValueError(f"epc_space_heating must not be negative, got {self.epc_space_heating}")
        if self.tes_volume_max + 0.01 < TES_VOLUME_STEP:
            raise ValueError(f"tes_volume_max must be at least {TES_VOLUME_STEP} m3, got {self.tes_volume_max}")

    @classmethod
    def from_dict(cls, data):
        missing = [key for key in _REQUIRED_KEYS if key not in data]
        if missing:
            raise ValueError(f"Missing required house inputs: {', '.join(missing)}")
        return cls(
            thermostat_temperature=float(data["thermostat_temperature"]),
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            num_occupants=int(data["num_occupants"]),
            house_size=float(data["house_size"]),
            postcode=str(data["postcode"]),
            epc_space_heating=float(data["epc_space_heating"]),
            tes_volume_max=float(data["tes_volume_max"]),
        )


@dataclass(frozen=True)
class Building:
    """Calibrated thermal model of the dwelling, shared read-only by every run."""
    house_size: float
    thermal_transmittance: float      # W/m².K
    heat_loss_coefficient: float      # kW/K
    heat_capacity: float              # kWh/K
    body_heat_gain: float             # kW
    solar_gain_house_factor: float
    solar_gain_ratios_north: MonthlyProfile
    solar_gain_ratios_south: MonthlyProfile
    roof_ratios_south: MonthlyProfile
    cold_water_temperatures: MonthlyProfile
    daily_hot_water_volume: float     # Litres
    ground_temperature: float
    erh_thermostat: DailyProfile
    hp_thermostat: DailyProfile

    def hot_water_demands(self):
        """[month][hour] hot water draw (kWh)."""
        table = []
        for month in range(12):
            daily = (self.daily_hot_water_volume * WATER_HEAT_CAPACITY
                     * (HOT_WATER_TEMPERATURE - self.cold_water_temperatures[month]) / 3600.0)
            factor = daily * HOT_WATER_MONTHLY_FACTORS[month]
            table.append(tuple(factor * ratio for ratio in HOURLY_HOT_WATER_RATIOS))
        return tuple(table)


@dataclass(frozen=True)
class YearlyDemand:
    total: float
    space: float
    hot_water: float
    max_hourly: float


def daily_hot_water_volume(num_occupants):
    """Litres/day (SAP 2012 J1-J4), shower with mixer and a bath."""
    showers = (0.45 * num_occupants + 0.65) * 28.8
    bath = (0.13 * num_occupants + 0.19) * 50.8
    other = 9.8 * num_occupants + 14.0
    return showers + bath + other


def epc_body_gain(house_size):
    """Metabolic gain (kW) of the SAP assumed occupancy for a floor area."""
    occupants = (1.0 + 1.76 * (1.0 - math.exp(-0.000349 * (house_size - 13.9) ** 2))
                 + 0.0013 * (house_size - 13.9))
    return occupants * BODY_HEAT_GAIN_KW


def solar_gain_house_factor(house_size):
    # Glazing 15% of floor area split north/south, frame, shading and transmittance factors
    return (house_size * 0.15 / 2.0) * 0.77 * 0.7 * 0.76 * 0.9 / 1000.0


def ground_temperature(latitude):
    """Linear fit of UK ground temperature at 100 m depth."""
    return 15.0 - (latitude - 50.0) * (4.0 / 9.0)


def _epc_profiles():
    unheated, heated = EPC_UNHEATED_TEMPERATURE, EPC_HEATED_TEMPERATURE
    summer = [unheated] * HOURS_PER_DAY
    weekend = [unheated] * 7 + [heated] * 17
    weekday = [unheated] * 7 + [heated] * 3 + [unheated] * 6 + [heated] * 8
    return summer, weekend, weekday


def epc_space_demand(thermal_transmittance, *, house_size, epc_temperatures, epc_gains_south,
                     epc_gains_north):
    """
    Space heating demand (kWh/year, boiler input) of the SAP reference
    heating pattern over a year of monthly average climate.
    """
    summer, weekend, weekday = _epc_profiles()
    heat_capacity = BUILDING_HEAT_CAPACITY * house_size / 3600.0
    body_gain = epc_body_gain(house_size)
    loss_coefficient = house_size * thermal_transmittance / 1000.0

    inside_temperature = EPC_HEATED_TEMPERATURE
    demand = 0.0
    for month, days in enumerate(DAYS_IN_MONTHS):
        outside_temperature = epc_temperatures[month]
        gains = epc_gains_south[month] + epc_gains_north[month] + body_gain
        for day in range(days):
            if 5 <= month <= 8:
                profile = summer
            elif day % 7 >= 5:
                profile = weekend
            else:
                profile = weekday
            for desired in profile:
                heat_loss = loss_coefficient * (inside_temperature - outside_temperature)
                inside_temperature += (-heat_loss + gains) / heat_capacity
                if inside_temperature < desired:
                    demand += (desired - inside_temperature) * heat_capacity / BOILER_EFFICIENCY
                    inside_temperature = desired
    return demand


def calibrate_thermal_transmittance(inputs, epc_temperatures, epc_irradiances):
    """
    Sweep the fabric U-value upwards until the simulated EPC demand stops
    getting closer to the certificate figure.

    Returns:
        (thermal_transmittance, epc_demand)
    """
    house_factor = solar_gain_house_factor(inputs.house_size)
    ratios_south = solar_gain_ratios(inputs.latitude, WINDOW_PITCH, SOUTH_GAIN_COEFFICIENTS)
    ratios_north = solar_gain_ratios(inputs.latitude, WINDOW_PITCH, NORTH_GAIN_COEFFICIENTS)
    gains_south = [epc_irradiances[m] * ratios_south[m] * house_factor for m in range(12)]
    gains_north = [epc_irradiances[m] * ratios_north[m] * house_factor for m in range(12)]

    steps = int((EPC_TRANSMITTANCE_MAX - EPC_TRANSMITTANCE_MIN + EPC_TRANSMITTANCE_STEP / 10.0)
                / EPC_TRANSMITTANCE_STEP)
    best_transmittance, best_demand = EPC_TRANSMITTANCE_MIN, 0.0
    for i in range(steps):
        transmittance = EPC_TRANSMITTANCE_MIN + EPC_TRANSMITTANCE_STEP * i
        demand = epc_space_demand(
            transmittance,
            house_size=inputs.house_size,
            epc_temperatures=epc_temperatures,
            epc_gains_south=gains_south,
            epc_gains_north=gains_north,
        )
        if abs(inputs.epc_space_heating - demand) < abs(inputs.epc_space_heating - best_demand):
            best_transmittance, best_demand = transmittance, demand
        else:
            break

    _LOGGER.info("Calibrated thermal transmittance %.2f W/m2K (EPC demand %.0f kWh)",
                 best_transmittance, best_demand)
    return best_transmittance, best_demand


def build_building(inputs, thermal_transmittance) -> Building:
    return Building(
        house_size=inputs.house_size,
        thermal_transmittance=thermal_transmittance,
        heat_loss_coefficient=inputs.house_size * thermal_transmittance / 1000.0,
        heat_capacity=BUILDING_HEAT_CAPACITY * inputs.house_size / 3600.0,
        body_heat_gain=inputs.num_occupants * BODY_HEAT_GAIN_KW,
        solar_gain_house_factor=solar_gain_house_factor(inputs.house_size),
        solar_gain_ratios_north=solar_gain_ratios(inputs.latitude, WINDOW_PITCH, NORTH_GAIN_COEFFICIENTS),
        solar_gain_ratios_south=solar_gain_ratios(inputs.latitude, WINDOW_PITCH, SOUTH_GAIN_COEFFICIENTS),
        roof_ratios_south=solar_gain_ratios(inputs.latitude, SOLAR_ROOF_PITCH, SOUTH_GAIN_COEFFICIENTS),
        cold_water_temperatures=cold_water_temperatures(inputs.latitude),
        daily_hot_water_volume=daily_hot_water_volume(inputs.num_occupants),
        ground_temperature=ground_temperature(inputs.latitude),
        erh_thermostat=resistive_thermostat_profile(inputs.thermostat_temperature),
        hp_thermostat=heat_pump_thermostat_profile(inputs.thermostat_temperature),
    )


def calculate_demand(building, weather, thermostat) -> YearlyDemand:
    """
    Heat demand of the building with an unconstrained heat source and no
    storage, following `thermostat` (a DailyProfile) over the weather trace.
    """
    t_out = weather.outside_temperatures.tolist()
    irradiance = weather.solar_irradiances.tolist()
    hot_water = building.hot_water_demands()
    loss_coefficient = building.heat_loss_coefficient
    heat_capacity = building.heat_capacity
    house_factor = building.solar_gain_house_factor
    ratios_north = building.solar_gain_ratios_north
    ratios_south = building.solar_gain_ratios_south
    setpoints = thermostat.tolist()

    inside_temperature = building.hp_thermostat[0]
    total = hot_water_total = max_hourly = 0.0
    for idx in range(len(t_out)):
        month = HOUR_MONTHS[idx]
        hour = idx % HOURS_PER_DAY
        hot_water_hour = hot_water[month][hour]

        heat_loss = loss_coefficient * (inside_temperature - t_out[idx])
        solar_gain = irradiance[idx] * (ratios_north[month] + ratios_south[month]) * house_factor
        inside_temperature += (-heat_loss + solar_gain + building.body_heat_gain) / heat_capacity

        space_hour = 0.0
        if inside_temperature < setpoints[hour]:
            space_hour = (setpoints[hour] - inside_temperature) * heat_capacity
            inside_temperature = setpoints[hour]

        hourly = hot_water_hour + space_hour
        max_hourly = max(max_hourly, hourly)
        total += hourly
        hot_water_total += hot_water_hour

    return YearlyDemand(total=total, space=total - hot_water_total,
                        hot_water=hot_water_total, max_hourly=max_hourly)
