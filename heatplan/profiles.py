"""
Immutable indexed profiles and the fixed monthly/hourly tables.
"""
import math
import numpy as np

from .constants import HOURS_PER_DAY

DAYS_IN_MONTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class Profile:
    """
    Read-only sequence of floats.
    Length and finiteness are checked once, at construction.
    """
    __slots__ = ("_values",)
    length = None

    def __init__(self, values):
        values = tuple(float(v) for v in values)
        self._check_length(len(values))
        if not all(math.isfinite(v) for v in values):
            raise ValueError(f"{type(self).__name__} contains non-finite values")
        object.__setattr__(self, "_values", values)

    def _check_length(self, n):
        if n != self.length:
            raise ValueError(f"{type(self).__name__} needs {self.length} values, got {n}")

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __getstate__(self):
        return self._values

    def __setstate__(self, state):
        object.__setattr__(self, "_values", state)

    def __getitem__(self, index):
        return self._values[index]

    def __len__(self):
        return len(self._values)

    def __iter__(self):
        return iter(self._values)

    def __eq__(self, other):
        return type(self) is type(other) and self._values == other._values

    def __hash__(self):
        return hash((type(self), self._values))

    def __repr__(self):
        return f"{type(self).__name__}({list(self._values)})"

    def tolist(self):
        return list(self._values)

    def as_array(self):
        arr = np.array(self._values)
        arr.flags.writeable = False
        return arr


class MonthlyProfile(Profile):
    __slots__ = ()
    length = 12


class DailyProfile(Profile):
    """One value per hour of the day."""
    __slots__ = ()
    length = HOURS_PER_DAY


def _hour_months():
    months = []
    for month, days in enumerate(DAYS_IN_MONTHS):
        months.extend([month] * (days * HOURS_PER_DAY))
    return tuple(months)


# Month index (0-11) of every hour of the year
HOUR_MONTHS = _hour_months()

SOLAR_DECLINATIONS = MonthlyProfile(
    [-20.7, -12.8, -1.8, 9.8, 18.8, 23.1, 21.2, 13.7, 2.9, -8.7, -18.4, -23.0]
)

HOT_WATER_MONTHLY_FACTORS = MonthlyProfile(
    [1.10, 1.06, 1.02, 0.98, 0.94, 0.90, 0.90, 0.94, 0.98, 1.02, 1.06, 1.10]
)

HOURLY_HOT_WATER_RATIOS = DailyProfile([
    0.025, 0.018, 0.011, 0.010, 0.008, 0.013, 0.017, 0.044, 0.088, 0.075, 0.060, 0.056,
    0.050, 0.043, 0.036, 0.029, 0.030, 0.036, 0.053, 0.074, 0.071, 0.059, 0.050, 0.041,
])

# (upper latitude bound, monthly mains water temperature)
COLD_WATER_TEMPERATURE_BANDS = (
    (52.2, MonthlyProfile([12.1, 11.4, 12.3, 15.2, 16.1, 19.3, 21.2, 20.1, 19.5, 16.8, 13.7, 12.4])),   # South of England
    (53.3, MonthlyProfile([12.9, 13.3, 14.4, 16.3, 17.7, 19.7, 21.8, 20.1, 20.3, 17.8, 15.3, 14.0])),   # Midlands and Wales
    (54.95, MonthlyProfile([9.6, 9.3, 10.7, 13.7, 15.3, 17.3, 19.3, 18.6, 17.9, 15.5, 12.3, 10.5])),    # North of England and NI
    (math.inf, MonthlyProfile([9.6, 9.2, 9.8, 13.2, 14.5, 16.8, 19.4, 18.5, 17.5, 15.1, 13.7, 12.4])),  # Scotland
)

# Cubic coefficients (highest power first) of a, b, c in ratio = a*h^2 + b*h + c
NORTH_GAIN_COEFFICIENTS = (
    (26.3, -38.5, 14.8, 0.0),
    (-16.5, 27.3, -11.9, 0.0),
    (-1.06, -0.0872, -0.191, 1.0),
)
SOUTH_GAIN_COEFFICIENTS = (
    (-0.66, -0.106, 2.93, 0.0),
    (3.63, -0.374, -7.4, 0.0),
    (-2.71, -0.991, 4.59, 1.0),
)


def cold_water_temperatures(latitude):
    for upper, temperatures in COLD_WATER_TEMPERATURE_BANDS:
        if latitude < upper:
            return temperatures
    raise ValueError(f"Invalid latitude: {latitude}")


def solar_height_factors(latitude):
    return np.cos(np.radians(latitude - SOLAR_DECLINATIONS.as_array()))


def solar_gain_ratios(latitude, pitch, coefficients) -> MonthlyProfile:
    """
    Monthly ratio of irradiance reaching a surface tilted `pitch` degrees
    from horizontal (SAP Appendix U polynomial fit).
    """
    pf = math.sin(math.radians(pitch / 2.0))
    a, b, c = (np.polyval(coef, pf) for coef in coefficients)
    return MonthlyProfile(np.polyval([a, b, c], solar_height_factors(latitude)))


def resistive_thermostat_profile(thermostat_temperature) -> DailyProfile:
    """Two degree night set-back, 22:00 to 07:00."""
    setback = thermostat_temperature - 2.0
    return DailyProfile(
        [setback] * 7 + [thermostat_temperature] * 15 + [setback] * 2
    )


def heat_pump_thermostat_profile(thermostat_temperature) -> DailyProfile:
    return DailyProfile([thermostat_temperature] * HOURS_PER_DAY)
