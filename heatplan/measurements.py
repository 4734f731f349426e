from dataclasses import dataclass

import numpy as np

from .constants import HOURS_PER_YEAR


def _frozen(values):
    arr = np.array(values, dtype=float)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class WeatherData:
    """
    Hourly inputs shared read-only by every simulation run.
    All arrays have the same length; hour 0 is 1 January 00:00.
    """
    outside_temperatures: np.ndarray  # °C
    solar_irradiances: np.ndarray     # W/m² on the horizontal
    agile_prices: np.ndarray          # Variable tariff price (p/kWh)

    def __post_init__(self):
        for name in ("outside_temperatures", "solar_irradiances", "agile_prices"):
            arr = _frozen(getattr(self, name))
            if arr.ndim != 1:
                raise ValueError(f"{name} must be one-dimensional")
            if not np.all(np.isfinite(arr)):
                raise ValueError(f"{name} contains non-finite values")
            object.__setattr__(self, name, arr)

        lengths = {len(self.outside_temperatures), len(self.solar_irradiances), len(self.agile_prices)}
        if len(lengths) != 1:
            raise ValueError(f"Weather series lengths differ: {sorted(lengths)}")
        if not 0 < len(self) <= HOURS_PER_YEAR:
            raise ValueError(f"Weather series must cover 1..{HOURS_PER_YEAR} hours, got {len(self)}")

    def __len__(self):
        return len(self.outside_temperatures)

    @classmethod
    def constant(cls, hours, *, outside_temperature, solar_irradiance=0.0, agile_price=15.0):
        """Flat synthetic trace, mostly for testing."""
        return cls(
            outside_temperatures=np.full(hours, outside_temperature),
            solar_irradiances=np.full(hours, solar_irradiance),
            agile_prices=np.full(hours, agile_price),
        )
