import logging
import os

import pandas as pd

from .constants import HOURS_PER_YEAR
from .errors import WeatherNotFoundError
from .measurements import WeatherData
from .regions import round_coordinate

_LOGGER = logging.getLogger(__name__)

OUTSIDE_TEMPERATURES_DIR = "outside_temps"
SOLAR_IRRADIANCES_DIR = "solar_irradiances"
AGILE_TARIFF_FILE = "agile_tariff.csv"


def weather_filename(latitude, longitude):
    """Per-location file name; coordinates snap to the 0.5 degree grid."""
    return f"lat_{round_coordinate(latitude):.1f}_lon_{round_coordinate(longitude):.1f}.csv"


def load_series(filepath, expected_length=HOURS_PER_YEAR):
    """
    Read a single-column CSV (no header) of hourly values.
    Extra columns are ignored; only the first one is used.
    """
    if not os.path.exists(filepath):
        raise WeatherNotFoundError(f"Weather file not found: {filepath}")

    df = pd.read_csv(filepath, header=None)
    series = pd.to_numeric(df.iloc[:, 0], errors="coerce")
    if series.isna().any():
        bad = int(series.isna().sum())
        raise ValueError(f"{filepath}: {bad} non-numeric values")
    if expected_length is not None and len(series) != expected_length:
        raise ValueError(f"{filepath}: expected {expected_length} rows, got {len(series)}")

    _LOGGER.debug("Loaded %d rows from %s", len(series), filepath)
    return series.to_numpy(dtype=float)


def load_weather(assets_dir, latitude, longitude, expected_length=HOURS_PER_YEAR) -> WeatherData:
    filename = weather_filename(latitude, longitude)
    print(f"Loading weather for {filename} from {assets_dir}...")
    return WeatherData(
        outside_temperatures=load_series(
            os.path.join(assets_dir, OUTSIDE_TEMPERATURES_DIR, filename), expected_length),
        solar_irradiances=load_series(
            os.path.join(assets_dir, SOLAR_IRRADIANCES_DIR, filename), expected_length),
        agile_prices=load_series(
            os.path.join(assets_dir, AGILE_TARIFF_FILE), expected_length),
    )
