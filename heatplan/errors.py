"""Exceptions raised by the design search."""


class RegionNotFoundError(LookupError):
    """Postcode does not map onto any climate region."""


class WeatherNotFoundError(LookupError):
    """No weather record exists for the requested coordinates."""


class ConfigurationError(ValueError):
    """Run options that cannot be combined."""
