"""
Closed enumerations of the design space.
Iteration order is the report order and must not change.
"""
from enum import Enum


class HeatOption(Enum):
    ELECTRIC_RESISTANCE = "electric-boiler"
    AIR_SOURCE_HEAT_PUMP = "air-source-heat-pump"
    GROUND_SOURCE_HEAT_PUMP = "ground-source-heat-pump"

    @property
    def label(self):
        return _LABELS[self]


class SolarOption(Enum):
    NONE = "none"
    PHOTOVOLTAIC = "photovoltaic"
    FLAT_PLATE = "flat-plate"
    EVACUATED_TUBE = "evacuated-tube"
    FLAT_PLATE_AND_PHOTOVOLTAIC = "flat-plate-and-photovoltaic"
    EVACUATED_TUBE_AND_PHOTOVOLTAIC = "evacuated-tube-and-photovoltaic"
    PHOTOVOLTAIC_THERMAL_HYBRID = "photovoltaic-thermal-hybrid"

    @property
    def label(self):
        return _LABELS[self]


class Tariff(Enum):
    FLAT_RATE = "flat-rate"
    ECONOMY_7 = "economy-7"
    BULB_SMART = "bulb-smart"
    OCTOPUS_GO = "octopus-go"
    OCTOPUS_AGILE = "octopus-agile"

    @property
    def label(self):
        return _LABELS[self]


# CSV names
_LABELS = {
    HeatOption.ELECTRIC_RESISTANCE: "ElectricResistanceHeating",
    HeatOption.AIR_SOURCE_HEAT_PUMP: "AirSourceHeatPump",
    HeatOption.GROUND_SOURCE_HEAT_PUMP: "GroundSourceHeatPump",
    SolarOption.NONE: "None",
    SolarOption.PHOTOVOLTAIC: "PhotoVoltaics",
    SolarOption.FLAT_PLATE: "FlatPlate",
    SolarOption.EVACUATED_TUBE: "EvacuatedTube",
    SolarOption.FLAT_PLATE_AND_PHOTOVOLTAIC: "PhotoVoltaicsWithFlatPlate",
    SolarOption.EVACUATED_TUBE_AND_PHOTOVOLTAIC: "PhotoVoltaicsWithEvacuatedTube",
    SolarOption.PHOTOVOLTAIC_THERMAL_HYBRID: "PhotoVoltaicThermalHybrid",
    Tariff.FLAT_RATE: "FlatRate",
    Tariff.ECONOMY_7: "Economy7",
    Tariff.BULB_SMART: "BulbSmart",
    Tariff.OCTOPUS_GO: "OctopusGo",
    Tariff.OCTOPUS_AGILE: "OctopusAgile",
}


def heat_solar_pairs():
    """All 21 (heat, solar) pairs, heat-major."""
    return [(heat, solar) for heat in HeatOption for solar in SolarOption]
