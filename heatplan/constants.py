"""
Physical, economic and search constants.
Units are kWh, °C, m² and m³ unless noted.
"""

# Hot Water
HOT_WATER_TEMPERATURE = 51.0   # Delivery temperature (°C)
BOOST_TEMPERATURE = 60.0       # Upper band when PV surplus boosts the tank
MAX_STORAGE_TEMPERATURE = 95.0
WATER_HEAT_CAPACITY = 4.18     # kJ/kg.K

# Building
BUILDING_HEAT_CAPACITY = 250.0  # kJ/m².K (SAP medium thermal mass)
BODY_HEAT_GAIN_KW = 60.0 / 1000.0  # Per occupant
BOILER_EFFICIENCY = 0.9
FUEL_CELL_EFFICIENCY = 0.94

# EPC Calibration
EPC_TRANSMITTANCE_MIN = 0.5
EPC_TRANSMITTANCE_MAX = 3.0
EPC_TRANSMITTANCE_STEP = 0.01
EPC_HEATED_TEMPERATURE = 20.0
EPC_UNHEATED_TEMPERATURE = 7.0

# Storage
TES_VOLUME_STEP = 0.1
TES_UNIT_COST = 2068.3
TES_COST_EXPONENT = 0.553
TES_U_VALUE = 1.30 / 1000.0     # kW/m².K, linearised
TES_MIN_CHARGE_LITRES = 10.0

# Solar
SOLAR_ROOF_PITCH = 35.0   # Degrees from horizontal
WINDOW_PITCH = 90.0
PV_PERFORMANCE_RATIO = 0.8
SOLAR_THERMAL_PERFORMANCE = 0.8
PV_PANEL_AREA_KW = 0.2    # kWp per m²

# Economics
DISCOUNT_RATE = 1.035     # 3.5% (HM Treasury Green Book)
NPC_YEARS = 20

# Emissions (gCO2e/kWh)
GRID_EMISSIONS = 212.0
PV_EMBODIED_EMISSIONS = 75.0
SOLAR_THERMAL_EMISSIONS = 22.5

# Heat Source Limits (kW electrical)
HEAT_SOURCE_MAX_POWER = 7.0

# Surface Search
GRADIENT_FACTOR = 0.2     # Damping applied to the steepest observed slope
TARGET_SEED_STEP = 7      # Aim for one seed point per this many grid cells
MIN_SEED_SEGMENTS = 3

HOURS_PER_DAY = 24
HOURS_PER_YEAR = 8760
