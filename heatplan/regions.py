"""
Postcode climate regions and location lookup tables.
"""
import logging
import math
import re

from .errors import RegionNotFoundError, WeatherNotFoundError
from .profiles import MonthlyProfile

_LOGGER = logging.getLogger(__name__)

# (postcode prefix, min district, max district, region id)
# First match wins. A max of 0 matches any district.
POSTCODE_REGIONS = (
    ("ZE", 0, 0, 20),
    ("YO25", 0, 0, 11),
    ("YO", 15, 16, 11),
    ("YO", 0, 0, 10),
    ("WV", 0, 0, 6),
    ("WS", 0, 0, 6),
    ("WR", 0, 0, 6),
    ("WN", 0, 0, 7),
    ("WF", 0, 0, 11),
    ("WD", 0, 0, 1),
    ("WC", 0, 0, 1),
    ("WA", 0, 0, 7),
    ("W", 0, 0, 1),
    ("UB", 0, 0, 1),
    ("TW", 0, 0, 1),
    ("TS", 0, 0, 10),
    ("TR", 0, 0, 4),
    ("TQ", 0, 0, 4),
    ("TN", 0, 0, 2),
    ("TF", 0, 0, 6),
    ("TD15", 0, 0, 9),
    ("TD12", 0, 0, 9),
    ("TD", 0, 0, 9),
    ("TA", 0, 0, 5),
    ("SY", 15, 25, 13),
    ("SY14", 0, 0, 7),
    ("SY", 0, 0, 6),
    ("SW", 0, 0, 1),
    ("ST", 0, 0, 6),
    ("SS", 0, 0, 12),
    ("SR", 7, 8, 10),
    ("SR", 0, 0, 9),
    ("SP", 6, 11, 3),
    ("SP", 0, 0, 5),
    ("SO", 0, 0, 3),
    ("SN7", 0, 0, 1),
    ("SN", 0, 0, 5),
    ("SM", 0, 0, 1),
    ("SL", 0, 0, 1),
    ("SK", 22, 23, 6),
    ("SK17", 0, 0, 6),
    ("SK13", 0, 0, 6),
    ("SK", 0, 0, 7),
    ("SG", 0, 0, 1),
    ("SE", 0, 0, 1),
    ("SA", 61, 73, 13),
    ("SA", 31, 48, 13),
    ("SA", 14, 20, 13),
    ("SA", 0, 0, 5),
    ("S", 40, 45, 6),
    ("S", 32, 33, 6),
    ("S18", 0, 0, 6),
    ("S", 0, 0, 11),
    ("RM", 0, 0, 12),
    ("RH", 10, 20, 2),
    ("RH", 0, 0, 1),
    ("RG", 21, 29, 3),
    ("RG", 0, 0, 1),
    ("PR", 0, 0, 7),
    ("PO", 18, 22, 2),
    ("PO", 0, 0, 3),
    ("PL", 0, 0, 4),
    ("PH50", 0, 0, 14),
    ("PH49", 0, 0, 14),
    ("PH", 30, 44, 17),
    ("PH26", 0, 0, 16),
    ("PH", 19, 25, 17),
    ("PH", 0, 0, 15),
    ("PE", 20, 25, 11),
    ("PE", 9, 12, 11),
    ("PE", 0, 0, 12),
    ("PA", 0, 0, 14),
    ("OX", 0, 0, 1),
    ("OL", 0, 0, 7),
    ("NW", 0, 0, 1),
    ("NR", 0, 0, 12),
    ("NP8", 0, 0, 13),
    ("NP", 0, 0, 5),
    ("NN", 0, 0, 6),
    ("NG", 0, 0, 11),
    ("NE", 0, 0, 9),
    ("N", 0, 0, 1),
    ("ML", 0, 0, 14),
    ("MK", 0, 0, 1),
    ("ME", 0, 0, 2),
    ("M", 0, 0, 7),
    ("LU", 0, 0, 1),
    ("LS24", 0, 0, 10),
    ("LS", 0, 0, 11),
    ("LN", 0, 0, 11),
    ("LL", 30, 78, 13),
    ("LL", 23, 27, 13),
    ("LL", 0, 0, 7),
    ("LE", 0, 0, 6),
    ("LD", 0, 0, 13),
    ("LA", 7, 23, 8),
    ("LA", 0, 0, 7),
    ("L", 0, 0, 7),
    ("KY", 0, 0, 15),
    ("KW", 15, 17, 19),
    ("KW", 0, 0, 17),
    ("KT", 0, 0, 1),
    ("KA", 0, 0, 14),
    ("IV36", 0, 0, 16),
    ("IV", 30, 32, 16),
    ("IV", 0, 0, 17),
    ("IP", 0, 0, 12),
    ("IG", 0, 0, 12),
    ("HX", 0, 0, 11),
    ("HU", 0, 0, 11),
    ("HS", 0, 0, 18),
    ("HR", 0, 0, 6),
    ("HP", 0, 0, 1),
    ("HG", 0, 0, 10),
    ("HD", 0, 0, 11),
    ("HA", 0, 0, 1),
    ("GU", 51, 52, 3),
    ("GU46", 0, 0, 3),
    ("GU", 30, 35, 3),
    ("GU", 28, 29, 2),
    ("GU14", 0, 0, 3),
    ("GU", 11, 12, 3),
    ("GU", 0, 0, 1),
    ("GL", 0, 0, 5),
    ("G", 0, 0, 14),
    ("FY", 0, 0, 7),
    ("FK", 0, 0, 14),
    ("EX", 0, 0, 4),
    ("EN9", 0, 0, 12),
    ("EN", 0, 0, 1),
    ("EH", 43, 46, 9),
    ("EH", 0, 0, 15),
    ("EC", 0, 0, 1),
    ("E", 0, 0, 1),
    ("DY", 0, 0, 6),
    ("DT", 0, 0, 3),
    ("DN", 0, 0, 11),
    ("DL", 0, 0, 10),
    ("DH", 4, 5, 9),
    ("DH", 0, 0, 10),
    ("DG", 0, 0, 8),
    ("DE", 0, 0, 6),
    ("DD", 0, 0, 15),
    ("DA", 0, 0, 2),
    ("CW", 0, 0, 7),
    ("CV", 0, 0, 6),
    ("CT", 0, 0, 2),
    ("CR", 0, 0, 1),
    ("CO", 0, 0, 12),
    ("CM", 21, 23, 1),
    ("CM", 0, 0, 12),
    ("CH", 5, 8, 7),
    ("CH", 0, 0, 7),
    ("CF", 0, 0, 5),
    ("CB", 0, 0, 12),
    ("CA", 0, 0, 8),
    ("BT", 0, 0, 21),
    ("BS", 0, 0, 5),
    ("BR", 0, 0, 2),
    ("BN", 0, 0, 2),
    ("BL", 0, 0, 7),
    ("BH", 0, 0, 3),
    ("BD", 23, 24, 10),
    ("BD", 0, 0, 11),
    ("BB", 0, 0, 7),
    ("BA", 0, 0, 5),
    ("B", 0, 0, 6),
    ("AL", 0, 0, 1),
    ("AB", 0, 0, 16),
)

# Region id -> monthly EPC outside temperature (°C)
EPC_OUTSIDE_TEMPERATURES = {
    1: MonthlyProfile([5.1, 5.6, 7.4, 9.9, 13.0, 16.0, 17.9, 17.8, 15.2, 11.6, 8.0, 5.1]),
    2: MonthlyProfile([5.0, 5.4, 7.1, 9.5, 12.6, 15.4, 17.4, 17.5, 15.0, 11.7, 8.1, 5.2]),
    3: MonthlyProfile([5.4, 5.7, 7.3, 9.6, 12.6, 15.4, 17.3, 17.3, 15.0, 11.8, 8.4, 5.5]),
    4: MonthlyProfile([6.1, 6.4, 7.5, 9.3, 11.9, 14.5, 16.2, 16.3, 14.6, 11.8, 9.0, 6.4]),
    5: MonthlyProfile([4.9, 5.3, 7.0, 9.3, 12.2, 15.0, 16.7, 16.7, 14.4, 11.1, 7.8, 4.9]),
    6: MonthlyProfile([4.3, 4.8, 6.6, 9.0, 11.8, 14.8, 16.6, 16.5, 14.0, 10.5, 7.1, 4.2]),
    7: MonthlyProfile([4.7, 5.2, 6.7, 9.1, 12.0, 14.7, 16.4, 16.3, 14.1, 10.7, 7.5, 4.6]),
    8: MonthlyProfile([3.9, 4.3, 5.6, 7.9, 10.7, 13.2, 14.9, 14.8, 12.8, 9.7, 6.6, 3.7]),
    9: MonthlyProfile([4.0, 4.5, 5.8, 7.9, 10.4, 13.3, 15.2, 15.1, 13.1, 9.7, 6.6, 3.7]),
    10: MonthlyProfile([4.0, 4.6, 6.1, 8.3, 10.9, 13.8, 15.8, 15.6, 13.5, 10.1, 6.7, 3.8]),
    11: MonthlyProfile([4.3, 4.9, 6.5, 8.9, 11.7, 14.6, 16.6, 16.4, 14.1, 10.6, 7.1, 4.2]),
    12: MonthlyProfile([4.7, 5.2, 7.0, 9.5, 12.5, 15.4, 17.6, 17.6, 15.0, 11.4, 7.7, 4.7]),
    13: MonthlyProfile([5.0, 5.3, 6.5, 8.5, 11.2, 13.7, 15.3, 15.3, 13.5, 10.7, 7.8, 5.2]),
    14: MonthlyProfile([4.0, 4.4, 5.6, 7.9, 10.4, 13.0, 14.5, 14.4, 12.5, 9.3, 6.5, 3.8]),
    15: MonthlyProfile([3.6, 4.0, 5.4, 7.7, 10.1, 12.9, 14.6, 14.5, 12.5, 9.2, 6.1, 3.2]),
    16: MonthlyProfile([3.3, 3.6, 5.0, 7.1, 9.3, 12.2, 14.0, 13.9, 12.0, 8.8, 5.7, 2.9]),
    17: MonthlyProfile([3.1, 3.2, 4.4, 6.6, 8.9, 11.4, 13.2, 13.1, 11.3, 8.2, 5.4, 2.7]),
    18: MonthlyProfile([5.2, 5.0, 5.8, 7.6, 9.7, 11.8, 13.4, 13.6, 12.1, 9.6, 7.3, 5.2]),
    19: MonthlyProfile([4.4, 4.2, 5.0, 7.0, 8.9, 11.2, 13.1, 13.2, 11.7, 9.1, 6.6, 4.3]),
    20: MonthlyProfile([4.6, 4.1, 4.7, 6.5, 8.3, 10.5, 12.4, 12.8, 11.4, 8.8, 6.5, 4.6]),
    21: MonthlyProfile([4.8, 5.2, 6.4, 8.4, 10.9, 13.5, 15.0, 14.9, 13.1, 10.0, 7.2, 4.7]),
}

# Region id -> monthly EPC solar irradiance (W/m²)
EPC_SOLAR_IRRADIANCES = {
    1: MonthlyProfile([30, 56, 98, 157, 195, 217, 203, 173, 127, 73, 39, 24]),
    2: MonthlyProfile([32, 59, 104, 170, 208, 231, 216, 182, 133, 77, 41, 25]),
    3: MonthlyProfile([35, 62, 109, 172, 209, 235, 217, 185, 138, 80, 44, 27]),
    4: MonthlyProfile([36, 63, 111, 174, 210, 233, 204, 182, 136, 78, 44, 28]),
    5: MonthlyProfile([32, 59, 105, 167, 201, 226, 206, 175, 130, 74, 40, 25]),
    6: MonthlyProfile([28, 55, 97, 153, 191, 208, 194, 163, 121, 69, 35, 23]),
    7: MonthlyProfile([24, 51, 95, 152, 191, 203, 186, 152, 115, 65, 31, 20]),
    8: MonthlyProfile([23, 51, 95, 157, 200, 203, 194, 156, 113, 62, 30, 19]),
    9: MonthlyProfile([23, 50, 92, 151, 200, 196, 187, 153, 11, 61, 30, 18]),
    10: MonthlyProfile([25, 51, 95, 152, 196, 198, 190, 156, 115, 64, 32, 20]),
    11: MonthlyProfile([26, 54, 96, 150, 192, 200, 189, 157, 115, 66, 33, 21]),
    12: MonthlyProfile([30, 58, 101, 165, 203, 220, 206, 173, 128, 74, 39, 24]),
    13: MonthlyProfile([29, 57, 104, 164, 205, 220, 199, 167, 120, 68, 35, 22]),
    14: MonthlyProfile([19, 46, 88, 148, 196, 193, 185, 150, 101, 55, 25, 15]),
    15: MonthlyProfile([21, 46, 89, 146, 198, 191, 183, 150, 106, 57, 27, 15]),
    16: MonthlyProfile([19, 45, 89, 143, 194, 188, 177, 144, 101, 54, 25, 14]),
    17: MonthlyProfile([17, 43, 85, 145, 189, 185, 170, 139, 98, 51, 22, 12]),
    18: MonthlyProfile([16, 41, 87, 155, 205, 206, 185, 148, 101, 51, 21, 11]),
    19: MonthlyProfile([14, 39, 84, 143, 205, 201, 178, 145, 100, 50, 19, 9]),
    20: MonthlyProfile([12, 34, 79, 135, 196, 190, 168, 144, 90, 46, 16, 7]),
    21: MonthlyProfile([24, 52, 96, 155, 201, 198, 183, 150, 107, 61, 30, 18]),
}

# (latitude*10, longitude*10, coldest outside temperature of the year in m°C)
COLDEST_TEMPERATURES = (
    (500, -35, 4610),
    (500, -40, 4554),
    (500, -45, 4406),
    (500, -50, 4017),
    (500, -55, 4492),
    (505, -5, 3020),
    (505, -10, 3188),
    (505, -15, 2812),
    (505, -20, 2583),
    (505, -25, 2774),
    (505, -30, 2697),
    (505, -35, 1744),
    (505, -40, 854),
    (505, -45, 1270),
    (505, -50, 2708),
    (505, 0, 2886),
    (505, 5, 2764),
    (510, -5, -3846),
    (510, -10, -4285),
    (510, -15, -4421),
    (510, -20, -4274),
    (510, -25, -3764),
    (510, -30, -2635),
    (510, -35, -1712),
    (510, -40, -232),
    (510, -45, 1638),
    (510, 0, -3344),
    (510, 5, -2101),
    (510, 10, 307),
    (510, 15, 1271),
    (515, -5, -5969),
    (515, -10, -5673),
    (515, -15, -5090),
    (515, -20, -4292),
    (515, -25, -3039),
    (515, -30, -1591),
    (515, -35, 221),
    (515, -40, 1249),
    (515, -45, 2001),
    (515, -50, 2948),
    (515, 0, -5628),
    (515, 5, -4165),
    (515, 10, -1369),
    (515, 15, 1813),
    (520, -5, -5601),
    (520, -10, -5283),
    (520, -15, -4854),
    (520, -20, -4370),
    (520, -25, -3700),
    (520, -30, -3597),
    (520, -35, -3130),
    (520, -40, -2297),
    (520, -45, -642),
    (520, -50, 2044),
    (520, -55, 3622),
    (520, 0, -5439),
    (520, 5, -4533),
    (520, 10, -2836),
    (520, 15, 146),
    (525, -5, -4979),
    (525, -10, -4814),
    (525, -15, -4451),
    (525, -20, -3991),
    (525, -25, -3603),
    (525, -30, -3359),
    (525, -35, -3007),
    (525, -40, -479),
    (525, -45, 2769),
    (525, 0, -4845),
    (525, 5, -4000),
    (525, 10, -3960),
    (525, 15, -1778),
    (525, 20, 1576),
    (530, -5, -4434),
    (530, -10, -4510),
    (530, -15, -4234),
    (530, -20, -3806),
    (530, -25, -3409),
    (530, -30, -2964),
    (530, -35, -2419),
    (530, -40, -304),
    (530, -45, 1987),
    (530, -50, 3827),
    (530, 0, -4070),
    (530, 5, -1754),
    (530, 10, 277),
    (530, 15, 1709),
    (530, 20, 2397),
    (535, -5, -4156),
    (535, -10, -4141),
    (535, -15, -3834),
    (535, -20, -3492),
    (535, -25, -2729),
    (535, -30, -1344),
    (535, -35, 446),
    (535, -40, 1524),
    (535, -45, 2578),
    (535, 0, -2173),
    (535, 5, 1351),
    (540, -5, -2622),
    (540, -10, -3424),
    (540, -15, -3834),
    (540, -20, -3837),
    (540, -25, -2766),
    (540, -30, -560),
    (540, -35, 1220),
    (540, -55, 3297),
    (540, -60, 1151),
    (540, -65, -1496),
    (540, -70, -3164),
    (540, -75, -3294),
    (540, -80, -2848),
    (540, 0, 231),
    (545, -5, 579),
    (545, -10, -1903),
    (545, -15, -4414),
    (545, -20, -5579),
    (545, -25, -5161),
    (545, -30, -2187),
    (545, -35, -424),
    (545, -40, 1047),
    (545, -45, 2244),
    (545, -50, 2994),
    (545, -55, 1337),
    (545, -60, -575),
    (545, -65, -2338),
    (545, -70, -3041),
    (545, -75, -2662),
    (545, -80, -1808),
    (550, -15, -996),
    (550, -20, -4155),
    (550, -25, -6204),
    (550, -30, -4514),
    (550, -35, -2703),
    (550, -40, -1580),
    (550, -45, -407),
    (550, -50, 806),
    (550, -55, 2081),
    (550, -60, 887),
    (550, -65, -469),
    (550, -70, -993),
    (550, -75, -770),
    (555, -15, 873),
    (555, -20, -2474),
    (555, -25, -5702),
    (555, -30, -5566),
    (555, -35, -4895),
    (555, -40, -4132),
    (555, -45, -2358),
    (555, -50, -579),
    (555, -55, 1338),
    (555, -60, 2057),
    (555, -65, 2505),
    (560, -20, 1815),
    (560, -25, 195),
    (560, -30, -2189),
    (560, -35, -4626),
    (560, -40, -5490),
    (560, -45, -4919),
    (560, -50, -3499),
    (560, -55, -1181),
    (560, -60, 1063),
    (560, -65, 2977),
    (565, -25, -305),
    (565, -30, -3110),
    (565, -35, -5410),
    (565, -40, -6757),
    (565, -45, -7005),
    (565, -50, -5879),
    (565, -55, -3253),
    (565, -60, 46),
    (565, -65, 2699),
    (565, -70, 4242),
    (570, -20, 1061),
    (570, -25, -4347),
    (570, -30, -6774),
    (570, -35, -8256),
    (570, -40, -8531),
    (570, -45, -8952),
    (570, -50, -7613),
    (570, -55, -4211),
    (570, -60, -368),
    (570, -65, 2421),
    (570, -70, 3249),
    (570, -75, 4066),
    (575, -20, 562),
    (575, -25, -2636),
    (575, -30, -3240),
    (575, -35, -3825),
    (575, -40, -4351),
    (575, -45, -5412),
    (575, -50, -7049),
    (575, -55, -3771),
    (575, -60, 2),
    (575, -65, 2105),
    (575, -70, 2649),
    (575, -75, 3287),
    (580, -35, 1614),
    (580, -40, -872),
    (580, -45, -2392),
    (580, -50, -2029),
    (580, -55, 609),
    (580, -60, 2139),
    (580, -65, 2056),
    (580, -70, 1757),
    (585, -30, 1924),
    (585, -35, 1382),
    (585, -40, 970),
    (585, -45, 903),
    (585, -50, 1605),
    (585, -55, 2935),
    (585, -60, 2901),
    (585, -65, 2723),
    (585, -70, 2661),
    (590, -25, 2975),
    (590, -30, 2525),
    (590, -35, 3066),
    (595, -15, 3281),
    (595, -25, 3684),
    (595, -30, 3790),
    (600, -10, 2361),
    (600, -15, 2383),
    (605, -10, 1794),
    (605, -15, 1783),
    (610, -10, 1721),
)

_COLDEST_BY_KEY = {(lat, lon): temp / 1000.0 for lat, lon, temp in COLDEST_TEMPERATURES}

_DISTRICT_RE = re.compile(r"\d{1,2}")


def round_coordinate(value):
    """Nearest 0.5 degree, halves away from zero."""
    return math.copysign(math.floor(abs(value) * 2.0 + 0.5), value) / 2.0 + 0.0


def coordinate_key(latitude, longitude):
    return (int(round(round_coordinate(latitude) * 10)),
            int(round(round_coordinate(longitude) * 10)))


def postcode_district(postcode):
    """Leading one or two digits of the outward code, e.g. 'SW1A 1AA' -> 1."""
    match = _DISTRICT_RE.search(postcode)
    if match is None:
        raise RegionNotFoundError(f"Postcode has no district number: {postcode!r}")
    return int(match.group())


def region_for_postcode(postcode) -> int:
    postcode = postcode.strip().upper()
    district = postcode_district(postcode)
    for prefix, minimum, maximum, region in POSTCODE_REGIONS:
        if not postcode.startswith(prefix):
            continue
        if maximum == 0 or minimum <= district <= maximum:
            _LOGGER.debug("Postcode %s -> region %d", postcode, region)
            return region
    raise RegionNotFoundError(f"Postcode did not match any climate region: {postcode!r}")


def epc_climate(region):
    """(monthly outside temperatures, monthly irradiances) for an EPC region."""
    try:
        return EPC_OUTSIDE_TEMPERATURES[region], EPC_SOLAR_IRRADIANCES[region]
    except KeyError:
        raise RegionNotFoundError(f"Unknown climate region: {region}") from None


def coldest_outside_temperature(latitude, longitude):
    key = coordinate_key(latitude, longitude)
    try:
        return _COLDEST_BY_KEY[key]
    except KeyError:
        raise WeatherNotFoundError(
            f"No weather record for latitude {latitude}, longitude {longitude}"
        ) from None
