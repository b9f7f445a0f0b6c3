# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Mean orbital elements of the major planets from JPL secular terms.

E. M. Standish, "Keplerian Elements for Approximate Positions of the
Major Planets" (JPL/Caltech). Each element is value + rate·T with T in
Julian centuries of TDB from J2000.0.

    Table 1   1800 AD – 2050 AD, linear terms only.
    Table 2a  3000 BC – 3000 AD, linear terms, used with the Table 2b
              extra mean-anomaly terms b·T² + c·cos(f·T) + s·sin(f·T)
              for Jupiter through Pluto.

Element order in the tables: a (AU), e, I (deg), L (deg), ϖ (deg), Ω (deg).
"""
import math
from dataclasses import dataclass
from enum import Enum

from perihelion.domain.errors import DateOutOfRangeError
from perihelion.domain.orbital_elements import OrbitalElements
from perihelion.domain.orbital_mechanics import GaussianConstants, normalize_degrees
from perihelion.domain.time_systems import AstroTime, calendar_to_jd


class Planet(Enum):
    """Bodies covered by the JPL approximate elements."""
    MERCURY = "mercury"
    VENUS = "venus"
    EARTH = "earth"      # Earth-Moon barycenter
    MARS = "mars"
    JUPITER = "jupiter"
    SATURN = "saturn"
    URANUS = "uranus"
    NEPTUNE = "neptune"
    PLUTO = "pluto"

    @classmethod
    def from_name(cls, name: str) -> "Planet":
        """Look up a planet by case-insensitive name ('emb' means Earth)."""
        key = name.strip().lower()
        if key in ("emb", "earth-moon barycenter", "earth moon barycenter"):
            key = "earth"
        try:
            return cls(key)
        except ValueError:
            raise KeyError(f"Unknown planet: {name!r}") from None


_Terms = tuple[tuple[float, float], ...]

_TABLE_1: dict[Planet, _Terms] = {
    Planet.MERCURY: ((0.38709927, 0.00000037), (0.20563593, 0.00001906),
                     (7.00497902, -0.00594749), (252.25032350, 149472.67411175),
                     (77.45779628, 0.16047689), (48.33076593, -0.12534081)),
    Planet.VENUS: ((0.72333566, 0.00000390), (0.00677672, -0.00004107),
                   (3.39467605, -0.00078890), (181.97909950, 58517.81538729),
                   (131.60246718, 0.00268329), (76.67984255, -0.27769418)),
    Planet.EARTH: ((1.00000261, 0.00000562), (0.01671123, -0.00004392),
                   (-0.00001531, -0.01294668), (100.46457166, 35999.37244981),
                   (102.93768193, 0.32327364), (0.0, 0.0)),
    Planet.MARS: ((1.52371034, 0.00001847), (0.09339410, 0.00007882),
                  (1.84969142, -0.00813131), (-4.55343205, 19140.30268499),
                  (-23.94362959, 0.44441088), (49.55953891, -0.29257343)),
    Planet.JUPITER: ((5.20288700, -0.00011607), (0.04838624, -0.00013253),
                     (1.30439695, -0.00183714), (34.39644051, 3034.74612775),
                     (14.72847983, 0.21252668), (100.47390909, 0.20469106)),
    Planet.SATURN: ((9.53667594, -0.00125060), (0.05386179, -0.00050991),
                    (2.48599187, 0.00193609), (49.95424423, 1222.49362201),
                    (92.59887831, -0.41897216), (113.66242448, -0.28867794)),
    Planet.URANUS: ((19.18916464, -0.00196176), (0.04725744, -0.00004397),
                    (0.77263783, -0.00242939), (313.23810451, 428.48202785),
                    (170.95427630, 0.40805281), (74.01692503, 0.04240589)),
    Planet.NEPTUNE: ((30.06992276, 0.00026291), (0.00859048, 0.00005105),
                     (1.77004347, 0.00035372), (-55.12002969, 218.45945325),
                     (44.96476227, -0.32241464), (131.78422574, -0.00508664)),
    Planet.PLUTO: ((39.48211675, -0.00031596), (0.24882730, 0.00005170),
                   (17.14001206, 0.00004818), (238.92903833, 145.20780515),
                   (224.06891629, -0.04062942), (110.30393684, -0.01183482)),
}

_TABLE_2A: dict[Planet, _Terms] = {
    Planet.MERCURY: ((0.38709843, 0.0), (0.20563661, 0.00002123),
                     (7.00559432, -0.00590158), (252.25166724, 149472.67486623),
                     (77.45771895, 0.15940013), (48.33961819, -0.12214182)),
    Planet.VENUS: ((0.72332102, -0.00000026), (0.00676399, -0.00005107),
                   (3.39777545, 0.00043494), (181.97970850, 58517.81560260),
                   (131.76755713, 0.05679648), (76.67261496, -0.27274174)),
    Planet.EARTH: ((1.00000018, -0.00000003), (0.01673163, -0.00003661),
                   (-0.00054346, -0.01337178), (100.46691572, 35999.37306329),
                   (102.93005885, 0.31795260), (-5.11260389, -0.24123856)),
    Planet.MARS: ((1.52371243, 0.00000097), (0.09336511, 0.00009149),
                  (1.85181869, -0.00724757), (-4.56813164, 19140.29934243),
                  (-23.91744784, 0.45223625), (49.71320984, -0.26852431)),
    Planet.JUPITER: ((5.20248019, -0.00002864), (0.04853590, 0.00018026),
                     (1.29861416, -0.00322699), (34.33479152, 3034.90371757),
                     (14.27495244, 0.18199196), (100.29282654, 0.13024619)),
    Planet.SATURN: ((9.54149883, -0.00003065), (0.05550825, -0.00032044),
                    (2.49424102, 0.00451969), (50.07571329, 1222.11494724),
                    (92.86136063, 0.54179478), (113.63998702, -0.25015002)),
    Planet.URANUS: ((19.18797948, -0.00020455), (0.04685740, -0.00001550),
                    (0.77298127, -0.00180155), (314.20276625, 428.49512595),
                    (172.43404441, 0.09266985), (73.96250215, 0.05739699)),
    Planet.NEPTUNE: ((30.06952752, 0.00006447), (0.00895439, 0.00000818),
                     (1.77005520, 0.00022400), (304.22289287, 218.46515314),
                     (46.68158724, 0.01009938), (131.78635853, -0.00606302)),
    Planet.PLUTO: ((39.48686035, 0.00449751), (0.24885238, 0.00006016),
                   (17.14104260, 0.00000501), (238.96535011, 145.18042903),
                   (224.09702598, -0.00968827), (110.30167986, -0.00809981)),
}

# Table 2b: (b, c, s, f) with f in degrees per century.
_TABLE_2B: dict[Planet, tuple[float, float, float, float]] = {
    Planet.JUPITER: (-0.00012452, 0.06064060, -0.35635438, 38.35125000),
    Planet.SATURN: (0.00025899, -0.13434469, 0.87320147, 38.35125000),
    Planet.URANUS: (0.00058331, -0.97731848, 0.17689245, 7.67025000),
    Planet.NEPTUNE: (-0.00041348, 0.68346318, -0.10162547, 7.67025000),
    Planet.PLUTO: (-0.01262724, 0.0, 0.0, 0.0),
}

# Validity windows as [start, end) TDB Julian dates.
_TABLE_1_RANGE = (calendar_to_jd(1800, 1, 1.0), calendar_to_jd(2051, 1, 1.0))
_TABLE_2_RANGE = (calendar_to_jd(-2999, 1, 1.0), calendar_to_jd(3001, 1, 1.0))


@dataclass(frozen=True)
class PlanetaryElements:
    """Mean elements of a planet at one instant, J2000 ecliptic."""
    planet: Planet
    jd_tdb: float
    a_au: float
    e: float
    inclination_deg: float
    mean_longitude_deg: float
    long_perihelion_deg: float
    node_deg: float
    mean_anomaly_deg: float
    table: str


def _as_jd(time: AstroTime | float) -> float:
    return time.jd_tdb if isinstance(time, AstroTime) else float(time)


def evaluate(planet: Planet, time: AstroTime | float) -> PlanetaryElements:
    """
    Mean elements of ``planet`` at ``time``.

    Table 1 is used inside 1800–2050, Table 2a/2b elsewhere in
    3000 BC – 3000 AD.

    Raises:
        DateOutOfRangeError: ``time`` falls outside 3000 BC – 3000 AD.
    """
    jd = _as_jd(time)
    if _TABLE_1_RANGE[0] <= jd < _TABLE_1_RANGE[1]:
        terms, table = _TABLE_1[planet], "1"
    elif _TABLE_2_RANGE[0] <= jd < _TABLE_2_RANGE[1]:
        terms, table = _TABLE_2A[planet], "2a"
    else:
        raise DateOutOfRangeError(
            f"JD {jd} is outside the 3000 BC - 3000 AD range of the "
            f"planetary element tables"
        )

    t = (jd - GaussianConstants.J2000_JD) / GaussianConstants.DAYS_PER_CENTURY
    a, e, inc, mean_long, long_peri, node = (v + rate * t for v, rate in terms)

    mean_anomaly = mean_long - long_peri
    if table == "2a" and planet in _TABLE_2B:
        b, c, s, f = _TABLE_2B[planet]
        ft = math.radians(f * t)
        mean_anomaly += b * t * t + c * math.cos(ft) + s * math.sin(ft)

    return PlanetaryElements(
        planet=planet,
        jd_tdb=jd,
        a_au=a,
        e=e,
        inclination_deg=inc,
        mean_longitude_deg=normalize_degrees(mean_long),
        long_perihelion_deg=normalize_degrees(long_peri),
        node_deg=normalize_degrees(node),
        mean_anomaly_deg=normalize_degrees(mean_anomaly),
        table=table,
    )


def planet_elements(planet: Planet, time: AstroTime | float) -> OrbitalElements:
    """Osculating-equivalent OrbitalElements of ``planet`` at ``time``.

    The mean longitude handed on is ϖ + M, so the Table 2b corrections
    reach the propagator.
    """
    raw = evaluate(planet, time)
    return OrbitalElements.planet(
        epoch=AstroTime(raw.jd_tdb),
        a_au=raw.a_au,
        e=raw.e,
        inclination_deg=raw.inclination_deg,
        long_perihelion_deg=raw.long_perihelion_deg,
        node_deg=raw.node_deg,
        mean_longitude_deg=raw.long_perihelion_deg + raw.mean_anomaly_deg,
        name=planet.value.capitalize(),
    )
