"""
Constants for libjyotish.

Body identifiers, physical constants and the Jyotish naming tables shared by
every calculation module.
"""

# =============================================================================
# BODY IDENTIFIERS
# =============================================================================

SUN = "sun"
MOON = "moon"
MERCURY = "mercury"
VENUS = "venus"
EARTH = "earth"
MARS = "mars"
JUPITER = "jupiter"
SATURN = "saturn"
RAHU = "rahu"  # Ascending (north) lunar node
KETU = "ketu"  # Descending (south) lunar node

# Bodies reported in every snapshot, in display order
GRAHAS = (SUN, MOON, MARS, MERCURY, JUPITER, VENUS, SATURN, RAHU, KETU)

# Bodies positioned with Keplerian elements (heliocentric)
KEPLERIAN_BODIES = (MERCURY, VENUS, EARTH, MARS, JUPITER, SATURN)

JYOTISH_NAMES = {
    SUN: "Surya",
    MOON: "Chandra",
    MARS: "Mangala",
    MERCURY: "Budha",
    JUPITER: "Guru",
    VENUS: "Shukra",
    SATURN: "Shani",
    RAHU: "Rahu",
    KETU: "Ketu",
}

# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================

AU_KM = 149597870.7  # Astronomical unit in km (IAU 2012)
J2000 = 2451545.0  # Julian Day of 2000-01-01 12:00 TT
DAYS_PER_JULIAN_YEAR = 365.25
DAYS_PER_JULIAN_CENTURY = 36525.0

MOON_MEAN_DISTANCE_KM = 385000.56  # Meeus Ch. 47 constant term
MOON_MEAN_DISTANCE_AU = 0.00257
SIDEREAL_MONTH_DAYS = 27.3

# =============================================================================
# CALENDAR CONSTANTS
# =============================================================================

SIGN_SPAN = 30.0
NAKSHATRA_COUNT = 27
NAKSHATRA_SPAN = 360.0 / NAKSHATRA_COUNT  # 13°20'
PADA_SPAN = NAKSHATRA_SPAN / 4.0  # 3°20'

# Conjunction orbs (degrees)
TRANSIT_THRESHOLD = 5.0
MAJOR_ORB = 2.0
MINOR_ORB = 3.0

# Horizon for externally supplied calendar events (days)
EVENT_HORIZON_DAYS = 30

# =============================================================================
# SIDEREAL MODES
# =============================================================================

SIDM_LAHIRI = "lahiri"
SIDM_RAMAN = "raman"
SIDM_KRISHNAMURTI = "kp"
SIDM_FAGAN_BRADLEY = "fagan"

# =============================================================================
# SOURCE LABELS
# =============================================================================

SOURCE_SWISS_EPHEMERIS = "SwissEphemeris"
SOURCE_FREE_ASTROLOGY = "FreeAstrologyAPI"
SOURCE_JPL = "JPL"
SOURCE_CALCULATED = "Calculated"
