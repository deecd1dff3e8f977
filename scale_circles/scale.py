import math

# OGC default screen pixel size of 0.28mm
DEFAULT_DPI = 25.4 / 0.28
INCHES_PER_METER = 1000 / 25.4

# Nice numbers are LEADING_DIGITS[n] * 10^k
LEADING_DIGITS = (1, 2.5, 5)

# Sphere used by the host framework for degree <-> meter conversion
EARTH_RADIUS = 6370997
METERS_PER_UNIT = {
    "degrees": 2 * math.pi * EARTH_RADIUS / 360,
    "m": 1,
}

# Imperial
METERS_PER_INCH = 0.0254
METERS_PER_FOOT = 0.3048
METERS_PER_YARD = 0.9144
METERS_PER_MILE = 1609.344

# US survey
INCHES_PER_US_METER = 39.37
METERS_PER_US_FOOT = 0.30480061
METERS_PER_US_MILE = 1609.3472

METERS_PER_NAUTICAL_MILE = 1852

# Fixed size of ring 0, independent of zoom
CENTER_MARKER_RADIUS = 3

POINTS_PER_INCH = 72.0  # Standard PostScript points per inch
