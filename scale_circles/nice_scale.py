import math
from typing import Tuple
from scale_circles.project_types import MagnitudeClass, NiceScaleResult, UnitSystem
from scale_circles.scale import (
    DEFAULT_DPI,
    LEADING_DIGITS,
    METERS_PER_FOOT,
    METERS_PER_INCH,
    METERS_PER_MILE,
    METERS_PER_NAUTICAL_MILE,
    METERS_PER_UNIT,
    METERS_PER_US_FOOT,
    METERS_PER_US_MILE,
    METERS_PER_YARD,
    INCHES_PER_US_METER,
)
from scale_circles.logger import logger

# A nominal distance belongs to the first regime whose bound it is strictly below
Regime = Tuple[float, MagnitudeClass]


def _magnitude(suffix: str, multiplier: float = 1, divisor: float = 1) -> MagnitudeClass:
    return {"suffix": suffix, "multiplier": multiplier, "divisor": divisor}


MAGNITUDE_REGIMES: dict[UnitSystem, list[Regime]] = {
    UnitSystem.DEGREES: [
        (METERS_PER_UNIT["degrees"] / 60, _magnitude("″", multiplier=3600)),  # seconds
        (METERS_PER_UNIT["degrees"], _magnitude("′", multiplier=60)),  # minutes
        (math.inf, _magnitude("°")),  # degrees
    ],
    UnitSystem.IMPERIAL: [
        (METERS_PER_YARD, _magnitude("in", divisor=METERS_PER_INCH)),
        (METERS_PER_MILE, _magnitude("ft", divisor=METERS_PER_FOOT)),
        (math.inf, _magnitude("mi", divisor=METERS_PER_MILE)),
    ],
    UnitSystem.NAUTICAL: [
        (math.inf, _magnitude("NM", divisor=METERS_PER_NAUTICAL_MILE)),
    ],
    UnitSystem.METRIC: [
        (0.001, _magnitude("μm", multiplier=1000000)),
        (1, _magnitude("mm", multiplier=1000)),
        (1000, _magnitude("m")),
        (math.inf, _magnitude("km", divisor=1000)),
    ],
    UnitSystem.US: [
        (METERS_PER_YARD, _magnitude("in", multiplier=INCHES_PER_US_METER)),
        (METERS_PER_MILE, _magnitude("ft", divisor=METERS_PER_US_FOOT)),
        (math.inf, _magnitude("mi", divisor=METERS_PER_US_MILE)),
    ],
}


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity"""
    return math.floor(value + 0.5)


def effective_min_width(min_width: float, dpi: float | None) -> float:
    """Minimum width in pixels scaled to the output device resolution"""
    if not dpi:
        return min_width
    return min_width * dpi / DEFAULT_DPI


def classify_magnitude(nominal: float, units: UnitSystem | str) -> MagnitudeClass:
    """
    Pick the unit suffix for a nominal distance

    Args:
        nominal: Distance in meters, or in degrees for the degrees unit system
        units: Unit system to classify in

    Returns:
        The magnitude class holding the suffix and the multiplier and divisor
        that rescale a per pixel distance into the suffix unit
    """
    units = UnitSystem.parse(units)
    regimes = MAGNITUDE_REGIMES[units]

    if units == UnitSystem.DEGREES:
        nominal *= METERS_PER_UNIT["degrees"]

    for bound, magnitude in regimes:
        if nominal < bound:
            return magnitude
    # Only reached for nan
    return regimes[-1][1]


def select_nice_scale(
    min_width: float,
    dpi: float | None,
    point_resolution: float,
    units: UnitSystem | str,
) -> NiceScaleResult | None:
    """
    Find the smallest nice distance whose width reaches the minimum width

    Candidates are walked in increasing order 1, 2.5, 5, 10, 25, 50, ... scaled
    by powers of ten, starting from the decade of the nominal distance.

    Args:
        min_width: Minimum width in pixels at DEFAULT_DPI
        dpi: Output device dpi, None for DEFAULT_DPI
        point_resolution: Ground distance per pixel in meters (degrees for the
            degrees unit system)
        units: Unit system the result is expressed in

    Returns:
        The accepted scale, or None when no finite width can be produced
    """
    units = UnitSystem.parse(units)
    min_width = effective_min_width(min_width, dpi)
    nominal = min_width * point_resolution

    magnitude = classify_magnitude(nominal, units)
    suffix = magnitude["suffix"]

    if not math.isfinite(point_resolution) or point_resolution <= 0:
        logger.warning(f"Cannot select a scale for point resolution {point_resolution}")
        return None

    point_resolution = (
        point_resolution * magnitude["multiplier"] / magnitude["divisor"]
    )
    start = min_width * point_resolution
    if not math.isfinite(start) or start <= 0:
        logger.warning(f"Cannot select a scale for nominal distance {start} {suffix}")
        return None

    i = 3 * math.floor(math.log10(start))
    while True:
        decimal_exponent = i // 3
        try:
            decimal = 10.0**decimal_exponent
        except OverflowError:
            logger.warning(f"Scale search ran out of range at 1e{decimal_exponent} {suffix}")
            return None
        count = LEADING_DIGITS[i % len(LEADING_DIGITS)] * decimal
        raw_width = count / point_resolution
        if not math.isfinite(raw_width):
            logger.warning(f"Scale search ran out of range at {count} {suffix}")
            return None
        width = round_half_up(raw_width)
        if width >= min_width:
            break
        i += 1

    return {
        "chosen_distance": count,
        "pixel_width": width,
        "decimal_exponent": decimal_exponent,
        "suffix": suffix,
        "point_resolution": point_resolution,
    }


def scale_text(result: NiceScaleResult) -> str:
    """Fixed point text for the chosen distance such as 50 km or 0.25 mm"""
    exponent = result["decimal_exponent"]
    leading_digit = result["chosen_distance"] / 10.0**exponent
    # 2.5 needs one decimal more than its decade
    fractional = 0 if round(leading_digit, 6).is_integer() else 1
    decimals = max(0, fractional - exponent)
    return f"{result['chosen_distance']:.{decimals}f} {result['suffix']}"
