import json
from typing import List, Tuple
from shapely.geometry import LinearRing, Point
from scale_circles.nice_scale import round_half_up
from scale_circles.project_types import Coord, NiceScaleResult, RingDescriptor
from scale_circles.scale import CENTER_MARKER_RADIUS


def format_number(value: float) -> str:
    """Shortest text for a number, without a trailing .0 for whole values"""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def ring_label(scale: NiceScaleResult, steps: int, index: int) -> str:
    """Cumulative distance of a ring, rounded to 2 decimals"""
    length = round_half_up((scale["chosen_distance"] / steps) * index * 100) / 100
    return f"{format_number(length)} {scale['suffix']}"


def build_rings(
    scale: NiceScaleResult, steps: int, y_offset: float
) -> Tuple[List[RingDescriptor], str]:
    """
    Build the center marker and the calibration rings for a scale

    Args:
        scale: Accepted nice scale, its pixel width is the outermost radius
        steps: Number of calibration rings
        y_offset: Vertical offset of the ring center in pixels

    Returns:
        (rings, signature) where rings[0] is the center marker and the signature
        is equal for two calls exactly when the rings are equal
    """
    if steps < 1:
        raise ValueError("steps must be at least 1")

    rings: List[RingDescriptor] = [
        {
            "index": 0,
            "radius_px": CENTER_MARKER_RADIUS,
            "label": "",
            "label_offset_px": -CENTER_MARKER_RADIUS - y_offset,
        }
    ]

    step_width = scale["pixel_width"] / steps
    for index in range(1, steps + 1):
        radius = step_width * index
        rings.append(
            {
                "index": index,
                "radius_px": radius,
                "label": ring_label(scale, steps, index),
                "label_offset_px": -radius - y_offset,
            }
        )

    return rings, render_signature(rings)


def render_signature(rings: List[RingDescriptor]) -> str:
    """Serialized form of a ring list, used to skip redraws of identical output"""
    return json.dumps(
        rings, sort_keys=True, ensure_ascii=False, separators=(",", ":")
    )


def ring_outline(
    ring: RingDescriptor, center: Coord = (0, 0), quad_segs: int = 16
) -> LinearRing:
    """Circle outline of a ring around a center, in pixels"""
    return Point(center).buffer(ring["radius_px"], quad_segs=quad_segs).exterior
