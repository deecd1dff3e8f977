import math
from enum import Enum, auto
from typing import Any, Callable, List, Tuple, TypedDict
from scale_circles.errors import InvalidUnitsError

X = float
Y = float
Coord = Tuple[X, Y]

# Anything pyproj.CRS.from_user_input accepts, e.g. "EPSG:3857"
ProjectionHandle = Any

# (projection, resolution, coordinate, units) -> per pixel distance or nan
PointResolutionFunc = Callable[[ProjectionHandle, float, Coord, str], float]


class UnitSystem(str, Enum):
    DEGREES = "degrees"
    IMPERIAL = "imperial"
    NAUTICAL = "nautical"
    METRIC = "metric"
    US = "us"

    @classmethod
    def parse(cls, units: "UnitSystem | str") -> "UnitSystem":
        """Return the UnitSystem for a value or its string name, raising InvalidUnitsError otherwise"""
        if isinstance(units, cls):
            return units
        try:
            return cls(units)
        except ValueError:
            raise InvalidUnitsError(units) from None


class ControlState(Enum):
    """Visibility state of the scale circles control"""

    INACTIVE = auto()
    HIDDEN = auto()
    VISIBLE = auto()


class ViewportState(TypedDict):
    center: Coord
    resolution: float
    projection: ProjectionHandle


class MagnitudeClass(TypedDict):
    suffix: str
    multiplier: float
    divisor: float


class NiceScaleResult(TypedDict):
    chosen_distance: float
    pixel_width: int
    decimal_exponent: int
    suffix: str
    point_resolution: float  # per pixel distance expressed in the suffix unit


class RingDescriptor(TypedDict):
    index: int
    radius_px: float
    label: str
    label_offset_px: float


class RenderOutput(TypedDict):
    state: ControlState
    rings: List[RingDescriptor]
    signature: str | None
    changed: bool
    nice_scale: NiceScaleResult | None
    scale_text: str | None  # map scale ratio such as 1 : 25,000
    scale_line: str | None  # chosen distance such as 50 km


class ScaleConfig:
    def __init__(
        self,
        min_width: float = 500,
        steps: int = 10,
        y_offset: float = 0,
        dpi: float | None = None,
        units: UnitSystem | str = UnitSystem.METRIC,
        active: bool = True,
    ):
        if isinstance(steps, bool) or not isinstance(steps, int):
            raise ValueError("steps must be an integer")
        if steps < 1:
            raise ValueError("steps must be at least 1")
        if not math.isfinite(min_width) or min_width <= 0:
            raise ValueError("min_width must be a positive number")
        if not math.isfinite(y_offset):
            raise ValueError("y_offset must be a finite number")
        if dpi is not None and (not math.isfinite(dpi) or dpi <= 0):
            raise ValueError("dpi must be a positive number or None")

        self.min_width: float = min_width
        self.steps: int = steps
        self.y_offset: float = y_offset
        self.dpi: float | None = dpi
        self.units: UnitSystem = UnitSystem.parse(units)
        self.active: bool = bool(active)

    def replace(self, **changes) -> "ScaleConfig":
        """Return a validated copy with the given fields changed"""
        unknown = set(changes) - set(vars(self))
        if unknown:
            raise ValueError(f"Unknown config fields: {', '.join(sorted(unknown))}")
        return ScaleConfig(**{**vars(self), **changes})

    def __eq__(self, other):
        if not isinstance(other, ScaleConfig):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"ScaleConfig({fields})"
