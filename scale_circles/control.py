import math
from typing import Callable, List
from scale_circles.nice_scale import round_half_up, scale_text, select_nice_scale
from scale_circles.project_types import (
    ControlState,
    PointResolutionFunc,
    RenderOutput,
    ScaleConfig,
    UnitSystem,
    ViewportState,
)
from scale_circles.projection import get_point_resolution, normalize_resolution
from scale_circles.rings import build_rings
from scale_circles.scale import DEFAULT_DPI, INCHES_PER_METER
from scale_circles.logger import logger

UnitsListener = Callable[[UnitSystem, UnitSystem], None]


def get_scale_for_resolution(
    view_state: ViewportState,
    dpi: float | None,
    point_resolution: PointResolutionFunc = get_point_resolution,
) -> float:
    """Map scale denominator at the viewport center, nan where undefined"""
    resolution = point_resolution(
        view_state["projection"],
        view_state["resolution"],
        view_state["center"],
        "m",
    )
    return resolution * INCHES_PER_METER * (dpi or DEFAULT_DPI)


def format_scale_ratio(scale: float) -> str | None:
    if not math.isfinite(scale):
        return None
    return f"1 : {round_half_up(scale):,}"


def hidden_output(state: ControlState, changed: bool) -> RenderOutput:
    return {
        "state": state,
        "rings": [],
        "signature": None,
        "changed": changed,
        "nice_scale": None,
        "scale_text": None,
        "scale_line": None,
    }


class RenderCache:
    """What was last handed to the host, used to detect no-op redraws"""

    def __init__(self):
        self.signature: str | None = None
        self.visible: bool = False
        self.scale_text: str | None = None


class ScaleCirclesControl:
    """
    Distance rings around the viewport center

    Every viewport update and every config change recomputes the rings from the
    last viewport and the current config. The returned RenderOutput says whether
    the rings or the ratio text changed since the previous render, so the host
    can skip redraws.
    """

    def __init__(
        self,
        config: ScaleConfig | None = None,
        point_resolution: PointResolutionFunc = get_point_resolution,
        on_units_change: UnitsListener | None = None,
    ):
        self._config: ScaleConfig = config if config is not None else ScaleConfig()
        self._point_resolution = point_resolution
        self._view_state: ViewportState | None = None
        self._cache = RenderCache()
        self._state = ControlState.INACTIVE
        self._units_listeners: List[UnitsListener] = []
        if on_units_change is not None:
            self._units_listeners.append(on_units_change)
        self._last_output: RenderOutput = hidden_output(ControlState.INACTIVE, False)

    @property
    def state(self) -> ControlState:
        return self._state

    @property
    def last_output(self) -> RenderOutput:
        return self._last_output

    def get_config(self) -> ScaleConfig:
        return self._config

    def set_config(self, **changes) -> RenderOutput:
        """Apply several config fields at once, then recompute"""
        config = self._config.replace(**changes)
        previous_units = self._config.units
        self._config = config
        output = self._update()
        if config.units != previous_units:
            self._notify_units_changed(previous_units, config.units)
        return output

    def get_units(self) -> UnitSystem:
        return self._config.units

    def set_units(self, units: UnitSystem | str) -> RenderOutput:
        return self.set_config(units=UnitSystem.parse(units))

    def set_active(self, active: bool) -> RenderOutput:
        return self.set_config(active=active)

    def set_y_offset(self, offset: float) -> RenderOutput:
        return self.set_config(y_offset=offset)

    def set_dpi(self, dpi: float | None) -> RenderOutput:
        return self.set_config(dpi=dpi)

    def set_steps(self, steps: int) -> RenderOutput:
        return self.set_config(steps=steps)

    def set_min_width(self, min_width: float) -> RenderOutput:
        return self.set_config(min_width=min_width)

    def add_units_listener(self, listener: UnitsListener) -> None:
        self._units_listeners.append(listener)

    def remove_units_listener(self, listener: UnitsListener) -> None:
        self._units_listeners.remove(listener)

    def _notify_units_changed(self, old: UnitSystem, new: UnitSystem) -> None:
        logger.info(f"Units changed from {old.value} to {new.value}")
        for listener in list(self._units_listeners):
            listener(old, new)

    def on_viewport_update(self, view_state: ViewportState | None) -> RenderOutput:
        """Recompute the rings for a new viewport, None when the map has no view"""
        self._view_state = view_state
        return self._update()

    def _update(self) -> RenderOutput:
        config = self._config
        view_state = self._view_state

        if not config.active or view_state is None:
            return self._hide(ControlState.INACTIVE)

        point_resolution = normalize_resolution(
            view_state, config.units, self._point_resolution
        )
        if point_resolution is None:
            return self._hide(ControlState.HIDDEN)

        nice_scale = select_nice_scale(
            config.min_width, config.dpi, point_resolution, config.units
        )
        if nice_scale is None:
            return self._hide(ControlState.HIDDEN)

        rings, signature = build_rings(nice_scale, config.steps, config.y_offset)
        ratio_text = format_scale_ratio(
            get_scale_for_resolution(view_state, config.dpi, self._point_resolution)
        )
        # Rings and ratio text together make up the visible output
        changed = (
            signature != self._cache.signature
            or ratio_text != self._cache.scale_text
        )
        if changed:
            self._cache.signature = signature
            self._cache.scale_text = ratio_text
        else:
            logger.debug("Output unchanged, skipping redraw")
        self._cache.visible = True
        self._set_state(ControlState.VISIBLE)

        self._last_output = {
            "state": ControlState.VISIBLE,
            "rings": rings,
            "signature": signature,
            "changed": changed,
            "nice_scale": nice_scale,
            "scale_text": ratio_text,
            "scale_line": scale_text(nice_scale),
        }
        return self._last_output

    def _hide(self, state: ControlState) -> RenderOutput:
        changed = self._cache.visible
        self._cache.signature = None
        self._cache.scale_text = None
        self._cache.visible = False
        self._set_state(state)
        self._last_output = hidden_output(state, changed)
        return self._last_output

    def _set_state(self, state: ControlState) -> None:
        if state != self._state:
            logger.info(f"Scale circles {self._state.name} -> {state.name}")
            self._state = state
