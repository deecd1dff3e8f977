from scale_circles.project_types import ScaleConfig, UnitSystem, ViewportState

CONFIG: ScaleConfig = ScaleConfig(
    min_width=500,  # Outermost ring radius is at least this many pixels
    steps=10,
    y_offset=0,
    dpi=None,  # OGC default screen of 0.28mm per pixel
    units=UnitSystem.METRIC,
)

VIEWPORT: ViewportState = {
    "center": (-8234000.0, 4980000.0),  # Manhattan in web mercator meters
    "resolution": 38.218514142588134,  # Zoom level 12
    "projection": "EPSG:3857",
}
