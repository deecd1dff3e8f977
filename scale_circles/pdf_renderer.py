from typing import List, Tuple, TypedDict, NotRequired
from reportlab.lib.colors import Color
from reportlab.pdfgen import canvas, pathobject
from shapely.geometry import LinearRing
from scale_circles.project_types import ControlState, RenderOutput, RingDescriptor
from scale_circles.rings import ring_outline
from scale_circles.scale import DEFAULT_DPI, POINTS_PER_INCH
from scale_circles.logger import logger


class RingStyle(TypedDict):
    stroke_color: Color
    stroke_width: float
    dash: NotRequired[List[float]]


class LabelStyle(TypedDict):
    fill_color: Color
    font_name: str
    font_size: float


CENTER_MARKER_STYLE: RingStyle = {
    "stroke_color": Color(0.2, 0.2, 0.2),
    "stroke_width": 2,
}

RING_STYLE: RingStyle = {
    "stroke_color": Color(0.2, 0.2, 0.2),
    "stroke_width": 2,
    "dash": [2, 2],
}

LABEL_STYLE: LabelStyle = {
    "fill_color": Color(0.1, 0.1, 0.1),
    "font_name": "Helvetica",
    "font_size": 10,
}

# Gap between a ring and the baseline of its label, in pixels
LABEL_GAP = 4


class ScaleCirclesRenderer:
    def __init__(
        self,
        canvas: canvas.Canvas,
        origin: Tuple[float, float],
        dpi: float | None = None,
    ):
        """
        Args:
            canvas: ReportLab canvas to draw on
            origin: Viewport center on the canvas, in points
            dpi: Output device dpi, None for DEFAULT_DPI
        """
        self.canvas = canvas
        self.origin = origin
        self.points_per_pixel = POINTS_PER_INCH / (dpi or DEFAULT_DPI)

    def transform_coords(self, x: float, y: float) -> Tuple[float, float]:
        """Screen pixels (y down) relative to the viewport center to canvas points (y up)"""
        return (
            self.origin[0] + x * self.points_per_pixel,
            self.origin[1] - y * self.points_per_pixel,
        )

    def render(self, output: RenderOutput) -> int:
        """Draw the rings of a render output, returns the number of rings drawn"""
        if output["state"] != ControlState.VISIBLE:
            logger.debug(f"Nothing to draw in state {output['state'].name}")
            return 0

        drawn = 0
        for ring in output["rings"]:
            try:
                self._render_ring(ring)
                drawn += 1
            except Exception as e:
                logger.warning(f"Failed to render ring {ring['index']}: {e}")
        return drawn

    def _render_ring(self, ring: RingDescriptor) -> None:
        # The label sits radius_px above the ring center
        center_y = ring["label_offset_px"] + ring["radius_px"]
        outline = ring_outline(ring, (0, center_y))

        style = CENTER_MARKER_STYLE if ring["index"] == 0 else RING_STYLE
        p = self.canvas.beginPath()
        self._draw_ring_to_path(p, outline)

        self.canvas.setStrokeColor(style["stroke_color"])
        self.canvas.setLineWidth(style["stroke_width"] * self.points_per_pixel)
        self.canvas.setDash(style.get("dash", []))
        self.canvas.drawPath(p, fill=0, stroke=1)

        if ring["label"]:
            self._draw_label(ring)

    def _draw_ring_to_path(
        self, p: pathobject.PDFPathObject, outline: LinearRing
    ) -> None:
        coords = list(outline.coords)
        x, y = self.transform_coords(*coords[0])
        p.moveTo(x, y)
        for coord in coords[1:]:
            x, y = self.transform_coords(*coord)
            p.lineTo(x, y)
        p.close()

    def _draw_label(self, ring: RingDescriptor) -> None:
        x, y = self.transform_coords(0, ring["label_offset_px"] - LABEL_GAP)
        self.canvas.setFillColor(LABEL_STYLE["fill_color"])
        self.canvas.setFont(LABEL_STYLE["font_name"], LABEL_STYLE["font_size"])
        self.canvas.drawCentredString(x, y, ring["label"])
