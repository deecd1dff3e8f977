import os
import time
from datetime import datetime
from reportlab.pdfgen import canvas

from scale_circles.logger import logger, setup_logging
from scale_circles.control import ScaleCirclesControl
from scale_circles.pdf_renderer import ScaleCirclesRenderer
from scale_circles.project_types import ControlState
from scale_circles.scale import DEFAULT_DPI, POINTS_PER_INCH
from config import CONFIG, VIEWPORT

PAGE_MARGIN_POINTS = 36


def main():
    setup_logging()
    start_time = time.time()

    control = ScaleCirclesControl(CONFIG)
    output = control.on_viewport_update(VIEWPORT)
    if output["state"] != ControlState.VISIBLE:
        logger.warning(f"Scale circles not visible ({output['state'].name}), nothing to render")
        return

    nice_scale = output["nice_scale"]
    logger.info(
        f"Outer ring {output['scale_line']} "
        f"at {nice_scale['pixel_width']}px, map scale {output['scale_text']}"
    )

    # Generate timestamp for the output file
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    output_path = os.path.join("maps", f"scale_circles_{timestamp}.pdf")
    os.makedirs("maps", exist_ok=True)

    points_per_pixel = POINTS_PER_INCH / (CONFIG.dpi or DEFAULT_DPI)
    radius_points = nice_scale["pixel_width"] * points_per_pixel
    offset_points = abs(CONFIG.y_offset) * points_per_pixel
    size = 2 * (radius_points + offset_points + PAGE_MARGIN_POINTS)

    c = canvas.Canvas(output_path, pagesize=(size, size))
    renderer = ScaleCirclesRenderer(c, (size / 2, size / 2), CONFIG.dpi)
    drawn = renderer.render(output)
    c.save()

    execution_time = time.time() - start_time
    logger.info(f"Generated {drawn} rings at: {output_path}")
    logger.info(f"Total execution time: {execution_time:.2f} seconds")


if __name__ == "__main__":
    main()
