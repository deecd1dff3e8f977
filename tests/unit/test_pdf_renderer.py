"""Tests for the PDF overlay renderer."""
from unittest.mock import MagicMock
import pytest
from reportlab.pdfgen import canvas

from scale_circles.pdf_renderer import ScaleCirclesRenderer
from scale_circles.scale import DEFAULT_DPI, POINTS_PER_INCH


@pytest.fixture
def visible_output(control, viewport):
    return control.on_viewport_update(viewport)


class TestScaleCirclesRenderer:
    """Tests for ScaleCirclesRenderer."""

    def test_renders_all_rings(self, tmp_path, visible_output):
        path = tmp_path / "rings.pdf"
        c = canvas.Canvas(str(path), pagesize=(800, 800))
        drawn = ScaleCirclesRenderer(c, (400, 400)).render(visible_output)
        c.save()
        assert drawn == 11
        assert path.stat().st_size > 0

    def test_hidden_output_draws_nothing(self, control, invalid_viewport):
        c = MagicMock()
        output = control.on_viewport_update(invalid_viewport)
        assert ScaleCirclesRenderer(c, (0, 0)).render(output) == 0
        c.beginPath.assert_not_called()

    def test_labels_drawn_for_calibration_rings(self, visible_output):
        c = MagicMock()
        ScaleCirclesRenderer(c, (0, 0)).render(visible_output)
        labels = [call.args[2] for call in c.drawCentredString.call_args_list]
        assert labels == [ring["label"] for ring in visible_output["rings"][1:]]

    def test_failed_ring_is_skipped(self, visible_output):
        c = MagicMock()
        c.drawPath.side_effect = [RuntimeError("boom")] + [None] * 10
        assert ScaleCirclesRenderer(c, (0, 0)).render(visible_output) == 10

    def test_transform_coords(self):
        renderer = ScaleCirclesRenderer(MagicMock(), (100, 200))
        scale = POINTS_PER_INCH / DEFAULT_DPI
        assert renderer.transform_coords(10, 20) == pytest.approx(
            (100 + 10 * scale, 200 - 20 * scale))
