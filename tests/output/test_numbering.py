"""
Unit tests for question number labels.
"""

from unittest.mock import MagicMock

import pytest
from reportlab.lib.colors import black

from exam_composer.output.numbering import draw_number_label, format_number
from exam_composer.themes import FontFamily, NumberStyle


@pytest.fixture
def mock_canvas():
    c = MagicMock()
    c.stringWidth.return_value = 10.0
    return c


class TestFormatNumber:
    @pytest.mark.parametrize("style,expected", [
        (NumberStyle.CIRCLE, "7"),
        (NumberStyle.SQUARE, "7"),
        (NumberStyle.BOLD, "7."),
        (NumberStyle.ROMAN, "VII."),
    ])
    def test_format_number_when_style_then_label(self, style, expected):
        assert format_number(7, style) == expected


class TestDrawNumberLabel:
    def test_draw_when_circle_then_circle_outline_and_centered_text(self, mock_canvas):
        # Act
        draw_number_label(
            mock_canvas, 3, NumberStyle.CIRCLE,
            image_left=100, image_top=700, font=FontFamily.TIMES, outline_color=black,
        )

        # Assert
        mock_canvas.circle.assert_called_once()
        mock_canvas.rect.assert_not_called()
        args = mock_canvas.drawCentredString.call_args[0]
        assert args[2] == "3"
        center_x = mock_canvas.circle.call_args[0][0]
        assert center_x < 100

    def test_draw_when_square_then_rect_outline(self, mock_canvas):
        draw_number_label(
            mock_canvas, 3, NumberStyle.SQUARE,
            image_left=100, image_top=700, font=FontFamily.HELVETICA, outline_color=black,
        )

        mock_canvas.rect.assert_called_once()
        mock_canvas.circle.assert_not_called()

    def test_draw_when_roman_then_right_aligned_before_image(self, mock_canvas):
        draw_number_label(
            mock_canvas, 4, NumberStyle.ROMAN,
            image_left=100, image_top=700, font=FontFamily.TIMES, outline_color=black,
        )

        x, y, text = mock_canvas.drawRightString.call_args[0]
        assert text == "IV."
        assert x < 100
        assert y < 700
        mock_canvas.setFont.assert_called_with("Times-Roman", 11)

    def test_draw_when_bold_then_bold_font(self, mock_canvas):
        draw_number_label(
            mock_canvas, 12, NumberStyle.BOLD,
            image_left=100, image_top=700, font=FontFamily.HELVETICA, outline_color=black,
        )

        mock_canvas.setFont.assert_called_with("Helvetica-Bold", 11)
        assert mock_canvas.drawRightString.call_args[0][2] == "12."

    def test_draw_when_called_then_state_restored(self, mock_canvas):
        draw_number_label(
            mock_canvas, 1, NumberStyle.CIRCLE,
            image_left=100, image_top=700, font=FontFamily.TIMES, outline_color=black,
        )

        assert mock_canvas.saveState.call_count == mock_canvas.restoreState.call_count == 1
