"""
Module: output.numbering

Purpose:
    Draw question number labels next to question images in the theme's
    number style (circle, square, bold text or roman numeral).

Key Functions:
    - format_number(): Label text for a number and style
    - draw_number_label(): Draw the label right-aligned to an x position

Dependencies:
    - reportlab: Canvas drawing

Used By:
    - exam_composer.output.renderer: Question drawing
"""

from __future__ import annotations

from reportlab.lib.colors import Color
from reportlab.pdfgen import canvas

from exam_composer.core.text import to_roman
from exam_composer.themes.models import FontFamily, NumberStyle

LABEL_FONT_SIZE = 11
LABEL_TEXT_COLOR = Color(0.067, 0.067, 0.067)
# Gap between the label and the image's left edge
LABEL_GAP = 3
BOX_PADDING = 3


def format_number(number: int, style: NumberStyle) -> str:
    """
    Label text for a question number.

    Example:
        >>> format_number(4, NumberStyle.ROMAN)
        'IV.'
        >>> format_number(4, NumberStyle.CIRCLE)
        '4'
    """
    if style is NumberStyle.ROMAN:
        return f"{to_roman(number)}."
    if style is NumberStyle.BOLD:
        return f"{number}."
    return str(number)


def draw_number_label(
    c: canvas.Canvas,
    number: int,
    style: NumberStyle,
    *,
    image_left: float,
    image_top: float,
    font: FontFamily,
    outline_color: Color,
) -> None:
    """
    Draw a number label left of an image, aligned with its top edge.

    Args:
        c: ReportLab canvas
        number: Display number
        style: Theme number style
        image_left: Image left edge in points (PDF coordinates)
        image_top: Image top edge in points (PDF coordinates, bottom-up)
        font: Theme font family
        outline_color: Circle/square outline color
    """
    text = format_number(number, style)
    font_name = font.bold if style in (NumberStyle.BOLD, NumberStyle.CIRCLE, NumberStyle.SQUARE) else font.regular
    text_width = c.stringWidth(text, font_name, LABEL_FONT_SIZE)
    right = image_left - LABEL_GAP
    baseline = image_top - LABEL_FONT_SIZE

    c.saveState()
    if style in (NumberStyle.CIRCLE, NumberStyle.SQUARE):
        box = max(text_width, LABEL_FONT_SIZE) + 2 * BOX_PADDING
        center_x = right - box / 2
        center_y = image_top - box / 2
        c.setStrokeColor(outline_color)
        c.setLineWidth(1)
        if style is NumberStyle.CIRCLE:
            c.circle(center_x, center_y, box / 2, stroke=1, fill=0)
        else:
            c.rect(right - box, image_top - box, box, box, stroke=1, fill=0)
        c.setFillColor(LABEL_TEXT_COLOR)
        c.setFont(font_name, LABEL_FONT_SIZE)
        # Optical centering: baseline sits ~0.35em below the box center
        c.drawCentredString(center_x, center_y - LABEL_FONT_SIZE * 0.35, text)
    else:
        c.setFillColor(LABEL_TEXT_COLOR)
        c.setFont(font_name, LABEL_FONT_SIZE)
        c.drawRightString(right, baseline, text)
    c.restoreState()
