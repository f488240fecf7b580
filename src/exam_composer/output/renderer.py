"""
Module: output.renderer

Purpose:
    Draw one packed question page onto a ReportLab canvas. Draw order is
    fixed: background, watermark, header, questions, footer. Coordinates
    arrive top-down in points and are flipped to PDF bottom-up here.

Key Functions:
    - render_question_page(): Draw all layers of one page

Key Classes:
    - PageContext: Per-run drawing context shared by every page

Dependencies:
    - reportlab: PDF generation
    - PIL: Question image decoding
    - exam_composer.layout.models: PagePlan, PagePlacement

Used By:
    - exam_composer.controller: Page loop
    - exam_composer.output.answer_key: Shared background/footer helpers
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from PIL import Image
from reportlab.lib.colors import HexColor, white
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from exam_composer.config import WatermarkSpec
from exam_composer.core.models import RunMetadata
from exam_composer.core.text import sanitize_text
from exam_composer.layout.config import LayoutConfig
from exam_composer.layout.models import PagePlacement, PagePlan
from exam_composer.output.numbering import draw_number_label
from exam_composer.output.watermark import draw_watermark
from exam_composer.themes.background_cache import BackgroundHandle
from exam_composer.themes.models import (
    HEADER_DIVIDER_GAP,
    MIN_INFO_FONT_SIZE,
    HeaderPosition,
    ThemeDefinition,
)

logger = logging.getLogger(__name__)

FOOTER_FONT_SIZE = 9
FOOTER_OFFSET = 20  # Footer baseline, points above the page bottom
PLACEHOLDER_TEXT = "Soru gorseli yuklenemedi"


@dataclass(frozen=True)
class PageContext:
    """
    Everything a page needs besides its placements.

    Attributes:
        theme: Resolved theme
        layout: Layout config the pages were packed with
        metadata: Run metadata (custom fields already merged)
        background: Cached background, or None for a flat fill
        watermark: Effective watermark, or None
        total_pages: Pages in the final document (for the footer)
        warnings: Collector for soft failures while drawing
    """

    theme: ThemeDefinition
    layout: LayoutConfig
    metadata: RunMetadata
    background: Optional[BackgroundHandle] = None
    watermark: Optional[WatermarkSpec] = None
    total_pages: int = 1
    warnings: List[str] = field(default_factory=list)

    @property
    def page_width(self) -> float:
        return self.layout.page_width

    @property
    def page_height(self) -> float:
        return self.layout.page_height


def render_question_page(
    c: canvas.Canvas,
    page: PagePlan,
    context: PageContext,
) -> None:
    """
    Draw one question page. Does not call showPage().

    Args:
        c: ReportLab canvas
        page: Placements for this page
        context: Run-wide drawing context

    Example:
        >>> for page in pack.pages:
        ...     render_question_page(c, page, context)
        ...     c.showPage()
    """
    draw_background(c, context)
    if context.watermark is not None:
        draw_watermark(c, context.watermark, context.page_width, context.page_height)
    _draw_header(c, context)

    for placement in page.placements:
        _draw_question(c, placement, context)

    if context.theme.layout.show_footer:
        draw_footer(c, page.index + 1, context)

    logger.debug(f"Rendered page {page.index + 1} with {page.placement_count} questions")


def draw_footer(c: canvas.Canvas, page_number: int, context: PageContext) -> None:
    """
    Draw the centered page number footer.

    Args:
        c: ReportLab canvas
        page_number: 1-based page number
        context: Run-wide drawing context
    """
    font = context.theme.layout.font
    text = f"Sayfa {page_number} / {context.total_pages}"

    c.saveState()
    c.setFont(font.regular, FOOTER_FONT_SIZE)
    c.setFillColor(HexColor(context.theme.visual.secondary_color))
    c.drawCentredString(context.page_width / 2, FOOTER_OFFSET, text)
    c.restoreState()


def draw_background(c: canvas.Canvas, context: PageContext) -> None:
    """Cached background stretched to the page, or a flat theme fill."""
    if context.background is not None:
        c.drawImage(
            context.background.reader,
            0, 0,
            width=context.page_width,
            height=context.page_height,
        )
        return

    c.saveState()
    c.setFillColor(HexColor(context.theme.visual.background_color))
    c.rect(0, 0, context.page_width, context.page_height, stroke=0, fill=1)
    c.restoreState()


def _header_lines(metadata: RunMetadata) -> List[str]:
    """Info line entries; empty fields are left out."""
    entries = []
    if metadata.class_name:
        entries.append(f"Sinif: {metadata.class_name}")
    if metadata.course_name:
        entries.append(f"Ders: {metadata.course_name}")
    if metadata.teacher_name:
        entries.append(f"Ogretmen: {metadata.teacher_name}")
    for key, value in metadata.extra_fields.items():
        if value:
            entries.append(f"{key}: {value}")
    return [sanitize_text(entry) for entry in entries]


def _draw_header(c: canvas.Canvas, context: PageContext) -> None:
    """
    Draw title, info line and divider inside the header band.

    Nothing is drawn when the run has no header text at all.
    """
    profile = context.theme.layout
    visual = context.theme.visual
    layout = context.layout

    title = sanitize_text(context.metadata.test_name.strip())
    info = "   ".join(_header_lines(context.metadata))
    if not title and not info:
        return

    info_size = profile.info_font_size
    cursor = layout.margin_top

    c.saveState()
    if title:
        cursor += profile.font_size
        baseline = _transform_y(cursor, layout.page_height)
        x = _anchor_x(profile.header_position, layout)
        if profile.show_logo:
            _draw_title_band(c, title, x, baseline, context)
        else:
            c.setFillColor(HexColor(visual.primary_color))
            c.setFont(profile.font.bold, profile.font_size)
            _draw_anchored(c, profile.header_position, x, baseline, title)
        cursor += (profile.line_height - 1) * profile.font_size

    if info:
        cursor += info_size * profile.line_height
        c.setFillColor(HexColor(visual.secondary_color))
        c.setFont(profile.font.regular, info_size)
        _draw_anchored(
            c,
            profile.header_position,
            _anchor_x(profile.header_position, layout),
            _transform_y(cursor, layout.page_height),
            info,
        )

    divider_y = _transform_y(layout.content_top - HEADER_DIVIDER_GAP, layout.page_height)
    c.setStrokeColor(HexColor(visual.primary_color))
    c.setLineWidth(1)
    c.line(layout.margin_left, divider_y, layout.page_width - layout.margin_right, divider_y)
    c.restoreState()


def _draw_title_band(
    c: canvas.Canvas,
    title: str,
    x: float,
    baseline: float,
    context: PageContext,
) -> None:
    """Title in white on a filled band in the primary color."""
    profile = context.theme.layout
    position = profile.header_position
    text_width = c.stringWidth(title, profile.font.bold, profile.font_size)
    padding = profile.font_size * 0.6

    if position is HeaderPosition.TOP_LEFT:
        band_left = x - padding
    elif position is HeaderPosition.TOP_RIGHT:
        band_left = x - text_width - padding
    else:
        band_left = x - text_width / 2 - padding

    c.setFillColor(HexColor(context.theme.visual.primary_color))
    c.rect(
        band_left,
        baseline - profile.font_size * 0.35,
        text_width + 2 * padding,
        profile.font_size * 1.4,
        stroke=0,
        fill=1,
    )
    c.setFillColor(white)
    c.setFont(profile.font.bold, profile.font_size)
    _draw_anchored(c, position, x, baseline, title)


def _anchor_x(position: HeaderPosition, layout: LayoutConfig) -> float:
    if position is HeaderPosition.TOP_LEFT:
        return layout.margin_left
    if position is HeaderPosition.TOP_RIGHT:
        return layout.page_width - layout.margin_right
    return layout.page_width / 2


def _draw_anchored(
    c: canvas.Canvas,
    position: HeaderPosition,
    x: float,
    y: float,
    text: str,
) -> None:
    if position is HeaderPosition.TOP_LEFT:
        c.drawString(x, y, text)
    elif position is HeaderPosition.TOP_RIGHT:
        c.drawRightString(x, y, text)
    else:
        c.drawCentredString(x, y, text)


def _draw_question(
    c: canvas.Canvas,
    placement: PagePlacement,
    context: PageContext,
) -> None:
    """
    Draw a question image at its packed box with its number label.

    An undecodable image is replaced by a placeholder box and a warning.
    """
    page_height = context.page_height
    y_pt = _transform_y(placement.bottom, page_height)
    image_top = _transform_y(placement.row_offset, page_height)

    reader = _decode_question(placement, context)
    if reader is not None:
        c.drawImage(
            reader,
            placement.x,
            y_pt,
            width=placement.width,
            height=placement.height,
            mask="auto",
        )
    else:
        _draw_placeholder(c, placement, y_pt, context)

    profile = context.theme.layout
    draw_number_label(
        c,
        placement.number,
        profile.number_style,
        image_left=placement.x,
        image_top=image_top,
        font=profile.font,
        outline_color=HexColor(context.theme.visual.primary_color),
    )


def _decode_question(
    placement: PagePlacement,
    context: PageContext,
) -> Optional[ImageReader]:
    question = placement.question
    try:
        with Image.open(io.BytesIO(question.image_bytes)) as img:
            img.load()
            decoded = img.copy()
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        message = f"Question {question.id!r} image could not be decoded: {e}"
        logger.warning(message)
        context.warnings.append(message)
        return None
    return ImageReader(decoded)


def _draw_placeholder(
    c: canvas.Canvas,
    placement: PagePlacement,
    y_pt: float,
    context: PageContext,
) -> None:
    font = context.theme.layout.font
    c.saveState()
    c.setStrokeColorRGB(0.6, 0.6, 0.6)
    c.setFillColorRGB(0.95, 0.95, 0.95)
    c.setDash(4, 3)
    c.rect(placement.x, y_pt, placement.width, placement.height, stroke=1, fill=1)
    c.setFillColorRGB(0.4, 0.4, 0.4)
    c.setFont(font.regular, MIN_INFO_FONT_SIZE)
    c.drawCentredString(
        placement.x + placement.width / 2,
        y_pt + placement.height / 2,
        PLACEHOLDER_TEXT,
    )
    c.restoreState()


def _transform_y(y_top_down: float, page_height: float) -> float:
    """Top-down offset to ReportLab's bottom-up coordinate."""
    return page_height - y_top_down
