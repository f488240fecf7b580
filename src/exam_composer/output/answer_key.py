"""
Module: output.answer_key

Purpose:
    Answer key for a generated test. Either appended as trailing page(s)
    with a grid of "number.answer" cells, or serialized for the PDF
    metadata, never both.

Key Functions:
    - resolve_answer_key_mode(): PAGE, METADATA or NONE for a run
    - build_answer_key(): (number, answer) entries from placements
    - serialize_answer_key() / parse_answer_key(): "1:A,2:B" text form
    - answer_key_page_count(): Pages the grid needs
    - cell_width(): Grid cell width for a page and column count
    - render_answer_key_pages(): Draw the grid pages

Dependencies:
    - reportlab: PDF generation
    - exam_composer.output.renderer: Background and footer drawing

Used By:
    - exam_composer.controller: Answer key step
    - exam_composer.output.metadata: Metadata key parsing
"""

from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from reportlab.lib.colors import HexColor
from reportlab.pdfgen import canvas

from exam_composer.core.text import sanitize_text
from exam_composer.layout.models import PagePlacement
from exam_composer.output.renderer import PageContext, draw_background, draw_footer
from exam_composer.output.watermark import draw_watermark
from exam_composer.themes.models import ThemeDefinition

logger = logging.getLogger(__name__)

AnswerKeyEntry = Tuple[int, str]

ANSWER_KEY_TITLE = "CEVAP ANAHTARI"
TITLE_FONT_SIZE = 16
TITLE_OFFSET = 42  # Title baseline, points below the page top
GRID_TOP = 92  # First row top edge, points below the page top
GRID_BOTTOM_MARGIN = 60
CELL_WIDTH = 49  # Widest cell; narrower when the columns would overflow the page
GRID_SIDE_MARGIN = 30
CELL_HEIGHT = 25
ROW_GAP = 12
CELL_FONT_SIZE = 10


class AnswerKeyMode(Enum):
    """Where the answer key ends up."""
    PAGE = "page"
    METADATA = "metadata"
    NONE = "none"


def resolve_answer_key_mode(
    theme: ThemeDefinition,
    include_override: Optional[bool] = None,
) -> AnswerKeyMode:
    """
    Decide the answer key destination for a run.

    The caller's override wins over the theme default. Metadata is only
    used when no page is emitted and the theme asks for it.

    Example:
        >>> resolve_answer_key_mode(YAZILI_SINAV_THEME)
        <AnswerKeyMode.METADATA: 'metadata'>
        >>> resolve_answer_key_mode(YAZILI_SINAV_THEME, include_override=True)
        <AnswerKeyMode.PAGE: 'page'>
    """
    include = (
        include_override
        if include_override is not None
        else theme.flags.include_answer_key_by_default
    )
    if include:
        return AnswerKeyMode.PAGE
    if theme.flags.answer_key_in_metadata:
        return AnswerKeyMode.METADATA
    return AnswerKeyMode.NONE


def build_answer_key(placements: Iterable[PagePlacement]) -> List[AnswerKeyEntry]:
    """(display number, correct answer) for every placed question, in order."""
    return [
        (placement.number, placement.question.correct_answer)
        for placement in placements
    ]


def serialize_answer_key(entries: Iterable[AnswerKeyEntry]) -> str:
    """
    Compact text form stored in the PDF metadata.

    Example:
        >>> serialize_answer_key([(1, "A"), (2, "C")])
        '1:A,2:C'
    """
    return ",".join(f"{number}:{answer}" for number, answer in entries)


def parse_answer_key(text: str) -> List[AnswerKeyEntry]:
    """
    Inverse of serialize_answer_key().

    Raises:
        ValueError: If an item is not "<number>:<answer>"
    """
    entries: List[AnswerKeyEntry] = []
    if not text or not text.strip():
        return entries

    for item in text.split(","):
        number, sep, answer = item.strip().partition(":")
        if not sep or not number.strip().isdigit():
            raise ValueError(f"Malformed answer key item: {item!r}")
        entries.append((int(number), answer.strip()))
    return entries


def rows_per_page(page_height: float) -> int:
    """Grid rows that fit between the grid top and the bottom margin."""
    usable = page_height - GRID_TOP - GRID_BOTTOM_MARGIN + ROW_GAP
    return max(1, int(usable // (CELL_HEIGHT + ROW_GAP)))


def answer_key_page_count(entry_count: int, page_height: float, columns: int) -> int:
    """
    Pages needed for the grid; at least one.

    Example:
        >>> answer_key_page_count(21, 841.89, 10)
        1
    """
    per_page = rows_per_page(page_height) * columns
    return max(1, math.ceil(entry_count / per_page))


def cell_width(page_width: float, columns: int) -> float:
    """
    Width of one grid cell so that a full row stays inside the side margins.

    Example:
        >>> cell_width(595.28, 10)
        49
        >>> round(cell_width(595.28, 15), 2)
        35.69
    """
    return min(CELL_WIDTH, (page_width - 2 * GRID_SIDE_MARGIN) / columns)


def render_answer_key_pages(
    c: canvas.Canvas,
    entries: Sequence[AnswerKeyEntry],
    context: PageContext,
    *,
    columns: int = 10,
    first_page_number: int = 1,
) -> int:
    """
    Draw the answer key grid, ending each page with showPage().

    Args:
        c: ReportLab canvas
        entries: Answer key entries
        context: Run-wide drawing context (background, watermark, theme)
        columns: Cells per grid row
        first_page_number: Document page number of the first key page

    Returns:
        Number of pages drawn
    """
    per_page = rows_per_page(context.page_height) * columns
    page_count = answer_key_page_count(len(entries), context.page_height, columns)

    for page_offset in range(page_count):
        chunk = entries[page_offset * per_page:(page_offset + 1) * per_page]

        draw_background(c, context)
        if context.watermark is not None:
            draw_watermark(c, context.watermark, context.page_width, context.page_height)
        _draw_title(c, context)
        _draw_grid(c, chunk, columns, context)
        if context.theme.layout.show_footer:
            draw_footer(c, first_page_number + page_offset, context)
        c.showPage()

    logger.info(f"Rendered answer key: {len(entries)} entries on {page_count} page(s)")
    return page_count


def _draw_title(c: canvas.Canvas, context: PageContext) -> None:
    font = context.theme.layout.font
    c.saveState()
    c.setFillColor(HexColor(context.theme.visual.primary_color))
    c.setFont(font.bold, TITLE_FONT_SIZE)
    c.drawCentredString(
        context.page_width / 2,
        context.page_height - TITLE_OFFSET,
        ANSWER_KEY_TITLE,
    )
    c.restoreState()


def _draw_grid(
    c: canvas.Canvas,
    entries: Sequence[AnswerKeyEntry],
    columns: int,
    context: PageContext,
) -> None:
    font = context.theme.layout.font
    width = cell_width(context.page_width, columns)
    font_size = min(CELL_FONT_SIZE, CELL_FONT_SIZE * width / CELL_WIDTH)
    left = (context.page_width - columns * width) / 2
    if width < CELL_WIDTH:
        logger.debug(f"Answer key cells narrowed to {width:.1f}pt for {columns} columns")

    c.saveState()
    c.setStrokeColor(HexColor(context.theme.visual.primary_color))
    c.setLineWidth(0.8)
    c.setFont(font.bold, font_size)
    for i, (number, answer) in enumerate(entries):
        row, col = divmod(i, columns)
        x = left + col * width
        top = GRID_TOP + row * (CELL_HEIGHT + ROW_GAP)
        y = context.page_height - top - CELL_HEIGHT

        c.setFillColorRGB(1, 1, 1)
        c.rect(x, y, width, CELL_HEIGHT, stroke=1, fill=1)
        c.setFillColorRGB(0.1, 0.1, 0.1)
        c.drawCentredString(
            x + width / 2,
            y + (CELL_HEIGHT - font_size) / 2 + 2,
            sanitize_text(f"{number}.{answer}"),
        )
    c.restoreState()
