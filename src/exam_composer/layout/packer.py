"""
Module: layout.packer

Purpose:
    Assign every question, in order, to a (page, column, row offset) slot
    at its natural size. Questions are never enlarged; they only shrink to
    the column width, or, as a last resort, to the height of an empty
    column.

Key Functions:
    - pack_questions(): Main packing function

Algorithm:
    1. Sort questions by order (stable on duplicates)
    2. Convert pixel size to points, cap width to the column's image width
    3. Place in the current column if the block plus spacing fits above the
       bottom margin, otherwise move to the next column, then the next page
    4. A block taller than an empty column gets a column of its own and is
       height-capped
    5. Stop when a new page would exceed max_pages

Dependencies:
    - exam_composer.layout.models: PagePlacement, PackResult
    - exam_composer.layout.config: LayoutConfig

Used By:
    - exam_composer.controller: Document assembly
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from exam_composer.core.models import QuestionRecord
from exam_composer.themes.models import QuestionAlignment

from .config import LayoutConfig
from .models import PagePlacement, PackResult

logger = logging.getLogger(__name__)


def pack_questions(
    questions: Sequence[QuestionRecord],
    config: LayoutConfig,
    *,
    max_pages: Optional[int] = None,
) -> PackResult:
    """
    Arrange questions into page/column slots.

    Args:
        questions: Questions to place (any order; sorted by .order)
        config: Layout configuration
        max_pages: Page cap; questions that do not fit are dropped

    Returns:
        PackResult with placements and placed/requested counts

    Example:
        >>> result = pack_questions(questions, LayoutConfig())
        >>> [p.number for p in result.placements][:3]
        [1, 2, 3]
    """
    requested = len(questions)
    if not questions:
        return PackResult(placements=(), page_count=0, requested_count=0)

    # Stable on duplicate order values: ties keep the original list position
    ordered = [
        question
        for _, question in sorted(
            enumerate(questions), key=lambda item: (item[1].order, item[0])
        )
    ]

    placements: List[PagePlacement] = []
    warnings: List[str] = []

    page_index = 0
    column_index = 0
    cursor = config.content_top

    for number, question in enumerate(ordered, start=1):
        width, height = _natural_size(question, config)
        height_capped = False

        if height + config.spacing > config.column_extent:
            # Last resort: a fresh column, shrunk to its full height
            if cursor > config.content_top:
                page_index, column_index = _advance(page_index, column_index, config)
                cursor = config.content_top
            width, height = _cap_height(width, height, config)
            height_capped = True
            message = (
                f"Question {question.id!r} taller than a column, "
                f"scaled to {width:.1f}x{height:.1f}pt"
            )
            logger.warning(message)
            warnings.append(message)
        elif cursor + height + config.spacing > config.content_bottom:
            page_index, column_index = _advance(page_index, column_index, config)
            cursor = config.content_top

        if max_pages is not None and page_index >= max_pages:
            message = (
                f"Page limit of {max_pages} reached: placed {len(placements)} "
                f"of {requested} questions"
            )
            logger.warning(message)
            warnings.append(message)
            break

        placements.append(PagePlacement(
            page_index=page_index,
            column_index=column_index,
            row_offset=cursor,
            x=_image_x(column_index, width, config),
            width=width,
            height=height,
            number=number,
            question=question,
            height_capped=height_capped,
        ))
        logger.debug(
            f"Placed question {question.id!r} as #{number} on page {page_index} "
            f"column {column_index} at y={cursor:.1f}"
        )
        cursor += height + config.spacing

    page_count = placements[-1].page_index + 1 if placements else 0
    logger.info(f"Packed {len(placements)}/{requested} questions onto {page_count} pages")

    return PackResult(
        placements=tuple(placements),
        page_count=page_count,
        requested_count=requested,
        warnings=warnings,
    )


def _natural_size(question: QuestionRecord, config: LayoutConfig) -> Tuple[float, float]:
    """Pixel size in points, shrunk to the column image width if wider."""
    width = config.px_to_pt(question.actual_width)
    height = config.px_to_pt(question.actual_height)
    if width > config.image_max_width:
        factor = config.image_max_width / width
        width *= factor
        height *= factor
    return width, height


def _cap_height(width: float, height: float, config: LayoutConfig) -> Tuple[float, float]:
    """Shrink so that the block plus spacing fills an empty column exactly."""
    max_height = config.column_extent - config.spacing
    factor = max_height / height
    return width * factor, max_height


def _advance(page_index: int, column_index: int, config: LayoutConfig) -> Tuple[int, int]:
    """Next column, or first column of the next page."""
    if column_index + 1 < config.columns:
        return page_index, column_index + 1
    return page_index + 1, 0


def _image_x(column_index: int, width: float, config: LayoutConfig) -> float:
    """Left edge of an image inside its column per alignment."""
    column_left = config.column_x(column_index)
    content_left = column_left + config.number_gutter

    if config.alignment is QuestionAlignment.CENTER:
        return content_left + (config.image_max_width - width) / 2
    if config.alignment is QuestionAlignment.JUSTIFY:
        # Flush against the column's right edge
        return column_left + config.column_width - width
    return content_left
