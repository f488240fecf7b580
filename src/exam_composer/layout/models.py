"""
Module: layout.models

Purpose:
    Data models for packed pages. Immutable dataclasses produced by the
    packer and consumed by the page renderer within one run.

Key Classes:
    - PagePlacement: A question positioned in a page/column slot
    - PagePlan: All placements of one page
    - PackResult: Packer output with placed/requested counts

Dependencies:
    - dataclasses (std)

Used By:
    - exam_composer.layout.packer: Creates placements
    - exam_composer.output.renderer: Draws them
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from exam_composer.core.models import QuestionRecord


@dataclass(frozen=True)
class PagePlacement:
    """
    A question positioned on a page.

    Attributes:
        page_index: Page number (0-indexed)
        column_index: Column on the page (0-indexed)
        row_offset: Top edge, points from the page top
        x: Left edge of the image, points from the page left
        width: Drawn image width in points
        height: Drawn image height in points
        number: Display number (1-based, follows question order)
        question: The placed question
        height_capped: True if the image was shrunk to fit a whole column

    Example:
        >>> placement.bottom
        172.0  # row_offset + height
    """

    page_index: int
    column_index: int
    row_offset: float
    x: float
    width: float
    height: float
    number: int
    question: QuestionRecord
    height_capped: bool = False

    @property
    def bottom(self) -> float:
        """Bottom Y coordinate (row_offset + height)."""
        return self.row_offset + self.height


@dataclass(frozen=True)
class PagePlan:
    """
    Layout plan for a single page.

    Attributes:
        index: Page number (0-indexed)
        placements: Placements on this page, in question order
    """

    index: int
    placements: tuple[PagePlacement, ...]

    @property
    def placement_count(self) -> int:
        """Number of questions on this page."""
        return len(self.placements)

    @property
    def is_empty(self) -> bool:
        return len(self.placements) == 0


@dataclass(frozen=True)
class PackResult:
    """
    Packer output with diagnostics.

    Attributes:
        placements: All placements, in question order
        page_count: Number of question pages
        requested_count: Number of questions handed to the packer
        warnings: Soft issues (height caps, truncation)

    Example:
        >>> result = pack_questions(questions, config, max_pages=1)
        >>> result.truncated
        True
    """

    placements: tuple[PagePlacement, ...]
    page_count: int
    requested_count: int
    warnings: List[str] = field(default_factory=list)

    @property
    def placed_count(self) -> int:
        """Number of questions that received a slot."""
        return len(self.placements)

    @property
    def truncated(self) -> bool:
        """True when a page cap dropped questions."""
        return self.placed_count < self.requested_count

    @property
    def pages(self) -> tuple[PagePlan, ...]:
        """Placements grouped per page."""
        grouped: List[List[PagePlacement]] = [[] for _ in range(self.page_count)]
        for placement in self.placements:
            grouped[placement.page_index].append(placement)
        return tuple(
            PagePlan(index=i, placements=tuple(items))
            for i, items in enumerate(grouped)
        )
