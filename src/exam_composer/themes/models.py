"""
Module: themes.models

Purpose:
    Immutable theme definitions. Every flag a theme can set is a field or a
    tagged enum here, so renderers never branch on free-form strings or on
    theme ids.

Key Classes:
    - ThemeDefinition: Layout profile + visual variant + composition flags
    - LayoutProfile: Alignment, header position, columns, fonts, margins
    - VisualVariant: Colors and background asset candidates
    - CompositionFlags: Answer key defaults and page cap

Dependencies:
    - dataclasses (std)
    - exam_composer.config: WatermarkSpec for theme default watermarks

Used By:
    - exam_composer.themes.registry: Built-in theme table
    - exam_composer.layout.config: Margins, columns, spacing
    - exam_composer.output: Fonts, colors, number style
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from exam_composer.config import WatermarkSpec

MIN_INFO_FONT_SIZE = 8
HEADER_DIVIDER_GAP = 6.0  # Divider sits this far above the first question row
HEADER_DESCENT = 0.25  # Room under the info baseline, as a share of its font size


class QuestionAlignment(Enum):
    """Horizontal placement of a question image inside its column."""
    LEFT = "left"
    CENTER = "center"
    JUSTIFY = "justify"


class HeaderPosition(Enum):
    """Anchor of the header text block."""
    TOP_LEFT = "top-left"
    TOP_CENTER = "top-center"
    TOP_RIGHT = "top-right"


class NumberStyle(Enum):
    """Glyph used for question number labels."""
    CIRCLE = "circle"
    SQUARE = "square"
    BOLD = "bold"
    ROMAN = "roman"


class FontFamily(Enum):
    """Standard PDF font families (regular, bold)."""
    TIMES = ("Times-Roman", "Times-Bold")
    HELVETICA = ("Helvetica", "Helvetica-Bold")
    COURIER = ("Courier", "Courier-Bold")

    @property
    def regular(self) -> str:
        return self.value[0]

    @property
    def bold(self) -> str:
        return self.value[1]


@dataclass(frozen=True)
class Margins:
    """Page margins in points."""

    top: float
    bottom: float
    left: float
    right: float

    def __post_init__(self) -> None:
        for name in ("top", "bottom", "left", "right"):
            if getattr(self, name) < 0:
                raise ValueError(f"margin {name} must be non-negative: {getattr(self, name)}")


@dataclass(frozen=True)
class LayoutProfile:
    """
    Page layout settings of a theme (immutable).

    Attributes:
        alignment: Image placement inside a column
        header_position: Where the header block is anchored
        columns: Number of question columns (1-3)
        show_logo: Draw the title as a badge on a primary-color band
        show_footer: Draw page number footer
        number_style: Question number label style
        font: Font family for header, labels and footer
        font_size: Base font size in points
        margins: Page margins in points
        spacing_mm: Default gap between question blocks in millimetres
        line_height: Header line height multiplier
        header_height: Vertical space reserved under the top margin (points)
    """

    alignment: QuestionAlignment = QuestionAlignment.LEFT
    header_position: HeaderPosition = HeaderPosition.TOP_CENTER
    columns: int = 2
    show_logo: bool = False
    show_footer: bool = True
    number_style: NumberStyle = NumberStyle.CIRCLE
    font: FontFamily = FontFamily.HELVETICA
    font_size: float = 14.0
    margins: Margins = field(default_factory=lambda: Margins(40, 40, 30, 30))
    spacing_mm: float = 5.0
    line_height: float = 1.5
    header_height: float = 60.0

    def __post_init__(self) -> None:
        """Validate layout on construction."""
        if not 1 <= self.columns <= 3:
            raise ValueError(f"columns must be between 1 and 3: {self.columns}")
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive: {self.font_size}")
        if self.spacing_mm < 0:
            raise ValueError(f"spacing_mm must be non-negative: {self.spacing_mm}")
        if self.line_height < 1:
            raise ValueError(f"line_height must be at least 1: {self.line_height}")
        required = self.header_text_height + HEADER_DIVIDER_GAP
        if self.header_height < required:
            raise ValueError(
                f"header_height {self.header_height} cannot hold the title and "
                f"info line above the divider (needs {required:.1f})"
            )

    @property
    def info_font_size(self) -> float:
        """Font size of the header info line."""
        return max(MIN_INFO_FONT_SIZE, self.font_size - 3)

    @property
    def header_text_height(self) -> float:
        """
        Depth of the header text below the top margin.

        Title and info line each take one line_height step; the info
        line's descenders hang below its baseline.
        """
        return (
            (self.font_size + self.info_font_size) * self.line_height
            + self.info_font_size * HEADER_DESCENT
        )


@dataclass(frozen=True)
class VisualVariant:
    """
    Colors and background asset of a theme (immutable).

    Attributes:
        primary_color: Title, dividers, label outlines
        secondary_color: Secondary header text and footer
        accent_color: Highlights
        background_color: Flat fill when no background asset is available
        background_asset_path: Preferred full-page background image
        fallback_asset_paths: Ordered candidates tried when the preferred
            asset cannot be loaded
    """

    primary_color: str = "#1a1a1a"
    secondary_color: str = "#4d4d4d"
    accent_color: str = "#808080"
    background_color: str = "#ffffff"
    background_asset_path: Optional[str] = None
    fallback_asset_paths: tuple[str, ...] = ()


@dataclass(frozen=True)
class CompositionFlags:
    """
    Document composition flags of a theme (immutable).

    Attributes:
        include_answer_key_by_default: Append the answer key page unless the
            caller overrides it
        answer_key_in_metadata: When no page is emitted, store the key in
            the PDF metadata instead
        max_pages: Hard cap on question pages (None = unlimited)
    """

    include_answer_key_by_default: bool = True
    answer_key_in_metadata: bool = False
    max_pages: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_pages is not None and self.max_pages <= 0:
            raise ValueError(f"max_pages must be positive: {self.max_pages}")


@dataclass(frozen=True)
class ThemeDefinition:
    """
    Complete theme (immutable).

    Example:
        >>> theme = resolve_theme("yazili-sinav")
        >>> theme.layout.columns
        1
        >>> theme.flags.answer_key_in_metadata
        True
    """

    theme_id: str
    name: str
    layout: LayoutProfile = field(default_factory=LayoutProfile)
    visual: VisualVariant = field(default_factory=VisualVariant)
    flags: CompositionFlags = field(default_factory=CompositionFlags)
    default_watermark: Optional[WatermarkSpec] = None
    description: str = ""

    def __post_init__(self) -> None:
        if not self.theme_id:
            raise ValueError("theme_id must not be empty")

    @property
    def background_candidates(self) -> tuple[str, ...]:
        """Theme-specific background paths in load order."""
        candidates = []
        if self.visual.background_asset_path:
            candidates.append(self.visual.background_asset_path)
        candidates.extend(self.visual.fallback_asset_paths)
        return tuple(candidates)
