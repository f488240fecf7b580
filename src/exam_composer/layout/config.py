"""
Module: layout.config

Purpose:
    Configuration for the page packer. Page dimensions, margins, column
    geometry and spacing, all in PDF points, derived per run from the
    theme, the composer config and the run metadata.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)
    - reportlab.lib.units: Millimetre → point conversion

Used By:
    - exam_composer.layout.packer: Page arrangement
    - exam_composer.output.renderer: Header and footer geometry
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from reportlab.lib.units import mm

from exam_composer.config import A4_HEIGHT_PT, A4_WIDTH_PT, DEFAULT_SOURCE_DPI
from exam_composer.themes.models import QuestionAlignment

if TYPE_CHECKING:
    from exam_composer.config import ComposerConfig
    from exam_composer.themes.models import ThemeDefinition


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page packing (immutable).

    All lengths are PDF points (1/72 inch), measured top-down from the
    top edge of the page.

    Attributes:
        page_width: Page width
        page_height: Page height
        margin_top: Top margin
        margin_bottom: Bottom margin
        margin_left: Left margin
        margin_right: Right margin
        header_height: Space reserved for the header below the top margin
        columns: Number of question columns
        column_gutter: Horizontal gap between columns
        number_gutter: Space left of each image for its number label
        spacing: Vertical gap after each question block
        source_dpi: Resolution of question images
        alignment: Horizontal placement of images inside a column

    Example:
        >>> config = LayoutConfig(page_height=842, margin_top=40, margin_bottom=40, header_height=60)
        >>> config.column_extent
        702
    """

    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT
    margin_top: float = 40
    margin_bottom: float = 40
    margin_left: float = 30
    margin_right: float = 30
    header_height: float = 60
    columns: int = 2
    column_gutter: float = 20
    number_gutter: float = 22
    spacing: float = 5 * mm
    source_dpi: int = DEFAULT_SOURCE_DPI
    alignment: QuestionAlignment = QuestionAlignment.LEFT

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        if self.columns <= 0:
            raise ValueError(f"columns must be positive: {self.columns}")
        if self.spacing < 0:
            raise ValueError(f"spacing must be non-negative: {self.spacing}")
        if self.source_dpi <= 0:
            raise ValueError(f"source_dpi must be positive: {self.source_dpi}")
        if self.image_max_width <= 0:
            raise ValueError("Margins and gutters exceed page width")
        if self.column_extent <= self.spacing:
            raise ValueError("Margins, header and spacing exceed page height")

    @classmethod
    def from_theme(
        cls,
        theme: "ThemeDefinition",
        composer: "ComposerConfig",
        spacing_mm: Optional[float] = None,
    ) -> "LayoutConfig":
        """
        Build the layout for one run.

        Args:
            theme: Resolved theme (margins, columns, header height)
            composer: Engine config (page size, DPI, gutters)
            spacing_mm: Run-specific question spacing; None uses the theme's
        """
        profile = theme.layout
        spacing = profile.spacing_mm if spacing_mm is None else spacing_mm
        return cls(
            page_width=composer.page_width,
            page_height=composer.page_height,
            margin_top=profile.margins.top,
            margin_bottom=profile.margins.bottom,
            margin_left=profile.margins.left,
            margin_right=profile.margins.right,
            header_height=profile.header_height,
            columns=profile.columns,
            column_gutter=composer.column_gutter,
            number_gutter=composer.number_gutter,
            spacing=spacing * mm,
            source_dpi=composer.source_dpi,
            alignment=profile.alignment,
        )

    @property
    def available_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def column_width(self) -> float:
        """Width of one column."""
        gutters = (self.columns - 1) * self.column_gutter
        return (self.available_width - gutters) / self.columns

    @property
    def image_max_width(self) -> float:
        """Widest a question image may be drawn (column minus number label)."""
        return self.column_width - self.number_gutter

    @property
    def content_top(self) -> float:
        """Y where each column's cursor starts."""
        return self.margin_top + self.header_height

    @property
    def content_bottom(self) -> float:
        """Lowest Y a question block may reach."""
        return self.page_height - self.margin_bottom

    @property
    def column_extent(self) -> float:
        """Full vertical space of an empty column."""
        return self.content_bottom - self.content_top

    def column_x(self, column_index: int) -> float:
        """Left edge of a column."""
        return self.margin_left + column_index * (self.column_width + self.column_gutter)

    def px_to_pt(self, px: float) -> float:
        """Convert source pixels to points."""
        return px * 72.0 / self.source_dpi
