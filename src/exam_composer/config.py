"""
Module: config

Purpose:
    Configuration dataclasses for document generation. Immutable
    configuration with validation on construction.

Key Classes:
    - ComposerConfig: Engine-wide settings (page size, DPI, assets)
    - GenerationOptions: Per-run caller options (theme, watermark, answer key)
    - WatermarkSpec: Watermark request (text or image)

Dependencies:
    - dataclasses (std)
    - reportlab.lib.pagesizes: A4 page size in points

Used By:
    - exam_composer.controller: Main document assembler
    - exam_composer.themes.models: Theme default watermarks
    - exam_composer.output.watermark: Watermark drawing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Mapping, Optional, Union

from reportlab.lib.pagesizes import A4

A4_WIDTH_PT, A4_HEIGHT_PT = A4

# Source images are assumed to be scanned/cropped at print resolution
DEFAULT_SOURCE_DPI = 300

# Tried after a theme's own background candidates
GLOBAL_FALLBACK_BACKGROUND = "themes/test-02.png"


class WatermarkKind(Enum):
    """Watermark content type."""
    NONE = "none"
    TEXT = "text"
    IMAGE = "image"


class WatermarkPosition(Enum):
    """Anchor point of the watermark on the page."""
    CENTER = "center"
    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


@dataclass(frozen=True)
class WatermarkSpec:
    """
    Watermark request (immutable).

    Unset values fall back to the defaults in output.watermark when the
    watermark is drawn.

    Attributes:
        kind: NONE, TEXT or IMAGE
        content: Text for TEXT; raw or base64 (optionally data URL) image
            bytes for IMAGE
        opacity: 0-1, clamped to a faint range when drawn
        rotation_degrees: Counter-clockwise rotation
        size: Font size (TEXT) or percentage scale (IMAGE)
        color: Hex color for TEXT, e.g. "#cccccc"
        position: Anchor on the page

    Example:
        >>> WatermarkSpec(WatermarkKind.TEXT, "DENEME", opacity=0.12, rotation_degrees=-30)
    """

    kind: WatermarkKind = WatermarkKind.NONE
    content: Optional[Union[str, bytes]] = None
    opacity: Optional[float] = None
    rotation_degrees: Optional[float] = None
    size: Optional[float] = None
    color: Optional[str] = None
    position: WatermarkPosition = WatermarkPosition.CENTER

    def __post_init__(self) -> None:
        """Validate watermark on construction."""
        if self.opacity is not None and not 0 <= self.opacity <= 1:
            raise ValueError(f"opacity must be between 0 and 1: {self.opacity}")
        if self.size is not None and self.size <= 0:
            raise ValueError(f"size must be positive: {self.size}")

    @property
    def is_visible(self) -> bool:
        """True when there is something to draw."""
        return self.kind is not WatermarkKind.NONE and bool(self.content)


@dataclass(frozen=True)
class GenerationOptions:
    """
    Per-run generation options (immutable).

    Attributes:
        theme_id: Theme identifier; unknown ids fall back to the default theme
        watermark: Watermark to stamp on every page. None means "use the
            theme's default watermark"; WatermarkSpec() disables watermarks
        include_answer_key: Overrides the theme's answer key default
        custom_fields: Extra metadata fields merged into RunMetadata
    """

    theme_id: str = "classic"
    watermark: Optional[WatermarkSpec] = None
    include_answer_key: Optional[bool] = None
    custom_fields: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ComposerConfig:
    """
    Engine configuration (immutable).

    Attributes:
        asset_root: Directory that relative background paths resolve
            against (None = current working directory)
        source_dpi: Resolution of question images, for pixel→point conversion
        page_width: Page width in points
        page_height: Page height in points
        column_gutter: Horizontal gap between columns in points
        number_gutter: Space left of each image for its number label (points)
        asset_load_timeout: Seconds allowed for reading one background asset
        global_fallback_background: Last background candidate for every theme
        answer_key_columns: Cells per row on the answer key page
        invariant: Produce byte-identical PDFs for identical input

    Example:
        >>> config = ComposerConfig(asset_root=Path("public"))
        >>> config.source_dpi
        300
    """

    asset_root: Optional[Path] = None
    source_dpi: int = DEFAULT_SOURCE_DPI
    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT
    column_gutter: float = 20.0
    number_gutter: float = 22.0
    asset_load_timeout: float = 5.0
    global_fallback_background: Optional[str] = GLOBAL_FALLBACK_BACKGROUND
    answer_key_columns: int = 10
    invariant: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.source_dpi <= 0:
            raise ValueError(f"source_dpi must be positive: {self.source_dpi}")
        if self.page_width <= 0 or self.page_height <= 0:
            raise ValueError(
                f"page size must be positive: {self.page_width}x{self.page_height}"
            )
        if self.column_gutter < 0:
            raise ValueError(f"column_gutter must be non-negative: {self.column_gutter}")
        if self.number_gutter < 0:
            raise ValueError(f"number_gutter must be non-negative: {self.number_gutter}")
        if self.asset_load_timeout <= 0:
            raise ValueError(
                f"asset_load_timeout must be positive: {self.asset_load_timeout}"
            )
        if self.answer_key_columns <= 0:
            raise ValueError(
                f"answer_key_columns must be positive: {self.answer_key_columns}"
            )

    @property
    def page_size(self) -> tuple[float, float]:
        """(width, height) in points."""
        return (self.page_width, self.page_height)
