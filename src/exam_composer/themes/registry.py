"""
Module: themes.registry

Purpose:
    Central registry of document themes. Maps a theme id to its immutable
    ThemeDefinition; unknown ids fall back to the default theme so that a
    renamed or missing theme never aborts generation.

Key Functions:
    - resolve_theme(): Resolve against the built-in registry
    - get_default_registry(): Shared registry of built-in themes

Key Classes:
    - ThemeRegistry: Lookup table with default fallback

Dependencies:
    - exam_composer.themes.models: ThemeDefinition and enums

Used By:
    - exam_composer.controller: Theme resolution per run
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional

from exam_composer.config import WatermarkKind, WatermarkSpec
from exam_composer.errors import ThemeUnavailableError

from .models import (
    CompositionFlags,
    FontFamily,
    HeaderPosition,
    LayoutProfile,
    Margins,
    NumberStyle,
    QuestionAlignment,
    ThemeDefinition,
    VisualVariant,
)

logger = logging.getLogger(__name__)

DEFAULT_THEME_ID = "classic"


class ThemeRegistry:
    """
    Theme lookup table with a designated default.

    Example:
        >>> registry = ThemeRegistry(BUILTIN_THEMES)
        >>> registry.resolve("no-such-theme").theme_id
        'classic'
    """

    def __init__(
        self,
        themes: Iterable[ThemeDefinition] = (),
        default_theme_id: str = DEFAULT_THEME_ID,
    ) -> None:
        self._themes: Dict[str, ThemeDefinition] = {}
        self.default_theme_id = default_theme_id
        for theme in themes:
            self.register(theme)

    def register(self, theme: ThemeDefinition) -> None:
        """Add or replace a theme."""
        if theme.theme_id in self._themes:
            logger.debug(f"Replacing registered theme {theme.theme_id!r}")
        self._themes[theme.theme_id] = theme

    def has(self, theme_id: str) -> bool:
        return theme_id in self._themes

    def theme_ids(self) -> List[str]:
        return list(self._themes)

    @property
    def default(self) -> ThemeDefinition:
        """
        The fallback theme.

        Raises:
            ThemeUnavailableError: If the default theme is not registered
        """
        theme = self._themes.get(self.default_theme_id)
        if theme is None:
            raise ThemeUnavailableError(
                f"Default theme {self.default_theme_id!r} is not registered "
                f"({len(self._themes)} themes available)"
            )
        return theme

    def resolve(self, theme_id: Optional[str]) -> ThemeDefinition:
        """
        Resolve a theme id, falling back to the default theme.

        Raises:
            ThemeUnavailableError: If neither the theme nor the default exists
        """
        theme = self._themes.get(theme_id) if theme_id else None
        if theme is not None:
            return theme

        default = self.default
        logger.warning(
            f"Unknown theme {theme_id!r}, falling back to {default.theme_id!r}"
        )
        return default

    def __len__(self) -> int:
        return len(self._themes)

    def __contains__(self, theme_id: object) -> bool:
        return theme_id in self._themes


# ─────────────────────────────────────────────────────────────────────────────
# Built-in themes
# ─────────────────────────────────────────────────────────────────────────────

CLASSIC_THEME = ThemeDefinition(
    theme_id="classic",
    name="Klasik Test",
    description="Clean two-column layout with turquoise accents",
    layout=LayoutProfile(
        alignment=QuestionAlignment.LEFT,
        header_position=HeaderPosition.TOP_CENTER,
        columns=2,
        show_logo=True,
        show_footer=True,
        number_style=NumberStyle.CIRCLE,
        font=FontFamily.TIMES,
        font_size=14,
        margins=Margins(top=40, bottom=40, left=30, right=30),
        spacing_mm=5,
        line_height=1.5,
        header_height=60,
    ),
    visual=VisualVariant(
        primary_color="#00bfcc",
        secondary_color="#00999f",
        accent_color="#00e6f2",
        background_color="#ffffff",
        background_asset_path="themes/classic-light.png",
    ),
    flags=CompositionFlags(include_answer_key_by_default=True),
)

YAPRAK_TEST_THEME = ThemeDefinition(
    theme_id="yaprak-test",
    name="Yaprak Test",
    description="Worksheet on a printed leaf background, at most two pages",
    layout=LayoutProfile(
        alignment=QuestionAlignment.CENTER,
        header_position=HeaderPosition.TOP_LEFT,
        columns=2,
        show_logo=False,
        show_footer=True,
        number_style=NumberStyle.SQUARE,
        font=FontFamily.HELVETICA,
        font_size=13,
        margins=Margins(top=80, bottom=64, left=24, right=24),
        spacing_mm=4,
        line_height=1.6,
        header_height=52,
    ),
    visual=VisualVariant(
        primary_color="#1a1a1a",
        secondary_color="#4d4d4d",
        accent_color="#808080",
        background_color="#f9fafb",
        background_asset_path="themes/test-02.png",
        fallback_asset_paths=("themes/leaf-green.png",),
    ),
    flags=CompositionFlags(include_answer_key_by_default=True, max_pages=2),
    default_watermark=WatermarkSpec(
        WatermarkKind.TEXT, "YAPRAK TEST", opacity=0.1, rotation_degrees=-45,
        size=48, color="#808080",
    ),
)

DENEME_SINAVI_THEME = ThemeDefinition(
    theme_id="deneme-sinavi",
    name="Deneme Sinavi",
    description="Practice exam layout with bordered columns",
    layout=LayoutProfile(
        alignment=QuestionAlignment.JUSTIFY,
        header_position=HeaderPosition.TOP_CENTER,
        columns=2,
        show_logo=True,
        show_footer=True,
        number_style=NumberStyle.BOLD,
        font=FontFamily.HELVETICA,
        font_size=15,
        margins=Margins(top=50, bottom=45, left=25, right=25),
        spacing_mm=6,
        line_height=1.4,
        header_height=64,
    ),
    visual=VisualVariant(
        primary_color="#1c1c1c",
        secondary_color="#737373",
        accent_color="#cccccc",
        background_color="#ffffff",
        background_asset_path="themes/test-03.png",
        fallback_asset_paths=("themes/exam-blue.png",),
    ),
    flags=CompositionFlags(include_answer_key_by_default=True),
    default_watermark=WatermarkSpec(
        WatermarkKind.TEXT, "DENEME", opacity=0.08, rotation_degrees=-30,
        size=60, color="#3366cc",
    ),
)

YAZILI_SINAV_THEME = ThemeDefinition(
    theme_id="yazili-sinav",
    name="Yazili Sinav",
    description="Formal single-column written exam; answer key travels in metadata",
    layout=LayoutProfile(
        alignment=QuestionAlignment.LEFT,
        header_position=HeaderPosition.TOP_RIGHT,
        columns=1,
        show_logo=True,
        show_footer=False,
        number_style=NumberStyle.ROMAN,
        font=FontFamily.TIMES,
        font_size=14,
        margins=Margins(top=60, bottom=50, left=40, right=40),
        spacing_mm=5,
        line_height=1.8,
        header_height=70,
    ),
    visual=VisualVariant(
        primary_color="#333333",
        secondary_color="#666666",
        accent_color="#999999",
        background_color="#fafaf9",
        background_asset_path="themes/test-05.png",
        fallback_asset_paths=("themes/formal-burgundy.png",),
    ),
    flags=CompositionFlags(
        include_answer_key_by_default=False,
        answer_key_in_metadata=True,
    ),
)

TYT_2024_THEME = ThemeDefinition(
    theme_id="tyt-2024",
    name="TYT 2024",
    description="High-contrast central exam style",
    layout=LayoutProfile(
        alignment=QuestionAlignment.LEFT,
        header_position=HeaderPosition.TOP_CENTER,
        columns=2,
        show_logo=True,
        show_footer=True,
        number_style=NumberStyle.BOLD,
        font=FontFamily.HELVETICA,
        font_size=14,
        margins=Margins(top=45, bottom=45, left=25, right=25),
        spacing_mm=4,
        line_height=1.4,
        header_height=56,
    ),
    visual=VisualVariant(
        primary_color="#111111",
        secondary_color="#333333",
        accent_color="#666666",
        background_color="#ffffff",
        background_asset_path="themes/test-04.png",
    ),
    flags=CompositionFlags(include_answer_key_by_default=True),
    default_watermark=WatermarkSpec(
        WatermarkKind.TEXT, "DENEME", opacity=0.05, rotation_degrees=-30, size=60,
    ),
)

YKS_2025_THEME = ThemeDefinition(
    theme_id="yks-2025",
    name="YKS 2025",
    description="University entrance exam style with red accents",
    layout=LayoutProfile(
        alignment=QuestionAlignment.LEFT,
        header_position=HeaderPosition.TOP_CENTER,
        columns=2,
        show_logo=False,
        show_footer=True,
        number_style=NumberStyle.BOLD,
        font=FontFamily.HELVETICA,
        font_size=14,
        margins=Margins(top=45, bottom=45, left=25, right=25),
        spacing_mm=5,
        line_height=1.4,
        header_height=56,
    ),
    visual=VisualVariant(
        primary_color="#1f1f1f",
        secondary_color="#595959",
        accent_color="#d4545c",
        background_color="#ffffff",
        background_asset_path="themes/test03-1.png",
    ),
    flags=CompositionFlags(include_answer_key_by_default=True),
    default_watermark=WatermarkSpec(
        WatermarkKind.TEXT, "YKS 2025", opacity=0.08, rotation_degrees=-30,
        size=55, color="#1a4dcc",
    ),
)

BUILTIN_THEMES: tuple[ThemeDefinition, ...] = (
    CLASSIC_THEME,
    YAPRAK_TEST_THEME,
    DENEME_SINAVI_THEME,
    YAZILI_SINAV_THEME,
    TYT_2024_THEME,
    YKS_2025_THEME,
)

_DEFAULT_REGISTRY = ThemeRegistry(BUILTIN_THEMES)


def get_default_registry() -> ThemeRegistry:
    """Registry holding the built-in themes."""
    return _DEFAULT_REGISTRY


def resolve_theme(theme_id: Optional[str]) -> ThemeDefinition:
    """Resolve a theme id against the built-in registry."""
    return _DEFAULT_REGISTRY.resolve(theme_id)
