"""
Module: themes

Purpose:
    Theme definitions, the built-in theme registry and the run-scoped
    background asset cache.

Key Functions:
    - resolve_theme(): Theme id → ThemeDefinition (default on miss)

Key Classes:
    - ThemeDefinition: Immutable theme
    - ThemeRegistry: Lookup with default fallback
    - BackgroundAssetCache: Decode-once background images

Dependencies:
    - PIL, reportlab: Background decoding and embedding

Used By:
    - exam_composer.controller: Document assembly
"""

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
from .registry import (
    BUILTIN_THEMES,
    DEFAULT_THEME_ID,
    ThemeRegistry,
    get_default_registry,
    resolve_theme,
)
from .background_cache import NO_BACKGROUND, BackgroundAssetCache, BackgroundHandle

__all__ = [
    # Models
    "CompositionFlags",
    "FontFamily",
    "HeaderPosition",
    "LayoutProfile",
    "Margins",
    "NumberStyle",
    "QuestionAlignment",
    "ThemeDefinition",
    "VisualVariant",
    # Registry
    "BUILTIN_THEMES",
    "DEFAULT_THEME_ID",
    "ThemeRegistry",
    "get_default_registry",
    "resolve_theme",
    # Cache
    "NO_BACKGROUND",
    "BackgroundAssetCache",
    "BackgroundHandle",
]
