"""
Unit tests for LayoutConfig geometry.
"""

import pytest
from reportlab.lib.units import mm

from exam_composer.config import ComposerConfig
from exam_composer.layout import LayoutConfig
from exam_composer.themes import QuestionAlignment, resolve_theme


class TestLayoutConfigGeometry:
    def test_column_width_when_two_columns_then_splits_minus_gutter(self):
        # Arrange
        config = LayoutConfig(page_width=600, margin_left=30, margin_right=30,
                              columns=2, column_gutter=20, number_gutter=22)

        # Act / Assert
        assert config.available_width == 540
        assert config.column_width == 260
        assert config.image_max_width == 238
        assert config.column_x(1) == 30 + 260 + 20

    def test_column_extent_when_header_then_excluded(self):
        config = LayoutConfig(page_height=842, margin_top=40, margin_bottom=40, header_height=60)

        assert config.content_top == 100
        assert config.content_bottom == 802
        assert config.column_extent == 702

    def test_px_to_pt_when_300_dpi_then_quarter_of_pixels(self):
        config = LayoutConfig()

        assert config.px_to_pt(400) == pytest.approx(96.0)

    def test_init_when_margins_exceed_width_then_raises(self):
        with pytest.raises(ValueError):
            LayoutConfig(page_width=100, margin_left=60, margin_right=60)

    def test_init_when_header_fills_page_then_raises(self):
        with pytest.raises(ValueError):
            LayoutConfig(page_height=200, margin_top=40, margin_bottom=40, header_height=120)


class TestFromTheme:
    def test_from_theme_when_no_spacing_override_then_theme_spacing(self):
        # Arrange
        theme = resolve_theme("yaprak-test")

        # Act
        config = LayoutConfig.from_theme(theme, ComposerConfig())

        # Assert
        assert config.margin_top == 80
        assert config.header_height == 52
        assert config.spacing == pytest.approx(4 * mm)
        assert config.alignment is QuestionAlignment.CENTER

    def test_from_theme_when_spacing_override_then_uses_it(self):
        config = LayoutConfig.from_theme(
            resolve_theme("classic"), ComposerConfig(), spacing_mm=10
        )

        assert config.spacing == pytest.approx(10 * mm)

    def test_from_theme_when_single_column_theme_then_one_column(self):
        config = LayoutConfig.from_theme(resolve_theme("yazili-sinav"), ComposerConfig())

        assert config.columns == 1
