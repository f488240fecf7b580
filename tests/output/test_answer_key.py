"""
Unit tests for answer key composition.
"""

from unittest.mock import MagicMock, patch

import pytest

from exam_composer.config import ComposerConfig, WatermarkKind, WatermarkSpec
from exam_composer.core.models import RunMetadata
from exam_composer.layout import LayoutConfig, pack_questions
from exam_composer.output.answer_key import (
    ANSWER_KEY_TITLE,
    CELL_WIDTH,
    GRID_SIDE_MARGIN,
    AnswerKeyMode,
    answer_key_page_count,
    build_answer_key,
    cell_width,
    parse_answer_key,
    render_answer_key_pages,
    resolve_answer_key_mode,
    serialize_answer_key,
)
from exam_composer.output.renderer import PageContext
from exam_composer.themes import resolve_theme


def _context(theme_id="classic", **kwargs):
    theme = resolve_theme(theme_id)
    return PageContext(
        theme=theme,
        layout=LayoutConfig.from_theme(theme, ComposerConfig()),
        metadata=RunMetadata(),
        **kwargs,
    )


def _texts(c):
    return [call[0][2] for call in c.drawCentredString.call_args_list]


class TestResolveAnswerKeyMode:
    @pytest.mark.parametrize("theme_id,override,expected", [
        ("classic", None, AnswerKeyMode.PAGE),
        ("classic", False, AnswerKeyMode.NONE),
        ("yazili-sinav", None, AnswerKeyMode.METADATA),
        ("yazili-sinav", True, AnswerKeyMode.PAGE),
        ("yazili-sinav", False, AnswerKeyMode.METADATA),
    ])
    def test_resolve_mode_when_theme_and_override_then_expected(self, theme_id, override, expected):
        assert resolve_answer_key_mode(resolve_theme(theme_id), override) is expected


class TestBuildAnswerKey:
    def test_build_when_placements_then_number_answer_pairs(self, question_factory):
        # Arrange
        questions = [question_factory(i, answer=a) for i, a in enumerate("CAB")]
        placements = pack_questions(questions, LayoutConfig()).placements

        # Act
        entries = build_answer_key(placements)

        # Assert
        assert entries == [(1, "C"), (2, "A"), (3, "B")]


class TestSerialization:
    def test_serialize_when_entries_then_compact_text(self):
        assert serialize_answer_key([(1, "A"), (2, "B"), (3, "E")]) == "1:A,2:B,3:E"

    def test_parse_when_serialized_then_entries(self):
        assert parse_answer_key("1:A, 2:B,3:E") == [(1, "A"), (2, "B"), (3, "E")]

    def test_parse_when_empty_then_no_entries(self):
        assert parse_answer_key("") == []

    def test_parse_when_malformed_then_raises(self):
        with pytest.raises(ValueError, match="Malformed"):
            parse_answer_key("1:A,B")


class TestAnswerKeyPageCount:
    def test_page_count_when_fits_one_grid_then_one(self):
        assert answer_key_page_count(21, 841.89, 10) == 1

    def test_page_count_when_grid_overflows_then_more_pages(self):
        assert answer_key_page_count(181, 841.89, 10) == 2

    def test_page_count_when_no_entries_then_still_one(self):
        assert answer_key_page_count(0, 841.89, 10) == 1


class TestRenderAnswerKeyPages:
    def test_render_when_21_entries_then_single_page_grid(self):
        # Arrange
        c = MagicMock()
        entries = [(n, "ABCDE"[(n - 1) % 5]) for n in range(1, 22)]
        context = _context(total_pages=3)

        # Act
        pages = render_answer_key_pages(c, entries, context, first_page_number=3)

        # Assert
        assert pages == 1
        c.showPage.assert_called_once()
        texts = _texts(c)
        assert texts[0] == ANSWER_KEY_TITLE
        assert "1.A" in texts
        assert "21.A" in texts
        assert "Sayfa 3 / 3" in texts

    def test_render_when_grid_overflows_then_continues_on_next_page(self):
        c = MagicMock()
        entries = [(n, "A") for n in range(1, 201)]

        pages = render_answer_key_pages(c, entries, _context(total_pages=4), first_page_number=3)

        assert pages == 2
        assert c.showPage.call_count == 2
        assert _texts(c).count(ANSWER_KEY_TITLE) == 2
        assert "200.A" in _texts(c)

    def test_render_when_watermark_then_same_spec_as_question_pages(self):
        c = MagicMock()
        spec = WatermarkSpec(WatermarkKind.TEXT, "DENEME", opacity=0.1)
        context = _context(watermark=spec)

        with patch("exam_composer.output.answer_key.draw_watermark") as draw_watermark:
            render_answer_key_pages(c, [(1, "A")], context)

        draw_watermark.assert_called_once_with(c, spec, context.page_width, context.page_height)

    def test_render_when_cells_then_grid_centered(self):
        c = MagicMock()
        context = _context()

        render_answer_key_pages(c, [(n, "B") for n in range(1, 11)], context, columns=10)

        cell_rects = [call for call in c.rect.call_args_list if call[0][2] == 49]
        xs = [call[0][0] for call in cell_rects]
        assert len(xs) == 10
        assert xs[0] == pytest.approx((context.page_width - 490) / 2)

    @pytest.mark.parametrize("columns", [10, 13, 15, 20])
    def test_render_when_many_columns_then_cells_stay_on_page(self, columns):
        # Arrange
        c = MagicMock()
        context = _context()

        # Act
        render_answer_key_pages(
            c, [(n, "D") for n in range(1, columns + 1)], context, columns=columns
        )

        # Assert
        cell_rects = [call for call in c.rect.call_args_list if call.kwargs.get("stroke") == 1]
        assert len(cell_rects) == columns
        for call in cell_rects:
            x, _, width = call[0][0], call[0][1], call[0][2]
            assert x >= GRID_SIDE_MARGIN - 1e-6
            assert x + width <= context.page_width - GRID_SIDE_MARGIN + 1e-6
        assert f"{columns}.D" in _texts(c)


class TestCellWidth:
    def test_cell_width_when_columns_fit_then_full_width(self):
        assert cell_width(595.28, 10) == CELL_WIDTH

    def test_cell_width_when_columns_overflow_then_shares_usable_width(self):
        assert cell_width(595.28, 15) == pytest.approx((595.28 - 2 * GRID_SIDE_MARGIN) / 15)
