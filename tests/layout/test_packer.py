"""
Unit tests for the page packer.
"""

import pytest
from reportlab.lib.units import mm

from exam_composer.config import ComposerConfig
from exam_composer.core.models import QuestionRecord
from exam_composer.layout import LayoutConfig, pack_questions
from exam_composer.themes import QuestionAlignment, resolve_theme


def _question(order, width=400, height=300, qid=None):
    return QuestionRecord(
        id=qid or f"q{order + 1}",
        image_bytes=b"",
        actual_width=width,
        actual_height=height,
        correct_answer="A",
        order=order,
    )


@pytest.fixture
def classic_config():
    return LayoutConfig.from_theme(resolve_theme("classic"), ComposerConfig())


class TestPackQuestionsScenario:
    def test_pack_when_21_questions_classic_then_eight_per_column(self, classic_config):
        # Arrange
        questions = [_question(i) for i in range(21)]

        # Act
        result = pack_questions(questions, classic_config)

        # Assert
        assert result.page_count == 2
        pages = result.pages
        first_page_columns = [p.column_index for p in pages[0].placements]
        assert first_page_columns.count(0) == 8
        assert first_page_columns.count(1) == 8
        assert pages[1].placement_count == 5
        assert result.placed_count == 21
        assert not result.truncated

    def test_pack_when_questions_then_numbers_follow_order(self, classic_config):
        questions = [_question(i) for i in range(21)]

        result = pack_questions(questions, classic_config)

        assert [p.number for p in result.placements] == list(range(1, 22))
        assert [p.question.order for p in result.placements] == list(range(21))

    def test_pack_when_unsorted_input_then_sorted_by_order(self, classic_config):
        questions = [_question(2), _question(0), _question(1)]

        result = pack_questions(questions, classic_config)

        assert [p.question.id for p in result.placements] == ["q1", "q2", "q3"]

    def test_pack_when_duplicate_order_then_input_position_breaks_tie(self, classic_config):
        questions = [
            _question(0, qid="first"),
            _question(0, qid="second"),
            _question(0, qid="third"),
        ]

        result = pack_questions(questions, classic_config)

        assert [p.question.id for p in result.placements] == ["first", "second", "third"]

    def test_pack_when_empty_then_no_pages(self, classic_config):
        result = pack_questions([], classic_config)

        assert result.page_count == 0
        assert result.placements == ()


class TestPackQuestionsGeometry:
    def test_pack_when_many_sizes_then_no_overlap_and_within_margins(self, classic_config):
        # Arrange
        sizes = [(400, 300), (900, 1200), (300, 900), (1200, 400), (500, 500)] * 6
        questions = [_question(i, w, h) for i, (w, h) in enumerate(sizes)]

        # Act
        result = pack_questions(questions, classic_config)

        # Assert
        by_slot = {}
        for placement in result.placements:
            by_slot.setdefault((placement.page_index, placement.column_index), []).append(placement)
        for placements in by_slot.values():
            placements.sort(key=lambda p: p.row_offset)
            for upper, lower in zip(placements, placements[1:]):
                assert upper.bottom + classic_config.spacing <= lower.row_offset + 1e-6
            for placement in placements:
                assert placement.row_offset >= classic_config.content_top
                assert placement.bottom <= classic_config.content_bottom + 1e-6

    def test_pack_when_image_small_then_never_enlarged(self, classic_config):
        result = pack_questions([_question(0, 200, 100)], classic_config)

        placement = result.placements[0]
        assert placement.width == pytest.approx(48.0)
        assert placement.height == pytest.approx(24.0)

    def test_pack_when_image_wider_than_column_then_shrunk_keeping_aspect(self, classic_config):
        result = pack_questions([_question(0, 2000, 1000)], classic_config)

        placement = result.placements[0]
        assert placement.width == pytest.approx(classic_config.image_max_width)
        assert placement.height / placement.width == pytest.approx(0.5)
        assert not placement.height_capped

    def test_pack_when_taller_than_column_then_own_column_and_capped(self, classic_config):
        # Arrange
        questions = [_question(0), _question(1, 400, 4000)]

        # Act
        result = pack_questions(questions, classic_config)

        # Assert
        tall = result.placements[1]
        assert tall.column_index == 1
        assert tall.row_offset == classic_config.content_top
        assert tall.height_capped
        assert tall.height == pytest.approx(classic_config.column_extent - classic_config.spacing)
        assert tall.height / tall.width == pytest.approx(10.0)
        assert any("taller than a column" in w for w in result.warnings)

    def test_pack_when_column_full_then_next_column_starts_at_content_top(self, classic_config):
        questions = [_question(i) for i in range(9)]

        result = pack_questions(questions, classic_config)

        ninth = result.placements[8]
        assert ninth.column_index == 1
        assert ninth.row_offset == classic_config.content_top


class TestPackQuestionsAlignment:
    def test_image_x_when_left_then_after_number_gutter(self):
        config = LayoutConfig(alignment=QuestionAlignment.LEFT)

        placement = pack_questions([_question(0)], config).placements[0]

        assert placement.x == pytest.approx(config.margin_left + config.number_gutter)

    def test_image_x_when_center_then_centered_in_image_area(self):
        config = LayoutConfig(alignment=QuestionAlignment.CENTER)

        placement = pack_questions([_question(0)], config).placements[0]

        expected = config.margin_left + config.number_gutter + (config.image_max_width - 96) / 2
        assert placement.x == pytest.approx(expected)

    def test_image_x_when_justify_then_flush_right(self):
        config = LayoutConfig(alignment=QuestionAlignment.JUSTIFY)

        placement = pack_questions([_question(0)], config).placements[0]

        assert placement.x + placement.width == pytest.approx(config.margin_left + config.column_width)


class TestPackQuestionsMaxPages:
    def test_pack_when_max_pages_exceeded_then_truncated(self, classic_config):
        # Arrange
        questions = [_question(i) for i in range(21)]

        # Act
        result = pack_questions(questions, classic_config, max_pages=1)

        # Assert
        assert result.page_count == 1
        assert result.placed_count == 16
        assert result.requested_count == 21
        assert result.truncated
        assert any("Page limit" in w for w in result.warnings)

    def test_pack_when_within_max_pages_then_not_truncated(self, classic_config):
        questions = [_question(i) for i in range(10)]

        result = pack_questions(questions, classic_config, max_pages=2)

        assert not result.truncated
        assert result.page_count == 1

    def test_pack_when_custom_spacing_then_fewer_per_column(self):
        config = LayoutConfig.from_theme(resolve_theme("classic"), ComposerConfig(), spacing_mm=30)
        questions = [_question(i) for i in range(8)]

        result = pack_questions(questions, config)

        # 72pt image + 30mm gap = ~157pt per block: 4 fit in 702pt
        assert [p.column_index for p in result.placements].count(0) == 4
        assert config.spacing == pytest.approx(30 * mm)
