"""
Unit tests for question and run metadata models.
"""

import dataclasses

import pytest

from exam_composer.core.models import QuestionRecord, RunMetadata


class TestQuestionRecord:
    def test_aspect_ratio_when_landscape_then_below_one(self):
        # Arrange
        question = QuestionRecord("q1", b"", 400, 300, "A", order=0)

        # Act / Assert
        assert question.aspect_ratio == pytest.approx(0.75)

    def test_repr_when_created_then_omits_image_bytes(self):
        question = QuestionRecord("q1", b"\x89PNG-secret", 400, 300, "A", order=0)

        assert "secret" not in repr(question)

    def test_question_when_assigned_then_frozen(self):
        question = QuestionRecord("q1", b"", 400, 300, "A", order=0)

        with pytest.raises(dataclasses.FrozenInstanceError):
            question.order = 3


class TestRunMetadata:
    def test_init_when_negative_spacing_then_raises(self):
        with pytest.raises(ValueError, match="question_spacing_mm"):
            RunMetadata(question_spacing_mm=-1)

    def test_merged_with_when_known_key_then_overrides_field(self):
        # Arrange
        metadata = RunMetadata(test_name="Deneme 1", class_name="9-B")

        # Act
        merged = metadata.merged_with({"class_name": "10-A"})

        # Assert
        assert merged.class_name == "10-A"
        assert merged.test_name == "Deneme 1"
        assert metadata.class_name == "9-B"

    def test_merged_with_when_unknown_key_then_lands_in_extra_fields(self):
        metadata = RunMetadata(extra_fields={"Okul": "Ataturk Lisesi"})

        merged = metadata.merged_with({"Donem": "2"})

        assert merged.extra_fields == {"Okul": "Ataturk Lisesi", "Donem": "2"}

    def test_merged_with_when_empty_then_returns_same_instance(self):
        metadata = RunMetadata(test_name="Deneme 1")

        assert metadata.merged_with({}) is metadata
        assert metadata.merged_with(None) is metadata
