"""
Module: questions

Purpose:
    Provides the QuestionRecord and RunMetadata dataclasses - the inputs of
    a generation run. A question is a pre-rendered raster image with its
    pixel size, correct choice and placement order.

Key Classes:
    - QuestionRecord: One exam question (image + answer + order)
    - RunMetadata: Test-level descriptive fields for headers and PDF info

Dependencies:
    - dataclasses (std)

Used By:
    - exam_composer.layout.packer: Placement by order and pixel size
    - exam_composer.output.renderer: Header fields, question images
    - exam_composer.controller: Input validation
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Mapping, Optional

# Field names a custom field may override (see RunMetadata.merged_with)
OVERRIDABLE_FIELDS = ("test_name", "class_name", "course_name", "teacher_name")


@dataclass(frozen=True)
class QuestionRecord:
    """
    One exam question (immutable).

    Dimensions are not validated here; the document assembler rejects
    non-positive sizes with InvalidInputError so that callers get a single
    typed error out of generation.

    Attributes:
        id: Opaque identifier, stable across reorder operations
        image_bytes: Raw PNG/JPEG data of the pre-rendered question
        actual_width: Pixel width of image_bytes (authoritative for layout)
        actual_height: Pixel height of image_bytes
        correct_answer: Choice label like "A"
        order: Zero-based placement position within the run

    Example:
        >>> q = QuestionRecord("q1", png, 400, 300, "C", order=0)
        >>> q.aspect_ratio
        0.75
    """

    id: str
    image_bytes: bytes = field(repr=False)
    actual_width: int
    actual_height: int
    correct_answer: str
    order: int

    @property
    def aspect_ratio(self) -> float:
        """Height divided by width."""
        return self.actual_height / self.actual_width


@dataclass(frozen=True)
class RunMetadata:
    """
    Test-level descriptive fields (immutable).

    Empty strings mean "absent": the header omits them instead of printing
    a blank label.

    Attributes:
        test_name: Title printed at the top of each page
        class_name: Class, e.g. "10-A"
        course_name: Course, e.g. "Matematik"
        teacher_name: Teacher name (also the PDF author)
        question_spacing_mm: Gap between question blocks in millimetres,
            None to use the theme's spacing
        extra_fields: Free-form custom fields merged from generation options
    """

    test_name: str = ""
    class_name: str = ""
    course_name: str = ""
    teacher_name: str = ""
    question_spacing_mm: Optional[float] = None
    extra_fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate spacing on construction."""
        if self.question_spacing_mm is not None and self.question_spacing_mm < 0:
            raise ValueError(
                f"question_spacing_mm must be non-negative: {self.question_spacing_mm}"
            )

    def merged_with(self, custom_fields: Optional[Mapping[str, str]]) -> "RunMetadata":
        """
        Return a copy with custom fields merged in.

        Keys matching a known field name override that field; every other
        key is kept in extra_fields (later keys win).
        """
        if not custom_fields:
            return self

        overrides = {}
        extras = dict(self.extra_fields)
        for key, value in custom_fields.items():
            if key in OVERRIDABLE_FIELDS:
                overrides[key] = value
            else:
                extras[key] = value
        return replace(self, extra_fields=extras, **overrides)
