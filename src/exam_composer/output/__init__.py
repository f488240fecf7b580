"""
Module: output

Purpose:
    PDF drawing for generated tests. Question pages, watermarks, number
    labels, the answer key and document metadata.

Key Functions:
    - render_question_page(): Draw one packed page
    - render_answer_key_pages(): Draw the answer key grid
    - draw_watermark(): Stamp a watermark on the current page
    - stamp_document_info(): Set PDF Info entries via pypdf

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - pypdf: Metadata rewriting

Used By:
    - exam_composer.controller: Document assembly
"""

from .answer_key import (
    AnswerKeyMode,
    build_answer_key,
    parse_answer_key,
    render_answer_key_pages,
    resolve_answer_key_mode,
    serialize_answer_key,
)
from .metadata import (
    ANSWER_KEY_METADATA_KEY,
    build_document_info,
    read_answer_key,
    stamp_document_info,
)
from .renderer import PageContext, render_question_page
from .watermark import draw_watermark, effective_watermark

__all__ = [
    "AnswerKeyMode",
    "build_answer_key",
    "parse_answer_key",
    "render_answer_key_pages",
    "resolve_answer_key_mode",
    "serialize_answer_key",
    "ANSWER_KEY_METADATA_KEY",
    "build_document_info",
    "read_answer_key",
    "stamp_document_info",
    "PageContext",
    "render_question_page",
    "draw_watermark",
    "effective_watermark",
]
