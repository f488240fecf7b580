"""
Module: output.metadata

Purpose:
    Stamp the document information dictionary onto a rendered PDF with
    pypdf, including the private /AnswerKey entry used by the metadata
    answer key mode.

Key Functions:
    - build_document_info(): Info dictionary for a run
    - stamp_document_info(): Rewrite a PDF with new Info entries
    - read_answer_key(): Answer key entries stored in a PDF, if any

Dependencies:
    - pypdf: PDF reading and rewriting

Used By:
    - exam_composer.controller: Final document step
"""

from __future__ import annotations

import io
import logging
import re
from typing import Dict, List, Mapping, Optional, Sequence

from pypdf import PdfReader, PdfWriter

from exam_composer.core.models import RunMetadata
from exam_composer.core.text import sanitize_text
from exam_composer.output.answer_key import (
    AnswerKeyEntry,
    parse_answer_key,
    serialize_answer_key,
)

logger = logging.getLogger(__name__)

ANSWER_KEY_METADATA_KEY = "/AnswerKey"
THEME_METADATA_KEY = "/ExamTheme"
CREATOR = "Akilli Test Olusturucu"
PRODUCER = "exam-composer"

DEFAULT_TITLE = "Test"
DEFAULT_AUTHOR = "Test Olusturucu"
DEFAULT_COURSE = "Ders"
DEFAULT_CLASS = "Sinif"

# Keys reserved for the standard entries and our own private ones
_RESERVED_KEYS = {
    "/Title", "/Author", "/Subject", "/Keywords", "/Creator", "/Producer",
    "/CreationDate", "/ModDate", "/Trapped",
    ANSWER_KEY_METADATA_KEY, THEME_METADATA_KEY,
}


def build_document_info(
    metadata: RunMetadata,
    theme_id: str,
    answer_key: Optional[Sequence[AnswerKeyEntry]] = None,
) -> Dict[str, str]:
    """
    Info dictionary for a generated test.

    Args:
        metadata: Run metadata (custom fields already merged)
        theme_id: Resolved theme id
        answer_key: Entries to store under /AnswerKey, or None

    Returns:
        PDF name → string mapping ready for PdfWriter.add_metadata()
    """
    course = metadata.course_name or DEFAULT_COURSE
    class_name = metadata.class_name or DEFAULT_CLASS
    keywords = [
        value for value in (metadata.test_name, metadata.course_name, metadata.class_name)
        if value
    ]
    keywords.append(theme_id)

    info = {
        "/Title": metadata.test_name or DEFAULT_TITLE,
        "/Author": metadata.teacher_name or DEFAULT_AUTHOR,
        "/Subject": f"{course} - {class_name}",
        "/Keywords": ", ".join(keywords),
        "/Creator": CREATOR,
        "/Producer": PRODUCER,
        THEME_METADATA_KEY: theme_id,
    }
    info = {key: sanitize_text(value) for key, value in info.items()}
    info.update(_custom_entries(metadata.extra_fields))

    if answer_key is not None:
        info[ANSWER_KEY_METADATA_KEY] = serialize_answer_key(answer_key)
    return info


def stamp_document_info(pdf_bytes: bytes, info: Mapping[str, str]) -> bytes:
    """
    Return a copy of the PDF with the given Info entries set.

    Raises:
        pypdf.errors.PdfReadError: If pdf_bytes is not a readable PDF
    """
    writer = PdfWriter(clone_from=PdfReader(io.BytesIO(pdf_bytes)))
    writer.add_metadata(dict(info))

    buffer = io.BytesIO()
    writer.write(buffer)
    logger.debug(f"Stamped {len(info)} document info entries")
    return buffer.getvalue()


def read_answer_key(pdf_bytes: bytes) -> Optional[List[AnswerKeyEntry]]:
    """
    Answer key stored in a PDF's metadata.

    Returns:
        Entries, or None when the document carries no /AnswerKey
    """
    info = PdfReader(io.BytesIO(pdf_bytes)).metadata
    if info is None or ANSWER_KEY_METADATA_KEY not in info:
        return None
    return parse_answer_key(str(info[ANSWER_KEY_METADATA_KEY]))


def metadata_key(name: str) -> str:
    """
    PDF name for a free-form field.

    Example:
        >>> metadata_key("okul adı")
        '/okul_adi'
    """
    cleaned = re.sub(r"[^A-Za-z0-9_]", "_", sanitize_text(name.strip()))
    return f"/{cleaned or 'Field'}"


def _custom_entries(fields: Mapping[str, str]) -> Dict[str, str]:
    entries = {}
    for name, value in fields.items():
        key = metadata_key(name)
        if key in _RESERVED_KEYS:
            key = f"/Custom{key[1:]}"
        entries[key] = sanitize_text(str(value))
    return entries
