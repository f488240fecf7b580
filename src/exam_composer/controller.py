"""
Module: controller

Purpose:
    Orchestrate a complete document generation run.
    Validate → Resolve theme → Pack → Render pages → Answer key → Stamp info

Key Functions:
    - generate(): One-shot entry point with a private asset cache

Key Classes:
    - DocumentAssembler: Reusable assembler owning a background cache
    - GenerationResult: PDF bytes plus run diagnostics

Dependencies:
    - exam_composer.themes: Theme registry and background cache
    - exam_composer.layout: Page packing
    - exam_composer.output: Rendering, answer key, metadata

Used By:
    - Applications embedding the composer
"""

from __future__ import annotations

import dataclasses
import io
import logging
import threading
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from reportlab.pdfgen import canvas

from .config import ComposerConfig, GenerationOptions
from .core.models import QuestionRecord, RunMetadata
from .errors import GenerationError, InvalidInputError, SerializationError
from .layout import LayoutConfig, PackResult, pack_questions
from .output.answer_key import (
    AnswerKeyEntry,
    AnswerKeyMode,
    answer_key_page_count,
    build_answer_key,
    render_answer_key_pages,
    resolve_answer_key_mode,
)
from .output.metadata import build_document_info, stamp_document_info
from .output.renderer import PageContext, render_question_page
from .output.watermark import effective_watermark
from .themes.background_cache import BackgroundAssetCache, BackgroundHandle
from .themes.models import ThemeDefinition
from .themes.registry import ThemeRegistry, get_default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """
    Complete generation result (immutable).

    Attributes:
        pdf_bytes: The finished PDF document
        theme_id: Theme actually used (after fallback)
        page_count: Total pages including answer key pages
        question_page_count: Pages holding questions
        requested_count: Questions handed in
        placed_count: Questions that made it into the document
        answer_key_mode: Where the answer key went
        warnings: Soft failures during the run

    Example:
        >>> result = generate(metadata, questions)
        >>> if result.truncated:
        ...     print(f"Only {result.placed_count}/{result.requested_count} questions fit")
    """
    pdf_bytes: bytes
    theme_id: str
    page_count: int
    question_page_count: int
    requested_count: int
    placed_count: int
    answer_key_mode: AnswerKeyMode
    warnings: tuple[str, ...] = ()

    @property
    def truncated(self) -> bool:
        """True when a page cap dropped questions."""
        return self.placed_count < self.requested_count


class DocumentAssembler:
    """
    Turns questions and metadata into a themed PDF.

    Runs on one assembler are serialized; use separate assemblers (or the
    module-level generate()) for parallel generation.

    Example:
        >>> assembler = DocumentAssembler(ComposerConfig(asset_root=Path("public")))
        >>> result = assembler.generate(metadata, questions, GenerationOptions(theme_id="yaprak-test"))
        >>> result.page_count
        3
    """

    def __init__(
        self,
        config: Optional[ComposerConfig] = None,
        registry: Optional[ThemeRegistry] = None,
        cache: Optional[BackgroundAssetCache] = None,
    ) -> None:
        self.config = config or ComposerConfig()
        self.registry = registry if registry is not None else get_default_registry()
        self.cache = cache if cache is not None else BackgroundAssetCache(
            asset_root=self.config.asset_root,
            global_fallback_path=self.config.global_fallback_background,
            load_timeout=self.config.asset_load_timeout,
        )
        self._run_lock = threading.Lock()

    def generate(
        self,
        metadata: RunMetadata,
        questions: Sequence[QuestionRecord],
        options: Optional[GenerationOptions] = None,
    ) -> GenerationResult:
        """
        Generate a complete document.

        Pipeline:
        1. Clear the background cache
        2. Validate questions
        3. Resolve theme and merge custom fields
        4. Pack questions onto pages (theme page cap applies)
        5. Render question pages, then the answer key page(s) if enabled
        6. Stamp document info (and the answer key in metadata mode)
        7. Clear the background cache

        Args:
            metadata: Test-level fields
            questions: Questions to place
            options: Theme, watermark and answer key options

        Returns:
            GenerationResult with PDF bytes and counts

        Raises:
            InvalidInputError: If the questions are unusable
            ThemeUnavailableError: If no theme can be resolved
            SerializationError: If the PDF cannot be produced
        """
        options = options or GenerationOptions()

        with self._run_lock:
            self.cache.clear()
            try:
                return self._run(metadata, questions, options)
            finally:
                self.cache.clear()

    def _run(
        self,
        metadata: RunMetadata,
        questions: Sequence[QuestionRecord],
        options: GenerationOptions,
    ) -> GenerationResult:
        start_time = time.perf_counter()
        warnings: List[str] = []

        _validate_questions(questions)

        theme = self.registry.resolve(options.theme_id)
        if theme.theme_id != options.theme_id:
            warnings.append(
                f"Unknown theme {options.theme_id!r}, used {theme.theme_id!r}"
            )
        logger.info(f"Generating {len(questions)} questions with theme {theme.theme_id!r}")

        metadata = metadata.merged_with(options.custom_fields)
        try:
            layout = LayoutConfig.from_theme(
                theme, self.config, spacing_mm=metadata.question_spacing_mm
            )
        except ValueError as e:
            raise InvalidInputError(f"Layout cannot be built: {e}") from e

        pack = pack_questions(questions, layout, max_pages=theme.flags.max_pages)
        warnings.extend(pack.warnings)

        mode = resolve_answer_key_mode(theme, options.include_answer_key)
        entries = build_answer_key(pack.placements)
        key_pages = (
            answer_key_page_count(len(entries), layout.page_height, self.config.answer_key_columns)
            if mode is AnswerKeyMode.PAGE
            else 0
        )
        total_pages = pack.page_count + key_pages

        context = PageContext(
            theme=theme,
            layout=layout,
            metadata=metadata,
            watermark=effective_watermark(options.watermark, theme.default_watermark),
            total_pages=total_pages,
            warnings=warnings,
        )

        try:
            pdf_bytes = self._render(pack, context, entries if mode is AnswerKeyMode.PAGE else None)
            info = build_document_info(
                metadata,
                theme.theme_id,
                answer_key=entries if mode is AnswerKeyMode.METADATA else None,
            )
            pdf_bytes = stamp_document_info(pdf_bytes, info)
        except GenerationError:
            raise
        except Exception as e:
            raise SerializationError(f"Failed to produce PDF: {e}") from e

        elapsed = time.perf_counter() - start_time
        logger.info(
            f"Generated {total_pages} pages ({pack.placed_count}/{pack.requested_count} "
            f"questions, answer key: {mode.value}) in {elapsed:.2f}s"
        )

        return GenerationResult(
            pdf_bytes=pdf_bytes,
            theme_id=theme.theme_id,
            page_count=total_pages,
            question_page_count=pack.page_count,
            requested_count=pack.requested_count,
            placed_count=pack.placed_count,
            answer_key_mode=mode,
            warnings=tuple(warnings),
        )

    def _render(
        self,
        pack: PackResult,
        context: PageContext,
        answer_key: Optional[List[AnswerKeyEntry]],
    ) -> bytes:
        """Draw all pages into an in-memory PDF."""
        buffer = io.BytesIO()
        c = canvas.Canvas(
            buffer,
            pagesize=self.config.page_size,
            invariant=1 if self.config.invariant else 0,
        )

        for page in pack.pages:
            page_context = dataclasses.replace(
                context, background=self._background_for(context.theme)
            )
            render_question_page(c, page, page_context)
            c.showPage()

        if answer_key is not None:
            key_context = dataclasses.replace(
                context, background=self._background_for(context.theme)
            )
            render_answer_key_pages(
                c,
                answer_key,
                key_context,
                columns=self.config.answer_key_columns,
                first_page_number=pack.page_count + 1,
            )

        c.save()
        return buffer.getvalue()

    def _background_for(self, theme: ThemeDefinition) -> Optional[BackgroundHandle]:
        candidates = theme.background_candidates
        if not candidates:
            return self.cache.get_or_load(theme.theme_id, "")
        return self.cache.get_or_load(theme.theme_id, candidates[0], candidates[1:])


def generate(
    metadata: RunMetadata,
    questions: Sequence[QuestionRecord],
    options: Optional[GenerationOptions] = None,
    *,
    config: Optional[ComposerConfig] = None,
) -> GenerationResult:
    """
    Generate a document with a fresh assembler and background cache.

    Safe to call from several threads at once.

    Example:
        >>> result = generate(RunMetadata(test_name="Deneme 1"), questions)
        >>> Path("deneme.pdf").write_bytes(result.pdf_bytes)
    """
    return DocumentAssembler(config=config).generate(metadata, questions, options)


def _validate_questions(questions: Sequence[QuestionRecord]) -> None:
    """
    Reject unusable input before any drawing starts.

    Raises:
        InvalidInputError: On the first invalid question
    """
    if not questions:
        raise InvalidInputError("At least one question is required")

    for question in questions:
        if question.actual_width <= 0 or question.actual_height <= 0:
            raise InvalidInputError(
                f"Question {question.id!r} has non-positive size "
                f"{question.actual_width}x{question.actual_height}"
            )
        if not question.correct_answer or not question.correct_answer.strip():
            raise InvalidInputError(f"Question {question.id!r} has no correct answer")
        if question.order < 0:
            raise InvalidInputError(
                f"Question {question.id!r} has negative order {question.order}"
            )
