"""
Module: output.watermark

Purpose:
    Stamp a faint text or image watermark on a page. Drawn right after the
    background so it sits behind question content.

Key Functions:
    - effective_watermark(): Caller watermark or theme default
    - resolve_opacity(): Clamp opacity to the faint range
    - draw_watermark(): Draw on the current page

Dependencies:
    - reportlab: Canvas drawing, ImageReader
    - PIL: Image watermark decoding
    - base64 (std): Data-URL image content

Used By:
    - exam_composer.output.renderer: Question pages
    - exam_composer.output.answer_key: Answer key page
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Optional, Tuple

from PIL import Image
from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from exam_composer.config import WatermarkKind, WatermarkPosition, WatermarkSpec
from exam_composer.core.text import sanitize_text

logger = logging.getLogger(__name__)

DEFAULT_OPACITY = 0.08
DEFAULT_IMAGE_OPACITY = 0.1
MIN_OPACITY = 0.05
MAX_OPACITY = 0.15
DEFAULT_ROTATION = -30.0
DEFAULT_TEXT_SIZE = 48.0
MIN_TEXT_SIZE = 40.0
DEFAULT_TEXT_COLOR = "#cccccc"
WATERMARK_FONT = "Helvetica-Bold"
# Image watermarks fit inside this share of the page
IMAGE_MAX_PAGE_SHARE = 0.4
CORNER_INSET = 100.0


def effective_watermark(
    requested: Optional[WatermarkSpec],
    theme_default: Optional[WatermarkSpec],
) -> Optional[WatermarkSpec]:
    """
    Watermark to stamp on every page of a run.

    An explicit request (even kind=NONE) wins over the theme default.
    Returns None when nothing should be drawn.
    """
    spec = requested if requested is not None else theme_default
    if spec is None or not spec.is_visible:
        return None
    return spec


def resolve_opacity(spec: WatermarkSpec) -> float:
    """
    Opacity clamped to a range that stays visible but unobtrusive.

    Images default slightly stronger than text.
    """
    opacity = spec.opacity
    if opacity is None:
        opacity = DEFAULT_IMAGE_OPACITY if spec.kind is WatermarkKind.IMAGE else DEFAULT_OPACITY
    return max(MIN_OPACITY, min(MAX_OPACITY, opacity))


def anchor_point(
    position: WatermarkPosition,
    page_width: float,
    page_height: float,
) -> Tuple[float, float]:
    """Anchor in PDF coordinates for a watermark position."""
    if position is WatermarkPosition.TOP_LEFT:
        return CORNER_INSET, page_height - CORNER_INSET
    if position is WatermarkPosition.TOP_RIGHT:
        return page_width - CORNER_INSET, page_height - CORNER_INSET
    if position is WatermarkPosition.BOTTOM_LEFT:
        return CORNER_INSET, CORNER_INSET
    if position is WatermarkPosition.BOTTOM_RIGHT:
        return page_width - CORNER_INSET, CORNER_INSET
    return page_width / 2, page_height / 2


def draw_watermark(
    c: canvas.Canvas,
    spec: WatermarkSpec,
    page_width: float,
    page_height: float,
) -> None:
    """
    Draw a watermark on the current page.

    Failures to decode an image watermark are logged and skipped.
    """
    if not spec.is_visible:
        return

    if spec.kind is WatermarkKind.TEXT:
        _draw_text_watermark(c, spec, page_width, page_height)
    elif spec.kind is WatermarkKind.IMAGE:
        _draw_image_watermark(c, spec, page_width, page_height)


def _draw_text_watermark(
    c: canvas.Canvas,
    spec: WatermarkSpec,
    page_width: float,
    page_height: float,
) -> None:
    text = sanitize_text(str(spec.content))
    size = max(MIN_TEXT_SIZE, spec.size or DEFAULT_TEXT_SIZE)
    rotation = spec.rotation_degrees if spec.rotation_degrees is not None else DEFAULT_ROTATION
    x, y = anchor_point(spec.position, page_width, page_height)

    c.saveState()
    c.setFillColor(HexColor(spec.color or DEFAULT_TEXT_COLOR))
    c.setFillAlpha(resolve_opacity(spec))
    c.setFont(WATERMARK_FONT, size)
    c.translate(x, y)
    c.rotate(rotation)
    c.drawCentredString(0, -size / 3, text)
    c.restoreState()


def _draw_image_watermark(
    c: canvas.Canvas,
    spec: WatermarkSpec,
    page_width: float,
    page_height: float,
) -> None:
    try:
        with Image.open(io.BytesIO(_image_bytes(spec.content))) as img:
            img.load()
            decoded = img.copy()
    except (OSError, ValueError, binascii.Error, Image.DecompressionBombError) as e:
        logger.warning(f"Unsupported image watermark, skipping: {e}")
        return

    reader = ImageReader(decoded)
    img_width, img_height = decoded.size

    # Fit within a share of the page, never enlarge, then apply user scale
    scale = min(
        page_width * IMAGE_MAX_PAGE_SHARE / img_width,
        page_height * IMAGE_MAX_PAGE_SHARE / img_height,
        1.0,
    )
    scale *= (spec.size or 100) / 100
    width = img_width * scale
    height = img_height * scale
    rotation = spec.rotation_degrees or 0.0
    x, y = anchor_point(spec.position, page_width, page_height)

    c.saveState()
    c.setFillAlpha(resolve_opacity(spec))
    c.translate(x, y)
    c.rotate(rotation)
    c.drawImage(reader, -width / 2, -height / 2, width=width, height=height, mask="auto")
    c.restoreState()


def _image_bytes(content) -> bytes:
    """Raw bytes from bytes, base64 text or a data URL."""
    if isinstance(content, bytes):
        return content
    text = str(content)
    if "," in text:
        text = text.split(",", 1)[1]
    return base64.b64decode(text, validate=True)
