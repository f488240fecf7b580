"""
Module: layout

Purpose:
    Page packing for exam documents.
    Converts ordered questions into page/column/row placements.

Key Functions:
    - pack_questions(): Main entry point for layout

Key Classes:
    - LayoutConfig: Page geometry for one run
    - PagePlacement: Positioned question
    - PagePlan: Single page layout plan
    - PackResult: Packer output with placed/requested counts

Used By:
    - exam_composer.controller: Document assembly
"""

from .config import LayoutConfig
from .models import PagePlacement, PagePlan, PackResult
from .packer import pack_questions

__all__ = [
    # Config
    "LayoutConfig",
    # Models
    "PagePlacement",
    "PagePlan",
    "PackResult",
    # Functions
    "pack_questions",
]
