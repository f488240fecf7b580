"""
Core Models Package

Immutable input records for a generation run. The surrounding application
builds these (already ordered, already validated) and hands them to the
document assembler.
"""

from .questions import QuestionRecord, RunMetadata

__all__ = [
    "QuestionRecord",
    "RunMetadata",
]
