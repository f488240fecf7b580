"""
Module: errors

Purpose:
    Typed exceptions raised out of document generation. Callers only need
    to catch GenerationError; subclasses tell bad input apart from internal
    rendering/serialization failures.

Key Classes:
    - GenerationError: Base class for fatal generation failures
    - InvalidInputError: Question list or metadata rejected
    - ThemeUnavailableError: Registry cannot supply any theme
    - SerializationError: PDF rendering or serialization failed

Used By:
    - exam_composer.controller: Wraps failures before propagating
    - exam_composer.themes.registry: Empty/corrupt registry
"""

from __future__ import annotations


class GenerationError(Exception):
    """Error during document generation."""
    pass


class InvalidInputError(GenerationError):
    """Input questions or metadata are not usable."""
    pass


class ThemeUnavailableError(GenerationError):
    """No theme (not even the default) can be resolved."""
    pass


class SerializationError(GenerationError):
    """PDF could not be rendered or serialized."""
    pass
