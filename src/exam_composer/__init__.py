"""Top-level package for the themed exam document composer.

Provides subpackages:
- exam_composer.themes – theme registry and background asset cache
- exam_composer.layout – page packing of question images
- exam_composer.output – page, watermark and answer key rendering
- exam_composer.controller – document assembly entry point
"""

from .config import ComposerConfig, GenerationOptions, WatermarkSpec, WatermarkKind
from .controller import DocumentAssembler, GenerationResult, generate
from .core.models import QuestionRecord, RunMetadata
from .errors import (
    GenerationError,
    InvalidInputError,
    SerializationError,
    ThemeUnavailableError,
)


def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("exam-composer")
    except Exception:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = [
    "__version__",
    "ComposerConfig",
    "GenerationOptions",
    "WatermarkSpec",
    "WatermarkKind",
    "DocumentAssembler",
    "GenerationResult",
    "generate",
    "QuestionRecord",
    "RunMetadata",
    "GenerationError",
    "InvalidInputError",
    "SerializationError",
    "ThemeUnavailableError",
]
