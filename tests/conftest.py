import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src to sys.path so we can import exam_composer
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from exam_composer.core.models import QuestionRecord  # noqa: E402

BACKGROUND_FILES = (
    "themes/classic-light.png",
    "themes/test-02.png",
    "themes/test-03.png",
    "themes/test-04.png",
    "themes/test-05.png",
    "themes/test03-1.png",
)


def make_png(width: int = 400, height: int = 300, color: str = "white") -> bytes:
    """PNG bytes of a solid-color image."""
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=color).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    """Factory for PNG bytes."""
    return make_png


@pytest.fixture
def question_factory():
    """Factory to create questions with real PNG payloads."""
    answers = "ABCDE"

    def _create(
        order: int,
        width: int = 400,
        height: int = 300,
        answer: str = None,
        image_bytes: bytes = None,
    ) -> QuestionRecord:
        return QuestionRecord(
            id=f"q{order + 1}",
            image_bytes=image_bytes if image_bytes is not None else make_png(width, height),
            actual_width=width,
            actual_height=height,
            correct_answer=answer or answers[order % len(answers)],
            order=order,
        )
    return _create


@pytest.fixture
def questions(question_factory):
    """21 questions of 400x300 px in order."""
    return [question_factory(i) for i in range(21)]


@pytest.fixture
def asset_root(tmp_path: Path) -> Path:
    """Directory holding every built-in theme background."""
    root = tmp_path / "public"
    for relative in BACKGROUND_FILES:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGB", (60, 85), color="lightyellow").save(path)
    return root
