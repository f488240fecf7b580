"""
Module: core.text

Purpose:
    Text helpers for drawing with the standard PDF fonts. The built-in
    Type 1 fonts only cover WinAnsi, so Turkish letters without a WinAnsi
    glyph are folded to their closest ASCII letter before drawing.

Key Functions:
    - sanitize_text(): Fold unsupported characters
    - to_roman(): Integer to upper-case roman numeral
"""

from __future__ import annotations

TURKISH_CHAR_MAP = {
    "ı": "i", "İ": "I", "ş": "s", "Ş": "S",
    "ç": "c", "Ç": "C", "ğ": "g", "Ğ": "G",
    "ü": "u", "Ü": "U", "ö": "o", "Ö": "O",
}

_TRANSLATION = str.maketrans(TURKISH_CHAR_MAP)

_ROMAN_NUMERALS = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"),
    (100, "C"), (90, "XC"), (50, "L"), (40, "XL"),
    (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


def sanitize_text(text: str) -> str:
    """
    Fold Turkish characters for standard-font rendering.

    Example:
        >>> sanitize_text("Türkçe Öğretmeni")
        'Turkce Ogretmeni'
    """
    return text.translate(_TRANSLATION)


def to_roman(number: int) -> str:
    """
    Convert a positive integer to a roman numeral.

    Raises:
        ValueError: If number is not positive
    """
    if number <= 0:
        raise ValueError(f"Roman numerals need a positive number: {number}")

    parts = []
    for value, symbol in _ROMAN_NUMERALS:
        count, number = divmod(number, value)
        parts.append(symbol * count)
    return "".join(parts)
