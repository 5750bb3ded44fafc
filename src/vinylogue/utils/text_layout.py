"""
Text fitting helpers: word wrapping and ellipsis truncation against a
measured pixel width.
"""

from typing import List, Protocol

ELLIPSIS = "…"


class TextMeasurer(Protocol):
    """Anything that can report the rendered width of a string in a font."""

    def measure_width(self, text: str, font: str) -> float:
        ...


def truncate_text(
    measurer: TextMeasurer,
    text: str,
    font: str,
    max_width: float,
    ellipsis: str = ELLIPSIS
) -> str:
    """
    Fit text on one line, dropping trailing characters behind an ellipsis.

    Text that already fits is returned unchanged, which makes the function
    idempotent: a truncated result always fits. When even the ellipsis is
    wider than max_width, the longest fitting prefix is returned bare.
    """
    if measurer.measure_width(text, font) <= max_width:
        return text

    if measurer.measure_width(ellipsis, font) > max_width:
        prefix = text
        while prefix and measurer.measure_width(prefix, font) > max_width:
            prefix = prefix[:-1]
        return prefix

    truncated = text
    while truncated and measurer.measure_width(truncated + ellipsis, font) > max_width:
        truncated = truncated[:-1]
    return truncated + ellipsis


def wrap_text(measurer: TextMeasurer, text: str, font: str, max_width: float) -> List[str]:
    """
    Wrap text word by word into lines narrower than max_width.

    Words are never hyphenated or split across lines. A single word wider
    than the column is truncated with an ellipsis so no line overflows.
    """
    words = text.split()
    if not words:
        return [""]

    lines: List[str] = []
    current = words[0]
    for word in words[1:]:
        trial = current + " " + word
        if measurer.measure_width(trial, font) < max_width:
            current = trial
        else:
            lines.append(current)
            current = word
    lines.append(current)

    return [
        line if measurer.measure_width(line, font) <= max_width
        else truncate_text(measurer, line, font, max_width)
        for line in lines
    ]
