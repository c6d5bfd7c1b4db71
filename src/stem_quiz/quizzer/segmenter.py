"""Split display strings into literal text and inline-math segments."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator

DEFAULT_DELIMITER = "$"


class SegmentKind(Enum):
    LITERAL = "literal"
    MATH = "math"


@dataclass(frozen=True)
class Segment:
    kind: SegmentKind
    content: str


class SegmentedText:
    """Lazy view over the segments of ``text``.

    Every iteration rescans the source, so the same object can be walked any
    number of times.
    """

    def __init__(self, text: str, delimiter: str = DEFAULT_DELIMITER):
        if len(delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        self.text = text
        self.delimiter = delimiter
        escaped = re.escape(delimiter)
        self._pattern = re.compile(f"{escaped}([^{escaped}]*){escaped}")

    def __iter__(self) -> Iterator[Segment]:
        cursor = 0
        for match in self._pattern.finditer(self.text):
            if match.start() > cursor:
                yield Segment(
                    SegmentKind.LITERAL, self.text[cursor : match.start()]
                )
            yield Segment(SegmentKind.MATH, match.group(1))
            cursor = match.end()
        if cursor < len(self.text):
            yield Segment(SegmentKind.LITERAL, self.text[cursor:])

    def __repr__(self) -> str:
        return f"SegmentedText({self.text!r}, delimiter={self.delimiter!r})"

    def has_math(self) -> bool:
        return any(seg.kind is SegmentKind.MATH for seg in self)


def segment(text: str, delimiter: str = DEFAULT_DELIMITER) -> SegmentedText:
    """Partition ``text`` on paired ``delimiter`` characters.

    Pairs are matched left to right without nesting; an unpaired delimiter
    stays in the surrounding literal text.
    """

    return SegmentedText(text, delimiter)


def join_segments(
    segments: Iterable[Segment], delimiter: str = DEFAULT_DELIMITER
) -> str:
    """Rebuild the source string, re-wrapping math segments."""

    parts = []
    for seg in segments:
        if seg.kind is SegmentKind.MATH:
            parts.append(f"{delimiter}{seg.content}{delimiter}")
        else:
            parts.append(seg.content)
    return "".join(parts)
