from __future__ import annotations

from bisect import bisect_right

from .models import Position, Range


class DocumentPositionError(IndexError):
    """Raised when a line number falls outside the document."""


class TextDocument:
    """Line-indexed view over a target document's text.

    Lines are split on ``\\n``; a trailing ``\\r`` is not part of the line text.
    Characters are Python code points.
    """

    def __init__(self, text: str):
        self.text = text
        self._line_starts = [0]
        offset = text.find("\n")
        while offset != -1:
            self._line_starts.append(offset + 1)
            offset = text.find("\n", offset + 1)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def _check_line(self, line: int) -> None:
        if line < 0 or line >= self.line_count:
            raise DocumentPositionError(f"Line {line} out of range (0..{self.line_count - 1})")

    def line_at(self, line: int) -> str:
        self._check_line(line)
        start = self._line_starts[line]
        if line + 1 < self.line_count:
            end = self._line_starts[line + 1] - 1
        else:
            end = len(self.text)
        if end > start and self.text[end - 1] == "\r":
            end -= 1
        return self.text[start:end]

    def offset_at(self, line: int, character: int) -> int:
        """Convert a position to an offset, clamping the character to the line."""
        self._check_line(line)
        character = max(0, min(character, len(self.line_at(line))))
        return self._line_starts[line] + character

    def position_at(self, offset: int) -> Position:
        offset = max(0, min(offset, len(self.text)))
        line = bisect_right(self._line_starts, offset) - 1
        return Position(line=line, character=offset - self._line_starts[line])

    def range_of(self, start_offset: int, end_offset: int) -> Range:
        return Range(start=self.position_at(start_offset), end=self.position_at(end_offset))
