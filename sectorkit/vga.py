"""A text-mode screen: a character grid with a cursor and scrolling."""

from __future__ import annotations

from typing import Callable

COLUMNS = 80
"""Number of columns on the standard text display."""

ROWS = 25
"""Number of rows on the standard text display."""

GRAY_ON_BLACK = 0x07
"""Attribute value for gray text on a black background."""

_TAB_STOP = 8


class TextScreen:
    """A grid of characters written through a cursor.

    Control characters are interpreted in the conventional ways:
    newline, form feed (clear), backspace, carriage return, tab and
    bell.  Writing past the last row scrolls the screen up one line.
    """

    def __init__(
        self,
        columns: int = COLUMNS,
        rows: int = ROWS,
        on_beep: Callable[[], None] | None = None,
    ) -> None:
        if columns < 1 or rows < 1:
            raise ValueError("screen must have at least one row and column")
        self.columns = columns
        self.rows = rows
        self.on_beep = on_beep
        self.attribute = GRAY_ON_BLACK
        self._cells: list[list[str]] = [self._blank_row() for _ in range(rows)]
        self._x = 0
        self._y = 0

    def _blank_row(self) -> list[str]:
        return [" "] * self.columns

    def _newline(self) -> None:
        self._x = 0
        self._y += 1
        if self._y >= self.rows:
            self._y = self.rows - 1
            del self._cells[0]
            self._cells.append(self._blank_row())

    def putc(self, ch: str | int) -> None:
        """Write one character, given as a one-character string or a code."""
        if isinstance(ch, int):
            ch = chr(ch & 0xFF)
        elif len(ch) != 1:
            raise ValueError(f"expected a single character, got {ch!r}")

        if ch == "\n":
            self._newline()
        elif ch == "\f":
            self.clear()
        elif ch == "\b":
            if self._x > 0:
                self._x -= 1
        elif ch == "\r":
            self._x = 0
        elif ch == "\t":
            self._x = -(-(self._x + 1) // _TAB_STOP) * _TAB_STOP
            if self._x >= self.columns:
                self._newline()
        elif ch == "\a":
            if self.on_beep is not None:
                self.on_beep()
        else:
            self._cells[self._y][self._x] = ch
            self._x += 1
            if self._x >= self.columns:
                self._newline()

    def write(self, text: str) -> None:
        """Write every character of TEXT."""
        for ch in text:
            self.putc(ch)

    def clear(self) -> None:
        """Blank the screen and move the cursor to the upper left."""
        self._cells = [self._blank_row() for _ in range(self.rows)]
        self._x = 0
        self._y = 0

    def cursor(self) -> tuple[int, int]:
        """Return the cursor position as (column, row)."""
        return self._x, self._y

    @property
    def offset(self) -> int:
        """Linear cursor position, as the display hardware counts it."""
        return self._x + self.columns * self._y

    def text(self) -> str:
        """Return the screen's rows joined by newlines, trailing blanks dropped."""
        return "\n".join("".join(row).rstrip() for row in self._cells)