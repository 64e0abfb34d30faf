"""Keyboard scancode interpretation: modifiers, Caps Lock and keymaps."""

from __future__ import annotations

from typing import Callable, Iterable, Protocol

Keymap = tuple[tuple[int, str], ...]

INVARIANT_KEYMAP: Keymap = (
    (0x01, "\x1b"),
    (0x0E, "\b"),
    (0x0F, "\tQWERTYUIOP"),
    (0x1C, "\r"),
    (0x1E, "ASDFGHJKL"),
    (0x2C, "ZXCVBNM"),
    (0x37, "*"),
    (0x39, " "),
    (0x53, "\x7f"),
)
"""Keys whose character does not depend on Shift (except letter case)."""

UNSHIFTED_KEYMAP: Keymap = (
    (0x02, "1234567890-="),
    (0x1A, "[]"),
    (0x27, ";'`"),
    (0x2B, "\\"),
    (0x33, ",./"),
)

SHIFTED_KEYMAP: Keymap = (
    (0x02, "!@#$%^&*()_+"),
    (0x1A, "{}"),
    (0x27, ':"~'),
    (0x2B, "|"),
    (0x33, "<>?"),
)

_CAPS_LOCK = 0x3A
_PREFIX = 0xE0
_RELEASE_BIT = 0x80
_DELETE = 0x7F
_SHIFT_CODES = frozenset({0x2A, 0x36})
_ALT_CODES = frozenset({0x38, 0xE038})
_CTRL_CODES = frozenset({0x1D, 0xE01D})
_MODIFIER_CODES = _SHIFT_CODES | _ALT_CODES | _CTRL_CODES


class _Sink(Protocol):
    def is_full(self) -> bool: ...

    def putc(self, byte: int) -> None: ...


def map_key(keymap: Keymap, scancode: int) -> int | None:
    """Return the character code KEYMAP gives SCANCODE, or None."""
    for first, chars in keymap:
        if first <= scancode < first + len(chars):
            return ord(chars[scancode - first])
    return None


class Keyboard:
    """Turns scancodes into characters delivered to SINK.

    SINK needs is_full() and putc(); keys arriving while it is full are
    dropped.  Ctrl+Alt+Del calls ON_REBOOT instead of producing a key.
    """

    def __init__(
        self,
        sink: _Sink | None = None,
        on_reboot: Callable[[], None] | None = None,
    ) -> None:
        if sink is None:
            from sectorkit.intq import InterruptQueue

            sink = InterruptQueue()
        self.sink = sink
        self.on_reboot = on_reboot
        self.caps_lock = False
        self.key_count = 0
        self._held: set[int] = set()
        self._prefix = False

    def _any_held(self, codes: frozenset[int]) -> bool:
        return not self._held.isdisjoint(codes)

    def handle_scancode(self, code: int) -> None:
        """Interpret one scancode, with any 0xe0 prefix already combined."""
        shift = self._any_held(_SHIFT_CODES)
        alt = self._any_held(_ALT_CODES)
        ctrl = self._any_held(_CTRL_CODES)

        release = bool(code & _RELEASE_BIT)
        code &= ~_RELEASE_BIT

        if code == _CAPS_LOCK:
            if not release:
                self.caps_lock = not self.caps_lock
            return

        c = map_key(INVARIANT_KEYMAP, code)
        if c is None:
            c = map_key(SHIFTED_KEYMAP if shift else UNSHIFTED_KEYMAP, code)
        if c is None:
            if code in _MODIFIER_CODES:
                if release:
                    self._held.discard(code)
                else:
                    self._held.add(code)
            return

        if release:
            return
        if c == _DELETE and ctrl and alt:
            if self.on_reboot is not None:
                self.on_reboot()
            return

        # Ctrl overrides Shift: Ctrl+A is 0x01 and so on.
        if ctrl and 0x40 <= c < 0x60:
            c -= 0x40
        elif shift == self.caps_lock and ord("A") <= c <= ord("Z"):
            c += ord("a") - ord("A")
        if alt:
            c += 0x80

        if not self.sink.is_full():
            self.key_count += 1
            self.sink.putc(c)

    def feed(self, data: Iterable[int]) -> None:
        """Interpret a stream of raw scancode bytes."""
        for byte in data:
            if self._prefix:
                self._prefix = False
                self.handle_scancode((_PREFIX << 8) | byte)
            elif byte == _PREFIX:
                self._prefix = True
            else:
                self.handle_scancode(byte)

    def stats(self) -> str:
        """Return a line describing how many keys were pressed."""
        return f"Keyboard: {self.key_count} keys pressed"