"""Inline span transducer: bold, italic and links inside a single line.

The scanner makes one left-to-right pass with a single character of lookahead
(to tell `**` from `*`). Its state is an explicit `ScanState` flag set: strong
and emphasis are independent toggles, and at most one link flag is set at a
time. All link handling goes through `_TRANSITIONS`, keyed by
`(link mode, token)`.

Quirks that are kept on purpose:

- Unterminated `**` / `*` spans are left open; nothing is closed at line end.
- The text between `[` and `]` is discarded; the anchor shows its URL.
- An unterminated `[` or `(` drops everything it captured.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterator


class ScanState(enum.Flag):
    NORMAL = 0
    IN_STRONG = enum.auto()
    IN_EMPHASIS = enum.auto()
    IN_LINK_TEXT = enum.auto()
    LINK_TEXT_CLOSED = enum.auto()
    IN_LINK_URL = enum.auto()


LINK_MODES = ScanState.IN_LINK_TEXT | ScanState.LINK_TEXT_CLOSED | ScanState.IN_LINK_URL


class Token(enum.Enum):
    DOUBLE_STAR = "**"
    STAR = "*"
    OPEN_BRACKET = "["
    CLOSE_BRACKET = "]"
    OPEN_PAREN = "("
    CLOSE_PAREN = ")"
    TEXT = "text"


_SINGLE_CHAR_TOKENS = {
    "*": Token.STAR,
    "[": Token.OPEN_BRACKET,
    "]": Token.CLOSE_BRACKET,
    "(": Token.OPEN_PAREN,
    ")": Token.CLOSE_PAREN,
}


def tokenize(line: str) -> Iterator[tuple[Token, str]]:
    """Yield `(token, text)` pairs; `**` wins over `*` at the same position."""

    i = 0
    n = len(line)
    while i < n:
        ch = line[i]
        if ch == "*" and i + 1 < n and line[i + 1] == "*":
            yield Token.DOUBLE_STAR, "**"
            i += 2
            continue
        yield _SINGLE_CHAR_TOKENS.get(ch, Token.TEXT), ch
        i += 1


class InlineScanner:
    """Stateful transducer for one line of text.

    `feed` consumes one token; `finish` returns the markup produced so far.
    Whatever is still captured in a link at that point is dropped.
    """

    def __init__(self) -> None:
        self.state = ScanState.NORMAL
        self._out: list[str] = []
        self._url: list[str] = []

    @property
    def link_mode(self) -> ScanState:
        return self.state & LINK_MODES

    def feed(self, token: Token, text: str) -> None:
        action = _TRANSITIONS.get((self.link_mode, token)) or _DEFAULTS[self.link_mode]
        action(self, token, text)

    def finish(self) -> str:
        return "".join(self._out)

    # -- actions -------------------------------------------------------------

    def _emit(self, token: Token, text: str) -> None:
        self._out.append(text)

    def _toggle_strong(self, token: Token, text: str) -> None:
        self._out.append("</strong>" if self.state & ScanState.IN_STRONG else "<strong>")
        self.state ^= ScanState.IN_STRONG

    def _toggle_emphasis(self, token: Token, text: str) -> None:
        if self.state & ScanState.IN_STRONG:
            # A lone `*` inside a strong span is literal.
            self._out.append(text)
            return
        self._out.append("</em>" if self.state & ScanState.IN_EMPHASIS else "<em>")
        self.state ^= ScanState.IN_EMPHASIS

    def _set_link_mode(self, mode: ScanState) -> None:
        self.state = (self.state & ~LINK_MODES) | mode

    def _open_link_text(self, token: Token, text: str) -> None:
        self._set_link_mode(ScanState.IN_LINK_TEXT)

    def _discard(self, token: Token, text: str) -> None:
        pass

    def _close_link_text(self, token: Token, text: str) -> None:
        self._set_link_mode(ScanState.LINK_TEXT_CLOSED)

    def _open_link_url(self, token: Token, text: str) -> None:
        self._set_link_mode(ScanState.IN_LINK_URL)

    def _abandon_link(self, token: Token, text: str) -> None:
        # `]` not followed by `(`: the link is gone, rescan this token as plain input.
        self._set_link_mode(ScanState.NORMAL)
        self.feed(token, text)

    def _capture_url(self, token: Token, text: str) -> None:
        self._url.append(text)

    def _close_link(self, token: Token, text: str) -> None:
        url = "".join(self._url)
        self._out.append(f'<a href="{url}">{url}</a>')
        self._url.clear()
        self._set_link_mode(ScanState.NORMAL)


_Action = Callable[[InlineScanner, Token, str], None]

_TRANSITIONS: dict[tuple[ScanState, Token], _Action] = {
    (ScanState.NORMAL, Token.DOUBLE_STAR): InlineScanner._toggle_strong,
    (ScanState.NORMAL, Token.STAR): InlineScanner._toggle_emphasis,
    (ScanState.NORMAL, Token.OPEN_BRACKET): InlineScanner._open_link_text,
    (ScanState.IN_LINK_TEXT, Token.CLOSE_BRACKET): InlineScanner._close_link_text,
    (ScanState.LINK_TEXT_CLOSED, Token.OPEN_PAREN): InlineScanner._open_link_url,
    (ScanState.IN_LINK_URL, Token.CLOSE_PAREN): InlineScanner._close_link,
}

_DEFAULTS: dict[ScanState, _Action] = {
    ScanState.NORMAL: InlineScanner._emit,
    ScanState.IN_LINK_TEXT: InlineScanner._discard,
    ScanState.LINK_TEXT_CLOSED: InlineScanner._abandon_link,
    ScanState.IN_LINK_URL: InlineScanner._capture_url,
}


def render_inline(line: str) -> str:
    """Rewrite `**strong**`, `*em*` and `[text](url)` spans in `line` into HTML."""

    scanner = InlineScanner()
    for token, text in tokenize(line):
        scanner.feed(token, text)
    return scanner.finish()
