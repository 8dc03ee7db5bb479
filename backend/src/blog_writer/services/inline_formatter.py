"""Inline markdown formatting: escape once, then tokenize into safe spans.

Rules run in a fixed precedence order: link, bold, underscore italic,
asterisk italic, inline code. Each rule sees the output of the earlier ones:
a match is swapped for a ``<n>`` placeholder that later rules may wrap. The
escape pre-pass guarantees the text holds no raw ``<``, so placeholders can
never collide with input. The inner text of a match is formatted with the
rules that come after it, which yields the same nesting as applying the
rules one after another to the whole line.
"""

from __future__ import annotations

import html
import re
from typing import Callable

from .nodes import Bold, Code, InlineSpan, Italic, Link, PlainText

_LINK_RE = re.compile(r"\[([^\]]+)\]\((https?://[^\s)]+)\)")
_BOLD_RE = re.compile(r"\*\*(.*?)\*\*")
_UNDERSCORE_ITALIC_RE = re.compile(r"_([^_]+)_")
# Opening * must not belong to a ** pair or a "* " list marker.
_STAR_ITALIC_RE = re.compile(r"(?<!\*)\*([^\s*][^*]*?)\*(?!\*)")
_CODE_RE = re.compile(r"`([^`]+)`")
_PLACEHOLDER_RE = re.compile(r"<(\d+)>")


def escape_html(text: str) -> str:
    """Escape ``&`` (first), ``<`` and ``>``. Quotes are left alone."""
    return html.escape(text, quote=False)


def format_inline(line: str) -> tuple[InlineSpan, ...]:
    """Escape a raw line and return its inline spans."""
    if not line:
        return ()
    tokens = _Tokens()
    return tokens.children(_format(escape_html(line), _RULES, tokens))


class _Tokens:
    """Spans stashed behind placeholders, with the escaped text each replaced."""

    def __init__(self) -> None:
        self._spans: list[InlineSpan] = []
        self._sources: list[str] = []

    def stash(self, span: InlineSpan, source: str) -> str:
        self._spans.append(span)
        self._sources.append(source)
        return f"<{len(self._spans) - 1}>"

    def children(self, text: str) -> tuple[InlineSpan, ...]:
        out: list[InlineSpan] = []
        pos = 0
        for m in _PLACEHOLDER_RE.finditer(text):
            if m.start() > pos:
                out.append(PlainText(text[pos : m.start()]))
            out.append(self._spans[int(m.group(1))])
            pos = m.end()
        if pos < len(text):
            out.append(PlainText(text[pos:]))
        return tuple(out)

    def source(self, text: str) -> str:
        """Undo placeholders, giving back the escaped text they replaced."""
        return _PLACEHOLDER_RE.sub(lambda m: self.source(self._sources[int(m.group(1))]), text)


_Rule = tuple[re.Pattern[str], Callable[..., InlineSpan]]


def _format(text: str, rules: list[_Rule], tokens: _Tokens) -> str:
    for i, (pattern, build) in enumerate(rules):
        rest = rules[i + 1 :]
        text = pattern.sub(lambda m: tokens.stash(build(m, rest, tokens), m.group(0)), text)
    return text


def _safe_href(url: str) -> str:
    # url is already &<>-escaped; quotes must not end the attribute value.
    return url.replace('"', "&quot;").replace("'", "&#x27;")


def _build_link(m: re.Match[str], rest: list[_Rule], tokens: _Tokens) -> InlineSpan:
    label = tokens.children(_format(m.group(1), rest, tokens))
    return Link(href=_safe_href(m.group(2)), children=label)


def _build_bold(m: re.Match[str], rest: list[_Rule], tokens: _Tokens) -> InlineSpan:
    return Bold(tokens.children(_format(m.group(1), rest, tokens)))


def _build_italic(m: re.Match[str], rest: list[_Rule], tokens: _Tokens) -> InlineSpan:
    return Italic(tokens.children(_format(m.group(1), rest, tokens)))


def _build_code(m: re.Match[str], rest: list[_Rule], tokens: _Tokens) -> InlineSpan:
    return Code(tokens.source(m.group(1)))


_RULES: list[_Rule] = [
    (_LINK_RE, _build_link),
    (_BOLD_RE, _build_bold),
    (_UNDERSCORE_ITALIC_RE, _build_italic),
    (_STAR_ITALIC_RE, _build_italic),
    (_CODE_RE, _build_code),
]
