"""Render-ready content nodes produced by the markdown renderer.

Every string held by a node is already HTML-escaped (``&``, ``<``, ``>``).
Presentation layers insert them as-is and must not escape them again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Union


@dataclass(frozen=True)
class PlainText:
    text: str

    type: ClassVar[str] = "text"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class Bold:
    children: tuple[InlineSpan, ...]

    type: ClassVar[str] = "bold"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "children": [c.to_dict() for c in self.children]}


@dataclass(frozen=True)
class Italic:
    children: tuple[InlineSpan, ...]

    type: ClassVar[str] = "italic"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "children": [c.to_dict() for c in self.children]}


@dataclass(frozen=True)
class Code:
    text: str

    type: ClassVar[str] = "code"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class Link:
    """Hyperlink. ``href`` always starts with http:// or https://."""

    href: str
    children: tuple[InlineSpan, ...]

    type: ClassVar[str] = "link"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "href": self.href,
            "children": [c.to_dict() for c in self.children],
        }


InlineSpan = Union[PlainText, Bold, Italic, Code, Link]


@dataclass(frozen=True)
class CodeBlock:
    text: str

    type: ClassVar[str] = "code_block"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "text": self.text}


@dataclass(frozen=True)
class Heading:
    level: int  # 2 | 3
    children: tuple[InlineSpan, ...]

    type: ClassVar[str] = "heading"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "level": self.level,
            "children": [c.to_dict() for c in self.children],
        }


@dataclass(frozen=True)
class BulletList:
    items: tuple[tuple[InlineSpan, ...], ...]

    type: ClassVar[str] = "bullet_list"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "items": [[c.to_dict() for c in item] for item in self.items],
        }


@dataclass(frozen=True)
class Paragraph:
    children: tuple[InlineSpan, ...]

    type: ClassVar[str] = "paragraph"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "children": [c.to_dict() for c in self.children]}


@dataclass(frozen=True)
class LineBreak:
    type: ClassVar[str] = "line_break"

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type}


ContentNode = Union[CodeBlock, Heading, BulletList, Paragraph, LineBreak]


def nodes_to_dicts(nodes: list[ContentNode]) -> list[dict[str, Any]]:
    """JSON-ready form of a node sequence."""
    return [n.to_dict() for n in nodes]
