"""Content nodes -> HTML fragment.

Only a closed set of tags is ever produced: pre, code, h2, h3, ul, li, p, br,
a, strong, em. Node text is already escaped by the parser and is inserted
verbatim; no other input reaches the markup.
"""

from __future__ import annotations

from .inline_formatter import escape_html
from .nodes import (
    Bold,
    BulletList,
    Code,
    CodeBlock,
    ContentNode,
    Heading,
    InlineSpan,
    Italic,
    LineBreak,
    Link,
    Paragraph,
    PlainText,
)

_LINK_ATTRS = 'target="_blank" rel="noopener noreferrer"'


def render_html(nodes: list[ContentNode]) -> str:
    """Render nodes as an HTML fragment. No nodes renders nothing."""
    return "\n".join(_html_for_node(n) for n in nodes)


def render_inline_html(spans: tuple[InlineSpan, ...]) -> str:
    return "".join(_html_for_span(s) for s in spans)


def render_page(nodes: list[ContentNode], title: str = "Blog post") -> str:
    """Standalone HTML document around the rendered fragment."""
    body = render_html(nodes)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{escape_html(title)}</title>\n"
        "</head>\n"
        "<body>\n"
        f"<article>\n{body}\n</article>\n"
        "</body>\n"
        "</html>\n"
    )


def _html_for_node(node: ContentNode) -> str:
    if isinstance(node, CodeBlock):
        return f"<pre><code>{node.text}</code></pre>"
    if isinstance(node, Heading):
        level = 2 if node.level < 3 else 3
        return f"<h{level}>{render_inline_html(node.children)}</h{level}>"
    if isinstance(node, BulletList):
        items = "".join(f"<li>{render_inline_html(it)}</li>" for it in node.items)
        return f"<ul>{items}</ul>"
    if isinstance(node, Paragraph):
        return f"<p>{render_inline_html(node.children)}</p>"
    if isinstance(node, LineBreak):
        return "<br>"
    return ""


def _html_for_span(span: InlineSpan) -> str:
    if isinstance(span, PlainText):
        return span.text
    if isinstance(span, Bold):
        return f"<strong>{render_inline_html(span.children)}</strong>"
    if isinstance(span, Italic):
        return f"<em>{render_inline_html(span.children)}</em>"
    if isinstance(span, Code):
        return f"<code>{span.text}</code>"
    if isinstance(span, Link):
        return f'<a href="{span.href}" {_LINK_ATTRS}>{render_inline_html(span.children)}</a>'
    return ""
