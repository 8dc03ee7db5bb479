"""Generate a blog post from the command line and write it as HTML.

Usage:
  python -m blog_writer.scripts.generate_post "The future of renewable energy" -o post.html

Env:
  OPENAI_API_KEY
  LLM_MODEL (optional)
"""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from ..services.html_renderer import render_page
from ..services.shell import ErrorState, InteractionShell, ResultState


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a blog post with the LLM")
    parser.add_argument("topic", help="topic or prompt for the post")
    parser.add_argument("-o", "--output", type=Path, help="write HTML here (default: stdout)")
    parser.add_argument("--markdown", action="store_true", help="write the raw text instead of HTML")
    args = parser.parse_args(argv)

    if not args.topic.strip():
        raise SystemExit("Topic must not be empty")

    shell = InteractionShell()
    asyncio.run(shell.submit(args.topic))
    state = shell.state
    if isinstance(state, ErrorState):
        raise SystemExit(f"An Error Occurred: {state.message}")
    if not isinstance(state, ResultState):
        raise SystemExit(f"Unexpected state: {state.kind}")

    out = state.content if args.markdown else render_page(list(state.nodes), title=args.topic)
    if args.output:
        args.output.write_text(out, encoding="utf-8")
        print("written:", args.output)
    else:
        print(out)


if __name__ == "__main__":
    main()
