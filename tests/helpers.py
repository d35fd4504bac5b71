"""Shared fixtures: a markdown renderer that needs no pandoc, and book folders on disk."""

import os
import re
import textwrap

from binderlib.config import BookMetadata

IMAGE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
LINK = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")

PNG = b"\x89PNG\r\n\x1a\n" + b"not really an image"


class FakeRenderer:
    """
    Just enough markdown: paragraphs, # headings, --- rules, indented code,
    images and links. Records every call.
    """

    def __init__(self):
        self.calls = []

    def render(self, markdown, source=None):
        self.calls.append((markdown, source))
        blocks = [b for b in re.split(r"\n\s*\n", markdown) if b.strip()]
        return "\n".join(self._block(b) for b in blocks)

    def _block(self, block):
        lines = block.split("\n")
        if block.strip() in ("---", "***"):
            return "<hr />"
        if all(line.startswith("    ") for line in lines):
            return f"<pre><code>{textwrap.dedent(block)}</code></pre>"
        text = block.strip()
        if text.startswith("# "):
            return f"<h1>{self._inline(text[2:])}</h1>"
        return f"<p>{self._inline(text)}</p>"

    def _inline(self, text):
        text = IMAGE.sub(r'<img src="\2" alt="\1" />', text)
        return LINK.sub(r'<a href="\2">\1</a>', text)


def write(path, text="", binary=False):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb" if binary else "w", **({} if binary else {"encoding": "utf-8"})) as f:
        f.write(text)
    return path


def complete_metadata(**overrides):
    data = {
        "title": "The Binding",
        "author": "Ada Writer",
        "cover": "cover.png",
        "language": "en",
        "identifier": "isbn-123",
    }
    data.update(overrides)
    return BookMetadata(data)
