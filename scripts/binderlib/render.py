"""
Markdown → HTML fragment rendering via pandoc.

The pipeline only needs an object with `render(markdown, source)`; tests
and embedding applications can hand in their own.
"""

import os
import shutil
import subprocess


DEFAULT_FROM = "markdown+smart"


class RenderError(Exception):
    """Raised when the markdown renderer fails."""
    pass


class PandocRenderer:
    """
    Render markdown with pandoc, scoped to the chapter's folder.

    Usage:
        renderer = PandocRenderer()
        html = renderer.render("# Hello", "/book/001 Intro.md")
    """

    def __init__(self, pandoc=None, from_format=DEFAULT_FROM, extra_args=None):
        self.pandoc = pandoc or os.environ.get("BINDER_PANDOC", "pandoc")
        self.from_format = from_format
        self.extra_args = list(extra_args or [])

    def available(self):
        return shutil.which(self.pandoc) is not None

    def command(self):
        cmd = [
            self.pandoc,
            "--from", self.from_format,
            "--to", "html5",
            "--wrap=none",
        ]
        cmd.extend(self.extra_args)
        return cmd

    def render(self, markdown, source=None):
        """Return the HTML fragment for a markdown string."""
        # Relative links and images resolve against the chapter's folder.
        cwd = os.path.dirname(source) if source else None
        if cwd and not os.path.isdir(cwd):
            cwd = None

        try:
            result = subprocess.run(
                self.command(),
                input=markdown,
                capture_output=True,
                text=True,
                encoding="utf-8",
                cwd=cwd,
            )
        except FileNotFoundError:
            raise RenderError(f"{self.pandoc} not found on PATH")

        if result.returncode != 0:
            label = os.path.basename(source) if source else "markdown"
            detail = result.stderr.strip().splitlines()[:5]
            raise RenderError(
                f"pandoc failed on {label} (exit {result.returncode}): {' '.join(detail)}"
            )
        return result.stdout
