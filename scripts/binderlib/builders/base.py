"""
Base builder class for all output formats.

Subclasses implement `build()` and set `format_name` / `extension`.
Shared logic (assembly, logging, external tools, output naming) lives here.
"""

import os
import re
import shutil
import subprocess
from abc import ABC, abstractmethod

from binderlib.assemble import ChapterError, assemble
from binderlib.config import ValidationError
from binderlib.images import ImageResolver
from binderlib.render import PandocRenderer, RenderError
from binderlib.resolve import temp_path
from binderlib.styles import book_stylesheet


def safe_filename(title):
    """A file name for a book title: path separators and reserved characters removed."""
    name = re.sub(r'[\\/:*?"<>|]', "_", title or "").strip().strip(".")
    return name or "book"


class BaseBuilder(ABC):
    """
    Abstract base for format builders.

    Subclasses must define:
        format_name:  str   — human-readable name ("EPUB", "PDF")
        extension:    str   — output file extension (".epub", ".pdf")
        build():      method — the actual build logic
    """

    format_name = None  # Override in subclass
    extension = None    # Override in subclass

    def __init__(self, metadata, chapters, book_dir, output_dir,
                 vault_dir=None, renderer=None, verbose=False, **kwargs):
        self.metadata = metadata
        self.chapters = chapters
        self.book_dir = book_dir
        self.output_dir = output_dir
        self.vault_dir = vault_dir or book_dir
        self.renderer = renderer or PandocRenderer()
        self.verbose = verbose
        self.kwargs = kwargs
        self.resolver = ImageResolver(self.vault_dir, temp_path(book_dir))

    # ── Output path ────────────────────────────────────────

    @property
    def output_file(self):
        return os.path.join(self.output_dir, f"{safe_filename(self.metadata.title)}{self.extension}")

    # ── Logging ────────────────────────────────────────────

    def log(self, msg):
        if self.verbose:
            print(msg)

    def header(self):
        print(f"\n{'─' * 60}")
        print(f"  Building {self.format_name}: {self.metadata.title or '(untitled)'}")
        print(f"{'─' * 60}")

    # ── Assembly ───────────────────────────────────────────

    def assemble_book(self):
        """
        Validate and assemble the book.

        Returns the Book, or None after printing why it could not be built.
        """
        try:
            book = assemble(
                self.chapters,
                self.metadata,
                book_stylesheet(self.metadata),
                self.renderer,
                self.resolver,
            )
        except ValidationError as e:
            print(f"  ✗ {e}")
            return None
        except ChapterError as e:
            print(f"  ✗ {e}")
            return None
        except RenderError as e:
            print(f"  ✗ Rendering failed: {e}")
            return None

        self.log(f"  Sections:  {len(book.sections)}")
        self.log(f"  Resources: {len(book.resources)}")
        return book

    # ── External tools ─────────────────────────────────────

    def exec_cmd(self, cmd, label="Command"):
        """Execute a command, handle errors consistently."""
        try:
            result = subprocess.run(
                cmd,
                capture_output=not self.verbose,
                text=True,
            )
            if result.returncode != 0:
                print(f"  ✗ {label} failed (exit {result.returncode})")
                if result.stderr:
                    for line in result.stderr.strip().splitlines()[:20]:
                        print(f"    {line}")
                return False
            return True
        except FileNotFoundError:
            print(f"  ✗ {cmd[0]} not found")
            return False

    def check_tool(self, name):
        """Check that a required external tool is on PATH."""
        if not shutil.which(name):
            print(f"  ✗ {name} not found on PATH")
            return False
        return True

    # ── Abstract interface ─────────────────────────────────

    @abstractmethod
    def build(self):
        """
        Execute the build. Returns True on success, False on failure.
        """
        ...
