"""
Book folder resolution and chapter discovery.

Everything that needs to find a book folder, gather its markdown files,
or locate per-book working paths imports from here.
"""

import os
import re

from binderlib.matter import find_matter
from binderlib.models import Chapter


SAVE_FILE_NAME = "binder-save.yaml"
TEMP_FOLDER_NAME = "binder-temp"
MATTER_PREFIX = "_binder "


def natural_sort_key(s):
    """Sort strings with embedded numbers naturally (2.md before 10.md)."""
    return [
        int(text) if text.isdigit() else text.lower()
        for text in re.split(r"(\d+)", s)
    ]


def find_book_dir(identifier, project_root=None):
    """
    Resolve a folder argument to an absolute book directory.

    Accepts an absolute path or a path relative to project_root (default:
    the current directory). Returns None if it is not a directory.
    """
    project_root = project_root or os.getcwd()
    for candidate in [identifier, os.path.join(project_root, identifier)]:
        if os.path.isdir(candidate):
            return os.path.abspath(candidate)
    return None


def find_markdown_files(book_dir):
    """
    Recursively collect *.md files, naturally sorted by basename.

    The temp download folder is never scanned.
    """
    files = []
    for root, dirs, names in os.walk(book_dir):
        dirs[:] = [d for d in dirs if d != TEMP_FOLDER_NAME and not d.startswith(".")]
        for name in names:
            if name.lower().endswith(".md"):
                files.append(os.path.join(root, name))
    files.sort(key=lambda path: natural_sort_key(_stem(path)))
    return files


def default_title(path):
    """Chapter title from a file name: leading digits stripped."""
    return re.sub(r"^\d*", "", _stem(path)).strip()


def matter_placement(path):
    """'front' / 'back' for `_binder <Matter>` files, else None."""
    stem = _stem(path)
    if not stem.startswith(MATTER_PREFIX):
        return None
    matter = find_matter(stem[len(MATTER_PREFIX):])
    return matter.placement if matter else None


def default_chapter(path):
    placement = matter_placement(path)
    return Chapter(
        title=default_title(path),
        source=path,
        is_front_matter=placement == "front",
        is_back_matter=placement == "back",
    )


def default_chapters(book_dir):
    """Chapters for every markdown file, before any rearranging."""
    return [default_chapter(path) for path in find_markdown_files(book_dir)]


def relative_source(path, book_dir):
    """Stored form of a chapter path: relative to the book, POSIX separators."""
    return os.path.relpath(path, book_dir).replace(os.sep, "/")


def save_path(book_dir):
    return os.path.join(book_dir, SAVE_FILE_NAME)


def temp_path(book_dir):
    return os.path.join(book_dir, TEMP_FOLDER_NAME)


def _stem(path):
    return os.path.splitext(os.path.basename(path))[0]
