"""
Saved binder state: binder-save.yaml in the book folder.

    metadata:
      title: My Book
      ...
    chapters:
      - title: Intro
        file: 001 Intro.md
        include: true
        exclude_from_contents: false
        is_front_matter: false
        is_back_matter: false

If the folder's markdown files no longer match the stored list, stored
fields are merged onto the freshly scanned files by path.
"""

import os

import yaml

from binderlib.chapters import exclusive, rearrange
from binderlib.config import BookMetadata
from binderlib.resolve import (
    default_chapter,
    find_markdown_files,
    relative_source,
    save_path,
)


FLAGS = ("include", "exclude_from_contents", "is_front_matter", "is_back_matter")


def default_state(book_dir, files=None):
    """Folder-scan defaults: metadata titled after the folder, all files included."""
    files = find_markdown_files(book_dir) if files is None else files
    metadata = BookMetadata({"title": os.path.basename(os.path.normpath(book_dir))})
    chapters = [default_chapter(path) for path in files]
    return metadata, rearrange(chapters)


def save_state(book_dir, metadata, chapters):
    """Write metadata and the chapter list. Returns the save file path."""
    data = {
        "metadata": metadata.to_dict(),
        "chapters": [
            {
                "title": chapter.title,
                "file": relative_source(chapter.source, book_dir),
                "include": chapter.include,
                "exclude_from_contents": chapter.exclude_from_contents,
                "is_front_matter": chapter.is_front_matter,
                "is_back_matter": chapter.is_back_matter,
            }
            for chapter in chapters
        ],
    }

    path = save_path(book_dir)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    return path


def load_state(book_dir):
    """
    Read binder-save.yaml, falling back to folder-scan defaults.

    Returns (BookMetadata, chapters) with chapters rearranged.
    """
    files = find_markdown_files(book_dir)
    path = save_path(book_dir)
    if not os.path.exists(path):
        return default_state(book_dir, files)

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        print(f"  Warning: Error reading or parsing {os.path.basename(path)}: {e}")
        return default_state(book_dir, files)

    if not isinstance(data, dict):
        print(f"  Warning: {os.path.basename(path)} is not a YAML mapping, using defaults")
        return default_state(book_dir, files)

    metadata_data = data.get("metadata")
    if not isinstance(metadata_data, dict):
        metadata_data = {"title": os.path.basename(os.path.normpath(book_dir))}
    metadata = BookMetadata(metadata_data)

    stored = [
        entry for entry in (data.get("chapters") or [])
        if isinstance(entry, dict) and entry.get("file")
    ]
    chapters = _restore_chapters(book_dir, files, stored)
    return metadata, rearrange([exclusive(c) for c in chapters])


def _restore_chapters(book_dir, files, stored):
    by_relative = {relative_source(path, book_dir): path for path in files}
    stored_files = [entry["file"] for entry in stored]

    if len(stored_files) == len(files) and set(stored_files) == set(by_relative):
        # Chapters are intact: keep the stored order
        return [_from_entry(entry, by_relative[entry["file"]]) for entry in stored]

    by_file = {entry["file"]: entry for entry in stored}
    chapters = []
    for relative, path in by_relative.items():
        entry = by_file.get(relative)
        chapters.append(_from_entry(entry, path) if entry else default_chapter(path))
    return chapters


def _from_entry(entry, path):
    chapter = default_chapter(path)
    title = entry.get("title")
    if title is not None:
        chapter.title = str(title)
    for key in FLAGS:
        # Absent keys keep the folder-scan default; a stored False stays False.
        value = entry.get(key)
        if value is not None:
            setattr(chapter, key, bool(value))
    return chapter
