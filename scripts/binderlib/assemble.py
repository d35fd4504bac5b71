"""
Book assembly: validated chapter list → ordered sections and resources.

    book = assemble(chapters, metadata, stylesheet, renderer, resolver)
    EpubPackager().write(book, "out.epub")
"""

import os

from binderlib.chapters import classify, rearrange
from binderlib.config import ValidationError
from binderlib.images import resource_name
from binderlib.models import Book, PendingImage, Resource, Section
from binderlib.transform import transform_chapter


class ChapterError(Exception):
    """Raised when a chapter cannot be assembled."""
    pass


def included(chapters):
    return [c for c in chapters if c.include]


def validate(chapters, metadata):
    """Raise ValidationError with the first failing requirement."""
    metadata.validate()
    if not included(chapters):
        raise ValidationError("No chapters selected.")


def assemble(chapters, metadata, stylesheet, renderer, resolver):
    """Validate, then build the Book for a real export."""
    validate(chapters, metadata)
    cover = load_cover(metadata.cover, resolver)
    if cover is None:
        raise ValidationError(f"Cover image could not be read: {metadata.cover}")
    book = _build(chapters, metadata, stylesheet, renderer, resolver)
    book.cover = cover
    return book


def preview(chapters, metadata, stylesheet, renderer, resolver):
    """Same pipeline with placeholder metadata and no validation."""
    book = _build(chapters, metadata.placeholder(), stylesheet, renderer, resolver)
    if metadata.cover:
        book.cover = load_cover(metadata.cover, resolver)
    return book


def _build(chapters, metadata, stylesheet, renderer, resolver):
    ordered = rearrange(included(chapters))

    sections = []
    pending = []
    number = 1
    for chapter in ordered:
        if not chapter.title.strip():
            raise ChapterError(
                f"Chapter title is required for file: {os.path.basename(chapter.source)}"
            )

        markdown = read_chapter(chapter.source)
        result = transform_chapter(
            chapter, markdown, number, renderer, resolver,
            kind=classify(chapter), language=metadata.language,
        )
        if result.numbered:
            number += 1

        sections.append(Section(
            title=result.title or chapter.title,
            html_content=result.html,
            exclude_from_contents=chapter.exclude_from_contents,
            is_front_matter=chapter.is_front_matter,
            is_back_matter=chapter.is_back_matter,
        ))
        pending.extend(result.images)

    return Book(
        metadata=metadata,
        stylesheet=stylesheet,
        sections=sections,
        resources=load_resources(pending),
    )


def read_chapter(path):
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ChapterError(f"Cannot read chapter {os.path.basename(path)}: {e}")


def load_resources(pending):
    """Read each distinct image once; unreadable files are skipped."""
    resources = []
    seen = set()
    for image in pending:
        if image.name in seen:
            continue
        try:
            with open(image.path, "rb") as f:
                data = f.read()
        except OSError as e:
            print(f"  Warning: Could not read image {image.path}: {e}")
            continue
        seen.add(image.name)
        resources.append(Resource(name=image.name, data=data))
    return resources


def load_cover(cover, resolver):
    """Resolve and read the cover image; None if it cannot be found or read."""
    if not cover:
        return None
    path = resolver.resolve(cover)
    if path is None:
        return None
    resources = load_resources([PendingImage(name=resource_name(path), path=path)])
    return resources[0] if resources else None
