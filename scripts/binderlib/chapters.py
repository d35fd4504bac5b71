"""
Chapter list operations.

Every operation takes a list of Chapter and returns a new list; the input
is never mutated. Order lives in the list, so reordering is just a new list.
"""

import re
from dataclasses import dataclass, replace
from typing import Optional

from binderlib.matter import Matter, find_matter
from binderlib.resolve import MATTER_PREFIX, natural_sort_key


BOOLEAN_FIELDS = ("include", "exclude_from_contents", "is_front_matter", "is_back_matter")


@dataclass(frozen=True)
class ChapterKind:
    """Normal chapter, or a matter page rendered from a template."""

    matter: Optional[Matter] = None

    @property
    def is_matter(self):
        return self.matter is not None


NORMAL = ChapterKind()


def classify(chapter):
    """Resolve a chapter's kind once, from its `_binder <Matter>` title."""
    title = chapter.title.strip()
    if title.startswith(MATTER_PREFIX):
        matter = find_matter(title[len(MATTER_PREFIX):])
        if matter is not None:
            return ChapterKind(matter)
    return NORMAL


def rearrange(chapters):
    """Front matter, then normal chapters, then back matter; stable within each."""
    front = [c for c in chapters if c.is_front_matter]
    back = [c for c in chapters if c.is_back_matter and not c.is_front_matter]
    normal = [c for c in chapters if not c.is_front_matter and not c.is_back_matter]
    return front + normal + back


def exclusive(chapter):
    """Enforce that a chapter is not both front and back matter (front wins)."""
    if chapter.is_front_matter and chapter.is_back_matter:
        return replace(chapter, is_back_matter=False)
    return chapter


# ── Single-chapter edits ───────────────────────────────────────────────


def reorder(chapters, source_index, target_index):
    if source_index == target_index:
        return list(chapters)
    result = list(chapters)
    item = result.pop(source_index)
    result.insert(target_index, item)
    return result


def toggle(chapters, index, prop, value):
    """Set a boolean flag. Turning on front matter clears back matter and vice versa."""
    if prop not in BOOLEAN_FIELDS:
        raise ValueError(f"Unknown chapter flag: {prop}")

    changes = {prop: value}
    if value and prop == "is_front_matter":
        changes["is_back_matter"] = False
    elif value and prop == "is_back_matter":
        changes["is_front_matter"] = False

    return [replace(c, **changes) if i == index else c for i, c in enumerate(chapters)]


def rename(chapters, index, title):
    return [replace(c, title=title) if i == index else c for i, c in enumerate(chapters)]


# ── Bulk edits ─────────────────────────────────────────────────────────


def select_all(chapters):
    return [replace(c, include=True) for c in chapters]


def select_none(chapters):
    return [replace(c, include=False) for c in chapters]


def strip_numbers(chapters):
    """'12 The Storm' → 'The Storm'."""
    return [replace(c, title=re.sub(r"^\d*", "", c.title).strip()) for c in chapters]


def strip_first_word(chapters):
    """'Chapter Twelve' → 'Twelve'."""
    return [replace(c, title=re.sub(r"^\S+", "", c.title).strip()) for c in chapters]


def restore_titles(chapters):
    """Titles back to the file names."""
    return [replace(c, title=c.basename) for c in chapters]


def number_titles(chapters):
    """Title included normal chapters 1, 2, 3, ... leaving matter alone."""
    result = []
    count = 0
    for chapter in chapters:
        if not chapter.include or not chapter.is_numbered:
            result.append(chapter)
            continue
        count += 1
        result.append(replace(chapter, title=str(count)))
    return result


def sort_by_title(chapters):
    return sorted(chapters, key=lambda c: natural_sort_key(c.title))


def reverse(chapters):
    return list(reversed(chapters))


def restore_order(chapters, files):
    """Back to folder order; chapters whose file vanished go last."""
    position = {path: i for i, path in enumerate(files)}
    return sorted(chapters, key=lambda c: position.get(c.source, len(files)))
