"""
Shared data types for the binding pipeline.
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Chapter:
    title: str
    source: str                          # absolute path to the markdown file
    include: bool = True
    exclude_from_contents: bool = False
    is_front_matter: bool = False
    is_back_matter: bool = False

    @property
    def basename(self):
        return os.path.splitext(os.path.basename(self.source))[0]

    @property
    def is_numbered(self):
        return not (self.is_front_matter or self.is_back_matter)


@dataclass
class Section:
    title: str
    html_content: str
    exclude_from_contents: bool = False
    is_front_matter: bool = False
    is_back_matter: bool = False


@dataclass
class Resource:
    name: str
    data: bytes


@dataclass
class PendingImage:
    """An image localized during transform; bytes are read at assembly time."""

    name: str
    path: str


@dataclass
class Book:
    """Everything the packager needs: ordered sections, images, style, metadata."""

    metadata: object
    stylesheet: str
    sections: list = field(default_factory=list)
    resources: list = field(default_factory=list)
    cover: Optional[Resource] = None
