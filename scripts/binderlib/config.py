"""
Book metadata: defaults, validation, and the packaged view of binder-save.yaml.
"""

import uuid


# Required for a real (non-preview) build, in the order they are checked.
REQUIRED_FIELDS = [
    ("title", "Title is required."),
    ("cover", "Cover image is required."),
    ("author", "Author name is required."),
    ("language", "Language is required."),
]

# Defaults applied if missing
DEFAULTS = {
    "title": "",
    "cover": "",
    "author": "",
    "identifier": "",
    "language": "en",

    "description": "",
    "series": "",
    "sequence": -1,
    "file_as": "",
    "genre": "",
    "tags": "",
    "copyright": "",
    "publisher": "",
    "published": "",
    "transcription_source": "",

    "show_contents": True,
    "toc_title": "",
    "start_reading": True,
    "theme": "base",
    "components": None,     # None → theme defaults
    "pdf": {},
}

# Optional fields and the sentinel meaning "unset". Fields equal to their
# sentinel never reach the packaged metadata.
OPTIONAL_FIELDS = {
    "description": "",
    "series": "",
    "sequence": -1,
    "file_as": "",
    "genre": "",
    "tags": "",
    "copyright": "",
    "publisher": "",
    "published": "",
    "transcription_source": "",
}

# Defaults within the pdf sub-config (page box for the paginator)
PDF_DEFAULTS = {
    "width": "5in",
    "height": "8in",
    "inside_margin": "0.875in",
    "outside_margin": "0.25in",
    "vertical_margin": "0.5in",
    "font_size": "12px",
    "font_family": "Bookerly, serif",
    "line_height": "22px",
    "engine": "weasyprint",
}

PREVIEW_PLACEHOLDERS = {
    "title": "Placeholder Title",
    "author": "Placeholder Author",
    "identifier": "placeholder-id",
    "language": "en",
    "toc_title": "Table of Contents",
}


class ValidationError(Exception):
    """Raised when the book cannot be built as configured."""
    pass


class BookMetadata:
    """
    Book-level metadata with defaults applied.

    Usage:
        metadata = BookMetadata({"title": "My Book", "author": "Me"})
        metadata.title            # "My Book"
        metadata.pdf["width"]     # "5in"
        metadata.get("series")    # "" if not set
    """

    def __init__(self, data=None):
        data = dict(data or {})
        for key, default in DEFAULTS.items():
            if isinstance(default, (list, dict)):
                default = type(default)(default)
            data.setdefault(key, default)
        if not isinstance(data["pdf"], dict):
            data["pdf"] = {}
        for key, default in PDF_DEFAULTS.items():
            data["pdf"].setdefault(key, default)
        self._data = data

    # ── Attribute access ───────────────────────────────────

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(f"BookMetadata has no field '{name}'")

    def get(self, key, default=None):
        return self._data.get(key, default)

    def __getitem__(self, key):
        return self._data[key]

    def __contains__(self, key):
        return key in self._data

    def set(self, key, value):
        self._data[key] = value

    def to_dict(self):
        return dict(self._data)

    # ── Validation ─────────────────────────────────────────

    def missing_requirement(self):
        """Message for the first unmet requirement, or None."""
        for key, message in REQUIRED_FIELDS:
            if not self.get(key):
                return message
        return None

    def validate(self):
        message = self.missing_requirement()
        if message:
            raise ValidationError(message)

    # ── Packaging view ─────────────────────────────────────

    def book_id(self):
        """The ISBN/identifier, or a fresh UUID when blank."""
        return self.identifier or str(uuid.uuid4())

    def packaged_fields(self):
        """Optional fields that are actually set."""
        fields = {}
        for key, unset in OPTIONAL_FIELDS.items():
            value = self.get(key)
            if value is None or value == unset:
                continue
            fields[key] = value
        return fields

    def placeholder(self):
        """A copy with blank required fields filled in for previews."""
        data = self.to_dict()
        for key, value in PREVIEW_PLACEHOLDERS.items():
            if not data.get(key):
                data[key] = value
        return BookMetadata(data)

    def summary(self):
        """Print a short metadata summary."""
        print(f"\n  Book:   {self.title or '(untitled)'}")
        print(f"  Author: {self.author or '(unknown)'}")
        print(f"  Theme:  {self.theme}")
        if self.series:
            print(f"  Series: {self.series}")
