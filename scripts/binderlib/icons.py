"""
Store and social platform icons.

Inline SVG badges keyed by the platform name used in matter templates
(`Link To <Platform>`) and in `%BINDER <PLATFORM> LINK%` chapter tokens.
Sized with plain width/height so the markup survives HTML parsers that
lowercase attribute names. The SVG namespace is explicit so the badges stay
SVG once a page is serialized as XHTML.
"""

from markupsafe import Markup


def _badge(label, color):
    return Markup(
        '<svg xmlns="http://www.w3.org/2000/svg" width="48" height="48"'
        ' role="img" aria-hidden="true" class="binder-icon">'
        f'<circle cx="24" cy="24" r="23" fill="{color}"/>'
        '<text x="24" y="30" font-size="16" font-family="sans-serif" '
        f'font-weight="bold" text-anchor="middle" fill="#ffffff">{label}</text>'
        "</svg>"
    )


STORE_ICONS = {
    "Amazon": _badge("a", "#ff9900"),
    "Apple": _badge("A", "#555555"),
    "Audible": _badge("Au", "#f7991c"),
    "Facebook": _badge("f", "#1877f2"),
    "Patreon": _badge("P", "#ff424d"),
    "Royal Road": _badge("RR", "#b8860b"),
    "Twitter": _badge("X", "#1d9bf0"),
    "Website": _badge("www", "#2e7d32"),
}


def icon_for(platform):
    """Icon markup for a platform name, case-insensitive; None if unknown."""
    wanted = platform.strip().lower()
    for name, icon in STORE_ICONS.items():
        if name.lower() == wanted:
            return icon
    return None
