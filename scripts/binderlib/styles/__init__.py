"""
Stylesheet composition.

    stylesheet, selection = select_theme("mono")
    selection.select("_hr5")
    css = compose(stylesheet, selection.ids())
"""

from binderlib.styles.base import (
    PREVIEW_SCHEMES,
    STRUCTURAL_STYLESHEET,
    page_stylesheet,
    preview_scheme_stylesheet,
)
from binderlib.styles.components import (
    CATEGORIES,
    COMPONENTS,
    ComponentSelection,
    components_in,
)
from binderlib.styles.themes import DEFAULT_THEME, THEMES, Theme, get_theme


def compose(theme_stylesheet, active_component_ids):
    """
    Structural base + theme stylesheet + active components.

    Components are appended in category order whatever order they were
    given in; unknown identifiers are ignored.
    """
    selection = ComponentSelection(active_component_ids)
    return STRUCTURAL_STYLESHEET + theme_stylesheet + selection.css()


def select_theme(identifier):
    """(stylesheet, selection) for a theme; the selection is its defaults."""
    theme = get_theme(identifier)
    return theme.stylesheet, theme.selection()


def selection_for(metadata):
    """The book's active components; theme defaults when none are stored."""
    components = metadata.get("components")
    if components is None:
        return get_theme(metadata.get("theme")).selection()
    return ComponentSelection(components)


def book_stylesheet(metadata):
    """Final stylesheet for a book's stored theme and components."""
    theme = get_theme(metadata.get("theme"))
    return compose(theme.stylesheet, selection_for(metadata).ids())


__all__ = [
    "CATEGORIES",
    "COMPONENTS",
    "ComponentSelection",
    "DEFAULT_THEME",
    "PREVIEW_SCHEMES",
    "STRUCTURAL_STYLESHEET",
    "THEMES",
    "Theme",
    "book_stylesheet",
    "components_in",
    "compose",
    "get_theme",
    "page_stylesheet",
    "preview_scheme_stylesheet",
    "select_theme",
    "selection_for",
]
