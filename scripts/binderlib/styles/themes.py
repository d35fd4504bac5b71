"""
Premade themes: a base stylesheet plus one default component per category.
"""

from dataclasses import dataclass, field

from binderlib.styles.components import ComponentSelection


@dataclass(frozen=True)
class Theme:
    identifier: str
    name: str
    stylesheet: str
    defaults: tuple = field(default_factory=tuple)

    def selection(self):
        return ComponentSelection(self.defaults)


BASE_THEME = """
/* Base theme */
body {
    font-family: "Amazon Ember", sans-serif;
}

.chapter-number {
    text-align: center;
    margin-top: 1rem;
    margin-bottom: 0;
    font-size: 4rem;
    text-transform: uppercase;
}

.chapter-title {
    text-align: center;
    font-size: 1.5rem;
    margin-top: 0;
    margin-bottom: 3rem;
}

.chapter-word {
    display: none;
}

.chapter-number-text {
    display: none;
}
"""

MONO_THEME = """
/* Mono theme */
body {
    font-family: "Courier", monospace;
}

.chapter-number {
    text-align: center;
    margin-top: 1rem;
    margin-bottom: 0;
    font-size: 4rem;
    text-transform: uppercase;
}

.chapter-title {
    text-align: center;
    font-size: 2.4rem;
    margin-top: 0;
    margin-bottom: 3rem;
}

.chapter-word {
    font-size: 1.9rem;
}

.chapter-number-numeric {
    display: none;
}

.chapter-number-text {
    font-size: 1.9rem;
}

.chapter-title-divider {
    border-top: 3px solid #000;
    margin: 1rem 20%;
}
"""

URBAN_THEME = """
/* Urban theme */
.chapter-word {
    text-transform: uppercase;
    font-size: 130%;
}

.chapter-number-numeric {
    font-size: 130%;
}

.chapter-number-text {
    display: none;
}

.chapter-number {
    margin-top: 3rem;
    margin-bottom: 0;
    font-size: 1.5rem;
}

.chapter-title {
    text-transform: uppercase;
    font-size: 180%;
    margin-bottom: 1rem;
    margin-top: 0.3rem;
    border-bottom: 1px solid;
    padding-bottom: 3rem;
}
"""

THEMES = {
    theme.identifier: theme
    for theme in [
        Theme("base", "Base", BASE_THEME,
              ("_dropcap1", "_hr1", "_indent1", "_tocLeft", "_tocFmHide", "_tocBmShow")),
        Theme("mono", "Mono", MONO_THEME,
              ("_dropcap2", "_hr3", "_indent1", "_tocCenter", "_tocFmHide", "_tocBmShow")),
        Theme("urban", "Urban", URBAN_THEME,
              ("_dropcap3", "_hr2", "_indent3", "_tocLeft", "_tocFmHide", "_tocBmHide")),
    ]
}

DEFAULT_THEME = "base"


def get_theme(identifier):
    """Look up a theme; unknown identifiers fall back to the base theme."""
    return THEMES.get(identifier) or THEMES[DEFAULT_THEME]
