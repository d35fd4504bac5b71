"""
Style override components.

Each component is a CSS fragment in one category. A book has at most one
active component per category; `ComponentSelection` keeps that structural.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class StyleOverride:
    identifier: str
    name: str
    category: str
    css: str


# Composition order, regardless of selection order.
CATEGORIES = [
    "dropcap",
    "horizontal-rule",
    "indent",
    "toc-alignment",
    "toc-front-matter",
    "toc-back-matter",
]

_FIRST_PARAGRAPH = "p.first-paragraph:not(.front-matter):not(.back-matter)"

DROPCAPS = [
    StyleOverride("_dropcap1", "Large first letter", "dropcap", f"""
{_FIRST_PARAGRAPH}::first-letter {{
    font-weight: normal;
    font-size: 3.2em;
    float: left;
    margin-top: -0.3225rem;
    margin-bottom: -0.3245em;
}}
"""),
    StyleOverride("_dropcap2", "Bold first word", "dropcap", f"""
{_FIRST_PARAGRAPH} .first-word {{
    font-weight: bold;
    font-size: 130%;
    text-transform: uppercase;
}}
"""),
    StyleOverride("_dropcap3", "Uppercase first line", "dropcap", f"""
{_FIRST_PARAGRAPH}::first-line {{
    font-size: 105%;
    text-transform: uppercase;
}}
"""),
    StyleOverride("_dropcap4", "Small caps lead", "dropcap", f"""
{_FIRST_PARAGRAPH} .first-four-words {{
    font-variant: small-caps;
    letter-spacing: 0.05em;
}}
"""),
]


def _rule(identifier, name, body):
    return StyleOverride(identifier, name, "horizontal-rule", f"""
.horizontal-rule {{
{body}
}}
""")


def _bordered(border, width):
    if width is None:
        return f"    border-top: {border};\n    margin-bottom: 1em;\n    margin-top: 1em;"
    return f"    border-top: {border};\n    margin: 1em auto;\n    width: {width};"


HORIZONTAL_RULES = [
    StyleOverride("_hr1", "Asterisks", "horizontal-rule", """
.horizontal-rule {
    text-align: center;
    font-size: 1rem;
    margin-top: 0.8rem;
    margin-bottom: 0;
    font-weight: bold;
}

.horizontal-rule::before {
    content: "* * *";
}
"""),
]
for _index, (_border, _width) in enumerate(
    [
        ("1px solid #808080", None),
        ("1px solid #808080", "80%"),
        ("1px solid #808080", "50%"),
        ("1px solid #808080", "30%"),
        ("5px solid #808080", None),
        ("5px solid #808080", "80%"),
        ("5px solid #808080", "50%"),
        ("5px solid #808080", "30%"),
        ("8px dotted #808080", None),
        ("8px dotted #808080", "80%"),
        ("8px dotted #808080", "50%"),
        ("8px dotted #808080", "30%"),
    ],
    start=2,
):
    HORIZONTAL_RULES.append(
        _rule(f"_hr{_index}", f"{' '.join(_border.split()[:2]).title()} {_width or '100%'}",
              _bordered(_border, _width))
    )

INDENTS = [
    StyleOverride("_indent1", "Indent following paragraphs", "indent", """
p + p {
    text-indent: 1.5em;
}
"""),
    StyleOverride("_indent2", "Indent all paragraphs", "indent", """
p {
    text-indent: 1.5em;
}

p.first-paragraph {
    text-indent: 0;
}
"""),
    StyleOverride("_indent3", "Block paragraphs", "indent", """
p {
    text-indent: 0;
    margin-bottom: 1em;
}
"""),
]

TOC_ALIGNMENTS = [
    StyleOverride("_tocLeft", "Left", "toc-alignment", """
#toc ol {
    text-align: left;
}
"""),
    StyleOverride("_tocCenter", "Centered", "toc-alignment", """
#toc ol, .toc-title {
    text-align: center;
}
"""),
]

TOC_FRONT_MATTER = [
    StyleOverride("_tocFmShow", "Show front matter", "toc-front-matter", """
#toc li.front-matter {
    margin-bottom: 1em;
}
"""),
    StyleOverride("_tocFmHide", "Hide front matter", "toc-front-matter", """
#toc li.front-matter {
    display: none;
}
"""),
]

TOC_BACK_MATTER = [
    StyleOverride("_tocBmShow", "Show back matter", "toc-back-matter", """
#toc li.back-matter {
    margin-top: 1em;
}
"""),
    StyleOverride("_tocBmHide", "Hide back matter", "toc-back-matter", """
#toc li.back-matter {
    display: none;
}
"""),
]

COMPONENTS = {
    component.identifier: component
    for component in (
        DROPCAPS + HORIZONTAL_RULES + INDENTS
        + TOC_ALIGNMENTS + TOC_FRONT_MATTER + TOC_BACK_MATTER
    )
}


def components_in(category):
    return [c for c in COMPONENTS.values() if c.category == category]


class ComponentSelection:
    """
    Active override per category.

    Selecting a component replaces whatever was active in its category.
    Unknown identifiers are ignored.
    """

    def __init__(self, identifiers=()):
        self._active = {}
        for identifier in identifiers or ():
            self.select(identifier)

    def select(self, identifier):
        component = COMPONENTS.get(identifier)
        if component is not None:
            self._active[component.category] = identifier
        return self

    def clear(self, category):
        self._active.pop(category, None)
        return self

    def active(self, category):
        return self._active.get(category)

    def ids(self):
        """Active identifiers in composition order."""
        return [self._active[c] for c in CATEGORIES if c in self._active]

    def css(self):
        return "".join(COMPONENTS[identifier].css for identifier in self.ids())

    def __contains__(self, identifier):
        return identifier in self._active.values()

    def __iter__(self):
        return iter(self.ids())

    def __len__(self):
        return len(self._active)

    def __eq__(self, other):
        if not isinstance(other, ComponentSelection):
            return NotImplemented
        return self._active == other._active

    def __repr__(self):
        return f"ComponentSelection({self.ids()!r})"
