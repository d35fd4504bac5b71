"""
Theme-independent stylesheets.

STRUCTURAL_STYLESHEET always leads the composed stylesheet: paragraph
justification, store-link layout, section breaks and matter page layout.
page_stylesheet() builds the page box used only by the PDF paginator.
"""

STRUCTURAL_STYLESHEET = """
/* Structure */
body {
    word-wrap: break-word;
}

section.binder-chapter {
    break-before: page;
    page-break-before: always;
}

p {
    font-size: 1em;
    text-align: justify;
    text-indent: 0;
    margin-top: 0;
    margin-bottom: 0.5em;
    line-height: 1.5em;
}

img {
    max-width: 100%;
    height: auto;
    display: block;
    margin: 0 auto;
}

.horizontal-rule {
    break-inside: avoid;
}

.binder-store-link-container {
    display: flex;
    flex-direction: row;
    justify-content: center;
    gap: 1em;
    text-align: center;
    margin: 1em 0;
}

.binder-store-link {
    display: inline-block;
    width: 80px;
    height: 80px;
    padding: 10px;
}

.binder-store-link svg {
    display: inline-block;
    padding: 0.5em;
}

#toc ol {
    list-style-type: none;
    margin: 0;
    padding: 0;
}

/* Matter pages */
section.front-matter {
    text-align: center;
}

.copyright-page {
    margin-top: 5em;
    font-size: 1em;
}

.copyright-page p {
    margin-top: 0;
    text-align: center;
}

.dedication-page,
.dedication-page .dedication {
    margin-top: 5em;
    text-align: center;
}

.epigraph-page {
    margin-top: 5em;
}

.epigraph-page .quote {
    text-align: left;
}

.epigraph-page .attribution {
    text-align: right;
}

.epigraph-page .author {
    font-weight: bold;
}

.epigraph-page .source {
    font-style: italic;
}

.blurb-page h1 {
    text-align: center;
}

.blurb-page .blurb {
    margin-top: 3em;
    text-align: center;
}

.blurb-page .source {
    font-weight: bold;
    text-align: center;
}

.half-title-page h1,
.title-page h1 {
    margin-top: 3em;
    text-align: center;
    font-weight: bold;
    font-size: 250%;
}

.title-page .subtitle {
    text-align: center;
    font-size: 200%;
}

.title-page .authors {
    margin-top: 5em;
    display: flex;
    flex-direction: row;
    justify-content: center;
    gap: 1em;
    text-align: center;
}

.title-page .author {
    font-weight: bold;
    font-size: 180%;
}

.title-page .collaborators {
    margin-top: 4em;
}

.title-page .collaborator-role {
    font-size: 80%;
    margin: 0;
    text-align: center;
}

.title-page .collaborator-name {
    font-weight: bold;
    margin-top: 0;
    margin-bottom: 2em;
    text-align: center;
}

.title-page .publisher {
    margin-top: 5em;
    text-align: center;
}

.about-author-page h1,
.also-by-page h1,
.preview-more-page h1 {
    text-align: center;
}

.about-author-page .links {
    margin-top: 3em;
}

.about-author-page .binder-store-link {
    display: grid;
    grid-template-columns: auto 1fr;
    grid-gap: 3em;
    align-items: center;
    width: auto;
    height: auto;
    margin: 1em;
}

.about-author-page .label {
    display: inline-block;
    text-align: left;
}

.also-by-page .book-title,
.preview-more-page .book-title {
    text-align: center;
    margin-top: 3em;
    font-weight: bold;
}
"""

PAGE_TEMPLATE = """
@page {{
    size: {width} {height};
    margin-top: {vertical_margin};
    margin-bottom: {vertical_margin};
}}

@page :left {{
    margin-left: {inside_margin};
    margin-right: {outside_margin};

    @top-left {{
        content: counter(page);
    }}
}}

@page :right {{
    margin-left: {outside_margin};
    margin-right: {inside_margin};

    @top-right {{
        content: counter(page);
    }}
}}

:root {{
    font-size: {font_size};
}}

body {{
    font-family: {font_family};
}}

p {{
    line-height: {line_height};
}}
"""


def page_stylesheet(settings):
    """Page box CSS from the metadata `pdf` section."""
    return PAGE_TEMPLATE.format(**settings)


# Colour schemes injected into preview builds only.
PREVIEW_SCHEMES = {
    "light": {"color": "#000000", "background": "#ffffff", "link": "#0000ee"},
    "dark": {"color": "#acacac", "background": "#121212", "link": "#8fc0e9"},
    "sepia": {"color": "#5d4232", "background": "#e7dec7", "link": "#0055aa"},
    "green": {"color": "#3a4b43", "background": "#c5e7ce", "link": "#0055aa"},
}


def preview_scheme_stylesheet(name):
    scheme = PREVIEW_SCHEMES.get(name)
    if scheme is None:
        return ""
    return (
        f"\nbody {{ color: {scheme['color']}; background-color: {scheme['background']}; }}\n"
        f"a {{ color: {scheme['link']}; }}\n"
    )
