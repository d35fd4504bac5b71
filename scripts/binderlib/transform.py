"""
Chapter transform: one markdown chapter → one finished HTML section.

Normal chapters are rendered, headed with their number, and then reshaped:
first-paragraph lead spans, themeable horizontal rules, rolling inline
styles, store-link icons and localized images. Matter chapters are handed
to their template instead.
"""

import html
import os
import re
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup, NavigableString, Tag
from num2words import num2words

from binderlib.chapters import classify
from binderlib.icons import icon_for
from binderlib.images import resource_href
from binderlib.matter import render_matter
from binderlib.models import PendingImage


ROLLING_STYLE_MARKER = "%BINDER CSS%"
STORE_LINK_PATTERN = re.compile(r"^%BINDER (.+) LINK%$")
STORE_LINKS_PER_CONTAINER = 3

# Elements allowed between two store links that still count as adjacent.
_LINK_GAP_TAGS = ("p", "div", "br")


@dataclass
class TransformResult:
    section: Tag
    images: list = field(default_factory=list)
    numbered: bool = True
    title: Optional[str] = None

    @property
    def html(self):
        """Inner HTML of the section."""
        return self.section.decode_contents()


def transform_chapter(chapter, markdown, number, renderer, resolver, kind=None, language="en"):
    """
    Transform one chapter.

    `number` is the running chapter number; it only appears in the output
    of normal chapters, and `numbered` tells the caller whether to advance it.
    """
    kind = kind or classify(chapter)

    if kind.is_matter:
        title, fragment = render_matter(kind.matter, markdown, renderer, chapter.source)
        section = _section_from(fragment)
        return TransformResult(section=section, images=[], numbered=False, title=title)

    fragment = renderer.render(markdown, chapter.source)
    if chapter.is_numbered:
        fragment = chapter_heading(number, chapter.title, language) + fragment

    section = _section_from(fragment)
    soup = _soup_of(section)

    lead_first_paragraph(soup, section, chapter)
    replace_rules(soup, section)
    apply_rolling_style(section)
    replace_store_links(soup, section)
    images = localize_images(section, resolver, os.path.dirname(chapter.source))

    return TransformResult(section=section, images=images, numbered=chapter.is_numbered)


# ── Heading ────────────────────────────────────────────────────────────


def number_in_words(number, language="en"):
    """'Twenty-one' for 21; English when the language is not supported."""
    lang = (language or "en").replace("-", "_").split("_")[0]
    try:
        words = num2words(number, lang=lang)
    except NotImplementedError:
        words = num2words(number, lang="en")
    return words[:1].upper() + words[1:]


def chapter_heading(number, title, language="en"):
    return (
        '<h1 class="chapter-number">'
        '<span class="chapter-word">Chapter </span>'
        f'<span class="chapter-number-numeric">{number}</span>'
        f'<span class="chapter-number-text">{html.escape(number_in_words(number, language))}</span>'
        "</h1>"
        '<div class="chapter-title-divider"></div>'
        f'<h1 class="chapter-title">{html.escape(title)}</h1>'
    )


# ── Section steps ──────────────────────────────────────────────────────


def lead_first_paragraph(soup, section, chapter):
    """Wrap the first word (and first four words) of the first paragraph."""
    paragraph = section.find("p")
    if paragraph is None:
        return

    words = paragraph.get_text().split()
    if not words:
        return

    classes = ["first-paragraph"]
    if chapter.is_front_matter:
        classes.append("front-matter")
    if chapter.is_back_matter:
        classes.append("back-matter")

    replacement = soup.new_tag("p", attrs={"class": " ".join(classes)})
    first_word = soup.new_tag("span", attrs={"class": "first-word"})
    first_word.string = words[0]

    if len(words) >= 4:
        lead = soup.new_tag("span", attrs={"class": "first-four-words"})
        lead.append(first_word)
        lead.append(NavigableString(" " + " ".join(words[1:4])))
        replacement.append(lead)
        rest = words[4:]
    else:
        replacement.append(first_word)
        rest = words[1:]

    if rest:
        replacement.append(NavigableString(" " + " ".join(rest)))

    paragraph.replace_with(replacement)


def replace_rules(soup, section):
    """<hr> → themeable divider."""
    for rule in section.find_all("hr"):
        rule.replace_with(soup.new_tag("div", attrs={"class": "horizontal-rule"}))


def apply_rolling_style(section):
    """
    `%BINDER CSS% <declarations>` code blocks set an inline style on every
    following top-level element until the next marker.
    """
    current_style = None
    for child in list(section.find_all(recursive=False)):
        text = child.get_text().lstrip() if child.name == "pre" else ""
        if text.startswith(ROLLING_STYLE_MARKER):
            current_style = text[len(ROLLING_STYLE_MARKER):].strip() or None
            child.decompose()
            continue
        if current_style:
            child["style"] = current_style


def replace_store_links(soup, section):
    """`%BINDER AMAZON LINK%` anchors → icon links, grouped three per row."""
    links = []
    for anchor in section.find_all("a"):
        match = STORE_LINK_PATTERN.match(anchor.get_text().strip())
        if not match:
            continue
        icon = icon_for(match.group(1))
        if icon is None:
            continue

        link = soup.new_tag("a", attrs={"href": anchor.get("href", ""), "class": "binder-store-link"})
        for node in list(BeautifulSoup(str(icon), "html.parser").contents):
            link.append(node)
        anchor.replace_with(link)
        links.append(link)

    for run in _adjacent_runs(links):
        _contain(soup, section, run)
    return links


def localize_images(section, resolver, context_dir=None):
    """Point every <img> at the packaged resources folder."""
    images = section.find_all("img")
    sources = [image.get("src", "") for image in images]
    paths = resolver.resolve_all([src for src in sources if src], context_dir)
    resolved = iter(paths)

    pending = []
    for image, src in zip(images, sources):
        path = next(resolved) if src else None
        if path is None:
            image.decompose()
            continue
        name = resolver.name_for(path)
        image["src"] = resource_href(name)
        pending.append(PendingImage(name=name, path=path))
    return pending


# ── Helpers ────────────────────────────────────────────────────────────


def _section_from(fragment):
    soup = BeautifulSoup(f'<section class="binder-chapter">{fragment}</section>', "html.parser")
    return soup.section


def _soup_of(tag):
    root = tag
    while root.parent is not None:
        root = root.parent
    return root


def _inside(node, ancestor):
    return any(parent is ancestor for parent in node.parents)


def _adjacent(first, second):
    """True if only whitespace and block boundaries separate two links."""
    for node in first.next_elements:
        if node is second:
            return True
        if _inside(node, first):
            continue
        if isinstance(node, NavigableString):
            if node.strip():
                return False
            continue
        if node.name not in _LINK_GAP_TAGS:
            return False
    return False


def _adjacent_runs(links):
    runs = []
    for link in links:
        if runs and _adjacent(runs[-1][-1], link):
            runs[-1].append(link)
        else:
            runs.append([link])
    return runs


def _top_level(node, section):
    while node.parent is not None and node.parent is not section:
        node = node.parent
    return node


def _is_empty_block(tag):
    if tag.get_text().strip():
        return False
    return all(child.name == "br" for child in tag.find_all(True))


def _contain(soup, section, run):
    anchor_block = _top_level(run[0], section)
    holders = []
    for link in run:
        holder = _top_level(link, section)
        if holder is not link and not any(holder is h for h in holders):
            holders.append(holder)

    for start in range(0, len(run), STORE_LINKS_PER_CONTAINER):
        container = soup.new_tag("div", attrs={"class": "binder-store-link-container"})
        anchor_block.insert_before(container)
        for link in run[start:start + STORE_LINKS_PER_CONTAINER]:
            container.append(link.extract())

    for holder in holders:
        if holder.parent is not None and _is_empty_block(holder):
            holder.decompose()
