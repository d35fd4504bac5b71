"""
Front and back matter templates.

A matter chapter is a markdown file titled `_binder <Matter Name>` whose
leading `---` block holds YAML key/value pairs. The block becomes a template
context; numbered keys ("Collaborator 1", "Collaborator 2") collapse into a
list under the pluralized base key ("Collaborators"). Everything after the
block is the page `Body`.

Usage:
    page = parse_page(markdown)
    html = render("Copyright", page)
"""

import os
from dataclasses import dataclass

import yaml
from jinja2 import ChainableUndefined, DictLoader, Environment

from binderlib.icons import STORE_ICONS


@dataclass
class Matter:
    title: str
    placement: str       # "front" | "back"
    skeleton: str        # starter markdown for new matter files
    template: str        # Jinja2 source


# ── Context parsing ────────────────────────────────────────────────────


def extract_bookmatter(text):
    """
    Split text into (block, body) on the first two `---` lines.

    Returns ("", "") when there is no complete block.
    """
    lines = text.split("\n")
    start = end = -1
    for i, line in enumerate(lines):
        if line.strip() == "---":
            if start == -1:
                start = i
            else:
                end = i
                break

    if start == -1 or end == -1:
        return "", ""

    block = "\n".join(lines[start + 1:end]).strip()
    body = "\n".join(lines[end + 1:]).strip()
    return block, body


def _numbered_key(key):
    """("Collaborators", True) for "Collaborator 1"; (key, False) otherwise."""
    parts = key.split()
    if len(parts) > 1 and parts[-1].isdigit():
        return " ".join(parts[:-1]) + "s", True
    return key, False


def _text(value):
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def parse_page(text):
    """Build a template context from a matter chapter's markdown."""
    block, body = extract_bookmatter(text)

    data = {}
    if block:
        try:
            data = yaml.safe_load(block)
        except yaml.YAMLError as e:
            print(f"  Warning: Could not parse matter block: {e}")
            data = {}
    if not isinstance(data, dict):
        data = {}

    page = {}
    for key, value in data.items():
        name, numbered = _numbered_key(str(key))
        if numbered:
            items = page.setdefault(name, [])
            value = _text(value).strip()
            if value:
                items.append(value)
        else:
            page[name] = _text(value)

    page["Body"] = body
    return page


# ── Templates ──────────────────────────────────────────────────────────

COPYRIGHT_TEMPLATE = """\
<div class="copyright-page">
<p>{{ data["Book Name"] }} &copy; {{ data["Year"] }} {{ data["Copyright Holder"] }}.</p>
<p>All rights reserved.</p>
{% for val in data["Collaborators"] %}
<p>{{ val }}</p>
{% endfor %}
{% for val in data["ISBNs"] %}
<p>{{ val }}</p>
{% endfor %}
{% if data["Disclaimer"] %}
<p>{{ data["Disclaimer"] }}</p>
{% endif %}
{% for val in data["Publishers"] %}
<p>{{ val }}</p>
{% endfor %}
</div>
"""

DEDICATION_TEMPLATE = """\
<div class="dedication-page">
<h1>{{ data["Title"] }}</h1>
<p class="dedication">{{ data["Text"] }}</p>
</div>
"""

EPIGRAPH_TEMPLATE = """\
<div class="epigraph-page">
{% for val in data["Quotes"] %}
<p class="quote">{{ val }}</p>
{% endfor %}
<p class="attribution">
{% if data["Source"] %}
<span class="author">{{ data["Author"] }},&nbsp;</span><span class="source">{{ data["Source"] }}</span>
{% else %}
<span class="author">{{ data["Author"] }}</span>
{% endif %}
</p>
</div>
"""

BLURB_TEMPLATE = """\
<div class="blurb-page">
<h1>{{ data["Title"] }}</h1>
{% for val in data["Blurbs"] %}
<p class="blurb">{{ val }}</p>
<p class="source">{{ data["Sources"][loop.index0] }}</p>
{% endfor %}
</div>
"""

HALF_TITLE_TEMPLATE = """\
<div class="half-title-page">
<h1>{{ data["Title"] }}</h1>
</div>
"""

TITLE_PAGE_TEMPLATE = """\
<div class="title-page">
<h1>{{ data["Title"] }}</h1>
<p class="subtitle">{{ data["Subtitle"] }}</p>
<p class="authors">
{% for val in data["Author Names"] %}
<span class="author">{{ val }}</span>
{% endfor %}
</p>
<div class="collaborators">
{% for val in data["Collaborator Roles"] %}
<p class="collaborator-role">{{ val }}</p>
<p class="collaborator-name">{{ data["Collaborator Names"][loop.index0] }}</p>
{% endfor %}
</div>
<p class="publisher">
{% if data["Publisher Link"] %}
<a href="{{ data["Publisher Link"] }}">{{ data["Publisher"] }}</a>
{% else %}
<span>{{ data["Publisher"] }}</span>
{% endif %}
</p>
</div>
"""

ABOUT_AUTHOR_TEMPLATE = """\
<div class="about-author-page">
<h1>{{ data["Title"] }}</h1>
<div class="about-author">
{% for val in data["About Authors"] %}
<p>{{ val }}</p>
{% endfor %}
</div>
<div class="links">
{% for platform, icon in store_icons.items() %}
{% if data["Link To " ~ platform] %}
<a href="{{ data["Link To " ~ platform] }}" class="binder-store-link">{{ icon }}<span class="label">{{ platform }}</span></a>
{% endif %}
{% endfor %}
</div>
</div>
"""

ALSO_BY_TEMPLATE = """\
<div class="also-by-page">
<h1>{{ data["Title"] }}</h1>
{% for val in data["Books"] %}
<p class="book-title"><a href="{{ data["Links"][loop.index0] }}">{{ val }}</a></p>
<p class="book-description">{{ data["Descriptions"][loop.index0] }}</p>
{% endfor %}
</div>
"""

PREVIEW_MORE_TEMPLATE = """\
<div class="preview-more-page">
<h1>{{ data["Title"] }}</h1>
<p class="book-title">
{% if data["Link"] %}
<a href="{{ data["Link"] }}">{{ data["Book"] }}</a>
{% else %}
{{ data["Book"] }}
{% endif %}
</p>
<p class="book-description">{{ data["Description"] }}</p>
<div class="preview-body">
{{ body_html|safe }}
</div>
</div>
"""


# ── Skeletons for new matter files ─────────────────────────────────────

_IGNORED = "(Everything is ignored by Binder below this point.)"

COPYRIGHT_SKELETON = f"""---
Book Name:
Year: "2024"
Copyright Holder: Author Name
Collaborator 1: Cover Art by
Collaborator 2: Illustration by
Collaborator 3:
ISBN 1:
ISBN 2:
Disclaimer: This is a work of fiction. Names, characters, places and incidents either are products of the author's imagination or are used fictitiously. Any resemblance to actual events or locales or persons, living or dead, is entirely coincidental.
Publisher 1: Published by
Publisher 2:
---

{_IGNORED}

- Collaborator #, ISBN #, Publisher #: add more by increasing the number.
"""

DEDICATION_SKELETON = f"""---
Title: Dedication
Text: This book is dedicated to...
---

{_IGNORED}
"""

EPIGRAPH_SKELETON = f"""---
Quote 1: It was the best of times, it was the worst of times.
Quote 2:
Author: Charles Dickens
Source: A Tale of Two Cities
---

{_IGNORED}

- Quote #: one paragraph per quote.
- Source: optional, shown in italics after the author.
"""

BLURBS_SKELETON = f"""---
Title: Reviews
Blurb 1: A thrilling page-turner!
Source 1: Binders Weekly
Blurb 2: A must-read for fans of the genre.
Source 2: My Mom
Blurb 3:
Source 3:
---

{_IGNORED}

- Keep the same number of sources as blurbs.
"""

HALF_TITLE_SKELETON = f"""---
Title: Book Title
---

{_IGNORED}
"""

TITLE_PAGE_SKELETON = f"""---
Title: Book Title
Subtitle: Subtitle
Author Name 1: Author Name
Author Name 2:
Collaborator Role 1: Cover Art
Collaborator Name 1: Artist Name
Collaborator Role 2: Edited by
Collaborator Name 2: Editor Name
Publisher: Publisher Name
Publisher Link: https://www.publisher.com
---

{_IGNORED}
"""

ABOUT_AUTHOR_SKELETON = f"""---
Title: About the Author
About Author 1: Author Name is the author of Book Name.
About Author 2: Something personal.
About Author 3:
Link To Amazon: https://www.amazon.com/author/authorname
Link To Apple:
Link To Audible:
Link To Facebook:
Link To Patreon:
Link To Royal Road:
Link To Twitter:
Link To Website:
---

{_IGNORED}

- Link To X: optional; blank links are left out.
"""

ALSO_BY_SKELETON = f"""---
Title: Also By Author Name
Book 1: Book Title 1
Link 1: https://www.amazon.com/myotherbook1
Description 1: Description of Book 1
Book 2:
Link 2:
Description 2:
---

{_IGNORED}

- Keep the same number of books, links and descriptions.
"""

PREVIEW_MORE_SKELETON = """---
Title: Preview More
Book: Book Title 1
Link: https://www.amazon.com/myotherbook1
Description: Description of Book 1
---

Replace this line with the preview chapter in markdown.
"""


FRONT_MATTERS = [
    Matter("Copyright", "front", COPYRIGHT_SKELETON, COPYRIGHT_TEMPLATE),
    Matter("Dedication", "front", DEDICATION_SKELETON, DEDICATION_TEMPLATE),
    Matter("Epigraph", "front", EPIGRAPH_SKELETON, EPIGRAPH_TEMPLATE),
    Matter("Blurbs", "front", BLURBS_SKELETON, BLURB_TEMPLATE),
    Matter("Title Page", "front", TITLE_PAGE_SKELETON, TITLE_PAGE_TEMPLATE),
    Matter("Half Title", "front", HALF_TITLE_SKELETON, HALF_TITLE_TEMPLATE),
]

BACK_MATTERS = [
    Matter("About the Author", "back", ABOUT_AUTHOR_SKELETON, ABOUT_AUTHOR_TEMPLATE),
    Matter("Also By Author", "back", ALSO_BY_SKELETON, ALSO_BY_TEMPLATE),
    Matter("Preview More", "back", PREVIEW_MORE_SKELETON, PREVIEW_MORE_TEMPLATE),
]

MATTERS = {matter.title: matter for matter in FRONT_MATTERS + BACK_MATTERS}

_env = Environment(
    loader=DictLoader({title: matter.template for title, matter in MATTERS.items()}),
    autoescape=True,
    undefined=ChainableUndefined,   # missing keys and short lists render empty
    trim_blocks=True,
    lstrip_blocks=True,
)


def find_matter(title):
    return MATTERS.get(title.strip())


# ── Rendering ──────────────────────────────────────────────────────────


def render(template_id, context, body_html=""):
    """Render a registered matter template. Unknown ids raise KeyError."""
    if template_id not in MATTERS:
        raise KeyError(f"Unknown matter template: {template_id}")
    template = _env.get_template(template_id)
    return template.render(data=context, store_icons=STORE_ICONS, body_html=body_html)


def page_title(matter, context):
    """Section title for a matter page: its Title field, else the matter name."""
    title = context.get("Title", "")
    return title.strip() if title.strip() else matter.title


def render_matter(matter, markdown, renderer=None, source=None):
    """
    Render a matter chapter end to end.

    Returns (title, html). The Body is rendered through the markdown
    renderer when one is given.
    """
    page = parse_page(markdown)
    body_html = ""
    if renderer is not None and page["Body"]:
        body_html = renderer.render(page["Body"], source)
    return page_title(matter, page), render(matter.title, page, body_html)


# ── New matter files ───────────────────────────────────────────────────


def matter_filename(title):
    return f"_binder {title}.md"


def create_matter_file(book_dir, title):
    """
    Write a starter file for a matter page.

    Returns the new path, or None if the matter is unknown or the file exists.
    """
    matter = find_matter(title)
    if matter is None:
        print(f"  Error: Unknown matter '{title}'")
        print(f"  Available: {', '.join(MATTERS)}")
        return None

    path = os.path.join(book_dir, matter_filename(matter.title))
    if os.path.exists(path):
        print(f"  File {os.path.basename(path)} already exists in {book_dir}.")
        return None

    with open(path, "w", encoding="utf-8") as f:
        f.write(matter.skeleton)
    return path
