"""
EPUB packaging with ebooklib.

Layout inside the archive:

    cover.xhtml, cover image          (when the book has a cover)
    css/style.css                     composed stylesheet
    content/s001.xhtml ...            one page per section
    content/toc.xhtml                 generated contents page
    resources/<name>                  localized images
    nav.xhtml, toc.ncx

Spine: cover, front matter, contents page (if shown), chapters, back matter.
"""

import html
import io
import mimetypes
import os

from ebooklib import epub

from binderlib.images import RESOURCE_DIR


STYLESHEET_NAME = "css/style.css"
CONTENT_DIR = "content"
CONTENTS_PAGE = "toc.xhtml"
DEFAULT_TOC_TITLE = "Contents"


def section_filename(index):
    return f"s{index:03d}.xhtml"


def section_classes(section):
    classes = ["binder-chapter"]
    if section.is_front_matter:
        classes.append("front-matter")
    if section.is_back_matter:
        classes.append("back-matter")
    return " ".join(classes)


def contents_markup(sections, toc_title, href_for):
    """
    Contents page body: a heading and an ordered list of the sections
    not excluded from the contents. `href_for(index)` gives each link target.
    """
    items = []
    for index, section in enumerate(sections, start=1):
        if section.exclude_from_contents:
            continue
        classes = section_classes(section).replace("binder-chapter", "").strip()
        class_attr = f' class="{classes}"' if classes else ""
        items.append(
            f'<li{class_attr}><a href="{href_for(index)}">'
            f"{html.escape(section.title)}</a></li>"
        )
    return (
        f'<h1 class="toc-title">{html.escape(toc_title)}</h1>'
        f'<nav id="toc"><ol>{"".join(items)}</ol></nav>'
    )


class EpubPackager:
    """
    Turns an assembled Book into an EPUB archive.

    Usage:
        EpubPackager().write(book, "out/My Book.epub")
        data = EpubPackager().package(book)
    """

    def package(self, book):
        """Return the EPUB as bytes."""
        buffer = io.BytesIO()
        epub.write_epub(buffer, self.build(book), {})
        return buffer.getvalue()

    def write(self, book, path):
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        epub.write_epub(path, self.build(book), {})
        return path

    # ── Assembly ───────────────────────────────────────────

    def build(self, book):
        """The ebooklib EpubBook for a Book."""
        metadata = book.metadata
        result = epub.EpubBook()
        self._set_metadata(result, metadata)

        if book.cover is not None:
            extension = os.path.splitext(book.cover.name)[1]
            result.set_cover(f"cover{extension}", book.cover.data)

        style = epub.EpubItem(
            uid="style",
            file_name=STYLESHEET_NAME,
            media_type="text/css",
            content=book.stylesheet.encode("utf-8"),
        )
        result.add_item(style)

        for index, resource in enumerate(book.resources, start=1):
            media_type = mimetypes.guess_type(resource.name)[0] or "application/octet-stream"
            result.add_item(epub.EpubItem(
                uid=f"res{index:03d}",
                file_name=f"{RESOURCE_DIR}/{resource.name}",
                media_type=media_type,
                content=resource.data,
            ))

        pages = []
        for index, section in enumerate(book.sections, start=1):
            page = epub.EpubHtml(
                uid=f"s{index:03d}",
                title=section.title,
                file_name=f"{CONTENT_DIR}/{section_filename(index)}",
                lang=metadata.language,
            )
            page.content = (
                f'<section class="{section_classes(section)}">'
                f"{section.html_content}</section>"
            )
            if "<svg" in section.html_content:
                # Inline SVG must be declared on the manifest item
                page.properties.append("svg")
            self._link_stylesheet(page)
            result.add_item(page)
            pages.append((section, page))

        toc_title = metadata.get("toc_title") or DEFAULT_TOC_TITLE
        contents = self._contents_page(pages, toc_title, metadata.language)
        result.add_item(contents)

        result.toc = [page for section, page in pages if not section.exclude_from_contents]
        result.add_item(epub.EpubNcx())
        result.add_item(epub.EpubNav())

        result.spine = self._spine(book, pages, contents, metadata)
        self._guide(result, pages, contents, toc_title, metadata)
        return result

    # ── Metadata ───────────────────────────────────────────

    def _set_metadata(self, result, metadata):
        result.set_identifier(metadata.book_id())
        result.set_title(metadata.title)
        result.set_language(metadata.language)

        fields = metadata.packaged_fields()
        result.add_author(metadata.author, file_as=fields.get("file_as"))

        if "description" in fields:
            result.add_metadata("DC", "description", fields["description"])
        if "publisher" in fields:
            result.add_metadata("DC", "publisher", fields["publisher"])
        if "copyright" in fields:
            result.add_metadata("DC", "rights", fields["copyright"])
        if "published" in fields:
            result.add_metadata("DC", "date", str(fields["published"]))
        if "transcription_source" in fields:
            result.add_metadata("DC", "source", fields["transcription_source"])
        if "genre" in fields:
            result.add_metadata("DC", "subject", fields["genre"])
        for tag in _split_tags(fields.get("tags", "")):
            result.add_metadata("DC", "subject", tag)

        if "series" in fields:
            result.add_metadata(None, "meta", fields["series"], {
                "property": "belongs-to-collection",
                "id": "series",
            })
            result.add_metadata(None, "meta", "series", {
                "refines": "#series",
                "property": "collection-type",
            })
            if "sequence" in fields:
                result.add_metadata(None, "meta", str(fields["sequence"]), {
                    "refines": "#series",
                    "property": "group-position",
                })

    # ── Pages ──────────────────────────────────────────────

    def _link_stylesheet(self, page):
        page.add_link(href=f"../{STYLESHEET_NAME}", rel="stylesheet", type="text/css")

    def _contents_page(self, pages, toc_title, language):
        body = contents_markup([section for section, page in pages], toc_title, section_filename)
        contents = epub.EpubHtml(
            uid="contents",
            title=toc_title,
            file_name=f"{CONTENT_DIR}/{CONTENTS_PAGE}",
            lang=language,
        )
        contents.content = f'<section class="binder-contents">{body}</section>'
        self._link_stylesheet(contents)
        return contents

    def _spine(self, book, pages, contents, metadata):
        front = [page for section, page in pages if section.is_front_matter]
        back = [page for section, page in pages if section.is_back_matter]
        normal = [
            page for section, page in pages
            if not section.is_front_matter and not section.is_back_matter
        ]

        spine = ["cover"] if book.cover is not None else []
        spine.extend(front)
        if metadata.get("show_contents", True):
            spine.append(contents)
        spine.extend(normal)
        spine.extend(back)
        return spine

    def _guide(self, result, pages, contents, toc_title, metadata):
        result.guide.append({"type": "toc", "title": toc_title, "href": contents.file_name})
        if not metadata.get("start_reading", True):
            return

        # Start reading at the first chapter after the contents page
        for section, page in pages:
            if not section.is_front_matter:
                result.guide.append({"type": "text", "title": page.title, "href": page.file_name})
                return


def _split_tags(tags):
    if isinstance(tags, (list, tuple)):
        return [str(t).strip() for t in tags if str(t).strip()]
    return [t.strip() for t in str(tags or "").split(",") if t.strip()]
