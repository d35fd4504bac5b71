"""
PDF builder.

Pipeline:
    1. Assemble sections exactly as for the EPUB
    2. Write one intermediate HTML document with its resources and stylesheet
    3. Page stylesheet (trim size, margins, running page numbers) from `pdf` metadata
    4. The paginator (weasyprint by default) renders HTML + CSS to PDF
"""

import html
import os
import re
import shutil

from binderlib.builders.base import BaseBuilder, safe_filename
from binderlib.images import RESOURCE_DIR
from binderlib.package import DEFAULT_TOC_TITLE, contents_markup, section_classes
from binderlib.styles import page_stylesheet


DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="{language}">
<head>
<meta charset="utf-8">
<title>{title}</title>
<link rel="stylesheet" href="../css/page.css">
<link rel="stylesheet" href="../css/style.css">
</head>
<body>
{body}
</body>
</html>
"""


class PdfBuilder(BaseBuilder):
    format_name = "PDF"
    extension = ".pdf"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.keep_html = kwargs.get("keep_html", False)

    @property
    def work_dir(self):
        return os.path.join(self.output_dir, f"{safe_filename(self.metadata.title)}_print")

    @property
    def intermediate_html(self):
        return os.path.join(self.work_dir, "html", "book.html")

    def build(self):
        self.header()

        pdf = self.metadata.pdf
        engine = pdf.get("engine", "weasyprint")

        # ── Check for the paginator ───────────────────────
        if not self.check_tool(engine):
            print("  Install WeasyPrint:")
            print("    pip install weasyprint")
            return False

        book = self.assemble_book()
        if book is None:
            return False

        # ── Step 1: Intermediate HTML ─────────────────────
        try:
            self._write_intermediate(book)
        except OSError as e:
            print(f"  ✗ Could not write intermediate HTML: {e}")
            return False

        self.log(f"  ✓ Generated {self.intermediate_html}")

        # ── Step 2: Paginate ──────────────────────────────
        os.makedirs(self.output_dir, exist_ok=True)
        cmd = [engine, self.intermediate_html, self.output_file]
        self.log(f"  {engine} ...")
        if not self.exec_cmd(cmd, f"{engine} rendering"):
            return False

        print(f"  ✓ {self.output_file}")

        # ── Step 3: Cleanup / page count ──────────────────
        self._report_page_count()
        self._cleanup()
        self.resolver.cleanup()

        return True

    # ── Intermediate files ─────────────────────────────────

    def _write_intermediate(self, book):
        html_dir = os.path.dirname(self.intermediate_html)
        css_dir = os.path.join(self.work_dir, "css")
        resource_dir = os.path.join(self.work_dir, RESOURCE_DIR)
        for path in (html_dir, css_dir, resource_dir):
            os.makedirs(path, exist_ok=True)

        with open(os.path.join(css_dir, "page.css"), "w", encoding="utf-8") as f:
            f.write(page_stylesheet(self.metadata.pdf))
        with open(os.path.join(css_dir, "style.css"), "w", encoding="utf-8") as f:
            f.write(book.stylesheet)

        for resource in book.resources:
            with open(os.path.join(resource_dir, resource.name), "wb") as f:
                f.write(resource.data)

        with open(self.intermediate_html, "w", encoding="utf-8") as f:
            f.write(self.render_document(book))

    def render_document(self, book):
        """All sections in reading order as one HTML document."""
        metadata = book.metadata
        parts = []
        contents_done = False

        for index, section in enumerate(book.sections, start=1):
            if (
                not contents_done
                and not section.is_front_matter
                and metadata.get("show_contents", True)
            ):
                parts.append(self._contents(book))
                contents_done = True
            parts.append(
                f'<section id="s{index:03d}" class="{section_classes(section)}">'
                f"{section.html_content}</section>"
            )

        if not contents_done and metadata.get("show_contents", True):
            parts.append(self._contents(book))

        return DOCUMENT_TEMPLATE.format(
            language=html.escape(metadata.language),
            title=html.escape(metadata.title),
            body="\n".join(parts),
        )

    def _contents(self, book):
        toc_title = book.metadata.get("toc_title") or DEFAULT_TOC_TITLE
        body = contents_markup(book.sections, toc_title, lambda index: f"#s{index:03d}")
        return f'<section class="binder-chapter binder-contents">{body}</section>'

    # ── Reporting and cleanup ──────────────────────────────

    def _report_page_count(self):
        """Quick page count from the PDF structure."""
        try:
            with open(self.output_file, "rb") as f:
                data = f.read()
        except OSError:
            return
        counts = re.findall(rb"/Count\s+(\d+)", data)
        if counts:
            pages = max(int(c) for c in counts)
            print(f"  Pages: ~{pages}")

    def _cleanup(self):
        """Remove intermediate files unless --keep-html."""
        if self.keep_html:
            self.log(f"  Kept intermediate: {self.work_dir}")
            return

        if os.path.isdir(self.work_dir):
            shutil.rmtree(self.work_dir)
        self.log("  Cleaned up intermediate files")
