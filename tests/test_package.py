import io
import os
import re
import unittest
import zipfile
from tempfile import TemporaryDirectory

from bs4 import BeautifulSoup

from binderlib.images import ImageResolver
from binderlib.models import Book, Chapter, Resource, Section
from binderlib.package import EpubPackager
from binderlib.transform import transform_chapter
from tests.helpers import PNG, FakeRenderer, complete_metadata


def sample_book(**metadata):
    sections = [
        Section("Copyright", "<p>c</p>", is_front_matter=True),
        Section("Intro", "<p>i</p>"),
        Section("Middle", "<p>m</p>", exclude_from_contents=True),
        Section("Afterword", "<p>a</p>", is_back_matter=True),
    ]
    return Book(
        metadata=complete_metadata(**metadata),
        stylesheet="body { margin: 0; }",
        sections=sections,
        resources=[Resource("art.png", PNG)],
        cover=Resource("cover.png", PNG),
    )


class TestEpubPackager(unittest.TestCase):
    def open(self, book):
        data = EpubPackager().package(book)
        self.assertTrue(data.startswith(b"PK"))
        return zipfile.ZipFile(io.BytesIO(data))

    def opf(self, archive):
        return archive.read("EPUB/content.opf").decode("utf-8")

    def test_spine_order(self) -> None:
        archive = self.open(sample_book())

        spine = re.findall(r'<itemref idref="([^"]+)"', self.opf(archive))

        self.assertEqual(spine, ["cover", "s001", "contents", "s002", "s003", "s004"])

    def test_contents_page_hidden_from_spine(self) -> None:
        archive = self.open(sample_book(show_contents=False))

        spine = re.findall(r'<itemref idref="([^"]+)"', self.opf(archive))

        self.assertNotIn("contents", spine)
        self.assertIn("EPUB/content/toc.xhtml", archive.namelist())

    def test_contents_page_entries(self) -> None:
        archive = self.open(sample_book(toc_title="Inside"))

        soup = BeautifulSoup(archive.read("EPUB/content/toc.xhtml"), "html.parser")
        items = soup.find("nav", id="toc").find_all("li")

        self.assertEqual(soup.find("h1", class_="toc-title").get_text(strip=True), "Inside")
        self.assertEqual([li.get_text(strip=True) for li in items], ["Copyright", "Intro", "Afterword"])
        self.assertIn("front-matter", items[0]["class"])
        self.assertIn("back-matter", items[2]["class"])
        self.assertEqual(items[1].a["href"], "s002.xhtml")

    def test_sections_and_resources_packaged(self) -> None:
        archive = self.open(sample_book())
        names = archive.namelist()

        for name in ("EPUB/content/s001.xhtml", "EPUB/resources/art.png", "EPUB/css/style.css"):
            self.assertIn(name, names)
        page = archive.read("EPUB/content/s002.xhtml").decode("utf-8")
        self.assertIn('class="binder-chapter"', page)
        self.assertIn("../css/style.css", page)
        front = archive.read("EPUB/content/s001.xhtml").decode("utf-8")
        self.assertIn('class="binder-chapter front-matter"', front)

    def test_metadata_omits_unset_fields(self) -> None:
        archive = self.open(sample_book(series="Saga", sequence=2, tags="magic, sea"))
        opf = self.opf(archive)

        self.assertIn("The Binding", opf)
        self.assertIn("Ada Writer", opf)
        self.assertIn("isbn-123", opf)
        self.assertIn('property="belongs-to-collection"', opf)
        self.assertIn(">Saga<", opf)
        self.assertIn(">magic<", opf)
        self.assertIn(">sea<", opf)
        self.assertNotIn("dc:description", opf)
        self.assertNotIn("dc:publisher", opf)

    def test_store_icons_packaged_as_svg(self) -> None:
        with TemporaryDirectory() as tmp:
            chapter = Chapter("Links", os.path.join(tmp, "Links.md"))
            resolver = ImageResolver(tmp, os.path.join(tmp, "binder-temp"))
            result = transform_chapter(
                chapter, "[%BINDER AMAZON LINK%](https://a.example/x)", 1, FakeRenderer(), resolver
            )
        book = sample_book()
        book.sections = [Section("Links", result.html), Section("Plain", "<p>p</p>")]
        archive = self.open(book)

        page = archive.read("EPUB/content/s001.xhtml").decode("utf-8")
        self.assertIn('xmlns="http://www.w3.org/2000/svg"', page)
        opf = self.opf(archive)
        self.assertIn('properties="svg"', re.search(r'<item [^>]*id="s001"[^>]*>', opf).group(0))
        self.assertNotIn("properties", re.search(r'<item [^>]*id="s002"[^>]*>', opf).group(0))

    def test_write_creates_parent_directories(self) -> None:
        with TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "out", "book.epub")

            EpubPackager().write(sample_book(), path)

            self.assertTrue(zipfile.is_zipfile(path))


if __name__ == "__main__":
    unittest.main()
