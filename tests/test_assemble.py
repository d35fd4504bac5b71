import os
import unittest
from tempfile import TemporaryDirectory

from binderlib.assemble import ChapterError, assemble, preview, validate
from binderlib.config import BookMetadata, ValidationError
from binderlib.images import ImageResolver
from binderlib.models import Chapter
from tests.helpers import PNG, FakeRenderer, complete_metadata, write


class TestAssemble(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = TemporaryDirectory()
        self.book_dir = self.tmp.name
        self.resolver = ImageResolver(self.book_dir, os.path.join(self.book_dir, "binder-temp"))
        self.renderer = FakeRenderer()
        write(os.path.join(self.book_dir, "cover.png"), PNG, binary=True)
        write(os.path.join(self.book_dir, "art.png"), PNG, binary=True)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def chapter(self, filename, text, **flags):
        path = write(os.path.join(self.book_dir, filename), text)
        title = flags.pop("title", os.path.splitext(filename)[0])
        return Chapter(title=title, source=path, **flags)

    def build(self, chapters, metadata=None):
        return assemble(chapters, metadata or complete_metadata(), "css", self.renderer, self.resolver)

    def test_orders_numbers_and_titles_sections(self) -> None:
        chapters = [
            self.chapter("Intro.md", "One two three four."),
            self.chapter("_binder Copyright.md", "---\nYear: 2024\n---\n",
                         title="_binder Copyright", is_front_matter=True),
            self.chapter("Skipped.md", "Not here.", include=False),
            self.chapter("Middle.md", "Five six seven eight."),
        ]

        book = self.build(chapters)

        self.assertEqual([s.title for s in book.sections], ["Copyright", "Intro", "Middle"])
        self.assertTrue(book.sections[0].is_front_matter)
        self.assertIn('chapter-number-numeric">1<', book.sections[1].html_content)
        self.assertIn('chapter-number-numeric">2<', book.sections[2].html_content)
        self.assertNotIn("chapter-number", book.sections[0].html_content)
        self.assertEqual(book.stylesheet, "css")

    def test_front_matter_does_not_advance_numbering(self) -> None:
        chapters = [
            self.chapter("Preface.md", "A few words first.", is_front_matter=True),
            self.chapter("One.md", "The story begins here."),
        ]

        book = self.build(chapters)

        self.assertIn('chapter-number-numeric">1<', book.sections[1].html_content)

    def test_resources_deduplicated_and_cover_loaded(self) -> None:
        chapters = [
            self.chapter("A.md", "One two three four.\n\n![a](art.png)"),
            self.chapter("B.md", "Five six seven eight.\n\n![b](art.png)"),
        ]

        book = self.build(chapters)

        self.assertEqual([r.name for r in book.resources], ["art.png"])
        self.assertEqual(book.resources[0].data, PNG)
        self.assertEqual(book.cover.name, "cover.png")

    def test_same_named_images_from_different_folders_both_packaged(self) -> None:
        write(os.path.join(self.book_dir, "one", "img.png"), b"first", binary=True)
        write(os.path.join(self.book_dir, "two", "img.png"), b"second", binary=True)
        chapters = [
            self.chapter(os.path.join("one", "A.md"), "One two three four.\n\n![a](img.png)", title="A"),
            self.chapter(os.path.join("two", "B.md"), "Five six seven eight.\n\n![b](img.png)", title="B"),
        ]

        book = self.build(chapters)

        self.assertEqual(sorted(r.data for r in book.resources), [b"first", b"second"])
        names = [r.name for r in book.resources]
        self.assertEqual(len(set(names)), 2)
        for section, name in zip(book.sections, names):
            self.assertIn(f"../resources/{name}", section.html_content)

    def test_missing_cover_fails_validation(self) -> None:
        chapters = [self.chapter("A.md", "Text.")]

        with self.assertRaises(ValidationError) as ctx:
            self.build(chapters, complete_metadata(cover=""))

        self.assertEqual(str(ctx.exception), "Cover image is required.")
        self.assertEqual(self.renderer.calls, [])

    def test_no_chapters_selected(self) -> None:
        chapters = [self.chapter("A.md", "Text.", include=False)]

        with self.assertRaises(ValidationError) as ctx:
            validate(chapters, complete_metadata())

        self.assertEqual(str(ctx.exception), "No chapters selected.")

    def test_empty_title_names_the_file(self) -> None:
        chapters = [self.chapter("Nameless.md", "Text.", title="  ")]

        with self.assertRaises(ChapterError) as ctx:
            self.build(chapters)

        self.assertEqual(str(ctx.exception), "Chapter title is required for file: Nameless.md")

    def test_preview_uses_placeholders_without_validation(self) -> None:
        chapters = [self.chapter("A.md", "Some preview text here.")]

        book = preview(chapters, BookMetadata({}), "css", self.renderer, self.resolver)

        self.assertEqual(book.metadata.title, "Placeholder Title")
        self.assertEqual(book.metadata.author, "Placeholder Author")
        self.assertIsNone(book.cover)
        self.assertEqual(len(book.sections), 1)

    def test_preview_allows_no_chapters(self) -> None:
        book = preview([], BookMetadata({}), "css", self.renderer, self.resolver)

        self.assertEqual(book.sections, [])


if __name__ == "__main__":
    unittest.main()
