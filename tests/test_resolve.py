import os
import unittest
from tempfile import TemporaryDirectory

from binderlib.resolve import (
    default_chapters,
    find_book_dir,
    find_markdown_files,
    natural_sort_key,
)
from tests.helpers import write


class TestResolve(unittest.TestCase):
    def test_natural_sort_key(self) -> None:
        names = ["Chapter 10", "chapter 2", "Chapter 1"]

        self.assertEqual(sorted(names, key=natural_sort_key), ["Chapter 1", "chapter 2", "Chapter 10"])

    def test_markdown_files_recursive_and_sorted(self) -> None:
        with TemporaryDirectory() as book_dir:
            write(os.path.join(book_dir, "part two", "10 Late.md"))
            write(os.path.join(book_dir, "2 Early.md"))
            write(os.path.join(book_dir, "notes.txt"))
            write(os.path.join(book_dir, "binder-temp", "cached.md"))

            names = [os.path.basename(p) for p in find_markdown_files(book_dir)]

            self.assertEqual(names, ["2 Early.md", "10 Late.md"])

    def test_default_chapters_flag_matter_files(self) -> None:
        with TemporaryDirectory() as book_dir:
            write(os.path.join(book_dir, "_binder About the Author.md"))
            write(os.path.join(book_dir, "_binder Title Page.md"))
            write(os.path.join(book_dir, "07 Seven.md"))

            chapters = {c.title: c for c in default_chapters(book_dir)}

            self.assertTrue(chapters["_binder About the Author"].is_back_matter)
            self.assertTrue(chapters["_binder Title Page"].is_front_matter)
            self.assertFalse(chapters["Seven"].is_front_matter)
            self.assertFalse(chapters["Seven"].is_back_matter)

    def test_find_book_dir(self) -> None:
        with TemporaryDirectory() as root:
            os.makedirs(os.path.join(root, "novel"))

            self.assertEqual(find_book_dir("novel", root), os.path.join(os.path.abspath(root), "novel"))
            self.assertIsNone(find_book_dir("missing", root))


if __name__ == "__main__":
    unittest.main()
