import unittest

from binderlib import chapters as ops
from binderlib.chapters import NORMAL, classify
from binderlib.models import Chapter


def chapter(title, **flags):
    return Chapter(title=title, source=f"/book/{title}.md", **flags)


class TestRearrange(unittest.TestCase):
    def test_front_normal_back_stable(self) -> None:
        items = [
            chapter("b1", is_back_matter=True),
            chapter("n1"),
            chapter("f1", is_front_matter=True),
            chapter("n2"),
            chapter("b2", is_back_matter=True),
            chapter("f2", is_front_matter=True),
        ]

        ordered = ops.rearrange(items)

        self.assertEqual([c.title for c in ordered], ["f1", "f2", "n1", "n2", "b1", "b2"])

    def test_idempotent(self) -> None:
        items = [chapter("b", is_back_matter=True), chapter("n"), chapter("f", is_front_matter=True)]

        once = ops.rearrange(items)

        self.assertEqual(ops.rearrange(once), once)

    def test_both_flags_counted_once_as_front(self) -> None:
        both = chapter("x", is_front_matter=True, is_back_matter=True)

        self.assertEqual(ops.rearrange([chapter("n"), both]), [both, chapter("n")])


class TestClassify(unittest.TestCase):
    def test_matter_title(self) -> None:
        kind = classify(chapter("_binder Copyright", is_front_matter=True))

        self.assertTrue(kind.is_matter)
        self.assertEqual(kind.matter.title, "Copyright")

    def test_unknown_matter_is_normal(self) -> None:
        self.assertIs(classify(chapter("_binder Glossary")), NORMAL)
        self.assertIs(classify(chapter("Copyright")), NORMAL)


class TestEdits(unittest.TestCase):
    def test_toggle_front_clears_back(self) -> None:
        items = [chapter("a", is_back_matter=True)]

        result = ops.toggle(items, 0, "is_front_matter", True)

        self.assertTrue(result[0].is_front_matter)
        self.assertFalse(result[0].is_back_matter)
        self.assertTrue(items[0].is_back_matter)

    def test_toggle_unknown_flag(self) -> None:
        with self.assertRaises(ValueError):
            ops.toggle([chapter("a")], 0, "title", True)

    def test_reorder(self) -> None:
        items = [chapter("a"), chapter("b"), chapter("c")]

        self.assertEqual([c.title for c in ops.reorder(items, 0, 2)], ["b", "c", "a"])

    def test_title_operations(self) -> None:
        items = [chapter("12 The Storm"), chapter("Chapter Twelve")]

        self.assertEqual([c.title for c in ops.strip_numbers(items)], ["The Storm", "Chapter Twelve"])
        self.assertEqual([c.title for c in ops.strip_first_word(items)], ["The Storm", "Twelve"])
        renamed = ops.rename(items, 0, "Anything")
        self.assertEqual(ops.restore_titles(renamed)[0].title, "12 The Storm")

    def test_number_titles_skips_matter_and_excluded(self) -> None:
        items = [
            chapter("Preface", is_front_matter=True),
            chapter("a"),
            chapter("skip", include=False),
            chapter("b"),
            chapter("Afterword", is_back_matter=True),
        ]

        titles = [c.title for c in ops.number_titles(items)]

        self.assertEqual(titles, ["Preface", "1", "skip", "2", "Afterword"])

    def test_selection_and_ordering(self) -> None:
        items = [chapter("10"), chapter("2"), chapter("1")]

        self.assertTrue(all(not c.include for c in ops.select_none(items)))
        self.assertTrue(all(c.include for c in ops.select_all(ops.select_none(items))))
        self.assertEqual([c.title for c in ops.sort_by_title(items)], ["1", "2", "10"])
        self.assertEqual([c.title for c in ops.reverse(items)], ["1", "2", "10"])

    def test_restore_order(self) -> None:
        items = [chapter("b"), chapter("gone"), chapter("a")]
        files = ["/book/a.md", "/book/b.md"]

        self.assertEqual([c.title for c in ops.restore_order(items, files)], ["a", "b", "gone"])


if __name__ == "__main__":
    unittest.main()
