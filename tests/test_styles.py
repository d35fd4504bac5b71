import unittest

from binderlib.config import BookMetadata
from binderlib.styles import (
    CATEGORIES,
    COMPONENTS,
    STRUCTURAL_STYLESHEET,
    ComponentSelection,
    book_stylesheet,
    compose,
    components_in,
    get_theme,
    page_stylesheet,
    select_theme,
    selection_for,
)


class TestComponentSelection(unittest.TestCase):
    def test_one_component_per_category(self) -> None:
        selection = ComponentSelection(["_hr1"])

        selection.select("_hr5")

        self.assertEqual(selection.ids(), ["_hr5"])
        self.assertNotIn("_hr1", selection)

    def test_unknown_identifiers_ignored(self) -> None:
        selection = ComponentSelection(["_nope", "_indent2"])

        self.assertEqual(selection.ids(), ["_indent2"])

    def test_ids_follow_category_order(self) -> None:
        selection = ComponentSelection(["_tocCenter", "_indent2", "_dropcap1"])

        self.assertEqual(selection.ids(), ["_dropcap1", "_indent2", "_tocCenter"])

    def test_every_category_has_components(self) -> None:
        for category in CATEGORIES:
            self.assertTrue(components_in(category), category)
        self.assertEqual({c.category for c in COMPONENTS.values()}, set(CATEGORIES))


class TestCompose(unittest.TestCase):
    def test_structural_then_theme_then_components(self) -> None:
        css = compose("/* theme */", ["_indent1", "_dropcap1"])

        self.assertTrue(css.startswith(STRUCTURAL_STYLESHEET))
        theme_at = css.index("/* theme */")
        dropcap_at = css.index(COMPONENTS["_dropcap1"].css)
        indent_at = css.index(COMPONENTS["_indent1"].css)
        self.assertLess(theme_at, dropcap_at)
        self.assertLess(dropcap_at, indent_at)

    def test_same_category_twice_keeps_last(self) -> None:
        css = compose("", ["_hr1", "_hr2"])

        self.assertIn(COMPONENTS["_hr2"].css, css)
        self.assertNotIn(COMPONENTS["_hr1"].css, css)


class TestThemes(unittest.TestCase):
    def test_select_theme_resets_to_defaults(self) -> None:
        stylesheet, selection = select_theme("mono")

        theme = get_theme("mono")
        self.assertEqual(stylesheet, theme.stylesheet)
        self.assertEqual(selection.ids(), list(theme.defaults))

    def test_theme_defaults_cover_every_category(self) -> None:
        for identifier in ("base", "mono", "urban"):
            selection = get_theme(identifier).selection()
            self.assertEqual(len(selection), len(CATEGORIES), identifier)

    def test_unknown_theme_falls_back_to_base(self) -> None:
        self.assertEqual(get_theme("neon").identifier, "base")

    def test_selection_for_metadata(self) -> None:
        stored = BookMetadata({"theme": "urban", "components": ["_hr7"]})
        defaults = BookMetadata({"theme": "urban"})

        self.assertEqual(selection_for(stored).ids(), ["_hr7"])
        self.assertEqual(selection_for(defaults), get_theme("urban").selection())

    def test_book_stylesheet_uses_theme(self) -> None:
        css = book_stylesheet(BookMetadata({"theme": "mono"}))

        self.assertIn(get_theme("mono").stylesheet, css)


class TestPageStylesheet(unittest.TestCase):
    def test_page_box_from_pdf_settings(self) -> None:
        css = page_stylesheet(BookMetadata({"pdf": {"width": "6in"}}).pdf)

        self.assertIn("size: 6in 8in;", css)
        self.assertIn("margin-left: 0.875in;", css)


if __name__ == "__main__":
    unittest.main()
