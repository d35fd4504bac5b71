"""
EPUB builder.

Pipeline: assemble sections → ebooklib package → epubcheck validation.
"""

from binderlib.builders.base import BaseBuilder
from binderlib.epubcheck import validate_epub
from binderlib.package import EpubPackager


class EpubBuilder(BaseBuilder):
    format_name = "EPUB"
    extension = ".epub"

    def build(self):
        self.header()

        skip_validate = self.kwargs.get("no_validate", False)

        book = self.assemble_book()
        if book is None:
            return False

        if book.cover is not None:
            self.log(f"  Cover: {book.cover.name}")

        try:
            EpubPackager().write(book, self.output_file)
        except OSError as e:
            print(f"  ✗ Could not write {self.output_file}: {e}")
            return False

        print(f"  ✓ {self.output_file}")
        self.resolver.cleanup()

        # ── Validate ───────────────────────────────────────
        if not skip_validate:
            validate_epub(self.output_file, verbose=self.verbose)

        return True
