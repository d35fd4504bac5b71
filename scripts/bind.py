#!/usr/bin/env python3
"""
Command-line entry point for markdown-binder.

Binds a folder of markdown chapters into a themed EPUB (and optionally a
PDF), and edits the chapter list and metadata stored in binder-save.yaml.

Usage:
    python bind.py build mybook --epub --pdf     Build EPUB + PDF
    python bind.py mybook                        Same as "build mybook"
    python bind.py preview mybook --scheme dark  Placeholder-metadata preview
    python bind.py chapters mybook --strip-numbers --number-titles
    python bind.py meta mybook --set author="Jane Doe" --theme mono
    python bind.py matter mybook "Copyright"     Create a matter page
    python bind.py validate "out/My Book.epub"   Run epubcheck

Requires: pandoc, PyYAML, beautifulsoup4, Jinja2, EbookLib, num2words
Optional: weasyprint (PDF), java + epubcheck (validation)
"""

import os
import sys
import argparse
import shutil
import traceback

import yaml

# Ensure binderlib is importable from the scripts/ directory
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from binderlib import chapters as ops
from binderlib.assemble import ChapterError
from binderlib.builders import BUILDERS, DEFAULT_FORMATS
from binderlib.builders.base import safe_filename
from binderlib.epubcheck import validate_epub
from binderlib.matter import MATTERS, create_matter_file
from binderlib.preview import PreviewManager
from binderlib.render import PandocRenderer, RenderError
from binderlib.resolve import find_book_dir, find_markdown_files
from binderlib.state import load_state, save_state
from binderlib.styles import COMPONENTS, PREVIEW_SCHEMES, THEMES, get_theme, selection_for


ERROR_LOG = "binder_error.log"


# ── Resolve book ───────────────────────────────────────────────────────


def resolve_book(identifier):
    """Find the book folder and load its saved state. Exits on failure."""
    book_dir = find_book_dir(identifier)

    if not book_dir:
        print(f"Error: Could not find book folder '{identifier}'")
        print(f"  Searched in: {os.getcwd()}")
        sys.exit(1)

    metadata, chapters = load_state(book_dir)
    return book_dir, metadata, chapters


def persist(args, book_dir, metadata, chapters):
    if getattr(args, "no_persist", False):
        return
    path = save_state(book_dir, metadata, chapters)
    if getattr(args, "verbose", False):
        print(f"  Saved {path}")


# ── Build command ──────────────────────────────────────────────────────


def cmd_build(args):
    """Build one or more output formats."""
    book_dir, metadata, chapters = resolve_book(args.book)

    formats = [fmt for fmt in BUILDERS if getattr(args, fmt, False)]
    if not formats:
        formats = list(DEFAULT_FORMATS)

    metadata.summary()
    included = [c for c in chapters if c.include]
    print(f"  Chapters: {len(included)} of {len(chapters)} included")

    output_dir = args.output_dir or os.path.dirname(book_dir)
    os.makedirs(output_dir, exist_ok=True)
    print(f"  Output: {output_dir}")

    persist(args, book_dir, metadata, chapters)

    results = {}
    for fmt in formats:
        builder_cls = BUILDERS[fmt]

        kwargs = {
            "verbose": args.verbose,
            "no_validate": args.no_validate,
            "keep_html": args.keep_html,
        }

        builder = builder_cls(
            metadata=metadata,
            chapters=chapters,
            book_dir=book_dir,
            output_dir=output_dir,
            vault_dir=args.vault,
            **kwargs,
        )
        results[fmt] = builder.build()

    # Summary
    print(f"\n{'─' * 60}")
    failed = [fmt for fmt, ok in results.items() if not ok]
    if failed:
        print(f"  Done with errors: {', '.join(failed)} failed")
        sys.exit(1)
    else:
        print(f"  Done. {len(results)} format(s) built successfully.")


# ── Preview command ────────────────────────────────────────────────────


def cmd_preview(args):
    """Build a placeholder-metadata preview EPUB."""
    book_dir, metadata, chapters = resolve_book(args.book)

    output = args.output or os.path.join(
        os.path.dirname(book_dir),
        f"{safe_filename(metadata.title)} (preview).epub",
    )

    manager = PreviewManager(book_dir, vault_dir=args.vault, renderer=PandocRenderer())
    try:
        session = manager.refresh(chapters, metadata, scheme=args.scheme)
        shutil.copyfile(session.path, output)
    except (ChapterError, RenderError) as e:
        print(f"  ✗ {e}")
        sys.exit(1)
    finally:
        manager.close()

    print(f"  ✓ Preview: {output}")


# ── Chapters command ───────────────────────────────────────────────────


# flag → bulk operation, applied in this order
BULK_OPERATIONS = [
    ("restore_order", None),
    ("select_all", ops.select_all),
    ("select_none", ops.select_none),
    ("restore_titles", ops.restore_titles),
    ("strip_numbers", ops.strip_numbers),
    ("strip_first_word", ops.strip_first_word),
    ("number_titles", ops.number_titles),
    ("sort", ops.sort_by_title),
    ("reverse", ops.reverse),
]

# flag → (chapter flag, value)
TOGGLES = {
    "include": ("include", True),
    "exclude": ("include", False),
    "front": ("is_front_matter", True),
    "back": ("is_back_matter", True),
    "normal": (None, None),
    "hide": ("exclude_from_contents", True),
    "show": ("exclude_from_contents", False),
}


def cmd_chapters(args):
    """List or edit the chapter list."""
    book_dir, metadata, chapters = resolve_book(args.book)
    edited = False

    for flag, operation in BULK_OPERATIONS:
        if not getattr(args, flag, False):
            continue
        if flag == "restore_order":
            chapters = ops.restore_order(chapters, find_markdown_files(book_dir))
        else:
            chapters = operation(chapters)
        edited = True

    for flag, (prop, value) in TOGGLES.items():
        for number in getattr(args, flag) or []:
            index = _index(number, chapters)
            if prop is None:
                chapters = ops.toggle(chapters, index, "is_front_matter", False)
                chapters = ops.toggle(chapters, index, "is_back_matter", False)
            else:
                chapters = ops.toggle(chapters, index, prop, value)
            edited = True

    for number, title in args.rename or []:
        chapters = ops.rename(chapters, _index(number, chapters), title)
        edited = True

    if args.move:
        source, target = args.move
        chapters = ops.reorder(chapters, _index(source, chapters), _index(target, chapters))
        edited = True

    chapters = ops.rearrange(chapters)
    if edited:
        persist(args, book_dir, metadata, chapters)

    print_chapters(chapters)


def _index(number, chapters):
    """1-based chapter number from the CLI → list index. Exits if out of range."""
    try:
        index = int(number) - 1
    except ValueError:
        index = -1
    if not 0 <= index < len(chapters):
        print(f"Error: No chapter {number} (1-{len(chapters)})")
        sys.exit(1)
    return index


def print_chapters(chapters):
    print()
    for i, chapter in enumerate(chapters, start=1):
        marks = "".join([
            "✓" if chapter.include else " ",
            "F" if chapter.is_front_matter else ("B" if chapter.is_back_matter else " "),
            "-" if chapter.exclude_from_contents else " ",
        ])
        print(f"  {i:3d}  [{marks}]  {chapter.title or '(no title)'}  ({chapter.basename})")
    print("\n  [✓ included, F front matter, B back matter, - hidden from contents]")


# ── Meta command ───────────────────────────────────────────────────────


def cmd_meta(args):
    """Show or edit book metadata and appearance."""
    book_dir, metadata, chapters = resolve_book(args.book)
    edited = False

    for assignment in args.set or []:
        key, sep, value = assignment.partition("=")
        if not sep or not key.strip():
            print(f"Error: Expected KEY=VALUE, got '{assignment}'")
            sys.exit(1)
        metadata.set(key.strip(), _parse_value(value))
        edited = True

    if args.theme:
        theme = get_theme(args.theme)
        if theme.identifier != args.theme:
            print(f"  Warning: Unknown theme '{args.theme}', using '{theme.identifier}'")
        metadata.set("theme", theme.identifier)
        metadata.set("components", list(theme.defaults))
        edited = True

    if args.component:
        selection = selection_for(metadata)
        for identifier in args.component:
            if identifier not in COMPONENTS:
                print(f"  Warning: Unknown component '{identifier}'")
                continue
            selection.select(identifier)
        metadata.set("components", selection.ids())
        edited = True

    if edited:
        persist(args, book_dir, metadata, chapters)

    metadata.summary()
    missing = metadata.missing_requirement()
    if missing:
        print(f"  Warning: {missing}")

    if args.list_styles:
        print("\n  Themes:")
        for identifier, theme in THEMES.items():
            print(f"    {identifier:10s} {theme.name}")
        print("\n  Components:")
        active = selection_for(metadata)
        for identifier, component in COMPONENTS.items():
            mark = "*" if identifier in active else " "
            print(f"   {mark} {identifier:12s} {component.category:18s} {component.name}")


def _parse_value(value):
    """YAML scalar parsing so `sequence=2` and `show_contents=false` keep their types."""
    try:
        return yaml.safe_load(value) if value.strip() else ""
    except yaml.YAMLError:
        return value


# ── Matter command ─────────────────────────────────────────────────────


def cmd_matter(args):
    """Create a front/back matter page in the book folder."""
    book_dir = find_book_dir(args.book)
    if not book_dir:
        print(f"Error: Could not find book folder '{args.book}'")
        sys.exit(1)

    if not args.name:
        print("\n  Front matter:")
        for title, matter in MATTERS.items():
            if matter.placement == "front":
                print(f"    {title}")
        print("\n  Back matter:")
        for title, matter in MATTERS.items():
            if matter.placement == "back":
                print(f"    {title}")
        return

    path = create_matter_file(book_dir, args.name)
    if path is None:
        sys.exit(1)
    print(f"  ✓ Created {path}")


# ── Validate command ───────────────────────────────────────────────────


def cmd_validate(args):
    """Run epubcheck on an existing epub."""
    epub_file = args.epub

    if not os.path.exists(epub_file):
        print(f"  Error: {epub_file} not found. Build it first.")
        sys.exit(1)

    print(f"\n{'─' * 60}")
    print(f"  Validating: {epub_file}")
    print(f"{'─' * 60}")

    valid = validate_epub(epub_file, verbose=True)
    sys.exit(0 if valid else 1)


# ── Argument Parser ────────────────────────────────────────────────────


def build_parser():
    parser = argparse.ArgumentParser(
        description="Bind markdown chapters into a themed EPUB",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
examples:
  %(prog)s build mybook                   Build the EPUB
  %(prog)s build mybook --epub --pdf      Build EPUB and PDF
  %(prog)s preview mybook --scheme sepia  Preview with placeholder metadata
  %(prog)s chapters mybook --reverse      Reverse the chapter order
  %(prog)s meta mybook --theme urban      Switch theme
  %(prog)s matter mybook "Title Page"     Create a title page
  %(prog)s validate "My Book.epub"        Run epubcheck
        """,
    )

    sub = parser.add_subparsers(dest="command")

    # ── build (default when no subcommand) ─────────────────
    build_p = sub.add_parser("build", help="Build output formats (default)")
    _add_book_arg(build_p)
    _add_build_args(build_p)

    # ── preview ────────────────────────────────────────────
    preview_p = sub.add_parser("preview", help="Build a preview EPUB")
    _add_book_arg(preview_p)
    preview_p.add_argument("--output", help="Preview file path")
    preview_p.add_argument("--vault", help="Root for vault-relative image paths")
    preview_p.add_argument(
        "--scheme", choices=sorted(PREVIEW_SCHEMES), default="light", help="Colour scheme"
    )

    # ── chapters ───────────────────────────────────────────
    chapters_p = sub.add_parser("chapters", help="List or edit chapters")
    _add_book_arg(chapters_p)
    _add_chapter_args(chapters_p)

    # ── meta ───────────────────────────────────────────────
    meta_p = sub.add_parser("meta", help="Show or edit metadata and styling")
    _add_book_arg(meta_p)
    meta_p.add_argument("--set", action="append", metavar="KEY=VALUE", help="Set a metadata field")
    meta_p.add_argument("--theme", help="Select a theme (resets components)")
    meta_p.add_argument("--component", action="append", metavar="ID", help="Select a style component")
    meta_p.add_argument("--list-styles", action="store_true", help="List themes and components")
    meta_p.add_argument("--no-persist", action="store_true", help="Do not save changes")

    # ── matter ─────────────────────────────────────────────
    matter_p = sub.add_parser("matter", help="Create a front/back matter page")
    _add_book_arg(matter_p)
    matter_p.add_argument("name", nargs="?", help="Matter page name (omit to list)")

    # ── validate ───────────────────────────────────────────
    val_p = sub.add_parser("validate", help="Run epubcheck on an existing epub")
    val_p.add_argument("epub", help="Path to the .epub file")

    return parser


def _add_book_arg(parser):
    parser.add_argument("book", help="Book folder path")


def _add_build_args(parser):
    """Add format flags and build options to a parser."""
    fmt = parser.add_argument_group("output formats")
    fmt.add_argument("--epub", action="store_true", help="Build EPUB")
    fmt.add_argument("--pdf", action="store_true", help="Build PDF (requires weasyprint)")

    opts = parser.add_argument_group("options")
    opts.add_argument("--output-dir", help="Override output directory")
    opts.add_argument("--vault", help="Root for vault-relative image paths")
    opts.add_argument("--verbose", "-v", action="store_true")
    opts.add_argument(
        "--no-validate", action="store_true", help="Skip epubcheck after epub build"
    )
    opts.add_argument(
        "--keep-html",
        action="store_true",
        help="Keep intermediate HTML for PDF debugging",
    )
    opts.add_argument("--no-persist", action="store_true", help="Do not write binder-save.yaml")


def _add_chapter_args(parser):
    bulk = parser.add_argument_group("bulk edits")
    bulk.add_argument("--select-all", action="store_true", help="Include every chapter")
    bulk.add_argument("--select-none", action="store_true", help="Exclude every chapter")
    bulk.add_argument("--strip-numbers", action="store_true", help="Remove leading numbers from titles")
    bulk.add_argument("--strip-first-word", action="store_true", help="Remove the first word of titles")
    bulk.add_argument("--restore-titles", action="store_true", help="Titles back to file names")
    bulk.add_argument("--number-titles", action="store_true", help="Title chapters 1, 2, 3, ...")
    bulk.add_argument("--sort", action="store_true", help="Sort by title")
    bulk.add_argument("--reverse", action="store_true", help="Reverse the order")
    bulk.add_argument("--restore-order", action="store_true", help="Back to folder order")

    edit = parser.add_argument_group("single-chapter edits (chapters numbered from 1)")
    edit.add_argument("--include", nargs="+", metavar="N")
    edit.add_argument("--exclude", nargs="+", metavar="N")
    edit.add_argument("--front", nargs="+", metavar="N", help="Mark as front matter")
    edit.add_argument("--back", nargs="+", metavar="N", help="Mark as back matter")
    edit.add_argument("--normal", nargs="+", metavar="N", help="Clear front/back matter")
    edit.add_argument("--hide", nargs="+", metavar="N", help="Exclude from the contents page")
    edit.add_argument("--show", nargs="+", metavar="N", help="List on the contents page")
    edit.add_argument("--rename", nargs=2, action="append", metavar=("N", "TITLE"))
    edit.add_argument("--move", nargs=2, metavar=("FROM", "TO"))
    parser.add_argument("--no-persist", action="store_true", help="Do not save changes")


# ── Main ───────────────────────────────────────────────────────────────


def main():
    parser = build_parser()

    # Allow bare "bind.py mybook --epub" without the "build" subcommand
    known_commands = {"build", "preview", "chapters", "meta", "matter", "validate"}
    if (
        len(sys.argv) > 1
        and sys.argv[1] not in known_commands
        and not sys.argv[1].startswith("-")
    ):
        args = parser.parse_args(["build"] + sys.argv[1:])
    else:
        args = parser.parse_args()

    dispatch = {
        "build": cmd_build,
        "preview": cmd_preview,
        "chapters": cmd_chapters,
        "meta": cmd_meta,
        "matter": cmd_matter,
        "validate": cmd_validate,
    }

    handler = dispatch.get(args.command)
    if handler:
        handler(args)
    else:
        parser.print_help()


def run():
    try:
        main()
    except KeyboardInterrupt:
        print("\nCancelled.")
        sys.exit(1)
    except Exception as e:
        with open(ERROR_LOG, "w") as f:
            traceback.print_exc(file=f)
        print(f"\nUnexpected error: {e}")
        print(f"Full traceback written to {ERROR_LOG}")
        sys.exit(1)


if __name__ == "__main__":
    run()
