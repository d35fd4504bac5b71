"""
Preview builds.

A preview is the same book pipeline run with placeholder metadata and no
validation, packaged into a throwaway EPUB. Only one preview is live at a
time: refreshing tears the previous session down first.

    manager = PreviewManager(book_dir)
    session = manager.refresh(chapters, metadata, scheme="dark")
    open_reader(session.path)
    manager.close()
"""

import os
import shutil
import tempfile

from binderlib import assemble
from binderlib.images import ImageResolver
from binderlib.package import EpubPackager
from binderlib.render import PandocRenderer
from binderlib.styles import book_stylesheet, preview_scheme_stylesheet


PREVIEW_FILE_NAME = "preview.epub"


class PreviewSession:
    """One packaged preview and the temporary files behind it."""

    def __init__(self, book, data, temp_dir):
        self.book = book
        self.data = data
        self.temp_dir = temp_dir
        self.path = os.path.join(temp_dir, PREVIEW_FILE_NAME)
        self.closed = False
        self._close_callbacks = []

        with open(self.path, "wb") as f:
            f.write(data)

    def on_close(self, callback):
        """Register a callable run when the session closes (e.g. a reader view)."""
        self._close_callbacks.append(callback)

    def close(self):
        if self.closed:
            return
        self.closed = True
        callbacks, self._close_callbacks = self._close_callbacks, []
        try:
            for callback in callbacks:
                callback()
        finally:
            shutil.rmtree(self.temp_dir, ignore_errors=True)


class PreviewManager:
    """Owns the live preview session for one book folder."""

    def __init__(self, book_dir, vault_dir=None, renderer=None):
        self.book_dir = book_dir
        self.vault_dir = vault_dir or book_dir
        self.renderer = renderer or PandocRenderer()
        self.session = None

    def refresh(self, chapters, metadata, scheme="light"):
        """Close the current preview, then build and return a new one."""
        self.close()

        temp_dir = tempfile.mkdtemp(prefix="binder-preview-")
        resolver = ImageResolver(self.vault_dir, os.path.join(temp_dir, "images"))
        stylesheet = book_stylesheet(metadata) + preview_scheme_stylesheet(scheme)

        try:
            book = assemble.preview(chapters, metadata, stylesheet, self.renderer, resolver)
            data = EpubPackager().package(book)
            self.session = PreviewSession(book, data, temp_dir)
        except Exception:
            shutil.rmtree(temp_dir, ignore_errors=True)
            raise
        return self.session

    def close(self):
        if self.session is not None:
            self.session.close()
            self.session = None
