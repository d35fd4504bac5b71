"""
binderlib — markdown chapters to themed EPUB / PDF.

Public API:
    from binderlib.state import load_state, save_state
    from binderlib.assemble import assemble, preview
    from binderlib.package import EpubPackager
    from binderlib.builders import BUILDERS, DEFAULT_FORMATS
    from binderlib.preview import PreviewManager
    from binderlib.epubcheck import validate_epub
"""
