from binderlib.builders.epub import EpubBuilder
from binderlib.builders.pdf import PdfBuilder

BUILDERS = {
    "epub": EpubBuilder,
    "pdf": PdfBuilder,
}

# Built when no format flag is given (PDF is opt-in with --pdf)
DEFAULT_FORMATS = ["epub"]
