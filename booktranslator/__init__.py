"""Top-level package for Booktranslator.

This package translates text-based PDF books chapter by chapter through an LLM
provider, splitting long chapters into overlapping chunks and stitching the
translated chunks back into continuous prose. The main orchestration entry point
is `BookTranslatorPipeline`.
"""

from .pipeline import BookTranslatorPipeline

__all__ = ["BookTranslatorPipeline", "__version__"]

__version__ = "0.1.0"
