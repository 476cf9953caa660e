"""Text segmentation and reassembly components.

This package provides sentence boundary lookup, overlapping chunk splitting,
chunk-translation stitching, and chapter range selection.
"""

from .boundaries import SentenceBoundaryLocator
from .chunking import ChunkSplitter
from .stitching import ChunkStitcher

__all__ = ["SentenceBoundaryLocator", "ChunkSplitter", "ChunkStitcher"]
