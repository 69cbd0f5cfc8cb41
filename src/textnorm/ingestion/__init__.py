"""Source loading and document indexing."""

from .indexing import DocumentIndex, build_document_index, join_blocks
from .loaders import SUPPORTED_SUFFIXES, load_document

__all__ = [
    "DocumentIndex",
    "SUPPORTED_SUFFIXES",
    "build_document_index",
    "join_blocks",
    "load_document",
]
