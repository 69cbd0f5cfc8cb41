"""Text normalization with offset maps back to the source text."""

from textnorm.engine import normalize_and_build_maps, normalize_query
from textnorm.models import NormalizationResult, SourceSpan
from textnorm.options import (
    DOCUMENT_SEARCH_OPTIONS,
    NO_OP_OPTIONS,
    ConfigurationError,
    NormalizationOptions,
    UnicodeForm,
    search_options,
)
from textnorm.spans import (
    build_orig_to_norm,
    is_whole_word,
    to_normalized_span,
    to_source_span,
    to_source_spans,
)

__all__ = [
    "DOCUMENT_SEARCH_OPTIONS",
    "NO_OP_OPTIONS",
    "ConfigurationError",
    "NormalizationOptions",
    "NormalizationResult",
    "SourceSpan",
    "UnicodeForm",
    "build_orig_to_norm",
    "is_whole_word",
    "normalize_and_build_maps",
    "normalize_query",
    "search_options",
    "to_normalized_span",
    "to_source_span",
    "to_source_spans",
]
