"""Span helpers for callers that match against normalized text.

A match found in ``normalized_text`` is projected back onto the source with
:func:`to_source_span`. The source span runs from the start of the cluster that
produced the first matched codepoint to the end of the cluster that produced the
last one, so collapsed whitespace runs and decomposed/composed sequences are
recovered whole.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable

import numpy as np

from textnorm.models import NormalizationResult, SourceSpan


def _check_span(start: int, end: int, limit: int) -> None:
    if start < 0 or end > limit or start > end:
        raise ValueError(f"Invalid span [{start}, {end}) for length {limit}")


def to_source_span(result: NormalizationResult, start: int, end: int) -> SourceSpan:
    _check_span(start, end, len(result.normalized_text))
    if start == end:
        if start == len(result.normalized_text):
            position = result.source_length
        else:
            position = result.norm_to_orig[start]
        return SourceSpan(start=position, end=position)
    return SourceSpan(
        start=result.norm_to_orig[start],
        end=min(result.norm_to_orig_end[end - 1], result.source_length),
    )


def to_source_spans(
    result: NormalizationResult, spans: Iterable[tuple[int, int]]
) -> list[SourceSpan]:
    """Vectorized :func:`to_source_span` for many spans at once."""
    pairs = np.asarray(list(spans), dtype=np.int64).reshape(-1, 2)
    if pairs.size == 0:
        return []
    starts, ends = pairs[:, 0], pairs[:, 1]
    size = len(result.normalized_text)
    invalid = (starts < 0) | (ends > size) | (starts > ends)
    if np.any(invalid):
        bad = int(np.flatnonzero(invalid)[0])
        _check_span(int(starts[bad]), int(ends[bad]), size)

    # Pad both maps with source_length so empty spans at the end index safely.
    origin = np.append(
        np.asarray(result.norm_to_orig, dtype=np.int64), result.source_length
    )
    origin_end = np.append(
        np.asarray(result.norm_to_orig_end, dtype=np.int64), result.source_length
    )
    span_starts = origin[starts]
    span_ends = np.where(
        starts == ends, span_starts, origin_end[np.maximum(ends - 1, 0)]
    )
    span_ends = np.minimum(span_ends, result.source_length)
    return [
        SourceSpan(start=int(s), end=int(e))
        for s, e in zip(span_starts.tolist(), span_ends.tolist())
    ]


def build_orig_to_norm(result: NormalizationResult) -> np.ndarray:
    """For each source offset (plus the end), the first normalized index at/after it."""
    origin = np.asarray(result.norm_to_orig, dtype=np.int64)
    offsets = np.arange(result.source_length + 1, dtype=np.int64)
    return np.searchsorted(origin, offsets, side="left")


def to_normalized_span(
    result: NormalizationResult, orig_start: int, orig_end: int
) -> tuple[int, int]:
    _check_span(orig_start, orig_end, result.source_length)
    origin = np.asarray(result.norm_to_orig, dtype=np.int64)
    start = int(np.searchsorted(origin, orig_start, side="left"))
    end = int(np.searchsorted(origin, orig_end, side="left"))
    return start, max(start, end)


def is_word_char(ch: str) -> bool:
    if len(ch) != 1:
        return False
    return unicodedata.category(ch)[0] in {"L", "N"}


def is_whole_word(text: str, start: int, end: int) -> bool:
    before_ok = start <= 0 or not is_word_char(text[start - 1])
    after_ok = end >= len(text) or not is_word_char(text[end])
    return before_ok and after_ok
