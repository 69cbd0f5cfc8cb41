"""Shared data models for textnorm."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class MappedText:
    """Text plus, per codepoint, the source cluster ``[starts[i], ends[i])``."""

    text: str
    starts: tuple[int, ...]
    ends: tuple[int, ...]

    @classmethod
    def from_source(cls, text: str) -> MappedText:
        size = len(text)
        return cls(text=text, starts=tuple(range(size)), ends=tuple(range(1, size + 1)))


@dataclass(frozen=True)
class NormalizationResult:
    normalized_text: str
    norm_to_orig: tuple[int, ...]
    norm_to_orig_end: tuple[int, ...]
    source_length: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "normalized_text": self.normalized_text,
            "norm_to_orig": list(self.norm_to_orig),
            "norm_to_orig_end": list(self.norm_to_orig_end),
            "source_length": self.source_length,
        }


@dataclass(frozen=True)
class SourceSpan:
    start: int
    end: int


@dataclass(frozen=True)
class TextBlock:
    text: str
    page: int | None = None
    section: str | None = None


@dataclass(frozen=True)
class LoadedDocument:
    source_path: str
    source_type: str
    title: str
    blocks: list[TextBlock]
    content_hash: str


@dataclass(frozen=True)
class LoadReport:
    source_path: str
    source_type: str | None
    bytes_total: int
    pages_total: int | None
    pages_loaded: int
    pages_skipped_empty: int
    pages_skipped_limit: int
    skip_reason: str | None


@dataclass(frozen=True)
class BlockPosition:
    block_index: int
    offset: int
    page: int | None = None
    section: str | None = None
