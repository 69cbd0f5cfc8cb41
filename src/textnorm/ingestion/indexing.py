"""Normalized index over a multi-block document.

Blocks (paragraphs, pages) are joined into one source string with a newline
between consecutive non-empty blocks, so a phrase split across two paragraphs
still matches once whitespace is collapsed. Offsets in the normalized text are
resolved back to ``(block, offset)`` through the engine's offset map.
"""

from __future__ import annotations

import time
from bisect import bisect_right
from dataclasses import dataclass
from typing import Sequence

from textnorm.engine import normalize_and_build_maps
from textnorm.engine.pipeline import OptionsLike
from textnorm.models import BlockPosition, NormalizationResult, TextBlock
from textnorm.options import search_options
from textnorm.telemetry import configure_logging, log_event

BLOCK_SEPARATOR = "\n"


@dataclass(frozen=True)
class DocumentIndex:
    raw_text: str
    result: NormalizationResult
    blocks: tuple[TextBlock, ...]
    block_offsets: tuple[int, ...]

    @property
    def normalized_text(self) -> str:
        return self.result.normalized_text

    def locate(self, norm_offset: int) -> BlockPosition:
        """Resolve a normalized offset to the block and in-block offset it came from.

        ``norm_offset == len(normalized_text)`` resolves to the end of the last
        block with text. A separator newline resolves to the end of the block
        before it, skipping empty blocks in between.
        """
        size = len(self.result.normalized_text)
        if not self.blocks or norm_offset < 0 or norm_offset > size:
            raise ValueError(f"Offset {norm_offset} outside normalized text of {size}")
        if norm_offset == size:
            origin = len(self.raw_text)
        else:
            origin = self.result.norm_to_orig[norm_offset]
        # Empty blocks share an offset with the separator after them; skip them.
        filled = [idx for idx, block in enumerate(self.blocks) if block.text]
        filled_offsets = [self.block_offsets[idx] for idx in filled]
        position = bisect_right(filled_offsets, origin) - 1
        block_index = filled[position] if position >= 0 else 0
        block = self.blocks[block_index]
        offset = min(origin - self.block_offsets[block_index], len(block.text))
        return BlockPosition(
            block_index=block_index,
            offset=offset,
            page=block.page,
            section=block.section,
        )


def join_blocks(blocks: Sequence[TextBlock]) -> tuple[str, tuple[int, ...]]:
    parts: list[str] = []
    offsets: list[int] = []
    cursor = 0
    previous_had_text = False
    for block in blocks:
        if previous_had_text and block.text and not parts[-1].endswith(BLOCK_SEPARATOR):
            parts.append(BLOCK_SEPARATOR)
            cursor += len(BLOCK_SEPARATOR)
        offsets.append(cursor)
        if block.text:
            parts.append(block.text)
            cursor += len(block.text)
            previous_had_text = True
    return "".join(parts), tuple(offsets)


def build_document_index(
    blocks: Sequence[TextBlock], options: OptionsLike = None
) -> DocumentIndex:
    logger = configure_logging()
    start = time.perf_counter()
    resolved = search_options() if options is None else options
    raw_text, offsets = join_blocks(blocks)
    result = normalize_and_build_maps(raw_text, resolved)
    latency_ms = (time.perf_counter() - start) * 1000
    log_event(
        logger,
        "document_indexed",
        blocks=len(blocks),
        source_length=result.source_length,
        normalized_length=len(result.normalized_text),
        latency_ms=latency_ms,
    )
    return DocumentIndex(
        raw_text=raw_text,
        result=result,
        blocks=tuple(blocks),
        block_offsets=offsets,
    )
