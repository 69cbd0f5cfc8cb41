from __future__ import annotations

import logging

import pytest

from textnorm.ingestion import build_document_index, join_blocks
from textnorm.models import BlockPosition, TextBlock
from textnorm.options import DOCUMENT_SEARCH_OPTIONS


def test_join_blocks_inserts_single_separators() -> None:
    blocks = [
        TextBlock(text="Uno"),
        TextBlock(text=""),
        TextBlock(text="Dos\n"),
        TextBlock(text="Tres"),
    ]
    raw, offsets = join_blocks(blocks)
    assert raw == "Uno\nDos\nTres"
    assert offsets == (0, 3, 4, 8)


def test_document_index_locates_blocks() -> None:
    blocks = [
        TextBlock(text="Primera cl\u00e1usula", page=1),
        TextBlock(text="Segunda\u00a0 cl\u00e1usula", page=2, section="Anexo"),
    ]
    index = build_document_index(blocks, DOCUMENT_SEARCH_OPTIONS)
    assert index.normalized_text == "Primera cl\u00e1usula Segunda cl\u00e1usula"

    second = index.normalized_text.index("Segunda")
    assert index.locate(second) == BlockPosition(
        block_index=1, offset=0, page=2, section="Anexo"
    )
    last_word = index.normalized_text.rindex("cl\u00e1usula")
    assert index.locate(last_word).offset == blocks[1].text.index("cl\u00e1usula")
    # The separator newline resolves to the end of the first block.
    assert index.locate(second - 1) == BlockPosition(block_index=0, offset=16, page=1)
    assert index.locate(len(index.normalized_text)) == BlockPosition(
        block_index=1, offset=len(blocks[1].text), page=2, section="Anexo"
    )


def test_document_index_matches_across_paragraphs() -> None:
    blocks = [TextBlock(text="hacer"), TextBlock(text="lugar")]
    index = build_document_index(blocks, DOCUMENT_SEARCH_OPTIONS)
    assert "hacer lugar" in index.normalized_text


def test_locate_rejects_out_of_range_offsets() -> None:
    index = build_document_index([TextBlock(text="abc")], DOCUMENT_SEARCH_OPTIONS)
    with pytest.raises(ValueError):
        index.locate(-1)
    with pytest.raises(ValueError):
        index.locate(4)
    empty = build_document_index([], DOCUMENT_SEARCH_OPTIONS)
    with pytest.raises(ValueError):
        empty.locate(0)


def test_document_index_logs_event(caplog) -> None:
    caplog.set_level(logging.INFO, logger="textnorm")
    build_document_index([TextBlock(text="abc")], DOCUMENT_SEARCH_OPTIONS)
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "document_indexed" in events


def test_separator_after_empty_block_resolves_to_text_block() -> None:
    blocks = [
        TextBlock(text="Uno", page=1),
        TextBlock(text="", page=2),
        TextBlock(text="Dos", page=3),
    ]
    index = build_document_index(blocks, DOCUMENT_SEARCH_OPTIONS)
    assert index.normalized_text == "Uno Dos"
    assert index.locate(3) == BlockPosition(block_index=0, offset=3, page=1)
    assert index.locate(4) == BlockPosition(block_index=2, offset=0, page=3)


def test_trailing_empty_block_is_skipped_at_end() -> None:
    blocks = [TextBlock(text="Uno", page=1), TextBlock(text="", page=2)]
    index = build_document_index(blocks, DOCUMENT_SEARCH_OPTIONS)
    assert index.locate(len(index.normalized_text)) == BlockPosition(
        block_index=0, offset=3, page=1
    )
