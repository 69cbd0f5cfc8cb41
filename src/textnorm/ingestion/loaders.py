"""Source loaders that turn files into text blocks for normalization."""

from __future__ import annotations

import hashlib
from pathlib import Path

from bs4 import BeautifulSoup
from docx import Document
from pypdf import PdfReader

from textnorm.config import MAX_DOC_BYTES, MAX_PDF_PAGES
from textnorm.models import LoadReport, LoadedDocument, TextBlock


SOURCE_TYPES = {
    ".txt": "text",
    ".md": "text",
    ".html": "html",
    ".htm": "html",
    ".docx": "docx",
    ".pdf": "pdf",
}
SUPPORTED_SUFFIXES = frozenset(SOURCE_TYPES)


def _report(
    path: Path,
    source_type: str,
    bytes_total: int,
    *,
    pages_total: int | None = 1,
    pages_loaded: int = 1,
    pages_skipped_empty: int = 0,
    pages_skipped_limit: int = 0,
    skip_reason: str | None = None,
) -> LoadReport:
    return LoadReport(
        source_path=str(path),
        source_type=source_type,
        bytes_total=bytes_total,
        pages_total=pages_total,
        pages_loaded=pages_loaded,
        pages_skipped_empty=pages_skipped_empty,
        pages_skipped_limit=pages_skipped_limit,
        skip_reason=skip_reason,
    )


def load_document(
    path: Path,
    *,
    max_doc_bytes: int = MAX_DOC_BYTES,
    max_pdf_pages: int = MAX_PDF_PAGES,
) -> tuple[LoadedDocument | None, LoadReport]:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file type: {path.suffix}")

    source_type = SOURCE_TYPES[suffix]
    bytes_total = path.stat().st_size
    if bytes_total > max_doc_bytes:
        report = _report(
            path,
            source_type,
            bytes_total,
            pages_total=None,
            pages_loaded=0,
            skip_reason="file_too_large",
        )
        return None, report

    if source_type == "pdf":
        blocks, report = _load_pdf(path, max_pages=max_pdf_pages)
        if report.skip_reason:
            return None, report
    elif source_type == "docx":
        try:
            blocks = _load_docx(path)
        except Exception:
            report = _report(
                path,
                source_type,
                bytes_total,
                pages_total=None,
                pages_loaded=0,
                skip_reason="docx_parse_error",
            )
            return None, report
        report = _report(path, source_type, bytes_total)
    elif source_type == "html":
        blocks = [_load_html(path)]
        report = _report(path, source_type, bytes_total)
    else:
        blocks = [_load_text(path)]
        report = _report(path, source_type, bytes_total)

    content_hash = _hash_blocks(blocks)
    return (
        LoadedDocument(
            source_path=str(path),
            source_type=source_type,
            title=path.stem,
            blocks=blocks,
            content_hash=content_hash,
        ),
        report,
    )


def _load_pdf(
    path: Path, *, max_pages: int = MAX_PDF_PAGES
) -> tuple[list[TextBlock], LoadReport]:
    bytes_total = path.stat().st_size
    try:
        reader = PdfReader(str(path))
    except Exception:
        report = _report(
            path,
            "pdf",
            bytes_total,
            pages_total=None,
            pages_loaded=0,
            skip_reason="pdf_parse_error",
        )
        return [], report

    total_pages = len(reader.pages)
    pages_loaded = 0
    pages_skipped_empty = 0
    pages_skipped_limit = 0
    blocks: list[TextBlock] = []
    for idx, page in enumerate(reader.pages, start=1):
        if idx > max_pages:
            pages_skipped_limit = total_pages - max_pages
            break
        text = page.extract_text() or ""
        if text.strip():
            blocks.append(TextBlock(text=text, page=idx))
            pages_loaded += 1
        else:
            pages_skipped_empty += 1
    report = _report(
        path,
        "pdf",
        bytes_total,
        pages_total=total_pages,
        pages_loaded=pages_loaded,
        pages_skipped_empty=pages_skipped_empty,
        pages_skipped_limit=pages_skipped_limit,
    )
    return blocks, report


def _load_text(path: Path) -> TextBlock:
    text = path.read_text(encoding="utf-8", errors="ignore")
    return TextBlock(text=text)


def _load_docx(path: Path) -> list[TextBlock]:
    doc = Document(str(path))
    blocks: list[TextBlock] = []
    section: str | None = None
    for paragraph in doc.paragraphs:
        if not paragraph.text.strip():
            continue
        style_name = paragraph.style.name if paragraph.style is not None else ""
        if style_name.startswith("Heading"):
            section = paragraph.text.strip()
        blocks.append(TextBlock(text=paragraph.text, section=section))
    return blocks


def _load_html(path: Path) -> TextBlock:
    raw = path.read_text(encoding="utf-8", errors="ignore")
    soup = BeautifulSoup(raw, "html.parser")
    text = soup.get_text(separator=" ", strip=True)
    return TextBlock(text=text)


def _hash_blocks(blocks: list[TextBlock]) -> str:
    content = "\n".join(block.text for block in blocks)
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
