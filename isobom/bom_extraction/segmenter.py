"""Split a drawing document into page units the model can take as inline parts."""
from __future__ import annotations

import asyncio
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF
from google.genai import types

from isobom.config import MAX_PDF_PAGES
from isobom.bom_extraction.errors import DocumentUnreadable, PageLimitExceeded, UnsupportedMediaKind

PDF_MIME = "application/pdf"


@dataclass(frozen=True)
class PageUnit:
    """One page of a PDF as its own single-page PDF, or a whole image."""

    data: bytes
    mime_type: str
    page_index: int = 0

    def to_part(self) -> types.Part:
        return types.Part.from_bytes(data=self.data, mime_type=self.mime_type)


def is_image(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")


def guess_media_kind(path: str | Path) -> Optional[str]:
    """Media kind from the file name, e.g. 'application/pdf' or 'image/png'."""
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type


def is_supported(mime_type: Optional[str]) -> bool:
    return mime_type == PDF_MIME or is_image(mime_type)


def _open_pdf(data: bytes) -> fitz.Document:
    try:
        return fitz.open(stream=data, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        # fitz.FileDataError / EmptyFileError are RuntimeError subclasses
        raise DocumentUnreadable(str(e)) from e


def validate_document(data: bytes, mime_type: Optional[str], max_pages: int = MAX_PDF_PAGES) -> int:
    """Check a document before any model call. Returns its page count."""
    if is_image(mime_type):
        return 1
    if mime_type != PDF_MIME:
        raise UnsupportedMediaKind(mime_type)

    with _open_pdf(data) as doc:
        page_count = doc.page_count
    if page_count > max_pages:
        raise PageLimitExceeded(page_count, max_pages)
    return page_count


def segment_document(data: bytes, mime_type: Optional[str]) -> List[PageUnit]:
    """
    PDFs become one unit per page. Each page is copied (not rendered) into a
    fresh one-page PDF so vector content survives. Images are a single unit.
    """
    if is_image(mime_type):
        return [PageUnit(data=data, mime_type=mime_type)]
    if mime_type != PDF_MIME:
        raise UnsupportedMediaKind(mime_type)

    units: List[PageUnit] = []
    with _open_pdf(data) as doc:
        for index in range(doc.page_count):
            with fitz.open() as page_doc:
                page_doc.insert_pdf(doc, from_page=index, to_page=index)
                units.append(PageUnit(data=page_doc.tobytes(), mime_type=PDF_MIME, page_index=index))
    return units


def _validate_and_segment(data: bytes, mime_type: Optional[str]) -> List[PageUnit]:
    validate_document(data, mime_type)
    return segment_document(data, mime_type)


async def split_document(data: bytes, mime_type: Optional[str]) -> List[PageUnit]:
    """Validate and split in a worker thread; PyMuPDF work would block the event loop."""
    if not is_supported(mime_type):
        raise UnsupportedMediaKind(mime_type)
    return await asyncio.to_thread(_validate_and_segment, data, mime_type)


async def load_page_units(path: str | Path, mime_type: Optional[str] = None) -> List[PageUnit]:
    """Read a document from disk, then validate and split it."""
    path = Path(path)
    mime_type = mime_type or guess_media_kind(path)
    if not is_supported(mime_type):
        raise UnsupportedMediaKind(mime_type)
    data = await asyncio.to_thread(path.read_bytes)
    return await split_document(data, mime_type)
