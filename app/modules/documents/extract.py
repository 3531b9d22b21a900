"""Plain-text extraction for uploaded study documents."""

from __future__ import annotations

import io
from pathlib import PurePath

from docx import Document
from pypdf import PdfReader


class UnsupportedFileType(ValueError):
    pass


def extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lstrip(".").lower()


def from_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


def from_pdf(data: bytes) -> str:
    reader = PdfReader(io.BytesIO(data))
    return "\n".join((page.extract_text() or "") for page in reader.pages)


def from_docx(data: bytes) -> str:
    document = Document(io.BytesIO(data))
    return "\n".join(p.text for p in document.paragraphs)


_EXTRACTORS = {
    "txt": from_txt,
    "pdf": from_pdf,
    "docx": from_docx,
}


def extract_text(filename: str, data: bytes) -> str:
    """Dispatch on the file extension; raises ``UnsupportedFileType``."""
    ext = extension(filename)
    extractor = _EXTRACTORS.get(ext)
    if extractor is None:
        raise UnsupportedFileType("Unsupported file type")
    return extractor(data)
