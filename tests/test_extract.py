import io

import pytest
from docx import Document
from pypdf import PdfWriter

from app.modules.documents.extract import UnsupportedFileType, extension, extract_text


def test_extension_is_lowercased():
    assert extension("Notes.TXT") == "txt"
    assert extension("archive.tar.gz") == "gz"
    assert extension("README") == ""


def test_txt_ignores_invalid_utf8():
    assert extract_text("a.txt", b"caf\xc3\xa9 \xff ok") == "café  ok"


def test_docx_paragraphs_joined_by_newline():
    doc = Document()
    doc.add_paragraph("First paragraph")
    doc.add_paragraph("Second paragraph")
    buf = io.BytesIO()
    doc.save(buf)
    assert extract_text("essay.docx", buf.getvalue()) == "First paragraph\nSecond paragraph"


def test_pdf_pages_are_read():
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    assert extract_text("slides.pdf", buf.getvalue()).strip() == ""


def test_unsupported_extension():
    with pytest.raises(UnsupportedFileType, match="Unsupported file type"):
        extract_text("image.png", b"\x89PNG")
