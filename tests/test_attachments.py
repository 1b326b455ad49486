import fitz
import pytest

from paperhub.client.attachments import extract_attachment, mime_kind
from paperhub.client.errors import AttachmentError, UnsupportedFileType


def _pdf(*page_texts):
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_plain_text_is_taken_verbatim():
    context = extract_attachment("notes.txt", "text/plain; charset=utf-8", "Attention is all you need.".encode())

    assert context.file_name == "notes.txt"
    assert context.mime_kind == "text"
    assert context.extracted_text == "Attention is all you need."


def test_pdf_text_is_extracted_page_by_page():
    context = extract_attachment("paper.pdf", "application/pdf", _pdf("Transformers", "", "Self-attention"))

    assert context.mime_kind == "pdf"
    assert "Transformers" in context.extracted_text
    assert "Self-attention" in context.extracted_text
    assert context.extracted_text.index("Transformers") < context.extracted_text.index("Self-attention")


def test_pdf_without_text_is_rejected():
    with pytest.raises(AttachmentError, match="No text"):
        extract_attachment("scan.pdf", "application/pdf", _pdf(""))


def test_corrupt_pdf_is_rejected():
    with pytest.raises(AttachmentError):
        extract_attachment("broken.pdf", "application/pdf", b"definitely not a pdf")


def test_empty_file_is_rejected():
    with pytest.raises(AttachmentError, match="empty"):
        extract_attachment("empty.txt", "text/plain", b"")


@pytest.mark.parametrize("mime_type", ["image/png", "application/msword", "", None])
def test_other_types_are_unsupported(mime_type):
    with pytest.raises(UnsupportedFileType):
        mime_kind(mime_type)
