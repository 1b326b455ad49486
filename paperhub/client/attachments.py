# install: pip install pymupdf
import logging
import re
from typing import Literal

import fitz  # PyMuPDF

from paperhub.client.errors import AttachmentError, UnsupportedFileType
from paperhub.client.models import AttachedContext

logger = logging.getLogger(__name__)

MIME_KINDS = {
    "application/pdf": "pdf",
    "text/plain": "text",
}


def mime_kind(mime_type: str) -> Literal["pdf", "text"]:
    """Map an accepted MIME type to its kind, or raise `UnsupportedFileType`."""
    kind = MIME_KINDS.get((mime_type or "").split(";")[0].strip().lower())
    if kind is None:
        raise UnsupportedFileType(f"Only PDF and plain-text files can be attached (got {mime_type or 'unknown'}).")
    return kind


def _clean_text(text: str) -> str:
    if not text:
        return ""
    text = text.replace("\x00", "")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_text_from_pdf_bytes(pdf_bytes: bytes) -> str:
    """
    Extract text from PDF bytes using PyMuPDF.

    A page that fails to extract is skipped; the rest of the document is kept.
    """
    try:
        doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    except Exception as e:
        raise AttachmentError(f"Could not open the PDF: {e}") from e

    pages = []
    try:
        for page_num in range(len(doc)):
            try:
                page_text = doc.load_page(page_num).get_text("text")
            except Exception as e:
                logger.warning("Failed to extract page %s: %s", page_num + 1, e)
                continue
            page_text = _clean_text(page_text)
            if page_text:
                pages.append(page_text)
    finally:
        doc.close()
    return "\n".join(pages)


def extract_text_from_plain_bytes(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def extract_attachment(file_name: str, mime_type: str, data: bytes) -> AttachedContext:
    """Validate and extract an uploaded file. Empty extracted text is a failure."""
    kind = mime_kind(mime_type)
    if not data:
        raise AttachmentError(f"'{file_name}' is empty.")

    if kind == "pdf":
        text = extract_text_from_pdf_bytes(data)
    else:
        text = extract_text_from_plain_bytes(data)

    if not text.strip():
        raise AttachmentError(
            f"No text could be extracted from '{file_name}'. It may be a scanned (image-only) PDF."
        )
    logger.info("Extracted %s characters from %s", len(text), file_name)
    return AttachedContext(file_name=file_name, mime_kind=kind, extracted_text=text)
