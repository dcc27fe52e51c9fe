from __future__ import annotations

import codecs
import logging
import mimetypes
import re
from io import BytesIO
from typing import Protocol

from ats_matcher.errors import ExtractionError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"
TEXT_MIMES = {"text/plain", "text/markdown", "text/x-markdown"}

SUPPORTED_MIME_TYPES = {PDF_MIME, DOCX_MIME, DOC_MIME, *TEXT_MIMES}

_EXTENSION_MIME_TYPES = {
    ".pdf": PDF_MIME,
    ".docx": DOCX_MIME,
    ".doc": DOC_MIME,
    ".txt": "text/plain",
    ".md": "text/markdown",
}

_TAG_RE = re.compile(r"<[^>]+>")
_CONTROL_RE = re.compile(r"[\u0000-\u0008\u000B-\u001F\u007F-\u009F]+")
_SPACES_RE = re.compile(r"[ \t]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")
_SPACED_LETTERS_RE = re.compile(r"\b(?:[A-Za-z] ){2,}[A-Za-z]\b")


class TextExtractor(Protocol):
    def __call__(self, content: bytes, mime_type: str) -> str: ...


def mime_type_for_filename(filename: str) -> str:
    lowered = (filename or "").lower()
    for extension, mime in _EXTENSION_MIME_TYPES.items():
        if lowered.endswith(extension):
            return mime
    guessed, _ = mimetypes.guess_type(lowered)
    return guessed or "application/octet-stream"


def sanitize_extracted_text(raw: str) -> str:
    """Strip markup and control characters left behind by upstream extraction."""
    if not raw:
        return ""
    text = raw.replace("\r\n", "\n").replace("\r", "\n")
    text = _TAG_RE.sub(" ", text)
    text = _CONTROL_RE.sub(" ", text)
    text = _SPACES_RE.sub(" ", text)
    text = _BLANK_LINES_RE.sub("\n\n", text)
    # "E x p e r i e n c e" -> "Experience"
    text = _SPACED_LETTERS_RE.sub(lambda match: match.group(0).replace(" ", ""), text)
    return text.strip()


def _decode_text(content: bytes) -> str:
    if content.startswith((codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)):
        try:
            return content.decode("utf-16")
        except UnicodeDecodeError as exc:
            raise ExtractionError(f"Unable to decode text file: {exc}") from exc
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        # Single-byte fallback; latin-1 maps every byte.
        return content.decode("latin-1")


def _extract_pdf(content: bytes) -> str:
    from pypdf import PdfReader

    try:
        reader = PdfReader(BytesIO(content))
        page_chunks: list[str] = []
        for page in reader.pages:
            page_text = page.extract_text() or ""
            if page_text.strip():
                page_chunks.append(page_text)
    except Exception as exc:
        raise ExtractionError(f"Failed to extract text from PDF: {exc}") from exc
    return "\n\n".join(page_chunks)


def _extract_docx(content: bytes) -> str:
    from docx import Document

    try:
        document = Document(BytesIO(content))
    except Exception as exc:
        raise ExtractionError(f"Failed to extract text from DOCX: {exc}") from exc
    return "\n".join(paragraph.text for paragraph in document.paragraphs if paragraph.text.strip())


def extract_text(content: bytes, mime_type: str) -> str:
    mime = (mime_type or "").split(";")[0].strip().lower()
    if mime == PDF_MIME:
        text = _extract_pdf(content)
    elif mime == DOCX_MIME:
        text = _extract_docx(content)
    elif mime == DOC_MIME:
        raise ExtractionError("Legacy .doc is not supported. Convert to .docx or paste the text.")
    elif mime in TEXT_MIMES:
        text = _decode_text(content)
    else:
        raise ExtractionError(f"Unsupported file type: {mime_type or 'unknown'}")

    if not text.strip():
        raise ExtractionError("No extractable text found in document.")
    logger.debug("text_extracted mime=%s characters=%s", mime, len(text))
    return text
