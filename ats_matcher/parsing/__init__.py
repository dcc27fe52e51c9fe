from .extract import (
    SUPPORTED_MIME_TYPES,
    TextExtractor,
    extract_text,
    mime_type_for_filename,
    sanitize_extracted_text,
)

__all__ = [
    "SUPPORTED_MIME_TYPES",
    "TextExtractor",
    "extract_text",
    "mime_type_for_filename",
    "sanitize_extracted_text",
]
