import sys
import unittest
from io import BytesIO
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from ats_matcher.errors import ExtractionError  # noqa: E402
from ats_matcher.parsing.extract import (  # noqa: E402
    DOC_MIME,
    DOCX_MIME,
    PDF_MIME,
    extract_text,
    mime_type_for_filename,
    sanitize_extracted_text,
)


class ExtractTextTests(unittest.TestCase):
    def test_plain_text(self):
        text = extract_text("Skills: Python, SQL".encode("utf-8"), "text/plain; charset=utf-8")
        self.assertEqual(text, "Skills: Python, SQL")

    def test_single_byte_text_is_not_read_as_utf16(self):
        content = "Caf\u00e9 manager, Z\u00fcrich. Skills: Python".encode("latin-1")
        self.assertEqual(extract_text(content, "text/plain"), "Caf\u00e9 manager, Z\u00fcrich. Skills: Python")

    def test_utf16_with_bom(self):
        self.assertEqual(extract_text("Skills: Python".encode("utf-16"), "text/plain"), "Skills: Python")

    def test_utf8_bom_is_dropped(self):
        self.assertEqual(extract_text(b"\xef\xbb\xbfSkills: Python", "text/plain"), "Skills: Python")

    def test_markdown_is_plain_text(self):
        self.assertIn("Experience", extract_text(b"# Experience\n- Python", "text/markdown"))

    def test_docx_paragraphs(self):
        from docx import Document

        document = Document()
        document.add_paragraph("Skills: Python")
        document.add_paragraph("")
        document.add_paragraph("Experience: backend services")
        buffer = BytesIO()
        document.save(buffer)

        text = extract_text(buffer.getvalue(), DOCX_MIME)
        self.assertEqual(text, "Skills: Python\nExperience: backend services")

    def test_invalid_pdf_raises(self):
        with self.assertRaises(ExtractionError):
            extract_text(b"this is not a pdf", PDF_MIME)

    def test_legacy_doc_is_rejected(self):
        with self.assertRaises(ExtractionError) as ctx:
            extract_text(b"\xd0\xcf\x11\xe0", DOC_MIME)
        self.assertIn("Legacy .doc", str(ctx.exception))

    def test_unsupported_type(self):
        with self.assertRaises(ExtractionError) as ctx:
            extract_text(b"PNG", "image/png")
        self.assertIn("Unsupported file type", str(ctx.exception))

    def test_blank_document(self):
        with self.assertRaises(ExtractionError) as ctx:
            extract_text(b"  \n\t ", "text/plain")
        self.assertEqual(str(ctx.exception), "No extractable text found in document.")


class SanitizeTests(unittest.TestCase):
    def test_strips_markup_controls_and_spaced_letters(self):
        self.assertEqual(sanitize_extracted_text("<b>Skills</b>\x00 E x p e r i e n c e"), "Skills Experience")

    def test_collapses_blank_lines(self):
        self.assertEqual(sanitize_extracted_text("Skills\r\n\r\n\r\n\r\nPython"), "Skills\n\nPython")

    def test_empty(self):
        self.assertEqual(sanitize_extracted_text(""), "")


class MimeTypeTests(unittest.TestCase):
    def test_known_extensions(self):
        self.assertEqual(mime_type_for_filename("resume.PDF"), PDF_MIME)
        self.assertEqual(mime_type_for_filename("resume.docx"), DOCX_MIME)
        self.assertEqual(mime_type_for_filename("notes.md"), "text/markdown")

    def test_unknown_extension(self):
        self.assertEqual(mime_type_for_filename("blob"), "application/octet-stream")


if __name__ == "__main__":
    unittest.main()
