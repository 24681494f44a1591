"""Document text extraction: PDF, scanned images, DOCX and plain text."""

import tempfile
from pathlib import Path

from .models import DocumentText


class ExtractionError(Exception):
    """No usable text could be extracted from a document."""


PDF_SUFFIXES = {".pdf"}
IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp", ".gif", ".webp"}
DOCX_SUFFIXES = {".docx"}
TEXT_SUFFIXES = {".txt", ".md", ".text"}


def file_type_for(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix in PDF_SUFFIXES:
        return "pdf"
    if suffix in IMAGE_SUFFIXES:
        return "image"
    if suffix in DOCX_SUFFIXES:
        return "docx"
    if suffix in TEXT_SUFFIXES:
        return "text"
    raise ExtractionError(f"Unsupported file type: {path.suffix or path.name}")


# ---------------------------------------------------------------------------
# Per-format readers
# ---------------------------------------------------------------------------

def read_pdf_text(path: Path) -> str:
    """Read the text layer of a PDF, one page per line block."""
    from pypdf import PdfReader

    reader = PdfReader(str(path))
    if reader.is_encrypted:
        raise ExtractionError(f"PDF is encrypted: {path.name}")
    parts = []
    for page in reader.pages:
        txt = page.extract_text() or ""
        if txt.strip():
            parts.append(txt)
    return "\n".join(parts)


def read_image_text(path: Path) -> str:
    """OCR an image with Tesseract (English)."""
    import pytesseract
    from PIL import Image

    with Image.open(path) as image:
        return pytesseract.image_to_string(image, lang="eng")


def read_docx_text(path: Path) -> str:
    """Read paragraphs from a local .docx file, blank line between paragraphs."""
    from docx import Document

    doc = Document(str(path))
    return "\n\n".join(p.text.strip() for p in doc.paragraphs if p.text.strip())


def read_plain_text(path: Path) -> str:
    return path.read_bytes().decode("utf-8", errors="replace")


_READERS = {
    "pdf": read_pdf_text,
    "image": read_image_text,
    "docx": read_docx_text,
    "text": read_plain_text,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def extract_text(path: Path | str) -> DocumentText:
    """Extract plain text from a file, choosing the reader by suffix.

    Raises ExtractionError for missing files, unsupported types, reader
    failures, and documents with no text at all.
    """
    path = Path(path)
    file_type = file_type_for(path)
    if not path.exists():
        raise ExtractionError(f"File not found: {path}")

    try:
        text = _READERS[file_type](path)
    except ExtractionError:
        raise
    except Exception as e:
        raise ExtractionError(f"Failed to extract text from {file_type.upper()}: {e}") from e

    if not text or not text.strip():
        raise ExtractionError(f"No text could be extracted from {path.name}")
    return DocumentText(text=text, file_name=path.name, file_type=file_type)


def extract_upload(filename: str, data: bytes) -> DocumentText:
    """Extract text from uploaded bytes via a temporary file."""
    name = Path(filename or "upload.txt").name
    file_type_for(Path(name))
    with tempfile.TemporaryDirectory() as tmp_dir:
        tmp_path = Path(tmp_dir) / name
        tmp_path.write_bytes(data)
        doc = extract_text(tmp_path)
    doc.file_name = name
    return doc


def document_from_text(text: str, file_name: str = "pasted text") -> DocumentText:
    """Wrap pasted text; any non-empty trimmed string is accepted."""
    if not text or not text.strip():
        raise ExtractionError("No contract text provided")
    return DocumentText(text=text, file_name=file_name, file_type="text")
