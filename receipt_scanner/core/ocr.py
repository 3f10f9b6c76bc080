"""
OCR functionality for turning receipt images and PDFs into raw text.
"""

from pathlib import Path

from .exceptions import OCRError
from .utils import IMAGE_EXTS, PDF_EXTS, TEXT_EXTS


def ocr_image_to_text(img_path: Path) -> str:
    """OCR an image file to text."""
    import pytesseract
    from PIL import Image

    with Image.open(img_path) as img:
        # Grayscale helps Tesseract on photographed receipts
        if img.mode != "L":
            img = img.convert("L")
        return pytesseract.image_to_string(img)


def pdf_to_text(pdf_path: Path) -> str:
    """Extract text from a searchable PDF using PyMuPDF."""
    import fitz  # pymupdf

    doc = fitz.open(pdf_path.as_posix())
    try:
        return "\n".join(page.get_text() for page in doc)
    finally:
        doc.close()


def extract_text(path: Path) -> str:
    """
    Get the raw text of a receipt file.

    Images are OCR'd with Tesseract, PDFs have their text layer read, and
    .txt files are taken as already-OCR'd text.

    Raises:
        OCRError: unsupported file type, or the OCR engine failed
    """
    ext = path.suffix.lower()
    try:
        if ext in IMAGE_EXTS:
            return ocr_image_to_text(path)
        if ext in PDF_EXTS:
            return pdf_to_text(path)
        if ext in TEXT_EXTS:
            return path.read_text(encoding="utf-8", errors="replace")
    except OCRError:
        raise
    except Exception as e:
        raise OCRError(f"Could not read text from {path.name}: {e}") from e
    raise OCRError(f"Unsupported file type: {path}")
