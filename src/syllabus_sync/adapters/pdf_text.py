"""PDF text extraction adapter."""

import logging
from pathlib import Path

import pdfplumber

from syllabus_sync.core.prompt import ExtractionError

logger = logging.getLogger(__name__)


class PdfTextExtractor:
    """Implements TextExtractor protocol with pdfplumber."""

    def extract(self, path: Path | str) -> str:
        pdf_path = Path(path).expanduser()
        if not pdf_path.is_file():
            raise FileNotFoundError(f"File not found: {pdf_path}")

        pages: list[str] = []
        try:
            with pdfplumber.open(pdf_path) as pdf:
                for page in pdf.pages:
                    text = page.extract_text()
                    if text:
                        pages.append(text.strip())
        except Exception as e:
            logger.warning(f"pdfplumber failed on {pdf_path}: {e}")
            raise ExtractionError(f"Failed to read PDF: {e}") from e

        return "\n\n".join(pages)
