"""
PDF text extraction
"""
import io
import logging
import re

from pypdf import PdfReader

from core.errors import ExtractionFailure

logger = logging.getLogger(__name__)


class PDFProcessor:
    """Handles PDF text extraction."""

    @staticmethod
    def extract_text(pdf_bytes: bytes) -> str:
        """Extract and clean text from PDF bytes."""
        try:
            reader = PdfReader(io.BytesIO(pdf_bytes))
            pages = reader.pages
            total_pages = len(pages)
        except Exception as e:
            logger.warning("Could not open PDF (%d bytes): %s", len(pdf_bytes), e)
            raise ExtractionFailure() from e

        text_pages = []
        for i, page in enumerate(pages):
            try:
                extracted = page.extract_text()
            except Exception as e:
                logger.warning("Skipping page %d/%d, text extraction failed: %s", i + 1, total_pages, e)
                continue
            if extracted:
                text_pages.append(extracted)

        return PDFProcessor._clean_text("\n".join(text_pages))

    @staticmethod
    def _clean_text(text: str) -> str:
        """Clean and normalize text."""
        text = re.sub(r"-\s*\n", "", text)
        text = text.replace("\n", " ")
        text = re.sub(r"\s+", " ", text).strip()
        return text
