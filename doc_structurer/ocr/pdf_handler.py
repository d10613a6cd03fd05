"""Raw-text production for PDF documents.

Text is stripped from the PDF's text layer with pdfplumber. Scanned PDFs
have no text layer; when ``pdf_ocr_fallback`` is on, such documents are
rasterised with pdf2image and read page by page through Tesseract.
"""

import io

import numpy as np
import pdfplumber
from pdf2image import convert_from_bytes

from doc_structurer.utils.logger import get_logger

from .errors import DocumentExtractionError
from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)


class PdfTextExtractor:
    """Produces raw text from PDF bytes.

    Args:
        ocr_engine: Engine used for the OCR fallback. Required when
            ``ocr_fallback`` is enabled.
        ocr_fallback: OCR the rendered pages when the text layer is blank.
        dpi: Rendering resolution for the OCR fallback.
    """

    def __init__(
        self,
        ocr_engine: TesseractEngine | None = None,
        ocr_fallback: bool = False,
        dpi: int = 300,
    ) -> None:
        if ocr_fallback and ocr_engine is None:
            raise ValueError("ocr_fallback requires an OCR engine")
        self.ocr_engine = ocr_engine
        self.ocr_fallback = ocr_fallback
        self.dpi = dpi

    def extract_text(self, content: bytes) -> str:
        """Return the full text of a PDF, pages joined by newlines.

        Raises:
            DocumentExtractionError: If the PDF cannot be read.
        """
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as exc:
            raise DocumentExtractionError(f"PDF text extraction failed: {exc}") from exc

        text = "\n".join(pages)
        logger.info("Stripped %d characters from %d PDF pages", len(text), len(pages))

        if self.ocr_fallback and not text.strip():
            logger.info("PDF has no text layer, falling back to OCR")
            return self._ocr_pages(content)
        return text

    def _ocr_pages(self, content: bytes) -> str:
        try:
            images = [np.array(img) for img in convert_from_bytes(content, dpi=self.dpi)]
            texts = [self.ocr_engine.extract_text(image) for image in images]
        except Exception as exc:
            raise DocumentExtractionError(f"PDF OCR fallback failed: {exc}") from exc

        logger.info("OCR fallback read %d pages at %d DPI", len(images), self.dpi)
        return "\n".join(texts)
