"""Raw-text production for image documents (PNG, JPEG, TIFF, ...)."""

import io

import numpy as np
from PIL import Image, UnidentifiedImageError

from doc_structurer.utils.logger import get_logger

from .errors import DocumentExtractionError
from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)


class ImageTextExtractor:
    """Decodes image bytes and runs them through OCR.

    Args:
        ocr_engine: Engine that recognises text in the decoded bitmap.
    """

    def __init__(self, ocr_engine: TesseractEngine) -> None:
        self.ocr_engine = ocr_engine

    def extract_text(self, content: bytes) -> str:
        """Return the OCR text of an encoded image.

        Raises:
            DocumentExtractionError: If the image cannot be decoded or
                Tesseract fails.
        """
        image = self.decode(content)
        try:
            return self.ocr_engine.extract_text(image)
        except Exception as exc:
            raise DocumentExtractionError(f"OCR failed: {exc}") from exc

    @staticmethod
    def decode(content: bytes) -> np.ndarray:
        try:
            with Image.open(io.BytesIO(content)) as img:
                bitmap = np.array(img.convert("RGB"))
        except (UnidentifiedImageError, OSError) as exc:
            raise DocumentExtractionError(f"Unreadable image: {exc}") from exc

        logger.debug("Decoded image of shape %s", bitmap.shape)
        return bitmap
