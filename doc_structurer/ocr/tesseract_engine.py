"""Tesseract OCR engine wrapper.

Decoded page bitmaps go in, plain text comes out. The tessdata directory
is passed on every call so deployments with a non-standard Tesseract
install do not depend on the process environment.
"""

import numpy as np
import pytesseract
from PIL import Image

from doc_structurer.utils.config import OCRConfig
from doc_structurer.utils.logger import get_logger

logger = get_logger(__name__)


class TesseractEngine:
    """Wrapper around Tesseract OCR for page text extraction.

    Args:
        tessdata_prefix: Directory holding the ``.traineddata`` files.
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: OCR language code.
        psm: Tesseract page segmentation mode.
    """

    def __init__(
        self,
        tessdata_prefix: str,
        tesseract_cmd: str | None = None,
        default_lang: str = "eng",
        psm: int = 3,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.tessdata_prefix = tessdata_prefix
        self.default_lang = default_lang
        self.psm = psm

    @classmethod
    def from_config(cls, config: OCRConfig) -> "TesseractEngine":
        return cls(
            tessdata_prefix=config.resolve_tessdata_prefix(),
            tesseract_cmd=config.tesseract_cmd,
            default_lang=config.default_lang,
            psm=config.psm,
        )

    @property
    def tesseract_config(self) -> str:
        return f'--psm {self.psm} --tessdata-dir "{self.tessdata_prefix}"'

    def extract_text(self, image: np.ndarray) -> str:
        """Recognise the text in a page image.

        Args:
            image: Decoded page bitmap as a numpy array.

        Returns:
            Recognised text, possibly empty.

        Raises:
            pytesseract.TesseractError: If Tesseract fails on the image.
        """
        pil_image = Image.fromarray(image)
        text = pytesseract.image_to_string(
            pil_image,
            lang=self.default_lang,
            config=self.tesseract_config,
        )
        logger.info("OCR recognised %d characters", len(text))
        return text
