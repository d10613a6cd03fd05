"""Document parsing pipeline.

Picks a raw-text producer from the declared media type, then runs the
shared field extraction step over whatever text it returns.
"""

from dataclasses import dataclass, field
from typing import Protocol

from doc_structurer.extraction.field_extractor import FieldExtractor, FormField
from doc_structurer.utils.config import AppConfig
from doc_structurer.utils.logger import get_logger

from .errors import DocumentExtractionError, UnsupportedMediaTypeError
from .image_handler import ImageTextExtractor
from .pdf_handler import PdfTextExtractor
from .tesseract_engine import TesseractEngine

logger = get_logger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
IMAGE_MEDIA_PREFIX = "image/"


class RawTextProducer(Protocol):
    """Anything that turns document bytes into raw text."""

    def extract_text(self, content: bytes) -> str: ...


@dataclass(frozen=True)
class ParsedDocument:
    """Result of parsing one document.

    ``table_data`` is reserved for tabular extraction and is always empty.
    """

    raw_data: str
    form_data: tuple[FormField, ...]
    table_data: tuple[dict[str, str], ...] = field(default_factory=tuple)


class DocumentProcessor:
    """Raw bytes plus media type in, :class:`ParsedDocument` out.

    Args:
        pdf_extractor: Producer for ``application/pdf`` documents.
        image_extractor: Producer for ``image/*`` documents.
        field_extractor: Shared key-value extraction step.
    """

    def __init__(
        self,
        pdf_extractor: RawTextProducer,
        image_extractor: RawTextProducer,
        field_extractor: FieldExtractor | None = None,
    ) -> None:
        self.pdf_extractor = pdf_extractor
        self.image_extractor = image_extractor
        self.field_extractor = field_extractor or FieldExtractor()

    @classmethod
    def from_config(cls, config: AppConfig) -> "DocumentProcessor":
        ocr_engine = TesseractEngine.from_config(config.ocr)
        return cls(
            pdf_extractor=PdfTextExtractor(
                ocr_engine=ocr_engine,
                ocr_fallback=config.ocr.pdf_ocr_fallback,
                dpi=config.ocr.pdf_dpi,
            ),
            image_extractor=ImageTextExtractor(ocr_engine),
        )

    def select_producer(self, media_type: str | None) -> RawTextProducer:
        """Return the producer for a media type.

        Raises:
            UnsupportedMediaTypeError: For anything but PDFs and images.
        """
        if media_type and media_type.startswith(PDF_MEDIA_TYPE):
            return self.pdf_extractor
        if media_type and media_type.startswith(IMAGE_MEDIA_PREFIX):
            return self.image_extractor
        raise UnsupportedMediaTypeError(media_type)

    def process(
        self, content: bytes, media_type: str | None, filename: str = "document"
    ) -> ParsedDocument:
        """Parse a document into raw text and form fields.

        Args:
            content: Raw document bytes.
            media_type: Declared media type, e.g. ``application/pdf``.
            filename: Display name for logging.

        Raises:
            UnsupportedMediaTypeError: If the media type is not supported.
            DocumentExtractionError: If text extraction fails.
        """
        producer = self.select_producer(media_type)
        logger.info("Processing document %s (%s)", filename, media_type)

        try:
            raw_text = producer.extract_text(content)
        except DocumentExtractionError:
            raise
        except Exception as exc:
            raise DocumentExtractionError(f"Text extraction failed: {exc}") from exc

        form_data = tuple(self.field_extractor.extract(raw_text))
        logger.info("Extracted %d form fields from %s", len(form_data), filename)
        return ParsedDocument(raw_data=raw_text, form_data=form_data)
