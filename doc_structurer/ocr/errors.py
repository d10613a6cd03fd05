"""Exceptions raised while turning document bytes into raw text."""


class UnsupportedMediaTypeError(ValueError):
    """The declared media type is neither a PDF nor an image."""

    def __init__(self, media_type: str | None) -> None:
        self.media_type = media_type
        super().__init__(f"Unsupported file type: {media_type}")


class DocumentExtractionError(RuntimeError):
    """A PDF or OCR collaborator failed to produce text."""
