"""FastAPI application for the document structuring API.

Provides endpoints for parsing uploaded documents into form fields, for
the two LLM structuring stages, and a health check. Handlers are plain
``def`` functions: OCR, PDF stripping and the completion call all block,
so they run on the server's worker threadpool.
"""

import shutil
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from doc_structurer.ocr.document_processor import DocumentProcessor
from doc_structurer.ocr.errors import DocumentExtractionError, UnsupportedMediaTypeError
from doc_structurer.structuring.client import StructuringClient, error_payload
from doc_structurer.structuring.service import StructuringService
from doc_structurer.utils.config import ConfigurationError, load_config
from doc_structurer.utils.logger import get_logger

from .schemas import HealthResponse, ParsedDocumentResponse

logger = get_logger(__name__)

VERSION = "1.0.0"

app = FastAPI(
    title="Document Structuring API",
    description="Extract form fields from PDFs and images and map them to custom JSON schemas",
    version=VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

router = APIRouter(prefix="/api")


def _get_document_processor() -> DocumentProcessor:
    return DocumentProcessor.from_config(load_config())


def _get_structuring_service() -> StructuringService:
    """Build a structuring service from the current configuration.

    Raises:
        ConfigurationError: If no completion API key is configured.
    """
    client = StructuringClient.from_config(load_config().llm)
    return StructuringService(client)


def _json_text(content: str) -> Response:
    return Response(content=content, media_type="application/json")


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return system health status."""
    return HealthResponse(
        status="healthy",
        version=VERSION,
        tesseract_available=shutil.which("tesseract") is not None,
        llm_configured=load_config().llm.is_configured,
    )


@router.post("/parse", response_model=ParsedDocumentResponse)
def parse_document(file: Annotated[UploadFile, File(...)]) -> ParsedDocumentResponse:
    """Extract raw text and form fields from an uploaded PDF or image.

    Returns 400 for unsupported media types and 500 when text extraction
    fails.
    """
    try:
        processor = _get_document_processor()
        document = processor.process(
            file.file.read(), file.content_type, file.filename or "document"
        )
    except UnsupportedMediaTypeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except DocumentExtractionError as exc:
        logger.error("Document parsing failed: %s", exc)
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return ParsedDocumentResponse.from_document(document)


def _run_structuring(operation: Callable[[StructuringService], str]) -> Response:
    try:
        service = _get_structuring_service()
    except ConfigurationError as exc:
        logger.error("Structuring unavailable: %s", exc)
        return _json_text(error_payload(str(exc)))

    try:
        return _json_text(operation(service))
    finally:
        service.client.close()


@router.post("/parse-data")
def parse_data(request: Annotated[str, Form()]) -> Response:
    """Turn parsed document data into a normalised JSON order record."""
    return _run_structuring(lambda service: service.extract_structured_data(request))


@router.post("/map-schema")
def map_schema(request: Annotated[str, Form()]) -> Response:
    """Map previously extracted data onto a caller-supplied schema."""
    return _run_structuring(lambda service: service.map_to_schema(request))


app.include_router(router)
