"""Tests for the FastAPI REST endpoints."""

import json
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from doc_structurer.api.app import app
from doc_structurer.api.schemas import ParsedDocumentResponse
from doc_structurer.extraction.field_extractor import FormField
from doc_structurer.ocr.document_processor import DocumentProcessor, ParsedDocument
from doc_structurer.ocr.errors import DocumentExtractionError
from doc_structurer.utils.config import ConfigurationError


@pytest.fixture
def client() -> TestClient:
    """Create a FastAPI test client."""
    return TestClient(app)


def _make_parsed_document() -> ParsedDocument:
    return ParsedDocument(
        raw_data="Name: Ann\nQuantity\n42",
        form_data=(FormField("Name", "Ann"), FormField("Quantity", "42")),
    )


class TestHealthEndpoint:
    """Tests for the /health endpoint."""

    def test_health_returns_ok(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert isinstance(data["tesseract_available"], bool)
        assert data["llm_configured"] is False

    def test_health_reports_configured_key(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert client.get("/health").json()["llm_configured"] is True


class TestParseEndpoint:
    """Tests for the /api/parse endpoint."""

    @patch("doc_structurer.api.app._get_document_processor")
    def test_parse_pdf(self, mock_factory: MagicMock, client: TestClient) -> None:
        mock_factory.return_value.process.return_value = _make_parsed_document()

        response = client.post(
            "/api/parse",
            files={"file": ("order.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 200
        assert response.json() == {
            "rawData": "Name: Ann\nQuantity\n42",
            "formData": [
                {"key": "Name", "value": "Ann"},
                {"key": "Quantity", "value": "42"},
            ],
            "tableData": [],
        }
        mock_factory.return_value.process.assert_called_once_with(
            b"%PDF-1.4", "application/pdf", "order.pdf"
        )

    @patch("doc_structurer.api.app._get_document_processor")
    def test_parse_image(
        self, mock_factory: MagicMock, client: TestClient, png_bytes: bytes
    ) -> None:
        mock_factory.return_value.process.return_value = _make_parsed_document()

        response = client.post(
            "/api/parse", files={"file": ("scan.png", png_bytes, "image/png")}
        )

        assert response.status_code == 200
        assert len(response.json()["formData"]) == 2

    @patch("doc_structurer.api.app._get_document_processor")
    def test_unsupported_file_type(
        self, mock_factory: MagicMock, client: TestClient
    ) -> None:
        pdf = MagicMock()
        image = MagicMock()
        mock_factory.return_value = DocumentProcessor(pdf, image)

        response = client.post(
            "/api/parse", files={"file": ("notes.txt", b"Name: Ann", "text/plain")}
        )

        assert response.status_code == 400
        pdf.extract_text.assert_not_called()
        image.extract_text.assert_not_called()

    @patch("doc_structurer.api.app._get_document_processor")
    def test_extraction_failure(
        self, mock_factory: MagicMock, client: TestClient
    ) -> None:
        mock_factory.return_value.process.side_effect = DocumentExtractionError(
            "PDF text extraction failed: broken xref"
        )

        response = client.post(
            "/api/parse", files={"file": ("bad.pdf", b"%PDF", "application/pdf")}
        )

        assert response.status_code == 500
        assert "broken xref" in response.json()["detail"]


class TestStructuringEndpoints:
    """Tests for /api/parse-data and /api/map-schema."""

    @patch("doc_structurer.api.app._get_structuring_service")
    def test_parse_data(self, mock_factory: MagicMock, client: TestClient) -> None:
        service = mock_factory.return_value
        service.extract_structured_data.return_value = '{"order_number": "10442"}'
        request = json.dumps({"data": {"formData": [], "rawData": "Order: 10442"}})

        response = client.post("/api/parse-data", data={"request": request})

        assert response.status_code == 200
        assert response.json() == {"order_number": "10442"}
        service.extract_structured_data.assert_called_once_with(request)
        service.client.close.assert_called_once()

    @patch("doc_structurer.api.app._get_structuring_service")
    def test_map_schema(self, mock_factory: MagicMock, client: TestClient) -> None:
        service = mock_factory.return_value
        service.map_to_schema.return_value = '{"customer": "Ann"}'
        request = json.dumps({"schema": {"customer": "string"}, "data": {"name": "Ann"}})

        response = client.post("/api/map-schema", data={"request": request})

        assert response.status_code == 200
        assert response.json() == {"customer": "Ann"}
        service.map_to_schema.assert_called_once_with(request)

    def test_parse_data_missing_data_field(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        response = client.post("/api/parse-data", data={"request": '{"other": 1}'})

        assert response.status_code == 200
        assert response.text == '{"error": "Data field is required in the request."}'

    def test_map_schema_missing_schema(
        self, client: TestClient, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        response = client.post("/api/map-schema", data={"request": '{"data": {}}'})

        assert response.status_code == 200
        assert response.json() == {
            "error": "Both 'schema' and 'data' fields are required in the request."
        }

    @patch("doc_structurer.api.app._get_structuring_service")
    def test_missing_api_key_returns_error_payload(
        self, mock_factory: MagicMock, client: TestClient
    ) -> None:
        mock_factory.side_effect = ConfigurationError("No completion API key configured")

        response = client.post("/api/parse-data", data={"request": '{"data": 1}'})

        assert response.status_code == 200
        assert "No completion API key" in response.json()["error"]

    def test_missing_request_form_field(self, client: TestClient) -> None:
        response = client.post("/api/parse-data", data={})
        assert response.status_code == 422


class TestParsedDocumentResponse:
    """Tests for the camelCase wire shape shared by the API and the CLI."""

    def test_dump_uses_wire_keys(self) -> None:
        response = ParsedDocumentResponse.from_document(_make_parsed_document())

        assert response.model_dump(by_alias=True) == {
            "rawData": "Name: Ann\nQuantity\n42",
            "formData": [
                {"key": "Name", "value": "Ann"},
                {"key": "Quantity", "value": "42"},
            ],
            "tableData": [],
        }

    def test_empty_document(self) -> None:
        response = ParsedDocumentResponse.from_document(
            ParsedDocument(raw_data="", form_data=())
        )
        assert response.model_dump(by_alias=True) == {
            "rawData": "",
            "formData": [],
            "tableData": [],
        }
