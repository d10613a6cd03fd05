"""Shared test fixtures for the document structuring test suite."""

import io
from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def png_bytes() -> bytes:
    """Encode a small white RGB image as PNG."""
    buf = io.BytesIO()
    Image.new("RGB", (120, 60), "white").save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def invoice_text() -> str:
    """OCR-like text mixing colon and adjacent-line fields."""
    return (
        "INVOICE 2024\n"
        "Order number: 10442\n"
        "Order date: 12.03.2024\n"
        "Customer\n"
        "Nordic Tools, Helsinki\n"
        "notes without structure\n"
        "Quantity\n"
        "42\n"
        "Express delivery\n"
        ":unselected:\n"
    )


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def _no_ambient_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's real key out of the tests."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("TESSDATA_PREFIX", raising=False)
