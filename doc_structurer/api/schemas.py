"""Pydantic response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from doc_structurer.ocr.document_processor import ParsedDocument


class FormFieldResponse(BaseModel):
    """A single key-value pair found on the document."""

    key: str
    value: str


class ParsedDocumentResponse(BaseModel):
    """Response schema for a document parse request."""

    model_config = ConfigDict(populate_by_name=True)

    raw_data: str = Field(alias="rawData")
    form_data: list[FormFieldResponse] = Field(alias="formData")
    table_data: list[dict[str, str]] = Field(default_factory=list, alias="tableData")

    @classmethod
    def from_document(cls, document: ParsedDocument) -> "ParsedDocumentResponse":
        return cls(
            raw_data=document.raw_data,
            form_data=[
                FormFieldResponse(key=f.key, value=f.value) for f in document.form_data
            ],
            table_data=[dict(row) for row in document.table_data],
        )


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
    tesseract_available: bool
    llm_configured: bool
