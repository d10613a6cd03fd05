"""Caller-facing structuring operations.

Both operations accept the request as JSON text (as posted by the web
front end) or as an already-decoded dict, and always return a string.
"""

import json
from typing import Any

from doc_structurer.utils.logger import get_logger

from .client import StructuringClient, error_payload
from .prompts import PromptBuilder

logger = get_logger(__name__)

DATA_REQUIRED = error_payload("Data field is required in the request.")
SCHEMA_AND_DATA_REQUIRED = error_payload(
    "Both 'schema' and 'data' fields are required in the request."
)
INVALID_REQUEST = error_payload("Request must be a JSON object.")


def _decode_request(request: str | dict[str, Any]) -> tuple[dict[str, Any] | None, str]:
    """Return the decoded request and its JSON text, or ``(None, text)`` if unusable."""
    if isinstance(request, dict):
        return request, json.dumps(request, ensure_ascii=False)
    try:
        decoded = json.loads(request)
    except (TypeError, ValueError):
        return None, str(request)
    if not isinstance(decoded, dict):
        return None, request
    return decoded, request


class StructuringService:
    """Runs the extract-structured-data and map-to-schema stages.

    Args:
        client: Completion client; called exactly once per valid request.
        prompt_builder: Template builder, defaults to :class:`PromptBuilder`.
    """

    def __init__(
        self,
        client: StructuringClient,
        prompt_builder: PromptBuilder | None = None,
    ) -> None:
        self.client = client
        self.prompt_builder = prompt_builder or PromptBuilder()

    def extract_structured_data(self, request: str | dict[str, Any]) -> str:
        payload, raw_text = _decode_request(request)
        if payload is None:
            logger.warning("Rejected structuring request: not a JSON object")
            return INVALID_REQUEST
        if "data" not in payload:
            return DATA_REQUIRED

        prompt = self.prompt_builder.build_extraction_prompt(raw_text)
        logger.info("Requesting structured extraction")
        return self.client.complete(prompt)

    def map_to_schema(self, request: str | dict[str, Any]) -> str:
        payload, _ = _decode_request(request)
        if payload is None:
            logger.warning("Rejected schema mapping request: not a JSON object")
            return INVALID_REQUEST
        if "schema" not in payload or "data" not in payload:
            return SCHEMA_AND_DATA_REQUIRED

        prompt = self.prompt_builder.build_schema_mapping_prompt(
            payload["schema"], payload["data"]
        )
        logger.info("Requesting schema mapping")
        return self.client.complete(prompt)
