"""Prompt templates for the two structuring stages.

Stage one turns a parsed document (form fields plus raw text) into a
normalised order record. Stage two reshapes that record into a schema
supplied by the caller. Both builders are pure string functions.
"""

import json
from typing import Any

ORDER_FIELDS: tuple[str, ...] = (
    "order_number",
    "order_date",
    "reference",
    "handler",
    "customer_name",
    "company",
    "address",
    "total_amount",
    "payment_terms",
    "late_fee",
    "business_id",
)

TABLE_FIELDS: tuple[str, ...] = (
    "item_code",
    "description",
    "quantity",
    "delivery_date",
    "unit_price",
    "discount",
    "net_price",
)


def _bullets(names: tuple[str, ...]) -> str:
    return "\n".join(f"   - `{name}`" for name in names)


EXTRACTION_TEMPLATE = f"""You are an advanced AI specializing in structured data extraction. \
Process the JSON input below and return **ONLY** a well-formatted JSON object.

### Transformation Rules
1. Convert `formData` into a structured JSON object of clear key-value pairs.
2. Pull order details out of `rawData`, keeping these priority fields **only if present**:
{_bullets(ORDER_FIELDS)}
3. Build a list called `tableData` from `rawData`, one object per line item, with these fields **if they exist**:
{_bullets(TABLE_FIELDS)}
4. Put every other field found in the input that is not listed above under `"additional_data"`, so that no source data is lost.
5. Return the final JSON object alone, with no surrounding text or markdown.

Input JSON:
"""

SCHEMA_MAPPING_TEMPLATE = """You are an AI that maps extracted data into a predefined user schema.
- **Keep values accurate and aligned with the right schema fields.**
- **Preserve every relevant detail.**
- **Return ONLY a JSON object matching the given schema.**

### Schema Definition
{schema}

### Extracted Data
{data}

**Return only the final JSON output that follows the schema format, using the extracted data as the source of truth.**
"""


def _as_json_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


class PromptBuilder:
    """Builds the instruction strings sent to the completion model."""

    def build_extraction_prompt(self, raw_request: str) -> str:
        """Return the stage-one prompt with ``raw_request`` appended verbatim."""
        return EXTRACTION_TEMPLATE + raw_request

    def build_schema_mapping_prompt(self, schema: Any, data: Any) -> str:
        """Return the stage-two prompt embedding the schema and extracted data."""
        return SCHEMA_MAPPING_TEMPLATE.format(
            schema=_as_json_text(schema),
            data=_as_json_text(data),
        )
