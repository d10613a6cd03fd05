"""Line-based key-value extraction from raw document text.

Two heuristics are tried on each line, top to bottom:

* colon format, ``Invoice number: 1042``
* adjacent-line format, a capitalised label on one line and its value on
  the next, as OCR tends to produce for boxed form cells

Lines matching neither are dropped.
"""

import re
from dataclasses import dataclass

from doc_structurer.utils.logger import get_logger

logger = get_logger(__name__)

CHECKBOX_UNSELECTED = ":unselected:"

_COLON_FIELD = re.compile(r"^([^:]+):(.*)$", re.DOTALL)
_DIGIT = re.compile(r"[0-9]")
# Control characters and space only; NBSP and other Unicode spaces are content.
_TRIM_CHARS = "".join(map(chr, range(0x21)))


@dataclass(frozen=True)
class FormField:
    """A single labelled datum found on the document."""

    key: str
    value: str


class FieldExtractor:
    """Turns a text blob into an ordered list of form fields.

    The scan keeps an explicit cursor: each step consumes either one line
    (colon match or no match) or two lines (adjacent-line match), so a
    value line that was paired with its label is never rescanned as a
    label of its own.
    """

    def extract(self, text: str | None) -> list[FormField]:
        """Extract form fields from text.

        Args:
            text: Raw text from PDF stripping or OCR. ``None``, blank and
                non-string input yield an empty list.

        Returns:
            Fields in document line order.
        """
        if not isinstance(text, str) or not text.strip(_TRIM_CHARS):
            return []

        lines = text.split("\n")
        fields: list[FormField] = []
        cursor = 0

        while cursor < len(lines):
            field, consumed = self._consume(lines, cursor)
            if field is not None:
                fields.append(field)
            cursor += consumed

        logger.debug("Field extraction found %d fields in %d lines", len(fields), len(lines))
        return fields

    def _consume(self, lines: list[str], cursor: int) -> tuple[FormField | None, int]:
        """Try both rules at ``cursor``; return the field and lines consumed."""
        line = lines[cursor].strip(_TRIM_CHARS)

        field = self.match_colon_format(line)
        if field is not None:
            return field, 1

        if cursor + 1 < len(lines):
            field = self.match_adjacent_format(line, lines[cursor + 1].strip(_TRIM_CHARS))
            if field is not None:
                return field, 2

        return None, 1

    @staticmethod
    def match_colon_format(line: str) -> FormField | None:
        """Split a line at its first colon into key and value."""
        match = _COLON_FIELD.match(line)
        if match is None:
            return None
        return FormField(
            key=match.group(1).strip(_TRIM_CHARS),
            value=match.group(2).strip(_TRIM_CHARS),
        )

    def match_adjacent_format(self, current: str, following: str) -> FormField | None:
        """Pair a label line with the value line right after it."""
        if self.is_likely_field_name(current) and self.is_likely_field_value(following):
            return FormField(key=current, value=following)
        return None

    @staticmethod
    def is_likely_field_name(text: str) -> bool:
        return (
            len(text) > 2
            and text[0].isupper()
            and ":" not in text
            and _DIGIT.search(text) is None
        )

    @staticmethod
    def is_likely_field_value(text: str) -> bool:
        if not text:
            return False
        return (
            _DIGIT.search(text) is not None
            or "," in text
            or "." in text
            or text == CHECKBOX_UNSELECTED
        )
