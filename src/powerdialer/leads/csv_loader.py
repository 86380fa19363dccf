"""
CSV lead loading.

Reads phone numbers from a CSV export with a phone_number column (or one of
its aliases), normalizes them to E.164 and serves them in file order.
"""

import csv
import io
import re
from dataclasses import dataclass
from pathlib import Path

from powerdialer.leads.source import InMemoryLeadSource
from powerdialer.shared.logging import get_logger

logger = get_logger(__name__)

# E.164 phone number pattern: + followed by 1-15 digits
E164_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

# Header aliases for flexibility
HEADER_ALIASES: dict[str, str] = {
    "phone": "phone_number",
    "telephone": "phone_number",
    "tel": "phone_number",
    "mobile": "phone_number",
    "dnc": "do_not_call",
    "do_not_contact": "do_not_call",
}


@dataclass(frozen=True)
class SkippedRow:
    """A CSV row that did not produce a lead."""

    line_number: int
    value: str | None
    reason: str


def normalize_header(header: str) -> str:
    h = header.strip().lower()
    h = h.replace(" ", "_")
    h = h.replace("-", "_")
    h = re.sub(r"__+", "_", h)
    return HEADER_ALIASES.get(h, h)


def normalize_phone_number(phone: str) -> str | None:
    """Return phone in E.164 form, or None when it cannot be dialed."""
    cleaned = re.sub(r"[\s\-\.\(\)]", "", phone.strip())

    if cleaned.startswith("++"):
        return None

    # Add + prefix if missing but starts with digits
    if cleaned and cleaned[0].isdigit():
        cleaned = "+" + cleaned

    # at least 8 digits after '+'
    if len(cleaned) < 1 + 8:
        return None

    if E164_PATTERN.match(cleaned):
        return cleaned
    return None


def parse_boolean(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in ("true", "1", "yes", "y", "t")


class CsvLeadSource(InMemoryLeadSource):
    """Lead source populated from CSV content."""

    def __init__(self, numbers: list[str], skipped: list[SkippedRow]) -> None:
        super().__init__(numbers)
        self.skipped = skipped

    @classmethod
    def from_path(cls, path: str | Path, encoding: str = "utf-8") -> "CsvLeadSource":
        return cls.from_bytes(Path(path).read_bytes(), encoding=encoding)

    @classmethod
    def from_bytes(
        cls,
        content: bytes,
        encoding: str = "utf-8",
        delimiter: str = ",",
    ) -> "CsvLeadSource":
        """Parse CSV content into a lead source.

        Args:
            content: Raw CSV file content.
            encoding: File encoding.
            delimiter: CSV field delimiter.

        Returns:
            A lead source yielding unique, valid numbers in file order.

        Raises:
            ValueError: If the content cannot be decoded or has no phone column.
        """
        try:
            text = content.decode(encoding)
        except UnicodeDecodeError as e:
            raise ValueError(f"File encoding error: {e}") from e

        reader = csv.DictReader(io.StringIO(text), delimiter=delimiter)
        if reader.fieldnames is None:
            return cls([], [])

        headers = {name: normalize_header(name) for name in reader.fieldnames}
        if "phone_number" not in headers.values():
            raise ValueError("Missing required column: phone_number")

        numbers: list[str] = []
        seen: set[str] = set()
        skipped: list[SkippedRow] = []

        # line 1 is the header
        for line_number, raw_row in enumerate(reader, start=2):
            row = {headers[k]: (v or "") for k, v in raw_row.items() if k is not None}
            raw_phone = row.get("phone_number", "")

            if parse_boolean(row.get("do_not_call")):
                skipped.append(SkippedRow(line_number, raw_phone, "do_not_call"))
                continue

            phone = normalize_phone_number(raw_phone)
            if phone is None:
                skipped.append(SkippedRow(line_number, raw_phone, "invalid phone number"))
                continue
            if phone in seen:
                skipped.append(SkippedRow(line_number, raw_phone, "duplicate phone number"))
                continue

            seen.add(phone)
            numbers.append(phone)

        for row in skipped:
            logger.warning(
                "Skipping CSV lead on line %d: %s",
                row.line_number,
                row.reason,
                extra={"value": row.value},
            )

        return cls(numbers, skipped)
