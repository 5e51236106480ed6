"""
Annual Return Export Encoders
=============================

Serializes a (possibly filtered) field list for download:

- csv: header row plus one row per field; values containing the
  delimiter, quotes or newlines are quote-wrapped with quotes doubled
- text: one ``"<question number>: <copy value>"`` line per field
- json: full-fidelity dump of the field list

``encode_snapshot`` dumps the whole snapshot together with its fields.

Version: 0.1.0
"""

import csv
import io
from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, TypeAdapter

from services.compliance_engine.exceptions import InvalidRequestError
from shared.logging import get_logger
from shared.models.annual_return import AnnualReturnSnapshot, FieldMapping


logger = get_logger(__name__)


class ExportEncoding(str, Enum):
    """Supported export encodings."""

    CSV = "csv"
    TEXT = "text"
    JSON = "json"

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @property
    def file_extension(self) -> str:
        return "txt" if self is ExportEncoding.TEXT else self.value


_MEDIA_TYPES = {
    ExportEncoding.CSV: "text/csv",
    ExportEncoding.TEXT: "text/plain",
    ExportEncoding.JSON: "application/json",
}

CSV_HEADER = ("Field ID", "Label", "Section", "Value", "Required")

_FIELD_LIST = TypeAdapter(list[FieldMapping])


class AnnualReturnExport(BaseModel):
    """Structured dump: snapshot plus its mapped fields."""

    snapshot: AnnualReturnSnapshot
    fields: list[FieldMapping]


def resolve_encoding(encoding: ExportEncoding | str) -> ExportEncoding:
    if isinstance(encoding, ExportEncoding):
        return encoding
    try:
        return ExportEncoding(encoding)
    except ValueError:
        raise InvalidRequestError(
            f"Unknown export encoding: {encoding}",
            details={"encoding": encoding, "valid_encodings": [e.value for e in ExportEncoding]},
        ) from None


def encode_csv(fields: Sequence[FieldMapping]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for field in fields:
        writer.writerow([
            field.field_id,
            field.label,
            field.section_id.value,
            field.copy_value,
            "Yes" if field.required else "No",
        ])
    return buffer.getvalue()


def encode_text(fields: Sequence[FieldMapping]) -> str:
    return "\n".join(f"{field.question_number}: {field.copy_value}" for field in fields)


def encode_json(fields: Sequence[FieldMapping]) -> str:
    return _FIELD_LIST.dump_json(list(fields), indent=2).decode()


_ENCODERS = {
    ExportEncoding.CSV: encode_csv,
    ExportEncoding.TEXT: encode_text,
    ExportEncoding.JSON: encode_json,
}


def encode_fields(fields: Sequence[FieldMapping], encoding: ExportEncoding | str) -> str:
    """
    Encode a field list.

    Raises:
        InvalidRequestError: Unknown encoding
    """
    resolved = resolve_encoding(encoding)
    encoded = _ENCODERS[resolved](fields)
    logger.debug("fields_encoded", encoding=resolved.value, field_count=len(fields))
    return encoded


def encode_snapshot(snapshot: AnnualReturnSnapshot, fields: Sequence[FieldMapping]) -> str:
    """JSON dump of the snapshot and its fields, with no reduction."""
    export = AnnualReturnExport(snapshot=snapshot, fields=list(fields))
    return export.model_dump_json(indent=2)
