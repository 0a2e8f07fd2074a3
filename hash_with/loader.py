"""Record schema files.

A schema file holds one record or a list of records:

    {"name": "Config", "fields": [
        {"name": "name", "type": "str"},
        {"name": "brightness", "type": "float", "directives": ["hash_with = \\"hash_f64_bits\\""]}
    ]}

    {"records": [{...}, {...}]}
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from .errors import SchemaLoadError
from .types import FieldSchema, RecordSchema


def _read_json(path: Union[str, Path]) -> Any:
    path = Path(path)

    if not path.exists():
        raise SchemaLoadError(str(path), "schema file not found")

    try:
        with open(path, "r") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise SchemaLoadError(str(path), f"invalid JSON: {e}") from e


def _directives(raw: Any) -> tuple:
    if isinstance(raw, str):
        return (raw,)
    return tuple(raw)


def record_from_dict(data: Dict[str, Any], path: Optional[str] = None) -> RecordSchema:
    """Build a RecordSchema from its JSON form."""
    if not isinstance(data, dict):
        raise SchemaLoadError(path, "record must be a JSON object")
    if "name" not in data:
        raise SchemaLoadError(path, "record name is required")

    fields = data.get("fields", [])
    if not isinstance(fields, list):
        raise SchemaLoadError(path, f"record '{data['name']}': fields must be a list")

    try:
        return RecordSchema(
            name=data["name"],
            fields=tuple(
                FieldSchema(
                    name=f.get("name"),
                    declared_type=f.get("type", "Any"),
                    raw_directives=_directives(f.get("directives", ()))
                )
                for f in fields
            )
        )
    except (ValidationError, AttributeError, TypeError) as e:
        raise SchemaLoadError(path, f"record '{data['name']}': {e}") from e


def load_record_schema(path: Union[str, Path]) -> RecordSchema:
    """Load a single-record schema file.

    Raises:
        SchemaLoadError: If the file is missing, not JSON, or malformed
    """
    return record_from_dict(_read_json(path), str(path))


def load_record_schemas(path: Union[str, Path]) -> List[RecordSchema]:
    """Load a schema file holding either one record or ``{"records": [...]}``."""
    data = _read_json(path)
    if isinstance(data, dict) and "records" in data:
        records = data["records"]
        if not isinstance(records, list):
            raise SchemaLoadError(str(path), "records must be a list")
        return [record_from_dict(r, str(path)) for r in records]
    return [record_from_dict(data, str(path))]
