"""
hash_with/errors.py

Generation-time errors for the hash_with code generator.
All errors carry structured data for diagnostics and JSON reporting.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class HashWithError(Exception):
    """Base class for hash_with errors."""
    message: str
    error_code: str = "HASH_WITH_ERROR"
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


@dataclass
class ConflictingPolicy(HashWithError):
    """A field carries more than one hashing directive."""
    kinds: List[str] = field(default_factory=list)
    field: str = ""

    def __init__(self, field: str, kinds: List[str], **kwargs):
        super().__init__(
            message=f"Field '{field}' has conflicting directives: {', '.join(kinds)}",
            error_code="CONFLICTING_POLICY",
            **kwargs
        )
        self.field = field
        self.kinds = list(kinds)

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({"field": self.field, "kinds": self.kinds})
        return base


@dataclass
class MalformedDirective(HashWithError):
    """A directive payload is empty or cannot be parsed."""
    field: str = ""
    reason: str = ""

    def __init__(self, field: str, reason: str, **kwargs):
        super().__init__(
            message=f"Field '{field}': {reason}",
            error_code="MALFORMED_DIRECTIVE",
            **kwargs
        )
        self.field = field
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({"field": self.field, "reason": self.reason})
        return base


@dataclass
class UnhashableFieldType(HashWithError):
    """A field without a directive is declared with a type that has no native contribution."""
    declared_type: str = ""
    field: str = ""

    def __init__(self, field: str, declared_type: str, **kwargs):
        super().__init__(
            message=f"Field '{field}': {declared_type} has no native hash contribution; add a hash_with directive",
            error_code="UNHASHABLE_FIELD_TYPE",
            **kwargs
        )
        self.field = field
        self.declared_type = declared_type

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({"field": self.field, "declared_type": self.declared_type})
        return base


@dataclass
class SchemaResolutionError(HashWithError):
    """One or more fields of a record failed to resolve."""
    record: str = ""
    errors: List[HashWithError] = field(default_factory=list)

    def __init__(self, record: str, errors: List[HashWithError], **kwargs):
        lines = [f"Cannot generate hash for '{record}':"]
        lines.extend(f"  {err}" for err in errors)
        super().__init__(
            message="\n".join(lines),
            error_code="SCHEMA_RESOLUTION_FAILED",
            **kwargs
        )
        self.record = record
        self.errors = list(errors)

    @property
    def fields(self) -> List[str]:
        return [getattr(err, "field", "") for err in self.errors]

    def to_dict(self) -> Dict[str, Any]:
        base = super().to_dict()
        base.update({
            "record": self.record,
            "errors": [err.to_dict() for err in self.errors]
        })
        return base


@dataclass
class UnsupportedRecordError(HashWithError):
    """The front end was handed something it cannot describe as a record."""
    record: str = ""

    def __init__(self, record: str, reason: str, **kwargs):
        super().__init__(
            message=f"{record}: {reason}",
            error_code="UNSUPPORTED_RECORD",
            **kwargs
        )
        self.record = record


@dataclass
class SchemaLoadError(HashWithError):
    """A schema file is missing, not JSON, or has the wrong shape."""
    path: Optional[str] = None

    def __init__(self, path: Optional[str], reason: str, **kwargs):
        super().__init__(
            message=f"{path}: {reason}" if path else reason,
            error_code="SCHEMA_LOAD_FAILED",
            **kwargs
        )
        self.path = path
