"""Hash generator type definitions (Pydantic models).

Defines the record schema handed over by a front end, the canonical
per-field hashing policy, and the ordered contribution plan consumed by
an emitter. All structures are immutable and JSON-serializable so a plan
can be fingerprinted and cached by callers.
"""

import keyword
from enum import Enum
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PolicyKind(str, Enum):
    """How a field contributes to the combined hash."""
    DEFAULT = "Default"
    EXPRESSION = "Expression"
    EXTERNAL_FUNCTION = "ExternalFunction"
    EXCLUDED = "Excluded"


_PAYLOAD_KINDS = {PolicyKind.EXPRESSION, PolicyKind.EXTERNAL_FUNCTION}


def _check_identifier(v: str) -> str:
    if not v.isidentifier() or keyword.iskeyword(v):
        raise ValueError(f"'{v}' is not a valid identifier")
    return v


class FieldSchema(BaseModel):
    """One declared field: name, type reference and raw directive texts."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Field identifier")
    declared_type: str = Field(default="Any", description="Type reference as written")
    raw_directives: Tuple[str, ...] = Field(default=(), description="Attribute texts in source order")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_identifier(v)


class RecordSchema(BaseModel):
    """An ordered field list for one record type."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Record type name")
    fields: Tuple[FieldSchema, ...] = Field(default=())

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _check_identifier(v)


class FieldPolicy(BaseModel):
    """Resolved hashing policy for a single field.

    ``payload`` holds the expression text for EXPRESSION and the dotted
    function path for EXTERNAL_FUNCTION; it is None for the other kinds.
    """
    model_config = ConfigDict(frozen=True)

    kind: PolicyKind
    payload: Optional[str] = None

    @model_validator(mode="after")
    def validate_payload(self) -> "FieldPolicy":
        if self.kind in _PAYLOAD_KINDS and not self.payload:
            raise ValueError(f"{self.kind.value} policy requires a payload")
        if self.kind not in _PAYLOAD_KINDS and self.payload is not None:
            raise ValueError(f"{self.kind.value} policy takes no payload")
        return self

    @classmethod
    def default(cls) -> "FieldPolicy":
        return cls(kind=PolicyKind.DEFAULT)

    @classmethod
    def expression(cls, text: str) -> "FieldPolicy":
        return cls(kind=PolicyKind.EXPRESSION, payload=text)

    @classmethod
    def external_function(cls, path: str) -> "FieldPolicy":
        return cls(kind=PolicyKind.EXTERNAL_FUNCTION, payload=path)

    @classmethod
    def excluded(cls) -> "FieldPolicy":
        return cls(kind=PolicyKind.EXCLUDED)

    def __str__(self) -> str:
        if self.payload is None:
            return self.kind.value
        return f"{self.kind.value}({self.payload!r})"


class ResolvedField(BaseModel):
    """A field paired with its resolved policy."""
    model_config = ConfigDict(frozen=True)

    field: FieldSchema
    policy: FieldPolicy


class ContributionStep(BaseModel):
    """One ordered hash contribution in an emission plan."""
    model_config = ConfigDict(frozen=True)

    field_name: str
    policy: FieldPolicy


class EmissionPlan(BaseModel):
    """Ordered contribution steps for one record, in declaration order."""
    model_config = ConfigDict(frozen=True)

    record_name: str
    steps: Tuple[ContributionStep, ...] = Field(default=())

    @property
    def is_empty(self) -> bool:
        return not self.steps

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(step.field_name for step in self.steps)
