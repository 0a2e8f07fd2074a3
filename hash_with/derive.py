"""Dataclass front end.

    @derive_hash
    @dataclass
    class Config:
        name: str
        brightness: float = field(metadata=hash_directives('hash_with = "hash_f64_bits"'))
        session: str = field(default="", metadata=hash_directives("hash_without"))

Directives are resolved when the class is decorated, so a conflicting or
malformed directive fails at class definition, never at hashing time.
"""

import dataclasses
import sys
from typing import Any, Dict, Mapping, Optional, Tuple

from .config import GeneratorConfig
from .emitter import build_hash_function
from .errors import SchemaResolutionError, UnhashableFieldType, UnsupportedRecordError
from .hasher import StructuralHasher
from .planner import compile_schema
from .types import EmissionPlan, FieldSchema, PolicyKind, RecordSchema

METADATA_KEY = "hash_with"

# Annotations whose values StructuralHasher cannot contribute natively
NO_NATIVE_CONTRIBUTION = frozenset({"float", "complex"})


def hash_directives(*texts: str) -> Dict[str, Tuple[str, ...]]:
    """Field metadata carrying raw directive texts."""
    return {METADATA_KEY: tuple(texts)}


def _type_name(tp: Any) -> str:
    if isinstance(tp, str):
        return tp
    return getattr(tp, "__name__", None) or repr(tp)


def record_schema_for(cls: type) -> RecordSchema:
    """Describe a dataclass as a RecordSchema, fields in declaration order."""
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise UnsupportedRecordError(
            getattr(cls, "__name__", repr(cls)),
            "derive_hash only supports dataclasses"
        )

    fields = []
    for f in dataclasses.fields(cls):
        raw = f.metadata.get(METADATA_KEY, ())
        if isinstance(raw, str):
            raw = (raw,)
        fields.append(FieldSchema(
            name=f.name,
            declared_type=_type_name(f.type),
            raw_directives=tuple(raw)
        ))
    return RecordSchema(name=cls.__name__, fields=tuple(fields))


def derive_hash(
    cls: Optional[type] = None,
    *,
    namespace: Optional[Mapping[str, Any]] = None,
    config: Optional[GeneratorConfig] = None
):
    """Install a generated hash method and ``__hash__`` on a dataclass.

    Args:
        namespace: extra names visible to directive expressions and
            function paths, for helpers not defined at module level
        config: generator settings (method and hasher parameter names)

    Raises:
        SchemaResolutionError: a field has conflicting or malformed directives,
            or a field annotated with a type that has no native contribution
            carries no directive
        UnsupportedRecordError: the decorated object is not a dataclass
    """
    config = config or GeneratorConfig()

    def wrap(cls: type) -> type:
        schema = record_schema_for(cls)
        plan = compile_schema(schema, config)
        _check_native_types(schema, plan)

        module = sys.modules.get(cls.__module__)
        module_globals = module.__dict__ if module is not None else {}

        method = build_hash_function(plan, module_globals, namespace, config)
        method.__module__ = cls.__module__
        method_name = config.method_name

        def __hash__(self) -> int:
            return structural_hash(self, method_name)

        __hash__.__qualname__ = f"{cls.__qualname__}.__hash__"
        setattr(cls, method_name, method)
        cls.__hash__ = __hash__
        cls.__hash_plan__ = plan
        return cls

    if cls is None:
        return wrap
    return wrap(cls)


def _check_native_types(schema: RecordSchema, plan: EmissionPlan) -> None:
    declared = {f.name: f.declared_type for f in schema.fields}
    errors = [
        UnhashableFieldType(step.field_name, declared[step.field_name])
        for step in plan.steps
        if step.policy.kind == PolicyKind.DEFAULT and declared[step.field_name] in NO_NATIVE_CONTRIBUTION
    ]
    if errors:
        raise SchemaResolutionError(schema.name, errors)


def _hashed_state(obj: Any, method_name: Optional[str]) -> StructuralHasher:
    method_name = method_name or GeneratorConfig().method_name
    state = StructuralHasher(method_name)
    getattr(obj, method_name)(state)
    return state


def structural_hash(obj: Any, method_name: Optional[str] = None) -> int:
    """Combined hash of a derived record as a signed 64-bit int."""
    return _hashed_state(obj, method_name).finish()


def hash_digest(obj: Any, method_name: Optional[str] = None) -> str:
    """Combined hash of a derived record as a SHA256 hex digest."""
    return _hashed_state(obj, method_name).hexdigest()
