"""hash_with - Declarative combined-hash generation.

Resolves per-field hashing directives into canonical policies and plans
the ordered hash contributions of a record, with a Python emitter and a
dataclass front end on top.
"""

from .types import (
    PolicyKind, FieldSchema, RecordSchema, FieldPolicy,
    ResolvedField, ContributionStep, EmissionPlan
)
from .errors import (
    HashWithError, ConflictingPolicy, MalformedDirective,
    SchemaResolutionError, UnhashableFieldType, UnsupportedRecordError, SchemaLoadError
)
from .config import GeneratorConfig, load_config, config_from_env
from .resolver import resolve_field, resolve_schema
from .planner import plan_contributions, compile_schema, compile_schemas, compute_plan_hash
from .emitter import render_hash_function, build_hash_function
from .hasher import StructuralHasher, hash_f64_bits
from .derive import derive_hash, hash_directives, record_schema_for, structural_hash, hash_digest
from .loader import load_record_schema, load_record_schemas

__version__ = "1.0.0"

__all__ = [
    "PolicyKind",
    "FieldSchema",
    "RecordSchema",
    "FieldPolicy",
    "ResolvedField",
    "ContributionStep",
    "EmissionPlan",
    "HashWithError",
    "ConflictingPolicy",
    "MalformedDirective",
    "SchemaResolutionError",
    "UnhashableFieldType",
    "UnsupportedRecordError",
    "SchemaLoadError",
    "GeneratorConfig",
    "load_config",
    "config_from_env",
    "resolve_field",
    "resolve_schema",
    "plan_contributions",
    "compile_schema",
    "compile_schemas",
    "compute_plan_hash",
    "render_hash_function",
    "build_hash_function",
    "StructuralHasher",
    "hash_f64_bits",
    "derive_hash",
    "hash_directives",
    "record_schema_for",
    "structural_hash",
    "hash_digest",
    "load_record_schema",
    "load_record_schemas",
]
