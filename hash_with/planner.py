"""Hash-emission planner.

Walks resolved fields in declaration order and produces the ordered
contribution plan an emitter renders. Excluded fields are dropped; the
relative order of everything else is kept exactly, since the combined
hash is the ordered composition of per-field contributions.
"""

import hashlib
import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional, Union

from .config import GeneratorConfig
from .errors import SchemaResolutionError
from .resolver import resolve_schema
from .types import ContributionStep, EmissionPlan, PolicyKind, RecordSchema, ResolvedField

logger = logging.getLogger(__name__)


def plan_contributions(record_name: str, resolved: Iterable[ResolvedField]) -> EmissionPlan:
    """Build the contribution plan for a resolved field list.

    Never fails: an empty field list gives an empty plan, which renders
    to a hash function that contributes nothing.
    """
    steps = tuple(
        ContributionStep(field_name=rf.field.name, policy=rf.policy)
        for rf in resolved
        if rf.policy.kind != PolicyKind.EXCLUDED
    )
    logger.debug("Planned %d contribution step(s) for %s", len(steps), record_name)
    return EmissionPlan(record_name=record_name, steps=steps)


def compile_schema(
    schema: RecordSchema,
    config: Optional[GeneratorConfig] = None
) -> EmissionPlan:
    """Resolve and plan a record schema.

    Raises:
        SchemaResolutionError: If any field fails to resolve
    """
    return plan_contributions(schema.name, resolve_schema(schema, config))


def compile_schemas(
    schemas: Iterable[RecordSchema],
    config: Optional[GeneratorConfig] = None
) -> Dict[str, Union[EmissionPlan, SchemaResolutionError]]:
    """Compile independent records in parallel.

    Returns results keyed by record name in input order; a record that
    fails to resolve maps to its SchemaResolutionError.
    """
    config = config or GeneratorConfig()
    schemas = list(schemas)

    def _compile_one(schema: RecordSchema) -> Union[EmissionPlan, SchemaResolutionError]:
        try:
            return compile_schema(schema, config)
        except SchemaResolutionError as e:
            return e

    if not schemas:
        return {}

    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        results: List[Union[EmissionPlan, SchemaResolutionError]] = list(pool.map(_compile_one, schemas))

    return {schema.name: result for schema, result in zip(schemas, results)}


def compute_plan_hash(plan: EmissionPlan) -> str:
    """Compute SHA256 hash of the plan's canonical JSON representation.

    Identical schemas always give identical plans, so this is a stable
    cache key for generated output.

    Returns:
        Hex-encoded SHA256 hash
    """
    plan_dict = plan.model_dump(mode="json")

    # Canonical JSON: sorted keys, no extra whitespace
    canonical = json.dumps(plan_dict, sort_keys=True, separators=(",", ":"))

    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
