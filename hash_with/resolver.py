"""Policy resolver.

Turns the raw directives of each field into exactly one FieldPolicy,
rejecting conflicting and malformed directives. Resolution of a field
reads only that field's directives, so resolving an unchanged schema
always yields identical policies.
"""

import logging
from typing import List, Optional

from .config import GeneratorConfig
from .directives import parse_directive
from .errors import ConflictingPolicy, HashWithError, MalformedDirective, SchemaResolutionError
from .types import FieldPolicy, FieldSchema, PolicyKind, RecordSchema, ResolvedField

logger = logging.getLogger(__name__)


def resolve_field(field: FieldSchema) -> FieldPolicy:
    """Resolve one field's directives into its canonical policy.

    Raises:
        ConflictingPolicy: more than one hash directive on the field
        MalformedDirective: the single directive has a bad payload
    """
    recognized = []
    for text in field.raw_directives:
        parsed = parse_directive(text)
        if parsed is None:
            logger.warning("Ignoring unrecognized directive on field '%s': %s", field.name, text)
            continue
        recognized.append(parsed)

    if not recognized:
        return FieldPolicy.default()

    if len(recognized) > 1:
        raise ConflictingPolicy(field.name, [d.kind.value for d in recognized])

    directive = recognized[0]
    if directive.defect:
        raise MalformedDirective(field.name, directive.defect)

    if directive.kind == PolicyKind.EXPRESSION:
        return FieldPolicy.expression(directive.payload)
    if directive.kind == PolicyKind.EXTERNAL_FUNCTION:
        return FieldPolicy.external_function(directive.payload)
    return FieldPolicy.excluded()


def resolve_schema(
    schema: RecordSchema,
    config: Optional[GeneratorConfig] = None
) -> List[ResolvedField]:
    """Resolve every field of a record, in declaration order.

    Field errors are collected in declaration order and raised together as
    a SchemaResolutionError. With ``collect_all_errors`` disabled only the
    first failing field is reported.
    """
    config = config or GeneratorConfig()
    resolved: List[ResolvedField] = []
    errors: List[HashWithError] = []

    for field in schema.fields:
        try:
            policy = resolve_field(field)
        except (ConflictingPolicy, MalformedDirective) as e:
            errors.append(e)
            if not config.collect_all_errors:
                break
            continue
        logger.debug("%s.%s -> %s", schema.name, field.name, policy)
        resolved.append(ResolvedField(field=field, policy=policy))

    if errors:
        raise SchemaResolutionError(schema.name, errors)

    return resolved
