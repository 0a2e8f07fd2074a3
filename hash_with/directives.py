"""Directive vocabulary and raw-text classification.

Three directive spellings are recognized on a field:

    hash_with(<expression>)      inline expression, ``self`` is the record
    hash_with = "<dotted.path>"  external function (value, state) -> None
    hash_without                 exclude the field

Any attribute text whose leading name is not one of the directive names
is inert and ignored.
"""

import ast
import keyword
import re
from typing import NamedTuple, Optional

from .types import PolicyKind

HASH_WITH = "hash_with"
HASH_WITHOUT = "hash_without"

DIRECTIVE_NAMES = (HASH_WITH, HASH_WITHOUT)

_LEADING_NAME = re.compile(r"\s*([A-Za-z_][A-Za-z0-9_]*)")
_SUSPENDING_NODES = (ast.Yield, ast.YieldFrom, ast.Await)


class ParsedDirective(NamedTuple):
    """A recognized directive: its kind, payload, and defect (if any)."""
    kind: PolicyKind
    payload: Optional[str] = None
    defect: Optional[str] = None


def directive_name(text: str) -> Optional[str]:
    """Return the leading identifier of a directive text, or None."""
    match = _LEADING_NAME.match(text)
    return match.group(1) if match else None


def is_valid_function_path(path: str) -> bool:
    """True for ``name`` or ``pkg.module.name`` made of non-keyword identifiers."""
    parts = path.split(".")
    return all(part.isidentifier() and not keyword.iskeyword(part) for part in parts)


def parse_directive(text: str) -> Optional[ParsedDirective]:
    """Classify one raw directive text.

    Returns None for inert (unrecognized) attributes. The kind is decided
    from the syntactic form alone; payload problems are reported through
    ``defect`` so the caller can rank conflicts above malformed payloads.
    """
    name = directive_name(text)
    if name not in DIRECTIVE_NAMES:
        return None

    rest = text.strip()[len(name):].strip()

    if name == HASH_WITHOUT:
        if rest:
            return ParsedDirective(PolicyKind.EXCLUDED, defect="hash_without takes no payload")
        return ParsedDirective(PolicyKind.EXCLUDED)

    if rest.startswith("="):
        return _parse_function_form(rest[1:].strip())
    if rest.startswith("("):
        return _parse_expression_form(rest)
    if not rest:
        return ParsedDirective(
            PolicyKind.EXPRESSION,
            defect="hash_with requires an expression or a function name"
        )
    return ParsedDirective(
        PolicyKind.EXPRESSION,
        defect=f"cannot parse hash_with directive: {text.strip()!r}"
    )


def _parse_function_form(literal: str) -> ParsedDirective:
    try:
        value = ast.literal_eval(literal) if literal else None
    except (ValueError, SyntaxError):
        value = None

    if not isinstance(value, str):
        return ParsedDirective(
            PolicyKind.EXTERNAL_FUNCTION,
            defect=f"function name must be a string literal, got {literal!r}"
        )
    if not is_valid_function_path(value):
        return ParsedDirective(
            PolicyKind.EXTERNAL_FUNCTION,
            defect=f"{value!r} is not a valid function path"
        )
    return ParsedDirective(PolicyKind.EXTERNAL_FUNCTION, payload=value)


def _parse_expression_form(rest: str) -> ParsedDirective:
    if not rest.endswith(")"):
        return ParsedDirective(PolicyKind.EXPRESSION, defect="unbalanced parentheses in hash_with(...)")

    body = rest[1:-1].strip()
    if not body:
        return ParsedDirective(PolicyKind.EXPRESSION, defect="empty hash_with expression")

    try:
        tree = ast.parse(body, mode="eval")
    except SyntaxError as e:
        return ParsedDirective(
            PolicyKind.EXPRESSION,
            defect=f"invalid hash_with expression {body!r}: {e.msg}"
        )

    # yield/await would turn the generated method into a generator or coroutine
    for node in ast.walk(tree):
        if isinstance(node, _SUSPENDING_NODES):
            return ParsedDirective(
                PolicyKind.EXPRESSION,
                defect=f"hash_with expression cannot use {type(node).__name__.lower()}: {body!r}"
            )
    return ParsedDirective(PolicyKind.EXPRESSION, payload=body)
