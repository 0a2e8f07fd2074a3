"""Python source emitter for contribution plans.

Renders an EmissionPlan into the source of a method that feeds each
contribution to a hasher in plan order, and compiles that source into a
function object.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .config import GeneratorConfig
from .types import ContributionStep, EmissionPlan, PolicyKind

logger = logging.getLogger(__name__)

_INDENT = "    "


def render_step(step: ContributionStep, state_name: str) -> str:
    """Render one contribution step as a Python statement."""
    policy = step.policy

    if policy.kind == PolicyKind.DEFAULT:
        return f"{state_name}.contribute(self.{step.field_name})"

    if policy.kind == PolicyKind.EXPRESSION:
        expr = policy.payload
        if "\n" in expr or "#" in expr:
            # Newlines inside the parentheses keep comments and line breaks legal
            return f"{state_name}.contribute((\n{expr}\n))"
        return f"{state_name}.contribute(({expr}))"

    if policy.kind == PolicyKind.EXTERNAL_FUNCTION:
        return f"{policy.payload}(self.{step.field_name}, {state_name})"

    raise ValueError(f"No statement for {policy.kind.value} field '{step.field_name}'")


def _method_lines(plan: EmissionPlan, config: GeneratorConfig, indent: str = "") -> List[str]:
    # Only the first line of a statement is indented; continuation lines of
    # an expression sit inside parentheses and are kept verbatim.
    body = indent + _INDENT
    lines = [
        f"{indent}def {config.method_name}(self, {config.state_name}):",
        f'{body}"""Feed {plan.record_name} fields to the hasher in declaration order."""',
    ]
    for step in plan.steps:
        lines.append(body + render_step(step, config.state_name))
    if plan.is_empty:
        lines.append(f"{body}pass")
    return lines


def render_hash_function(plan: EmissionPlan, config: Optional[GeneratorConfig] = None) -> str:
    """Render the plan as a method definition."""
    config = config or GeneratorConfig()
    return "\n".join(_method_lines(plan, config)) + "\n"


def build_hash_function(
    plan: EmissionPlan,
    globals: Optional[Dict[str, Any]] = None,
    namespace: Optional[Mapping[str, Any]] = None,
    config: Optional[GeneratorConfig] = None
) -> Callable[[Any, Any], None]:
    """Compile the rendered plan into a function.

    Names in ``namespace`` are bound through an enclosing closure; every
    other name (external functions, helpers used by expressions) resolves
    in ``globals`` when the function runs.
    """
    config = config or GeneratorConfig()
    namespace = dict(namespace or {})
    globals = {} if globals is None else globals

    names = ", ".join(namespace)
    lines: List[str] = [f"def __create_fn__({names}):"]
    lines.extend(_method_lines(plan, config, _INDENT))
    lines.append(f"{_INDENT}return {config.method_name}")
    source = "\n".join(lines)

    logger.debug("Generated source for %s:\n%s", plan.record_name, source)

    local_ns: Dict[str, Any] = {}
    code = compile(source, f"<hash_with {plan.record_name}>", "exec")
    exec(code, globals, local_ns)
    fn = local_ns["__create_fn__"](**namespace)
    fn.__qualname__ = f"{plan.record_name}.{config.method_name}"
    return fn
