"""Plan Validator - whitelist and structure checks over a candidate plan tree."""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as ModelValidationError
from returns.result import Failure, Result, Success

from ..core import get_logger
from ..registry import ComponentRegistry, default_registry
from .models import Plan

logger = get_logger(__name__)


class PlanValidator:
    """
    Walks a plan tree and collects every violation in a single pass.

    The walk never stops at the first problem, so one corrective retry message
    can list everything that is wrong with the oracle's output.
    """

    def __init__(self, registry: ComponentRegistry | None = None, strict_props: bool = False) -> None:
        self.registry = registry or default_registry()
        self.strict_props = strict_props

    def validate(self, plan: Any) -> list[str]:
        """
        Validate a wire-format plan.

        Args:
            plan: Parsed oracle output, expected ``{"layout": PlanNode}``

        Returns:
            Ordered violation messages (empty = valid)
        """
        errors: list[str] = []

        if not isinstance(plan, Mapping) or not plan.get("layout"):
            errors.append('Plan must have a "layout" key')
            return errors

        self._walk(plan["layout"], "layout", errors)
        return errors

    def _walk(self, node: Any, path: str, errors: list[str]) -> None:
        if isinstance(node, str):
            return  # text leaf

        if not isinstance(node, Mapping):
            errors.append(f"Invalid node at {path}: expected object or string")
            return

        node_type = node.get("type")
        if not node_type:
            errors.append(f'Missing "type" at {path}')
            return

        spec = self.registry.get(node_type)
        if spec is None:
            allowed = ", ".join(self.registry.allowed())
            errors.append(
                f'Component "{node_type}" at {path} is NOT in the allowed list. Allowed: {allowed}'
            )

        props = node.get("props")
        if props is not None and not isinstance(props, Mapping):
            errors.append(f'Invalid "props" at {path}: expected object')
            props = None

        children = node.get("children")
        if children is not None and not isinstance(children, (list, str)):
            errors.append(f'Invalid "children" at {path}: expected array or string')
            children = None

        if self.strict_props and spec is not None:
            errors.extend(spec.check_props(props or {}, path, has_children=bool(children)))

        if isinstance(children, list):
            for i, child in enumerate(children):
                self._walk(child, f"{path}.children[{i}]", errors)


def validate_plan(plan: Any, registry: ComponentRegistry | None = None) -> list[str]:
    """Convenience wrapper returning the violation list for ``plan``."""
    return PlanValidator(registry).validate(plan)


def check_plan(plan: Any, validator: PlanValidator | None = None) -> Result[Plan, list[str]]:
    """
    Validate a wire-format plan and load it into the typed model (Result pattern).

    Args:
        plan: Parsed oracle output
        validator: Validator to use (default whitelist when omitted)

    Returns:
        Success with the typed Plan, or Failure with the violation list
    """
    validator = validator or PlanValidator()
    errors = validator.validate(plan)
    if errors:
        logger.info("plan_rejected", violations=len(errors))
        return Failure(errors)

    try:
        return Success(Plan.model_validate(plan))
    except ModelValidationError as e:
        return Failure([f"Malformed plan: {err['msg']} at {'.'.join(map(str, err['loc']))}" for err in e.errors()])
