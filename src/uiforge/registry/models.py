"""Component whitelist data models."""

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PropKind(str, Enum):
    """Kinds of value a component prop accepts."""

    STRING = "string"
    BOOLEAN = "boolean"
    NUMBER = "number"
    ENUM = "enum"
    ARRAY = "array"
    NODE = "node"


class PropSpec(BaseModel):
    """Contract for a single component prop."""

    model_config = ConfigDict(frozen=True)

    kind: PropKind
    required: bool = False
    default: Any = None
    values: tuple[str, ...] | None = Field(default=None, description="Allowed values (enum only)")
    items: str | None = Field(default=None, description="Element kind hint (array only)")
    description: str = ""

    @model_validator(mode="after")
    def _enum_has_values(self) -> "PropSpec":
        if self.kind == PropKind.ENUM and not self.values:
            raise ValueError("enum props must declare values")
        return self

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def conforms(self, value: Any) -> bool:
        """Whether a plan value matches this prop's kind."""
        match self.kind:
            case PropKind.STRING:
                return isinstance(value, str)
            case PropKind.BOOLEAN:
                return isinstance(value, bool)
            case PropKind.NUMBER:
                return isinstance(value, (int, float)) and not isinstance(value, bool)
            case PropKind.ENUM:
                return isinstance(value, str) and value in (self.values or ())
            case PropKind.ARRAY:
                return isinstance(value, list)
            case PropKind.NODE:
                return isinstance(value, (str, list, dict))
        return False


class ComponentSpec(BaseModel):
    """A whitelisted component: name, description and ordered prop contracts."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., pattern=r"^[A-Z][A-Za-z0-9]*$")
    description: str
    props: dict[str, PropSpec] = Field(default_factory=dict)

    def check_props(self, props: Mapping[str, Any], path: str, has_children: bool = False) -> list[str]:
        """
        Check prop values against this component's contract.

        Args:
            props: Props from a plan node
            path: Node path for diagnostics
            has_children: Whether the node carries structural children

        Returns:
            Violation messages (empty = conforming)
        """
        errors: list[str] = []

        for prop_name, value in props.items():
            spec = self.props.get(prop_name)
            if spec is None:
                errors.append(f'Unknown prop "{prop_name}" for {self.name} at {path}')
            elif not spec.conforms(value):
                if spec.kind == PropKind.ENUM:
                    allowed = ", ".join(spec.values or ())
                    errors.append(
                        f'Prop "{prop_name}" of {self.name} at {path} must be one of: {allowed} (got {value!r})'
                    )
                else:
                    errors.append(
                        f'Prop "{prop_name}" of {self.name} at {path} must be a {spec.kind.value} (got {type(value).__name__})'
                    )

        for prop_name, spec in self.props.items():
            if not spec.required or prop_name in props:
                continue
            # Node-typed props are satisfied by structural children
            if spec.kind == PropKind.NODE and has_children:
                continue
            errors.append(f'Missing required prop "{prop_name}" for {self.name} at {path}')

        return errors
