"""Plan Data Models."""

from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanNode(BaseModel):
    """A typed component node in a validated plan."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(..., min_length=1, description="Whitelisted component name")
    props: dict[str, Any] = Field(default_factory=dict)
    children: list[Union["PlanNode", str]] = Field(default_factory=list)

    @field_validator("props", mode="before")
    @classmethod
    def _none_props(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("children", mode="before")
    @classmethod
    def _text_children(cls, v: Any) -> Any:
        # A bare string is shorthand for a single text leaf
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    def iter_types(self):
        """Yield every component type in this subtree (pre-order)."""
        yield self.type
        for child in self.children:
            if isinstance(child, PlanNode):
                yield from child.iter_types()


class Plan(BaseModel):
    """Complete UI plan: a single root node under ``layout``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    layout: PlanNode

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready ``{"layout": ...}`` form."""
        return self.model_dump(mode="json")

    def component_types(self) -> set[str]:
        """Every component type used anywhere in the plan."""
        return set(self.layout.iter_types())


PlanNode.model_rebuild()
