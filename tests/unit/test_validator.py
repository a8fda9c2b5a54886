"""Tests for plan validation."""

import pytest
from hypothesis import given, strategies as st
from returns.result import Failure, Success

from uiforge.plan import Plan, PlanValidator, check_plan, validate_plan
from uiforge.registry import default_registry

ALLOWED = sorted(default_registry().names())


@pytest.fixture
def validator(registry):
    return PlanValidator(registry)


@pytest.mark.unit
class TestStructure:
    """Top-level shape checks."""

    @pytest.mark.parametrize("plan", [None, [], "layout", 42, {}, {"layout": None}, {"layout": {}}])
    def test_missing_layout(self, validator, plan):
        assert validator.validate(plan) == ['Plan must have a "layout" key']

    def test_valid_login_plan(self, validator, login_plan):
        assert validator.validate(login_plan) == []

    def test_valid_dashboard_plan(self, validator, dashboard_plan):
        assert validator.validate(dashboard_plan) == []

    def test_text_root_is_valid(self, validator):
        assert validator.validate({"layout": "Hello"}) == []

    def test_missing_type(self, validator):
        plan = {"layout": {"type": "Container", "children": [{"props": {}}]}}
        assert validator.validate(plan) == ['Missing "type" at layout.children[0]']

    def test_invalid_node(self, validator):
        plan = {"layout": {"type": "Container", "children": [42]}}
        assert validator.validate(plan) == ["Invalid node at layout.children[0]: expected object or string"]

    def test_invalid_props_and_children(self, validator):
        plan = {"layout": {"type": "Card", "props": [1], "children": {"type": "Button"}}}
        assert validator.validate(plan) == [
            'Invalid "props" at layout: expected object',
            'Invalid "children" at layout: expected array or string',
        ]


@pytest.mark.unit
class TestWhitelist:
    """Unknown components are always reported."""

    def test_unknown_component(self, validator):
        plan = {"layout": {"type": "Container", "children": [{"type": "Carousel", "props": {}}]}}
        errors = validator.validate(plan)

        assert len(errors) == 1
        assert errors[0].startswith('Component "Carousel" at layout.children[0] is NOT in the allowed list.')
        assert "Allowed: Button, Card, Input" in errors[0]

    def test_intrinsic_tag_rejected(self, validator):
        errors = validator.validate({"layout": {"type": "div"}})
        assert errors and 'Component "div" at layout' in errors[0]

    def test_every_problem_reported(self, validator):
        """The walk continues past the first problem."""
        plan = {
            "layout": {
                "type": "Frame",
                "children": [
                    {"type": "Carousel"},
                    {"type": "Card", "children": [{"type": "Spinner"}, {"nope": 1}]},
                ],
            }
        }
        errors = validator.validate(plan)

        assert [e.split(" is NOT")[0] for e in errors[:3]] == [
            'Component "Frame" at layout',
            'Component "Carousel" at layout.children[0]',
            'Component "Spinner" at layout.children[1].children[0]',
        ]
        assert errors[3] == 'Missing "type" at layout.children[1].children[1]'

    def test_unknown_child_under_unknown_parent(self, validator):
        plan = {"layout": {"type": "Frame", "children": [{"type": "Button", "props": {"children": "Go"}}]}}
        assert len(validator.validate(plan)) == 1

    def test_props_not_checked_by_default(self, validator):
        plan = {"layout": {"type": "Button", "props": {"variant": "huge", "color": "red"}}}
        assert validator.validate(plan) == []


@pytest.mark.unit
class TestStrictProps:
    def test_strict_reports_prop_problems(self, registry):
        validator = PlanValidator(registry, strict_props=True)
        plan = {"layout": {"type": "Button", "props": {"children": "Go", "size": "xl"}}}

        assert validator.validate(plan) == [
            "Prop \"size\" of Button at layout must be one of: sm, md, lg (got 'xl')"
        ]

    def test_strict_accepts_login_plan(self, registry, login_plan):
        # Container, Card and Flex get their content from structural children
        assert PlanValidator(registry, strict_props=True).validate(login_plan) == []


@pytest.mark.unit
class TestCheckPlan:
    def test_success_returns_typed_plan(self, login_plan):
        result = check_plan(login_plan)

        assert isinstance(result, Success)
        plan = result.unwrap()
        assert isinstance(plan, Plan)
        assert plan.layout.type == "Container"
        assert plan.component_types() == {"Container", "Card", "Flex", "Input", "Button"}

    def test_failure_carries_violations(self):
        result = check_plan({"layout": {"type": "Carousel"}})

        assert isinstance(result, Failure)
        assert len(result.failure()) == 1

    def test_wire_round_trip(self, dashboard_plan):
        plan = check_plan(dashboard_plan).unwrap()
        assert Plan.model_validate(plan.to_wire()) == plan

    def test_string_children_shorthand(self):
        plan = check_plan({"layout": {"type": "Card", "children": "Hello"}}).unwrap()
        assert plan.layout.children == ["Hello"]

    def test_validate_plan_wrapper(self, login_plan):
        assert validate_plan(login_plan) == []


# ============================================================================
# Properties
# ============================================================================

def _nodes(names):
    leaves = st.one_of(
        st.text(max_size=5),
        st.fixed_dictionaries({"type": names}),
    )
    return st.recursive(
        leaves,
        lambda inner: st.fixed_dictionaries({"type": names, "children": st.lists(inner, max_size=3)}),
        max_leaves=10,
    )


@pytest.mark.unit
@given(layout=_nodes(st.sampled_from(ALLOWED)).filter(lambda n: n != ""))
def test_whitelisted_trees_validate(layout):
    """Any tree built only from whitelisted types is accepted."""
    assert validate_plan({"layout": layout}) == []


@pytest.mark.unit
@given(
    layout=_nodes(st.sampled_from(ALLOWED)).filter(lambda n: n != ""),
    intruder=st.sampled_from(["Carousel", "script", "iframe", "Video"]),
)
def test_unknown_type_always_reported(layout, intruder):
    """Wrapping any tree in an unknown component is reported."""
    errors = validate_plan({"layout": {"type": intruder, "children": [layout]}})
    assert errors[0].startswith(f'Component "{intruder}" at layout is NOT in the allowed list.')
