"""Tests for planner and explainer prompt construction."""

import pytest

from uiforge.agents import PromptBuilder, planner_system_prompt, wants_brevity
from uiforge.sessions import HistoryEntry, Role


@pytest.mark.unit
def test_planner_prompt_embeds_whitelist(registry):
    prompt = planner_system_prompt(registry)

    assert "=== COMPONENTS ===\n" + registry.describe_for_prompt() in prompt
    assert "=== OUTPUT FORMAT ===" in prompt
    assert "=== DESIGN GUIDELINES ===" in prompt
    assert "You can ONLY use components from the list below." in prompt


@pytest.mark.unit
@pytest.mark.parametrize(
    "prompt, expected",
    [("Make it SHORT", True), ("a brief summary", True), ("one line please", True), ("a dashboard", False)],
)
def test_wants_brevity(prompt, expected):
    assert wants_brevity(prompt) is expected


@pytest.mark.unit
class TestPlannerContext:
    def test_new_request(self):
        assert PromptBuilder.build_planner_context("A form", []) == "=== REQUEST ===\nA form"

    def test_history_without_plan(self):
        history = [HistoryEntry(role=Role.USER, content="hi")]
        context = PromptBuilder.build_planner_context("A form", history)

        assert context == "=== CONVERSATION HISTORY ===\nuser: hi\n\n=== REQUEST ===\nA form"

    def test_modification(self):
        plan = {"layout": {"type": "Card", "props": {"title": "X"}}}
        context = PromptBuilder.build_planner_context("Add a button", [], plan)

        assert context.startswith("=== CURRENT UI PLAN ===\n")
        assert '"type": "Card"' in context
        assert "=== MODIFICATION REQUEST ===\nAdd a button\n" in context
        assert "Output the COMPLETE updated plan" in context


@pytest.mark.unit
class TestExplainerContext:
    def test_new_ui(self):
        context = PromptBuilder.build_explainer_context("A form", {"layout": {"type": "Card"}}, False)

        assert context.startswith('User\'s request: "A form"\n\n=== LAYOUT PLAN ===\n')
        assert context.endswith("This is a NEW UI. Explain the layout and component choices.")

    def test_brief_modification(self):
        context = PromptBuilder.build_explainer_context("Be concise", {"layout": "x"}, True)

        assert "This was a MODIFICATION of an existing UI." in context
        assert "IMPORTANT: The user explicitly asked for a SHORT/CONCISE explanation." in context
