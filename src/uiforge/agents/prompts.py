"""
Prompt Builder
Planner and explainer instructions plus per-call context construction.
"""

from collections.abc import Sequence

from ..core import safe_json_dumps
from ..registry import ComponentRegistry
from ..sessions import HistoryEntry

PLANNER_RULES = """You are a UI layout planner. Your job is to take a user's description of a UI and produce a structured JSON plan.

CRITICAL RULES:
1. You can ONLY use components from the list below. No exceptions.
2. You must NOT invent new components.
3. You must NOT add any CSS, styles, or Tailwind classes.
4. You must NOT use HTML tags directly.
5. Your output must be ONLY valid JSON, nothing else. No markdown fences, no explanations.

STRICT MODE (STATELESS ONLY):
- This is a STATIC UI generator. You cannot generate state, logic, event handlers, or interactivity.
- If the user asks for auto-sliding content, timers, animations, forms that submit or API calls, fall back to a static version of that part.
- Do NOT try to fake interactivity with buttons that don't work.
- The onClick prop is a description only; it never executes anything.
- If the user asks for a component that is NOT in the list (like "Carousel", "Slider", "DatePicker"), do not build it from other components unless the user explicitly asks for a custom build."""

OUTPUT_FORMAT = """Return a JSON object with this shape:
{
  "layout": {
    "type": "ComponentName",
    "props": { ... },
    "children": [ ... ]
  }
}

Each child in the "children" array is either:
- A string (for text content)
- Another component object with "type", "props", and optionally "children"

EXAMPLE:
User: "A login form with email and password"
{
  "layout": {
    "type": "Container",
    "props": {},
    "children": [
      {
        "type": "Card",
        "props": { "title": "Login" },
        "children": [
          {
            "type": "Flex",
            "props": { "direction": "column", "gap": "md" },
            "children": [
              { "type": "Input", "props": { "label": "Email", "type": "email", "placeholder": "Enter your email" } },
              { "type": "Input", "props": { "label": "Password", "type": "password", "placeholder": "Enter your password" } },
              { "type": "Button", "props": { "children": "Sign In", "variant": "primary" } }
            ]
          }
        ]
      }
    ]
  }
}

Output ONLY the JSON. No text before or after it."""

DESIGN_GUIDELINES = """- Avoid empty Cards. A Card titled "Analytics" should contain a Chart or a prominent Typography value.
- A "Dashboard" request gets meaningful content (Charts, stats, Tables), not empty placeholders.
- Dashboards start with a Navbar, then a Container holding a Typography (h2) title and a Grid (2 or 3 columns) of Cards.
- Collections of Cards always go in a Grid; use Grid whenever equal widths are needed.
- Charts always sit inside a Card.

PRESERVATION RULES (FOR MODIFICATIONS):
1. Do not delete existing components unless the user explicitly asks to remove, delete or clear them.
2. Append new features to the existing layout (e.g. inside the main Container) instead of replacing it.
3. Keep existing data and props unless the user asks to change them.
4. Build headers, footers and hero sections from Flex, Typography and Card; never invent components."""

EXPLAINER_SYSTEM_PROMPT = """You are a UI design explainer. Given a user's request and the JSON layout plan that was created, explain the design decisions in plain English.

RULES:
1. Be concise and friendly, like a colleague explaining their work.
2. Reference specific components and why they were chosen.
3. If this is a modification, explain what changed and what stayed the same.
4. Use bullet points for clarity.
5. Keep it short: 3 to 6 bullet points max.
6. Do NOT use markdown code fences or output any JSON/code.
7. Only describe what is ACTUALLY in the JSON plan. Never mention features (charts, forms, data) that are not present in the plan's components."""

BREVITY_TRIGGERS = ("short", "concise", "one line", "brief")


def planner_system_prompt(registry: ComponentRegistry) -> str:
    """
    Planner instructions with the whitelist embedded.

    Rebuilt from the registry on every call, so the oracle always sees the
    current component contracts.
    """
    return "\n".join(
        [
            PLANNER_RULES,
            f"\n=== COMPONENTS ===\n{registry.describe_for_prompt()}",
            f"\n=== OUTPUT FORMAT ===\n{OUTPUT_FORMAT}",
            f"\n=== DESIGN GUIDELINES ===\n{DESIGN_GUIDELINES}",
        ]
    )


def wants_brevity(prompt: str) -> bool:
    lowered = prompt.lower()
    return any(trigger in lowered for trigger in BREVITY_TRIGGERS)


class PromptBuilder:
    """Builds per-call oracle context."""

    @staticmethod
    def build_planner_context(
        request: str,
        history: Sequence[HistoryEntry],
        current_plan: dict | None = None,
    ) -> str:
        """
        Build the planner context.

        Args:
            request: User request
            history: Recent conversation entries (already truncated)
            current_plan: Wire-format plan being modified, if any

        Returns:
            Complete context string
        """
        parts = []

        if history:
            lines = "\n".join(f"{entry.role}: {entry.content}" for entry in history)
            parts.append(f"=== CONVERSATION HISTORY ===\n{lines}\n")

        if current_plan is not None:
            parts.append(
                "=== CURRENT UI PLAN ===\n"
                "Modify this plan based on the new request; do NOT start from scratch unless "
                f"the user asks for a completely new UI.\n{safe_json_dumps(current_plan, indent=2)}\n"
            )
            parts.append(f"=== MODIFICATION REQUEST ===\n{request}\n")
            parts.append(
                "You are MODIFYING an existing layout.\n"
                "- PRESERVE the existing structure unless told to remove it.\n"
                "- INSERT additions into the appropriate place (e.g. inside the main Container).\n"
                "- Output the COMPLETE updated plan, including unchanged parts."
            )
        else:
            parts.append(f"=== REQUEST ===\n{request}")

        return "\n".join(parts)

    @staticmethod
    def build_retry_context(original_context: str, problems: Sequence[str]) -> str:
        """
        Corrective context after a rejected plan.

        Repeats the original context so the oracle still knows what was asked.
        """
        listed = "\n".join(f"- {p}" for p in problems)
        return (
            f"{original_context}\n\n"
            f"=== PREVIOUS OUTPUT REJECTED ===\n{listed}\n\n"
            "Fix every problem above and return valid JSON using ONLY the allowed components."
        )

    @staticmethod
    def build_explainer_context(request: str, plan: dict, is_modification: bool) -> str:
        parts = [
            f'User\'s request: "{request}"',
            f"\n=== LAYOUT PLAN ===\n{safe_json_dumps(plan, indent=2)}\n",
        ]

        if is_modification:
            parts.append("This was a MODIFICATION of an existing UI. Explain what changed and what was kept.")
        else:
            parts.append("This is a NEW UI. Explain the layout and component choices.")

        if wants_brevity(request):
            parts.append(
                "\nIMPORTANT: The user explicitly asked for a SHORT/CONCISE explanation. "
                "Ignore the bullet points rule if needed and give a single sentence or very brief summary."
            )

        return "\n".join(parts)
