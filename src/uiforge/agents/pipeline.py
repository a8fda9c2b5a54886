"""
UI Pipeline - oracle plan, validate (one corrective retry), compile, explain, commit.
"""

import asyncio
import time
from typing import Any

import pybreaker
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from returns.result import Failure, Result, Success

from ..compiler import PlanCompiler
from ..core import (
    GenerateRequest,
    InputError,
    LogContext,
    OracleParseError,
    PipelineError,
    PlanValidationError,
    Settings,
    UpstreamServiceError,
    check_prompt_injection,
    get_logger,
    new_request_id,
)
from ..models import Oracle
from ..monitoring import MetricsCollector, metrics_collector
from ..plan import Plan, PlanValidator, check_plan, parse_plan_text
from ..registry import ComponentRegistry
from ..sessions import HistoryEntry, SessionStore, Version, VersionSummary
from .prompts import EXPLAINER_SYSTEM_PROMPT, PromptBuilder, planner_system_prompt

logger = get_logger(__name__)

INVALID_PLAN_MESSAGE = "AI could not produce a valid plan."
NOT_JSON_PROBLEM = "The output was not a valid JSON object. Return ONLY the JSON plan, with no text around it."


class PayloadModel(BaseModel):
    """Immutable result model serialized with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class GenerationResult(PayloadModel):
    """Outcome of a generation or rollback."""

    code: str
    plan: dict[str, Any]
    explanation: str
    version_index: int
    total_versions: int

    @classmethod
    def from_version(cls, version: Version, total: int) -> "GenerationResult":
        return cls(
            code=version.code,
            plan=version.plan.to_wire(),
            explanation=version.explanation,
            version_index=version.index,
            total_versions=total,
        )


class SessionView(PayloadModel):
    """Snapshot of a session for clients."""

    history: list[HistoryEntry]
    code: str
    versions: list[VersionSummary]
    current_version_index: int


def classify_upstream(error: BaseException) -> str:
    """
    Map an oracle transport failure to a stable category.

    Matching is on the error type name and message, checked in order:
    rate limiting, overload, quota; anything else is "unavailable".
    """
    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return "timeout"
    if isinstance(error, pybreaker.CircuitBreakerError):
        return "overloaded"

    text = f"{type(error).__name__}: {error}"
    lowered = text.lower()
    if "429" in text or "Too Many Requests" in text or "ResourceExhausted" in text:
        return "rate_limited"
    if "503" in text or "Service Unavailable" in text or "overloaded" in lowered:
        return "overloaded"
    if "quota" in lowered or "limit" in lowered:
        return "quota"
    return "unavailable"


def _input_error(error: ValidationError) -> InputError:
    first = error.errors()[0]
    cause = (first.get("ctx") or {}).get("error")
    if cause is not None:
        return InputError(str(cause))
    field = ".".join(str(part) for part in first.get("loc", ()))
    return InputError(f"{field}: {first['msg']}" if field else first["msg"])


class UIPipeline:
    """
    Orchestrates one natural-language UI request end to end.

    The oracle is untrusted: its output is parsed and validated against the
    whitelist before anything is compiled, and only validated plans are ever
    committed as versions.
    """

    def __init__(
        self,
        oracle: Oracle,
        store: SessionStore,
        registry: ComponentRegistry,
        settings: Settings,
        metrics: MetricsCollector | None = None,
    ) -> None:
        self.oracle = oracle
        self.store = store
        self.registry = registry
        self.settings = settings
        self.metrics = metrics or metrics_collector
        self.validator = PlanValidator(registry, strict_props=settings.strict_props)
        self.compiler = PlanCompiler(registry)

    async def generate(self, session_id: str | None, prompt: str | None) -> GenerationResult:
        """
        Generate (or modify) a session's UI from a prompt.

        Raises:
            InputError: Empty, oversized or suspicious prompt (no oracle call is made)
            OracleParseError: Oracle output unparseable after the retry
            PlanValidationError: Oracle plan invalid after the retry
            UpstreamServiceError: Oracle transport failure
        """
        try:
            request = GenerateRequest(
                session_id=session_id or self.settings.default_session_id,
                prompt=prompt or "",
            )
        except ValidationError as e:
            raise _input_error(e) from e

        if len(request.prompt) > self.settings.max_prompt_length:
            raise InputError(f"Prompt too long (max {self.settings.max_prompt_length} characters)")
        check_prompt_injection(request.prompt)

        with LogContext(request_id=new_request_id(), session_id=request.session_id):
            async with self.store.lock(request.session_id):
                return await self._generate_locked(request.session_id, request.prompt)

    async def _generate_locked(self, session_id: str, prompt: str) -> GenerationResult:
        session = self.store.get_or_create(session_id)
        is_modification = session.is_modification
        current_plan = session.current_plan.to_wire() if session.current_plan else None
        history = session.history[-self.settings.max_history_length :]

        logger.info("generate_start", modification=is_modification, history=len(history))

        instructions = planner_system_prompt(self.registry)
        context = PromptBuilder.build_planner_context(prompt, history, current_plan)
        plan = await self._plan(instructions, context)

        artifact = self.compiler.compile(plan)
        explanation = await self._explain(prompt, plan, is_modification)

        index = self.store.commit(session_id, plan, artifact, explanation, prompt)
        total = len(self.store.get_or_create(session_id).versions)

        logger.info("generate_complete", version=index, components=list(artifact.components))
        return GenerationResult(
            code=artifact.code,
            plan=plan.to_wire(),
            explanation=explanation,
            version_index=index,
            total_versions=total,
        )

    async def _plan(self, instructions: str, context: str) -> Plan:
        raw = await self._ask(instructions, context, purpose="plan")
        first = self._evaluate(raw)
        if isinstance(first, Success):
            return first.unwrap()

        error = first.failure()
        problems = error.details if isinstance(error, PlanValidationError) else [NOT_JSON_PROBLEM]
        self.metrics.record_plan_retry(error.category)
        logger.warning("plan_retry", reason=error.category, problems=len(problems))

        retry_context = PromptBuilder.build_retry_context(context, problems)
        raw = await self._ask(instructions, retry_context, purpose="retry")
        second = self._evaluate(raw)
        if isinstance(second, Success):
            return second.unwrap()

        error = second.failure()
        logger.error("plan_failed", reason=error.category)
        raise error

    def _evaluate(self, raw: str) -> Result[Plan, PipelineError]:
        try:
            candidate = parse_plan_text(raw, repair=self.settings.json_repair)
        except OracleParseError as e:
            return Failure(e)
        return check_plan(candidate, self.validator).alt(
            lambda problems: PlanValidationError(INVALID_PLAN_MESSAGE, details=problems)
        )

    async def _explain(self, prompt: str, plan: Plan, is_modification: bool) -> str:
        context = PromptBuilder.build_explainer_context(prompt, plan.to_wire(), is_modification)
        text = await self._ask(EXPLAINER_SYSTEM_PROMPT, context, purpose="explain")
        return text.strip()

    async def _ask(self, instructions: str, context: str, purpose: str) -> str:
        start = time.perf_counter()
        try:
            text = await self.oracle.propose(instructions, context)
        except Exception as e:
            category = classify_upstream(e)
            self.metrics.record_oracle_call(purpose, category, time.perf_counter() - start)
            logger.error("oracle_failed", purpose=purpose, category=category, error=str(e)[:300])
            raise UpstreamServiceError(category) from e

        self.metrics.record_oracle_call(purpose, "ok", time.perf_counter() - start)
        return text if isinstance(text, str) else ""

    async def rollback(self, session_id: str, version_index: object) -> GenerationResult:
        """
        Make an earlier version current.

        Raises:
            InputError: If ``version_index`` is not a valid index for the session
        """
        with LogContext(request_id=new_request_id(), session_id=session_id):
            async with self.store.lock(session_id):
                version = self.store.rollback(session_id, version_index)
                total = len(self.store.get(session_id).versions)

        self.metrics.record_rollback()
        return GenerationResult.from_version(version, total)

    def versions(self, session_id: str) -> list[VersionSummary]:
        return self.store.summarize(session_id)

    def session_view(self, session_id: str) -> SessionView:
        """History, latest code, version list and the current version pointer."""
        session = self.store.get(session_id)
        if session is None:
            return SessionView(history=[], code="", versions=[], current_version_index=-1)

        latest = session.latest
        return SessionView(
            history=list(session.history),
            code=latest.code if latest else "",
            versions=[v.summary() for v in session.versions],
            current_version_index=session.current_index,
        )

    def latest_code(self, session_id: str) -> str:
        """Code of the newest version ("" when nothing has been generated)."""
        session = self.store.get(session_id)
        latest = session.latest if session else None
        return latest.code if latest else ""

    async def reset(self, session_id: str) -> bool:
        async with self.store.lock(session_id):
            return self.store.reset(session_id)
