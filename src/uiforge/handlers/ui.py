"""UI Handler - maps pipeline calls to status codes and JSON bodies."""

import time
from html import escape
from typing import Any

from pydantic import ValidationError
from returns.result import Success

from ..agents.pipeline import UIPipeline
from ..core import InputError, PipelineError, RollbackRequest, SessionRequest, get_logger
from ..monitoring import metrics_collector
from ..render import RenderEngine, to_html

logger = get_logger(__name__)

Response = tuple[int, dict[str, Any]]

EMPTY_PREVIEW = '<div class="preview-empty">No UI generated yet. Type a prompt to get started.</div>'


def _session_id(data: dict[str, Any]) -> str:
    try:
        return SessionRequest.model_validate(data).session_id
    except ValidationError as e:
        raise InputError("Invalid session id") from e


class UIHandler:
    """Handles UI generation, version and preview requests."""

    def __init__(self, pipeline: UIPipeline, engine: RenderEngine) -> None:
        self.pipeline = pipeline
        self.engine = engine

    async def generate(self, body: dict[str, Any]) -> Response:
        """Generate or modify a UI (POST /api/generate)."""
        start_time = time.perf_counter()
        prompt = body.get("prompt")
        logger.info("ui_generate", prompt=str(prompt)[:50])

        try:
            result = await self.pipeline.generate(body.get("sessionId"), prompt)
        except PipelineError as e:
            return self._failure("generate", e, start_time)
        except Exception as e:
            metrics_collector.record_request("generate", "error", time.perf_counter() - start_time)
            metrics_collector.record_error("generation_error", "ui_handler")
            logger.error("generation", error=str(e))
            raise

        metrics_collector.record_request("generate", "success", time.perf_counter() - start_time)
        return 200, result.to_payload()

    async def rollback(self, body: dict[str, Any]) -> Response:
        """Roll back to an earlier version (POST /api/rollback)."""
        start_time = time.perf_counter()
        try:
            try:
                request = RollbackRequest.model_validate(body)
            except ValidationError as e:
                raise InputError("Invalid version index") from e
            result = await self.pipeline.rollback(request.session_id, request.version_index)
        except PipelineError as e:
            return self._failure("rollback", e, start_time)

        metrics_collector.record_request("rollback", "success", time.perf_counter() - start_time)
        return 200, result.to_payload()

    def versions(self, query: dict[str, Any]) -> Response:
        try:
            session_id = _session_id(query)
        except InputError as e:
            return e.status_code, e.to_payload()
        summaries = self.pipeline.versions(session_id)
        return 200, {"versions": [s.model_dump(mode="json") for s in summaries]}

    def session(self, query: dict[str, Any]) -> Response:
        try:
            session_id = _session_id(query)
        except InputError as e:
            return e.status_code, e.to_payload()
        return 200, self.pipeline.session_view(session_id).to_payload()

    async def reset(self, body: dict[str, Any]) -> Response:
        """Discard a session; always succeeds."""
        try:
            session_id = _session_id(body)
        except InputError as e:
            return e.status_code, e.to_payload()
        await self.pipeline.reset(session_id)
        return 200, {"message": "Session reset"}

    def preview(self, query: dict[str, Any]) -> tuple[int, str]:
        """
        Render the newest version to HTML.

        Render failures are shown inline rather than as an error status, so a
        broken program never takes the preview down.
        """
        try:
            session_id = _session_id(query)
        except InputError as e:
            return e.status_code, f'<div class="preview-error">{escape(e.message)}</div>'

        result = self.engine.render(self.pipeline.latest_code(session_id))
        if isinstance(result, Success):
            tree = result.unwrap()
            metrics_collector.record_render("ok" if tree is not None else "empty")
            body = to_html(tree) if tree is not None else EMPTY_PREVIEW
        else:
            error = result.failure()
            metrics_collector.record_render(error.kind.value)
            body = (
                '<div class="preview-error"><strong>Render Error:</strong>'
                f"<pre>{escape(error.message)}</pre></div>"
            )

        return 200, f'<div class="preview-content">{body}</div>'

    @staticmethod
    def _failure(operation: str, error: PipelineError, start_time: float) -> Response:
        duration = time.perf_counter() - start_time
        status = "validation_error" if isinstance(error, InputError) else "error"
        metrics_collector.record_request(operation, status, duration)
        if not isinstance(error, InputError):
            metrics_collector.record_error(error.category, "ui_handler")
        logger.warning(operation + "_failed", category=error.category, error=error.message)
        return error.status_code, error.to_payload()
