"""
Oracle - the untrusted text generator behind planning and explanation.

The pipeline only ever sees ``propose(system_instructions, context) -> text``;
everything it returns is validated before use.
"""

import asyncio
import functools
from abc import ABC, abstractmethod

import pybreaker

from ..core import get_logger
from .loader import GeminiModel

logger = get_logger(__name__)


class Oracle(ABC):
    """Text-in, text-out model interface."""

    @abstractmethod
    async def propose(self, system_instructions: str, context: str) -> str:
        """
        Produce text for the given instructions and context.

        Raises:
            Any transport error; callers classify failures
        """


class BreakerListener(pybreaker.CircuitBreakerListener):
    """Listener for circuit breaker state changes."""

    def state_change(self, cb, old_state, new_state):
        """Called when circuit breaker state changes."""
        logger.warning(
            "breaker_state_change",
            breaker=cb.name,
            from_state=str(old_state),
            to_state=str(new_state),
        )


class GeminiOracle(Oracle):
    """
    Gemini-backed oracle.

    Blocking SDK calls run in the default executor behind a circuit breaker
    and are bounded by ``timeout``. An open breaker fails fast with
    ``pybreaker.CircuitBreakerError``; an expired call raises ``TimeoutError``.
    """

    def __init__(
        self,
        model: GeminiModel,
        timeout: float = 60.0,
        fail_max: int = 5,
        reset_timeout: int = 30,
    ) -> None:
        self.model = model
        self.timeout = timeout
        self._breaker = pybreaker.CircuitBreaker(
            fail_max=fail_max,
            reset_timeout=reset_timeout,
            name="gemini",
            listeners=[BreakerListener()],
        )

    @property
    def breaker_state(self) -> str:
        return self._breaker.current_state

    async def propose(self, system_instructions: str, context: str) -> str:
        loop = asyncio.get_running_loop()
        call = functools.partial(self._breaker.call, self.model.invoke, context, system_instructions)
        try:
            return await asyncio.wait_for(loop.run_in_executor(None, call), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error("oracle_timeout", timeout=self.timeout)
            raise
