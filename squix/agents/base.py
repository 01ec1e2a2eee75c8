"""
Pipeline stage base class.

A stage implements execute(); callers invoke the stage itself, which times the
run, records model usage in AgentMetadata and normalizes failures to AgentError.
Stages never retry: one call, one attempt.
"""

import logging
import time
from abc import ABC, abstractmethod

from squix.llm.base import BaseLLMProvider
from squix.llm.models import LLMMessage, LLMRequest, LLMResponse
from squix.models.agent import AgentError, AgentInput, AgentMetadata, AgentOutput

logger = logging.getLogger(__name__)


class BaseAgent(ABC):
    """
    One stage of the question-answering pipeline.

    AgentErrors raised by execute() propagate as they are; any other exception
    becomes an AgentError chained to the original.
    """

    def __init__(self, name: str, llm_provider: BaseLLMProvider | None = None):
        self.name = name
        self.llm = llm_provider
        self._metadata = AgentMetadata(agent_name=name)

        logger.info(f"Initialized {self.name}", extra={"agent": self.name})

    @abstractmethod
    async def execute(self, input: AgentInput) -> AgentOutput:
        """Run the stage. Subclasses return their typed output or raise AgentError."""

    async def __call__(self, input: AgentInput) -> AgentOutput:
        started_at = time.perf_counter()
        self._metadata = AgentMetadata(agent_name=self.name)
        logger.info(
            f"Starting {self.name}", extra={"agent": self.name, "query": input.query[:100]}
        )

        try:
            output = await self.execute(input)
        except Exception as e:
            self._finish(started_at, error=str(e))
            expected = isinstance(e, AgentError)
            logger.error(
                f"{self.name} failed: {e}",
                extra={
                    "agent": self.name,
                    "error_type": type(e).__name__,
                    "duration_ms": self._metadata.duration_ms,
                },
                exc_info=not expected,
            )
            if expected:
                raise
            raise AgentError(
                agent=self.name,
                message=f"Unexpected error: {e}",
                recoverable=False,
                context={"error_type": type(e).__name__},
            ) from e

        self._finish(started_at)
        output.metadata = self._metadata
        logger.info(
            f"Completed {self.name} in {self._metadata.duration_ms:.0f}ms",
            extra={
                "agent": self.name,
                "success": output.success,
                "llm_calls": self._metadata.llm_calls,
                "tokens_used": self._metadata.tokens_used,
            },
        )
        return output

    async def _generate(
        self,
        messages: list[LLMMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
        provider: BaseLLMProvider | None = None,
    ) -> LLMResponse:
        """Send one self-contained prompt and count it against this run."""
        llm = provider or self.llm
        if llm is None:
            raise AgentError(self.name, "No LLM provider configured", recoverable=False)

        response = await llm.generate(
            LLMRequest(messages=messages, temperature=temperature, max_tokens=max_tokens)
        )
        self._metadata.llm_calls += 1
        tokens = response.usage.total_tokens
        if tokens:
            self._metadata.tokens_used = (self._metadata.tokens_used or 0) + tokens
        return response

    def _finish(self, started_at: float, error: str | None = None) -> None:
        self._metadata.mark_complete()
        self._metadata.duration_ms = (time.perf_counter() - started_at) * 1000
        if error:
            self._metadata.error = error
