"""
LLM Request and Response Models

Every pipeline stage sends one self-contained prompt (an optional persona
plus one instruction block) and reads back one text completion. There is no
conversation history, so only system and user messages exist.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

FinishReason = Literal["stop", "length", "content_filter", "error"]

# Rough characters-per-token ratio for providers that report no usage
_CHARS_PER_TOKEN = 4


class LLMMessage(BaseModel):
    """One part of a prompt: the persona (system) or the instruction block (user)."""

    role: Literal["system", "user"]
    content: str = Field(..., min_length=1)


class LLMRequest(BaseModel):
    """A single prompt plus optional per-call overrides of provider defaults."""

    messages: list[LLMMessage] = Field(..., min_length=1)
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, gt=0)
    model: str | None = None

    def as_prompt(self) -> str:
        """
        Flatten the messages into one labelled text block.

        Example:
            System: You are Ace.

            User: How am I doing?
        """
        return "\n\n".join(f"{msg.role.capitalize()}: {msg.content}" for msg in self.messages)


class LLMUsage(BaseModel):
    """Token usage for one call."""

    prompt_tokens: int = Field(default=0, ge=0)
    completion_tokens: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)

    @classmethod
    def estimate(cls, prompt: str, completion: str) -> "LLMUsage":
        prompt_tokens = len(prompt) // _CHARS_PER_TOKEN
        completion_tokens = len(completion) // _CHARS_PER_TOKEN
        return cls(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )


class LLMResponse(BaseModel):
    """Text completion returned by a provider."""

    content: str
    model: str
    usage: LLMUsage = Field(default_factory=LLMUsage)
    finish_reason: FinishReason = "stop"
    provider: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def truncated(self) -> bool:
        """True when the completion hit the token limit."""
        return self.finish_reason == "length"
