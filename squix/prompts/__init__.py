"""Prompt templates and loader."""

from squix.prompts.loader import PromptLoader

__all__ = ["PromptLoader"]
