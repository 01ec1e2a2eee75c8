"""
Prompt templates.

Templates are Markdown files under prompts/templates with an optional YAML
front matter block (name, temperature, ...). The body is a Jinja2 template.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, NamedTuple

import yaml
from jinja2 import Environment, Template

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

_FRONT_MATTER_DELIMITER = "---"


class _Prompt(NamedTuple):
    body: str
    metadata: dict[str, Any]
    template: Template


class PromptLoader:
    """Reads, caches and renders prompt templates."""

    def __init__(self, prompts_dir: str | Path | None = None) -> None:
        self.prompts_dir = Path(prompts_dir) if prompts_dir else TEMPLATES_DIR
        self._env = Environment(autoescape=False)
        self._prompts: dict[str, _Prompt] = {}

    def load(self, prompt_path: str) -> str:
        """Template body without front matter, unrendered."""
        return self._get(prompt_path).body

    def render(self, prompt_path: str, **variables: Any) -> str:
        """
        Render a template with the given variables.

        Example:
            loader.render("agents/sql_generator.md", user_query=q, schema_text=s,
                          dialect="postgresql", dialect_label="PostgreSQL")
        """
        return self._get(prompt_path).template.render(**variables).strip()

    def get_metadata(self, prompt_path: str) -> dict[str, Any]:
        return self._get(prompt_path).metadata

    def _get(self, prompt_path: str) -> _Prompt:
        prompt = self._prompts.get(prompt_path)
        if prompt is None:
            file_path = self.prompts_dir / prompt_path
            if not file_path.is_file():
                raise FileNotFoundError(f"Prompt not found: {file_path}")
            metadata, body = _split_front_matter(file_path.read_text(encoding="utf-8"))
            prompt = _Prompt(body, metadata, self._env.from_string(body))
            self._prompts[prompt_path] = prompt
        return prompt


def _split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    if source.startswith(_FRONT_MATTER_DELIMITER):
        parts = source.split(_FRONT_MATTER_DELIMITER, 2)
        if len(parts) == 3:
            return yaml.safe_load(parts[1]) or {}, parts[2].lstrip()
    return {}, source
