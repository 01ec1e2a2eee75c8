"""
SQLAgent: single-statement SQL generation.

Asks the model for one read-only statement in the connected dialect,
pulls the "query" field out of its JSON answer, and runs it through the
SQLSafetyValidator before anything reaches the database.
"""

import logging

from squix.agents.base import BaseAgent
from squix.agents.validator import SQLSafetyValidator
from squix.config import get_settings
from squix.llm.factory import LLMProviderFactory
from squix.llm.models import LLMMessage
from squix.models.agent import ResponseParseError, SQLAgentInput, SQLAgentOutput
from squix.prompts.loader import PromptLoader
from squix.utils.json_extractor import JSONExtractionError, extract_json

logger = logging.getLogger(__name__)

PROMPT_PATH = "agents/sql_generator.md"

DIALECT_LABELS = {
    "postgresql": "PostgreSQL",
    "mysql": "MySQL",
}


class SQLAgent(BaseAgent):
    """
    SQL generation agent.

    Uses the main model; output is never executed without validation.
    """

    def __init__(
        self,
        llm_provider=None,
        model: str | None = None,
        validator: SQLSafetyValidator | None = None,
    ):
        if llm_provider is None:
            llm_provider = LLMProviderFactory.create_agent_provider(
                "sql", get_settings().llm, model=model
            )
        super().__init__(name="SQLAgent", llm_provider=llm_provider)
        self.validator = validator or SQLSafetyValidator()
        self.prompts = PromptLoader()

    async def execute(self, input: SQLAgentInput) -> SQLAgentOutput:
        """
        Generate and validate SQL for a question.

        Raises:
            ResponseParseError: If the model output has no usable "query"
            SQLSafetyViolation: If the statement fails validation
        """
        messages = self.build_prompt(input.query, input.schema_text, input.dialect)
        temperature = self.prompts.get_metadata(PROMPT_PATH).get("temperature")

        response = await self._generate(messages, temperature=temperature)
        candidate = self._extract_query(response.content)

        validated = self.validator.validate(candidate)

        logger.info(
            f"[{self.name}] Generated {validated.statement_type} statement",
            extra={"agent": self.name, "dialect": input.dialect, "sql": validated.sql[:200]},
        )

        return SQLAgentOutput(success=True, validated_sql=validated, metadata=self._metadata)

    def build_prompt(self, query: str, schema_text: str, dialect: str) -> list[LLMMessage]:
        """Render the generation prompt for the connected dialect."""
        content = self.prompts.render(
            PROMPT_PATH,
            dialect=dialect,
            dialect_label=DIALECT_LABELS.get(dialect, dialect),
            schema_text=schema_text,
            user_query=query,
        )
        return [LLMMessage(role="user", content=content)]

    def _extract_query(self, content: str) -> str:
        try:
            data = extract_json(content)
        except JSONExtractionError as e:
            raise ResponseParseError(
                self.name, f"Could not parse SQL response: {e}", response_text=content
            ) from e

        query = data.get("query")
        if not isinstance(query, str) or not query.strip():
            raise ResponseParseError(
                self.name,
                'SQL response is missing a non-empty "query" field',
                response_text=content,
            )
        return query
