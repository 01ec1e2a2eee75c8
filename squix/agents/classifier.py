"""
ClassifierAgent: intent routing.

Decides which of four paths a user message takes:
- database_query: the user wants specific data
- strategic_advice: the user wants a plan grounded in data
- clarification_needed: the request is ambiguous, missing_info says what to ask
- general_chat: conversational message, no data needed

One model call per message, using the lightweight classifier model.
"""

import logging

from pydantic import ValidationError

from squix.agents.base import BaseAgent
from squix.config import get_settings
from squix.llm.factory import LLMProviderFactory
from squix.llm.models import LLMMessage
from squix.models.agent import (
    ClassifierAgentInput,
    ClassifierAgentOutput,
    IntentClassification,
    ResponseParseError,
)
from squix.prompts.loader import PromptLoader
from squix.utils.json_extractor import JSONExtractionError, extract_json

logger = logging.getLogger(__name__)

PROMPT_PATH = "agents/classifier.md"


class ClassifierAgent(BaseAgent):
    """Intent classification agent."""

    def __init__(self, llm_provider=None, model: str | None = None):
        """
        Initialize ClassifierAgent with LLM provider.

        Args:
            llm_provider: Optional LLM provider. If None, creates the classifier role provider.
            model: Optional model name for the classifier role
        """
        if llm_provider is None:
            llm_provider = LLMProviderFactory.create_agent_provider(
                "classifier", get_settings().llm, model=model
            )
        super().__init__(name="ClassifierAgent", llm_provider=llm_provider)
        self.prompts = PromptLoader()

    async def execute(self, input: ClassifierAgentInput) -> ClassifierAgentOutput:
        """
        Classify a user message.

        Raises:
            ResponseParseError: If the model output has no valid intent object
        """
        messages = self.build_prompt(input.query, input.schema_text, input.system_prompt)
        temperature = self.prompts.get_metadata(PROMPT_PATH).get("temperature")

        response = await self._generate(messages, temperature=temperature)
        classification = self._parse_classification(response.content)

        logger.info(
            f"[{self.name}] Intent: {classification.intent}",
            extra={
                "agent": self.name,
                "intent": classification.intent,
                "missing_info": classification.missing_info,
            },
        )

        return ClassifierAgentOutput(
            success=True,
            classification=classification,
            metadata=self._metadata,
        )

    def build_prompt(self, query: str, schema_text: str, system_prompt: str) -> list[LLMMessage]:
        """Persona as the system message, routing instructions as the user message."""
        user_prompt = self.prompts.render(
            PROMPT_PATH,
            schema_text=schema_text,
            user_query=query,
        )
        return [
            LLMMessage(role="system", content=system_prompt),
            LLMMessage(role="user", content=user_prompt),
        ]

    def _parse_classification(self, content: str) -> IntentClassification:
        try:
            data = extract_json(content)
            return IntentClassification.model_validate(data)
        except JSONExtractionError as e:
            raise ResponseParseError(
                self.name, f"Could not parse classification: {e}", response_text=content
            ) from e
        except ValidationError as e:
            raise ResponseParseError(
                self.name,
                "Classification response did not contain a known intent",
                response_text=content,
                context={"errors": e.errors(include_url=False)},
            ) from e
