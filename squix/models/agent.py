"""
Typed messages exchanged between pipeline stages, plus the public call
options, the chat result and the error hierarchy.
"""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Dialect = Literal["postgresql", "mysql"]

IntentName = Literal[
    "database_query",
    "strategic_advice",
    "clarification_needed",
    "general_chat",
]

# Intents answered from query results
DATA_INTENTS: frozenset[str] = frozenset({"database_query", "strategic_advice"})


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AgentMetadata(BaseModel):
    """Timing and model usage for one stage run."""

    agent_name: str
    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None
    duration_ms: float | None = None
    llm_calls: int = 0
    tokens_used: int | None = None
    error: str | None = None

    def mark_complete(self) -> None:
        self.completed_at = _utcnow()
        self.duration_ms = (self.completed_at - self.started_at).total_seconds() * 1000


class AgentInput(BaseModel):
    """Fields every stage receives; stages add their own."""

    query: str = Field(..., description="The user's message")
    context: dict[str, Any] = Field(default_factory=dict)


class AgentOutput(BaseModel):
    success: bool
    metadata: AgentMetadata


# ============================================================================
# Classifier
# ============================================================================


class IntentClassification(BaseModel):
    """Validated outcome of intent classification."""

    intent: IntentName = Field(..., description="Classified purpose of the message")
    missing_info: str | None = Field(
        None, description="What to ask the user when clarification is needed"
    )

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def needs_data(self) -> bool:
        """Whether answering requires running a query."""
        return self.intent in DATA_INTENTS


class ClassifierAgentInput(AgentInput):
    """Input for ClassifierAgent."""

    schema_text: str = Field(..., description="Rendered database schema")
    system_prompt: str = Field(..., description="Persona injected into the prompt")


class ClassifierAgentOutput(AgentOutput):
    """Output from ClassifierAgent."""

    classification: IntentClassification


# ============================================================================
# SQL generation and validation
# ============================================================================


class ValidatedSQL(BaseModel):
    """A single read-only statement that passed the safety validator."""

    sql: str = Field(..., min_length=1, description="Cleaned SQL statement")
    statement_type: str = Field(
        default="UNKNOWN", description="Statement type as reported by sqlparse"
    )

    model_config = ConfigDict(frozen=True)


class SQLAgentInput(AgentInput):
    """Input for SQLAgent."""

    schema_text: str = Field(..., description="Rendered database schema")
    dialect: Dialect = Field(..., description="Target SQL dialect")


class SQLAgentOutput(AgentOutput):
    """Output from SQLAgent."""

    validated_sql: ValidatedSQL


# ============================================================================
# Execution
# ============================================================================


class QueryResultSet(BaseModel):
    """Rows returned by the executor, normalized to JSON-safe scalars."""

    rows: list[dict[str, Any]] = Field(default_factory=list)
    columns: list[str] = Field(default_factory=list)
    row_count: int = Field(default=0, ge=0)
    execution_time_ms: float = Field(default=0.0, ge=0.0)


class ExecutorAgentInput(AgentInput):
    """Input for ExecutorAgent."""

    validated_sql: ValidatedSQL


class ExecutorAgentOutput(AgentOutput):
    """Output from ExecutorAgent."""

    result: QueryResultSet


# ============================================================================
# Synthesis
# ============================================================================


class SynthesisAgentInput(AgentInput):
    """Input for ResponseSynthesisAgent."""

    mode: Literal["analysis", "clarification", "chat"]
    system_prompt: str = ""
    result: QueryResultSet | None = None
    missing_info: str | None = None


class SynthesisAgentOutput(AgentOutput):
    """Output from ResponseSynthesisAgent."""

    answer: str


# ============================================================================
# Public call options and results
# ============================================================================


class ModelAssignments(BaseModel):
    """Optional model names per pipeline role."""

    classifier: str | None = None
    sql: str | None = None
    analysis: str | None = None
    chat: str | None = None


class SquixOptions(BaseModel):
    """Configuration options for the Squix agent."""

    models: ModelAssignments = Field(default_factory=ModelAssignments)
    default_system_prompt: str | None = None


class ChatOptions(BaseModel):
    """Options for a single chat call."""

    system_prompt: str | None = None


class ChatResponse(BaseModel):
    """Structured outcome of one chat call."""

    answer: str
    intent: IntentName
    missing_info: str | None = None
    sql: str | None = None
    result: QueryResultSet | None = None


# ============================================================================
# Errors
# ============================================================================


class AgentError(Exception):
    """
    Raised when a pipeline stage or the orchestrator cannot finish a call.

    `agent` names the component that gave up; `context` carries whatever
    helps debugging (the offending SQL, the raw model reply).
    """

    def __init__(
        self,
        agent: str,
        message: str,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(f"[{agent}] {message}")
        self.agent = agent
        self.message = message
        self.recoverable = recoverable
        self.context = dict(context or {})

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent": self.agent,
            "message": self.message,
            "recoverable": self.recoverable,
            "context": self.context,
            "type": type(self).__name__,
        }


class ConfigurationError(AgentError):
    """Invalid or incomplete configuration (connection parameters, providers)."""

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__("Squix", message, recoverable=False, context=context)


class NotConnectedError(AgentError):
    """The pipeline was used before a successful connect()."""

    def __init__(self, message: str = "Database not connected. Call connect() first."):
        super().__init__("Squix", message, recoverable=False)


class ResponseParseError(AgentError):
    """Model output could not be reduced to the expected structured data."""

    def __init__(
        self,
        agent: str,
        message: str,
        response_text: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        merged = dict(context or {})
        if response_text is not None:
            merged["response"] = response_text
        self.response_text = response_text
        super().__init__(agent, message, recoverable=False, context=merged)


class SQLSafetyViolation(AgentError):
    """Generated SQL contained multiple statements or a denied keyword."""

    def __init__(self, agent: str, message: str, sql: str, keyword: str | None = None):
        self.sql = sql
        self.keyword = keyword
        super().__init__(
            agent,
            message,
            recoverable=False,
            context={"sql": sql, "keyword": keyword},
        )


class ExecutionError(AgentError):
    """The database rejected or failed a validated statement."""

    def __init__(self, agent: str, message: str, sql: str):
        self.sql = sql
        super().__init__(agent, message, recoverable=False, context={"sql": sql})
