"""Pydantic models shared across the pipeline: stage I/O, schema descriptions and errors."""

from squix.models.agent import (
    DATA_INTENTS,
    AgentError,
    AgentInput,
    AgentMetadata,
    AgentOutput,
    ChatOptions,
    ChatResponse,
    ClassifierAgentInput,
    ClassifierAgentOutput,
    ConfigurationError,
    Dialect,
    ExecutionError,
    ExecutorAgentInput,
    ExecutorAgentOutput,
    IntentClassification,
    IntentName,
    ModelAssignments,
    NotConnectedError,
    QueryResultSet,
    ResponseParseError,
    SQLAgentInput,
    SQLAgentOutput,
    SQLSafetyViolation,
    SquixOptions,
    SynthesisAgentInput,
    SynthesisAgentOutput,
    ValidatedSQL,
)
from squix.models.schema import (
    ColumnDescription,
    ForeignKeyDescription,
    KeyRole,
    TableDescription,
)

__all__ = [
    "DATA_INTENTS",
    "AgentError",
    "AgentInput",
    "AgentMetadata",
    "AgentOutput",
    "ChatOptions",
    "ChatResponse",
    "ClassifierAgentInput",
    "ClassifierAgentOutput",
    "ColumnDescription",
    "ConfigurationError",
    "Dialect",
    "ExecutionError",
    "ExecutorAgentInput",
    "ExecutorAgentOutput",
    "ForeignKeyDescription",
    "IntentClassification",
    "IntentName",
    "KeyRole",
    "ModelAssignments",
    "NotConnectedError",
    "QueryResultSet",
    "ResponseParseError",
    "SQLAgentInput",
    "SQLAgentOutput",
    "SQLSafetyViolation",
    "SquixOptions",
    "SynthesisAgentInput",
    "SynthesisAgentOutput",
    "TableDescription",
    "ValidatedSQL",
]
