"""
Squix Agents

Each agent handles one stage of answering a message:
    - ClassifierAgent: intent routing
    - SQLAgent: single-statement SQL generation (validated by SQLSafetyValidator)
    - ExecutorAgent: query execution and row normalization
    - ResponseSynthesisAgent: analysis, clarification and chat answers
"""

from squix.agents.base import BaseAgent
from squix.agents.classifier import ClassifierAgent
from squix.agents.executor import ExecutorAgent, normalize_rows, normalize_value
from squix.agents.response_synthesis import ResponseSynthesisAgent
from squix.agents.sql import SQLAgent
from squix.agents.validator import SQLSafetyValidator

__all__ = [
    "BaseAgent",
    "ClassifierAgent",
    "ExecutorAgent",
    "ResponseSynthesisAgent",
    "SQLAgent",
    "SQLSafetyValidator",
    "normalize_rows",
    "normalize_value",
]
