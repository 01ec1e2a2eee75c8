"""Pipeline orchestration."""

from squix.pipeline.orchestrator import Squix

__all__ = ["Squix"]
