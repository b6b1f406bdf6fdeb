"""Base class for LangGraph graphs to share common behavior."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from langgraph.graph import StateGraph
from pydantic import ValidationError

from src.models.pet import PetReport
from src.utils.errors import GraphExecutionError
from src.utils.logging_config import logger


def with_state(state: dict, **updates) -> dict:
    """Return a new state dict with updates applied."""

    return {**state, **updates}


def parse_reports(documents: Iterable[dict]) -> list[PetReport]:
    """Parse report documents, skipping any that fail validation.

    A malformed document can never satisfy a filter, so it is dropped with a
    warning instead of failing the whole request.
    """

    reports: list[PetReport] = []
    for doc in documents:
        try:
            reports.append(PetReport.model_validate(doc))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed report %s: %s",
                doc.get("id", "<no id>"),
                exc.error_count(),
            )
    return reports


class BaseGraph(ABC):
    """Abstract base class for all LangGraph implementations.

    Centralizes logging and provides a consistent compile pattern so graph
    subclasses focus on node logic rather than boilerplate.
    """

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self.logger = logger

    @abstractmethod
    def build_graph(self) -> StateGraph:
        """Build and return the StateGraph instance."""

    def _log_node_execution(self, node_name: str, state: dict) -> None:
        """Log node execution start with minimal state context."""

        self.logger.debug("Executing node: %s keys=%s", node_name, sorted(state))

    def _log_node_error(self, node_name: str, error: Exception) -> None:
        """Log node execution error without leaking user data."""

        self.logger.error("Node %s failed: %s", node_name, str(error))

    def compile(self):
        """Build and compile the graph for execution."""

        try:
            return self.build_graph().compile()
        except Exception as exc:
            raise GraphExecutionError(
                f"{type(self).__name__} failed to compile: {exc}"
            ) from exc
