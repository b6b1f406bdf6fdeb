"""Report search graph: load, filter, optionally sort."""

from __future__ import annotations

from langgraph.graph import StateGraph
from pydantic import ValidationError

from src.config import config
from src.graphs.base_graph import BaseGraph, parse_reports, with_state
from src.models.criteria import FilterCriteria
from src.state import SearchState
from src.tools.filter_tools import filter_reports, sort_by_recent
from src.tools.firestore_tools import get_reports
from src.utils.errors import FirestoreUnavailableError, InvalidInputError

SORT_RECENT = "recent"


def parse_criteria(raw: dict | None) -> FilterCriteria:
    """Validate client filter values, applying the configured search radius."""

    data = dict(raw or {})
    if (
        data.get("center") is not None
        and data.get("radiusKm") is None
        and data.get("radius_km") is None
    ):
        data["radiusKm"] = config.DEFAULT_SEARCH_RADIUS_KM
    try:
        return FilterCriteria.model_validate(data)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid filter criteria: {exc}") from exc


class SearchGraph(BaseGraph):
    """Multi-criteria report search."""

    def build_graph(self) -> StateGraph:
        graph = StateGraph(SearchState)

        graph.add_node("load_reports", self.node_load_reports)
        graph.add_node("apply_filters", self.node_apply_filters)
        graph.add_node("sort_results", self.node_sort_results)
        graph.add_node("finalize_response", self.node_finalize_response)

        graph.set_entry_point("load_reports")
        graph.add_edge("load_reports", "apply_filters")
        graph.add_edge("apply_filters", "sort_results")
        graph.add_edge("sort_results", "finalize_response")
        graph.set_finish_point("finalize_response")

        return graph

    def node_load_reports(self, state: SearchState) -> SearchState:
        """Use caller-supplied reports or query Firestore."""

        self._log_node_execution("load_reports", state)
        if "reports" in state:
            return state

        try:
            criteria = parse_criteria(state.get("criteria"))
            reports = get_reports(
                report_kind=criteria.report_type.value if criteria.report_type else None,
                species=criteria.species.value if criteria.species else None,
                limit=config.MAX_REPORTS,
            )
            return with_state(state, reports=reports)
        except InvalidInputError as exc:
            self._log_node_error("load_reports", exc)
            return with_state(state, error=str(exc), reports=[])
        except FirestoreUnavailableError as exc:
            self._log_node_error("load_reports", exc)
            return with_state(
                state,
                error="Firestore unavailable. Returning empty results.",
                reports=[],
            )

    def node_apply_filters(self, state: SearchState) -> SearchState:
        """Apply every active criterion to the loaded reports."""

        if state.get("error"):
            return state

        try:
            self._log_node_execution("apply_filters", state)
            criteria = parse_criteria(state.get("criteria"))
            reports = parse_reports(state.get("reports", []))
            filtered = filter_reports(reports, criteria)
            return with_state(
                state, results=[r.to_document() for r in filtered]
            )
        except InvalidInputError as exc:
            self._log_node_error("apply_filters", exc)
            return with_state(state, error=str(exc), results=[])

    def node_sort_results(self, state: SearchState) -> SearchState:
        """Order results newest first when requested."""

        if state.get("error") or state.get("sort") != SORT_RECENT:
            return state

        self._log_node_execution("sort_results", state)
        ordered = sort_by_recent(parse_reports(state.get("results", [])))
        return with_state(state, results=[r.to_document() for r in ordered])

    def node_finalize_response(self, state: SearchState) -> SearchState:
        """Attach response metadata."""

        metadata = {
            "success": not state.get("error"),
            "error": state.get("error"),
            "total_reports": len(state.get("reports", [])),
            "result_count": len(state.get("results", [])),
        }
        return with_state(
            state,
            results=state.get("results", []) if not state.get("error") else [],
            response_metadata=metadata,
        )


def create_search_graph():
    """Build and compile the search graph for server usage."""

    graph_builder = SearchGraph(timeout=config.GRAPH_TIMEOUT)
    return graph_builder.compile()
