"""Home feed graph: nearby urgent, recent and found reports plus reunions."""

from __future__ import annotations

from langgraph.graph import StateGraph
from pydantic import ValidationError

from src.config import config
from src.graphs.base_graph import BaseGraph, parse_reports, with_state
from src.models.pet import GeoPoint
from src.state import HomeFeedState
from src.tools.feed_tools import build_home_feed
from src.tools.firestore_tools import get_reports
from src.utils.errors import FirestoreUnavailableError, InvalidInputError

SECTION_NAMES = ("urgent", "recent", "found", "reunited")


def parse_radius(raw) -> float:
    """Return the requested near-me radius, or the configured default."""

    if raw is None:
        return config.NEAR_ME_RADIUS_KM
    if isinstance(raw, bool):
        raise InvalidInputError(f"Invalid radius_km: {raw!r}")
    try:
        radius = float(raw)
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid radius_km: {raw!r}") from exc
    if not radius > 0:
        raise InvalidInputError(f"radius_km must be positive, got {raw!r}")
    return radius


class HomeFeedGraph(BaseGraph):
    """Sectioned home feed around the user's position."""

    def build_graph(self) -> StateGraph:
        graph = StateGraph(HomeFeedState)

        graph.add_node("load_reports", self.node_load_reports)
        graph.add_node("build_sections", self.node_build_sections)
        graph.add_node("finalize_response", self.node_finalize_response)

        graph.set_entry_point("load_reports")
        graph.add_edge("load_reports", "build_sections")
        graph.add_edge("build_sections", "finalize_response")
        graph.set_finish_point("finalize_response")

        return graph

    def node_load_reports(self, state: HomeFeedState) -> HomeFeedState:
        """Use caller-supplied reports or query Firestore."""

        self._log_node_execution("load_reports", state)
        if "reports" in state:
            return state

        try:
            return with_state(state, reports=get_reports(limit=config.MAX_REPORTS))
        except FirestoreUnavailableError as exc:
            self._log_node_error("load_reports", exc)
            return with_state(
                state,
                error="Firestore unavailable. Returning empty feed.",
                reports=[],
            )

    def node_build_sections(self, state: HomeFeedState) -> HomeFeedState:
        """Split reports into feed sections."""

        if state.get("error"):
            return state

        self._log_node_execution("build_sections", state)
        try:
            location = state.get("location")
            reference = GeoPoint.model_validate(location) if location else None
            near_km = parse_radius(state.get("radius_km"))
        except ValidationError as exc:
            self._log_node_error("build_sections", exc)
            return with_state(state, error=f"Invalid location: {exc}")
        except InvalidInputError as exc:
            self._log_node_error("build_sections", exc)
            return with_state(state, error=str(exc))

        feed = build_home_feed(
            parse_reports(state.get("reports", [])),
            reference,
            near_km=near_km,
        )
        sections = {
            name: [r.to_document() for r in getattr(feed, name)]
            for name in SECTION_NAMES
        }
        return with_state(state, sections=sections)

    def node_finalize_response(self, state: HomeFeedState) -> HomeFeedState:
        """Attach response metadata."""

        if state.get("error"):
            sections = {name: [] for name in SECTION_NAMES}
        else:
            sections = state.get("sections", {name: [] for name in SECTION_NAMES})

        metadata = {
            "success": not state.get("error"),
            "error": state.get("error"),
            "total_reports": len(state.get("reports", [])),
            "section_counts": {name: len(sections.get(name, [])) for name in SECTION_NAMES},
        }
        return with_state(state, sections=sections, response_metadata=metadata)


def create_home_feed_graph():
    """Build and compile the home feed graph for server usage."""

    graph_builder = HomeFeedGraph(timeout=config.GRAPH_TIMEOUT)
    return graph_builder.compile()
