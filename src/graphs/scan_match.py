"""Photo scan matching graph: analyze, load candidates, score."""

from __future__ import annotations

from langgraph.graph import StateGraph
from pydantic import ValidationError

from src.config import config
from src.graphs.base_graph import BaseGraph, parse_reports, with_state
from src.models.pet import ReportKind, ReportStatus
from src.models.probe import MatchProbe
from src.state import ScanMatchState
from src.tools.firestore_tools import get_reports, save_scan_result
from src.tools.llm_client import get_llm
from src.tools.llm_tools import analyze_pet_image
from src.tools.scoring_tools import rank_matches
from src.utils.errors import FirestoreUnavailableError, LLMError
from src.utils.logging_config import logger


class ScanMatchGraph(BaseGraph):
    """Match a scanned pet against stored reports."""

    def build_graph(self) -> StateGraph:
        graph = StateGraph(ScanMatchState)

        graph.add_node("analyze_image", self.node_analyze_image)
        graph.add_node("load_candidates", self.node_load_candidates)
        graph.add_node("score_candidates", self.node_score_candidates)
        graph.add_node("finalize_response", self.node_finalize_response)

        graph.set_entry_point("analyze_image")
        graph.add_edge("analyze_image", "load_candidates")
        graph.add_edge("load_candidates", "score_candidates")
        graph.add_edge("score_candidates", "finalize_response")
        graph.set_finish_point("finalize_response")

        return graph

    def node_analyze_image(self, state: ScanMatchState) -> ScanMatchState:
        """Validate the supplied probe or derive one from the photo."""

        self._log_node_execution("analyze_image", state)

        if state.get("probe") is not None:
            try:
                probe = MatchProbe.model_validate(state["probe"])
            except ValidationError as exc:
                self._log_node_error("analyze_image", exc)
                return with_state(state, error=f"Invalid probe: {exc}")
            return with_state(state, probe=probe.model_dump(mode="json", by_alias=True))

        image_url = state.get("image_url")
        if not image_url:
            return with_state(state, error="Either probe or image_url is required")

        try:
            llm = get_llm(timeout=self.timeout)
            probe = analyze_pet_image(image_url, llm)
        except (LLMError, ValueError) as exc:
            self._log_node_error("analyze_image", exc)
            return with_state(
                state, error="Photo analysis failed. Returning empty matches."
            )

        return with_state(state, probe=probe.model_dump(mode="json", by_alias=True))

    def node_load_candidates(self, state: ScanMatchState) -> ScanMatchState:
        """Use caller-supplied reports or query active reports."""

        if state.get("error"):
            return state

        self._log_node_execution("load_candidates", state)
        if "reports" in state:
            return with_state(state, candidates=state["reports"])

        try:
            kind = ReportKind(state["report_type"]) if state.get("report_type") else None
        except ValueError:
            return with_state(
                state, error=f"Unknown report_type: {state['report_type']}"
            )

        try:
            candidates = get_reports(
                report_kind=kind.value if kind else None,
                status=ReportStatus.ACTIVE.value,
                limit=config.MAX_REPORTS,
            )
            return with_state(state, candidates=candidates)
        except FirestoreUnavailableError as exc:
            self._log_node_error("load_candidates", exc)
            return with_state(
                state,
                error="Failed to load candidates. Returning empty matches.",
                candidates=[],
            )

    def node_score_candidates(self, state: ScanMatchState) -> ScanMatchState:
        """Score and rank candidates against the probe."""

        if state.get("error"):
            return state

        self._log_node_execution("score_candidates", state)
        probe = MatchProbe.model_validate(state["probe"])
        ranked = rank_matches(
            probe,
            parse_reports(state.get("candidates", [])),
            threshold=config.MATCH_SCORE_THRESHOLD,
            limit=config.MAX_MATCH_RESULTS,
        )
        matches = [
            {
                **m.report.to_document(),
                "score": round(m.score, 2),
                "breakdown": m.breakdown.model_dump(),
            }
            for m in ranked
        ]
        return with_state(state, matches=matches)

    def node_finalize_response(self, state: ScanMatchState) -> ScanMatchState:
        """Record the scan and attach response metadata."""

        if state.get("error"):
            return with_state(
                state,
                matches=[],
                response_metadata={
                    "success": False,
                    "error": state.get("error"),
                    "total_candidates": len(state.get("candidates", [])),
                    "match_count": 0,
                },
            )

        matches = state.get("matches", [])
        if state.get("user_id"):
            try:
                save_scan_result(state["user_id"], state.get("probe", {}), matches)
            except FirestoreUnavailableError as exc:
                logger.warning("Failed to save scan result: %s", str(exc))

        return with_state(
            state,
            response_metadata={
                "success": True,
                "error": None,
                "total_candidates": len(state.get("candidates", [])),
                "match_count": len(matches),
            },
        )


def create_scan_match_graph():
    """Build and compile the scan matching graph for server usage."""

    graph_builder = ScanMatchGraph(timeout=config.GRAPH_TIMEOUT)
    return graph_builder.compile()
