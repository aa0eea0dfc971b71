"""
LangGraph workflow turning a state snapshot into report text.
"""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from langgraph.graph import END, START, StateGraph

from selfreview.schemas import AppState, NormalizedInput

from .aggregation import aggregate
from .report_generator import ReportGenerator


class ReportGraphState(TypedDict, total=False):
    """State tracked inside the LangGraph workflow."""

    snapshot: AppState
    normalized: NormalizedInput
    content: str


async def _aggregate(state: ReportGraphState) -> ReportGraphState:
    return {"normalized": aggregate(state["snapshot"])}


async def _synthesize(
    state: ReportGraphState, generator: ReportGenerator
) -> ReportGraphState:
    snapshot = state["snapshot"]
    content = await generator.generate(
        state["normalized"], job_name=snapshot.user_input.job_name
    )
    return {"content": content}


def create_report_graph(generator: ReportGenerator) -> Any:
    """Compile and return the aggregate -> synthesize workflow."""
    graph = StateGraph(ReportGraphState)

    async def synthesize_node(state: ReportGraphState) -> ReportGraphState:
        return await _synthesize(state, generator)

    graph.add_node("aggregate", _aggregate)
    graph.add_node("synthesize", synthesize_node)

    graph.add_edge(START, "aggregate")
    graph.add_edge("aggregate", "synthesize")
    graph.add_edge("synthesize", END)
    return graph.compile()


async def run_report_graph(
    snapshot: AppState,
    generator: ReportGenerator,
    *,
    graph: Optional[Any] = None,
) -> str:
    """Execute the workflow for one snapshot and return the report text."""
    compiled = graph or create_report_graph(generator)
    result = await compiled.ainvoke({"snapshot": snapshot})
    return result["content"]


__all__ = ["ReportGraphState", "create_report_graph", "run_report_graph"]
