"""
LangGraph wrapper around the Supervisor.

This exposes capability execution as a compiled graph so it can be mounted as
a node in a larger graph or served remotely. The graph is a minimal execution
wrapper that:
- Reads capability and context from the state
- Awaits Supervisor.execute
- Writes the ExecutionResult back unchanged

The graph does NOT plan, retry or loop.
"""

import logging
from typing import Any, Dict, Optional

from langgraph.graph import END, StateGraph
from typing_extensions import TypedDict

from agents.supervisor import Supervisor
from models.schemas import ExecutionContext, ExecutionResult

logger = logging.getLogger(__name__)


class ExecutionState(TypedDict, total=False):
    capability: str
    context: Dict[str, Any]
    result: Optional[Dict[str, Any]]


def build_execution_graph(supervisor: Supervisor):
    async def execute_node(state: ExecutionState) -> Dict[str, Any]:
        capability = state.get("capability", "")
        context = ExecutionContext.model_validate(state.get("context") or {})
        logger.info("Execution graph invoked (capability=%s)", capability)

        result: ExecutionResult = await supervisor.execute(capability, context)
        return {"result": result.model_dump(mode="json", by_alias=True)}

    graph = StateGraph(ExecutionState)
    graph.add_node("execute", execute_node)
    graph.set_entry_point("execute")
    graph.add_edge("execute", END)

    compiled = graph.compile()
    logger.info("Execution graph compiled")
    return compiled
