"""LangGraph chat graph.

Defines the state machine for one conversation turn:

  classify → contribute → END
           → escrow     → END
           → verify     → END
           → END              (route UNKNOWN, classify already answered)

The branch taken after classify is decided by next_step(), a pure function
of the state driven by NODE_FOR_ROUTE. Exactly one terminal node runs.
"""

from typing import Sequence

from langgraph.graph import StateGraph, END

from src.agent.classifier import ClassificationError
from src.agent.collaborators import ContributionStore, DeploymentVerifier, TextGenerator
from src.agent.nodes import ConversationNodes
from src.agent.state import ConversationState, initial_state
from src.schemas.conversation import ChatTurn, Route
from src.utils.logging import log, get_logger

MODULE = "graph"
logger = get_logger()

NODE_FOR_ROUTE = {
    Route.CONTRIBUTION: "contribute",
    Route.ESCROW: "escrow",
    Route.GITHUB_VERIFICATION: "verify",
}

TERMINAL_NODES = tuple(NODE_FOR_ROUTE.values())


def next_step(state: ConversationState) -> str:
    """Conditional edge out of classify. UNKNOWN (or no route) ends the turn."""
    return NODE_FOR_ROUTE.get(state.get("route"), END)


def build_conversation_graph(
    generator: TextGenerator,
    verifier: DeploymentVerifier,
    contributions: ContributionStore,
):
    """Build and compile the chat graph around the given collaborators."""
    nodes = ConversationNodes(generator, verifier, contributions)
    graph = StateGraph(ConversationState)

    graph.add_node("classify", nodes.classify)
    graph.add_node("contribute", nodes.contribute)
    graph.add_node("escrow", nodes.escrow)
    graph.add_node("verify", nodes.verify)

    graph.set_entry_point("classify")
    graph.add_conditional_edges(
        "classify",
        next_step,
        {**{name: name for name in TERMINAL_NODES}, END: END},
    )
    for name in TERMINAL_NODES:
        graph.add_edge(name, END)

    return graph.compile()


async def run_conversation(
    graph,
    text: str,
    history: Sequence[ChatTurn] = (),
) -> ConversationState:
    """Run one turn through the graph and return the final state.

    Raises:
        ClassificationError: if the turn could not be classified.
    """
    log.info(logger, MODULE, "run_start", "Conversation turn started",
             input_length=len(text), history_turns=len(history))
    try:
        final = await graph.ainvoke(initial_state(text, history))
    except ClassificationError as e:
        log.error(logger, MODULE, "run_failed", "Conversation turn failed",
                  error=str(e), error_type=type(e).__name__)
        raise

    log.info(logger, MODULE, "run_done", "Conversation turn complete",
             route=final["route"].value,
             has_contract=final.get("extracted_contract") is not None,
             has_verification=final.get("verification_outcome") is not None,
             messages=len(final["accumulated_messages"]))
    return final
