"""LangGraph conversation state schema."""

import operator
from typing import Annotated, Optional, Sequence, TypedDict

from src.schemas.conversation import ChatTurn, Route
from src.schemas.verification import VerificationResult


class ConversationState(TypedDict):
    """State that flows through the chat graph for one conversation turn.

    Created fresh per request and discarded after the response. History is
    supplied by the caller every time; nothing is kept between turns.
    """
    # Input
    input: str
    history: list[ChatTurn]

    # Raw output of every node, in visitation order (append-only)
    accumulated_messages: Annotated[list[str], operator.add]

    # Written once by classify; None until then
    route: Optional[Route]

    # Written by exactly one terminal node
    result: Optional[str]

    # Branch payloads
    extracted_contract: Optional[str]
    verification_outcome: Optional[VerificationResult]


def initial_state(text: str, history: Sequence[ChatTurn] = ()) -> ConversationState:
    """Fresh state for one turn."""
    return {
        "input": text,
        "history": list(history),
        "accumulated_messages": [],
        "route": None,
        "result": None,
        "extracted_contract": None,
        "verification_outcome": None,
    }
