"""Chat endpoint: one conversation turn through the graph per request."""

from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException

from src.agent.classifier import ClassificationError
from src.agent.graph import build_conversation_graph, run_conversation
from src.db.session import async_session
from src.db.stores import DatabaseContributionStore
from src.llm.invoker import LLMGenerator
from src.schemas import ChatRequest, ChatResponse
from src.tools.github import GitHubDeploymentVerifier
from src.utils.logging import log, get_logger

MODULE = "chat"
logger = get_logger()

router = APIRouter()


@lru_cache(maxsize=1)
def get_conversation_graph():
    """Compiled graph wired to the production collaborators.

    The graph holds no per-request state, so one instance serves every request.
    """
    return build_conversation_graph(
        generator=LLMGenerator(),
        verifier=GitHubDeploymentVerifier(),
        contributions=DatabaseContributionStore(async_session),
    )


@router.post("", response_model=ChatResponse)
async def chat(body: ChatRequest, graph=Depends(get_conversation_graph)):
    """Route the message, run the chosen branch, return its reply."""
    try:
        final = await run_conversation(graph, body.input, body.history)
    except ClassificationError as e:
        log.warning(logger, MODULE, "chat_failed", "Turn could not be classified",
                    error=str(e))
        raise HTTPException(status_code=502, detail="The assistant is unavailable, please try again")

    return ChatResponse(
        route=final["route"],
        result=final["result"] or "",
        extracted_contract=final.get("extracted_contract"),
        verification=final.get("verification_outcome"),
    )
