"""Generation invoker for the chat graph.

Turns (system instructions, history, user input) into one chat-completion
call and returns the raw text. No parsing and no retry happen here; the
graph decides what a failed call means (a request-level failure during
classification, an apology inside a node).
"""

import time
from typing import Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from src.llm.client import get_llm
from src.schemas.conversation import ChatTurn
from src.utils.logging import log, get_logger

MODULE = "llm.invoker"
logger = get_logger()


def build_messages(
    system_prompt: str,
    history: Sequence[ChatTurn],
    user_input: str,
) -> list[BaseMessage]:
    """System message, then history in order, then the current input."""
    messages: list[BaseMessage] = [SystemMessage(content=system_prompt)]
    for turn in history:
        if turn.role == "human":
            messages.append(HumanMessage(content=turn.content))
        else:
            messages.append(AIMessage(content=turn.content))
    messages.append(HumanMessage(content=user_input))
    return messages


async def invoke_llm_raw(
    system_prompt: str,
    history: Sequence[ChatTurn],
    user_input: str,
    *,
    temperature: Optional[float] = None,
    call_name: str = "invoke",
) -> str:
    """Invoke the LLM once and return its stripped text output."""
    llm = get_llm() if temperature is None else get_llm(temperature=temperature)
    _t0 = time.monotonic()

    response = await llm.ainvoke(build_messages(system_prompt, history, user_input))

    latency_ms = int((time.monotonic() - _t0) * 1000)
    raw = response.content if isinstance(response.content, str) else str(response.content)
    raw = raw.strip()

    log.debug(logger, MODULE, "llm_response",
              f"LLM call complete for {call_name}",
              latency_ms=latency_ms, raw_length=len(raw),
              history_turns=len(history))
    return raw


class LLMGenerator:
    """Text generation collaborator backed by the configured providers."""

    def __init__(self, temperature: Optional[float] = None):
        self.temperature = temperature

    async def generate(
        self,
        system_prompt: str,
        history: Sequence[ChatTurn],
        user_input: str,
    ) -> str:
        return await invoke_llm_raw(
            system_prompt, history, user_input,
            temperature=self.temperature,
            call_name="generate",
        )
