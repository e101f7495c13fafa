"""Interfaces of the external systems the chat graph calls.

The graph only ever sees these protocols. Production wiring lives in
src.api.routes.chat; tests pass scripted fakes.
"""

from typing import Any, Protocol, Sequence

from src.schemas.conversation import ChatTurn
from src.schemas.verification import VerificationParams, VerificationResult


class TextGenerator(Protocol):
    async def generate(
        self,
        system_prompt: str,
        history: Sequence[ChatTurn],
        user_input: str,
    ) -> str: ...


class DeploymentVerifier(Protocol):
    async def verify(self, params: VerificationParams) -> VerificationResult: ...


class ContributionStore(Protocol):
    async def save(self, key: str, record: dict[str, Any]) -> None: ...
