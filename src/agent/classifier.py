"""Intent classification for a chat turn.

The model picks one of four route tokens. A deterministic keyword test runs
alongside it and, when it fires, forces the GitHub verification route no
matter what the model said. When the final route is UNKNOWN, a second
generation call with the broader conversational instructions produces the
reply directly.

Generation errors are NOT caught here. The graph's classify node wraps them
in ClassificationError and lets them end the request.

Identical (input, history) pairs classify identically only as far as the
model itself is deterministic.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from src.agent.collaborators import TextGenerator
from src.prompts.conversation import CLASSIFY_SYSTEM, CONVERSATIONAL_SYSTEM
from src.schemas.conversation import ChatTurn, Route
from src.utils.logging import log, get_logger

MODULE = "agent"
logger = get_logger()

VERIFICATION_KEYWORDS = (
    "verify deployment",
    "check deployment",
    "verify github",
    "check github",
    "deployment verification",
    "repo verification",
    "verify repo",
    "check repo",
)

# Matched case-insensitively as substrings of the model token, in this order
TOKEN_ROUTES = (
    (Route.CONTRIBUTION.value, Route.CONTRIBUTION),
    (Route.ESCROW.value, Route.ESCROW),
    (Route.GITHUB_VERIFICATION.value, Route.GITHUB_VERIFICATION),
)


class ClassificationError(Exception):
    """Generation failed while classifying a turn. Ends the request."""


@dataclass
class ClassificationOutcome:
    route: Route
    token: str
    fallback_reply: Optional[str] = None


def is_github_verification_request(text: str) -> bool:
    """Deterministic check for deployment-verification requests."""
    lowered = text.lower()
    if any(keyword in lowered for keyword in VERIFICATION_KEYWORDS):
        return True
    return "github.com" in lowered and ("verify" in lowered or "check" in lowered)


def route_from_token(token: str) -> Route:
    lowered = token.lower()
    for label, route in TOKEN_ROUTES:
        if label.lower() in lowered:
            return route
    return Route.UNKNOWN


async def classify(
    text: str,
    history: Sequence[ChatTurn],
    generator: TextGenerator,
) -> ClassificationOutcome:
    """Decide which branch handles this turn."""
    token = await generator.generate(CLASSIFY_SYSTEM, history, text)

    if is_github_verification_request(text):
        route = Route.GITHUB_VERIFICATION
        if route_from_token(token) is not route:
            log.info(logger, MODULE, "classify_override",
                     "Keyword test forced GitHub verification route",
                     token=token[:40])
    else:
        route = route_from_token(token)

    log.info(logger, MODULE, "classify_done", "Turn classified",
             route=route.value, token=token[:40])

    if route is not Route.UNKNOWN:
        return ClassificationOutcome(route=route, token=token)

    reply = await generator.generate(CONVERSATIONAL_SYSTEM, history, text)
    return ClassificationOutcome(route=route, token=token, fallback_reply=reply)
