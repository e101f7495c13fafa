"""LangGraph nodes for the chat graph.

Each method is a node. It receives the current ConversationState and returns
the updates to merge into it. Collaborators (generator, verifier,
contribution store) are injected once when the graph is built.

Only classify lets an exception escape. The three terminal nodes turn every
failure into a reply string so the chat always gets an answer.
"""

from datetime import datetime, timezone

from src.agent import classifier
from src.agent.classifier import ClassificationError
from src.agent.collaborators import ContributionStore, DeploymentVerifier, TextGenerator
from src.agent.state import ConversationState
from src.agent.verification import format_verification_result, parse_verification_input
from src.llm.parser import extract_contract_code, extract_json
from src.prompts.conversation import CONTRIBUTE_SYSTEM, ESCROW_SYSTEM
from src.schemas.conversation import ContributionReport, Route
from src.utils.logging import log, get_logger

MODULE = "nodes"
logger = get_logger()

FALLBACK_REPLY = (
    "I can help you create escrow smart contracts on 0G, verify that a deployment "
    "matches its GitHub repository, or take an error report. What would you like to do?"
)
CONTRIBUTION_RECEIVED_REPLY = (
    "Thank you for your contribution. Your response has been received successfully "
    "and will be reviewed by our team."
)
CONTRIBUTION_FAILED_REPLY = (
    "Your error has been received successfully and will be reviewed by our team."
)
ESCROW_FAILED_REPLY = (
    "I apologize, but there was an error generating the Escrow contract. Please try "
    "again or provide more information about your requirements."
)
VERIFY_UNPARSED_REPLY = (
    "❌ I couldn't parse the verification request. Please provide either a GitHub URL "
    "and deployed URL, or specify owner, repo, and deployed URL."
)


def contribution_key(now: datetime | None = None) -> str:
    """Storage key for a contribution, derived from the current time."""
    now = now or datetime.now(timezone.utc)
    return "contribution_" + now.isoformat().replace(":", "-")


class ConversationNodes:
    """The four nodes of the chat graph, bound to their collaborators."""

    def __init__(
        self,
        generator: TextGenerator,
        verifier: DeploymentVerifier,
        contributions: ContributionStore,
    ):
        self.generator = generator
        self.verifier = verifier
        self.contributions = contributions

    async def classify(self, state: ConversationState) -> dict:
        """Pick the route; answer directly when it is UNKNOWN."""
        try:
            outcome = await classifier.classify(state["input"], state["history"], self.generator)
        except Exception as e:
            log.error(logger, MODULE, "classify_failed", "Intent classification failed",
                      error=str(e), error_type=type(e).__name__)
            raise ClassificationError(f"Intent classification failed: {e}") from e

        if outcome.route is not Route.UNKNOWN:
            return {"route": outcome.route, "accumulated_messages": [outcome.token]}

        reply = outcome.fallback_reply or FALLBACK_REPLY
        return {
            "route": outcome.route,
            "result": reply,
            "accumulated_messages": [outcome.token, reply],
        }

    async def contribute(self, state: ConversationState) -> dict:
        """Turn an error report or contribution into a stored structured record."""
        log.info(logger, MODULE, "contribute_start", "Processing contribution or error report")
        try:
            raw = await self.generator.generate(CONTRIBUTE_SYSTEM, state["history"], state["input"])
            report = ContributionReport.model_validate(extract_json(raw))
        except Exception as e:
            log.error(logger, MODULE, "contribute_failed", "Could not build contribution report",
                      error=str(e), error_type=type(e).__name__)
            return {
                "result": CONTRIBUTION_FAILED_REPLY,
                "accumulated_messages": ["Error processing contribution"],
            }

        key = contribution_key()
        try:
            await self.contributions.save(key, report.model_dump())
        except Exception as e:
            log.error(logger, MODULE, "contribution_save_failed", "Contribution could not be stored",
                      error=str(e), error_type=type(e).__name__, key=key)
        else:
            log.info(logger, MODULE, "contribute_done", "Contribution stored",
                     key=key, type=report.type, priority=report.priority)

        return {"result": CONTRIBUTION_RECEIVED_REPLY, "accumulated_messages": [raw]}

    async def escrow(self, state: ConversationState) -> dict:
        """Generate an escrow contract and split it from the explanation."""
        log.info(logger, MODULE, "escrow_start", "Generating escrow contract")
        try:
            raw = await self.generator.generate(ESCROW_SYSTEM, state["history"], state["input"])
            extraction = extract_contract_code(raw)
        except Exception as e:
            log.error(logger, MODULE, "escrow_failed", "Escrow generation failed",
                      error=str(e), error_type=type(e).__name__)
            return {"result": ESCROW_FAILED_REPLY, "accumulated_messages": [ESCROW_FAILED_REPLY]}

        if extraction.code is None:
            log.warning(logger, MODULE, "escrow_no_contract",
                        "Escrow answer contained no Solidity block",
                        raw_length=len(raw))
        else:
            log.info(logger, MODULE, "escrow_done", "Escrow contract generated",
                     code_length=len(extraction.code))

        return {
            "result": extraction.remainder,
            "extracted_contract": extraction.code,
            "accumulated_messages": [raw],
        }

    async def verify(self, state: ConversationState) -> dict:
        """Verify a deployment against its GitHub repository."""
        try:
            params = parse_verification_input(state["input"])
            if params is None:
                log.info(logger, MODULE, "verify_skipped", "Verification request not parseable")
                return {
                    "result": VERIFY_UNPARSED_REPLY,
                    "accumulated_messages": [VERIFY_UNPARSED_REPLY],
                }
            outcome = await self.verifier.verify(params)
            formatted = format_verification_result(outcome)
        except Exception as e:
            log.error(logger, MODULE, "verify_failed", "GitHub verification failed",
                      error=str(e), error_type=type(e).__name__)
            reply = f"❌ Verification failed: {e}"
            return {"result": reply, "accumulated_messages": [reply]}

        return {
            "result": formatted,
            "verification_outcome": outcome,
            "accumulated_messages": [formatted],
        }
