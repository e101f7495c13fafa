"""Pydantic schemas for structured data validation.

This package contains:
- conversation.py: chat turns, routes, contribution reports, contract extraction
- verification.py: deployment verification params and results
- api.py: Request/response schemas for the REST API

LLM outputs that the graph relies on (contribution reports) are validated
against these models BEFORE being stored.
"""

from src.schemas.conversation import (
    Route,
    ChatTurn,
    ContributionReport,
    ContractExtraction,
)

from src.schemas.verification import (
    DEFAULT_BRANCH,
    DEFAULT_FILE_TO_CHECK,
    VerificationParams,
    VerificationResult,
)

from src.schemas.api import (
    ChatRequest,
    ChatResponse,
    ContractCreate,
    ContractUpdate,
    SignatureUpdate,
    ContractResponse,
)

__all__ = [
    # Conversation
    "Route",
    "ChatTurn",
    "ContributionReport",
    "ContractExtraction",
    # Verification
    "DEFAULT_BRANCH",
    "DEFAULT_FILE_TO_CHECK",
    "VerificationParams",
    "VerificationResult",
    # API
    "ChatRequest",
    "ChatResponse",
    "ContractCreate",
    "ContractUpdate",
    "SignatureUpdate",
    "ContractResponse",
]
