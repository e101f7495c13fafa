"""Pydantic schemas for conversation turns, routes and contribution reports."""

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Route(str, Enum):
    """Outcome of intent classification.

    Values are the exact tokens the classifier instruction set asks the model
    to answer with.
    """
    CONTRIBUTION = "contribute_node"
    ESCROW = "escrow_Node"
    GITHUB_VERIFICATION = "github_verification"
    UNKNOWN = "unknown"


class ChatTurn(BaseModel):
    """A single prior turn of the conversation."""
    model_config = ConfigDict(frozen=True)

    role: Literal["human", "assistant"]
    content: str


class ContributionReport(BaseModel):
    """Structured error report / contribution produced by the contribute node.

    Extra keys the model adds are kept so nothing the user said is lost.
    """
    model_config = ConfigDict(extra="allow")

    type: Literal["error_report", "code_contribution"] = Field(
        ..., description="Whether the user reported an error or offered a contribution"
    )
    description: str = Field(..., description="Brief summary")
    details: str = Field(default="", description="Longer description")
    impact: str = Field(default="", description="Impact of the error or benefit of the contribution")
    priority: Literal["low", "medium", "high"] = "medium"


class ContractExtraction(BaseModel):
    """Result of pulling a fenced Solidity block out of a model answer."""
    code: Optional[str] = None
    remainder: str
