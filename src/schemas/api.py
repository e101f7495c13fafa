"""Pydantic schemas for API requests/responses."""

from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime

from src.schemas.conversation import ChatTurn, Route
from src.schemas.verification import VerificationResult


class ChatRequest(BaseModel):
    """Request body for one conversation turn."""
    input: str = Field(..., description="The user's latest message")
    history: list[ChatTurn] = Field(default_factory=list, description="Prior turns, oldest first")

    @field_validator("input")
    @classmethod
    def input_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Input must not be empty")
        return v.strip()


class ChatResponse(BaseModel):
    """Final state of a conversation turn, as the UI needs it."""
    route: Route
    result: str
    extracted_contract: Optional[str] = None
    verification: Optional[VerificationResult] = None


class ContractCreate(BaseModel):
    """Request body for registering a deployed contract."""
    name: str
    contract_address: str
    party_a: str
    abi: list = Field(default_factory=list)
    bytecode: str = ""
    contract_type: str = "escrow"
    party_b: Optional[str] = None
    transaction_hash: Optional[str] = None
    network_id: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name", "contract_address", "party_a")
    @classmethod
    def required_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip()


class ContractUpdate(BaseModel):
    """Partial update of a deployed contract's descriptive fields."""
    name: Optional[str] = None
    party_b: Optional[str] = None
    transaction_hash: Optional[str] = None
    network_id: Optional[str] = None
    description: Optional[str] = None


class SignatureUpdate(BaseModel):
    """Signature status change for one party of a contract."""
    party: Literal["A", "B"]
    signature_status: bool
    address: Optional[str] = None
    signature: Optional[str] = None


class ContractResponse(BaseModel):
    """A deployed contract record."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    contract_address: str
    abi: list
    bytecode: str
    contract_type: str
    party_a: str
    party_b: Optional[str] = None
    deployed_at: datetime
    transaction_hash: Optional[str] = None
    network_id: Optional[str] = None
    description: Optional[str] = None
    party_a_signature_status: bool = False
    party_b_signature_status: bool = False
    party_a_address: Optional[str] = None
    party_b_address: Optional[str] = None
    party_a_signature: Optional[str] = None
    party_b_signature: Optional[str] = None
