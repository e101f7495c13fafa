"""SQLAlchemy models for deployed contracts and contributions."""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, Column, DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class DeployedContract(Base):
    """An escrow contract deployed from the chat, with per-party signatures."""
    __tablename__ = "deployed_contracts"

    id = Column(String(256), primary_key=True)  # e.g. "nft-escrow-1760670000000"
    name = Column(String(256), nullable=False)
    contract_address = Column(String(64), nullable=False)
    abi = Column(JSON, nullable=False, default=list)
    bytecode = Column(Text, nullable=False, default="")
    contract_type = Column(String(64), nullable=False, default="escrow")
    party_a = Column(String(64), nullable=False)
    party_b = Column(String(64), nullable=True)
    deployed_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    transaction_hash = Column(String(80), nullable=True)
    network_id = Column(String(32), nullable=True)
    description = Column(Text, nullable=True)

    party_a_signature_status = Column(Boolean, nullable=False, default=False)
    party_b_signature_status = Column(Boolean, nullable=False, default=False)
    party_a_address = Column(String(64), nullable=True)
    party_b_address = Column(String(64), nullable=True)
    party_a_signature = Column(Text, nullable=True)
    party_b_signature = Column(Text, nullable=True)


class Contribution(Base):
    """An error report or contribution captured by the chat."""
    __tablename__ = "contributions"

    id = Column(String(128), primary_key=True)  # "contribution_<timestamp>"
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
