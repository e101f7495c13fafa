"""Deployed-contract registry with per-party signature tracking.

Contracts generated in the chat are compiled and deployed client-side; the
UI then registers them here so both parties can find the contract and record
their signatures.
"""

import re
import time

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.db.models import DeployedContract
from src.db.session import get_session
from src.schemas import ContractCreate, ContractResponse, ContractUpdate, SignatureUpdate
from src.utils.logging import log, get_logger

MODULE = "contracts"
logger = get_logger()

router = APIRouter()


def make_contract_id(name: str, now_ms: int | None = None) -> str:
    """Slug of the name plus a millisecond timestamp, e.g. "nft-escrow-1760670000000"."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    slug = re.sub(r"\s+", "-", name.lower())
    return f"{slug}-{now_ms}"


async def _get_or_404(session: AsyncSession, contract_id: str) -> DeployedContract:
    contract = await session.get(DeployedContract, contract_id)
    if not contract:
        log.info(logger, MODULE, "not_found", "Contract not found",
                 contract_id=contract_id)
        raise HTTPException(status_code=404, detail="Contract not found")
    return contract


def _apply_signature(contract: DeployedContract, body: SignatureUpdate) -> None:
    """Record one party's signature. Party B's address also fills party_b when unset."""
    if body.party == "A":
        contract.party_a_signature_status = body.signature_status
        if body.address:
            contract.party_a_address = body.address
        if body.signature:
            contract.party_a_signature = body.signature
    else:
        contract.party_b_signature_status = body.signature_status
        if body.address:
            contract.party_b_address = body.address
            if not contract.party_b:
                contract.party_b = body.address
        if body.signature:
            contract.party_b_signature = body.signature


@router.post("", response_model=ContractResponse, status_code=201)
async def create_contract(
    body: ContractCreate,
    session: AsyncSession = Depends(get_session),
):
    """Register a freshly deployed contract. Both signatures start unsigned."""
    contract = DeployedContract(
        id=make_contract_id(body.name),
        **body.model_dump(),
        party_a_signature_status=False,
        party_b_signature_status=False,
    )
    session.add(contract)
    await session.commit()
    await session.refresh(contract)

    log.info(logger, MODULE, "created", "Contract registered",
             contract_id=contract.id, address=contract.contract_address)
    return contract


@router.get("", response_model=list[ContractResponse])
async def list_contracts(session: AsyncSession = Depends(get_session)):
    result = await session.execute(
        select(DeployedContract).order_by(DeployedContract.deployed_at.desc())
    )
    return result.scalars().all()


@router.get("/{contract_id}", response_model=ContractResponse)
async def get_contract(contract_id: str, session: AsyncSession = Depends(get_session)):
    return await _get_or_404(session, contract_id)


@router.put("/{contract_id}", response_model=ContractResponse)
async def update_contract(
    contract_id: str,
    body: ContractUpdate,
    session: AsyncSession = Depends(get_session),
):
    """Update descriptive fields; fields left out of the body are untouched."""
    contract = await _get_or_404(session, contract_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(contract, field, value)
    await session.commit()
    await session.refresh(contract)

    log.info(logger, MODULE, "updated", "Contract updated", contract_id=contract_id)
    return contract


@router.patch("/{contract_id}/signature", response_model=ContractResponse)
async def update_signature(
    contract_id: str,
    body: SignatureUpdate,
    session: AsyncSession = Depends(get_session),
):
    contract = await _get_or_404(session, contract_id)
    _apply_signature(contract, body)
    await session.commit()
    await session.refresh(contract)

    log.info(logger, MODULE, "signature_updated", "Signature status updated",
             contract_id=contract_id, party=body.party, signed=body.signature_status)
    return contract


@router.delete("/{contract_id}", response_model=ContractResponse)
async def delete_contract(contract_id: str, session: AsyncSession = Depends(get_session)):
    contract = await _get_or_404(session, contract_id)
    deleted = ContractResponse.model_validate(contract)
    await session.delete(contract)
    await session.commit()

    log.info(logger, MODULE, "deleted", "Contract deleted", contract_id=contract_id)
    return deleted
