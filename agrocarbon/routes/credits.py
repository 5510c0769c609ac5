"""
Carbon credit endpoints.
"""

import asyncio

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from agrocarbon.core.config import get_settings
from agrocarbon.core.database import get_session
from agrocarbon.models.credit import CarbonCreditRead, CreditStatus
from agrocarbon.models.satellite import SatelliteVerificationRead
from agrocarbon.models.verification import VerificationResult
from agrocarbon.handlers.credits import (
    get_credit,
    get_credit_verifications,
    list_credits,
    update_credit_status,
    verify_credit
)
from agrocarbon.handlers.verification import InvalidInputError

router = APIRouter(prefix="/credits", tags=["credits"])
settings = get_settings()


@router.get("/", response_model=List[CarbonCreditRead])
async def list_credits_endpoint(
    status_filter: Optional[str] = Query(default=None, alias="status"),
    search: Optional[str] = None,
    session: AsyncSession = Depends(get_session)
):
    """
    List credits, optionally filtered by status (case-insensitive) and
    searched by farmer name, location or crop type.
    """
    try:
        return await list_credits(session, status_filter, search)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.get("/{credit_id}", response_model=CarbonCreditRead)
async def get_credit_endpoint(
    credit_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get a carbon credit by ID."""
    try:
        return await get_credit(session, credit_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.post("/{credit_id}/verify", response_model=VerificationResult)
async def verify_credit_endpoint(
    credit_id: int,
    session: AsyncSession = Depends(get_session)
):
    """
    Verify a stored carbon credit against the NDVI model.
    
    Verification logic:
    - Rebuilds the farmer's practices from the registry
    - Estimates NDVI from crop baseline, practice bonus and seasonal noise
    - Checks the reported land area against the detected area
    - NDVI >= 0.65 and area accuracy >= 90% → Verified, otherwise Pending
    - Stores the verification fields on the credit
    """
    if settings.verification_delay_seconds:
        await asyncio.sleep(settings.verification_delay_seconds)
    try:
        return await verify_credit(session, credit_id)
    except InvalidInputError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e)
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.patch("/{credit_id}/status", response_model=CarbonCreditRead)
async def update_credit_status_endpoint(
    credit_id: int,
    new_status: CreditStatus,
    session: AsyncSession = Depends(get_session)
):
    """Update credit status (e.g. mark as Rejected after manual review)."""
    try:
        return await update_credit_status(session, credit_id, new_status)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/{credit_id}/verifications", response_model=List[SatelliteVerificationRead])
async def list_credit_verifications_endpoint(
    credit_id: int,
    session: AsyncSession = Depends(get_session)
):
    """All verification runs recorded for a credit."""
    try:
        return await get_credit_verifications(session, credit_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
