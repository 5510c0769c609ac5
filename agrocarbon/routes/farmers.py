"""
Farmer registration endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from agrocarbon.core.database import get_session
from agrocarbon.models.farmer import FarmerRead, FarmerRegistration, FarmerRegistrationRead
from agrocarbon.handlers.registration import get_farmer, get_farmers, register_farmer

router = APIRouter(prefix="/farmers", tags=["farmers"])


@router.post("/", response_model=FarmerRegistrationRead, status_code=status.HTTP_201_CREATED)
async def register_farmer_endpoint(
    registration: FarmerRegistration,
    session: AsyncSession = Depends(get_session)
):
    """
    Register a farmer with their practices.
    Creates the farmer, their farm inputs and a pending carbon credit
    carrying the estimated credit value.
    """
    return await register_farmer(session, registration)


@router.get("/", response_model=List[FarmerRead])
async def list_farmers_endpoint(
    session: AsyncSession = Depends(get_session)
):
    """List all farmers."""
    return await get_farmers(session)


@router.get("/{farmer_id}", response_model=FarmerRead)
async def get_farmer_endpoint(
    farmer_id: int,
    session: AsyncSession = Depends(get_session)
):
    """Get a farmer by ID."""
    try:
        return await get_farmer(session, farmer_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
