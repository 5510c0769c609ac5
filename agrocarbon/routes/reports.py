"""
Report and aggregation endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, Any

from agrocarbon.core.database import get_session
from agrocarbon.handlers.reports import get_certificate_context, get_registry_summary

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/registry/summary")
async def registry_summary_endpoint(
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """
    Get registry-level aggregation summary.
    
    Returns:
        - total_farmers, total_farm_area
        - total_credits, verified/pending/rejected counts
        - total_credit_value, verified_credit_value
    """
    return await get_registry_summary(session)


@router.get("/credits/{credit_id}/certificate")
async def certificate_context_endpoint(
    credit_id: int,
    session: AsyncSession = Depends(get_session)
) -> Dict[str, Any]:
    """
    Certificate fields for the document renderer: farmer display fields,
    credit value, status and the latest verification figures.
    """
    try:
        return await get_certificate_context(session, credit_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
