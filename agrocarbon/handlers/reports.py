"""
Report and aggregation handlers.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select, func
from typing import Dict, Any

from agrocarbon.handlers.credits import get_credit
from agrocarbon.handlers.registration import get_farmer
from agrocarbon.models.credit import CarbonCredit, CreditStatus
from agrocarbon.models.farmer import Farmer
from agrocarbon.utils.time import to_iso


async def get_registry_summary(session: AsyncSession) -> Dict[str, Any]:
    """
    Get registry-level aggregation summary.

    Returns:
        Dictionary with credit totals, counts by status and farm area
    """
    farmer_totals = await session.execute(
        select(func.count(Farmer.id), func.sum(Farmer.land_area))
    )
    farmer_count, total_area = farmer_totals.one()

    status_totals = await session.execute(
        select(
            CarbonCredit.status,
            func.count(CarbonCredit.id),
            func.sum(CarbonCredit.credit_value)
        ).group_by(CarbonCredit.status)
    )
    counts = {s: 0 for s in CreditStatus}
    values = {s: 0.0 for s in CreditStatus}
    for credit_status, count, value in status_totals.all():
        counts[credit_status] = count
        values[credit_status] = value or 0.0

    return {
        "total_farmers": farmer_count or 0,
        "total_farm_area": round(total_area or 0.0, 1),
        "total_credits": sum(counts.values()),
        "verified_credits": counts[CreditStatus.VERIFIED],
        "pending_credits": counts[CreditStatus.PENDING],
        "rejected_credits": counts[CreditStatus.REJECTED],
        "total_credit_value": round(sum(values.values()), 2),
        "verified_credit_value": round(values[CreditStatus.VERIFIED], 2)
    }


async def get_certificate_context(
    session: AsyncSession,
    credit_id: int
) -> Dict[str, Any]:
    """
    Collect what the certificate renderer lays out for a verified credit.

    Raises:
        ValueError: credit or farmer missing, or the credit was never verified
    """
    credit = await get_credit(session, credit_id)
    if credit.verification_date is None:
        raise ValueError(f"Credit {credit_id} has not been verified yet")

    farmer = await get_farmer(session, credit.farmer_id)

    return {
        "id": credit.id,
        "farmer": {
            "name": farmer.name,
            "location": farmer.location,
            "crop_type": farmer.crop_type,
            "land_area": farmer.land_area,
            "contact": farmer.contact
        },
        "credit_value": round(credit.credit_value, 2),
        "status": credit.status.value,
        "verification_date": to_iso(credit.verification_date),
        "ndvi_value": credit.ndvi_value,
        "satellite_land_area": credit.satellite_land_area,
        "satellite_source": credit.verification_source,
        "verification_confidence": credit.verification_confidence,
        "created_at": to_iso(credit.created_at)
    }
