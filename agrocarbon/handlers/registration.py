"""
Farmer registration handler.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from typing import List

from agrocarbon.core.constants import BASE_CREDITS_PER_ACRE, CREDIT_ESTIMATE_MULTIPLIERS
from agrocarbon.core.logger import get_logger
from agrocarbon.models.audit import AuditAction, AuditLog
from agrocarbon.models.credit import CarbonCredit, CarbonCreditRead, CreditStatus
from agrocarbon.models.farmer import (
    Farmer,
    FarmerRead,
    FarmerRegistration,
    FarmerRegistrationRead,
    FarmInput,
    FarmInputRead,
)
from agrocarbon.utils.hashing import hash_payload

logger = get_logger("registration")


def estimate_credits(
    land_area: float,
    crop_type: str = "",
    fertilizer: str = "",
    irrigation: str = "",
    seed_type: str = ""
) -> float:
    """
    Estimate carbon credits for a new registration.
    
    Formula: land_area * 0.5 credits per acre, scaled up for
    Organic Manure (x1.3), Drip Irrigation (x1.2), Agroforestry (x1.5)
    and Organic Seeds (x1.1).
    
    Args:
        land_area: Land area in acres
        crop_type: Crop name
        fertilizer: Fertilizer choice
        irrigation: Irrigation method
        seed_type: Seed type
        
    Returns:
        Estimated credits (unrounded)
    """
    credits = land_area * BASE_CREDITS_PER_ACRE
    choices = {
        "fertilizer": fertilizer,
        "irrigation": irrigation,
        "crop_type": crop_type,
        "seed_type": seed_type,
    }
    for dimension, value in choices.items():
        credits *= CREDIT_ESTIMATE_MULTIPLIERS[dimension].get(value, 1.0)
    return credits


async def register_farmer(
    session: AsyncSession,
    registration: FarmerRegistration
) -> FarmerRegistrationRead:
    """
    Register a farmer with their farm inputs and a pending carbon credit.
    
    The credit carries the registration-time estimate until it is verified.
    """
    farmer = Farmer(
        name=registration.name,
        location=registration.location,
        crop_type=registration.crop_type,
        land_area=registration.land_area,
        contact=registration.contact
    )
    session.add(farmer)
    await session.flush()
    
    farm_inputs = FarmInput(
        farmer_id=farmer.id,
        fertilizer_use=registration.fertilizer,
        irrigation_method=registration.irrigation,
        seed_type=registration.seed_type,
        soil_health=registration.soil_health
    )
    session.add(farm_inputs)
    
    credit = CarbonCredit(
        farmer_id=farmer.id,
        credit_value=estimate_credits(
            registration.land_area,
            registration.crop_type,
            registration.fertilizer,
            registration.irrigation,
            registration.seed_type
        ),
        status=CreditStatus.PENDING
    )
    session.add(credit)
    await session.flush()
    
    # Audit log
    session.add(AuditLog(
        payload_hash=hash_payload(registration.model_dump()),
        action=AuditAction.FARMER_REGISTERED,
        entity_type="farmer",
        entity_id=farmer.id
    ))
    session.add(AuditLog(
        payload_hash=hash_payload({"farmer_id": farmer.id, "credit_value": credit.credit_value}),
        action=AuditAction.CREDIT_CREATED,
        entity_type="carbon_credit",
        entity_id=credit.id
    ))
    await session.commit()
    
    for row in (farmer, farm_inputs, credit):
        await session.refresh(row)
    
    logger.info(
        f"Registered farmer {farmer.id} with estimated {credit.credit_value:.2f} credits",
        extra={"farmer_id": farmer.id, "credit_id": credit.id}
    )
    
    return FarmerRegistrationRead(
        farmer=FarmerRead.model_validate(farmer),
        farm_inputs=FarmInputRead.model_validate(farm_inputs),
        credit=CarbonCreditRead.model_validate(credit)
    )


async def get_farmer(session: AsyncSession, farmer_id: int) -> Farmer:
    """Get a farmer by ID."""
    farmer = await session.get(Farmer, farmer_id)
    if not farmer:
        raise ValueError(f"Farmer {farmer_id} not found")
    return farmer


async def get_farm_inputs(session: AsyncSession, farmer_id: int) -> FarmInput | None:
    """Latest farm inputs submitted for a farmer, if any."""
    statement = select(FarmInput).where(
        FarmInput.farmer_id == farmer_id
    ).order_by(FarmInput.id.desc())
    result = await session.execute(statement)
    return result.scalars().first()


async def get_farmers(session: AsyncSession) -> List[Farmer]:
    """List all farmers, newest first."""
    result = await session.execute(select(Farmer).order_by(Farmer.id.desc()))
    return list(result.scalars().all())
