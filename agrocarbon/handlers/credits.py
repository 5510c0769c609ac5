"""
Carbon credit handlers: lookup, listing, and verification of stored credits.
"""

import json
from typing import List, Optional, Sequence

from sqlalchemy import func, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from agrocarbon.core.constants import (
    DEFAULT_STORED_PRACTICES,
    MIN_AREA_ACCURACY,
    VERIFICATION_ALGORITHM,
)
from agrocarbon.core.logger import get_logger
from agrocarbon.handlers.registration import get_farm_inputs, get_farmer
from agrocarbon.handlers.verification import Clock, RandomSource, verify
from agrocarbon.models.audit import AuditAction, AuditLog
from agrocarbon.models.credit import CarbonCredit, CreditStatus
from agrocarbon.models.farmer import Farmer, FarmInput
from agrocarbon.models.practices import FarmerPractices, PracticeSet
from agrocarbon.models.satellite import SatelliteVerification
from agrocarbon.models.verification import HealthStatus, VerificationResult
from agrocarbon.utils.hashing import hash_payload
from agrocarbon.utils.time import utc_now

logger = get_logger("credits")

HEALTHY_STATUSES = (HealthStatus.GOOD, HealthStatus.EXCELLENT)


async def get_credit(session: AsyncSession, credit_id: int) -> CarbonCredit:
    """Get a carbon credit by ID."""
    credit = await session.get(CarbonCredit, credit_id)
    if not credit:
        raise ValueError(f"Credit {credit_id} not found")
    return credit


async def list_credits(
    session: AsyncSession,
    status: Optional[str] = None,
    search: Optional[str] = None
) -> List[CarbonCredit]:
    """
    List credits, newest first.

    Args:
        status: Case-insensitive status filter ("verified", "Pending", ...)
        search: Substring matched against farmer name, location and crop type
    """
    statement = select(CarbonCredit).join(Farmer, Farmer.id == CarbonCredit.farmer_id)

    if status:
        matches = [s for s in CreditStatus if s.value.lower() == status.strip().lower()]
        if not matches:
            raise ValueError(f"Unknown credit status '{status}'")
        statement = statement.where(CarbonCredit.status == matches[0])

    if search:
        pattern = f"%{search.strip().lower()}%"
        statement = statement.where(or_(
            func.lower(Farmer.name).like(pattern),
            func.lower(Farmer.location).like(pattern),
            func.lower(Farmer.crop_type).like(pattern)
        ))

    statement = statement.order_by(CarbonCredit.id.desc())
    result = await session.execute(statement)
    return list(result.scalars().all())


STORED_PRACTICE_COLUMNS = (
    ("fertilizer", "fertilizer_use"),
    ("irrigation", "irrigation_method"),
    ("seed_type", "seed_type"),
    ("soil_health", "soil_health"),
)


def find_stored_defaults(farm_inputs: Optional[FarmInput]) -> List[str]:
    """Practice fields with no stored value, scored with the default stored practices."""
    return [
        key for key, column in STORED_PRACTICE_COLUMNS
        if not (farm_inputs and getattr(farm_inputs, column))
    ]


def build_practices(farmer: Farmer, farm_inputs: Optional[FarmInput]) -> FarmerPractices:
    """
    Rebuild the verification input from stored registry rows.

    Farmers registered without farm inputs, or with blank fields, are
    scored with the default stored practices. Each substitution is logged.
    """
    defaulted = find_stored_defaults(farm_inputs)
    values = {}
    for key, column in STORED_PRACTICE_COLUMNS:
        if key in defaulted:
            values[key] = DEFAULT_STORED_PRACTICES[key]
            logger.warning(
                f"Farmer {farmer.id} has no stored {key}, using '{values[key]}'",
                extra={"farmer_id": farmer.id, "field": key, "value": values[key]}
            )
        else:
            values[key] = getattr(farm_inputs, column)

    return FarmerPractices(
        crop_type=farmer.crop_type,
        land_area=farmer.land_area,
        location=farmer.location,
        practices=PracticeSet(**values)
    )


async def apply_verification(
    session: AsyncSession,
    credit: CarbonCredit,
    result: VerificationResult,
    defaulted_practices: Sequence[str] = ()
) -> CarbonCredit:
    """
    Write a verification result onto a credit.

    Updates the credit's verification fields and status, appends a
    satellite verification detail row and an audit entry, and commits
    them together. ``defaulted_practices`` names the stored practice
    fields that were filled from the defaults before scoring.
    """
    credit.status = CreditStatus.VERIFIED if result.is_verified else CreditStatus.PENDING
    credit.verification_date = result.verification_date
    credit.ndvi_value = result.ndvi_data.value
    credit.satellite_land_area = result.land_area_verification.satellite_detected_area
    credit.verification_source = result.source.value
    credit.verification_confidence = result.confidence
    credit.updated_at = utc_now()

    quality_flags = {
        "healthy_vegetation": result.vegetation_analysis.health_status in HEALTHY_STATUSES,
        "area_accurate": result.land_area_verification.accuracy >= MIN_AREA_ACCURACY,
        "fallbacks": list(result.fallbacks),
        "defaulted_practices": list(defaulted_practices)
    }
    session.add(SatelliteVerification(
        carbon_credit_id=credit.id,
        verification_date=result.verification_date,
        ndvi_value=result.ndvi_data.value,
        ndvi_change=result.ndvi_data.change,
        vegetation_health_score=result.ndvi_data.health_score,
        carbon_sequestration_rate=result.vegetation_analysis.sequestration_rate,
        satellite_source=result.source.value,
        image_resolution_meters=result.image_resolution,
        cloud_coverage_percent=result.cloud_coverage,
        verification_algorithm=VERIFICATION_ALGORITHM,
        quality_flags=json.dumps(quality_flags)
    ))

    # Audit log
    session.add(AuditLog(
        payload_hash=hash_payload(result),
        action=AuditAction.CREDIT_VERIFIED if result.is_verified else AuditAction.CREDIT_PENDING,
        entity_type="carbon_credit",
        entity_id=credit.id,
        extra_data=json.dumps({
            "confidence": result.confidence,
            "fallbacks": list(result.fallbacks),
            "defaulted_practices": list(defaulted_practices)
        })
    ))

    await session.commit()
    await session.refresh(credit)
    return credit


async def verify_credit(
    session: AsyncSession,
    credit_id: int,
    rng: Optional[RandomSource] = None,
    clock: Clock = utc_now
) -> VerificationResult:
    """
    Verify a stored carbon credit and persist the outcome.

    Verification logic:
    1. Load the credit, its farmer and their latest farm inputs
    2. Rebuild the farmer's practices
    3. Run the NDVI verification engine
    4. Verified → status VERIFIED, otherwise PENDING
    5. Store verification fields, detail row and audit entry

    Args:
        session: Database session
        credit_id: Carbon credit ID
        rng: Random source passed through to the engine
        clock: Clock passed through to the engine

    Returns:
        The verification result
    """
    credit = await get_credit(session, credit_id)
    farmer = await get_farmer(session, credit.farmer_id)
    farm_inputs = await get_farm_inputs(session, farmer.id)

    # Engine runs before any write so a failure leaves the credit untouched
    result = verify(build_practices(farmer, farm_inputs), rng=rng, clock=clock)
    await apply_verification(session, credit, result, find_stored_defaults(farm_inputs))

    logger.info(
        f"Credit {credit_id} is {credit.status.value} with {result.confidence}% confidence",
        extra={"credit_id": credit_id, "status": credit.status.value}
    )
    return result


async def update_credit_status(
    session: AsyncSession,
    credit_id: int,
    new_status: CreditStatus
) -> CarbonCredit:
    """Manually set a credit's status (e.g. reject it after review)."""
    credit = await get_credit(session, credit_id)
    previous = credit.status
    credit.status = new_status
    credit.updated_at = utc_now()

    session.add(AuditLog(
        payload_hash=hash_payload({"credit_id": credit_id, "from": previous.value, "to": new_status.value}),
        action=AuditAction.CREDIT_STATUS_CHANGED,
        entity_type="carbon_credit",
        entity_id=credit_id
    ))
    await session.commit()
    await session.refresh(credit)
    return credit


async def get_credit_verifications(
    session: AsyncSession,
    credit_id: int
) -> List[SatelliteVerification]:
    """All verification runs of a credit, newest first."""
    await get_credit(session, credit_id)
    statement = select(SatelliteVerification).where(
        SatelliteVerification.carbon_credit_id == credit_id
    ).order_by(SatelliteVerification.id.desc())
    result = await session.execute(statement)
    return list(result.scalars().all())
