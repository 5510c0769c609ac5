"""
Stateless verification endpoints - run the engine on an ad-hoc submission.
"""

import asyncio

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from agrocarbon.core.config import get_settings
from agrocarbon.handlers.summary import summarize
from agrocarbon.handlers.verification import InvalidInputError, verify
from agrocarbon.models.practices import VALUE_MODEL_CONFIG, FarmerPractices
from agrocarbon.models.verification import VerificationResult

router = APIRouter(prefix="/verification", tags=["verification"])
settings = get_settings()


class VerificationSummary(BaseModel):
    model_config = VALUE_MODEL_CONFIG

    result: VerificationResult
    summary: str


async def run_verification(practices: FarmerPractices) -> VerificationResult:
    """Await the configured imagery delay, then verify."""
    if settings.verification_delay_seconds:
        await asyncio.sleep(settings.verification_delay_seconds)
    try:
        return verify(practices)
    except InvalidInputError as e:
        raise HTTPException(
            status_code=422,
            detail=str(e)
        )


@router.post("/", response_model=VerificationResult)
async def verify_endpoint(practices: FarmerPractices):
    """
    Verify a farmer submission without storing anything.

    Unknown crop or practice values are scored with fallbacks and listed
    in `fallbacks`; only a missing or non-positive `landArea` is rejected.
    """
    return await run_verification(practices)


@router.post("/summary", response_model=VerificationSummary)
async def verify_with_summary_endpoint(practices: FarmerPractices):
    """Verify a submission and return the result with its text report."""
    result = await run_verification(practices)
    return VerificationSummary(result=result, summary=summarize(result))
