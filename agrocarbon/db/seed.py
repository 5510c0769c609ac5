"""
Optional development seeding script.

Run from the repository root:  python -m agrocarbon.db.seed
"""

import asyncio

from agrocarbon.core.database import AsyncSessionLocal, init_db
from agrocarbon.handlers.credits import verify_credit
from agrocarbon.handlers.registration import register_farmer
from agrocarbon.models.farmer import FarmerRegistration

SAMPLE_FARMERS = [
    FarmerRegistration(
        name="Asha Patil",
        location="Maharashtra",
        crop_type="Agroforestry",
        land_area=10.0,
        contact="+91 90000 00001",
        fertilizer="Organic Manure",
        irrigation="Drip Irrigation",
        seed_type="Organic Seeds",
        soil_health="Excellent"
    ),
    FarmerRegistration(
        name="Gurpreet Singh",
        location="Punjab",
        crop_type="Rice",
        land_area=5.0,
        fertilizer="Reduced Chemical",
        irrigation="Alternate Wetting/Drying",
        seed_type="High Yield Variety",
        soil_health="Average"
    ),
    FarmerRegistration(
        name="Lakshmi Reddy",
        location="Andhra Pradesh",
        crop_type="Millets",
        land_area=3.5,
        irrigation="Traditional",
        seed_type="Local Variety",
        soil_health="Needs Improvement"
    ),
]


async def seed_data():
    """Seed database with sample farmers and verify the first credit."""
    await init_db()
    
    async with AsyncSessionLocal() as session:
        registrations = [await register_farmer(session, farmer) for farmer in SAMPLE_FARMERS]
        print(f"Created {len(registrations)} farmers")
        
        first_credit = registrations[0].credit
        result = await verify_credit(session, first_credit.id)
        print(f"Verified credit {first_credit.id}: verified={result.is_verified} confidence={result.confidence}%")
        
        print("Seed data created successfully!")


if __name__ == "__main__":
    asyncio.run(seed_data())
