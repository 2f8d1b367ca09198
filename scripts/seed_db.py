"""Seed the database with demo doctors and their weekly schedules."""

import asyncio

from sqlalchemy import func, insert, select

from app.config import settings
from app.core.redis_client import CacheManager, close_redis_connection, get_redis_client
from app.database import AsyncSessionLocal, engine
from app.models import doctor_availability, doctors

DOCTORS = [
    {
        "name": "Dr. Sarah Johnson",
        "specialty": "Cardiology",
        "experience_years": 15,
        "rating": 4.8,
        "hospital": "City General Hospital",
        "location": "New York, NY",
        "latitude": 40.7128,
        "longitude": -74.0060,
        "telemedicine_available": True,
    },
    {
        "name": "Dr. Michael Chen",
        "specialty": "Pediatrics",
        "experience_years": 12,
        "rating": 4.9,
        "hospital": "Children's Medical Center",
        "location": "Los Angeles, CA",
        "latitude": 34.0522,
        "longitude": -118.2437,
        "telemedicine_available": True,
    },
    {
        "name": "Dr. Emily Rodriguez",
        "specialty": "Dermatology",
        "experience_years": 8,
        "rating": 4.7,
        "hospital": "Skin Care Clinic",
        "location": "Chicago, IL",
        "latitude": 41.8781,
        "longitude": -87.6298,
        "telemedicine_available": True,
    },
    {
        "name": "Dr. James Wilson",
        "specialty": "Orthopedics",
        "experience_years": 20,
        "rating": 4.6,
        "hospital": "Sports Medicine Center",
        "location": "Houston, TX",
        "latitude": 29.7604,
        "longitude": -95.3698,
        "telemedicine_available": False,
    },
    {
        "name": "Dr. Lisa Anderson",
        "specialty": "Neurology",
        "experience_years": 18,
        "rating": 4.9,
        "hospital": "Neurological Institute",
        "location": "Boston, MA",
        "latitude": 42.3601,
        "longitude": -71.0589,
        "telemedicine_available": True,
    },
    {
        "name": "Dr. Robert Taylor",
        "specialty": "General Medicine",
        "experience_years": 10,
        "rating": 4.5,
        "hospital": "Community Health Center",
        "location": "Phoenix, AZ",
        "latitude": 33.4484,
        "longitude": -112.0740,
        "telemedicine_available": True,
    },
    {
        "name": "Dr. Maria Garcia",
        "specialty": "Oncology",
        "experience_years": 14,
        "rating": 4.8,
        "hospital": "Cancer Treatment Center",
        "location": "Miami, FL",
        "latitude": 25.7617,
        "longitude": -80.1918,
        "telemedicine_available": False,
    },
    {
        "name": "Dr. David Kim",
        "specialty": "Psychiatry",
        "experience_years": 11,
        "rating": 4.7,
        "hospital": "Mental Health Clinic",
        "location": "Seattle, WA",
        "latitude": 47.6062,
        "longitude": -122.3321,
        "telemedicine_available": True,
    },
]

# Monday-Friday 09:00-17:00, Saturday 09:00-13:00 (0 = Sunday)
WEEKLY_SCHEDULE = [(day, "09:00", "17:00") for day in range(1, 6)] + [(6, "09:00", "13:00")]


async def seed() -> None:
    """Insert demo doctors unless the table already has rows."""
    async with AsyncSessionLocal() as session:
        existing = (await session.execute(select(func.count()).select_from(doctors))).scalar()
        if existing:
            print(f"Skipping seed, {existing} doctors already present")
            return

        for doctor in DOCTORS:
            result = await session.execute(insert(doctors).values(**doctor).returning(doctors.c.id))
            doctor_id = result.scalar_one()
            await session.execute(
                insert(doctor_availability),
                [
                    {
                        "doctor_id": doctor_id,
                        "day_of_week": day,
                        "start_time": start,
                        "end_time": end,
                    }
                    for day, start, end in WEEKLY_SCHEDULE
                ],
            )
            print(f"Created doctor: {doctor['name']}")

        await session.commit()

    await engine.dispose()

    if settings.cache_enabled:
        cleared = CacheManager(get_redis_client()).invalidate_doctors()
        close_redis_connection()
        print(f"Cleared {cleared} cached doctor profiles")

    print("Seeding completed!")


if __name__ == "__main__":
    asyncio.run(seed())
