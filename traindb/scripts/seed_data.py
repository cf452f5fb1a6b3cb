"""
Creates the schema and loads a small sample fleet into a development database.

    DATABASE_URL=sqlite+aiosqlite:///./traindb.db python -m traindb.scripts.seed_data
"""
import asyncio
import logging

from sqlalchemy.ext.asyncio import async_sessionmaker

from traindb.core.db import Base, engine
from traindb.core.logging import setup_logging
from traindb.models import CarMarriage, TrainCar, TrainModel

logger = logging.getLogger(__name__)


def sample_models():
    return [
        TrainModel(batch_id=1, common_name="Mark I", manufacturer="Urban Transportation Development Corporation",
                   manufacture_location="Kingston, Ontario", years_manufactured="1984-1986",
                   full_name="UTDC ICTS Mark I"),
        TrainModel(batch_id=2, common_name="Mark II", manufacturer="Bombardier",
                   manufacture_location="Thunder Bay, Ontario\nKingston, Ontario", years_manufactured="2000-2002",
                   full_name="Bombardier ART 200"),
        TrainModel(batch_id=5, common_name="Mark V", manufacturer="Alstom",
                   manufacture_location="Sahagún, Mexico", years_manufactured="2023-2027",
                   full_name="Alstom Innovia Metro 300"),
    ]


def sample_cars():
    cars = [
        TrainCar(vehicle_id=vehicle_id, name=None, status="In Service", delivery_date="1985",
                 enter_service_date="1985-12-11", batch_id=1)
        for vehicle_id in range(1, 9)
    ]
    cars[0].notes = "First car delivered."
    cars[7].status = "Retired"

    cars += [
        TrainCar(vehicle_id=vehicle_id, status="In Service", delivery_date="2001",
                 enter_service_date="2002-01-07", batch_id=2)
        for vehicle_id in range(201, 205)
    ]
    cars += [
        TrainCar(vehicle_id=vehicle_id, status="In Testing", delivery_date="2024", batch_id=5)
        for vehicle_id in (6011, 6022, 6023, 6024, 6025)
    ]
    return cars


def sample_marriages():
    return [
        CarMarriage(marriage_id=1, batch_id=1, cars=[1, 2], marriage_size=2),
        CarMarriage(marriage_id=2, batch_id=1, cars=[3, 4], marriage_size=2),
        CarMarriage(marriage_id=3, batch_id=2, cars=[201, 202], marriage_size=2),
        CarMarriage(marriage_id=4, batch_id=5, cars=[6011, 6022, 6023, 6024, 6025], marriage_size=5),
    ]


async def seed():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as db:
        db.add_all(sample_models())
        db.add_all(sample_cars())
        db.add_all(sample_marriages())
        await db.commit()

    await engine.dispose()
    logger.info("Seed data inserted successfully")


if __name__ == "__main__":
    setup_logging()
    asyncio.run(seed())
