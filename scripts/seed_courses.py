"""Insert the default course catalogue. Safe to run repeatedly."""

import asyncio
import logging
import os
import sys

sys.path.append(os.getcwd())

from sqlalchemy.dialects.postgresql import insert

from connexa.config.settings import settings
from connexa.database import Database
from connexa.models import Course

logger = logging.getLogger("connexa.scripts.seed_courses")

DEFAULT_COURSES = [
    "Administração",
    "Análise e Desenvolvimento de Sistemas",
    "Arquitetura e Urbanismo",
    "Ciência da Computação",
    "Direito",
    "Enfermagem",
    "Engenharia Civil",
    "Engenharia de Software",
    "Engenharia Elétrica",
    "Medicina",
    "Psicologia",
    "Sistemas de Informação",
]


async def seed_courses(database: Database, names=DEFAULT_COURSES) -> int:
    """Insert missing courses and return how many rows were added."""

    statement = (
        insert(Course)
        .values([{"name": name} for name in names])
        .on_conflict_do_nothing(index_elements=[Course.name])
        .returning(Course.id)
    )
    async with database.session() as session:
        result = await session.execute(statement)
        inserted = len(result.all())
        await session.commit()
    return inserted


async def main() -> None:
    database = Database.from_settings(settings)
    try:
        await database.init_models()
        inserted = await seed_courses(database)
        logger.info("Seeded %d new course(s), %d already present", inserted, len(DEFAULT_COURSES) - inserted)
    finally:
        await database.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    asyncio.run(main())
