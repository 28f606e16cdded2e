"""Create tables, the initial admin and demo data: ``python -m healthschedule.seed``"""

import logging

from .core.config import settings
from .core.database import SessionLocal, init_db
from .services.seed_service import create_initial_admin, seed_sample_data

logging.basicConfig(
    level=settings.LOG_LEVEL, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s"
)
logger = logging.getLogger("healthschedule.seed")


def main():
    init_db()
    db = SessionLocal()
    try:
        create_initial_admin(db, settings.INITIAL_ADMIN_EMAIL, settings.INITIAL_ADMIN_PASSWORD)
        seed_sample_data(db)
    finally:
        db.close()
    logger.info("Seeding complete")


if __name__ == "__main__":
    main()
