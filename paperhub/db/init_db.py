# init_db.py

import logging

from paperhub.db.session import Base, engine
import paperhub.db.models  # noqa: F401  registers the tables on Base.metadata

logger = logging.getLogger(__name__)


def init():
    logger.info("Creating tables (if not exist)...")
    Base.metadata.create_all(bind=engine)
    logger.info("Done.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init()
