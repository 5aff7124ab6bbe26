import logging
import os

from alembic import command
from alembic.config import Config
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, ProgrammingError
from sqlalchemy.orm import Session, sessionmaker

from ckforest.db.session import SessionLocal, make_engine
from ckforest.models.setting import Setting
from ckforest.services.package_service import ensure_default_packages

logger = logging.getLogger(__name__)

ALEMBIC_INI = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "alembic.ini")

DEFAULT_DEPOSIT_INSTRUCTIONS = (
    "Pay the deposit by bank transfer or mobile money and upload the receipt. "
    "Use your booking reference as the payment note."
)


def ensure_setting(db: Session, key: str, value: str):
    if db.get(Setting, key):
        return
    db.add(Setting(key=key, str_value=value))
    db.commit()


def run(db=None):
    if db is None:
        db = SessionLocal()
    try:
        # Seeding before migrations must not crash the API
        try:
            db.execute(text("SELECT 1 FROM packages LIMIT 1"))
        except (ProgrammingError, OperationalError):
            db.rollback()
            logger.warning("packages table not found, skipping seed (run alembic upgrade head)")
            return

        created = ensure_default_packages(db)
        if created:
            logger.info("seeded %d packages", created)

        ensure_setting(db, "deposit_instructions", DEFAULT_DEPOSIT_INSTRUCTIONS)
    finally:
        db.close()


def migrate(database_url: str) -> None:
    cfg = Config(ALEMBIC_INI)
    cfg.set_main_option("sqlalchemy.url", database_url)
    command.upgrade(cfg, "head")


def seed_database(database_url: str) -> None:
    """Seed through an engine built after migrations, not the one loaded at import."""
    seed_engine = make_engine(database_url)
    try:
        run(sessionmaker(autocommit=False, autoflush=False, bind=seed_engine)())
    finally:
        seed_engine.dispose()


if __name__ == "__main__":
    run()
