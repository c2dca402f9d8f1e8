import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from papeleo.core.config import settings

# Normalize database URL to use psycopg3 driver if using standard postgresql://
# Skip normalization for SQLite (used in tests)
database_url = settings.database_url
if database_url.startswith("postgresql://") and "+psycopg" not in database_url:
    database_url = database_url.replace("postgresql://", "postgresql+psycopg://", 1)

engine = create_engine(database_url)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def new_id() -> str:
    """Primary keys are UUID strings, as generated by the hosted database."""
    return str(uuid.uuid4())
