from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from ibd_nexus.config import settings


def _engine_kwargs(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {}


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db(bind=None) -> None:
    """Create the storage table if it does not exist yet."""
    from ibd_nexus.models import storage_record  # noqa: F401

    Base.metadata.create_all(bind or engine)
