from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from app.core.config import settings


class Base(DeclarativeBase):
    pass


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True, "pool_recycle": 3600}


def make_session_factory(url: str) -> sessionmaker:
    engine = create_engine(url, **_engine_kwargs(url))
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


SessionLocal = make_session_factory(settings.DATABASE_URL)
