# marketplace/data/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.utils.settings import DATABASE_URL


def _is_memory_sqlite(url: str) -> bool:
    return url == "sqlite://" or ":memory:" in url or "mode=memory" in url


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # baza w pamięci żyje tylko w jednym połączeniu, plik dostaje normalną pulę
        if _is_memory_sqlite(url):
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {"pool_pre_ping": True}


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=True)
Base = declarative_base()


def init_db():
    # import modeli żeby zarejestrowały się w Base.metadata
    import marketplace.data.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
