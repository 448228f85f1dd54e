# storefront/data/database.py
from functools import lru_cache
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from storefront.utils.settings import DATABASE_URL

Base = declarative_base()


def create_session_factory(url: str | None = None, create_tables: bool = False) -> sessionmaker:
    """
    Buduje engine + sessionmaker dla podanego URL.
    Zadnego globalnego engine - fabryka jest przekazywana do aplikacji / taskow.
    """
    url = url or DATABASE_URL
    connect_args = {}
    if url.startswith("sqlite"):
        # sqlite: wiele watkow uvicorna, zapisy czekaja na lock zamiast padac
        connect_args = {"check_same_thread": False, "timeout": 30}

    engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)

    if create_tables:
        # rejestracja wszystkich modeli w Base.metadata
        import storefront.data.models  # noqa: F401

        Base.metadata.create_all(bind=engine)

    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@lru_cache(maxsize=1)
def default_session_factory() -> sessionmaker:
    return create_session_factory(DATABASE_URL, create_tables=True)


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
