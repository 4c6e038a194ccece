# app/infrastructure/persistence/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

import config

Base = declarative_base()


def build_engine(database_url: str):
    """
    Crea el engine. Las bases SQLite en memoria comparten una única conexión
    para que todas las sesiones vean las mismas tablas.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)
    return create_engine(database_url, pool_pre_ping=True)


def init_db(bind) -> None:
    # Registra las tablas en Base.metadata antes de crearlas
    from app.infrastructure.persistence import models  # noqa: F401
    Base.metadata.create_all(bind=bind)


engine = build_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
