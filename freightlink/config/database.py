# freightlink/config/database.py
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .settings import Settings


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for the configured database"""
    engine_kwargs = {
        "pool_pre_ping": True,
        "echo": settings.debug
    }

    if settings.is_sqlite:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        # In-memory SQLite only lives as long as its single connection
        if ":memory:" in settings.database_url or settings.database_url == "sqlite://":
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_recycle"] = 300
        if "render" in settings.database_url:
            engine_kwargs["connect_args"] = {"sslmode": "require"}

    return create_engine(settings.database_url_with_ssl, **engine_kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Database dependency
def get_db(request: Request):
    """Database dependency for FastAPI"""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
