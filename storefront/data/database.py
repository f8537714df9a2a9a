# storefront/data/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from storefront.utils.settings import DATABASE_URL


class Base(DeclarativeBase):
    pass


def build_engine(url: str = DATABASE_URL, **kwargs) -> Engine:
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = create_engine(url, pool_pre_ping=not url.startswith("sqlite"), **kwargs)

    if engine.dialect.name == "sqlite":
        # sqlite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, _record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind: Engine | None = None):
    # models must be imported before create_all so they are registered in Base.metadata
    import storefront.data.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
