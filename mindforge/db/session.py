from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mindforge.core.config import Settings, settings


def create_engine_with_settings(config: Settings) -> Engine:
    """Build the engine for the configured backend."""
    url = make_url(config.DATABASE_URL)
    backend = url.get_backend_name()

    if backend == "sqlite":
        options: dict = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # One shared connection, otherwise every checkout sees an empty db
            options["poolclass"] = StaticPool
        return create_engine(config.DATABASE_URL, echo=config.DB_ECHO, **options)

    connect_args = {}
    if backend.startswith("postgresql"):
        connect_args["options"] = "-c timezone=utc"

    return create_engine(
        config.DATABASE_URL,
        echo=config.DB_ECHO,
        pool_pre_ping=True,
        connect_args=connect_args,
    )


engine = create_engine_with_settings(settings)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
