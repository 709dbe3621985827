# plantshop/database.py
from sqlmodel import SQLModel, create_engine, Session

from plantshop.core.config import get_settings

settings = get_settings()

# ---------------------------------------------------------
# Handoff channel storage
#
# Only the one-shot checkout -> confirmation handoff lives here.
# Products, cart lines and orders belong to the resource store.
#
# check_same_thread=False: FastAPI runs sync endpoints in a
# threadpool, so a SQLite connection may be reused across threads.
# ---------------------------------------------------------

db_url = settings.HANDOFF_DATABASE_URL

connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}

engine = create_engine(
    db_url,
    echo=False,        # set to True if you want to debug SQL queries
    connect_args=connect_args,
)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session
