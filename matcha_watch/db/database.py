from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session


class Base(DeclarativeBase):
    pass


def create_db_engine(database_url: str) -> Engine:
    return create_engine(database_url)


def init_db(engine: Engine) -> None:
    # Registers every model on Base.metadata before creating tables
    import matcha_watch.models  # noqa: F401

    Base.metadata.create_all(engine)


def get_session(database_url: str) -> Session:
    engine = create_db_engine(database_url)
    init_db(engine)
    return Session(engine)
