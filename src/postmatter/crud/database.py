"""Engine construction and schema initialization for the document index"""

from typing import Iterator

from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

# Table classes must be imported so their metadata is registered before create_all
from postmatter.crud import models  # noqa: F401


def make_engine(db_url: str) -> Engine:
    return create_engine(db_url, echo=False)


def init_db(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


def reset_db(engine: Engine) -> None:
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)


def get_session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session
