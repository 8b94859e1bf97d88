from __future__ import annotations

import os
from contextlib import asynccontextmanager, contextmanager
from pathlib import Path
from typing import Iterator, Union

from sqlmodel import Session, SQLModel, create_engine

DEFAULT_DB_PATH = Path(os.getenv("PORTFINDER_DB", "web_runs/portfinder.db"))


def lookup_engine(db_path: Union[str, Path] = DEFAULT_DB_PATH):
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    return create_engine(f"sqlite:///{db_path}", connect_args={"check_same_thread": False})


engine = lookup_engine()


def init_db():
    SQLModel.metadata.create_all(engine)


def use_database(db_path: Union[str, Path]):
    """Point the lookup history at another SQLite file and create its tables."""
    global engine
    engine = lookup_engine(db_path)
    init_db()
    return engine


@contextmanager
def get_session() -> Iterator[Session]:
    with Session(engine, expire_on_commit=False) as session:
        yield session


@asynccontextmanager
async def lifespan(app):
    init_db()
    yield
