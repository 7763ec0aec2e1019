# proinfer/db/connect.py

import os
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Iterator

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from proinfer.db.models import initialize_db, sqlite_engine
from proinfer.logging import get_logger

logger = get_logger(__file__)


@lru_cache(maxsize=None)
def get_db_dir() -> Path:
    db_dir = Path(os.environ.get("PROINFER_DB_DIR", Path.home() / ".proinfer"))
    db_dir.mkdir(parents=True, exist_ok=True)
    logger.info("setting db_dir to %s", str(db_dir))
    return db_dir


def sqlite_uri(path: str | Path) -> str:
    """Prefix ``path`` with ``sqlite:///`` unless it already is a SQLite URI."""

    text = str(path)
    if text.startswith("sqlite"):
        return text
    return "sqlite:///" + text


def get_db_path(file: str | Path | None = None) -> str:
    """Return the SQLite URI of the database.

    Parameters
    ----------
    file:
        Optional path to a SQLite database file. When ``None``,
        ``PROINFER_DB_PATH`` is used if set, otherwise ``proinfer.db`` in
        :func:`get_db_dir`.
    """

    if file is None:
        file = os.getenv("PROINFER_DB_PATH") or get_db_dir() / "proinfer.db"
    db_uri = sqlite_uri(file)
    logger.debug("setting db_path to %s", db_uri)
    return db_uri


def make_session_factory(engine: Engine):
    SessionLocal = sessionmaker(bind=engine)
    initialize_db(engine=engine)

    @contextmanager
    def get_session() -> Iterator[Session]:
        session = SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return get_session


@contextmanager
def get_session(file_path: str | Path | None = None) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations.

    Parameters
    ----------
    file_path:
        Optional path or URI of the SQLite database, resolved with
        :func:`get_db_path`.
    """

    engine = sqlite_engine(get_db_path(file_path))
    initialize_db(engine=engine)

    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
        engine.dispose()
