from pathlib import Path
from typing import Union

from proinfer.db.connect import get_db_path
from proinfer.db.models import initialize_db as orm_initialize_db
from proinfer.db.models import sqlite_engine


def initialize_db(file_path: Union[str, Path, None] = None):
    """Create all database tables and return the engine.

    Parameters
    ----------
    file_path:
        Optional path or URI of the SQLite database file. When ``None`` the
        default from :func:`get_db_path` is used.
    """

    engine = sqlite_engine(get_db_path(file_path))
    orm_initialize_db(engine)
    return engine
