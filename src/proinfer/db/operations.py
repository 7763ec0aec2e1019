import logging
from typing import Any

import pandas as pd
from sqlalchemy import func, inspect, select, text

from proinfer.db.connect import get_session
from proinfer.db.init import initialize_db
from proinfer.db.models import (
    AccessionRecord,
    GroupRecord,
    InputFileRecord,
    PeptideRecord,
    PSMRecord,
    accession_peptide,
)
from proinfer.io.export import write_frame
from proinfer.logging import get_logger

logger = get_logger(__file__, propagate=True)


def _log_info(message: str, *args: Any) -> None:
    """Log ``message`` using both the module logger and the root logger."""

    logger.info(message, *args)
    logging.getLogger().info(message, *args)


def check_status(file_path: str | None = None):
    """Query the database for its SQLite version and log/return it."""
    _log_info("checking db status...")
    with get_session(file_path) as session:
        result = session.execute(text("SELECT sqlite_version();")).fetchone()
        if result:
            version = result[0]
            _log_info("sqlite version: %s", version)
            return version
        logger.warning("sqlite version query returned no result")
        return None


def show_tables(file_path: str | None = None) -> dict[str, list[dict[str, Any]]]:
    """Return table and column metadata for the SQLite database.

    Returns
    -------
    dict
        Mapping of table names to a list of column definitions. Each column
        definition contains ``name``, ``type``, ``nullable`` and ``default``
        keys.
    """

    _log_info("showing tables..")
    with get_session(file_path) as session:
        inspector = inspect(session.bind)
        table_names = sorted(inspector.get_table_names())
        _log_info("tables: %s", table_names)

        return {
            table_name: [
                {
                    "name": column.get("name", ""),
                    "type": str(column.get("type", "")),
                    "nullable": bool(column.get("nullable", True)),
                    "default": column.get("default"),
                }
                for column in inspector.get_columns(table_name)
            ]
            for table_name in table_names
        }


def summary(file_path: str | None = None) -> dict[str, int]:
    """Row counts of the identity, connectivity and group tables."""

    counted = {
        "input_files": InputFileRecord.id,
        "accessions": AccessionRecord.id,
        "peptides": PeptideRecord.id,
        "psms": PSMRecord.id,
        "groups": GroupRecord.id,
    }
    with get_session(file_path) as session:
        counts = {
            name: session.scalar(select(func.count(column))) or 0
            for name, column in counted.items()
        }
        counts["connections"] = (
            session.scalar(select(func.count()).select_from(accession_peptide)) or 0
        )
    _log_info("summary: %s", counts)
    return counts


def initialize(file_path=None):
    """
    file_path can be gathered from environment variable or a sensible default if not provided
    """
    return initialize_db(file_path=file_path)


def export_table(table_name: str, file_path: str, db_file_path: str | None = None) -> None:
    """Export a database table to a ``.tsv``, ``.csv`` or ``.json`` file."""

    logger.info("exporting table %s to %s", table_name, file_path)
    with get_session(db_file_path) as session:
        df = pd.read_sql_table(table_name, session.connection())
    write_frame(df, file_path)
