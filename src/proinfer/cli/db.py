"""Command-line helpers for the proinfer database.

Registers the ``db`` subcommands on an ``argparse`` parser and dispatches the
parsed arguments to :mod:`proinfer.db.operations` or Alembic.
"""

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from alembic import command
from alembic.config import Config
from rich.console import Console
from rich.table import Table

from proinfer.db import operations
from proinfer.db.connect import sqlite_uri
from proinfer.logging import get_logger

TABLES = (
    "input_file",
    "accession",
    "peptide",
    "psm",
    "accession_peptide",
    "protein_group",
)


def register_subcommands(subparsers):
    """Attach database subcommands to an ``argparse`` parser.

    Examples
    --------
    >>> import argparse
    >>> parser = argparse.ArgumentParser(prog="proinfer db")
    >>> subparsers = parser.add_subparsers(dest="subcommand", required=True)
    >>> register_subcommands(subparsers)
    >>> parser.parse_args(["init", "--file", "test.db"])
    Namespace(subcommand='init', file='test.db')
    """

    init_parser = subparsers.add_parser("init", help="initialize db")
    init_parser.add_argument("--file", required=False)

    for name, help_text in (
        ("status", "Check DB status"),
        ("show", "Show tables"),
        ("summary", "Count stored records"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--file", required=False)

    export_parser = subparsers.add_parser("export", help="Export table to TSV, CSV or JSON")
    export_parser.add_argument("--table-name", required=True, choices=TABLES)
    export_parser.add_argument("--file", required=True, help="Output file (TSV, CSV or JSON)")
    export_parser.add_argument("--database", required=False)

    upgrade_parser = subparsers.add_parser(
        "upgrade", help="Apply Alembic migrations up to a revision"
    )
    upgrade_parser.add_argument(
        "revision",
        nargs="?",
        default="head",
        help="Alembic revision identifier to upgrade to (default: head)",
    )
    upgrade_parser.add_argument(
        "--database",
        dest="database",
        help="Database URL or filesystem path to migrate",
    )

    downgrade_parser = subparsers.add_parser("downgrade", help="Revert Alembic migrations")
    downgrade_parser.add_argument(
        "revision",
        nargs="?",
        default="-1",
        help="Alembic revision identifier to downgrade to (default: -1)",
    )
    downgrade_parser.add_argument(
        "--database",
        dest="database",
        help="Database URL or filesystem path to migrate",
    )


def dispatch(args):
    """Run the database operation associated with ``args.subcommand``."""

    logger = get_logger(__file__)

    if args.subcommand == "status":
        operations.check_status(args.file)
    elif args.subcommand == "show":
        _render_table_overview(operations.show_tables(args.file))
    elif args.subcommand == "summary":
        _render_summary(operations.summary(args.file))
    elif args.subcommand == "export":
        operations.export_table(args.table_name, args.file, db_file_path=args.database)
    elif args.subcommand == "init":
        operations.initialize(file_path=args.file)
    elif args.subcommand == "upgrade":
        _run_alembic_command("upgrade", args.revision, database=args.database)
    elif args.subcommand == "downgrade":
        _run_alembic_command("downgrade", args.revision, database=args.database)
    else:
        logger.info("no dispatched function provided for %s", args.subcommand)


def _render_table_overview(
    table_definitions: Mapping[str, Sequence[Mapping[str, Any]]],
    console: Console | None = None,
) -> None:
    """Pretty-print table metadata using ``rich``."""

    if console is None:
        console = Console()

    table = Table(title="proinfer Database Schema", show_lines=True)
    table.add_column("Table", style="bold cyan")
    table.add_column("Column", style="magenta")
    table.add_column("Type", style="green")
    table.add_column("Nullable", justify="center", style="yellow")
    table.add_column("Default", style="bright_black")

    table_names = sorted(table_definitions)
    if not table_names:
        table.add_row("[dim]No tables found[/dim]", "", "", "", "")
        console.print(table)
        return

    for table_index, table_name in enumerate(table_names):
        for column_index, column in enumerate(table_definitions[table_name]):
            default = column.get("default")
            table.add_row(
                table_name if column_index == 0 else "",
                str(column.get("name", "")),
                str(column.get("type", "")),
                "Yes" if column.get("nullable", True) else "No",
                "" if default in (None, "") else str(default),
            )
        if table_index < len(table_names) - 1:
            table.add_section()

    console.print(table)


def _render_summary(counts: Mapping[str, int], console: Console | None = None) -> None:
    if console is None:
        console = Console()

    table = Table(title="Stored records")
    table.add_column("Records", style="bold cyan")
    table.add_column("Count", justify="right", style="green")
    for name, count in counts.items():
        table.add_row(name, str(count))
    console.print(table)


def _run_alembic_command(action: str, revision: str, database: str | None) -> None:
    """Execute an Alembic migration command."""

    logger = get_logger(__file__)
    config = _build_alembic_config(database)
    logger.info("running alembic %s to %s", action, revision)

    if action == "upgrade":
        command.upgrade(config, revision)
    elif action == "downgrade":
        command.downgrade(config, revision)
    else:  # pragma: no cover - guarded by call sites
        raise ValueError(f"Unsupported Alembic action: {action}")


def _build_alembic_config(database: str | None) -> Config:
    project_root = _find_project_root()
    config_path = project_root / "alembic.ini"

    alembic_config = Config(str(config_path)) if config_path.exists() else Config()
    alembic_config.set_main_option("script_location", str(project_root / "alembic"))

    normalized = _normalize_database_option(database)
    if normalized:
        alembic_config.set_main_option("sqlalchemy.url", normalized)
    elif not alembic_config.get_main_option("sqlalchemy.url"):
        # env.py falls back to get_db_path()
        alembic_config.set_main_option("sqlalchemy.url", "")

    return alembic_config


def _find_project_root() -> Path:
    """Locate the repository root that contains the Alembic directory."""

    for parent in Path(__file__).resolve().parents:
        if (parent / "alembic").is_dir():
            return parent
    raise FileNotFoundError("Could not locate the Alembic directory.")


def _normalize_database_option(database: str | None) -> str | None:
    if not database or not database.strip():
        return None
    database = database.strip()
    if "://" in database:
        return database
    return sqlite_uri(Path(database).expanduser())
