import sys
import sqlite3
from pathlib import Path

import pandas as pd

# Ensure the src directory is on the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from proinfer.cli.main import main
from proinfer.db import get_session, save_registry
from proinfer.intermediate import IdentityRegistry


def test_db_init_creates_tables(tmp_path, monkeypatch):
    """CLI db init should create a SQLite file with tables."""

    db_file = tmp_path / "test.db"
    monkeypatch.setattr(sys, "argv", ["proinfer", "db", "init", "--file", str(db_file)])
    main()

    assert db_file.exists()

    with sqlite3.connect(db_file) as conn:
        tables = {
            row[0]
            for row in conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table';"
            )
        }

    assert {"accession", "peptide", "psm", "accession_peptide", "protein_group"} <= tables


def test_cli_export_writes_stored_records(tmp_path, monkeypatch):
    """Records saved through the store can be exported via the CLI."""

    db_file = tmp_path / "test.db"
    registry = IdentityRegistry()
    peptide = registry.register_peptide("PEPTIDEA")
    for name in ("P1", "P2"):
        registry.connections.connect(registry.register_accession(name), peptide)
    with get_session(db_file) as session:
        save_registry(session, registry)

    out_file = tmp_path / "links.tsv"
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "proinfer",
            "db",
            "export",
            "--table-name",
            "accession_peptide",
            "--file",
            str(out_file),
            "--database",
            str(db_file),
        ],
    )
    main()

    df = pd.read_csv(out_file, sep="\t")
    assert sorted(df["accession_id"]) == [1, 2]
    assert set(df["peptide_id"]) == {1}


def test_cli_summary_prints_counts(tmp_path, monkeypatch, capsys):
    db_file = tmp_path / "test.db"
    registry = IdentityRegistry()
    registry.register_accession("P1")
    with get_session(db_file) as session:
        save_registry(session, registry)

    monkeypatch.setattr(sys, "argv", ["proinfer", "db", "summary", "--file", str(db_file)])
    main()

    out = capsys.readouterr().out
    assert "accessions" in out
    assert "connections" in out
