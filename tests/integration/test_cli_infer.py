import sys
import json
from pathlib import Path

import pandas as pd
import pytest

# Ensure the src directory is on the Python path
sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from proinfer.cli.main import main
from proinfer.config import InferenceSettings, ScoringSettings, save_settings
from proinfer.db import get_session, save_registry


@pytest.fixture
def stored_run(tmp_path, add_psm, registry):
    """A database with three PSMs and the matching inference input document."""

    a = add_psm("AAA", accessions=("P1", "P2"))
    b = add_psm("CCC", accessions=("P1",))
    c = add_psm("DDD", accessions=("P3",))
    db_file = tmp_path / "run.db"
    with get_session(db_file) as session:
        save_registry(session, registry)

    groups_file = tmp_path / "groups.json"
    groups_file.write_text(
        json.dumps(
            {
                "groups": [
                    {"id": 1, "tree_id": 1, "peptides": ["CCC"], "accessions": ["P1"], "children": [2]},
                    {"id": 2, "tree_id": 1, "peptides": ["AAA"], "accessions": ["P2"]},
                    {"id": 3, "tree_id": 2, "peptides": ["DDD"], "accessions": ["P3"]},
                ],
                "subsets": {"1": [2]},
                "psms": {
                    str(a.id): {"scores": {"mascot_score": 40.0}},
                    str(b.id): {"scores": {"mascot_score": 20.0}},
                    str(c.id): {"scores": {"mascot_score": 90.0}},
                },
            }
        )
    )
    settings_file = save_settings(
        InferenceSettings(scoring=ScoringSettings(method="additive", score_short="mascot_score")),
        tmp_path / "inference.json",
    )
    return {"db": db_file, "groups": groups_file, "settings": settings_file}


def _argv(stored_run, *extra):
    return [
        "infer",
        "--groups",
        str(stored_run["groups"]),
        "--database",
        str(stored_run["db"]),
        "--settings",
        str(stored_run["settings"]),
        *extra,
    ]


def test_infer_writes_protein_table(tmp_path, stored_run):
    out_file = tmp_path / "proteins.tsv"
    peptides_file = tmp_path / "peptides.csv"

    assert main(_argv(stored_run, "--out", str(out_file), "--peptides-out", str(peptides_file))) == 0

    df = pd.read_csv(out_file, sep="\t")
    assert list(df["protein_id"]) == [3, 1]
    assert list(df["score"]) == [90.0, 60.0]
    assert df.loc[1, "subsets"] == "P2"
    peptides = pd.read_csv(peptides_file)
    assert sorted(peptides["string_id"]) == ["AAA", "CCC", "DDD"]
    assert "best_mascot_score" in peptides.columns


def test_infer_applies_command_line_filters(tmp_path, stored_run):
    out_file = tmp_path / "proteins.json"

    main(_argv(stored_run, "--out", str(out_file), "--filter", "nr_peptides_per_protein_filter >= 2"))

    rows = json.loads(out_file.read_text())
    assert [row["protein_id"] for row in rows] == [1]


def test_infer_prints_table_without_output_file(stored_run, capsys):
    assert main(_argv(stored_run, "--threads", "1")) == 0

    out = capsys.readouterr().out
    assert "Report proteins (2)" in out
    assert "P3" in out
