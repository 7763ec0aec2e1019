# io/export.py
from functools import partial
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from proinfer.logging import get_logger
from proinfer.report import ReportPeptide, ReportProtein

logger = get_logger(__file__)

PROTEIN_COLUMNS = [
    "protein_id",
    "representative",
    "accessions",
    "score",
    "nr_peptides",
    "nr_psms",
    "nr_spectra",
    "nr_subsets",
    "subsets",
    "peptides",
    "is_decoy",
    "fdr",
    "q_value",
]

PEPTIDE_COLUMNS = [
    "string_id",
    "sequence",
    "accessions",
    "nr_psms",
    "nr_spectra",
    "unique",
    "modifications",
]


def _optional(value) -> float:
    return np.nan if value is None else value


def proteins_to_frame(proteins: Iterable[ReportProtein]) -> pd.DataFrame:
    """One row per report protein, in the given order."""

    rows = [
        {
            "protein_id": protein.id,
            "representative": protein.representative,
            "accessions": ";".join(protein.accession_names),
            "score": protein.score,
            "nr_peptides": protein.nr_peptides,
            "nr_psms": protein.nr_psms,
            "nr_spectra": protein.nr_spectra,
            "nr_subsets": protein.nr_subsets,
            "subsets": ";".join(
                sub.representative or str(sub.id) for sub in protein.subsets
            ),
            "peptides": ";".join(pep.string_id for pep in protein.peptides),
            "is_decoy": protein.is_decoy,
            "fdr": _optional(protein.fdr),
            "q_value": _optional(protein.q_value),
        }
        for protein in proteins
    ]
    return pd.DataFrame(rows, columns=PROTEIN_COLUMNS)


def peptides_to_frame(
    peptides: Iterable[ReportPeptide], score_short: Optional[str] = None
) -> pd.DataFrame:
    """One row per report peptide; ``score_short`` adds a ``best_<score>`` column."""

    columns = list(PEPTIDE_COLUMNS)
    if score_short:
        columns.append(f"best_{score_short}")

    rows = []
    for peptide in peptides:
        row = {
            "string_id": peptide.string_id,
            "sequence": peptide.sequence,
            "accessions": ";".join(acc.accession for acc in peptide.accessions),
            "nr_psms": peptide.nr_psms,
            "nr_spectra": peptide.nr_spectra,
            "unique": peptide.is_unique,
            "modifications": ";".join(
                f"{mod.position}:{mod.mass:.4f}" for mod in peptide.modifications
            ),
        }
        if score_short:
            row[f"best_{score_short}"] = _optional(peptide.get_score(score_short))
        rows.append(row)
    return pd.DataFrame(rows, columns=columns)


def get_writer(file: str | Path, **kwargs):
    name = str(file)
    if name.endswith(".tsv"):
        return partial(pd.DataFrame.to_csv, path_or_buf=name, sep="\t", index=False, **kwargs)
    elif name.endswith(".csv"):
        return partial(pd.DataFrame.to_csv, path_or_buf=name, index=False, **kwargs)
    elif name.endswith(".json"):
        return partial(pd.DataFrame.to_json, path_or_buf=name, orient="records", indent=2, **kwargs)

    else:
        logger.error(f"do not know how to write file: {file}")
        return None


def write_frame(df: pd.DataFrame, path: str | Path) -> Path:
    """Write ``df`` as TSV, CSV or JSON depending on the suffix of ``path``.

    Raises
    ------
    ValueError
        If the suffix is not one of ``.tsv``, ``.csv`` or ``.json``.
    """

    writer = get_writer(path)
    if writer is None:
        raise ValueError(f"unsupported output format: {path}")
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    writer(df)
    logger.info("wrote %d rows to %s", len(df), path)
    return Path(path)
