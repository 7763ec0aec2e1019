import itertools
import os
import sys
from pathlib import Path

import pytest

# Ensure the src directory is on the path for imports
root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(root / "src"))

log_dir = root / "logs"
log_dir.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("PROINFER_LOG_DIR", str(log_dir))
os.environ.setdefault("PROINFER_CONFIG_DIR", str(log_dir / "config"))

from proinfer.intermediate import IdentityRegistry  # noqa: E402
from proinfer.io.groups import PSMEntry, build_report_psm_sets  # noqa: E402


@pytest.fixture
def registry():
    return IdentityRegistry()


@pytest.fixture
def add_psm(registry):
    """Register a PSM together with its peptide, accessions and input file."""

    counter = itertools.count(1)

    def _add(
        sequence,
        accessions=("P1",),
        file_name="run1",
        charge=2,
        mass_to_charge=None,
        modifications=(),
        source_id=None,
    ):
        n = next(counter)
        input_file = registry.register_input_file(file_name, f"{file_name}.mzid", "mzid")
        peptide = registry.register_peptide(sequence)
        for name in accessions:
            registry.connections.connect(registry.register_accession(name), peptide)
        psm = registry.create_psm(
            charge=charge,
            mass_to_charge=500.0 + n if mass_to_charge is None else mass_to_charge,
            delta_mass=0.002,
            retention_time=100.0 + n,
            sequence=sequence,
            missed_cleavages=0,
            source_id=source_id or f"index={n}",
            spectrum_title=f"spectrum {n}",
            file=input_file,
            modifications=tuple(modifications),
        )
        registry.commit_psm(psm)
        return psm

    return _add


@pytest.fixture
def report_sets(registry):
    """Canonical PSM sets of every PSM in the registry.

    ``scores`` maps a PSM id to its search engine scores; ``fdr_scores`` maps a
    PSM id to the FDR score of the set holding it.
    """

    def _build(scores=None, fdr_scores=None, key_settings=None):
        scores = scores or {}
        fdr_scores = fdr_scores or {}
        entries = {psm_id: PSMEntry(scores=values) for psm_id, values in scores.items()}
        sets = build_report_psm_sets(registry, entries, key_settings=key_settings)
        for psm_set in sets.values():
            for psm_id in psm_set.psm_ids:
                if psm_id in fdr_scores:
                    psm_set.fdr_score = fdr_scores[psm_id]
                    psm_set.fdr = fdr_scores[psm_id]
                    psm_set.q_value = fdr_scores[psm_id]
                    psm_set.is_fdr_good = True
        return sets

    return _build
