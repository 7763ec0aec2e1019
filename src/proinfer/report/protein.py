"""Report proteins: merged accessions with their peptide evidence."""

from __future__ import annotations

import math

from proinfer.intermediate.models import Accession

from .peptide import ReportPeptide


class ReportProtein:
    """One reportable protein, built from a seed group.

    Subset proteins are only linked; their accessions and peptides are never
    merged into this protein.
    """

    def __init__(self, id: int) -> None:
        self.id = id
        self._accessions: dict[int, Accession] = {}
        self._peptides: dict[str, ReportPeptide] = {}
        self._subsets: dict[int, "ReportProtein"] = {}
        self.score: float = math.nan
        self.is_decoy = False
        self.fdr: float | None = None
        self.q_value: float | None = None
        self.rank: int | None = None

    def __repr__(self) -> str:
        return (
            f"ReportProtein(id={self.id}, accessions={self.accession_names}, "
            f"peptides={len(self._peptides)}, subsets={sorted(self._subsets)})"
        )

    def add_accession(self, accession: Accession) -> None:
        self._accessions.setdefault(accession.id, accession)

    def add_peptide(self, peptide: ReportPeptide) -> None:
        self._peptides.setdefault(peptide.string_id, peptide)

    def add_to_subsets(self, protein: "ReportProtein") -> None:
        self._subsets.setdefault(protein.id, protein)

    @property
    def accessions(self) -> list[Accession]:
        return list(self._accessions.values())

    @property
    def accession_names(self) -> list[str]:
        return [acc.accession for acc in self._accessions.values()]

    @property
    def representative(self) -> str | None:
        names = self.accession_names
        return names[0] if names else None

    @property
    def peptides(self) -> list[ReportPeptide]:
        return list(self._peptides.values())

    def get_peptide(self, string_id: str) -> ReportPeptide | None:
        return self._peptides.get(string_id)

    @property
    def subsets(self) -> list["ReportProtein"]:
        return list(self._subsets.values())

    @property
    def nr_peptides(self) -> int:
        return len(self._peptides)

    @property
    def nr_psms(self) -> int:
        keys: set[str] = set()
        for peptide in self._peptides.values():
            keys.update(peptide.psm_keys())
        return len(keys)

    @property
    def nr_spectra(self) -> int:
        keys: set[tuple] = set()
        for peptide in self._peptides.values():
            for psm_set in peptide.psm_sets:
                keys |= psm_set.spectrum_keys()
        return len(keys)

    @property
    def nr_subsets(self) -> int:
        return len(self._subsets)
