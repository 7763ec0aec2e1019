"""Report peptides aggregate the PSM sets of one peptide string id."""

from __future__ import annotations

from proinfer.intermediate.keys import peptide_string_id
from proinfer.intermediate.models import Accession, Modification, Peptide
from proinfer.scores import get_score_model

from .psm import ReportPSM, ReportPSMSet


class ReportPeptide:
    """A peptide of the report, keyed by its string id.

    PSM sets are stored by identification key. ``scores`` holds explicitly
    assigned peptide-level scores; other scores fall back to the best score
    of the PSM sets.
    """

    def __init__(self, sequence: str, string_id: str, peptide: Peptide) -> None:
        self.sequence = sequence
        self.string_id = string_id
        self.peptide = peptide
        self.scores: dict[str, float] = {}
        self._psm_sets: dict[str, ReportPSMSet] = {}

    @staticmethod
    def create_string_id(psm: ReportPSM | ReportPSMSet, consider_modifications: bool) -> str:
        return peptide_string_id(psm.sequence, psm.modifications, consider_modifications)

    def __repr__(self) -> str:
        return f"ReportPeptide({self.string_id!r}, psm_sets={len(self._psm_sets)})"

    def add_psm_set(self, psm_set: ReportPSMSet) -> None:
        self._psm_sets[psm_set.key] = psm_set

    def get_psm_set(self, key: str) -> ReportPSMSet | None:
        return self._psm_sets.get(key)

    def remove_psm_set(self, key: str) -> ReportPSMSet | None:
        return self._psm_sets.pop(key, None)

    def psm_keys(self) -> list[str]:
        return list(self._psm_sets)

    @property
    def psm_sets(self) -> list[ReportPSMSet]:
        return list(self._psm_sets.values())

    @property
    def nr_psms(self) -> int:
        return len(self._psm_sets)

    @property
    def nr_spectra(self) -> int:
        keys: set[tuple] = set()
        for psm_set in self._psm_sets.values():
            keys |= psm_set.spectrum_keys()
        return len(keys)

    @property
    def modifications(self) -> tuple[Modification, ...]:
        for psm_set in self._psm_sets.values():
            return psm_set.modifications
        return ()

    @property
    def accessions(self) -> list[Accession]:
        seen: dict[int, Accession] = {}
        for psm_set in self._psm_sets.values():
            for acc in psm_set.accessions:
                seen.setdefault(acc.id, acc)
        return list(seen.values())

    @property
    def is_unique(self) -> bool:
        return len(self.accessions) == 1

    @property
    def file_ids(self) -> set[int]:
        ids: set[int] = set()
        for psm_set in self._psm_sets.values():
            ids |= psm_set.file_ids
        return ids

    def psm_signature(self) -> frozenset:
        """Identification keys and member PSM ids, used to spot identical peptides."""

        return frozenset((key, s.psm_ids) for key, s in self._psm_sets.items())

    def get_best_score(self, score_short: str) -> float | None:
        model = get_score_model(score_short)
        best = None
        for psm_set in self._psm_sets.values():
            value = psm_set.get_best_score(score_short)
            if model.is_better(value, best):
                best = value
        return best

    def get_score(self, score_short: str) -> float | None:
        if score_short in self.scores:
            return self.scores[score_short]
        return self.get_best_score(score_short)
