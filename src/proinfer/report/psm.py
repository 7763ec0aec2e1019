"""Report wrappers around PSMs and PSM sets."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable

from proinfer.intermediate.keys import identification_key
from proinfer.intermediate.models import Accession, Modification, PeptideSpectrumMatch
from proinfer.scores import PSM_FDR_SCORE, PSM_Q_VALUE, get_score_model


@dataclass(eq=False)
class ReportPSM:
    """One PSM as seen by the report, with its search engine scores.

    ``scores`` maps score short names to values and ``identification_ranks``
    the per-score rank of this PSM for its spectrum.
    """

    spectrum: PeptideSpectrumMatch
    accessions: list[Accession] = field(default_factory=list)
    scores: dict[str, float] = field(default_factory=dict)
    identification_ranks: dict[str, int] = field(default_factory=dict)
    is_decoy: bool = False
    fdr: float | None = None
    fdr_score: float | None = None
    q_value: float | None = None
    rank: int | None = None
    is_fdr_good: bool = False

    @property
    def id(self) -> int:
        return self.spectrum.id

    @property
    def sequence(self) -> str:
        return self.spectrum.sequence

    @property
    def charge(self) -> int | None:
        return self.spectrum.charge

    @property
    def mass_to_charge(self) -> float:
        return self.spectrum.mass_to_charge

    @property
    def delta_mass(self) -> float:
        return self.spectrum.delta_mass

    @property
    def delta_ppm(self) -> float:
        return self.spectrum.delta_ppm

    @property
    def retention_time(self) -> float | None:
        return self.spectrum.retention_time

    @property
    def missed_cleavages(self) -> int:
        return self.spectrum.missed_cleavages

    @property
    def source_id(self) -> str | None:
        return self.spectrum.source_id

    @property
    def spectrum_title(self) -> str | None:
        return self.spectrum.spectrum_title

    @property
    def modifications(self) -> tuple[Modification, ...]:
        return self.spectrum.modifications

    @property
    def file_ids(self) -> set[int]:
        return {self.spectrum.file.id}

    @property
    def nr_accessions(self) -> int:
        return len(self.accessions)

    @property
    def is_unique(self) -> bool:
        return len(self.accessions) == 1

    def get_identification_key(self, settings=None) -> str:
        return identification_key(self.spectrum, settings)

    def get_score(self, score_short: str) -> float | None:
        if score_short == PSM_FDR_SCORE:
            return self.fdr_score
        if score_short == PSM_Q_VALUE:
            return self.q_value
        return self.scores.get(score_short)

    def get_best_score(self, score_short: str) -> float | None:
        return self.get_score(score_short)

    def get_identification_rank(self, score_short: str) -> int | None:
        return self.identification_ranks.get(score_short)

    def spectrum_key(self) -> tuple:
        psm = self.spectrum
        return (
            psm.file.id,
            psm.source_id,
            psm.spectrum_title,
            psm.charge,
            round(psm.mass_to_charge, 4),
        )


class ReportPSMSet:
    """PSMs sharing one identification key, typically from several search engines."""

    def __init__(self, key: str, psms: Iterable[ReportPSM] = ()) -> None:
        self.key = key
        self.psms: list[ReportPSM] = []
        self.fdr: float | None = None
        self.fdr_score: float | None = None
        self.q_value: float | None = None
        self.rank: int | None = None
        self.is_fdr_good = False
        for psm in psms:
            self.add_report_psm(psm)

    @classmethod
    def from_psms(cls, psms: Iterable[ReportPSM], settings=None) -> "ReportPSMSet":
        psms = list(psms)
        if not psms:
            raise ValueError("a PSM set needs at least one PSM")
        return cls(psms[0].get_identification_key(settings), psms)

    def __repr__(self) -> str:
        return f"ReportPSMSet(key={self.key!r}, psms={sorted(self.psm_ids)})"

    def add_report_psm(self, psm: ReportPSM) -> None:
        if any(p.id == psm.id for p in self.psms):
            return
        self.psms.append(psm)

    def find_psm(self, spectrum: PeptideSpectrumMatch) -> ReportPSM | None:
        for psm in self.psms:
            if psm.spectrum == spectrum:
                return psm
        return None

    @property
    def psm_ids(self) -> frozenset[int]:
        return frozenset(psm.id for psm in self.psms)

    def has_same_psms(self, other: "ReportPSMSet") -> bool:
        return len(self.psms) == len(other.psms) and self.psm_ids == other.psm_ids

    def copy_fdr_data(self, other: "ReportPSMSet") -> None:
        self.fdr = other.fdr
        self.fdr_score = other.fdr_score
        self.q_value = other.q_value
        self.rank = other.rank
        self.is_fdr_good = other.is_fdr_good

    def _first(self) -> ReportPSM:
        return self.psms[0]

    @property
    def sequence(self) -> str:
        return self._first().sequence

    @property
    def charge(self) -> int | None:
        return self._first().charge

    @property
    def mass_to_charge(self) -> float:
        return self._first().mass_to_charge

    @property
    def delta_mass(self) -> float:
        return self._first().delta_mass

    @property
    def delta_ppm(self) -> float:
        return self._first().delta_ppm

    @property
    def retention_time(self) -> float | None:
        return self._first().retention_time

    @property
    def missed_cleavages(self) -> int:
        return self._first().missed_cleavages

    @property
    def source_id(self) -> str | None:
        return self._first().source_id

    @property
    def spectrum_title(self) -> str | None:
        return self._first().spectrum_title

    @property
    def modifications(self) -> tuple[Modification, ...]:
        return self._first().modifications

    @property
    def accessions(self) -> list[Accession]:
        seen: dict[int, Accession] = {}
        for psm in self.psms:
            for acc in psm.accessions:
                seen.setdefault(acc.id, acc)
        return list(seen.values())

    @property
    def nr_accessions(self) -> int:
        return len(self.accessions)

    @property
    def is_unique(self) -> bool:
        return self.nr_accessions == 1

    @property
    def is_decoy(self) -> bool:
        return any(psm.is_decoy for psm in self.psms)

    @property
    def file_ids(self) -> set[int]:
        return {psm.spectrum.file.id for psm in self.psms}

    def get_identification_key(self, settings=None) -> str:
        return self.key

    def get_score(self, score_short: str) -> float | None:
        if score_short == PSM_FDR_SCORE:
            return self.fdr_score
        if score_short == PSM_Q_VALUE:
            return self.q_value
        return self.get_best_score(score_short)

    def get_best_score(self, score_short: str) -> float | None:
        if score_short in (PSM_FDR_SCORE, PSM_Q_VALUE):
            return self.get_score(score_short)
        model = get_score_model(score_short)
        best = None
        for psm in self.psms:
            value = psm.get_score(score_short)
            if model.is_better(value, best):
                best = value
        return best

    def get_identification_rank(self, score_short: str) -> int | None:
        ranks = [
            psm.get_identification_rank(score_short)
            for psm in self.psms
            if psm.get_identification_rank(score_short) is not None
        ]
        return min(ranks) if ranks else None

    def spectrum_keys(self) -> set[tuple]:
        return {psm.spectrum_key() for psm in self.psms}


def score_or_nan(value: float | None) -> float:
    return math.nan if value is None else float(value)
