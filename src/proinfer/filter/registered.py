"""Built-in filters, addressed by their short name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from .base import FilterLevel, SimpleFilter, psms_in_file
from .comparator import FilterComparator
from .types import FilterType


@dataclass(frozen=True)
class RegisteredFilter:
    short_name: str
    name: str
    level: FilterLevel
    filter_type: FilterType
    extractor: Callable[[Any, int], Any]

    def new_instance(self, comparator: FilterComparator, value, negate: bool = False) -> SimpleFilter:
        return SimpleFilter(
            self.short_name,
            self.level,
            self.filter_type,
            self.extractor,
            comparator,
            value,
            negate,
        )


def _attr(name: str) -> Callable[[Any, int], Any]:
    def extract(item, file_id=0):
        return getattr(item, name)

    return extract


def _accession_names(item, file_id=0) -> list[str]:
    return [acc.accession for acc in item.accessions]


def _psm_file_names(item, file_id=0) -> list[str]:
    return sorted({psm.spectrum.file.name for psm in psms_in_file(item, file_id)})


def _peptide_file_names(item, file_id=0) -> list[str]:
    names: set[str] = set()
    for psm_set in item.psm_sets:
        names.update(_psm_file_names(psm_set, file_id))
    return sorted(names)


_P = FilterLevel.psm
_PEP = FilterLevel.peptide
_PROT = FilterLevel.protein
_NUM = FilterType.numerical
_BOOL = FilterType.bool
_LIT = FilterType.literal
_LIST = FilterType.literal_list
_MOD = FilterType.modification

_REGISTERED = (
    # PSM level, also applied to PSM sets
    RegisteredFilter("charge_filter", "Charge (PSM)", _P, _NUM, _attr("charge")),
    RegisteredFilter("delta_mass_filter", "Delta mass (PSM)", _P, _NUM, _attr("delta_mass")),
    RegisteredFilter("delta_ppm_filter", "Delta ppm (PSM)", _P, _NUM, _attr("delta_ppm")),
    RegisteredFilter("mz_filter", "m/z (PSM)", _P, _NUM, _attr("mass_to_charge")),
    RegisteredFilter("rt_filter", "Retention time (PSM)", _P, _NUM, _attr("retention_time")),
    RegisteredFilter("missed_cleavages_filter", "Missed cleavages (PSM)", _P, _NUM, _attr("missed_cleavages")),
    RegisteredFilter("psm_sequence_filter", "Sequence (PSM)", _P, _LIT, _attr("sequence")),
    RegisteredFilter("psm_source_id_filter", "Source ID (PSM)", _P, _LIT, _attr("source_id")),
    RegisteredFilter("psm_file_list_filter", "Files (PSM)", _P, _LIST, _psm_file_names),
    RegisteredFilter("psm_accessions_filter", "Accessions (PSM)", _P, _LIST, _accession_names),
    RegisteredFilter("psm_nr_accessions_filter", "#Accessions (PSM)", _P, _NUM, _attr("nr_accessions")),
    RegisteredFilter("psm_decoy_filter", "Decoy (PSM)", _P, _BOOL, _attr("is_decoy")),
    RegisteredFilter("psm_unique_filter", "Unique (PSM)", _P, _BOOL, _attr("is_unique")),
    RegisteredFilter("psm_modifications_filter", "Modifications (PSM)", _P, _MOD, _attr("modifications")),
    RegisteredFilter("psm_fdr_filter", "FDR (PSM)", _P, _NUM, _attr("fdr")),
    RegisteredFilter("psm_q_value_filter", "q-value (PSM)", _P, _NUM, _attr("q_value")),
    RegisteredFilter("psm_rank_filter", "Rank (PSM)", _P, _NUM, _attr("rank")),
    # peptide level
    RegisteredFilter("peptide_sequence_filter", "Sequence (peptide)", _PEP, _LIT, _attr("sequence")),
    RegisteredFilter("nr_psms_per_peptide_filter", "#PSMs per peptide", _PEP, _NUM, _attr("nr_psms")),
    RegisteredFilter("nr_spectra_per_peptide_filter", "#Spectra per peptide", _PEP, _NUM, _attr("nr_spectra")),
    RegisteredFilter("peptide_accessions_filter", "Accessions (peptide)", _PEP, _LIST, _accession_names),
    RegisteredFilter("peptide_file_list_filter", "Files (peptide)", _PEP, _LIST, _peptide_file_names),
    RegisteredFilter("peptide_modifications_filter", "Modifications (peptide)", _PEP, _MOD, _attr("modifications")),
    RegisteredFilter("peptide_unique_filter", "Unique (peptide)", _PEP, _BOOL, _attr("is_unique")),
    # protein level
    RegisteredFilter("protein_score_filter", "Protein score", _PROT, _NUM, _attr("score")),
    RegisteredFilter("nr_peptides_per_protein_filter", "#Peptides per protein", _PROT, _NUM, _attr("nr_peptides")),
    RegisteredFilter("nr_psms_per_protein_filter", "#PSMs per protein", _PROT, _NUM, _attr("nr_psms")),
    RegisteredFilter("nr_spectra_per_protein_filter", "#Spectra per protein", _PROT, _NUM, _attr("nr_spectra")),
    RegisteredFilter("protein_accessions_filter", "Accessions (protein)", _PROT, _LIST, _accession_names),
    RegisteredFilter("protein_decoy_filter", "Decoy (protein)", _PROT, _BOOL, _attr("is_decoy")),
    RegisteredFilter("protein_fdr_filter", "FDR (protein)", _PROT, _NUM, _attr("fdr")),
    RegisteredFilter("protein_q_value_filter", "q-value (protein)", _PROT, _NUM, _attr("q_value")),
    RegisteredFilter("protein_nr_subsets_filter", "#Subsets (protein)", _PROT, _NUM, _attr("nr_subsets")),
)

REGISTERED_FILTERS: dict[str, RegisteredFilter] = {f.short_name: f for f in _REGISTERED}


def get_registered_filter(short_name: str) -> RegisteredFilter | None:
    return REGISTERED_FILTERS.get(short_name)


def registered_filters(level: FilterLevel | None = None) -> list[RegisteredFilter]:
    return [f for f in _REGISTERED if level is None or f.level is level]
