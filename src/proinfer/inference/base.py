"""Report assembly: filtered report peptides and recursive protein building."""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Iterable, Mapping, Optional

from proinfer.errors import (
    FilterError,
    MalformedGroupGraphError,
    MissingPSMSetError,
    MissingReportPSMError,
    ReconciliationError,
)
from proinfer.filter import (
    Filter,
    FilterLevel,
    FilterParseResult,
    ScoreFilterFamily,
    filter_to_string,
    parse_filter_expression,
    registered_filters,
    satisfies_filter_list,
)
from proinfer.intermediate import Group, GroupGraph, IdentificationKeySettings
from proinfer.logging import get_logger
from proinfer.report import ReportPeptide, ReportProtein, ReportPSM, ReportPSMSet
from proinfer.scoring import Scoring

from .memo import ProteinMap

logger = get_logger(__file__)

GroupPeptides = dict[int, list[ReportPeptide]]


def check_subset_graph(sub_groups: Optional[Mapping[int, Iterable[int]]]) -> None:
    """Raise :class:`MalformedGroupGraphError` if the subset map has a cycle."""

    if not sub_groups:
        return

    done: set[int] = set()
    for start in sorted(sub_groups):
        if start in done:
            continue
        path = [start]
        on_path = {start}
        stack = [iter(sorted(sub_groups.get(start, ())))]
        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                finished = path.pop()
                on_path.discard(finished)
                done.add(finished)
                continue
            if child in on_path:
                cycle = path[path.index(child):] + [child]
                raise MalformedGroupGraphError(
                    "cycle in subset graph: " + " -> ".join(str(g) for g in cycle)
                )
            if child in done:
                continue
            path.append(child)
            on_path.add(child)
            stack.append(iter(sorted(sub_groups.get(child, ()))))


class ProteinInference:
    """Base class of protein inferences.

    Holds the filters, the scoring and the thread allowance shared by all
    inference methods, and implements the two assembly passes: building the
    filtered report peptides of every group and building report proteins from
    seed groups.
    """

    name = "Protein inference"
    short_name = "base"

    def __init__(
        self,
        filters: Optional[Iterable[Filter]] = None,
        scoring: Optional[Scoring] = None,
        allowed_threads: int = 0,
    ) -> None:
        self._filters: list[Filter] = list(filters or ())
        self.scoring = scoring
        self.allowed_threads = allowed_threads
        self._progress = 0.0
        self._progress_lock = Lock()

    @property
    def filters(self) -> list[Filter]:
        return list(self._filters)

    def add_filter(self, filter: Filter) -> None:
        logger.info("Adding filter %s", filter_to_string(filter))
        self._filters.append(filter)

    def add_filter_from_string(self, text: str) -> bool:
        """Parse and add one filter definition; failures are logged."""

        try:
            filter = parse_filter_expression(text)
        except FilterError as exc:
            logger.error("Could not add filter '%s': %s", text, exc.message)
            return False
        self.add_filter(filter)
        return True

    def add_filters_from_strings(self, texts: Iterable[str]) -> FilterParseResult:
        """Add every parseable definition and report all failures at once."""

        result = FilterParseResult()
        for text in texts:
            try:
                filter = parse_filter_expression(text)
            except FilterError as exc:
                logger.error("Could not add filter '%s': %s", text, exc.message)
                result.errors[text] = exc.message
                continue
            self.add_filter(filter)
            result.filters.append(filter)
        return result

    def remove_filter(self, index: int) -> Optional[Filter]:
        if 0 <= index < len(self._filters):
            removed = self._filters.pop(index)
            logger.info("Removed filter %s", filter_to_string(removed))
            return removed
        return None

    def clear_filters(self) -> None:
        self._filters.clear()

    def filters_of_level(self, level: FilterLevel) -> list[Filter]:
        return [f for f in self._filters if f.level is level]

    @staticmethod
    def available_filters(level: FilterLevel) -> list[str]:
        """Short names (and score filter prefixes) usable on ``level``."""

        names = [f.short_name for f in registered_filters(level)]
        names.extend(family.prefix for family in ScoreFilterFamily if family.level is level)
        return names

    @property
    def available_psm_filters(self) -> list[str]:
        return self.available_filters(FilterLevel.psm)

    @property
    def available_peptide_filters(self) -> list[str]:
        return self.available_filters(FilterLevel.peptide)

    @property
    def available_protein_filters(self) -> list[str]:
        return self.available_filters(FilterLevel.protein)

    @property
    def thread_count(self) -> int:
        """Number of worker threads; a non-positive allowance means all CPUs."""

        if self.allowed_threads and self.allowed_threads > 0:
            return self.allowed_threads
        return os.cpu_count() or 1

    @property
    def progress_value(self) -> float:
        with self._progress_lock:
            return self._progress

    def _set_progress(self, value: float) -> None:
        with self._progress_lock:
            self._progress = max(0.0, min(100.0, value))

    def _advance_progress(self, step: float) -> None:
        with self._progress_lock:
            self._progress = max(0.0, min(100.0, self._progress + step))

    @staticmethod
    def _resolve_report_psm(psm, key: str, report_psm_set_map: Mapping[str, ReportPSMSet]) -> ReportPSM:
        canonical = report_psm_set_map.get(key)
        if canonical is None:
            raise MissingPSMSetError(f"no PSM set found for {key}")
        report_psm = canonical.find_psm(psm)
        if report_psm is None:
            raise MissingReportPSMError(f"no report PSM found for {key}")
        return report_psm

    def _group_report_peptides(
        self,
        group: Group,
        report_psm_set_map: Mapping[str, ReportPSMSet],
        consider_modifications: bool,
        key_settings: Optional[IdentificationKeySettings],
    ) -> list[ReportPeptide]:
        """Report peptides of one group whose PSM sets survive the filters.

        Reads only shared state, so groups can be processed in parallel.
        """

        group_peptides: dict[str, ReportPeptide] = {}

        for peptide in group.peptides.values():
            for psm in peptide.spectra:
                key = psm.get_identification_key(key_settings)
                try:
                    report_psm = self._resolve_report_psm(psm, key, report_psm_set_map)
                except ReconciliationError as exc:
                    logger.warning("%s, skipping PSM %s", exc.message, psm.id)
                    continue

                if not satisfies_filter_list(report_psm, 0, self._filters):
                    continue

                string_id = ReportPeptide.create_string_id(report_psm, consider_modifications)
                report_peptide = group_peptides.get(string_id)
                if report_peptide is None:
                    report_peptide = ReportPeptide(report_psm.sequence, string_id, peptide)
                    group_peptides[string_id] = report_peptide

                psm_set = report_peptide.get_psm_set(key)
                if psm_set is None:
                    psm_set = ReportPSMSet(key)
                    report_peptide.add_psm_set(psm_set)
                psm_set.add_report_psm(report_psm)

        kept: list[ReportPeptide] = []
        for report_peptide in group_peptides.values():
            for psm_set in report_peptide.psm_sets:
                canonical = report_psm_set_map[psm_set.key]
                if canonical.fdr_score is not None and psm_set.has_same_psms(canonical):
                    psm_set.copy_fdr_data(canonical)
                if not satisfies_filter_list(psm_set, 0, self._filters):
                    report_peptide.remove_psm_set(psm_set.key)

            if report_peptide.nr_psms > 0:
                kept.append(report_peptide)
        return kept

    def _peptide_from_map(
        self, peptide: ReportPeptide, report_peptide_map: dict[str, ReportPeptide]
    ) -> ReportPeptide:
        """Return the shared instance for ``peptide``; the first one seen is kept."""

        mapped = report_peptide_map.setdefault(peptide.string_id, peptide)
        if mapped is peptide:
            return peptide
        if mapped.peptide == peptide.peptide and mapped.psm_signature() == peptide.psm_signature():
            return mapped
        return peptide

    def build_filtered_peptides(
        self,
        group_graph: Mapping[int, Group],
        report_psm_set_map: Mapping[str, ReportPSMSet],
        consider_modifications: bool = False,
        key_settings: Optional[IdentificationKeySettings] = None,
        report_peptide_map: Optional[dict[str, ReportPeptide]] = None,
    ) -> GroupPeptides:
        """Map every group id to its report peptides satisfying the filters.

        Groups are processed in the worker pool; merging into
        ``report_peptide_map`` happens afterwards in ascending group id order,
        so the instance kept for a string id does not depend on scheduling.
        Groups without surviving peptides are left out of the result.
        """

        if report_peptide_map is None:
            report_peptide_map = {}

        group_ids = sorted(gid for gid, group in group_graph.items() if group.peptides)

        def work(group_id: int) -> list[ReportPeptide]:
            return self._group_report_peptides(
                group_graph[group_id], report_psm_set_map, consider_modifications, key_settings
            )

        with ThreadPoolExecutor(max_workers=self.thread_count) as pool:
            candidates = list(pool.map(work, group_ids))

        peptides_map: GroupPeptides = {}
        for group_id, group_peptides in zip(group_ids, candidates):
            keep = []
            for candidate in group_peptides:
                report_peptide = self._peptide_from_map(candidate, report_peptide_map)
                if satisfies_filter_list(report_peptide, 0, self._filters):
                    keep.append(report_peptide)
            if keep:
                peptides_map[group_id] = keep

        logger.debug(
            "Built report peptides for %d of %d groups", len(peptides_map), len(group_graph)
        )
        return peptides_map

    @staticmethod
    def sort_peptides_in_map(peptides: Iterable[ReportPeptide]) -> dict[str, ReportPeptide]:
        """Index peptides by string id; a later duplicate replaces an earlier one."""

        peptide_map: dict[str, ReportPeptide] = {}
        for peptide in peptides:
            if peptide.string_id in peptide_map:
                logger.warning("Added a peptide with identical ID into the map: %s", peptide.string_id)
            peptide_map[peptide.string_id] = peptide
        return peptide_map

    @staticmethod
    def group_has_direct_peptides(group: Group, report_peptides: GroupPeptides) -> bool:
        return bool(report_peptides.get(group.id))

    def group_has_peptides(
        self, group: Group, group_graph: GroupGraph, report_peptides: GroupPeptides
    ) -> bool:
        """Whether the group or any of its descendants has report peptides."""

        if self.group_has_direct_peptides(group, report_peptides):
            return True
        return any(
            self.group_has_direct_peptides(child, report_peptides)
            for child in group_graph.all_peptide_children(group.id).values()
        )

    def build_protein(
        self,
        group_id: int,
        proteins: dict[int, ReportProtein],
        report_peptides: GroupPeptides,
        group_graph: GroupGraph,
        same_sets: Optional[Mapping[int, Iterable[int]]] = None,
        sub_groups: Optional[Mapping[int, Iterable[int]]] = None,
        _path: frozenset[int] = frozenset(),
    ) -> ReportProtein:
        """Build the report protein seeded by ``group_id``, or return the memoised one.

        Subset proteins are built recursively and only linked. A subset map
        leading back to a group already on the current path raises
        :class:`MalformedGroupGraphError`.
        """

        if group_id in _path:
            raise MalformedGroupGraphError(
                f"group {group_id} is a subset of itself: "
                + " -> ".join(str(g) for g in sorted(_path))
            )
        path = _path | {group_id}

        def build() -> ReportProtein:
            return self._assemble_protein(
                group_id, proteins, report_peptides, group_graph, same_sets, sub_groups, path
            )

        if isinstance(proteins, ProteinMap):
            return proteins.get_or_build(group_id, build)
        if group_id in proteins:
            return proteins[group_id]
        protein = build()
        proteins[group_id] = protein
        return protein

    def _assemble_protein(
        self,
        group_id: int,
        proteins: dict[int, ReportProtein],
        report_peptides: GroupPeptides,
        group_graph: GroupGraph,
        same_sets: Optional[Mapping[int, Iterable[int]]],
        sub_groups: Optional[Mapping[int, Iterable[int]]],
        path: frozenset[int],
    ) -> ReportProtein:
        if group_id not in group_graph:
            raise MalformedGroupGraphError(f"group {group_id} is not in the group graph")

        protein = ReportProtein(group_id)

        for peptide in report_peptides.get(group_id, ()):
            protein.add_peptide(peptide)
        for child_id in group_graph.all_peptide_children(group_id):
            for peptide in report_peptides.get(child_id, ()):
                protein.add_peptide(peptide)

        for accession in group_graph[group_id].accessions.values():
            protein.add_accession(accession)
        if same_sets:
            for same_id in sorted(same_sets.get(group_id, ())):
                if same_id == group_id:
                    continue
                if same_id not in group_graph:
                    raise MalformedGroupGraphError(f"same-set group {same_id} is not in the group graph")
                for accession in group_graph[same_id].accessions.values():
                    protein.add_accession(accession)

        if sub_groups:
            for sub_id in sorted(sub_groups.get(group_id, ())):
                sub_protein = self.build_protein(
                    sub_id, proteins, report_peptides, group_graph, same_sets, sub_groups, path
                )
                protein.add_to_subsets(sub_protein)

        if self.scoring is not None:
            protein.score = self.scoring.calculate_protein_score(protein)

        return protein
