"""Protein inference over precomputed same-set and subset relations."""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Iterable, Mapping, Optional

from proinfer.filter import apply_filters
from proinfer.intermediate import GroupGraph, IdentificationKeySettings, IdentityRegistry
from proinfer.logging import get_logger
from proinfer.report import ReportPeptide, ReportProtein, ReportPSMSet

from .base import GroupPeptides, ProteinInference, check_subset_graph
from .memo import ProteinMap

logger = get_logger(__file__)


class PrecomputedSetInference(ProteinInference):
    """Reports one protein per same-set class of groups that is no subset.

    The same-set and subset maps come from the clustering stage; this class
    only assembles, scores, filters and sorts the proteins.
    """

    name = "Precomputed set inference"
    short_name = "precomputed_sets"

    def select_seed_groups(
        self,
        group_graph: GroupGraph,
        report_peptides: GroupPeptides,
        same_sets: Optional[Mapping[int, Iterable[int]]] = None,
        sub_groups: Optional[Mapping[int, Iterable[int]]] = None,
    ) -> list[int]:
        """Group ids that seed a reported protein, in ascending order.

        A seed has accessions and peptide evidence, is not a subset of another
        group with evidence, and has the smallest id of its same-set class.
        """

        same_sets = same_sets or {}
        sub_groups = sub_groups or {}

        with_evidence = {
            gid
            for gid, group in group_graph.items()
            if self.group_has_peptides(group, group_graph, report_peptides)
        }
        subordinate: set[int] = set()
        for parent_id, children in sub_groups.items():
            if parent_id in with_evidence:
                subordinate.update(child for child in children if child != parent_id)

        seeds = []
        for gid in sorted(with_evidence):
            if not group_graph[gid].accessions or gid in subordinate:
                continue
            same = set(same_sets.get(gid, ())) | {gid}
            if min(same) != gid:
                continue
            seeds.append(gid)
        return seeds

    def sort_proteins(self, proteins: Iterable[ReportProtein]) -> list[ReportProtein]:
        """Best score first (by the scoring's orientation), proteins without score last."""

        higher_better = self.scoring.higher_score_better if self.scoring is not None else True

        def sort_key(protein: ReportProtein):
            if math.isnan(protein.score):
                return (1, 0.0, protein.id)
            return (0, -protein.score if higher_better else protein.score, protein.id)

        return sorted(proteins, key=sort_key)

    def calculate_inference(
        self,
        group_graph: GroupGraph,
        report_psm_set_map: Mapping[str, ReportPSMSet],
        consider_modifications: bool = False,
        key_settings: Optional[IdentificationKeySettings] = None,
        report_peptide_map: Optional[dict[str, ReportPeptide]] = None,
        same_sets: Optional[Mapping[int, Iterable[int]]] = None,
        sub_groups: Optional[Mapping[int, Iterable[int]]] = None,
        registry: Optional[IdentityRegistry] = None,
    ) -> list[ReportProtein]:
        """Run the inference and return the filtered, sorted report proteins.

        Raises
        ------
        MalformedGroupGraphError
            If the subset map contains a cycle or refers to unknown groups.
        """

        self._set_progress(0)
        if registry is not None and not registry.sealed:
            registry.seal()

        check_subset_graph(sub_groups)
        logger.info(
            "Starting %s on %d groups with %d threads",
            self.name,
            len(group_graph),
            self.thread_count,
        )

        report_peptides = self.build_filtered_peptides(
            group_graph,
            report_psm_set_map,
            consider_modifications,
            key_settings,
            report_peptide_map,
        )
        self._set_progress(40)

        seeds = self.select_seed_groups(group_graph, report_peptides, same_sets, sub_groups)
        logger.debug("%d seed groups for report proteins", len(seeds))
        self._set_progress(50)

        proteins = ProteinMap()
        step = 40.0 / len(seeds) if seeds else 0.0
        with ThreadPoolExecutor(max_workers=self.thread_count) as pool:
            futures = [
                pool.submit(
                    self.build_protein,
                    seed,
                    proteins,
                    report_peptides,
                    group_graph,
                    same_sets,
                    sub_groups,
                )
                for seed in seeds
            ]
            for future in as_completed(futures):
                future.result()
                self._advance_progress(step)

        reported = apply_filters([proteins[seed] for seed in seeds], self._filters)
        reported = self.sort_proteins(reported)

        self._set_progress(100)
        logger.info(
            "%s finished: %d of %d proteins passed the filters",
            self.name,
            len(reported),
            len(seeds),
        )
        return reported
