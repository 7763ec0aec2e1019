"""JSON input of an inference run: group graph, set relations and PSM evidence.

The clustering stage and the FDR estimation are external to proinfer. Their
results are handed over as one JSON document::

    {
      "groups": [
        {"id": 1, "tree_id": 1, "peptides": ["PEPTIDEA"],
         "accessions": ["P1", "P2"], "children": []}
      ],
      "same_sets": {"1": [1]},
      "subsets": {},
      "psms": {"1": {"scores": {"mascot_score": 42.0}, "is_decoy": false}},
      "psm_sets": [{"psms": [1], "fdr": 0.0, "fdr_score": 0.0,
                    "q_value": 0.0, "rank": 1, "is_fdr_good": true}]
    }

Peptides and accessions are referenced by their natural keys and resolved
against an :class:`IdentityRegistry`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from proinfer.errors import UnknownEntityError
from proinfer.intermediate import Group, GroupGraph, IdentificationKeySettings, IdentityRegistry
from proinfer.logging import get_logger
from proinfer.report import ReportPSM, ReportPSMSet

logger = get_logger(__file__)


class GroupEntry(BaseModel):
    id: int
    tree_id: int = 0
    peptides: list[str] = Field(default_factory=list)
    accessions: list[str] = Field(default_factory=list)
    children: list[int] = Field(default_factory=list)


class PSMEntry(BaseModel):
    scores: dict[str, float] = Field(default_factory=dict)
    ranks: dict[str, int] = Field(default_factory=dict)
    is_decoy: bool = False
    fdr: Optional[float] = None
    fdr_score: Optional[float] = None
    q_value: Optional[float] = None
    rank: Optional[int] = None
    is_fdr_good: bool = False


class PSMSetEntry(BaseModel):
    psms: list[int] = Field(min_length=1)
    fdr: Optional[float] = None
    fdr_score: Optional[float] = None
    q_value: Optional[float] = None
    rank: Optional[int] = None
    is_fdr_good: bool = False


class InferenceInputFile(BaseModel):
    groups: list[GroupEntry] = Field(default_factory=list)
    same_sets: dict[int, list[int]] = Field(default_factory=dict)
    subsets: dict[int, list[int]] = Field(default_factory=dict)
    psms: dict[int, PSMEntry] = Field(default_factory=dict)
    psm_sets: list[PSMSetEntry] = Field(default_factory=list)


@dataclass
class InferenceInput:
    group_graph: GroupGraph
    report_psm_sets: dict[str, ReportPSMSet]
    same_sets: dict[int, set[int]] = field(default_factory=dict)
    sub_groups: dict[int, set[int]] = field(default_factory=dict)


def build_group_graph(entries: list[GroupEntry], registry: IdentityRegistry) -> GroupGraph:
    """Resolve group entries against ``registry``.

    Raises
    ------
    UnknownEntityError
        If a peptide sequence, an accession or a child group is unknown.
    """

    graph = GroupGraph(Group(entry.id, entry.tree_id) for entry in entries)
    for entry in entries:
        group = graph[entry.id]
        for sequence in entry.peptides:
            peptide = registry.find_peptide(sequence)
            if peptide is None:
                raise UnknownEntityError(f"group {entry.id}: unknown peptide {sequence}")
            group.add_peptide(peptide)
        for name in entry.accessions:
            accession = registry.find_accession(name)
            if accession is None:
                raise UnknownEntityError(f"group {entry.id}: unknown accession {name}")
            group.add_accession(accession)
    for entry in entries:
        for child_id in entry.children:
            graph.link(entry.id, child_id)
    return graph


def build_report_psm_sets(
    registry: IdentityRegistry,
    psm_entries: Optional[dict[int, PSMEntry]] = None,
    set_entries: Optional[list[PSMSetEntry]] = None,
    key_settings: Optional[IdentificationKeySettings] = None,
) -> dict[str, ReportPSMSet]:
    """Wrap every registry PSM and merge the wrappers by identification key.

    Set entries carry the FDR values of a set; they are matched to the set
    holding their first PSM.
    """

    psm_entries = psm_entries or {}
    sets: dict[str, ReportPSMSet] = {}
    set_of_psm: dict[int, ReportPSMSet] = {}

    for psm in registry.psms():
        info = psm_entries.get(psm.id, PSMEntry())
        accessions = registry.connections.accessions_of_peptide(psm.sequence) or set()
        report_psm = ReportPSM(
            spectrum=psm,
            accessions=sorted(accessions, key=lambda acc: acc.id),
            scores=dict(info.scores),
            identification_ranks=dict(info.ranks),
            is_decoy=info.is_decoy,
            fdr=info.fdr,
            fdr_score=info.fdr_score,
            q_value=info.q_value,
            rank=info.rank,
            is_fdr_good=info.is_fdr_good,
        )
        key = psm.get_identification_key(key_settings)
        psm_set = sets.get(key)
        if psm_set is None:
            psm_set = ReportPSMSet(key)
            sets[key] = psm_set
        psm_set.add_report_psm(report_psm)
        set_of_psm[psm.id] = psm_set

    for entry in set_entries or ():
        psm_set = set_of_psm.get(entry.psms[0])
        if psm_set is None:
            logger.warning("PSM set entry refers to unknown PSM %d", entry.psms[0])
            continue
        if psm_set.psm_ids != frozenset(entry.psms):
            logger.warning(
                "PSM set entry %s does not match set %s", sorted(entry.psms), sorted(psm_set.psm_ids)
            )
        psm_set.fdr = entry.fdr
        psm_set.fdr_score = entry.fdr_score
        psm_set.q_value = entry.q_value
        psm_set.rank = entry.rank
        psm_set.is_fdr_good = entry.is_fdr_good

    return sets


def load_inference_input(
    path: str | Path,
    registry: IdentityRegistry,
    key_settings: Optional[IdentificationKeySettings] = None,
) -> InferenceInput:
    """Read and resolve an inference input document.

    Raises
    ------
    ValueError
        If the file is not valid JSON or does not match the expected layout.
    UnknownEntityError
        If the document refers to records missing from ``registry``.
    """

    try:
        data = InferenceInputFile.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))
    except (json.JSONDecodeError, ValidationError) as exc:
        raise ValueError(f"invalid inference input {path}: {exc}") from exc

    graph = build_group_graph(data.groups, registry)
    psm_sets = build_report_psm_sets(registry, data.psms, data.psm_sets, key_settings)
    logger.info("loaded %d groups and %d PSM sets from %s", len(graph), len(psm_sets), path)
    return InferenceInput(
        group_graph=graph,
        report_psm_sets=psm_sets,
        same_sets={gid: set(ids) for gid, ids in data.same_sets.items()},
        sub_groups={gid: set(ids) for gid, ids in data.subsets.items()},
    )
