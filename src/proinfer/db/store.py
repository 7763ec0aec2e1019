"""Saving and restoring the identity registry and group graphs."""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from proinfer.errors import UnknownEntityError
from proinfer.intermediate import (
    Accession,
    Group,
    GroupGraph,
    IdentityRegistry,
    InputFile,
    Modification,
    Peptide,
    PeptideSpectrumMatch,
)
from proinfer.logging import get_logger

from .models import (
    AccessionRecord,
    GroupRecord,
    InputFileRecord,
    PeptideRecord,
    PSMRecord,
    accession_peptide,
    group_accession,
    group_child,
    group_peptide,
)

logger = get_logger(__file__)


def encode_modifications(modifications: Iterable[Modification]) -> str | None:
    mods = [asdict(mod) for mod in modifications]
    return json.dumps(mods) if mods else None


def decode_modifications(raw: str | None) -> tuple[Modification, ...]:
    if not raw:
        return ()
    return tuple(Modification(**entry) for entry in json.loads(raw))


def _insert_links(session: Session, table, rows: list[dict]) -> None:
    if rows:
        session.execute(sqlite_insert(table).on_conflict_do_nothing(), rows)


def save_registry(session: Session, registry: IdentityRegistry) -> None:
    """Write all records and connections of ``registry``.

    Saving the same registry again updates the rows in place.
    """

    for input_file in registry.input_files():
        session.merge(
            InputFileRecord(
                id=input_file.id,
                name=input_file.name,
                file_name=input_file.file_name,
                format=input_file.format,
            )
        )
    for acc in registry.accessions():
        session.merge(AccessionRecord(id=acc.id, accession=acc.accession, sequence=acc.sequence))
    for peptide in registry.peptides():
        session.merge(PeptideRecord(id=peptide.id, sequence=peptide.sequence))
    session.flush()

    for peptide in registry.peptides():
        for psm in peptide.spectra:
            session.merge(
                PSMRecord(
                    id=psm.id,
                    peptide_id=peptide.id,
                    input_file_id=psm.file.id,
                    charge=psm.charge,
                    mass_to_charge=psm.mass_to_charge,
                    delta_mass=psm.delta_mass,
                    retention_time=psm.retention_time,
                    sequence=psm.sequence,
                    missed_cleavages=psm.missed_cleavages,
                    source_id=psm.source_id,
                    spectrum_title=psm.spectrum_title,
                    modifications=encode_modifications(psm.modifications),
                )
            )

    _insert_links(
        session,
        accession_peptide,
        [{"accession_id": a, "peptide_id": p} for a, p in registry.connections.edges()],
    )
    session.flush()
    logger.info(
        "saved %d accessions, %d peptides, %d PSMs",
        registry.nr_accessions,
        registry.nr_peptides,
        registry.nr_psms,
    )


def load_registry(session: Session) -> IdentityRegistry:
    """Rebuild an :class:`IdentityRegistry` with its connection map.

    The returned registry is not sealed; new records continue after the
    largest stored ids.
    """

    registry = IdentityRegistry()

    for rec in session.scalars(select(InputFileRecord).order_by(InputFileRecord.id)):
        registry._restore_input_file(InputFile(rec.id, rec.name, rec.file_name, rec.format))
    for rec in session.scalars(select(AccessionRecord).order_by(AccessionRecord.id)):
        registry._restore_accession(Accession(rec.id, rec.accession, rec.sequence))
    for rec in session.scalars(select(PeptideRecord).order_by(PeptideRecord.id)):
        registry._restore_peptide(Peptide(rec.id, rec.sequence))

    for rec in session.scalars(select(PSMRecord).order_by(PSMRecord.id)):
        input_file = registry.get_input_file(rec.input_file_id)
        registry._restore_psm(
            PeptideSpectrumMatch(
                id=rec.id,
                charge=rec.charge,
                mass_to_charge=rec.mass_to_charge,
                delta_mass=rec.delta_mass,
                retention_time=rec.retention_time,
                sequence=rec.sequence,
                missed_cleavages=rec.missed_cleavages,
                source_id=rec.source_id,
                spectrum_title=rec.spectrum_title,
                file=input_file,
                modifications=decode_modifications(rec.modifications),
            )
        )
    registry._reset_counters()

    edges = session.execute(
        select(accession_peptide.c.accession_id, accession_peptide.c.peptide_id).order_by(
            accession_peptide.c.accession_id, accession_peptide.c.peptide_id
        )
    )
    for accession_id, peptide_id in edges:
        registry.connections.link(accession_id, peptide_id)

    logger.info(
        "loaded %d accessions, %d peptides, %d PSMs, %d connections",
        registry.nr_accessions,
        registry.nr_peptides,
        registry.nr_psms,
        registry.connections.nr_edges,
    )
    return registry


def save_group_graph(session: Session, group_graph: GroupGraph) -> None:
    for group in group_graph.values():
        session.merge(GroupRecord(id=group.id, tree_id=group.tree_id))
    session.flush()

    _insert_links(
        session,
        group_peptide,
        [{"group_id": g.id, "peptide_id": pid} for g in group_graph.values() for pid in g.peptides],
    )
    _insert_links(
        session,
        group_accession,
        [{"group_id": g.id, "accession_id": aid} for g in group_graph.values() for aid in g.accessions],
    )
    _insert_links(
        session,
        group_child,
        [{"parent_id": g.id, "child_id": cid} for g in group_graph.values() for cid in g.children],
    )
    session.flush()
    logger.info("saved %d groups", len(group_graph))


def load_group_graph(session: Session, registry: IdentityRegistry) -> GroupGraph:
    """Restore the stored group graph against the records of ``registry``.

    Raises
    ------
    UnknownEntityError
        If a group refers to a peptide or accession missing from ``registry``.
    """

    graph = GroupGraph()
    for rec in session.scalars(select(GroupRecord).order_by(GroupRecord.id)):
        graph.add(Group(rec.id, rec.tree_id))

    for group_id, peptide_id in session.execute(select(group_peptide.c.group_id, group_peptide.c.peptide_id)):
        peptide = registry.get_peptide(peptide_id)
        if peptide is None:
            raise UnknownEntityError(f"group {group_id} refers to unknown peptide {peptide_id}")
        graph[group_id].add_peptide(peptide)

    for group_id, accession_id in session.execute(
        select(group_accession.c.group_id, group_accession.c.accession_id)
    ):
        accession = registry.get_accession(accession_id)
        if accession is None:
            raise UnknownEntityError(f"group {group_id} refers to unknown accession {accession_id}")
        graph[group_id].add_accession(accession)

    for parent_id, child_id in session.execute(select(group_child.c.parent_id, group_child.c.child_id)):
        graph.link(parent_id, child_id)

    return graph
