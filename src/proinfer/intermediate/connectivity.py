"""Bipartite accession-peptide connectivity used to seed protein grouping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from proinfer.errors import RegistrySealedError, UnknownEntityError
from proinfer.logging import get_logger

from .models import Accession, Peptide

if TYPE_CHECKING:
    from .registry import IdentityRegistry

logger = get_logger(__file__)


class ConnectionMap:
    """Accession id to peptide ids, and the inverse.

    Both directions are always updated together: for every edge ``(a, p)``,
    ``p in peptides_of(a)`` holds exactly when ``a in accessions_of(p)``.
    """

    def __init__(self, registry: "IdentityRegistry") -> None:
        self._registry = registry
        self._acc_to_peps: dict[int, set[int]] = {}
        self._pep_to_accs: dict[int, set[int]] = {}

    def link(self, accession_id: int, peptide_id: int) -> None:
        """Connect an accession and a peptide.

        Raises
        ------
        UnknownEntityError
            If either id is not registered. Neither direction is touched.
        """

        if self._registry.sealed:
            raise RegistrySealedError()
        if not self._registry.has_accession(accession_id):
            logger.error("accession %s was not inserted into the registry", accession_id)
            raise UnknownEntityError(f"accession id {accession_id} is not registered")
        if not self._registry.has_peptide(peptide_id):
            logger.error("peptide %s was not inserted into the registry", peptide_id)
            raise UnknownEntityError(f"peptide id {peptide_id} is not registered")

        self._acc_to_peps.setdefault(accession_id, set()).add(peptide_id)
        self._pep_to_accs.setdefault(peptide_id, set()).add(accession_id)

    def connect(self, accession: Accession, peptide: Peptide) -> None:
        self.link(accession.id, peptide.id)

    def peptides_of(self, accession_id: int) -> frozenset[int] | None:
        peps = self._acc_to_peps.get(accession_id)
        return None if peps is None else frozenset(peps)

    def accessions_of(self, peptide_id: int) -> frozenset[int] | None:
        accs = self._pep_to_accs.get(peptide_id)
        return None if accs is None else frozenset(accs)

    def peptides_of_accession(self, accession: str) -> set[Peptide] | None:
        acc = self._registry.find_accession(accession)
        if acc is None or acc.id not in self._acc_to_peps:
            return None
        return {self._registry.get_peptide(pep_id) for pep_id in self._acc_to_peps[acc.id]}

    def accessions_of_peptide(self, sequence: str) -> set[Accession] | None:
        peptide = self._registry.find_peptide(sequence)
        if peptide is None or peptide.id not in self._pep_to_accs:
            return None
        return {self._registry.get_accession(acc_id) for acc_id in self._pep_to_accs[peptide.id]}

    def edges(self):
        for acc_id, pep_ids in self._acc_to_peps.items():
            for pep_id in pep_ids:
                yield acc_id, pep_id

    @property
    def nr_edges(self) -> int:
        return sum(len(peps) for peps in self._acc_to_peps.values())

    def clear(self) -> None:
        """Drop all edges, e.g. between two clustering passes."""

        if self._registry.sealed:
            raise RegistrySealedError()
        self._acc_to_peps.clear()
        self._pep_to_accs.clear()

    def clusters(self) -> list[tuple[frozenset[int], frozenset[int]]]:
        """Connected components as ``(accession ids, peptide ids)`` pairs.

        Components are ordered by their smallest accession id.
        """

        seen_accs: set[int] = set()
        clusters = []
        for start in sorted(self._acc_to_peps):
            if start in seen_accs:
                continue
            accs: set[int] = set()
            peps: set[int] = set()
            stack = [start]
            while stack:
                acc_id = stack.pop()
                if acc_id in accs:
                    continue
                accs.add(acc_id)
                for pep_id in self._acc_to_peps.get(acc_id, ()):
                    if pep_id in peps:
                        continue
                    peps.add(pep_id)
                    stack.extend(self._pep_to_accs.get(pep_id, ()))
            seen_accs |= accs
            clusters.append((frozenset(accs), frozenset(peps)))
        return clusters
