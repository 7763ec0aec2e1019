"""Group graph consumed from the external clustering stage.

Groups are stored in an arena indexed by group id; a group refers to its
children and parents by id only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Mapping

from proinfer.errors import UnknownEntityError

from .models import Accession, Peptide


@dataclass(eq=False)
class Group:
    """Accessions sharing identical peptide evidence.

    ``peptides`` holds only the peptides owned directly by this group; the
    peptides of every descendant group also count towards it.
    """

    id: int
    tree_id: int = 0
    peptides: dict[int, Peptide] = field(default_factory=dict)
    accessions: dict[int, Accession] = field(default_factory=dict)
    children: set[int] = field(default_factory=set)
    parents: set[int] = field(default_factory=set)

    def add_peptide(self, peptide: Peptide) -> None:
        self.peptides[peptide.id] = peptide

    def add_accession(self, accession: Accession) -> None:
        self.accessions[accession.id] = accession


class GroupGraph(Mapping[int, Group]):
    """Arena of groups keyed by id."""

    def __init__(self, groups: Iterable[Group] = ()) -> None:
        self._groups: dict[int, Group] = {}
        for group in groups:
            self.add(group)

    def __getitem__(self, group_id: int) -> Group:
        return self._groups[group_id]

    def __iter__(self) -> Iterator[int]:
        return iter(self._groups)

    def __len__(self) -> int:
        return len(self._groups)

    def add(self, group: Group) -> Group:
        self._groups[group.id] = group
        return group

    def new_group(self, group_id: int, tree_id: int = 0) -> Group:
        return self.add(Group(group_id, tree_id))

    def link(self, parent_id: int, child_id: int) -> None:
        """Make ``child_id`` a child of ``parent_id``."""

        for group_id in (parent_id, child_id):
            if group_id not in self._groups:
                raise UnknownEntityError(f"group {group_id} is not in the group graph")
        self._groups[parent_id].children.add(child_id)
        self._groups[child_id].parents.add(parent_id)

    def all_peptide_children(self, group_id: int) -> dict[int, Group]:
        """All groups below ``group_id``, each reported once.

        The traversal keeps a visited set, so shared descendants and a
        malformed child relation cannot make it loop.
        """

        found: dict[int, Group] = {}
        stack = list(self._groups[group_id].children)
        while stack:
            child_id = stack.pop()
            if child_id in found or child_id == group_id:
                continue
            child = self._groups[child_id]
            found[child_id] = child
            stack.extend(child.children)
        return dict(sorted(found.items()))

    def all_peptides(self, group_id: int) -> dict[int, Peptide]:
        """Direct peptides of the group together with all descendants' peptides."""

        peptides = dict(self._groups[group_id].peptides)
        for child in self.all_peptide_children(group_id).values():
            peptides.update(child.peptides)
        return peptides
