"""Identity records of the intermediate structure.

Accessions, peptides, input files and PSMs are plain records owned by an
:class:`~proinfer.intermediate.registry.IdentityRegistry`. Equality and
hashing use the registry id only, so records can be put into sets and used
as dict keys while a PSM list is still being attached to a peptide.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Modification:
    """A modification at a position of a peptide sequence.

    Position ``0`` is the N-terminus and ``len(sequence) + 1`` the C-terminus.
    """

    position: int
    mass: float
    residue: str | None = None
    description: str | None = None


@dataclass(eq=False)
class Accession:
    id: int
    accession: str
    sequence: str | None = None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Accession) and other.id == self.id

    def __hash__(self) -> int:
        return hash(("accession", self.id))


@dataclass(eq=False)
class InputFile:
    id: int
    name: str
    file_name: str | None = None
    format: str | None = None

    def __eq__(self, other: object) -> bool:
        return isinstance(other, InputFile) and other.id == self.id

    def __hash__(self) -> int:
        return hash(("input_file", self.id))


@dataclass(eq=False)
class PeptideSpectrumMatch:
    id: int
    charge: int | None
    mass_to_charge: float
    delta_mass: float
    retention_time: float | None
    sequence: str
    missed_cleavages: int
    source_id: str | None
    spectrum_title: str | None
    file: InputFile
    modifications: tuple[Modification, ...] = ()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PeptideSpectrumMatch) and other.id == self.id

    def __hash__(self) -> int:
        return hash(("psm", self.id))

    @property
    def delta_ppm(self) -> float:
        theoretical = self.mass_to_charge - self.delta_mass
        if theoretical == 0:
            return 0.0
        return self.delta_mass / theoretical * 1e6

    def get_identification_key(self, settings) -> str:
        from proinfer.intermediate.keys import identification_key

        return identification_key(self, settings)


@dataclass(eq=False)
class Peptide:
    id: int
    sequence: str
    spectra: list[PeptideSpectrumMatch] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Peptide) and other.id == self.id

    def __hash__(self) -> int:
        return hash(("peptide", self.id))
