"""Identity registry for accessions, peptides, input files and PSMs.

The registry is an explicit context object: parsers register evidence into
it during a single-writer registration phase, which ends with :meth:`seal`.
Report assembly only reads from a sealed registry.
"""

from __future__ import annotations

import itertools
from typing import Iterator

from proinfer.errors import DuplicateIdentityError, RegistrySealedError, UnknownEntityError
from proinfer.logging import get_logger

from .connectivity import ConnectionMap
from .models import Accession, InputFile, Modification, Peptide, PeptideSpectrumMatch

logger = get_logger(__file__)


class IdentityRegistry:
    """Owns creation and lookup of the identity records.

    Every entity kind has its own id counter starting at 1. Ids are never
    reused, and PSM ids are drawn when a PSM is created, so PSMs created but
    not yet committed cannot collide.
    """

    def __init__(self) -> None:
        self._accessions: dict[int, Accession] = {}
        self._accession_ids: dict[str, int] = {}
        self._peptides: dict[int, Peptide] = {}
        self._peptide_ids: dict[str, int] = {}
        self._files: dict[int, InputFile] = {}
        self._file_ids: dict[str, int] = {}
        self._spectra: dict[int, PeptideSpectrumMatch] = {}

        self._next_accession_id = itertools.count(1)
        self._next_peptide_id = itertools.count(1)
        self._next_file_id = itertools.count(1)
        self._next_psm_id = itertools.count(1)

        self._sealed = False
        self.connections = ConnectionMap(self)

    # registration phase

    @property
    def sealed(self) -> bool:
        return self._sealed

    def seal(self) -> None:
        """End the registration phase; the registry is read-only afterwards."""

        if not self._sealed:
            logger.info(
                "sealing registry with %d accessions, %d peptides, %d PSMs",
                self.nr_accessions,
                self.nr_peptides,
                self.nr_psms,
            )
        self._sealed = True

    def _check_writable(self) -> None:
        if self._sealed:
            raise RegistrySealedError()

    def _reset_counters(self) -> None:
        """Continue every id counter after the largest id restored so far."""

        self._next_accession_id = itertools.count(max(self._accessions, default=0) + 1)
        self._next_peptide_id = itertools.count(max(self._peptides, default=0) + 1)
        self._next_file_id = itertools.count(max(self._files, default=0) + 1)
        self._next_psm_id = itertools.count(max(self._spectra, default=0) + 1)

    # accessions

    def register_accession(self, accession: str, sequence: str | None = None) -> Accession:
        """Return the accession for ``accession``, creating it on first sighting."""

        acc_id = self._accession_ids.get(accession)
        if acc_id is not None:
            return self._accessions[acc_id]

        self._check_writable()
        acc = Accession(next(self._next_accession_id), accession, sequence)
        self._accessions[acc.id] = acc
        self._accession_ids[accession] = acc.id
        logger.debug("%d accession %s", acc.id, accession)
        return acc

    def _restore_accession(self, acc: Accession) -> None:
        self._accessions[acc.id] = acc
        self._accession_ids[acc.accession] = acc.id

    def get_accession(self, acc_id: int) -> Accession | None:
        return self._accessions.get(acc_id)

    def find_accession(self, accession: str) -> Accession | None:
        acc_id = self._accession_ids.get(accession)
        return None if acc_id is None else self._accessions[acc_id]

    def has_accession(self, acc_id: int) -> bool:
        return acc_id in self._accessions

    @property
    def nr_accessions(self) -> int:
        return len(self._accessions)

    def accession_ids(self) -> Iterator[int]:
        return iter(self._accessions)

    def accessions(self) -> Iterator[Accession]:
        return iter(self._accessions.values())

    # peptides

    def register_peptide(self, sequence: str) -> Peptide:
        """Return the peptide for ``sequence``, creating it on first sighting."""

        pep_id = self._peptide_ids.get(sequence)
        if pep_id is not None:
            return self._peptides[pep_id]

        self._check_writable()
        peptide = Peptide(next(self._next_peptide_id), sequence)
        self._peptides[peptide.id] = peptide
        self._peptide_ids[sequence] = peptide.id
        return peptide

    def _restore_peptide(self, peptide: Peptide) -> None:
        self._peptides[peptide.id] = peptide
        self._peptide_ids[peptide.sequence] = peptide.id

    def get_peptide(self, pep_id: int) -> Peptide | None:
        return self._peptides.get(pep_id)

    def find_peptide(self, sequence: str) -> Peptide | None:
        pep_id = self._peptide_ids.get(sequence)
        return None if pep_id is None else self._peptides[pep_id]

    def has_peptide(self, pep_id: int) -> bool:
        return pep_id in self._peptides

    @property
    def nr_peptides(self) -> int:
        return len(self._peptides)

    def peptide_ids(self) -> Iterator[int]:
        return iter(self._peptides)

    def peptides(self) -> Iterator[Peptide]:
        return iter(self._peptides.values())

    # input files

    def register_input_file(
        self, name: str, file_name: str | None = None, format: str | None = None
    ) -> InputFile:
        file_id = self._file_ids.get(name)
        if file_id is not None:
            return self._files[file_id]

        self._check_writable()
        input_file = InputFile(next(self._next_file_id), name, file_name, format)
        self._files[input_file.id] = input_file
        self._file_ids[name] = input_file.id
        logger.debug("%d input file %s", input_file.id, name)
        return input_file

    def _restore_input_file(self, input_file: InputFile) -> None:
        self._files[input_file.id] = input_file
        self._file_ids[input_file.name] = input_file.id

    def get_input_file(self, file_id: int) -> InputFile | None:
        return self._files.get(file_id)

    def input_files(self) -> Iterator[InputFile]:
        return iter(self._files.values())

    # PSMs

    def create_psm(
        self,
        charge: int | None,
        mass_to_charge: float,
        delta_mass: float,
        retention_time: float | None,
        sequence: str,
        missed_cleavages: int,
        source_id: str | None,
        spectrum_title: str | None,
        file: InputFile,
        modifications: tuple[Modification, ...] = (),
    ) -> PeptideSpectrumMatch:
        """Create a PSM with the next free id; it still has to be committed."""

        self._check_writable()
        return PeptideSpectrumMatch(
            id=next(self._next_psm_id),
            charge=charge,
            mass_to_charge=mass_to_charge,
            delta_mass=delta_mass,
            retention_time=retention_time,
            sequence=sequence,
            missed_cleavages=missed_cleavages,
            source_id=source_id,
            spectrum_title=spectrum_title,
            file=file,
            modifications=tuple(modifications),
        )

    def commit_psm(self, psm: PeptideSpectrumMatch) -> None:
        """Commit a complete PSM and attach it to its peptide.

        Raises
        ------
        DuplicateIdentityError
            If a PSM with this id was already committed. The registry is left
            unchanged.
        UnknownEntityError
            If the PSM's peptide sequence or input file is not registered.
        """

        self._check_writable()
        if psm.id in self._spectra:
            raise DuplicateIdentityError(
                f"PSM {psm.id} ({psm.sequence}) was already committed"
            )
        peptide = self.find_peptide(psm.sequence)
        if peptide is None:
            raise UnknownEntityError(f"no peptide registered for sequence {psm.sequence}")
        if self._files.get(psm.file.id) is not psm.file:
            raise UnknownEntityError(f"input file {psm.file.name} is not registered")

        self._spectra[psm.id] = psm
        peptide.spectra.append(psm)

    def _restore_psm(self, psm: PeptideSpectrumMatch) -> None:
        self._spectra[psm.id] = psm
        self._peptides[self._peptide_ids[psm.sequence]].spectra.append(psm)

    def get_psm(self, psm_id: int) -> PeptideSpectrumMatch | None:
        return self._spectra.get(psm_id)

    @property
    def nr_psms(self) -> int:
        return len(self._spectra)

    def psm_ids(self) -> Iterator[int]:
        return iter(self._spectra)

    def psms(self) -> Iterator[PeptideSpectrumMatch]:
        return iter(self._spectra.values())
