"""Tables of the identity and connectivity layer."""

from sqlalchemy import Column, Float, ForeignKey, Integer, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, make_timestamp_mixin

InputFileTimestamp = make_timestamp_mixin("file")


accession_peptide = Table(
    "accession_peptide",
    Base.metadata,
    Column("accession_id", ForeignKey("accession.id", ondelete="CASCADE"), primary_key=True),
    Column("peptide_id", ForeignKey("peptide.id", ondelete="CASCADE"), primary_key=True),
)


class InputFileRecord(InputFileTimestamp, Base):
    __tablename__ = "input_file"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    file_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    format: Mapped[str | None] = mapped_column(Text, nullable=True)

    psms: Mapped[list["PSMRecord"]] = relationship(back_populates="input_file")


class AccessionRecord(Base):
    __tablename__ = "accession"

    id: Mapped[int] = mapped_column(primary_key=True)
    accession: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    sequence: Mapped[str | None] = mapped_column(Text, nullable=True)

    peptides: Mapped[list["PeptideRecord"]] = relationship(
        secondary=accession_peptide, back_populates="accessions"
    )


class PeptideRecord(Base):
    __tablename__ = "peptide"

    id: Mapped[int] = mapped_column(primary_key=True)
    sequence: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    accessions: Mapped[list[AccessionRecord]] = relationship(
        secondary=accession_peptide, back_populates="peptides"
    )
    psms: Mapped[list["PSMRecord"]] = relationship(back_populates="peptide")


class PSMRecord(Base):
    """A committed PSM; ``modifications`` holds a JSON list."""

    __tablename__ = "psm"

    id: Mapped[int] = mapped_column(primary_key=True)
    peptide_id: Mapped[int] = mapped_column(
        ForeignKey("peptide.id", ondelete="CASCADE"), nullable=False
    )
    input_file_id: Mapped[int] = mapped_column(
        ForeignKey("input_file.id", ondelete="CASCADE"), nullable=False
    )
    charge: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mass_to_charge: Mapped[float] = mapped_column(Float, nullable=False)
    delta_mass: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    retention_time: Mapped[float | None] = mapped_column(Float, nullable=True)
    sequence: Mapped[str] = mapped_column(Text, nullable=False)
    missed_cleavages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    source_id: Mapped[str | None] = mapped_column(Text, nullable=True)
    spectrum_title: Mapped[str | None] = mapped_column(Text, nullable=True)
    modifications: Mapped[str | None] = mapped_column(Text, nullable=True)

    peptide: Mapped[PeptideRecord] = relationship(back_populates="psms")
    input_file: Mapped[InputFileRecord] = relationship(back_populates="psms")
