"""Tables of a stored group graph."""

from sqlalchemy import Column, ForeignKey, Integer, Table
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base

group_peptide = Table(
    "protein_group_peptide",
    Base.metadata,
    Column("group_id", ForeignKey("protein_group.id", ondelete="CASCADE"), primary_key=True),
    Column("peptide_id", ForeignKey("peptide.id", ondelete="CASCADE"), primary_key=True),
)

group_accession = Table(
    "protein_group_accession",
    Base.metadata,
    Column("group_id", ForeignKey("protein_group.id", ondelete="CASCADE"), primary_key=True),
    Column("accession_id", ForeignKey("accession.id", ondelete="CASCADE"), primary_key=True),
)

group_child = Table(
    "protein_group_child",
    Base.metadata,
    Column("parent_id", ForeignKey("protein_group.id", ondelete="CASCADE"), primary_key=True),
    Column("child_id", ForeignKey("protein_group.id", ondelete="CASCADE"), primary_key=True),
)


class GroupRecord(Base):
    __tablename__ = "protein_group"

    id: Mapped[int] = mapped_column(primary_key=True)
    tree_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
