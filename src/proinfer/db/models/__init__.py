# Models package: identity/connectivity tables and the stored group graph
from .base import Base, make_timestamp_mixin
from .engine import initialize_db, sqlite_engine
from .groups import GroupRecord, group_accession, group_child, group_peptide
from .identity import (
    AccessionRecord,
    InputFileRecord,
    PeptideRecord,
    PSMRecord,
    accession_peptide,
)

__all__ = [
    "Base",
    "make_timestamp_mixin",
    "AccessionRecord",
    "InputFileRecord",
    "PeptideRecord",
    "PSMRecord",
    "GroupRecord",
    "accession_peptide",
    "group_accession",
    "group_child",
    "group_peptide",
    "sqlite_engine",
    "initialize_db",
]
