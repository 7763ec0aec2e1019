from .connectivity import ConnectionMap
from .groups import Group, GroupGraph
from .keys import IdentificationKeySettings, identification_key, peptide_string_id
from .models import Accession, InputFile, Modification, Peptide, PeptideSpectrumMatch
from .registry import IdentityRegistry

__all__ = [
    "Accession",
    "ConnectionMap",
    "Group",
    "GroupGraph",
    "IdentificationKeySettings",
    "IdentityRegistry",
    "InputFile",
    "Modification",
    "Peptide",
    "PeptideSpectrumMatch",
    "identification_key",
    "peptide_string_id",
]
