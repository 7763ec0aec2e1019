from .peptide import ReportPeptide
from .protein import ReportProtein
from .psm import ReportPSM, ReportPSMSet

__all__ = ["ReportPSM", "ReportPSMSet", "ReportPeptide", "ReportProtein"]
