"""Protein inference from multi-engine peptide identifications."""

__version__ = "0.1.0"
