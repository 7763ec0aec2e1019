"""Exceptions raised by the registry, the filter engine and report assembly."""
from __future__ import annotations


class ProInferError(Exception):
    """Base class of all proinfer errors."""

    def __init__(self, message: str = "") -> None:
        self.message = message
        super().__init__(self.message)


class DuplicateIdentityError(ProInferError, ValueError):
    """A PSM with the same id was already committed into the registry."""


class UnknownEntityError(ProInferError, LookupError):
    """An id or natural key does not refer to a registered entity."""


class RegistrySealedError(ProInferError, RuntimeError):
    """The registry was mutated after its registration phase ended."""

    def __init__(self, message: str = "the registry is sealed, no further registration allowed") -> None:
        super().__init__(message)


class FilterError(ProInferError, ValueError):
    """A filter could not be constructed."""


class UnknownFilterError(FilterError):
    """The short name resolves to no built-in or parametric filter."""


class MissingComparatorError(FilterError):
    """No comparator given, or the comparator is not valid for the filter."""

    def __init__(self, message: str = "please select a comparator") -> None:
        super().__init__(message)


class InvalidValueError(FilterError):
    """The raw value cannot be parsed into the filter's value type."""


class MalformedExpressionError(FilterError):
    """A textual filter definition has too few parameters."""


class ReconciliationError(ProInferError, LookupError):
    """A PSM could not be reconciled with the canonical PSM sets."""


class MissingPSMSetError(ReconciliationError):
    """No canonical PSM set exists for a PSM's identification key."""


class MissingReportPSMError(ReconciliationError):
    """The canonical PSM set holds no report wrapper for the PSM."""


class MalformedGroupGraphError(ProInferError, RuntimeError):
    """The subset relation between groups contains a cycle."""


__all__ = [
    "ProInferError",
    "DuplicateIdentityError",
    "UnknownEntityError",
    "RegistrySealedError",
    "FilterError",
    "UnknownFilterError",
    "MissingComparatorError",
    "InvalidValueError",
    "MalformedExpressionError",
    "ReconciliationError",
    "MissingPSMSetError",
    "MissingReportPSMError",
    "MalformedGroupGraphError",
]
