"""Comparators usable in filter definitions."""

from __future__ import annotations

from enum import Enum


class FilterComparator(Enum):
    """Comparator with its canonical token and accepted aliases."""

    less = ("<",)
    less_equal = ("<=",)
    equal = ("==", "=")
    not_equal = ("!=",)
    greater_equal = (">=",)
    greater = (">",)
    contains = ("contains",)
    contains_only = ("contains_only",)
    regex = ("regex",)
    regex_only = ("regex_only",)
    has_any_modification = ("has_any_modification",)
    has_no_modification = ("has_no_modification",)
    has_description = ("has_description",)
    has_mass = ("has_mass",)
    has_residue = ("has_residue",)

    @property
    def token(self) -> str:
        return self.value[0]

    @classmethod
    def by_name(cls, name: str | None) -> "FilterComparator | None":
        if name is None:
            return None
        return cls.__members__.get(name.strip().lower())

    @classmethod
    def by_token(cls, token: str | None) -> "FilterComparator | None":
        if token is None:
            return None
        token = token.strip().lower()
        for comparator in cls:
            if token in comparator.value:
                return comparator
        return None

    @classmethod
    def resolve(cls, text: "str | FilterComparator | None") -> "FilterComparator | None":
        """Look a comparator up by token first, then by name."""

        if isinstance(text, FilterComparator):
            return text
        return cls.by_token(text) or cls.by_name(text)


TOKENS = frozenset(token for comparator in FilterComparator for token in comparator.value)
