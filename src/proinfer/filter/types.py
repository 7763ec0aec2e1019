"""Value types of filters and how raw input is parsed for them."""

from __future__ import annotations

import math
from enum import Enum

from proinfer.errors import InvalidValueError

from .comparator import FilterComparator

_NUMERICAL = (
    FilterComparator.less,
    FilterComparator.less_equal,
    FilterComparator.equal,
    FilterComparator.not_equal,
    FilterComparator.greater_equal,
    FilterComparator.greater,
)

_TRUE = {"true", "yes", "1"}
_FALSE = {"false", "no", "0"}


class FilterType(Enum):
    numerical = _NUMERICAL
    bool = (FilterComparator.equal, FilterComparator.not_equal)
    literal = (
        FilterComparator.equal,
        FilterComparator.not_equal,
        FilterComparator.contains,
        FilterComparator.regex,
    )
    literal_list = (
        FilterComparator.contains,
        FilterComparator.contains_only,
        FilterComparator.regex,
        FilterComparator.regex_only,
    )
    modification = (
        FilterComparator.has_any_modification,
        FilterComparator.has_no_modification,
        FilterComparator.has_description,
        FilterComparator.has_mass,
        FilterComparator.has_residue,
    )

    @property
    def comparators(self) -> tuple[FilterComparator, ...]:
        return self.value

    def parse(self, raw, comparator: FilterComparator | None = None):
        """Parse ``raw`` into a value of this type.

        Raises
        ------
        InvalidValueError
            If ``raw`` does not represent a value of this type.
        """

        if raw is None:
            raise InvalidValueError("please enter a value")

        if self is FilterType.numerical:
            if isinstance(raw, bool):
                raise InvalidValueError("please enter a numerical value")
            try:
                value = float(raw)
            except (TypeError, ValueError):
                raise InvalidValueError("please enter a numerical value") from None
            if math.isnan(value):
                raise InvalidValueError("please enter a numerical value")
            return value

        if self is FilterType.bool:
            if isinstance(raw, bool):
                return raw
            text = str(raw).strip().lower()
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
            raise InvalidValueError("please enter true or false")

        text = str(raw).strip()
        if self is FilterType.modification and comparator is FilterComparator.has_mass:
            try:
                return float(text)
            except ValueError:
                raise InvalidValueError("please enter a numerical value") from None
        return text
