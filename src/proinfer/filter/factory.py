"""Construction, parsing and application of filters.

Filters are built from a short name, a comparator and a raw value, or parsed
from a one-line definition such as ``"pepscore_myengine <= 0.01"``. The
definition may be negated with a leading ``!`` on the short name or the
comparator, or with the word ``not``::

    charge_filter >= 2
    !psm_decoy_filter == true
    nr_peptides_per_protein_filter not < 2
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, TypeVar

from proinfer.errors import (
    FilterError,
    InvalidValueError,
    MalformedExpressionError,
    MissingComparatorError,
    UnknownFilterError,
)

from .base import Filter, ScoreFilter, ScoreFilterFamily, parse_rank
from .comparator import TOKENS, FilterComparator
from .registered import get_registered_filter
from .types import FilterType

T = TypeVar("T")


def get_filter_type(short_name: str | None) -> FilterType | None:
    """Return the value type of the filter named ``short_name``, if any."""

    if not short_name:
        return None
    family = ScoreFilterFamily.match(short_name)
    if family is not None:
        if len(short_name) == len(family.prefix):
            return None
        return FilterType.numerical
    registered = get_registered_filter(short_name)
    return None if registered is None else registered.filter_type


def available_comparators(short_name: str | None) -> list[FilterComparator]:
    filter_type = get_filter_type(short_name)
    if filter_type is None:
        return []
    return list(filter_type.comparators)


def build_filter(
    short_name: str,
    comparator: "str | FilterComparator | None",
    raw_value: Any,
    negate: bool = False,
) -> Filter:
    """Build a filter instance.

    Raises
    ------
    MissingComparatorError
        If no comparator was given, or it is not valid for the filter.
    UnknownFilterError
        If ``short_name`` names no built-in filter and no score filter.
    InvalidValueError
        If ``raw_value`` cannot be parsed for the filter's value type, or is
        no integer for a ``psmtop_`` filter.
    """

    resolved = FilterComparator.resolve(comparator)
    if resolved is None:
        raise MissingComparatorError()

    filter_type = get_filter_type(short_name)
    if filter_type is None:
        raise UnknownFilterError(f"unknown filter '{short_name}'")
    if resolved not in filter_type.comparators:
        raise MissingComparatorError(
            f"please select a comparator valid for '{short_name}', "
            f"'{resolved.token}' is not one of "
            + ", ".join(c.token for c in filter_type.comparators)
        )

    value = filter_type.parse(raw_value, resolved)
    if resolved in (FilterComparator.regex, FilterComparator.regex_only):
        try:
            re.compile(value)
        except re.error as exc:
            raise InvalidValueError(f"please enter a valid regular expression: {exc}") from None

    family = ScoreFilterFamily.match(short_name)
    if family is ScoreFilterFamily.psm_top:
        value = parse_rank(value)
    if family is not None:
        return ScoreFilter(family, short_name[len(family.prefix):], resolved, value, negate)
    return get_registered_filter(short_name).new_instance(resolved, value, negate)


def _strip_negation(token: str) -> tuple[str, bool]:
    if token.startswith("!") and token not in TOKENS and len(token) > 1:
        return token[1:], True
    return token, False


def parse_filter_expression(text: str) -> Filter:
    """Parse a one-line filter definition ``<short name> <comparator> <value>``.

    Raises
    ------
    MalformedExpressionError
        If fewer than three parameters remain after removing negation markers.
    FilterError
        Any error of :func:`build_filter`.
    """

    tokens = (text or "").split()
    negate = False

    if tokens and tokens[0].lower() == "not":
        negate = True
        tokens = tokens[1:]
    if tokens:
        tokens[0], negated = _strip_negation(tokens[0])
        negate = negate or negated
    if len(tokens) > 1 and tokens[1].lower() == "not":
        negate = True
        tokens = tokens[:1] + tokens[2:]
    if len(tokens) > 1:
        tokens[1], negated = _strip_negation(tokens[1])
        negate = negate or negated

    if len(tokens) < 3:
        raise MalformedExpressionError(f"too few parameters in filter definition '{text}'")

    return build_filter(tokens[0], tokens[1], " ".join(tokens[2:]), negate)


def filter_to_string(filter: Filter) -> str:
    """Render a filter in the form accepted by :func:`parse_filter_expression`."""

    value = filter.value
    if isinstance(value, bool):
        value = "true" if value else "false"
    neg = " not" if filter.negate else ""
    return f"{filter.short_name}{neg} {filter.comparator.token} {value}"


@dataclass
class FilterParseResult:
    """Filters parsed from a batch of definitions, with a message per failure."""

    filters: list[Filter] = field(default_factory=list)
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_filter_expressions(texts: Iterable[str]) -> FilterParseResult:
    """Parse every definition; failing ones are reported, not raised."""

    result = FilterParseResult()
    for text in texts:
        try:
            result.filters.append(parse_filter_expression(text))
        except FilterError as exc:
            result.errors[text] = exc.message
    return result


def satisfies_filter_list(item: Any, file_id: int, filters: Sequence[Filter] | None) -> bool:
    """Whether ``item`` satisfies every filter of its own level.

    Filters of another level than the item are skipped, so one list can be
    applied to PSMs, peptides and proteins alike. An empty list is always
    satisfied.

    ``file_id`` 0 evaluates over all input files. Any other id restricts the
    file list filters and the PSM score and rank filters to the PSMs of that
    file.
    """

    if not filters:
        return True
    return all(f.satisfies(item, file_id) for f in filters if f.supports(item))


def apply_filters(items: Iterable[T], filters: Sequence[Filter] | None, file_id: int = 0) -> list[T]:
    if items is None:
        return []
    if not filters:
        return list(items)
    return [item for item in items if satisfies_filter_list(item, file_id, filters)]
