from .base import Filter, FilterLevel, ScoreFilter, ScoreFilterFamily, SimpleFilter, item_level
from .comparator import FilterComparator
from .factory import (
    FilterParseResult,
    apply_filters,
    available_comparators,
    build_filter,
    filter_to_string,
    get_filter_type,
    parse_filter_expression,
    parse_filter_expressions,
    satisfies_filter_list,
)
from .registered import RegisteredFilter, get_registered_filter, registered_filters
from .types import FilterType

__all__ = [
    "Filter",
    "FilterComparator",
    "FilterLevel",
    "FilterParseResult",
    "FilterType",
    "RegisteredFilter",
    "ScoreFilter",
    "ScoreFilterFamily",
    "SimpleFilter",
    "apply_filters",
    "available_comparators",
    "build_filter",
    "filter_to_string",
    "get_filter_type",
    "get_registered_filter",
    "item_level",
    "parse_filter_expression",
    "parse_filter_expressions",
    "registered_filters",
    "satisfies_filter_list",
]
